# espresso_picker/storage/local_store.py

"""String-keyed persistent slots backed by files on disk."""

import logging
import re
from pathlib import Path

from espresso_picker.config.settings import Settings

logger = logging.getLogger("espresso_picker.storage")

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class LocalStore:
    """Durable local storage with one string value per key.

    Each key is stored as ``<data_dir>/<key>.json``. Writes go to a
    temporary file first and are renamed into place, so a reader
    never sees half a document. Failures surface as ``OSError``, or
    ``UnicodeDecodeError`` when a file is not valid UTF-8.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir: Path = data_dir or Settings.DATA_DIR
        logger.debug("LocalStore initialised, data_dir=%s", self.data_dir)

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get_item(self, key: str) -> str | None:
        """Return the stored string for *key*, or ``None`` if absent."""
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        """Replace the value stored under *key*."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def remove_item(self, key: str) -> None:
        """Delete the value stored under *key* (no-op when absent)."""
        path = self._path_for(key)
        path.unlink(missing_ok=True)
        logger.debug("Removed %s", path)
