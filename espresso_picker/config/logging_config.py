# espresso_picker/config/logging_config.py

"""Per-run timestamped logging configuration for espresso_picker.

Each launch writes a dedicated log file inside ``logs/`` named after the
launch time (e.g. ``logs/run_20260214_153045.log``). Every
``espresso_picker.*`` logger routes through it, so cache fallbacks and
remote store failures that never reach the screen still end up on disk.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from espresso_picker.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(console: bool = True) -> Path:
    """Initialise the root ``espresso_picker`` logger for the current run.

    Args:
        console: Attach a WARNING-level stderr handler. The TUI turns
            this off so log lines do not tear the screen.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger("espresso_picker")
    root_logger.setLevel(logging.DEBUG)

    # Prevent duplicate handlers on repeated calls (e.g. tests)
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )
    root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(
            logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
        )
        root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
