# tests/conftest.py

"""Shared pytest fixtures for all espresso_picker tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from espresso_picker.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path) -> Generator[None, None, None]:
    """Point the on-disk cache at a per-test temp dir."""
    with patch.object(Settings, "DATA_DIR", tmp_path / "data"):
        yield
