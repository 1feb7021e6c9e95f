import json
import logging
import os

import pytest

from src.app_config import SyncConfig
from src.logging_config import LOGGER_NAME

REFERENCE_DOCUMENT = {"a": {"b": "X"}, "c": "Y"}


@pytest.fixture(autouse=True)
def quiet_locale_sync_logger():
    """Route the application logger through the root logger so caplog can see it."""
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_propagate = logger.propagate
    saved_level = logger.level
    logger.handlers.clear()
    logger.propagate = True
    yield
    logger.handlers[:] = saved_handlers
    logger.propagate = saved_propagate
    logger.setLevel(saved_level)


@pytest.fixture
def locales_dir(tmp_path):
    """A locale directory holding only the reference document."""
    directory = tmp_path / "locales"
    directory.mkdir()
    with open(directory / "en.json", "w", encoding="utf-8") as f:
        json.dump(REFERENCE_DOCUMENT, f, indent=2)
        f.write("\n")
    return directory


@pytest.fixture
def sync_config(locales_dir):
    return SyncConfig(
        locales_directory=str(locales_dir),
        use_color=False,
        show_progress=False
    )


@pytest.fixture
def write_locale(locales_dir):
    """Write a locale document and return its path."""
    def _write(file_name, document):
        path = os.path.join(str(locales_dir), file_name)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
            f.write("\n")
        return path
    return _write


@pytest.fixture
def read_locale(locales_dir):
    def _read(file_name):
        with open(os.path.join(str(locales_dir), file_name), "r", encoding="utf-8") as f:
            return json.load(f)
    return _read
