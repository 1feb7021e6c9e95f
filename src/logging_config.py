"""
Logger for locale synchronization runs.

Console output goes through tqdm so that log lines printed while locales are
being processed land above the progress bar instead of tearing it apart.
"""
import logging
import sys
import os
from logging import Handler
from typing import Optional

from tqdm import tqdm

LOGGER_NAME = "locale_sync"


class TqdmLoggingHandler(Handler):
    """Writes formatted records to stderr via ``tqdm.write``."""

    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception:
            self.handleError(record)


def setup_logger(log_level_str: str, log_file_path: Optional[str], log_to_console: bool) -> logging.Logger:
    """
    (Re)configure the ``locale_sync`` logger.

    Calling this again replaces the handlers of the previous call, so the CLI
    and the tests can reconfigure freely. Records never reach the root logger.
    With neither a file nor the console enabled the logger stays silent.

    Args:
        log_level_str: Level name such as 'INFO' or 'DEBUG'; unknown names fall back to INFO.
        log_file_path: Where to append the run log. Empty or None means no log file.
        log_to_console: Also echo records to stderr.

    Returns:
        The ``locale_sync`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level_str.upper(), logging.INFO))

    if logger.hasHandlers():
        logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = TqdmLoggingHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
