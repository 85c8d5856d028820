"""
Logging setup for the eventdesk backend.

Handlers go on the ``eventdesk`` package logger rather than the root, so
uvicorn's own loggers keep their formatting. Records still propagate,
which lets pytest's ``caplog`` see them.
"""

import logging
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "eventdesk"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, fmt: str = LOG_FORMAT) -> logging.Logger:
    """Configure and return the ``eventdesk`` logger.

    Handlers are attached on the first call only; later calls (one per
    ``create_app`` in tests) just update the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=fmt or LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    return logger
