from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOG_DIR_ENV = "GSHEET_PROCESSOR_LOG_DIR"

_LOGGER: logging.Logger | None = None


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the configured application logger.

    Always logs to stderr so stdout stays free for command output. A rotating
    ``gsheet_processor.log`` file is added when ``log_dir`` is given or
    ``GSHEET_PROCESSOR_LOG_DIR`` is set.
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    logger = logging.getLogger("gsheet_processor")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    fmt = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    target = log_dir if log_dir is not None else os.getenv(LOG_DIR_ENV)
    if target:
        base = Path(target)
        base.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            base / "gsheet_processor.log", maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    logger.addHandler(console)

    _LOGGER = logger
    return logger
