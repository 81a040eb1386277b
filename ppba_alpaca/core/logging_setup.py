"""Console and daily log-file handlers for the gateway process."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(thread)d] %(levelname)s/%(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_dir: str | Path | None = None) -> Path | None:
    """Install handlers on the ``ppba_alpaca`` logger.

    Returns the log file path when ``log_dir`` is set. Calling this again
    replaces the handlers installed by the previous call.
    """
    logger = logging.getLogger("ppba_alpaca")
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir is None:
        return None

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"{datetime.now():%Y%m%d}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    return log_file
