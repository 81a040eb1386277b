from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ppba_alpaca.core.logging_setup import configure_logging


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger = logging.getLogger("ppba_alpaca")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_console_only_by_default() -> None:
    assert configure_logging("DEBUG") is None
    logger = logging.getLogger("ppba_alpaca")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_daily_log_file(tmp_path: Path) -> None:
    log_file = configure_logging("INFO", tmp_path / "logs")
    assert log_file is not None
    assert log_file.parent == tmp_path / "logs"
    assert log_file.name.endswith(".log") and len(log_file.stem) == 8

    logging.getLogger("ppba_alpaca.core.controller").info("Handshake succeeded")
    for handler in logging.getLogger("ppba_alpaca").handlers:
        handler.flush()
    content = log_file.read_text(encoding="utf-8")
    assert "INFO/ppba_alpaca.core.controller: Handshake succeeded" in content


def test_reconfiguring_replaces_handlers(tmp_path: Path) -> None:
    configure_logging("INFO", tmp_path)
    configure_logging("WARNING")
    logger = logging.getLogger("ppba_alpaca")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
