"""Tests for logging bootstrap."""

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from gboxrun.rpc.bootstrap import SERVER_LOGGER_NAME, configure_logging


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    root = logging.getLogger("gboxrun")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_only_without_log_dir(self) -> None:
        assert configure_logging(None) is None

        handlers = logging.getLogger("gboxrun").handlers
        assert len(handlers) == 1
        assert not isinstance(handlers[0], RotatingFileHandler)

    def test_file_handler_writes_server_log(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"

        log_file = configure_logging(log_dir, level=logging.INFO)
        logging.getLogger(SERVER_LOGGER_NAME).info("Run-API-Server started")
        for handler in logging.getLogger("gboxrun").handlers:
            handler.flush()

        assert log_file == log_dir / "server.log"
        text = log_file.read_text(encoding="utf-8")
        assert "Server logging configured" in text
        assert "Run-API-Server started" in text

    def test_repeated_calls_do_not_duplicate_handlers(self, tmp_path: Path) -> None:
        configure_logging(tmp_path)
        configure_logging(tmp_path)

        assert len(logging.getLogger("gboxrun").handlers) == 2
