from __future__ import annotations

import logging
import sys

from superstore_reports.logging_config import configure_logging


def test_configure_logging_adds_stream_handler() -> None:
    # Ensure configuring logging doesn't raise and attaches a StreamHandler
    configure_logging(None)
    root = logging.getLogger()
    assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)


def test_configure_logging_writes_file(tmp_path) -> None:
    log_path = tmp_path / "logs" / "reports.log"
    configure_logging(log_path)
    logging.getLogger("superstore_reports.test").info("hello file")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello file" in log_path.read_text(encoding="utf-8")


def test_configure_logging_streams_to_stderr() -> None:
    configure_logging(None)
    streams = [h.stream for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
    assert streams == [sys.stderr]
