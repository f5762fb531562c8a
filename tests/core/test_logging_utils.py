from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from director_bot.core.config import LogConfig
from director_bot.core.logging_utils import (
    format_event,
    log_event,
    setup_rotating_logger,
)


def test_format_event_serializes_fields_and_error() -> None:
    line = format_event(
        "dialogue.session.failed",
        exc=ValueError("bad"),
        session_id="m1",
        attempts=2,
        path=Path("/tmp/x"),
        tags=("a", "b"),
    )
    payload = json.loads(line)
    assert payload == {
        "event": "dialogue.session.failed",
        "session_id": "m1",
        "attempts": 2,
        "path": "/tmp/x",
        "tags": ["a", "b"],
        "error": "bad",
        "error_type": "ValueError",
    }


def test_log_event_respects_logger_level(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("test.logging_utils")
    with caplog.at_level(logging.WARNING, logger="test.logging_utils"):
        log_event(logger, logging.INFO, "ignored.event")
        log_event(logger, logging.WARNING, "kept.event", value=1)

    messages = [record.message for record in caplog.records]
    assert len(messages) == 1
    assert json.loads(messages[0]) == {"event": "kept.event", "value": 1}


def test_setup_rotating_logger_attaches_file_handler_once(tmp_path: Path) -> None:
    log_config = LogConfig(
        path=tmp_path / "logs" / "bot.log", max_bytes=1024, backup_count=2
    )
    logger = setup_rotating_logger("test.rotating.once", log_config)
    again = setup_rotating_logger("test.rotating.once", log_config)
    try:
        assert logger is again
        file_handlers = [
            handler
            for handler in logger.handlers
            if isinstance(handler, RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024
        assert file_handlers[0].backupCount == 2
        assert logger.propagate is False

        log_event(logger, logging.INFO, "discord.bot.starting", trigger="!director")
        for handler in logger.handlers:
            handler.flush()
        content = log_config.path.read_text(encoding="utf-8")
        assert '"event":"discord.bot.starting"' in content
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
