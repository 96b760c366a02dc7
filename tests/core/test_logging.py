from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from timed_quiz.core import logging as core_logging


def _close(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def _read_json_lines(path: Path) -> list[dict]:
    return [
        json.loads(line)
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]


def test_configure_logger_writes_json(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "timed_quiz.test_json",
        log_dir=tmp_path / "logs",
        filename="test.log",
    )

    logger.info("hello world", extra={"event": "unit", "value": 3})

    class _Helper:
        def __repr__(self):
            return "helper"

    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception(
            "with error",
            extra={
                "path": tmp_path,
                "nested": {"items": [Path("a"), 1]},
                "obj": _Helper(),
            },
        )
    for handler in logger.handlers:
        handler.flush()

    entries = _read_json_lines(log_path)
    assert log_path == tmp_path / "logs" / "test.log"
    assert entries[0]["message"] == "hello world"
    assert entries[0]["level"] == "INFO"
    assert entries[0]["logger"] == "timed_quiz.test_json"
    assert entries[0]["extra"] == {"event": "unit", "value": 3}

    last = entries[-1]
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["path"] == str(tmp_path)
    assert last["extra"]["nested"]["items"] == ["a", 1]
    assert last["extra"]["obj"] == "helper"

    _close(logger)


def test_level_filters_file_output(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "timed_quiz.test_level",
        log_dir=tmp_path,
        level="warning",
        filename="level.log",
    )

    logger.info("skipped")
    logger.warning("kept")
    for handler in logger.handlers:
        handler.flush()

    messages = [entry["message"] for entry in _read_json_lines(log_path)]
    assert messages == ["kept"]
    _close(logger)


def test_default_filename_uses_last_name_part(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "timed_quiz.quiz_test", log_dir=tmp_path
    )
    assert log_path.name == "quiz_test.log"
    assert logger.propagate is False
    _close(logger)


def test_console_handler_toggle(tmp_path):
    name = "timed_quiz.test_toggle"

    def console_handlers(logger: logging.Logger) -> list[logging.Handler]:
        return [
            handler
            for handler in logger.handlers
            if getattr(handler, "_timed_quiz_console", False)
        ]

    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="toggle.log"
    )
    assert len(console_handlers(logger)) == 1

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="toggle.log"
    )
    assert len(console_handlers(logger)) == 1
    assert len(logger.handlers) == 2

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=False, filename="toggle.log"
    )
    assert not console_handlers(logger)
    _close(logger)


def test_fallback_directory_when_blocked(tmp_path, monkeypatch):
    target = tmp_path / "blocked"
    fallback = tmp_path / "fallback"
    original_mkdir = Path.mkdir

    def fake_mkdir(self, *args, **kwargs):
        if self == target:
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", fake_mkdir)
    monkeypatch.setattr(core_logging, "_fallback_dir", lambda: fallback)

    logger, log_path = core_logging.configure_logger(
        "timed_quiz.test_blocked", log_dir=target, filename="blocked.log"
    )

    assert log_path.parent == fallback
    assert log_path.exists()
    _close(logger)


def test_rotating_handler_fallback(tmp_path, monkeypatch):
    calls = {"count": 0}
    fallback = tmp_path / "rotate-fallback"
    original_handler = core_logging.RotatingFileHandler

    def fake_handler(path, *args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 1:
            raise PermissionError("denied")
        return original_handler(path, *args, **kwargs)

    monkeypatch.setattr(core_logging, "RotatingFileHandler", fake_handler)
    monkeypatch.setattr(core_logging, "_fallback_dir", lambda: fallback)

    logger, log_path = core_logging.configure_logger(
        "timed_quiz.test_rotate",
        log_dir=tmp_path / "primary",
        filename="rotate.log",
    )

    assert log_path.parent == fallback
    assert calls["count"] == 2
    _close(logger)


@pytest.mark.parametrize(
    "level, expected",
    [("debug", logging.DEBUG), (" ERROR ", logging.ERROR), ("bogus", logging.INFO)],
)
def test_level_number(level, expected):
    assert core_logging._level_number(level) == expected
