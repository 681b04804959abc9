"""Tests for the logging service."""

import json
import logging
import os
from collections.abc import Iterator
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest

from game_hub.services.logging import ERROR_LOG_FILE_NAME, LOG_FILE_NAME, LoggingService, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_development_console_is_human_readable() -> None:
    with patch.dict(os.environ, {"ENVIRONMENT": "development"}):
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            service = LoggingService(log_level="INFO")
            service.configure()
            service.get_logger("test").info("games loaded", count=2)
            output = mock_stdout.getvalue()

    assert "games loaded" in output
    assert not output.strip().startswith("{")


def test_file_logging_writes_json(tmp_path: Path) -> None:
    with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
        service = setup_logging(log_level="INFO", log_dir=tmp_path, tui_mode=True)
        service.get_logger("test").info("games loaded", count=2)
        service.get_logger("test").error("fetch failed", error="Network Error")

    for handler in logging.getLogger().handlers:
        handler.flush()

    app_lines = (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8").strip().splitlines()
    parsed = [json.loads(line) for line in app_lines]
    assert {entry["event"] for entry in parsed} >= {"games loaded", "fetch failed"}
    assert all("timestamp" in entry and "level" in entry for entry in parsed)

    error_lines = (tmp_path / ERROR_LOG_FILE_NAME).read_text(encoding="utf-8").strip().splitlines()
    assert [json.loads(line)["event"] for line in error_lines] == ["fetch failed"]


def test_tui_mode_disables_console_handler(tmp_path: Path) -> None:
    LoggingService(log_level="DEBUG", log_dir=tmp_path, tui_mode=True).configure()

    handlers = logging.getLogger().handlers
    assert handlers
    assert not any(type(h) is logging.StreamHandler for h in handlers)


def test_unknown_level_falls_back_to_info() -> None:
    assert LoggingService(log_level="chatty").numeric_level == logging.INFO


def test_stdlib_records_share_the_json_format(tmp_path: Path) -> None:
    with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
        _ = setup_logging(log_level="WARNING", log_dir=tmp_path, tui_mode=True)
        logging.getLogger("httpx").warning("connection pool exhausted")
        logging.getLogger("httpx").info("HTTP Request: GET /games")

    for handler in logging.getLogger().handlers:
        handler.flush()

    lines = (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8").strip().splitlines()
    entries = [json.loads(line) for line in lines]
    assert [entry["event"] for entry in entries] == ["connection pool exhausted"]
    assert entries[0]["logger"] == "httpx"
    assert entries[0]["level"] == "warning"
