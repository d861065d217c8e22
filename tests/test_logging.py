"""Tests for logging setup, formatters and context."""

import json
import logging

import pytest

from fixture_fetch.errors import IntegrityError
from fixture_fetch.logging.context import (
    asset_log_context,
    get_log_context,
    set_log_context,
)
from fixture_fetch.logging.formatters import ConsoleFormatter, JSONFormatter
from fixture_fetch.logging.setup import NOISY_LOGGERS, setup_logging
from fixture_fetch.logging.utilities import log_exception, log_with_context


def make_record(msg="Fetched a.bin", level=logging.INFO, **extra):
    record = logging.LogRecord("fixture_fetch.fetcher", level, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSetupLogging:
    def test_console_only_by_default(self):
        setup_logging(level="DEBUG")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ConsoleFormatter)
        assert root.handlers[0].level == logging.DEBUG

    def test_reinit_does_not_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_log_dir_adds_json_file(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path, run_id="r-test")

        logger.info("hello from test", extra={"asset": "a.bin"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        log_files = list(tmp_path.rglob("*.log"))
        assert len(log_files) == 1
        entries = [json.loads(line) for line in log_files[0].read_text().splitlines()]
        entry = next(e for e in entries if e["msg"] == "hello from test")
        assert entry["asset"] == "a.bin"
        assert entry["run_id"] == "r-test"
        assert entry["level"] == "INFO"

    def test_noisy_loggers_suppressed(self):
        setup_logging()
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="Unknown log level: chatty$"):
            setup_logging(level="chatty")


class TestContext:
    def test_asset_context_is_scoped(self):
        set_log_context(run_id="r-1")
        with asset_log_context("a.bin"):
            assert get_log_context() == {"asset": "a.bin", "run_id": "r-1"}
        assert get_log_context()["asset"] is None

    def test_console_formatter_includes_asset(self):
        with asset_log_context("images/logo.png"):
            line = ConsoleFormatter().format(make_record())
        assert "[images/logo.png]" in line
        assert line.endswith("Fetched a.bin")

    def test_json_formatter_extracts_extras(self):
        record = make_record(retry_count=2, delay_seconds=0.5, unrelated="x")
        entry = json.loads(JSONFormatter().format(record))

        assert entry["retry_count"] == 2
        assert entry["delay_seconds"] == 0.5
        assert "unrelated" not in entry


class TestUtilities:
    def test_log_with_context_drops_none(self, caplog):
        logger = logging.getLogger("fixture_fetch.test")
        with caplog.at_level(logging.INFO, logger="fixture_fetch.test"):
            log_with_context(logger, logging.INFO, "msg", asset="a.bin", http_status=None)

        record = caplog.records[-1]
        assert record.asset == "a.bin"
        assert not hasattr(record, "http_status")

    def test_log_exception_adds_category(self, caplog):
        logger = logging.getLogger("fixture_fetch.test")
        error = IntegrityError("mismatch", expected="a" * 64, actual="b" * 64)
        with caplog.at_level(logging.ERROR, logger="fixture_fetch.test"):
            log_exception(logger, error, "Fetch failed", include_traceback=False)

        record = caplog.records[-1]
        assert record.error_category == "permanent"
        assert "mismatch" in record.error_message
