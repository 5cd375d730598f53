"""
Diagnostic logging tests.
"""

from __future__ import annotations

import io
import logging
from types import SimpleNamespace

import orjson
import pytest
import structlog

import sdhook.hook as hook_module
from sdhook.config import LogFormat, LoggingSettings, LogLevel
from sdhook.logging import (
    add_logger_name,
    configure_logging,
    event_logger_name,
    get_logger,
    is_internal_logger,
    orjson_dumps,
)


@pytest.fixture
def stream():
    yield io.StringIO()
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_json_output(self, stream) -> None:
        configure_logging(level="DEBUG", fmt="json", stream=stream)
        get_logger("sdhook.test").warning("delivery_failed", code="DELIVERY_FAILED")

        payload = orjson.loads(stream.getvalue().splitlines()[-1])
        assert payload["event"] == "delivery_failed"
        assert payload["level"] == "warning"
        assert payload["logger"] == "sdhook.test"
        assert payload["code"] == "DELIVERY_FAILED"
        assert "timestamp" in payload

    def test_level_filtering(self, stream) -> None:
        configure_logging(level="ERROR", fmt="json", stream=stream)
        get_logger("sdhook.test").warning("ignored")
        assert stream.getvalue() == ""

    def test_console_output(self, stream) -> None:
        configure_logging(level="INFO", fmt="console", stream=stream)
        get_logger("sdhook.test").info("hook_closed", drained=True)
        assert "hook_closed" in stream.getvalue()

    def test_defaults_from_settings(self, stream, monkeypatch) -> None:
        configured = SimpleNamespace(logging=LoggingSettings(level=LogLevel.INFO, format=LogFormat.JSON))
        monkeypatch.setattr("sdhook.logging.core.settings", configured)

        configure_logging(stream=stream)
        get_logger("sdhook.test").info("hook_configured")
        assert orjson.loads(stream.getvalue())["event"] == "hook_configured"

    def test_stdlib_logger_name(self, caplog) -> None:
        structlog.configure(
            processors=[structlog.processors.KeyValueRenderer()],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )
        try:
            with caplog.at_level(logging.WARNING, logger="sdhook"):
                get_logger("sdhook.test").warning("event_dropped")
        finally:
            structlog.reset_defaults()

        (record,) = [r for r in caplog.records if r.name == "sdhook.test"]
        assert "event_dropped" in record.getMessage()

    def test_module_loggers_follow_later_configuration(self, stream) -> None:
        configure_logging(level="WARNING", fmt="json", stream=stream)
        hook_module.logger.warning("event_dropped")
        assert orjson.loads(stream.getvalue())["logger"] == "sdhook.hook"


class TestHelpers:
    def test_internal_logger_names(self) -> None:
        assert is_internal_logger("sdhook")
        assert is_internal_logger("sdhook.hook")
        assert not is_internal_logger("sdhooks")
        assert not is_internal_logger("app")
        assert not is_internal_logger(None)

    def test_orjson_dumps(self) -> None:
        assert orjson_dumps({"a": 1}) == '{"a":1}'
        assert orjson_dumps({"a": object()}, default=lambda o: "obj") == '{"a":"obj"}'

    def test_add_logger_name(self) -> None:
        assert add_logger_name(None, "info", {"_name": "sdhook.hook"}) == {"logger": "sdhook.hook"}
        assert add_logger_name(None, "info", {}) == {"logger": "root"}

    def test_event_logger_name(self) -> None:
        assert event_logger_name({"_name": "sdhook.hook"}) == "sdhook.hook"
        assert event_logger_name({"logger": "app"}) == "app"
        assert event_logger_name({}) is None
