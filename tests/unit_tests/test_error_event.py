"""
Error event builder tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sdhook.error_event import build_error_event
from sdhook.levels import Level
from sdhook.normalize import normalize_fields
from sdhook.types import Caller, HttpRequest, LogEvent, NormalizedRecord, format_rfc3339


class TestFormatRfc3339:
    def test_utc_uses_z(self) -> None:
        value = datetime(2024, 5, 17, 8, 30, 15, 999999, tzinfo=timezone.utc)
        assert format_rfc3339(value) == "2024-05-17T08:30:15Z"

    def test_offset_is_kept(self) -> None:
        value = datetime(2024, 5, 17, 8, 30, 15, tzinfo=timezone(timedelta(hours=2)))
        assert format_rfc3339(value) == "2024-05-17T08:30:15+02:00"

    def test_naive_is_utc(self) -> None:
        assert format_rfc3339(datetime(2024, 1, 1)) == "2024-01-01T00:00:00Z"


class TestBuildErrorEvent:
    def test_basic_fields(self, make_event) -> None:
        event = make_event(Level.ERROR, "boom", user="alice", version="1.2.3")
        error_event = build_error_event("svc", event, normalize_fields(event.fields))

        assert error_event.event_time == "2024-05-17T08:30:15Z"
        assert error_event.message == "boom"
        assert error_event.service_context.service == "svc"
        assert error_event.service_context.version == "1.2.3"
        assert error_event.context.user == "alice"
        assert error_event.context.report_location is None
        assert error_event.context.http_request is None

    def test_missing_labels_are_empty(self, make_event) -> None:
        event = make_event(Level.FATAL, "down")
        error_event = build_error_event("svc", event, NormalizedRecord())
        assert error_event.service_context.version == ""
        assert error_event.context.user == ""

    def test_report_location_from_caller(self, make_event) -> None:
        event = make_event(Level.ERROR, "boom")
        event.caller = Caller(file="/app/orders.py", function="submit", line=42)
        location = build_error_event("svc", event, NormalizedRecord()).context.report_location
        assert location is not None
        assert (location.file_path, location.function_name, location.line_number) == ("/app/orders.py", "submit", 42)

    def test_report_location_from_caller_field(self) -> None:
        event = LogEvent(
            time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            level=Level.PANIC,
            message="boom",
            fields={"caller": Caller(file="a.py", function="f", line=7)},
        )
        location = build_error_event("svc", event, NormalizedRecord()).context.report_location
        assert location is not None
        assert location.line_number == 7

    def test_http_context(self, make_event) -> None:
        req = HttpRequest(
            request_method="PUT",
            request_url="https://example.com/x",
            referer="https://example.com/",
            remote_ip="10.0.0.1",
            user_agent="ua",
        )
        event = make_event(Level.ERROR, "boom")
        context = build_error_event("svc", event, NormalizedRecord(http_request=req)).context.http_request
        assert context is not None
        assert context.method == "PUT"
        assert context.url == "https://example.com/x"
        assert context.referrer == "https://example.com/"
        assert context.remote_ip == "10.0.0.1"
        assert context.user_agent == "ua"


class TestErrorEventToDict:
    def test_json_layout(self, make_event) -> None:
        event = make_event(Level.ERROR, "boom", user="alice")
        event.caller = Caller(file="a.py", function="f", line=3)
        record = NormalizedRecord(
            labels={"user": "alice"},
            http_request=HttpRequest(request_method="GET", request_url="http://h/"),
        )
        payload = build_error_event("svc", event, record).to_dict()
        assert payload == {
            "eventTime": "2024-05-17T08:30:15Z",
            "message": "boom",
            "serviceContext": {"service": "svc"},
            "context": {
                "user": "alice",
                "httpRequest": {"method": "GET", "url": "http://h/"},
                "reportLocation": {"filePath": "a.py", "functionName": "f", "lineNumber": 3},
            },
        }

    def test_empty_context_is_omitted(self, make_event) -> None:
        payload = build_error_event("svc", make_event(Level.ERROR, "boom"), NormalizedRecord()).to_dict()
        assert "context" not in payload
