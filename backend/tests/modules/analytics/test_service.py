import logging

import pytest
from unittest.mock import MagicMock

from modules.analytics.interfaces import IEventSink
from modules.analytics.models import EventRecord, EventSeverity
from modules.analytics.service import (
    CompositeEventSink,
    InMemoryEventSink,
    LoggingEventSink,
    NullEventSink,
    format_parameters,
)


class TestFormatParameters:
    def test_empty(self):
        assert format_parameters(None) == ""
        assert format_parameters({}) == ""

    def test_sorted_pairs(self):
        """Parameters render sorted by key."""
        assert format_parameters({"b": 2, "a": "x"}) == "a='x' b=2"


class TestNullEventSink:
    def test_accepts_every_call(self):
        """NullEventSink silently accepts all calls."""
        sink = NullEventSink()
        sink.identify("user-123", name="Test", email="test@example.com")
        sink.set_properties({"plan": "free"}, high_priority=True)
        sink.track("Auth_SignIn_Start", {"sign_in_option": "apple"}, EventSeverity.SEVERE)

    def test_satisfies_interface(self):
        assert isinstance(NullEventSink(), IEventSink)


class TestLoggingEventSink:
    @pytest.mark.parametrize("severity,level", [
        (EventSeverity.INFO, logging.INFO),
        (EventSeverity.WARNING, logging.WARNING),
        (EventSeverity.SEVERE, logging.ERROR),
    ])
    def test_track_maps_severity(self, caplog, severity, level):
        """Severity should map onto the log level."""
        sink = LoggingEventSink("test.events")
        with caplog.at_level(logging.DEBUG, logger="test.events"):
            sink.track("Auth_SignIn_Fail", {"error_type": "ValueError"}, severity)

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.name == "test.events"
        assert "Auth_SignIn_Fail" in record.getMessage()
        assert "error_type='ValueError'" in record.getMessage()

    def test_track_without_parameters(self, caplog):
        sink = LoggingEventSink("test.events")
        with caplog.at_level(logging.INFO, logger="test.events"):
            sink.track("Auth_SignOut_Start")
        assert caplog.records[-1].getMessage() == "Auth_SignOut_Start"

    def test_identify(self, caplog):
        sink = LoggingEventSink("test.events")
        with caplog.at_level(logging.INFO, logger="test.events"):
            sink.identify("user-123", email="test@example.com")
        message = caplog.records[-1].getMessage()
        assert "user_id=user-123" in message
        assert "email=test@example.com" in message
        assert "name=-" in message

    def test_set_properties_logs_at_debug(self, caplog):
        sink = LoggingEventSink("test.events")
        with caplog.at_level(logging.DEBUG, logger="test.events"):
            sink.set_properties({"auth_uid": "user-123"}, high_priority=True)
        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert "high_priority=True" in record.getMessage()


class TestInMemoryEventSink:
    def test_records_calls(self):
        """Every call should be recorded in order."""
        sink = InMemoryEventSink()
        sink.identify("user-123", name="Test")
        sink.set_properties({"auth_uid": "user-123"}, high_priority=True)
        sink.track("Auth_SignIn_Start", {"sign_in_option": "apple"})
        sink.track("Auth_Listener_Empty", severity=EventSeverity.WARNING)

        assert sink.identities[0].user_id == "user-123"
        assert sink.identities[0].name == "Test"
        assert sink.properties[0].high_priority is True
        assert sink.names() == ["Auth_SignIn_Start", "Auth_Listener_Empty"]
        assert sink.events[1] == EventRecord(
            name="Auth_Listener_Empty", severity=EventSeverity.WARNING
        )

    def test_copies_parameters(self):
        """Later mutation of the caller's dict shouldn't change the record."""
        sink = InMemoryEventSink()
        params = {"email": "a@b.c"}
        sink.track("Auth_CreateUser_Start", params)
        params["email"] = "changed"
        assert sink.events[0].parameters == {"email": "a@b.c"}

    def test_clear(self):
        sink = InMemoryEventSink()
        sink.identify("user-123")
        sink.track("Auth_SignOut_Start")
        sink.clear()
        assert sink.events == []
        assert sink.identities == []
        assert sink.properties == []


class TestCompositeEventSink:
    def test_fans_out(self):
        """Each call reaches every sink."""
        first, second = InMemoryEventSink(), InMemoryEventSink()
        sink = CompositeEventSink([first, second])

        sink.identify("user-123")
        sink.track("Auth_SignOut_Start")

        assert first.names() == second.names() == ["Auth_SignOut_Start"]
        assert len(first.identities) == len(second.identities) == 1

    def test_failing_sink_does_not_block_others(self, caplog):
        """A raising sink is logged and skipped."""
        broken = MagicMock()
        broken.track.side_effect = RuntimeError("analytics down")
        healthy = InMemoryEventSink()
        sink = CompositeEventSink([broken, healthy])

        sink.track("Auth_SignOut_Start")

        assert healthy.names() == ["Auth_SignOut_Start"]
        assert "failed in track" in caplog.text

    def test_sinks_property_is_a_copy(self):
        inner = InMemoryEventSink()
        sink = CompositeEventSink([inner])
        sink.sinks.append(NullEventSink())
        assert sink.sinks == [inner]
