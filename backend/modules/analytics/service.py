"""
Event sink implementations.

- NullEventSink: default when no analytics backend is configured
- LoggingEventSink: writes events to a standard library logger
- InMemoryEventSink: keeps everything in lists (tests, demos)
- CompositeEventSink: fans out to several sinks
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .interfaces import IEventSink
from .models import EventRecord, EventSeverity

logger = logging.getLogger(__name__)


_SEVERITY_LEVELS = {
    EventSeverity.INFO: logging.INFO,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.SEVERE: logging.ERROR,
}


def format_parameters(parameters: Optional[dict[str, Any]]) -> str:
    """Render parameters as sorted key=value pairs for log lines."""
    if not parameters:
        return ""
    return " ".join(f"{key}={parameters[key]!r}" for key in sorted(parameters))


class NullEventSink(IEventSink):
    """Sink that drops everything."""

    def identify(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        pass

    def set_properties(self, properties: dict[str, Any], high_priority: bool = False) -> None:
        pass

    def track(
        self,
        name: str,
        parameters: Optional[dict[str, Any]] = None,
        severity: EventSeverity = EventSeverity.INFO,
    ) -> None:
        pass


class LoggingEventSink(IEventSink):
    """
    Sink that writes every call to a logger.

    Severity maps onto log levels: info -> INFO, warning -> WARNING,
    severe -> ERROR.
    """

    def __init__(self, logger_name: str = "authsync.events"):
        self._logger = logging.getLogger(logger_name)

    def identify(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        self._logger.info(
            "identify user_id=%s name=%s email=%s", user_id, name or "-", email or "-"
        )

    def set_properties(self, properties: dict[str, Any], high_priority: bool = False) -> None:
        self._logger.debug(
            "set_properties high_priority=%s %s", high_priority, format_parameters(properties)
        )

    def track(
        self,
        name: str,
        parameters: Optional[dict[str, Any]] = None,
        severity: EventSeverity = EventSeverity.INFO,
    ) -> None:
        level = _SEVERITY_LEVELS.get(EventSeverity(severity), logging.INFO)
        rendered = format_parameters(parameters)
        if rendered:
            self._logger.log(level, "%s %s", name, rendered)
        else:
            self._logger.log(level, "%s", name)


@dataclass
class IdentifyCall:
    """A recorded identify() call."""

    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class PropertiesCall:
    """A recorded set_properties() call."""

    properties: dict[str, Any]
    high_priority: bool = False


@dataclass
class InMemoryEventSink(IEventSink):
    """Sink that records every call for later inspection."""

    events: list[EventRecord] = field(default_factory=list)
    identities: list[IdentifyCall] = field(default_factory=list)
    properties: list[PropertiesCall] = field(default_factory=list)

    def identify(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        self.identities.append(IdentifyCall(user_id=user_id, name=name, email=email))

    def set_properties(self, properties: dict[str, Any], high_priority: bool = False) -> None:
        self.properties.append(
            PropertiesCall(properties=dict(properties), high_priority=high_priority)
        )

    def track(
        self,
        name: str,
        parameters: Optional[dict[str, Any]] = None,
        severity: EventSeverity = EventSeverity.INFO,
    ) -> None:
        self.events.append(
            EventRecord(
                name=name,
                parameters=dict(parameters) if parameters is not None else None,
                severity=severity,
            )
        )

    def names(self) -> list[str]:
        """Names of all tracked events, in order."""
        return [event.name for event in self.events]

    def clear(self) -> None:
        """Forget everything recorded so far."""
        self.events.clear()
        self.identities.clear()
        self.properties.clear()


class CompositeEventSink(IEventSink):
    """
    Sink that forwards every call to several sinks.

    A failing sink is logged and skipped; the remaining sinks still
    receive the call.
    """

    def __init__(self, sinks: list[IEventSink]):
        self._sinks = list(sinks)

    @property
    def sinks(self) -> list[IEventSink]:
        return list(self._sinks)

    def _forward(self, method: str, *args: Any, **kwargs: Any) -> None:
        for sink in self._sinks:
            try:
                getattr(sink, method)(*args, **kwargs)
            except Exception:
                logger.warning(
                    "Event sink %s failed in %s", type(sink).__name__, method, exc_info=True
                )

    def identify(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        self._forward("identify", user_id, name=name, email=email)

    def set_properties(self, properties: dict[str, Any], high_priority: bool = False) -> None:
        self._forward("set_properties", properties, high_priority=high_priority)

    def track(
        self,
        name: str,
        parameters: Optional[dict[str, Any]] = None,
        severity: EventSeverity = EventSeverity.INFO,
    ) -> None:
        self._forward("track", name, parameters=parameters, severity=severity)
