"""
Analytics module.

Receives structured events from other modules and forwards them to an
analytics backend.

Public API:
- IEventSink: Interface every sink implements
- EventRecord, EventSeverity: Event data models
- NullEventSink, LoggingEventSink, InMemoryEventSink, CompositeEventSink
"""

from .interfaces import IEventSink
from .models import EventRecord, EventSeverity
from .service import (
    NullEventSink,
    LoggingEventSink,
    InMemoryEventSink,
    CompositeEventSink,
)

__all__ = [
    # Interface
    "IEventSink",
    # Models
    "EventRecord",
    "EventSeverity",
    # Sinks
    "NullEventSink",
    "LoggingEventSink",
    "InMemoryEventSink",
    "CompositeEventSink",
]
