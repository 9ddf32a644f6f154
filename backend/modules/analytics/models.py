"""
Analytics module data models.

Events are fire-and-forget records handed to an event sink; nothing in
this package persists them.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class EventSeverity(str, Enum):
    """How loudly an event should be surfaced by a sink."""

    INFO = "info"
    WARNING = "warning"
    SEVERE = "severe"


class EventRecord(BaseModel):
    """A single structured analytics event."""

    name: str = Field(..., description="Event name, e.g. Auth_SignIn_Start")
    parameters: Optional[dict[str, Any]] = Field(None, description="Event parameters")
    severity: EventSeverity = Field(default=EventSeverity.INFO)

    model_config = {"frozen": True}
