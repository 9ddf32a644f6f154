"""
Analytics module interface.

Producers (the auth state manager) depend on IEventSink, never on a
concrete sink. Any analytics backend can be plugged in by implementing
these three methods.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import EventSeverity


@runtime_checkable
class IEventSink(Protocol):
    """
    Interface for receiving analytics events.

    Implementations should be cheap and non-blocking: they are called
    synchronously from the code paths being observed.
    """

    def identify(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> None:
        """
        Associate subsequent events with a user.

        Args:
            user_id: Stable user ID
            name: Optional display name
            email: Optional email address
        """
        ...

    def set_properties(self, properties: dict[str, Any], high_priority: bool = False) -> None:
        """
        Attach properties to the identified user.

        Args:
            properties: Flat mapping of property names to values
            high_priority: Whether the backend should favour these over others
        """
        ...

    def track(
        self,
        name: str,
        parameters: Optional[dict[str, Any]] = None,
        severity: EventSeverity = EventSeverity.INFO,
    ) -> None:
        """
        Record a single event.

        Args:
            name: Event name
            parameters: Optional event parameters
            severity: Event severity
        """
        ...
