"""Minimal synchronous event dispatcher for the send lifecycle.

Transports dispatch a :class:`MessageEvent` right before a message is handed
to the provider. Listeners can inspect the message or swap the envelope,
e.g. to redirect all mail to a sandbox address in staging.
"""

from collections import defaultdict
from collections.abc import Callable
from typing import Any, TypeVar

from mandrill_transport.domain.models import Envelope, Message
from mandrill_transport.infrastructure.logging.config import get_logger


logger = get_logger(__name__)

EventT = TypeVar("EventT")


class MessageEvent:
    """Dispatched before a message is sent.

    Attributes:
        message: The message about to be sent (immutable)
        envelope: Envelope that will be used; listeners may replace it
    """

    def __init__(self, message: Message, envelope: Envelope) -> None:
        self.message = message
        self.envelope = envelope


class EventDispatcher:
    """Registry of listeners keyed by event type.

    Listeners for an event type run in registration order. Exceptions raised
    by a listener propagate to the caller of :meth:`dispatch` and abort the
    send.
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def add_listener(self, event_type: type[EventT], listener: Callable[[EventT], None]) -> None:
        """Register a listener for an event type.

        Args:
            event_type: Class of the events to listen to
            listener: Callable invoked with the event instance
        """
        self._listeners[event_type].append(listener)
        logger.debug("event_listener_added", event_type=event_type.__name__)

    def remove_listener(self, event_type: type[EventT], listener: Callable[[EventT], None]) -> None:
        """Unregister a listener. Unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def has_listeners(self, event_type: type | None = None) -> bool:
        """Check whether any listener is registered (for a type, or at all)."""
        if event_type is None:
            return any(self._listeners.values())
        return bool(self._listeners.get(event_type))

    def dispatch(self, event: EventT) -> EventT:
        """Call every listener registered for the event's type.

        Args:
            event: Event instance passed to each listener

        Returns:
            The same event, possibly modified by listeners
        """
        for listener in list(self._listeners.get(type(event), [])):
            listener(event)
        return event
