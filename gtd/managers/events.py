"""
Event system for the GTD agent.

The domain store publishes a change event after every reload so that a
presentation layer can re-render from the refreshed in-memory state.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events in the GTD agent."""
    TASKS_CHANGED = "tasks.changed"
    PROJECTS_CHANGED = "projects.changed"
    CONTEXTS_CHANGED = "contexts.changed"
    REFERENCES_CHANGED = "references.changed"
    ADVICE_RECORDED = "advice.recorded"


@dataclass
class Event:
    """Base event class."""
    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class StoreEvent(Event):
    """Event for a reloaded collection."""
    collection: str = ""
    count: int = 0
    record_id: Optional[str] = None


class EventListener(ABC):
    """Base class for event listeners."""

    @abstractmethod
    def handle(self, event: Event) -> None:
        """Handle an event.

        Args:
            event: The event to handle.
        """
        pass

    @property
    @abstractmethod
    def subscribed_events(self) -> List[EventType]:
        """Return list of event types this listener subscribes to."""
        pass


class EventBus:
    """
    Central event bus for publishing and subscribing to events.

    Singleton pattern for global event access; a TaskStore may also be given
    its own bus.
    """

    _instance: Optional['EventBus'] = None

    def __init__(self) -> None:
        self._listeners: Dict[EventType, List[EventListener]] = {}

    @classmethod
    def default(cls) -> 'EventBus':
        """Get the shared instance, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def subscribe(self, listener: EventListener) -> None:
        """Subscribe a listener to events.

        Args:
            listener: The listener to subscribe.
        """
        for event_type in listener.subscribed_events:
            self._listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        """Unsubscribe a listener from all events.

        Args:
            listener: The listener to unsubscribe.
        """
        for listeners in self._listeners.values():
            if listener in listeners:
                listeners.remove(listener)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed listeners.

        A failing listener is logged and does not stop the others.

        Args:
            event: The event to publish.
        """
        for listener in list(self._listeners.get(event.type, [])):
            try:
                listener.handle(event)
            except Exception as e:
                logger.error(f"Listener {listener.__class__.__name__} failed: {e}")

    def clear(self) -> None:
        """Clear all listeners (useful for testing)."""
        self._listeners.clear()


class LoggingListener(EventListener):
    """Logs every store change at DEBUG level."""

    def handle(self, event: Event) -> None:
        if isinstance(event, StoreEvent):
            logger.debug(f"{event.type.value}: {event.collection} now holds {event.count} record(s)")
        else:
            logger.debug(f"{event.type.value}")

    @property
    def subscribed_events(self) -> List[EventType]:
        return list(EventType)


# Convenience functions for global event bus access
def get_event_bus() -> EventBus:
    """Get the global event bus instance."""
    return EventBus.default()

