"""
Event bus for the Button Men engine.

Provides pub/sub for rules events. Each engine owns one bus; events are kept
in an in-memory history and broadcast to registered listeners.
"""

from typing import Callable, Dict, List, Optional
import logging

from .models import Event

logger = logging.getLogger(__name__)


class EventBus:
    """
    Event bus for publishing and subscribing to rules events.

    Implements pub/sub pattern where modules can subscribe to specific event
    types and get notified when those events occur.

    Attributes:
        listeners: Dict mapping event types to lists of callback functions
        history: Events published so far, oldest first
    """

    def __init__(self, history_limit: Optional[int] = 1000):
        """
        Initialize event bus.

        Args:
            history_limit: Number of events kept in history (None keeps all)
        """
        self.listeners: Dict[str, List[Callable[[Event], None]]] = {}
        self.history: List[Event] = []
        self.history_limit = history_limit

    def subscribe(self, event_type: str, callback: Callable[[Event], None]) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Type of event to listen for (e.g., 'attack.resolved')
            callback: Function to call when event occurs.
                     Must accept Event as parameter.

        Examples:
            >>> def on_attack(event: Event):
            ...     print(event.data['record'].attack_type)
            >>>
            >>> bus.subscribe('attack.resolved', on_attack)
        """
        if event_type not in self.listeners:
            self.listeners[event_type] = []

        if callback not in self.listeners[event_type]:
            self.listeners[event_type].append(callback)

    def unsubscribe(self, event_type: str, callback: Callable[[Event], None]) -> None:
        """
        Unsubscribe from events of a specific type.

        Args:
            event_type: Type of event
            callback: Callback function to remove
        """
        if event_type in self.listeners:
            if callback in self.listeners[event_type]:
                self.listeners[event_type].remove(callback)

    def publish(self, event: Event) -> None:
        """
        Record an event and broadcast it to all listeners for its type.

        A failing listener is logged and does not stop the others.

        Args:
            event: Event to publish
        """
        self.history.append(event)
        if self.history_limit is not None and len(self.history) > self.history_limit:
            del self.history[:len(self.history) - self.history_limit]

        for callback in list(self.listeners.get(event.event_type, [])):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Error in listener for {event.event_type}")

    def get_events(self, event_type: Optional[str] = None) -> List[Event]:
        """Published events, optionally of one type only."""
        if event_type:
            return [e for e in self.history if e.event_type == event_type]
        return list(self.history)

    def clear_listeners(self, event_type: str = None) -> None:
        """
        Clear listeners for a specific event type or all listeners.

        Args:
            event_type: Event type to clear listeners for.
                       If None, clears all listeners.
        """
        if event_type:
            if event_type in self.listeners:
                self.listeners[event_type] = []
        else:
            self.listeners = {}

    def get_listener_count(self, event_type: str = None) -> int:
        """
        Get the number of listeners for an event type.

        Args:
            event_type: Event type to count listeners for.
                       If None, returns total listener count across all types.

        Returns:
            Number of registered listeners
        """
        if event_type:
            return len(self.listeners.get(event_type, []))
        else:
            return sum(len(listeners) for listeners in self.listeners.values())
