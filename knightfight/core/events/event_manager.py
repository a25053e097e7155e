"""
Event bus for decoupled communication.

The combat core publishes notifications here instead of calling into
presentation, input or logging code. Events queue up during a tick and
are delivered in publish order when the MatchController calls
process_events() at the end of the tick, so a damage notification always
reaches subscribers before the defeat it caused.

The whole simulation runs on the tick callback, so the bus is not
thread-safe and holds no locks.
"""

from collections import defaultdict, deque
from typing import Callable, Optional

from .events import DebugMessage, EventType, GameEvent

EventSubscriber = Callable[[GameEvent], None]


class EventManager:
    """Queued publisher-subscriber bus for combat notifications."""

    def __init__(self):
        # Subscribers by event type, with a display name for error reports
        self._subscribers: dict[EventType, list[tuple[EventSubscriber, str]]] = defaultdict(list)
        self._event_queue: deque[tuple[GameEvent, str]] = deque()
        self.subscriber_errors = 0

    def subscribe(
        self,
        event_type: EventType,
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback function to handle events
            subscriber_name: Optional name used when the subscriber fails
        """
        name = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
        self._subscribers[event_type].append((subscriber, name))

    def unsubscribe(self, event_type: EventType, subscriber: EventSubscriber) -> bool:
        """Unsubscribe from events of a specific type.

        Returns:
            True if subscriber was found and removed
        """
        entries = self._subscribers.get(event_type, [])
        for index, (registered, _) in enumerate(entries):
            if registered == subscriber:
                del entries[index]
                return True
        return False

    def publish(self, event: GameEvent, source: Optional[str] = None) -> None:
        """Queue an event for delivery at the end of the tick.

        Args:
            event: The event to publish
            source: Optional source identifier for debugging
        """
        self._event_queue.append((event, source or "unknown"))

    def process_events(self) -> int:
        """Deliver every queued event in publish order.

        Events published by subscribers during delivery wait for the next
        call.

        Returns:
            Number of events processed
        """
        batch = list(self._event_queue)
        self._event_queue.clear()

        for event, source in batch:
            self._dispatch(event, source)
        return len(batch)

    def _dispatch(self, event: GameEvent, source: str) -> None:
        # Copy so subscribers may unsubscribe while being notified
        for subscriber, name in list(self._subscribers.get(event.event_type, [])):
            try:
                subscriber(event)
            except Exception as e:
                self.subscriber_errors += 1
                if event.event_type is EventType.DEBUG_MESSAGE:
                    continue
                self.publish(
                    DebugMessage(
                        tick=event.tick,
                        message=f"Subscriber {name} failed on {event.event_type.name} from {source}: {e}",
                        source="EventManager"
                    ),
                    source="EventManager"
                )

