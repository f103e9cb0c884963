"""
Event Bus Implementation (Infrastructure Layer).

Notifies in-process subscribers about published domain events.
"""
import asyncio
import logging
from typing import Callable, List

from core.domain.event_bus import EventBus
from core.domain.events.base import DomainEvent

logger = logging.getLogger(__name__)


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__qualname__", None) or getattr(handler, "__name__", repr(handler))


class InMemoryEventBus(EventBus):
    """
    In-Memory Event Bus Implementation.

    Features:
    - Notifies registered subscribers in registration order
    - Supports sync and async handlers
    - A failing subscriber is logged and never breaks the publisher

    Notification is a side effect of an operation that already succeeded,
    so subscriber errors are not propagated.
    """

    def __init__(self):
        self._subscribers: List[Callable[[DomainEvent], None]] = []

    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a single domain event.

        Args:
            event: Domain event to publish
        """
        logger.info(f"Publishing event: {event.event_type} (aggregate: {event.aggregate_id})")
        await self._notify_subscribers(event)

    async def publish_all(self, events: List[DomainEvent]) -> None:
        """
        Publish multiple domain events in order.

        Args:
            events: List of domain events to publish
        """
        if not events:
            return

        logger.info(f"Publishing {len(events)} events")
        for event in events:
            await self.publish(event)

    def subscribe(self, handler: Callable[[DomainEvent], None]) -> None:
        """
        Subscribe to all domain events.

        Args:
            handler: Callback function that receives events
        """
        if handler in self._subscribers:
            return
        self._subscribers.append(handler)
        logger.info(f"Registered event subscriber: {_handler_name(handler)}")

    def unsubscribe(self, handler: Callable[[DomainEvent], None]) -> None:
        """
        Unsubscribe from domain events.

        Args:
            handler: Callback function to remove
        """
        if handler in self._subscribers:
            self._subscribers.remove(handler)
            logger.info(f"Unregistered event subscriber: {_handler_name(handler)}")

    async def _notify_subscribers(self, event: DomainEvent) -> None:
        """Notify all subscribers about an event."""
        if not self._subscribers:
            return

        logger.debug(f"Notifying {len(self._subscribers)} subscribers about {event.event_type}")

        for subscriber in list(self._subscribers):
            try:
                if asyncio.iscoroutinefunction(subscriber):
                    await subscriber(event)
                else:
                    subscriber(event)
            except Exception as e:
                logger.error(f"Subscriber {_handler_name(subscriber)} failed: {e}", exc_info=True)
