"""
Schema event bus - delivers schema-evolution notifications to subscribers.

Delivery is synchronous: ``publish`` returns only after every subscriber has
handled the notification, one subscriber at a time, in subscription order.
A subscriber error stops delivery and propagates to the publisher, which
decides whether the triggering schema change should be aborted.
"""

from typing import Any, Callable, List, Mapping, Union

from autoindex.logging import get_logger
from autoindex.types.schema import SchemaEvolutionEvent, parse_schema_event

logger = get_logger(__name__)

SchemaEventHandler = Callable[[SchemaEvolutionEvent], None]


class SchemaEventBus:
    """
    Synchronous publish/subscribe channel for schema-evolution notifications.
    """

    def __init__(self):
        self._handlers: List[SchemaEventHandler] = []

    @property
    def handlers(self) -> List[SchemaEventHandler]:
        return list(self._handlers)

    def subscribe(self, handler: SchemaEventHandler) -> SchemaEventHandler:
        """Register a handler. Subscribing the same handler twice is a no-op."""
        if handler not in self._handlers:
            self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: SchemaEventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, event: Union[SchemaEvolutionEvent, Mapping[str, Any]]) -> SchemaEvolutionEvent:
        """
        Deliver a notification to every subscriber.

        Args:
            event: Notification or its dictionary payload

        Returns:
            The parsed notification

        Raises:
            Whatever a subscriber raises; later subscribers are not called
        """
        event = parse_schema_event(event)

        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Schema event handler failed for {event.project}.{event.collection}",
                    extra={
                        "kind": event.change_kind.value,
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                        "error": str(e),
                    },
                )
                raise

        return event
