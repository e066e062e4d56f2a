from autoindex.events.bus import SchemaEventBus, SchemaEventHandler

__all__ = [
    "SchemaEventBus",
    "SchemaEventHandler",
]
