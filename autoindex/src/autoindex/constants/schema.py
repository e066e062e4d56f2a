"""Schema constants and enumerations.

Field kinds and notification kinds shared by the schema model and the
index builder.
"""

from enum import Enum
from typing import FrozenSet


class FieldType(str, Enum):
    """Semantic type of a collection field."""

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    DOUBLE = "double"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    ARRAY_STRING = "array_string"
    ARRAY_LONG = "array_long"
    ARRAY_DOUBLE = "array_double"
    MAP_STRING = "map_string"
    MAP_LONG = "map_long"
    MAP_DOUBLE = "map_double"


class SchemaChangeKind(str, Enum):
    """Kind of schema-evolution notification.

    Both kinds are handled identically; the kind is kept for logging and
    for parsing inbound payloads.
    """

    COLLECTION_CREATED = "collection_created"
    COLLECTION_FIELDS_ADDED = "collection_fields_added"


# Types a block-range index would suit. Not consulted by the builder: the
# index method is keyed on the event-time column only. Kept as the hook for a
# type-based policy.
BRIN_SUPPORTED_TYPES: FrozenSet[FieldType] = frozenset({
    FieldType.DATE,
    FieldType.DECIMAL,
    FieldType.DOUBLE,
    FieldType.INTEGER,
    FieldType.LONG,
    FieldType.STRING,
    FieldType.TIMESTAMP,
    FieldType.TIME,
})
