"""Engine capability constants and enumerations.

This module defines the capability tiers of the relational engine and the
index storage methods the DDL builder can emit.
"""

from enum import Enum
from typing import Tuple


class CapabilityTier(str, Enum):
    """Feature-support tier of the connected engine.

    Values:
        MODERN: Engine accepts ``CREATE INDEX IF NOT EXISTS`` and the
            block-range (BRIN) index method. PostgreSQL 9.5 and later.
        LEGACY: Engine rejects both. Also the fail-safe default whenever
            the version cannot be determined.
    """

    MODERN = "modern"
    LEGACY = "legacy"


class IndexMethod(str, Enum):
    """Index storage method rendered in the ``USING`` clause.

    Values:
        RANGE_COMPACT: Block-range index, compact and suited to naturally
            ordered columns such as the event-time column.
        BALANCED_TREE: General purpose B-tree index.
    """

    RANGE_COMPACT = "range-compact"
    BALANCED_TREE = "balanced-tree"

    @property
    def sql(self) -> str:
        """Keyword emitted in the ``USING`` clause."""
        return _INDEX_METHOD_SQL[self]


_INDEX_METHOD_SQL = {
    IndexMethod.RANGE_COMPACT: "BRIN",
    IndexMethod.BALANCED_TREE: "BTREE",
}

# Query used to read the server version, single row single column
SERVER_VERSION_QUERY = "SHOW server_version"

# BRIN and IF NOT EXISTS on CREATE INDEX both arrived in 9.5
MODERN_MIN_VERSION: Tuple[int, int] = (9, 5)

# NAMEDATALEN - 1; longer identifiers are silently truncated by the engine
MAX_IDENTIFIER_BYTES = 63

# Platform-wide limit on collection names
MAX_COLLECTION_NAME_LENGTH = 250

INDEX_NAME_SUFFIX = "auto_index"
