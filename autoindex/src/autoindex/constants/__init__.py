"""Constants module for autoindex.

This module contains all constant values and enumerations used throughout
the package. It has no dependencies on other autoindex modules.

Organization:
    - engine: Capability tiers, index methods and engine limits
    - schema: Field types and schema-change kinds
"""

from autoindex.constants.engine import (
    INDEX_NAME_SUFFIX,
    MAX_COLLECTION_NAME_LENGTH,
    MAX_IDENTIFIER_BYTES,
    MODERN_MIN_VERSION,
    SERVER_VERSION_QUERY,
    CapabilityTier,
    IndexMethod,
)
from autoindex.constants.schema import (
    BRIN_SUPPORTED_TYPES,
    FieldType,
    SchemaChangeKind,
)

__all__ = [
    # Engine
    "CapabilityTier",
    "IndexMethod",
    "SERVER_VERSION_QUERY",
    "MODERN_MIN_VERSION",
    "MAX_IDENTIFIER_BYTES",
    "MAX_COLLECTION_NAME_LENGTH",
    "INDEX_NAME_SUFFIX",
    # Schema
    "FieldType",
    "SchemaChangeKind",
    "BRIN_SUPPORTED_TYPES",
]
