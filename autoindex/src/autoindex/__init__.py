from autoindex.__version__ import __version__

from autoindex.api import (
    create_reactor,
    install_auto_indexer,
)

from autoindex.common.exceptions import AutoIndexError, ErrorCode
from autoindex.constants import CapabilityTier, FieldType, IndexMethod
from autoindex.events import SchemaEventBus
from autoindex.indexing import (
    IndexDDLBuilder,
    SchemaChangeReactor,
    build_index_ddl,
    probe,
)
from autoindex.types import (
    CollectionCreated,
    CollectionFieldsAdded,
    EngineCapabilities,
    SchemaField,
)


__all__ = [
    "__version__",

    # api
    "create_reactor",
    "install_auto_indexer",

    # Core
    "probe",
    "build_index_ddl",
    "IndexDDLBuilder",
    "SchemaChangeReactor",
    "SchemaEventBus",

    # Types
    "CapabilityTier",
    "IndexMethod",
    "FieldType",
    "EngineCapabilities",
    "SchemaField",
    "CollectionCreated",
    "CollectionFieldsAdded",

    # Exceptions (public API)
    "AutoIndexError",
    "ErrorCode",
]
