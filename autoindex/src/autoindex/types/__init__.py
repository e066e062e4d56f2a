from autoindex.types.base import AutoIndexBaseModel
from autoindex.types.engine import EngineCapabilities
from autoindex.types.index import (
    FieldIndexResult,
    IndexOutcome,
    IndexSpecification,
    ProvisioningReport,
)
from autoindex.types.schema import (
    CollectionCreated,
    CollectionFieldsAdded,
    SchemaEvolution,
    SchemaEvolutionEvent,
    SchemaField,
    parse_schema_event,
)

__all__ = [
    "AutoIndexBaseModel",
    "EngineCapabilities",
    "FieldIndexResult",
    "IndexOutcome",
    "IndexSpecification",
    "ProvisioningReport",
    "CollectionCreated",
    "CollectionFieldsAdded",
    "SchemaEvolution",
    "SchemaEvolutionEvent",
    "SchemaField",
    "parse_schema_event",
]
