"""Automatic schema-index provisioning.

Components, leaves first:
    - capabilities: one-off engine probe deriving the capability tier
    - ddl: identifier validation, index naming and CREATE INDEX rendering
    - policy: tier-dependent failure policy
    - reactor: handler for schema-evolution notifications
"""

from autoindex.indexing.capabilities import (
    capabilities_from_version,
    classify_version,
    parse_server_version,
    probe,
)
from autoindex.indexing.ddl import IndexDDLBuilder, build_index_ddl
from autoindex.indexing.policy import FailurePolicy
from autoindex.indexing.reactor import SchemaChangeReactor

__all__ = [
    "probe",
    "parse_server_version",
    "classify_version",
    "capabilities_from_version",
    "IndexDDLBuilder",
    "build_index_ddl",
    "FailurePolicy",
    "SchemaChangeReactor",
]
