"""SQL execution engines implementing the execution gateway protocol."""

from autoindex.compute.engines.postgres import PostgresSQLEngine, is_connection_failure

__all__ = [
    "PostgresSQLEngine",
    "is_connection_failure",
]
