"""Protocol definitions for the collaborators autoindex depends on."""

from autoindex.protocols.gateway import ExecutionGateway

__all__ = [
    "ExecutionGateway",
]
