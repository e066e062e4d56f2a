from .indexing import ( create_reactor, install_auto_indexer )

__all__ = [
    "create_reactor",
    "install_auto_indexer",
]
