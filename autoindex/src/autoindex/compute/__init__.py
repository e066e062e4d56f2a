"""Compute layer: concrete execution gateways for the relational engine."""

from typing import Optional

from autoindex.compute.engines import PostgresSQLEngine
from autoindex.settings.engine import EngineSettings


def create_gateway(settings: Optional[EngineSettings] = None) -> PostgresSQLEngine:
    """Build the default execution gateway from engine settings."""
    if settings is None:
        from autoindex.settings import get_settings
        settings = get_settings().engine
    return PostgresSQLEngine(settings)


__all__ = [
    "PostgresSQLEngine",
    "create_gateway",
]
