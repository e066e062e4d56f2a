"""Engine capability value."""

from typing import Optional, Tuple

from autoindex.constants.engine import CapabilityTier
from autoindex.types.base import AutoIndexBaseModel


class EngineCapabilities(AutoIndexBaseModel):
    """Capabilities detected once for the lifetime of a reactor.

    Attributes:
        tier: Detected capability tier
        server_version: Raw version string reported by the engine, if any
        version: Parsed ``(major, minor)`` pair, if the version could be parsed
    """

    tier: CapabilityTier
    server_version: Optional[str] = None
    version: Optional[Tuple[int, int]] = None

    @property
    def is_modern(self) -> bool:
        return self.tier == CapabilityTier.MODERN

    @property
    def supports_if_not_exists(self) -> bool:
        """Whether ``CREATE INDEX IF NOT EXISTS`` is accepted."""
        return self.is_modern

    @property
    def supports_brin(self) -> bool:
        """Whether the block-range index method is available."""
        return self.is_modern

    @classmethod
    def legacy(cls, server_version: Optional[str] = None) -> "EngineCapabilities":
        """Fail-safe capabilities used whenever detection fails."""
        return cls(tier=CapabilityTier.LEGACY, server_version=server_version)
