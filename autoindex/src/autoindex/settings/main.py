from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .base import AutoIndexBaseSettings
from .engine import EngineSettings
from .features import FeatureSettings
from .project import ProjectSettings


class _Settings(AutoIndexBaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    log_level: str = Field(
        default="INFO",
        description="Base log level passed to setup_logging()"
    )
    features: FeatureSettings = Field(
        default_factory=FeatureSettings,
        description="Feature flags configuration"
    )
    project: ProjectSettings = Field(
        default_factory=ProjectSettings,
        description="Project-wide schema conventions"
    )
    engine: EngineSettings = Field(
        default_factory=EngineSettings,
        description="Relational engine connection configuration"
    )

    @property
    def auto_index_enabled(self) -> bool:
        return self.features.check_feature("auto_index_columns", raise_on_disabled=False)


# Singleton instance
_settings: Optional[_Settings] = None


def get_settings(force_reload: bool = False) -> _Settings:
    """Return the process-wide settings, loading them on first use.

    Args:
        force_reload: Re-read the environment and ``.env`` even if settings
            were already loaded.
    """
    global _settings

    if _settings is None or force_reload:
        _settings = _Settings()

    return _settings


def _reload_settings() -> _Settings:
    """Force reload of settings. Primarily for tests."""
    global _settings
    _settings = None
    return get_settings(force_reload=True)
