"""Settings module providing configuration management for autoindex.

Built on Pydantic Settings: type-safe values, validated on load, read from
environment variables and an optional ``.env`` file.

Architecture:
    1. Base Layer (base.py):
       - AutoIndexBaseSettings: shared model configuration

    2. Domain Settings:
       - features.py: Feature flags (AUTO_INDEX_COLUMNS_ENABLED)
       - project.py: Project conventions (PROJECT_TIME_COLUMN)
       - engine.py: Engine connection (ENGINE_URL, ENGINE_POOL_SIZE, ...)

    3. Main Aggregator (main.py):
       - get_settings(): Singleton factory function

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file
    3. Default Values in code (lowest priority)

Quick Start:
    >>> from autoindex.settings import get_settings
    >>> settings = get_settings()
    >>> settings.project.time_column
    '_time'
"""

from .main import _Settings, get_settings, _reload_settings
from .base import AutoIndexBaseSettings
from .engine import EngineSettings
from .features import FeatureSettings
from .project import ProjectSettings

__all__ = [
    "get_settings",
    "AutoIndexBaseSettings",
    "EngineSettings",
    "FeatureSettings",
    "ProjectSettings",
]
