from typing import Dict, List

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from autoindex.common.exceptions import feature_not_enabled_error
from .base import AutoIndexBaseSettings

_FLAG_SUFFIX = "_enabled"


class FeatureSettings(AutoIndexBaseSettings):
    """Feature flags, read from unprefixed ``<FEATURE>_ENABLED`` variables."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_prefix=''
    )

    auto_index_columns_enabled: bool = Field(
        default=False,
        description="Create a supporting index for every new collection field. "
                   "When disabled the schema-change reactor is never installed "
                   "and schema changes leave the engine's indexes untouched."
    )

    def get_feature_status(self) -> Dict[str, bool]:
        """Map each feature name (without the ``_enabled`` suffix) to its flag."""
        return {
            name[:-len(_FLAG_SUFFIX)]: getattr(self, name)
            for name in type(self).model_fields
            if name.endswith(_FLAG_SUFFIX)
        }

    def get_enabled_features(self) -> List[str]:
        return [name for name, enabled in self.get_feature_status().items() if enabled]

    def check_feature(self, feature_name: str, raise_on_disabled: bool = True) -> bool:
        """Check a feature flag.

        Args:
            feature_name: Feature name without the ``_enabled`` suffix
            raise_on_disabled: Raise instead of returning False

        Raises:
            AutoIndexError: FEATURE_DISABLED if the flag is off and
                ``raise_on_disabled`` is set
            ValueError: If the feature is unknown

        Example:
            >>> if get_settings().features.check_feature('auto_index_columns', raise_on_disabled=False):
            ...     install_auto_indexer(bus)
        """
        status = self.get_feature_status()
        if feature_name not in status:
            raise ValueError(
                f"Unknown feature '{feature_name}'. "
                f"Available features: {', '.join(sorted(status))}"
            )

        if not status[feature_name] and raise_on_disabled:
            raise feature_not_enabled_error(
                feature_name,
                f"Set {feature_name.upper()}{_FLAG_SUFFIX.upper()}=true to enable it."
            )
        return status[feature_name]
