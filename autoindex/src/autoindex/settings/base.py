from pydantic_settings import BaseSettings, SettingsConfigDict


class AutoIndexBaseSettings(BaseSettings):
    """Shared configuration for every autoindex settings section.

    Values come from the environment first, then ``.env``, then the field
    defaults. Each section sets its own ``env_prefix``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    @classmethod
    def get_env_prefix(cls) -> str:
        """Environment variable prefix of this section, e.g. ``"ENGINE_"``."""
        return cls.model_config.get("env_prefix", "") or ""
