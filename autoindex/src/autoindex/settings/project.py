from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from .base import AutoIndexBaseSettings


class ProjectSettings(AutoIndexBaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_prefix='PROJECT_'
    )

    time_column: str = Field(
        default="_time",
        description="Designated event-time column of every collection. "
                   "On engines that support it this column gets a block-range index."
    )

    @field_validator("time_column")
    @classmethod
    def validate_time_column(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("time_column must not be empty")
        return v
