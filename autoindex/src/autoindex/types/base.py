"""Base model class for all autoindex models with serialization support."""

from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class AutoIndexBaseModel(BaseModel):
    """Base model for all autoindex value objects.

    Models are frozen: notifications, capabilities and reports are values
    that are built once and shared without copying.
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to a JSON-safe dictionary.

        Enums are rendered as their values and exceptions as strings.
        """
        return self.model_dump(mode="json", exclude_none=True)
