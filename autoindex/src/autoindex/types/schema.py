"""Schema-evolution notification types.

A notification is a tagged union of two variants sharing one payload
(project, collection, ordered fields). Handlers only ever look at the
shared payload; the ``kind`` tag exists for logging and for parsing
inbound dictionaries.
"""

from typing import Any, Literal, Mapping, Tuple, Union

from pydantic import Field, TypeAdapter
from typing_extensions import Annotated

from autoindex.constants.schema import FieldType, SchemaChangeKind
from autoindex.types.base import AutoIndexBaseModel


class SchemaField(AutoIndexBaseModel):
    """A single collection field.

    The name is validated by the index builder, not here, so that an
    unsafe name surfaces as an INVALID_IDENTIFIER error.
    """

    name: str
    type: FieldType


class SchemaEvolutionEvent(AutoIndexBaseModel):
    """Shared payload of every schema-evolution notification."""

    project: str
    collection: str
    fields: Tuple[SchemaField, ...] = Field(default_factory=tuple)

    @property
    def change_kind(self) -> SchemaChangeKind:
        return SchemaChangeKind(getattr(self, "kind"))

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.fields)


class CollectionCreated(SchemaEvolutionEvent):
    """A new collection was created with an initial set of fields."""

    kind: Literal["collection_created"] = "collection_created"


class CollectionFieldsAdded(SchemaEvolutionEvent):
    """New fields were added to an existing collection."""

    kind: Literal["collection_fields_added"] = "collection_fields_added"


SchemaEvolution = Annotated[
    Union[CollectionCreated, CollectionFieldsAdded],
    Field(discriminator="kind"),
]

_schema_evolution_adapter: TypeAdapter = TypeAdapter(SchemaEvolution)


def parse_schema_event(payload: Union[SchemaEvolutionEvent, Mapping[str, Any]]) -> SchemaEvolutionEvent:
    """Parse an inbound notification into its variant.

    Args:
        payload: A notification instance (returned as is) or a mapping with
            ``kind``, ``project``, ``collection`` and ``fields`` keys.

    Returns:
        CollectionCreated or CollectionFieldsAdded

    Raises:
        pydantic.ValidationError: If the payload does not match either variant
    """
    if isinstance(payload, SchemaEvolutionEvent):
        return payload
    return _schema_evolution_adapter.validate_python(dict(payload))
