"""Index specification and provisioning result types."""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import Field

from autoindex.common.exceptions import AutoIndexError
from autoindex.constants.engine import CapabilityTier, IndexMethod
from autoindex.constants.schema import SchemaChangeKind
from autoindex.types.base import AutoIndexBaseModel
from autoindex.types.schema import SchemaField


class IndexSpecification(AutoIndexBaseModel):
    """Everything needed to render one ``CREATE INDEX`` statement.

    Identifier attributes hold the sanitized, unquoted names.
    """

    project: str
    collection: str
    field: SchemaField
    column: str
    index_name: str
    index_method: IndexMethod
    if_not_exists: bool


class IndexOutcome(str, Enum):
    """Outcome of provisioning the index for one field."""

    CREATED = "created"
    EXECUTION_FAILED = "execution_failed"
    INVALID_IDENTIFIER = "invalid_identifier"


class FieldIndexResult(AutoIndexBaseModel):
    """Per-field result recorded by the reactor.

    Attributes:
        field: The field the index was provisioned for
        outcome: What happened
        statement: Rendered DDL; None when the builder rejected the identifiers
        error: The failure, for any outcome other than CREATED
    """

    field: SchemaField
    outcome: IndexOutcome
    statement: Optional[str] = None
    error: Optional[AutoIndexError] = Field(default=None, exclude=True)

    @property
    def succeeded(self) -> bool:
        return self.outcome == IndexOutcome.CREATED


class ProvisioningReport(AutoIndexBaseModel):
    """Ordered per-field results for one schema-evolution notification."""

    project: str
    collection: str
    kind: SchemaChangeKind
    tier: CapabilityTier
    results: Tuple[FieldIndexResult, ...] = ()
    skipped_fields: Tuple[SchemaField, ...] = ()

    @property
    def attempted(self) -> List[SchemaField]:
        return [result.field for result in self.results]

    @property
    def succeeded(self) -> List[FieldIndexResult]:
        return [result for result in self.results if result.succeeded]

    @property
    def failed(self) -> List[FieldIndexResult]:
        return [result for result in self.results if not result.succeeded]

    def first_failure(self, outcome: IndexOutcome) -> Optional[FieldIndexResult]:
        return next((result for result in self.results if result.outcome == outcome), None)
