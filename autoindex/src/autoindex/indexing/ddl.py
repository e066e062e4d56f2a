import hashlib
import re
from typing import Optional, Union

from autoindex.common.exceptions import invalid_identifier_error
from autoindex.constants.engine import (
    INDEX_NAME_SUFFIX,
    MAX_COLLECTION_NAME_LENGTH,
    MAX_IDENTIFIER_BYTES,
    CapabilityTier,
    IndexMethod,
)
from autoindex.types.engine import EngineCapabilities
from autoindex.types.index import IndexSpecification
from autoindex.types.schema import SchemaField

_IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_\-]*$')

# Characters of the identifier alphabet that still form SQL comment tokens
_DANGEROUS_PATTERNS = (
    re.compile(r'--'),
)

_DEFAULT_MAX_IDENTIFIER_LENGTH = 128

_DIGEST_LENGTH = 8


class IndexDDLBuilder:
    """Renders ``CREATE INDEX`` statements for automatically indexed fields.

    The builder is pure: it validates identifiers, derives the index name
    and method, and renders one statement. It never executes anything.

    Security Principles:
        1. **Input Validation**: project, collection and field names are
           validated before use and rejected with INVALID_IDENTIFIER
        2. **Whitelist Approach**: only letters, digits, underscores and
           hyphens are allowed in identifiers
        3. **Quoting**: every identifier is emitted double-quoted
        4. **Length Limits**: index names never exceed the engine's
           identifier limit, so the engine never truncates them

    Naming:
        ``<project>_<collection>_<field>_auto_index``, lower-cased. Names
        longer than 63 bytes keep a prefix and get a short SHA-1 digest of
        the full name appended, so two long names cannot collapse into the
        same truncated identifier.

    Concurrency:
        Statements never use ``CONCURRENTLY``. A concurrent build cannot run
        alongside the ALTER TABLE that adds the field and is slower for the
        expected index sizes, so a brief write-blocking build is accepted.
    """

    def validate_identifier(
        self,
        identifier: str,
        identifier_type: str = "identifier",
        max_length: int = _DEFAULT_MAX_IDENTIFIER_LENGTH,
    ) -> str:
        """Validate an identifier and return its normalized form.

        Unquoted names are folded to lower case by the engine, and
        collections are created that way, so the normalized form is the
        lower-cased identifier.

        Args:
            identifier: The identifier to validate
            identifier_type: Kind of identifier for error messages
            max_length: Maximum accepted length

        Returns:
            Lower-cased identifier

        Raises:
            AutoIndexError: INVALID_IDENTIFIER if the identifier is unsafe
        """
        if not isinstance(identifier, str):
            raise invalid_identifier_error(identifier, identifier_type, "not a string")

        if not identifier:
            raise invalid_identifier_error(identifier, identifier_type, "empty name")

        if len(identifier) > max_length:
            raise invalid_identifier_error(
                identifier, identifier_type, f"longer than {max_length} characters"
            )

        if not _IDENTIFIER_PATTERN.match(identifier):
            raise invalid_identifier_error(
                identifier,
                identifier_type,
                "must start with a letter or underscore and contain only letters, digits, underscores or hyphens",
            )

        for pattern in _DANGEROUS_PATTERNS:
            if pattern.search(identifier):
                raise invalid_identifier_error(identifier, identifier_type, "contains a comment token")

        return identifier.lower()

    def quote_identifier(self, identifier: str) -> str:
        """Quote an already validated identifier."""
        return f'"{identifier}"'

    def build_index_name(self, project: str, collection: str, field_name: str) -> str:
        """Derive the index name for a ``(project, collection, field)`` triple.

        Args:
            project: Validated project name
            collection: Validated collection name
            field_name: Validated field name

        Returns:
            Unquoted index name, at most 63 bytes
        """
        name = f"{project}_{collection}_{field_name}_{INDEX_NAME_SUFFIX}"
        if len(name.encode("utf-8")) <= MAX_IDENTIFIER_BYTES:
            return name

        digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]
        prefix = name[:MAX_IDENTIFIER_BYTES - _DIGEST_LENGTH - 1]
        return f"{prefix}_{digest}"

    def choose_index_method(self, tier: CapabilityTier, field: SchemaField, time_column: str) -> IndexMethod:
        """Pick the index method for a field.

        Block-range indexes are used only for the event-time column and only
        on modern engines. The field's type is deliberately not consulted;
        ``BRIN_SUPPORTED_TYPES`` is the hook for a type-based policy.
        """
        if tier == CapabilityTier.MODERN and field.name == time_column:
            return IndexMethod.RANGE_COMPACT
        return IndexMethod.BALANCED_TREE

    def build_index_spec(
        self,
        tier: Union[CapabilityTier, EngineCapabilities],
        project: str,
        collection: str,
        field: SchemaField,
        time_column: Optional[str],
    ) -> IndexSpecification:
        """Validate inputs and derive the index specification.

        Raises:
            AutoIndexError: INVALID_IDENTIFIER if any name is unsafe
        """
        if isinstance(tier, EngineCapabilities):
            tier = tier.tier
        tier = CapabilityTier(tier)

        safe_project = self.validate_identifier(project, "project")
        safe_collection = self.validate_identifier(collection, "collection", MAX_COLLECTION_NAME_LENGTH)
        safe_column = self.validate_identifier(field.name, "field")

        return IndexSpecification(
            project=safe_project,
            collection=safe_collection,
            field=field,
            column=safe_column,
            index_name=self.build_index_name(safe_project, safe_collection, safe_column),
            index_method=self.choose_index_method(tier, field, time_column),
            if_not_exists=tier == CapabilityTier.MODERN,
        )

    def render(self, spec: IndexSpecification) -> str:
        """Render the ``CREATE INDEX`` statement for a specification.

        The ``IF NOT EXISTS`` clause is left out entirely when not
        supported; legacy engines reject it as a syntax error.
        """
        clause = "IF NOT EXISTS " if spec.if_not_exists else ""
        return (
            f"CREATE INDEX {clause}{self.quote_identifier(spec.index_name)} "
            f"ON {self.quote_identifier(spec.project)}.{self.quote_identifier(spec.collection)} "
            f"USING {spec.index_method.sql}({self.quote_identifier(spec.column)})"
        )

    def build_index_ddl(
        self,
        tier: Union[CapabilityTier, EngineCapabilities],
        project: str,
        collection: str,
        field: SchemaField,
        time_column: Optional[str],
    ) -> str:
        """Build the ``CREATE INDEX`` statement for one field.

        Args:
            tier: Capability tier of the engine
            project: Project (schema) name
            collection: Collection (table) name
            field: Field to index
            time_column: The project's designated event-time column

        Returns:
            A single SQL statement

        Raises:
            AutoIndexError: INVALID_IDENTIFIER if any name is unsafe
        """
        return self.render(self.build_index_spec(tier, project, collection, field, time_column))


_default_builder = IndexDDLBuilder()


def build_index_ddl(
    tier: Union[CapabilityTier, EngineCapabilities],
    project: str,
    collection: str,
    field: SchemaField,
    time_column: Optional[str],
) -> str:
    """Build the ``CREATE INDEX`` statement for one field with the default builder."""
    return _default_builder.build_index_ddl(tier, project, collection, field, time_column)
