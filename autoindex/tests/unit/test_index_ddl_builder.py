"""Unit tests for index naming and CREATE INDEX rendering."""

import itertools

import pytest

from autoindex.common.exceptions import AutoIndexError, ErrorCode
from autoindex.constants import MAX_IDENTIFIER_BYTES, CapabilityTier, FieldType, IndexMethod
from autoindex.indexing.ddl import IndexDDLBuilder, build_index_ddl
from autoindex.types import EngineCapabilities, SchemaField


@pytest.fixture
def builder():
    return IndexDDLBuilder()


def _field(name: str, field_type: FieldType = FieldType.STRING) -> SchemaField:
    return SchemaField(name=name, type=field_type)


class TestStatementShape:
    """Statements differ by tier and by whether the field is the time column."""

    def test_modern_time_column_uses_brin(self):
        statement = build_index_ddl(
            CapabilityTier.MODERN, "analytics", "pageview", _field("time", FieldType.TIMESTAMP), "time"
        )
        assert statement == (
            'CREATE INDEX IF NOT EXISTS "analytics_pageview_time_auto_index" '
            'ON "analytics"."pageview" USING BRIN("time")'
        )

    def test_modern_other_field_uses_btree(self):
        statement = build_index_ddl(
            CapabilityTier.MODERN, "analytics", "pageview", _field("user_id"), "time"
        )
        assert statement == (
            'CREATE INDEX IF NOT EXISTS "analytics_pageview_user_id_auto_index" '
            'ON "analytics"."pageview" USING BTREE("user_id")'
        )

    @pytest.mark.parametrize("field_name", ["time", "user_id", "_time"])
    def test_legacy_never_uses_if_not_exists_or_brin(self, field_name):
        statement = build_index_ddl(
            CapabilityTier.LEGACY, "analytics", "pageview", _field(field_name), "time"
        )
        assert "IF NOT EXISTS" not in statement
        assert "BRIN" not in statement
        assert statement.startswith(f'CREATE INDEX "analytics_pageview_{field_name}_auto_index" ')
        assert statement.endswith(f'USING BTREE("{field_name}")')

    def test_never_builds_concurrently(self, builder):
        for tier in CapabilityTier:
            statement = builder.build_index_ddl(tier, "p", "c", _field("time"), "time")
            assert "CONCURRENTLY" not in statement

    def test_field_type_does_not_select_method(self, builder):
        spec = builder.build_index_spec(
            CapabilityTier.MODERN, "p", "c", _field("created_at", FieldType.TIMESTAMP), "_time"
        )
        assert spec.index_method == IndexMethod.BALANCED_TREE

    def test_accepts_capabilities_value(self, builder):
        capabilities = EngineCapabilities(tier=CapabilityTier.MODERN, server_version="9.6")
        spec = builder.build_index_spec(capabilities, "p", "c", _field("_time"), "_time")

        assert spec.if_not_exists is True
        assert spec.index_method == IndexMethod.RANGE_COMPACT

    def test_identical_inputs_give_identical_statements(self, builder):
        args = (CapabilityTier.MODERN, "analytics", "pageview", _field("url"), "_time")
        assert builder.build_index_ddl(*args) == builder.build_index_ddl(*args)
        assert builder.build_index_ddl(*args) == IndexDDLBuilder().build_index_ddl(*args)

    def test_identifiers_are_lower_cased(self, builder):
        statement = builder.build_index_ddl(CapabilityTier.LEGACY, "Analytics", "PageView", _field("URL"), "_time")
        assert statement == (
            'CREATE INDEX "analytics_pageview_url_auto_index" '
            'ON "analytics"."pageview" USING BTREE("url")'
        )


class TestIndexNaming:
    """Index names are pure, distinct and within the engine's identifier limit."""

    def test_distinct_triples_give_distinct_names(self, builder):
        projects = ["web", "mobile"]
        collections = ["pageview", "purchase"]
        fields = ["url", "amount", "_time"]

        names = [
            builder.build_index_name(p, c, f)
            for p, c, f in itertools.product(projects, collections, fields)
        ]

        assert len(set(names)) == len(names)

    def test_short_names_follow_convention(self, builder):
        assert builder.build_index_name("web", "pageview", "url") == "web_pageview_url_auto_index"

    def test_case_variants_fold_to_one_name(self, builder):
        upper = builder.build_index_ddl(CapabilityTier.MODERN, "p", "c", _field("User"), "_time")
        lower = builder.build_index_ddl(CapabilityTier.MODERN, "p", "c", _field("user"), "_time")

        assert upper == lower
        assert '"p_c_user_auto_index"' in upper

    def test_long_names_are_shortened_with_digest(self, builder):
        collection = "c" * 80
        name = builder.build_index_name("web", collection, "url")

        assert len(name.encode("utf-8")) == MAX_IDENTIFIER_BYTES
        assert name.startswith("web_ccc")
        assert name == builder.build_index_name("web", collection, "url")

    def test_long_names_sharing_a_prefix_stay_distinct(self, builder):
        collection = "events_" + "x" * 70
        first = builder.build_index_name("web", collection, "country")
        second = builder.build_index_name("web", collection, "city")

        assert first != second
        assert len(first) <= MAX_IDENTIFIER_BYTES
        assert len(second) <= MAX_IDENTIFIER_BYTES


class TestIdentifierValidation:
    """Unsafe names are rejected with INVALID_IDENTIFIER, never rendered."""

    @pytest.mark.parametrize("project, collection, field_name", [
        ("analytics", 'pageview"; DROP TABLE users; --', "url"),
        ("analytics", "pageview", "url) WITH (fillfactor=10"),
        ("analytics; DROP SCHEMA x", "pageview", "url"),
        ("", "pageview", "url"),
        ("analytics", "", "url"),
        ("analytics", "pageview", ""),
        ("analytics", "page view", "url"),
        ("analytics", "1pageview", "url"),
        ("analytics", "page--view", "url"),
        ("analytics", "pageview", "naïve"),
    ])
    def test_unsafe_names_raise(self, builder, project, collection, field_name):
        with pytest.raises(AutoIndexError) as exc_info:
            builder.build_index_ddl(CapabilityTier.MODERN, project, collection, _field(field_name), "_time")

        assert exc_info.value.error_code == ErrorCode.INVALID_IDENTIFIER

    def test_error_details_name_the_identifier(self, builder):
        with pytest.raises(AutoIndexError) as exc_info:
            builder.validate_identifier("bad name", "collection")

        assert exc_info.value.details["identifier_type"] == "collection"
        assert exc_info.value.details["identifier"] == "bad name"

    def test_collection_length_limit(self, builder):
        assert builder.validate_identifier("c" * 250, "collection", 250) == "c" * 250
        with pytest.raises(AutoIndexError):
            builder.validate_identifier("c" * 251, "collection", 250)

    @pytest.mark.parametrize("identifier", ["_time", "user_id", "utm-source", "Event2"])
    def test_safe_names_pass(self, builder, identifier):
        assert builder.validate_identifier(identifier) == identifier.lower()
