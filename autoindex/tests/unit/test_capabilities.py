"""Unit tests for engine capability detection."""

import pytest
from unittest.mock import Mock

from autoindex.common.exceptions import statement_execution_error
from autoindex.constants import SERVER_VERSION_QUERY, CapabilityTier
from autoindex.indexing.capabilities import (
    capabilities_from_version,
    classify_version,
    parse_server_version,
    probe,
)
from autoindex.protocols import ExecutionGateway


def _gateway(rows=None, side_effect=None) -> Mock:
    gateway = Mock(spec=ExecutionGateway)
    gateway.run_query.return_value = rows
    gateway.run_query.side_effect = side_effect
    return gateway


class TestVersionClassification:
    """Tier classification from version strings."""

    @pytest.mark.parametrize("version, tier", [
        ("9.4", CapabilityTier.LEGACY),
        ("9.4.2", CapabilityTier.LEGACY),
        ("9.5", CapabilityTier.MODERN),
        ("9.6", CapabilityTier.MODERN),
        ("10.0", CapabilityTier.MODERN),
        ("8.4.22", CapabilityTier.LEGACY),
        ("16.2 (Debian 16.2-1.pgdg120+2)", CapabilityTier.MODERN),
        ("17devel", CapabilityTier.LEGACY),
        ("10", CapabilityTier.LEGACY),
    ])
    def test_version_strings(self, version, tier):
        assert capabilities_from_version(version).tier == tier

    def test_trailing_components_are_ignored(self):
        assert parse_server_version("9.6.24") == (9, 6)

    def test_missing_minor_is_rejected(self):
        with pytest.raises(ValueError):
            parse_server_version("10")

    def test_classify_boundaries(self):
        assert classify_version(9, 4) == CapabilityTier.LEGACY
        assert classify_version(9, 5) == CapabilityTier.MODERN
        assert classify_version(10, 0) == CapabilityTier.MODERN

    @pytest.mark.parametrize("version", ["", "abc", "v9.6", ".5"])
    def test_malformed_versions_are_rejected_by_parser(self, version):
        with pytest.raises(ValueError):
            parse_server_version(version)

    @pytest.mark.parametrize("version", ["", "abc", "x.5", "10", "17devel"])
    def test_malformed_versions_resolve_to_legacy(self, version):
        capabilities = capabilities_from_version(version)
        assert capabilities.tier == CapabilityTier.LEGACY
        assert capabilities.version is None

    def test_capability_flags_follow_tier(self):
        modern = capabilities_from_version("9.5")
        legacy = capabilities_from_version("9.4")

        assert modern.supports_if_not_exists and modern.supports_brin
        assert not legacy.supports_if_not_exists and not legacy.supports_brin
        assert modern.version == (9, 5)


class TestProbe:
    """The probe runs one query and never raises."""

    def test_runs_version_query_once(self):
        gateway = _gateway(rows=[("9.6.3",)])

        capabilities = probe(gateway)

        gateway.run_query.assert_called_once_with(SERVER_VERSION_QUERY)
        gateway.run_statement.assert_not_called()
        assert capabilities.tier == CapabilityTier.MODERN
        assert capabilities.server_version == "9.6.3"

    def test_non_string_version_is_stringified(self):
        assert probe(_gateway(rows=[(10.1,)])).tier == CapabilityTier.MODERN

    def test_legacy_engine(self):
        assert probe(_gateway(rows=[("9.4.26",)])).tier == CapabilityTier.LEGACY

    def test_bare_major_version_resolves_to_legacy(self):
        capabilities = probe(_gateway(rows=[("10",)]))

        assert capabilities.tier == CapabilityTier.LEGACY
        assert capabilities.server_version == "10"

    def test_query_failure_resolves_to_legacy(self):
        gateway = _gateway(side_effect=statement_execution_error(SERVER_VERSION_QUERY, RuntimeError("boom")))

        capabilities = probe(gateway)

        assert capabilities.tier == CapabilityTier.LEGACY
        assert capabilities.server_version is None

    def test_unexpected_exception_resolves_to_legacy(self):
        assert probe(_gateway(side_effect=RuntimeError("driver exploded"))).tier == CapabilityTier.LEGACY

    @pytest.mark.parametrize("rows", [None, [], [()], [(None,)], [("",)], [("not a version",)]])
    def test_empty_or_malformed_results_resolve_to_legacy(self, rows):
        assert probe(_gateway(rows=rows)).tier == CapabilityTier.LEGACY

    def test_result_of_unexpected_shape_resolves_to_legacy(self):
        assert probe(_gateway(rows=[5])).tier == CapabilityTier.LEGACY

    def test_capabilities_are_immutable(self):
        capabilities = probe(_gateway(rows=[("9.6",)]))

        with pytest.raises(Exception):
            capabilities.tier = CapabilityTier.LEGACY
