"""Engine capability detection.

The probe runs once per reactor, reads the server version and classifies the
engine into a capability tier. It never raises: any failure yields the legacy
tier, which only ever emits DDL every supported engine accepts.
"""

import re
from typing import Optional, Tuple

from autoindex.common.exceptions import probe_failure_error
from autoindex.constants.engine import MODERN_MIN_VERSION, SERVER_VERSION_QUERY, CapabilityTier
from autoindex.logging import get_logger
from autoindex.protocols.gateway import ExecutionGateway
from autoindex.types.engine import EngineCapabilities

logger = get_logger(__name__)

# Leading "major.minor"; anything after is ignored ("9.4.2", "14.2 (Debian 14.2-1)")
_VERSION_PATTERN = re.compile(r"^\s*(\d+)\.(\d+)")


def parse_server_version(version: str) -> Tuple[int, int]:
    """Parse the first two dot-separated components of a version string.

    Both components are required; a bare major version such as "10" is
    rejected.

    Args:
        version: Version string as reported by the engine

    Returns:
        ``(major, minor)``

    Raises:
        ValueError: If the string does not start with ``major.minor``
    """
    match = _VERSION_PATTERN.match(version or "")
    if match is None:
        raise ValueError(f"Unrecognized server version: {version!r}")
    major = int(match.group(1))
    return major, int(match.group(2))


def classify_version(major: int, minor: int) -> CapabilityTier:
    """Classify a ``major.minor`` version into a capability tier."""
    min_major, min_minor = MODERN_MIN_VERSION
    if major > min_major or (major == min_major and minor >= min_minor):
        return CapabilityTier.MODERN
    return CapabilityTier.LEGACY


def capabilities_from_version(version: str) -> EngineCapabilities:
    """Build capabilities from a version string, legacy if it cannot be parsed."""
    try:
        major, minor = parse_server_version(version)
    except ValueError as e:
        logger.warning(
            "Could not parse server version, assuming legacy engine",
            extra={"server_version": version, "error": str(e)},
        )
        return EngineCapabilities.legacy(server_version=version)

    return EngineCapabilities(
        tier=classify_version(major, minor),
        server_version=version,
        version=(major, minor),
    )


def _first_cell(rows) -> Optional[str]:
    if not rows:
        return None
    first_row = rows[0]
    if first_row is None or len(first_row) == 0 or first_row[0] is None:
        return None
    return str(first_row[0])


def probe(gateway: ExecutionGateway) -> EngineCapabilities:
    """Detect the capabilities of the engine behind ``gateway``.

    Runs a single version query. Query failures, empty results and
    unparsable versions all resolve to the legacy tier; nothing is raised.

    Args:
        gateway: Execution gateway connected to the engine

    Returns:
        EngineCapabilities for the lifetime of the caller
    """
    try:
        version = _first_cell(gateway.run_query(SERVER_VERSION_QUERY))
    except Exception as e:
        failure = probe_failure_error(SERVER_VERSION_QUERY, e)
        logger.warning(
            "Engine capability probe failed, assuming legacy engine",
            extra={"error_code": failure.error_code.value, "error": str(failure)},
        )
        return EngineCapabilities.legacy()

    if version is None:
        logger.warning("Engine returned no server version, assuming legacy engine")
        return EngineCapabilities.legacy()

    capabilities = capabilities_from_version(version)
    logger.info(
        "Detected engine capabilities",
        extra={"server_version": version, "tier": capabilities.tier.value},
    )
    return capabilities
