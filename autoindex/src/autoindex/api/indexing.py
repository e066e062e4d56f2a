from typing import Optional

from autoindex.events.bus import SchemaEventBus
from autoindex.indexing.capabilities import probe
from autoindex.indexing.reactor import SchemaChangeReactor
from autoindex.logging import get_logger
from autoindex.protocols.gateway import ExecutionGateway
from autoindex.settings import get_settings
from autoindex.settings.main import _Settings

logger = get_logger(__name__)


def create_reactor(
    gateway: Optional[ExecutionGateway] = None,
    settings: Optional[_Settings] = None,
) -> SchemaChangeReactor:
    """Probe the engine once and build a reactor bound to its capabilities.

    Args:
        gateway: Execution gateway; a PostgresSQLEngine built from
            ``settings.engine`` when omitted.
        settings: Settings override, the process-wide settings when omitted.
    """
    settings = settings or get_settings()
    if gateway is None:
        from autoindex.compute import create_gateway
        gateway = create_gateway(settings.engine)

    capabilities = probe(gateway)
    return SchemaChangeReactor(
        gateway,
        capabilities,
        time_column=settings.project.time_column,
    )


def install_auto_indexer(
    bus: SchemaEventBus,
    gateway: Optional[ExecutionGateway] = None,
    settings: Optional[_Settings] = None,
) -> Optional[SchemaChangeReactor]:
    """Subscribe a schema-change reactor to ``bus`` if automatic indexing is enabled.

    Returns:
        The installed reactor, or None when AUTO_INDEX_COLUMNS_ENABLED is off.
        Nothing touches the engine in that case.
    """
    settings = settings or get_settings()
    if not settings.features.check_feature("auto_index_columns", raise_on_disabled=False):
        logger.info("Automatic column indexing is disabled; reactor not installed")
        return None

    reactor = create_reactor(gateway, settings)
    bus.subscribe(reactor.on_schema_evolution)
    logger.info(
        "Installed automatic column indexer",
        extra={"tier": reactor.tier.value, "time_column": reactor.time_column},
    )
    return reactor
