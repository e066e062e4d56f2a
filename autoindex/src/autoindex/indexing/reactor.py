from typing import Any, List, Mapping, Optional, Union

from autoindex.common.exceptions import AutoIndexError, ErrorCode, statement_execution_error
from autoindex.indexing.ddl import IndexDDLBuilder
from autoindex.indexing.policy import FailurePolicy
from autoindex.logging import get_logger, schema_context
from autoindex.monitoring.metrics import IndexingMetrics
from autoindex.protocols.gateway import ExecutionGateway
from autoindex.types.engine import EngineCapabilities
from autoindex.types.index import FieldIndexResult, IndexOutcome, ProvisioningReport
from autoindex.types.schema import SchemaEvolutionEvent, SchemaField, parse_schema_event
from autoindex.utils.decorators import traced

logger = get_logger(__name__)


class SchemaChangeReactor:
    """Creates a supporting index for every field a schema change introduces.

    Both notification kinds (collection created, fields added) are handled
    the same way: fields are processed one at a time, in notification order,
    each with its own ``CREATE INDEX`` statement run synchronously through the
    gateway. Per-field outcomes are collected into a ``ProvisioningReport``
    and the tier's ``FailurePolicy`` is applied over it.

    The capabilities are detected before construction and never change for
    the lifetime of the reactor.

    Example:
        >>> capabilities = probe(gateway)
        >>> reactor = SchemaChangeReactor(gateway, capabilities, time_column="_time")
        >>> bus.subscribe(reactor.on_schema_evolution)
    """

    def __init__(
        self,
        gateway: ExecutionGateway,
        capabilities: EngineCapabilities,
        time_column: Optional[str],
        builder: Optional[IndexDDLBuilder] = None,
        metrics: Optional[IndexingMetrics] = None,
    ):
        """Initialize the reactor.

        Args:
            gateway: Executes the rendered statements
            capabilities: Detected engine capabilities
            time_column: The project's designated event-time column
            builder: DDL builder, the default one when omitted
            metrics: Metrics sink, a new one when omitted
        """
        self.gateway = gateway
        self.capabilities = capabilities
        self.time_column = time_column
        self.builder = builder or IndexDDLBuilder()
        self.metrics = metrics or IndexingMetrics()
        self.policy = FailurePolicy(capabilities.tier)

    @property
    def tier(self):
        return self.capabilities.tier

    def _provision_field(self, event: SchemaEvolutionEvent, field: SchemaField) -> FieldIndexResult:
        try:
            statement = self.builder.build_index_ddl(
                self.tier, event.project, event.collection, field, self.time_column
            )
        except AutoIndexError as e:
            if e.error_code != ErrorCode.INVALID_IDENTIFIER:
                raise
            logger.error(
                "Rejected identifier while building index statement",
                extra={"field": field.name, "error": str(e)},
            )
            return FieldIndexResult(field=field, outcome=IndexOutcome.INVALID_IDENTIFIER, error=e)

        try:
            self.gateway.run_statement(statement)
        except Exception as e:
            error = e if isinstance(e, AutoIndexError) else statement_execution_error(statement, e)
            if error.error_code != ErrorCode.QUERY_EXECUTION_ERROR:
                # Only rejected statements are subject to the tier policy
                logger.error(
                    "Gateway failure while provisioning index",
                    extra={"field": field.name, "error_code": error.error_code.value, "error": str(error)},
                )
                raise
            return FieldIndexResult(
                field=field,
                outcome=IndexOutcome.EXECUTION_FAILED,
                statement=statement,
                error=error,
            )

        logger.info(
            "Provisioned index",
            extra={"field": field.name, "statement": statement},
        )
        return FieldIndexResult(field=field, outcome=IndexOutcome.CREATED, statement=statement)

    def provision(self, event: Union[SchemaEvolutionEvent, Mapping[str, Any]]) -> ProvisioningReport:
        """Attempt an index for each field of a notification.

        Processing stops early only when the failure policy says so; fields
        after that point are reported as skipped. Rejected statements and
        invalid names are recorded, not raised; any other gateway failure
        (connection or configuration) propagates immediately.

        Args:
            event: Notification or its dictionary payload

        Returns:
            ProvisioningReport with one result per attempted field
        """
        event = parse_schema_event(event)
        results: List[FieldIndexResult] = []
        skipped: List[SchemaField] = []

        with schema_context(event.project, event.collection):
            for position, field in enumerate(event.fields):
                result = self._provision_field(event, field)
                results.append(result)
                self.metrics.record_result(result, self.tier.value)

                if not self.policy.should_continue(result):
                    skipped = list(event.fields[position + 1:])
                    logger.warning(
                        "Stopped provisioning indexes after failure",
                        extra={
                            "field": field.name,
                            "outcome": result.outcome.value,
                            "skipped_fields": [f.name for f in skipped],
                        },
                    )
                    break

        report = ProvisioningReport(
            project=event.project,
            collection=event.collection,
            kind=event.change_kind,
            tier=self.tier,
            results=tuple(results),
            skipped_fields=tuple(skipped),
        )
        self.metrics.record_report(report)
        return report

    @traced(
        span_name="autoindex.reactor.on_schema_evolution",
        attribute_getter=lambda self, event: {
            "autoindex.tier": self.tier.value,
            "autoindex.project": getattr(event, "project", None),
            "autoindex.collection": getattr(event, "collection", None),
        },
    )
    def on_schema_evolution(self, event: Union[SchemaEvolutionEvent, Mapping[str, Any]]) -> None:
        """Handle a schema-evolution notification.

        Raises:
            AutoIndexError: Per the tier's failure policy; execution failures
                on legacy engines are logged and swallowed
        """
        report = self.provision(event)
        self.policy.resolve(report)
