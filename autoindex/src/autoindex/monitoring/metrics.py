"""Metrics for automatic index provisioning.

Counters are exported through the active OpenTelemetry meter provider; with
no provider configured they are no-ops.
"""

from typing import Dict

from autoindex.telemetry import get_meter
from autoindex.types.index import FieldIndexResult, ProvisioningReport


class IndexingMetrics:
    """OpenTelemetry counters for index provisioning.

    Attributes:
        meter: OpenTelemetry meter
        statement_counter: Index statements attempted, by tier and outcome
        failure_counter: Failed attempts, by tier and outcome
        skipped_counter: Fields never attempted because processing stopped
    """

    def __init__(self, meter=None):
        self.meter = meter or get_meter()
        self._setup_instruments()

    def _setup_instruments(self) -> None:
        self.statement_counter = self.meter.create_counter(
            "autoindex_statements_total",
            description="Total number of CREATE INDEX statements attempted",
            unit="statements"
        )
        self.failure_counter = self.meter.create_counter(
            "autoindex_failures_total",
            description="Total number of failed index provisioning attempts",
            unit="failures"
        )
        self.skipped_counter = self.meter.create_counter(
            "autoindex_fields_skipped_total",
            description="Fields not attempted after an earlier failure",
            unit="fields"
        )

    def record_result(self, result: FieldIndexResult, tier: str) -> None:
        attributes: Dict[str, str] = {"tier": tier, "outcome": result.outcome.value}
        self.statement_counter.add(1, attributes)
        if not result.succeeded:
            self.failure_counter.add(1, attributes)

    def record_report(self, report: ProvisioningReport) -> None:
        if report.skipped_fields:
            self.skipped_counter.add(len(report.skipped_fields), {"tier": report.tier.value})
