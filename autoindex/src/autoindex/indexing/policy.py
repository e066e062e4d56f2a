"""Tier-dependent failure policy.

Applied in two places: after each field (should processing go on?) and over
the finished report (what, if anything, is raised to the notification
source?).

    ================  ==========================  ==========================
    outcome           legacy tier                 modern tier
    ================  ==========================  ==========================
    execution failed  logged, next field          stop, re-raised
    invalid name      next field, raised at end   stop, raised
    ================  ==========================  ==========================

Legacy engines fail routinely on duplicate indexes because they cannot say
``IF NOT EXISTS``; on a modern engine a failure points at a real problem.
"""

from autoindex.constants.engine import CapabilityTier
from autoindex.logging import get_logger
from autoindex.types.index import FieldIndexResult, IndexOutcome, ProvisioningReport

logger = get_logger(__name__)


class FailurePolicy:
    """Failure policy for one capability tier."""

    def __init__(self, tier: CapabilityTier):
        self.tier = CapabilityTier(tier)

    @property
    def lenient(self) -> bool:
        return self.tier == CapabilityTier.LEGACY

    def should_continue(self, result: FieldIndexResult) -> bool:
        """Whether the next field of the same notification should be attempted."""
        return result.succeeded or self.lenient

    def resolve(self, report: ProvisioningReport) -> None:
        """Apply the policy to a finished report.

        Raises:
            AutoIndexError: The first INVALID_IDENTIFIER failure on any tier,
                or the first execution failure on the modern tier
        """
        invalid = report.first_failure(IndexOutcome.INVALID_IDENTIFIER)
        if invalid is not None:
            raise invalid.error

        failed = report.first_failure(IndexOutcome.EXECUTION_FAILED)
        if failed is None:
            return

        if not self.lenient:
            raise failed.error

        for result in report.failed:
            logger.info(
                "Ignoring index creation failure on legacy engine",
                extra={
                    "field": result.field.name,
                    "statement": result.statement,
                    "error": str(result.error),
                },
            )
