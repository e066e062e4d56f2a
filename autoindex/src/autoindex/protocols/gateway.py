"""Execution gateway protocol.

The indexing core never talks to a database driver directly; it consumes
this two-method contract. Pooling, retries and transactions belong to the
implementation.
"""

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ExecutionGateway(Protocol):
    """Synchronous raw SQL executor consumed by the probe and the reactor."""

    def run_query(self, sql: str) -> Sequence[Sequence[Any]]:
        """Run a query and return its rows.

        Args:
            sql: Raw SQL query

        Returns:
            Rows as positional sequences, in result order

        Raises:
            AutoIndexError: If the query cannot be executed
        """
        ...

    def run_statement(self, sql: str) -> None:
        """Run a statement that returns no rows.

        Args:
            sql: Raw SQL statement (DDL or DML)

        Raises:
            AutoIndexError: QUERY_EXECUTION_ERROR if the engine rejects the
                statement, CONNECTION_ERROR if it cannot be reached
        """
        ...
