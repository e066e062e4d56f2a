import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, DisconnectionError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.pool import QueuePool

from autoindex.common.exceptions import (
    AutoIndexError,
    configuration_error,
    connection_error,
    statement_execution_error,
)
from autoindex.logging import get_logger
from autoindex.settings.engine import EngineSettings
from autoindex.utils.decorators import retry_with_backoff, traced

logger = get_logger(__name__)

T = TypeVar("T")


def is_connection_failure(exc: Exception) -> bool:
    """Tell transient connection failures apart from rejected statements.

    Only these are retried; a statement the engine rejected would fail the
    same way again.
    """
    if isinstance(exc, (DisconnectionError, PoolTimeoutError)):
        return True
    if isinstance(exc, DBAPIError):
        return bool(exc.connection_invalidated)
    return False


class PostgresSQLEngine:
    """SQLAlchemy-backed execution gateway for PostgreSQL-family engines.

    Implements the ``ExecutionGateway`` protocol consumed by the capability
    probe and the schema-change reactor.

    Features:
        - Lazily created, pooled SQLAlchemy engine
        - Session time zone applied on every checked-out connection
        - Retries with exponential backoff for connection-level failures only
        - OpenTelemetry spans and structured logging per call

    Example:
        >>> gateway = PostgresSQLEngine(get_settings().engine)
        >>> gateway.run_query("SHOW server_version")
        [('16.2',)]
        >>> gateway.run_statement('CREATE INDEX IF NOT EXISTS ...')
    """

    def __init__(self, settings: EngineSettings, engine: Optional[Engine] = None):
        """Initialize the gateway.

        Args:
            settings: Engine connection settings
            engine: Pre-built SQLAlchemy engine; built from settings when omitted
        """
        self.settings = settings
        self._engine: Optional[Engine] = engine
        self._connection_info: Dict[str, Any] = {
            "platform": "postgresql",
            "session_time_zone": settings.session_time_zone,
        }

    @property
    def engine(self) -> Engine:
        """Get or create SQLAlchemy engine with lazy initialization."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine with connection pooling.

        Raises:
            AutoIndexError: CONFIG_ERROR if no URL is configured,
                CONNECTION_ERROR if engine creation fails
        """
        url = self.settings.get_url()
        if not url:
            raise configuration_error(
                "No engine URL configured",
                config_key="ENGINE_URL",
            )

        try:
            engine = create_engine(
                url,
                poolclass=QueuePool,
                pool_pre_ping=True,
                pool_size=self.settings.pool_size,
                max_overflow=self.settings.max_overflow,
                pool_timeout=self.settings.pool_timeout,
            )
        except Exception as e:
            raise connection_error(
                "Failed to create postgresql engine",
                service="postgresql",
                cause=e,
            )

        logger.info("Created postgresql engine", extra={"db.platform": "postgresql"})
        return engine

    @contextmanager
    def _get_connection(self) -> Iterator[Connection]:
        """Get a database connection from the pool with session settings applied."""
        conn = self.engine.connect()
        try:
            self._apply_connection_settings(conn)
            yield conn
        finally:
            conn.close()

    def _apply_connection_settings(self, conn: Connection) -> None:
        """Apply session settings to a freshly checked-out connection.

        Args:
            conn: SQLAlchemy Connection object
        """
        time_zone = self.settings.session_time_zone.replace("'", "''")
        conn.execute(text(f"SET TIME ZONE '{time_zone}'"))

    def _span_attributes(self, sql: str, *, operation: str) -> Dict[str, Any]:
        """Build OpenTelemetry span attributes for SQL operations."""
        statement = (sql or "").strip()
        if len(statement) > 4096:
            statement = f"{statement[:4093]}..."

        attributes: Dict[str, Any] = {
            "db.system": "postgresql",
            "db.operation": operation,
        }
        if statement:
            attributes["db.statement"] = statement
            attributes["db.statement.length"] = len(statement)
        return attributes

    def _with_retry(self, func: Callable[[], T]) -> T:
        return retry_with_backoff(
            max_retries=self.settings.max_retries,
            initial_delay=self.settings.retry_delay_seconds,
            retry_condition=is_connection_failure,
        )(func)()

    def _wrap_failure(self, sql: str, exc: Exception) -> AutoIndexError:
        if isinstance(exc, AutoIndexError):
            return exc
        if is_connection_failure(exc):
            return connection_error(
                "Lost connection to postgresql",
                service="postgresql",
                cause=exc,
                details={"query": sql[:500]},
            )
        return statement_execution_error(sql, exc)

    @traced(
        span_name="autoindex.gateway.run_query",
        attribute_getter=lambda self, sql: self._span_attributes(sql, operation="query"),
    )
    def run_query(self, sql: str) -> List[Tuple[Any, ...]]:
        """Execute a query and return all rows as tuples."""
        start_time = time.time()

        def _fetch() -> List[Tuple[Any, ...]]:
            with self._get_connection() as conn:
                result = conn.execute(text(sql))
                return [tuple(row) for row in result.fetchall()]

        try:
            rows = self._with_retry(_fetch)
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                "SQL query failed",
                extra={"db.platform": "postgresql", "duration.seconds": f"{duration:.6f}", "error": str(exc)},
            )
            raise self._wrap_failure(sql, exc)

        duration = time.time() - start_time
        logger.debug(
            "SQL query executed",
            extra={"db.platform": "postgresql", "duration.seconds": f"{duration:.6f}", "row_count": str(len(rows))},
        )
        return rows

    @traced(
        span_name="autoindex.gateway.run_statement",
        attribute_getter=lambda self, sql: self._span_attributes(sql, operation="statement"),
    )
    def run_statement(self, sql: str) -> None:
        """Execute a statement that returns no rows and commit it."""
        start_time = time.time()

        def _execute() -> None:
            with self._get_connection() as conn:
                conn.execute(text(sql))
                conn.commit()

        try:
            self._with_retry(_execute)
        except Exception as exc:
            duration = time.time() - start_time
            # Rejected DDL is routine on legacy engines; the reactor decides how loud to be.
            logger.info(
                "SQL statement failed",
                extra={"db.platform": "postgresql", "duration.seconds": f"{duration:.6f}", "error": str(exc)},
            )
            raise self._wrap_failure(sql, exc)

        duration = time.time() - start_time
        logger.info(
            "SQL statement executed",
            extra={"db.platform": "postgresql", "duration.seconds": f"{duration:.6f}"},
        )

    def test_connection(self) -> bool:
        """Test if connection to the engine is working."""
        try:
            rows = self.run_query("SELECT 1 AS test")
            return bool(rows) and rows[0][0] == 1
        except Exception as exc:
            logger.error(
                "SQL connection test failed",
                extra={"db.platform": "postgresql", "error": str(exc)},
                exc_info=True,
            )
            return False

    def get_connection_info(self) -> Dict[str, Any]:
        """Get connection information for debugging/logging."""
        return self._connection_info.copy()

    def dispose(self) -> None:
        """Release pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
