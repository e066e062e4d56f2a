"""Tracing and retry decorators used by the gateway and the reactor."""

import functools
import time
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

from opentelemetry.trace import SpanKind, Status, StatusCode

from autoindex.logging import get_logger
from autoindex.telemetry import get_tracer

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")

AttributeGetter = Callable[..., Optional[Dict[str, Any]]]

logger = get_logger(__name__)


def _span_attributes(
    static: Optional[Dict[str, Any]],
    getter: Optional[AttributeGetter],
    args: tuple,
    kwargs: dict,
) -> Dict[str, Any]:
    collected = dict(static or {})
    if getter is not None:
        try:
            collected.update(getter(*args, **kwargs) or {})
        except Exception as exc:  # pragma: no cover
            logger.warning("Could not compute span attributes: %s", exc)
    # OpenTelemetry rejects None attribute values
    return {key: value for key, value in collected.items() if value is not None}


def traced(
    span_name: Optional[str] = None,
    *,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[Dict[str, Any]] = None,
    attribute_getter: Optional[AttributeGetter] = None,
) -> Callable[[F], F]:
    """Run the decorated call inside an OpenTelemetry span.

    Exceptions are recorded on the span and re-raised unchanged.

    Args:
        span_name: Span name; ``<module>.<qualname>`` when omitted
        kind: Span kind
        attributes: Attributes set on every span
        attribute_getter: Called with the decorated function's arguments,
            returns attributes for this call

    Example:
        >>> @traced("autoindex.gateway.run_statement",
        ...         attribute_getter=lambda self, sql: {"db.statement": sql})
        ... def run_statement(self, sql): ...
    """

    def decorator(func: F) -> F:
        name = span_name or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = get_tracer(func.__module__)
            with tracer.start_as_current_span(name, kind=kind) as span:
                span.set_attributes(_span_attributes(attributes, attribute_getter, args, kwargs))
                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise

        return wrapper  # type: ignore[return-value]

    return decorator


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    retry_on: Optional[Tuple[Type[Exception], ...]] = None,
    retry_condition: Optional[Callable[[Exception], bool]] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry a synchronous call with exponential backoff.

    An exception is retried when it matches ``retry_on`` (any exception if
    None) and ``retry_condition`` accepts it. Everything else is raised on
    the first occurrence. The wait before retry ``n`` (0-based) is
    ``min(initial_delay * exponential_base ** n, max_delay)``.

    Args:
        max_retries: Retries after the first attempt
        initial_delay: Seconds before the first retry
        max_delay: Upper bound for a single wait
        exponential_base: Growth factor between waits
        retry_on: Exception types eligible for a retry
        retry_condition: Predicate deciding whether a given exception is retried

    Example:
        >>> @retry_with_backoff(max_retries=2, retry_condition=is_connection_failure)
        ... def fetch():
        ...     return conn.execute(text("SHOW server_version")).fetchall()
    """

    def should_retry(exc: Exception) -> bool:
        if retry_on is not None and not isinstance(exc, retry_on):
            return False
        return retry_condition is None or retry_condition(exc)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    if not should_retry(exc):
                        raise
                    if attempt >= max_retries:
                        logger.error(
                            f"Giving up on {func.__name__} after {attempt + 1} attempts: {exc}"
                        )
                        raise
                    delay = min(initial_delay * exponential_base ** attempt, max_delay)
                    logger.warning(
                        f"Attempt {attempt + 1} of {func.__name__} failed: {exc}. "
                        f"Retrying in {delay:.2f}s"
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator

