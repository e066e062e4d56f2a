from enum import Enum
from typing import Any, Dict, Optional

# Statements longer than this are cut in error details and log lines
_MAX_STATEMENT_IN_DETAILS = 500


class ErrorCode(Enum):
    """Error codes carried by every ``AutoIndexError``.

    Codes are grouped by category prefix:

        CONFIG_*      settings and feature flags
        VALIDATION_*  names that cannot be embedded into DDL
        CONNECTION_*  the engine could not be reached (retryable)
        EXECUTION_*   the engine rejected a statement
        PLATFORM_*    capability detection
    """
    CONFIG_ERROR = "CONFIG_001"
    FEATURE_DISABLED = "CONFIG_004"

    INVALID_IDENTIFIER = "VALIDATION_004"

    CONNECTION_ERROR = "CONNECTION_001"

    EXECUTION_ERROR = "EXECUTION_001"
    QUERY_EXECUTION_ERROR = "EXECUTION_002"

    PROBE_FAILURE = "PLATFORM_004"


class AutoIndexError(Exception):
    """The single exception type raised by autoindex.

    Failure kinds are told apart by ``error_code``. ``details`` holds the
    structured context (identifier, statement, config key) that ends up in
    the log line written when the error is built.

    Attributes:
        message: Human readable message
        error_code: Failure kind
        details: Structured context
        cause: Underlying driver or library exception, if any
        is_retryable: Whether repeating the call may succeed
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXECUTION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        is_retryable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.is_retryable = is_retryable

        # autoindex.logging imports the package, which imports this module
        from autoindex.logging import get_logger
        get_logger(__name__).debug(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
                "is_retryable": is_retryable,
            },
        )

    def __str__(self) -> str:
        text = f"[{self.error_code.value}] {self.message}"
        if self.cause is not None:
            text += f" (caused by: {type(self.cause).__name__}: {self.cause})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view, used for structured log payloads."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "is_retryable": self.is_retryable,
        }


def _truncate_statement(statement: str) -> str:
    if len(statement) <= _MAX_STATEMENT_IN_DETAILS:
        return statement
    return statement[:_MAX_STATEMENT_IN_DETAILS] + "..."


def configuration_error(message: str, config_key: Optional[str] = None, **kwargs) -> AutoIndexError:
    """Settings are missing or unusable (for example no ``ENGINE_URL``)."""
    details = kwargs.pop("details", {})
    if config_key:
        details["config_key"] = config_key
    return AutoIndexError(message, ErrorCode.CONFIG_ERROR, details=details, **kwargs)


def feature_not_enabled_error(feature_name: str, message: str = "", **kwargs) -> AutoIndexError:
    """A caller demanded a feature whose flag is off."""
    details = kwargs.pop("details", {})
    details.update({"feature": feature_name, "config_key": f"{feature_name.upper()}_ENABLED"})
    return AutoIndexError(
        f"{feature_name} is not enabled. {message}".strip(),
        ErrorCode.FEATURE_DISABLED,
        details=details,
        **kwargs,
    )


def invalid_identifier_error(
    identifier: Any,
    identifier_type: str = "identifier",
    reason: str = "invalid",
    **kwargs
) -> AutoIndexError:
    """A project, collection or field name cannot be safely embedded into DDL.

    Never swallowed, whatever the engine tier.

    Args:
        identifier: The rejected name
        identifier_type: project, collection or field
        reason: Short description of the violation
    """
    details = kwargs.pop("details", {})
    details.update({
        "identifier_type": identifier_type,
        "identifier": str(identifier),
        "reason": reason,
    })
    return AutoIndexError(
        f"Invalid {identifier_type} name {identifier!r}: {reason}",
        ErrorCode.INVALID_IDENTIFIER,
        details=details,
        **kwargs,
    )


def connection_error(message: str, service: Optional[str] = None, **kwargs) -> AutoIndexError:
    """The engine could not be reached. Marked retryable."""
    details = kwargs.pop("details", {})
    if service:
        details["service"] = service
    kwargs.setdefault("is_retryable", True)
    return AutoIndexError(message, ErrorCode.CONNECTION_ERROR, details=details, **kwargs)


def statement_execution_error(statement: str, original_error: Exception, **kwargs) -> AutoIndexError:
    """The engine rejected a statement.

    On legacy engines this is routine (the index usually exists already)
    and the reactor swallows it; on modern engines it is raised.

    Args:
        statement: The SQL that failed, truncated in ``details["query"]``
        original_error: The driver exception
    """
    details = kwargs.pop("details", {})
    details["query"] = _truncate_statement(statement)
    kwargs.pop("cause", None)
    return AutoIndexError(
        f"Statement execution failed: {original_error}",
        ErrorCode.QUERY_EXECUTION_ERROR,
        details=details,
        cause=original_error,
        **kwargs,
    )


def probe_failure_error(query: str, original_error: Exception, **kwargs) -> AutoIndexError:
    """The capability probe failed.

    The probe logs this and falls back to the legacy tier; it is never raised.
    """
    details = kwargs.pop("details", {})
    details["query"] = query
    kwargs.pop("cause", None)
    return AutoIndexError(
        f"Engine capability probe failed: {original_error}",
        ErrorCode.PROBE_FAILURE,
        details=details,
        cause=original_error,
        **kwargs,
    )
