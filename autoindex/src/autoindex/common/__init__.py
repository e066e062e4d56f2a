"""Common exceptions for autoindex.

The exception system uses error codes for categorization rather than
numerous specific exception classes. All errors inherit from
AutoIndexError and carry structured error information.
"""

from autoindex.common.exceptions import (
    AutoIndexError,
    ErrorCode,
    configuration_error,
    connection_error,
    feature_not_enabled_error,
    invalid_identifier_error,
    probe_failure_error,
    statement_execution_error,
)

__all__ = [
    "AutoIndexError",
    "ErrorCode",
    "configuration_error",
    "connection_error",
    "feature_not_enabled_error",
    "invalid_identifier_error",
    "probe_failure_error",
    "statement_execution_error",
]
