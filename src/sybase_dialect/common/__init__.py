"""Common exceptions for sybase_dialect.

Exception Design:
    The exception system uses error codes for categorization. All
    exceptions inherit from DialectError and include structured error
    information. The generator raises InvalidRequestError and
    UnsupportedFeatureError synchronously; the connection layer raises
    DatabaseConnectionError and QueryExecutionError.
"""

from sybase_dialect.common.exceptions import (
    DialectError,
    ErrorCode,
    InvalidRequestError,
    UnsupportedFeatureError,
    DatabaseConnectionError,
    QueryExecutionError,
    # Helper functions
    configuration_error,
    invalid_request_error,
    unsupported_feature_error,
    connection_error,
    query_execution_error,
)

__all__ = [
    "DialectError",
    "ErrorCode",
    "InvalidRequestError",
    "UnsupportedFeatureError",
    "DatabaseConnectionError",
    "QueryExecutionError",
    "configuration_error",
    "invalid_request_error",
    "unsupported_feature_error",
    "connection_error",
    "query_execution_error",
]
