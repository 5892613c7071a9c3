from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for sybase_dialect.

    This enum provides categorized error codes that can be used
    to identify error types without creating numerous exception classes.
    Each category has a specific prefix for easy identification.

    Attributes:
        CONFIG_*: Configuration-related errors
        VALIDATION_*: Malformed generator requests
        CONNECTION_*: Network and connection errors
        EXECUTION_*: Runtime execution errors
        PLATFORM_*: Engine capability errors
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_INVALID = "CONFIG_003"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_ARGUMENT = "VALIDATION_002"
    MISSING_PARAMETER = "VALIDATION_003"
    INVALID_IDENTIFIER = "VALIDATION_004"
    NO_USABLE_KEY = "VALIDATION_005"

    # Connection errors
    CONNECTION_ERROR = "CONNECTION_001"
    AUTH_ERROR = "CONNECTION_002"
    TIMEOUT_ERROR = "CONNECTION_003"

    # Execution errors
    EXECUTION_ERROR = "EXECUTION_001"
    QUERY_EXECUTION_ERROR = "EXECUTION_002"

    # Platform errors
    PLATFORM_ERROR = "PLATFORM_001"
    UNSUPPORTED_FEATURE = "PLATFORM_002"


class DialectError(Exception):
    """Base exception for all sybase_dialect errors.

    Uses error codes for categorization. The three failure kinds the
    generator and its collaborators report get their own subclasses so
    callers can catch them by type.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
        is_retryable: Whether the error is transient and can be retried
    """

    default_code: ErrorCode = ErrorCode.EXECUTION_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        is_retryable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.cause = cause
        self.is_retryable = is_retryable

        # Lazy import to avoid circular dependency
        from sybase_dialect.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": self.error_code.value,
                "details": self.details,
                "is_retryable": is_retryable,
            },
            exc_info=cause is not None
        )

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "is_retryable": self.is_retryable
        }


class InvalidRequestError(DialectError, ValueError):
    """A request violates a structural precondition of the generator."""

    default_code = ErrorCode.VALIDATION_ERROR


class UnsupportedFeatureError(DialectError, NotImplementedError):
    """A request needs a capability the engine does not have."""

    default_code = ErrorCode.UNSUPPORTED_FEATURE


class DatabaseConnectionError(DialectError):
    """Driver-level connection failure."""

    default_code = ErrorCode.CONNECTION_ERROR


class QueryExecutionError(DialectError):
    """A generated statement failed while executing on a connection."""

    default_code = ErrorCode.QUERY_EXECUTION_ERROR


def _truncate(query: str) -> str:
    # Keep the head of the statement, which carries the verb and target
    return query[:500] + "..." if len(query) > 500 else query


def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    **kwargs
) -> DialectError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        **kwargs: Additional error details

    Returns:
        DialectError with CONFIG_ERROR code
    """
    details = kwargs.pop('details', {})
    if config_key:
        details["config_key"] = config_key

    return DialectError(
        message=message,
        error_code=ErrorCode.CONFIG_ERROR,
        details=details,
        **kwargs
    )


def invalid_request_error(
    message: str,
    operation: Optional[str] = None,
    field: Optional[str] = None,
    error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    **kwargs
) -> InvalidRequestError:
    """Create an invalid request error.

    Args:
        message: Error message
        operation: Operation type that was rejected
        field: Request field that failed validation
        error_code: Specific validation code
        **kwargs: Additional error details

    Returns:
        InvalidRequestError
    """
    details = kwargs.pop('details', {})
    if operation:
        details["operation"] = operation
    if field:
        details["field"] = field

    return InvalidRequestError(
        message=message,
        error_code=error_code,
        details=details,
        **kwargs
    )


def unsupported_feature_error(
    feature: str,
    message: Optional[str] = None,
    **kwargs
) -> UnsupportedFeatureError:
    """Create an unsupported feature error.

    Args:
        feature: Capability name as it appears in the supports matrix
        message: Optional explanation; a default one is derived from feature
        **kwargs: Additional error details

    Returns:
        UnsupportedFeatureError
    """
    details = kwargs.pop('details', {})
    details["feature"] = feature

    return UnsupportedFeatureError(
        message=message or f"Feature not supported by this engine: {feature}",
        details=details,
        **kwargs
    )


def connection_error(
    message: str,
    host: Optional[str] = None,
    port: Optional[int] = None,
    **kwargs
) -> DatabaseConnectionError:
    """Create a connection error.

    Args:
        message: Error message
        host: Host that failed
        port: Port that failed
        **kwargs: Additional error details

    Returns:
        DatabaseConnectionError
    """
    details = kwargs.pop('details', {})
    if host:
        details["host"] = host
    if port:
        details["port"] = port

    return DatabaseConnectionError(
        message=message,
        details=details,
        **kwargs
    )


def query_execution_error(
    query: str,
    original_error: Exception,
    **kwargs
) -> QueryExecutionError:
    """Create a query execution error.

    Args:
        query: SQL query that failed
        original_error: The underlying exception
        **kwargs: Additional error details

    Returns:
        QueryExecutionError
    """
    details = kwargs.pop('details', {})
    details["query"] = _truncate(query)

    return QueryExecutionError(
        message=f"Query execution failed: {str(original_error)}",
        details=details,
        cause=original_error,
        **kwargs
    )
