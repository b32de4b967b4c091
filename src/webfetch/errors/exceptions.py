"""
Exception types and error classification for webfetch.

Provides:
- ErrorCategory enum for reporting decisions
- Typed exception hierarchy for every failure a fetch can hit
- Error classification utilities
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """
    Classification of error types.

    Categories:
        TRANSIENT: Failures caused by the network or the peer that might not
                   happen on another attempt (refused, reset, truncated stream)
        PERMANENT: Failures that will repeat for the same input
                   (bad URL, unsupported scheme, unwritable destination)
        UNKNOWN: Unclassified errors

    webfetch never retries; the category is reported so the operator can
    decide whether running the command again is worthwhile.
    """

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class WebClientError(Exception):
    """
    Base exception for all webfetch errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Network/Stream Errors (Transient)
# =============================================================================


class TransientError(WebClientError):
    """Base class for failures of the network or the peer."""

    category = ErrorCategory.TRANSIENT


class ConnectionError(TransientError):
    """DNS resolution, connect, TLS handshake or socket I/O failed."""

    pass


class ProtocolError(TransientError):
    """Stream ended before a complete status line and header block."""

    pass


class IncompleteLineError(ProtocolError):
    """End of stream reached before a CR LF line terminator."""

    def __init__(self, partial: bytes = b""):
        super().__init__(
            "Stream ended before line terminator",
            context={"partial_length": len(partial)},
        )
        self.partial = partial


# =============================================================================
# Permanent Errors
# =============================================================================


class PermanentError(WebClientError):
    """Base class for failures that repeat for the same input."""

    category = ErrorCategory.PERMANENT


class MalformedInputError(PermanentError):
    """URL cannot be decomposed into connection parameters."""

    pass


class UnsupportedSchemeError(PermanentError):
    """URL scheme is not http or https."""

    def __init__(
        self,
        scheme: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        super().__init__(f"Unsupported protocol: {scheme}", cause, context)
        self.scheme = scheme


class MalformedResponseError(PermanentError):
    """Status line has no protocol version and numeric status code."""

    pass


class StorageError(PermanentError):
    """Destination file could not be created or written."""

    pass


class ConfigurationError(PermanentError):
    """Invalid configuration."""

    pass


# =============================================================================
# Error Classification Utilities
# =============================================================================


def classify_exception(exc: Exception) -> ErrorCategory:
    """
    Classify an exception into error category.

    Args:
        exc: Exception to classify

    Returns:
        Appropriate ErrorCategory
    """
    # Already classified
    if isinstance(exc, WebClientError):
        return exc.category

    if isinstance(exc, (PermissionError, FileNotFoundError, IsADirectoryError)):
        return ErrorCategory.PERMANENT

    exc_type = type(exc).__name__.lower()
    exc_str = str(exc).lower()

    connection_markers = (
        "connectionerror",
        "connection refused",
        "connection reset",
        "connection aborted",
        "no route to host",
        "network unreachable",
        "name resolution",
        "name or service not known",
        "gaierror",
        "ssl",
        "certificate",
        "socket",
        "broken pipe",
    )
    if any(m in exc_type or m in exc_str for m in connection_markers):
        return ErrorCategory.TRANSIENT

    if "timeout" in exc_type or "timed out" in exc_str:
        return ErrorCategory.TRANSIENT

    if isinstance(exc, OSError):
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def wrap_exception(
    exc: Exception,
    default_class: type = WebClientError,
    context: Optional[dict] = None,
) -> WebClientError:
    """
    Wrap a generic exception in the appropriate WebClientError subclass.

    Args:
        exc: Exception to wrap
        default_class: Class to use if can't classify
        context: Additional context to include

    Returns:
        Appropriate WebClientError subclass instance
    """
    if isinstance(exc, WebClientError):
        if context:
            exc.context.update(context)
        return exc

    category = classify_exception(exc)
    message = str(exc) or type(exc).__name__

    if category == ErrorCategory.TRANSIENT:
        return ConnectionError(message, cause=exc, context=context)

    if category == ErrorCategory.PERMANENT and isinstance(exc, OSError):
        return StorageError(message, cause=exc, context=context)

    return default_class(message, cause=exc, context=context)
