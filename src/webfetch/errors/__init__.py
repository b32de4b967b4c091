"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- WebClientError hierarchy for typed exceptions
- Classification utilities for error handling
"""

from webfetch.errors.exceptions import (
    # Enums
    ErrorCategory,
    # Base classes
    WebClientError,
    TransientError,
    PermanentError,
    # Transient errors
    ConnectionError,
    ProtocolError,
    IncompleteLineError,
    # Permanent errors
    MalformedInputError,
    UnsupportedSchemeError,
    MalformedResponseError,
    StorageError,
    ConfigurationError,
    # Classification utilities
    classify_exception,
    wrap_exception,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "WebClientError",
    "TransientError",
    "PermanentError",
    # Transient errors
    "ConnectionError",
    "ProtocolError",
    "IncompleteLineError",
    # Permanent errors
    "MalformedInputError",
    "UnsupportedSchemeError",
    "MalformedResponseError",
    "StorageError",
    "ConfigurationError",
    # Classification utilities
    "classify_exception",
    "wrap_exception",
]
