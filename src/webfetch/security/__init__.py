"""
Security helpers.

Redaction of credentials and signed parameters before they reach logs.
"""

from webfetch.security.sanitize import (
    REDACTED,
    SENSITIVE_PARAMS,
    sanitize_error_message,
    sanitize_url,
)

__all__ = [
    "sanitize_url",
    "sanitize_error_message",
    "SENSITIVE_PARAMS",
    "REDACTED",
]
