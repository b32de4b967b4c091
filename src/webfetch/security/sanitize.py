"""
Log-safe rendering of URLs and error messages.

URLs given to webfetch may carry credentials in the userinfo part or signed
query parameters. These helpers strip them before anything reaches a log
handler. They are never applied to what is actually fetched or saved.
"""

import re
from typing import Set
from urllib.parse import urlsplit, urlunsplit

# Query parameter names whose values are replaced before logging
SENSITIVE_PARAMS: Set[str] = {
    "sig",
    "signature",
    "token",
    "access_token",
    "api_key",
    "apikey",
    "key",
    "password",
    "secret",
    "x-amz-signature",
    "x-amz-credential",
    "x-amz-security-token",
}

REDACTED = "[REDACTED]"


def sanitize_url(url: str) -> str:
    """
    Remove credentials and sensitive query parameters from a URL.

    Preserves scheme, host, port and path for debugging.

    Args:
        url: URL that may contain sensitive parts

    Returns:
        URL with userinfo and sensitive parameter values replaced
    """
    if not url:
        return url

    try:
        parts = urlsplit(url)
    except ValueError:
        return url  # Return as-is if parsing fails

    netloc = parts.netloc
    if "@" in netloc:
        netloc = f"{REDACTED}@{netloc.rsplit('@', 1)[1]}"

    query = parts.query
    if query:
        sanitized_params = []
        for param in query.split("&"):
            if "=" in param:
                key, value = param.split("=", 1)
                if key.lower() in SENSITIVE_PARAMS:
                    sanitized_params.append(f"{key}={REDACTED}")
                    continue
            sanitized_params.append(param)
        query = "&".join(sanitized_params)

    if netloc == parts.netloc and query == parts.query:
        return url

    return urlunsplit(parts._replace(netloc=netloc, query=query))


# Patterns that may contain sensitive data in error messages
SENSITIVE_PATTERNS = [
    (re.compile(r'sig=[^&\s"\']+', re.IGNORECASE), f"sig={REDACTED}"),
    (re.compile(r'token=[^&\s"\']+', re.IGNORECASE), f"token={REDACTED}"),
    (re.compile(r'password=[^&\s"\']+', re.IGNORECASE), f"password={REDACTED}"),
    (re.compile(r'secret=[^&\s"\']+', re.IGNORECASE), f"secret={REDACTED}"),
    (re.compile(r"bearer\s+[a-zA-Z0-9\-_.]+", re.IGNORECASE), f"bearer {REDACTED}"),
    (re.compile(r'api[_-]?key[=:]\s*[^\s"\'&]+', re.IGNORECASE), f"api_key={REDACTED}"),
]

_URL_PATTERN = re.compile(r'https?://[^\s"\'<>]+', re.IGNORECASE)


def sanitize_error_message(msg: str, max_length: int = 500) -> str:
    """
    Remove potentially sensitive data from an error message.

    Applies pattern-based redaction, sanitizes embedded URLs and truncates
    to max_length.

    Args:
        msg: Error message that may contain sensitive data
        max_length: Maximum length of returned message

    Returns:
        Sanitized and truncated error message
    """
    if not msg:
        return msg

    msg = _URL_PATTERN.sub(lambda m: sanitize_url(m.group(0)), msg)

    for pattern, replacement in SENSITIVE_PATTERNS:
        msg = pattern.sub(replacement, msg)

    if len(msg) > max_length:
        msg = msg[: max_length - 3] + "..."

    return msg
