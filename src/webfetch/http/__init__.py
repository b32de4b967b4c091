"""
Socket-level HTTP/1.1 building blocks.

Provides:
- parse_url(): URL -> ConnectionTarget
- open_connection(): plain or TLS stream socket
- build_get_request(): GET request bytes
- read_response_head() / iter_body(): response parsing
"""

from webfetch.http.request import build_get_request, format_request
from webfetch.http.response import (
    UNKNOWN_LENGTH,
    ResponseHead,
    iter_body,
    read_line,
    read_response_head,
)
from webfetch.http.transport import open_connection
from webfetch.http.url import ConnectionTarget, Scheme, parse_url

__all__ = [
    "ConnectionTarget",
    "Scheme",
    "parse_url",
    "open_connection",
    "build_get_request",
    "format_request",
    "ResponseHead",
    "UNKNOWN_LENGTH",
    "read_line",
    "read_response_head",
    "iter_body",
]
