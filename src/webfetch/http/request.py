"""GET request encoding."""

import re

from webfetch.errors.exceptions import MalformedInputError

CRLF = "\r\n"
REQUEST_ENCODING = "ascii"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def format_request(host: str, path: str) -> str:
    """Return the request text for host and path."""
    return (
        f"GET {path} HTTP/1.1{CRLF}"
        f"Host: {host}{CRLF}"
        f"Connection: close{CRLF}"
        f"{CRLF}"
    )


def build_get_request(host: str, path: str) -> bytes:
    """
    Encode the GET request for host and path.

    The request asks the server to close the connection after one
    response, so the body ends where the stream ends.

    Raises:
        MalformedInputError: If host or path is not plain ASCII, or holds a
            control character such as CR or LF
    """
    for part in (host, path):
        if _CONTROL_CHARS.search(part):
            raise MalformedInputError(
                f"Request for {host!r} {path!r} contains control characters",
                context={"host": host},
            )

    text = format_request(host, path)
    try:
        return text.encode(REQUEST_ENCODING)
    except UnicodeEncodeError as e:
        raise MalformedInputError(
            f"Request for {host}{path} contains non-ASCII characters",
            cause=e,
        ) from e
