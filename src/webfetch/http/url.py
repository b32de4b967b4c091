"""
URL decomposition into connection parameters.

Only the `scheme://host[:port][/path]` form is understood. Everything after
the authority is kept verbatim as the request path (query strings included),
so no percent-decoding or normalization takes place.
"""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from webfetch.errors.exceptions import MalformedInputError, UnsupportedSchemeError

SCHEME_DELIMITER = "://"

_PORT_DIGITS = re.compile(r"[0-9]+")

# C0 controls (CR and LF included) and DEL; never valid in host or path
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class Scheme(str, Enum):
    """Supported URL schemes."""

    HTTP = "http"
    HTTPS = "https"

    @property
    def default_port(self) -> int:
        return 443 if self is Scheme.HTTPS else 80

    @property
    def is_secure(self) -> bool:
        return self is Scheme.HTTPS


class ConnectionTarget(BaseModel):
    """Where to connect and what to request.

    Immutable once built. Two decompositions of the same URL compare equal.

    Attributes:
        scheme: http or https
        host: Host name or address, exactly as written in the URL
        port: TCP port (scheme default when the URL has none)
        path: Request target starting with "/" ("/" when the URL has none)
    """

    model_config = ConfigDict(frozen=True)

    scheme: Scheme
    host: str = Field(..., min_length=1, description="Remote host")
    port: int = Field(..., ge=1, le=65535, description="Remote TCP port")
    path: str = Field(default="/", description="Request target")

    @field_validator("host", "path")
    @classmethod
    def no_control_characters(cls, v: str) -> str:
        if _CONTROL_CHARS.search(v):
            raise ValueError("must not contain control characters")
        return v

    @field_validator("path")
    @classmethod
    def path_is_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("path must start with '/'")
        return v

    @property
    def authority(self) -> str:
        """host:port as it would be written in the URL."""
        return f"{self.host}:{self.port}"


def parse_scheme(text: str) -> Scheme:
    """
    Map scheme text onto a supported Scheme, case-insensitively.

    Raises:
        UnsupportedSchemeError: For anything other than http/https
    """
    try:
        return Scheme(text.lower())
    except ValueError:
        raise UnsupportedSchemeError(text) from None


def parse_url(url: str) -> ConnectionTarget:
    """
    Decompose a fully-qualified URL into a ConnectionTarget.

    Args:
        url: URL of the form scheme://host[:port][/path]

    Returns:
        ConnectionTarget with default port and path filled in

    Raises:
        MalformedInputError: No "://", empty host, a port that is not a
            decimal number between 1 and 65535, or control characters (CR, LF,
            ...) in the host or path
        UnsupportedSchemeError: Scheme other than http/https

    Examples:
        >>> parse_url("http://example.com/a/b.txt")
        ConnectionTarget(scheme=<Scheme.HTTP: 'http'>, host='example.com', port=80, path='/a/b.txt')

        >>> parse_url("https://example.com:8443").path
        '/'
    """
    delimiter_at = url.find(SCHEME_DELIMITER)
    if delimiter_at == -1:
        raise MalformedInputError(
            f"Invalid URL format, missing '{SCHEME_DELIMITER}': {url}",
            context={"url": url},
        )

    scheme = parse_scheme(url[:delimiter_at])
    rest = url[delimiter_at + len(SCHEME_DELIMITER):]

    path_at = rest.find("/")
    if path_at == -1:
        authority, path = rest, "/"
    else:
        authority, path = rest[:path_at], rest[path_at:]

    host, sep, port_text = authority.partition(":")
    if not host:
        raise MalformedInputError(f"No host in URL: {url}", context={"url": url})

    if sep:
        if not _PORT_DIGITS.fullmatch(port_text):
            raise MalformedInputError(
                f"Invalid port '{port_text}' in URL: {url}", context={"url": url}
            )
        port = int(port_text)
    else:
        port = scheme.default_port

    try:
        return ConnectionTarget(scheme=scheme, host=host, port=port, path=path)
    except ValidationError as e:
        raise MalformedInputError(
            f"Invalid URL {url}: {e.errors()[0]['msg']}",
            cause=e,
            context={"url": url},
        ) from e
