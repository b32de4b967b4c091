"""
HTTP/1.x response head parsing.

The head is read one byte at a time so that the stream is left exactly at
the first body byte, whatever buffering the transport does underneath.
Nothing here closes the stream; the caller owns it.
"""

import logging
import re
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional, Tuple

from webfetch.errors.exceptions import (
    IncompleteLineError,
    MalformedResponseError,
    ProtocolError,
)

logger = logging.getLogger(__name__)

CR = 0x0D
LF = 0x0A

# Header bytes are decoded one-to-one so arbitrary octets never fail
HEAD_ENCODING = "iso-8859-1"

UNKNOWN_LENGTH = -1

DEFAULT_CHUNK_SIZE = 4096

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class ResponseHead:
    """Status line and header block of a response.

    Attributes:
        status_line: First line of the response, without terminator
        status_code: Numeric status code from the status line
        header_lines: Header lines in received order, without terminators
        content_length: Advertised body size, -1 when absent or unparseable
    """

    status_line: str
    status_code: int
    header_lines: Tuple[str, ...] = ()
    content_length: int = UNKNOWN_LENGTH

    @property
    def header_block(self) -> str:
        """Header lines as one text blob, each line ending in a newline."""
        return "".join(f"{line}\n" for line in self.header_lines)

    @property
    def is_ok(self) -> bool:
        return self.status_code == 200

    def get_header(self, name: str) -> Optional[str]:
        """Return the value of the first header called name (case-insensitive)."""
        wanted = name.lower()
        for line in self.header_lines:
            header_name, sep, value = line.partition(":")
            if sep and header_name.strip().lower() == wanted:
                return value.strip()
        return None


def read_line(stream: BinaryIO) -> str:
    """
    Read one CR LF terminated line, byte by byte.

    Args:
        stream: Readable binary stream

    Returns:
        Line text without the terminator and without trailing whitespace

    Raises:
        IncompleteLineError: Stream ended before CR LF
    """
    buffer = bytearray()
    previous = None
    while True:
        byte = stream.read(1)
        if not byte:
            raise IncompleteLineError(bytes(buffer))
        current = byte[0]
        if previous == CR and current == LF:
            del buffer[-1]
            return buffer.decode(HEAD_ENCODING).rstrip()
        buffer.append(current)
        previous = current


def parse_status_line(line: str) -> int:
    """
    Extract the status code from a status line.

    Raises:
        MalformedResponseError: Fewer than two tokens, or a non-numeric
            second token
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise MalformedResponseError(
            f"Status line has no status code: {line!r}",
            context={"status_line": line},
        )
    if not _DIGITS.fullmatch(tokens[1]):
        raise MalformedResponseError(
            f"Status code is not numeric: {line!r}",
            context={"status_line": line},
        )
    return int(tokens[1])


def parse_content_length(line: str) -> Optional[int]:
    """
    Return the Content-Length value if line is that header.

    Returns:
        None when line is some other header, UNKNOWN_LENGTH when the value
        is not a non-negative decimal integer, the length otherwise
    """
    name, sep, value = line.partition(":")
    if not sep or name.strip().lower() != "content-length":
        return None
    value = value.strip()
    if not _DIGITS.fullmatch(value):
        logger.warning("Ignoring malformed Content-Length header: %r", value)
        return UNKNOWN_LENGTH
    return int(value)


def read_response_head(stream: BinaryIO) -> ResponseHead:
    """
    Read the status line and header block from stream.

    On return the stream is positioned at the first body byte.

    Args:
        stream: Readable binary stream at the start of a response

    Returns:
        Parsed ResponseHead

    Raises:
        ProtocolError: Stream ended before the blank line closing the head
        MalformedResponseError: Status line cannot be parsed
    """
    try:
        status_line = read_line(stream)
    except IncompleteLineError as e:
        raise ProtocolError(
            "Connection closed before status line was received",
            cause=e,
            context={"bytes_received": len(e.partial)},
        ) from e

    status_code = parse_status_line(status_line)

    header_lines = []
    content_length = UNKNOWN_LENGTH
    while True:
        try:
            line = read_line(stream)
        except IncompleteLineError as e:
            raise ProtocolError(
                "Connection closed before end of header block",
                cause=e,
                context={"status_line": status_line, "headers_read": len(header_lines)},
            ) from e
        if not line:
            break
        header_lines.append(line)
        length = parse_content_length(line)
        if length is not None:
            content_length = length

    return ResponseHead(
        status_line=status_line,
        status_code=status_code,
        header_lines=tuple(header_lines),
        content_length=content_length,
    )


def iter_body(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Yield the rest of stream in chunks until end of stream.

    Single pass only; the stream is not closed.
    """
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        yield chunk
