"""
Single-resource downloader.

Provides WebClient, which sequences one fetch:
- URL decomposition
- Plain or TLS connection
- GET request
- Response head parsing and reporting
- Body copy to a local file (status 200 only)

Clean interface: URL -> DownloadOutcome. Every error is reported, logged
and returned in the outcome; nothing is raised to the caller.
"""

import logging
import socket
import ssl
import time
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional

from webfetch.config import ClientConfig
from webfetch.download.models import DownloadOutcome
from webfetch.download.naming import filename_from_path
from webfetch.errors.exceptions import (
    ConnectionError,
    MalformedInputError,
    MalformedResponseError,
    ProtocolError,
    StorageError,
    UnsupportedSchemeError,
    WebClientError,
    wrap_exception,
)
from webfetch.http.request import build_get_request, format_request
from webfetch.http.response import (
    UNKNOWN_LENGTH,
    ResponseHead,
    iter_body,
    read_response_head,
)
from webfetch.http.transport import open_connection
from webfetch.http.url import ConnectionTarget, parse_url
from webfetch.logging.context import (
    clear_log_context,
    generate_request_id,
    set_log_context,
)
from webfetch.logging.utilities import log_exception, log_with_context

logger = logging.getLogger(__name__)

Reporter = Callable[[str], None]

# Prefixes for operator-facing error lines, most specific first
_ERROR_LABELS = (
    (MalformedInputError, "Malformed URL"),
    (MalformedResponseError, "Malformed response"),
    (ProtocolError, "Protocol error"),
    (ConnectionError, "Network error"),
    (StorageError, "File error"),
)


def _progress(destination: Path, opened: bool, bytes_written: int) -> dict:
    # partial_file: destination was created and may hold a truncated body
    return {
        "destination": str(destination),
        "partial_file": opened,
        "bytes_written": bytes_written,
    }


def describe_error(error: WebClientError) -> str:
    """Render an error as the line shown to the operator."""
    if isinstance(error, UnsupportedSchemeError):
        return str(error)
    for error_class, label in _ERROR_LABELS:
        if isinstance(error, error_class):
            return f"{label}: {error}"
    return f"Error: {error}"


class WebClient:
    """
    Fetches one URL per call and saves a 200 response body to disk.

    Usage:
        client = WebClient()
        outcome = client.get_object("https://example.com/files/report.pdf")
        if outcome.saved:
            print(f"Saved {outcome.bytes_written} bytes to {outcome.file_path}")

    The request, status line and header block are passed to the reporter
    (default: print) for every response. The destination name comes from
    the last path segment ("index.html" for paths ending in "/") and an
    existing file is overwritten. A failure while writing leaves the
    partial file in place.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        reporter: Optional[Reporter] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ):
        """
        Initialize WebClient.

        Args:
            config: Client settings (None = defaults)
            reporter: Sink for operator output lines (None = print)
            ssl_context: TLS context for https (None = platform default)
        """
        self._config = config or ClientConfig()
        self._reporter = reporter or print
        self._ssl_context = ssl_context

    def get_object(self, url: str) -> DownloadOutcome:
        """
        Download the object identified by a fully-qualified URL.

        Args:
            url: scheme://host[:port][/path] with scheme http or https

        Returns:
            DownloadOutcome describing what happened
        """
        set_log_context(request_id=generate_request_id(), stage="parse")
        try:
            return self._fetch(url)
        finally:
            clear_log_context()

    def _fetch(self, url: str) -> DownloadOutcome:
        try:
            target = parse_url(url)
        except (UnsupportedSchemeError, MalformedInputError) as e:
            return self._failure(url, e, level=logging.WARNING)

        set_log_context(host=target.host)
        started = time.perf_counter()

        sock: Optional[socket.socket] = None
        stream: Optional[BinaryIO] = None
        head: Optional[ResponseHead] = None
        destination: Optional[Path] = None

        try:
            set_log_context(stage="connect")
            sock = open_connection(
                target, timeout=self._config.timeout, ssl_context=self._ssl_context
            )

            set_log_context(stage="request")
            self._send_request(sock, target)

            set_log_context(stage="response")
            stream = sock.makefile("rb")
            head = read_response_head(stream)
            self._report_head(head)
            log_with_context(
                logger,
                logging.INFO,
                "Response received",
                url=url,
                http_status=head.status_code,
                content_length=head.content_length,
            )

            if not head.is_ok:
                return DownloadOutcome.not_saved_outcome(url, head)

            set_log_context(stage="save")
            destination = self._config.output_dir / filename_from_path(target.path)
            bytes_written = self._save_body(stream, destination)
            self._check_length(head, bytes_written)

            log_with_context(
                logger,
                logging.INFO,
                "Body saved",
                url=url,
                destination=str(destination),
                bytes_written=bytes_written,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return DownloadOutcome.saved_outcome(url, head, destination, bytes_written)

        except WebClientError as e:
            return self._failure(
                url,
                e,
                head=head,
                file_path=destination if e.context.get("partial_file") else None,
                bytes_written=e.context.get("bytes_written", 0),
            )
        except OSError as e:
            error = ConnectionError(
                "Connection failed", cause=e, context={"host": target.host}
            )
            return self._failure(url, error, head=head)

        finally:
            if stream is not None:
                stream.close()
            if sock is not None:
                sock.close()

    def _send_request(self, sock: socket.socket, target: ConnectionTarget) -> None:
        request = build_get_request(target.host, target.path)
        self._reporter(format_request(target.host, target.path).strip())
        sock.sendall(request)
        logger.debug("Sent %d byte request for %s", len(request), target.path)

    def _report_head(self, head: ResponseHead) -> None:
        self._reporter(head.status_line)
        self._reporter(head.header_block)

    def _read_body(self, stream: BinaryIO) -> Iterator[bytes]:
        try:
            yield from iter_body(stream, self._config.chunk_size)
        except OSError as e:
            raise ConnectionError(
                "Connection failed while reading body", cause=e
            ) from e

    def _save_body(self, stream: BinaryIO, destination: Path) -> int:
        """
        Copy the rest of stream into destination until end of stream.

        Returns:
            Number of bytes written

        Raises:
            StorageError: destination cannot be created or written
            ConnectionError: stream failed part way through
        """
        bytes_written = 0
        opened = False
        try:
            with open(destination, "wb") as sink:
                opened = True
                for chunk in self._read_body(stream):
                    sink.write(chunk)
                    bytes_written += len(chunk)
        except OSError as e:
            raise StorageError(
                f"Cannot write {destination}",
                cause=e,
                context=_progress(destination, opened, bytes_written),
            ) from e
        except WebClientError as e:
            raise wrap_exception(
                e, context=_progress(destination, opened, bytes_written)
            )
        return bytes_written

    def _check_length(self, head: ResponseHead, bytes_written: int) -> None:
        # Content-Length is informational only; the body always runs to EOF
        if head.content_length != UNKNOWN_LENGTH and head.content_length != bytes_written:
            log_with_context(
                logger,
                logging.WARNING,
                f"Body length {bytes_written} differs from Content-Length "
                f"{head.content_length}",
                content_length=head.content_length,
                bytes_written=bytes_written,
            )

    def _failure(
        self,
        url: str,
        error: WebClientError,
        head: Optional[ResponseHead] = None,
        file_path: Optional[Path] = None,
        bytes_written: int = 0,
        level: int = logging.ERROR,
    ) -> DownloadOutcome:
        self._reporter(describe_error(error))
        log_exception(
            logger,
            error,
            "Fetch failed",
            level=level,
            include_traceback=logger.isEnabledFor(logging.DEBUG),
            url=url,
        )
        return DownloadOutcome.failure_outcome(
            url,
            error,
            head=head,
            file_path=file_path,
            bytes_written=bytes_written,
        )


def download_url(
    url: str,
    config: Optional[ClientConfig] = None,
    reporter: Optional[Reporter] = None,
) -> DownloadOutcome:
    """Fetch url with a one-off WebClient."""
    return WebClient(config=config, reporter=reporter).get_object(url)
