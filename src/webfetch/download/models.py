"""
Result of a single fetch.

DownloadOutcome is what WebClient.get_object() hands back: it always
returns one, never raises.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from webfetch.errors.exceptions import ErrorCategory, WebClientError
from webfetch.http.response import UNKNOWN_LENGTH, ResponseHead


@dataclass(frozen=True)
class DownloadOutcome:
    """
    Outcome of fetching one URL.

    Attributes:
        url: URL that was requested
        success: True when the exchange completed without error, whatever
            the status code
        status_code: Status code from the response (None if none was read)
        status_line: Raw status line (None if none was read)
        content_length: Advertised body size, -1 when unknown
        file_path: Where the body was saved (None unless status was 200)
        bytes_written: Number of body bytes written to file_path
        error: The error that ended the fetch (None on success)
    """

    url: str
    success: bool
    status_code: Optional[int] = None
    status_line: Optional[str] = None
    content_length: int = UNKNOWN_LENGTH
    file_path: Optional[Path] = None
    bytes_written: int = 0
    error: Optional[WebClientError] = None

    @property
    def saved(self) -> bool:
        """Whether a body file was written."""
        return self.file_path is not None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    @property
    def error_category(self) -> Optional[ErrorCategory]:
        return self.error.category if self.error is not None else None

    @classmethod
    def saved_outcome(
        cls, url: str, head: ResponseHead, file_path: Path, bytes_written: int
    ) -> "DownloadOutcome":
        """Body of a 200 response was written to file_path."""
        return cls(
            url=url,
            success=True,
            status_code=head.status_code,
            status_line=head.status_line,
            content_length=head.content_length,
            file_path=file_path,
            bytes_written=bytes_written,
        )

    @classmethod
    def not_saved_outcome(cls, url: str, head: ResponseHead) -> "DownloadOutcome":
        """Response completed with a status other than 200; nothing written."""
        return cls(
            url=url,
            success=True,
            status_code=head.status_code,
            status_line=head.status_line,
            content_length=head.content_length,
        )

    @classmethod
    def failure_outcome(
        cls,
        url: str,
        error: WebClientError,
        head: Optional[ResponseHead] = None,
        file_path: Optional[Path] = None,
        bytes_written: int = 0,
    ) -> "DownloadOutcome":
        """
        Fetch ended with an error.

        head and file_path are filled in when the failure happened after the
        response head was read, e.g. a write error part way through the body.
        """
        return cls(
            url=url,
            success=False,
            status_code=head.status_code if head else None,
            status_line=head.status_line if head else None,
            content_length=head.content_length if head else UNKNOWN_LENGTH,
            file_path=file_path,
            bytes_written=bytes_written,
            error=error,
        )
