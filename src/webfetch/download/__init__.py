"""
Download orchestration.

Provides WebClient (URL -> DownloadOutcome), the output naming rule and the
outcome model.
"""

from webfetch.download.downloader import WebClient, describe_error, download_url
from webfetch.download.models import DownloadOutcome
from webfetch.download.naming import DEFAULT_FILENAME, filename_from_path

__all__ = [
    "WebClient",
    "download_url",
    "describe_error",
    "DownloadOutcome",
    "filename_from_path",
    "DEFAULT_FILENAME",
]
