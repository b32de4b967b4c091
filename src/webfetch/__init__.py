"""
webfetch: fetch one URL over a raw HTTP/1.1 socket and save the body.
"""

__version__ = "1.0.0"

from webfetch.config import ClientConfig
from webfetch.download import DownloadOutcome, WebClient, download_url

__all__ = [
    "__version__",
    "ClientConfig",
    "DownloadOutcome",
    "WebClient",
    "download_url",
]
