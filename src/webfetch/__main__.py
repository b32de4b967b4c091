"""
Entry point for fetching a URL.

Usage:
    # Save https://example.com/ as ./index.html
    python -m webfetch https://example.com/

    # Save ./b.txt, giving up on a peer that stalls for 30 seconds
    python -m webfetch http://example.com/a/b.txt --timeout 30

The request, the response status line and the response headers are printed
to stdout. Warnings and errors are logged to stderr.

Exit codes:
    0  the response was received (whatever its status code)
    1  the URL, connection, response or destination file failed
    2  invalid command line
"""

import argparse
import logging
import sys
from typing import List, Optional

from webfetch.config import ClientConfig
from webfetch.download.downloader import WebClient
from webfetch.errors.exceptions import ConfigurationError
from webfetch.logging.setup import setup_logging
from webfetch.security.sanitize import sanitize_url

# Placeholder logger until setup_logging() is called in main()
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="webfetch",
        description="Download one HTTP or HTTPS resource into the current directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    webfetch http://example.com/a/b.txt     # writes ./b.txt
    webfetch https://example.com/           # writes ./index.html
        """,
    )

    parser.add_argument(
        "url",
        help="Fully-qualified URL: scheme://host[:port][/path]",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Socket timeout in seconds (default: none, wait indefinitely)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 when a response was received, non-zero otherwise)
    """
    args = parse_args(argv)

    try:
        config = ClientConfig(timeout=args.timeout)
    except ConfigurationError as e:
        print(f"webfetch: error: {e}", file=sys.stderr)
        return 2

    setup_logging()

    logger.debug("Fetching %s into %s", sanitize_url(args.url), config.output_dir)
    outcome = WebClient(config=config).get_object(args.url)
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())
