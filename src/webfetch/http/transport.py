"""
Plain and TLS stream sockets for a ConnectionTarget.

TLS uses the platform default client context: system trust store, default
protocol and cipher negotiation, hostname verification. Nothing about the
handshake is configured here.
"""

import logging
import socket
import ssl
from typing import Optional

from webfetch.errors.exceptions import ConnectionError
from webfetch.http.url import ConnectionTarget

logger = logging.getLogger(__name__)


def open_connection(
    target: ConnectionTarget,
    timeout: Optional[float] = None,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> socket.socket:
    """
    Open a connected stream socket to target.host:target.port.

    A single attempt is made. The caller owns the returned socket and must
    close it.

    Args:
        target: Decomposed URL
        timeout: Seconds for connect and each later socket operation
            (None = blocking, no timeout)
        ssl_context: TLS context for https (None = ssl.create_default_context())

    Returns:
        Connected socket, TLS-wrapped for https

    Raises:
        ConnectionError: DNS failure (including host names that cannot be
            IDNA-encoded), refused connection, TLS handshake failure or timeout
    """
    address = (target.host, target.port)
    context = {"host": target.host, "port": target.port}

    try:
        sock = socket.create_connection(address, timeout=timeout)
    except (OSError, UnicodeError) as e:
        # UnicodeError: host name not encodable for DNS (empty or oversized label)
        raise ConnectionError(
            f"Cannot connect to {target.authority}", cause=e, context=context
        ) from e

    if not target.scheme.is_secure:
        logger.debug("Connected to %s", target.authority)
        return sock

    try:
        if ssl_context is None:
            ssl_context = ssl.create_default_context()
        tls_sock = ssl_context.wrap_socket(sock, server_hostname=target.host)
    except (OSError, ValueError) as e:
        sock.close()
        raise ConnectionError(
            f"TLS handshake with {target.authority} failed", cause=e, context=context
        ) from e

    logger.debug(
        "TLS connection to %s established (%s)", target.authority, tls_sock.version()
    )
    return tls_sock
