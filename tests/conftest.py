"""
pytest configuration for webfetch tests.

Adds src directory to Python path for imports and provides shared fixtures.
"""

import io
import logging
import socket
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from webfetch.logging.context import clear_log_context  # noqa: E402


class TrackingStream(io.BytesIO):
    """BytesIO that counts close() calls and records read() sizes."""

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        self.close_calls = 0
        self.read_sizes = []

    def read(self, size=-1):
        self.read_sizes.append(size)
        return super().read(size)

    def close(self):
        self.close_calls += 1
        super().close()


class FakeSocket:
    """
    Stand-in for a connected socket.

    Records what was sent, serves `response` through makefile(), and counts
    close() calls on itself and on the stream it hands out.
    """

    def __init__(self, response: bytes = b"", send_error: Exception = None):
        self.response = response
        self.send_error = send_error
        self.sent = b""
        self.close_calls = 0
        self.stream = None

    def sendall(self, data: bytes) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent += data

    def makefile(self, mode: str = "r"):
        assert mode == "rb"
        self.stream = TrackingStream(self.response)
        return self.stream

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def fake_socket_factory():
    """Build FakeSocket instances."""
    return FakeSocket


@pytest.fixture
def reporter_lines():
    """Collect operator output lines instead of printing them."""
    lines = []
    return lines


@pytest.fixture(autouse=True)
def reset_log_context():
    """Start and end every test with an empty log context."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def restore_root_logger():
    """Undo handler changes made by setup_logging()."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler not in saved_handlers:
            handler.close()
    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)


class OneShotServer:
    """
    Loopback TCP server answering exactly one connection with canned bytes.

    The request bytes received (up to the blank line) are kept in `request`.
    """

    def __init__(self, response: bytes):
        self.response = response
        self.request = b""
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(1)
        self._listener.settimeout(5)
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(5)
            while b"\r\n\r\n" not in self.request:
                data = conn.recv(1024)
                if not data:
                    break
                self.request += data
            conn.sendall(self.response)

    def start(self) -> "OneShotServer":
        self._thread.start()
        return self

    def stop(self) -> None:
        self._thread.join(timeout=5)
        self._listener.close()


@pytest.fixture
def one_shot_server():
    """Start a OneShotServer for the given response bytes."""
    servers = []

    def _start(response: bytes) -> OneShotServer:
        server = OneShotServer(response).start()
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.stop()
