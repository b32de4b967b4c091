"""
Client configuration.

Defaults keep the behavior of a plain `webfetch URL` invocation: save into
the current directory and wait on the socket indefinitely. Settings are
given programmatically; no file or environment variable is consulted.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from webfetch.errors.exceptions import ConfigurationError

DEFAULT_CHUNK_SIZE = 4096


@dataclass
class ClientConfig:
    """Settings for a fetch.

    All timing values in seconds.
    """

    # Directory the response body is saved into
    output_dir: Path = field(default_factory=lambda: Path("."))

    # Socket timeout for connect and every read (None = block indefinitely)
    timeout: Optional[float] = None

    # Read size used when copying the body to disk
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        self.output_dir = Path(self.output_dir)
        self.validate()

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigurationError: If any setting is out of range
        """
        if self.timeout is not None:
            if isinstance(self.timeout, bool) or not isinstance(
                self.timeout, (int, float)
            ):
                raise ConfigurationError(
                    f"timeout must be a number of seconds, got {self.timeout!r}"
                )
            if self.timeout <= 0:
                raise ConfigurationError(
                    f"timeout must be positive, got {self.timeout}"
                )

        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int):
            raise ConfigurationError(
                f"chunk_size must be an integer, got {self.chunk_size!r}"
            )
        if self.chunk_size <= 0:
            raise ConfigurationError(
                f"chunk_size must be positive, got {self.chunk_size}"
            )
