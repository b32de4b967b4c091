"""Log context propagated through contextvars."""

import secrets
from contextvars import ContextVar
from datetime import datetime
from typing import Dict, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_host: ContextVar[Optional[str]] = ContextVar("host", default=None)
_stage: ContextVar[Optional[str]] = ContextVar("stage", default=None)


def set_log_context(
    request_id: Optional[str] = None,
    host: Optional[str] = None,
    stage: Optional[str] = None,
) -> None:
    """
    Set log context values.

    Only the arguments that are given are changed.

    Args:
        request_id: Identifier of the current fetch
        host: Remote host being contacted
        stage: Current step of the fetch (parse, connect, request, response, save)
    """
    if request_id is not None:
        _request_id.set(request_id)
    if host is not None:
        _host.set(host)
    if stage is not None:
        _stage.set(stage)


def get_log_context() -> Dict[str, Optional[str]]:
    """Return the current log context as a dict."""
    return {
        "request_id": _request_id.get(),
        "host": _host.get(),
        "stage": _stage.get(),
    }


def clear_log_context() -> None:
    """Reset all log context values."""
    _request_id.set(None)
    _host.set(None)
    _stage.set(None)


def generate_request_id() -> str:
    """
    Generate unique request identifier.

    Format: r-YYYYMMDD-HHMMSS-XXXX where XXXX is random hex.

    Returns:
        Unique request ID string
    """
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    suffix = secrets.token_hex(2)
    return f"r-{ts}-{suffix}"
