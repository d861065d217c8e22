"""Context variables injected into every log record by the formatters."""

import secrets
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Dict, Iterator, Optional

_asset: ContextVar[Optional[str]] = ContextVar("asset", default=None)
_run_id: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def set_log_context(
    asset: Optional[str] = None,
    run_id: Optional[str] = None,
) -> None:
    """Set context values. None leaves the current value unchanged."""
    if asset is not None:
        _asset.set(asset)
    if run_id is not None:
        _run_id.set(run_id)


def get_log_context() -> Dict[str, Optional[str]]:
    return {"asset": _asset.get(), "run_id": _run_id.get()}


def clear_log_context() -> None:
    _asset.set(None)
    _run_id.set(None)


@contextmanager
def asset_log_context(filename: str) -> Iterator[None]:
    """Tag log records emitted inside the block with the asset filename."""
    token = _asset.set(filename)
    try:
        yield
    finally:
        _asset.reset(token)


def generate_run_id() -> str:
    """
    Generate unique run identifier.

    Format: r-YYYYMMDD-HHMMSS-XXXX where XXXX is random hex.
    """
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    return f"r-{ts}-{secrets.token_hex(2)}"
