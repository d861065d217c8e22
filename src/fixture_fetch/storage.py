"""
Filesystem boundary: atomic writes and stale-file removal.

OSError is converted to FilesystemError so callers see one error taxonomy.
"""

import contextlib
import os
import tempfile
from pathlib import Path

from fixture_fetch.errors import FilesystemError


def write_atomic(path: Path, data: bytes) -> None:
    """
    Write ``data`` to ``path`` via a temp file in the same directory.

    The target either keeps its previous content or holds the complete new
    content; a failed write never leaves a partial file under ``path``.

    Raises:
        FilesystemError: Directory creation, write or rename failed
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(
            f"Cannot create directory {path.parent}",
            cause=e,
            context={"path": str(path.parent)},
        ) from e

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".part"
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise FilesystemError(
            f"Cannot write {path}",
            cause=e,
            context={"path": str(path)},
        ) from e


def read_bytes(path: Path) -> bytes:
    """Read a whole file, raising FilesystemError on failure."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise FilesystemError(
            f"Cannot read {path}", cause=e, context={"path": str(path)}
        ) from e


def remove_stale(path: Path) -> None:
    """Delete ``path`` if present, raising FilesystemError on failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise FilesystemError(
            f"Cannot remove stale file {path}", cause=e, context={"path": str(path)}
        ) from e


__all__ = ["write_atomic", "read_bytes", "remove_stale"]
