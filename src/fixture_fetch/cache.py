"""Local cache check: decide whether an on-disk fixture can be trusted."""

import logging
from pathlib import Path

from fixture_fetch.digest import digest_hex
from fixture_fetch.logging.utilities import get_logger, log_with_context
from fixture_fetch.storage import read_bytes, remove_stale

logger = get_logger(__name__)


def check_local_copy(path: Path, expected_hash: str) -> bool:
    """
    Return True if ``path`` exists and hashes to ``expected_hash``.

    A file whose digest does not match is deleted before returning False,
    so mismatched bytes are never left in place.

    Raises:
        FilesystemError: The file could not be read or removed
    """
    if not path.is_file():
        return False

    actual = digest_hex(read_bytes(path))
    if actual == expected_hash.lower():
        return True

    log_with_context(
        logger,
        logging.WARNING,
        f"Local copy of {path.name} has a stale hash, removing",
        expected_hash=expected_hash,
        actual_hash=actual,
    )
    remove_stale(path)
    return False


__all__ = ["check_local_copy"]
