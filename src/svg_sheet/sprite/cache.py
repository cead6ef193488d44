"""Fingerprint cache for incremental rebuilds in watch mode.

Each processed source is remembered together with its fingerprint, the
pair of modification time and SHA-256 content hash. A source is reprocessed
when either part changes or when it has no entry yet.
"""

import hashlib
import logging
from collections.abc import Iterable
from pathlib import Path

from svg_sheet.models.sprite import CacheEntry, Fingerprint
from svg_sheet.utils import file_utils

logger = logging.getLogger(__name__)


def fingerprint_of(mtime_ns: int, content: bytes) -> Fingerprint:
    """Build a fingerprint from a modification time and file content."""
    return Fingerprint(mtime_ns=mtime_ns, content_hash=hashlib.sha256(content).hexdigest())


def compute_fingerprint(path: file_utils.PathLike) -> tuple[Fingerprint, bytes]:
    """Fingerprint a file, returning its content as well.

    The content is returned so callers that need to reprocess the file do
    not read it twice.

    Raises:
        OSError: If the file cannot be read.
    """
    normalized_path = file_utils.normalize_path(path)
    mtime_ns = normalized_path.stat().st_mtime_ns
    content = file_utils.read_bytes(normalized_path)
    return fingerprint_of(mtime_ns, content), content


class IncrementalCache:
    """Processed sources keyed by path, valid for one watch session."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    @staticmethod
    def _key(path: file_utils.PathLike) -> str:
        return str(file_utils.normalize_path(path))

    def should_reprocess(self, path: file_utils.PathLike, fingerprint: Fingerprint) -> bool:
        """Check whether a file must be processed again.

        Args:
            path: Source file.
            fingerprint: Its current fingerprint.

        Returns:
            True if there is no entry for path or its fingerprint differs.
        """
        entry = self._entries.get(self._key(path))
        return entry is None or entry.fingerprint != fingerprint

    def get(self, path: file_utils.PathLike) -> CacheEntry | None:
        """Return the entry for path, if any."""
        return self._entries.get(self._key(path))

    def replace(self, entries: Iterable[tuple[Path, CacheEntry]]) -> None:
        """Replace the whole cache with fresh entries.

        Called after a successful rebuild; entries of files that no longer
        exist are dropped.

        Args:
            entries: (path, entry) for every file of the current file set.
        """
        fresh = {self._key(path): entry for path, entry in entries}
        dropped = set(self._entries) - set(fresh)
        if dropped:
            logger.debug(f"Dropping {len(dropped)} stale cache entries")
        self._entries = fresh

    def clear(self) -> None:
        """Forget all entries."""
        self._entries.clear()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and self._key(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
