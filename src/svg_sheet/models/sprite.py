"""Data models for sprite assembly.

Defines the ordered attribute container used by the root scanner, plus the
Pydantic models that flow between the parser, the normalization pass, the
id registry, the writer and the incremental cache.
"""

from collections.abc import Iterable, Iterator
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Value stored for a key that appears without "=value" (e.g. ``<svg focusable>``)
BOOLEAN_ATTRIBUTE = True

AttributeValue = str | bool


class AttributeList:
    """Insertion-ordered list of root attributes.

    Keys are case-sensitive and may contain namespace colons. Order is kept
    because it is reproduced verbatim in the sprite. Setting an existing key
    replaces its value but keeps the position of its first occurrence.
    """

    def __init__(self, pairs: Iterable[tuple[str, AttributeValue]] = ()) -> None:
        """Initialize the list from key/value pairs.

        Args:
            pairs: Pairs in source order; repeated keys follow the set() rule.
        """
        self._pairs: list[tuple[str, AttributeValue]] = []
        for key, value in pairs:
            self.set(key, value)

    def _index(self, key: str) -> int | None:
        for index, (existing, _) in enumerate(self._pairs):
            if existing == key:
                return index
        return None

    def set(self, key: str, value: AttributeValue) -> bool:
        """Set a value, keeping the original position of an existing key.

        Args:
            key: Attribute name
            value: Attribute value or BOOLEAN_ATTRIBUTE

        Returns:
            True if an existing value was overwritten, False if the key is new.
        """
        index = self._index(key)
        if index is None:
            self._pairs.append((key, value))
            return False
        self._pairs[index] = (key, value)
        return True

    def get(self, key: str, default: AttributeValue | None = None) -> AttributeValue | None:
        """Return the value for key, or default when absent."""
        index = self._index(key)
        if index is None:
            return default
        return self._pairs[index][1]

    def replace_key(self, old_key: str, new_key: str) -> bool:
        """Rename a key in place, keeping its value and position.

        If new_key already exists elsewhere it is dropped so the renamed
        entry stays the only one.

        Args:
            old_key: Key to rename
            new_key: Replacement key

        Returns:
            True if old_key was present and renamed.
        """
        index = self._index(old_key)
        if index is None:
            return False
        value = self._pairs[index][1]
        self._pairs[index] = (new_key, value)
        self._pairs = [
            pair for i, pair in enumerate(self._pairs) if i == index or pair[0] != new_key
        ]
        return True

    def remove(self, key: str) -> AttributeValue | None:
        """Remove key and return its value, or None when absent."""
        index = self._index(key)
        if index is None:
            return None
        return self._pairs.pop(index)[1]

    def keys(self) -> list[str]:
        """Return keys in order."""
        return [key for key, _ in self._pairs]

    def items(self) -> list[tuple[str, AttributeValue]]:
        """Return a copy of the (key, value) pairs in order."""
        return list(self._pairs)

    def copy(self) -> "AttributeList":
        """Return an independent copy."""
        return AttributeList(self._pairs)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._index(key) is not None

    def __iter__(self) -> Iterator[tuple[str, AttributeValue]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributeList):
            return self._pairs == other._pairs
        if isinstance(other, list):
            return self._pairs == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"AttributeList({self._pairs!r})"


class SourceDocument(BaseModel):
    """Raw text of one input file plus its derived pattern name."""

    model_config = ConfigDict(frozen=True)

    name: str  # File name without extension
    origin: str  # Path or label used in messages
    text: str


class RootExtractionResult(BaseModel):
    """Attributes and raw inner markup of a document's root <svg>."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    attributes: AttributeList
    inner_markup: str
    self_closing: bool = False


class WarningKind(str, Enum):
    """Non-fatal diagnostic kinds."""

    MISSING_WIDTH = "MissingWidth"
    MISSING_HEIGHT = "MissingHeight"
    MISSING_VIEWBOX = "MissingViewBox"
    INVALID_VIEWBOX = "InvalidViewBox"
    ROOT_ID_RELOCATED = "RootIdRelocated"


class Diagnostic(BaseModel):
    """A non-fatal warning about one source file."""

    kind: WarningKind
    file: str
    detail: str

    def __str__(self) -> str:
        return f"{self.file}: {self.kind.value}: {self.detail}"


class PatternRecord(BaseModel):
    """One <pattern> ready to be written to the sprite."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    attributes: AttributeList
    inner_markup: str


class Fingerprint(BaseModel):
    """Modification time and content hash of one file."""

    model_config = ConfigDict(frozen=True)

    mtime_ns: int
    content_hash: str  # SHA-256 hex digest


class CacheEntry(BaseModel):
    """A processed source remembered between watch-mode rebuilds."""

    file_name: str
    fingerprint: Fingerprint
    record: PatternRecord
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class BuildResult(BaseModel):
    """Outcome of a successful build or rebuild."""

    pattern_ids: list[str] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    output_path: Path | None = None  # None on a dry run
    reprocessed: list[str] = Field(default_factory=list)  # Incremental rebuilds only

    @property
    def pattern_count(self) -> int:
        """Number of patterns written."""
        return len(self.pattern_ids)

    @property
    def warning_count(self) -> int:
        """Number of diagnostics collected."""
        return len(self.diagnostics)
