"""Pattern id registry for one build."""

from svg_sheet.exceptions import DuplicateIdError


class IdRegistry:
    """Tracks the pattern ids emitted during one build.

    A registry belongs to a single build or rebuild; create a new one (or
    call clear()) for each pass so collisions are always checked against the
    complete current file set.
    """

    def __init__(self) -> None:
        self._owners: dict[str, str] = {}

    def register(self, pattern_id: str, source: str) -> None:
        """Record a pattern id, rejecting an exact repeat.

        Args:
            pattern_id: Pattern id to record; compared case-sensitively.
            source: File that produced the id, used in the error message.

        Raises:
            DuplicateIdError: If the id was already registered in this build.
        """
        first = self._owners.get(pattern_id)
        if first is not None:
            raise DuplicateIdError(pattern_id, first, source)
        self._owners[pattern_id] = source

    def owner(self, pattern_id: str) -> str | None:
        """Return the source that registered pattern_id, if any."""
        return self._owners.get(pattern_id)

    def clear(self) -> None:
        """Forget all registered ids."""
        self._owners.clear()

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._owners

    def __len__(self) -> int:
        return len(self._owners)
