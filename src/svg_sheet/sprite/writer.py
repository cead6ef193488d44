"""Streaming output for the combined sprite document.

The sprite is written one pattern at a time so memory use stays bounded by
a single source file. Real builds go through a temporary file that only
replaces the destination once the whole build has succeeded; dry runs write
to the null device.
"""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from svg_sheet.constants import PATTERN_CLOSE, SPRITE_FOOTER, SPRITE_HEADER
from svg_sheet.exceptions import OutputWriteError, chain_exception
from svg_sheet.models.sprite import PatternRecord
from svg_sheet.parser.attributes import escape_attribute_value, serialize_attributes
from svg_sheet.utils.file_utils import PathLike, atomic_open


def pattern_open_tag(record: PatternRecord) -> str:
    """Render the ``<pattern ...>`` start tag for a record."""
    pattern_id = escape_attribute_value(record.id)
    return f'<pattern id="{pattern_id}"{serialize_attributes(record.attributes)}>'


class SpriteWriter:
    """Writes the sprite document to a text sink incrementally.

    Attributes:
        patterns_written: Number of patterns written so far
    """

    def __init__(self, sink: TextIO) -> None:
        """Initialize the writer.

        Args:
            sink: Text stream receiving the sprite.
        """
        self._sink = sink
        self.patterns_written = 0

    def begin(self) -> None:
        """Write the sprite root and ``<defs>`` start tags."""
        self._sink.write(SPRITE_HEADER)

    def write_pattern(self, record: PatternRecord) -> None:
        """Write one pattern element; the inner markup is written untouched."""
        self._sink.write(pattern_open_tag(record))
        self._sink.write(record.inner_markup)
        self._sink.write(PATTERN_CLOSE)
        self.patterns_written += 1

    def finish(self) -> None:
        """Close ``<defs>`` and the sprite root, then flush the sink."""
        self._sink.write(SPRITE_FOOTER)
        self._sink.flush()


@contextmanager
def open_sprite_output(path: PathLike, dry_run: bool = False) -> Iterator[TextIO]:
    """Open the destination for a sprite build.

    The destination is replaced only when the ``with`` block completes
    without raising; on any error the previous file, if any, is kept.

    Args:
        path: Final sprite path.
        dry_run: Discard all output instead of writing it.

    Yields:
        A text stream for SpriteWriter.

    Raises:
        OutputWriteError: If the destination cannot be created or replaced.
    """
    if dry_run:
        with open(os.devnull, "w", encoding="utf-8") as sink:
            yield sink
        return

    try:
        with atomic_open(path) as handle:
            yield handle
    except OSError as e:
        raise chain_exception(
            OutputWriteError("Failed to write sprite", {"path": str(path), "error": str(e)}), e
        )
