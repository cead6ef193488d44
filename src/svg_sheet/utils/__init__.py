"""Module initialization."""

from svg_sheet.utils.file_utils import (
    atomic_open,
    directory_snapshot,
    list_svg_files,
    normalize_path,
)

__all__ = [
    # File utilities
    "atomic_open",
    "directory_snapshot",
    "list_svg_files",
    "normalize_path",
]
