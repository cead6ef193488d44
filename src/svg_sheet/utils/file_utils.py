"""File system helpers for svg-sheet.

Provides a consistent interface for the file operations a build needs:
reading sources, enumerating the input directory, taking change snapshots
for watch mode and writing the sprite atomically.
"""

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from svg_sheet.constants import SVG_GLOB, TEMP_FILE_PREFIX, TEMP_FILE_SUFFIX

# Type aliases for clarity and documentation
PathLike = str | Path
Snapshot = dict[str, tuple[int, int]]  # file name -> (mtime_ns, size)


def normalize_path(path: PathLike) -> Path:
    """Convert a string path to an absolute Path with ``~`` expanded."""
    return Path(path).expanduser().absolute()


def read_text(file_path: PathLike) -> str:
    """Read UTF-8 text content from a file.

    Args:
        file_path: Path to the file (string or Path object)

    Returns:
        The text content of the file

    Raises:
        FileNotFoundError: If the file does not exist
        PermissionError: If the file cannot be read due to permissions
        UnicodeDecodeError: If the file content cannot be decoded as text
    """
    normalized_path = normalize_path(file_path)
    with open(normalized_path, encoding="utf-8") as f:
        return f.read()


def read_bytes(file_path: PathLike) -> bytes:
    """Read binary content from a file.

    Args:
        file_path: Path to the file (string or Path object)

    Returns:
        The binary content of the file

    Raises:
        FileNotFoundError: If the file does not exist
        PermissionError: If the file cannot be read due to permissions
    """
    normalized_path = normalize_path(file_path)
    with open(normalized_path, "rb") as f:
        return f.read()


def ensure_dir_exists(dir_path: PathLike) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        dir_path: Directory path (string or Path object)

    Returns:
        Path to the directory

    Raises:
        PermissionError: If the directory cannot be created due to permissions
    """
    normalized_path = normalize_path(dir_path)
    normalized_path.mkdir(parents=True, exist_ok=True)
    return normalized_path


def list_svg_files(dir_path: PathLike, exclude: PathLike | None = None) -> list[Path]:
    """List the SVG files directly inside a directory, sorted by name.

    Args:
        dir_path: Path to the directory (string or Path object)
        exclude: Optional file to leave out, typically the sprite itself when
            it is written into the input directory

    Returns:
        Files matching ``*.svg`` (directories excluded), sorted by file name

    Raises:
        FileNotFoundError: If the directory does not exist
        NotADirectoryError: If the path exists but is not a directory
    """
    normalized_path = normalize_path(dir_path)

    if not normalized_path.exists():
        raise FileNotFoundError(f"Directory not found: {normalized_path}")

    if not normalized_path.is_dir():
        raise NotADirectoryError(f"Not a directory: {normalized_path}")

    excluded = normalize_path(exclude) if exclude is not None else None
    paths = [
        p for p in normalized_path.glob(SVG_GLOB) if p.is_file() and p != excluded
    ]
    return sorted(paths, key=lambda p: p.name)


def directory_snapshot(dir_path: PathLike, exclude: PathLike | None = None) -> Snapshot:
    """Capture name, modification time and size of every SVG in a directory.

    Two snapshots compare equal when no SVG file was added, removed or
    touched in between. Files that vanish while the snapshot is taken are
    skipped.

    Args:
        dir_path: Path to the directory (string or Path object)
        exclude: Optional file to leave out

    Returns:
        Mapping of file name to (mtime_ns, size)

    Raises:
        FileNotFoundError: If the directory does not exist
        NotADirectoryError: If the path exists but is not a directory
    """
    snapshot: Snapshot = {}
    for path in list_svg_files(dir_path, exclude):
        try:
            stat = path.stat()
        except FileNotFoundError:
            continue
        snapshot[path.name] = (stat.st_mtime_ns, stat.st_size)
    return snapshot


def create_temp_file(
    suffix: str | None = None, prefix: str | None = None, directory: PathLike | None = None
) -> Path:
    """Create a temporary file with an optional suffix, prefix and directory.

    Args:
        suffix: Optional suffix for the filename
        prefix: Optional prefix for the filename
        directory: Optional directory to create the file in

    Returns:
        Path to the created temporary file
    """
    temp_dir = None if directory is None else ensure_dir_exists(directory)

    temp_file = tempfile.NamedTemporaryFile(
        dir=temp_dir, prefix=prefix, suffix=suffix, delete=False
    )

    # Close the file handle but keep the file
    temp_file.close()

    return Path(temp_file.name)


@contextmanager
def atomic_open(file_path: PathLike, make_dirs: bool = True) -> Iterator[TextIO]:
    """Open a text stream whose content replaces file_path only on success.

    Content is written to a temporary file in the destination directory and
    moved into place when the ``with`` block exits normally. If the block
    raises, the temporary file is removed and the destination is untouched.
    Newlines are written exactly as given.

    Args:
        file_path: Path to the file (string or Path object)
        make_dirs: Whether to create parent directories if they don't exist

    Yields:
        A UTF-8 text stream

    Raises:
        FileNotFoundError: If the parent directory does not exist and make_dirs is False
        PermissionError: If the file cannot be written due to permissions
    """
    normalized_path = normalize_path(file_path)

    if make_dirs:
        ensure_dir_exists(normalized_path.parent)
    elif not normalized_path.parent.is_dir():
        raise FileNotFoundError(f"Directory not found: {normalized_path.parent}")

    temp_file = create_temp_file(
        suffix=TEMP_FILE_SUFFIX, prefix=TEMP_FILE_PREFIX, directory=normalized_path.parent
    )

    try:
        with open(temp_file, "w", encoding="utf-8", newline="") as handle:
            yield handle

        # Move the temporary file to the target location (atomic on POSIX systems)
        os.replace(temp_file, normalized_path)
    finally:
        # Clean up the temporary file if anything went wrong
        if temp_file.exists():
            temp_file.unlink()

