"""Sprite assembly: from source files to one streamed sprite document.

For every source, in file name order, the assembler extracts the root
element, runs the normalization pass, registers the pattern id and writes
one ``<pattern>``. Any parse error, read error or id collision aborts the
whole build; in strict mode collected warnings abort it after every file
has been scanned.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePath
from typing import TextIO

from svg_sheet.exceptions import (
    InputDirectoryError,
    NoSvgFilesError,
    ParseError,
    SourceReadError,
    WarningsPresentError,
    chain_exception,
)
from svg_sheet.models.config import BuildConfig
from svg_sheet.models.sprite import BuildResult, Diagnostic, PatternRecord, SourceDocument
from svg_sheet.parser.root import extract_root
from svg_sheet.sprite.normalize import normalize_root, pattern_id_for
from svg_sheet.sprite.registry import IdRegistry
from svg_sheet.sprite.writer import SpriteWriter, open_sprite_output
from svg_sheet.utils import file_utils

logger = logging.getLogger(__name__)

SourceInput = str | Path | SourceDocument

# (origin, record, diagnostics) for one processed source
ProcessedSource = tuple[str, PatternRecord, list[Diagnostic]]


def decode_source(path: file_utils.PathLike, data: bytes) -> SourceDocument:
    """Build a SourceDocument from the raw bytes of a file.

    Args:
        path: Where the bytes came from; its stem becomes the pattern name.
        data: File content.

    Returns:
        The decoded document.

    Raises:
        SourceReadError: If the content is not valid UTF-8.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise chain_exception(
            SourceReadError("Source file is not valid UTF-8", {"file": str(path), "error": str(e)}),
            e,
        )
    return SourceDocument(name=pattern_id_for(PurePath(path).name), origin=str(path), text=text)


def load_source(path: file_utils.PathLike) -> SourceDocument:
    """Read one source file.

    Raises:
        SourceReadError: If the file cannot be read or decoded.
    """
    try:
        data = file_utils.read_bytes(path)
    except OSError as e:
        raise chain_exception(
            SourceReadError("Failed to read source file", {"file": str(path), "error": str(e)}), e
        )
    return decode_source(path, data)


def process_source(document: SourceDocument) -> tuple[PatternRecord, list[Diagnostic]]:
    """Extract and normalize the root element of one document.

    Args:
        document: Source to process.

    Returns:
        The pattern record and the diagnostics for this document.

    Raises:
        ParseError: If the root element cannot be extracted; ``details``
            names the source file.
    """
    try:
        extraction = extract_root(document.text)
    except ParseError as e:
        raise e.with_file(document.origin)
    return normalize_root(extraction, document.name)


def list_sources(config: BuildConfig) -> list[Path]:
    """List the SVG files a build should read.

    The sprite itself is left out when it lives in the input directory.

    Raises:
        InputDirectoryError: If the input directory cannot be listed.
        NoSvgFilesError: If it holds no SVG files.
    """
    try:
        files = file_utils.list_svg_files(config.directory, exclude=config.output)
    except OSError as e:
        raise chain_exception(
            InputDirectoryError(
                "Failed to read input directory",
                {"directory": str(config.directory), "error": str(e)},
            ),
            e,
        )
    if not files:
        raise NoSvgFilesError("No SVG files found", {"directory": str(config.directory)})
    return files


def _sort_key(source: SourceInput) -> tuple[str, str]:
    origin = source.origin if isinstance(source, SourceDocument) else str(source)
    return PurePath(origin).name, origin


class SpriteAssembler:
    """Runs the per-file pipeline and streams the sprite.

    Attributes:
        strict: Whether collected warnings fail the build
    """

    def __init__(self, strict: bool = False) -> None:
        """Initialize the assembler.

        Args:
            strict: Whether collected warnings fail the build.
        """
        self.strict = strict

    def assemble(self, sources: Iterable[SourceInput], sink: TextIO) -> BuildResult:
        """Process sources in file name order and write the sprite to sink.

        Sources given as paths are read one at a time while writing, so only
        one file is held in memory.

        Args:
            sources: Paths or already loaded documents.
            sink: Text stream receiving the sprite.

        Returns:
            The pattern ids written and the diagnostics collected.

        Raises:
            ParseError: If a source has no usable root element.
            SourceReadError: If a source cannot be read.
            DuplicateIdError: If two sources derive the same pattern id.
            WarningsPresentError: In strict mode, if any diagnostic was collected.
        """
        return self.write_processed(self._process_all(sorted(sources, key=_sort_key)), sink)

    def _process_all(self, sources: list[SourceInput]) -> Iterator[ProcessedSource]:
        for source in sources:
            document = source if isinstance(source, SourceDocument) else load_source(source)
            record, diagnostics = process_source(document)
            yield document.origin, record, diagnostics

    def write_processed(self, processed: Iterable[ProcessedSource], sink: TextIO) -> BuildResult:
        """Register and write already processed sources, in the given order.

        A fresh id registry is used for every call, so collisions are checked
        against exactly the sources passed in.

        Args:
            processed: (origin, record, diagnostics) per source.
            sink: Text stream receiving the sprite.

        Returns:
            The pattern ids written and the diagnostics collected.

        Raises:
            DuplicateIdError: If two sources derive the same pattern id.
            WarningsPresentError: In strict mode, if any diagnostic was collected.
        """
        registry = IdRegistry()
        writer = SpriteWriter(sink)
        result = BuildResult()

        writer.begin()
        for origin, record, diagnostics in processed:
            registry.register(record.id, origin)
            for diagnostic in diagnostics:
                logger.warning(f"{diagnostic.kind.value} in {origin}: {diagnostic.detail}")
            result.diagnostics.extend(diagnostics)
            writer.write_pattern(record)
            result.pattern_ids.append(record.id)
        writer.finish()

        if self.strict and result.diagnostics:
            raise WarningsPresentError(result.diagnostics)
        return result


def build_sprite(config: BuildConfig) -> BuildResult:
    """Build the sprite for a directory in one pass.

    The destination is only replaced when every file was processed and, in
    strict mode, no warning was collected.

    Args:
        config: Input directory, output path, strict and dry-run flags.

    Returns:
        The build result; ``output_path`` is None for a dry run.

    Raises:
        SvgSheetError: Any build-aborting error; the destination is unchanged.
    """
    files = list_sources(config)
    logger.info(f"Building sprite from {len(files)} file(s) in {config.directory}")

    with open_sprite_output(config.output, dry_run=config.dry_run) as sink:
        result = SpriteAssembler(strict=config.strict).assemble(files, sink)

    if config.dry_run:
        logger.info(f"Dry run: {result.pattern_count} pattern(s), output not written")
        return result

    result.output_path = file_utils.normalize_path(config.output)
    logger.info(f"Wrote {result.pattern_count} pattern(s) to {result.output_path}")
    return result
