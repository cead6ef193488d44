"""Cache-gated rebuilds for watch mode.

Every rebuild looks at the complete current file set: unchanged files reuse
their cached pattern record, changed or new files are processed again, and
pattern ids of all files are registered afresh so a new file colliding with
an untouched one is still caught.
"""

import logging
from pathlib import Path

from svg_sheet.exceptions import SourceReadError, chain_exception
from svg_sheet.models.config import BuildConfig
from svg_sheet.models.sprite import BuildResult, CacheEntry
from svg_sheet.sprite.assembler import (
    ProcessedSource,
    SpriteAssembler,
    decode_source,
    list_sources,
    process_source,
)
from svg_sheet.sprite.cache import IncrementalCache, compute_fingerprint
from svg_sheet.sprite.writer import open_sprite_output
from svg_sheet.utils import file_utils


class IncrementalBuilder:
    """Rebuilds the sprite, reprocessing only files whose fingerprint changed.

    Attributes:
        config: Build configuration
        cache: Processed sources from the last successful rebuild
        logger: Logger instance
    """

    def __init__(self, config: BuildConfig, cache: IncrementalCache | None = None) -> None:
        """Initialize the builder.

        Args:
            config: Build configuration.
            cache: Cache to start from; a new empty cache by default.
        """
        self.config = config
        self.cache = cache if cache is not None else IncrementalCache()
        self.logger = logging.getLogger(__name__)

    def _load_entry(self, path: Path) -> tuple[CacheEntry, bool]:
        """Return the cache entry for path, processing the file if needed.

        Returns:
            The entry and whether the file was processed again.
        """
        try:
            fingerprint, content = compute_fingerprint(path)
        except OSError as e:
            raise chain_exception(
                SourceReadError("Failed to read source file", {"file": str(path), "error": str(e)}),
                e,
            )

        cached = self.cache.get(path)
        if cached is not None and not self.cache.should_reprocess(path, fingerprint):
            self.logger.debug(f"Unchanged, reusing cached pattern: {path.name}")
            return cached, False

        record, diagnostics = process_source(decode_source(path, content))
        entry = CacheEntry(
            file_name=path.name, fingerprint=fingerprint, record=record, diagnostics=diagnostics
        )
        return entry, True

    def rebuild(self) -> BuildResult:
        """Rebuild the sprite from the current file set.

        The cache is replaced only after the sprite was written successfully,
        so a failed rebuild leaves both the output file and the cache as they
        were.

        Returns:
            The build result, with ``reprocessed`` listing the file names that
            were processed again.

        Raises:
            SvgSheetError: Any build-aborting error.
        """
        files = list_sources(self.config)

        processed: list[ProcessedSource] = []
        fresh: list[tuple[Path, CacheEntry]] = []
        reprocessed: list[str] = []
        for path in files:
            entry, changed = self._load_entry(path)
            if changed:
                reprocessed.append(path.name)
            processed.append((str(path), entry.record, entry.diagnostics))
            fresh.append((path, entry))

        with open_sprite_output(self.config.output, dry_run=self.config.dry_run) as sink:
            result = SpriteAssembler(strict=self.config.strict).write_processed(processed, sink)

        self.cache.replace(fresh)
        result.reprocessed = reprocessed
        if not self.config.dry_run:
            result.output_path = file_utils.normalize_path(self.config.output)
        self.logger.info(
            f"Rebuilt sprite: {result.pattern_count} pattern(s), "
            f"{len(reprocessed)} file(s) reprocessed"
        )
        return result
