"""Tests for cache-gated rebuilds."""

import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from svg_sheet.exceptions import DuplicateIdError, ParseError, WarningsPresentError
from svg_sheet.models.config import BuildConfig
from svg_sheet.sprite.assembler import build_sprite, process_source
from svg_sheet.sprite.incremental import IncrementalBuilder

SvgWriter = Callable[[str, str], Path]


def _touch(path: Path) -> None:
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))


class TestIncrementalBuilder:
    """Test IncrementalBuilder."""

    def test_first_rebuild_processes_everything(
        self, build_config: BuildConfig, write_svg: SvgWriter, arrow_svg: str, circle_svg: str
    ):
        """With an empty cache every file is processed."""
        write_svg("arrow.svg", arrow_svg)
        write_svg("circle.svg", circle_svg)
        result = IncrementalBuilder(build_config).rebuild()
        assert result.reprocessed == ["arrow.svg", "circle.svg"]
        assert result.output_path == build_config.output

    def test_output_matches_full_build(
        self, build_config: BuildConfig, write_svg: SvgWriter, arrow_svg: str, circle_svg: str
    ):
        """An incremental rebuild writes the same sprite as a one-shot build."""
        write_svg("arrow.svg", arrow_svg)
        write_svg("circle.svg", circle_svg)
        build_sprite(build_config)
        expected = build_config.output.read_bytes()

        builder = IncrementalBuilder(build_config)
        builder.rebuild()
        builder.rebuild()
        assert build_config.output.read_bytes() == expected

    def test_only_touched_file_is_reprocessed(
        self, build_config: BuildConfig, write_svg: SvgWriter, arrow_svg: str, circle_svg: str
    ):
        """Touching one file reprocesses only that file."""
        write_svg("arrow.svg", arrow_svg)
        circle = write_svg("circle.svg", circle_svg)
        builder = IncrementalBuilder(build_config)
        builder.rebuild()

        _touch(circle)
        with patch("svg_sheet.sprite.incremental.process_source", wraps=process_source) as process:
            result = builder.rebuild()
        assert result.reprocessed == ["circle.svg"]
        assert process.call_count == 1
        assert result.pattern_ids == ["arrow", "circle"]

    def test_content_change_is_picked_up(
        self, build_config: BuildConfig, write_svg: SvgWriter, circle_svg: str
    ):
        """A modified file appears in the next sprite."""
        write_svg("circle.svg", circle_svg)
        builder = IncrementalBuilder(build_config)
        builder.rebuild()

        path = write_svg("circle.svg", circle_svg.replace('r="4"', 'r="3"'))
        _touch(path)
        builder.rebuild()
        assert 'r="3"' in build_config.output.read_text(encoding="utf-8")

    def test_removed_file_is_dropped(
        self, build_config: BuildConfig, write_svg: SvgWriter, arrow_svg: str, circle_svg: str
    ):
        """A deleted file disappears from the sprite and the cache."""
        write_svg("arrow.svg", arrow_svg)
        circle = write_svg("circle.svg", circle_svg)
        builder = IncrementalBuilder(build_config)
        builder.rebuild()

        circle.unlink()
        result = builder.rebuild()
        assert result.pattern_ids == ["arrow"]
        assert len(builder.cache) == 1

    def test_failed_rebuild_keeps_cache_and_output(
        self, build_config: BuildConfig, write_svg: SvgWriter, circle_svg: str
    ):
        """A failing rebuild leaves the previous sprite and cache in place."""
        write_svg("circle.svg", circle_svg)
        builder = IncrementalBuilder(build_config)
        builder.rebuild()
        previous = build_config.output.read_bytes()

        write_svg("broken.svg", "<svg><g/>")
        with pytest.raises(ParseError):
            builder.rebuild()
        assert build_config.output.read_bytes() == previous
        assert len(builder.cache) == 1

    def test_strict_rebuild_reports_cached_warnings(
        self, build_config: BuildConfig, write_svg: SvgWriter, bare_svg: str
    ):
        """Warnings of unchanged files still count in strict mode."""
        write_svg("bare.svg", bare_svg)
        builder = IncrementalBuilder(build_config)
        builder.rebuild()

        builder.config = build_config.model_copy(update={"strict": True})
        with pytest.raises(WarningsPresentError):
            builder.rebuild()

    def test_collisions_checked_against_cached_files(
        self, build_config: BuildConfig, write_svg: SvgWriter, circle_svg: str
    ):
        """Ids of unchanged files are registered again on every rebuild."""
        write_svg("circle.svg", circle_svg)
        builder = IncrementalBuilder(build_config)
        builder.rebuild()

        with patch(
            "svg_sheet.sprite.incremental.list_sources",
            return_value=[build_config.directory / "circle.svg"] * 2,
        ):
            with pytest.raises(DuplicateIdError):
                builder.rebuild()
