"""Common fixtures for testing svg-sheet."""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from svg_sheet.models.config import BuildConfig

# A well-formed icon with every sizing attribute present
ARROW_SVG = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<!-- exported -->\n"
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">'
    '<path d="M0 0L24 24"/>'
    "</svg>\n"
)

CIRCLE_SVG = (
    '<svg width="10" height="10" viewBox="0 0 10 10"><circle cx="5" cy="5" r="4"/></svg>'
)

# Root with none of width, height or viewBox
BARE_SVG = "<svg><rect/></svg>"

SvgWriter = Callable[[str, str], Path]


@pytest.fixture()
def arrow_svg() -> str:
    """Return a complete icon with an XML declaration and a comment."""
    return ARROW_SVG


@pytest.fixture()
def circle_svg() -> str:
    """Return a minimal complete icon."""
    return CIRCLE_SVG


@pytest.fixture()
def bare_svg() -> str:
    """Return an icon missing width, height and viewBox."""
    return BARE_SVG


@pytest.fixture()
def svg_dir(tmp_path: Path) -> Path:
    """Create an empty input directory."""
    directory = tmp_path / "svgs"
    directory.mkdir()
    return directory


@pytest.fixture()
def write_svg(svg_dir: Path) -> SvgWriter:
    """Return a helper that writes a file into the input directory."""

    def _write(name: str, content: str) -> Path:
        path = svg_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def build_config(svg_dir: Path, tmp_path: Path) -> BuildConfig:
    """Create a build configuration writing outside the input directory."""
    return BuildConfig(directory=svg_dir, output=tmp_path / "out" / "sprite.svg")


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo handler and level changes made by setup_logging."""
    logger = logging.getLogger("svg_sheet")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
