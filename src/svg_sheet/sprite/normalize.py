"""Normalization and warning pass over an extracted root element.

Checks the sizing attributes of the root, relocates a root ``id`` to
``data-id`` in place and derives the pattern id from the file name. The pass
never fails; problems are reported as diagnostics. A relocation warning names
any reference to the old id left in the inner markup.
"""

import re
from pathlib import PurePath

from svg_sheet.constants import DATA_ID_ATTRIBUTE, VIEWBOX_TOKEN_COUNT
from svg_sheet.models.sprite import (
    BOOLEAN_ATTRIBUTE,
    Diagnostic,
    PatternRecord,
    RootExtractionResult,
    WarningKind,
)

_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_VIEWBOX_SEPARATOR = re.compile(r"[\s,]+")

# Ways inner markup can point at an element id: href, xlink:href and url()
_REFERENCE_TEMPLATE = r"""(?:xlink:)?href=(["'])#{id}\1|url\(#{id}\)"""

# Attributes that must be present on the root, with the warning for each
_REQUIRED_ATTRIBUTES = (
    ("width", WarningKind.MISSING_WIDTH),
    ("height", WarningKind.MISSING_HEIGHT),
    ("viewBox", WarningKind.MISSING_VIEWBOX),
)


def pattern_id_for(file_name: str) -> str:
    """Return the file name without its extension, unchanged otherwise.

    Args:
        file_name: A file name or path.

    Returns:
        The stem, used verbatim as the pattern id.
    """
    return PurePath(file_name).stem


def is_valid_viewbox(value: str) -> bool:
    """Check that a viewBox holds exactly four numbers.

    Numbers may be separated by whitespace and/or commas.

    Args:
        value: Raw viewBox attribute value.

    Returns:
        True if the value is four numeric tokens.
    """
    tokens = [token for token in _VIEWBOX_SEPARATOR.split(value.strip()) if token]
    return len(tokens) == VIEWBOX_TOKEN_COUNT and all(
        _NUMBER.fullmatch(token) for token in tokens
    )


def find_id_references(markup: str, element_id: str) -> list[str]:
    """Find references to an element id in markup.

    Args:
        markup: Markup to search, typically the inner markup of a root.
        element_id: The id being referenced, without ``#``.

    Returns:
        Each distinct reference text, in order of first occurrence.
    """
    pattern = re.compile(_REFERENCE_TEMPLATE.format(id=re.escape(element_id)))
    references: list[str] = []
    for match in pattern.finditer(markup):
        if match.group(0) not in references:
            references.append(match.group(0))
    return references


def normalize_root(
    extraction: RootExtractionResult, name: str
) -> tuple[PatternRecord, list[Diagnostic]]:
    """Turn an extracted root into a pattern record plus diagnostics.

    Rules, in order: warn for a missing width, height and viewBox; warn for
    a viewBox that is not four numbers (the value is kept); move a root
    ``id`` to ``data-id`` at the same position. The pattern id is always the
    given name, never the root id.

    Args:
        extraction: Result of extract_root for one document.
        name: File-derived pattern id.

    Returns:
        The pattern record and the diagnostics for this file.
    """
    attributes = extraction.attributes.copy()
    diagnostics: list[Diagnostic] = []

    for key, kind in _REQUIRED_ATTRIBUTES:
        if key not in attributes:
            diagnostics.append(
                Diagnostic(kind=kind, file=name, detail=f"Missing {key} on root <svg>")
            )

    viewbox = attributes.get("viewBox")
    if viewbox is not None and (viewbox is BOOLEAN_ATTRIBUTE or not is_valid_viewbox(str(viewbox))):
        shown = "" if viewbox is BOOLEAN_ATTRIBUTE else viewbox
        diagnostics.append(
            Diagnostic(
                kind=WarningKind.INVALID_VIEWBOX,
                file=name,
                detail=f"viewBox '{shown}' is not four numbers",
            )
        )

    root_id = attributes.get("id")
    if root_id is not None:
        replaced = attributes.get(DATA_ID_ATTRIBUTE)
        attributes.replace_key("id", DATA_ID_ATTRIBUTE)
        shown = "" if root_id is BOOLEAN_ATTRIBUTE else root_id
        detail = f"Root <svg> id '{shown}' moved to {DATA_ID_ATTRIBUTE}"
        if replaced is not None:
            old = "" if replaced is BOOLEAN_ATTRIBUTE else replaced
            detail += f", replacing {DATA_ID_ATTRIBUTE} '{old}'"
        if shown:
            references = find_id_references(extraction.inner_markup, shown)
            if references:
                detail += f"; still referenced by {', '.join(references)}"
        diagnostics.append(
            Diagnostic(kind=WarningKind.ROOT_ID_RELOCATED, file=name, detail=detail)
        )

    record = PatternRecord(id=name, attributes=attributes, inner_markup=extraction.inner_markup)
    return record, diagnostics
