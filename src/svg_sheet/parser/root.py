"""Root element extraction for standalone SVG documents.

Locates the root ``<svg ...>`` start tag and its matching ``</svg>``, and
returns the root attributes together with the inner markup exactly as it
appears in the source. A leading byte order mark, XML declarations, a
document type declaration and comments before the root are skipped;
nothing inside the root is touched.
"""

from svg_sheet.constants import (
    BYTE_ORDER_MARK,
    CDATA_CLOSE,
    CDATA_OPEN,
    COMMENT_CLOSE,
    COMMENT_OPEN,
    DOCTYPE_OPEN,
    PROCESSING_INSTRUCTION_CLOSE,
    PROCESSING_INSTRUCTION_OPEN,
    ROOT_CLOSE_TOKEN,
    ROOT_OPEN_TOKEN,
)
from svg_sheet.exceptions import (
    NoRootElementError,
    UnbalancedRootError,
    UnterminatedRootElementError,
)
from svg_sheet.models.sprite import RootExtractionResult
from svg_sheet.parser.attributes import QUOTES, WHITESPACE, scan_attributes

# Characters that may follow "<svg" for it to be the svg tag name
_TAG_NAME_END = WHITESPACE | {">", "/"}

# Constructs that never contain the root element
_DELIMITED_CONSTRUCTS = (
    (COMMENT_OPEN, COMMENT_CLOSE),
    (CDATA_OPEN, CDATA_CLOSE),
    (PROCESSING_INSTRUCTION_OPEN, PROCESSING_INSTRUCTION_CLOSE),
)


def _find_doctype_end(text: str, pos: int) -> int:
    """Return the index just past a ``<!DOCTYPE ...>`` starting at pos.

    Quoted literals and an internal subset in ``[...]`` may contain ``>``.

    Returns:
        Index after the closing ``>``, or -1 if the declaration never closes.
    """
    quote: str | None = None
    depth = 0
    for index in range(pos + len(DOCTYPE_OPEN), len(text)):
        char = text[index]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in QUOTES:
            quote = char
        elif char == "[":
            depth += 1
        elif char == "]":
            depth = max(depth - 1, 0)
        elif char == ">" and depth == 0:
            return index + 1
    return -1


def _skip_construct(text: str, pos: int) -> int | None:
    """Skip a comment, CDATA section, processing instruction or DOCTYPE at pos.

    Returns:
        Index just past the construct, -1 if it is unterminated, or None if
        no such construct starts at pos.
    """
    if text.startswith(DOCTYPE_OPEN, pos):
        return _find_doctype_end(text, pos)
    for opener, closer in _DELIMITED_CONSTRUCTS:
        if text.startswith(opener, pos):
            end = text.find(closer, pos + len(opener))
            return -1 if end == -1 else end + len(closer)
    return None


def strip_preamble(text: str) -> str:
    """Remove a byte order mark and the prolog before the root.

    XML declarations, comments and a document type declaration are skipped,
    in any order. Skipping stops at the first construct that is none of
    these, or at one that is unterminated.

    Args:
        text: Full document text.

    Returns:
        The document starting at the first significant markup.
    """
    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK) :]

    while True:
        text = text.lstrip()
        if text.startswith(CDATA_OPEN):
            return text
        end = _skip_construct(text, 0)
        if end is None or end == -1:
            return text
        text = text[end:]


def _is_svg_open_at(text: str, pos: int) -> bool:
    end = pos + len(ROOT_OPEN_TOKEN)
    return text.startswith(ROOT_OPEN_TOKEN, pos) and (end == len(text) or text[end] in _TAG_NAME_END)


def _find_svg_open(text: str, start: int = 0) -> int:
    """Return the index of the first ``<svg`` tag outside comments and declarations."""
    pos = text.find("<", start)
    while pos != -1:
        if _is_svg_open_at(text, pos):
            return pos
        end = _skip_construct(text, pos)
        if end == -1:
            return -1
        pos = text.find("<", end if end is not None else pos + 1)
    return -1


def _find_tag_end(text: str, pos: int) -> int:
    """Return the index of the ``>`` closing a start tag, honouring quotes.

    Args:
        text: Document text.
        pos: Index just after the tag name.

    Returns:
        Index of the closing ``>``, or -1 if the tag never closes.
    """
    quote: str | None = None
    while pos < len(text):
        char = text[pos]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == ">":
            return pos
        pos += 1
    return -1


def _find_matching_close(text: str, pos: int) -> tuple[int, int] | None:
    """Find the ``</svg>`` that closes the element whose content starts at pos.

    Nested ``<svg>`` elements raise the depth, nested self-closing ``<svg/>``
    does not. Comments and CDATA sections are skipped.

    Returns:
        (start, end) of the matching close tag, or None when it is missing.
    """
    depth = 1
    while True:
        pos = text.find("<", pos)
        if pos == -1:
            return None
        if text.startswith(COMMENT_OPEN, pos):
            end = text.find(COMMENT_CLOSE, pos + len(COMMENT_OPEN))
            if end == -1:
                return None
            pos = end + len(COMMENT_CLOSE)
        elif text.startswith(CDATA_OPEN, pos):
            end = text.find(CDATA_CLOSE, pos + len(CDATA_OPEN))
            if end == -1:
                return None
            pos = end + len(CDATA_CLOSE)
        elif text.startswith(ROOT_CLOSE_TOKEN, pos):
            after = pos + len(ROOT_CLOSE_TOKEN)
            while after < len(text) and text[after] in WHITESPACE:
                after += 1
            if after < len(text) and text[after] == ">":
                depth -= 1
                if depth == 0:
                    return pos, after + 1
                pos = after + 1
            else:
                pos += 1
        elif _is_svg_open_at(text, pos):
            tag_end = _find_tag_end(text, pos + len(ROOT_OPEN_TOKEN))
            if tag_end == -1:
                return None
            if text[tag_end - 1] != "/":
                depth += 1
            pos = tag_end + 1
        else:
            pos += 1


def extract_root(text: str) -> RootExtractionResult:
    """Extract the root <svg> attributes and inner markup from a document.

    Args:
        text: Full document text.

    Returns:
        The scanned root attributes and the raw markup between the root start
        and end tags. A self-closing root yields empty inner markup.

    Raises:
        NoRootElementError: If no ``<svg`` start tag is present.
        UnterminatedRootElementError: If the start tag never closes with ``>``.
        UnbalancedRootError: If no matching ``</svg>`` follows the start tag.
        MalformedAttributeError: If the root attribute list cannot be scanned.
    """
    body = strip_preamble(text)
    start = _find_svg_open(body)
    if start == -1:
        raise NoRootElementError("No root <svg> element found")

    attrs_start = start + len(ROOT_OPEN_TOKEN)
    tag_end = _find_tag_end(body, attrs_start)
    if tag_end == -1:
        raise UnterminatedRootElementError(
            "Root <svg> start tag is never closed", {"offset": start}
        )

    attribute_text = body[attrs_start:tag_end]
    self_closing = attribute_text.endswith("/")
    if self_closing:
        attribute_text = attribute_text[:-1]
    attributes = scan_attributes(attribute_text)

    if self_closing:
        return RootExtractionResult(attributes=attributes, inner_markup="", self_closing=True)

    close = _find_matching_close(body, tag_end + 1)
    if close is None:
        raise UnbalancedRootError("No matching </svg> for root element", {"offset": start})

    return RootExtractionResult(attributes=attributes, inner_markup=body[tag_end + 1 : close[0]])
