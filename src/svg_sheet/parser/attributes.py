"""Attribute list scanner for the root <svg> start tag.

Turns the raw text between ``<svg`` and ``>`` into an ordered AttributeList.
The grammar is lenient and not full XML:

- a key is one or more of ``[A-Za-z0-9_:-]``
- a key may stand alone (boolean attribute) or be followed by ``=`` and a
  value quoted with ``"`` or ``'``; whitespace is allowed around ``=``
- declarations are separated by whitespace
- a repeated key keeps its first position and takes the last value
"""

import logging
import string

from svg_sheet.exceptions import MalformedAttributeError
from svg_sheet.models.sprite import BOOLEAN_ATTRIBUTE, AttributeList, AttributeValue

logger = logging.getLogger(__name__)

KEY_CHARACTERS = frozenset(string.ascii_letters + string.digits + "_:-")
WHITESPACE = frozenset(" \t\r\n\f")
QUOTES = frozenset("\"'")
_FRAGMENT_LIMIT = 24


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in WHITESPACE:
        pos += 1
    return pos


def _malformed(message: str, text: str, start: int, end: int) -> MalformedAttributeError:
    fragment = text[start:end]
    if len(fragment) > _FRAGMENT_LIMIT:
        fragment = fragment[:_FRAGMENT_LIMIT] + "..."
    return MalformedAttributeError(message, {"span": (start, end), "fragment": fragment})


def scan_attributes(text: str) -> AttributeList:
    """Scan a raw attribute string into an ordered AttributeList.

    Args:
        text: Attribute text of a start tag, without the tag name or ``>``.

    Returns:
        The attributes in source order. Valueless keys map to BOOLEAN_ATTRIBUTE.

    Raises:
        MalformedAttributeError: On an invalid key character, an unquoted or
            missing value, an unterminated quote, or a value not followed by
            whitespace. ``details["span"]`` holds the offending offsets.
    """
    attributes = AttributeList()
    length = len(text)
    pos = _skip_whitespace(text, 0)

    while pos < length:
        key_start = pos
        while pos < length and text[pos] in KEY_CHARACTERS:
            pos += 1
        if pos == key_start:
            raise _malformed("Invalid character in attribute name", text, pos, pos + 1)
        key = text[key_start:pos]
        key_end = pos

        value: AttributeValue
        pos = _skip_whitespace(text, pos)
        if pos < length and text[pos] == "=":
            pos = _skip_whitespace(text, pos + 1)
            if pos >= length or text[pos] not in QUOTES:
                raise _malformed(
                    f"Attribute '{key}' has no quoted value", text, key_start, min(pos + 1, length)
                )
            quote = text[pos]
            close = text.find(quote, pos + 1)
            if close == -1:
                raise _malformed(f"Unterminated value for attribute '{key}'", text, pos, length)
            value = text[pos + 1 : close]
            pos = close + 1
            if pos < length and text[pos] not in WHITESPACE:
                raise _malformed(
                    f"Expected whitespace after value of attribute '{key}'", text, pos, pos + 1
                )
        else:
            if pos == key_end and pos < length:
                raise _malformed(
                    "Invalid character in attribute name", text, key_start, pos + 1
                )
            value = BOOLEAN_ATTRIBUTE

        if attributes.set(key, value):
            logger.debug(f"Duplicate attribute '{key}': keeping the last value")
        pos = _skip_whitespace(text, pos)

    return attributes


def escape_attribute_value(value: str) -> str:
    """Escape a value for output inside double quotes.

    Only ``"`` is replaced; the value is otherwise passed through verbatim,
    so existing entity references are left alone.
    """
    return value.replace('"', "&quot;")


def serialize_attributes(attributes: AttributeList) -> str:
    """Render attributes as they appear after a tag name.

    Each declaration is preceded by one space. Boolean attributes are written
    as the bare key.

    Args:
        attributes: Attributes to render, in order.

    Returns:
        The rendered text, empty when there are no attributes.
    """
    parts: list[str] = []
    for key, value in attributes:
        if value is BOOLEAN_ATTRIBUTE:
            parts.append(f" {key}")
        else:
            parts.append(f' {key}="{escape_attribute_value(str(value))}"')
    return "".join(parts)
