"""Tests for the root attribute scanner."""

import pytest

from svg_sheet.exceptions import MalformedAttributeError
from svg_sheet.models.sprite import BOOLEAN_ATTRIBUTE, AttributeList
from svg_sheet.parser.attributes import (
    escape_attribute_value,
    scan_attributes,
    serialize_attributes,
)


class TestScanAttributes:
    """Test scan_attributes."""

    def test_empty_text(self):
        """Empty or blank text yields no attributes."""
        assert len(scan_attributes("")) == 0
        assert len(scan_attributes("  \n\t ")) == 0

    def test_preserves_order(self):
        """Attributes come back in source order."""
        result = scan_attributes(' width="24" height="24" viewBox="0 0 24 24"')
        assert result.keys() == ["width", "height", "viewBox"]
        assert result.get("viewBox") == "0 0 24 24"

    def test_mixed_quoting(self):
        """Single and double quoted values are both accepted verbatim."""
        result = scan_attributes(" width='10' data-x=\"it's\"")
        assert result == [("width", "10"), ("data-x", "it's")]

    def test_boolean_attribute(self):
        """A key without a value is a boolean attribute."""
        result = scan_attributes(' disabled width="1"')
        assert result == [("disabled", BOOLEAN_ATTRIBUTE), ("width", "1")]

    def test_boolean_attribute_last(self):
        """A boolean attribute may end the attribute text."""
        result = scan_attributes(' width="1" focusable')
        assert result.get("focusable") is BOOLEAN_ATTRIBUTE

    def test_namespaced_keys(self):
        """Keys may contain colons, hyphens and underscores."""
        result = scan_attributes(' xmlns:xlink="http://www.w3.org/1999/xlink" data-a_b="1"')
        assert result.keys() == ["xmlns:xlink", "data-a_b"]

    def test_whitespace_around_equals(self):
        """Whitespace is allowed on both sides of '='."""
        result = scan_attributes(' width = "10"\n\theight=\n"20"')
        assert result == [("width", "10"), ("height", "20")]

    def test_value_may_contain_special_characters(self):
        """Quoted values keep '>', '=' and the other quote character."""
        result = scan_attributes(" title=\"a > b = 'c'\"")
        assert result.get("title") == "a > b = 'c'"

    def test_empty_value(self):
        """An empty quoted value is a string, not a boolean attribute."""
        result = scan_attributes(' class=""')
        assert result.get("class") == ""

    def test_duplicate_key_last_value_first_position(self):
        """A repeated key keeps its first position and takes the last value."""
        result = scan_attributes(' a="1" b="2" a="3"')
        assert result == [("a", "3"), ("b", "2")]

    def test_case_sensitive_keys(self):
        """Keys differing only in case are distinct."""
        result = scan_attributes(' viewBox="0 0 1 1" viewbox="x"')
        assert result.keys() == ["viewBox", "viewbox"]

    def test_unquoted_value(self):
        """An unquoted value is rejected."""
        with pytest.raises(MalformedAttributeError) as exc_info:
            scan_attributes(" width=10")
        assert "width" in exc_info.value.message

    def test_missing_value(self):
        """'=' at the end of the text is rejected."""
        with pytest.raises(MalformedAttributeError):
            scan_attributes(' width=')

    def test_unterminated_value(self):
        """An unterminated quote is rejected with the span of the value."""
        text = ' width="10 height="20'
        with pytest.raises(MalformedAttributeError) as exc_info:
            scan_attributes(' width="10')
        assert exc_info.value.details["span"] == (7, 10)
        with pytest.raises(MalformedAttributeError):
            scan_attributes(text + ' x="')

    def test_missing_whitespace_after_value(self):
        """Two declarations must be separated by whitespace."""
        with pytest.raises(MalformedAttributeError) as exc_info:
            scan_attributes(' a="1"b="2"')
        assert exc_info.value.details["span"] == (6, 7)

    def test_invalid_key_character(self):
        """Characters outside the key set are rejected."""
        with pytest.raises(MalformedAttributeError) as exc_info:
            scan_attributes(' wid$th="1"')
        assert exc_info.value.details["fragment"].startswith("wid$")

    def test_stray_quote(self):
        """A value without a key is rejected."""
        with pytest.raises(MalformedAttributeError):
            scan_attributes(' "orphan"')


class TestSerializeAttributes:
    """Test escaping and serialization."""

    def test_escape_only_double_quote(self):
        """Only '"' is escaped; entities are passed through."""
        assert escape_attribute_value('say "hi" &amp; <go>') == "say &quot;hi&quot; &amp; <go>"

    def test_serialize(self):
        """Values are double quoted, booleans written bare."""
        attributes = AttributeList(
            [("width", "10"), ("data-x", "it's"), ("disabled", BOOLEAN_ATTRIBUTE)]
        )
        assert serialize_attributes(attributes) == ' width="10" data-x="it\'s" disabled'

    def test_serialize_single_quoted_value_with_double_quote(self):
        """A double quote from a single-quoted source value is escaped."""
        attributes = scan_attributes(" title='a \"b\"'")
        assert serialize_attributes(attributes) == ' title="a &quot;b&quot;"'

    def test_serialize_empty(self):
        """No attributes render as the empty string."""
        assert serialize_attributes(AttributeList()) == ""

    def test_rescan_serialized_output(self):
        """Serialized attributes scan back to the same list."""
        original = scan_attributes(" a='1' b c=\"x y\"")
        assert scan_attributes(serialize_attributes(original)) == original
