import pytest

from schema_forge.errors import MalformedContainerError
from schema_forge.type_parser import parse_type, strip_optional

# --- Tests for strip_optional ---


def test_strip_optional_marker():
    """Test that a trailing '?' is removed and reported."""
    assert strip_optional("Date?") == ("Date", True)
    assert strip_optional("  [String: Int]? ") == ("[String: Int]", True)


def test_strip_optional_without_marker():
    """Test that a plain type is returned unchanged."""
    assert strip_optional("Int") == ("Int", False)


def test_strip_optional_only_one_marker():
    """Test that only one optional marker is removed."""
    assert strip_optional("Int??") == ("Int?", True)


# --- Tests for parse_type ---


def test_parse_named_type():
    """Test that a bare name is classified as named."""
    shape = parse_type("Address")
    assert shape.kind == "named"
    assert shape.name == "Address"
    assert shape.optional is False


def test_parse_optional_named_type():
    shape = parse_type("Address?")
    assert shape.kind == "named"
    assert shape.name == "Address"
    assert shape.optional is True


def test_parse_array():
    """Test that a bracketed type without separator is an array."""
    shape = parse_type("[Int]")
    assert shape.kind == "array"
    assert shape.element == "Int"


def test_parse_nested_array():
    """Test that only the outer level is analysed."""
    shape = parse_type("[[Int]]")
    assert shape.kind == "array"
    assert shape.element == "[Int]"


def test_parse_map():
    """Test that one top-level separator makes a map."""
    shape = parse_type("[String: Int]")
    assert shape.kind == "map"
    assert shape.key == "String"
    assert shape.value == "Int"


def test_parse_map_with_nested_map_value():
    """Test that separators inside inner brackets are not top level."""
    shape = parse_type("[String: [String: Int]]?")
    assert shape.kind == "map"
    assert shape.key == "String"
    assert shape.value == "[String: Int]"
    assert shape.optional is True


def test_parse_array_of_maps():
    """Test that a map nested in an array keeps the outer array shape."""
    shape = parse_type("[[String: Int]]")
    assert shape.kind == "array"
    assert shape.element == "[String: Int]"


def test_parse_array_with_optional_element():
    shape = parse_type("[Int?]")
    assert shape.kind == "array"
    assert shape.element == "Int?"
    assert shape.optional is False


@pytest.mark.parametrize("raw_type", ["[]", "[ ]", "[]?"])
def test_parse_empty_brackets(raw_type):
    """Test that empty brackets are malformed."""
    with pytest.raises(MalformedContainerError) as excinfo:
        parse_type(raw_type)
    assert "empty" in str(excinfo.value)


@pytest.mark.parametrize("raw_type", ["[[Int]", "[Int]]", "[Int][String]"])
def test_parse_unbalanced_brackets(raw_type):
    """Test that unbalanced inner brackets are malformed."""
    with pytest.raises(MalformedContainerError):
        parse_type(raw_type)


def test_parse_multiple_separators():
    """Test that more than one top-level separator is malformed."""
    with pytest.raises(MalformedContainerError):
        parse_type("[String: Int: Bool]")


@pytest.mark.parametrize("raw_type", ["[String:]", "[: Int]"])
def test_parse_map_missing_part(raw_type):
    with pytest.raises(MalformedContainerError):
        parse_type(raw_type)
