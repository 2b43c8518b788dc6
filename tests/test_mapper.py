import pytest
from unittest.mock import MagicMock

from schema_forge.descriptors import (
    EnumCaseDescriptor,
    EnumDescriptor,
    SchemaComponents,
)
from schema_forge.errors import (
    MalformedContainerError,
    UnrequestedReferenceError,
    UnsupportedTypeError,
)
from schema_forge.mapper import PRIMITIVE_TYPES, describe_enum, enum_schema, map_type


@pytest.fixture
def context(search_priority_enum):
    """A mapping context with one enum and no records."""
    ctx = MagicMock()
    ctx.enums = {"SearchPriority": search_priority_enum}
    ctx.resolve_record.return_value = None
    return ctx


def map_field(raw_type, context):
    return map_type(raw_type, context, "Order", "field")


# --- Tests for primitives ---


@pytest.mark.parametrize(
    "raw_type, expected",
    [
        ("String", {"type": "string"}),
        ("Int", {"type": "integer"}),
        ("UInt8", {"type": "integer"}),
        ("Int64", {"type": "integer"}),
        ("Bool", {"type": "boolean"}),
        ("Double", {"type": "number"}),
        ("CGFloat", {"type": "number"}),
        ("Date", {"type": "string", "format": "date-time"}),
        ("UUID", {"type": "string", "format": "uuid"}),
        ("Data", {"type": "string", "format": "byte"}),
        ("URL", {"type": "string", "format": "uri"}),
    ],
)
def test_map_primitive(context, raw_type, expected):
    """Test the primitive lookup table."""
    assert map_field(raw_type, context) == expected


def test_map_primitive_returns_fresh_dict(context):
    """Test that callers may mutate the fragment without touching the table."""
    fragment = map_field("String", context)
    fragment["description"] = "changed"
    assert PRIMITIVE_TYPES["String"] == {"type": "string"}


def test_map_optional_does_not_change_shape(context):
    """Test that the optional marker does not affect the fragment."""
    assert map_field("Date?", context) == map_field("Date", context)


# --- Tests for containers ---


def test_map_string_keyed_dictionary(context):
    assert map_field("[String: Int]", context) == {
        "type": "object",
        "additionalProperties": {"type": "integer"},
    }


def test_map_nested_array(context):
    assert map_field("[[Int]]", context) == {
        "type": "array",
        "items": {"type": "array", "items": {"type": "integer"}},
    }


def test_map_array_of_optional_dates(context):
    assert map_field("[Date?]?", context) == {
        "type": "array",
        "items": {"type": "string", "format": "date-time"},
    }


def test_map_dictionary_with_non_string_key(context):
    """Test that non-String dictionary keys are unsupported."""
    with pytest.raises(UnsupportedTypeError) as excinfo:
        map_field("[Int: String]", context)
    assert excinfo.value.type_name == "[Int: String]"
    assert excinfo.value.record_name == "Order"
    assert excinfo.value.field_name == "field"


def test_map_key_checked_before_value(context):
    """Test that a bad key is reported even when the value is malformed."""
    with pytest.raises(UnsupportedTypeError):
        map_field("[Int: []]", context)


def test_map_empty_array_carries_context(context):
    with pytest.raises(MalformedContainerError) as excinfo:
        map_field("[[]]", context)
    assert excinfo.value.record_name == "Order"
    assert excinfo.value.field_name == "field"


# --- Tests for enums ---


def test_map_enum(context):
    """Test that enum cases and descriptions are rendered."""
    fragment = map_field("SearchPriority", context)
    assert fragment["type"] == "string"
    assert fragment["enum"] == ["standard", "high"]
    assert fragment["description"] == (
        "How urgently results are needed.\n\n"
        "Possible values:\n"
        "  - standard: Normal ranking.\n"
        "  - high: Prefer fast availability."
    )


def test_describe_enum_without_any_documentation():
    enum = EnumDescriptor("Flag", cases=(EnumCaseDescriptor("on"), EnumCaseDescriptor("off")))
    assert describe_enum(enum) is None
    assert enum_schema(enum) == {"type": "string", "enum": ["on", "off"]}


def test_describe_enum_only_case_documentation():
    """Test that undocumented cases are left out of the bullet list."""
    enum = EnumDescriptor(
        "Priority",
        cases=(
            EnumCaseDescriptor("low", "Low priority\ntask."),
            EnumCaseDescriptor("medium"),
        ),
    )
    assert describe_enum(enum) == "Possible values:\n  - low: Low priority task."


def test_describe_enum_only_enum_documentation():
    enum = EnumDescriptor("Flag", "A switch.", cases=(EnumCaseDescriptor("on"),))
    assert describe_enum(enum) == "A switch."


# --- Tests for nested records and unresolved names ---


def test_map_nested_record_uses_resolved_components(context):
    """Test that nested records share the resolved components."""
    components = SchemaComponents(
        properties={"street": {"type": "string"}}, required=["street"]
    )
    context.resolve_record.side_effect = lambda name: components if name == "Address" else None

    fragment = map_field("[Address]", context)

    assert fragment["items"]["type"] == "object"
    assert fragment["items"]["properties"] is components.properties
    assert fragment["items"]["required"] is components.required
    context.resolve_record.assert_called_with("Address")


def test_map_unrequested_reference(context):
    with pytest.raises(UnrequestedReferenceError) as excinfo:
        map_type("Customer?", context, "Order", "customer")
    assert excinfo.value.type_name == "Customer"
    assert excinfo.value.referencing_record == "Order"
    assert excinfo.value.property_name == "customer"


@pytest.mark.parametrize("raw_type", ["Int??", "Optional<Int>", "(Int, Int)", "Swift.Int"])
def test_map_unsupported_type(context, raw_type):
    """Test that non-identifier names are unsupported."""
    with pytest.raises(UnsupportedTypeError):
        map_field(raw_type, context)


def test_map_dotted_record_name_resolves(context):
    """Test that a requested record with a qualified name is nested, not rejected."""
    components = SchemaComponents(properties={"lat": {"type": "number"}}, required=["lat"])
    context.resolve_record.side_effect = lambda name: components if name == "Geo.Point" else None

    fragment = map_field("Geo.Point?", context)

    assert fragment == {"type": "object", "properties": components.properties, "required": ["lat"]}
