"""
Recursive mapping of raw field type strings to JSON Schema fragments.

``map_type`` resolves, in order: optional markers, string-keyed maps,
arrays, the primitive table, string-backed enums and finally nested records.
Enum and record lookups go through a generation context (see
``generator.SchemaGenerator``), which is also what generates a nested
record on first reference.
"""

import logging
from typing import Dict, Optional, Protocol

from .descriptors import EnumDescriptor, SchemaComponents, SchemaFragment
from .errors import (
    MalformedContainerError,
    UnrequestedReferenceError,
    UnsupportedTypeError,
)
from .type_parser import ARRAY, MAP, parse_type

logger = logging.getLogger(__name__)

STRING_KEY_TYPE = "String"

PRIMITIVE_TYPES: Dict[str, SchemaFragment] = {
    "String": {"type": "string"},
    "Int": {"type": "integer"},
    "Int8": {"type": "integer"},
    "Int16": {"type": "integer"},
    "Int32": {"type": "integer"},
    "Int64": {"type": "integer"},
    "UInt": {"type": "integer"},
    "UInt8": {"type": "integer"},
    "UInt16": {"type": "integer"},
    "UInt32": {"type": "integer"},
    "UInt64": {"type": "integer"},
    "Bool": {"type": "boolean"},
    "Float": {"type": "number"},
    "Double": {"type": "number"},
    "CGFloat": {"type": "number"},
    "Date": {"type": "string", "format": "date-time"},
    "UUID": {"type": "string", "format": "uuid"},
    "Data": {"type": "string", "format": "byte"},
    "URL": {"type": "string", "format": "uri"},
}


class TypeContext(Protocol):
    """Lookups a mapping call needs from the run that owns it."""

    enums: Dict[str, EnumDescriptor]

    def resolve_record(self, name: str) -> Optional[SchemaComponents]: ...


def describe_enum(enum: EnumDescriptor) -> Optional[str]:
    """
    Combine an enum's description with a bullet list of its documented cases.

    Parameters
    ----------
    enum : EnumDescriptor
        The enumeration to describe.

    Returns
    -------
    str or None
        ``"<description>\\n\\nPossible values:\\n  - <case>: <text>"`` with
        empty parts left out, or None when nothing is documented.
    """
    combined = enum.description or ""
    case_lines = [
        f"  - {case.name}: {' '.join(case.description.splitlines())}"
        for case in enum.cases
        if case.description
    ]
    if case_lines:
        if combined:
            combined += "\n\n"
        combined += "Possible values:\n" + "\n".join(case_lines)
    return combined or None


def enum_schema(enum: EnumDescriptor) -> SchemaFragment:
    # case names, never raw values
    schema: SchemaFragment = {
        "type": "string",
        "enum": [case.name for case in enum.cases],
    }
    description = describe_enum(enum)
    if description:
        schema["description"] = description
    return schema


def nested_record_schema(components: SchemaComponents) -> SchemaFragment:
    return {
        "type": "object",
        "properties": components.properties,
        "required": components.required,
    }


def map_type(
    raw_type: str, context: TypeContext, record_name: str, field_name: str
) -> SchemaFragment:
    """
    Map one raw type string to a JSON Schema fragment.

    Parameters
    ----------
    raw_type : str
        The type string, e.g. ``"[String: [Address]]?"``.
    context : TypeContext
        Enum table and record resolver of the current generation run.
    record_name : str
        Record declaring the field, used in error messages.
    field_name : str
        Field being mapped, used in error messages.

    Returns
    -------
    dict
        A freshly built fragment. Nested record fragments share the cached
        ``properties`` and ``required`` objects of that record.

    Raises
    ------
    UnsupportedTypeError
        Map keys other than ``String``, or a name that matches nothing.
    MalformedContainerError
        Invalid bracket syntax anywhere in the type.
    UnrequestedReferenceError
        A record name that is not among the requested targets.
    CyclicDependencyError
        Propagated from recursive record generation.
    """
    try:
        shape = parse_type(raw_type)
    except MalformedContainerError as e:
        raise MalformedContainerError(
            e.type_name, e.reason, record_name=record_name, field_name=field_name
        ) from e

    if shape.kind == MAP:
        if shape.key != STRING_KEY_TYPE:
            raise UnsupportedTypeError(
                raw_type,
                record_name,
                field_name,
                "Dictionary keys must be String for JSON object mapping",
            )
        logger.debug("%s.%s: map of %s", record_name, field_name, shape.value)
        value_schema = map_type(shape.value, context, record_name, field_name)
        return {"type": "object", "additionalProperties": value_schema}

    if shape.kind == ARRAY:
        logger.debug("%s.%s: array of %s", record_name, field_name, shape.element)
        items_schema = map_type(shape.element, context, record_name, field_name)
        return {"type": "array", "items": items_schema}

    name = shape.name

    primitive = PRIMITIVE_TYPES.get(name)
    if primitive is not None:
        return dict(primitive)

    enum = context.enums.get(name)
    if enum is not None:
        logger.debug("%s.%s: enum %s", record_name, field_name, name)
        return enum_schema(enum)

    components = context.resolve_record(name)
    if components is None:
        if not name.isidentifier():
            raise UnsupportedTypeError(raw_type, record_name, field_name)
        raise UnrequestedReferenceError(name, record_name, field_name)

    logger.debug("%s.%s: nested record %s", record_name, field_name, name)
    return nested_record_schema(components)


__all__: list[str] = [
    "PRIMITIVE_TYPES",
    "TypeContext",
    "describe_enum",
    "enum_schema",
    "map_type",
]
