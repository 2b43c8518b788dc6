"""
Wrapping of generated schema components into the tool/function declaration
shapes expected by each supported LLM API.

Attributes
----------
OutputFormat : enum
    ``openai`` and ``grok`` produce a list of tool objects of the form
    ``{"type": "function", "function": {"name", "description"?,
    "parameters"}}``; ``gemini`` produces a list of FunctionDeclaration
    objects whose schema types are uppercase and carry no ``format`` hints.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .descriptors import RecordDescriptor, SchemaComponents, SchemaFragment
from .errors import FormattingError, UnsupportedDialectFeatureError

logger = logging.getLogger(__name__)

FormatterInput = Sequence[Tuple[RecordDescriptor, SchemaComponents]]


class OutputFormat(str, Enum):
    OPENAI = "openai"
    GROK = "grok"
    GEMINI = "gemini"


# --- OpenAI / Grok ---
def format_openai(components: FormatterInput) -> List[Dict[str, Any]]:
    """
    Build OpenAI Chat Completions ``tools`` entries.

    Parameters
    ----------
    components : sequence of (RecordDescriptor, SchemaComponents)
        Records paired with their generated components, in output order.

    Returns
    -------
    list of dict
        One ``{"type": "function", "function": {...}}`` object per record.
        ``description`` is omitted when the record has none.
    """
    tools = []
    for record, schema in components:
        function: Dict[str, Any] = {"name": record.name}
        if record.description:
            function["description"] = record.description
        function["parameters"] = {
            "type": "object",
            "properties": schema.properties,
            "required": schema.required,
        }
        tools.append({"type": "function", "function": function})
    return tools


def format_grok(components: FormatterInput) -> List[Dict[str, Any]]:
    # Grok accepts the OpenAI tool shape unchanged.
    return format_openai(components)


# --- Gemini ---
def to_gemini_schema(fragment: SchemaFragment) -> SchemaFragment:
    """
    Return a Gemini-compatible copy of a schema fragment.

    ``type`` values are uppercased and ``format`` keys dropped, recursively
    through ``items``, ``additionalProperties`` and every entry of
    ``properties``. The input fragment is left untouched.

    Parameters
    ----------
    fragment : dict
        A JSON Schema fragment as produced by the mapper.

    Returns
    -------
    dict
        The transformed copy.
    """
    converted: SchemaFragment = {}
    for key, value in fragment.items():
        if key == "format":
            continue
        if key == "type" and isinstance(value, str):
            converted[key] = value.upper()
        elif key in ("items", "additionalProperties") and isinstance(value, dict):
            converted[key] = to_gemini_schema(value)
        elif key == "properties" and isinstance(value, dict):
            converted[key] = {
                name: to_gemini_schema(prop) if isinstance(prop, dict) else prop
                for name, prop in value.items()
            }
        elif isinstance(value, list):
            converted[key] = list(value)
        else:
            converted[key] = value
    return converted


def format_gemini(components: FormatterInput) -> List[Dict[str, Any]]:
    """
    Build Gemini ``FunctionDeclaration`` objects.

    Parameters
    ----------
    components : sequence of (RecordDescriptor, SchemaComponents)
        Records paired with their generated components, in output order.

    Returns
    -------
    list of dict
        ``{"name", "description", "parameters"}`` per record; the
        description is an empty string when the record has none.
    """
    declarations = []
    for record, schema in components:
        properties = {
            name: to_gemini_schema(fragment)
            for name, fragment in schema.properties.items()
        }
        declarations.append(
            {
                "name": record.name,
                "description": record.description or "",
                "parameters": {
                    "type": "OBJECT",
                    "properties": properties,
                    "required": list(schema.required),
                },
            }
        )
    return declarations


FORMATTERS = {
    OutputFormat.OPENAI: format_openai,
    OutputFormat.GROK: format_grok,
    OutputFormat.GEMINI: format_gemini,
}


def format_schemas(
    records: Sequence[RecordDescriptor],
    components: Mapping[str, SchemaComponents],
    output_format: str,
) -> List[Dict[str, Any]]:
    """
    Pair records with their components and wrap them for one dialect.

    Parameters
    ----------
    records : sequence of RecordDescriptor
        The generation batch; output follows its order, first occurrence of
        each name only.
    components : mapping of str to SchemaComponents
        Result of ``SchemaGenerator.generate``.
    output_format : str or OutputFormat
        ``"openai"``, ``"grok"`` or ``"gemini"``.

    Returns
    -------
    list of dict
        The output document; empty when there are no records.

    Raises
    ------
    UnsupportedDialectFeatureError
        If ``output_format`` is not a supported dialect.
    FormattingError
        If a record has no generated components.
    """
    try:
        dialect = OutputFormat(output_format)
    except ValueError as e:
        raise UnsupportedDialectFeatureError(
            str(output_format), "unknown output format"
        ) from e

    pairs = []
    seen = set()
    for record in records:
        if record.name in seen:
            continue
        seen.add(record.name)
        schema = components.get(record.name)
        if schema is None:
            raise FormattingError(
                f"No generated components for '{record.name}' "
                f"while formatting for '{dialect.value}'"
            )
        pairs.append((record, schema))

    logger.info("Formatting %d schema(s) for %s", len(pairs), dialect.value)
    return FORMATTERS[dialect](pairs)


__all__: list[str] = [
    "OutputFormat",
    "format_openai",
    "format_grok",
    "format_gemini",
    "format_schemas",
    "to_gemini_schema",
]
