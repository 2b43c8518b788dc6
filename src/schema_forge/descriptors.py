"""
Immutable descriptors for the records and enumerations handed over by the
source extractor, plus the generated per-record schema components.

The descriptor document format read by ``loader.py`` maps one-to-one onto
these types through their ``from_dict`` constructors.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import DescriptorLoadError
from .type_parser import strip_optional

# --- JSON value tree ---
JSONValue = Union[None, bool, int, float, str, List["JSONValue"], Dict[str, "JSONValue"]]
SchemaFragment = Dict[str, JSONValue]


# --- Document value checks ---
def _text(data: Dict[str, Any], key: str, owner: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise DescriptorLoadError(
            f"'{key}' of {owner} must be a string, got {type(value).__name__}"
        )
    return value


def _optional_text(data: Dict[str, Any], key: str, owner: str) -> Optional[str]:
    if data.get(key) is None:
        return None
    return _text(data, key, owner)


@dataclass(frozen=True)
class FieldDescriptor:
    """One stored property of a record."""

    name: str
    raw_type: str
    description: Optional[str] = None
    is_optional: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDescriptor":
        """
        Build a field from its document form.

        Parameters
        ----------
        data : dict
            Mapping with ``name`` and ``type`` keys and optional
            ``description`` and ``optional`` keys. When ``optional`` is
            absent it is inferred from a trailing ``?`` on the type.

        Returns
        -------
        FieldDescriptor
            The constructed field.

        Raises
        ------
        DescriptorLoadError
            If ``name``, ``type`` or ``description`` is not a string, or
            ``optional`` is not a boolean.
        """
        name = _text(data, "name", "a field")
        owner = f"field '{name}'"
        raw_type = _text(data, "type", owner)
        is_optional = data.get("optional")
        if is_optional is None:
            is_optional = strip_optional(raw_type)[1]
        elif not isinstance(is_optional, bool):
            raise DescriptorLoadError(f"'optional' of {owner} must be true or false")
        return cls(
            name=name,
            raw_type=raw_type,
            description=_optional_text(data, "description", owner),
            is_optional=is_optional,
        )


@dataclass(frozen=True)
class RecordDescriptor:
    """A record type targeted for schema generation."""

    name: str
    description: Optional[str] = None
    fields: Tuple[FieldDescriptor, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecordDescriptor":
        name = _text(data, "name", "a record")
        return cls(
            name=name,
            description=_optional_text(data, "description", f"record '{name}'"),
            fields=tuple(FieldDescriptor.from_dict(f) for f in data.get("fields", [])),
        )


@dataclass(frozen=True)
class EnumCaseDescriptor:
    name: str
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnumCaseDescriptor":
        name = _text(data, "name", "an enum case")
        return cls(
            name=name,
            description=_optional_text(data, "description", f"enum case '{name}'"),
        )


@dataclass(frozen=True)
class EnumDescriptor:
    """
    A string-backed enumeration.

    Only case names are carried; explicit raw values never reach the
    generated ``enum`` list.
    """

    name: str
    description: Optional[str] = None
    cases: Tuple[EnumCaseDescriptor, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnumDescriptor":
        name = _text(data, "name", "an enum")
        return cls(
            name=name,
            description=_optional_text(data, "description", f"enum '{name}'"),
            cases=tuple(EnumCaseDescriptor.from_dict(c) for c in data.get("cases", [])),
        )


@dataclass
class SchemaComponents:
    """Generated ``properties`` and ``required`` for one record."""

    properties: Dict[str, SchemaFragment] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)


__all__: list[str] = [
    "JSONValue",
    "SchemaFragment",
    "FieldDescriptor",
    "RecordDescriptor",
    "EnumCaseDescriptor",
    "EnumDescriptor",
    "SchemaComponents",
]
