"""
Grammar for the raw type strings attached to fields.

``parse_type`` analyses exactly one level of a type string and reports its
shape: a named type, an array ``[T]`` or a string-keyed map ``[K: V]``,
each possibly carrying a trailing ``?`` optional marker. The element, key
and value parts are returned as raw substrings; recursing into them is left
to the caller so that error precedence stays in the caller's hands.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import MalformedContainerError

OPTIONAL_SUFFIX = "?"
OPEN_BRACKET = "["
CLOSE_BRACKET = "]"
KEY_VALUE_SEPARATOR = ":"

NAMED = "named"
ARRAY = "array"
MAP = "map"


@dataclass(frozen=True)
class TypeShape:
    kind: str
    optional: bool = False
    name: Optional[str] = None
    element: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None


def strip_optional(raw_type: str) -> Tuple[str, bool]:
    """
    Remove a single trailing optional marker.

    Parameters
    ----------
    raw_type : str
        Type string as written on the field, e.g. ``"[String: Int]?"``.

    Returns
    -------
    tuple of (str, bool)
        The trimmed type without its marker, and whether a marker was found.
    """
    current = raw_type.strip()
    if current.endswith(OPTIONAL_SUFFIX):
        return current[: -len(OPTIONAL_SUFFIX)].strip(), True
    return current, False


def _top_level_separators(type_name: str, inner: str) -> List[int]:
    """Return the indexes of ``:`` that are not nested in inner brackets."""
    positions = []
    depth = 0
    for index, char in enumerate(inner):
        if char == OPEN_BRACKET:
            depth += 1
        elif char == CLOSE_BRACKET:
            depth -= 1
            if depth < 0:
                raise MalformedContainerError(type_name, "Unbalanced brackets")
        elif char == KEY_VALUE_SEPARATOR and depth == 0:
            positions.append(index)
    if depth != 0:
        raise MalformedContainerError(type_name, "Unbalanced brackets")
    return positions


def parse_type(raw_type: str) -> TypeShape:
    """
    Classify a raw type string.

    Parameters
    ----------
    raw_type : str
        Type string such as ``"Int"``, ``"Date?"``, ``"[[Int]]"`` or
        ``"[String: Address]"``.

    Returns
    -------
    TypeShape
        ``kind`` is ``"map"`` (with ``key``/``value``), ``"array"`` (with
        ``element``) or ``"named"`` (with ``name``).

    Raises
    ------
    MalformedContainerError
        If bracket syntax is structurally invalid: empty ``[]``, unbalanced
        inner brackets, more than one top-level separator, or a map with an
        empty key or value.
    """
    current, optional = strip_optional(raw_type)

    is_bracketed = current.startswith(OPEN_BRACKET) and current.endswith(
        CLOSE_BRACKET
    )
    if not is_bracketed:
        return TypeShape(kind=NAMED, optional=optional, name=current)

    inner = current[1:-1].strip()
    if not inner:
        raise MalformedContainerError(raw_type, "Invalid empty array syntax '[]'")

    separators = _top_level_separators(raw_type, inner)

    # --- Map: exactly one top-level separator ---
    if len(separators) == 1:
        split_at = separators[0]
        key = inner[:split_at].strip()
        value = inner[split_at + 1 :].strip()
        if not key or not value:
            raise MalformedContainerError(
                raw_type, "Dictionary requires both a key and a value type"
            )
        return TypeShape(kind=MAP, optional=optional, key=key, value=value)

    if len(separators) > 1:
        raise MalformedContainerError(
            raw_type, "Expected at most one top-level ':' separator"
        )

    # --- Array: no top-level separator ---
    return TypeShape(kind=ARRAY, optional=optional, element=inner)


__all__: list[str] = ["TypeShape", "parse_type", "strip_optional"]
