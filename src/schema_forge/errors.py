"""
Exception hierarchy for schema-forge.

Every error raised by the package derives from ``SchemaForgeError`` so the
CLI can report any failure with a single handler. Each subclass keeps its
context (offending type, record, field, dependency chain) as attributes.
"""

from typing import Optional, Sequence


class SchemaForgeError(Exception):
    """Base exception for schema-forge specific errors."""

    pass


class DescriptorLoadError(SchemaForgeError):
    """A descriptor document could not be read or is malformed."""

    pass


# --- Generation ---
class GenerationError(SchemaForgeError):
    """Base class for failures while generating schema components."""

    pass


class UnsupportedTypeError(GenerationError):
    def __init__(
        self,
        type_name: str,
        record_name: str,
        field_name: str,
        reason: Optional[str] = None,
    ):
        self.type_name = type_name
        self.record_name = record_name
        self.field_name = field_name
        self.reason = reason
        message = (
            f"Unsupported type for schema generation: '{type_name}' "
            f"(property '{field_name}' in '{record_name}')"
        )
        if reason:
            message += f": {reason}"
        super().__init__(message)


class MalformedContainerError(GenerationError):
    def __init__(
        self,
        type_name: str,
        reason: str,
        record_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ):
        self.type_name = type_name
        self.reason = reason
        self.record_name = record_name
        self.field_name = field_name
        location = ""
        if record_name and field_name:
            location = f" (property '{field_name}' in '{record_name}')"
        super().__init__(
            f"Failed to parse components of container type '{type_name}'"
            f"{location}: {reason}"
        )


class UnrequestedReferenceError(GenerationError):
    """A field references a record that is not part of the requested targets."""

    def __init__(self, type_name: str, referencing_record: str, property_name: str):
        self.type_name = type_name
        self.referencing_record = referencing_record
        self.property_name = property_name
        super().__init__(
            f"Cannot generate nested schema for property '{property_name}' in "
            f"'{referencing_record}' because type '{type_name}' was not requested "
            f"via --type-name and is not a known enum."
        )


class CyclicDependencyError(GenerationError):
    """Records reference each other (or themselves) through their fields."""

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(
            f"Circular dependency detected involving '{self.chain[-1]}' "
            f"via path [{' -> '.join(self.chain)}]"
        )


class DuplicateRecordError(GenerationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Record '{name}' was supplied more than once")


# --- Formatting ---
class FormattingError(SchemaForgeError):
    """Base class for failures while wrapping components for an output dialect."""

    pass


class UnsupportedDialectFeatureError(FormattingError):
    def __init__(self, output_format: str, reason: str):
        self.output_format = output_format
        self.reason = reason
        super().__init__(
            f"Output format '{output_format}' cannot represent the schema: {reason}"
        )
