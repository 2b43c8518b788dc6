"""
Reading descriptor documents produced by the source extractor.

A descriptor document is a JSON object with ``records`` and ``enums``
arrays (see ``descriptors.py`` for the per-item keys). A single file or a
whole directory of ``*.json`` documents can be loaded; directories are
merged in sorted path order.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from .descriptors import EnumDescriptor, RecordDescriptor
from .errors import DescriptorLoadError

logger = logging.getLogger(__name__)


@dataclass
class DescriptorSet:
    records: List[RecordDescriptor] = field(default_factory=list)
    enums: Dict[str, EnumDescriptor] = field(default_factory=dict)

    def record_names(self) -> List[str]:
        return [record.name for record in self.records]


def _merge(target: DescriptorSet, source: DescriptorSet, origin: Path) -> None:
    known = set(target.record_names())
    for record in source.records:
        if record.name in known:
            raise DescriptorLoadError(
                f"Duplicate record '{record.name}' in {origin}"
            )
        known.add(record.name)
        target.records.append(record)
    for name, enum in source.enums.items():
        if name in target.enums:
            raise DescriptorLoadError(f"Duplicate enum '{name}' in {origin}")
        target.enums[name] = enum


def parse_descriptor_document(document: dict, origin: str = "<document>") -> DescriptorSet:
    """
    Build descriptors from an already decoded document.

    Parameters
    ----------
    document : dict
        Decoded JSON with optional ``records`` and ``enums`` arrays.
    origin : str
        Name used in error messages.

    Returns
    -------
    DescriptorSet
        Records in document order and enums keyed by name.

    Raises
    ------
    DescriptorLoadError
        If the document shape is wrong or names repeat.
    """
    if not isinstance(document, dict):
        raise DescriptorLoadError(f"Descriptor document {origin} must be a JSON object")

    result = DescriptorSet()
    try:
        for item in document.get("records", []):
            record = RecordDescriptor.from_dict(item)
            if record.name in result.record_names():
                raise DescriptorLoadError(
                    f"Duplicate record '{record.name}' in {origin}"
                )
            result.records.append(record)
        for item in document.get("enums", []):
            enum = EnumDescriptor.from_dict(item)
            if enum.name in result.enums:
                raise DescriptorLoadError(f"Duplicate enum '{enum.name}' in {origin}")
            result.enums[enum.name] = enum
    except (KeyError, TypeError, AttributeError) as e:
        raise DescriptorLoadError(f"Malformed descriptor in {origin}: {e}") from e
    return result


def load_descriptor_file(path: Path) -> DescriptorSet:
    """
    Load one descriptor document.

    Parameters
    ----------
    path : pathlib.Path
        JSON file to read.

    Returns
    -------
    DescriptorSet
        The records and enums it declares.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise DescriptorLoadError(f"Failed to read file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DescriptorLoadError(f"Invalid JSON in {path}: {e}") from e

    descriptors = parse_descriptor_document(document, origin=str(path))
    logger.info(
        "Loaded %d record(s) and %d enum(s) from %s",
        len(descriptors.records),
        len(descriptors.enums),
        path,
    )
    return descriptors


def load_descriptor_dir(path: Path) -> DescriptorSet:
    """Load and merge every ``*.json`` document below ``path``."""
    path = Path(path)
    if not path.is_dir():
        raise DescriptorLoadError(f"Input directory not found: {path}")

    merged = DescriptorSet()
    files = sorted(p for p in path.rglob("*.json") if p.is_file())
    if not files:
        logger.warning("No descriptor documents found in %s", path)
    for file_path in files:
        _merge(merged, load_descriptor_file(file_path), file_path)
    return merged


def select_targets(
    descriptors: DescriptorSet, type_names: Iterable[str]
) -> Tuple[List[RecordDescriptor], List[str]]:
    """
    Pick the requested records, in request order.

    Parameters
    ----------
    descriptors : DescriptorSet
        Everything the extractor found.
    type_names : iterable of str
        Requested record names; repeats are ignored.

    Returns
    -------
    tuple of (list of RecordDescriptor, list of str)
        The targets found, and the requested names that were not found.
    """
    by_name = {record.name: record for record in descriptors.records}
    targets = []
    missing = []
    seen = set()
    for name in type_names:
        if name in seen:
            continue
        seen.add(name)
        record = by_name.get(name)
        if record is None:
            missing.append(name)
        else:
            targets.append(record)
    if missing:
        logger.warning("Could not find target(s): %s", ", ".join(missing))
    return targets, missing


__all__: list[str] = [
    "DescriptorSet",
    "parse_descriptor_document",
    "load_descriptor_file",
    "load_descriptor_dir",
    "select_targets",
]
