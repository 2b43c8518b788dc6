"""
Generation of schema components for a batch of target records.

A ``SchemaGenerator`` owns exactly one generation run: the enum table, the
target records, the memoization cache of finished records and the stack of
records currently being generated. Records are generated in batch order;
a record referenced by a field before its own turn is generated on the spot
and reused afterwards. The first error aborts the run.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from .descriptors import EnumDescriptor, RecordDescriptor, SchemaComponents
from .errors import CyclicDependencyError, DuplicateRecordError, GenerationError
from .mapper import map_type

logger = logging.getLogger(__name__)


class SchemaGenerator:
    """
    Generate ``SchemaComponents`` for one batch of records.

    Parameters
    ----------
    records : iterable of RecordDescriptor
        Target records, in the order their output should follow.
    enums : mapping of str to EnumDescriptor
        Every string-backed enum known to the extractor, targeted or not.

    Raises
    ------
    DuplicateRecordError
        If two targets share a name.
    """

    def __init__(
        self,
        records: Iterable[RecordDescriptor],
        enums: Optional[Mapping[str, EnumDescriptor]] = None,
    ):
        self.records: List[RecordDescriptor] = list(records)
        self.enums: Dict[str, EnumDescriptor] = dict(enums or {})
        self._targets: Dict[str, RecordDescriptor] = {}
        for record in self.records:
            if record.name in self._targets:
                raise DuplicateRecordError(record.name)
            self._targets[record.name] = record

        self._cache: Dict[str, SchemaComponents] = {}
        self._in_progress: List[str] = []

    # --- Record resolution (used by the mapper) ---
    def resolve_record(self, name: str) -> Optional[SchemaComponents]:
        """Return the components of a target record, generating it if needed."""
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        record = self._targets.get(name)
        if record is None:
            return None
        return self.generate_record(record)

    # --- Single record ---
    def generate_record(self, record: RecordDescriptor) -> SchemaComponents:
        """
        Generate (or fetch from cache) the components of one record.

        Parameters
        ----------
        record : RecordDescriptor
            The record to generate.

        Returns
        -------
        SchemaComponents
            ``properties`` in field declaration order and ``required``
            listing the non-optional fields in the same order.

        Raises
        ------
        CyclicDependencyError
            If ``record`` is already being generated further up the stack.
        GenerationError
            Any mapping failure of one of its fields, unchanged.
        """
        cached = self._cache.get(record.name)
        if cached is not None:
            return cached

        if record.name in self._in_progress:
            chain = self._in_progress + [record.name]
            logger.error("Circular dependency detected: %s", " -> ".join(chain))
            raise CyclicDependencyError(chain)

        self._in_progress.append(record.name)
        logger.debug("-> Generating %s (stack: %s)", record.name, self._in_progress)
        try:
            properties = {}
            required = []
            for field in record.fields:
                schema = map_type(field.raw_type, self, record.name, field.name)
                if field.description:
                    schema["description"] = field.description
                properties[field.name] = schema
                if not field.is_optional:
                    required.append(field.name)
        finally:
            self._in_progress.pop()

        components = SchemaComponents(properties=properties, required=required)
        self._cache[record.name] = components
        logger.debug(
            "<- Cached %s (%d properties, %d required)",
            record.name,
            len(properties),
            len(required),
        )
        return components

    # --- Batch driver ---
    def generate(self) -> Dict[str, SchemaComponents]:
        """
        Generate every target record in batch order.

        Returns
        -------
        dict
            Record name to components, ordered like the batch.

        Raises
        ------
        GenerationError
            The first failure encountered; no partial result is returned.
        """
        logger.info("Generating schema components for %d record(s)", len(self.records))
        results: Dict[str, SchemaComponents] = {}
        for record in self.records:
            if record.name in results:
                continue
            try:
                results[record.name] = self.generate_record(record)
            except GenerationError as e:
                logger.error("Failed to generate schema for '%s': %s", record.name, e)
                raise
        logger.info("Generated schema components for %d record(s)", len(results))
        return results


def generate_schemas(
    records: Iterable[RecordDescriptor],
    enums: Optional[Mapping[str, EnumDescriptor]] = None,
) -> Dict[str, SchemaComponents]:
    """Run a fresh ``SchemaGenerator`` over ``records``."""
    return SchemaGenerator(records, enums).generate()


__all__: list[str] = ["SchemaGenerator", "generate_schemas"]
