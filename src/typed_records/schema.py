"""Schema class for building record schemas from field spec strings."""

from __future__ import annotations

import logging
from typing import Any, Hashable, Iterable, Mapping

from typed_records.index import RecordListIndex
from typed_records.parsing import FieldDescriptor, FieldSchemaSpec
from typed_records.records import RecordList, RecordSchema
from typed_records.types import (
    CASE_INSENSITIVE_COMPARER,
    DEFAULT_COMPARER,
    DataType,
    FieldType,
    TypeRegistry,
    ValueComparer,
)

logger = logging.getLogger(__name__)


class Schema:
    """Parsed field descriptors together with the record schema built from them."""

    # Option word that makes a field compare case-insensitively, e.g. "name:varchar(ignorecase)"
    OPTION_IGNORE_CASE = "ignorecase"

    def __init__(self, fields: list[FieldDescriptor], record_schema: RecordSchema) -> None:
        """Initialize a schema.

        Args:
            fields: Field descriptors in declaration order.
            record_schema: Record schema with one field type per descriptor.
        """
        self.fields = fields
        self.record_schema = record_schema

    @classmethod
    def parse(
        cls,
        spec: str,
        registry: TypeRegistry | None = None,
        comparers: Mapping[str, ValueComparer] | None = None,
        default_type: Hashable = DataType.OBJECT,
    ) -> Schema:
        """Parse a field spec string and create a schema.

        Args:
            spec: Field spec string, e.g. "id:int32,name:varchar(ignorecase)".
            registry: Type names to recognize. Defaults to the built-in names.
            comparers: Comparers for specific fields, overriding the ones
                chosen from the field options.
            default_type: Tag for unknown or missing type names.

        Returns:
            A new Schema instance.

        Raises:
            ValueError: If a field name is used more than once.
        """
        parser = FieldSchemaSpec(registry, default_type)
        fields = parser.parse_fields(spec)
        comparers = comparers or {}

        record_schema = RecordSchema()
        for descriptor in fields:
            comparer = comparers.get(descriptor.name)
            if comparer is None:
                comparer = cls._comparer_for_options(descriptor.option_spec)
            record_schema.add_field(
                FieldType(
                    name=descriptor.name,
                    data_type=descriptor.resolved_type,
                    comparer=comparer,
                )
            )

        logger.debug("Parsed schema with fields %s", record_schema.field_names)
        return cls(fields, record_schema)

    @classmethod
    def _comparer_for_options(cls, option_spec: str) -> ValueComparer:
        words = option_spec.replace(",", " ").casefold().split()
        if cls.OPTION_IGNORE_CASE in words:
            return CASE_INSENSITIVE_COMPARER
        return DEFAULT_COMPARER

    def get_field(self, name: str) -> FieldType:
        """Get a field type by name.

        Raises:
            KeyError: If the field is not found.
        """
        return self.record_schema[name]

    @property
    def field_names(self) -> list[str]:
        return self.record_schema.field_names

    def create_record_list(self, rows: Iterable[Any] = ()) -> RecordList:
        """Create a record list with this schema."""
        return RecordList(self.record_schema, rows)

    def create_index(self, record_list: RecordList, key_field_names: Iterable[str]) -> RecordListIndex:
        """Create and build an index on a record list."""
        index = RecordListIndex(record_list, key_field_names)
        index.build_index()
        return index
