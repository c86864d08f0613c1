"""Typed Records - record schemas from a field spec language, and secondary indexes."""

from typed_records.index import (
    CompositeKey,
    CompositeKeyComparer,
    IndexResultCursor,
    RecordCollectionIndex,
    RecordListIndex,
)
from typed_records.parsing import FieldDescriptor, FieldSchemaSpec
from typed_records.records import Record, RecordList, RecordListCursor, RecordSchema
from typed_records.schema import Schema
from typed_records.types import (
    CASE_INSENSITIVE_COMPARER,
    DEFAULT_COMPARER,
    CaseInsensitiveComparer,
    DataType,
    FieldType,
    TypeRegistry,
    ValueComparer,
)

__all__ = [
    # Main API
    "Schema",
    "FieldSchemaSpec",
    "FieldDescriptor",
    "RecordListIndex",
    # Records
    "Record",
    "RecordList",
    "RecordListCursor",
    "RecordSchema",
    # Indexing
    "CompositeKey",
    "CompositeKeyComparer",
    "IndexResultCursor",
    "RecordCollectionIndex",
    # Types
    "DataType",
    "FieldType",
    "TypeRegistry",
    "ValueComparer",
    "CaseInsensitiveComparer",
    "DEFAULT_COMPARER",
    "CASE_INSENSITIVE_COMPARER",
]

__version__ = "0.1.0"
