"""Parsing module for the field schema spec language."""

from typed_records.parsing.field_spec_lexer import FieldSpecLexer
from typed_records.parsing.field_spec_parser import (
    FieldDescriptor,
    FieldSchemaSpec,
    FieldSpecEnumeration,
)

__all__ = [
    "FieldDescriptor",
    "FieldSchemaSpec",
    "FieldSpecEnumeration",
    "FieldSpecLexer",
]
