"""Tests for building schemas from field spec strings."""

import pytest

from typed_records import Schema
from typed_records.records import RecordList
from typed_records.types import (
    CASE_INSENSITIVE_COMPARER,
    DEFAULT_COMPARER,
    DataType,
    TypeRegistry,
    ValueComparer,
)


class TestSchemaParse:
    """Tests for Schema.parse."""

    def test_field_types(self):
        """Test that each field gets its resolved data type."""
        schema = Schema.parse("id:int32,name:varchar,note")

        assert schema.field_names == ["id", "name", "note"]
        assert schema.get_field("id").data_type is DataType.INT32
        assert schema.get_field("name").data_type is DataType.VARCHAR
        assert schema.get_field("note").data_type is DataType.OBJECT

    def test_keeps_descriptors(self):
        """Test that the parsed descriptors are kept in order."""
        schema = Schema.parse("id:int32(required),name")

        assert [f.name for f in schema.fields] == ["id", "name"]
        assert schema.fields[0].option_spec == "required"

    def test_ignorecase_option(self):
        """Test that the ignorecase option selects a case-insensitive comparer."""
        schema = Schema.parse("code:varchar(IgnoreCase),name:varchar(required, ignorecase),id:int32")

        assert schema.get_field("code").comparer is CASE_INSENSITIVE_COMPARER
        assert schema.get_field("name").comparer is CASE_INSENSITIVE_COMPARER
        assert schema.get_field("id").comparer is DEFAULT_COMPARER

    def test_comparer_overrides(self):
        """Test that explicit comparers win over options."""
        custom = ValueComparer()
        schema = Schema.parse("code:varchar(ignorecase)", comparers={"code": custom})

        assert schema.get_field("code").comparer is custom

    def test_custom_registry(self):
        """Test parsing with custom type names."""
        registry = TypeRegistry([("num", int), ("text", str)])
        schema = Schema.parse("a:num,b:text,c:int32", registry=registry, default_type=object)

        assert [schema.get_field(n).data_type for n in schema.field_names] == [int, str, object]

    def test_duplicate_field_names(self):
        """Test that a schema rejects a field name used twice."""
        with pytest.raises(ValueError, match="already defined"):
            Schema.parse("a:int32,a:int64")

    def test_unknown_field(self):
        """Test that looking up a missing field raises KeyError."""
        schema = Schema.parse("a")

        with pytest.raises(KeyError):
            schema.get_field("b")

    def test_empty_spec(self):
        """Test that an empty spec gives an empty schema."""
        schema = Schema.parse("")

        assert schema.field_names == []
        assert len(schema.record_schema) == 0


class TestSchemaRecordsAndIndexes:
    """Tests for record lists and indexes created from a schema."""

    def test_create_record_list(self):
        """Test creating a record list with the schema."""
        schema = Schema.parse("id:int32,name:varchar")
        records = schema.create_record_list([(1, "a"), {"id": 2}])

        assert isinstance(records, RecordList)
        assert records.schema is schema.record_schema
        assert records.count == 2

    def test_create_index(self):
        """Test creating a built index from the schema."""
        schema = Schema.parse("id:int32,name:varchar(ignorecase)")
        records = schema.create_record_list(
            [(1, "Alice"), (2, "Bob"), (3, "ALICE"), (2, "Dave"), (5, "Eve")]
        )

        by_id = schema.create_index(records, ["id"])
        by_name = schema.create_index(records, ["name"])

        assert by_id.find_first({"id": 2})["name"] == "Bob"
        assert by_id.positions({"id": 2}) == [1, 3]
        assert by_id.find_first({"id": 9}) is None
        assert by_name.positions({"name": "alice"}) == [0, 2]
