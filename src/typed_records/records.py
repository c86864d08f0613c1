"""In-memory record storage: schema, record accessors, record lists and cursors."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Sequence

from typed_records.types import FieldType


class RecordSchema:
    """Ordered set of named, typed fields."""

    def __init__(self, fields: Iterable[FieldType] = ()) -> None:
        self._fields: dict[str, FieldType] = {}
        for field_type in fields:
            self.add_field(field_type)

    def add_field(self, field_type: FieldType) -> None:
        """Add a field to the end of the schema."""
        if field_type.name in self._fields:
            raise ValueError(f"Field '{field_type.name}' is already defined")
        self._fields[field_type.name] = field_type

    def get(self, name: str) -> FieldType | None:
        """Get a field type by name."""
        return self._fields.get(name)

    @property
    def field_names(self) -> list[str]:
        return list(self._fields.keys())

    @property
    def field_types(self) -> list[FieldType]:
        return list(self._fields.values())

    def __getitem__(self, name: str) -> FieldType:
        field_type = self._fields.get(name)
        if field_type is None:
            raise KeyError(f"Field '{name}' not found")
        return field_type

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"RecordSchema({self.field_names!r})"


class Record:
    """Read access to the field values of one record.

    A record only holds the fields it was given; reading any other field
    reports "not found" instead of failing.
    """

    def __init__(self, values: Mapping[str, Any], schema: RecordSchema | None = None) -> None:
        self._values = dict(values)
        self.schema = schema

    def try_get_value(self, name: str) -> tuple[bool, Any]:
        """Return (found, value) for a field."""
        if name in self._values:
            return True, self._values[name]
        return False, None

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __getitem__(self, name: str) -> Any:
        found, value = self.try_get_value(name)
        if not found:
            raise KeyError(f"Field '{name}' not found")
        return value

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __repr__(self) -> str:
        return f"Record({self._values!r})"


class RecordList:
    """Ordered in-memory list of records sharing one schema."""

    def __init__(self, schema: RecordSchema, rows: Iterable[Any] = ()) -> None:
        """Initialize a record list.

        Args:
            schema: Schema every record conforms to.
            rows: Initial rows (dicts, or sequences in schema field order).
        """
        self._schema = schema
        self._rows: list[dict[str, Any]] = []
        self.extend(rows)

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    @property
    def count(self) -> int:
        """Return the number of records in the list."""
        return len(self._rows)

    def _to_row(self, values: Mapping[str, Any] | Sequence[Any]) -> dict[str, Any]:
        """Convert a dict or positional sequence into a row dict."""
        if isinstance(values, Mapping):
            for name in values:
                if name not in self._schema:
                    raise KeyError(f"Field '{name}' not found")
            return dict(values)
        if isinstance(values, (list, tuple)):
            names = self._schema.field_names
            if len(values) > len(names):
                raise ValueError(
                    f"Expected at most {len(names)} values, got {len(values)}"
                )
            return {name: v for name, v in zip(names, values)}
        raise TypeError(f"Expected dict or tuple for a record, got {type(values)}")

    def append(self, values: Mapping[str, Any] | Sequence[Any]) -> int:
        """Append a record and return its position."""
        self._rows.append(self._to_row(values))
        return len(self._rows) - 1

    def extend(self, rows: Iterable[Any]) -> None:
        for values in rows:
            self.append(values)

    def update(self, position: int, values: Mapping[str, Any] | Sequence[Any]) -> None:
        """Replace the record at the given position."""
        self._check_position(position)
        self._rows[position] = self._to_row(values)

    def _check_position(self, position: int) -> None:
        if position < 0 or position >= len(self._rows):
            raise IndexError(f"Index {position} out of range [0, {len(self._rows)})")

    def get_cursor(self) -> RecordListCursor:
        """Open a cursor over this list. Close it when done."""
        return RecordListCursor(self)

    def __getitem__(self, position: int) -> Record:
        self._check_position(position)
        return Record(self._rows[position], self._schema)

    def __iter__(self) -> Iterator[Record]:
        for row in self._rows:
            yield Record(row, self._schema)

    def __len__(self) -> int:
        return len(self._rows)


class RecordListCursor:
    """Movable, position-addressable handle into a RecordList.

    A cursor starts before the first record. It must be closed after use;
    a closed cursor cannot be moved or read.
    """

    def __init__(self, record_list: RecordList) -> None:
        self._record_list = record_list
        self._position = -1
        self._closed = False

    @property
    def position(self) -> int:
        """Current position, or -1 when not on a record."""
        return self._position

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Cursor is closed")

    def move_to(self, position: int) -> bool:
        """Move to a record position. Returns False if there is no such record."""
        self._check_open()
        if 0 <= position < self._record_list.count:
            self._position = position
            return True
        self._position = -1
        return False

    @property
    def current(self) -> Record | None:
        """The record under the cursor, or None before the first move."""
        self._check_open()
        if self._position < 0:
            return None
        return self._record_list[self._position]

    def close(self) -> None:
        """Release the cursor."""
        self._closed = True

    def __enter__(self) -> RecordListCursor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
