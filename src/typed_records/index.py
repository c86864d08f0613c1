"""Hash-based secondary indexes over record collections."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping, Sequence

from typed_records.records import Record, RecordList, RecordListCursor
from typed_records.types import DEFAULT_COMPARER, FieldType, ValueComparer

logger = logging.getLogger(__name__)


class CompositeKeyComparer:
    """Equality and hash over fixed-length value tuples.

    Each tuple position is compared with its own comparer. Positions without
    a comparer fall back to the default (``==`` / ``hash()``). Field names,
    when given, label the positions in error messages.
    """

    def __init__(
        self,
        comparers: Sequence[ValueComparer | None] | None = None,
        field_names: Sequence[str] | None = None,
    ) -> None:
        self._comparers = list(comparers) if comparers is not None else []
        self._field_names = list(field_names) if field_names is not None else []

    def _comparer_at(self, i: int) -> ValueComparer:
        if i < len(self._comparers) and self._comparers[i] is not None:
            return self._comparers[i]  # type: ignore[return-value]
        return DEFAULT_COMPARER

    def equals(self, x: tuple[Any, ...] | None, y: tuple[Any, ...] | None) -> bool:
        """Two tuples are equal if they have the same length and equal values."""
        if x is None or y is None:
            return x is None and y is None
        if len(x) != len(y):
            return False
        for i, (a, b) in enumerate(zip(x, y)):
            if not self._comparer_at(i).equals(a, b):
                return False
        return True

    def hash(self, values: tuple[Any, ...] | None) -> int:
        """XOR-fold of each position's hash.

        Permutations of the same values collide; that is accepted since
        keys built by one index always have the same field order.

        Raises:
            TypeError: If a value cannot be hashed.
        """
        composite_hash = 0
        if values is not None:
            for i, value in enumerate(values):
                try:
                    composite_hash ^= self._comparer_at(i).hash(value)
                except TypeError as ex:
                    raise TypeError(
                        f"Key value for {self._position_name(i)} is not hashable: {value!r}"
                    ) from ex
        return composite_hash

    def _position_name(self, i: int) -> str:
        if i < len(self._field_names):
            return f"field '{self._field_names[i]}'"
        return f"position {i}"


class CompositeKey:
    """Hashable key tuple bound to the comparer of the index that built it."""

    __slots__ = ("values", "_comparer")

    def __init__(self, values: tuple[Any, ...], comparer: CompositeKeyComparer) -> None:
        self.values = values
        self._comparer = comparer

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompositeKey):
            return NotImplemented
        return self._comparer.equals(self.values, other.values)

    def __hash__(self) -> int:
        return self._comparer.hash(self.values)

    def __repr__(self) -> str:
        return f"CompositeKey{self.values!r}"


class RecordCollectionIndex:
    """Searchable index on an underlying record collection.

    The underlying collection is not part of this interface, so an
    implementation may just as well be backed by a database query.
    """

    @property
    def key_field_names(self) -> list[str]:
        """Names of the fields the index is keyed on."""
        raise NotImplementedError

    def find_first(self, key_record: Any) -> Record | None:
        """Get the first record matching the key fields of ``key_record``, or None."""
        raise NotImplementedError

    def get_record_cursor(self, key_record: Any) -> IndexResultCursor:
        """Get a cursor over every record matching the key fields of ``key_record``."""
        raise NotImplementedError


class RecordListIndex(RecordCollectionIndex):
    """Index over a RecordList, keyed on one or more fields.

    The index is a snapshot: it is filled once by ``build_index()`` and does
    not notice later changes to the list. After the list changes, build a
    new index.
    """

    def __init__(self, record_list: RecordList, key_field_names: Iterable[str]) -> None:
        """Create an index. Call ``build_index()`` before querying it.

        Raises:
            ValueError: If an argument is missing or no key field is given.
            KeyError: If a key field is not in the record list's schema.
        """
        if record_list is None:
            raise ValueError("record_list is required")
        if key_field_names is None:
            raise ValueError("key_field_names is required")
        if isinstance(key_field_names, str):
            key_field_names = [key_field_names]

        self._key_field_names = list(key_field_names)
        if not self._key_field_names:
            raise ValueError("At least one key field name is required")
        self._record_list = record_list

        schema = record_list.schema
        self._key_field_types: list[FieldType] = [
            schema[name] for name in self._key_field_names
        ]
        self._key_comparer = CompositeKeyComparer(
            [field_type.comparer for field_type in self._key_field_types],
            self._key_field_names,
        )
        self._positions: dict[CompositeKey, list[int]] = {}

        logger.debug("Created index on %s", self._key_field_names)

    @property
    def key_field_names(self) -> list[str]:
        return list(self._key_field_names)

    @property
    def record_list(self) -> RecordList:
        """The record list this index is attached to."""
        return self._record_list

    @property
    def key_count(self) -> int:
        """Number of distinct keys in the index."""
        return len(self._positions)

    def build_index(self) -> None:
        """Scan the record list and record the position of every record under its key."""
        record_count = self._record_list.count
        with self._record_list.get_cursor() as cursor:
            for position in range(record_count):
                if cursor.move_to(position):
                    key = self._create_key(cursor.current)
                    bucket = self._positions.get(key)
                    if bucket is None:
                        bucket = self._positions[key] = []
                    bucket.append(position)

        logger.debug(
            "Built index on %s: %d keys over %d records",
            self._key_field_names,
            len(self._positions),
            record_count,
        )

    def _create_key(self, record: Any) -> CompositeKey:
        """Extract the key fields of a record. Missing fields read as the field's default."""
        values = []
        for name, field_type in zip(self._key_field_names, self._key_field_types):
            found, value = record.try_get_value(name)
            values.append(value if found else field_type.default_value)
        return CompositeKey(tuple(values), self._key_comparer)

    def _find_bucket(self, key_record: Any) -> list[int] | None:
        record = _as_accessor(key_record)
        if record is None:
            return None
        return self._positions.get(self._create_key(record))

    def positions(self, key_record: Any) -> list[int]:
        """Positions of the records matching ``key_record``, in scan order."""
        bucket = self._find_bucket(key_record)
        return list(bucket) if bucket else []

    def find_first(self, key_record: Any) -> Record | None:
        bucket = self._find_bucket(key_record)
        if not bucket:
            return None
        return self._record_list[bucket[0]]

    def get_record_cursor(self, key_record: Any) -> IndexResultCursor:
        bucket = self._find_bucket(key_record)
        positions = tuple(bucket) if bucket else ()
        return IndexResultCursor(positions, self._record_list.get_cursor())

    enumerate = get_record_cursor


def _as_accessor(key_record: Any) -> Any:
    """Accept a record accessor or a plain mapping of field values."""
    if key_record is None:
        return None
    if hasattr(key_record, "try_get_value"):
        return key_record
    if isinstance(key_record, Mapping):
        return Record(key_record)
    raise TypeError(f"Expected a record or mapping, got {type(key_record)}")


class IndexResultCursor:
    """Cursor over the records found by an index query.

    Moves a shared record list cursor to each result position in turn.
    Close it (or use it as a context manager) to release that cursor.
    """

    def __init__(self, positions: Sequence[int], base_cursor: RecordListCursor) -> None:
        self._positions = positions
        self._base_cursor = base_cursor
        self._result_position = -1
        self._closed = False

    @property
    def count(self) -> int:
        """Number of results."""
        return len(self._positions)

    @property
    def current(self) -> Record | None:
        return self._base_cursor.current

    def move_next(self) -> bool:
        """Advance to the next result. Returns False once the results are exhausted."""
        if self._result_position < len(self._positions):
            self._result_position += 1
        if self._result_position < len(self._positions):
            return self._base_cursor.move_to(self._positions[self._result_position])
        return False

    def reset(self) -> None:
        """Rewind to before the first result."""
        self._result_position = -1

    def close(self) -> None:
        if not self._closed:
            self._base_cursor.close()
            self._closed = True

    def __iter__(self) -> Iterator[Record]:
        while self.move_next():
            yield self.current  # type: ignore[misc]

    def __enter__(self) -> IndexResultCursor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
