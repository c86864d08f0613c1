"""Type definitions for the typed_records library."""

from __future__ import annotations

import decimal
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Hashable, Iterable


class DataType(Enum):
    """Built-in data type tags recognized by the field spec language."""

    VARCHAR = "varchar"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    VARBINARY = "varbinary"
    GUID = "guid"
    DATETIME = "datetime"
    TIMESPAN = "timespan"
    OBJECT = "object"


# Registered by a default TypeRegistry, in registration order.
# OBJECT is deliberately absent: it is the fallback tag, not a spec name.
DEFAULT_DATA_TYPE_NAMES: list[tuple[str, DataType]] = [
    (dt.value, dt) for dt in DataType if dt is not DataType.OBJECT
]


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, decimal.Decimal):
        return value.is_nan()
    return False


class ValueComparer:
    """Equality and hash capability over a value domain.

    The base class compares with ``==`` and hashes with ``hash()``, except
    that NaN equals NaN so NaN key values can be looked up.
    Subclasses must keep ``hash`` consistent with ``equals``: values that
    compare equal must hash equal.
    """

    NAN_HASH = 0

    def equals(self, x: Any, y: Any) -> bool:
        if _is_nan(x) and _is_nan(y):
            return True
        return bool(x == y)

    def hash(self, value: Any) -> int:
        if _is_nan(value):
            return self.NAN_HASH
        return hash(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CaseInsensitiveComparer(ValueComparer):
    """Compares text by its case-folded form; other values compare as usual."""

    @staticmethod
    def _fold(value: Any) -> Any:
        if isinstance(value, str):
            return value.casefold()
        return value

    def equals(self, x: Any, y: Any) -> bool:
        return super().equals(self._fold(x), self._fold(y))

    def hash(self, value: Any) -> int:
        return super().hash(self._fold(value))


DEFAULT_COMPARER = ValueComparer()
CASE_INSENSITIVE_COMPARER = CaseInsensitiveComparer()


@dataclass
class FieldType:
    """Type of a single record field.

    The comparer is the field's equality capability; the index engine uses
    it to compare key values for this field. ``default_value`` is what a
    record without this field reads as.
    """

    name: str
    data_type: Hashable = DataType.OBJECT
    comparer: ValueComparer = field(default=DEFAULT_COMPARER)
    default_value: Any = None

    def equals(self, x: Any, y: Any) -> bool:
        return self.comparer.equals(x, y)

    def hash(self, value: Any) -> int:
        return self.comparer.hash(value)


class TypeRegistry:
    """Bidirectional mapping between type names and type tags.

    Names are matched case-insensitively. The first name registered for a
    tag becomes its canonical name; any later name for the same tag is an
    alias that resolves forward but never changes the canonical name.
    """

    def __init__(self, data_type_names: Iterable[tuple[str, Hashable]] | None = None) -> None:
        """Initialize a registry.

        Args:
            data_type_names: Ordered (name, tag) pairs. When omitted, the
                built-in data type names are registered.
        """
        self._tags: dict[str, Hashable] = {}
        self._names: dict[Hashable, str] = {}

        if data_type_names is None:
            self._register_defaults()
        else:
            for name, tag in data_type_names:
                self.register(name, tag)

    def _register_defaults(self) -> None:
        """Register the built-in data type names."""
        for name, data_type in DEFAULT_DATA_TYPE_NAMES:
            self._tags[name.casefold()] = data_type
            self._names[data_type] = name

    def register(self, name: str, tag: Hashable) -> None:
        """Register a name for a tag.

        The forward mapping is always updated. The reverse mapping is only
        set the first time the tag is seen.
        """
        self._tags[name.casefold()] = tag
        if tag not in self._names:
            self._names[tag] = name

    def name_to_tag(self, name: str, default: Hashable = None) -> Hashable:
        """Get the tag for a type name, or ``default`` when it is not registered."""
        return self._tags.get(name.casefold(), default)

    def tag_to_name(self, tag: Hashable) -> str | None:
        """Get the canonical name for a tag."""
        return self._names.get(tag)

    def names(self) -> list[str]:
        """List all registered names (case-folded)."""
        return list(self._tags.keys())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._tags

    def __len__(self) -> int:
        return len(self._tags)
