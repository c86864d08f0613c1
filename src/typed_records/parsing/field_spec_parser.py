"""Parser for the field schema spec language.

A field schema spec is a comma-separated list of field names with optional
type information appended after a colon, and optional free-form option text
in parentheses after the type name::

    id:int32,name:varchar,age:int32(required)

Parsing is lenient: malformed or partial text never raises. Missing type
names and options default to the empty string, and unknown type names
resolve to the parser's default type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterator

import ply.lex as lex

from typed_records.parsing.field_spec_lexer import FieldSpecLexer
from typed_records.types import DataType, TypeRegistry


@dataclass(frozen=True)
class FieldDescriptor:
    """A parsed field: name, declared and resolved type, raw option text."""

    name: str
    declared_type_name: str = ""
    resolved_type: Hashable = DataType.OBJECT
    option_spec: str = ""


class FieldSchemaSpec:
    """Parser for field schema spec strings."""

    UNSPECIFIED_TYPE_NAME = ""
    UNSPECIFIED_OPTION_SPEC = ""

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        default_type: Hashable = DataType.OBJECT,
        lexer: FieldSpecLexer | None = None,
    ) -> None:
        """Initialize a parser.

        Args:
            registry: Names recognized as data types. Defaults to the
                built-in names (varchar, int32, ...).
            default_type: Tag for type names the registry does not know,
                including the empty type name.
            lexer: Lexer to scan with, e.g. one with other delimiters.
                It is built here if it has not been built yet.
        """
        self.registry = registry if registry is not None else TypeRegistry()
        self.default_type = default_type
        self._lexer = lexer if lexer is not None else FieldSpecLexer()
        if self._lexer.lexer is None:
            self._lexer.build()

    def parse(self, spec: str | None) -> FieldSpecEnumeration:
        """Parse a spec string into a lazy sequence of (name, descriptor) pairs.

        The returned object can be iterated any number of times; each
        iteration rescans the string from the beginning.
        """
        return FieldSpecEnumeration(self, spec)

    def parse_fields(self, spec: str | None) -> list[FieldDescriptor]:
        """Parse a spec string into a list of field descriptors."""
        return [descriptor for _, descriptor in self.parse(spec)]

    def parse_field(
        self, spec: str | None, start_position: int = 0
    ) -> tuple[FieldDescriptor | None, int]:
        """Parse a single field starting at ``start_position``.

        Returns:
            The field descriptor (None when no input remains) and the number
            of characters read, including a terminating field delimiter.
        """
        return self._scan_field(self._lexer.spawn(), spec, start_position)

    def _scan_field(
        self, lexer: lex.Lexer, spec: str | None, start_position: int
    ) -> tuple[FieldDescriptor | None, int]:
        """Scan one field with the given lexer."""
        if not spec or start_position >= len(spec):
            return None, 0

        lexer.input(spec)
        lexer.lexpos = start_position
        lexer.begin("INITIAL")

        buffer: list[str] = []
        name: str | None = None
        type_name: str | None = None
        option_spec: str | None = None

        while True:
            tok = lexer.token()
            if tok is None or tok.type == "FIELD_DELIMITER":
                # End of field (or of input) closes whichever phase is open
                if name is None:
                    name = "".join(buffer)
                elif type_name is None:
                    type_name = "".join(buffer)
                break
            if tok.type == "CHAR":
                buffer.append(tok.value)
            elif tok.type == "TYPE_DELIMITER":
                name = "".join(buffer)
                buffer.clear()
            elif tok.type == "OPTION_START":
                type_name = "".join(buffer)
                buffer.clear()
            elif tok.type == "OPTION_END":
                option_spec = "".join(buffer)
                buffer.clear()

        # ply leaves lexpos one past the end after reporting end of input
        char_count = min(lexer.lexpos, len(spec)) - start_position
        return self._make_descriptor(name, type_name, option_spec), char_count

    def _make_descriptor(
        self, name: str, type_name: str | None, option_spec: str | None
    ) -> FieldDescriptor:
        if type_name is None:
            type_name = self.UNSPECIFIED_TYPE_NAME
        if option_spec is None:
            option_spec = self.UNSPECIFIED_OPTION_SPEC

        type_name = type_name.strip()
        return FieldDescriptor(
            name=name.strip(),
            declared_type_name=type_name,
            resolved_type=self.registry.name_to_tag(type_name, self.default_type),
            option_spec=option_spec,
        )


class FieldSpecEnumeration:
    """Restartable sequence of (name, descriptor) pairs parsed from a spec string.

    Every iterator gets its own lexer, so separate iterations over the same
    spec never share scan state. A single iterator must not be advanced
    from more than one thread.
    """

    def __init__(self, parser: FieldSchemaSpec, spec: str | None) -> None:
        self._parser = parser
        self._spec = spec

    def __iter__(self) -> Iterator[tuple[str, FieldDescriptor]]:
        spec = self._spec
        if not spec:
            return

        lexer = self._parser._lexer.spawn()
        position = 0
        while position < len(spec):
            descriptor, char_count = self._parser._scan_field(lexer, spec, position)
            if char_count <= 0:
                break
            position += char_count
            if descriptor is not None:
                yield descriptor.name, descriptor

    def __repr__(self) -> str:
        return f"FieldSpecEnumeration({self._spec!r})"
