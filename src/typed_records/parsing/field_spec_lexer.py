"""Lexer for the field schema spec language."""

import re

import ply.lex as lex
from ply.lex import TOKEN


class FieldSpecLexer:
    """Lexer for tokenizing a field schema spec string.

    Each lexer state is one scanning phase of a field:

      INITIAL    reading the field name
      fieldtype  reading the type name (after the type delimiter)
      option     reading raw option text (after the option start delimiter)
      trailing   discarding text between the option end and the next field

    Delimiters are matched as literal substrings and may be longer than one
    character. They default to the class constants below, which subclasses
    may override, and can also be given to the constructor. Every character
    that is not a delimiter in the current state comes out as a single CHAR
    token; nothing is illegal.
    """

    FIELD_DELIMITER = ","
    TYPE_DELIMITER = ":"
    OPTION_START_DELIMITER = "("
    OPTION_END_DELIMITER = ")"

    tokens = [
        "FIELD_DELIMITER",
        "TYPE_DELIMITER",
        "OPTION_START",
        "OPTION_END",
        "CHAR",
    ]

    states = (
        ("fieldtype", "exclusive"),
        ("option", "exclusive"),
        ("trailing", "exclusive"),
    )

    # Whitespace is significant (names are trimmed by the parser, options are not)
    t_ANY_ignore = ""

    def __init__(
        self,
        field_delimiter: str | None = None,
        type_delimiter: str | None = None,
        option_start_delimiter: str | None = None,
        option_end_delimiter: str | None = None,
    ) -> None:
        self.field_delimiter = self._delimiter(field_delimiter, self.FIELD_DELIMITER)
        self.type_delimiter = self._delimiter(type_delimiter, self.TYPE_DELIMITER)
        self.option_start_delimiter = self._delimiter(
            option_start_delimiter, self.OPTION_START_DELIMITER
        )
        self.option_end_delimiter = self._delimiter(
            option_end_delimiter, self.OPTION_END_DELIMITER
        )
        self.lexer: lex.Lexer = None  # type: ignore

    @staticmethod
    def _delimiter(value: str | None, default: str) -> str:
        delimiter = default if value is None else value
        if not delimiter:
            raise ValueError("Delimiters must not be empty")
        return delimiter

    def _add_rules(self) -> None:
        """Create the token rules for this lexer's delimiters.

        ply tries function rules in source line order, so the field delimiter
        rule comes first and the catch-all character rules come last.
        """

        @TOKEN(re.escape(self.field_delimiter))
        def field_delimiter(t: lex.LexToken) -> lex.LexToken:
            t.lexer.begin("INITIAL")
            return t

        @TOKEN(re.escape(self.type_delimiter))
        def type_delimiter(t: lex.LexToken) -> lex.LexToken:
            t.lexer.begin("fieldtype")
            return t

        @TOKEN(re.escape(self.option_start_delimiter))
        def option_start(t: lex.LexToken) -> lex.LexToken:
            t.lexer.begin("option")
            return t

        @TOKEN(re.escape(self.option_end_delimiter))
        def option_end(t: lex.LexToken) -> lex.LexToken:
            t.lexer.begin("trailing")
            return t

        def char(t: lex.LexToken) -> lex.LexToken:
            r"."
            return t

        def skipped(t: lex.LexToken) -> None:
            r"."

        self.t_INITIAL_fieldtype_trailing_FIELD_DELIMITER = field_delimiter
        self.t_INITIAL_TYPE_DELIMITER = type_delimiter
        self.t_fieldtype_OPTION_START = option_start
        self.t_option_OPTION_END = option_end
        self.t_INITIAL_fieldtype_option_CHAR = char
        self.t_trailing_SKIPPED = skipped

    def t_ANY_error(self, t: lex.LexToken) -> None:
        # CHAR matches everything under DOTALL; only reached with other reflags
        t.lexer.skip(1)

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self._add_rules()
        kwargs.setdefault("reflags", re.DOTALL)
        self.lexer = lex.lex(module=self, **kwargs)

    def spawn(self) -> lex.Lexer:
        """Return an independent lexer sharing this lexer's compiled rules.

        Each spawned lexer has its own input, position and state, so several
        can scan concurrently.
        """
        return self.lexer.clone()

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)
        self.lexer.begin("INITIAL")

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
