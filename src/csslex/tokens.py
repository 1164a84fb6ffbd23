"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """CSS3 token categories; each value is the category's display name."""

    # Scanner flags
    ERROR = "error"
    EOF = "EOF"

    # CSS3 tokens
    IDENT = "IDENT"
    ATKEYWORD = "ATKEYWORD"  # @ident
    STRING = "STRING"  # "..." or '...'
    HASH = "HASH"  # #name
    NUMBER = "NUMBER"
    PERCENTAGE = "PERCENTAGE"  # 42%
    DIMENSION = "DIMENSION"  # 42px
    URI = "URI"  # url(...)
    UNICODE_RANGE = "UNICODE-RANGE"  # U+0042, U+00??, U+0-7F
    CDO = "CDO"  # <!--
    CDC = "CDC"  # -->
    S = "S"  # whitespace run
    COMMENT = "COMMENT"  # /* ... */
    FUNCTION = "FUNCTION"  # ident(
    INCLUDES = "INCLUDES"  # ~=
    DASHMATCH = "DASHMATCH"  # |=
    PREFIXMATCH = "PREFIXMATCH"  # ^=
    SUFFIXMATCH = "SUFFIXMATCH"  # $=
    SUBSTRINGMATCH = "SUBSTRINGMATCH"  # *=
    DELIM = "DELIM"  # any other single character
    BOM = "BOM"  # U+FEFF at the start of input

    def __str__(self) -> str:
        return self.value

    @property
    def is_terminal(self) -> bool:
        return self is TokenType.ERROR or self is TokenType.EOF


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


def _describe(tt: TokenType, line: int, column: int, value: str) -> str:
    if len(value) > 10:
        return f"{tt} (line: {line}, column: {column}): {value[:10]!r}..."
    return f"{tt} (line: {line}, column: {column}): {value!r}"


@dataclass(frozen=True, slots=True)
class RawToken:
    """A token as scanned: value is the lexeme exactly as it appeared in the input."""

    type: TokenType
    value: str
    line: int
    column: int
    offset: int = 0

    @property
    def position(self) -> Position:
        return Position(self.line, self.column, self.offset)

    def normalize(self) -> Token:
        """Return the decoded token (see `csslex.codec.normalize`)."""
        from csslex.codec import normalize

        return normalize(self)

    def __str__(self) -> str:
        return _describe(self.type, self.line, self.column, self.value)


@dataclass(frozen=True, slots=True)
class Token:
    """A normalized token: value is the canonical (decoded) value, raw the original lexeme.

    Only `csslex.codec.normalize` creates these from scanner output, and it
    refuses a `Token` as input, so a value is never decoded twice.
    """

    type: TokenType
    value: str
    line: int = 0
    column: int = 0
    offset: int = 0
    raw: str = ""

    @property
    def position(self) -> Position:
        return Position(self.line, self.column, self.offset)

    def __str__(self) -> str:
        return _describe(self.type, self.line, self.column, self.value)


# Characters that start an S token
WHITESPACE = frozenset("\t\n\f\r ")

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def is_whitespace(ch: str) -> bool:
    """Return True if ch is CSS whitespace (space, tab, CR, LF, FF)."""
    return ch in WHITESPACE


def is_hex_digit(ch: str) -> bool:
    """Return True if ch is a hexadecimal digit."""
    return ch in _HEX_DIGITS


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return "0" <= ch <= "9"


def is_name_letter(ch: str) -> bool:
    """Return True for the ASCII characters that never need escaping in a name."""
    return "a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_" or ch == "-"


def is_nonascii(ch: str) -> bool:
    """Return True if ch falls in the grammar's nonascii range."""
    o = ord(ch)
    return 0x80 <= o <= 0xD7FF or 0xE000 <= o <= 0xFFFD or 0x10000 <= o <= 0x10FFFF
