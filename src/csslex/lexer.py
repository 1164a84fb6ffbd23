"""CSS3 scanner: converts source text into a stream of raw tokens."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum, auto

from csslex.errors import LexError
from csslex.grammar import ProductionTable, default_table
from csslex.tokens import WHITESPACE, RawToken, TokenType, is_digit

# Characters that are always a DELIM on their own
_SIMPLE_DELIMS = frozenset(":,;%&+=>()[]{}")

# First character -> (two-or-more character token, its type); on a mismatch the
# first character alone is a DELIM.
_PREFIXED: dict[str, tuple[str, TokenType]] = {
    "~": ("~=", TokenType.INCLUDES),
    "|": ("|=", TokenType.DASHMATCH),
    "^": ("^=", TokenType.PREFIXMATCH),
    "$": ("$=", TokenType.SUFFIXMATCH),
    "*": ("*=", TokenType.SUBSTRINGMATCH),
    "<": ("<!--", TokenType.CDO),
}

_BOM = "\ufeff"


class ScannerState(Enum):
    SCANNING = auto()
    ENDED = auto()  # EOF produced
    ERRORED = auto()  # unclosed string or comment


class Scanner:
    """Produce CSS3 tokens from source text, one per `next_token` call.

    Once the end of input or an error is reached, every further call returns
    that same terminal token.

    CRLF pairs are replaced with LF in a single pass, so CR CR LF becomes
    CR LF. A whitespace token holding that pair scans as a lone LF if it is
    written out and read again.
    """

    def __init__(self, source: str, table: ProductionTable | None = None) -> None:
        self._source = source.replace("\r\n", "\n")
        self._table = table if table is not None else default_table()
        self._pos = 0
        self._line = 1
        self._col = 1
        self._state = ScannerState.SCANNING
        self._terminal: RawToken | None = None

    @property
    def source(self) -> str:
        """The input after line ending normalization."""
        return self._source

    @property
    def state(self) -> ScannerState:
        return self._state

    def __iter__(self) -> Iterator[RawToken]:
        """Yield tokens up to and including the terminal (EOF or error) token."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type.is_terminal:
                return

    def next_token(self) -> RawToken:
        """Return the next token from the input.

        At the end of the input the token type is EOF. If the input can't be
        tokenized the type is ERROR and the value a description of the
        problem; this happens for unclosed quotation marks and comments.
        """
        if self._terminal is not None:
            return self._terminal

        src = self._source
        pos = self._pos
        if pos >= len(src):
            return self._finish(ScannerState.ENDED, TokenType.EOF, "")

        # Tested only once, at the beginning of the input
        if pos == 0 and src.startswith(_BOM):
            return self._emit_simple(TokenType.BOM, _BOM)

        ch = src[pos]
        table = self._table

        if ch in WHITESPACE:
            return self._emit_token(TokenType.S, table.match(TokenType.S, src, pos))

        if ch == ".":
            # Followed by a digit it is a number, matched by the productions below
            if pos + 1 < len(src) and not is_digit(src[pos + 1]):
                return self._emit_simple(TokenType.DELIM, ".")

        elif ch == "#":
            match = table.match(TokenType.HASH, src, pos)
            if match:
                return self._emit_token(TokenType.HASH, match)
            return self._emit_simple(TokenType.DELIM, "#")

        elif ch == "@":
            match = table.match(TokenType.ATKEYWORD, src, pos)
            if match:
                return self._emit_token(TokenType.ATKEYWORD, match)
            return self._emit_simple(TokenType.DELIM, "@")

        elif ch in _SIMPLE_DELIMS:
            return self._emit_simple(TokenType.DELIM, ch)

        elif ch == '"' or ch == "'":
            match = table.match(TokenType.STRING, src, pos)
            if match:
                return self._emit_token(TokenType.STRING, match)
            return self._finish(ScannerState.ERRORED, TokenType.ERROR, "unclosed quotation mark")

        elif ch == "/":
            if src.startswith("*", pos + 1):
                match = table.match(TokenType.COMMENT, src, pos)
                if match:
                    return self._emit_token(TokenType.COMMENT, match)
                return self._finish(ScannerState.ERRORED, TokenType.ERROR, "unclosed comment")
            return self._emit_simple(TokenType.DELIM, "/")

        elif ch in _PREFIXED:
            prefix, tt = _PREFIXED[ch]
            if src.startswith(prefix, pos):
                return self._emit_simple(tt, prefix)
            return self._emit_simple(TokenType.DELIM, ch)

        found = table.match_first(src, pos)
        if found is not None:
            return self._emit_token(*found)

        # Unclosed strings and comments were handled above, so whatever is
        # left is a single character.
        return self._emit_simple(TokenType.DELIM, ch)

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _finish(self, state: ScannerState, tt: TokenType, value: str) -> RawToken:
        self._state = state
        self._terminal = RawToken(tt, value, self._line, self._col, self._pos)
        return self._terminal

    def _emit_token(self, tt: TokenType, text: str) -> RawToken:
        """Return a token for text and advance past it, counting newlines."""
        tok = RawToken(tt, text, self._line, self._col, self._pos)
        lines = text.count("\n")
        if lines:
            self._line += lines
            self._col = len(text) - text.rfind("\n")
        else:
            self._col += len(text)
        self._pos += len(text)
        return tok

    def _emit_simple(self, tt: TokenType, text: str) -> RawToken:
        """Like `_emit_token` for text known not to contain a newline."""
        tok = RawToken(tt, text, self._line, self._col, self._pos)
        self._col += len(text)
        self._pos += len(text)
        return tok


def tokenize(
    source: str,
    filename: str = "input.css",
    *,
    skip: Iterable[TokenType] = (),
) -> list[RawToken]:
    """Convenience function: scan source and return the token list, ending with EOF.

    Tokens whose type is in skip are left out. Raises LexError if the scanner
    stops on an error token.
    """
    skipped = frozenset(skip)
    scanner = Scanner(source)
    tokens: list[RawToken] = []
    for tok in scanner:
        if tok.type is TokenType.ERROR:
            raise LexError(tok.value, tok.position, scanner.source, filename)
        if tok.type not in skipped:
            tokens.append(tok)
    return tokens
