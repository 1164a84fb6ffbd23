"""CSS3 lexical grammar: macros, token productions, and the compiled production table.

Productions are written in terms of macros (``{ident}``, ``{escape}``, ...)
which are substituted textually until no references remain, then compiled.
See http://www.w3.org/TR/css3-syntax/#tokenization.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType

from csslex.tokens import TokenType

_MACRO_REF = re.compile(r"\{([a-z]+)\}")

# Guard against self-referencing macro tables
_MAX_EXPANSION_ROUNDS = 32

# Name runs, escapes and string bodies are atomic groups: each has exactly one
# useful parse, and retrying alternatives after a failed match is exponential
# in the number of escapes.
MACROS: Mapping[str, str] = MappingProxyType(
    {
        "ident": r"-?{nmstart}(?>{nmchar}*)",
        "name": r"(?>{nmchar}+)",
        "nmstart": r"[a-zA-Z_]|{nonascii}|{escape}",
        "nonascii": r"[\u0080-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]",
        "unicode": r"\\[0-9a-fA-F]{1,6}{wc}?",
        "escape": r"(?>{unicode}|\\[ -~\u0080-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff])",
        "nmchar": r"[a-zA-Z0-9_-]|{nonascii}|{escape}",
        "num": r"[0-9]*\.[0-9]+|[0-9]+",
        "string": r""""(?>(?:{stringchar}|')*)"|'(?>(?:{stringchar}|")*)'""",
        # Neither quote is a plain string character; each string form adds back
        # the one that does not delimit it.
        "stringchar": r"[\t !#-&(-\[\]-~]|{nonascii}|{escape}|\\{nl}",
        # A backslash only ever starts an escape, never stands for itself
        "urlchar": r"[\t!#-&'-\[\]-~]|{nonascii}|{escape}",
        "nl": r"\r\n|[\n\r\f]",
        "w": r"{wc}*",
        "wc": r"[\t\n\f\r ]",
    }
)

# CDO, the match operators, DELIM and BOM are recognized by the scanner's
# first-character dispatch and have no production.
PRODUCTIONS: Mapping[TokenType, str] = MappingProxyType(
    {
        TokenType.IDENT: r"{ident}",
        TokenType.ATKEYWORD: r"@{ident}",
        TokenType.STRING: r"{string}",
        TokenType.HASH: r"#{name}",
        TokenType.NUMBER: r"{num}",
        TokenType.PERCENTAGE: r"{num}%",
        TokenType.DIMENSION: r"{num}{ident}",
        TokenType.URI: r"[Uu][Rr][Ll]\({w}(?:{string}|{urlchar}*){w}\)",
        TokenType.UNICODE_RANGE: r"[Uu]\+[0-9A-F?]{1,6}(?:-[0-9A-F]{1,6})?",
        TokenType.CDC: r"-->",
        TokenType.S: r"{wc}+",
        TokenType.COMMENT: r"/\*[^*]*\*+(?:[^/*][^*]*\*+)*/",
        TokenType.FUNCTION: r"{ident}\(",
    }
)

# Tried in this order when the first character gives no shortcut. Some
# categories are textual prefixes of others, so the order is significant.
MATCH_ORDER: tuple[TokenType, ...] = (
    TokenType.URI,
    TokenType.FUNCTION,
    TokenType.UNICODE_RANGE,
    TokenType.IDENT,
    TokenType.DIMENSION,
    TokenType.PERCENTAGE,
    TokenType.NUMBER,
    TokenType.CDC,
)


def expand_macros(pattern: str, macros: Mapping[str, str] = MACROS) -> str:
    """Substitute ``{name}`` macro references in pattern until none remain.

    Each reference is wrapped in a non-capturing group so alternations inside
    a macro stay local to it. Quantifiers such as ``{1,6}`` are left alone.
    """

    def replace(m: re.Match[str]) -> str:
        name = m.group(1)
        if name not in macros:
            raise ValueError(f"unknown macro {{{name}}} in pattern {pattern!r}")
        return "(?:" + macros[name] + ")"

    result = pattern
    for _ in range(_MAX_EXPANSION_ROUNDS):
        if not _MACRO_REF.search(result):
            return result
        result = _MACRO_REF.sub(replace, result)
    raise ValueError(f"macro expansion did not terminate for pattern {pattern!r}")


class ProductionTable:
    """Compiled matchers for the token productions.

    Immutable after construction and safe to share between scanners and
    threads; compiled patterns hold no per-match state.
    """

    __slots__ = ("_matchers", "_order")

    def __init__(
        self,
        productions: Mapping[TokenType, str] = PRODUCTIONS,
        macros: Mapping[str, str] = MACROS,
        order: tuple[TokenType, ...] = MATCH_ORDER,
    ) -> None:
        missing = [tt for tt in order if tt not in productions]
        if missing:
            names = ", ".join(str(tt) for tt in missing)
            raise ValueError(f"match order names categories without a production: {names}")
        self._matchers = MappingProxyType(
            {tt: re.compile(expand_macros(p, macros)) for tt, p in productions.items()}
        )
        self._order = tuple(order)

    @property
    def order(self) -> tuple[TokenType, ...]:
        return self._order

    def __contains__(self, tt: object) -> bool:
        return tt in self._matchers

    def pattern(self, tt: TokenType) -> re.Pattern[str]:
        return self._matchers[tt]

    def match(self, tt: TokenType, text: str, pos: int = 0) -> str:
        """Return the text matched by tt's production at pos, or "" if it does not match."""
        m = self._matchers[tt].match(text, pos)
        return m.group() if m else ""

    def match_first(self, text: str, pos: int = 0) -> tuple[TokenType, str] | None:
        """Try the fallback productions in order; return the first (type, text) match."""
        for tt in self._order:
            m = self._matchers[tt].match(text, pos)
            if m and m.end() > pos:
                return tt, m.group()
        return None


@lru_cache(maxsize=None)
def default_table() -> ProductionTable:
    """Return the process-wide table compiled from the CSS3 grammar."""
    return ProductionTable()
