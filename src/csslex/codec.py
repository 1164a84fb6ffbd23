"""Conversion between scanned lexemes and canonical token values.

`normalize` strips a raw token's lexical decoration (quotes, ``@``, ``#``,
trailing ``(``, comment markers) and decodes escapes. `emit` goes the other
way, writing a normalized token back out as CSS that scans to the same
category and value. The escaping style of the output may differ from the
original input.
"""

from __future__ import annotations

import re
from typing import TextIO

from csslex.errors import EmitError
from csslex.escapes import escape_ident, escape_name, escape_string, hex_escape, unbackslash
from csslex.tokens import RawToken, Token, TokenType

_NUM = re.compile(r"[0-9]*\.[0-9]+|[0-9]+")

_CSS_WHITESPACE = "\t\n\f\r "

# Categories whose text is fixed; their value carries nothing beyond the type
_FIXED_TEXT: dict[TokenType, str] = {
    TokenType.CDO: "<!--",
    TokenType.CDC: "-->",
    TokenType.INCLUDES: "~=",
    TokenType.DASHMATCH: "|=",
    TokenType.PREFIXMATCH: "^=",
    TokenType.SUFFIXMATCH: "$=",
    TokenType.SUBSTRINGMATCH: "*=",
}


def normalize(token: RawToken) -> Token:
    """Decode a scanned token into its canonical value.

    Only scanner output is accepted. A `Token` has already been decoded, and
    decoding it again would strip quotes or escapes a second time.
    """
    if not isinstance(token, RawToken):
        raise TypeError(
            f"normalize() expects a RawToken from the scanner, got {type(token).__name__}"
        )
    return Token(
        token.type,
        _decode(token.type, token.value),
        token.line,
        token.column,
        token.offset,
        token.value,
    )


def _decode(tt: TokenType, raw: str) -> str:
    if tt is TokenType.IDENT or tt is TokenType.DIMENSION:
        return unbackslash(raw)
    if tt is TokenType.ATKEYWORD or tt is TokenType.HASH:
        return unbackslash(raw[1:])
    if tt is TokenType.FUNCTION:
        return unbackslash(raw[:-1])
    if tt is TokenType.STRING:
        return unbackslash(raw[1:-1], is_string=True)
    if tt is TokenType.PERCENTAGE:
        return raw[:-1]
    if tt is TokenType.COMMENT:
        return raw[2:-2]
    if tt is TokenType.URI:
        return _decode_uri(raw)
    if tt in _FIXED_TEXT:
        return ""
    # NUMBER, UNICODE_RANGE, S, DELIM, BOM, and the terminal tokens
    return raw


def _decode_uri(raw: str) -> str:
    # The URI production only matches "url(" in any letter case, ending with ")"
    inner = raw[4:-1].strip(_CSS_WHITESPACE)
    if not inner:
        return ""
    if len(inner) >= 2 and inner[0] == inner[-1] and inner[0] in "\"'":
        return unbackslash(inner[1:-1])
    return unbackslash(inner)


def render(token: Token) -> tuple[str, ...]:
    """Return the pieces of CSS text that spell token.

    Raises EmitError for error and EOF tokens.
    """
    if not isinstance(token, Token):
        raise TypeError(
            f"render() expects a normalized Token, got {type(token).__name__}; "
            "call normalize() first"
        )
    tt = token.type
    value = token.value
    if tt is TokenType.ERROR:
        raise EmitError("can not emit an error token")
    if tt is TokenType.EOF:
        raise EmitError("can not emit an EOF")
    if tt is TokenType.IDENT:
        if value == "u" or value == "U":
            # a bare "u" before "+" would scan as a unicode range
            return (hex_escape(value),)
        return (escape_ident(value),)
    if tt is TokenType.ATKEYWORD:
        return ("@", escape_ident(value))
    if tt is TokenType.STRING:
        return ('"', escape_string(value), '"')
    if tt is TokenType.HASH:
        return ("#", escape_name(value))
    if tt is TokenType.PERCENTAGE:
        return (value, "%")
    if tt is TokenType.DIMENSION:
        return _render_dimension(token)
    if tt is TokenType.URI:
        return ('url("', escape_string(value), '")')
    if tt is TokenType.COMMENT:
        return ("/*", value, "*/")
    if tt is TokenType.FUNCTION:
        if value.lower() == "url":
            # "url(" starts a URI
            return (hex_escape(value[0]), value[1:], "(")
        return (escape_ident(value), "(")
    if tt is TokenType.BOM:
        return ("\ufeff",)
    if tt in _FIXED_TEXT:
        return (_FIXED_TEXT[tt],)
    # NUMBER, UNICODE_RANGE, S, DELIM
    return (value,)


def _render_dimension(token: Token) -> tuple[str, ...]:
    # The number never contains escapes; an escaped digit or dot belongs to
    # the unit, which only the raw lexeme shows.
    m = _NUM.match(token.raw) or _NUM.match(token.value)
    if m is None:
        return (token.value,)
    number = m.group()
    return (number, escape_ident(token.value[len(number) :]))


def emit(token: Token, sink: TextIO) -> None:
    """Write token to sink as CSS text.

    Raises EmitError for error and EOF tokens. Errors raised by the sink's
    ``write`` propagate unchanged.
    """
    for piece in render(token):
        sink.write(piece)


def emit_text(token: Token) -> str:
    """Return token as CSS text."""
    return "".join(render(token))
