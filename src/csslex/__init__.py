"""CSS3 lexical scanner."""

from __future__ import annotations

__version__ = "0.1.0"


def reformat(source: str, filename: str = "input.css") -> str:
    """Scan, normalize, and re-emit CSS source.

    The result scans to the same token categories and canonical values as
    source; escapes and quoting may be written differently.
    """
    from io import StringIO

    from csslex.codec import emit, normalize
    from csslex.lexer import tokenize
    from csslex.tokens import TokenType

    out = StringIO()
    for tok in tokenize(source, filename):
        if tok.type is TokenType.EOF:
            break
        emit(normalize(tok), out)
    return out.getvalue()
