"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from csslex.tokens import RawToken, Token


def dump_tokens(tokens: Iterable[RawToken | Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token to *file*, in the ``TYPE (line: l, column: c): 'value'`` form."""
    count = 0
    for tok in tokens:
        file.write(f"{str(tok)}\n")
        count += 1
    file.write(f"-- {count} tokens\n")
