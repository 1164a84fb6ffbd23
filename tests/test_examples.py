"""Integration test: scan all example .css files and check they reformat cleanly."""

from __future__ import annotations

from pathlib import Path

import pytest

from csslex import reformat
from csslex.codec import normalize
from csslex.lexer import tokenize
from csslex.tokens import TokenType

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


def _find_css_files() -> list[Path]:
    """Find all .css files in the examples directory."""
    return sorted(EXAMPLES_DIR.rglob("*.css"))


@pytest.fixture(params=_find_css_files(), ids=lambda p: str(p.relative_to(EXAMPLES_DIR)))
def css_file(request: pytest.FixtureRequest) -> Path:
    return request.param


def _canonical(source: str) -> list[tuple[TokenType, str]]:
    return [(t.type, t.value) for t in map(normalize, tokenize(source)) if t.type != TokenType.EOF]


class TestExampleFiles:
    def test_tokenizes_without_error(self, css_file: Path):
        source = css_file.read_text(encoding="utf-8")
        tokens = tokenize(source, filename=css_file.name)
        assert tokens[-1].type == TokenType.EOF

    def test_tokens_cover_source(self, css_file: Path):
        """Concatenated lexemes reproduce the (line-ending normalized) input."""
        source = css_file.read_text(encoding="utf-8")
        tokens = tokenize(source, filename=css_file.name)
        assert "".join(t.value for t in tokens) == source.replace("\r\n", "\n")

    def test_no_catch_all_backslash(self, css_file: Path):
        source = css_file.read_text(encoding="utf-8")
        for tok in tokenize(source):
            assert tok.value != "\\", f"stray backslash at {tok.line}:{tok.column}"

    def test_reformat_preserves_tokens(self, css_file: Path):
        source = css_file.read_text(encoding="utf-8")
        assert _canonical(reformat(source)) == _canonical(source)
