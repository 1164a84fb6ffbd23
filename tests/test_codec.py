"""Test normalization of raw tokens and emission of normalized tokens."""

from io import StringIO

import pytest

from csslex import reformat
from csslex.codec import emit, emit_text, normalize, render
from csslex.errors import EmitError, LexError
from csslex.lexer import Scanner
from csslex.tokens import RawToken, Token, TokenType

T = TokenType


def raw(tt: TokenType, value: str) -> RawToken:
    return RawToken(tt, value, 1, 1)


class TestNormalize:
    @pytest.mark.parametrize(
        ("tt", "lexeme", "expected"),
        [
            (T.IDENT, "color", "color"),
            (T.IDENT, "B\\26 W\\3F", "B&W?"),
            (T.ATKEYWORD, "@media", "media"),
            (T.ATKEYWORD, "@\\6d edia", "media"),
            (T.STRING, '"abc"', "abc"),
            (T.STRING, "'a\\'b'", "a'b"),
            (T.STRING, '"a\\\nb"', "ab"),
            (T.STRING, '""', ""),
            (T.HASH, "#fff", "fff"),
            (T.HASH, "#\\31 23", "123"),
            (T.PERCENTAGE, "42%", "42"),
            (T.DIMENSION, "42px", "42px"),
            (T.DIMENSION, "1\\32 px", "12px"),
            (T.COMMENT, "/* foo */", " foo "),
            (T.FUNCTION, "rgb(", "rgb"),
            (T.FUNCTION, "r\\67 b(", "rgb"),
            (T.NUMBER, "4.2", "4.2"),
            (T.UNICODE_RANGE, "U+0042", "U+0042"),
            (T.S, " \n\t", " \n\t"),
            (T.DELIM, ":", ":"),
            (T.BOM, "\ufeff", "\ufeff"),
        ],
    )
    def test_value(self, tt, lexeme, expected):
        assert normalize(raw(tt, lexeme)).value == expected

    @pytest.mark.parametrize(
        ("tt", "lexeme"),
        [
            (T.CDO, "<!--"),
            (T.CDC, "-->"),
            (T.INCLUDES, "~="),
            (T.DASHMATCH, "|="),
            (T.PREFIXMATCH, "^="),
            (T.SUFFIXMATCH, "$="),
            (T.SUBSTRINGMATCH, "*="),
        ],
    )
    def test_fixed_text_collapses_to_empty(self, tt, lexeme):
        assert normalize(raw(tt, lexeme)).value == ""

    def test_keeps_position_and_lexeme(self):
        tok = normalize(RawToken(T.STRING, "'x'", 3, 9, 40))
        assert (tok.type, tok.line, tok.column, tok.offset) == (T.STRING, 3, 9, 40)
        assert tok.raw == "'x'"

    def test_rejects_normalized_token(self):
        tok = normalize(raw(T.STRING, '"\'quoted\'"'))
        assert tok.value == "'quoted'"
        with pytest.raises(TypeError, match="RawToken"):
            normalize(tok)  # type: ignore[arg-type]


class TestNormalizeURI:
    @pytest.mark.parametrize(
        ("lexeme", "expected"),
        [
            ("url(/pic.png)", "/pic.png"),
            ("url( /pic.png )", "/pic.png"),
            ("uRl(/pic.png)", "/pic.png"),
            ("URL(/pic.png)", "/pic.png"),
            ('url("/pic.png")', "/pic.png"),
            ("url('/pic.png')", "/pic.png"),
            ("url(  '/pic.png'\n)", "/pic.png"),
            ("url(/*x*/pic.png)", "/*x*/pic.png"),
            ("url('/pic.png?badchars=\\(\\'\\\"\\)\\ ')", "/pic.png?badchars=('\") "),
            ("url(a\\20 b)", "a b"),
            ('url("a\\\nb")', "a\nb"),
            ("url('a\\\nb')", "a\nb"),
            ("url()", ""),
            ("url(   )", ""),
        ],
    )
    def test_value(self, lexeme, expected):
        assert normalize(raw(T.URI, lexeme)).value == expected

    def test_single_quote_character(self):
        assert normalize(raw(T.URI, "url(')")).value == "'"

    def test_unquoted_and_quoted_agree(self, lex_normalized):
        (bare,) = lex_normalized("url(/pic.png)")
        (quoted,) = lex_normalized("url('/pic.png')")
        assert bare.type == quoted.type == T.URI
        assert bare.value == quoted.value == "/pic.png"


def norm(tt: TokenType, value: str, lexeme: str = "") -> Token:
    return Token(tt, value, 1, 1, 0, lexeme)


class TestEmit:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            (norm(T.IDENT, "color"), "color"),
            (norm(T.IDENT, "B&W?"), "B\\&W\\?"),
            (norm(T.IDENT, "u"), "\\75 "),
            (norm(T.IDENT, "U"), "\\55 "),
            (norm(T.ATKEYWORD, "media"), "@media"),
            (norm(T.STRING, 'say "hi"'), '"say\\ \\"hi\\""'),
            (norm(T.HASH, "fff"), "#fff"),
            (norm(T.NUMBER, "4.2"), "4.2"),
            (norm(T.PERCENTAGE, "42"), "42%"),
            (norm(T.DIMENSION, "42px", "42px"), "42px"),
            (norm(T.DIMENSION, "12px", "1\\32 px"), "1\\32 px"),
            (norm(T.DIMENSION, "42px"), "42px"),
            (norm(T.URI, "/pic.png"), 'url("/pic.png")'),
            (norm(T.URI, ""), 'url("")'),
            (norm(T.UNICODE_RANGE, "U+0042"), "U+0042"),
            (norm(T.CDO, ""), "<!--"),
            (norm(T.CDC, ""), "-->"),
            (norm(T.S, " \n"), " \n"),
            (norm(T.COMMENT, " foo "), "/* foo */"),
            (norm(T.FUNCTION, "rgb"), "rgb("),
            (norm(T.FUNCTION, "url"), "\\75 rl("),
            (norm(T.FUNCTION, "URL"), "\\55 RL("),
            (norm(T.INCLUDES, ""), "~="),
            (norm(T.DASHMATCH, ""), "|="),
            (norm(T.PREFIXMATCH, ""), "^="),
            (norm(T.SUFFIXMATCH, ""), "$="),
            (norm(T.SUBSTRINGMATCH, ""), "*="),
            (norm(T.DELIM, ":"), ":"),
            (norm(T.BOM, "\ufeff"), "\ufeff"),
        ],
    )
    def test_text(self, token, expected):
        assert emit_text(token) == expected
        out = StringIO()
        emit(token, out)
        assert out.getvalue() == expected

    def test_writes_incrementally(self):
        pieces: list[str] = []

        class Recorder:
            def write(self, s: str) -> int:
                pieces.append(s)
                return len(s)

        emit(norm(T.STRING, "abc"), Recorder())  # type: ignore[arg-type]
        assert pieces == ['"', "abc", '"']

    def test_error_token(self):
        with pytest.raises(EmitError, match="error token"):
            emit(norm(T.ERROR, "unclosed comment"), StringIO())

    def test_eof_token(self):
        with pytest.raises(EmitError, match="EOF"):
            emit_text(norm(T.EOF, ""))

    def test_nothing_written_for_unemittable(self):
        out = StringIO()
        with pytest.raises(EmitError):
            emit(norm(T.EOF, ""), out)
        assert out.getvalue() == ""

    def test_sink_failure_propagates(self):
        class FullDisk:
            def write(self, s: str) -> int:
                raise OSError("no space left on device")

        with pytest.raises(OSError, match="no space"):
            emit(norm(T.IDENT, "a"), FullDisk())  # type: ignore[arg-type]

    def test_rejects_raw_token(self):
        with pytest.raises(TypeError, match="normalize"):
            render(raw(T.IDENT, "a"))  # type: ignore[arg-type]


ROUND_TRIP_SOURCES = [
    "color",
    "-moz-border",
    "B\\&W\\?",
    "B\\26 W\\3F",
    "\\31 a",
    "-\\-x",
    "\u00e9t\u00e9",
    "\u2603",
    "@media",
    "@\\6d edia",
    '"abc"',
    "'it\\'s'",
    "'say \"hi\"'",
    '"a\\\nb"',
    '"tab\there"',
    '"\\a line"',
    "#fff",
    "#\\31 23",
    "4.2",
    ".42",
    "42%",
    "42px",
    "1\\32 px",
    "1\\.5",
    "url(/pic.png)",
    "url( '/a b.png' )",
    "url('/pic.png?badchars=\\(\\'\\\"\\)\\ ')",
    "url()",
    'url("a\\\nb")',
    "U+0042",
    "<!--",
    "-->",
    "   \n\t",
    "/* foo */",
    "rgb(",
    "r\\67 b(",
    "\\75 rl(",
    "\\55",
    "~=",
    "|=",
    "^=",
    "$=",
    "*=",
    ":",
    "\\",
    "!",
    "\ufeff",
]


class TestRoundTrip:
    @pytest.mark.parametrize("source", ROUND_TRIP_SOURCES)
    def test_emit_rescans_to_same_value(self, source):
        (first, eof) = list(Scanner(source))
        assert eof.type == T.EOF
        token = normalize(first)

        text = emit_text(token)
        (again, eof) = list(Scanner(text))
        assert eof.type == T.EOF, f"{text!r} scanned to more than one token"
        assert again.type == token.type
        assert normalize(again).value == token.value


class TestReformat:
    def test_plain_rule_unchanged(self):
        assert reformat("a{color:red}") == "a{color:red}"

    def test_escapes_rewritten(self):
        assert reformat("b\\26 w { content: 'x' }") == 'b\\&w { content: "x" }'

    def test_unclosed_string(self):
        with pytest.raises(LexError, match="unclosed quotation mark"):
            reformat("a { content: 'x }")

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("a { background: \\75 rl(x) }", "a { background: \\75 rl(x) }"),
            ("\\55+1A", "\\55 +1A"),
            ("\\75 +0042", "\\75 +0042"),
        ],
    )
    def test_neighbors_do_not_merge(self, source, expected):
        text = reformat(source)
        assert text == expected
        assert _stream(text) == _stream(source)

    def test_function_named_url_stays_function(self):
        assert _stream(reformat("\\75 rl(x)")) == [
            (T.FUNCTION, "url"),
            (T.IDENT, "x"),
            (T.DELIM, ")"),
        ]


def _stream(source: str) -> list[tuple[TokenType, str]]:
    return [(t.type, t.value) for t in map(normalize, Scanner(source)) if not t.type.is_terminal]
