"""Command-line interface for csslex."""

from __future__ import annotations

import argparse
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from csslex.errors import LexError
from csslex.tokens import RawToken, Token, TokenType

FORMATS = ("tokens", "json", "css")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    output_format: str
    normalize: bool
    skip: list[TokenType]
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="csslex",
        description="CSS3 lexical scanner",
    )
    p.add_argument("input", help="Input .css file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: tokens)",
    )
    p.add_argument(
        "-n",
        "--normalize",
        action="store_true",
        default=None,
        help="Show decoded token values instead of raw lexemes",
    )
    p.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="TYPE",
        help=(
            "Leave out tokens of this type, e.g. S or COMMENT "
            "(repeatable; ignored by the css format)"
        ),
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover csslex.toml)",
    )
    p.add_argument("--debug", action="store_true", help="Dump the token stream to stderr")
    return p


def parse_type_arg(s: str) -> TokenType:
    """Parse a token type display name (``S``, ``UNICODE-RANGE``) or enum name, any case."""
    key = s.strip().upper()
    for tt in TokenType:
        if key == tt.value.upper() or key == tt.name:
            return tt
    raise argparse.ArgumentTypeError(f"unknown token type: {s}")


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "csslex.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    cfg_output = config.get("output")
    if not isinstance(cfg_output, dict):
        cfg_output = {}
    cfg_scan = config.get("scan")
    if not isinstance(cfg_scan, dict):
        cfg_scan = {}

    # Output format: config < CLI
    output_format = "tokens"
    cfg_format = cfg_output.get("format")
    if cfg_format is not None:
        if cfg_format not in FORMATS:
            raise argparse.ArgumentTypeError(
                f"invalid output format in config: {cfg_format!r} "
                f"(expected one of {', '.join(FORMATS)})"
            )
        output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    # Normalization: config < CLI
    normalize = False
    cfg_normalize = cfg_output.get("normalize")
    if isinstance(cfg_normalize, bool):
        normalize = cfg_normalize
    if args.normalize is not None:
        normalize = args.normalize

    # Skipped types: config + CLI
    skip: list[TokenType] = []
    cfg_skip = cfg_scan.get("skip")
    if isinstance(cfg_skip, list):
        skip.extend(parse_type_arg(str(name)) for name in cfg_skip)
    skip.extend(parse_type_arg(name) for name in args.skip)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=output_format,
        normalize=normalize,
        skip=skip,
        debug=args.debug,
    )


def _token_record(tok: RawToken | Token) -> dict[str, Any]:
    return {"type": str(tok.type), "value": tok.value, "line": tok.line, "column": tok.column}


def scan_file(options: CliOptions) -> str:
    """Read and scan a CSS file, returning the output text for the chosen format."""
    from csslex.codec import emit_text, normalize
    from csslex.debug import dump_tokens
    from csslex.lexer import tokenize

    source = options.input_file.read_text(encoding="utf-8")
    # The css format writes the whole stream; without whitespace or comments
    # neighboring tokens would run together.
    skip = () if options.output_format == "css" else options.skip
    tokens = [
        tok
        for tok in tokenize(source, str(options.input_file), skip=skip)
        if tok.type is not TokenType.EOF
    ]

    if options.debug:
        dump_tokens(tokens, file=sys.stderr)

    if options.output_format == "css":
        return "".join(emit_text(normalize(tok)) for tok in tokens)

    shown: list[RawToken] | list[Token] = tokens
    if options.normalize:
        shown = [normalize(tok) for tok in tokens]

    if options.output_format == "json":
        return json.dumps([_token_record(tok) for tok in shown], indent=2, ensure_ascii=False) + "\n"

    return "".join(f"{str(tok)}\n" for tok in shown)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    try:
        output = scan_file(options)
        if options.output_file:
            options.output_file.write_text(output, encoding="utf-8")
        else:
            sys.stdout.write(output)
    except LexError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 0
