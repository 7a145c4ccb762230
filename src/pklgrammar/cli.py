"""Command-line interface for the Pkl grammar."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pygments import highlight
from pygments.formatters import get_formatter_by_name
from pygments.token import _TokenType
from pygments.util import ClassNotFound

from pklgrammar.engine import parse_token_type
from pklgrammar.errors import GrammarError

CONFIG_NAME = "pklgrammar.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Options for the commands that read a Pkl file."""

    input_file: Path
    output_file: Path | None
    formatter: str
    style: str
    tag_tokens: dict[str, _TokenType]
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="pklgrammar",
        description="Pkl lexical grammar: highlight, inspect and check",
    )
    p.add_argument(
        "--debug", action="store_true", help="Debug logging and rule tree dump to stderr"
    )
    sub = p.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("highlight", "Highlight a .pkl file with a Pygments formatter"),
        ("tokens", "Print the classified token stream of a .pkl file"),
    ):
        c = sub.add_parser(name, help=help_text)
        c.add_argument("input", help="Input .pkl file")
        c.add_argument("-o", "--output", help="Output file (default: stdout)")
        c.add_argument(
            "--config",
            metavar="FILE",
            help=f"Config file (default: auto-discover {CONFIG_NAME})",
        )
        c.add_argument(
            "--tag",
            action="append",
            default=[],
            metavar="TAG=TOKEN",
            help="Map a classification tag to a Pygments token type (repeatable)",
        )
        if name == "highlight":
            c.add_argument("-f", "--formatter", help="Pygments formatter (default: terminal)")
            c.add_argument("--style", help="Pygments style (default: default)")

    d = sub.add_parser("dump", help="Print the rule tree")
    d.add_argument("--json", action="store_true", help="highlight.js mode JSON")
    sub.add_parser("check", help="Check the grammar for construction defects")
    return p


def parse_tag_arg(s: str) -> tuple[str, _TokenType]:
    """Parse a TAG=TOKEN string into (tag, Pygments token type)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"invalid tag format (expected TAG=TOKEN): {s}")
    tag, _, name = s.partition("=")
    try:
        return tag, parse_token_type(name)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

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

    formatter = "terminal"
    style = "default"
    cfg_highlight = config.get("highlight")
    if isinstance(cfg_highlight, dict):
        if isinstance(cfg_highlight.get("formatter"), str):
            formatter = cfg_highlight["formatter"]
        if isinstance(cfg_highlight.get("style"), str):
            style = cfg_highlight["style"]
    if getattr(args, "formatter", None):
        formatter = args.formatter
    if getattr(args, "style", None):
        style = args.style

    # Tag overrides: config < CLI
    tag_tokens: dict[str, _TokenType] = {}
    cfg_tags = config.get("tags")
    if isinstance(cfg_tags, dict):
        for k, v in cfg_tags.items():
            tag, ttype = parse_tag_arg(f"{k}={v}")
            tag_tokens[tag] = ttype
    for raw in args.tag:
        tag, ttype = parse_tag_arg(raw)
        tag_tokens[tag] = ttype

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        formatter=formatter,
        style=style,
        tag_tokens=tag_tokens,
        debug=args.debug,
    )


def highlight_file(options: CliOptions) -> str:
    """Read a Pkl file and render it with the configured Pygments formatter."""
    from pklgrammar.lexer import lexer_class

    source = options.input_file.read_text(encoding="utf-8")
    formatter = get_formatter_by_name(options.formatter, style=options.style)
    return highlight(source, lexer_class(options.tag_tokens)(), formatter)


def format_tokens(options: CliOptions) -> str:
    """Render the token stream of a Pkl file, one token per line."""
    from pklgrammar.lexer import lexer_class, tokenize

    source = options.input_file.read_text(encoding="utf-8")
    lines = []
    for tok in tokenize(source, lexer_class(options.tag_tokens)()):
        start = tok.span.start
        lines.append(f"{start.line}:{start.column}\t{tok.type}\t{tok.value!r}")
    return "\n".join(lines) + "\n"


def _write(text: str, output_file: Path | None) -> None:
    if output_file:
        output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    from pklgrammar.check import check_grammar
    from pklgrammar.debug import dump_grammar
    from pklgrammar.export import to_json
    from pklgrammar.grammar import PKL

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)
        dump_grammar(PKL)

    if args.command == "dump":
        if args.json:
            sys.stdout.write(to_json(PKL) + "\n")
        else:
            dump_grammar(PKL, file=sys.stdout)
        return 0

    if args.command == "check":
        try:
            check_grammar(PKL)
        except GrammarError as exc:
            print(exc.format(PKL.name), file=sys.stderr)
            return 1
        print(f"{PKL.name} grammar OK")
        return 0

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    try:
        if args.command == "highlight":
            text = highlight_file(options)
        else:
            text = format_tokens(options)
    except ClassNotFound as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _write(text, options.output_file)
    return 0
