"""Command-line interface for ventolex."""

from __future__ import annotations

import argparse
import io
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ventolex.errors import LexError

FORMATS = ("text", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    output_format: str
    strict_comments: bool
    watch: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="ventolex",
        description="Tokenize {{ }} template source",
    )
    p.add_argument("input", help="Input template file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover ventolex.toml)",
    )
    p.add_argument(
        "--strict-comments",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Fail on an unterminated {{# comment instead of truncating",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-tokenize")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "ventolex.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags. Raises
    argparse.ArgumentTypeError on malformed config values.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    # Strict comments: config < CLI
    strict_comments = False
    cfg_lexer = config.get("lexer")
    if isinstance(cfg_lexer, dict) and "strict_comments" in cfg_lexer:
        cfg_strict = cfg_lexer["strict_comments"]
        if not isinstance(cfg_strict, bool):
            raise argparse.ArgumentTypeError(
                f"invalid lexer.strict_comments (expected true/false): {cfg_strict!r}"
            )
        strict_comments = cfg_strict
    if args.strict_comments is not None:
        strict_comments = args.strict_comments

    # Output format: config < CLI
    output_format = "text"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict) and "format" in cfg_output:
        cfg_format = cfg_output["format"]
        if cfg_format not in FORMATS:
            raise argparse.ArgumentTypeError(
                f"invalid output.format (expected one of {', '.join(FORMATS)}): {cfg_format!r}"
            )
        output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=output_format,
        strict_comments=strict_comments,
        watch=args.watch,
        verbose=args.verbose,
    )


def tokenize_file(options: CliOptions) -> str:
    """Read and tokenize a template file, returning the formatted token dump."""
    from ventolex.debug import dump_tokens, tokens_to_json
    from ventolex.lexer import tokenize

    source = options.input_file.read_text(encoding="utf-8")
    tokens = tokenize(source, str(options.input_file), strict_comments=options.strict_comments)

    if options.output_format == "json":
        return tokens_to_json(tokens) + "\n"

    buf = io.StringIO()
    dump_tokens(tokens, file=buf)
    return buf.getvalue()


def _write_output(options: CliOptions, text: str) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-tokenize on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    _write_output(options, tokenize_file(options))
                    print(f"Tokenized {options.input_file}", file=sys.stderr)
                except LexError as exc:
                    print(str(exc), file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr
        )

    if options.watch:
        watch_loop(options)
        return 0

    try:
        text = tokenize_file(options)
    except LexError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    _write_output(options, text)
    return 0
