"""Command-line interface for symtext."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from symtext.errors import LexError
from symtext.graphemes import ClusterStrategy, UnknownStrategy, clusters_of, get_strategy
from symtext.lexer import ScannedLiteral

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    strategy: str | None
    names: bool
    debug: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="symtext",
        description="List the string literals of a source file",
    )
    p.add_argument("input", help="Input source file")
    p.add_argument(
        "--clusters",
        metavar="STRATEGY",
        default=None,
        help="Also show grapheme clusters under STRATEGY (codepoint, extended, legacy)",
    )
    p.add_argument(
        "--names",
        action="store_true",
        default=None,
        help="Show the Unicode name of every character",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover symtext.toml)",
    )
    p.add_argument("--debug", action="store_true", help="Dump literal tokens to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "symtext.toml"

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
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    # Character names: config < CLI
    names = False
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_names = cfg_output.get("names")
        if isinstance(cfg_names, bool):
            names = cfg_names
    if args.names is not None:
        names = args.names

    # Clustering strategy: config < CLI
    strategy: str | None = None
    cfg_graphemes = config.get("graphemes")
    if isinstance(cfg_graphemes, dict):
        cfg_strategy = cfg_graphemes.get("strategy")
        if isinstance(cfg_strategy, str):
            strategy = cfg_strategy
    if args.clusters is not None:
        strategy = args.clusters

    if strategy is not None:
        try:
            get_strategy(strategy)
        except UnknownStrategy as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return CliOptions(
        input_file=input_file,
        strategy=strategy,
        names=names,
        debug=args.debug,
        verbose=args.verbose,
    )


def format_literal(
    scanned: ScannedLiteral, names: bool = False, strategy: ClusterStrategy | None = None
) -> str:
    """Render one scanned literal as report lines (no trailing newline)."""
    literal = scanned.literal
    start = literal.span.start
    form = "multi-line" if literal.multiline else "single-line"
    head = f"{start.line}:{start.column} {form} delimiter={literal.delimiter_length}"

    if scanned.value is None:
        reason = scanned.error.message if scanned.error is not None else "rejected"
        return f"{head} rejected: {reason}"

    lines = [f"{head} {str(scanned.value)!r}"]
    if names:
        for symbol in scanned.value.characters():
            lines.append(f"  U+{symbol.code_point:04X} {symbol.name}")
    if strategy is not None:
        groups = (
            "[" + " ".join(f"{cp:04X}" for cp in c.code_points()) + "]"
            for c in clusters_of(scanned.value, strategy)
        )
        lines.append(f"  clusters ({strategy.name}): " + " ".join(groups))
    return "\n".join(lines)


def scan_file(options: CliOptions) -> list[ScannedLiteral]:
    """Read a source file and scan every literal in it."""
    from symtext.debug import dump_literals
    from symtext.lexer import tokenize_literals

    source = options.input_file.read_text(encoding="utf-8")
    scanned = tokenize_literals(source, str(options.input_file))
    logger.debug("%s: %d literal(s)", options.input_file, len(scanned))

    if options.debug:
        dump_literals(scanned)

    return scanned


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        scanned = scan_file(options)
    except LexError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {options.input_file}: {exc}", file=sys.stderr)
        return 2

    strategy = get_strategy(options.strategy) if options.strategy is not None else None
    rejected = 0
    for item in scanned:
        print(format_literal(item, names=options.names, strategy=strategy))
        if item.error is not None:
            rejected += 1

    return 2 if rejected else 0
