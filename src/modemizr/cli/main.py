"""Main CLI entry point for the modemizr command-line tool.

Plays an HTML or XML document to the terminal at modem speed, or estimates
how long such a reveal would take.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

from modemizr.api.adapters import adapter_names, get_adapter
from modemizr.api.player import play
from modemizr.render.stream import StreamRenderTarget
from modemizr.shared.config import (
    DEFAULT_RECOGNIZED_TAGS,
    ConfigValidationError,
    RevealConfig,
)
from modemizr.shared.logging import get_logger
from modemizr.shared.result import DiagnosticSeverity
from modemizr.tools.analysis import analyze_source
from modemizr.tree.nodes import ElementNode


class CLIError(Exception):
    """Error reported to the user with a non-zero exit code."""


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.reveal_config = RevealConfig()
        self.parser = "lxml"
        self.select: Optional[str] = None
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Keys ``parser``, ``select`` and ``output_format`` configure the CLI;
        a ``reveal`` object holds engine options.
        """
        config = cls()
        if not config_path.exists():
            return config
        try:
            with config_path.open() as f:
                data = json.load(f)
            config.reveal_config = RevealConfig.from_dict(data.get("reveal", {}))
            config.parser = data.get("parser", config.parser)
            config.select = data.get("select", config.select)
            config.output_format = data.get("output_format", config.output_format)
        except (OSError, ValueError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)
        return config

    def apply_arguments(self, args: argparse.Namespace) -> None:
        """Let command-line options win over file settings."""
        overrides: Dict[str, Any] = {}
        if getattr(args, "rate", None) is not None:
            overrides["rate"] = args.rate
        if getattr(args, "speedup", None) is not None:
            overrides["image_speedup"] = args.speedup
        if overrides:
            self.reveal_config = self.reveal_config.override(**overrides)
        if getattr(args, "parser", None):
            self.parser = args.parser
        if getattr(args, "select", None):
            self.select = args.select
        if getattr(args, "format", None):
            self.output_format = args.format


def load_source(
    path: Path,
    parser_name: str,
    select: Optional[str] = None,
    recognized_tags: FrozenSet[str] = DEFAULT_RECOGNIZED_TAGS,
) -> ElementNode:
    """Parse a document and pick the element whose children get revealed.

    Without a <body>, a fragment whose root is itself revealable (such as a
    lone <p>) is wrapped so the root element is revealed too.
    """
    adapter = get_adapter(parser_name)
    if adapter is None:
        raise CLIError(f"Parser '{parser_name}' is not available")
    try:
        markup = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CLIError(f"Cannot read {path}: {e}") from e

    result = adapter.load(markup)
    if not result.success:
        raise CLIError("; ".join(result.errors))
    root: ElementNode = result.converted_data

    wanted = select or "body"
    if root.name == wanted:
        return root
    found = root.find(wanted)
    if found is not None:
        return found
    if select:
        raise CLIError(f"No <{select}> element in {path}")
    if root.name in recognized_tags:
        return ElementNode("body", children=[root])
    return root


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="modemizr",
        description="Reveal documents character by character at modem speed",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Errors only")
    parser.add_argument("--config", type=Path, help="JSON configuration file")

    subparsers = parser.add_subparsers(dest="command")

    def add_source_arguments(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("path", type=Path, help="Document to reveal")
        sub.add_argument(
            "--parser", choices=adapter_names(), help="Library used to parse the document"
        )
        sub.add_argument(
            "--select", help="Tag of the element whose content is revealed (default: body)"
        )
        sub.add_argument("--rate", type=float, help="Line rate in bits per second")
        sub.add_argument("--speedup", type=float, help="Image reveal speedup factor")

    play_parser = subparsers.add_parser("play", help="Reveal a document to stdout")
    add_source_arguments(play_parser)

    estimate_parser = subparsers.add_parser(
        "estimate", help="Estimate how long revealing a document takes"
    )
    add_source_arguments(estimate_parser)
    estimate_parser.add_argument("--format", choices=["text", "json"])

    return parser


def _build_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    config.apply_arguments(args)
    return config


def cmd_play(args: argparse.Namespace) -> int:
    """Handle the play command."""
    config = _build_config(args)
    source = load_source(
        args.path, config.parser, config.select, config.reveal_config.recognized_tags
    )
    render = StreamRenderTarget(sys.stdout)
    target = ElementNode("div")

    engine = asyncio.run(play(target, source, config.reveal_config, render=render))
    render.finish()
    if not engine.finished:
        errors = [
            entry.message for entry in engine.diagnostics
            if entry.severity is DiagnosticSeverity.ERROR
        ]
        raise CLIError(errors[-1] if errors else "Playback stopped before the end")

    logger = get_logger(__name__, engine.correlation_id, "cli")
    logger.info("Playback complete", extra=engine.metrics.to_dict())
    return 0


def cmd_estimate(args: argparse.Namespace) -> int:
    """Handle the estimate command."""
    config = _build_config(args)
    source = load_source(
        args.path, config.parser, config.select, config.reveal_config.recognized_tags
    )
    summary = analyze_source(source, config.reveal_config)

    if config.output_format == "json":
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"{args.path}: {summary.characters} characters, "
              f"{summary.elements} elements, {summary.images} images, "
              f"{summary.pauses} pauses")
        print(f"Estimated duration at {config.reveal_config.rate:g} bps: "
              f"{summary.estimated_seconds:.1f}s")
        if summary.skipped:
            print(f"Skipped: {', '.join(summary.skipped)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if args.command == "play":
            return cmd_play(args)
        if args.command == "estimate":
            return cmd_estimate(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    except (CLIError, ConfigValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nPlayback interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
