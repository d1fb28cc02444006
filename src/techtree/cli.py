"""Command line interface: inspect a tech tree or render it to SVG."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from techtree.engine import TechTreeEngine
from techtree.errors import TechTreeError
from techtree.layout import count_crossings
from techtree.loader import load_tree
from techtree.logging_config import setup_logging
from techtree.renderers import SvgRenderer

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1200.0
DEFAULT_HEIGHT = 800.0


def _split_ids(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="techtree", description="Tech tree progression and layout")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--log-file", default=None, help="also write logs to this file")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("tree", type=Path, help="tree definition (JSON)")
    common.add_argument("--width", type=float, default=DEFAULT_WIDTH, help="viewport width in pixels")
    common.add_argument("--height", type=float, default=DEFAULT_HEIGHT, help="viewport height in pixels")
    common.add_argument(
        "--done",
        type=_split_ids,
        default=[],
        metavar="ID,...",
        help="comma-separated ids to mark completed, in order",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("info", parents=[common], help="print layers, crossings and progress")
    render = sub.add_parser("render", parents=[common], help="render the tree to SVG")
    render.add_argument("-o", "--output", type=Path, default=None, help="output file (default: stdout)")
    return parser


def _build_engine(args: argparse.Namespace) -> TechTreeEngine:
    nodes, config = load_tree(args.tree)
    engine = TechTreeEngine(nodes, config)
    engine.complete_many(args.done)
    for node_id in args.done:
        if not engine.is_done(node_id):
            logger.warning("skipping %s: prerequisites not completed", node_id)
    return engine


def _cmd_info(engine: TechTreeEngine, args: argparse.Namespace) -> int:
    tree_layout = engine.layout(args.width, args.height)
    for layer_idx, ids in enumerate(tree_layout.ordering):
        print(f"layer {layer_idx}: {', '.join(ids)}")
    print(f"crossings: {count_crossings(tree_layout.ordering, engine.graph)}")
    progress = engine.progress()
    print(f"progress: {progress.text} ({progress.ratio:.0%})")
    return 0


def _cmd_render(engine: TechTreeEngine, args: argparse.Namespace) -> int:
    snapshot = engine.get_snapshot(args.width, args.height)
    svg = SvgRenderer().render(snapshot, engine.config)
    if args.output is None:
        sys.stdout.write(svg + "\n")
    else:
        args.output.write_text(svg + "\n", encoding="utf-8")
        logger.info("wrote %s", args.output)
    return 0


def run(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return an exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        engine = _build_engine(args)
    except OSError as exc:
        print(f"techtree: cannot read {args.tree}: {exc.strerror or exc}", file=sys.stderr)
        return 2
    except TechTreeError as exc:
        print(f"techtree: {exc}", file=sys.stderr)
        return 2
    except KeyError as exc:
        print(f"techtree: unknown node id {exc.args[0]!r}", file=sys.stderr)
        return 2

    if args.command == "info":
        return _cmd_info(engine, args)
    return _cmd_render(engine, args)


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())
