#!/usr/bin/env python3
"""
Run Pattern Script.

Emit G-code for a single move, rectangle or meander infill.

Usage:
    python -m toolpath.scripts.run_pattern move x=10 y=10
    python -m toolpath.scripts.run_pattern rect 10 5 --direction CCW --start UR
    python -m toolpath.scripts.run_pattern meander 10 10 3 --orientation y --tail
    python -m toolpath.scripts.run_pattern -o out/part.gcode meander 10 5 2

G-code goes to stdout (or --output); log messages go to stderr.
"""

from __future__ import annotations

import argparse
import logging
import sys

from toolpath.configs.loader import ConfigError, load_config
from toolpath.gcode.errors import GCodeError
from toolpath.gcode.moves import Corner, Direction, Orientation
from toolpath.gcode.session import GCodeSession
from toolpath.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _axis_value(text: str) -> tuple[str, float]:
    """Parse ``axis=value`` command-line words."""
    axis, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(
            f"expected AXIS=VALUE, got {text!r}"
        )
    try:
        return axis, float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"{value!r} is not a number"
        ) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate G-code for a move, rectangle or meander",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", "-c", type=str, help="Configuration file path")
    parser.add_argument("--output", "-o", type=str, help="Output file (default: stdout)")
    parser.add_argument("--header", type=str, help="File copied before the program")
    parser.add_argument("--footer", type=str, help="File appended after the program")
    parser.add_argument(
        "--echo", action="store_true", help="Mirror commands to stdout",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )

    sub = parser.add_subparsers(dest="pattern", required=True)

    move = sub.add_parser("move", help="Single linear move")
    move.add_argument("axes", nargs="+", type=_axis_value, metavar="AXIS=VALUE")
    move.add_argument(
        "--absolute", action="store_true",
        help="Interpret values as absolute targets",
    )

    rect = sub.add_parser("rect", help="Trace a rectangle")
    rect.add_argument("width", type=float)
    rect.add_argument("height", type=float)
    rect.add_argument(
        "--direction", default="CW", choices=[d.value for d in Direction],
        type=str.upper,
    )
    rect.add_argument(
        "--start", default="LL", choices=[c.value for c in Corner],
        type=str.upper,
    )

    meander = sub.add_parser("meander", help="Meander infill of a rectangle")
    meander.add_argument("width", type=float)
    meander.add_argument("height", type=float)
    meander.add_argument("spacing", type=float)
    meander.add_argument(
        "--start", default="LL", choices=[c.value for c in Corner],
        type=str.upper,
    )
    meander.add_argument(
        "--orientation", default="x", choices=[o.value for o in Orientation],
        type=str.lower,
    )
    meander.add_argument(
        "--tail", action="store_true",
        help="Omit the closing sweep after the last jog",
    )
    return parser


def run(args: argparse.Namespace) -> None:
    """Execute the parsed command against a fresh session."""
    config = load_config(args.config)
    setup_logging(
        args.log_level or config.logging.level,
        config.logging.file,
        json_format=config.logging.json,
        context={"pattern": args.pattern},
    )

    with GCodeSession(
        args.output,
        header=args.header,
        footer=args.footer,
        echo=args.echo and args.output is not None,
        config=config,
    ) as session:
        engine = session.engine
        if args.pattern == "move":
            axes = dict(args.axes)
            if args.absolute:
                engine.abs_move(**axes)
            else:
                engine.relative()
                engine.move(**axes)
        elif args.pattern == "rect":
            engine.relative()
            engine.rect(
                args.width, args.height,
                direction=args.direction, start=args.start,
            )
        elif args.pattern == "meander":
            plan = engine.meander(
                args.width, args.height, args.spacing,
                start=args.start, orientation=args.orientation,
                tail=args.tail,
            )
            logger.info(
                "Meander: %d passes at %s spacing",
                plan.passes, engine.dialect.number(plan.spacing),
            )
        logger.info("Final position: %s", engine.read_position())


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        run(args)
    except (ConfigError, GCodeError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
