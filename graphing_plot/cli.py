from __future__ import annotations

import argparse
import logging
import re
import sys
from typing import Callable, Sequence

from graphing_plot import __version__
from graphing_plot.api import plot
from graphing_plot.colors import ColorConfig, prompt_for_colors
from graphing_plot.errors import PlotError
from graphing_plot.sampler import DEFAULT_SCAN_STEPS
from graphing_plot.scales import ViewRange


LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="graphing", description="Package that graphs math expressions.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    # -h is the height option, so help is only reachable as --help.
    p = sub.add_parser("plot", help="Plot a math expression.", add_help=False)
    p.add_argument("--help", action="help", help="Show this message and exit.")
    p.add_argument("expression", help="Math expression in x to graph, e.g. 'x^2 - 4'.")
    p.add_argument("-x", "--xmin", type=float, default=-10.0, help="Minimum x value.")
    p.add_argument("-X", "--xmax", type=float, default=10.0, help="Maximum x value.")
    p.add_argument("-y", "--ymin", type=float, default=-10.0, help="Minimum y value.")
    p.add_argument("-Y", "--ymax", type=float, default=10.0, help="Maximum y value.")
    p.add_argument("-w", "--width", type=int, default=800, help="Plot width in pixels/characters.")
    p.add_argument("-h", "--height", type=int, default=600, help="Plot height in pixels/characters.")
    p.add_argument("-o", "--output", default="plot.png", help="Output filename.")
    p.add_argument("-d", "--default", action="store_true", help="Use default colors without prompting.")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("-i", "--interactive", action="store_true", help="Create an interactive HTML plot.")
    mode.add_argument("-a", "--ascii", action="store_true", help="Create an ASCII plot for terminal output.")
    p.add_argument("-p", "--points", type=float, default=0.0, help="Point interval for selectable points (0 disables).")
    p.add_argument("--scan-steps", type=_positive_int, default=DEFAULT_SCAN_STEPS, help="Intervals used by the root scan.")
    p.add_argument("--no-solve", action="store_true", help="Skip symbolic root solving.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Sequence[str] | None = None, *, input_fn: Callable[[str], str] = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command == "plot":
        return _run_plot(args, input_fn=input_fn)
    raise RuntimeError(f"unsupported command: {args.command}")


def _run_plot(args: argparse.Namespace, *, input_fn: Callable[[str], str]) -> int:
    if args.interactive:
        kind = "interactive HTML"
    elif args.ascii:
        kind = "ASCII terminal"
    else:
        kind = "high-resolution"
    print(f"\nCreating {kind} plot: {args.expression}")
    print(f"X range: {_fmt(args.xmin)} to {_fmt(args.xmax)}")
    print(f"Y range: {_fmt(args.ymin)} to {_fmt(args.ymax)}")
    if args.ascii:
        print(f"ASCII resolution: {args.width}x{args.height} characters")
    elif not args.interactive:
        print(f"Resolution: {args.width}x{args.height} pixels")

    colors: ColorConfig | None = None
    if not args.default and not args.ascii:
        colors = prompt_for_colors("interactive" if args.interactive else "static", input_fn=input_fn)
    print()

    try:
        view = ViewRange(xmin=args.xmin, xmax=args.xmax, ymin=args.ymin, ymax=args.ymax)
        common = dict(
            view=view,
            width=args.width,
            height=args.height,
            colors=colors,
            point_interval=args.points,
            steps=args.scan_steps,
            use_solver=not args.no_solve,
        )
        if args.interactive:
            filename = re.sub(r"\.png$", ".htm", args.output)
            result = plot(args.expression, mode="interactive", output=filename, **common)
            print(f"Interactive HTML plot saved as: {result.path}")
            print(f"\nOpen {result.path} in your web browser to view the interactive plot!")
        elif args.ascii:
            result = plot(args.expression, mode="ascii", **common)
            print("ASCII plot for terminal output:")
            print(result.text, end="")
        else:
            result = plot(args.expression, mode="static", output=args.output, **common)
            print(f"Plot saved as: {result.path}")
            print(f"\nExpression: {args.expression}")
            print(f"\nTo view the plot, open: {result.path}")
    except (PlotError, OSError) as exc:
        LOGGER.debug("plot failed", exc_info=True)
        print(f"Error plotting expression: {exc}", file=sys.stderr)
        return 1
    return 0


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def _fmt(value: float) -> str:
    return f"{value:g}"
