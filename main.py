from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import Sequence

from luvatrix_chart import (
    Layout1,
    LayoutAxis,
    PlotErrBars,
    PlotLines,
    PlotPoints,
    filled_circles,
    hline_plot,
    layout1_to_renderable,
    left,
    load_chart_config,
    renderable_to_file,
    right,
    solid_line,
    sym_err_point,
)
from luvatrix_chart.types import Point, dashed_line


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="luvatrix-chart")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a chart described by a TOML file.")
    render.add_argument("config", type=Path)
    render.add_argument("--out", type=Path, required=True, help="Output file; .png or .svg.")
    render.add_argument("--width", type=int, default=640)
    render.add_argument("--height", type=int, default=480)
    render.add_argument(
        "--pick",
        type=float,
        nargs=2,
        action="append",
        default=[],
        metavar=("X", "Y"),
        help="Device point to hit-test after rendering; may be repeated.",
    )

    demo = sub.add_parser("demo", help="Render the built-in example chart.")
    demo.add_argument("--out", type=Path, required=True)
    demo.add_argument("--width", type=int, default=640)
    demo.add_argument("--height", type=int, default=480)
    for p in (render, demo):
        p.add_argument("--verbose", action="store_true", help="Log render and export progress to stderr.")

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if args.width <= 0 or args.height <= 0:
        raise ValueError("width/height must be > 0")

    if args.command == "render":
        layout = load_chart_config(args.config).to_layout()
        pick = renderable_to_file(layout1_to_renderable(layout), args.width, args.height, args.out)
        print(f"rendered {args.out} ({args.width}x{args.height})")
        for x, y in args.pick:
            print(f"pick ({x:g}, {y:g}): {pick_label(pick(Point(x, y)))}")
        return

    if args.command == "demo":
        renderable_to_file(layout1_to_renderable(demo_layout()), args.width, args.height, args.out)
        print(f"rendered {args.out} ({args.width}x{args.height})")
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def demo_layout() -> Layout1[float, float]:
    xs = [i * 0.25 for i in range(41)]
    wave = [(x, math.sin(x)) for x in xs]
    samples = [(x, math.sin(x) + 0.1 * math.cos(7 * x)) for x in xs[::4]]
    errs = tuple(sym_err_point(x, y, 0.1, 0.15) for x, y in samples[::2])
    temps = [(x, 20.0 + 5.0 * math.cos(x / 2.0)) for x in xs]
    return Layout1(
        title="Luvatrix chart demo",
        bottom_axis=LayoutAxis(title="t"),
        left_axis=LayoutAxis(title="amplitude"),
        right_axis=LayoutAxis(title="temperature"),
        plots=(
            left(hline_plot("", dashed_line(1.0, (3.0, 3.0), (120, 120, 120)), 0.0)),
            left(PlotLines(title="sin", line_style=solid_line(1.5, (40, 90, 220)), values=(wave,))),
            left(PlotPoints(title="samples", style=filled_circles(3.0, (220, 60, 40)), values=samples)),
            left(PlotErrBars(title="samples", line_style=solid_line(1.0, (220, 60, 40)), values=errs)),
            right(PlotLines(title="temperature", line_style=solid_line(1.0, (30, 160, 90)), values=(temps,))),
        ),
    )


def pick_label(result: object) -> str:
    return "nothing" if result is None else repr(result)


if __name__ == "__main__":
    main()
