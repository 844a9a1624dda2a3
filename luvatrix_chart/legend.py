from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from luvatrix_chart.canvas.base import Canvas
from luvatrix_chart.grid import Grid, above_n, beside_n, blank, grid_to_renderable, tval
from luvatrix_chart.plot import LegendRenderFn
from luvatrix_chart.renderable import PickFn, Renderable, add_margins, empty_renderable, label, set_pick, spacer
from luvatrix_chart.types import FontStyle, Point, Rect, RectSize


@dataclass(frozen=True)
class LegendRows:
    per_row: int = 4


@dataclass(frozen=True)
class LegendCols:
    per_col: int = 4


LegendOrientation: TypeAlias = LegendRows | LegendCols


@dataclass(frozen=True)
class LegendStyle:
    label_style: FontStyle = field(default_factory=FontStyle)
    margin: float = 20.0
    plot_size: float = 20.0
    orientation: LegendOrientation = LegendRows(4)

    def __post_init__(self) -> None:
        if self.margin < 0:
            raise ValueError("margin must be >= 0")
        if self.plot_size < 0:
            raise ValueError("plot_size must be >= 0")
        n = self.orientation.per_row if isinstance(self.orientation, LegendRows) else self.orientation.per_col
        if n < 1:
            raise ValueError("legend orientation count must be >= 1")


def default_legend_style() -> LegendStyle:
    return LegendStyle()


@dataclass(frozen=True)
class Legend:
    style: LegendStyle
    entries: tuple[tuple[str, LegendRenderFn], ...]


def group_entries(entries: Sequence[tuple[str, LegendRenderFn]]) -> list[tuple[str, list[LegendRenderFn]]]:
    """Merge entries sharing a title, keeping first-appearance order."""
    groups: dict[str, list[LegendRenderFn]] = {}
    for title, fn in entries:
        groups.setdefault(title, []).append(fn)
    return list(groups.items())


def _symbol(style: LegendStyle, fns: Sequence[LegendRenderFn]) -> Renderable:
    def measure(canvas: Canvas) -> RectSize:
        with canvas.preserve():
            canvas.set_font_style(style.label_style)
            _, h = canvas.text_size("X")
        return (style.plot_size, h)

    def draw(canvas: Canvas, size: RectSize) -> PickFn:
        w, h = size
        for fn in fns:
            fn(canvas, Rect(Point(0.0, 0.0), Point(w, h)))
        return lambda _p: None

    return Renderable(measure=measure, draw=draw)


def _entry(style: LegendStyle, title: str, fns: Sequence[LegendRenderFn]) -> Renderable[str]:
    row = beside_n(
        [
            tval(_symbol(style, fns)),
            tval(spacer((style.margin / 4.0, 0.0))),
            tval(label(style.label_style, "left", "centre", title)),
        ]
    )
    return set_pick(lambda _p: title, grid_to_renderable(row))


def legend_to_renderable(legend: Legend) -> Renderable[str]:
    groups = group_entries(legend.entries)
    if not groups:
        return empty_renderable()
    style = legend.style
    items = [_entry(style, title, fns) for title, fns in groups]
    if isinstance(style.orientation, LegendRows):
        n = style.orientation.per_row
        chunks = [items[i : i + n] for i in range(0, len(items), n)]
        width = min(n, len(items))
        rows: list[Grid[Renderable[str]]] = []
        for chunk in chunks:
            cells = [tval(_spaced(style, r, last=(i == width - 1))) for i, r in enumerate(chunk)]
            cells += [blank()] * (width - len(chunk))
            rows.append(beside_n(cells))
        return grid_to_renderable(above_n(rows))

    n = style.orientation.per_col
    chunks = [items[i : i + n] for i in range(0, len(items), n)]
    height = min(n, len(items))
    cols: list[Grid[Renderable[str]]] = []
    for ci, chunk in enumerate(chunks):
        last = ci == len(chunks) - 1
        cells = [tval(_spaced(style, r, last=last)) for r in chunk]
        cells += [blank()] * (height - len(chunk))
        cols.append(above_n(cells))
    return grid_to_renderable(beside_n(cols))


def _spaced(style: LegendStyle, r: Renderable[str], *, last: bool) -> Renderable[str]:
    return r if last else add_margins((0.0, 0.0, 0.0, style.margin), r)
