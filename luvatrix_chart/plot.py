from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
import math
from typing import Any, Generic, Literal, Protocol, TypeAlias, TypeVar

import numpy as np

from luvatrix_chart.axis import AxisMax, AxisMin, ExactValue, Limit
from luvatrix_chart.canvas.base import Canvas
from luvatrix_chart.errors import ChartDataError
from luvatrix_chart.types import BLACK, BLUE, RGBA, FillStyle, LineStyle, Point, Rect, solid_line


X = TypeVar("X")
Y = TypeVar("Y")

PointMapFn: TypeAlias = Callable[[tuple[Any, Any]], Point]
LegendRenderFn: TypeAlias = Callable[[Canvas, Rect], None]


@dataclass(frozen=True)
class Plot(Generic[X, Y]):
    """What the layout needs from any plot type.

    `render` draws through a point mapping function that accepts logical
    values or `AxisMin` / `AxisMax` / `ExactValue` limits; `legend` lists
    (title, glyph renderer) pairs; `all_points` is the (xs, ys) pair used to
    size the axes.
    """

    render: Callable[[Canvas, PointMapFn], None]
    legend: tuple[tuple[str, LegendRenderFn], ...] = ()
    all_points: tuple[tuple[X, ...], tuple[Y, ...]] = ((), ())


class ToPlot(Protocol):
    def to_plot(self) -> Plot[Any, Any]: ...


def to_plot(p: ToPlot | Plot[X, Y]) -> Plot[X, Y]:
    if isinstance(p, Plot):
        return p
    return p.to_plot()


def map_xy(pmap: PointMapFn, xy: tuple[Any, Any]) -> Point:
    x, y = xy
    return pmap((ExactValue(x), ExactValue(y)))


def join_plots(plots: Sequence[Plot[X, Y]]) -> Plot[X, Y]:
    def render(canvas: Canvas, pmap: PointMapFn) -> None:
        for p in plots:
            p.render(canvas, pmap)

    legend = tuple(entry for p in plots for entry in p.legend)
    xs = tuple(x for p in plots for x in p.all_points[0])
    ys = tuple(y for p in plots for y in p.all_points[1])
    return Plot(render=render, legend=legend, all_points=(xs, ys))


# Data coercion


def coerce_points(values: Any, *, label: str = "points") -> np.ndarray:
    """Return an (n, 2) float64 array; non-finite entries are kept as nan."""
    if isinstance(values, np.ndarray):
        arr = values
    elif isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
        if len(values) == 0:
            return np.empty((0, 2), dtype=np.float64)
        arr = np.asarray(values, dtype=object)
    else:
        raise ChartDataError(f"unsupported {label} input type: {type(values)!r}")
    if arr.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ChartDataError(f"{label} must be a sequence of (x, y) pairs")
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape, dtype=np.float64)
    for i, row in enumerate(arr.tolist()):
        for j, raw in enumerate(row):
            if raw is None:
                out[i, j] = np.nan
                continue
            try:
                out[i, j] = float(raw)
            except (TypeError, ValueError) as exc:
                raise ChartDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out


def finite_runs(arr: np.ndarray) -> list[np.ndarray]:
    """Split an (n, 2) array at rows containing a non-finite value."""
    mask = np.all(np.isfinite(arr), axis=1) if arr.size else np.zeros(0, dtype=bool)
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[np.ndarray] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append(arr[start : prev + 1])
        start = iv
        prev = iv
    runs.append(arr[start : prev + 1])
    return runs


def _finite_values(arr: np.ndarray, col: int) -> tuple[float, ...]:
    if arr.size == 0:
        return ()
    vals = arr[:, col]
    return tuple(float(v) for v in vals[np.isfinite(vals)])


# Lines


@dataclass(frozen=True)
class PlotLines:
    title: str = ""
    line_style: LineStyle = field(default_factory=lambda: solid_line(1.0, BLUE))
    values: tuple[Any, ...] = ()
    limit_values: tuple[tuple[tuple[Limit, Limit], ...], ...] = ()

    def to_plot(self) -> Plot[float, float]:
        series = [coerce_points(v, label="line values") for v in self.values]
        xs: list[float] = []
        ys: list[float] = []
        for arr in series:
            xs.extend(_finite_values(arr, 0))
            ys.extend(_finite_values(arr, 1))
        for line in self.limit_values:
            for lx, ly in line:
                if isinstance(lx, ExactValue):
                    xs.append(float(lx.value))
                if isinstance(ly, ExactValue):
                    ys.append(float(ly.value))

        def render(canvas: Canvas, pmap: PointMapFn) -> None:
            with canvas.preserve():
                canvas.set_line_style(self.line_style)
                for arr in series:
                    for run in finite_runs(arr):
                        _stroke_polyline(canvas, [map_xy(pmap, (x, y)) for x, y in run.tolist()])
                for line in self.limit_values:
                    _stroke_polyline(canvas, [pmap(pt) for pt in line])

        def render_legend(canvas: Canvas, r: Rect) -> None:
            y = (r.p1.y + r.p2.y) / 2.0
            with canvas.preserve():
                canvas.set_line_style(self.line_style)
                _stroke_polyline(canvas, [Point(r.p1.x, y), Point(r.p2.x, y)])

        return Plot(render=render, legend=((self.title, render_legend),), all_points=(tuple(xs), tuple(ys)))


def _stroke_polyline(canvas: Canvas, points: Sequence[Point]) -> None:
    if not points:
        return
    canvas.new_path()
    canvas.polyline([canvas.align_stroke(p) for p in points])
    canvas.stroke()


def hline_plot(title: str, style: LineStyle, y: float) -> PlotLines:
    """A horizontal line spanning the whole abscissa at `y`."""
    return PlotLines(title=title, line_style=style, limit_values=(((AxisMin(), ExactValue(y)), (AxisMax(), ExactValue(y))),))


def vline_plot(title: str, style: LineStyle, x: float) -> PlotLines:
    return PlotLines(title=title, line_style=style, limit_values=(((ExactValue(x), AxisMin()), (ExactValue(x), AxisMax())),))


# Points

PointShape = Literal["circle", "square", "plus", "cross"]


@dataclass(frozen=True)
class PointStyle:
    color: RGBA = BLACK
    border_color: RGBA = BLACK
    border_width: float = 0.0
    radius: float = 2.0
    shape: PointShape = "circle"

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError("radius must be >= 0")
        if self.border_width < 0:
            raise ValueError("border_width must be >= 0")


def filled_circles(radius: float, color: RGBA) -> PointStyle:
    return PointStyle(color=color, radius=radius, shape="circle")


def draw_point(canvas: Canvas, style: PointStyle, p: Point) -> None:
    r = style.radius
    c = canvas.align_fill(p)
    with canvas.preserve():
        canvas.new_path()
        if style.shape in ("plus", "cross"):
            d = r if style.shape == "plus" else r / math.sqrt(2.0)
            if style.shape == "plus":
                segs = [(Point(c.x - d, c.y), Point(c.x + d, c.y)), (Point(c.x, c.y - d), Point(c.x, c.y + d))]
            else:
                segs = [(Point(c.x - d, c.y - d), Point(c.x + d, c.y + d)), (Point(c.x - d, c.y + d), Point(c.x + d, c.y - d))]
            for a, b in segs:
                canvas.move_to(a)
                canvas.line_to(b)
            canvas.set_line_style(LineStyle(width=max(1.0, style.border_width), color=style.color))
            canvas.stroke()
            return
        _solid_point_path(canvas, style.shape, c, r)
        canvas.set_fill_style(FillStyle(color=style.color))
        canvas.fill()
        if style.border_width > 0:
            _solid_point_path(canvas, style.shape, c, r)
            canvas.set_line_style(LineStyle(width=style.border_width, color=style.border_color))
            canvas.stroke()


def _solid_point_path(canvas: Canvas, shape: PointShape, c: Point, r: float) -> None:
    canvas.new_path()
    if shape == "square":
        canvas.rectangle(Point(c.x - r, c.y - r), Point(c.x + r, c.y + r))
    else:
        canvas.arc(c, r, 0.0, 2 * math.pi)
        canvas.close_path()


@dataclass(frozen=True)
class PlotPoints:
    title: str = ""
    style: PointStyle = field(default_factory=lambda: filled_circles(2.0, BLUE))
    values: Any = ()

    def to_plot(self) -> Plot[float, float]:
        arr = coerce_points(self.values, label="point values")
        finite = arr[np.all(np.isfinite(arr), axis=1)] if arr.size else arr

        def render(canvas: Canvas, pmap: PointMapFn) -> None:
            for x, y in finite.tolist():
                draw_point(canvas, self.style, map_xy(pmap, (x, y)))

        def render_legend(canvas: Canvas, r: Rect) -> None:
            draw_point(canvas, self.style, Point((r.p1.x + r.p2.x) / 2.0, (r.p1.y + r.p2.y) / 2.0))

        return Plot(
            render=render,
            legend=((self.title, render_legend),),
            all_points=(_finite_values(finite, 0), _finite_values(finite, 1)),
        )


# Error bars


@dataclass(frozen=True)
class ErrValue:
    low: float
    best: float
    high: float


@dataclass(frozen=True)
class ErrPoint:
    x: ErrValue
    y: ErrValue


def sym_err_point(x: float, y: float, dx: float, dy: float) -> ErrPoint:
    return ErrPoint(ErrValue(x - dx, x, x + dx), ErrValue(y - dy, y, y + dy))


@dataclass(frozen=True)
class PlotErrBars:
    title: str = ""
    line_style: LineStyle = field(default_factory=lambda: solid_line(1.0, BLUE))
    tick_length: float = 3.0
    overhang: float = 0.0
    values: tuple[ErrPoint, ...] = ()

    def __post_init__(self) -> None:
        if self.tick_length < 0:
            raise ValueError("tick_length must be >= 0")
        for ep in self.values:
            if not isinstance(ep, ErrPoint):
                raise ChartDataError(f"error bar values must be ErrPoint, got {type(ep)!r}")

    def to_plot(self) -> Plot[float, float]:
        xs = tuple(v for ep in self.values for v in (ep.x.low, ep.x.high))
        ys = tuple(v for ep in self.values for v in (ep.y.low, ep.y.high))

        def render(canvas: Canvas, pmap: PointMapFn) -> None:
            with canvas.preserve():
                canvas.set_line_style(self.line_style)
                for ep in self.values:
                    lo = map_xy(pmap, (ep.x.low, ep.y.low))
                    best = map_xy(pmap, (ep.x.best, ep.y.best))
                    hi = map_xy(pmap, (ep.x.high, ep.y.high))
                    self._draw_bar(canvas, lo, best, hi)

        def render_legend(canvas: Canvas, r: Rect) -> None:
            cy = (r.p1.y + r.p2.y) / 2.0
            d = min((r.p2.x - r.p1.x) / 6.0, (r.p2.y - r.p1.y) / 2.0)
            with canvas.preserve():
                canvas.set_line_style(self.line_style)
                for cx in (r.p1.x, (r.p1.x + r.p2.x) / 2.0, r.p2.x):
                    self._draw_bar(canvas, Point(cx - d, cy - d), Point(cx, cy), Point(cx + d, cy + d))

        return Plot(render=render, legend=((self.title, render_legend),), all_points=(xs, ys))

    def _draw_bar(self, canvas: Canvas, lo: Point, best: Point, hi: Point) -> None:
        tl = self.tick_length
        oh = self.overhang
        x0, x1 = min(lo.x, hi.x), max(lo.x, hi.x)
        y0, y1 = min(lo.y, hi.y), max(lo.y, hi.y)
        canvas.new_path()
        segs = [
            (Point(x0 - oh, best.y), Point(x1 + oh, best.y)),
            (Point(best.x, y0 - oh), Point(best.x, y1 + oh)),
            (Point(x0, best.y - tl), Point(x0, best.y + tl)),
            (Point(best.x - tl, y0), Point(best.x + tl, y0)),
            (Point(x1, best.y - tl), Point(x1, best.y + tl)),
            (Point(best.x - tl, y1), Point(best.x + tl, y1)),
        ]
        for a, b in segs:
            canvas.move_to(canvas.align_stroke(a))
            canvas.line_to(canvas.align_stroke(b))
        canvas.stroke()
