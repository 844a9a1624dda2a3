"""Axis data, axis rendering and the value <-> device mapping.

`AxisData.viewport(range, value)` maps a logical value into a device range
`(start, end)`; `AxisData.tropweiv(range, coord)` is its inverse. The range
passed in already encodes direction: `(0, w)` for a left-to-right abscissa,
`(h, 0)` for a bottom-to-top ordinate, swapped when the axis is reversed.
The same `AxisT` value is handed to the axis renderable, the gridline pass,
the plots and the plot-area pick function of one render.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Generic, Literal, TypeAlias, TypeVar

import numpy as np

from luvatrix_chart.canvas.base import Canvas
from luvatrix_chart.renderable import PickFn, Renderable, draw_text_anchored
from luvatrix_chart.scales import (
    ValueLimits,
    format_ticks_for_axis,
    generate_nice_ticks,
    linear_map,
    linear_unmap,
    minor_ticks,
    value_limits,
)
from luvatrix_chart.types import BLACK, FontStyle, LineStyle, Point, RectSize, dashed_line


T = TypeVar("T")

Range: TypeAlias = tuple[float, float]
AxisEdge = Literal["top", "bottom", "left", "right"]

MAJOR_TICK_LENGTH = 5.0
MINOR_TICK_LENGTH = 2.0


@dataclass(frozen=True)
class AxisMin:
    pass


@dataclass(frozen=True)
class AxisMax:
    pass


@dataclass(frozen=True)
class ExactValue(Generic[T]):
    value: T


Limit: TypeAlias = AxisMin | AxisMax | ExactValue


@dataclass(frozen=True)
class AxisData(Generic[T]):
    viewport: Callable[[Range, T], float]
    tropweiv: Callable[[Range, float], T]
    ticks: tuple[tuple[T, float], ...] = ()
    labels: tuple[tuple[T, str], ...] = ()
    grid: tuple[T, ...] = ()

    def value_to_device(self, rng: Range, value: Limit | T) -> float:
        if isinstance(value, AxisMin):
            return rng[0]
        if isinstance(value, AxisMax):
            return rng[1]
        if isinstance(value, ExactValue):
            return self.viewport(rng, value.value)
        return self.viewport(rng, value)

    def device_to_value(self, rng: Range, coord: float) -> T:
        return self.tropweiv(rng, coord)


@dataclass(frozen=True)
class AxisStyle:
    line_style: LineStyle = field(default_factory=lambda: LineStyle(width=1.0, color=BLACK, cap="square"))
    label_style: FontStyle = field(default_factory=FontStyle)
    grid_style: LineStyle = field(default_factory=lambda: dashed_line(1.0, (5.0, 5.0), (204, 204, 204)))
    label_gap: float = 10.0

    def __post_init__(self) -> None:
        if self.label_gap < 0:
            raise ValueError("label_gap must be >= 0")


def default_axis_style() -> AxisStyle:
    return AxisStyle()


@dataclass(frozen=True)
class AxisT(Generic[T]):
    """An axis bound to the edge of the plot area it is drawn on."""

    edge: AxisEdge
    style: AxisStyle
    reverse: bool
    data: AxisData[T]

    @property
    def is_horizontal(self) -> bool:
        return self.edge in ("top", "bottom")

    def device_range(self, size: RectSize) -> Range:
        w, h = size
        rng = (0.0, float(w)) if self.is_horizontal else (float(h), 0.0)
        return (rng[1], rng[0]) if self.reverse else rng

    def value_to_device(self, size: RectSize, value: Limit | T) -> float:
        return self.data.value_to_device(self.device_range(size), value)

    def device_to_value(self, size: RectSize, coord: float) -> T:
        return self.data.device_to_value(self.device_range(size), coord)


# Generation


def linear_axis(
    limits: ValueLimits,
    *,
    ticks: Sequence[tuple[float, float]] = (),
    labels: Sequence[tuple[float, str]] = (),
    grid: Sequence[float] = (),
) -> AxisData[float]:
    return AxisData(
        viewport=lambda rng, v: linear_map(limits, rng, float(v)),
        tropweiv=lambda rng, d: linear_unmap(limits, rng, float(d)),
        ticks=tuple((float(v), float(length)) for v, length in ticks),
        labels=tuple((float(v), str(s)) for v, s in labels),
        grid=tuple(float(v) for v in grid),
    )


def auto_axis(values: Sequence[float] | np.ndarray, *, n_labels: int = 5, minor_divisions: int = 5) -> AxisData[float]:
    """Linear axis spanning the nice-tick range that covers `values`."""
    limits = value_limits(values)
    if limits is None:
        limits = ValueLimits(0.0, 1.0)
    major = generate_nice_ticks(limits.vmin, limits.vmax, n_labels)
    span = ValueLimits(float(major[0]), float(major[-1]))
    if span.span == 0:
        span = limits
    minor = minor_ticks(major, minor_divisions)
    return linear_axis(
        span,
        ticks=[(float(v), MINOR_TICK_LENGTH) for v in minor] + [(float(v), MAJOR_TICK_LENGTH) for v in major],
        labels=list(zip(major.tolist(), format_ticks_for_axis(major))),
        grid=major.tolist(),
    )


# Overrides


def axis_grid_hide(ad: AxisData[T]) -> AxisData[T]:
    return replace(ad, grid=())


def axis_grid_at_ticks(ad: AxisData[T]) -> AxisData[T]:
    return replace(ad, grid=tuple(v for v, _ in ad.ticks))


def axis_grid_at_labels(ad: AxisData[T]) -> AxisData[T]:
    return replace(ad, grid=tuple(v for v, _ in ad.labels))


def axis_ticks_hide(ad: AxisData[T]) -> AxisData[T]:
    return replace(ad, ticks=())


def axis_ticks_inside(ad: AxisData[T]) -> AxisData[T]:
    return replace(ad, ticks=tuple((v, -abs(length)) for v, length in ad.ticks))


def axis_labels_hide(ad: AxisData[T]) -> AxisData[T]:
    return replace(ad, labels=())


def compose_overrides(*fns: Callable[[AxisData[Any]], AxisData[Any]]) -> Callable[[AxisData[Any]], AxisData[Any]]:
    def apply(ad: AxisData[Any]) -> AxisData[Any]:
        for fn in fns:
            ad = fn(ad)
        return ad

    return apply


# Rendering


@dataclass(frozen=True)
class _AxisGeometry(Generic[T]):
    start: Point
    end: Point
    tick_dir: tuple[float, float]
    point_of: Callable[[T], Point]
    value_at: Callable[[Point], T]


def _geometry(at: AxisT[T], size: RectSize) -> _AxisGeometry[T]:
    w, h = size
    rng = at.device_range(size)
    vp, inv = at.data.viewport, at.data.tropweiv
    if at.edge == "bottom":
        return _AxisGeometry(Point(0.0, 0.0), Point(w, 0.0), (0.0, 1.0), lambda v: Point(vp(rng, v), 0.0), lambda p: inv(rng, p.x))
    if at.edge == "top":
        return _AxisGeometry(Point(0.0, h), Point(w, h), (0.0, -1.0), lambda v: Point(vp(rng, v), h), lambda p: inv(rng, p.x))
    if at.edge == "left":
        return _AxisGeometry(Point(w, 0.0), Point(w, h), (-1.0, 0.0), lambda v: Point(w, vp(rng, v)), lambda p: inv(rng, p.y))
    return _AxisGeometry(Point(0.0, 0.0), Point(0.0, h), (1.0, 0.0), lambda v: Point(0.0, vp(rng, v)), lambda p: inv(rng, p.y))


_LABEL_ANCHORS = {
    "bottom": ("centre", "top"),
    "top": ("centre", "bottom"),
    "left": ("right", "centre"),
    "right": ("left", "centre"),
}


def _label_sizes(canvas: Canvas, at: AxisT[Any]) -> list[RectSize]:
    with canvas.preserve():
        canvas.set_font_style(at.style.label_style)
        return [canvas.text_size(s) for _, s in at.data.labels]


def axis_minsize(canvas: Canvas, at: AxisT[Any]) -> RectSize:
    sizes = _label_sizes(canvas, at)
    lw = max((w for w, _ in sizes), default=0.0)
    lh = max((h for _, h in sizes), default=0.0)
    gap = at.style.label_gap
    tsize = max([0.0] + [max(0.0, length) for _, length in at.data.ticks])
    if at.is_horizontal:
        return (lw, max(lh + gap if lh > 0 else 0.0, tsize))
    return (max(lw + gap if lw > 0 else 0.0, tsize), lh)


def axis_overhang(canvas: Canvas, at: AxisT[Any]) -> tuple[float, float]:
    """Half-label extents beyond the low and high device ends of the axis.

    Computed from the final axis data, after overrides and reversal; the
    pair is ordered by device coordinate (left, right) or (top, bottom).
    """
    if not at.data.labels:
        return (0.0, 0.0)
    sizes = _label_sizes(canvas, at)
    unit = at.device_range((1.0, 1.0))
    order = sorted(range(len(sizes)), key=lambda i: at.data.viewport(unit, at.data.labels[i][0]))
    dim = 0 if at.is_horizontal else 1
    return (sizes[order[0]][dim] / 2.0, sizes[order[-1]][dim] / 2.0)


def axis_to_renderable(at: AxisT[T]) -> Renderable[T]:
    def draw(canvas: Canvas, size: RectSize) -> PickFn[T]:
        geo = _geometry(at, size)
        with canvas.preserve():
            canvas.set_line_style(replace(at.style.line_style, cap="square"))
            canvas.new_path()
            canvas.move_to(canvas.align_stroke(geo.start))
            canvas.line_to(canvas.align_stroke(geo.end))
            canvas.stroke()
        with canvas.preserve():
            canvas.set_line_style(replace(at.style.line_style, cap="butt"))
            dx, dy = geo.tick_dir
            canvas.new_path()
            for value, length in at.data.ticks:
                p = geo.point_of(value)
                canvas.move_to(canvas.align_stroke(p))
                canvas.line_to(canvas.align_stroke(p.translated(dx * length, dy * length)))
            canvas.stroke()
        with canvas.preserve():
            canvas.set_font_style(at.style.label_style)
            h_anchor, v_anchor = _LABEL_ANCHORS[at.edge]
            gx, gy = geo.tick_dir
            gap = at.style.label_gap
            for value, text in at.data.labels:
                p = geo.point_of(value).translated(gx * gap, gy * gap)
                draw_text_anchored(canvas, h_anchor, v_anchor, p, text)  # type: ignore[arg-type]

        return geo.value_at

    return Renderable(measure=lambda canvas: axis_minsize(canvas, at), draw=draw)


def render_axis_grid(canvas: Canvas, size: RectSize, at: AxisT[Any]) -> None:
    """Stroke the axis gridlines across a plot area of `size`."""
    if not at.data.grid:
        return
    w, h = size
    rng = at.device_range(size)
    with canvas.preserve():
        canvas.set_clip_rect(Point(0.0, 0.0), Point(w, h))
        canvas.set_line_style(at.style.grid_style)
        canvas.new_path()
        for value in at.data.grid:
            d = at.data.viewport(rng, value)
            if at.is_horizontal:
                p1, p2 = Point(d, 0.0), Point(d, h)
            else:
                p1, p2 = Point(0.0, d), Point(w, d)
            canvas.move_to(canvas.align_stroke(p1))
            canvas.line_to(canvas.align_stroke(p2))
        canvas.stroke()
