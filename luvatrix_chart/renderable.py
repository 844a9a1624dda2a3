"""Composable drawing elements.

A `Renderable` pairs a size negotiation (`measure`) with a drawing action
(`draw`) that paints into a rectangle anchored at the origin of the current
canvas coordinate space and returns a pick function for that render. Every
combinator that moves the origin before drawing applies the inverse move to
pick queries, and rejects queries outside the rectangle it handed down.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import math
from typing import Generic, TypeAlias, TypeVar

from luvatrix_chart.canvas.base import Canvas
from luvatrix_chart.types import (
    FillStyle,
    FontStyle,
    HTextAnchor,
    LineStyle,
    Point,
    RectSize,
    VTextAnchor,
    rotated_extent,
)


P = TypeVar("P")
Q = TypeVar("Q")

PickFn: TypeAlias = Callable[[Point], P | None]


def null_pick(_: Point) -> None:
    return None


@dataclass(frozen=True)
class Renderable(Generic[P]):
    measure: Callable[[Canvas], RectSize]
    draw: Callable[[Canvas, RectSize], PickFn[P]]


def empty_renderable() -> Renderable:
    return spacer((0.0, 0.0))


def spacer(size: RectSize) -> Renderable:
    minsize = (float(size[0]), float(size[1]))
    return Renderable(measure=lambda _canvas: minsize, draw=lambda _canvas, _size: null_pick)


def spacer_like(r: Renderable) -> Renderable:
    return Renderable(measure=r.measure, draw=lambda _canvas, _size: null_pick)


def set_pick(pick_fn: PickFn[Q], r: Renderable) -> Renderable[Q]:
    def draw(canvas: Canvas, size: RectSize) -> PickFn[Q]:
        r.draw(canvas, size)
        return pick_fn

    return Renderable(measure=r.measure, draw=draw)


def map_maybe_pick(f: Callable[[P], Q | None], r: Renderable[P]) -> Renderable[Q]:
    def draw(canvas: Canvas, size: RectSize) -> PickFn[Q]:
        inner = r.draw(canvas, size)

        def pick(p: Point) -> Q | None:
            value = inner(p)
            return None if value is None else f(value)

        return pick

    return Renderable(measure=r.measure, draw=draw)


def map_pick(f: Callable[[P], Q], r: Renderable[P]) -> Renderable[Q]:
    return map_maybe_pick(f, r)


def add_margins(margins: tuple[float, float, float, float], r: Renderable[P]) -> Renderable[P]:
    """Pad `r` by (top, bottom, left, right)."""
    t, b, left, right = margins

    def measure(canvas: Canvas) -> RectSize:
        w, h = r.measure(canvas)
        return (w + left + right, h + t + b)

    def draw(canvas: Canvas, size: RectSize) -> PickFn[P]:
        w, h = size
        with canvas.preserve():
            canvas.translate(left, t)
            inner = r.draw(canvas, (max(0.0, w - left - right), max(0.0, h - t - b)))

        def pick(p: Point) -> P | None:
            if left <= p.x <= w - right and t <= p.y <= h - b:
                return inner(Point(p.x - left, p.y - t))
            return None

        return pick

    return Renderable(measure=measure, draw=draw)


def fill_background(style: FillStyle, r: Renderable[P]) -> Renderable[P]:
    def draw(canvas: Canvas, size: RectSize) -> PickFn[P]:
        w, h = size
        with canvas.preserve():
            canvas.set_clip_rect(Point(0.0, 0.0), Point(w, h))
            canvas.set_fill_style(style)
            canvas.paint()
        return r.draw(canvas, size)

    return Renderable(measure=r.measure, draw=draw)


def embed_renderable(build: Callable[[Canvas], Renderable[P]]) -> Renderable[P]:
    """Defer construction of a renderable until a canvas is available."""

    def measure(canvas: Canvas) -> RectSize:
        return build(canvas).measure(canvas)

    def draw(canvas: Canvas, size: RectSize) -> PickFn[P]:
        return build(canvas).draw(canvas, size)

    return Renderable(measure=measure, draw=draw)


# Labels


def label(style: FontStyle, h_anchor: HTextAnchor, v_anchor: VTextAnchor, text: str) -> Renderable[str]:
    return rlabel(style, h_anchor, v_anchor, 0.0, text)


def rlabel(
    style: FontStyle,
    h_anchor: HTextAnchor,
    v_anchor: VTextAnchor,
    rotation_deg: float,
    text: str,
) -> Renderable[str]:
    rot = math.radians(rotation_deg)

    def measure(canvas: Canvas) -> RectSize:
        with canvas.preserve():
            canvas.set_font_style(style)
            return rotated_extent(canvas.text_size(text), rotation_deg)

    def draw(canvas: Canvas, size: RectSize) -> PickFn[str]:
        w0, h0 = size
        with canvas.preserve():
            canvas.set_font_style(style)
            w, h = canvas.text_size(text)
            descent = canvas.font_extents().descent
            rw, rh = rotated_extent((w, h), rotation_deg)
            canvas.translate(_anchor_offset(h_anchor, rw, w0), _anchor_offset(v_anchor, rh, h0))
            canvas.rotate(rot)
            canvas.new_path()
            canvas.move_to(Point(-w / 2.0, h / 2.0 - descent))
            canvas.show_text(text)
            canvas.new_path()
        return lambda _p: text

    return Renderable(measure=measure, draw=draw)


def draw_text_anchored(canvas: Canvas, h_anchor: HTextAnchor, v_anchor: VTextAnchor, at: Point, text: str) -> None:
    """Draw unrotated `text` so that its anchor point lands on `at`."""
    w, h = canvas.text_size(text)
    descent = canvas.font_extents().descent
    if h_anchor == "left":
        x = at.x
    elif h_anchor == "right":
        x = at.x - w
    else:
        x = at.x - w / 2.0
    if v_anchor == "top":
        y = at.y + h - descent
    elif v_anchor == "bottom":
        y = at.y - descent
    else:
        y = at.y + h / 2.0 - descent
    canvas.new_path()
    canvas.move_to(Point(x, y))
    canvas.show_text(text)
    canvas.new_path()


def _anchor_offset(anchor: str, extent: float, available: float) -> float:
    if anchor in ("left", "top"):
        return extent / 2.0
    if anchor in ("right", "bottom"):
        return available - extent / 2.0
    return available / 2.0


# Rectangles


@dataclass(frozen=True)
class CornerSquare:
    pass


@dataclass(frozen=True)
class CornerBevel:
    size: float


@dataclass(frozen=True)
class CornerRounded:
    radius: float


CornerStyle: TypeAlias = CornerSquare | CornerBevel | CornerRounded


@dataclass(frozen=True)
class Rectangle:
    minsize: RectSize = (0.0, 0.0)
    fill_style: FillStyle | None = None
    line_style: LineStyle | None = None
    corner_style: CornerStyle = CornerSquare()


def rectangle_to_renderable(rect: Rectangle) -> Renderable:
    def draw(canvas: Canvas, size: RectSize) -> PickFn:
        with canvas.preserve():
            if rect.fill_style is not None:
                canvas.set_fill_style(rect.fill_style)
                _rectangle_path(canvas, size, rect.corner_style)
                canvas.fill()
            if rect.line_style is not None:
                canvas.set_line_style(rect.line_style)
                _rectangle_path(canvas, size, rect.corner_style)
                canvas.stroke()
        return null_pick

    return Renderable(measure=lambda _canvas: rect.minsize, draw=draw)


def rectangle(
    minsize: RectSize = (0.0, 0.0),
    fill_style: FillStyle | None = None,
    line_style: LineStyle | None = None,
    corner_style: CornerStyle = CornerSquare(),
) -> Renderable:
    return rectangle_to_renderable(Rectangle(minsize, fill_style, line_style, corner_style))


def _rectangle_path(canvas: Canvas, size: RectSize, corner: CornerStyle) -> None:
    x2, y2 = size
    x1, y1 = 0.0, 0.0
    canvas.new_path()
    if isinstance(corner, CornerBevel):
        s = min(corner.size, x2 / 2.0, y2 / 2.0)
        canvas.polyline(
            [
                Point(x1, y1 + s),
                Point(x1, y2 - s),
                Point(x1 + s, y2),
                Point(x2 - s, y2),
                Point(x2, y2 - s),
                Point(x2, y1 + s),
                Point(x2 - s, y1),
                Point(x1 + s, y1),
            ]
        )
        canvas.close_path()
    elif isinstance(corner, CornerRounded):
        s = min(corner.radius, x2 / 2.0, y2 / 2.0)
        half = math.pi / 2.0
        canvas.arc_negative(Point(x1 + s, y2 - s), s, 2 * half, half)
        canvas.arc_negative(Point(x2 - s, y2 - s), s, half, 0.0)
        canvas.arc_negative(Point(x2 - s, y1 + s), s, 0.0, 3 * half)
        canvas.arc_negative(Point(x1 + s, y1 + s), s, 3 * half, 2 * half)
        canvas.close_path()
    else:
        canvas.rectangle(Point(x1, y1), Point(x2, y2))
