from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal, NamedTuple, TypeAlias


RGBA: TypeAlias = tuple[int, int, int, int]
RectSize: TypeAlias = tuple[float, float]

HTextAnchor = Literal["left", "centre", "right"]
VTextAnchor = Literal["top", "centre", "bottom"]
FontWeight = Literal["normal", "bold"]
FontSlant = Literal["normal", "italic"]

BLACK: RGBA = (0, 0, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)
BLUE: RGBA = (0, 0, 255, 255)
TRANSPARENT: RGBA = (0, 0, 0, 0)


class Point(NamedTuple):
    x: float
    y: float

    def translated(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


class Rect(NamedTuple):
    p1: Point
    p2: Point

    @property
    def width(self) -> float:
        return self.p2.x - self.p1.x

    @property
    def height(self) -> float:
        return self.p2.y - self.p1.y

    def contains(self, p: Point) -> bool:
        return self.p1.x <= p.x <= self.p2.x and self.p1.y <= p.y <= self.p2.y


def opaque(color: tuple[int, int, int] | RGBA) -> RGBA:
    if len(color) == 3:
        r, g, b = color
        return (int(r), int(g), int(b), 255)
    r, g, b, a = color
    return (int(r), int(g), int(b), int(a))


def _check_color(color: RGBA, field_name: str) -> None:
    if len(color) != 4 or any((c < 0 or c > 255) for c in color):
        raise ValueError(f"{field_name} must be an RGBA tuple of 0..255 ints")


@dataclass(frozen=True)
class FillStyle:
    color: RGBA = WHITE

    def __post_init__(self) -> None:
        _check_color(self.color, "fill color")


@dataclass(frozen=True)
class LineStyle:
    width: float = 1.0
    color: RGBA = BLACK
    dashes: tuple[float, ...] = ()
    cap: Literal["butt", "round", "square"] = "butt"
    join: Literal["miter", "round", "bevel"] = "miter"

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError("line width must be >= 0")
        if any(d < 0 for d in self.dashes):
            raise ValueError("line dashes must be >= 0")
        _check_color(self.color, "line color")


@dataclass(frozen=True)
class FontStyle:
    family: str = "Comic Mono"
    size: float = 10.0
    weight: FontWeight = "normal"
    slant: FontSlant = "normal"
    color: RGBA = BLACK

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError("font size must be > 0")
        _check_color(self.color, "font color")


def solid_fill(color: tuple[int, int, int] | RGBA) -> FillStyle:
    return FillStyle(color=opaque(color))


def solid_line(width: float, color: tuple[int, int, int] | RGBA) -> LineStyle:
    return LineStyle(width=width, color=opaque(color))


def dashed_line(width: float, dashes: tuple[float, ...], color: tuple[int, int, int] | RGBA) -> LineStyle:
    return LineStyle(width=width, color=opaque(color), dashes=tuple(dashes))


@dataclass(frozen=True)
class PointAlignment:
    """Coordinate convention applied to stroked and filled geometry.

    Bitmap targets snap stroke points to pixel centres so 1px lines stay
    crisp; vector targets keep coordinates unmodified.
    """

    stroke_offset: float | None
    fill_offset: float | None

    def align_stroke(self, p: Point) -> Point:
        return _snap(p, self.stroke_offset)

    def align_fill(self, p: Point) -> Point:
        return _snap(p, self.fill_offset)


def _snap(p: Point, offset: float | None) -> Point:
    if offset is None:
        return p
    return Point(float(round(p.x)) + offset, float(round(p.y)) + offset)


BITMAP_ALIGNMENT = PointAlignment(stroke_offset=0.5, fill_offset=0.0)
VECTOR_ALIGNMENT = PointAlignment(stroke_offset=None, fill_offset=None)


def rotated_extent(size: RectSize, rotation_deg: float) -> RectSize:
    w, h = size
    rad = math.radians(rotation_deg)
    acr, asr = abs(math.cos(rad)), abs(math.sin(rad))
    return (w * acr + h * asr, w * asr + h * acr)
