from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, replace
import math

import numpy as np

from luvatrix_chart.canvas import fonts
from luvatrix_chart.canvas.fonts import FontExtents
from luvatrix_chart.errors import ChartError
from luvatrix_chart.types import VECTOR_ALIGNMENT, FillStyle, FontStyle, LineStyle, Point, PointAlignment


ClipBox = tuple[float, float, float, float]
SubPath = tuple[tuple[Point, ...], bool]


@dataclass(frozen=True)
class CanvasState:
    matrix: np.ndarray
    clip: ClipBox
    line_style: LineStyle
    fill_style: FillStyle
    font_style: FontStyle


class Canvas(ABC):
    """Immediate-mode 2D drawing surface.

    Geometry is accepted in user coordinates, transformed by the current
    matrix and kept in device coordinates; backends only ever see device
    space. The matrix, clip and styles are saved/restored as one unit.
    """

    def __init__(self, width: int, height: int, *, alignment: PointAlignment = VECTOR_ALIGNMENT) -> None:
        if width < 0 or height < 0:
            raise ValueError("canvas width/height must be >= 0")
        self.width = int(width)
        self.height = int(height)
        self.alignment = alignment
        self._state = CanvasState(
            matrix=np.eye(3, dtype=np.float64),
            clip=(0.0, 0.0, float(width), float(height)),
            line_style=LineStyle(),
            fill_style=FillStyle(),
            font_style=FontStyle(),
        )
        self._stack: list[CanvasState] = []
        self._subpaths: list[tuple[list[Point], bool]] = []
        self._current: Point | None = None

    # state

    def save(self) -> None:
        self._stack.append(self._state)

    def restore(self) -> None:
        if not self._stack:
            raise ChartError("canvas restore() without matching save()")
        self._state = self._stack.pop()

    @contextmanager
    def preserve(self) -> Iterator["Canvas"]:
        self.save()
        try:
            yield self
        finally:
            self.restore()

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def state(self) -> CanvasState:
        return self._state

    @property
    def clip(self) -> ClipBox:
        return self._state.clip

    def translate(self, dx: float, dy: float) -> None:
        m = np.array([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]])
        self._state = replace(self._state, matrix=self._state.matrix @ m)

    def rotate(self, angle_rad: float) -> None:
        c, s = math.cos(angle_rad), math.sin(angle_rad)
        m = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
        self._state = replace(self._state, matrix=self._state.matrix @ m)

    def get_matrix(self) -> np.ndarray:
        return self._state.matrix.copy()

    def set_matrix(self, matrix: np.ndarray) -> None:
        self._state = replace(self._state, matrix=np.asarray(matrix, dtype=np.float64).copy())

    def to_device(self, p: Point) -> Point:
        m = self._state.matrix
        return Point(
            float(m[0, 0] * p.x + m[0, 1] * p.y + m[0, 2]),
            float(m[1, 0] * p.x + m[1, 1] * p.y + m[1, 2]),
        )

    def to_user(self, p: Point) -> Point:
        inv = np.linalg.inv(self._state.matrix)
        return Point(
            float(inv[0, 0] * p.x + inv[0, 1] * p.y + inv[0, 2]),
            float(inv[1, 0] * p.x + inv[1, 1] * p.y + inv[1, 2]),
        )

    def rotation(self) -> float:
        m = self._state.matrix
        return math.atan2(m[1, 0], m[0, 0])

    def set_clip_rect(self, p1: Point, p2: Point) -> None:
        corners = [self.to_device(Point(x, y)) for x in (p1.x, p2.x) for y in (p1.y, p2.y)]
        xs = [c.x for c in corners]
        ys = [c.y for c in corners]
        cx0, cy0, cx1, cy1 = self._state.clip
        x0, x1 = max(cx0, min(xs)), min(cx1, max(xs))
        y0, y1 = max(cy0, min(ys)), min(cy1, max(ys))
        self._state = replace(self._state, clip=(x0, y0, max(x0, x1), max(y0, y1)))

    # styles

    def set_line_style(self, style: LineStyle) -> None:
        self._state = replace(self._state, line_style=style)

    def set_fill_style(self, style: FillStyle) -> None:
        self._state = replace(self._state, fill_style=style)

    def set_font_style(self, style: FontStyle) -> None:
        self._state = replace(self._state, font_style=style)

    @property
    def line_style(self) -> LineStyle:
        return self._state.line_style

    @property
    def fill_style(self) -> FillStyle:
        return self._state.fill_style

    @property
    def font_style(self) -> FontStyle:
        return self._state.font_style

    # alignment

    def align_stroke(self, p: Point) -> Point:
        return self.to_user(self.alignment.align_stroke(self.to_device(p)))

    def align_fill(self, p: Point) -> Point:
        return self.to_user(self.alignment.align_fill(self.to_device(p)))

    # paths

    def new_path(self) -> None:
        self._subpaths = []
        self._current = None

    def move_to(self, p: Point) -> None:
        dp = self.to_device(p)
        self._subpaths.append(([dp], False))
        self._current = dp

    def line_to(self, p: Point) -> None:
        dp = self.to_device(p)
        if not self._subpaths or self._subpaths[-1][1]:
            start = self._current if self._current is not None else dp
            self._subpaths.append(([start], False))
        self._subpaths[-1][0].append(dp)
        self._current = dp

    def close_path(self) -> None:
        if self._subpaths:
            points, _ = self._subpaths[-1]
            self._subpaths[-1] = (points, True)
            self._current = points[0]

    def arc(self, centre: Point, radius: float, angle1: float, angle2: float) -> None:
        while angle2 < angle1:
            angle2 += 2 * math.pi
        self._arc_points(centre, radius, angle1, angle2)

    def arc_negative(self, centre: Point, radius: float, angle1: float, angle2: float) -> None:
        while angle2 > angle1:
            angle2 -= 2 * math.pi
        self._arc_points(centre, radius, angle1, angle2)

    def _arc_points(self, centre: Point, radius: float, angle1: float, angle2: float) -> None:
        steps = max(4, int(math.ceil(abs(angle2 - angle1) / (math.pi / 32))))
        for i in range(steps + 1):
            a = angle1 + (angle2 - angle1) * i / steps
            p = Point(centre.x + radius * math.cos(a), centre.y + radius * math.sin(a))
            if i == 0 and self._current is None:
                self.move_to(p)
            else:
                self.line_to(p)

    def rectangle(self, p1: Point, p2: Point) -> None:
        self.move_to(p1)
        self.line_to(Point(p2.x, p1.y))
        self.line_to(p2)
        self.line_to(Point(p1.x, p2.y))
        self.close_path()

    def polyline(self, points: Sequence[Point]) -> None:
        for i, p in enumerate(points):
            if i == 0:
                self.move_to(p)
            else:
                self.line_to(p)

    def _take_path(self) -> tuple[SubPath, ...]:
        path = tuple((tuple(points), closed) for points, closed in self._subpaths if points)
        self.new_path()
        return path

    def fill(self) -> None:
        path = self._take_path()
        if path:
            self._fill_path(path, self._state.fill_style, self._state.clip)

    def stroke(self) -> None:
        path = self._take_path()
        if path and self._state.line_style.width > 0:
            self._stroke_path(path, self._state.line_style, self._state.clip)

    def paint(self) -> None:
        self._paint(self._state.fill_style, self._state.clip)

    # text

    def text_size(self, text: str) -> tuple[float, float]:
        return fonts.text_size(text, self._state.font_style)

    def font_extents(self) -> FontExtents:
        return fonts.font_extents(self._state.font_style)

    def show_text(self, text: str) -> None:
        """Draw `text` with its baseline origin at the current point."""
        if not text or self._current is None:
            return
        self._draw_text(text, self._current, self.rotation(), self._state.font_style, self._state.clip)

    # backend hooks

    @abstractmethod
    def _fill_path(self, path: tuple[SubPath, ...], style: FillStyle, clip: ClipBox) -> None: ...

    @abstractmethod
    def _stroke_path(self, path: tuple[SubPath, ...], style: LineStyle, clip: ClipBox) -> None: ...

    @abstractmethod
    def _paint(self, style: FillStyle, clip: ClipBox) -> None: ...

    @abstractmethod
    def _draw_text(self, text: str, origin: Point, rotation: float, style: FontStyle, clip: ClipBox) -> None: ...


def dash_segments(points: Sequence[Point], dashes: Sequence[float]) -> list[list[Point]]:
    """Split a polyline into the "on" runs of a dash pattern."""
    if not dashes or sum(dashes) <= 0 or len(points) < 2:
        return [list(points)]
    pattern = list(dashes) if len(dashes) % 2 == 0 else list(dashes) * 2
    runs: list[list[Point]] = []
    idx = 0
    remaining = pattern[0]
    on = True
    current: list[Point] = [points[0]]
    for a, b in zip(points[:-1], points[1:]):
        seg_len = math.hypot(b.x - a.x, b.y - a.y)
        pos = 0.0
        while seg_len - pos > remaining:
            pos += remaining
            t = pos / seg_len
            cut = Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)
            if on:
                current.append(cut)
                runs.append(current)
            current = [cut]
            on = not on
            idx = (idx + 1) % len(pattern)
            remaining = pattern[idx]
        remaining -= seg_len - pos
        if on:
            current.append(b)
        else:
            current = [b]
    if on and len(current) > 1:
        runs.append(current)
    return runs
