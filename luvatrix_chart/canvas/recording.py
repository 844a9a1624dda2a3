from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from luvatrix_chart.canvas.base import Canvas, ClipBox, SubPath
from luvatrix_chart.types import VECTOR_ALIGNMENT, FillStyle, FontStyle, LineStyle, Point, PointAlignment


@dataclass(frozen=True)
class FillOp:
    path: tuple[SubPath, ...]
    style: FillStyle
    clip: ClipBox


@dataclass(frozen=True)
class StrokeOp:
    path: tuple[SubPath, ...]
    style: LineStyle
    clip: ClipBox


@dataclass(frozen=True)
class PaintOp:
    style: FillStyle
    clip: ClipBox


@dataclass(frozen=True)
class TextOp:
    text: str
    origin: Point
    rotation: float
    style: FontStyle
    clip: ClipBox


DrawOp: TypeAlias = FillOp | StrokeOp | PaintOp | TextOp


class RecordingCanvas(Canvas):
    """Canvas that keeps every drawing operation in device coordinates."""

    def __init__(self, width: int, height: int, *, alignment: PointAlignment = VECTOR_ALIGNMENT) -> None:
        super().__init__(width, height, alignment=alignment)
        self.ops: list[DrawOp] = []

    def clear(self) -> None:
        self.ops.clear()

    def strokes(self) -> list[StrokeOp]:
        return [op for op in self.ops if isinstance(op, StrokeOp)]

    def fills(self) -> list[FillOp]:
        return [op for op in self.ops if isinstance(op, FillOp)]

    def texts(self) -> list[TextOp]:
        return [op for op in self.ops if isinstance(op, TextOp)]

    def paints(self) -> list[PaintOp]:
        return [op for op in self.ops if isinstance(op, PaintOp)]

    def _fill_path(self, path: tuple[SubPath, ...], style: FillStyle, clip: ClipBox) -> None:
        self.ops.append(FillOp(path=path, style=style, clip=clip))

    def _stroke_path(self, path: tuple[SubPath, ...], style: LineStyle, clip: ClipBox) -> None:
        self.ops.append(StrokeOp(path=path, style=style, clip=clip))

    def _paint(self, style: FillStyle, clip: ClipBox) -> None:
        self.ops.append(PaintOp(style=style, clip=clip))

    def _draw_text(self, text: str, origin: Point, rotation: float, style: FontStyle, clip: ClipBox) -> None:
        self.ops.append(TextOp(text=text, origin=origin, rotation=rotation, style=style, clip=clip))
