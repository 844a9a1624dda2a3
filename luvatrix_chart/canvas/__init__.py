from .base import Canvas, CanvasState
from .fonts import FontExtents
from .raster import RasterCanvas, new_canvas
from .recording import DrawOp, FillOp, PaintOp, RecordingCanvas, StrokeOp, TextOp
from .svg import SvgCanvas

__all__ = [
    "Canvas",
    "CanvasState",
    "DrawOp",
    "FillOp",
    "FontExtents",
    "PaintOp",
    "RasterCanvas",
    "RecordingCanvas",
    "StrokeOp",
    "SvgCanvas",
    "TextOp",
    "new_canvas",
]
