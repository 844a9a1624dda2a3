from __future__ import annotations

import math

import numpy as np
from PIL import Image, ImageDraw

from luvatrix_chart.canvas import fonts
from luvatrix_chart.canvas.base import Canvas, ClipBox, SubPath, dash_segments
from luvatrix_chart.types import BITMAP_ALIGNMENT, RGBA, TRANSPARENT, FillStyle, FontStyle, LineStyle, Point, PointAlignment


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


class RasterCanvas(Canvas):
    """RGBA255 canvas backed by a numpy array; shapes are rasterised by Pillow."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        background: RGBA = TRANSPARENT,
        alignment: PointAlignment = BITMAP_ALIGNMENT,
    ) -> None:
        super().__init__(width, height, alignment=alignment)
        self.rgba = new_canvas(self.width, self.height, color=background)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.rgba)

    def _fill_path(self, path: tuple[SubPath, ...], style: FillStyle, clip: ClipBox) -> None:
        box = _pixel_box([p for points, _ in path for p in points], 1.0, clip, self.width, self.height)
        if box is None:
            return
        x0, y0, x1, y1 = box
        mask = Image.new("L", (x1 - x0, y1 - y0), 0)
        draw = ImageDraw.Draw(mask)
        for points, _ in path:
            if len(points) >= 3:
                draw.polygon([(p.x - x0, p.y - y0) for p in points], fill=255)
        self._blend(np.asarray(mask, dtype=np.uint8), x0, y0, style.color, clip)

    def _stroke_path(self, path: tuple[SubPath, ...], style: LineStyle, clip: ClipBox) -> None:
        box = _pixel_box([p for points, _ in path for p in points], style.width + 1.0, clip, self.width, self.height)
        if box is None:
            return
        x0, y0, x1, y1 = box
        mask = Image.new("L", (x1 - x0, y1 - y0), 0)
        draw = ImageDraw.Draw(mask)
        width = max(1, int(round(style.width)))
        for points, closed in path:
            pts = list(points) + ([points[0]] if closed and len(points) > 2 else [])
            for run in dash_segments(pts, style.dashes):
                if len(run) == 1:
                    r = style.width / 2.0
                    p = run[0]
                    draw.ellipse((p.x - x0 - r, p.y - y0 - r, p.x - x0 + r, p.y - y0 + r), fill=255)
                    continue
                draw.line([(p.x - x0 - 0.5, p.y - y0 - 0.5) for p in run], fill=255, width=width, joint="curve")
        self._blend(np.asarray(mask, dtype=np.uint8), x0, y0, style.color, clip)

    def _paint(self, style: FillStyle, clip: ClipBox) -> None:
        x0, y0, x1, y1 = _clip_pixels(clip, self.width, self.height)
        if x1 <= x0 or y1 <= y0:
            return
        self._blend(np.full((y1 - y0, x1 - x0), 255, dtype=np.uint8), x0, y0, style.color, clip)

    def _draw_text(self, text: str, origin: Point, rotation: float, style: FontStyle, clip: ClipBox) -> None:
        glyphs, ox, oy = fonts.render_text_mask(text, style, rotation)
        x = int(math.floor(origin.x)) - ox
        y = int(math.floor(origin.y)) - oy
        self._blend(glyphs, x, y, style.color, clip)

    def _blend(self, coverage: np.ndarray, x: int, y: int, color: RGBA, clip: ClipBox) -> None:
        """Composite `coverage`, whose top-left pixel sits at (x, y), under the clip."""
        h, w = coverage.shape
        cx0, cy0, cx1, cy1 = _clip_pixels(clip, self.width, self.height)
        x0, y0 = max(cx0, x), max(cy0, y)
        x1, y1 = min(cx1, x + w), min(cy1, y + h)
        if x1 <= x0 or y1 <= y0:
            return
        cov = coverage[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
        src_alpha = (color[3] / 255.0) * cov
        if not np.any(src_alpha > 0):
            return
        patch = self.rgba[y0:y1, x0:x1]
        dst_rgb = patch[:, :, :3].astype(np.float32)
        dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
        src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
        out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
        out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
        safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
        out_rgb = out_rgb_num / safe_alpha[:, :, None]
        patch[:, :, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
        patch[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


def _clip_pixels(clip: ClipBox, width: int, height: int) -> tuple[int, int, int, int]:
    x0, y0, x1, y1 = clip
    return (
        max(0, int(math.floor(x0))),
        max(0, int(math.floor(y0))),
        min(width, int(math.ceil(x1))),
        min(height, int(math.ceil(y1))),
    )


def _pixel_box(
    points: list[Point],
    pad: float,
    clip: ClipBox,
    width: int,
    height: int,
) -> tuple[int, int, int, int] | None:
    """Pixel bounds of `points` grown by `pad`, limited to the clip and canvas."""
    if not points:
        return None
    cx0, cy0, cx1, cy1 = _clip_pixels(clip, width, height)
    x0 = max(cx0, int(math.floor(min(p.x for p in points) - pad)))
    y0 = max(cy0, int(math.floor(min(p.y for p in points) - pad)))
    x1 = min(cx1, int(math.ceil(max(p.x for p in points) + pad)) + 1)
    y1 = min(cy1, int(math.ceil(max(p.y for p in points) + pad)) + 1)
    if x1 <= x0 or y1 <= y0:
        return None
    return (x0, y0, x1, y1)
