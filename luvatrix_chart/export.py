from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from luvatrix_chart.canvas.base import Canvas
from luvatrix_chart.canvas.raster import RasterCanvas
from luvatrix_chart.canvas.svg import SvgCanvas
from luvatrix_chart.errors import ChartError
from luvatrix_chart.renderable import PickFn, Renderable
from luvatrix_chart.types import RGBA, TRANSPARENT


LOGGER = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".png", ".svg")


def render(r: Renderable[Any], canvas: Canvas) -> PickFn[Any]:
    """Measure, then draw `r` over the whole canvas."""
    r.measure(canvas)
    depth = canvas.depth
    pick = r.draw(canvas, (float(canvas.width), float(canvas.height)))
    if canvas.depth != depth:
        raise ChartError(f"unbalanced canvas save/restore: depth {depth} -> {canvas.depth}")
    return pick


def renderable_to_rgba(
    r: Renderable[Any],
    width: int,
    height: int,
    *,
    background: RGBA = TRANSPARENT,
) -> tuple[np.ndarray, PickFn[Any]]:
    canvas = RasterCanvas(width, height, background=background)
    pick = render(r, canvas)
    return canvas.rgba, pick


def renderable_to_png_file(r: Renderable[Any], width: int, height: int, path: str | Path) -> PickFn[Any]:
    canvas = RasterCanvas(width, height)
    pick = render(r, canvas)
    out = Path(path)
    canvas.to_image().save(out, format="PNG")
    LOGGER.info("wrote %dx%d PNG to %s", width, height, out)
    return pick


def renderable_to_svg_markup(r: Renderable[Any], width: int, height: int) -> tuple[str, PickFn[Any]]:
    canvas = SvgCanvas(width, height)
    pick = render(r, canvas)
    return canvas.to_markup(), pick


def renderable_to_svg_file(r: Renderable[Any], width: int, height: int, path: str | Path) -> PickFn[Any]:
    canvas = SvgCanvas(width, height)
    pick = render(r, canvas)
    out = Path(path)
    canvas.write(out)
    LOGGER.info("wrote %dx%d SVG to %s", width, height, out)
    return pick


def renderable_to_file(r: Renderable[Any], width: int, height: int, path: str | Path) -> PickFn[Any]:
    """Write a PNG or SVG file, chosen by the suffix of `path`."""
    suffix = Path(path).suffix.lower()
    if suffix == ".png":
        return renderable_to_png_file(r, width, height, path)
    if suffix == ".svg":
        return renderable_to_svg_file(r, width, height, path)
    raise ValueError(f"unsupported output suffix {suffix!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}")
