from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from luvatrix_chart.types import FontStyle


MONO_FONT_FALLBACK_PATTERNS = (
    "comicmono",
    "comic mono",
    "menlo",
    "monaco",
    "courier new",
    "courier",
    "dejavusansmono",
    "dejavu sans mono",
    "dejavusans",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)


@dataclass(frozen=True)
class FontExtents:
    ascent: float
    descent: float
    height: float


def load_font(style: FontStyle) -> ImageFont.FreeTypeFont:
    return _load_font(style.family, style.size)


def text_size(text: str, style: FontStyle) -> tuple[float, float]:
    """Advance width and line height of `text`, unrotated."""
    font = load_font(style)
    extents = font_extents(style)
    if not text:
        return (0.0, extents.height)
    width = float(font.getlength(text))
    if style.weight == "bold":
        width += _embolden_px(style) - 1
    return (width, extents.height)


def font_extents(style: FontStyle) -> FontExtents:
    ascent, descent = load_font(style).getmetrics()
    return FontExtents(ascent=float(ascent), descent=float(descent), height=float(ascent + descent))


def render_text_mask(text: str, style: FontStyle, rotation_rad: float) -> tuple[np.ndarray, int, int]:
    """Rasterise `text` rotated about its baseline origin.

    Returns the coverage mask plus the pixel offset of the baseline origin
    inside the mask.
    """
    font = load_font(style)
    width, height = text_size(text, style)
    radius = int(np.ceil(np.hypot(width, height))) + 2
    image = Image.new("L", (radius * 2, radius * 2), 0)
    draw = ImageDraw.Draw(image)
    draw.text((radius, radius), text, fill=255, font=font, anchor="ls")
    if rotation_rad != 0.0:
        image = image.rotate(-np.degrees(rotation_rad), resample=Image.Resampling.BILINEAR, center=(radius, radius))
    mask = np.asarray(image, dtype=np.uint8)
    if style.weight == "bold":
        mask = _embolden(mask, _embolden_px(style))
    return mask, radius, radius


def _embolden_px(style: FontStyle) -> int:
    return max(2, int(round(style.size / 12.0)) + 1)


def _embolden(mask: np.ndarray, embolden_px: int) -> np.ndarray:
    if embolden_px <= 1:
        return mask
    out = mask.copy()
    for shift in range(1, embolden_px):
        src = mask[:, : max(0, mask.shape[1] - shift)]
        dst = out[:, shift:]
        if src.size == 0 or dst.size == 0:
            break
        np.maximum(dst, src, out=dst)
    return out


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default(size=size)


@lru_cache(maxsize=32)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower()
    patterns = ((wanted,) if wanted else ()) + MONO_FONT_FALLBACK_PATTERNS

    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            name = path.name.lower().replace(" ", "")
            if p in stem or p in name:
                return path
    return None
