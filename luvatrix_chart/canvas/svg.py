from __future__ import annotations

import math
from pathlib import Path
import xml.etree.ElementTree as ET

from luvatrix_chart.canvas.base import ClipBox, SubPath
from luvatrix_chart.canvas.recording import FillOp, PaintOp, RecordingCanvas, StrokeOp, TextOp
from luvatrix_chart.types import RGBA, VECTOR_ALIGNMENT, PointAlignment


SVG_NS = "http://www.w3.org/2000/svg"


class SvgCanvas(RecordingCanvas):
    """Vector canvas: records operations and serialises them as SVG."""

    def __init__(self, width: int, height: int, *, alignment: PointAlignment = VECTOR_ALIGNMENT) -> None:
        super().__init__(width, height, alignment=alignment)

    def to_element(self) -> ET.Element:
        root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": _num(self.width),
                "height": _num(self.height),
                "viewBox": f"0 0 {_num(self.width)} {_num(self.height)}",
            },
        )
        defs = ET.SubElement(root, "defs")
        clip_ids: dict[ClipBox, str] = {}
        for op in self.ops:
            clip_id = clip_ids.get(op.clip)
            if clip_id is None:
                clip_id = f"clip{len(clip_ids)}"
                clip_ids[op.clip] = clip_id
                clip_el = ET.SubElement(defs, "clipPath", {"id": clip_id})
                x0, y0, x1, y1 = op.clip
                ET.SubElement(
                    clip_el,
                    "rect",
                    {"x": _num(x0), "y": _num(y0), "width": _num(x1 - x0), "height": _num(y1 - y0)},
                )
            _append_op(root, op, clip_id)
        return root

    def to_markup(self) -> str:
        return ET.tostring(self.to_element(), encoding="unicode")

    def write(self, path: str | Path) -> None:
        ET.ElementTree(self.to_element()).write(str(path), encoding="utf-8", xml_declaration=True)


def _append_op(root: ET.Element, op: FillOp | StrokeOp | PaintOp | TextOp, clip_id: str) -> None:
    clip_ref = f"url(#{clip_id})"
    if isinstance(op, PaintOp):
        x0, y0, x1, y1 = op.clip
        attrs = {"x": _num(x0), "y": _num(y0), "width": _num(x1 - x0), "height": _num(y1 - y0)}
        attrs.update(_paint_attrs("fill", op.style.color))
        ET.SubElement(root, "rect", attrs)
    elif isinstance(op, FillOp):
        attrs = {"d": _path_data(op.path), "stroke": "none", "clip-path": clip_ref}
        attrs.update(_paint_attrs("fill", op.style.color))
        ET.SubElement(root, "path", attrs)
    elif isinstance(op, StrokeOp):
        attrs = {
            "d": _path_data(op.path),
            "fill": "none",
            "stroke-width": _num(op.style.width),
            "stroke-linecap": op.style.cap,
            "stroke-linejoin": op.style.join,
            "clip-path": clip_ref,
        }
        attrs.update(_paint_attrs("stroke", op.style.color))
        if op.style.dashes:
            attrs["stroke-dasharray"] = " ".join(_num(d) for d in op.style.dashes)
        ET.SubElement(root, "path", attrs)
    else:
        attrs = {
            "x": _num(op.origin.x),
            "y": _num(op.origin.y),
            "font-family": op.style.family,
            "font-size": _num(op.style.size),
            "font-weight": op.style.weight,
            "font-style": op.style.slant,
            "clip-path": clip_ref,
        }
        attrs.update(_paint_attrs("fill", op.style.color))
        if op.rotation != 0.0:
            attrs["transform"] = f"rotate({_num(math.degrees(op.rotation))} {_num(op.origin.x)} {_num(op.origin.y)})"
        el = ET.SubElement(root, "text", attrs)
        el.text = op.text


def _path_data(path: tuple[SubPath, ...]) -> str:
    parts: list[str] = []
    for points, closed in path:
        for i, p in enumerate(points):
            parts.append(f"{'M' if i == 0 else 'L'}{_num(p.x)} {_num(p.y)}")
        if closed:
            parts.append("Z")
    return " ".join(parts)


def _paint_attrs(prefix: str, color: RGBA) -> dict[str, str]:
    r, g, b, a = color
    attrs = {prefix: f"#{r:02x}{g:02x}{b:02x}"}
    if a != 255:
        attrs[f"{prefix}-opacity"] = _num(a / 255.0)
    return attrs


def _num(value: float) -> str:
    out = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if out in {"-0", ""} else out
