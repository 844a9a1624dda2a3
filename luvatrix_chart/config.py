from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from pathlib import Path
import tomllib
from typing import Any, Literal

from luvatrix_chart.errors import ChartConfigError
from luvatrix_chart.layout import (
    Layout1,
    LayoutAxis,
    SidedPlot,
    independent_axes,
    left,
    link_axes,
    right,
)
from luvatrix_chart.plot import PlotLines, PlotPoints, filled_circles, hline_plot, vline_plot
from luvatrix_chart.types import BLUE, RGBA, solid_line


LOGGER = logging.getLogger(__name__)

PLOT_KINDS = ("lines", "points", "hline", "vline")
AXIS_EDGES = ("bottom", "top", "left", "right")

PlotKind = Literal["lines", "points", "hline", "vline"]


@dataclass(frozen=True)
class AxisConfig:
    title: str = ""
    visible: bool | None = None
    reverse: bool = False


@dataclass(frozen=True)
class PlotConfig:
    kind: PlotKind = "lines"
    side: Literal["left", "right"] = "left"
    title: str = ""
    color: RGBA = BLUE
    width: float = 1.0
    points: tuple[tuple[float, float], ...] = ()
    value: float | None = None


@dataclass(frozen=True)
class ChartConfig:
    title: str = ""
    margin: float = 10.0
    grid_last: bool = False
    y_axes: Literal["independent", "linked"] = "independent"
    legend: bool = True
    axes: dict[str, AxisConfig] = field(default_factory=dict)
    plots: tuple[PlotConfig, ...] = ()

    def to_layout(self) -> Layout1[float, float]:
        base: Layout1[float, float] = Layout1()
        changes: dict[str, Any] = {}
        for edge, ac in self.axes.items():
            attr = f"{edge}_axis"
            laxis: LayoutAxis[float] = replace(LayoutAxis(), title=ac.title, reverse=ac.reverse)
            if ac.visible is not None:
                shown = ac.visible
                laxis = replace(laxis, visible=lambda _values, shown=shown: shown)
            changes[attr] = laxis
        return replace(
            base,
            title=self.title,
            margin=self.margin,
            grid_last=self.grid_last,
            yaxes_control=link_axes if self.y_axes == "linked" else independent_axes,
            legend=base.legend if self.legend else None,
            plots=tuple(_build_plot(pc) for pc in self.plots),
            **changes,
        )


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ChartConfigError(f"invalid TOML in {config_path}: {exc}") from exc
    config = parse_chart_config(raw)
    LOGGER.debug("loaded chart config %s with %d plots", config_path, len(config.plots))
    return config


def parse_chart_config(raw: dict[str, Any]) -> ChartConfig:
    y_axes = _coerce_str(raw.get("y_axes", "independent"), "y_axes")
    if y_axes not in ("independent", "linked"):
        raise ChartConfigError("y_axes must be 'independent' or 'linked'")
    margin = _coerce_float(raw.get("margin", 10.0), "margin")
    if margin < 0:
        raise ChartConfigError("margin must be >= 0")

    axes_raw = raw.get("axes", {})
    if not isinstance(axes_raw, dict):
        raise ChartConfigError("axes must be a table")
    axes: dict[str, AxisConfig] = {}
    for edge, table in axes_raw.items():
        if edge not in AXIS_EDGES:
            raise ChartConfigError(f"unknown axis {edge!r}; expected one of {', '.join(AXIS_EDGES)}")
        axes[edge] = _parse_axis(table, f"axes.{edge}")

    plots_raw = raw.get("plots", [])
    if not isinstance(plots_raw, list):
        raise ChartConfigError("plots must be an array of tables")
    plots = tuple(_parse_plot(p, f"plots[{i}]") for i, p in enumerate(plots_raw))

    return ChartConfig(
        title=_coerce_str(raw.get("title", ""), "title"),
        margin=margin,
        grid_last=_coerce_bool(raw.get("grid_last", False), "grid_last"),
        y_axes=y_axes,  # type: ignore[arg-type]
        legend=_coerce_bool(raw.get("legend", True), "legend"),
        axes=axes,
        plots=plots,
    )


def _parse_axis(table: object, field_name: str) -> AxisConfig:
    if not isinstance(table, dict):
        raise ChartConfigError(f"{field_name} must be a table")
    visible = table.get("visible")
    return AxisConfig(
        title=_coerce_str(table.get("title", ""), f"{field_name}.title"),
        visible=None if visible is None else _coerce_bool(visible, f"{field_name}.visible"),
        reverse=_coerce_bool(table.get("reverse", False), f"{field_name}.reverse"),
    )


def _parse_plot(table: object, field_name: str) -> PlotConfig:
    if not isinstance(table, dict):
        raise ChartConfigError(f"{field_name} must be a table")
    kind = _coerce_str(table.get("kind", "lines"), f"{field_name}.kind")
    if kind not in PLOT_KINDS:
        raise ChartConfigError(f"{field_name}.kind must be one of {', '.join(PLOT_KINDS)}")
    side = _coerce_str(table.get("side", "left"), f"{field_name}.side")
    if side not in ("left", "right"):
        raise ChartConfigError(f"{field_name}.side must be 'left' or 'right'")
    width = _coerce_float(table.get("width", 1.0), f"{field_name}.width")
    if width < 0:
        raise ChartConfigError(f"{field_name}.width must be >= 0")

    points: tuple[tuple[float, float], ...] = ()
    value: float | None = None
    if kind in ("lines", "points"):
        points = _coerce_points(table.get("points"), f"{field_name}.points")
    else:
        if "value" not in table:
            raise ChartConfigError(f"{field_name} missing required field: value")
        value = _coerce_float(table["value"], f"{field_name}.value")

    return PlotConfig(
        kind=kind,  # type: ignore[arg-type]
        side=side,  # type: ignore[arg-type]
        title=_coerce_str(table.get("title", ""), f"{field_name}.title"),
        color=_coerce_color(table.get("color", list(BLUE)), f"{field_name}.color"),
        width=width,
        points=points,
        value=value,
    )


def _build_plot(pc: PlotConfig) -> SidedPlot:
    style = solid_line(pc.width, pc.color)
    if pc.kind == "lines":
        p: Any = PlotLines(title=pc.title, line_style=style, values=(pc.points,))
    elif pc.kind == "points":
        p = PlotPoints(title=pc.title, style=filled_circles(max(1.0, pc.width * 2.0), pc.color), values=pc.points)
    elif pc.kind == "hline":
        p = hline_plot(pc.title, style, float(pc.value or 0.0))
    else:
        p = vline_plot(pc.title, style, float(pc.value or 0.0))
    return left(p) if pc.side == "left" else right(p)


def _coerce_str(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise ChartConfigError(f"{field_name} must be a string")
    return value


def _coerce_bool(value: object, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ChartConfigError(f"{field_name} must be a boolean")
    return value


def _coerce_float(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ChartConfigError(f"{field_name} must be a number")
    return float(value)


def _coerce_color(value: object, field_name: str) -> RGBA:
    if not isinstance(value, list) or len(value) not in (3, 4):
        raise ChartConfigError(f"{field_name} must be a list of 3 or 4 integers")
    out: list[int] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= 255:
            raise ChartConfigError(f"{field_name} entries must be integers in 0..255")
        out.append(item)
    if len(out) == 3:
        out.append(255)
    return (out[0], out[1], out[2], out[3])


def _coerce_points(value: object, field_name: str) -> tuple[tuple[float, float], ...]:
    if value is None:
        raise ChartConfigError(f"{field_name} is required")
    if not isinstance(value, list):
        raise ChartConfigError(f"{field_name} must be a list of [x, y] pairs")
    out: list[tuple[float, float]] = []
    for i, pair in enumerate(value):
        if not isinstance(pair, list) or len(pair) != 2:
            raise ChartConfigError(f"{field_name}[{i}] must be an [x, y] pair")
        out.append((_coerce_float(pair[0], f"{field_name}[{i}]"), _coerce_float(pair[1], f"{field_name}[{i}]")))
    return tuple(out)
