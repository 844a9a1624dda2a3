"""Single plot-area chart layout.

`Layout1` describes a chart: a title on top, a plot area surrounded by up to
four axes (each with an optional title), and a legend strip underneath.
`layout1_to_renderable` turns that description into one `Renderable` whose
pick function reports which part of the chart a device point hit.

Axes are regenerated from the plotted values on every call; the resulting
`AxisT` values are shared by the axis renderables, the gridlines, the plots
and the plot-area pick function of that render.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
import logging
from typing import Any, Generic, NamedTuple, TypeAlias, TypeVar

from luvatrix_chart.axis import (
    AxisData,
    AxisEdge,
    AxisStyle,
    AxisT,
    auto_axis,
    axis_overhang,
    axis_to_renderable,
    render_axis_grid,
)
from luvatrix_chart.canvas.base import Canvas
from luvatrix_chart.grid import (
    Grid,
    above_n,
    add_margins_to_grid,
    beside_n,
    full_overlay_under,
    full_row_above,
    full_row_below,
    grid_to_renderable,
    overlay,
    tval,
    weights,
)
from luvatrix_chart.legend import Legend, LegendStyle, legend_to_renderable
from luvatrix_chart.plot import Plot, ToPlot, to_plot
from luvatrix_chart.renderable import (
    PickFn,
    Renderable,
    add_margins,
    embed_renderable,
    empty_renderable,
    fill_background,
    label,
    map_pick,
    null_pick,
    rlabel,
    set_pick,
    spacer,
)
from luvatrix_chart.types import RGBA, WHITE, FillStyle, FontStyle, HTextAnchor, Point, RectSize, VTextAnchor, solid_fill


LOGGER = logging.getLogger(__name__)

X = TypeVar("X")
Y = TypeVar("Y")
T = TypeVar("T")


def _non_empty(values: Sequence[Any]) -> bool:
    return len(values) > 0


def _never(_values: Sequence[Any]) -> bool:
    return False


def _identity(ad: AxisData[Any]) -> AxisData[Any]:
    return ad


@dataclass(frozen=True)
class LayoutAxis(Generic[T]):
    title_style: FontStyle = field(default_factory=lambda: FontStyle(size=10.0))
    title: str = ""
    style: AxisStyle = field(default_factory=AxisStyle)
    # Decides from the plotted values whether the axis exists at all.
    visible: Callable[[Sequence[T]], bool] = _non_empty
    generate: Callable[[Sequence[T]], AxisData[T]] = auto_axis  # type: ignore[assignment]
    # Applied to the generated data, before reversal.
    override: Callable[[AxisData[T]], AxisData[T]] = _identity
    reverse: bool = False


def default_layout_axis() -> LayoutAxis[Any]:
    return LayoutAxis()


@dataclass(frozen=True)
class LeftPlot(Generic[X, Y]):
    plot: Plot[X, Y]


@dataclass(frozen=True)
class RightPlot(Generic[X, Y]):
    plot: Plot[X, Y]


SidedPlot: TypeAlias = LeftPlot[Any, Any] | RightPlot[Any, Any]


def left(p: ToPlot | Plot[X, Y]) -> LeftPlot[X, Y]:
    return LeftPlot(to_plot(p))


def right(p: ToPlot | Plot[X, Y]) -> RightPlot[X, Y]:
    return RightPlot(to_plot(p))


YAxesControl: TypeAlias = Callable[[list[Any], list[Any]], tuple[list[Any], list[Any]]]


def link_axes(ys1: Sequence[Y], ys2: Sequence[Y]) -> tuple[list[Y], list[Y]]:
    both = list(ys1) + list(ys2)
    return (both, list(both))


def independent_axes(ys1: Sequence[Y], ys2: Sequence[Y]) -> tuple[list[Y], list[Y]]:
    return (list(ys1), list(ys2))


@dataclass(frozen=True)
class Layout1(Generic[X, Y]):
    background: FillStyle = field(default_factory=lambda: solid_fill(WHITE))
    plot_background: FillStyle | None = None
    title: str = ""
    title_style: FontStyle = field(default_factory=lambda: FontStyle(size=15.0, weight="bold"))
    bottom_axis: LayoutAxis[X] = field(default_factory=LayoutAxis)
    top_axis: LayoutAxis[X] = field(default_factory=lambda: LayoutAxis(visible=_never))
    left_axis: LayoutAxis[Y] = field(default_factory=LayoutAxis)
    right_axis: LayoutAxis[Y] = field(default_factory=LayoutAxis)
    yaxes_control: YAxesControl = independent_axes
    margin: float = 10.0
    # Drawn in order; later plots land on top.
    plots: tuple[SidedPlot, ...] = ()
    legend: LegendStyle | None = field(default_factory=LegendStyle)
    grid_last: bool = False

    def __post_init__(self) -> None:
        if self.margin < 0:
            raise ValueError("margin must be >= 0")
        for p in self.plots:
            if not isinstance(p, (LeftPlot, RightPlot)):
                raise TypeError(f"plots must be LeftPlot or RightPlot, got {type(p)!r}")


def default_layout1() -> Layout1[Any, Any]:
    return Layout1()


# Pick results


@dataclass(frozen=True)
class LegendPick:
    title: str


@dataclass(frozen=True)
class TitlePick:
    text: str


@dataclass(frozen=True)
class AxisTitlePick:
    edge: AxisEdge
    title: str


@dataclass(frozen=True)
class AxisValuePick(Generic[T]):
    edge: AxisEdge
    value: T


@dataclass(frozen=True)
class PlotAreaPick(Generic[X, Y]):
    x: X
    y_left: Y
    y_right: Y


Layout1Pick: TypeAlias = LegendPick | TitlePick | AxisTitlePick | AxisValuePick[Any] | PlotAreaPick[Any, Any]


# Axes


class LayoutAxes(NamedTuple):
    bottom: AxisT[Any] | None
    left: AxisT[Any] | None
    top: AxisT[Any] | None
    right: AxisT[Any] | None


def all_plotted_values(plots: Sequence[SidedPlot]) -> tuple[list[Any], list[Any], list[Any], list[Any]]:
    """(left xs, right xs, left ys, right ys)"""
    xs0: list[Any] = []
    xs1: list[Any] = []
    ys0: list[Any] = []
    ys1: list[Any] = []
    for sp in plots:
        xs, ys = sp.plot.all_points
        if isinstance(sp, LeftPlot):
            xs0.extend(xs)
            ys0.extend(ys)
        else:
            xs1.extend(xs)
            ys1.extend(ys)
    return xs0, xs1, ys0, ys1


def make_axis(edge: AxisEdge, laxis: LayoutAxis[T], values: Sequence[T]) -> AxisT[T] | None:
    if not laxis.visible(values):
        return None
    data = laxis.override(laxis.generate(values))
    return AxisT(edge=edge, style=laxis.style, reverse=laxis.reverse, data=data)


def get_axes(l: Layout1[Any, Any]) -> LayoutAxes:
    xs0, xs1, ys0, ys1 = all_plotted_values(l.plots)
    xs = xs0 + xs1
    ys0c, ys1c = l.yaxes_control(ys0, ys1)
    return LayoutAxes(
        bottom=make_axis("bottom", l.bottom_axis, xs),
        left=make_axis("left", l.left_axis, ys0c),
        top=make_axis("top", l.top_axis, xs),
        right=make_axis("right", l.right_axis, ys1c),
    )


# Plot area


def plots_to_renderable(l: Layout1[Any, Any], axes: LayoutAxes) -> Renderable[Layout1Pick]:
    x_axis = axes.bottom if axes.bottom is not None else axes.top

    def render_grids(canvas: Canvas, size: RectSize) -> None:
        for at in (axes.top, axes.bottom, axes.left, axes.right):
            if at is not None:
                render_axis_grid(canvas, size, at)

    def render_plot(canvas: Canvas, size: RectSize, sp: SidedPlot) -> None:
        y_axis = axes.left if isinstance(sp, LeftPlot) else axes.right
        if x_axis is None or y_axis is None:
            LOGGER.debug("skipping plot without a %s axis", "x" if x_axis is None else "y")
            return

        def pmap(xy: tuple[Any, Any]) -> Point:
            return Point(x_axis.value_to_device(size, xy[0]), y_axis.value_to_device(size, xy[1]))

        sp.plot.render(canvas, pmap)

    def draw(canvas: Canvas, size: RectSize) -> PickFn[Layout1Pick]:
        w, h = size
        if not l.grid_last:
            render_grids(canvas, size)
        with canvas.preserve():
            canvas.set_clip_rect(Point(0.0, 0.0), Point(w, h))
            for sp in l.plots:
                render_plot(canvas, size, sp)
        if l.grid_last:
            render_grids(canvas, size)

        def pick(p: Point) -> Layout1Pick | None:
            if x_axis is None:
                return None
            if axes.left is not None and axes.right is not None:
                y_axes = (axes.left, axes.right)
            elif axes.left is not None:
                y_axes = (axes.left, axes.left)
            elif axes.right is not None:
                y_axes = (axes.right, axes.right)
            else:
                return None
            return PlotAreaPick(
                x=x_axis.device_to_value(size, p.x),
                y_left=y_axes[0].device_to_value(size, p.y),
                y_right=y_axes[1].device_to_value(size, p.y),
            )

        return pick

    return Renderable(measure=lambda _canvas: (0.0, 0.0), draw=draw)


def _axis_title(
    laxis: LayoutAxis[Any],
    at: AxisT[Any] | None,
    edge: AxisEdge,
    h_anchor: HTextAnchor,
    v_anchor: VTextAnchor,
    rotation: float,
) -> Grid[Renderable[Layout1Pick]]:
    if at is None or not laxis.title:
        return tval(empty_renderable())
    return tval(map_pick(lambda text: AxisTitlePick(edge, text), rlabel(laxis.title_style, h_anchor, v_anchor, rotation, laxis.title)))


def _axis_cell(at: AxisT[Any] | None) -> Grid[Renderable[Layout1Pick]]:
    if at is None:
        return tval(empty_renderable())
    edge = at.edge
    return tval(map_pick(lambda v: AxisValuePick(edge, v), axis_to_renderable(at)))


def _axes_spacer(a1: AxisT[Any] | None, end1: int, a2: AxisT[Any] | None, end2: int) -> Grid[Renderable[Any]]:
    """Corner spacer sized by the overhang of the two axes meeting there."""

    def build(canvas: Canvas) -> Renderable[Any]:
        w = axis_overhang(canvas, a1)[end1] if a1 is not None else 0.0
        h = axis_overhang(canvas, a2)[end2] if a2 is not None else 0.0
        return spacer((w, h))

    return tval(embed_renderable(build))


def layout1_plot_area_to_grid(l: Layout1[Any, Any], axes: LayoutAxes | None = None) -> Grid[Renderable[Layout1Pick]]:
    if axes is None:
        axes = get_axes(l)
    er = tval(empty_renderable())

    plots: Renderable[Layout1Pick] = plots_to_renderable(l, axes)
    if l.plot_background is not None:
        plots = fill_background(l.plot_background, plots)

    layer1 = above_n(
        [
            beside_n([er, er, er, er, er]),
            beside_n([er, er, er, er, er]),
            beside_n([er, er, weights((1.0, 1.0), tval(plots)), er, er]),
            beside_n([er, er, er, er, er]),
            beside_n([er, er, er, er, er]),
        ]
    )

    t_title = _axis_title(l.top_axis, axes.top, "top", "centre", "bottom", 0.0)
    b_title = _axis_title(l.bottom_axis, axes.bottom, "bottom", "centre", "top", 0.0)
    l_title = _axis_title(l.left_axis, axes.left, "left", "right", "centre", 270.0)
    r_title = _axis_title(l.right_axis, axes.right, "right", "left", "centre", 270.0)

    tl = _axes_spacer(axes.top, 0, axes.left, 0)
    bl = _axes_spacer(axes.bottom, 0, axes.left, 1)
    tr = _axes_spacer(axes.top, 1, axes.right, 0)
    br = _axes_spacer(axes.bottom, 1, axes.right, 1)

    layer2 = above_n(
        [
            beside_n([er, er, t_title, er, er]),
            beside_n([er, tl, _axis_cell(axes.top), tr, er]),
            beside_n([l_title, _axis_cell(axes.left), er, _axis_cell(axes.right), r_title]),
            beside_n([er, bl, _axis_cell(axes.bottom), br, er]),
            beside_n([er, er, b_title, er, er]),
        ]
    )
    return overlay(layer1, layer2)


# Title and legend


def layout1_title_to_renderable(l: Layout1[Any, Any]) -> Renderable[Layout1Pick]:
    if not l.title:
        return empty_renderable()
    title = label(l.title_style, "centre", "centre", l.title)
    return add_margins((l.margin / 2.0, 0.0, 0.0, 0.0), map_pick(TitlePick, title))


def layout1_legends_to_renderable(l: Layout1[Any, Any]) -> Renderable[Layout1Pick]:
    lefts = [entry for sp in l.plots if isinstance(sp, LeftPlot) for entry in sp.plot.legend]
    rights = [entry for sp in l.plots if isinstance(sp, RightPlot) for entry in sp.plot.legend]
    lm = l.margin

    def mk_legend(side: str, entries: list[Any]) -> Renderable[Layout1Pick]:
        if l.legend is None:
            return empty_renderable()
        kept = tuple(e for e in entries if e[0] != "")
        if not kept:
            LOGGER.debug("no %s legend entries to show", side)
            return empty_renderable()
        return add_margins((0.0, lm, lm, lm), map_pick(LegendPick, legend_to_renderable(Legend(l.legend, kept))))

    g = beside_n(
        [
            tval(mk_legend("left", lefts)),
            weights((1.0, 1.0), tval(empty_renderable())),
            tval(mk_legend("right", rights)),
        ]
    )
    return grid_to_renderable(g)


# Assembly


def layout1_to_grid(l: Layout1[Any, Any]) -> Grid[Renderable[Layout1Pick]]:
    lm = l.margin
    axes = get_axes(l)
    return above_n(
        [
            tval(layout1_title_to_renderable(l)),
            weights((1.0, 1.0), tval(grid_to_renderable(add_margins_to_grid((lm, lm, lm, lm), layout1_plot_area_to_grid(l, axes))))),
            tval(layout1_legends_to_renderable(l)),
        ]
    )


def layout1_to_renderable(l: Layout1[Any, Any]) -> Renderable[Layout1Pick]:
    return fill_background(l.background, grid_to_renderable(layout1_to_grid(l)))


def to_renderable(l: Layout1[Any, Any]) -> Renderable[Any]:
    """The chart without its pick function."""
    return set_pick(null_pick, layout1_to_renderable(l))


# Style helpers


def update_all_axes_styles(f: Callable[[AxisStyle], AxisStyle], l: Layout1[X, Y]) -> Layout1[X, Y]:
    return replace(
        l,
        top_axis=replace(l.top_axis, style=f(l.top_axis.style)),
        bottom_axis=replace(l.bottom_axis, style=f(l.bottom_axis.style)),
        left_axis=replace(l.left_axis, style=f(l.left_axis.style)),
        right_axis=replace(l.right_axis, style=f(l.right_axis.style)),
    )


def set_layout1_foreground(color: RGBA, l: Layout1[X, Y]) -> Layout1[X, Y]:
    def recolor(style: AxisStyle) -> AxisStyle:
        return replace(
            style,
            line_style=replace(style.line_style, color=color),
            label_style=replace(style.label_style, color=color),
        )

    out = update_all_axes_styles(recolor, l)
    legend = l.legend
    if legend is not None:
        legend = replace(legend, label_style=replace(legend.label_style, color=color))
    return replace(out, title_style=replace(l.title_style, color=color), legend=legend)


# Stacking


@dataclass(frozen=True)
class AnyLayout1:
    """The parts of a `Layout1` needed to stack it under other layouts."""

    background: FillStyle
    title_renderable: Renderable[Layout1Pick]
    plot_area_grid: Grid[Renderable[Layout1Pick]]
    legend_renderable: Renderable[Layout1Pick]
    margin: float


def with_any_ordinate(l: Layout1[Any, Any]) -> AnyLayout1:
    return AnyLayout1(
        background=l.background,
        title_renderable=layout1_title_to_renderable(l),
        plot_area_grid=layout1_plot_area_to_grid(l),
        legend_renderable=layout1_legends_to_renderable(l),
        margin=l.margin,
    )


def render_layouts_stacked(layouts: Sequence[AnyLayout1]) -> Renderable[Layout1Pick]:
    """Stack layouts vertically so their plot areas line up.

    Background and exterior margin come from the first layout.
    """
    if not layouts:
        return empty_renderable()
    first = layouts[0]
    lm = first.margin
    body = above_n(
        [full_row_above(a.title_renderable, 0.0, full_row_below(a.legend_renderable, 0.0, a.plot_area_grid)) for a in layouts]
    )
    g = full_overlay_under(fill_background(first.background, empty_renderable()), add_margins_to_grid((lm, lm, lm, lm), body))
    return grid_to_renderable(g)
