from luvatrix_chart.axis import (
    AxisData,
    AxisMax,
    AxisMin,
    AxisStyle,
    AxisT,
    ExactValue,
    auto_axis,
    axis_grid_at_labels,
    axis_grid_at_ticks,
    axis_grid_hide,
    axis_labels_hide,
    axis_ticks_hide,
    axis_ticks_inside,
    default_axis_style,
)
from luvatrix_chart.canvas import RasterCanvas, RecordingCanvas, SvgCanvas
from luvatrix_chart.config import ChartConfig, load_chart_config
from luvatrix_chart.errors import ChartConfigError, ChartDataError, ChartError, ShapeMismatchError
from luvatrix_chart.export import (
    renderable_to_file,
    renderable_to_png_file,
    renderable_to_rgba,
    renderable_to_svg_file,
    renderable_to_svg_markup,
)
from luvatrix_chart.grid import Grid, above, beside, grid_to_renderable, overlay, tspan, tval, weights
from luvatrix_chart.interactive import ChartView
from luvatrix_chart.layout import (
    AnyLayout1,
    AxisTitlePick,
    AxisValuePick,
    Layout1,
    Layout1Pick,
    LayoutAxis,
    LeftPlot,
    LegendPick,
    PlotAreaPick,
    RightPlot,
    TitlePick,
    default_layout1,
    default_layout_axis,
    independent_axes,
    layout1_to_renderable,
    left,
    link_axes,
    render_layouts_stacked,
    right,
    set_layout1_foreground,
    to_renderable,
    update_all_axes_styles,
    with_any_ordinate,
)
from luvatrix_chart.legend import LegendStyle
from luvatrix_chart.plot import (
    ErrPoint,
    ErrValue,
    Plot,
    PlotErrBars,
    PlotLines,
    PlotPoints,
    PointStyle,
    filled_circles,
    hline_plot,
    sym_err_point,
    vline_plot,
)
from luvatrix_chart.renderable import (
    Renderable,
    add_margins,
    fill_background,
    label,
    map_pick,
    rectangle,
    rlabel,
    set_pick,
    spacer,
)
from luvatrix_chart.types import FillStyle, FontStyle, LineStyle, Point, solid_fill, solid_line

__all__ = [
    "AnyLayout1",
    "AxisData",
    "AxisMax",
    "AxisMin",
    "AxisStyle",
    "AxisT",
    "AxisTitlePick",
    "AxisValuePick",
    "ChartConfig",
    "ChartConfigError",
    "ChartDataError",
    "ChartError",
    "ChartView",
    "ErrPoint",
    "ErrValue",
    "ExactValue",
    "FillStyle",
    "FontStyle",
    "Grid",
    "Layout1",
    "Layout1Pick",
    "LayoutAxis",
    "LeftPlot",
    "LegendPick",
    "LegendStyle",
    "LineStyle",
    "Plot",
    "PlotAreaPick",
    "PlotErrBars",
    "PlotLines",
    "PlotPoints",
    "Point",
    "PointStyle",
    "RasterCanvas",
    "RecordingCanvas",
    "Renderable",
    "RightPlot",
    "ShapeMismatchError",
    "SvgCanvas",
    "TitlePick",
    "above",
    "add_margins",
    "auto_axis",
    "axis_grid_at_labels",
    "axis_grid_at_ticks",
    "axis_grid_hide",
    "axis_labels_hide",
    "axis_ticks_hide",
    "axis_ticks_inside",
    "beside",
    "default_axis_style",
    "default_layout1",
    "default_layout_axis",
    "fill_background",
    "filled_circles",
    "grid_to_renderable",
    "hline_plot",
    "independent_axes",
    "label",
    "layout1_to_renderable",
    "left",
    "link_axes",
    "load_chart_config",
    "map_pick",
    "overlay",
    "rectangle",
    "render_layouts_stacked",
    "renderable_to_file",
    "renderable_to_png_file",
    "renderable_to_rgba",
    "renderable_to_svg_file",
    "renderable_to_svg_markup",
    "right",
    "rlabel",
    "set_layout1_foreground",
    "set_pick",
    "solid_fill",
    "solid_line",
    "spacer",
    "sym_err_point",
    "to_renderable",
    "tspan",
    "tval",
    "update_all_axes_styles",
    "vline_plot",
    "weights",
    "with_any_ordinate",
]
