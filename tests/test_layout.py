from __future__ import annotations

from dataclasses import replace
import unittest

from luvatrix_chart.axis import AxisStyle, axis_grid_hide
from luvatrix_chart.canvas import RecordingCanvas
from luvatrix_chart.canvas.recording import StrokeOp
from luvatrix_chart.export import render
from luvatrix_chart.grid import natural_sizes
from luvatrix_chart.layout import (
    AxisTitlePick,
    AxisValuePick,
    Layout1,
    LayoutAxis,
    LegendPick,
    PlotAreaPick,
    TitlePick,
    default_layout1,
    get_axes,
    layout1_legends_to_renderable,
    layout1_plot_area_to_grid,
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
from luvatrix_chart.plot import PlotLines
from luvatrix_chart.types import BLUE, Point, solid_line


GREEN = (0, 160, 0, 255)


def line(title: str, points, color=BLUE) -> PlotLines:
    return PlotLines(title=title, line_style=solid_line(1.0, color), values=(points,))


def plot_strokes(canvas: RecordingCanvas, color=BLUE) -> list[StrokeOp]:
    return [op for op in canvas.strokes() if op.style.color == color]


class Layout1Tests(unittest.TestCase):
    def setUp(self) -> None:
        self.canvas = RecordingCanvas(400, 300)

    def test_defaults(self) -> None:
        l = default_layout1()
        self.assertEqual(l.margin, 10.0)
        self.assertEqual(l.title_style.size, 15.0)
        self.assertEqual(l.title_style.weight, "bold")
        self.assertFalse(l.top_axis.visible([1.0]))
        self.assertTrue(l.bottom_axis.visible([1.0]))
        self.assertFalse(l.bottom_axis.visible([]))
        self.assertIsNotNone(l.legend)
        self.assertFalse(l.grid_last)

    def test_plots_must_be_tagged_with_a_side(self) -> None:
        with self.assertRaises(TypeError):
            Layout1(plots=(line("x", [(0, 0)]).to_plot(),))  # type: ignore[arg-type]

    def test_round_trip_title_and_plot_area(self) -> None:
        l = Layout1(title="T", plots=(left(line("", [(0, 0), (1, 1), (2, 0)])),))
        pick = render(layout1_to_renderable(l), self.canvas)
        self.assertEqual(pick(Point(5.0, 5.0)), TitlePick("T"))

        (op,) = plot_strokes(self.canvas)
        target = op.path[0][0][1]
        hit = pick(Point(target.x, target.y + 0.5))
        self.assertIsInstance(hit, PlotAreaPick)
        self.assertAlmostEqual(hit.x, 1.0, delta=0.02)
        self.assertAlmostEqual(hit.y_left, 1.0, delta=0.02)
        self.assertEqual(hit.y_left, hit.y_right)
        self.assertEqual(self.canvas.depth, 0)

    def test_axis_titles_and_values_are_pickable(self) -> None:
        l = Layout1(
            bottom_axis=LayoutAxis(title="time"),
            left_axis=LayoutAxis(title="price"),
            plots=(left(line("", [(0, 0), (10, 5)])),),
        )
        pick = render(layout1_to_renderable(l), self.canvas)
        texts = {t.text: t.origin for t in self.canvas.texts()}
        hits = [pick(Point(x, y)) for x in range(0, 400, 4) for y in range(0, 300, 4)]
        self.assertIn(AxisTitlePick("bottom", "time"), hits)
        self.assertIn(AxisTitlePick("left", "price"), hits)
        edges = {h.edge for h in hits if isinstance(h, AxisValuePick)}
        self.assertEqual(edges, {"bottom", "left"})
        self.assertIn("time", texts)

    def test_plot_area_pick_reports_both_ordinates(self) -> None:
        l = Layout1(
            plots=(
                left(line("a", [(0, 0), (10, 1)])),
                right(line("b", [(0, 100), (10, 200)], color=GREEN)),
            ),
        )
        pick = render(layout1_to_renderable(l), self.canvas)
        (op,) = plot_strokes(self.canvas, GREEN)
        start = op.path[0][0][0]
        hit = pick(Point(start.x + 0.5, start.y - 0.5))
        self.assertIsInstance(hit, PlotAreaPick)
        self.assertAlmostEqual(hit.y_right, 100.0, delta=1.0)
        self.assertLess(hit.y_left, 0.5)

    def test_invisible_axis_takes_no_space_and_is_never_picked(self) -> None:
        hidden = LayoutAxis(title="hidden", visible=lambda _values: False)
        l = Layout1(left_axis=hidden, plots=(left(line("", [(0, 0), (1, 1)])),))
        axes = get_axes(l)
        self.assertIsNone(axes.left)
        self.assertIsNotNone(axes.bottom)

        g = layout1_plot_area_to_grid(l, axes)
        axis_cell = [c for c in g.cells if (c.row, c.col, c.layer) == (2, 1, 1)]
        self.assertEqual(len(axis_cell), 1)
        self.assertEqual(axis_cell[0].value.measure(self.canvas), (0.0, 0.0))
        title_cell = [c for c in g.cells if (c.row, c.col, c.layer) == (2, 0, 1)]
        self.assertEqual(len(title_cell), 1)
        self.assertEqual(title_cell[0].value.measure(self.canvas), (0.0, 0.0))

        pick = render(layout1_to_renderable(l), self.canvas)
        self.assertEqual(plot_strokes(self.canvas), [])
        self.assertNotIn("hidden", [t.text for t in self.canvas.texts()])
        for x in range(0, 400, 2):
            for y in range(0, 300, 2):
                hit = pick(Point(x, y))
                self.assertNotIsInstance(hit, PlotAreaPick)
                if isinstance(hit, (AxisValuePick, AxisTitlePick)):
                    self.assertNotEqual(hit.edge, "left")

    def test_empty_legend_contributes_no_height(self) -> None:
        l = Layout1(plots=(left(line("", [(0, 0), (1, 1)])), right(line("", [(0, 3), (1, 4)]))))
        self.assertEqual(layout1_legends_to_renderable(l).measure(self.canvas), (0.0, 0.0))
        no_style = replace(l, plots=(left(line("named", [(0, 0), (1, 1)])),), legend=None)
        self.assertEqual(layout1_legends_to_renderable(no_style).measure(self.canvas), (0.0, 0.0))

    def test_legend_entries_are_pickable(self) -> None:
        l = Layout1(plots=(left(line("series", [(0, 0), (1, 1)])),))
        w, h = layout1_legends_to_renderable(l).measure(self.canvas)
        self.assertGreater(h, 0.0)
        pick = render(layout1_to_renderable(l), self.canvas)
        hits = {pick(Point(x, y)) for x in range(0, 400, 2) for y in range(250, 300, 2)}
        self.assertIn(LegendPick("series"), hits)

    def test_linked_axes_share_range(self) -> None:
        l = Layout1(
            yaxes_control=link_axes,
            plots=(left(line("", [(0, 0), (1, 1)])), right(line("", [(0, 50), (1, 80)]))),
        )
        axes = get_axes(l)
        assert axes.left is not None and axes.right is not None
        self.assertEqual(axes.left.data.labels, axes.right.data.labels)
        independent = get_axes(replace(l, yaxes_control=default_layout1().yaxes_control))
        assert independent.left is not None and independent.right is not None
        self.assertNotEqual(independent.left.data.labels, independent.right.data.labels)

    def test_override_and_reverse_are_applied(self) -> None:
        l = Layout1(
            bottom_axis=LayoutAxis(override=axis_grid_hide, reverse=True),
            plots=(left(line("", [(0, 0), (1, 1)])),),
        )
        axes = get_axes(l)
        assert axes.bottom is not None
        self.assertEqual(axes.bottom.data.grid, ())
        self.assertTrue(axes.bottom.reverse)
        render(layout1_to_renderable(l), self.canvas)
        (op,) = plot_strokes(self.canvas)
        first, second = op.path[0][0]
        self.assertGreater(first.x, second.x)

    def test_grid_last_orders_gridlines_after_plots(self) -> None:
        grid_color = AxisStyle().grid_style.color

        def order(grid_last: bool) -> list[str]:
            canvas = RecordingCanvas(400, 300)
            l = Layout1(grid_last=grid_last, plots=(left(line("", [(0, 0), (1, 1)])),))
            render(layout1_to_renderable(l), canvas)
            kinds = []
            for op in canvas.strokes():
                if op.style.color == BLUE:
                    kinds.append("plot")
                elif op.style.color == grid_color:
                    kinds.append("grid")
            return kinds

        under = order(False)
        over = order(True)
        self.assertEqual(under[-1], "plot")
        self.assertEqual(over[0], "plot")
        self.assertIn("grid", over)

    def test_plots_are_clipped_to_plot_area(self) -> None:
        l = Layout1(plots=(left(line("", [(0, 0), (1, 1)])),))
        render(layout1_to_renderable(l), self.canvas)
        (op,) = plot_strokes(self.canvas)
        x0, y0, x1, y1 = op.clip
        self.assertTrue(0.0 < x0 < x1 < 400.0)
        self.assertTrue(0.0 < y0 < y1 < 300.0)

    def test_no_plots_renders_only_background(self) -> None:
        pick = render(layout1_to_renderable(Layout1()), self.canvas)
        self.assertEqual(len(self.canvas.paints()), 1)
        self.assertIsNone(pick(Point(200.0, 150.0)))

    def test_corner_spacer_reserves_label_overhang(self) -> None:
        l = Layout1(plots=(left(line("", [(0, 0), (1000, 1)])),))
        g = layout1_plot_area_to_grid(l)
        col_w, _, _ = natural_sizes(self.canvas, g)
        w_last, _ = self.canvas.text_size("1000")
        self.assertAlmostEqual(col_w[3], w_last / 2.0)

    def test_to_renderable_drops_picks(self) -> None:
        l = Layout1(title="T", plots=(left(line("", [(0, 0), (1, 1)])),))
        pick = render(to_renderable(l), self.canvas)
        self.assertIsNone(pick(Point(5.0, 5.0)))

    def test_style_helpers(self) -> None:
        red = (200, 0, 0, 255)
        l = set_layout1_foreground(red, default_layout1())
        self.assertEqual(l.title_style.color, red)
        self.assertEqual(l.left_axis.style.line_style.color, red)
        self.assertEqual(l.bottom_axis.style.label_style.color, red)
        assert l.legend is not None
        self.assertEqual(l.legend.label_style.color, red)
        wider = update_all_axes_styles(lambda s: replace(s, label_gap=3.0), l)
        self.assertEqual({a.style.label_gap for a in (wider.top_axis, wider.bottom_axis, wider.left_axis, wider.right_axis)}, {3.0})


class StackedLayoutTests(unittest.TestCase):
    def test_empty_stack_is_empty(self) -> None:
        canvas = RecordingCanvas(10, 10)
        self.assertEqual(render_layouts_stacked([]).measure(canvas), (0.0, 0.0))

    def test_stacked_plot_areas_line_up(self) -> None:
        canvas = RecordingCanvas(400, 400)
        top = Layout1(title="small", plots=(left(line("", [(0, 0), (1, 1)])),))
        bottom = Layout1(title="large", plots=(left(line("", [(0, 0), (1, 100000)], color=GREEN)),))
        pick = render(render_layouts_stacked([with_any_ordinate(top), with_any_ordinate(bottom)]), canvas)
        (a,) = plot_strokes(canvas, BLUE)
        (b,) = plot_strokes(canvas, GREEN)
        self.assertAlmostEqual(a.path[0][0][0].x, b.path[0][0][0].x)
        self.assertLess(a.path[0][0][0].y, b.path[0][0][0].y)
        self.assertEqual(len(canvas.paints()), 1)
        self.assertEqual(pick(Point(a.path[0][0][1].x - 0.5, a.path[0][0][1].y + 0.5)).__class__, PlotAreaPick)


if __name__ == "__main__":
    unittest.main()
