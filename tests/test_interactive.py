from __future__ import annotations

import unittest

from luvatrix_chart.canvas import RasterCanvas, RecordingCanvas
from luvatrix_chart.interactive import ChartView, pick_all
from luvatrix_chart.layout import Layout1, PlotAreaPick, TitlePick, layout1_to_renderable, left
from luvatrix_chart.plot import PlotLines
from luvatrix_chart.renderable import label
from luvatrix_chart.types import FontStyle


def _view(**kwargs) -> ChartView:
    layout = Layout1(title="Live", plots=(left(PlotLines(values=([(0, 0), (10, 10)],))),))
    return ChartView(layout1_to_renderable(layout), canvas_factory=RecordingCanvas, **kwargs)


class ChartViewTests(unittest.TestCase):
    def test_press_before_expose_hits_nothing(self) -> None:
        view = _view()
        with self.assertLogs("luvatrix_chart.interactive", level="DEBUG"):
            self.assertIsNone(view.button_press(10, 10))
        self.assertIsNone(view.size)

    def test_expose_then_press_resolves_against_last_draw(self) -> None:
        seen = []
        view = _view(on_pick=seen.append)
        canvas = view.expose(400, 300)
        self.assertIs(view.canvas, canvas)
        self.assertEqual(view.size, (400, 300))
        self.assertEqual(view.button_press(200, 6), TitlePick("Live"))
        self.assertIsInstance(view.button_press(200, 150), PlotAreaPick)
        self.assertEqual(seen[0], TitlePick("Live"))
        self.assertEqual(len(seen), 2)

    def test_resize_redraws_at_new_size(self) -> None:
        view = _view()
        view.expose(400, 300)
        self.assertIsNone(view.button_press(600, 300))
        view.expose(800, 600)
        self.assertIsInstance(view.button_press(600, 300), PlotAreaPick)

    def test_set_renderable_drops_stale_pick(self) -> None:
        view = _view()
        view.expose(100, 100)
        view.set_renderable(label(FontStyle(), "centre", "centre", "other"))
        self.assertIsNone(view.button_press(50, 50))
        view.expose(100, 100)
        self.assertEqual(view.button_press(50, 50), "other")

    def test_pick_all_and_default_raster_canvas(self) -> None:
        view = ChartView(label(FontStyle(), "centre", "centre", "x"))
        self.assertIsInstance(view.expose(20, 20), RasterCanvas)
        self.assertEqual(pick_all(view, [(1, 1), (30, 30)]), ["x", "x"])

    def test_negative_size_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            _view().expose(-1, 10)


if __name__ == "__main__":
    unittest.main()
