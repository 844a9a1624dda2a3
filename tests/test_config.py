from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from luvatrix_chart.config import ChartConfig, load_chart_config, parse_chart_config
from luvatrix_chart.errors import ChartConfigError
from luvatrix_chart.layout import LeftPlot, RightPlot, get_axes, link_axes


CHART_TOML = """
title = "Load"
margin = 12
y_axes = "linked"
grid_last = true

[axes.bottom]
title = "hour"
reverse = true

[axes.top]
visible = true

[[plots]]
kind = "lines"
title = "cpu"
color = [200, 30, 30]
points = [[0, 1.5], [1, 2], [2, 0.5]]

[[plots]]
kind = "hline"
side = "right"
value = 2.0
"""


class ChartConfigTests(unittest.TestCase):
    def test_load_from_toml_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "chart.toml"
            path.write_text(CHART_TOML, encoding="utf-8")
            config = load_chart_config(path)
        self.assertEqual(config.title, "Load")
        self.assertEqual(config.margin, 12.0)
        self.assertEqual(config.y_axes, "linked")
        self.assertEqual(config.axes["bottom"].title, "hour")
        self.assertTrue(config.axes["bottom"].reverse)
        self.assertEqual(config.plots[0].color, (200, 30, 30, 255))
        self.assertEqual(config.plots[0].points, ((0.0, 1.5), (1.0, 2.0), (2.0, 0.5)))
        self.assertEqual(config.plots[1].value, 2.0)

    def test_to_layout_applies_axes_and_sides(self) -> None:
        layout = parse_chart_config(
            {
                "y_axes": "linked",
                "legend": False,
                "axes": {"top": {"visible": True}, "bottom": {"title": "hour", "reverse": True}},
                "plots": [
                    {"kind": "lines", "points": [[0, 0], [1, 1]]},
                    {"kind": "hline", "side": "right", "value": 3.0},
                ],
            }
        ).to_layout()
        self.assertIs(layout.yaxes_control, link_axes)
        self.assertIsNone(layout.legend)
        self.assertEqual(layout.bottom_axis.title, "hour")
        self.assertIsInstance(layout.plots[0], LeftPlot)
        self.assertIsInstance(layout.plots[1], RightPlot)
        axes = get_axes(layout)
        self.assertIsNotNone(axes.top)
        assert axes.bottom is not None
        self.assertTrue(axes.bottom.reverse)
        assert axes.left is not None and axes.right is not None
        self.assertEqual(axes.left.data.labels, axes.right.data.labels)

    def test_hidden_axis_is_never_visible(self) -> None:
        layout = parse_chart_config({"axes": {"left": {"visible": False}}}).to_layout()
        self.assertFalse(layout.left_axis.visible([1.0, 2.0]))

    def test_defaults(self) -> None:
        config = parse_chart_config({})
        self.assertEqual(config, ChartConfig())
        self.assertEqual(config.to_layout().plots, ())

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_chart_config("/nonexistent/chart.toml")

    def test_invalid_toml_raises_config_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.toml"
            path.write_text("title = \n", encoding="utf-8")
            with self.assertRaises(ChartConfigError):
                load_chart_config(path)

    def test_rejects_bad_fields(self) -> None:
        bad = [
            {"title": 3},
            {"margin": -1},
            {"margin": True},
            {"y_axes": "shared"},
            {"axes": {"middle": {}}},
            {"axes": {"left": {"visible": "yes"}}},
            {"plots": {"kind": "lines"}},
            {"plots": [{"kind": "bars", "points": []}]},
            {"plots": [{"kind": "lines"}]},
            {"plots": [{"kind": "lines", "points": [[0, 1, 2]]}]},
            {"plots": [{"kind": "lines", "points": [[0, "a"]]}]},
            {"plots": [{"kind": "hline"}]},
            {"plots": [{"kind": "points", "side": "up", "points": []}]},
            {"plots": [{"kind": "lines", "points": [], "color": [0, 0, 300]}]},
            {"plots": [{"kind": "lines", "points": [], "width": -2}]},
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(ChartConfigError):
                    parse_chart_config(raw)


if __name__ == "__main__":
    unittest.main()
