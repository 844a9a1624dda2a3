from __future__ import annotations

import contextlib
import io
from pathlib import Path
import tempfile
import unittest

from PIL import Image

from main import demo_layout, main, pick_label


CHART_TOML = """
title = "CLI"

[[plots]]
kind = "lines"
title = "series"
points = [[0, 0], [1, 1]]
"""


class CliTests(unittest.TestCase):
    def test_render_writes_file_and_reports_picks(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = Path(tmp) / "chart.toml"
            config.write_text(CHART_TOML, encoding="utf-8")
            out = Path(tmp) / "chart.png"
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                main(["render", str(config), "--out", str(out), "--width", "320", "--height", "240", "--pick", "160", "6", "--pick", "500", "500"])
            with Image.open(out) as image:
                self.assertEqual(image.size, (320, 240))
        lines = buf.getvalue().splitlines()
        self.assertEqual(lines[0], f"rendered {out} (320x240)")
        self.assertEqual(lines[1], "pick (160, 6): TitlePick(text='CLI')")
        self.assertEqual(lines[2], "pick (500, 500): nothing")

    def test_demo_renders_svg(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "demo.svg"
            with contextlib.redirect_stdout(io.StringIO()):
                main(["demo", "--out", str(out)])
            markup = out.read_text(encoding="utf-8")
        self.assertIn("Luvatrix chart demo", markup)
        self.assertIn("temperature", markup)

    def test_demo_layout_uses_both_ordinates(self) -> None:
        layout = demo_layout()
        self.assertEqual(layout.right_axis.title, "temperature")
        self.assertEqual(len(layout.plots), 5)

    def test_rejects_non_positive_size(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValueError):
                main(["demo", "--out", str(Path(tmp) / "x.png"), "--width", "0"])

    def test_missing_command_exits(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                main([])

    def test_pick_label(self) -> None:
        self.assertEqual(pick_label(None), "nothing")
        self.assertEqual(pick_label(1.5), "1.5")


if __name__ == "__main__":
    unittest.main()
