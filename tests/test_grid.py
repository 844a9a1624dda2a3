from __future__ import annotations

import unittest

from luvatrix_chart.canvas import RecordingCanvas
from luvatrix_chart.errors import ShapeMismatchError
from luvatrix_chart.grid import (
    EMPTY_GRID,
    Cell,
    Grid,
    above,
    above_n,
    add_margins_to_grid,
    allocate,
    beside,
    beside_n,
    full_col_left,
    full_overlay_over,
    full_overlay_under,
    full_row_above,
    grid_to_renderable,
    overlay,
    tspan,
    tval,
    weights,
)
from luvatrix_chart.renderable import PickFn, Renderable, spacer
from luvatrix_chart.types import Point, RectSize


class CellRecorder:
    """Renderable factory recording where, and how large, each cell was drawn."""

    def __init__(self) -> None:
        self.drawn: dict[str, tuple[Point, RectSize]] = {}

    def cell(self, name: str, minsize: RectSize = (10.0, 10.0), *, pick_when=None) -> Renderable[str]:
        def draw(canvas, size: RectSize) -> PickFn[str]:
            self.drawn[name] = (canvas.to_device(Point(0.0, 0.0)), size)

            def pick(p: Point) -> str | None:
                if pick_when is not None and not pick_when(p):
                    return None
                return name

            return pick

        return Renderable(measure=lambda _c: minsize, draw=draw)


class GridTests(unittest.TestCase):
    def setUp(self) -> None:
        self.canvas = RecordingCanvas(400, 400)
        self.cells = CellRecorder()

    def test_above_requires_matching_column_counts(self) -> None:
        two = beside(tval("a"), tval("b"))
        three = beside_n([tval("a"), tval("b"), tval("c")])
        with self.assertRaises(ShapeMismatchError):
            above(two, three)
        ok = above(two, beside(tval("c"), tval("d")))
        self.assertEqual(ok.shape, (2, 2))
        self.assertEqual(len(ok.cells), 4)

    def test_beside_requires_matching_row_counts(self) -> None:
        tall = above(tval("a"), tval("b"))
        with self.assertRaises(ShapeMismatchError):
            beside(tall, tval("c"))
        ok = beside(tall, above(tval("c"), tval("d")))
        self.assertEqual(ok.shape, (2, 2))
        self.assertEqual(len(ok.cells), 4)

    def test_shape_mismatch_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            overlay(tval("a"), beside(tval("b"), tval("c")))

    def test_empty_grid_is_identity(self) -> None:
        g = beside(tval("a"), tval("b"))
        self.assertEqual(above(EMPTY_GRID, g), g)
        self.assertEqual(above(g, EMPTY_GRID), g)
        self.assertEqual(beside(EMPTY_GRID, g), g)
        self.assertEqual(above_n([]), EMPTY_GRID)

    def test_composition_is_associative(self) -> None:
        a, b, c = tval("a"), tval("b"), tval("c")
        self.assertEqual(above(above(a, b), c), above(a, above(b, c)))
        self.assertEqual(beside(beside(a, b), c), beside(a, beside(b, c)))

    def test_cells_must_fit_inside_grid(self) -> None:
        with self.assertRaises(ShapeMismatchError):
            Grid(1, 1, (Cell("x", col=1),))
        with self.assertRaises(ValueError):
            Cell("x", span=(0, 1))
        with self.assertRaises(ValueError):
            Cell("x", weights=(-1.0, 0.0))

    def test_allocate_distributes_extra_by_weight(self) -> None:
        self.assertEqual(allocate([0.0, 10.0, 0.0], [1.0, 0.0, 3.0], 110.0), [25.0, 10.0, 75.0])
        self.assertEqual(allocate([10.0, 10.0], [0.0, 0.0], 100.0), [10.0, 10.0])
        self.assertEqual(allocate([10.0, 30.0], [1.0, 1.0], 20.0), [5.0, 15.0])

    def test_weighted_rows_share_extra_height(self) -> None:
        p = self.cells
        g = above_n(
            [
                weights((0.0, 1.0), tval(p.cell("a"))),
                tval(p.cell("b")),
                weights((0.0, 3.0), tval(p.cell("c"))),
            ]
        )
        r = grid_to_renderable(g)
        self.assertEqual(r.measure(self.canvas), (10.0, 10.0))
        r.draw(self.canvas, (10.0, 110.0))
        self.assertEqual(p.drawn["a"][1][1], 25.0)
        self.assertEqual(p.drawn["b"][1][1], 10.0)
        self.assertEqual(p.drawn["c"][1][1], 75.0)
        self.assertEqual(p.drawn["c"][0], Point(0.0, 35.0))

    def test_all_zero_weights_keep_natural_sizes(self) -> None:
        p = self.cells
        g = above_n([tval(p.cell("a")), tval(p.cell("b")), tval(p.cell("c"))])
        grid_to_renderable(g).draw(self.canvas, (10.0, 100.0))
        self.assertEqual([p.drawn[n][1][1] for n in "abc"], [10.0, 10.0, 10.0])
        self.assertEqual(p.drawn["c"][0], Point(0.0, 20.0))

    def test_pick_translates_into_cell_coordinates(self) -> None:
        p = self.cells
        seen: list[Point] = []

        def record(pt: Point) -> bool:
            seen.append(pt)
            return True

        g = beside(tval(p.cell("a", (20.0, 10.0))), tval(p.cell("b", (30.0, 10.0), pick_when=record)))
        pick = grid_to_renderable(g).draw(self.canvas, (50.0, 10.0))
        self.assertEqual(pick(Point(5.0, 5.0)), "a")
        self.assertEqual(pick(Point(25.0, 5.0)), "b")
        self.assertEqual(seen[-1], Point(5.0, 5.0))
        self.assertIsNone(pick(Point(60.0, 5.0)))

    def test_overlay_pick_prefers_the_upper_grid(self) -> None:
        p = self.cells
        under = tval(p.cell("under"))
        over = tval(p.cell("over", pick_when=lambda pt: pt.x >= 5.0))
        pick = grid_to_renderable(overlay(under, over)).draw(self.canvas, (10.0, 10.0))
        self.assertEqual(pick(Point(7.0, 2.0)), "over")
        self.assertEqual(pick(Point(2.0, 2.0)), "under")

    def test_overlay_draws_under_first(self) -> None:
        order: list[str] = []

        def cell(name: str) -> Renderable[str]:
            def draw(_canvas, _size):
                order.append(name)
                return lambda _p: name

            return Renderable(measure=lambda _c: (1.0, 1.0), draw=draw)

        grid_to_renderable(overlay(tval(cell("under")), tval(cell("over")))).draw(self.canvas, (5.0, 5.0))
        self.assertEqual(order, ["under", "over"])

    def test_span_covers_adjacent_columns(self) -> None:
        p = self.cells
        g = above(tspan(p.cell("wide", (5.0, 10.0)), (2, 1)), beside(tval(p.cell("l", (20.0, 10.0))), tval(p.cell("r", (30.0, 10.0)))))
        r = grid_to_renderable(g)
        self.assertEqual(r.measure(self.canvas), (50.0, 20.0))
        r.draw(self.canvas, (50.0, 20.0))
        self.assertEqual(p.drawn["wide"], (Point(0.0, 0.0), (50.0, 10.0)))
        self.assertEqual(p.drawn["r"][0], Point(20.0, 10.0))

    def test_full_row_and_column_helpers_span_the_grid(self) -> None:
        g = beside(tval("a"), tval("b"))
        with_row = full_row_above("title", 0.0, g)
        self.assertEqual(with_row.shape, (2, 2))
        self.assertEqual(with_row.cells[0].span, (2, 1))
        with_col = full_col_left("side", 1.0, with_row)
        self.assertEqual(with_col.shape, (2, 3))
        self.assertEqual(with_col.cells[0].span, (1, 2))
        under = full_overlay_under("bg", g)
        self.assertEqual(under.cells[0].value, "bg")
        self.assertEqual(max(c.layer for c in under.cells), 1)

    def test_add_margins_to_grid_offsets_content(self) -> None:
        p = self.cells
        g = add_margins_to_grid((1.0, 2.0, 3.0, 4.0), tval(p.cell("x")))
        self.assertEqual(g.shape, (3, 3))
        r = grid_to_renderable(g)
        self.assertEqual(r.measure(self.canvas), (17.0, 13.0))
        pick = r.draw(self.canvas, (17.0, 13.0))
        self.assertEqual(p.drawn["x"][0], Point(3.0, 1.0))
        self.assertIsNone(pick(Point(1.0, 1.0)))
        self.assertEqual(pick(Point(5.0, 5.0)), "x")

    def test_add_margins_to_empty_grid_is_a_spacer(self) -> None:
        r = grid_to_renderable(add_margins_to_grid((1.0, 2.0, 3.0, 4.0), EMPTY_GRID))
        self.assertEqual(r.measure(self.canvas), (7.0, 3.0))

    def test_empty_grid_renders_nothing(self) -> None:
        r = grid_to_renderable(EMPTY_GRID)
        self.assertEqual(r.measure(self.canvas), (0.0, 0.0))
        self.assertIsNone(r.draw(self.canvas, (10.0, 10.0))(Point(1.0, 1.0)))

    def test_smaller_target_scales_cells_down(self) -> None:
        p = self.cells
        g = beside(tval(p.cell("a", (20.0, 10.0))), tval(p.cell("b", (60.0, 10.0))))
        grid_to_renderable(g).draw(self.canvas, (40.0, 5.0))
        self.assertEqual(p.drawn["a"][1], (10.0, 5.0))
        self.assertEqual(p.drawn["b"][0], Point(10.0, 0.0))
        self.assertEqual(spacer((1.0, 1.0)).measure(self.canvas), (1.0, 1.0))

    def test_collapsed_cells_are_never_picked(self) -> None:
        p = self.cells
        g = beside(tval(p.cell("a", (20.0, 10.0))), tval(p.cell("b", (30.0, 10.0))))
        pick = grid_to_renderable(g).draw(self.canvas, (0.0, 0.0))
        self.assertIn("a", p.drawn)
        self.assertIsNone(pick(Point(0.0, 0.0)))

    def test_full_overlay_over_covers_the_grid(self) -> None:
        p = self.cells
        g = beside(tval(p.cell("a", (20.0, 10.0))), tval(p.cell("b", (30.0, 10.0))))
        top = full_overlay_over(p.cell("cover"), g)
        self.assertEqual(top.shape, (1, 2))
        self.assertEqual(top.cells[-1].span, (2, 1))
        pick = grid_to_renderable(top).draw(self.canvas, (50.0, 10.0))
        self.assertEqual(pick(Point(5.0, 5.0)), "cover")
        self.assertEqual(pick(Point(45.0, 5.0)), "cover")
        self.assertEqual(p.drawn["cover"], (Point(0.0, 0.0), (50.0, 10.0)))


if __name__ == "__main__":
    unittest.main()
