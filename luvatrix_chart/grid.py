"""Two dimensional arrangement of renderables.

A `Grid` is a rectangular array of slots holding placed cells. A cell
occupies one slot or, via `tspan`, a block of slots; grids are combined with
`above` / `beside` (edge lengths must agree) and layered with `overlay`
(shapes must agree). `grid_to_renderable` flattens a grid of renderables
into one renderable:

- a column's natural width is the widest measured cell that spans only that
  column and carries no horizontal weight; rows likewise with heights;
- space left over after natural sizes is shared between columns (rows) in
  proportion to their weight, the weight of a column being the largest
  horizontal weight among the cells covering it;
- when the target is smaller than the natural total, natural sizes are
  scaled down proportionally.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from functools import reduce
from typing import Generic, TypeVar

from luvatrix_chart.canvas.base import Canvas
from luvatrix_chart.errors import ShapeMismatchError
from luvatrix_chart.renderable import P, PickFn, Renderable, empty_renderable, spacer
from luvatrix_chart.types import Point, RectSize


T = TypeVar("T")

SpaceWeight = tuple[float, float]
Span = tuple[int, int]


@dataclass(frozen=True)
class Cell(Generic[T]):
    value: T
    row: int = 0
    col: int = 0
    span: Span = (1, 1)
    weights: SpaceWeight = (0.0, 0.0)
    layer: int = 0

    def __post_init__(self) -> None:
        if self.span[0] < 1 or self.span[1] < 1:
            raise ValueError("cell span must be >= 1 in both directions")
        if self.weights[0] < 0 or self.weights[1] < 0:
            raise ValueError("cell weights must be >= 0")

    @property
    def is_tight(self) -> bool:
        return self.weights[0] == 0 and self.weights[1] == 0


@dataclass(frozen=True)
class Grid(Generic[T]):
    n_rows: int = 0
    n_cols: int = 0
    cells: tuple[Cell[T], ...] = ()

    def __post_init__(self) -> None:
        if self.n_rows < 0 or self.n_cols < 0:
            raise ValueError("grid dimensions must be >= 0")
        if (self.n_rows == 0) != (self.n_cols == 0):
            raise ValueError("a grid with no rows must have no columns")
        for cell in self.cells:
            if cell.row < 0 or cell.col < 0:
                raise ValueError("cell position must be >= 0")
            if cell.col + cell.span[0] > self.n_cols or cell.row + cell.span[1] > self.n_rows:
                raise ShapeMismatchError(f"cell at ({cell.row}, {cell.col}) extends outside a {self.n_rows}x{self.n_cols} grid")

    @property
    def shape(self) -> tuple[int, int]:
        return (self.n_rows, self.n_cols)

    @property
    def is_empty(self) -> bool:
        return self.n_rows == 0

    def row_weights(self) -> list[float]:
        out = [0.0] * self.n_rows
        for cell in self.cells:
            for r in range(cell.row, cell.row + cell.span[1]):
                out[r] = max(out[r], float(cell.weights[1]))
        return out

    def col_weights(self) -> list[float]:
        out = [0.0] * self.n_cols
        for cell in self.cells:
            for c in range(cell.col, cell.col + cell.span[0]):
                out[c] = max(out[c], float(cell.weights[0]))
        return out


EMPTY_GRID: Grid = Grid()


def empty() -> Grid:
    return EMPTY_GRID


def blank() -> Grid:
    """A single slot with nothing in it."""
    return Grid(1, 1, ())


def tval(value: T) -> Grid[T]:
    return Grid(1, 1, (Cell(value),))


def tspan(value: T, span: Span) -> Grid[T]:
    """A cell covering `span` = (columns, rows) slots."""
    cols, rows = span
    return Grid(rows, cols, (Cell(value, span=(cols, rows)),))


def weights(w: SpaceWeight, g: Grid[T]) -> Grid[T]:
    return replace(g, cells=tuple(replace(c, weights=(float(w[0]), float(w[1]))) for c in g.cells))


def above(top: Grid[T], bottom: Grid[T]) -> Grid[T]:
    if top.is_empty:
        return bottom
    if bottom.is_empty:
        return top
    if top.n_cols != bottom.n_cols:
        raise ShapeMismatchError(f"cannot stack a {top.n_cols}-column grid above a {bottom.n_cols}-column grid")
    shifted = tuple(replace(c, row=c.row + top.n_rows) for c in bottom.cells)
    return Grid(top.n_rows + bottom.n_rows, top.n_cols, top.cells + shifted)


def beside(left: Grid[T], right: Grid[T]) -> Grid[T]:
    if left.is_empty:
        return right
    if right.is_empty:
        return left
    if left.n_rows != right.n_rows:
        raise ShapeMismatchError(f"cannot place a {left.n_rows}-row grid beside a {right.n_rows}-row grid")
    shifted = tuple(replace(c, col=c.col + left.n_cols) for c in right.cells)
    return Grid(left.n_rows, left.n_cols + right.n_cols, left.cells + shifted)


def above_n(grids: Sequence[Grid[T]]) -> Grid[T]:
    return reduce(above, grids, EMPTY_GRID)


def beside_n(grids: Sequence[Grid[T]]) -> Grid[T]:
    return reduce(beside, grids, EMPTY_GRID)


def overlay(under: Grid[T], over: Grid[T]) -> Grid[T]:
    """Layer `over` on top of `under`; both must have the same shape."""
    if under.is_empty:
        return over
    if over.is_empty:
        return under
    if under.shape != over.shape:
        raise ShapeMismatchError(f"cannot overlay a {over.shape} grid on a {under.shape} grid")
    base = max((c.layer for c in under.cells), default=-1) + 1
    lifted = tuple(replace(c, layer=c.layer + base) for c in over.cells)
    return Grid(under.n_rows, under.n_cols, under.cells + lifted)


def full_row_above(value: T, weight: float, g: Grid[T]) -> Grid[T]:
    return above(weights((0.0, weight), tspan(value, (max(1, g.n_cols), 1))), g)


def full_row_below(value: T, weight: float, g: Grid[T]) -> Grid[T]:
    return above(g, weights((0.0, weight), tspan(value, (max(1, g.n_cols), 1))))


def full_col_left(value: T, weight: float, g: Grid[T]) -> Grid[T]:
    return beside(weights((weight, 0.0), tspan(value, (1, max(1, g.n_rows)))), g)


def full_col_right(value: T, weight: float, g: Grid[T]) -> Grid[T]:
    return beside(g, weights((weight, 0.0), tspan(value, (1, max(1, g.n_rows)))))


def full_overlay_under(value: T, g: Grid[T]) -> Grid[T]:
    return overlay(tspan(value, (max(1, g.n_cols), max(1, g.n_rows))), g)


def full_overlay_over(value: T, g: Grid[T]) -> Grid[T]:
    return overlay(g, tspan(value, (max(1, g.n_cols), max(1, g.n_rows))))


def add_margins_to_grid(margins: tuple[float, float, float, float], g: Grid[Renderable[P]]) -> Grid[Renderable[P]]:
    t, b, left, right = margins
    if g.is_empty:
        return tval(spacer((left + right, t + b)))
    top_row = beside_n([blank(), tspan(spacer((0.0, t)), (g.n_cols, 1)), blank()])
    bottom_row = beside_n([blank(), tspan(spacer((0.0, b)), (g.n_cols, 1)), blank()])
    middle = beside_n([tspan(spacer((left, 0.0)), (1, g.n_rows)), g, tspan(spacer((right, 0.0)), (1, g.n_rows))])
    return above_n([top_row, middle, bottom_row])


# Flattening


def allocate(natural: Sequence[float], space_weights: Sequence[float], total: float) -> list[float]:
    """Distribute `total` over slots of natural size `natural`."""
    tight = float(sum(natural))
    extra = float(total) - tight
    if extra < 0:
        scale = max(0.0, float(total)) / tight if tight > 0 else 0.0
        return [n * scale for n in natural]
    wsum = float(sum(space_weights))
    if wsum <= 0:
        return [float(n) for n in natural]
    return [n + extra * w / wsum for n, w in zip(natural, space_weights)]


def _offsets(sizes: Sequence[float]) -> list[float]:
    out = [0.0]
    for s in sizes:
        out.append(out[-1] + s)
    return out


def natural_sizes(canvas: Canvas, g: Grid[Renderable[P]]) -> tuple[list[float], list[float], list[RectSize]]:
    """Column widths, row heights and the measured size of every cell."""
    col_w = [0.0] * g.n_cols
    row_h = [0.0] * g.n_rows
    measured: list[RectSize] = []
    for cell in g.cells:
        w, h = cell.value.measure(canvas)
        measured.append((w, h))
        if cell.span[0] == 1 and cell.weights[0] == 0:
            col_w[cell.col] = max(col_w[cell.col], float(w))
        if cell.span[1] == 1 and cell.weights[1] == 0:
            row_h[cell.row] = max(row_h[cell.row], float(h))
    return col_w, row_h, measured


def grid_to_renderable(g: Grid[Renderable[P]]) -> Renderable[P]:
    if g.is_empty:
        return empty_renderable()

    def measure(canvas: Canvas) -> RectSize:
        col_w, row_h, _ = natural_sizes(canvas, g)
        return (sum(col_w), sum(row_h))

    def draw(canvas: Canvas, size: RectSize) -> PickFn[P]:
        col_w, row_h, _ = natural_sizes(canvas, g)
        xs = _offsets(allocate(col_w, g.col_weights(), size[0]))
        ys = _offsets(allocate(row_h, g.row_weights(), size[1]))

        placed: list[tuple[Cell[Renderable[P]], float, float, float, float, PickFn[P]]] = []
        for cell in sorted(g.cells, key=lambda c: c.layer):
            x0, x1 = xs[cell.col], xs[cell.col + cell.span[0]]
            y0, y1 = ys[cell.row], ys[cell.row + cell.span[1]]
            with canvas.preserve():
                canvas.translate(x0, y0)
                pick = cell.value.draw(canvas, (x1 - x0, y1 - y0))
            # Collapsed cells are drawn but never picked.
            if x1 > x0 and y1 > y0:
                placed.append((cell, x0, y0, x1, y1, pick))
        placed.sort(key=lambda item: (-item[0].layer, item[0].row, item[0].col))

        def pick_fn(p: Point) -> P | None:
            for _, x0, y0, x1, y1, pick in placed:
                if x0 <= p.x <= x1 and y0 <= p.y <= y1:
                    value = pick(Point(p.x - x0, p.y - y0))
                    if value is not None:
                        return value
            return None

        return pick_fn

    return Renderable(measure=measure, draw=draw)
