from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any, Generic, TypeVar

from luvatrix_chart.canvas.base import Canvas
from luvatrix_chart.canvas.raster import RasterCanvas
from luvatrix_chart.export import render
from luvatrix_chart.renderable import PickFn, Renderable
from luvatrix_chart.types import Point


LOGGER = logging.getLogger(__name__)

P = TypeVar("P")


class ChartView(Generic[P]):
    """Host-side glue between window events and a renderable.

    Every exposure redraws at the current size and keeps the pick function
    of that draw; pointer presses are resolved against the kept function.
    """

    def __init__(
        self,
        renderable: Renderable[P],
        *,
        canvas_factory: Callable[[int, int], Canvas] = RasterCanvas,
        on_pick: Callable[[P | None], None] | None = None,
    ) -> None:
        self._renderable = renderable
        self._canvas_factory = canvas_factory
        self._on_pick = on_pick
        self._pick: PickFn[P] | None = None
        self._canvas: Canvas | None = None

    @property
    def canvas(self) -> Canvas | None:
        return self._canvas

    @property
    def size(self) -> tuple[int, int] | None:
        if self._canvas is None:
            return None
        return (self._canvas.width, self._canvas.height)

    def set_renderable(self, renderable: Renderable[P]) -> None:
        self._renderable = renderable
        self._pick = None

    def expose(self, width: int, height: int) -> Canvas:
        if width < 0 or height < 0:
            raise ValueError("width/height must be >= 0")
        canvas = self._canvas_factory(width, height)
        self._pick = render(self._renderable, canvas)
        self._canvas = canvas
        return canvas

    def button_press(self, x: float, y: float) -> P | None:
        if self._pick is None:
            LOGGER.debug("pointer press at (%s, %s) before first exposure", x, y)
            return None
        result = self._pick(Point(float(x), float(y)))
        LOGGER.info("pick at (%s, %s): %r", x, y, result)
        if self._on_pick is not None:
            self._on_pick(result)
        return result


def pick_all(view: ChartView[Any], points: list[tuple[float, float]]) -> list[Any]:
    return [view.button_press(x, y) for x, y in points]
