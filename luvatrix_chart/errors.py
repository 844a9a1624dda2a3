from __future__ import annotations


class ChartError(Exception):
    pass


class ShapeMismatchError(ChartError, ValueError):
    """Two grids were combined along an edge whose cell counts differ."""


class ChartDataError(ChartError, ValueError):
    pass


class ChartConfigError(ChartError, ValueError):
    pass
