from __future__ import annotations


class PlotError(Exception):
    """Base class for every error raised while building or rendering a plot."""


class ExpressionError(PlotError):
    pass


class EvaluationError(ExpressionError):
    """A single evaluation of an expression failed or produced a non-real value."""

    def __init__(self, message: str, *, x: float | None = None) -> None:
        super().__init__(message)
        self.x = x


class RangeError(PlotError, ValueError):
    pass


class ColorError(PlotError, ValueError):
    pass
