from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import math

import numpy as np

from graphing_plot.errors import RangeError


@dataclass(frozen=True)
class ViewRange:
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def __post_init__(self) -> None:
        for name in ("xmin", "xmax", "ymin", "ymax"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise RangeError(f"{name} must be a finite number, got {value!r}")
        if not self.xmin < self.xmax:
            raise RangeError(f"xmin must be < xmax (got {self.xmin} >= {self.xmax})")
        if not self.ymin < self.ymax:
            raise RangeError(f"ymin must be < ymax (got {self.ymin} >= {self.ymax})")

    @property
    def x_span(self) -> float:
        return self.xmax - self.xmin

    @property
    def y_span(self) -> float:
        return self.ymax - self.ymin

    def contains_x(self, x: float) -> bool:
        return self.xmin <= x <= self.xmax

    def contains_y(self, y: float) -> bool:
        return self.ymin <= y <= self.ymax

    def shifted(self, dx: float, dy: float) -> "ViewRange":
        return ViewRange(xmin=self.xmin + dx, xmax=self.xmax + dx, ymin=self.ymin + dy, ymax=self.ymax + dy)


@dataclass(frozen=True)
class CoordinateMapper:
    """Affine map between math coordinates and an output grid.

    Output y grows downward; ``margin`` offsets both axes equally.
    """

    view: ViewRange
    plot_width: float
    plot_height: float
    margin: float = 0.0

    def __post_init__(self) -> None:
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise RangeError("plot width/height must be > 0")

    def x_to_output(self, x: float) -> float:
        return self.margin + (x - self.view.xmin) / self.view.x_span * self.plot_width

    def y_to_output(self, y: float) -> float:
        return self.margin + (self.view.ymax - y) / self.view.y_span * self.plot_height

    def math_to_output(self, x: float, y: float) -> tuple[float, float]:
        return (self.x_to_output(x), self.y_to_output(y))

    def output_to_math(self, out_x: float, out_y: float) -> tuple[float, float]:
        x = self.view.xmin + (out_x - self.margin) / self.plot_width * self.view.x_span
        y = self.view.ymax - (out_y - self.margin) / self.plot_height * self.view.y_span
        return (x, y)

    def map_arrays(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        ox = self.margin + (x - self.view.xmin) / self.view.x_span * self.plot_width
        oy = self.margin + (self.view.ymax - y) / self.view.y_span * self.plot_height
        return ox, oy

    def contains_output(self, out_x: float, out_y: float) -> bool:
        return (
            self.margin <= out_x <= self.margin + self.plot_width
            and self.margin <= out_y <= self.margin + self.plot_height
        )

    def with_view(self, view: ViewRange) -> "CoordinateMapper":
        return CoordinateMapper(view=view, plot_width=self.plot_width, plot_height=self.plot_height, margin=self.margin)


def linear_ticks(vmin: float, vmax: float, divisions: int) -> np.ndarray:
    if divisions <= 0:
        raise ValueError("divisions must be > 0")
    ticks = vmin + (np.arange(divisions + 1, dtype=np.float64) / divisions) * (vmax - vmin)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    span = abs(vmax - vmin)
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=span * 1e-12)] = 0.0
    return ticks


def format_fixed(value: float, decimals: int = 1) -> str:
    if not math.isfinite(value):
        return str(value)
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return f"{value:.{decimals}f}"
    out = format(q, "f")
    if out.startswith("-") and Decimal(out) == 0:
        out = out[1:]
    return out


def format_point(x: float, y: float, decimals: int = 2) -> str:
    return f"({format_fixed(x, decimals)}, {format_fixed(y, decimals)})"
