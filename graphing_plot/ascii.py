from __future__ import annotations

import math

from graphing_plot.errors import RangeError
from graphing_plot.expression import Expression, coerce_expression
from graphing_plot.sampler import sample_curve
from graphing_plot.scales import CoordinateMapper, ViewRange


DEFAULT_ASCII_WIDTH = 80
DEFAULT_ASCII_HEIGHT = 24

BLANK = " "
X_AXIS = "-"
Y_AXIS = "|"
ORIGIN = "+"
CURVE = "*"
CURVE_ON_X_AXIS = "="


def render_ascii(
    expression: Expression | str,
    view: ViewRange,
    width: int = DEFAULT_ASCII_WIDTH,
    height: int = DEFAULT_ASCII_HEIGHT,
) -> str:
    """Render the curve on a ``height`` x ``width`` character grid.

    Every line is exactly ``width`` characters followed by a newline.
    """
    if width < 1 or height < 1:
        raise RangeError("ascii width and height must be >= 1")
    expr = coerce_expression(expression)
    # A one-cell dimension still needs a non-zero span for the mapping.
    mapper = CoordinateMapper(view=view, plot_width=max(1, width - 1), plot_height=max(1, height - 1))
    grid = [[BLANK] * width for _ in range(height)]

    axis_row = math.floor(mapper.y_to_output(0.0))
    axis_col = math.floor(mapper.x_to_output(0.0))
    has_row = 0 <= axis_row < height
    has_col = 0 <= axis_col < width
    if has_row:
        grid[axis_row] = [X_AXIS] * width
    if has_col:
        for row in grid:
            row[axis_col] = Y_AXIS
    if has_row and has_col:
        grid[axis_row][axis_col] = ORIGIN

    curve = sample_curve(expr, view, width)
    visible = curve.in_range_mask(view)
    for col in range(width):
        if not visible[col]:
            continue
        row = math.floor(mapper.y_to_output(float(curve.y[col])))
        if not 0 <= row < height:
            continue
        on_row = has_row and row == axis_row
        on_col = has_col and col == axis_col
        if on_row and on_col:
            grid[row][col] = ORIGIN
        elif on_row:
            grid[row][col] = CURVE_ON_X_AXIS
        elif on_col:
            grid[row][col] = Y_AXIS
        else:
            grid[row][col] = CURVE

    return "".join("".join(row) + "\n" for row in grid)
