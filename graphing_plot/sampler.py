from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Literal

import numpy as np

from graphing_plot.errors import RangeError
from graphing_plot.expression import Expression, coerce_expression
from graphing_plot.scales import ViewRange


LOGGER = logging.getLogger(__name__)

DEFAULT_SCAN_STEPS = 200
SOLVER_TOLERANCE = 0.1
PERIODIC_NAMES = ("sin", "cos", "tan", "csc", "sec", "cot")
PERIODIC_INTERCEPT_CAP = 3
# At most this many grid x positions are visited per view.
MAX_GRID_POINTS = 1000

InterceptKind = Literal["x-intercept", "y-intercept"]


@dataclass(frozen=True)
class Intercept:
    x: float
    y: float
    kind: InterceptKind


@dataclass(frozen=True)
class Intercepts:
    x_intercepts: tuple[Intercept, ...] = ()
    y_intercept: Intercept | None = None

    def all(self) -> tuple[Intercept, ...]:
        if self.y_intercept is None:
            return self.x_intercepts
        return self.x_intercepts + (self.y_intercept,)


@dataclass(frozen=True)
class CurveSamples:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray = field(repr=False)

    def in_range_mask(self, view: ViewRange) -> np.ndarray:
        return self.mask & (self.y >= view.ymin) & (self.y <= view.ymax)


def sample_curve(expression: Expression | str, view: ViewRange, count: int) -> CurveSamples:
    """Evaluate ``count`` samples starting at ``xmin`` with step ``span / count``."""
    if count <= 0:
        raise RangeError(f"sample count must be > 0, got {count}")
    expr = coerce_expression(expression)
    xs = view.xmin + np.arange(count, dtype=np.float64) * (view.x_span / count)
    ys, mask = expr.evaluate_many(xs)
    return CurveSamples(x=xs, y=ys, mask=mask)


def scan_roots(expression: Expression | str, view: ViewRange, steps: int = DEFAULT_SCAN_STEPS) -> list[float]:
    """Locate zero crossings by sign change and linear interpolation.

    A sample that is exactly zero is reported as a root at its own x and is not
    counted again as the left end of the next interval. Roots closer than one
    step to an earlier root are dropped.
    """
    if steps <= 0:
        raise RangeError(f"scan steps must be > 0, got {steps}")
    expr = coerce_expression(expression)
    step = view.x_span / steps
    roots: list[float] = []
    prev_x: float | None = None
    prev_y: float | None = None
    for i in range(steps + 1):
        x = view.xmin + i * step
        y = expr.try_evaluate(x)
        if y is None:
            continue
        candidate: float | None = None
        if y == 0.0:
            candidate = x
        elif prev_y is not None and prev_x is not None and prev_y != 0.0 and (prev_y < 0.0) != (y < 0.0):
            ratio = abs(prev_y) / (abs(prev_y) + abs(y))
            candidate = prev_x + (x - prev_x) * ratio
        if candidate is not None and view.contains_x(candidate):
            _merge_root(roots, candidate, tolerance=step)
        prev_x = x
        prev_y = y
    return roots


def find_intercepts(
    expression: Expression | str,
    view: ViewRange,
    *,
    steps: int = DEFAULT_SCAN_STEPS,
    use_solver: bool = True,
) -> Intercepts:
    expr = coerce_expression(expression)
    roots: list[float] = []
    if view.contains_y(0.0):
        roots = scan_roots(expr, view, steps=steps)
        if use_solver:
            for root in expr.solver_roots():
                if view.contains_x(root):
                    _merge_root(roots, root, tolerance=SOLVER_TOLERANCE)
        roots = cap_periodic_roots(expr.source, roots)

    y_intercept: Intercept | None = None
    if view.contains_x(0.0):
        y0 = expr.try_evaluate(0.0)
        if y0 is not None and view.contains_y(y0):
            y_intercept = Intercept(x=0.0, y=y0, kind="y-intercept")

    LOGGER.debug("intercepts for %r: roots=%s y0=%s", expr.source, roots, y_intercept)
    return Intercepts(
        x_intercepts=tuple(Intercept(x=r, y=0.0, kind="x-intercept") for r in roots),
        y_intercept=y_intercept,
    )


def is_periodic_source(source: str) -> bool:
    return any(name in source for name in PERIODIC_NAMES)


def cap_periodic_roots(source: str, roots: list[float], cap: int = PERIODIC_INTERCEPT_CAP) -> list[float]:
    """Keep only the ``cap`` roots nearest the origin for trigonometric sources.

    This can hide genuine roots; it only limits marker clutter on wide ranges.
    """
    if not is_periodic_source(source) or len(roots) <= cap:
        return list(roots)
    return sorted(roots, key=abs)[:cap]


def grid_points(expression: Expression | str, view: ViewRange, interval: float) -> list[tuple[float, float]]:
    if interval <= 0 or not math.isfinite(interval):
        return []
    expr = coerce_expression(expression)
    start = math.ceil(view.xmin / interval)
    out: list[tuple[float, float]] = []
    k = start
    while k * interval <= view.xmax and k - start < MAX_GRID_POINTS:
        x = k * interval
        y = expr.try_evaluate(x)
        if y is not None and view.contains_y(y):
            out.append((x, y))
        k += 1
    return out


def _merge_root(roots: list[float], candidate: float, *, tolerance: float) -> bool:
    if any(abs(r - candidate) < tolerance for r in roots):
        return False
    roots.append(candidate)
    return True
