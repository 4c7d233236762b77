from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Literal, Sequence

import numpy as np

from graphing_plot.errors import RangeError
from graphing_plot.expression import Expression, coerce_expression
from graphing_plot.sampler import (
    DEFAULT_SCAN_STEPS,
    CurveSamples,
    Intercepts,
    find_intercepts,
    grid_points,
    sample_curve,
)
from graphing_plot.scales import CoordinateMapper, ViewRange, format_fixed, linear_ticks


LOGGER = logging.getLogger(__name__)

DEFAULT_MARGIN = 50
GRID_DIVISIONS = 10
TICK_LABEL_DIVISIONS = 5

INTERCEPT_MARKER_SIZE = 8
GRID_POINT_MARKER_SIZE = 4
ORIGIN_MARKER_RADIUS = 4
OVERLAP_THRESHOLD_PX = 5.0

LABEL_COLLISION_DISTANCE = 45.0
LABEL_DEFAULT_OFFSET = (0.0, -15.0)
# Tried in order when the default anchor collides; the last one is kept if all collide.
LABEL_RETRY_OFFSETS = (
    (0.0, 20.0),
    (-20.0, 20.0),
    (20.0, 20.0),
    (20.0, -20.0),
    (20.0, 20.0),
    (-30.0, 20.0),
    (30.0, 20.0),
)
CONNECTOR_START_DY = 8.0

MarkerKind = Literal["x-intercept", "y-intercept", "grid-point"]


@dataclass(frozen=True)
class PlotLayout:
    width: int
    height: int
    margin: int = DEFAULT_MARGIN

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise RangeError("width and height must be > 0")
        if self.margin < 0:
            raise RangeError("margin must be >= 0")
        if self.plot_width < 2 or self.plot_height < 2:
            raise RangeError(f"{self.width}x{self.height} is too small for a {self.margin}px margin")

    @property
    def plot_width(self) -> int:
        return self.width - 2 * self.margin

    @property
    def plot_height(self) -> int:
        return self.height - 2 * self.margin

    def mapper(self, view: ViewRange) -> CoordinateMapper:
        return CoordinateMapper(view=view, plot_width=self.plot_width, plot_height=self.plot_height, margin=self.margin)


@dataclass(frozen=True)
class PointMarker:
    x: float
    y: float
    kind: MarkerKind
    size: int
    out_x: float
    out_y: float

    def output_distance(self, other: "PointMarker") -> float:
        return math.hypot(self.out_x - other.out_x, self.out_y - other.out_y)


@dataclass(frozen=True)
class TickLabel:
    value: float
    text: str
    out_x: float
    out_y: float


@dataclass(frozen=True)
class LabelPlacement:
    text: str
    point_x: float
    point_y: float
    x: float
    y: float
    collided: bool = False


@dataclass(frozen=True)
class RenderPlan:
    expression: Expression
    layout: PlotLayout
    mapper: CoordinateMapper
    grid_x: tuple[float, ...]
    grid_y: tuple[float, ...]
    x_axis_y: float | None
    y_axis_x: float | None
    origin: tuple[float, float] | None
    curve: CurveSamples
    polylines: tuple[np.ndarray, ...]
    intercepts: Intercepts
    markers: tuple[PointMarker, ...]
    x_ticks: tuple[TickLabel, ...]
    y_ticks: tuple[TickLabel, ...]

    @property
    def view(self) -> ViewRange:
        return self.mapper.view

    @property
    def title(self) -> str:
        return f"f(x) = {self.expression.source}"


def build_plan(
    expression: Expression | str,
    view: ViewRange,
    layout: PlotLayout,
    *,
    steps: int = DEFAULT_SCAN_STEPS,
    use_solver: bool = True,
    point_interval: float = 0.0,
) -> RenderPlan:
    expr = coerce_expression(expression)
    mapper = layout.mapper(view)
    m = float(layout.margin)

    grid_x = tuple(m + (i / GRID_DIVISIONS) * layout.plot_width for i in range(GRID_DIVISIONS + 1))
    grid_y = tuple(m + (i / GRID_DIVISIONS) * layout.plot_height for i in range(GRID_DIVISIONS + 1))
    x_axis_y = mapper.y_to_output(0.0) if view.contains_y(0.0) else None
    y_axis_x = mapper.x_to_output(0.0) if view.contains_x(0.0) else None
    origin = (y_axis_x, x_axis_y) if x_axis_y is not None and y_axis_x is not None else None

    curve = sample_curve(expr, view, layout.plot_width)
    polylines = curve_polylines(curve, mapper)

    intercepts = find_intercepts(expr, view, steps=steps, use_solver=use_solver)
    markers = suppress_overlaps(point_markers(intercepts, grid_points(expr, view, point_interval), mapper))

    x_ticks = tuple(
        TickLabel(value=float(v), text=format_fixed(float(v), 1), out_x=mapper.x_to_output(float(v)), out_y=m + layout.plot_height)
        for v in linear_ticks(view.xmin, view.xmax, TICK_LABEL_DIVISIONS)
    )
    y_ticks = tuple(
        TickLabel(value=float(v), text=format_fixed(float(v), 1), out_x=m, out_y=mapper.y_to_output(float(v)))
        for v in linear_ticks(view.ymax, view.ymin, TICK_LABEL_DIVISIONS)
    )
    LOGGER.debug("plan for %r: %d polylines, %d markers", expr.source, len(polylines), len(markers))
    return RenderPlan(
        expression=expr,
        layout=layout,
        mapper=mapper,
        grid_x=grid_x,
        grid_y=grid_y,
        x_axis_y=x_axis_y,
        y_axis_x=y_axis_x,
        origin=origin,
        curve=curve,
        polylines=polylines,
        intercepts=intercepts,
        markers=markers,
        x_ticks=x_ticks,
        y_ticks=y_ticks,
    )


def curve_polylines(curve: CurveSamples, mapper: CoordinateMapper) -> tuple[np.ndarray, ...]:
    """Split the curve into (N, 2) output-space runs of valid, in-range samples.

    A sample outside the y range ends the current run instead of being clamped.
    """
    visible = curve.in_range_mask(mapper.view)
    ox, oy = mapper.map_arrays(curve.x, curve.y)
    out: list[np.ndarray] = []
    for start, stop in _contiguous_true_runs(visible):
        out.append(np.stack([ox[start:stop], oy[start:stop]], axis=1))
    return tuple(out)


def point_markers(
    intercepts: Intercepts,
    points: Sequence[tuple[float, float]],
    mapper: CoordinateMapper,
) -> list[PointMarker]:
    markers: list[PointMarker] = []
    for icp in intercepts.all():
        ox, oy = mapper.math_to_output(icp.x, icp.y)
        markers.append(PointMarker(x=icp.x, y=icp.y, kind=icp.kind, size=INTERCEPT_MARKER_SIZE, out_x=ox, out_y=oy))
    for x, y in points:
        ox, oy = mapper.math_to_output(x, y)
        markers.append(PointMarker(x=x, y=y, kind="grid-point", size=GRID_POINT_MARKER_SIZE, out_x=ox, out_y=oy))
    return markers


def suppress_overlaps(markers: Sequence[PointMarker], threshold: float = OVERLAP_THRESHOLD_PX) -> tuple[PointMarker, ...]:
    """Drop markers within ``threshold`` output units of an already kept, strictly larger marker."""
    kept: list[PointMarker] = []
    for marker in sorted(markers, key=lambda m: m.size, reverse=True):
        if any(k.size > marker.size and k.output_distance(marker) < threshold for k in kept):
            continue
        kept.append(marker)
    return tuple(kept)


def place_labels(
    items: Sequence[tuple[float, float, str]],
    *,
    placed: Sequence[tuple[float, float]] = (),
    min_distance: float = LABEL_COLLISION_DISTANCE,
) -> list[LabelPlacement]:
    """Choose an anchor for each ``(point_x, point_y, text)`` avoiding earlier labels."""
    anchors: list[tuple[float, float]] = list(placed)
    out: list[LabelPlacement] = []
    for px, py, text in items:
        candidates = (LABEL_DEFAULT_OFFSET,) + LABEL_RETRY_OFFSETS
        chosen = (px + candidates[-1][0], py + candidates[-1][1])
        collided = True
        for dx, dy in candidates:
            lx, ly = px + dx, py + dy
            if all(math.hypot(lx - ax, ly - ay) >= min_distance for ax, ay in anchors):
                chosen = (lx, ly)
                collided = False
                break
        anchors.append(chosen)
        out.append(LabelPlacement(text=text, point_x=px, point_y=py, x=chosen[0], y=chosen[1], collided=collided))
    return out


def connector_segment(label: LabelPlacement, radius: float) -> tuple[tuple[float, float], tuple[float, float]] | None:
    """Line from just below the label anchor to the near edge of the marker circle."""
    dx = label.point_x - label.x
    dy = label.point_y - label.y
    dist = math.hypot(dx, dy)
    if dist <= 0:
        return None
    edge = (label.point_x - dx / dist * radius, label.point_y - dy / dist * radius)
    return ((label.x, label.y + CONNECTOR_START_DY), edge)


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs
