from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Sequence

from graphing_plot.plan import PlotLayout, PointMarker
from graphing_plot.scales import CoordinateMapper, ViewRange


ZOOM_OUT_FACTOR = 1.1
ZOOM_IN_FACTOR = 0.9
HOVER_RADIUS_PX = 10.0
SELECTION_TOLERANCE = 0.01


@dataclass
class Viewport:
    """Pan/zoom/selection state of the interactive viewer.

    The browser script in ``templates/viewer.js`` implements the same rules;
    this class is the host-side reference used to test them.
    """

    layout: PlotLayout
    initial: ViewRange
    view: ViewRange = field(init=False)
    selected: list[PointMarker] = field(default_factory=list)
    _drag_origin: tuple[float, float] | None = None

    def __post_init__(self) -> None:
        self.view = self.initial

    @property
    def current(self) -> ViewRange:
        return self.view

    def mapper(self) -> CoordinateMapper:
        return self.layout.mapper(self.current)

    def pan(self, dx_px: float, dy_px: float) -> ViewRange:
        view = self.current
        move_x = -dx_px / self.layout.plot_width * view.x_span
        move_y = dy_px / self.layout.plot_height * view.y_span
        self.view = view.shifted(move_x, move_y)
        return self.view

    def begin_drag(self, px: float, py: float) -> None:
        self._drag_origin = (px, py)

    def drag_to(self, px: float, py: float) -> ViewRange | None:
        if self._drag_origin is None:
            return None
        lx, ly = self._drag_origin
        self._drag_origin = (px, py)
        return self.pan(px - lx, py - ly)

    def end_drag(self) -> None:
        self._drag_origin = None

    def zoom_at(self, px: float, py: float, *, zoom_in: bool) -> ViewRange | None:
        """Scale the range about the math point under ``(px, py)``.

        Returns None and leaves the view unchanged when the cursor is outside
        the plot area.
        """
        mapper = self.mapper()
        if not mapper.contains_output(px, py):
            return None
        factor = ZOOM_IN_FACTOR if zoom_in else ZOOM_OUT_FACTOR
        ax, ay = mapper.output_to_math(px, py)
        view = self.current
        xmin = ax - (ax - view.xmin) * factor
        ymin = ay - (ay - view.ymin) * factor
        self.view = ViewRange(
            xmin=xmin,
            xmax=xmin + view.x_span * factor,
            ymin=ymin,
            ymax=ymin + view.y_span * factor,
        )
        return self.view

    def reset(self) -> ViewRange:
        self.view = self.initial
        self.selected = []
        return self.view

    def nearby_point(self, px: float, py: float, points: Sequence[PointMarker]) -> PointMarker | None:
        for point in points:
            if math.hypot(px - point.out_x, py - point.out_y) <= HOVER_RADIUS_PX:
                return point
        return None

    def toggle_at(self, px: float, py: float, points: Sequence[PointMarker]) -> PointMarker | None:
        """Select or deselect the point under the cursor; other selections are kept."""
        hit = self.nearby_point(px, py, points)
        if hit is None:
            return None
        for i, sel in enumerate(self.selected):
            if sel.x == hit.x and sel.y == hit.y:
                del self.selected[i]
                return hit
        self.selected.append(hit)
        return hit

    def rematch_selection(self, points: Sequence[PointMarker]) -> list[PointMarker]:
        self.selected = match_selection(self.selected, points)
        return self.selected


def match_selection(
    previous: Sequence[PointMarker],
    current: Sequence[PointMarker],
    tolerance: float = SELECTION_TOLERANCE,
) -> list[PointMarker]:
    out: list[PointMarker] = []
    for old in previous:
        for point in current:
            if point.kind == old.kind and abs(point.x - old.x) < tolerance and abs(point.y - old.y) < tolerance:
                out.append(point)
                break
    return out
