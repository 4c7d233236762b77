from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from pathlib import Path

import numpy as np

from graphing_plot.colors import ColorConfig, default_colors
from graphing_plot.plan import (
    GRID_POINT_MARKER_SIZE,
    ORIGIN_MARKER_RADIUS,
    LabelPlacement,
    PlotLayout,
    RenderPlan,
    connector_segment,
    place_labels,
)
from graphing_plot.raster import (
    draw_circle,
    draw_line,
    draw_polyline,
    draw_text,
    fill_rect,
    new_canvas,
    text_size,
    to_image,
)
from graphing_plot.sampler import Intercept
from graphing_plot.scales import format_point


LOGGER = logging.getLogger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
INTERCEPT_RADIUS = 6
# Intercepts this close to the origin are labelled by the y-intercept instead.
ORIGIN_LABEL_EPS = 0.01


@dataclass(frozen=True)
class FigureStyle:
    axis_width: int = 2
    curve_width: int = 2
    tick_font_px: float = 14.0
    title_font_px: float = 16.0
    label_font_px: float = 12.0
    label_padding: int = 4
    label_background: tuple[int, int, int, int] = (255, 255, 255, 242)
    tick_label_gap: int = 20
    y_tick_label_gap: int = 10


@dataclass
class StaticFigure:
    """Raster rendering of a :class:`RenderPlan` as an RGBA image."""

    plan: RenderPlan
    colors: ColorConfig = field(default_factory=lambda: default_colors("static"))
    style: FigureStyle = field(default_factory=FigureStyle)
    _last_labels: tuple[LabelPlacement, ...] = ()

    @property
    def width(self) -> int:
        return self.plan.layout.width

    @property
    def height(self) -> int:
        return self.plan.layout.height

    def last_labels(self) -> tuple[LabelPlacement, ...]:
        return self._last_labels

    def to_rgba(self) -> np.ndarray:
        canvas = new_canvas(self.width, self.height, color=self.colors.rgba("background"))
        self._draw_grid(canvas)
        self._draw_axes(canvas)
        self._draw_curve(canvas)
        self._draw_tick_labels(canvas)
        self._draw_title(canvas)
        self._draw_origin(canvas)
        self._draw_grid_points(canvas)
        self._draw_intercepts(canvas)
        return canvas

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        to_image(self.to_rgba()).save(out, format="PNG")
        LOGGER.info("wrote %dx%d PNG to %s", self.width, self.height, out)
        return out

    def _draw_grid(self, canvas: np.ndarray) -> None:
        color = self.colors.rgba("grid_lines")
        layout = self.plan.layout
        top, bottom = layout.margin, layout.height - layout.margin
        left, right = layout.margin, layout.width - layout.margin
        for gx in self.plan.grid_x:
            draw_line(canvas, gx, top, gx, bottom, color)
        for gy in self.plan.grid_y:
            draw_line(canvas, left, gy, right, gy, color)

    def _draw_axes(self, canvas: np.ndarray) -> None:
        color = self.colors.rgba("grid_main_lines")
        layout = self.plan.layout
        if self.plan.x_axis_y is not None:
            y = self.plan.x_axis_y
            draw_line(canvas, layout.margin, y, layout.width - layout.margin, y, color, width=self.style.axis_width)
        if self.plan.y_axis_x is not None:
            x = self.plan.y_axis_x
            draw_line(canvas, x, layout.margin, x, layout.height - layout.margin, color, width=self.style.axis_width)

    def _draw_curve(self, canvas: np.ndarray) -> None:
        color = self.colors.rgba("x_intercept")
        for polyline in self.plan.polylines:
            draw_polyline(canvas, polyline, color, width=self.style.curve_width)

    def _draw_tick_labels(self, canvas: np.ndarray) -> None:
        color = self.colors.rgba("grid_main_lines")
        font_px = self.style.tick_font_px
        baseline_x = self.plan.layout.height - self.plan.layout.margin + self.style.tick_label_gap
        for tick in self.plan.x_ticks:
            w, h = text_size(tick.text, font_size_px=font_px)
            draw_text(canvas, int(round(tick.out_x - w / 2)), int(round(baseline_x - h)), tick.text, color, font_size_px=font_px)
        for tick in self.plan.y_ticks:
            w, h = text_size(tick.text, font_size_px=font_px)
            x = tick.out_x - self.style.y_tick_label_gap - w
            draw_text(canvas, int(round(x)), int(round(tick.out_y + 5 - h)), tick.text, color, font_size_px=font_px)

    def _draw_title(self, canvas: np.ndarray) -> None:
        color = self.colors.rgba("grid_main_lines")
        w, h = text_size(self.plan.title, font_size_px=self.style.title_font_px, embolden_px=2)
        draw_text(
            canvas,
            int(round(self.width / 2 - w / 2)),
            max(0, 25 - h),
            self.plan.title,
            color,
            font_size_px=self.style.title_font_px,
            embolden_px=2,
        )

    def _draw_origin(self, canvas: np.ndarray) -> None:
        if self.plan.origin is None:
            return
        ox, oy = self.plan.origin
        draw_circle(canvas, ox, oy, ORIGIN_MARKER_RADIUS, self.colors.rgba("origin"), outline=self.colors.rgba("grid_main_lines"))

    def _draw_grid_points(self, canvas: np.ndarray) -> None:
        fill = self.colors.rgba("point")
        outline = self.colors.rgba("grid_main_lines")
        for marker in self.plan.markers:
            if marker.kind == "grid-point":
                draw_circle(canvas, marker.out_x, marker.out_y, GRID_POINT_MARKER_SIZE, fill, outline=outline)

    def _draw_intercepts(self, canvas: np.ndarray) -> None:
        mapper = self.plan.mapper
        outline = self.colors.rgba("grid_main_lines")
        ordered: list[Intercept] = list(self.plan.intercepts.all())
        items: list[tuple[float, float, str]] = []
        for icp in ordered:
            if _labelled(icp):
                px, py = mapper.math_to_output(icp.x, icp.y)
                items.append((px, py, format_point(icp.x, icp.y)))
        labels = iter(place_labels(items))
        placed: list[LabelPlacement] = []
        for icp in ordered:
            px, py = mapper.math_to_output(icp.x, icp.y)
            role = "x_intercept" if icp.kind == "x-intercept" else "y_intercept"
            draw_circle(canvas, px, py, INTERCEPT_RADIUS, self.colors.rgba(role), outline=outline)
            if not _labelled(icp):
                continue
            label = next(labels)
            self._draw_label(canvas, label)
            placed.append(label)
        self._last_labels = tuple(placed)

    def _draw_label(self, canvas: np.ndarray, label: LabelPlacement) -> None:
        color = self.colors.rgba("grid_main_lines")
        font_px = self.style.label_font_px
        pad = self.style.label_padding
        w, h = text_size(label.text, font_size_px=font_px, embolden_px=2)
        fill_rect(
            canvas,
            int(round(label.x - w / 2 - pad)),
            int(round(label.y - 12 - pad)),
            int(round(label.x + w / 2 + pad)),
            int(round(label.y + 4 + pad)),
            self.style.label_background,
        )
        draw_text(
            canvas,
            int(round(label.x - w / 2)),
            int(round(label.y - h)),
            label.text,
            color,
            font_size_px=font_px,
            embolden_px=2,
        )
        segment = connector_segment(label, INTERCEPT_RADIUS)
        if segment is not None:
            (sx, sy), (ex, ey) = segment
            draw_line(canvas, sx, sy, ex, ey, color)


def render_png(
    plan: RenderPlan,
    path: str | Path,
    *,
    colors: ColorConfig | None = None,
) -> Path:
    fig = StaticFigure(plan=plan, colors=colors if colors is not None else default_colors("static"))
    return fig.save_png(path)


def static_layout(width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> PlotLayout:
    return PlotLayout(width=width, height=height)


def _labelled(icp: Intercept) -> bool:
    if icp.kind != "x-intercept":
        return True
    return not (math.isclose(icp.x, 0.0, abs_tol=ORIGIN_LABEL_EPS) and math.isclose(icp.y, 0.0, abs_tol=ORIGIN_LABEL_EPS))
