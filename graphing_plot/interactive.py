from __future__ import annotations

from dataclasses import dataclass
from html import escape
from importlib import resources
import json
import logging
from pathlib import Path
from string import Template
from typing import Any

from graphing_plot import __version__
from graphing_plot.colors import ColorConfig, contrast_text_color, default_colors
from graphing_plot.expression import Expression, coerce_expression
from graphing_plot.plan import (
    DEFAULT_MARGIN,
    GRID_DIVISIONS,
    GRID_POINT_MARKER_SIZE,
    INTERCEPT_MARKER_SIZE,
    ORIGIN_MARKER_RADIUS,
    OVERLAP_THRESHOLD_PX,
    TICK_LABEL_DIVISIONS,
    PlotLayout,
    RenderPlan,
    build_plan,
)
from graphing_plot.sampler import (
    DEFAULT_SCAN_STEPS,
    MAX_GRID_POINTS,
    PERIODIC_INTERCEPT_CAP,
    PERIODIC_NAMES,
    SOLVER_TOLERANCE,
)
from graphing_plot.scales import ViewRange
from graphing_plot.viewport import (
    HOVER_RADIUS_PX,
    SELECTION_TOLERANCE,
    ZOOM_IN_FACTOR,
    ZOOM_OUT_FACTOR,
)


LOGGER = logging.getLogger(__name__)

MATHJS_URL = "https://cdnjs.cloudflare.com/ajax/libs/mathjs/11.8.0/math.js"
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
HOVER_FILL = "#ffff00"
# Grid lines closer than this to 0 are drawn as main lines.
MAIN_LINE_EPSILON = 0.001


@dataclass(frozen=True)
class InteractivePage:
    plan: RenderPlan
    colors: ColorConfig
    point_interval: float
    use_solver: bool
    steps: int

    def config(self) -> dict[str, Any]:
        """Everything the browser script needs, as JSON-ready values."""
        view = self.plan.view
        expr = self.plan.expression
        return {
            "expression": expr.source,
            "initialRange": {"xMin": view.xmin, "xMax": view.xmax, "yMin": view.ymin, "yMax": view.ymax},
            "margin": self.plan.layout.margin,
            "pointInterval": self.point_interval,
            "scanSteps": self.steps,
            "useSolver": self.use_solver,
            "solverRoots": list(expr.solver_roots()) if self.use_solver else [],
            "solverTolerance": SOLVER_TOLERANCE,
            "periodicNames": list(PERIODIC_NAMES),
            "periodicCap": PERIODIC_INTERCEPT_CAP,
            "maxGridPoints": MAX_GRID_POINTS,
            "interceptSize": INTERCEPT_MARKER_SIZE,
            "gridPointSize": GRID_POINT_MARKER_SIZE,
            "originRadius": ORIGIN_MARKER_RADIUS,
            "overlapThreshold": OVERLAP_THRESHOLD_PX,
            "hoverRadius": HOVER_RADIUS_PX,
            "hoverFill": HOVER_FILL,
            "selectionTolerance": SELECTION_TOLERANCE,
            "zoomInFactor": ZOOM_IN_FACTOR,
            "zoomOutFactor": ZOOM_OUT_FACTOR,
            "gridDivisions": GRID_DIVISIONS,
            "tickLabelDivisions": TICK_LABEL_DIVISIONS,
            "mainLineEpsilon": MAIN_LINE_EPSILON,
            "colors": self.colors.as_dict(),
            "initialPoints": [
                {"x": m.x, "y": m.y, "type": m.kind, "size": m.size}
                for m in self.plan.markers
            ],
        }

    def to_html(self) -> str:
        view = self.plan.view
        colors = self.colors
        template = Template(_read_template("viewer.html"))
        return template.substitute(
            title_expression=escape(self.plan.expression.source),
            mathjs_url=MATHJS_URL,
            background=escape(colors.background),
            grid_background=escape(colors.grid_background),
            grid_main_lines=escape(colors.grid_main_lines),
            x_intercept=escape(colors.x_intercept),
            footer_color=contrast_text_color(colors.background),
            xmin=_input_value(view.xmin),
            xmax=_input_value(view.xmax),
            ymin=_input_value(view.ymin),
            ymax=_input_value(view.ymax),
            point_interval=_input_value(self.point_interval),
            width=self.plan.layout.width,
            height=self.plan.layout.height,
            version=__version__,
            config_json=embed_json(self.config()),
            viewer_script=_read_template("viewer.js"),
        )


def build_page(
    expression: Expression | str,
    view: ViewRange,
    *,
    colors: ColorConfig | None = None,
    point_interval: float = 0.0,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    steps: int = DEFAULT_SCAN_STEPS,
    use_solver: bool = True,
) -> InteractivePage:
    expr = coerce_expression(expression)
    layout = PlotLayout(width=width, height=height, margin=DEFAULT_MARGIN)
    plan = build_plan(expr, view, layout, steps=steps, use_solver=use_solver, point_interval=point_interval)
    return InteractivePage(
        plan=plan,
        colors=colors if colors is not None else default_colors("interactive"),
        point_interval=point_interval,
        use_solver=use_solver,
        steps=steps,
    )


def render_html(
    expression: Expression | str,
    view: ViewRange,
    *,
    colors: ColorConfig | None = None,
    point_interval: float = 0.0,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    steps: int = DEFAULT_SCAN_STEPS,
    use_solver: bool = True,
) -> str:
    page = build_page(
        expression,
        view,
        colors=colors,
        point_interval=point_interval,
        width=width,
        height=height,
        steps=steps,
        use_solver=use_solver,
    )
    return page.to_html()


def write_html(path: str | Path, html_text: str) -> Path:
    out = Path(path)
    out.write_text(html_text, encoding="utf-8")
    LOGGER.info("wrote interactive page to %s", out)
    return out


def embed_json(payload: Any) -> str:
    """JSON safe to place inside a ``<script>`` element."""
    text = json.dumps(payload, sort_keys=True)
    return text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def _input_value(value: float) -> str:
    return repr(float(value))


def _read_template(name: str) -> str:
    return resources.files("graphing_plot").joinpath("templates").joinpath(name).read_text(encoding="utf-8")
