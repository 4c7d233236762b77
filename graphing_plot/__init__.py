__version__ = "1.0.0"

from graphing_plot.api import PlotResult, plot
from graphing_plot.ascii import render_ascii
from graphing_plot.colors import ColorConfig, default_colors
from graphing_plot.errors import ColorError, EvaluationError, ExpressionError, PlotError, RangeError
from graphing_plot.expression import Expression
from graphing_plot.figure import StaticFigure
from graphing_plot.interactive import render_html
from graphing_plot.plan import PlotLayout, RenderPlan, build_plan
from graphing_plot.sampler import Intercept, Intercepts, find_intercepts
from graphing_plot.scales import CoordinateMapper, ViewRange
from graphing_plot.viewport import Viewport

__all__ = [
    "ColorConfig",
    "ColorError",
    "CoordinateMapper",
    "EvaluationError",
    "Expression",
    "ExpressionError",
    "Intercept",
    "Intercepts",
    "PlotError",
    "PlotLayout",
    "PlotResult",
    "RangeError",
    "RenderPlan",
    "StaticFigure",
    "ViewRange",
    "Viewport",
    "build_plan",
    "default_colors",
    "find_intercepts",
    "plot",
    "render_ascii",
    "render_html",
]
