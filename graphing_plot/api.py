from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from graphing_plot.ascii import render_ascii
from graphing_plot.colors import ColorConfig, default_colors
from graphing_plot.expression import Expression, coerce_expression
from graphing_plot.figure import render_png, static_layout
from graphing_plot.interactive import render_html, write_html
from graphing_plot.plan import build_plan
from graphing_plot.sampler import DEFAULT_SCAN_STEPS
from graphing_plot.scales import ViewRange


OutputMode = Literal["static", "interactive", "ascii"]

DEFAULT_RANGE = ViewRange(xmin=-10.0, xmax=10.0, ymin=-10.0, ymax=10.0)


@dataclass(frozen=True)
class PlotResult:
    mode: OutputMode
    path: Path | None = None
    text: str | None = None


def plot(
    expression: Expression | str,
    *,
    mode: OutputMode = "static",
    view: ViewRange = DEFAULT_RANGE,
    width: int = 800,
    height: int = 600,
    output: str | Path | None = None,
    colors: ColorConfig | None = None,
    point_interval: float = 0.0,
    steps: int = DEFAULT_SCAN_STEPS,
    use_solver: bool = True,
) -> PlotResult:
    """Render ``expression`` in one of the three output modes.

    ``ascii`` returns the text and writes nothing. The other modes need
    ``output`` and return the written path.
    """
    expr = coerce_expression(expression)
    if mode == "ascii":
        return PlotResult(mode=mode, text=render_ascii(expr, view, width=width, height=height))
    if output is None:
        raise ValueError(f"mode {mode!r} needs an output path")
    if mode == "interactive":
        html_text = render_html(
            expr,
            view,
            colors=colors if colors is not None else default_colors("interactive"),
            point_interval=point_interval,
            width=width,
            height=height,
            steps=steps,
            use_solver=use_solver,
        )
        return PlotResult(mode=mode, path=write_html(output, html_text))
    if mode == "static":
        plan = build_plan(
            expr,
            view,
            static_layout(width, height),
            steps=steps,
            use_solver=use_solver,
            point_interval=point_interval,
        )
        path = render_png(plan, output, colors=colors if colors is not None else default_colors("static"))
        return PlotResult(mode=mode, path=path)
    raise ValueError(f"unknown plot mode: {mode!r}")
