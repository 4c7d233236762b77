from __future__ import annotations

import math

import numpy as np

from graphing_plot.raster.canvas import RGBA, blend_into


def draw_circle(
    dst: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    fill: RGBA,
    outline: RGBA | None = None,
    outline_width: float = 1.0,
) -> None:
    """Filled circle centred on ``(cx, cy)`` with an optional ring on its edge."""
    if radius <= 0:
        return
    reach = int(math.ceil(radius + outline_width))
    x0 = max(0, int(math.floor(cx)) - reach)
    y0 = max(0, int(math.floor(cy)) - reach)
    x1 = min(dst.shape[1], int(math.floor(cx)) + reach + 2)
    y1 = min(dst.shape[0], int(math.floor(cy)) + reach + 2)
    if x1 <= x0 or y1 <= y0:
        return
    yy, xx = np.mgrid[y0:y1, x0:x1]
    dist = np.hypot(xx - cx, yy - cy)
    region = dst[y0:y1, x0:x1]
    if outline is None:
        blend_into(region, fill, dist < radius)
        return
    ring = np.abs(dist - radius) <= outline_width * 0.5
    blend_into(region, fill, (dist < radius) & ~ring)
    blend_into(region, outline, ring)
