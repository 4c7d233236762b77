from __future__ import annotations

from typing import Iterator

import numpy as np

from graphing_plot.raster.canvas import RGBA, blend_into


def draw_polyline(dst: np.ndarray, points: np.ndarray, color: RGBA, width: int = 1) -> None:
    """Draw an (N, 2) array of output coordinates as connected segments."""
    if points.shape[0] < 2:
        return
    pts = np.rint(points).astype(np.int64).tolist()
    for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
        _stroke(dst, x0, y0, x1, y1, color, width)


def draw_line(dst: np.ndarray, x0: float, y0: float, x1: float, y1: float, color: RGBA, width: int = 1) -> None:
    _stroke(dst, int(round(x0)), int(round(y0)), int(round(x1)), int(round(y1)), color, width)


def bresenham(x0: int, y0: int, x1: int, y1: int) -> Iterator[tuple[int, int]]:
    """Integer points of the segment, both endpoints included."""
    dx, sx = abs(x1 - x0), (1 if x0 < x1 else -1)
    dy, sy = -abs(y1 - y0), (1 if y0 < y1 else -1)
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _stroke(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int) -> None:
    # Even widths extend one pixel right/down of the center.
    lo = (max(1, width) - 1) // 2
    hi = max(1, width) // 2
    h, w = dst.shape[:2]
    for x, y in bresenham(x0, y0, x1, y1):
        left, right = max(0, x - lo), min(w, x + hi + 1)
        top, bottom = max(0, y - lo), min(h, y + hi + 1)
        if left < right and top < bottom:
            blend_into(dst[top:bottom, left:right], color)
