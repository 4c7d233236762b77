from __future__ import annotations

import numpy as np
from PIL import Image


RGBA = tuple[int, int, int, int]
WHITE: RGBA = (255, 255, 255, 255)


def new_canvas(width: int, height: int, color: RGBA = WHITE) -> np.ndarray:
    """Allocate an ``(height, width, 4)`` uint8 canvas filled with ``color``."""
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def to_image(canvas: np.ndarray) -> Image.Image:
    if canvas.dtype != np.uint8 or canvas.ndim != 3 or canvas.shape[2] != 4:
        raise ValueError("canvas must be a uint8 array with shape (H, W, 4)")
    return Image.fromarray(np.ascontiguousarray(canvas))


def blend_into(region: np.ndarray, color: RGBA, coverage: np.ndarray | float = 1.0) -> None:
    """Source-over ``color`` onto an RGBA view, scaled by per-pixel ``coverage``.

    The result is always opaque; canvases here are final images, not layers.
    """
    alpha = (color[3] / 255.0) * np.asarray(coverage, dtype=np.float32)
    if np.ndim(alpha) == 2:
        alpha = alpha[:, :, None]
    src = np.asarray(color[:3], dtype=np.float32)
    dst = region[..., :3].astype(np.float32)
    region[..., :3] = np.clip(src * alpha + dst * (1.0 - alpha), 0, 255).astype(np.uint8)
    region[..., 3] = 255


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Blend ``color`` over the inclusive rectangle, clipped to the canvas."""
    left = max(0, min(int(x0), int(x1)))
    right = min(dst.shape[1] - 1, max(int(x0), int(x1)))
    top = max(0, min(int(y0), int(y1)))
    bottom = min(dst.shape[0] - 1, max(int(y0), int(y1)))
    if right < left or bottom < top:
        return
    blend_into(dst[top : bottom + 1, left : right + 1], color)
