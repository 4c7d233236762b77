from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterator

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from graphing_plot.raster.canvas import RGBA, blend_into


DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE_PX = 12.0
# Sans-serif faces that stand in for Arial when it is not installed.
FONT_FALLBACKS = ("arial", "helvetica", "liberationsans", "dejavusans")
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("C:/Windows/Fonts"),
)
_FONT_SUFFIXES = {".ttf", ".otf", ".ttc"}

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    embolden_px: int = 1,
) -> None:
    """Blend ``text`` with its top-left corner at ``(x, y)``.

    ``embolden_px`` > 1 smears the glyph mask horizontally to fake a bold weight.
    """
    if not text:
        return
    mask = _text_mask(text, _load_font(font_family, font_size_px), max(1, embolden_px))
    h, w = mask.shape
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + w), min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    coverage = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    if not np.any(coverage > 0):
        return
    blend_into(dst[y0:y1, x0:x1], color, coverage)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    embolden_px: int = 1,
) -> tuple[int, int]:
    font = _load_font(font_family, font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)) + max(0, embolden_px - 1), max(1, int(bottom - top)))


@lru_cache(maxsize=256)
def _text_mask(text: str, font: Font, embolden_px: int) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width + embolden_px - 1, height), 0)
    draw = ImageDraw.Draw(image)
    for shift in range(embolden_px):
        draw.text((shift - left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> Font:
    size = max(1, int(round(font_size_px)))
    path = _find_font_file(font_family)
    if path is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(path), size=size)
    except OSError:
        return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _find_font_file(font_family: str) -> Path | None:
    wanted = _squash(font_family) or _squash(DEFAULT_FONT_FAMILY)
    installed = list(_installed_fonts())
    for name in (wanted,) + FONT_FALLBACKS:
        for path in installed:
            stem = _squash(path.stem)
            if stem == name:
                return path
            if stem.startswith(name) and not any(style in stem for style in ("bold", "italic", "mono")):
                return path
    return None


def _installed_fonts() -> Iterator[Path]:
    for base in FONT_DIRS:
        if not base.is_dir():
            continue
        for path in base.rglob("*"):
            if path.suffix.lower() in _FONT_SUFFIXES:
                yield path


def _squash(name: str) -> str:
    return name.strip().lower().replace(" ", "")
