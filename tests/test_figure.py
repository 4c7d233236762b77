from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np
from PIL import Image

from graphing_plot.colors import ColorConfig, default_colors
from graphing_plot.figure import StaticFigure, render_png, static_layout
from graphing_plot.plan import build_plan
from graphing_plot.raster import draw_circle, draw_line, draw_text, new_canvas, text_size, to_image
from graphing_plot.scales import ViewRange


DEFAULT = ViewRange(-10.0, 10.0, -10.0, 10.0)


class StaticFigureTests(unittest.TestCase):
    def test_rgba_shape_and_dtype(self) -> None:
        fig = StaticFigure(plan=build_plan("x^2 - 4", DEFAULT, static_layout(320, 240)))
        rgba = fig.to_rgba()
        self.assertEqual(rgba.shape, (240, 320, 4))
        self.assertEqual(rgba.dtype, np.uint8)
        self.assertTrue(np.all(rgba[:, :, 3] == 255))

    def test_render_is_deterministic(self) -> None:
        plan = build_plan("sin(x)", DEFAULT, static_layout(320, 240))
        a = StaticFigure(plan=plan).to_rgba()
        b = StaticFigure(plan=plan).to_rgba()
        self.assertTrue(np.array_equal(a, b))

    def test_curve_uses_curve_color(self) -> None:
        colors = default_colors("static").with_overrides({"x_intercept": "#00ff00", "y_intercept": "#0000ff"})
        rgba = StaticFigure(plan=build_plan("x", DEFAULT, static_layout(320, 240)), colors=colors).to_rgba()
        green = np.all(rgba[:, :, :3] == np.asarray([0, 255, 0], dtype=np.uint8), axis=2)
        self.assertGreater(int(green.sum()), 100)

    def test_intercept_labels(self) -> None:
        fig = StaticFigure(plan=build_plan("x^2 - 4", DEFAULT, static_layout()))
        fig.to_rgba()
        texts = sorted(label.text for label in fig.last_labels())
        self.assertEqual(texts, ["(-2.00, 0.00)", "(0.00, -4.00)", "(2.00, 0.00)"])

    def test_origin_x_intercept_is_not_labelled_twice(self) -> None:
        fig = StaticFigure(plan=build_plan("x", DEFAULT, static_layout()))
        fig.to_rgba()
        self.assertEqual([label.text for label in fig.last_labels()], ["(0.00, 0.00)"])

    def test_background_color_fills_margin(self) -> None:
        colors = ColorConfig(background="#102030", grid_background="#f0f0f0", grid_lines="#f0f0f0")
        rgba = StaticFigure(plan=build_plan("x", DEFAULT, static_layout(320, 240)), colors=colors).to_rgba()
        self.assertEqual(tuple(int(v) for v in rgba[2, 2]), (16, 32, 48, 255))

    def test_render_png_writes_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = render_png(build_plan("x^3 - x", DEFAULT, static_layout(400, 300)), Path(td) / "plot.png")
            self.assertTrue(out.exists())
            with Image.open(out) as img:
                self.assertEqual(img.size, (400, 300))
                self.assertEqual(img.mode, "RGBA")


class RasterTests(unittest.TestCase):
    def test_line_and_circle_are_clipped_to_canvas(self) -> None:
        canvas = new_canvas(20, 10)
        draw_line(canvas, -5, 5, 30, 5, (0, 0, 0, 255), width=2)
        draw_circle(canvas, 19.0, 0.0, 4.0, (255, 0, 0, 255), outline=(0, 0, 0, 255))
        self.assertEqual(tuple(int(v) for v in canvas[5, 0]), (0, 0, 0, 255))
        self.assertEqual(tuple(int(v) for v in canvas[6, 10]), (0, 0, 0, 255))

    def test_text_is_drawn_with_coverage(self) -> None:
        canvas = new_canvas(120, 40, color=(0, 0, 0, 0))
        draw_text(canvas, 4, 4, "(2.00, 0.00)", (255, 255, 255, 255), font_size_px=14.0)
        w, h = text_size("(2.00, 0.00)", font_size_px=14.0)
        self.assertGreater(w, 0)
        self.assertGreater(h, 0)
        self.assertTrue(np.any(canvas[:, :, 0] > 0))

    def test_to_image_rejects_wrong_shape(self) -> None:
        with self.assertRaises(ValueError):
            to_image(np.zeros((4, 4, 3), dtype=np.uint8))


if __name__ == "__main__":
    unittest.main()
