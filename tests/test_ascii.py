from __future__ import annotations

import unittest

from graphing_plot.ascii import render_ascii
from graphing_plot.errors import RangeError
from graphing_plot.scales import ViewRange


DEFAULT = ViewRange(-10.0, 10.0, -10.0, 10.0)


class AsciiRenderTests(unittest.TestCase):
    def test_output_has_exact_dimensions(self) -> None:
        for width, height in [(80, 24), (40, 12), (1, 1), (7, 3)]:
            text = render_ascii("sin(x)", DEFAULT, width, height)
            lines = text.split("\n")
            self.assertEqual(lines[-1], "")
            self.assertEqual(len(lines) - 1, height)
            self.assertTrue(all(len(line) == width for line in lines[:-1]))

    def test_axes_and_origin(self) -> None:
        rows = render_ascii("100", DEFAULT, 21, 21).splitlines()
        self.assertEqual(rows[10], "-" * 10 + "+" + "-" * 10)
        self.assertEqual(rows[0], " " * 10 + "|" + " " * 10)

    def test_curve_markers(self) -> None:
        rows = render_ascii("5", DEFAULT, 21, 21).splitlines()
        self.assertEqual(rows[5], "*" * 10 + "|" + "*" * 10)

    def test_curve_on_x_axis(self) -> None:
        rows = render_ascii("0", DEFAULT, 21, 21).splitlines()
        self.assertEqual(rows[10], "=" * 10 + "+" + "=" * 10)

    def test_axes_outside_range_are_not_drawn(self) -> None:
        text = render_ascii("100", ViewRange(1.0, 5.0, 1.0, 5.0), 10, 5)
        self.assertEqual(text, (" " * 10 + "\n") * 5)

    def test_invalid_samples_are_skipped(self) -> None:
        rows = render_ascii("sqrt(x)", DEFAULT, 21, 21).splitlines()
        left_half = "".join(row[:10] for row in rows)
        self.assertNotIn("*", left_half)

    def test_rejects_empty_grid(self) -> None:
        with self.assertRaises(RangeError):
            render_ascii("x", DEFAULT, 0, 10)


if __name__ == "__main__":
    unittest.main()
