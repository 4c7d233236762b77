from __future__ import annotations

from contextlib import redirect_stderr, redirect_stdout
import io
from pathlib import Path
import tempfile
import unittest

from graphing_plot.api import plot
from graphing_plot.cli import main


def _run(argv: list[str], answers: list[str] | None = None) -> tuple[int, str, str]:
    replies = iter(answers or [])
    out = io.StringIO()
    err = io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv, input_fn=lambda prompt: next(replies, ""))
    return code, out.getvalue(), err.getvalue()


class CliTests(unittest.TestCase):
    def test_ascii_mode_prints_plot(self) -> None:
        code, out, _ = _run(["plot", "x", "-a", "-w", "30", "-h", "10"])
        self.assertEqual(code, 0)
        self.assertIn("Creating ASCII terminal plot: x", out)
        self.assertIn("ASCII resolution: 30x10 characters", out)
        self.assertIn("ASCII plot for terminal output:", out)
        self.assertNotIn("Colors set!", out)
        plot_lines = out.split("ASCII plot for terminal output:\n", 1)[1].splitlines()
        self.assertEqual(len(plot_lines), 10)

    def test_static_png_with_default_colors(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "out.png"
            code, out, _ = _run(["plot", "x^2 - 4", "-d", "-o", str(target), "-w", "400", "-h", "300"])
            self.assertEqual(code, 0)
            self.assertTrue(target.exists())
            self.assertIn("Resolution: 400x300 pixels", out)
            self.assertIn(f"Plot saved as: {target}", out)
            self.assertIn("X range: -10 to 10", out)

    def test_interactive_rewrites_png_extension(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            code, out, _ = _run(["plot", "sin(x)", "-i", "-d", "-o", str(Path(td) / "graph.png"), "-p", "1"])
            self.assertEqual(code, 0)
            self.assertTrue((Path(td) / "graph.htm").exists())
            self.assertFalse((Path(td) / "graph.png").exists())
            self.assertIn("Interactive HTML plot saved as:", out)

    def test_prompts_run_without_default_flag(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "graph.htm"
            code, out, _ = _run(["plot", "x", "-i", "-o", str(target)], answers=["black"])
            self.assertEqual(code, 0)
            self.assertIn("Colors set!", out)
            self.assertIn("background-color: black;", target.read_text(encoding="utf-8"))

    def test_bad_expression_reports_error(self) -> None:
        code, _, err = _run(["plot", "x +", "-a"])
        self.assertEqual(code, 1)
        self.assertIn("Error plotting expression:", err)

    def test_bad_range_reports_error(self) -> None:
        code, _, err = _run(["plot", "x", "-a", "-x", "5", "-X", "1"])
        self.assertEqual(code, 1)
        self.assertIn("xmin must be < xmax", err)

    def test_expression_folding_to_complex_infinity_reports_error(self) -> None:
        code, _, err = _run(["plot", "1/0", "-a"])
        self.assertEqual(code, 1)
        self.assertIn("Error plotting expression:", err)

    def test_non_positive_scan_steps_is_a_usage_error(self) -> None:
        for value in ("0", "-3"):
            with redirect_stderr(io.StringIO()) as err, self.assertRaises(SystemExit) as ctx:
                main(["plot", "x", "-a", "--scan-steps", value])
            self.assertEqual(ctx.exception.code, 2)
            self.assertIn("positive integer", err.getvalue())

    def test_interactive_and_ascii_are_exclusive(self) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            main(["plot", "x", "-a", "-i"])
        self.assertEqual(ctx.exception.code, 2)

    def test_unwritable_output_is_reported(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "missing" / "plot.png"
            code, _, err = _run(["plot", "x", "-d", "-o", str(target)])
            self.assertEqual(code, 1)
            self.assertIn("Error plotting expression:", err)


class ApiTests(unittest.TestCase):
    def test_ascii_returns_text(self) -> None:
        result = plot("x", mode="ascii", width=10, height=4)
        self.assertEqual(result.mode, "ascii")
        self.assertIsNone(result.path)
        assert result.text is not None
        self.assertEqual(len(result.text.splitlines()), 4)

    def test_file_modes_need_output(self) -> None:
        with self.assertRaises(ValueError):
            plot("x", mode="static")


if __name__ == "__main__":
    unittest.main()
