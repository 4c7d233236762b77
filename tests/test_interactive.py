from __future__ import annotations

import json
from pathlib import Path
import re
import tempfile
import unittest

from graphing_plot.api import plot
from graphing_plot.colors import ColorConfig
from graphing_plot.interactive import MATHJS_URL, build_page, embed_json, render_html
from graphing_plot.scales import ViewRange


DEFAULT = ViewRange(-10.0, 10.0, -10.0, 10.0)
CONFIG_RE = re.compile(r'<script id="plot-config" type="application/json">(.*?)</script>', re.DOTALL)


def _config(html_text: str) -> dict:
    match = CONFIG_RE.search(html_text)
    assert match is not None
    return json.loads(match.group(1))


class InteractivePageTests(unittest.TestCase):
    def test_page_is_self_contained(self) -> None:
        html_text = render_html("x^2 - 4", DEFAULT)
        self.assertTrue(html_text.startswith("<!DOCTYPE html>"))
        self.assertIn(f'<script src="{MATHJS_URL}"></script>', html_text)
        self.assertIn('<canvas id="plotCanvas" width="800" height="600"></canvas>', html_text)
        self.assertIn("math.compile(config.expression)", html_text)
        self.assertIn('id="updateButton"', html_text)
        self.assertIn('id="resetButton"', html_text)
        self.assertIn("Click and drag to pan the graph", html_text)
        self.assertNotIn("$title_expression", html_text)

    def test_config_carries_range_and_host_roots(self) -> None:
        config = _config(render_html("x^2 - 4", DEFAULT, point_interval=0.5))
        self.assertEqual(config["expression"], "x^2 - 4")
        self.assertEqual(config["initialRange"], {"xMin": -10.0, "xMax": 10.0, "yMin": -10.0, "yMax": 10.0})
        self.assertEqual(config["solverRoots"], [-2.0, 2.0])
        self.assertEqual(config["pointInterval"], 0.5)
        self.assertEqual(config["scanSteps"], 200)
        self.assertEqual(config["zoomInFactor"], 0.9)
        self.assertEqual(config["zoomOutFactor"], 1.1)
        kinds = [p["type"] for p in config["initialPoints"]]
        self.assertEqual(kinds.count("x-intercept"), 2)
        self.assertEqual(kinds.count("y-intercept"), 1)

    def test_solver_roots_omitted_when_disabled(self) -> None:
        config = _config(render_html("x^2 - 4", DEFAULT, use_solver=False))
        self.assertEqual(config["solverRoots"], [])
        self.assertFalse(config["useSolver"])

    def test_colors_flow_into_css_and_config(self) -> None:
        colors = ColorConfig(background="#101010", x_intercept="#00aa00")
        html_text = render_html("x", DEFAULT, colors=colors)
        self.assertIn("background-color: #101010;", html_text)
        self.assertIn("border-left: 4px solid #00aa00;", html_text)
        # dark background gets light footer text
        self.assertIn("color: #ffffff;", html_text)
        self.assertEqual(_config(html_text)["colors"]["x_intercept"], "#00aa00")

    def test_canvas_size_follows_layout(self) -> None:
        page = build_page("x", DEFAULT, width=640, height=480)
        self.assertEqual(page.plan.layout.plot_width, 540)
        self.assertIn('width="640" height="480"', page.to_html())

    def test_embed_json_cannot_close_script(self) -> None:
        text = embed_json({"expression": "</script><b>&"})
        self.assertNotIn("</script>", text)
        self.assertNotIn("<", text)
        self.assertEqual(json.loads(text), {"expression": "</script><b>&"})

    def test_plot_writes_html_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            result = plot("cos(x)", mode="interactive", output=Path(td) / "graph.htm")
            self.assertEqual(result.mode, "interactive")
            assert result.path is not None
            self.assertTrue(result.path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>"))


if __name__ == "__main__":
    unittest.main()
