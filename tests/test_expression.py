from __future__ import annotations

import math
import unittest

import numpy as np

from graphing_plot.errors import EvaluationError, ExpressionError
from graphing_plot.expression import Expression, coerce_expression


class ExpressionTests(unittest.TestCase):
    def test_power_uses_caret(self) -> None:
        self.assertAlmostEqual(Expression("x^2 - 4").evaluate(3.0), 5.0)

    def test_implicit_multiplication(self) -> None:
        self.assertAlmostEqual(Expression("2x + 1").evaluate(3.0), 7.0)

    def test_constants_and_ln_alias(self) -> None:
        self.assertAlmostEqual(Expression("ln(e)").evaluate(0.0), 1.0)
        self.assertAlmostEqual(Expression("sin(pi/2)").evaluate(0.0), 1.0)

    def test_log10_is_base_ten(self) -> None:
        self.assertAlmostEqual(Expression("log10(x)").evaluate(100.0), 2.0)
        self.assertAlmostEqual(Expression("2log10(x)").evaluate(1000.0), 6.0)

    def test_factorial_accepts_non_integer_arguments(self) -> None:
        expr = Expression("x!")
        self.assertAlmostEqual(expr.evaluate(0.0), 1.0)
        self.assertAlmostEqual(expr.evaluate(3.0), 6.0)
        self.assertAlmostEqual(expr.evaluate(2.5), math.gamma(3.5))
        self.assertIsNone(expr.try_evaluate(-1.0))

    def test_complex_infinity_is_rejected_at_construction(self) -> None:
        for source in ("1/0", "zoo"):
            with self.assertRaises(ExpressionError):
                Expression(source)

    def test_source_is_kept_verbatim(self) -> None:
        expr = Expression("  sin(x) ")
        self.assertEqual(expr.source, "sin(x)")

    def test_other_free_symbols_are_rejected(self) -> None:
        with self.assertRaises(ExpressionError):
            Expression("x + y")

    def test_unparseable_text_is_rejected(self) -> None:
        with self.assertRaises(ExpressionError):
            Expression("(x")
        with self.assertRaises(ExpressionError):
            Expression("   ")

    def test_evaluate_raises_for_undefined_points(self) -> None:
        with self.assertRaises(EvaluationError) as ctx:
            Expression("1/x").evaluate(0.0)
        self.assertEqual(ctx.exception.x, 0.0)

    def test_try_evaluate_returns_none_for_invalid_points(self) -> None:
        self.assertIsNone(Expression("1/x").try_evaluate(0.0))
        self.assertIsNone(Expression("sqrt(x)").try_evaluate(-4.0))
        self.assertIsNone(Expression("log(x)").try_evaluate(-1.0))
        self.assertAlmostEqual(Expression("sqrt(x)").try_evaluate(4.0), 2.0)

    def test_evaluate_many_masks_invalid_samples(self) -> None:
        ys, mask = Expression("sqrt(x)").evaluate_many(np.asarray([-1.0, 0.0, 9.0]))
        self.assertEqual(mask.tolist(), [False, True, True])
        self.assertTrue(math.isnan(ys[0]))
        self.assertAlmostEqual(float(ys[2]), 3.0)

    def test_solver_roots_are_real_and_sorted(self) -> None:
        self.assertEqual(Expression("x^2 - 4").solver_roots(), (-2.0, 2.0))
        self.assertEqual(Expression("x^2 + 1").solver_roots(), ())

    def test_solver_roots_are_cached(self) -> None:
        expr = Expression("x - 3")
        self.assertIs(expr.solver_roots(), expr.solver_roots())

    def test_coerce_expression_passes_instances_through(self) -> None:
        expr = Expression("x")
        self.assertIs(coerce_expression(expr), expr)
        self.assertEqual(coerce_expression("x + 1").source, "x + 1")


if __name__ == "__main__":
    unittest.main()
