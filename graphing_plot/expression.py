from __future__ import annotations

import logging
import math
from typing import Any, Callable

import mpmath
import numpy as np
import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from graphing_plot.errors import EvaluationError, ExpressionError


LOGGER = logging.getLogger(__name__)

VARIABLE_NAME = "x"
TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)
# Imaginary parts below this are treated as round-off from the evaluator.
IMAG_TOLERANCE = 1e-12


class Expression:
    """A single-variable expression parsed and evaluated by sympy.

    The source text is kept verbatim; renderers embed it in titles and in the
    interactive page, and the periodic-intercept heuristic inspects it.
    """

    def __init__(self, source: str) -> None:
        if not isinstance(source, str) or not source.strip():
            raise ExpressionError("expression must be a non-empty string")
        self._source = source.strip()
        self._symbol = sp.Symbol(VARIABLE_NAME, real=True)
        self._expr = _parse(self._source, self._symbol)
        self._fn: Callable[[float], Any] = _compile(self._source, self._symbol, self._expr)
        self._solver_roots: tuple[float, ...] | None = None

    @property
    def source(self) -> str:
        return self._source

    @property
    def symbol(self) -> sp.Symbol:
        return self._symbol

    @property
    def sympy_expr(self) -> sp.Expr:
        return self._expr

    def __repr__(self) -> str:
        return f"Expression({self._source!r})"

    def evaluate(self, x: float) -> float:
        try:
            raw = self._fn(float(x))
        except (ArithmeticError, ValueError, TypeError) as exc:
            raise EvaluationError(f"cannot evaluate {self._source!r} at x={x}: {exc}", x=x) from exc
        return _to_real(raw, x=x, source=self._source)

    def try_evaluate(self, x: float) -> float | None:
        """Return a finite value, or None when the point is undefined."""
        try:
            y = self.evaluate(x)
        except EvaluationError as exc:
            LOGGER.debug("%s", exc)
            return None
        if not math.isfinite(y):
            return None
        return y

    def evaluate_many(self, xs: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        ys = np.full(xs.shape, np.nan, dtype=np.float64)
        for i, xv in enumerate(xs.tolist()):
            y = self.try_evaluate(xv)
            if y is not None:
                ys[i] = y
        return ys, np.isfinite(ys)

    def solver_roots(self) -> tuple[float, ...]:
        """Real roots of ``expr = 0`` reported by ``sympy.solve``.

        Best-effort: any solver failure yields an empty tuple. The result does
        not depend on the view range, so it is computed once and cached.
        """
        if self._solver_roots is not None:
            return self._solver_roots
        roots: list[float] = []
        try:
            solutions = sp.solve(self._expr, self._symbol)
        except Exception as exc:
            LOGGER.debug("solver gave up on %r: %s", self._source, exc)
            solutions = []
        for sol in solutions:
            if getattr(sol, "free_symbols", None):
                continue
            try:
                value = complex(sp.N(sol))
            except (TypeError, ValueError) as exc:
                LOGGER.debug("discarding non-numeric solution %s: %s", sol, exc)
                continue
            if abs(value.imag) > IMAG_TOLERANCE or not math.isfinite(value.real):
                continue
            roots.append(float(value.real))
        self._solver_roots = tuple(sorted(roots))
        return self._solver_roots


def coerce_expression(expression: Expression | str) -> Expression:
    if isinstance(expression, Expression):
        return expression
    return Expression(expression)


def _parse(source: str, symbol: sp.Symbol) -> sp.Expr:
    local_dict = {
        VARIABLE_NAME: symbol,
        "e": sp.E,
        "E": sp.E,
        "pi": sp.pi,
        "ln": sp.log,
        "log10": lambda arg: sp.log(arg, 10),
        "abs": sp.Abs,
    }
    try:
        expr = parse_expr(source, local_dict=local_dict, transformations=TRANSFORMATIONS)
    except Exception as exc:
        raise ExpressionError(f"cannot parse expression {source!r}: {exc}") from exc
    if not isinstance(expr, sp.Expr):
        raise ExpressionError(f"{source!r} is not an expression in {VARIABLE_NAME}")
    extra = sorted(str(s) for s in expr.free_symbols if s != symbol)
    if extra:
        raise ExpressionError(f"expression must only use {VARIABLE_NAME!r}; found {', '.join(extra)}")
    return expr


def _compile(source: str, symbol: sp.Symbol, expr: sp.Expr) -> Callable[[float], Any]:
    # math.factorial rejects floats; mpmath extends it through gamma.
    modules: list[Any] = [{"factorial": mpmath.factorial}, "math", "mpmath"]
    try:
        return sp.lambdify(symbol, expr, modules=modules)
    except Exception as exc:
        raise ExpressionError(f"cannot compile {source!r}: {exc}") from exc


def _to_real(raw: Any, *, x: float, source: str) -> float:
    try:
        value = complex(raw)
    except (TypeError, ValueError) as exc:
        raise EvaluationError(f"{source!r} is not numeric at x={x}", x=x) from exc
    if abs(value.imag) > IMAG_TOLERANCE:
        raise EvaluationError(f"{source!r} is not real at x={x}", x=x)
    return float(value.real)
