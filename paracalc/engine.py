# engine.py
# Expression capability: parse / evaluate / differentiate / simplify
# ------------------------------------------------------------------
# - SymPy parsing with mathjs-style "^" power (convert_xor)
# - NumPy lambdify, so the same compiled field evaluates points and whole grids
# - Only x and y are free variables; anything else is a parse error
# - Compiled expressions are memoized by string (pure, so sharing is safe)

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, Dict, Mapping, Protocol, Tuple, Union

import numpy as np
import sympy as sp
from sympy.parsing.sympy_parser import convert_xor, parse_expr, standard_transformations

from .errors import EvaluationError, ExpressionParseError

logger = logging.getLogger(__name__)

Number = Union[float, np.ndarray]
Bindings = Mapping[str, Number]

TRANSFORMATIONS = standard_transformations + (convert_xor,)


# ----------------------------
# 1) CAPABILITY INTERFACE
# ----------------------------
class ExpressionEngine(Protocol):
    def evaluate(self, expression: str, bindings: Bindings) -> Number:
        ...

    def differentiate(self, expression: str, variable: str) -> str:
        ...

    def simplify(self, expression: str) -> str:
        ...


# ----------------------------
# 2) SYMBOLS + PARSER
# ----------------------------
@lru_cache(maxsize=1)
def sympy_env() -> Tuple[sp.Symbol, sp.Symbol, Dict[str, object]]:
    x = sp.Symbol("x", real=True)
    y = sp.Symbol("y", real=True)

    locals_map = {
        "x": x, "y": y,
        "sin": sp.sin, "cos": sp.cos, "tan": sp.tan,
        "asin": sp.asin, "acos": sp.acos, "atan": sp.atan,
        "sinh": sp.sinh, "cosh": sp.cosh, "tanh": sp.tanh,
        "exp": sp.exp, "log": sp.log, "ln": sp.log, "sqrt": sp.sqrt,
        "Abs": sp.Abs, "abs": sp.Abs,
        "pi": sp.pi, "E": sp.E, "e": sp.E,
        "sign": sp.sign,
    }
    return x, y, locals_map


def parse_field(expr_str: str) -> sp.Expr:
    x, y, locals_map = sympy_env()
    if not isinstance(expr_str, str) or not expr_str.strip():
        raise ExpressionParseError("Empty expression")

    try:
        expr = parse_expr(expr_str, local_dict=dict(locals_map), transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ExpressionParseError(f"Could not parse {expr_str!r}: {e}") from e

    if not isinstance(expr, sp.Expr):
        raise ExpressionParseError(f"{expr_str!r} is not a scalar expression")

    unknown = expr.free_symbols - {x, y}
    if unknown:
        names = ", ".join(sorted(str(s) for s in unknown))
        raise ExpressionParseError(f"Undefined symbol(s): {names}")
    return expr


@lru_cache(maxsize=256)
def compile_field(expr_str: str) -> Tuple[sp.Expr, Callable]:
    x, y, _ = sympy_env()
    expr = parse_field(expr_str)
    # parses but has no NumPy printer (e.g. an unevaluated Derivative)
    try:
        f_xy = sp.lambdify((x, y), expr, modules=["numpy"])
    except Exception as e:
        raise ExpressionParseError(f"Cannot evaluate {expr_str!r} numerically: {e}") from e
    logger.debug("Compiled %r -> %s", expr_str, expr)
    return expr, f_xy


# ----------------------------
# 3) RESULT COERCION
# ----------------------------
def _real_scalar(v) -> float:
    if isinstance(v, complex) or np.iscomplexobj(v):
        c = complex(v)
        if c.imag != 0:
            raise EvaluationError(f"Non-real result {c}")
        return float(c.real)
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise EvaluationError(f"Non-numeric result {v!r}") from e


def _real_array(v, shape) -> np.ndarray:
    a = np.asarray(v)
    if np.iscomplexobj(a):
        a = np.where(a.imag == 0, a.real, np.nan)
    try:
        a = np.array(np.broadcast_to(a, shape), dtype=float)
    except (TypeError, ValueError) as e:
        raise EvaluationError(f"Non-numeric result of type {a.dtype}") from e
    return a


# ----------------------------
# 4) SYMPY ENGINE
# ----------------------------
class SympyEngine:
    """Default engine backed by SymPy + NumPy.

    ``evaluate`` accepts scalar bindings (returns a float, possibly inf/nan)
    or array bindings of a common shape (returns a float array of that shape).
    """

    def evaluate(self, expression: str, bindings: Bindings) -> Number:
        _, f_xy = compile_field(expression)
        xv = bindings["x"]
        yv = bindings["y"]
        scalar = np.ndim(xv) == 0 and np.ndim(yv) == 0
        if scalar:
            xv, yv = float(xv), float(yv)

        try:
            with np.errstate(all="ignore"):
                v = f_xy(xv, yv)
        except Exception as e:
            where = f"x={xv:g}, y={yv:g}" if scalar else "grid"
            raise EvaluationError(f"Evaluation of {expression!r} failed at {where}: {e}") from e

        if scalar:
            return _real_scalar(v)
        return _real_array(v, np.broadcast(np.asarray(xv), np.asarray(yv)).shape)

    def differentiate(self, expression: str, variable: str) -> str:
        x, y, _ = sympy_env()
        symbols = {"x": x, "y": y}
        if variable not in symbols:
            raise ExpressionParseError(f"Unknown variable {variable!r}")
        expr, _ = compile_field(expression)
        return sp.sstr(sp.diff(expr, symbols[variable]))

    def simplify(self, expression: str) -> str:
        expr, _ = compile_field(expression)
        return sp.sstr(sp.simplify(expr))


@lru_cache(maxsize=1)
def default_engine() -> SympyEngine:
    return SympyEngine()
