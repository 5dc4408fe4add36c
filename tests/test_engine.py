"""
Tests for the SymPy expression engine.
"""

import math

import numpy as np
import pytest

from paracalc.engine import _real_scalar, compile_field, parse_field
from paracalc.errors import EvaluationError, ExpressionParseError


class TestParsing:
    """Parsing rules for user expressions."""

    def test_caret_is_power(self):
        """mathjs-style ^ parses as exponentiation."""
        assert parse_field("x^2 + y^2") == parse_field("x**2 + y**2")

    def test_named_constants(self):
        """pi and e resolve to the SymPy constants."""
        _, f_xy = compile_field("pi + e")
        assert f_xy(0.0, 0.0) == pytest.approx(math.pi + math.e)

    def test_double_caret_is_rejected(self):
        """Invalid syntax raises a parse error."""
        with pytest.raises(ExpressionParseError):
            parse_field("x^^2")

    def test_undefined_symbol_is_rejected(self):
        """Only x and y may appear free."""
        with pytest.raises(ExpressionParseError, match="z"):
            parse_field("x + z")

    def test_empty_expression(self):
        """Blank input is a parse error."""
        with pytest.raises(ExpressionParseError):
            parse_field("   ")

    def test_unprintable_expression(self):
        """An expression NumPy cannot evaluate is a parse error, not a printer error."""
        with pytest.raises(ExpressionParseError):
            compile_field("Derivative(floor(x), x)")


class TestEvaluate:
    """Scalar and grid evaluation."""

    def test_scalar_binding(self, engine):
        """Scalar bindings return a float."""
        v = engine.evaluate("x^2 + y^2", {"x": 3, "y": 4})
        assert isinstance(v, float)
        assert v == 25.0

    def test_grid_binding_keeps_shape(self, engine):
        """Array bindings return an array of the binding shape."""
        X, Y = np.meshgrid(np.linspace(0, 1, 3), np.linspace(0, 1, 4), indexing="ij")
        Z = engine.evaluate("x*y", {"x": X, "y": Y})
        assert Z.shape == (3, 4)
        assert Z[2, 3] == pytest.approx(1.0)

    def test_constant_broadcasts_over_grid(self, engine):
        """A constant expression still yields a full grid."""
        X, Y = np.meshgrid(np.arange(3.0), np.arange(2.0), indexing="ij")
        Z = engine.evaluate("1", {"x": X, "y": Y})
        assert Z.shape == (3, 2)
        assert np.all(Z == 1.0)

    def test_division_by_zero_at_point(self, engine):
        """A point evaluation that raises becomes an EvaluationError."""
        with pytest.raises(EvaluationError):
            engine.evaluate("1/x", {"x": 0, "y": 0})

    def test_non_real_result(self):
        """Complex results are rejected unless the imaginary part is zero."""
        with pytest.raises(EvaluationError):
            _real_scalar(complex(1.0, 2.0))
        assert _real_scalar(complex(3.0, 0.0)) == 3.0

    def test_grid_holes_are_not_finite(self, engine):
        """Out-of-domain grid cells come back non-finite rather than raising."""
        Z = engine.evaluate("log(x)", {"x": np.array([-1.0, 1.0]), "y": np.array([0.0, 0.0])})
        assert not np.isfinite(Z[0])
        assert Z[1] == 0.0


class TestSymbolic:
    """Differentiation and simplification."""

    def test_differentiate(self, engine):
        """Partial derivatives are returned as expression strings."""
        assert engine.differentiate("x^2*y", "x") == "2*x*y"
        assert engine.differentiate("x^2*y", "y") == "x**2"

    def test_differentiate_unknown_variable(self, engine):
        """Only x and y can be differentiated against."""
        with pytest.raises(ExpressionParseError):
            engine.differentiate("x*y", "z")

    def test_simplify(self, engine):
        """Like terms are collected."""
        assert engine.simplify("x^2 + 2*x^2") == "3*x**2"
