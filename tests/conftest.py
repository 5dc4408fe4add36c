"""
Pytest fixtures for the field analyzer.

Provides the default SymPy engine and a closure-backed stub engine so the
analyzer can be exercised without the parser.
"""

import math

import pytest

from paracalc.engine import SympyEngine
from paracalc.errors import EvaluationError, ExpressionParseError


class StubEngine:
    """Engine whose expressions are keys into a table of closures."""

    def __init__(self, fields, derivatives=None):
        self.fields = fields
        self.derivatives = derivatives or {}
        self.calls = 0

    def evaluate(self, expression, bindings):
        self.calls += 1
        if expression not in self.fields:
            raise ExpressionParseError(f"unknown stub expression {expression!r}")
        try:
            return self.fields[expression](bindings["x"], bindings["y"])
        except ZeroDivisionError as e:
            raise EvaluationError(str(e)) from e

    def differentiate(self, expression, variable):
        try:
            return self.derivatives[(expression, variable)]
        except KeyError:
            raise ExpressionParseError(f"no derivative of {expression!r} in {variable}")

    def simplify(self, expression):
        if expression not in self.fields:
            raise ExpressionParseError(f"unknown stub expression {expression!r}")
        return expression


@pytest.fixture
def engine():
    """Default SymPy-backed engine."""
    return SympyEngine()


@pytest.fixture
def shifted_bowl():
    """Stub for f = (x - 1)^2 + (y + 2)^2 with its partials."""
    return StubEngine(
        fields={
            "bowl": lambda x, y: (x - 1) ** 2 + (y + 2) ** 2,
            "bowl_x": lambda x, y: 2 * (x - 1) + 0 * y,
            "bowl_y": lambda x, y: 0 * x + 2 * (y + 2),
        },
        derivatives={("bowl", "x"): "bowl_x", ("bowl", "y"): "bowl_y"},
    )


@pytest.fixture
def scalar_only():
    """Stub for f = log(x) + y written with math, so grid bindings raise TypeError."""
    return StubEngine(fields={"log": lambda x, y: math.log(x) + y})


@pytest.fixture
def tilted_plane():
    """Stub for f = 0.03 x: gradient too steep for the strict threshold only."""
    return StubEngine(
        fields={
            "tilt": lambda x, y: 0.03 * x + 0 * y,
            "tilt_x": lambda x, y: 0.03 + 0 * x + 0 * y,
            "tilt_y": lambda x, y: 0 * x + 0 * y,
        },
        derivatives={("tilt", "x"): "tilt_x", ("tilt", "y"): "tilt_y"},
    )
