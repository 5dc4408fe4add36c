"""Exceptions raised by the expression engine.

Analyzer functions never let these escape: they are caught per call and
turned into the documented fallback values.
"""


class ExpressionError(ValueError):
    """Base class for anything the engine cannot turn into a real number."""


class ExpressionParseError(ExpressionError):
    """The expression is malformed or references symbols other than x and y."""


class EvaluationError(ExpressionError):
    """The expression parsed, but failed at a specific binding."""
