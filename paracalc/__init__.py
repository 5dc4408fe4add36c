"""Para-Cálculo: numerical analysis of two-variable scalar fields."""

from .analysis import (
    CriticalPoint,
    CriticalPointResult,
    DomainRangeResult,
    FieldPoint,
    GradientVector,
    IntegralResult,
    LimitEstimate,
    Range,
    SampledField,
    ValidationResult,
    approximate_integral,
    estimate_domain_range,
    estimate_limits,
    evaluate_field,
    find_critical_points,
    partial_derivatives,
    reference_integral,
    sample_field,
    validate,
)
from .engine import ExpressionEngine, SympyEngine, default_engine
from .errors import EvaluationError, ExpressionError, ExpressionParseError

__version__ = "1.0.0"
