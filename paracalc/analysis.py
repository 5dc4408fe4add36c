# analysis.py
# NumericFieldAnalyzer: sampling-based diagnostics for z = f(x, y)
# ----------------------------------------------------------------
# - Point value + gradient (symbolic partials evaluated numerically)
# - Directional limit estimates (finite perturbation)
# - Brute-force grid search for near-zero gradient (critical point candidates)
# - Left Riemann double integral over a rectangle
# - Uniform range sampling (drives the animated walk on the analysis page)
# - Expression validation + domain/range estimate
#
# Every function is pure: inputs in, dataclass out. Evaluation failures are
# absorbed here and never reach the caller.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy.integrate import dblquad

from . import config
from .engine import ExpressionEngine, default_engine
from .errors import ExpressionParseError

logger = logging.getLogger(__name__)


# ----------------------------
# 1) DATA MODEL
# ----------------------------
@dataclass(frozen=True)
class Range:
    min: float
    max: float

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f"Range min {self.min} is greater than max {self.max}")

    @property
    def width(self) -> float:
        return self.max - self.min


RangeLike = Union[Range, Tuple[float, float], Sequence[float]]


def as_range(r: RangeLike) -> Range:
    if isinstance(r, Range):
        return r
    lo, hi = r
    return Range(float(lo), float(hi))


@dataclass
class GradientVector:
    partial_x: str
    partial_y: str
    dx: float
    dy: float
    magnitude: float


@dataclass
class LimitEstimate:
    along_x: str
    along_y: str
    at_point: str
    approaching_from: str


@dataclass
class CriticalPoint:
    x: float
    y: float
    value: float


@dataclass
class CriticalPointResult:
    gradient_x: str
    gradient_y: str
    candidates: List[CriticalPoint] = field(default_factory=list)
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    threshold_used: Optional[float] = None


@dataclass
class IntegralResult:
    description: str
    volume: float
    method: str
    valid_samples: int = 0


@dataclass
class FieldPoint:
    x: float
    y: float
    z: float


@dataclass
class SampledField:
    min: float
    max: float
    points: List[FieldPoint] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [[p.x, p.y, p.z] for p in self.points],
            columns=["x", "y", "z"],
        )


@dataclass
class ValidationResult:
    valid: bool
    simplified: str
    error: Optional[str] = None


@dataclass
class DomainRangeResult:
    domain: str
    range: str
    domain_description: str
    range_description: str


# ----------------------------
# 2) EVALUATION HELPERS
# ----------------------------
def resolve_engine(engine: Optional[ExpressionEngine]) -> ExpressionEngine:
    return engine if engine is not None else default_engine()


def _try_point(engine: ExpressionEngine, expression: str, x: float, y: float) -> Optional[float]:
    # None for a failed or non-finite sample; parse errors propagate
    try:
        v = float(engine.evaluate(expression, {"x": x, "y": y}))
    except ExpressionParseError:
        raise
    except Exception as e:
        logger.debug("Sample of %r at (%g, %g) failed: %s", expression, x, y, e)
        return None
    return v if math.isfinite(v) else None


def _sanitize_array(v) -> np.ndarray:
    a = np.array(v, dtype=float)
    a[~np.isfinite(a)] = np.nan
    return a


def evaluate_grid(engine: ExpressionEngine, expression: str, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
    try:
        Z = engine.evaluate(expression, {"x": X, "y": Y})
        return _sanitize_array(np.broadcast_to(np.asarray(Z, dtype=float), X.shape))
    except ExpressionParseError:
        raise
    except Exception as e:
        logger.debug("Vectorized evaluation of %r failed (%s); falling back to per-cell", expression, e)

    Z = np.empty(X.shape, dtype=float)
    for idx in np.ndindex(X.shape):
        v = _try_point(engine, expression, float(X[idx]), float(Y[idx]))
        Z[idx] = np.nan if v is None else v
    return Z


def _axis(r: Range, steps: int) -> np.ndarray:
    # a degenerate range collapses to a single sample
    return np.unique(np.linspace(r.min, r.max, steps + 1))


def _fmt(v: float) -> str:
    return f"{v:.4f}"


# ----------------------------
# 3) POINT + GRADIENT
# ----------------------------
def evaluate_field(expression: str, x: float = 0.0, y: float = 0.0,
                   engine: Optional[ExpressionEngine] = None) -> float:
    """Value of the field at (x, y), or 0.0 when it cannot be evaluated.

    A legitimate zero and a failure look the same to the caller.
    """
    try:
        v = _try_point(resolve_engine(engine), expression, x, y)
    except Exception as e:
        logger.debug("evaluate_field(%r) failed: %s", expression, e)
        return 0.0
    return 0.0 if v is None else v


def partial_derivatives(expression: str, x: float = 0.0, y: float = 0.0,
                        engine: Optional[ExpressionEngine] = None) -> GradientVector:
    eng = resolve_engine(engine)
    try:
        dfdx = eng.differentiate(expression, "x")
        dfdy = eng.differentiate(expression, "y")
    except Exception as e:
        logger.warning("Could not differentiate %r: %s", expression, e)
        return GradientVector(config.ERROR_MARKER, config.ERROR_MARKER, 0.0, 0.0, 0.0)

    dx = evaluate_field(dfdx, x, y, engine=eng)
    dy = evaluate_field(dfdy, x, y, engine=eng)
    return GradientVector(
        partial_x=dfdx,
        partial_y=dfdy,
        dx=dx,
        dy=dy,
        magnitude=math.hypot(dx, dy),
    )


# ----------------------------
# 4) LIMITS
# ----------------------------
def _directional(engine: ExpressionEngine, expression: str, x: float, y: float,
                 ox: float, oy: float, centre_defined: bool, tolerance: float) -> str:
    v = _try_point(engine, expression, x + ox, y + oy)
    if v is None:
        return config.UNDEFINED_MARKER
    if centre_defined:
        return _fmt(v)

    # the approached point is a hole: confirm the one-sided value converges
    closer = _try_point(engine, expression, x + ox / 10, y + oy / 10)
    if closer is None or abs(closer - v) > tolerance * max(1.0, abs(v)):
        logger.debug("Directional limit of %r at (%g, %g) diverges: %s vs %s", expression, x, y, v, closer)
        return config.UNDEFINED_MARKER
    return _fmt(closer)


def estimate_limits(expression: str, x: float = 0.0, y: float = 0.0,
                    epsilon: float = config.LIMIT_EPSILON,
                    tolerance: float = config.LIMIT_TOLERANCE,
                    engine: Optional[ExpressionEngine] = None) -> LimitEstimate:
    """Finite-perturbation estimate of the limit along each axis.

    This samples f at (x + eps, y) and (x, y + eps); it does not detect
    path dependence, so a finite value may be reported where the true 2D
    limit does not exist.
    """
    eng = resolve_engine(engine)
    approaching = f"({x:g}, {y:g})"
    try:
        centre = _try_point(eng, expression, x, y)
        defined = centre is not None
        along_x = _directional(eng, expression, x, y, epsilon, 0.0, defined, tolerance)
        along_y = _directional(eng, expression, x, y, 0.0, epsilon, defined, tolerance)
    except Exception as e:
        logger.warning("Limit estimation for %r failed: %s", expression, e)
        return LimitEstimate(config.ERROR_MARKER, config.ERROR_MARKER, config.ERROR_MARKER, approaching)

    return LimitEstimate(
        along_x=along_x,
        along_y=along_y,
        at_point=_fmt(centre) if defined else config.UNDEFINED_MARKER,
        approaching_from=approaching,
    )


# ----------------------------
# 5) CRITICAL POINTS
# ----------------------------
def _scan_candidates(X: np.ndarray, Y: np.ndarray, FX: np.ndarray, FY: np.ndarray, Z: np.ndarray,
                     threshold: float, sep_x: float, sep_y: float) -> List[CriticalPoint]:
    with np.errstate(invalid="ignore"):
        mask = np.isfinite(Z) & (np.abs(FX) < threshold) & (np.abs(FY) < threshold)

    accepted: List[CriticalPoint] = []
    # argwhere walks C order: x ascending outer, y ascending inner
    for i, j in np.argwhere(mask):
        cx = float(X[i, j])
        cy = float(Y[i, j])
        if any(abs(p.x - cx) < sep_x and abs(p.y - cy) < sep_y for p in accepted):
            continue
        accepted.append(CriticalPoint(x=round(cx, 3), y=round(cy, 3), value=float(Z[i, j])))
    return accepted


def find_critical_points(expression: str, x_range: RangeLike, y_range: RangeLike,
                         steps: int = config.CRITICAL_STEPS,
                         threshold: float = config.CRITICAL_THRESHOLD,
                         relaxed_threshold: float = config.CRITICAL_RELAXED_THRESHOLD,
                         max_points: int = config.CRITICAL_MAX_POINTS,
                         separation: float = config.CRITICAL_SEPARATION,
                         engine: Optional[ExpressionEngine] = None) -> CriticalPointResult:
    """Grid search for points where both partials are numerically near zero.

    Candidates are accepted greedily in scan order and suppressed within
    ``separation`` grid steps of an earlier one, so close stationary points
    merge into whichever is scanned first. If the strict pass finds nothing
    the grid is rescanned with ``relaxed_threshold``. ``min_value`` and
    ``max_value`` cover every accepted candidate, including those cut by
    ``max_points``.
    """
    eng = resolve_engine(engine)
    try:
        xr, yr = as_range(x_range), as_range(y_range)
        dfdx = eng.differentiate(expression, "x")
        dfdy = eng.differentiate(expression, "y")

        xs = _axis(xr, steps)
        ys = _axis(yr, steps)
        X, Y = np.meshgrid(xs, ys, indexing="ij")

        FX = evaluate_grid(eng, dfdx, X, Y)
        FY = evaluate_grid(eng, dfdy, X, Y)
        Z = evaluate_grid(eng, expression, X, Y)
    except Exception as e:
        logger.warning("Critical point search for %r failed: %s", expression, e)
        return CriticalPointResult(config.ERROR_MARKER, config.ERROR_MARKER)

    step_x = xr.width / steps if steps else 0.0
    step_y = yr.width / steps if steps else 0.0

    accepted: List[CriticalPoint] = []
    used = None
    for thr in (threshold, relaxed_threshold):
        accepted = _scan_candidates(X, Y, FX, FY, Z, thr, separation * step_x, separation * step_y)
        if accepted:
            used = thr
            break

    values = [p.value for p in accepted]
    logger.debug("Critical point search for %r: %d candidate(s) at threshold %s", expression, len(accepted), used)
    return CriticalPointResult(
        gradient_x=dfdx,
        gradient_y=dfdy,
        candidates=accepted[:max_points],
        min_value=min(values) if values else None,
        max_value=max(values) if values else None,
        threshold_used=used,
    )


# ----------------------------
# 6) DOUBLE INTEGRAL
# ----------------------------
def approximate_integral(expression: str, x_range: RangeLike, y_range: RangeLike,
                         subdivisions: int = config.INTEGRAL_SUBDIVISIONS,
                         engine: Optional[ExpressionEngine] = None) -> IntegralResult:
    """Left Riemann sum over the lower-left corner of each cell.

    Non-finite samples are skipped rather than zero-filled, which biases the
    sum toward zero when the field has holes.
    """
    eng = resolve_engine(engine)
    try:
        xr, yr = as_range(x_range), as_range(y_range)
        n = int(subdivisions)
        if n <= 0:
            raise ValueError(f"subdivisions must be positive, got {subdivisions}")

        hx = xr.width / n
        hy = yr.width / n
        xs = xr.min + hx * np.arange(n)
        ys = yr.min + hy * np.arange(n)
        X, Y = np.meshgrid(xs, ys, indexing="ij")
        Z = evaluate_grid(eng, expression, X, Y)
    except Exception as e:
        logger.warning("Integral approximation for %r failed: %s", expression, e)
        return IntegralResult(
            description=f"∫∫ {expression} dA",
            volume=0.0,
            method="Error en cálculo",
        )

    valid = np.isfinite(Z)
    volume = float(np.sum(Z[valid]) * hx * hy)
    return IntegralResult(
        description=f"∫∫ {expression} dA sobre [{xr.min:g}, {xr.max:g}] × [{yr.min:g}, {yr.max:g}]",
        volume=volume,
        method=f"Suma de Riemann con {n}x{n} subdivisiones",
        valid_samples=int(valid.sum()),
    )


def reference_integral(expression: str, x_range: RangeLike, y_range: RangeLike,
                       engine: Optional[ExpressionEngine] = None) -> Tuple[Optional[float], Optional[float]]:
    eng = resolve_engine(engine)
    try:
        xr, yr = as_range(x_range), as_range(y_range)

        def integrand(y, x):
            return float(eng.evaluate(expression, {"x": x, "y": y}))

        val, err = dblquad(integrand, xr.min, xr.max, lambda _: yr.min, lambda _: yr.max)
        return float(val), float(err)
    except Exception as e:
        logger.warning("Reference integral for %r failed: %s", expression, e)
        return None, None


# ----------------------------
# 7) RANGE SAMPLING
# ----------------------------
def sample_field(expression: str, x_range: RangeLike, y_range: RangeLike,
                 samples: int = config.RANGE_SAMPLES,
                 engine: Optional[ExpressionEngine] = None) -> SampledField:
    eng = resolve_engine(engine)
    try:
        xr, yr = as_range(x_range), as_range(y_range)
        X, Y = np.meshgrid(_axis(xr, samples), _axis(yr, samples), indexing="ij")
        Z = evaluate_grid(eng, expression, X, Y)
    except Exception as e:
        logger.warning("Range sampling for %r failed: %s", expression, e)
        return SampledField(min=0.0, max=0.0)

    xf, yf, zf = X.ravel(), Y.ravel(), Z.ravel()
    keep = np.isfinite(zf)
    if not keep.any():
        return SampledField(min=0.0, max=0.0)

    points = [FieldPoint(float(a), float(b), float(c)) for a, b, c in zip(xf[keep], yf[keep], zf[keep])]
    return SampledField(min=float(zf[keep].min()), max=float(zf[keep].max()), points=points)


# ----------------------------
# 8) VALIDATION + DOMAIN/RANGE
# ----------------------------
def validate(expression: str, engine: Optional[ExpressionEngine] = None) -> ValidationResult:
    try:
        simplified = resolve_engine(engine).simplify(expression)
    except Exception as e:
        return ValidationResult(valid=False, simplified=expression, error=f"Error en la expresión: {e}")
    return ValidationResult(valid=True, simplified=simplified)


def estimate_domain_range(expression: str, lattice: Tuple[int, int] = config.DOMAIN_LATTICE,
                          engine: Optional[ExpressionEngine] = None) -> DomainRangeResult:
    eng = resolve_engine(engine)
    lo, hi = lattice
    axis = np.arange(lo, hi + 1, dtype=float)
    X, Y = np.meshgrid(axis, axis, indexing="ij")
    try:
        Z = evaluate_grid(eng, expression, X, Y)
    except Exception as e:
        logger.debug("Domain/range sampling for %r failed: %s", expression, e)
        Z = np.full(X.shape, np.nan)

    finite = Z[np.isfinite(Z)]
    rng = f"[{finite.min():.2f}, {finite.max():.2f}]" if finite.size else "ℝ"
    return DomainRangeResult(
        domain="ℝ² (depende de la función)",
        range=rng,
        domain_description="Depende de los términos en la función (fracciones, raíces, logaritmos)",
        range_description="Valores de z en la malla muestreada",
    )
