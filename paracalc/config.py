# config.py
# Numeric defaults + logging setup shared by the analyzer and the Streamlit pages
# -----------------------------------------------------------------------------
# Every constant below is the default of a keyword parameter somewhere in
# paracalc.analysis; pages and callers override them per call.

from __future__ import annotations

import logging
import os
from typing import Optional, Tuple


# ----------------------------
# 1) LIMITS
# ----------------------------
LIMIT_EPSILON = 1e-4
LIMIT_TOLERANCE = 1e-3


# ----------------------------
# 2) CRITICAL POINTS
# ----------------------------
CRITICAL_STEPS = 100
CRITICAL_THRESHOLD = 0.01
CRITICAL_RELAXED_THRESHOLD = 0.05
CRITICAL_MAX_POINTS = 8
CRITICAL_SEPARATION = 3


# ----------------------------
# 3) INTEGRAL + SAMPLING
# ----------------------------
INTEGRAL_SUBDIVISIONS = 20
RANGE_SAMPLES = 50
DOMAIN_LATTICE: Tuple[int, int] = (-10, 10)


# ----------------------------
# 4) ANALYSIS WINDOWS (used by the pages)
# ----------------------------
CRITICAL_WINDOW: Tuple[float, float] = (-10.0, 10.0)
INTEGRAL_WINDOW: Tuple[float, float] = (-5.0, 5.0)
PLOT_WINDOW: Tuple[float, float] = (-5.0, 5.0)
PLOT_STEP = 0.5


# ----------------------------
# 5) MARKERS
# ----------------------------
ERROR_MARKER = "Error"
UNDEFINED_MARKER = "Indefinido"


# ----------------------------
# 6) LOGGING
# ----------------------------
LOG_LEVEL_ENV = "PARACALC_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    name = (level or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        numeric = logging.WARNING

    root = logging.getLogger("paracalc")
    root.setLevel(numeric)
    # Streamlit re-executes the page script on every interaction
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
