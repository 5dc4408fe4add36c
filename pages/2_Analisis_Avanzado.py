# Análisis Avanzado: derivatives, limits, critical points, double integral, range walk
# -----------------------------------------------------------------------------------
# - Every tab calls one paracalc.analysis function with explicit parameters
# - Heavy grid searches are cached per (expression, parameters)
# - Range tab animates a walk over the sampled field (Plotly frames)

from __future__ import annotations

import time

import pandas as pd
import streamlit as st

from paracalc import config
from paracalc.analysis import (
    approximate_integral,
    estimate_domain_range,
    estimate_limits,
    find_critical_points,
    partial_derivatives,
    reference_integral,
    sample_field,
    validate,
)
from paracalc.plots import surface_figure, surface_grid, walk_figure

config.configure_logging()


# ----------------------------
# 0) PAGE CONFIG (MUST BE FIRST)
# ----------------------------
st.set_page_config(page_title="Para-Cálculo • Análisis Avanzado", layout="wide")

st.markdown(
    """
<style>
div[data-testid="stMetric"]{
  background: linear-gradient(180deg, rgba(255,255,255,0.045), rgba(255,255,255,0.018));
  border: 1px solid rgba(255,255,255,0.06);
  border-radius: 14px;
  padding: 14px;
}
.kv { color: rgba(229,231,235,0.80); font-size: 0.92rem; }
.codebox {
  background: rgba(255,255,255,0.04);
  border: 1px solid rgba(255,255,255,0.06);
  border-radius: 14px;
  padding: 12px 14px;
}
.small-muted { color: rgba(229,231,235,0.60); font-size: 0.92rem; }
</style>
""",
    unsafe_allow_html=True,
)


# ----------------------------
# 1) CACHED COMPUTATIONS
# ----------------------------
@st.cache_data(show_spinner=False)
def cached_critical(expr_str: str, lo: float, hi: float, steps: int, threshold: float, relaxed: float):
    return find_critical_points(expr_str, (lo, hi), (lo, hi), steps=steps,
                                threshold=threshold, relaxed_threshold=relaxed)


@st.cache_data(show_spinner=False)
def cached_integral(expr_str: str, x_lo: float, x_hi: float, y_lo: float, y_hi: float, n: int):
    return approximate_integral(expr_str, (x_lo, x_hi), (y_lo, y_hi), subdivisions=n)


@st.cache_data(show_spinner=False)
def cached_reference(expr_str: str, x_lo: float, x_hi: float, y_lo: float, y_hi: float):
    return reference_integral(expr_str, (x_lo, x_hi), (y_lo, y_hi))


@st.cache_data(show_spinner=False)
def cached_samples(expr_str: str, lo: float, hi: float, samples: int):
    return sample_field(expr_str, (lo, hi), (lo, hi), samples=samples)


# ----------------------------
# 2) SIDEBAR
# ----------------------------
st.sidebar.header("Función")
if "expr_shared" not in st.session_state:
    st.session_state.expr_shared = "x^2 + y^2"
st.session_state.expr_adv = st.session_state.expr_shared


def _share_expr():
    st.session_state.expr_shared = st.session_state.expr_adv


expr_str = st.sidebar.text_input("f(x, y)", key="expr_adv", on_change=_share_expr)

st.sidebar.markdown("---")
st.sidebar.subheader("Punto (x₀, y₀)")
c1, c2 = st.sidebar.columns(2)
x0 = c1.number_input("x₀", value=0.0, format="%.4f")
y0 = c2.number_input("y₀", value=0.0, format="%.4f")


# ----------------------------
# 3) HEADER + PARSE (FAIL FAST)
# ----------------------------
st.title("🔬 Análisis Avanzado")
st.caption("Derivadas parciales • Límites • Puntos críticos • Integral doble • Rango")

check = validate(expr_str)
if not check.valid:
    st.error(check.error)
    st.stop()

st.markdown(
    f"<div class='codebox'><div class='kv'><b>f(x,y)</b> = {expr_str}</div>"
    f"<div class='kv'><b>simplificada</b> = {check.simplified}</div></div>",
    unsafe_allow_html=True,
)

tab_der, tab_lim, tab_crit, tab_int, tab_range = st.tabs(
    ["Derivadas", "Límites", "Puntos críticos", "Integral doble", "Rango + recorrido"]
)


# ----------------------------
# 4) DERIVATIVES
# ----------------------------
with tab_der:
    grad = partial_derivatives(expr_str, x0, y0)
    m1, m2, m3 = st.columns(3)
    m1.metric("∂f/∂x", f"{grad.dx:.4f}", grad.partial_x)
    m2.metric("∂f/∂y", f"{grad.dy:.4f}", grad.partial_y)
    m3.metric("|∇f|", f"{grad.magnitude:.4f}", f"({x0:g}, {y0:g})")
    st.latex(r"\nabla f(x,y)=\left(\frac{\partial f}{\partial x},\frac{\partial f}{\partial y}\right)")


# ----------------------------
# 5) LIMITS
# ----------------------------
with tab_lim:
    eps = st.number_input("ε", value=config.LIMIT_EPSILON, format="%.1e", min_value=1e-12)
    lim = estimate_limits(expr_str, x0, y0, epsilon=eps)
    m1, m2, m3 = st.columns(3)
    m1.metric("x → x₀", lim.along_x, f"desde {lim.approaching_from}")
    m2.metric("y → y₀", lim.along_y, f"desde {lim.approaching_from}")
    m3.metric("f(x₀, y₀)", lim.at_point)
    st.info("Aproximación por perturbación de un lado: no detecta dependencia de la trayectoria.")


# ----------------------------
# 6) CRITICAL POINTS
# ----------------------------
with tab_crit:
    cc1, cc2, cc3 = st.columns(3)
    half = cc1.number_input("Ventana ±", value=float(config.CRITICAL_WINDOW[1]), min_value=0.1)
    steps = cc2.slider("Pasos por eje", 20, 200, config.CRITICAL_STEPS, step=10)
    thr = cc3.select_slider("Umbral |∇f|", options=[0.001, 0.005, 0.01, 0.02, 0.05],
                            value=config.CRITICAL_THRESHOLD)

    t0 = time.time()
    crit = cached_critical(expr_str, -half, half, steps, thr, config.CRITICAL_RELAXED_THRESHOLD)
    t1 = time.time()

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Candidatos", f"{len(crit.candidates)}", f"umbral {crit.threshold_used}" if crit.threshold_used else "—")
    m2.metric("Mín", f"{crit.min_value:.6g}" if crit.min_value is not None else "n/a")
    m3.metric("Máx", f"{crit.max_value:.6g}" if crit.max_value is not None else "n/a")
    m4.metric("Tiempo", f"{(t1 - t0):.3f}s")

    st.markdown(
        f"<div class='kv'><b>f_x</b> = {crit.gradient_x} &nbsp; <b>f_y</b> = {crit.gradient_y}</div>",
        unsafe_allow_html=True,
    )
    if crit.candidates:
        dfc = pd.DataFrame([[p.x, p.y, p.value] for p in crit.candidates], columns=["x", "y", "f(x,y)"])
        st.dataframe(dfc, use_container_width=True, hide_index=True)

        view = min(half, config.PLOT_WINDOW[1])
        xs, ys, Z = surface_grid(expr_str, (-view, view), (-view, view), step=max(view / 40, 0.05))
        st.plotly_chart(surface_figure(expr_str, xs, ys, Z, crit.candidates), use_container_width=True)
    else:
        st.info("No se encontraron puntos con gradiente ≈ 0 en la ventana.")


# ----------------------------
# 7) DOUBLE INTEGRAL
# ----------------------------
with tab_int:
    ic1, ic2, ic3, ic4, ic5 = st.columns(5)
    ax = ic1.number_input("x min", value=config.INTEGRAL_WINDOW[0])
    bx = ic2.number_input("x max", value=config.INTEGRAL_WINDOW[1])
    ay = ic3.number_input("y min", value=config.INTEGRAL_WINDOW[0])
    by = ic4.number_input("y max", value=config.INTEGRAL_WINDOW[1])
    n = int(ic5.number_input("Subdivisiones", value=config.INTEGRAL_SUBDIVISIONS, min_value=1, step=5))

    if ax > bx:
        st.warning("Intercambiando límites en x porque x min > x max.")
        ax, bx = bx, ax
    if ay > by:
        st.warning("Intercambiando límites en y porque y min > y max.")
        ay, by = by, ay

    res = cached_integral(expr_str, ax, bx, ay, by, n)
    ref, ref_err = cached_reference(expr_str, ax, bx, ay, by)

    st.markdown(f"**{res.description}**")
    m1, m2, m3 = st.columns(3)
    m1.metric("Volumen (Riemann)", f"{res.volume:.6f}", res.method)
    if ref is not None:
        m2.metric("Referencia (dblquad)", f"{ref:.6f}", f"±{ref_err:.1e}")
    else:
        m2.metric("Referencia (dblquad)", "n/a", "—")
    m3.metric("Muestras válidas", f"{res.valid_samples}", f"de {n * n}")
    st.latex(r"\iint_R f(x,y)\,dA \approx \sum_{i=0}^{n-1}\sum_{j=0}^{n-1} f(x_i,y_j)\,\Delta x\,\Delta y")


# ----------------------------
# 8) RANGE + ANIMATED WALK
# ----------------------------
with tab_range:
    dr = estimate_domain_range(expr_str)
    m1, m2 = st.columns(2)
    m1.metric("Dominio", dr.domain)
    m2.metric("Rango (muestreo)", dr.range)
    st.markdown(f"<div class='small-muted'>{dr.domain_description} • {dr.range_description}</div>",
                unsafe_allow_html=True)

    rc1, rc2, rc3 = st.columns(3)
    r_half = rc1.number_input("Ventana ± ", value=float(config.PLOT_WINDOW[1]), min_value=0.1)
    samples = rc2.slider("Muestras por eje", 10, 100, config.RANGE_SAMPLES, step=5)
    frame_ms = rc3.slider("Cadencia (ms)", 20, 500, 80, step=10)

    sampled = cached_samples(expr_str, -r_half, r_half, samples)
    st.plotly_chart(walk_figure(expr_str, sampled, frame_ms=frame_ms), use_container_width=True)

    with st.expander("Muestras", expanded=False):
        st.dataframe(sampled.to_frame(), use_container_width=True, hide_index=True)
