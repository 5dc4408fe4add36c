# Superficie 3D: surface plot + partial derivatives at a point
# ------------------------------------------------------------
# - Expression typed in the sidebar (mathjs-style "^" accepted)
# - Plotly surface with rotate/zoom/pan
# - Symbolic ∂f/∂x, ∂f/∂y evaluated at the chosen point

from __future__ import annotations

import streamlit as st

from paracalc import config
from paracalc.analysis import partial_derivatives, validate
from paracalc.plots import surface_figure, surface_grid

config.configure_logging()


# ----------------------------
# 0) PAGE CONFIG (MUST BE FIRST)
# ----------------------------
st.set_page_config(page_title="Para-Cálculo • Superficie 3D", layout="wide")

st.markdown(
    """
<style>
div[data-testid="stMetric"]{
  background: linear-gradient(180deg, rgba(255,255,255,0.045), rgba(255,255,255,0.018));
  border: 1px solid rgba(255,255,255,0.06);
  border-radius: 14px;
  padding: 14px;
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
def cached_grid(expr_str: str, lo: float, hi: float, step: float):
    return surface_grid(expr_str, (lo, hi), (lo, hi), step)


@st.cache_data(show_spinner=False)
def cached_gradient(expr_str: str, x0: float, y0: float):
    return partial_derivatives(expr_str, x0, y0)


# ----------------------------
# 2) SIDEBAR
# ----------------------------
st.sidebar.header("Función")

examples = {
    "Paraboloide (default)": "x^2 + y^2",
    "Ondas": "sin(x)*cos(y)",
    "Silla": "x*y",
    "Campana": "exp(-(x^2 + y^2))",
}

if "example_3d" not in st.session_state:
    st.session_state.example_3d = "Paraboloide (default)"
if "expr_shared" not in st.session_state:
    st.session_state.expr_shared = examples[st.session_state.example_3d]
# widget keys are dropped when the page is left; restore from the shared key
st.session_state.expr_3d = st.session_state.expr_shared


def _sync_example():
    st.session_state.expr_3d = examples[st.session_state.example_3d]
    st.session_state.expr_shared = st.session_state.expr_3d


def _share_expr():
    st.session_state.expr_shared = st.session_state.expr_3d


st.sidebar.selectbox("Ejemplos", list(examples.keys()), key="example_3d", on_change=_sync_example)
expr_str = st.sidebar.text_input("f(x, y)", key="expr_3d", on_change=_share_expr)

st.sidebar.markdown("---")
st.sidebar.subheader("Vista")
half = st.sidebar.slider("Ventana ±", 1.0, 20.0, float(config.PLOT_WINDOW[1]), step=0.5)
step = st.sidebar.select_slider("Paso de malla", options=[0.05, 0.1, 0.25, 0.5, 1.0], value=config.PLOT_STEP)

st.sidebar.markdown("---")
st.sidebar.subheader("Punto de evaluación")
c1, c2 = st.sidebar.columns(2)
x0 = c1.number_input("x₀", value=0.0, format="%.4f")
y0 = c2.number_input("y₀", value=0.0, format="%.4f")


# ----------------------------
# 3) HEADER + PARSE (FAIL FAST)
# ----------------------------
st.title("🗻 Superficie 3D")
st.caption("Grafica tus funciones y calcula sus derivadas parciales de manera interactiva.")

check = validate(expr_str)
if not check.valid:
    st.error(check.error)
    st.stop()


# ----------------------------
# 4) METRICS + PLOT
# ----------------------------
grad = cached_gradient(expr_str, x0, y0)

m1, m2, m3, m4 = st.columns([1.3, 1.0, 1.0, 1.0])
m1.metric("Simplificada", check.simplified)
m2.metric("∂f/∂x", f"{grad.dx:.4f}", grad.partial_x)
m3.metric("∂f/∂y", f"{grad.dy:.4f}", grad.partial_y)
m4.metric("|∇f|", f"{grad.magnitude:.4f}", f"en ({x0:g}, {y0:g})")

xs, ys, Z = cached_grid(expr_str, -half, half, step)
fig = surface_figure(expr_str, xs, ys, Z)
fig.update_layout(height=600)
st.plotly_chart(fig, use_container_width=True)

st.markdown(
    "<div class='small-muted'>Las celdas donde f no está definida quedan vacías en la superficie.</div>",
    unsafe_allow_html=True,
)
