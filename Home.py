import streamlit as st

from paracalc.config import configure_logging

configure_logging()

# ------------------------------------------------------------
# 1) CONFIGURAÇÃO DA PÁGINA
# ------------------------------------------------------------
st.set_page_config(
    page_title="Para-Cálculo",
    page_icon="📈",
    layout="wide"
)

# ------------------------------------------------------------
# 2) ESTILO (CSS)
# ------------------------------------------------------------
st.markdown(
    """
<style>
:root {
  --bg: #0e1117;
  --border: rgba(255,255,255,0.1);
  --muted: rgba(229,231,235,0.70);
  --muted2: rgba(229,231,235,0.40);
  --accent: #FF4B4B;
  --accent2: #1E90FF;
}

.stApp { background-color: var(--bg); }

.hero-section {
    padding: 4rem 2rem;
    background: radial-gradient(circle at top left, rgba(255,75,75,0.1), transparent),
                radial-gradient(circle at bottom right, rgba(30,144,255,0.1), transparent);
    border-radius: 24px;
    border: 1px solid var(--border);
    margin-bottom: 3rem;
    text-align: center;
}

.title-text {
    font-size: 4rem;
    font-weight: 800;
    letter-spacing: -2px;
    margin-bottom: 0.5rem;
    color: #FFFFFF;
}

.feature-card {
    background: rgba(255,255,255,0.03);
    border: 1px solid var(--border);
    border-radius: 16px;
    padding: 24px;
    height: 100%;
}

.card-icon { font-size: 2rem; margin-bottom: 15px; }
.card-title { color: #FFFFFF; font-size: 1.3rem; font-weight: 700; margin-bottom: 12px; }

.info-box {
    background: rgba(30,144,255,0.05);
    border-left: 4px solid var(--accent2);
    padding: 20px;
    border-radius: 0 12px 12px 0;
}

.hr {
    border: none;
    border-top: 1px solid var(--border);
    margin: 3rem 0;
}

.footer {
    text-align: center;
    color: var(--muted2);
    margin-top: 5rem;
    padding-bottom: 3rem;
    font-size: 0.9rem;
}

code { color: var(--accent) !important; }
</style>
""",
    unsafe_allow_html=True,
)

# ------------------------------------------------------------
# 3) HERO SECTION
# ------------------------------------------------------------
st.markdown(
    """
    <div class="hero-section">
        <h1 class="title-text">PARA-CÁLCULO</h1>
        <p style="color: var(--muted); font-size: 1.3rem; max-width: 800px; margin: 0 auto; line-height: 1.6;">
            Grafica funciones f(x, y) en 3D y explora derivadas parciales, límites,
            puntos críticos e integrales dobles de forma numérica.
        </p>
    </div>
    """,
    unsafe_allow_html=True,
)

# ------------------------------------------------------------
# 4) MÓDULOS
# ------------------------------------------------------------
st.markdown("### 🛠️ Módulos")
c1, c2, c3 = st.columns(3)

with c1:
    st.markdown(
        """
        <div class="feature-card">
            <div class="card-icon">🗻</div>
            <div class="card-title">Superficie 3D</div>
            <p style="color: var(--muted); font-size: 0.95rem;">
                Escribe f(x, y), rota la superficie y calcula ∂f/∂x y ∂f/∂y en un punto.
            </p>
        </div>
        """, unsafe_allow_html=True
    )

with c2:
    st.markdown(
        """
        <div class="feature-card">
            <div class="card-icon">🎯</div>
            <div class="card-title">Puntos Críticos</div>
            <p style="color: var(--muted); font-size: 0.95rem;">
                Búsqueda en malla de puntos con gradiente ≈ 0, con supresión de vecinos cercanos.
            </p>
        </div>
        """, unsafe_allow_html=True
    )

with c3:
    st.markdown(
        """
        <div class="feature-card">
            <div class="card-icon">∬</div>
            <div class="card-title">Integral Doble</div>
            <p style="color: var(--muted); font-size: 0.95rem;">
                Suma de Riemann sobre un rectángulo, comparada con una referencia adaptativa (SciPy).
            </p>
        </div>
        """, unsafe_allow_html=True
    )

st.markdown("<div class='hr'></div>", unsafe_allow_html=True)

# ------------------------------------------------------------
# 5) SINTAXIS
# ------------------------------------------------------------
col_steps, col_syntax = st.columns([1, 1], gap="large")

with col_steps:
    st.markdown("### 🧭 ¿Perdido? Sigue estos pasos")
    st.markdown(
        """
        1. Escribe una función de dos variables usando **x** e **y**.
        2. Abre **Superficie 3D** para ver la gráfica.
        3. Abre **Análisis Avanzado** para derivadas, límites, puntos críticos e integrales.
        4. Rota, acerca y explora la función con los controles de Plotly.
        """
    )

with col_syntax:
    st.markdown("### ⌨️ Guía de sintaxis")
    st.code("""
# Potencia: x^2  o  x**2
# Constantes: pi, e
# Funciones: sin, cos, tan, exp, log, sqrt, abs
# Ejemplos: x^2 + y^2, sin(x)*cos(y), x*y
    """, language="python")

st.markdown(
    """
    <div class="info-box">
        <strong>Aviso:</strong> todos los resultados son aproximaciones numéricas por muestreo.
        Un valor 0 puede indicar que la función no se pudo evaluar en ese punto.
    </div>
    """, unsafe_allow_html=True
)

# ------------------------------------------------------------
# 6) RODAPÉ
# ------------------------------------------------------------
st.markdown(
    """
    <div class='footer'>
        <strong>Para-Cálculo</strong> • SymPy • NumPy • Plotly
    </div>
    """,
    unsafe_allow_html=True
)

st.sidebar.title("Navegación")
st.sidebar.info("Accede a los módulos desde el menú de arriba.")
