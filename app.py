import streamlit as st
from st_aggrid import AgGrid

from census_scatter.chart import Viewport
from census_scatter.controller import handle_resize, select_x_metric, select_y_metric
from census_scatter.metrics import INFO_PANELS, METRICS, NUMERIC_COLUMNS, X_METRICS, Y_METRICS
from census_scatter.render import PlotlyRenderer
from census_scatter.settings import configure_logging, load_settings

settings = load_settings()
configure_logging(settings.log_level)

# --------------------------------------------------
# Page Config
# --------------------------------------------------
st.set_page_config(
    page_title="Census Health Risks | Scatter",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# --------------------------------------------------
# CSS
# --------------------------------------------------
def load_css():
    try:
        with open("assets/styles.css") as f:
            st.markdown(f"<style>{f.read()}</style>", unsafe_allow_html=True)
    except FileNotFoundError:
        pass

    st.markdown("""
    <style>
    .info-card {
        background: #ffffff;
        padding: 18px 22px;
        border-radius: 6px;
        border: 1px solid #e1e4e8;
        border-left: 4px solid #89bdd3;
        margin-bottom: 18px;
        font-family: system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial;
        color: #333;
    }
    .info-card h4 { margin: 0 0 6px 0; }
    </style>
    """, unsafe_allow_html=True)

load_css()

# --------------------------------------------------
# Header
# --------------------------------------------------
st.markdown("""
<section class="hero">
    <h1>Health Risks by State</h1>
    <div class="accent-line"></div>
    <p>
        Poverty, age and household income against obesity across US states.
        Source: US Census Bureau ACS 5-year estimates and BRFSS.
    </p>
</section>
""", unsafe_allow_html=True)

# --------------------------------------------------
# Viewport (rebuilds the chart when it changes)
# --------------------------------------------------
with st.sidebar:
    st.markdown("**Viewport**")
    viewport = Viewport(
        width=st.number_input("Width (px)", min_value=0, value=settings.viewport_width, step=10),
        height=st.number_input("Height (px)", min_value=0, value=settings.viewport_height, step=10),
    )

session = st.session_state.get("chart_session")
if session is None or session.viewport != viewport:
    session = handle_resize(session, viewport, PlotlyRenderer, settings=settings)
    st.session_state.chart_session = session
    if session is not None:
        st.session_state.x_metric = session.x_metric
        st.session_state.y_metric = session.y_metric

# Load failures are logged by the builder; the page just stays empty.
if session is None:
    st.stop()

# --------------------------------------------------
# Axis Controls
# --------------------------------------------------
def on_x_change():
    select_x_metric(st.session_state.chart_session, st.session_state.x_metric)

def on_y_change():
    select_y_metric(st.session_state.chart_session, st.session_state.y_metric)

col_x, col_y = st.columns([3, 1])
with col_x:
    st.radio(
        "X axis",
        options=list(X_METRICS),
        format_func=lambda m: METRICS[m].axis_title,
        horizontal=True,
        key="x_metric",
        on_change=on_x_change,
    )
if settings.y_selector:
    with col_y:
        st.radio(
            "Y axis",
            options=list(Y_METRICS),
            format_func=lambda m: METRICS[m].axis_title,
            horizontal=True,
            key="y_metric",
            on_change=on_y_change,
        )

# --------------------------------------------------
# Info Panel (exactly one visible)
# --------------------------------------------------
panel = INFO_PANELS.get(session.active_panel or "")
if panel:
    st.markdown(f"""
    <div class="info-card" id="{session.active_panel}">
        <h4>{panel["title"]}</h4>
        <p>{panel["body"]}</p>
    </div>
    """, unsafe_allow_html=True)

# --------------------------------------------------
# Scatter Plot
# --------------------------------------------------
chart_slot = st.empty()
session.renderer.play(chart_slot, frame_count=settings.frame_count)

# --------------------------------------------------
# Our Data
# --------------------------------------------------
with st.expander("Our Data"):
    table = session.dataset[["state", "abbr", *NUMERIC_COLUMNS]]
    AgGrid(table, fit_columns_on_grid_load=True)
    st.download_button(
        label="Download Dataset (CSV)",
        data=table.to_csv(index=False).encode("utf-8"),
        file_name="census_health_risks.csv",
        mime="text/csv",
    )
