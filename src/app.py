"""
Streamlit front end: the setup form and the assessment report.

Run with:
    streamlit run src/app.py
"""

import asyncio

import streamlit as st

from config import AppConfig, ConfigurationError, load_config
from main import create_client
from report import render_markdown
from state import OTHER_TURBULENCE_MODEL, Phase, TURBULENCE_MODELS
from workflow import AdvisorSession

DENSITY_HELP = "Reference values: water ~998 kg/m³, air (sea level) ~1.225 kg/m³."
VISCOSITY_HELP = (
    "Dynamic viscosity in Pascal-seconds (Pa·s). 1 cP = 0.001 Pa·s. "
    "Water (20°C) ≈ 0.001 Pa·s, air (20°C) ≈ 1.81e-5 Pa·s."
)
Y_PLUS_HELP = (
    "< 1: required for y+-sensitive models (e.g., k-ω SST) to resolve the viscous sublayer. "
    "30 - 300: suitable for models using wall functions (e.g., standard k-ε)."
)


def initialize_session_state():
    if "session" not in st.session_state:
        try:
            config = load_config()
        except ConfigurationError as e:
            st.error(f"Configuration error: {e}")
            st.stop()
        st.session_state.config = config
        st.session_state.session = AdvisorSession()
        st.session_state.last_usage = None

    # Widget values live under "setup.<field>" and are seeded from the session's record
    setup = st.session_state.session.setup
    for name in setup.field_names():
        st.session_state.setdefault(f"setup.{name}", getattr(setup, name))


async def analyze(session: AdvisorSession, config: AppConfig) -> str:
    """Run one analysis on a fresh client and return its usage summary."""
    # The async HTTP pool is bound to its event loop; each asyncio.run() gets a new one
    async with create_client(config) as client:
        session.client = client
        await session.analyze()
    return client.stats.summary()


def render_form(session: AdvisorSession) -> bool:
    """Draw the setup form, push edits into the session, return whether Analyze was clicked."""
    st.subheader("Simulation Setup")

    st.text_input(
        "Geometry Description *", key="setup.geometry",
        placeholder="e.g., Flow over a cylinder, NACA 0012 airfoil",
    )
    col1, col2 = st.columns(2)
    with col1:
        st.text_input("Velocity (m/s) *", key="setup.velocity", placeholder="e.g., 10")
        st.text_input(
            "Density (kg/m³)", key="setup.density", placeholder="e.g., 998.2 for water", help=DENSITY_HELP,
        )
        st.text_input("y+ range", key="setup.y_plus", placeholder="e.g., <1 or 30-300", help=Y_PLUS_HELP)
    with col2:
        st.text_input(
            "Characteristic Length (m) *", key="setup.characteristic_length",
            placeholder="e.g., Cylinder diameter",
        )
        st.text_input(
            "Viscosity (Pa·s)", key="setup.viscosity", placeholder="e.g., 0.001002 for water",
            help=VISCOSITY_HELP,
        )

    model = st.selectbox("Turbulence Model", TURBULENCE_MODELS, key="setup.turbulence_model")
    if model == OTHER_TURBULENCE_MODEL:
        st.text_input(
            "Specify Model *", key="setup.custom_turbulence_model",
            placeholder="e.g., Reynolds Stress Model (RSM)",
        )
    st.text_area(
        "Mesh Details", key="setup.mesh_details", height=90,
        placeholder="Describe mesh type, cell count, skewness, etc.",
    )
    st.text_input("Numerics (scheme, Co)", key="setup.numerics", placeholder="e.g., SIMPLE, Upwind, Co < 1")
    st.text_input(
        "Domain Extents", key="setup.domain_extents", placeholder="e.g., 5D upstream, 10D downstream",
    )

    for name in session.setup.field_names():
        session.update_field(name, st.session_state.get(f"setup.{name}", ""))

    st.caption("* Required fields")
    return st.button(
        "Analyze Convergence",
        type="primary",
        use_container_width=True,
        disabled=not session.can_submit,
    )


def render_report(session: AdvisorSession):
    state = session.state

    if state.phase is Phase.FAILED:
        st.error(state.error)
        return

    if state.assessment is None:
        st.info("Awaiting analysis. Your assessment report will appear here.")
        return

    assessment = state.assessment
    st.markdown(render_markdown(assessment, include_checklist=False))
    if state.reynolds_number:
        st.caption(f"Reynolds number: {state.reynolds_number}")

    st.markdown("### Quick Checklist")
    # Keyed per submission so ticks do not carry over to the next report
    for index, item in enumerate(assessment.quick_checklist):
        st.checkbox(item, key=f"checklist-{session.submissions}-{index}")

    if st.session_state.get("last_usage"):
        st.caption(f"LLM usage: {st.session_state.last_usage}")


def main():
    st.set_page_config(page_title="CFD Convergence Advisor", layout="wide")
    st.title("CFD Convergence Advisor")
    st.write("Describe your simulation setup to get an AI-powered analysis of its convergence potential.")

    initialize_session_state()
    session: AdvisorSession = st.session_state.session

    left, right = st.columns(2)
    with left:
        clicked = render_form(session)

    with right:
        if clicked:
            with st.spinner("Analyzing..."):
                st.session_state.last_usage = asyncio.run(analyze(session, st.session_state.config))
        render_report(session)

    st.divider()
    st.caption("Powered by a large language model. For educational and advisory purposes only.")


if __name__ == "__main__":
    main()
