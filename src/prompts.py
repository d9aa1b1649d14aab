"""
LLM prompt templates for the convergence assessment.

SYSTEM_INSTRUCTION is sent with every request. build_setup_prompt() renders
the user's setup; it is a pure function so identical setups give
byte-identical prompts.
"""

from state import SimulationSetup

NOT_SPECIFIED = "Not specified."

SYSTEM_INSTRUCTION = """\
You are a world-class CFD (Computational Fluid Dynamics) Convergence Advisor. Your role is to analyze a user's simulation setup and provide a structured assessment of its convergence likelihood. You must be precise, practical, and adhere strictly to the requested output format.

Key principles to follow:
1.  Analyze the provided Reynolds number to determine the flow regime (laminar, transitional, turbulent) and ensure the chosen turbulence model is appropriate.
2.  Assume the flow is incompressible unless explicitly stated otherwise.
3.  If wall functions are mentioned or implied, always include a reminder about maintaining consistent y+ targets in your recommendations or checklist.
4.  Be vigilant for common CFD pitfalls: short simulation domains, inconsistent boundary conditions (e.g., mass imbalance), unstable numerical schemes (e.g., high Courant numbers), and poor mesh quality (high skewness, non-orthogonality).
5.  Your response must be a JSON object that validates against the provided schema. Do not add any extra text, explanations, or markdown formatting outside of the JSON structure.
6.  Generate 3-7 items for 'Potential Issues' and 'Recommendations', and at least 3 items for 'Quick Checklist'.
"""

PROMPT_ASSESS_SETUP = """\
Analyze the convergence likelihood for the following CFD setup:
- Geometry: {geometry}
- Characteristic Velocity: {velocity}
- Characteristic Length: {characteristic_length}
- Fluid Density: {density}
- Dynamic Viscosity: {viscosity}
- Reynolds Number: {reynolds_number}
- Turbulence Model: {turbulence_model}
- Mesh Details: {mesh_details}
- y+ Range: {y_plus}
- Numerics: {numerics}
- Domain Extents: {domain_extents}
- Other notes: Please consider potential issues related to boundary conditions, numerical schemes, and mesh quality, even if not fully specified. Use the flow regime implied by the Reynolds number when judging the turbulence model and near-wall resolution.
"""


def _value(text: str, unit: str = "") -> str:
    """Trimmed value with its unit, or the not-specified marker."""
    text = text.strip()
    if not text:
        return NOT_SPECIFIED
    return f"{text} {unit}" if unit else text


def build_setup_prompt(setup: SimulationSetup, reynolds_number: str) -> str:
    """
    Render a setup as the user message for the advisor model.

    Args:
        setup: A submittable SimulationSetup (required fields non-empty).
        reynolds_number: Output of units.format_reynolds_number().

    Returns:
        The prompt text, trimmed.
    """
    prompt = PROMPT_ASSESS_SETUP.format(
        geometry=_value(setup.geometry),
        velocity=_value(setup.velocity, "m/s"),
        characteristic_length=_value(setup.characteristic_length, "m"),
        density=_value(setup.density, "kg/m^3"),
        viscosity=_value(setup.viscosity, "Pa.s"),
        reynolds_number=reynolds_number,
        turbulence_model=_value(setup.resolved_turbulence_model),
        mesh_details=_value(setup.mesh_details),
        y_plus=_value(setup.y_plus),
        numerics=_value(setup.numerics),
        domain_extents=_value(setup.domain_extents),
    )
    return prompt.strip()
