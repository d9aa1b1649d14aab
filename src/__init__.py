"""
CFD Convergence Advisor.

Collects a CFD simulation setup, derives the Reynolds number, and asks an
LLM for a structured convergence-likelihood assessment.

Modules:
- units.py: Reynolds number from raw form strings
- prompts.py: System instruction and setup prompt assembly
- schemas.py: Assessment model and the JSON response schema
- llm.py: AssessmentClient (async, single-flight, strict JSON output)
- state.py: SimulationSetup, SessionState, Phase
- workflow.py: Request pipeline and AdvisorSession state machine
- config.py: Immutable AppConfig, PathConfig, LLMConfig, FluidDefaults
- report.py: Text/Markdown rendering of an assessment
- main.py: CLI and programmatic entry points
- app.py: Streamlit front end
"""

from state import SimulationSetup, SessionState, Phase
from schemas import Assessment, Likelihood, parse_assessment
from config import AppConfig, ConfigurationError, load_config
from llm import AssessmentClient, AssessmentError, SubmissionInProgressError
from units import format_reynolds_number, reynolds_number
from prompts import build_setup_prompt
from workflow import AdvisorSession, IncompleteSetupError, prepare_request, run_assessment
from main import assess_setup

__all__ = [
    # State
    "SimulationSetup",
    "SessionState",
    "Phase",
    # Schema
    "Assessment",
    "Likelihood",
    "parse_assessment",
    # Config
    "AppConfig",
    "ConfigurationError",
    "load_config",
    # LLM
    "AssessmentClient",
    "AssessmentError",
    "SubmissionInProgressError",
    # Pipeline
    "format_reynolds_number",
    "reynolds_number",
    "build_setup_prompt",
    "AdvisorSession",
    "IncompleteSetupError",
    "prepare_request",
    "run_assessment",
    # Main
    "assess_setup",
]
