"""
Shared test fixtures and utilities for the advisor tests.

This module provides:
- Shared fixtures for config, setups and assessments
- Temporary directory fixtures
- Mock OpenAI client fixtures (no test ever reaches a real endpoint)
"""

import os
import sys
import json
import shutil
import tempfile
import pytest
from unittest.mock import Mock, MagicMock, AsyncMock, patch

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# Sample Data
# =============================================================================

SAMPLE_ASSESSMENT = {
    "overallLikelihood": {
        "level": "Medium",
        "reason": "Turbulent regime with a plausible model, but the domain is short.",
    },
    "potentialIssues": [
        "Outlet is only 5D downstream; the wake will hit the boundary.",
        "Mesh skewness above 0.9 near the separation point.",
        "Second-order upwind from the first iteration may oscillate.",
    ],
    "recommendations": [
        "Extend the outlet to at least 20D downstream.",
        "Start with first-order schemes, then switch to second order.",
        "Target y+ < 1 for k-omega SST without wall functions.",
    ],
    "quickChecklist": [
        "Mass flow in equals mass flow out",
        "Residuals below 1e-4",
        "Drag coefficient has stopped drifting",
    ],
}


def make_completion(content: str, prompt_tokens: int | None = 120, completion_tokens: int = 80) -> Mock:
    """Build a chat-completions result as returned by the OpenAI SDK."""
    completion = Mock()
    completion.choices = [Mock(message=Mock(content=content))]
    if prompt_tokens is None:
        completion.usage = None
    else:
        completion.usage = Mock(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
    return completion


# =============================================================================
# Fixtures: Temporary Files and Directories
# =============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmpdir = tempfile.mkdtemp(prefix="advisor_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


# =============================================================================
# Fixtures: Config
# =============================================================================

@pytest.fixture
def mock_llm_config():
    """Create an LLMConfig for testing."""
    from config import LLMConfig
    return LLMConfig(
        api_key="test-key",
        base_url="https://test.api.com",
        model="test-model",
        temperature=0.2,
        timeout_seconds=5.0,
    )


@pytest.fixture
def mock_app_config(mock_llm_config, temp_dir):
    """Create an AppConfig rooted in a temp directory."""
    from config import AppConfig, PathConfig
    return AppConfig(
        paths=PathConfig.from_defaults(root_dir=temp_dir),
        llm=mock_llm_config,
    )


# =============================================================================
# Fixtures: Setups
# =============================================================================

@pytest.fixture
def cylinder_setup():
    """The cylinder-in-water setup used across the pipeline tests."""
    from state import SimulationSetup
    return SimulationSetup(
        geometry="cylinder",
        velocity="10",
        characteristic_length="0.1",
        density="998.2",
        viscosity="0.001002",
    )


@pytest.fixture
def full_setup():
    """A setup with every optional field filled in."""
    from state import SimulationSetup
    return SimulationSetup(
        geometry="NACA 0012 airfoil at 4 deg AoA",
        velocity="50",
        characteristic_length="1",
        density="1.225",
        viscosity="1.81e-5",
        turbulence_model="Spalart-Allmaras (RANS)",
        mesh_details="C-mesh, 200k hex cells, max skewness 0.6",
        y_plus="<1",
        numerics="SIMPLE, second-order upwind",
        domain_extents="20c in every direction",
    )


# =============================================================================
# Fixtures: Assessments
# =============================================================================

@pytest.fixture
def sample_assessment_json():
    return json.dumps(SAMPLE_ASSESSMENT)


@pytest.fixture
def sample_assessment():
    from schemas import Assessment
    return Assessment.model_validate(SAMPLE_ASSESSMENT)


# =============================================================================
# Fixtures: LLM
# =============================================================================

@pytest.fixture
def mock_openai_client(sample_assessment_json):
    """Create a mock AsyncOpenAI client returning the sample assessment."""
    mock_client = Mock()
    mock_client.chat.completions.create = AsyncMock(
        return_value=make_completion(sample_assessment_json)
    )
    mock_client.close = AsyncMock()
    return mock_client


@pytest.fixture
def assessment_client(mock_llm_config, mock_openai_client):
    """Create an AssessmentClient wired to the mock OpenAI client."""
    with patch('llm.AsyncOpenAI', return_value=mock_openai_client):
        from llm import AssessmentClient
        client = AssessmentClient(mock_llm_config)
    return client


@pytest.fixture
def stub_client(sample_assessment):
    """A stand-in for AssessmentClient: submit() resolves to the sample assessment."""
    client = MagicMock()
    client.submit = AsyncMock(return_value=sample_assessment)
    return client


@pytest.fixture
def completion_factory():
    """Factory for mock chat-completions results: completion_factory(content, prompt_tokens=...)."""
    return make_completion


@pytest.fixture
def sample_assessment_data():
    """A fresh copy of the sample assessment wire dict."""
    return json.loads(json.dumps(SAMPLE_ASSESSMENT))
