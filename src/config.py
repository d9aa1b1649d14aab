"""
AppConfig: Immutable application configuration.

This module contains ONLY static configuration that doesn't change during a session.
Per-session state (the form, the last assessment) belongs in SessionState (see state.py).

Design principles:
- Frozen dataclasses prevent accidental mutation
- Configuration loaded once at startup
- Environment variables override config file values
- A missing API key is fatal at startup, never a runtime surprise
"""

import os
import json
from dataclasses import dataclass, field

from logging_utils import get_logger

logger = get_logger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True)
class PathConfig:
    """Immutable path configuration."""
    root_dir: str
    src_dir: str
    inputs_dir: str
    logs_dir: str

    @classmethod
    def from_defaults(cls, root_dir: str | None = None) -> "PathConfig":
        """Create PathConfig with default paths based on root directory."""
        src_dir = os.path.dirname(os.path.abspath(__file__))
        if root_dir is None:
            root_dir = os.path.dirname(src_dir)

        return cls(
            root_dir=root_dir,
            src_dir=src_dir,
            inputs_dir=os.path.join(root_dir, "inputs"),
            logs_dir=os.path.join(root_dir, "logs"),
        )


@dataclass(frozen=True)
class LLMConfig:
    """Immutable LLM configuration."""
    api_key: str
    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "google/gemini-2.5-flash"
    temperature: float = 0.2
    timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> "LLMConfig":
        """
        Create LLMConfig from environment variables.

        Raises:
            ConfigurationError: If OPENAI_API_KEY is unset or a numeric value is malformed.
        """
        api_key = os.environ.get("OPENAI_API_KEY", "")
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY environment variable not set")

        try:
            temperature = float(os.environ.get("ADVISOR_TEMPERATURE") or "0.2")
            timeout_seconds = float(os.environ.get("ADVISOR_TIMEOUT") or "60")
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric LLM setting: {e}") from e

        if timeout_seconds <= 0:
            raise ConfigurationError("ADVISOR_TIMEOUT must be positive")

        return cls(
            api_key=api_key,
            base_url=os.environ.get("OPENAI_BASE_URL") or "https://openrouter.ai/api/v1",
            model=os.environ.get("ADVISOR_MODEL_NAME") or "google/gemini-2.5-flash",
            temperature=temperature,
            timeout_seconds=timeout_seconds,
        )


@dataclass(frozen=True)
class FluidDefaults:
    """Form defaults: reference fluid properties and the turbulence model choices."""

    # Water at ~20 C
    density: str = "998.2"       # kg/m^3
    viscosity: str = "0.001002"  # Pa.s

    turbulence_models: tuple[str, ...] = field(default_factory=lambda: (
        "k-epsilon (RANS)",
        "k-omega SST (RANS)",
        "Spalart-Allmaras (RANS)",
        "Large Eddy Simulation (LES)",
        "Detached Eddy Simulation (DES)",
        "Direct Numerical Simulation (DNS)",
        "Other",
    ))
    default_turbulence_model: str = "k-omega SST (RANS)"
    other_turbulence_model: str = "Other"


@dataclass(frozen=True)
class AppConfig:
    """
    Complete immutable application configuration.

    Create once at startup and pass to functions that need it.
    """
    paths: PathConfig
    llm: LLMConfig
    fluid: FluidDefaults = FluidDefaults()

    # Write a JSONL record of every request/response pair
    log_requests: bool = False


def load_config(config_path: str | None = None) -> AppConfig:
    """
    Load configuration from JSON file and environment variables.

    Priority: Environment variables > Config file > Defaults

    Args:
        config_path: Path to JSON config file. If None, uses default location.

    Returns:
        Immutable AppConfig instance.

    Raises:
        ConfigurationError: If no API key can be found.
    """
    paths = PathConfig.from_defaults()

    if config_path is None:
        config_path = os.path.join(paths.inputs_dir, "advisor_config.json")

    # Load from JSON if exists
    config_data = {}
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")

    # Set environment variables from config (env vars take priority)
    for key in (
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "ADVISOR_MODEL_NAME",
        "ADVISOR_TEMPERATURE",
        "ADVISOR_TIMEOUT",
    ):
        _set_env_if_not_exists(key, str(config_data.get(key, "")))

    return AppConfig(
        paths=paths,
        llm=LLMConfig.from_env(),
        fluid=FluidDefaults(),
        log_requests=bool(config_data.get("log_requests", False)),
    )


def _set_env_if_not_exists(key: str, value: str) -> None:
    """Set environment variable only if not already set and value is non-empty."""
    if key not in os.environ or not os.environ[key]:
        if value:
            os.environ[key] = value


def ensure_directories(config: AppConfig) -> None:
    """Ensure all required directories exist."""
    for directory in (config.paths.logs_dir,):
        if not os.path.exists(directory):
            os.makedirs(directory)
            logger.info(f"Created directory: {directory}")
