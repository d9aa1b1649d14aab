"""
SessionState: Single source of truth for everything one advisor session owns.

Design:
- SimulationSetup is frozen; every keystroke produces a new record via update()
- SessionState is frozen; the session replaces it on each transition
- Phase makes the submission state machine explicit:
  IDLE -> SUBMITTING -> SUCCEEDED | FAILED -> SUBMITTING (next analysis)
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum, auto

from config import FluidDefaults
from schemas import Assessment


_FLUID_DEFAULTS = FluidDefaults()

TURBULENCE_MODELS: tuple[str, ...] = _FLUID_DEFAULTS.turbulence_models
OTHER_TURBULENCE_MODEL = _FLUID_DEFAULTS.other_turbulence_model


class Phase(Enum):
    """Where the session is in the submission lifecycle."""
    IDLE = auto()
    SUBMITTING = auto()
    SUCCEEDED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class SimulationSetup:
    """
    Raw form input describing one CFD setup.

    All values are kept as the strings the user typed; numeric
    interpretation happens in units.py.
    """
    geometry: str = ""
    velocity: str = ""
    characteristic_length: str = ""
    density: str = ""
    viscosity: str = ""
    turbulence_model: str = _FLUID_DEFAULTS.default_turbulence_model
    custom_turbulence_model: str = ""
    mesh_details: str = ""
    y_plus: str = ""
    numerics: str = ""
    domain_extents: str = ""

    REQUIRED_FIELDS = ("geometry", "velocity", "characteristic_length")

    @classmethod
    def default(cls, defaults: FluidDefaults | None = None) -> "SimulationSetup":
        """The record a new session starts with (water, k-omega SST)."""
        defaults = defaults or _FLUID_DEFAULTS
        return cls(
            density=defaults.density,
            viscosity=defaults.viscosity,
            turbulence_model=defaults.default_turbulence_model,
        )

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def update(self, name: str, value: str) -> "SimulationSetup":
        """
        Return a new record with one field changed.

        Raises:
            KeyError: If name is not a SimulationSetup field.
        """
        if name not in self.field_names():
            raise KeyError(f"Unknown setup field: {name}")
        return replace(self, **{name: value})

    @property
    def uses_custom_turbulence_model(self) -> bool:
        return self.turbulence_model == OTHER_TURBULENCE_MODEL

    @property
    def resolved_turbulence_model(self) -> str:
        """The model name to report: the custom name when "Other" is selected."""
        if self.uses_custom_turbulence_model:
            return self.custom_turbulence_model.strip()
        return self.turbulence_model

    def missing_fields(self) -> list[str]:
        """Required fields that are empty after trimming."""
        missing = [name for name in self.REQUIRED_FIELDS if not getattr(self, name).strip()]
        if not self.turbulence_model.strip():
            missing.append("turbulence_model")
        elif self.uses_custom_turbulence_model and not self.custom_turbulence_model.strip():
            missing.append("custom_turbulence_model")
        return missing

    @property
    def can_submit(self) -> bool:
        return not self.missing_fields()


@dataclass(frozen=True)
class SessionState:
    """
    Immutable snapshot of a session.

    Invariant: assessment is set only in SUCCEEDED, error only in FAILED.
    """
    setup: SimulationSetup = field(default_factory=SimulationSetup.default)
    phase: Phase = Phase.IDLE
    assessment: Assessment | None = None
    error: str | None = None

    # Last request inputs, kept for display
    reynolds_number: str = ""
    prompt: str = ""

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.SUBMITTING

    def with_setup(self, setup: SimulationSetup) -> "SessionState":
        return replace(self, setup=setup)

    def start_submission(self, reynolds_number: str, prompt: str) -> "SessionState":
        """Enter SUBMITTING, dropping any previous result or error."""
        return replace(
            self,
            phase=Phase.SUBMITTING,
            assessment=None,
            error=None,
            reynolds_number=reynolds_number,
            prompt=prompt,
        )

    def succeed(self, assessment: Assessment) -> "SessionState":
        return replace(self, phase=Phase.SUCCEEDED, assessment=assessment, error=None)

    def fail(self, error: str) -> "SessionState":
        return replace(self, phase=Phase.FAILED, assessment=None, error=error)
