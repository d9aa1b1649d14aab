"""
Workflow: the assessment pipeline and the session state machine around it.

setup -> Reynolds number -> prompt -> AssessmentClient -> Assessment

AdvisorSession owns one SessionState and moves it through
IDLE -> SUBMITTING -> SUCCEEDED | FAILED. A new analysis may start from any
phase except SUBMITTING.
"""

from state import Phase, SessionState, SimulationSetup
from llm import AssessmentClient, AssessmentError, SubmissionInProgressError
from logging_utils import get_logger
from prompts import build_setup_prompt
from schemas import Assessment
from units import format_reynolds_number

logger = get_logger(__name__)


class IncompleteSetupError(ValueError):
    """Raised when a setup with missing required fields is submitted."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required fields: {', '.join(missing)}")


def prepare_request(setup: SimulationSetup) -> tuple[str, str]:
    """
    Derive the Reynolds number and assemble the prompt for a setup.

    Returns:
        Tuple of (reynolds_text, prompt).

    Raises:
        IncompleteSetupError: If required fields are missing.
    """
    missing = setup.missing_fields()
    if missing:
        raise IncompleteSetupError(missing)

    reynolds_text = format_reynolds_number(
        setup.density,
        setup.velocity,
        setup.characteristic_length,
        setup.viscosity,
    )
    return reynolds_text, build_setup_prompt(setup, reynolds_text)


async def run_assessment(setup: SimulationSetup, client: AssessmentClient) -> Assessment:
    """One-shot pipeline: validate, build the prompt, submit. Closes the client."""
    async with client:
        _, prompt = prepare_request(setup)
        return await client.submit(prompt)


class AdvisorSession:
    """
    One user's session: the form record, the last result and the phase.

    Usage:
        session = AdvisorSession(client)
        session.update_field("geometry", "cylinder")
        ...
        state = await session.analyze()
        if state.phase is Phase.SUCCEEDED:
            show(state.assessment)
    """

    def __init__(self, client: AssessmentClient | None = None, setup: SimulationSetup | None = None):
        self.client = client
        self.state = SessionState(setup=setup or SimulationSetup.default())
        # Submissions started so far; identifies the result on screen
        self.submissions = 0

    @property
    def setup(self) -> SimulationSetup:
        return self.state.setup

    @property
    def can_submit(self) -> bool:
        """Whether the submit action should be enabled."""
        return self.state.setup.can_submit and not self.state.is_loading

    def update_field(self, name: str, value: str) -> SessionState:
        """Apply one form edit. Allowed while a submission is outstanding."""
        self.state = self.state.with_setup(self.state.setup.update(name, value))
        return self.state

    async def analyze(self) -> SessionState:
        """
        Submit the current setup and record the outcome.

        Returns:
            The session state after the request resolves (SUCCEEDED or FAILED).

        Raises:
            SubmissionInProgressError: If called while SUBMITTING.
            IncompleteSetupError: If required fields are missing; nothing is sent.
            RuntimeError: If no client is attached.
        """
        if self.state.phase is Phase.SUBMITTING:
            raise SubmissionInProgressError("An assessment request is already in progress")

        if self.client is None:
            raise RuntimeError("No assessment client attached to the session")

        reynolds_text, prompt = prepare_request(self.state.setup)
        self.state = self.state.start_submission(reynolds_text, prompt)
        self.submissions += 1
        logger.info(f"Submitting setup (Re {reynolds_text})")

        try:
            assessment = await self.client.submit(prompt)
        except AssessmentError as e:
            self.state = self.state.fail(str(e))
            return self.state
        except BaseException:
            # Cancellation or an unexpected error must not leave the session stuck
            self.state = self.state.fail("The assessment request was interrupted.")
            raise

        self.state = self.state.succeed(assessment)
        return self.state
