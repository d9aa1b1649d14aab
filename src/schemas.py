"""
Assessment: the structured reply the advisor model must produce.

Two views of the same contract live here:
- Assessment, the pydantic model used to validate replies
- RESPONSE_SCHEMA, the JSON schema sent upstream to constrain generation

Wire keys are camelCase; Python attributes are snake_case.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Likelihood(str, Enum):
    """Overall likelihood of convergence."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class OverallLikelihood(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: Likelihood = Field(description="The overall likelihood of convergence.")
    reason: str = Field(description="A concise, one-line justification for the likelihood.")


class Assessment(BaseModel):
    """Convergence assessment returned by the advisor model."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    overall_likelihood: OverallLikelihood = Field(alias="overallLikelihood")
    potential_issues: tuple[str, ...] = Field(
        alias="potentialIssues",
        description="A list of 3-7 concise bullet points on potential issues.",
    )
    recommendations: tuple[str, ...] = Field(
        description="A list of 3-7 concise bullet points with recommendations.",
    )
    quick_checklist: tuple[str, ...] = Field(
        alias="quickChecklist",
        description="A short, actionable checklist.",
    )

    def to_dict(self) -> dict[str, Any]:
        """Wire form with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


def parse_assessment(text: str) -> Assessment:
    """
    Parse model output into an Assessment.

    Raises:
        pydantic.ValidationError: If text is not JSON or does not match the schema.
    """
    return Assessment.model_validate_json(text.strip())


def _string_array(item_description: str, description: str) -> dict[str, Any]:
    return {
        "type": "array",
        "items": {"type": "string", "description": item_description},
        "description": description,
    }


# Strict-mode structured output needs every property listed in "required"
# and additionalProperties disabled at every object level.
RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "overallLikelihood": {
            "type": "object",
            "properties": {
                "level": {
                    "type": "string",
                    "enum": [level.value for level in Likelihood],
                    "description": "The overall likelihood of convergence.",
                },
                "reason": {
                    "type": "string",
                    "description": "A concise, one-line justification for the likelihood.",
                },
            },
            "required": ["level", "reason"],
            "additionalProperties": False,
        },
        "potentialIssues": _string_array(
            "A potential issue that could hinder convergence.",
            "A list of 3-7 concise bullet points on potential issues.",
        ),
        "recommendations": _string_array(
            "A recommendation to improve convergence.",
            "A list of 3-7 concise bullet points with recommendations.",
        ),
        "quickChecklist": _string_array(
            "A short, actionable checklist item.",
            "A short, actionable checklist.",
        ),
    },
    "required": ["overallLikelihood", "potentialIssues", "recommendations", "quickChecklist"],
    "additionalProperties": False,
}


def response_format() -> dict[str, Any]:
    """The chat-completions response_format constraining output to RESPONSE_SCHEMA."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "convergence_assessment",
            "strict": True,
            "schema": RESPONSE_SCHEMA,
        },
    }
