"""Render an Assessment for the terminal or for Markdown surfaces."""

from schemas import Assessment, Likelihood

LIKELIHOOD_BADGES = {
    Likelihood.HIGH: "🟢",
    Likelihood.MEDIUM: "🟡",
    Likelihood.LOW: "🔴",
}


def render_markdown(assessment: Assessment, include_checklist: bool = True) -> str:
    """
    Markdown report used by the Streamlit page.

    The page draws the checklist as interactive checkboxes, so it can ask for
    the report without it.
    """
    level = assessment.overall_likelihood.level
    lines = [
        "## Assessment Report",
        "",
        "### Overall Likelihood",
        f"{LIKELIHOOD_BADGES[level]} **{level.value}** - {assessment.overall_likelihood.reason}",
        "",
        "### Potential Issues",
        *[f"- {issue}" for issue in assessment.potential_issues],
        "",
        "### Recommendations",
        *[f"- {rec}" for rec in assessment.recommendations],
    ]
    if include_checklist:
        lines += [
            "",
            "### Quick Checklist",
            *[f"- [ ] {item}" for item in assessment.quick_checklist],
        ]
    return "\n".join(lines)


def render_text(assessment: Assessment) -> str:
    """Plain-text report for the CLI."""
    lines = [
        f"Overall likelihood: {assessment.overall_likelihood.level.value}",
        f"  {assessment.overall_likelihood.reason}",
        "",
        "Potential issues:",
        *[f"  - {issue}" for issue in assessment.potential_issues],
        "",
        "Recommendations:",
        *[f"  - {rec}" for rec in assessment.recommendations],
        "",
        "Quick checklist:",
        *[f"  [ ] {item}" for item in assessment.quick_checklist],
    ]
    return "\n".join(lines)
