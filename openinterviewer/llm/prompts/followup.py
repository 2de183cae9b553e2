"""Prompt for follow-up study generation."""

from openinterviewer.domain.models.study import StudyConfig
from openinterviewer.domain.models.synthesis import AggregateSynthesisResult


def get_followup_prompt(parent: StudyConfig, aggregate: AggregateSynthesisResult) -> str:
    findings = "\n".join(f"{i + 1}. {f}" for i, f in enumerate(aggregate.key_findings))
    implications = (
        "\n".join(
            f"{i + 1}. {r}" for i, r in enumerate(aggregate.research_implications)
        )
        or "None specified"
    )
    divergent = (
        "\n".join(
            f'- {d.topic}: "{d.view_a}" vs "{d.view_b}"'
            for d in aggregate.divergent_views
        )
        or "None identified"
    )

    return f"""You are helping design a follow-up research study.

PARENT STUDY: "{parent.name}"
PARENT SUMMARY: {aggregate.bottom_line}

KEY FINDINGS:
{findings}

RESEARCH IMPLICATIONS:
{implications}

DIVERGENT VIEWS:
{divergent}

Generate a follow-up study that digs deeper into gaps or tensions found.
The follow-up should explore unanswered questions or interesting patterns from the original study.

Respond with a single JSON object and nothing else:
{{
  "name": "A concise study name starting with \\"Follow-up: \\"",
  "researchQuestion": "A specific, researchable question building on the findings",
  "coreQuestions": ["3-5 interview questions to explore this further"]
}}"""
