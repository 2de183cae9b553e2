"""
Prompts for interview synthesis.

- Session synthesis: one completed transcript plus profile and behavior data
- Aggregate synthesis: the per-session syntheses of a whole study
"""

import json
from typing import List, Optional

from openinterviewer.domain.models.behavior import BehaviorData
from openinterviewer.domain.models.message import InterviewMessage
from openinterviewer.domain.models.profile import FieldStatus, ParticipantProfile
from openinterviewer.domain.models.study import StudyConfig
from openinterviewer.domain.models.synthesis import SynthesisResult
from openinterviewer.llm.prompts.interview import format_transcript

SYNTHESIS_SYSTEM_PROMPT = """You are an expert qualitative research analyst.
Respond with a single JSON object and nothing else."""

SYNTHESIS_OUTPUT = """Expected output structure:
{
  "statedPreferences": ["What participant said they value/want"],
  "revealedPreferences": ["What their behavior/emphasis revealed"],
  "themes": [
    { "theme": "Theme name", "evidence": "Supporting quote/behavior", "frequency": 3 }
  ],
  "contradictions": ["Any gaps between stated and revealed preferences"],
  "keyInsights": ["Actionable insights for the researcher"],
  "bottomLine": "One-sentence summary insight"
}"""

AGGREGATE_OUTPUT = """Expected output structure:
{
  "commonThemes": [
    { "theme": "Theme name", "frequency": 3, "representativeQuotes": ["Example evidence"] }
  ],
  "divergentViews": [
    { "topic": "Area of disagreement", "viewA": "One perspective", "viewB": "Contrasting perspective" }
  ],
  "keyFindings": ["Major discoveries that answer the research question"],
  "researchImplications": ["What these findings mean for the field/practice"],
  "bottomLine": "One paragraph summarizing the key takeaways from all interviews"
}"""


def format_profile_summary(
    study: StudyConfig, profile: Optional[ParticipantProfile]
) -> str:
    """Labelled lines for extracted profile values only."""
    if profile is None:
        return "No structured profile data"

    labels = {f.id: f.label for f in study.profile_schema}
    lines = [
        f"{labels.get(v.field_id, v.field_id)}: {v.value}"
        for v in profile.fields
        if v.status == FieldStatus.EXTRACTED and v.value
    ]
    return "\n".join(lines) or "No structured profile data"


def get_session_synthesis_prompt(
    transcript: List[InterviewMessage],
    study: StudyConfig,
    behavior: BehaviorData,
    profile: Optional[ParticipantProfile],
) -> str:
    raw_context = profile.raw_context if profile and profile.raw_context else "Not available"

    return f"""Analyze this research interview for key patterns and insights.

STUDY:
- Research Question: {study.research_question}
- Topics Explored: {', '.join(study.topic_areas)}

PARTICIPANT PROFILE:
{format_profile_summary(study, profile)}

Context: {raw_context}

INTERVIEW TRANSCRIPT:
{format_transcript(transcript)}

BEHAVIORAL DATA:
- Interview phases: {json.dumps(behavior.messages_per_topic)}

Analyze for:
1. What they explicitly stated as important
2. What their behavior/emphasis revealed
3. Key themes with evidence
4. Any contradictions between stated and revealed preferences
5. Key insights for the researcher

{SYNTHESIS_OUTPUT}"""


def _format_synthesis(index: int, synthesis: SynthesisResult) -> str:
    return f"""--- Interview {index} ---
Key Themes: {', '.join(t.theme for t in synthesis.themes)}
Stated Preferences: {'; '.join(synthesis.stated_preferences)}
Revealed Preferences: {'; '.join(synthesis.revealed_preferences)}
Contradictions: {'; '.join(synthesis.contradictions) or 'None identified'}
Key Insights: {'; '.join(synthesis.key_insights)}
Bottom Line: {synthesis.bottom_line}"""


def get_aggregate_synthesis_prompt(
    study: StudyConfig,
    syntheses: List[SynthesisResult],
    interview_count: int,
) -> str:
    syntheses_text = "\n\n".join(
        _format_synthesis(i + 1, s) for i, s in enumerate(syntheses)
    )

    return f"""Analyze {interview_count} research interviews to identify cross-participant patterns.

STUDY:
- Research Question: {study.research_question}
- Topics Explored: {', '.join(study.topic_areas)}

INDIVIDUAL INTERVIEW ANALYSES:
{syntheses_text}

Your task is to identify:
1. COMMON THEMES - Patterns that appear across multiple interviews (note frequency)
2. DIVERGENT VIEWS - Where participants had notably different perspectives
3. KEY FINDINGS - The most important discoveries across all interviews
4. RESEARCH IMPLICATIONS - What these findings mean for the research question
5. BOTTOM LINE - A one-paragraph summary of insights from all {interview_count} interviews

{AGGREGATE_OUTPUT}"""
