"""
Prompts for the interview turn.

The system prompt carries everything the interviewer needs to pace the
conversation:
- Study framing (research question, core questions, topic areas)
- AI behavior mode
- Profile fields with their current extraction status
- Phase and question progress
- Free-text context gathered so far

The user prompt carries the recent transcript window and the output contract.
"""

from typing import List

from openinterviewer.domain.models.message import InterviewMessage, MessageRole
from openinterviewer.domain.models.profile import ParticipantProfile
from openinterviewer.domain.models.progress import InterviewPhase, QuestionProgress
from openinterviewer.domain.models.study import AIBehavior, StudyConfig

BEHAVIOR_INSTRUCTIONS = {
    AIBehavior.STRUCTURED: (
        "Stay close to the core questions. Ask them in order, keep follow-ups "
        "brief, and move on once a question is substantially answered."
    ),
    AIBehavior.STANDARD: (
        "Cover every core question, but follow interesting threads with one or "
        "two probing follow-ups before returning to the guide."
    ),
    AIBehavior.EXPLORATORY: (
        "Treat the core questions as a starting point. Follow the participant's "
        "lead and dig into unexpected themes, making sure the core questions "
        "are eventually touched."
    ),
}

PHASE_GUIDE = """## Phases:
- background: learn who the participant is and fill the profile fields naturally
- core-questions: work through the core questions
- exploration: dig into themes that emerged
- feedback: invite anything the participant wants to add
- wrap-up: thank the participant and close"""

OUTPUT_CONTRACT = """## Output:
Respond with a single JSON object and nothing else:
{
  "message": "What you say to the participant",
  "questionAddressed": 0-based index of a core question substantially addressed in this exchange, or null,
  "phaseTransition": one of "background", "core-questions", "exploration", "feedback", "wrap-up", or null,
  "profileUpdates": [{"fieldId": "...", "value": "..." or null, "status": "extracted" | "vague" | "refused"}],
  "shouldConclude": true only after your closing wrap-up message
}"""


def get_behavior_instruction(behavior: AIBehavior) -> str:
    return BEHAVIOR_INSTRUCTIONS.get(behavior, BEHAVIOR_INSTRUCTIONS[AIBehavior.STANDARD])


def format_profile_fields(study: StudyConfig, profile: ParticipantProfile) -> str:
    """Render schema fields with their current status and value."""
    if not study.profile_schema:
        return "No profile fields to collect."

    lines = []
    for schema_field in study.profile_schema:
        current = profile.get_field(schema_field.id)
        status = current.status.value if current else "pending"
        line = f"- {schema_field.id} ({schema_field.label}): {status}"
        if current and current.value:
            line += f' = "{current.value}"'
        if schema_field.required:
            line += " [required]"
        if schema_field.extraction_hint:
            line += f"\n  hint: {schema_field.extraction_hint}"
        if schema_field.options:
            line += f"\n  suggested values: {', '.join(schema_field.options)}"
        lines.append(line)
    return "\n".join(lines)


def get_interview_system_prompt(
    study: StudyConfig,
    profile: ParticipantProfile,
    progress: QuestionProgress,
    context: str,
) -> str:
    """
    Build the interviewer system prompt for one turn.

    Args:
        study: Study being run
        profile: Current participant profile
        progress: Current phase and addressed questions
        context: Concatenated free-text context, already length-capped

    Returns:
        System prompt string
    """
    questions = "\n".join(
        f"{i}. {'[addressed] ' if i in progress.questions_asked else ''}{q}"
        for i, q in enumerate(study.core_questions)
    )
    topics = ", ".join(study.topic_areas) or "None specified"

    background_note = ""
    if progress.current_phase == InterviewPhase.BACKGROUND:
        background_note = (
            "\nYou are in the background phase. Gather profile details "
            "conversationally, never as a form.\n"
        )

    return f"""You are a skilled qualitative researcher conducting an interview for the study "{study.name}".

Research question: {study.research_question or study.description or study.name}
Topic areas: {topics}

## Core Questions (0-based):
{questions or "None"}

## Interview Style:
{get_behavior_instruction(study.ai_behavior)}
Ask ONE question at a time. Be warm, curious, and non-judgmental. Avoid leading questions.

{PHASE_GUIDE}

## Current Progress:
Phase: {progress.current_phase.value}
Questions addressed: {len(progress.questions_asked)} of {progress.total}
{background_note}
## Participant Profile:
{format_profile_fields(study, profile)}

## Context So Far:
{context or "None yet"}

{OUTPUT_CONTRACT}"""


def format_transcript(messages: List[InterviewMessage]) -> str:
    """Render messages as PARTICIPANT/INTERVIEWER lines."""
    return "\n\n".join(
        f"{'PARTICIPANT' if m.role == MessageRole.USER else 'INTERVIEWER'}: {m.content}"
        for m in messages
        if m.role != MessageRole.SYSTEM
    )


def get_interview_user_prompt(transcript_window: List[InterviewMessage]) -> str:
    """Build the user prompt from the recent transcript window."""
    return f"""Recent conversation:
{format_transcript(transcript_window) or "(no messages yet)"}

Reply to the participant's last message. Respond with the JSON object only."""
