"""Prompts for the opening greeting."""

from openinterviewer.domain.models.study import StudyConfig


def get_greeting_prompt(study: StudyConfig) -> str:
    first_topic = study.topic_areas[0] if study.topic_areas else study.name
    return f"""You are an experienced qualitative researcher starting an interview for the study "{study.name}".

About the study: {study.description or study.research_question or study.name}
First topic: {first_topic}

Write a short, warm opening (2-3 sentences). Introduce yourself as an AI research assistant,
set a relaxed tone, and end with one easy background question about the participant.

Generate only what the interviewer would say - no explanations, no quotation marks."""


def get_default_greeting(study: StudyConfig) -> str:
    """Deterministic greeting used when the collaborator is unavailable."""
    first_topic = study.topic_areas[0] if study.topic_areas else "your experiences"
    return (
        f'Hello, and thank you for taking part in "{study.name}". '
        f"I'm an AI research assistant, and I'd love to hear your thoughts on "
        f"{first_topic}. To start, could you tell me a little about yourself?"
    )
