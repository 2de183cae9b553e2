"""Tests for prompt rendering."""

from openinterviewer.domain.models import FieldStatus, InterviewMessage, MessageRole
from openinterviewer.llm.prompts import (
    format_transcript,
    get_default_greeting,
    get_interview_system_prompt,
)


def test_system_prompt_marks_progress_and_profile(study_config, live_session):
    live_session.progress.questions_asked.append(1)
    live_session.profile.get_field("role").value = "Designer"
    live_session.profile.get_field("role").status = FieldStatus.EXTRACTED

    prompt = get_interview_system_prompt(
        study_config, live_session.profile, live_session.progress, "I work from home"
    )

    assert "1. [addressed] What tools do you rely on?" in prompt
    assert "Questions addressed: 1 of 3" in prompt
    assert '- role (Job role): extracted = "Designer"' in prompt
    assert "I work from home" in prompt
    assert "background phase" in prompt


def test_transcript_skips_system_messages():
    messages = [
        InterviewMessage(role=MessageRole.AI, content="Hi"),
        InterviewMessage(role=MessageRole.SYSTEM, content="internal"),
        InterviewMessage(role=MessageRole.USER, content="Hello"),
    ]

    assert format_transcript(messages) == "INTERVIEWER: Hi\n\nPARTICIPANT: Hello"


def test_default_greeting_uses_first_topic(study_config):
    greeting = get_default_greeting(study_config)

    assert '"Remote Work Habits"' in greeting
    assert "daily routine" in greeting


def test_default_greeting_without_topics(study_config):
    study = study_config.model_copy(update={"topic_areas": []})

    assert "your experiences" in get_default_greeting(study)
