"""Tests for follow-up study drafting."""

import pytest

from openinterviewer.core.exceptions import PreconditionError
from openinterviewer.domain.models import (
    AggregateSynthesisResult,
    AIBehavior,
    CollaboratorFailure,
    CollaboratorSuccess,
    CommonTheme,
    FollowupSuggestion,
    StoredStudy,
)
from openinterviewer.services.followup_generator import FollowupGenerator


@pytest.fixture
def parent(study_config):
    config = study_config.model_copy(
        update={"ai_behavior": AIBehavior.EXPLORATORY, "consent_text": "I agree"}
    )
    return StoredStudy(id="study-1", config=config)


@pytest.fixture
def aggregate():
    return AggregateSynthesisResult(
        study_id="study-1",
        interview_count=4,
        common_themes=[CommonTheme(theme=f"theme {i}") for i in range(7)],
        key_findings=["Mornings matter", "Tools fragment focus", "Teams drift", "Extra"],
    )


@pytest.mark.asyncio
async def test_uses_collaborator_suggestion(mock_collaborator, parent, aggregate):
    mock_collaborator.generate_followup.return_value = CollaboratorSuccess(
        FollowupSuggestion(
            name="Morning Rituals",
            research_question="How do rituals shape focus?",
            core_questions=["Describe your first hour", "  "],
        )
    )

    draft = await FollowupGenerator(mock_collaborator).generate(parent, aggregate)

    assert draft.id is None
    assert draft.name == "Morning Rituals"
    assert draft.research_question == "How do rituals shape focus?"
    assert draft.core_questions == ["Describe your first hour"]
    assert draft.topic_areas == [f"theme {i}" for i in range(5)]
    assert draft.parent_study_id == "study-1"
    assert draft.parent_study_name == "Remote Work Habits"
    assert draft.generated_from == "synthesis"
    assert draft.ai_behavior == AIBehavior.EXPLORATORY
    assert draft.consent_text == "I agree"
    assert [f.id for f in draft.profile_schema] == ["role", "experience"]


@pytest.mark.asyncio
async def test_total_failure_uses_templates(mock_collaborator, parent, aggregate):
    mock_collaborator.generate_followup.return_value = CollaboratorFailure("down")

    draft = await FollowupGenerator(mock_collaborator).generate(parent, aggregate)

    assert draft.name == "Follow-up: Remote Work Habits"
    assert draft.research_question == (
        "What deeper insights emerge from exploring: Mornings matter?"
    )
    assert draft.core_questions == [
        "Can you tell me more about your experience with: Mornings matter?",
        "Can you tell me more about your experience with: Tools fragment focus?",
        "Can you tell me more about your experience with: Teams drift?",
    ]


@pytest.mark.asyncio
async def test_partial_suggestion_fills_missing_fields(mock_collaborator, parent, aggregate):
    mock_collaborator.generate_followup.return_value = CollaboratorSuccess(
        FollowupSuggestion(name="Only A Name")
    )

    draft = await FollowupGenerator(mock_collaborator).generate(parent, aggregate)

    assert draft.name == "Only A Name"
    assert draft.research_question == "Mornings matter"
    assert len(draft.core_questions) == 3


@pytest.mark.asyncio
async def test_no_themes_keeps_parent_topics(mock_collaborator, parent, aggregate):
    mock_collaborator.generate_followup.return_value = CollaboratorFailure("down")
    aggregate.common_themes = []

    draft = await FollowupGenerator(mock_collaborator).generate(parent, aggregate)

    assert draft.topic_areas == ["daily routine", "tooling"]


@pytest.mark.asyncio
async def test_requires_key_findings(mock_collaborator, parent):
    empty = AggregateSynthesisResult(study_id="study-1", interview_count=2)

    with pytest.raises(PreconditionError):
        await FollowupGenerator(mock_collaborator).generate(parent, empty)

    mock_collaborator.generate_followup.assert_not_awaited()
