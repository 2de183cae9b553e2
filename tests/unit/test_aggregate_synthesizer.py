"""Tests for aggregate synthesis preconditions and fallback."""

import pytest

from openinterviewer.core.exceptions import InsufficientDataError
from openinterviewer.domain.models import (
    AggregateBody,
    CollaboratorFailure,
    CollaboratorSuccess,
    CommonTheme,
    InterviewMessage,
    MessageRole,
    SessionRecord,
    StoredStudy,
    SynthesisResult,
)
from openinterviewer.services.aggregate_synthesizer import AggregateSynthesizer


@pytest.fixture
def stored_study(study_config):
    return StoredStudy(id="study-1", config=study_config)


async def add_records(interview_repo, count, with_synthesis):
    for i in range(count):
        await interview_repo.save(
            SessionRecord(
                id=f"i-{i}",
                study_id="study-1",
                transcript=[InterviewMessage(role=MessageRole.USER, content="hi")],
                synthesis=SynthesisResult(bottom_line=f"b{i}") if i < with_synthesis else None,
            )
        )


@pytest.mark.parametrize("count", [0, 1])
@pytest.mark.asyncio
async def test_rejects_too_few_interviews(
    interview_repo, mock_collaborator, stored_study, count
):
    await add_records(interview_repo, count, with_synthesis=count)
    synthesizer = AggregateSynthesizer(interview_repo, mock_collaborator)

    with pytest.raises(InsufficientDataError) as exc_info:
        await synthesizer.synthesize(stored_study)

    assert exc_info.value.message == "Need at least 2 interviews to generate aggregate synthesis"
    mock_collaborator.synthesize_aggregate.assert_not_awaited()


@pytest.mark.asyncio
async def test_rejects_too_few_syntheses(interview_repo, mock_collaborator, stored_study):
    await add_records(interview_repo, 3, with_synthesis=1)
    synthesizer = AggregateSynthesizer(interview_repo, mock_collaborator)

    with pytest.raises(InsufficientDataError) as exc_info:
        await synthesizer.synthesize(stored_study)

    assert exc_info.value.message == "Need at least 2 interviews with synthesis results"


@pytest.mark.asyncio
async def test_two_syntheses_succeed(interview_repo, mock_collaborator, stored_study):
    await add_records(interview_repo, 2, with_synthesis=2)
    mock_collaborator.synthesize_aggregate.return_value = CollaboratorSuccess(
        AggregateBody(
            common_themes=[CommonTheme(theme="routine", frequency=2)],
            key_findings=["Mornings matter"],
        )
    )
    synthesizer = AggregateSynthesizer(interview_repo, mock_collaborator)

    result = await synthesizer.synthesize(stored_study)

    assert result.study_id == "study-1"
    assert result.interview_count == 2
    assert result.key_findings == ["Mornings matter"]
    syntheses = mock_collaborator.synthesize_aggregate.await_args.args[1]
    assert len(syntheses) == 2


@pytest.mark.asyncio
async def test_collaborator_failure_uses_placeholder(
    interview_repo, mock_collaborator, stored_study
):
    await add_records(interview_repo, 2, with_synthesis=2)
    mock_collaborator.synthesize_aggregate.return_value = CollaboratorFailure("down")
    synthesizer = AggregateSynthesizer(interview_repo, mock_collaborator)

    result = await synthesizer.synthesize(stored_study)

    assert result.key_findings == ["Analysis pending..."]
    assert result.bottom_line == "Aggregate synthesis in progress."
    assert result.interview_count == 2
