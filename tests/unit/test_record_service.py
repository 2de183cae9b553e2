"""Tests for persisting completed interviews."""

from unittest.mock import AsyncMock

import pytest

from openinterviewer.core.exceptions import (
    AccessDeniedError,
    StorageError,
    ValidationError,
)
from openinterviewer.domain.models import (
    AccessGrant,
    InterviewMessage,
    MessageRole,
    SessionStatus,
    StoredStudy,
    StudyConfig,
)
from openinterviewer.domain.models.base import now_ms
from openinterviewer.services.record_service import (
    STORAGE_UNAVAILABLE_WARNING,
    InterviewSubmission,
    SessionRecordService,
)

PARTICIPANT = AccessGrant(study_id="study-1")


def submission(**overrides):
    data = dict(
        id="interview-1",
        study_id="study-1",
        study_name="Remote Work Habits",
        transcript=[InterviewMessage(role=MessageRole.USER, content="hello")],
    )
    data.update(overrides)
    return InterviewSubmission(**data)


@pytest.fixture
def service(kv_store, interview_repo, study_repo):
    return SessionRecordService(kv_store, interviews=interview_repo, studies=study_repo)


@pytest.mark.asyncio
async def test_saves_completed_record(service, interview_repo):
    outcome = await service.save_completed(submission(status="in_progress"), PARTICIPANT)

    assert outcome.persisted
    record = await interview_repo.get("interview-1")
    assert record.status == SessionStatus.COMPLETED
    assert record.completed_at is not None
    assert record.study_name == "Remote Work Habits"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"id": None}, "Missing required fields: id, studyId, transcript"),
        ({"transcript": None}, "Missing required fields: id, studyId, transcript"),
        ({"transcript": []}, "Transcript cannot be empty"),
        ({"id": "bad id!"}, "Invalid ID format"),
        ({"study_id": "study/1"}, "Invalid ID format"),
    ],
)
@pytest.mark.asyncio
async def test_rejects_invalid_submissions(service, overrides, message):
    with pytest.raises(ValidationError) as exc_info:
        await service.save_completed(submission(**overrides), AccessGrant())

    assert exc_info.value.message == message


@pytest.mark.asyncio
async def test_participant_cannot_write_other_study(service):
    with pytest.raises(AccessDeniedError):
        await service.save_completed(submission(), AccessGrant(study_id="study-2"))


@pytest.mark.asyncio
async def test_future_created_at_is_replaced(service):
    future = now_ms() + 60_000
    past = now_ms() - 60_000

    future_outcome = await service.save_completed(
        submission(id="i-future", created_at=future), PARTICIPANT
    )
    past_outcome = await service.save_completed(
        submission(id="i-past", created_at=past), PARTICIPANT
    )

    assert future_outcome.record.created_at < future
    assert past_outcome.record.created_at == past


@pytest.mark.asyncio
async def test_missing_study_name_defaults(service):
    outcome = await service.save_completed(submission(study_name=None), PARTICIPANT)

    assert outcome.record.study_name == "Unknown Study"


@pytest.mark.asyncio
async def test_unavailable_storage_is_flagged_not_raised(service, interview_repo):
    service.store.ping = AsyncMock(return_value=False)
    interview_repo.save = AsyncMock()

    outcome = await service.save_completed(submission(), PARTICIPANT)

    assert not outcome.persisted
    assert outcome.warning == STORAGE_UNAVAILABLE_WARNING
    interview_repo.save.assert_not_awaited()


@pytest.mark.asyncio
async def test_saving_bumps_and_locks_study(service, study_repo):
    await study_repo.save(StoredStudy(id="study-1", config=StudyConfig(name="S")))

    await service.save_completed(submission(), PARTICIPANT)

    study = await study_repo.get("study-1")
    assert study.interview_count == 1
    assert study.is_locked


@pytest.mark.asyncio
async def test_counter_failure_does_not_fail_save(service, study_repo, interview_repo):
    study_repo.increment_interview_count = AsyncMock(side_effect=StorageError("boom"))

    outcome = await service.save_completed(submission(), PARTICIPANT)

    assert outcome.persisted
    assert await interview_repo.get("interview-1") is not None


@pytest.mark.asyncio
async def test_cannot_overwrite_another_studys_interview(service, interview_repo):
    await service.save_completed(
        submission(id="interview-x", study_id="study-b", study_name="Original"),
        AccessGrant(study_id="study-b"),
    )

    with pytest.raises(AccessDeniedError):
        await service.save_completed(
            submission(id="interview-x", study_id="study-a", study_name="spoofed"),
            AccessGrant(study_id="study-a"),
        )

    stored = await interview_repo.get("interview-x")
    assert (stored.study_id, stored.study_name) == ("study-b", "Original")
    listed = await interview_repo.list_for_study("study-b")
    assert [(r.id, r.study_id) for r in listed] == [("interview-x", "study-b")]
    assert await interview_repo.list_for_study("study-a") == []


@pytest.mark.asyncio
async def test_saved_interview_is_not_rewritten(service, interview_repo, study_repo):
    await study_repo.save(StoredStudy(id="study-1", config=StudyConfig(name="S")))
    first = await service.save_completed(submission(), PARTICIPANT)

    with pytest.raises(ValidationError) as exc_info:
        await service.save_completed(submission(study_name="Renamed"), PARTICIPANT)

    assert exc_info.value.message == "Interview already saved"
    stored = await interview_repo.get("interview-1")
    assert stored.study_name == "Remote Work Habits"
    assert stored.completed_at == first.record.completed_at
    assert (await study_repo.get("study-1")).interview_count == 1
