"""Tests for StudyService."""

import pytest

from openinterviewer.core.exceptions import (
    StudyHasInterviewsError,
    StudyLockedError,
    StudyNotFoundError,
)
from openinterviewer.domain.models import (
    InterviewMessage,
    MessageRole,
    SessionRecord,
    StudyConfig,
)
from openinterviewer.services.study_service import StudyService


@pytest.fixture
def service(study_repo, interview_repo):
    return StudyService(study_repo, interview_repo)


async def add_interview(interview_repo, study_id):
    await interview_repo.save(
        SessionRecord(
            id="i-1",
            study_id=study_id,
            transcript=[InterviewMessage(role=MessageRole.USER, content="hi")],
        )
    )


@pytest.mark.asyncio
async def test_create_assigns_server_id(service, study_config):
    stored = await service.create(study_config)

    assert stored.id != "study-1"
    assert stored.config.id == stored.id
    assert (await service.get(stored.id)).config.name == "Remote Work Habits"
    assert [s.id for s in await service.list()] == [stored.id]


@pytest.mark.asyncio
async def test_get_unknown_study(service):
    with pytest.raises(StudyNotFoundError):
        await service.get("missing")


@pytest.mark.asyncio
async def test_update_preserves_identity(service, study_config):
    stored = await service.create(study_config)

    updated = await service.update(
        stored.id, StudyConfig(id="ignored", name="Renamed", created_at=1)
    )

    assert updated.id == stored.id
    assert updated.config.id == stored.id
    assert updated.config.name == "Renamed"
    assert updated.config.created_at == stored.config.created_at
    assert updated.created_at == stored.created_at


@pytest.mark.asyncio
async def test_update_with_interviews_needs_confirmation(
    service, study_config, interview_repo
):
    stored = await service.create(study_config)
    await add_interview(interview_repo, stored.id)

    with pytest.raises(StudyLockedError) as exc_info:
        await service.update(stored.id, StudyConfig(name="Renamed"))
    assert exc_info.value.interview_count == 1
    assert "1 interview(s)" in exc_info.value.message

    updated = await service.update(stored.id, StudyConfig(name="Renamed"), confirmed=True)
    assert updated.config.name == "Renamed"


@pytest.mark.asyncio
async def test_delete(service, study_config, interview_repo):
    stored = await service.create(study_config)
    await add_interview(interview_repo, stored.id)

    with pytest.raises(StudyHasInterviewsError):
        await service.delete(stored.id)

    await interview_repo.delete("i-1")
    await service.delete(stored.id)

    with pytest.raises(StudyNotFoundError):
        await service.get(stored.id)
