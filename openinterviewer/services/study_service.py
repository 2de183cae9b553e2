"""
Study management service.

Create, list, get, update and delete researcher studies. Studies with
interviews are soft-locked: updates need explicit confirmation, and
deletion is refused while any interview references the study.
"""

import uuid
from typing import List

import structlog

from openinterviewer.core.exceptions import (
    StudyHasInterviewsError,
    StudyLockedError,
    StudyNotFoundError,
)
from openinterviewer.domain.models.base import now_ms
from openinterviewer.domain.models.study import StoredStudy, StudyConfig
from openinterviewer.persistence.repositories import (
    InterviewRepository,
    StudyRepository,
)

log = structlog.get_logger(__name__)


class StudyService:
    def __init__(self, studies: StudyRepository, interviews: InterviewRepository):
        self.studies = studies
        self.interviews = interviews

    async def create(self, config: StudyConfig) -> StoredStudy:
        """Save a new study under a server-assigned id."""
        study_id = str(uuid.uuid4())
        now = now_ms()
        stored = StoredStudy(
            id=study_id,
            config=config.model_copy(update={"id": study_id, "created_at": now}),
            created_at=now,
            updated_at=now,
        )
        await self.studies.save(stored)
        log.info(
            "study_created",
            study_id=study_id,
            name=config.name,
            parent_study_id=config.parent_study_id,
        )
        return stored

    async def list(self) -> List[StoredStudy]:
        return await self.studies.list_all()

    async def get(self, study_id: str) -> StoredStudy:
        """
        Raises:
            StudyNotFoundError: If the study does not exist
        """
        study = await self.studies.get(study_id)
        if study is None:
            raise StudyNotFoundError(f"Study {study_id} not found")
        return study

    async def update(
        self, study_id: str, config: StudyConfig, confirmed: bool = False
    ) -> StoredStudy:
        """
        Replace a study's configuration, preserving id and creation time.

        Raises:
            StudyNotFoundError: If the study does not exist
            StudyLockedError: If the study has interviews and confirmed is False
        """
        existing = await self.get(study_id)
        interview_count = max(
            existing.interview_count,
            await self.interviews.count_for_study(study_id),
        )

        if interview_count > 0 and not confirmed:
            raise StudyLockedError(
                f"This study has {interview_count} interview(s). "
                "Editing may affect data consistency.",
                interview_count=interview_count,
            )

        updated = existing.model_copy(
            update={
                "config": config.model_copy(
                    update={"id": study_id, "created_at": existing.config.created_at}
                ),
                "updated_at": now_ms(),
            }
        )
        await self.studies.save(updated)
        log.info(
            "study_updated",
            study_id=study_id,
            interview_count=interview_count,
            confirmed=confirmed,
        )
        return updated

    async def delete(self, study_id: str) -> None:
        """
        Raises:
            StudyNotFoundError: If the study does not exist
            StudyHasInterviewsError: If any interview belongs to the study
        """
        await self.get(study_id)
        interview_count = await self.interviews.count_for_study(study_id)
        if interview_count > 0:
            raise StudyHasInterviewsError(
                f"Cannot delete study with {interview_count} interview(s)"
            )

        await self.studies.delete(study_id)
        log.info("study_deleted", study_id=study_id)
