"""Study repository: StoredStudy documents and the all-studies index."""

from typing import List, Optional

import structlog

from openinterviewer.domain.models.base import now_ms
from openinterviewer.domain.models.study import StoredStudy
from openinterviewer.persistence.kv_store import KeyValueStore

log = structlog.get_logger(__name__)

ALL_STUDIES_KEY = "all-studies"


def study_key(study_id: str) -> str:
    return f"study:{study_id}"


class StudyRepository:
    """Repository for study CRUD and the advisory interview counter."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def save(self, study: StoredStudy) -> None:
        await self.store.set(study_key(study.id), study.to_wire())
        await self.store.sadd(ALL_STUDIES_KEY, study.id)

    async def get(self, study_id: str) -> Optional[StoredStudy]:
        data = await self.store.get(study_key(study_id))
        if data is None:
            return None
        return StoredStudy.model_validate(data)

    async def list_all(self) -> List[StoredStudy]:
        """All studies, newest first."""
        studies = []
        for study_id in await self.store.smembers(ALL_STUDIES_KEY):
            study = await self.get(study_id)
            if study is not None:
                studies.append(study)
        studies.sort(key=lambda s: s.created_at, reverse=True)
        return studies

    async def delete(self, study_id: str) -> bool:
        existed = await self.store.delete(study_key(study_id))
        await self.store.srem(ALL_STUDIES_KEY, study_id)
        return existed

    async def increment_interview_count(self, study_id: str) -> Optional[StoredStudy]:
        """
        Bump the advisory counter and lock the study for edits.

        Read-modify-write without a transaction: concurrent completions may
        lose an increment. Returns None when the study is not stored.
        """
        study = await self.get(study_id)
        if study is None:
            return None
        study.interview_count += 1
        study.is_locked = True
        study.updated_at = now_ms()
        await self.store.set(study_key(study_id), study.to_wire())
        log.debug(
            "study_interview_count_incremented",
            study_id=study_id,
            interview_count=study.interview_count,
        )
        return study
