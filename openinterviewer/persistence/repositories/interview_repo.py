"""Interview repository: SessionRecord documents and their indexes."""

from typing import List, Optional

import structlog

from openinterviewer.domain.models.session import SessionRecord
from openinterviewer.persistence.kv_store import KeyValueStore

log = structlog.get_logger(__name__)

ALL_INTERVIEWS_KEY = "all-interviews"


def interview_key(interview_id: str) -> str:
    return f"interview:{interview_id}"


def study_interviews_key(study_id: str) -> str:
    return f"study-interviews:{study_id}"


class InterviewRepository:
    """Repository for SessionRecord storage and lookup."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def save(self, record: SessionRecord) -> None:
        """Write the record, then register it in the study and global indexes."""
        await self.store.set(interview_key(record.id), record.to_wire())
        await self.store.sadd(study_interviews_key(record.study_id), record.id)
        await self.store.sadd(ALL_INTERVIEWS_KEY, record.id)
        log.debug("interview_saved", interview_id=record.id, study_id=record.study_id)

    async def get(self, interview_id: str) -> Optional[SessionRecord]:
        data = await self.store.get(interview_key(interview_id))
        if data is None:
            return None
        return SessionRecord.model_validate(data)

    async def _load_many(self, ids: List[str]) -> List[SessionRecord]:
        records = []
        for interview_id in ids:
            record = await self.get(interview_id)
            # Index entries can outlive their documents
            if record is not None:
                records.append(record)
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    async def list_all(self) -> List[SessionRecord]:
        """All records, newest first."""
        return await self._load_many(await self.store.smembers(ALL_INTERVIEWS_KEY))

    async def list_for_study(self, study_id: str) -> List[SessionRecord]:
        """Records for one study, newest first."""
        return await self._load_many(
            await self.store.smembers(study_interviews_key(study_id))
        )

    async def count_for_study(self, study_id: str) -> int:
        return len(await self.store.smembers(study_interviews_key(study_id)))

    async def delete(self, interview_id: str) -> bool:
        """Remove the record and its index memberships. Returns whether it existed."""
        record = await self.get(interview_id)
        if record is None:
            return False
        await self.store.delete(interview_key(interview_id))
        await self.store.srem(study_interviews_key(record.study_id), interview_id)
        await self.store.srem(ALL_INTERVIEWS_KEY, interview_id)
        log.info("interview_deleted", interview_id=interview_id, study_id=record.study_id)
        return True
