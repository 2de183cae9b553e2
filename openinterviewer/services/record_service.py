"""
Session record lifecycle.

Persisting a completed interview is the single point where a session
becomes durable. This service enforces:
- Required fields, non-empty transcript, identifier format
- Ownership: a participant grant bound to one study cannot write another,
  including over an existing record that belongs to another study
- Write once: an id that is already stored is never rewritten
- Server-assigned completion time and status; created_at only if in the past
- Storage check first: an unavailable store yields a flagged, unpersisted
  outcome instead of an error
- A best-effort follow-up that bumps the study's interview counter and locks
  it; its failure never fails or rolls back the saved record
"""

import re
from dataclasses import dataclass
from typing import List, Optional

import structlog

from openinterviewer.core.exceptions import (
    AccessDeniedError,
    InterviewSystemError,
    ValidationError,
)
from openinterviewer.domain.models.access import AccessGrant
from openinterviewer.domain.models.base import CamelModel, now_ms
from openinterviewer.domain.models.behavior import BehaviorData
from openinterviewer.domain.models.message import InterviewMessage
from openinterviewer.domain.models.profile import ParticipantProfile
from openinterviewer.domain.models.session import SessionRecord, SessionStatus
from openinterviewer.domain.models.synthesis import SynthesisResult
from openinterviewer.persistence.kv_store import KeyValueStore
from openinterviewer.persistence.repositories import (
    InterviewRepository,
    StudyRepository,
)

log = structlog.get_logger(__name__)

ID_PATTERN = re.compile(r"^[a-zA-Z0-9-]+$")

STORAGE_UNAVAILABLE_WARNING = "Storage not configured. Interview not persisted."


class InterviewSubmission(CamelModel):
    """Caller-built record. Server-owned fields are ignored or overwritten."""

    id: Optional[str] = None
    study_id: Optional[str] = None
    study_name: Optional[str] = None
    participant_profile: Optional[ParticipantProfile] = None
    transcript: Optional[List[InterviewMessage]] = None
    synthesis: Optional[SynthesisResult] = None
    behavior_data: Optional[BehaviorData] = None
    created_at: Optional[int] = None
    # Accepted for wire compatibility; always replaced by the server
    completed_at: Optional[int] = None
    status: Optional[str] = None


@dataclass
class SaveOutcome:
    persisted: bool
    record: Optional[SessionRecord] = None
    warning: Optional[str] = None


def validate_submission(submission: InterviewSubmission) -> None:
    """
    Raises:
        ValidationError: With the specific reason the submission is rejected
    """
    if not submission.id or not submission.study_id or submission.transcript is None:
        raise ValidationError("Missing required fields: id, studyId, transcript")

    if len(submission.transcript) == 0:
        raise ValidationError("Transcript cannot be empty")

    if not ID_PATTERN.match(submission.id) or not ID_PATTERN.match(submission.study_id):
        raise ValidationError("Invalid ID format")


class SessionRecordService:
    """Validates and persists completed interviews."""

    def __init__(
        self,
        store: KeyValueStore,
        interviews: Optional[InterviewRepository] = None,
        studies: Optional[StudyRepository] = None,
    ):
        self.store = store
        self.interviews = interviews or InterviewRepository(store)
        self.studies = studies or StudyRepository(store)

    def build_record(self, submission: InterviewSubmission) -> SessionRecord:
        """Apply server-assigned fields to a validated submission."""
        now = now_ms()
        created_at = submission.created_at
        if created_at is None or created_at >= now:
            created_at = now

        return SessionRecord(
            id=submission.id,
            study_id=submission.study_id,
            study_name=submission.study_name or "Unknown Study",
            participant_profile=submission.participant_profile,
            transcript=submission.transcript,
            synthesis=submission.synthesis,
            behavior_data=submission.behavior_data or BehaviorData(),
            created_at=created_at,
            completed_at=now,
            status=SessionStatus.COMPLETED,
        )

    async def save_completed(
        self, submission: InterviewSubmission, grant: AccessGrant
    ) -> SaveOutcome:
        """
        Persist a completed interview.

        Raises:
            ValidationError: Missing fields, empty transcript, bad id format,
                or the id was already saved
            AccessDeniedError: Grant bound to a different study, or the id
                already belongs to another study
        """
        validate_submission(submission)
        grant.require_study(submission.study_id)

        if not await self.store.ping():
            log.warning(
                "interview_not_persisted_storage_unavailable",
                interview_id=submission.id,
                study_id=submission.study_id,
            )
            return SaveOutcome(persisted=False, warning=STORAGE_UNAVAILABLE_WARNING)

        await self._reject_existing(submission)

        record = self.build_record(submission)
        await self.interviews.save(record)

        log.info(
            "interview_persisted",
            interview_id=record.id,
            study_id=record.study_id,
            messages=len(record.transcript),
            has_synthesis=record.synthesis is not None,
        )

        await self._update_study_counters(record.study_id)

        return SaveOutcome(persisted=True, record=record)

    async def _reject_existing(self, submission: InterviewSubmission) -> None:
        existing = await self.interviews.get(submission.id)
        if existing is None:
            return

        if existing.study_id != submission.study_id:
            log.warning(
                "interview_overwrite_denied",
                interview_id=submission.id,
                stored_study_id=existing.study_id,
                study_id=submission.study_id,
            )
            raise AccessDeniedError("Interview belongs to another study")

        if existing.status == SessionStatus.COMPLETED:
            raise ValidationError("Interview already saved")

    async def _update_study_counters(self, study_id: str) -> None:
        try:
            updated = await self.studies.increment_interview_count(study_id)
        except InterviewSystemError as e:
            log.warning(
                "study_counter_update_failed",
                study_id=study_id,
                error=e.message,
            )
            return

        if updated is None:
            log.info("study_counter_skipped_unknown_study", study_id=study_id)
