"""
Interview session orchestration service.

Main entry point for the participant side of an interview: starting a
session with a greeting, processing turns through the TurnProcessor,
early termination, audio preference tracking, per-session synthesis, and
persisting the completed session as a SessionRecord.
"""

import uuid
from typing import Optional

import structlog

from openinterviewer.core.exceptions import ValidationError
from openinterviewer.domain.models.access import AccessGrant
from openinterviewer.domain.models.base import now_ms
from openinterviewer.domain.models.behavior import AudioPreference
from openinterviewer.domain.models.message import InterviewMessage, MessageRole
from openinterviewer.domain.models.session import InterviewSession
from openinterviewer.domain.models.study import StudyConfig
from openinterviewer.domain.models.synthesis import SynthesisResult
from openinterviewer.llm.collaborator import InterviewCollaborator
from openinterviewer.llm.prompts import get_default_greeting
from openinterviewer.services.phase_engine import PhaseEngine
from openinterviewer.services.profile_extraction import ProfileExtractionModel
from openinterviewer.services.record_service import (
    InterviewSubmission,
    SaveOutcome,
    SessionRecordService,
)
from openinterviewer.services.session_registry import SessionRegistry
from openinterviewer.services.synthesis_service import SynthesisService
from openinterviewer.services.turn_pipeline import TurnResult
from openinterviewer.services.turn_processor import TurnProcessor

log = structlog.get_logger(__name__)


class InterviewSessionService:
    """Orchestrates live interview sessions.

    Turns of one session are serialized by the registry's per-session lock.
    Early termination skips the lock so it can preempt a turn whose
    collaborator call is still in flight; completion preempts the same way
    and then waits on the lock before taking its snapshot.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        collaborator: InterviewCollaborator,
        record_service: SessionRecordService,
        turn_processor: Optional[TurnProcessor] = None,
        synthesis_service: Optional[SynthesisService] = None,
    ):
        """
        Initialize session service.

        Args:
            registry: Live session registry
            collaborator: AI collaborator for greetings, turns and synthesis
            record_service: Persists completed sessions
            turn_processor: Turn pipeline runner (creates default if None)
            synthesis_service: Per-session synthesis (creates default if None)
        """
        self.registry = registry
        self.collaborator = collaborator
        self.record_service = record_service
        self.turn_processor = turn_processor or TurnProcessor(collaborator)
        self.synthesis_service = synthesis_service or SynthesisService(collaborator)

    def _authorized(self, session_id: str, grant: AccessGrant) -> InterviewSession:
        session = self.registry.get(session_id)
        grant.require_study(session.study.id)
        return session

    async def start_session(
        self, study: StudyConfig, grant: AccessGrant
    ) -> InterviewSession:
        """
        Create a live session and append the opening greeting.

        Raises:
            AccessDeniedError: Grant bound to a different study
            ValidationError: Study has no core questions
        """
        grant.require_study(study.id)
        if not study.is_usable:
            raise ValidationError("Study must have at least one core question")
        if study.id is None:
            # Unsaved preview studies still need an id for the record indexes
            study = study.model_copy(update={"id": str(uuid.uuid4())})

        session_id = str(uuid.uuid4())
        profile_model = ProfileExtractionModel.initialize(
            study.profile_schema, session_id=session_id
        )
        session = InterviewSession(
            id=session_id,
            study=study,
            profile=profile_model.profile,
        )
        PhaseEngine(session.progress, session.behavior, session_id).begin(
            len(study.core_questions)
        )

        greeting_result = await self.collaborator.generate_greeting(study)
        if greeting_result.ok:
            greeting = greeting_result.payload
        else:
            greeting = get_default_greeting(study)
            log.info(
                "greeting_fallback_used",
                session_id=session_id,
                reason=greeting_result.reason,
            )

        session.transcript.append(InterviewMessage(role=MessageRole.AI, content=greeting))
        session.last_activity_at = now_ms()
        self.registry.add(session)

        log.info(
            "session_started",
            session_id=session_id,
            study_id=study.id,
            core_questions=len(study.core_questions),
            profile_fields=len(study.profile_schema),
        )
        return session

    def get_session(self, session_id: str, grant: AccessGrant) -> InterviewSession:
        return self._authorized(session_id, grant)

    async def process_turn(
        self,
        session_id: str,
        text: str,
        grant: AccessGrant,
        is_voice: bool = False,
    ) -> TurnResult:
        """
        Process one participant message under the session's turn lock.

        Raises:
            SessionNotFoundError: Unknown session
            SessionCompletedError: Session already complete
        """
        session = self._authorized(session_id, grant)
        async with self.registry.lock_for(session_id):
            return await self.turn_processor.process_turn(
                session, text, is_voice=is_voice
            )

    def finish_session(self, session_id: str, grant: AccessGrant) -> InterviewSession:
        """Early termination: force the terminal state immediately."""
        session = self._authorized(session_id, grant)
        engine = PhaseEngine(session.progress, session.behavior, session_id)
        if engine.complete(reason="early_termination"):
            profile_model = ProfileExtractionModel(session.profile, session_id=session_id)
            log.info(
                "session_terminated_early",
                session_id=session_id,
                missing_required_fields=profile_model.missing_required_fields(
                    session.study.profile_schema
                ),
            )
        return session

    def record_audio_preference(
        self,
        session_id: str,
        wants_to_hear: bool,
        grant: AccessGrant,
        audio_duration: float = 0.0,
    ) -> AudioPreference:
        """
        Track the participant's spoken-response preference.

        The first call records the initial choice; later calls that change
        the preference count as toggles.
        """
        session = self._authorized(session_id, grant)
        behavior = session.behavior

        if behavior.audio_preference is None:
            behavior.audio_preference = AudioPreference(
                initial_choice="voice" if wants_to_hear else "text",
                wants_to_hear=wants_to_hear,
            )
        elif behavior.audio_preference.wants_to_hear != wants_to_hear:
            preference = behavior.audio_preference
            preference.wants_to_hear = wants_to_hear
            preference.toggle_count += 1
            preference.changed_mid_interview = True

        if audio_duration > 0:
            behavior.audio_preference.total_audio_duration += audio_duration

        return behavior.audio_preference

    async def synthesize(self, session_id: str, grant: AccessGrant) -> SynthesisResult:
        session = self._authorized(session_id, grant)
        return await self.synthesis_service.synthesize_session(session)

    async def complete_session(
        self, session_id: str, grant: AccessGrant
    ) -> SaveOutcome:
        """
        Persist the session as a completed SessionRecord.

        An incomplete session is completed first, which preempts a turn whose
        collaborator call is still in flight. The snapshot is taken under the
        turn lock so that turn's AI message is the last recorded one. Once
        persisted, the live session is dropped from the registry.
        """
        session = self._authorized(session_id, grant)
        PhaseEngine(session.progress, session.behavior, session_id).complete(
            reason="persisted"
        )

        async with self.registry.lock_for(session_id):
            submission = InterviewSubmission(
                id=session.id,
                study_id=session.study.id,
                study_name=session.study.name,
                participant_profile=session.profile,
                transcript=session.transcript,
                synthesis=session.synthesis,
                behavior_data=session.behavior,
                created_at=session.created_at,
            )
            outcome = await self.record_service.save_completed(submission, grant)

            if outcome.persisted:
                self.registry.remove(session_id)
        return outcome
