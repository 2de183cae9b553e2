"""
Turn processor: one participant message in, one AI message out.

Builds the turn pipeline:
    1. ParticipantMessageStage
    2. CollaboratorStage
    3. ResponseParsingStage
    4. ProfileUpdateStage
    5. PhaseTransitionStage
    6. QuestionProgressStage
    7. ResponseSavingStage
    8. ConclusionStage

Callers serialize turns per session (see SessionRegistry); the processor
itself assumes it is the only writer of the session during a turn, apart
from early termination.
"""

from typing import Optional

import structlog

from openinterviewer.core.config import LimitsConfig, interview_config
from openinterviewer.domain.models.session import InterviewSession
from openinterviewer.llm.collaborator import InterviewCollaborator
from openinterviewer.services.turn_pipeline import (
    PipelineContext,
    TurnPipeline,
    TurnResult,
)
from openinterviewer.services.turn_pipeline.stages import (
    CollaboratorStage,
    ConclusionStage,
    ParticipantMessageStage,
    PhaseTransitionStage,
    ProfileUpdateStage,
    QuestionProgressStage,
    ResponseParsingStage,
    ResponseSavingStage,
)

log = structlog.get_logger(__name__)


class TurnProcessor:
    """Runs the turn pipeline against a live session."""

    def __init__(
        self,
        collaborator: InterviewCollaborator,
        limits: Optional[LimitsConfig] = None,
    ):
        limits = limits or interview_config.limits
        self.collaborator = collaborator
        self.pipeline = TurnPipeline(
            [
                ParticipantMessageStage(limits),
                CollaboratorStage(collaborator, limits),
                ResponseParsingStage(),
                ProfileUpdateStage(),
                PhaseTransitionStage(),
                QuestionProgressStage(),
                ResponseSavingStage(),
                ConclusionStage(),
            ]
        )

    async def process_turn(
        self,
        session: InterviewSession,
        user_input: str,
        is_voice: bool = False,
    ) -> TurnResult:
        """
        Process one participant message.

        Raises:
            SessionCompletedError: If the session is already complete
        """
        context = PipelineContext(
            session=session, user_input=user_input, is_voice=is_voice
        )
        result = await self.pipeline.execute(context)

        log.info(
            "turn_processed",
            session_id=session.id,
            phase=result.phase.value,
            questions_addressed=len(result.questions_asked),
            applied_fields=len(result.applied_field_ids),
            used_fallback=result.used_fallback,
            is_complete=result.is_complete,
        )
        return result
