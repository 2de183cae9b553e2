"""
Turn processing pipeline context.

Carries one turn's state through all pipeline stages. The live session is
mutated in place; stage outputs accumulate on the context so the final
TurnResult can report what the turn actually did.

Stage outputs:
- ParticipantMessageStage: participant_message, phase_at_append
- CollaboratorStage: collaborator_result
- ResponseParsingStage: response, used_fallback
- ProfileUpdateStage: applied_field_ids
- PhaseTransitionStage: phase_transitioned
- QuestionProgressStage: question_marked
- ResponseSavingStage: ai_message
- ConclusionStage: concluded
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from openinterviewer.domain.models.collaborator import (
    CollaboratorResult,
    TurnResponse,
)
from openinterviewer.domain.models.message import InterviewMessage
from openinterviewer.domain.models.progress import InterviewPhase
from openinterviewer.domain.models.session import InterviewSession
from openinterviewer.services.phase_engine import PhaseEngine
from openinterviewer.services.profile_extraction import ProfileExtractionModel


@dataclass
class PipelineContext:
    """State accumulated across the stages of one turn."""

    # =========================================================================
    # Inputs
    # =========================================================================
    session: InterviewSession
    user_input: str
    is_voice: bool = False

    # =========================================================================
    # Session helpers (wrap the session's own progress/profile)
    # =========================================================================
    phase_engine: Optional[PhaseEngine] = None
    profile_model: Optional[ProfileExtractionModel] = None

    # =========================================================================
    # Stage outputs
    # =========================================================================
    participant_message: Optional[InterviewMessage] = None
    phase_at_append: Optional[InterviewPhase] = None
    collaborator_result: Optional[CollaboratorResult] = None
    response: Optional[TurnResponse] = None
    used_fallback: bool = False
    applied_field_ids: List[str] = field(default_factory=list)
    phase_transitioned: bool = False
    question_marked: Optional[int] = None
    ai_message: Optional[InterviewMessage] = None
    concluded: bool = False

    # Stage name -> duration in ms
    stage_timings: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if self.phase_engine is None:
            self.phase_engine = PhaseEngine(
                self.session.progress,
                behavior=self.session.behavior,
                session_id=self.session.id,
            )
        if self.profile_model is None:
            self.profile_model = ProfileExtractionModel(
                self.session.profile, session_id=self.session.id
            )

    @property
    def session_id(self) -> str:
        return self.session.id

    @property
    def cancelled(self) -> bool:
        """True when the session was completed by someone else mid-turn.

        ParticipantMessageStage rejects turns on completed sessions, so a
        completed session seen by a later stage was terminated early while
        the collaborator call was in flight.
        """
        return self.session.progress.is_complete and not self.concluded
