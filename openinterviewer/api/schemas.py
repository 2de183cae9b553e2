"""
API request/response schemas.

Pydantic models for API validation and serialization. Field names travel
in camelCase on the wire, like the domain models they wrap.
"""

from typing import Dict, List, Optional

from pydantic import Field

from openinterviewer.domain.models import (
    AggregateSynthesisResult,
    CamelModel,
    InterviewMessage,
    InterviewPhase,
    ParticipantProfile,
    QuestionProgress,
    SessionRecord,
    StoredStudy,
    StudyConfig,
)


# ============ STUDY SCHEMAS ============


class StudyUpdate(CamelModel):
    """Replace a study's configuration."""

    study: StudyConfig
    confirmed: bool = Field(
        default=False,
        description="Required when the study already has interviews",
    )


class StudyListResponse(CamelModel):
    studies: List[StoredStudy]
    total: int


class FollowupRequest(CamelModel):
    """Generate a follow-up draft; the aggregate is computed when omitted."""

    aggregate: Optional[AggregateSynthesisResult] = None


# ============ INTERVIEW SCHEMAS ============


class InterviewListResponse(CamelModel):
    interviews: List[SessionRecord]
    total: int


class SaveInterviewResponse(CamelModel):
    """Outcome of persisting a completed interview."""

    persisted: bool
    interview: Optional[SessionRecord] = None
    warning: Optional[str] = None


# ============ SESSION SCHEMAS ============


class StartSessionRequest(CamelModel):
    """Start a session from a stored study id or an inline study config."""

    study_id: Optional[str] = None
    study: Optional[StudyConfig] = None


class StartSessionResponse(CamelModel):
    session_id: str
    study_id: str
    greeting: InterviewMessage
    progress: QuestionProgress
    profile: ParticipantProfile


class TurnRequest(CamelModel):
    """One participant message."""

    text: str = Field(..., min_length=1, description="Participant's message text")
    is_voice: bool = False


class TurnResultResponse(CamelModel):
    session_id: str
    ai_message: InterviewMessage
    phase: InterviewPhase
    questions_asked: List[int]
    is_complete: bool
    applied_field_ids: List[str] = Field(default_factory=list)
    used_fallback: bool = False
    cancelled: bool = False
    latency_ms: int = 0
    stage_timings: Dict[str, float] = Field(default_factory=dict)


class SessionStatusResponse(CamelModel):
    session_id: str
    phase: InterviewPhase
    questions_asked: List[int]
    total: int
    is_complete: bool
    missing_required_fields: List[str] = Field(default_factory=list)


class AudioPreferenceRequest(CamelModel):
    wants_to_hear: bool
    audio_duration: float = Field(default=0.0, ge=0)


# ============ SYNTHESIS SCHEMAS ============


class AggregateRequest(CamelModel):
    study_id: str = Field(..., min_length=1)
