"""
Live interview session endpoints for participants.

A session is started from a stored study (by id) or an inline study
config, runs turn by turn, and is persisted once via /complete.
"""

from fastapi import APIRouter, status
import structlog

from openinterviewer.api.dependencies import (
    GrantDep,
    SessionServiceDep,
    StudyServiceDep,
)
from openinterviewer.api.schemas import (
    AudioPreferenceRequest,
    SaveInterviewResponse,
    SessionStatusResponse,
    StartSessionRequest,
    StartSessionResponse,
    TurnRequest,
    TurnResultResponse,
)
from openinterviewer.core.exceptions import ValidationError
from openinterviewer.domain.models import (
    AudioPreference,
    InterviewSession,
    SynthesisResult,
)
from openinterviewer.services.profile_extraction import ProfileExtractionModel

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _status(session: InterviewSession) -> SessionStatusResponse:
    profile_model = ProfileExtractionModel(session.profile, session_id=session.id)
    return SessionStatusResponse(
        session_id=session.id,
        phase=session.progress.current_phase,
        questions_asked=list(session.progress.questions_asked),
        total=session.progress.total,
        is_complete=session.is_complete,
        missing_required_fields=profile_model.missing_required_fields(
            session.study.profile_schema
        ),
    )


@router.post(
    "",
    response_model=StartSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_session(
    request: StartSessionRequest,
    grant: GrantDep,
    sessions: SessionServiceDep,
    studies: StudyServiceDep,
):
    """Start an interview and return the opening greeting."""
    if request.study_id:
        study = (await studies.get(request.study_id)).config
    elif request.study is not None:
        study = request.study
    else:
        raise ValidationError("Either studyId or study is required")

    session = await sessions.start_session(study, grant)
    return StartSessionResponse(
        session_id=session.id,
        study_id=session.study.id,
        greeting=session.transcript[-1],
        progress=session.progress,
        profile=session.profile,
    )


@router.get("/{session_id}", response_model=InterviewSession)
async def get_session(session_id: str, grant: GrantDep, sessions: SessionServiceDep):
    """Full live state: transcript, profile, progress and behavior."""
    return sessions.get_session(session_id, grant)


@router.post("/{session_id}/turns", response_model=TurnResultResponse)
async def process_turn(
    session_id: str,
    request: TurnRequest,
    grant: GrantDep,
    sessions: SessionServiceDep,
):
    """
    Process one participant message and return the interviewer's reply.

    Returns 400 if the session is already complete.
    """
    result = await sessions.process_turn(
        session_id, request.text, grant, is_voice=request.is_voice
    )
    return TurnResultResponse(
        session_id=result.session_id,
        ai_message=result.ai_message,
        phase=result.phase,
        questions_asked=result.questions_asked,
        is_complete=result.is_complete,
        applied_field_ids=result.applied_field_ids,
        used_fallback=result.used_fallback,
        cancelled=result.cancelled,
        latency_ms=result.latency_ms,
        stage_timings=result.stage_timings,
    )


@router.post("/{session_id}/finish", response_model=SessionStatusResponse)
async def finish_session(
    session_id: str, grant: GrantDep, sessions: SessionServiceDep
):
    """End the interview early. Idempotent."""
    return _status(sessions.finish_session(session_id, grant))


@router.post("/{session_id}/audio-preference", response_model=AudioPreference)
async def record_audio_preference(
    session_id: str,
    request: AudioPreferenceRequest,
    grant: GrantDep,
    sessions: SessionServiceDep,
):
    return sessions.record_audio_preference(
        session_id,
        request.wants_to_hear,
        grant,
        audio_duration=request.audio_duration,
    )


@router.post("/{session_id}/synthesis", response_model=SynthesisResult)
async def synthesize_session(
    session_id: str, grant: GrantDep, sessions: SessionServiceDep
):
    """Analyze the interview. Once attached, the same synthesis is returned."""
    return await sessions.synthesize(session_id, grant)


@router.post("/{session_id}/complete", response_model=SaveInterviewResponse)
async def complete_session(
    session_id: str, grant: GrantDep, sessions: SessionServiceDep
):
    """Persist the session as a completed interview record."""
    outcome = await sessions.complete_session(session_id, grant)
    return SaveInterviewResponse(
        persisted=outcome.persisted,
        interview=outcome.record,
        warning=outcome.warning,
    )
