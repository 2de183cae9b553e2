"""
Completed interview endpoints.

Participants POST a client-built record once their interview is done;
researchers list, read and delete records.
"""

from fastapi import APIRouter, Response, status
import structlog

from openinterviewer.api.dependencies import (
    GrantDep,
    InterviewRepoDep,
    RecordServiceDep,
    ResearcherDep,
)
from openinterviewer.api.schemas import InterviewListResponse, SaveInterviewResponse
from openinterviewer.core.exceptions import InterviewNotFoundError
from openinterviewer.domain.models import SessionRecord
from openinterviewer.services.record_service import InterviewSubmission

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/interviews", tags=["interviews"])


@router.post("", response_model=SaveInterviewResponse)
async def save_interview(
    submission: InterviewSubmission,
    grant: GrantDep,
    service: RecordServiceDep,
):
    """
    Persist a completed interview.

    Storage being unavailable is not an error: the response carries
    `persisted: false` and a warning instead.
    """
    outcome = await service.save_completed(submission, grant)
    return SaveInterviewResponse(
        persisted=outcome.persisted,
        interview=outcome.record,
        warning=outcome.warning,
    )


@router.get("", response_model=InterviewListResponse)
async def list_interviews(grant: ResearcherDep, interviews: InterviewRepoDep):
    records = await interviews.list_all()
    return InterviewListResponse(interviews=records, total=len(records))


@router.get("/{interview_id}", response_model=SessionRecord)
async def get_interview(
    interview_id: str, grant: ResearcherDep, interviews: InterviewRepoDep
):
    record = await interviews.get(interview_id)
    if record is None:
        raise InterviewNotFoundError(f"Interview {interview_id} not found")
    return record


@router.delete("/{interview_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interview(
    interview_id: str, grant: ResearcherDep, interviews: InterviewRepoDep
):
    if not await interviews.delete(interview_id):
        raise InterviewNotFoundError(f"Interview {interview_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
