"""
Study management endpoints for researchers.

Studies with interviews are soft-locked: PUT needs `confirmed: true`,
DELETE is refused while interviews exist.
"""

from typing import Optional

from fastapi import APIRouter, Response, status
import structlog

from openinterviewer.api.dependencies import (
    AggregateDep,
    FollowupDep,
    InterviewRepoDep,
    ResearcherDep,
    StudyServiceDep,
)
from openinterviewer.api.schemas import (
    FollowupRequest,
    InterviewListResponse,
    StudyListResponse,
    StudyUpdate,
)
from openinterviewer.domain.models import StoredStudy, StudyConfig

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/studies", tags=["studies"])


@router.get("", response_model=StudyListResponse)
async def list_studies(grant: ResearcherDep, service: StudyServiceDep):
    """List all studies, newest first."""
    studies = await service.list()
    return StudyListResponse(studies=studies, total=len(studies))


@router.post("", response_model=StoredStudy, status_code=status.HTTP_201_CREATED)
async def create_study(
    config: StudyConfig, grant: ResearcherDep, service: StudyServiceDep
):
    """Save a study, including follow-up drafts returned by /followup."""
    return await service.create(config)


@router.get("/{study_id}", response_model=StoredStudy)
async def get_study(study_id: str, grant: ResearcherDep, service: StudyServiceDep):
    return await service.get(study_id)


@router.put("/{study_id}", response_model=StoredStudy)
async def update_study(
    study_id: str,
    request: StudyUpdate,
    grant: ResearcherDep,
    service: StudyServiceDep,
):
    return await service.update(study_id, request.study, confirmed=request.confirmed)


@router.delete("/{study_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_study(study_id: str, grant: ResearcherDep, service: StudyServiceDep):
    await service.delete(study_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{study_id}/interviews", response_model=InterviewListResponse)
async def list_study_interviews(
    study_id: str, grant: ResearcherDep, interviews: InterviewRepoDep
):
    """Completed interviews of one study, newest first."""
    records = await interviews.list_for_study(study_id)
    return InterviewListResponse(interviews=records, total=len(records))


@router.post("/{study_id}/followup", response_model=StudyConfig)
async def generate_followup(
    study_id: str,
    grant: ResearcherDep,
    service: StudyServiceDep,
    synthesizer: AggregateDep,
    generator: FollowupDep,
    request: Optional[FollowupRequest] = None,
):
    """
    Draft a follow-up study from an aggregate synthesis.

    The draft is not saved; POST it to /studies to keep it.
    """
    parent = await service.get(study_id)
    aggregate = request.aggregate if request else None
    if aggregate is None:
        aggregate = await synthesizer.synthesize(parent)
    return await generator.generate(parent, aggregate)
