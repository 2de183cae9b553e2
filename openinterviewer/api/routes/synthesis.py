"""Cross-interview synthesis endpoint."""

from fastapi import APIRouter

from openinterviewer.api.dependencies import (
    AggregateDep,
    ResearcherDep,
    StudyServiceDep,
)
from openinterviewer.api.schemas import AggregateRequest
from openinterviewer.domain.models import AggregateSynthesisResult

router = APIRouter(prefix="/synthesis", tags=["synthesis"])


@router.post("/aggregate", response_model=AggregateSynthesisResult)
async def aggregate_synthesis(
    request: AggregateRequest,
    grant: ResearcherDep,
    service: StudyServiceDep,
    synthesizer: AggregateDep,
):
    """
    Synthesize across a study's completed interviews.

    Returns 400 when fewer than two interviews carry a per-session synthesis.
    The result is not persisted.
    """
    study = await service.get(request.study_id)
    return await synthesizer.synthesize(study)
