"""
Aggregate synthesis across a study's completed interviews.

Preconditions:
    - At least min_interviews_for_aggregate (2) stored interviews
    - At least that many of them carry a per-session synthesis

On collaborator failure the fixed placeholder body is used, so callers can
always render a result. The result is stamped with study id, interview
count and generation time, and is not persisted.
"""

from typing import Optional

import structlog

from openinterviewer.core.config import SynthesisConfig, interview_config
from openinterviewer.core.exceptions import InsufficientDataError
from openinterviewer.domain.models.base import now_ms
from openinterviewer.domain.models.study import StoredStudy
from openinterviewer.domain.models.synthesis import (
    AggregateBody,
    AggregateSynthesisResult,
)
from openinterviewer.llm.collaborator import InterviewCollaborator
from openinterviewer.persistence.repositories import InterviewRepository

log = structlog.get_logger(__name__)


class AggregateSynthesizer:
    def __init__(
        self,
        interviews: InterviewRepository,
        collaborator: InterviewCollaborator,
        config: Optional[SynthesisConfig] = None,
    ):
        self.interviews = interviews
        self.collaborator = collaborator
        self.config = config or interview_config.synthesis

    async def synthesize(self, study: StoredStudy) -> AggregateSynthesisResult:
        """
        Raises:
            InsufficientDataError: Too few interviews or syntheses
        """
        minimum = self.config.min_interviews_for_aggregate
        records = await self.interviews.list_for_study(study.id)

        if len(records) < minimum:
            raise InsufficientDataError(
                f"Need at least {minimum} interviews to generate aggregate synthesis",
                minimum=minimum,
            )

        syntheses = [r.synthesis for r in records if r.synthesis is not None]
        if len(syntheses) < minimum:
            raise InsufficientDataError(
                f"Need at least {minimum} interviews with synthesis results",
                minimum=minimum,
            )

        result = await self.collaborator.synthesize_aggregate(
            study.config, syntheses, len(records)
        )
        if result.ok:
            body = result.payload
        else:
            log.warning(
                "aggregate_synthesis_fallback",
                study_id=study.id,
                reason=result.reason,
            )
            body = AggregateBody.placeholder()

        aggregate = AggregateSynthesisResult(
            **body.model_dump(),
            study_id=study.id,
            interview_count=len(records),
            generated_at=now_ms(),
        )

        log.info(
            "aggregate_synthesized",
            study_id=study.id,
            interview_count=len(records),
            syntheses=len(syntheses),
            common_themes=len(aggregate.common_themes),
            key_findings=len(aggregate.key_findings),
        )
        return aggregate
