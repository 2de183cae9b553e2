"""
Follow-up study generation from an aggregate synthesis.

Produces an unsaved StudyConfig draft. The collaborator proposes name,
research question and core questions, each with its own fallback; the rest
is derived deterministically:
- Topic areas: first common-theme names, else the parent's topic areas
- Profile schema, AI behavior, provider/model, voice and consent: copied
- Lineage: parent id and name, generated_from="synthesis"

Saving the draft is a separate, explicit call.
"""

from typing import List, Optional

import structlog

from openinterviewer.core.config import SynthesisConfig, interview_config
from openinterviewer.core.exceptions import PreconditionError
from openinterviewer.domain.models.study import StoredStudy, StudyConfig
from openinterviewer.domain.models.synthesis import (
    AggregateSynthesisResult,
    FollowupSuggestion,
)
from openinterviewer.llm.collaborator import InterviewCollaborator

log = structlog.get_logger(__name__)


def fallback_research_question(aggregate: AggregateSynthesisResult) -> str:
    top_finding = aggregate.key_findings[0] if aggregate.key_findings else "the findings"
    return f"What deeper insights emerge from exploring: {top_finding}?"


def fallback_core_questions(
    aggregate: AggregateSynthesisResult, count: int
) -> List[str]:
    return [
        f"Can you tell me more about your experience with: {finding}?"
        for finding in aggregate.key_findings[:count]
    ]


class FollowupGenerator:
    def __init__(
        self,
        collaborator: InterviewCollaborator,
        config: Optional[SynthesisConfig] = None,
    ):
        self.collaborator = collaborator
        self.config = config or interview_config.synthesis

    async def generate(
        self, parent: StoredStudy, aggregate: AggregateSynthesisResult
    ) -> StudyConfig:
        """
        Build a follow-up study draft.

        Raises:
            PreconditionError: The aggregate has no key findings
        """
        if not aggregate.key_findings:
            raise PreconditionError("Missing or invalid synthesis data")

        parent_config = parent.config

        result = await self.collaborator.generate_followup(parent_config, aggregate)
        if result.ok:
            suggestion = result.payload
        else:
            log.warning(
                "followup_generation_fallback",
                study_id=parent.id,
                reason=result.reason,
            )
            suggestion = FollowupSuggestion()

        core_questions = [q for q in suggestion.core_questions if q.strip()]
        if not core_questions:
            core_questions = fallback_core_questions(
                aggregate, self.config.followup_fallback_questions
            )

        research_question = suggestion.research_question.strip()
        if not research_question:
            # A partial suggestion falls back to the top finding itself
            research_question = (
                aggregate.key_findings[0] if result.ok else fallback_research_question(aggregate)
            )

        theme_names = [
            t.theme for t in aggregate.common_themes[: self.config.followup_topic_limit]
        ]
        topic_areas = theme_names or list(parent_config.topic_areas)

        draft = StudyConfig(
            name=suggestion.name.strip() or f"Follow-up: {parent_config.name}",
            description=f'Follow-up study based on "{parent_config.name}"',
            research_question=research_question,
            core_questions=core_questions,
            topic_areas=topic_areas,
            profile_schema=[f.model_copy() for f in parent_config.profile_schema],
            ai_behavior=parent_config.ai_behavior,
            ai_provider=parent_config.ai_provider,
            ai_model=parent_config.ai_model,
            voice_config=parent_config.voice_config,
            consent_text=parent_config.consent_text,
            parent_study_id=parent.id,
            parent_study_name=parent_config.name,
            generated_from="synthesis",
        )

        log.info(
            "followup_draft_generated",
            parent_study_id=parent.id,
            used_fallback=not result.ok,
            core_questions=len(core_questions),
            topic_areas=len(topic_areas),
        )
        return draft
