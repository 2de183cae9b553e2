"""
Interview collaborator: the AI side of every interview operation.

Each operation returns CollaboratorSuccess(payload) or
CollaboratorFailure(reason) and never raises for AI-side problems (missing
key, timeout, rate limit, HTTP error, unparseable output). Callers decide
the fallback.

Operations:
- generate_turn: raw text for one interview turn (parsed by the pipeline)
- generate_greeting: opening message
- synthesize_session: SynthesisResult for one transcript
- synthesize_aggregate: AggregateBody across a study's syntheses
- generate_followup: FollowupSuggestion for a follow-up study
"""

from typing import Callable, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from openinterviewer.core.exceptions import InterviewSystemError
from openinterviewer.domain.models.behavior import BehaviorData
from openinterviewer.domain.models.collaborator import (
    CollaboratorFailure,
    CollaboratorResult,
    CollaboratorSuccess,
)
from openinterviewer.domain.models.message import InterviewMessage
from openinterviewer.domain.models.profile import ParticipantProfile
from openinterviewer.domain.models.study import StudyConfig
from openinterviewer.domain.models.synthesis import (
    AggregateBody,
    AggregateSynthesisResult,
    FollowupSuggestion,
    SynthesisResult,
)
from openinterviewer.llm.client import LLMClient, get_llm_client
from openinterviewer.llm.parsing import parse_json_payload
from openinterviewer.llm.prompts import (
    SYNTHESIS_SYSTEM_PROMPT,
    get_aggregate_synthesis_prompt,
    get_followup_prompt,
    get_greeting_prompt,
    get_interview_user_prompt,
    get_session_synthesis_prompt,
)

log = structlog.get_logger(__name__)

ClientFactory = Callable[[Optional[str], Optional[str]], LLMClient]

# Lower temperature for analysis tasks, where consistency matters more than variety
ANALYSIS_TEMPERATURE = 0.3


def _default_client_factory(provider: Optional[str], model: Optional[str]) -> LLMClient:
    return get_llm_client(provider=provider, model=model)


class InterviewCollaborator:
    """Wraps an LLMClient per study and converts every failure into a result."""

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        self._client_factory = client_factory or _default_client_factory

    def _client_for(self, study: Optional[StudyConfig]) -> LLMClient:
        provider = study.ai_provider.value if study and study.ai_provider else None
        model = study.ai_model if study else None
        return self._client_factory(provider, model)

    def _failure(self, operation: str, error: Exception) -> CollaboratorFailure:
        reason = getattr(error, "message", None) or str(error) or type(error).__name__
        log.warning(
            "collaborator_call_failed",
            operation=operation,
            error_type=type(error).__name__,
            reason=reason,
        )
        return CollaboratorFailure(reason=reason)

    async def generate_turn(
        self,
        system_context: str,
        transcript_window: List[InterviewMessage],
        study: Optional[StudyConfig] = None,
    ) -> CollaboratorResult[str]:
        """Raw model text for one turn; structural parsing happens downstream."""
        try:
            client = self._client_for(study)
            response = await client.complete(
                prompt=get_interview_user_prompt(transcript_window),
                system=system_context,
                json_mode=True,
            )
        except InterviewSystemError as e:
            return self._failure("generate_turn", e)

        if not response.content.strip():
            return CollaboratorFailure(reason="Empty turn response")
        return CollaboratorSuccess(response.content)

    async def generate_greeting(self, study: StudyConfig) -> CollaboratorResult[str]:
        try:
            client = self._client_for(study)
            response = await client.complete(prompt=get_greeting_prompt(study))
        except InterviewSystemError as e:
            return self._failure("generate_greeting", e)

        greeting = response.content.strip()
        if not greeting:
            return CollaboratorFailure(reason="Empty greeting")
        return CollaboratorSuccess(greeting)

    async def synthesize_session(
        self,
        transcript: List[InterviewMessage],
        study: StudyConfig,
        behavior: BehaviorData,
        profile: Optional[ParticipantProfile],
    ) -> CollaboratorResult[SynthesisResult]:
        try:
            client = self._client_for(study)
            response = await client.complete(
                prompt=get_session_synthesis_prompt(transcript, study, behavior, profile),
                system=SYNTHESIS_SYSTEM_PROMPT,
                temperature=ANALYSIS_TEMPERATURE,
                json_mode=True,
            )
            data = parse_json_payload(response.content)
            result = SynthesisResult.model_validate(data)
        except (InterviewSystemError, PydanticValidationError) as e:
            return self._failure("synthesize_session", e)

        return CollaboratorSuccess(result)

    async def synthesize_aggregate(
        self,
        study: StudyConfig,
        syntheses: List[SynthesisResult],
        interview_count: int,
    ) -> CollaboratorResult[AggregateBody]:
        try:
            client = self._client_for(study)
            response = await client.complete(
                prompt=get_aggregate_synthesis_prompt(study, syntheses, interview_count),
                system=SYNTHESIS_SYSTEM_PROMPT,
                temperature=ANALYSIS_TEMPERATURE,
                max_tokens=4096,
                json_mode=True,
            )
            data = parse_json_payload(response.content)
            body = AggregateBody.model_validate(data)
        except (InterviewSystemError, PydanticValidationError) as e:
            return self._failure("synthesize_aggregate", e)

        return CollaboratorSuccess(body)

    async def generate_followup(
        self,
        parent: StudyConfig,
        aggregate: AggregateSynthesisResult,
    ) -> CollaboratorResult[FollowupSuggestion]:
        try:
            client = self._client_for(parent)
            response = await client.complete(
                prompt=get_followup_prompt(parent, aggregate),
                max_tokens=1024,
                json_mode=True,
            )
            data = parse_json_payload(response.content)
            suggestion = FollowupSuggestion.model_validate(data)
        except (InterviewSystemError, PydanticValidationError) as e:
            return self._failure("generate_followup", e)

        return CollaboratorSuccess(suggestion)
