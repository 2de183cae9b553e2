"""
Per-session synthesis.

Asks the collaborator to analyze one session and attaches the result. A
session's synthesis is attached at most once: once present, it is returned
unchanged. The placeholder returned on collaborator failure is not
attached, so a later request can still produce a real analysis.
"""

from typing import Optional

import structlog

from openinterviewer.core.config import LimitsConfig, interview_config
from openinterviewer.domain.models.session import InterviewSession
from openinterviewer.domain.models.synthesis import SynthesisResult
from openinterviewer.llm.collaborator import InterviewCollaborator

log = structlog.get_logger(__name__)


class SynthesisService:
    def __init__(
        self,
        collaborator: InterviewCollaborator,
        limits: Optional[LimitsConfig] = None,
    ):
        self.collaborator = collaborator
        self.limits = limits or interview_config.limits

    async def synthesize_session(self, session: InterviewSession) -> SynthesisResult:
        """Return the session's synthesis, generating it if not yet attached."""
        if session.synthesis is not None:
            return session.synthesis

        max_length = self.limits.max_message_length
        transcript = [
            message.model_copy(update={"content": message.content[:max_length]})
            for message in session.transcript[-self.limits.max_synthesis_messages :]
        ]

        result = await self.collaborator.synthesize_session(
            transcript, session.study, session.behavior, session.profile
        )

        if not result.ok:
            log.warning(
                "session_synthesis_fallback",
                session_id=session.id,
                reason=result.reason,
            )
            return SynthesisResult.placeholder()

        session.synthesis = result.payload
        log.info(
            "session_synthesized",
            session_id=session.id,
            themes=len(result.payload.themes),
            insights=len(result.payload.key_insights),
        )
        return session.synthesis
