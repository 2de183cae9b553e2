"""
Stage 2: Call the interview collaborator.

Builds the system context from study, profile, progress and accumulated
context entries, then sends the most recent transcript window. This is the
only suspension point of a turn. Failures are recorded on the context and
never raised.
"""

from typing import TYPE_CHECKING, Optional

import structlog

from ..base import TurnStage
from openinterviewer.core.config import LimitsConfig, interview_config
from openinterviewer.llm.collaborator import InterviewCollaborator
from openinterviewer.llm.prompts import get_interview_system_prompt

if TYPE_CHECKING:
    from ..context import PipelineContext

log = structlog.get_logger(__name__)


class CollaboratorStage(TurnStage):
    """Ask the collaborator for this turn's raw response."""

    def __init__(
        self,
        collaborator: InterviewCollaborator,
        limits: Optional[LimitsConfig] = None,
    ):
        self.collaborator = collaborator
        self.limits = limits or interview_config.limits

    def build_context_text(self, context: "PipelineContext") -> str:
        """Newline-joined context entries, keeping the most recent characters."""
        text = "\n".join(entry.text for entry in context.session.context_entries)
        max_length = self.limits.max_context_length
        if len(text) > max_length:
            text = text[-max_length:]
        return text

    async def process(self, context: "PipelineContext") -> "PipelineContext":
        session = context.session

        system_context = get_interview_system_prompt(
            session.study,
            session.profile,
            session.progress,
            self.build_context_text(context),
        )
        window_size = min(self.limits.transcript_window, self.limits.max_history_messages)
        window = session.transcript[-window_size:]

        result = await self.collaborator.generate_turn(
            system_context, window, study=session.study
        )
        context.collaborator_result = result

        if not result.ok:
            log.warning(
                "turn_collaborator_failed",
                session_id=session.id,
                reason=result.reason,
            )

        return context
