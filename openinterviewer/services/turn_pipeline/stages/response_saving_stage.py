"""
Stage 7: Record the AI response.

Appends exactly one AI message per turn, real or fallback. Runs even when
the session was terminated mid-turn, so the in-flight response becomes the
last recorded turn.
"""

from typing import TYPE_CHECKING

import structlog

from ..base import TurnStage
from openinterviewer.domain.models.base import now_ms
from openinterviewer.domain.models.collaborator import TurnResponse
from openinterviewer.domain.models.message import InterviewMessage, MessageRole

if TYPE_CHECKING:
    from ..context import PipelineContext

log = structlog.get_logger(__name__)


class ResponseSavingStage(TurnStage):
    """
    Append the AI message to the session transcript.

    Populates PipelineContext.ai_message.
    """

    async def process(self, context: "PipelineContext") -> "PipelineContext":
        response = context.response or TurnResponse.fallback()
        now = now_ms()

        message = InterviewMessage(
            role=MessageRole.AI,
            content=response.message,
            timestamp=now,
        )
        context.session.transcript.append(message)
        context.session.last_activity_at = now
        context.ai_message = message

        log.debug(
            "ai_message_saved",
            session_id=context.session_id,
            message_id=message.id,
            used_fallback=context.used_fallback,
        )

        return context
