"""
Stage 1: Append the participant message.

Rejects turns on completed sessions, truncates the input, appends the
message and a context entry, and updates behavior counters keyed by the
phase at append time (before any transition from this turn).
"""

from typing import TYPE_CHECKING, Optional

import structlog

from ..base import TurnStage
from openinterviewer.core.config import LimitsConfig, interview_config
from openinterviewer.core.exceptions import SessionCompletedError
from openinterviewer.domain.models.base import now_ms
from openinterviewer.domain.models.message import (
    ContextEntry,
    ContextSource,
    InterviewMessage,
    MessageRole,
)

if TYPE_CHECKING:
    from ..context import PipelineContext

log = structlog.get_logger(__name__)


class ParticipantMessageStage(TurnStage):
    """Append the participant's message and update per-phase counters."""

    def __init__(self, limits: Optional[LimitsConfig] = None):
        self.limits = limits or interview_config.limits

    async def process(self, context: "PipelineContext") -> "PipelineContext":
        session = context.session

        if session.progress.is_complete:
            raise SessionCompletedError(f"Session {session.id} is already complete")

        text = context.user_input
        if len(text) > self.limits.max_message_length:
            log.info(
                "participant_message_truncated",
                session_id=session.id,
                original_length=len(text),
                max_length=self.limits.max_message_length,
            )
            text = text[: self.limits.max_message_length]

        now = now_ms()
        phase = session.progress.current_phase

        message = InterviewMessage(
            role=MessageRole.USER,
            content=text,
            timestamp=now,
            is_voice=context.is_voice or None,
        )
        session.transcript.append(message)
        session.context_entries.append(
            ContextEntry(
                text=text,
                source=ContextSource.VOICE if context.is_voice else ContextSource.TEXT,
                timestamp=now,
            )
        )

        behavior = session.behavior
        behavior.messages_per_topic[phase.value] = (
            behavior.messages_per_topic.get(phase.value, 0) + 1
        )
        elapsed_seconds = max(now - session.last_activity_at, 0) / 1000
        behavior.time_per_topic[phase.value] = (
            behavior.time_per_topic.get(phase.value, 0.0) + elapsed_seconds
        )
        session.last_activity_at = now

        context.participant_message = message
        context.phase_at_append = phase

        log.debug(
            "participant_message_appended",
            session_id=session.id,
            phase=phase.value,
            message_length=len(text),
        )

        return context
