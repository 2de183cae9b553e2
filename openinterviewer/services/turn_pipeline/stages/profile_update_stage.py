"""
Stage 4: Apply profile updates.

Applies each declared field update. While the session is in the background
phase and at least one update applied, the participant's text is appended
to the profile's raw context.
"""

from typing import TYPE_CHECKING

import structlog

from ..base import TurnStage
from openinterviewer.domain.models.progress import InterviewPhase

if TYPE_CHECKING:
    from ..context import PipelineContext

log = structlog.get_logger(__name__)


class ProfileUpdateStage(TurnStage):
    async def process(self, context: "PipelineContext") -> "PipelineContext":
        if context.cancelled:
            log.info("profile_updates_skipped_cancelled", session_id=context.session_id)
            return context

        response = context.response
        if response is None or not response.profile_updates:
            return context

        for update in response.profile_updates:
            if context.profile_model.apply_update(
                update.field_id, update.value, update.status
            ):
                context.applied_field_ids.append(update.field_id)

        if (
            context.applied_field_ids
            and context.session.progress.current_phase == InterviewPhase.BACKGROUND
            and context.participant_message is not None
        ):
            context.profile_model.append_raw_context(
                context.participant_message.content
            )

        log.debug(
            "profile_updates_applied",
            session_id=context.session_id,
            declared=len(response.profile_updates),
            applied=len(context.applied_field_ids),
        )

        return context
