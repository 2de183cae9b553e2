"""
Stage 3: Parse the collaborator response.

Turns raw collaborator text into a validated TurnResponse. A failed call
or an unrecoverable message yields the fixed fallback response; otherwise
invalid parts are dropped individually.
"""

from typing import TYPE_CHECKING

import structlog

from ..base import TurnStage
from openinterviewer.domain.models.collaborator import TurnResponse
from openinterviewer.llm.parsing import parse_turn_response

if TYPE_CHECKING:
    from ..context import PipelineContext

log = structlog.get_logger(__name__)


class ResponseParsingStage(TurnStage):
    """Produce context.response, falling back when nothing usable came back."""

    async def process(self, context: "PipelineContext") -> "PipelineContext":
        result = context.collaborator_result

        if result is None or not result.ok:
            context.response = TurnResponse.fallback()
            context.used_fallback = True
        else:
            context.response, context.used_fallback = parse_turn_response(
                result.payload
            )

        if context.used_fallback:
            log.info("turn_fallback_used", session_id=context.session_id)

        return context
