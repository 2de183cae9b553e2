"""
Stage 8: Complete the session when the collaborator concludes.

Completion forces the terminal wrap-up phase together with is_complete.
"""

from typing import TYPE_CHECKING

from ..base import TurnStage

if TYPE_CHECKING:
    from ..context import PipelineContext


class ConclusionStage(TurnStage):
    async def process(self, context: "PipelineContext") -> "PipelineContext":
        response = context.response
        if context.cancelled or response is None or not response.should_conclude:
            return context

        context.concluded = context.phase_engine.complete(reason="collaborator_concluded")
        return context
