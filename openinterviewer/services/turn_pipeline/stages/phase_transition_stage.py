"""
Stage 5: Apply the declared phase transition, unconditionally.
"""

from typing import TYPE_CHECKING

from ..base import TurnStage

if TYPE_CHECKING:
    from ..context import PipelineContext


class PhaseTransitionStage(TurnStage):
    async def process(self, context: "PipelineContext") -> "PipelineContext":
        response = context.response
        if context.cancelled or response is None or response.phase_transition is None:
            return context

        context.phase_transitioned = context.phase_engine.transition_to(
            response.phase_transition
        )
        return context
