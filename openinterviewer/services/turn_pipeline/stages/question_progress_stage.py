"""
Stage 6: Mark the declared core question as addressed (idempotent).
"""

from typing import TYPE_CHECKING

from ..base import TurnStage

if TYPE_CHECKING:
    from ..context import PipelineContext


class QuestionProgressStage(TurnStage):
    async def process(self, context: "PipelineContext") -> "PipelineContext":
        response = context.response
        if context.cancelled or response is None or response.question_addressed is None:
            return context

        index = response.question_addressed
        if context.phase_engine.mark_question_addressed(index):
            context.question_marked = index
        return context
