"""
Stage contract for the turn pipeline.

A stage reads what earlier stages left on the PipelineContext, mutates the
live session or the context, and hands the context on. Stages never call
each other; ordering is owned by TurnProcessor.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import PipelineContext


class TurnStage(ABC):
    """One step of a turn. Subclasses implement process()."""

    @abstractmethod
    async def process(self, context: "PipelineContext") -> "PipelineContext":
        """
        Raises:
            InterviewSystemError: The turn must be rejected (e.g. session complete)
        """

    @property
    def stage_name(self) -> str:
        """Key under which the stage's duration is reported."""
        return type(self).__name__
