"""
Turn processing pipeline.

This package implements a composable pipeline pattern for processing
interview turns, breaking one conversational exchange into testable stages.
"""

from .base import TurnStage
from .context import PipelineContext
from .pipeline import TurnPipeline
from .result import TurnResult

__all__ = [
    "TurnStage",
    "PipelineContext",
    "TurnPipeline",
    "TurnResult",
]
