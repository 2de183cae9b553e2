"""
Result object for turn processing pipeline.

Returned by the pipeline after all stages complete.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from openinterviewer.domain.models.message import InterviewMessage
from openinterviewer.domain.models.progress import InterviewPhase


@dataclass
class TurnResult:
    """Result of processing a single turn."""

    session_id: str
    ai_message: InterviewMessage
    phase: InterviewPhase
    questions_asked: List[int]
    is_complete: bool
    applied_field_ids: List[str] = field(default_factory=list)
    used_fallback: bool = False
    # True when early termination landed while the collaborator was working
    cancelled: bool = False
    latency_ms: int = 0
    stage_timings: Dict[str, float] = field(default_factory=dict)
