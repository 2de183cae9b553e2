"""Behavior tracking models.

BehaviorData is derived as a side effect of turn processing and is never
edited directly by a participant or researcher.
"""

from typing import Dict, List, Optional

from pydantic import Field

from openinterviewer.domain.models.base import CamelModel


class AudioPreference(CamelModel):
    """How the participant used spoken AI responses."""

    initial_choice: Optional[str] = Field(
        default=None, pattern="^(voice|text)$", description="Mode chosen at start"
    )
    wants_to_hear: bool = False
    changed_mid_interview: bool = False
    toggle_count: int = Field(default=0, ge=0)
    total_audio_duration: float = Field(default=0.0, ge=0)


class BehaviorData(CamelModel):
    """Per-phase counters and exploration history for one session.

    Keys of time_per_topic and messages_per_topic are phase values.
    """

    time_per_topic: Dict[str, float] = Field(default_factory=dict)
    messages_per_topic: Dict[str, int] = Field(default_factory=dict)
    topics_explored: List[str] = Field(default_factory=list)
    contradictions: List[str] = Field(default_factory=list)
    audio_preference: Optional[AudioPreference] = None
