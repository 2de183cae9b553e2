"""Interview session models.

Core Models:
    - InterviewSession: Live, in-memory state of one conversation
    - SessionRecord: The persisted terminal artifact of a completed interview

Session Lifecycle:
    1. Started: profile initialized, progress.total set, greeting appended
    2. Turns: participant and AI messages appended, profile/progress updated
    3. Completed: collaborator concludes or participant terminates early
    4. Persisted exactly once as a SessionRecord with status "completed"

Live sessions are never persisted; only the SessionRecord is durable.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from openinterviewer.domain.models.base import CamelModel, now_ms
from openinterviewer.domain.models.behavior import BehaviorData
from openinterviewer.domain.models.message import ContextEntry, InterviewMessage
from openinterviewer.domain.models.profile import ParticipantProfile
from openinterviewer.domain.models.progress import QuestionProgress
from openinterviewer.domain.models.study import StudyConfig
from openinterviewer.domain.models.synthesis import SynthesisResult


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class InterviewSession(CamelModel):
    """Mutable state of one live interview."""

    id: str
    study: StudyConfig
    profile: ParticipantProfile
    progress: QuestionProgress = Field(default_factory=QuestionProgress)
    transcript: List[InterviewMessage] = Field(default_factory=list)
    behavior: BehaviorData = Field(default_factory=BehaviorData)
    context_entries: List[ContextEntry] = Field(default_factory=list)
    synthesis: Optional[SynthesisResult] = None
    created_at: int = Field(default_factory=now_ms)
    last_activity_at: int = Field(default_factory=now_ms)

    @property
    def is_complete(self) -> bool:
        return self.progress.is_complete


class SessionRecord(CamelModel):
    """Durable record of a completed interview."""

    id: str
    study_id: str
    study_name: str = "Unknown Study"
    participant_profile: Optional[ParticipantProfile] = None
    transcript: List[InterviewMessage] = Field(default_factory=list)
    synthesis: Optional[SynthesisResult] = None
    behavior_data: BehaviorData = Field(default_factory=BehaviorData)
    created_at: int = Field(default_factory=now_ms)
    completed_at: Optional[int] = None
    status: SessionStatus = SessionStatus.IN_PROGRESS
