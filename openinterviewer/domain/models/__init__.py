"""Domain models package."""

from .base import CamelModel, now_ms
from .access import AccessGrant
from .study import AIBehavior, AIProvider, ProfileField, StoredStudy, StudyConfig
from .profile import FieldStatus, ParticipantProfile, ProfileFieldValue
from .progress import InterviewPhase, QuestionProgress
from .message import ContextEntry, ContextSource, InterviewMessage, MessageRole
from .behavior import AudioPreference, BehaviorData
from .synthesis import (
    AggregateBody,
    AggregateSynthesisResult,
    CommonTheme,
    DivergentView,
    FollowupSuggestion,
    SynthesisResult,
    Theme,
)
from .session import InterviewSession, SessionRecord, SessionStatus
from .collaborator import (
    CollaboratorFailure,
    CollaboratorResult,
    CollaboratorSuccess,
    ProfileUpdate,
    TurnResponse,
)

__all__ = [
    "CamelModel",
    "now_ms",
    "AccessGrant",
    "AIBehavior",
    "AIProvider",
    "ProfileField",
    "StoredStudy",
    "StudyConfig",
    "FieldStatus",
    "ParticipantProfile",
    "ProfileFieldValue",
    "InterviewPhase",
    "QuestionProgress",
    "ContextEntry",
    "ContextSource",
    "InterviewMessage",
    "MessageRole",
    "AudioPreference",
    "BehaviorData",
    "AggregateBody",
    "AggregateSynthesisResult",
    "CommonTheme",
    "DivergentView",
    "FollowupSuggestion",
    "SynthesisResult",
    "Theme",
    "InterviewSession",
    "SessionRecord",
    "SessionStatus",
    "CollaboratorFailure",
    "CollaboratorResult",
    "CollaboratorSuccess",
    "ProfileUpdate",
    "TurnResponse",
]
