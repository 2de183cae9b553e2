"""Collaborator result and structured turn response models.

Every collaborator operation returns either CollaboratorSuccess carrying a
payload or CollaboratorFailure carrying a reason. Callers recover failures
locally with a fixed fallback.
"""

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union

from pydantic import Field

from openinterviewer.domain.models.base import CamelModel
from openinterviewer.domain.models.profile import FieldStatus
from openinterviewer.domain.models.progress import InterviewPhase

T = TypeVar("T")

FALLBACK_TURN_MESSAGE = "I appreciate you sharing that. What else comes to mind?"


@dataclass(frozen=True)
class CollaboratorSuccess(Generic[T]):
    payload: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class CollaboratorFailure:
    reason: str

    @property
    def ok(self) -> bool:
        return False


CollaboratorResult = Union[CollaboratorSuccess[T], CollaboratorFailure]


class ProfileUpdate(CamelModel):
    """One declared field update from the collaborator."""

    field_id: str
    value: Optional[str] = None
    status: FieldStatus


class TurnResponse(CamelModel):
    """Validated structured response for one turn.

    Parts that failed validation are absent rather than invalid.
    """

    message: str
    question_addressed: Optional[int] = None
    phase_transition: Optional[InterviewPhase] = None
    profile_updates: List[ProfileUpdate] = Field(default_factory=list)
    should_conclude: bool = False

    @classmethod
    def fallback(cls) -> "TurnResponse":
        return cls(message=FALLBACK_TURN_MESSAGE)
