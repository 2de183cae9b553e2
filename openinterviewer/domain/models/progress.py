"""Interview phase and question progress models."""

from enum import Enum
from typing import List

from pydantic import Field

from openinterviewer.domain.models.base import CamelModel


class InterviewPhase(str, Enum):
    """Coarse stage of an interview conversation.

    The collaborator is the sole authority on pacing, so any phase may follow
    any other. WRAP_UP is terminal and is reached when the session completes.
    """

    BACKGROUND = "background"
    CORE_QUESTIONS = "core-questions"
    EXPLORATION = "exploration"
    FEEDBACK = "feedback"
    WRAP_UP = "wrap-up"


INITIAL_PHASE = InterviewPhase.BACKGROUND
TERMINAL_PHASE = InterviewPhase.WRAP_UP


class QuestionProgress(CamelModel):
    """Addressed core questions and phase state for one session.

    questions_asked holds unique indices in the order they were first marked.
    """

    questions_asked: List[int] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    current_phase: InterviewPhase = INITIAL_PHASE
    is_complete: bool = False
