"""
Phase engine for one interview session.

Wraps the session's QuestionProgress and enforces its invariants:
- Starts in "background"; "wrap-up" is terminal
- Any phase may follow any other (the collaborator owns pacing)
- Addressed question indices only grow; re-marking is a no-op
- complete() sets is_complete and phase "wrap-up" together, whichever path
  triggers it (collaborator conclusion or early termination)
- Once complete, transitions and markings are ignored with a warning
"""

from typing import Optional

import structlog

from openinterviewer.domain.models.behavior import BehaviorData
from openinterviewer.domain.models.progress import (
    InterviewPhase,
    QuestionProgress,
    TERMINAL_PHASE,
)

log = structlog.get_logger(__name__)


class PhaseEngine:
    """State machine over a session's QuestionProgress."""

    def __init__(
        self,
        progress: QuestionProgress,
        behavior: Optional[BehaviorData] = None,
        session_id: Optional[str] = None,
    ):
        self.progress = progress
        self.behavior = behavior
        self.session_id = session_id

    @property
    def current_phase(self) -> InterviewPhase:
        return self.progress.current_phase

    @property
    def is_complete(self) -> bool:
        return self.progress.is_complete

    def begin(self, total_questions: int) -> None:
        """Set the question total and record the initial phase as explored."""
        self.progress.total = total_questions
        self._record_visit(self.progress.current_phase)

    def transition_to(self, phase: InterviewPhase) -> bool:
        """
        Move to the given phase unconditionally.

        Returns:
            True if applied, False if the session is already complete
        """
        if self.progress.is_complete:
            log.warning(
                "phase_transition_ignored_after_completion",
                session_id=self.session_id,
                requested_phase=phase.value,
            )
            return False

        previous = self.progress.current_phase
        self.progress.current_phase = phase
        self._record_visit(phase)

        if previous != phase:
            log.info(
                "phase_transitioned",
                session_id=self.session_id,
                from_phase=previous.value,
                to_phase=phase.value,
            )
        return True

    def mark_question_addressed(self, index: int) -> bool:
        """
        Add a core question index to the addressed set.

        Returns:
            True if the set grew. Re-marking, out-of-range indices and marks
            after completion return False.
        """
        if self.progress.is_complete:
            log.warning(
                "question_mark_ignored_after_completion",
                session_id=self.session_id,
                index=index,
            )
            return False

        if index < 0 or index >= self.progress.total:
            log.warning(
                "question_index_out_of_range",
                session_id=self.session_id,
                index=index,
                total=self.progress.total,
            )
            return False

        if index in self.progress.questions_asked:
            return False

        self.progress.questions_asked.append(index)
        log.debug(
            "question_addressed",
            session_id=self.session_id,
            index=index,
            addressed=len(self.progress.questions_asked),
            total=self.progress.total,
        )
        return True

    def complete(self, reason: str = "concluded") -> bool:
        """
        Enter the terminal state.

        Returns:
            True on the first completion, False if already complete
        """
        if self.progress.is_complete:
            return False

        self.progress.current_phase = TERMINAL_PHASE
        self.progress.is_complete = True
        self._record_visit(TERMINAL_PHASE)

        log.info(
            "session_phase_completed",
            session_id=self.session_id,
            reason=reason,
            questions_addressed=len(self.progress.questions_asked),
            total=self.progress.total,
        )
        return True

    def _record_visit(self, phase: InterviewPhase) -> None:
        if self.behavior is None:
            return
        if phase.value not in self.behavior.topics_explored:
            self.behavior.topics_explored.append(phase.value)
