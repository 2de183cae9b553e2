"""Tests for PhaseEngine state transitions."""

import pytest

from openinterviewer.domain.models import BehaviorData, InterviewPhase, QuestionProgress
from openinterviewer.services.phase_engine import PhaseEngine


@pytest.fixture
def engine():
    engine = PhaseEngine(QuestionProgress(), BehaviorData(), session_id="s-1")
    engine.begin(3)
    return engine


def test_begin_sets_total_and_records_initial_phase(engine):
    assert engine.progress.total == 3
    assert engine.current_phase == InterviewPhase.BACKGROUND
    assert engine.behavior.topics_explored == ["background"]


def test_any_phase_may_follow_any_other(engine):
    assert engine.transition_to(InterviewPhase.FEEDBACK)
    assert engine.transition_to(InterviewPhase.BACKGROUND)
    assert engine.current_phase == InterviewPhase.BACKGROUND
    assert engine.behavior.topics_explored == ["background", "feedback"]


def test_marking_is_monotonic_and_idempotent(engine):
    assert engine.mark_question_addressed(2)
    assert engine.mark_question_addressed(0)
    assert not engine.mark_question_addressed(2)
    assert engine.progress.questions_asked == [2, 0]


@pytest.mark.parametrize("index", [-1, 3, 99])
def test_out_of_range_index_is_rejected(engine, index):
    assert not engine.mark_question_addressed(index)
    assert engine.progress.questions_asked == []


def test_complete_forces_wrap_up(engine):
    engine.transition_to(InterviewPhase.EXPLORATION)

    assert engine.complete(reason="test")

    assert engine.is_complete
    assert engine.current_phase == InterviewPhase.WRAP_UP
    assert "wrap-up" in engine.behavior.topics_explored


def test_terminal_state_is_sticky(engine):
    engine.mark_question_addressed(0)
    engine.complete()

    assert not engine.complete()
    assert not engine.transition_to(InterviewPhase.CORE_QUESTIONS)
    assert not engine.mark_question_addressed(1)
    assert engine.current_phase == InterviewPhase.WRAP_UP
    assert engine.progress.questions_asked == [0]


def test_engine_without_behavior_tracks_progress_only():
    progress = QuestionProgress()
    engine = PhaseEngine(progress)
    engine.begin(1)

    assert engine.transition_to(InterviewPhase.CORE_QUESTIONS)
    assert progress.current_phase == InterviewPhase.CORE_QUESTIONS
