"""
Turn pipeline runner.

Runs the stages of one turn in order, records per-stage durations on the
context, and folds the final context into a TurnResult. Rejections raised
as InterviewSystemError are logged as warnings and propagated unchanged.
"""

import time
from typing import List

import structlog

from openinterviewer.core.exceptions import InterviewSystemError

from .base import TurnStage
from .context import PipelineContext
from .result import TurnResult

log = structlog.get_logger(__name__)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class TurnPipeline:
    """Sequential stage runner for a single participant turn."""

    def __init__(self, stages: List[TurnStage]):
        self.stages = stages

    async def execute(self, context: PipelineContext) -> TurnResult:
        """
        Run every stage against the context.

        Raises:
            SessionCompletedError: The session was already complete
            Exception: Any unexpected stage failure, after logging it
        """
        turn_started = time.perf_counter()
        log.info(
            "turn_started",
            session_id=context.session_id,
            stages=len(self.stages),
            phase=context.session.progress.current_phase.value,
        )

        for stage in self.stages:
            context = await self._run_stage(stage, context)

        latency_ms = int(_elapsed_ms(turn_started))
        log.info(
            "turn_completed",
            session_id=context.session_id,
            phase=context.session.progress.current_phase.value,
            questions_asked=len(context.session.progress.questions_asked),
            used_fallback=context.used_fallback,
            cancelled=context.cancelled,
            is_complete=context.session.progress.is_complete,
            latency_ms=latency_ms,
            stage_timings=context.stage_timings,
        )
        return self._to_result(context, latency_ms)

    async def _run_stage(
        self, stage: TurnStage, context: PipelineContext
    ) -> PipelineContext:
        name = stage.stage_name
        started = time.perf_counter()
        try:
            context = await stage.process(context)
        except InterviewSystemError as e:
            log.warning(
                "turn_stage_rejected",
                stage=name,
                session_id=context.session_id,
                error_type=type(e).__name__,
                error=e.message,
            )
            raise
        except Exception:
            log.exception("turn_stage_failed", stage=name, session_id=context.session_id)
            raise

        context.stage_timings[name] = _elapsed_ms(started)
        log.debug("turn_stage_done", stage=name, duration_ms=context.stage_timings[name])
        return context

    @staticmethod
    def _to_result(context: PipelineContext, latency_ms: int) -> TurnResult:
        if context.ai_message is None:
            raise RuntimeError("Turn finished without an interviewer message")

        progress = context.session.progress
        return TurnResult(
            session_id=context.session_id,
            ai_message=context.ai_message,
            phase=progress.current_phase,
            questions_asked=list(progress.questions_asked),
            is_complete=progress.is_complete,
            applied_field_ids=list(context.applied_field_ids),
            used_fallback=context.used_fallback,
            cancelled=context.cancelled,
            latency_ms=latency_ms,
            stage_timings=dict(context.stage_timings),
        )
