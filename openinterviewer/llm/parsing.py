"""
Tolerant parsing of structured collaborator output.

Collaborator text is untrusted: it may wrap JSON in code fences or prose,
or return a payload where only some parts are valid. Parsing is two steps:

1. Recovery: strip code fences and cut out the first balanced top-level
   [...] or {...} span, then json.loads it.
2. Validation: check each part of the turn response on its own. Invalid
   parts are dropped; only an unrecoverable message triggers the fallback.
"""

import json
import re
from typing import Any, List, Optional, Tuple

import structlog

from openinterviewer.core.exceptions import LLMResponseParseError
from openinterviewer.domain.models.collaborator import ProfileUpdate, TurnResponse
from openinterviewer.domain.models.profile import UPDATE_STATUSES, FieldStatus
from openinterviewer.domain.models.progress import InterviewPhase

log = structlog.get_logger(__name__)

_FENCE_JSON = re.compile(r"```json\s*")
_FENCE = re.compile(r"```\s*")

_CLOSERS = {"[": "]", "{": "}"}


def _balanced_span(text: str, start: int) -> Optional[str]:
    """Return text[start:end] where the bracket at start is closed, or None."""
    opener = text[start]
    closer = _CLOSERS[opener]
    depth = 0
    for i in range(start, len(text)):
        if text[i] == opener:
            depth += 1
        elif text[i] == closer:
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def clean_json(text: Optional[str]) -> str:
    """
    Extract the JSON portion of a model response.

    Strips ```json / ``` fences, then returns the first balanced top-level
    array or object, whichever opens first. Text with no balanced structure
    is returned stripped.
    """
    if not text:
        return "{}"

    cleaned = _FENCE.sub("", _FENCE_JSON.sub("", text)).strip()

    first_bracket = cleaned.find("[")
    first_brace = cleaned.find("{")

    if first_bracket != -1 and (first_brace == -1 or first_bracket < first_brace):
        span = _balanced_span(cleaned, first_bracket)
        if span is not None:
            return span

    if first_brace != -1:
        span = _balanced_span(cleaned, first_brace)
        if span is not None:
            return span

    return cleaned


def parse_json_payload(text: Optional[str]) -> Any:
    """
    Recover and decode a JSON value from model output.

    Raises:
        LLMResponseParseError: If no decodable JSON can be recovered
    """
    candidate = clean_json(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise LLMResponseParseError(f"Unrecoverable JSON in model output: {e}") from e


def _coerce_index(value: Any) -> Optional[int]:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _coerce_phase(value: Any) -> Optional[InterviewPhase]:
    if not isinstance(value, str):
        return None
    try:
        return InterviewPhase(value)
    except ValueError:
        return None


def _coerce_updates(value: Any) -> List[ProfileUpdate]:
    if not isinstance(value, list):
        return []

    updates = []
    for entry in value:
        if not isinstance(entry, dict):
            continue

        field_id = entry.get("fieldId")
        if not isinstance(field_id, str) or not field_id:
            continue

        status_raw = entry.get("status")
        try:
            status = FieldStatus(status_raw)
        except ValueError:
            continue
        if status not in UPDATE_STATUSES:
            continue

        raw_value = entry.get("value")
        if raw_value is None or isinstance(raw_value, str):
            field_value = raw_value
        elif isinstance(raw_value, (int, float)) and not isinstance(raw_value, bool):
            field_value = str(raw_value)
        else:
            continue

        updates.append(
            ProfileUpdate(field_id=field_id, value=field_value, status=status)
        )
    return updates


def parse_turn_response(text: Optional[str]) -> Tuple[TurnResponse, bool]:
    """
    Parse raw collaborator text into a validated TurnResponse.

    Returns:
        (response, used_fallback). used_fallback is True when the message
        could not be recovered and the fixed fallback response was used.
    """
    try:
        data = parse_json_payload(text)
    except LLMResponseParseError as e:
        log.warning("turn_response_unparseable", error=e.message)
        return TurnResponse.fallback(), True

    if not isinstance(data, dict):
        log.warning("turn_response_not_object", payload_type=type(data).__name__)
        return TurnResponse.fallback(), True

    message = data.get("message")
    if not isinstance(message, str) or not message.strip():
        log.warning("turn_response_missing_message")
        return TurnResponse.fallback(), True

    dropped = []

    question_addressed = None
    if data.get("questionAddressed") is not None:
        question_addressed = _coerce_index(data["questionAddressed"])
        if question_addressed is None:
            dropped.append("questionAddressed")

    phase_transition = None
    if data.get("phaseTransition") is not None:
        phase_transition = _coerce_phase(data["phaseTransition"])
        if phase_transition is None:
            dropped.append("phaseTransition")

    raw_updates = data.get("profileUpdates")
    updates = _coerce_updates(raw_updates)
    if isinstance(raw_updates, list) and len(updates) < len(raw_updates):
        dropped.append("profileUpdates")

    should_conclude = data.get("shouldConclude") is True

    if dropped:
        log.warning("turn_response_parts_dropped", parts=dropped)

    response = TurnResponse(
        message=message.strip(),
        question_addressed=question_addressed,
        phase_transition=phase_transition,
        profile_updates=updates,
        should_conclude=should_conclude,
    )
    return response, False
