"""Tests for tolerant collaborator output parsing."""

import json

import pytest

from openinterviewer.core.exceptions import LLMResponseParseError
from openinterviewer.domain.models import FieldStatus, InterviewPhase
from openinterviewer.domain.models.collaborator import FALLBACK_TURN_MESSAGE
from openinterviewer.llm.parsing import clean_json, parse_json_payload, parse_turn_response


class TestCleanJson:
    def test_strips_code_fences(self):
        assert clean_json('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_extracts_object_from_prose(self):
        text = 'Sure! Here it is: {"a": {"b": 2}} Let me know.'
        assert clean_json(text) == '{"a": {"b": 2}}'

    def test_array_wins_when_it_opens_first(self):
        assert clean_json('result: [1, {"a": 2}] trailing {"x": 1}') == '[1, {"a": 2}]'

    def test_empty_input_is_empty_object(self):
        assert clean_json("") == "{}"
        assert clean_json(None) == "{}"


def test_parse_json_payload_raises_on_garbage():
    with pytest.raises(LLMResponseParseError):
        parse_json_payload("no json here")


def test_full_turn_response():
    text = json.dumps(
        {
            "message": "  What tools do you use?  ",
            "questionAddressed": 1,
            "phaseTransition": "core-questions",
            "profileUpdates": [
                {"fieldId": "role", "value": "Designer", "status": "extracted"}
            ],
            "shouldConclude": False,
        }
    )

    response, used_fallback = parse_turn_response(text)

    assert not used_fallback
    assert response.message == "What tools do you use?"
    assert response.question_addressed == 1
    assert response.phase_transition == InterviewPhase.CORE_QUESTIONS
    assert response.profile_updates[0].field_id == "role"
    assert response.profile_updates[0].status == FieldStatus.EXTRACTED
    assert not response.should_conclude


@pytest.mark.parametrize(
    "text",
    [
        "not json at all",
        "[1, 2, 3]",
        json.dumps({"questionAddressed": 0}),
        json.dumps({"message": "   "}),
        json.dumps({"message": 42}),
    ],
)
def test_unrecoverable_message_uses_fallback(text):
    response, used_fallback = parse_turn_response(text)

    assert used_fallback
    assert response.message == FALLBACK_TURN_MESSAGE
    assert response.profile_updates == []
    assert not response.should_conclude


def test_invalid_parts_are_dropped_individually():
    text = json.dumps(
        {
            "message": "Thanks!",
            "questionAddressed": "first",
            "phaseTransition": "lunch-break",
            "profileUpdates": [
                {"fieldId": "role", "value": "PM", "status": "extracted"},
                {"fieldId": "team", "value": "5", "status": "pending"},
                {"value": "orphan", "status": "vague"},
                "garbage",
            ],
        }
    )

    response, used_fallback = parse_turn_response(text)

    assert not used_fallback
    assert response.message == "Thanks!"
    assert response.question_addressed is None
    assert response.phase_transition is None
    assert [u.field_id for u in response.profile_updates] == ["role"]


def test_numeric_update_values_become_strings():
    text = json.dumps(
        {
            "message": "Ok",
            "profileUpdates": [{"fieldId": "years", "value": 7, "status": "extracted"}],
        }
    )

    response, _ = parse_turn_response(text)

    assert response.profile_updates[0].value == "7"


def test_should_conclude_requires_literal_true():
    response, _ = parse_turn_response(json.dumps({"message": "Ok", "shouldConclude": "yes"}))
    assert not response.should_conclude

    response, _ = parse_turn_response(json.dumps({"message": "Bye", "shouldConclude": True}))
    assert response.should_conclude


def test_boolean_index_is_not_an_index():
    response, _ = parse_turn_response(json.dumps({"message": "Ok", "questionAddressed": True}))
    assert response.question_addressed is None


def test_fenced_turn_response():
    text = '```json\n{"message": "Hi", "questionAddressed": 2.0}\n```'

    response, used_fallback = parse_turn_response(text)

    assert not used_fallback
    assert response.question_addressed == 2
