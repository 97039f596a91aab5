from __future__ import annotations

from datetime import date

import pytest

from prompt_planner.domain import CreateAction, DeleteAction, UpdateAction
from prompt_planner.errors import MalformedInputError
from prompt_planner.interpreter import extract_json_payload, parse_action, parse_prompt_result


def test_extract_json_strips_fences_and_surrounding_text():
    text = 'Sure!\n```json\n{"interpretation": "ok", "actions": []}\n```\nDone.'
    assert extract_json_payload(text) == '{"interpretation": "ok", "actions": []}'
    assert extract_json_payload('prefix {"a": {"b": 1}} suffix') == '{"a": {"b": 1}}'


def test_extract_json_without_closing_brace():
    assert extract_json_payload('{"interpretation": "cut') is None
    assert extract_json_payload("no json here") is None


def test_parse_full_result():
    text = """{
      "interpretation": "Two actions",
      "actions": [
        {"action": "create", "event": {"title": "Formation", "startDate": "2026-03-02", "endDate": "2026-03-06", "eventType": "Training"}},
        {"action": "update", "event": {"id": "event_0001", "title": "Moved", "startDate": "2026-04-01", "endDate": "2026-04-01"}},
        {"action": "delete", "event": {"id": "event_0002", "title": "Old"}}
      ],
      "newEventTypes": [{"name": "Training", "suggestedColor": "#22c55e"}, {"name": "Bare"}],
      "warnings": ["careful"],
      "questions": []
    }"""
    result = parse_prompt_result(text)
    assert result.interpretation == "Two actions"
    create, update, delete = result.actions
    assert create == CreateAction("Formation", date(2026, 3, 2), date(2026, 3, 6), event_type="Training")
    assert isinstance(update, UpdateAction) and update.id == "event_0001"
    assert delete == DeleteAction(id="event_0002", title="Old")
    assert [item.suggested_color for item in result.new_event_types] == ["#22c55e", "#3b82f6"]
    assert result.warnings == ["careful"]
    assert result.rejected == []


def test_truncated_payload_falls_back():
    result = parse_prompt_result('{"interpretation": "Plan", "actions": [')
    assert result.actions == []
    assert result.warnings


def test_invalid_json_falls_back():
    result = parse_prompt_result("{interpretation: nope}")
    assert result.actions == []
    assert len(result.warnings) == 1


def test_bad_actions_are_rejected_individually():
    text = """{
      "interpretation": "mixed",
      "actions": [
        {"action": "move", "event": {"title": "x", "startDate": "2026-01-01", "endDate": "2026-01-01"}},
        {"action": "update", "event": {"title": "no id", "startDate": "2026-01-01", "endDate": "2026-01-01"}},
        {"action": "delete", "event": {"title": "no id"}},
        {"action": "create", "event": {"title": "reversed", "startDate": "2026-01-05", "endDate": "2026-01-01"}},
        {"action": "create", "event": {"title": "bad date", "startDate": "tomorrow", "endDate": "2026-01-01"}},
        {"action": "create", "event": {"startDate": "2026-01-01", "endDate": "2026-01-01"}},
        {"action": "create", "event": {"title": "good", "startDate": "2026-01-01", "endDate": "2026-01-02"}}
      ]
    }"""
    result = parse_prompt_result(text)
    assert [action.title for action in result.actions] == ["good"]
    assert len(result.rejected) == 6
    assert len(result.warnings) == 6


def test_parse_action_requires_event_object():
    with pytest.raises(MalformedInputError):
        parse_action({"action": "create"})
    with pytest.raises(MalformedInputError):
        parse_action("create")
