from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..domain import CalendarState, Event, EventType, Prompt
from ..services import ApplyOutcome, PromptOutcome, RestoreOutcome, SplitOutcome, SynthesisOutcome, UndoOutcome
from .models import EventPayload, EventTypePayload, PromptPayload, SnapshotPayload


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(by_alias=True)


def serialize_events(events: Iterable[Event]) -> List[Dict[str, Any]]:
    return [serialize_event(event) for event in events]


def serialize_event_type(event_type: EventType) -> Dict[str, Any]:
    return EventTypePayload.from_domain(event_type).model_dump(by_alias=True)


def serialize_event_types(event_types: Iterable[EventType]) -> List[Dict[str, Any]]:
    return [serialize_event_type(item) for item in event_types]


def serialize_prompt(prompt: Prompt) -> Dict[str, Any]:
    return PromptPayload.from_domain(prompt).model_dump(by_alias=True)


def serialize_calendar_state(state: CalendarState) -> Dict[str, Any]:
    return SnapshotPayload.from_domain(state).model_dump(by_alias=True)


def _serialize_applied(applied: ApplyOutcome) -> Dict[str, Any]:
    return {
        "createdEvents": serialize_events(applied.created_events),
        "updatedEvents": serialize_events(applied.updated_events),
        "deletedEventIds": list(applied.deleted_event_ids),
        "newEventTypes": serialize_event_types(applied.new_event_types),
        "createdCount": applied.created_count,
        "updatedCount": applied.updated_count,
        "deletedCount": applied.deleted_count,
        "skipped": [{"action": item.action.kind, "reason": item.reason} for item in applied.skipped],
    }


def serialize_prompt_outcome(outcome: PromptOutcome) -> Dict[str, Any]:
    result = outcome.result
    return {
        "prompt": serialize_prompt(outcome.applied.prompt) if outcome.applied.prompt else None,
        "result": {
            "interpretation": result.interpretation,
            "warnings": list(result.warnings),
            "questions": list(result.questions),
        },
        **_serialize_applied(outcome.applied),
    }


def serialize_synthesis_outcome(outcome: SynthesisOutcome) -> Dict[str, Any]:
    return {
        "interpretation": outcome.interpretation,
        "warnings": list(outcome.result.warnings),
        "events": serialize_events(outcome.events),
    }


def serialize_restore_outcome(outcome: RestoreOutcome) -> Dict[str, Any]:
    return {
        "events": serialize_events(outcome.events),
        "eventTypes": serialize_event_types(outcome.event_types),
        "snapshotName": outcome.snapshot_name,
    }


def serialize_undo_outcome(outcome: UndoOutcome) -> Dict[str, Any]:
    return {
        "tier": outcome.tier.value,
        "description": outcome.description,
        "undonePrompt": serialize_prompt(outcome.undone_prompt) if outcome.undone_prompt else None,
        "deletedEventIds": list(outcome.deleted_event_ids),
        "currentEvents": serialize_events(outcome.events),
        "currentEventTypes": serialize_event_types(outcome.event_types),
    }


def serialize_split_outcome(outcome: SplitOutcome) -> Dict[str, Any]:
    return {
        "deletedEventId": outcome.deleted_event_id,
        "createdEvents": serialize_events(outcome.created_events),
        "editedEvent": serialize_event(outcome.edited_event) if outcome.edited_event else None,
    }
