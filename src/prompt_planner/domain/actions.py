"""Structured output of the interpretation loop.

``PromptAction`` is a closed union: every consumer handles ``CreateAction``,
``UpdateAction`` and ``DeleteAction`` and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True, slots=True)
class CreateAction:
    title: str
    start_date: date
    end_date: date
    event_type: Optional[str] = None
    notes: Optional[str] = None

    kind = "create"


@dataclass(frozen=True, slots=True)
class UpdateAction:
    id: str
    title: str
    start_date: date
    end_date: date
    event_type: Optional[str] = None
    notes: Optional[str] = None

    kind = "update"


@dataclass(frozen=True, slots=True)
class DeleteAction:
    id: str
    title: Optional[str] = None

    kind = "delete"


PromptAction = Union[CreateAction, UpdateAction, DeleteAction]


@dataclass(frozen=True, slots=True)
class NewEventType:
    name: str
    suggested_color: str = "#3b82f6"


@dataclass(frozen=True, slots=True)
class RejectedAction:
    """A raw action the backend emitted that could not be turned into a PromptAction."""

    payload: Dict[str, Any]
    reason: str


@dataclass(slots=True)
class PromptResult:
    interpretation: str
    actions: List[PromptAction] = field(default_factory=list)
    new_event_types: List[NewEventType] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    questions: List[str] = field(default_factory=list)
    rejected: List[RejectedAction] = field(default_factory=list)

    @classmethod
    def failure(cls, interpretation: str, *warnings: str) -> "PromptResult":
        return cls(interpretation=interpretation, warnings=list(warnings))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interpretation": self.interpretation,
            "actions": [action_to_dict(action) for action in self.actions],
            "newEventTypes": [
                {"name": item.name, "suggestedColor": item.suggested_color} for item in self.new_event_types
            ],
            "warnings": list(self.warnings),
            "questions": list(self.questions),
        }


def action_to_dict(action: PromptAction) -> Dict[str, Any]:
    if isinstance(action, DeleteAction):
        event: Dict[str, Any] = {"id": action.id}
        if action.title:
            event["title"] = action.title
        return {"action": action.kind, "event": event}
    if isinstance(action, (CreateAction, UpdateAction)):
        event = {
            "title": action.title,
            "startDate": action.start_date.isoformat(),
            "endDate": action.end_date.isoformat(),
        }
        if isinstance(action, UpdateAction):
            event["id"] = action.id
        if action.event_type:
            event["eventType"] = action.event_type
        if action.notes is not None:
            event["notes"] = action.notes
        return {"action": action.kind, "event": event}
    raise TypeError(f"Unsupported prompt action: {action!r}")
