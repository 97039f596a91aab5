from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import CalendarState, Event, EventType, Prompt


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class EventTypePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    calendar_id: str = Field(alias="calendarId")
    name: str
    color: str

    @classmethod
    def from_domain(cls, event_type: EventType) -> "EventTypePayload":
        return cls(id=event_type.id, calendar_id=event_type.calendar_id, name=event_type.name, color=event_type.color)


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    calendar_id: str = Field(alias="calendarId")
    title: str
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    notes: Optional[str] = Field(default=None)
    color: Optional[str] = Field(default=None)
    order: Optional[int] = Field(default=None)
    event_type_id: Optional[str] = Field(default=None, alias="eventTypeId")
    event_type: Optional[EventTypePayload] = Field(default=None, alias="eventType")
    prompt_id: Optional[str] = Field(default=None, alias="promptId")

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        return cls(
            id=event.id,
            calendar_id=event.calendar_id,
            title=event.title,
            start_date=event.start_date.isoformat(),
            end_date=event.end_date.isoformat(),
            notes=event.notes,
            color=event.color,
            order=event.order,
            event_type_id=event.event_type_id,
            event_type=EventTypePayload.from_domain(event.event_type) if event.event_type else None,
            prompt_id=event.prompt_id,
        )


class PromptPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    calendar_id: str = Field(alias="calendarId")
    content: str
    interpretation: Optional[str] = Field(default=None)
    snapshot_name: Optional[str] = Field(default=None, alias="snapshotName")
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    @classmethod
    def from_domain(cls, prompt: Prompt) -> "PromptPayload":
        return cls(
            id=prompt.id,
            calendar_id=prompt.calendar_id,
            content=prompt.content,
            interpretation=prompt.interpretation,
            snapshot_name=prompt.snapshot_name,
            created_at=_iso(prompt.created_at),
        )


class SnapshotPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    calendar_id: str = Field(alias="calendarId")
    prompt_id: str = Field(alias="promptId")
    name: Optional[str] = Field(default=None)
    state_json: str = Field(alias="stateJson")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    prompt: Optional[PromptPayload] = Field(default=None)

    @classmethod
    def from_domain(cls, state: CalendarState) -> "SnapshotPayload":
        return cls(
            id=state.id,
            calendar_id=state.calendar_id,
            prompt_id=state.prompt_id,
            name=state.prompt.snapshot_name if state.prompt else None,
            state_json=state.state_json,
            created_at=_iso(state.created_at),
            prompt=PromptPayload.from_domain(state.prompt) if state.prompt else None,
        )


# ---------------------------------------------------------------------- requests
# Missing values are rejected by the services with a 400, not by validation.


class PromptRequest(BaseModel):
    content: Optional[str] = None


class SynthesisEventInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    notes: Optional[str] = Field(default=None)
    event_type_id: Optional[str] = Field(default=None, alias="eventTypeId")


class SynthesisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_events: List[SynthesisEventInput] = Field(default_factory=list, alias="currentEvents")
    synthesis_text: Optional[str] = Field(default=None, alias="synthesisText")


class SnapshotRequest(BaseModel):
    name: Optional[str] = None


class EventCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    notes: Optional[str] = None
    color: Optional[str] = None
    event_type_id: Optional[str] = Field(default=None, alias="eventTypeId")


class EventUpdateRequest(EventCreateRequest):
    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class SplitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: Optional[str] = Field(default=None, alias="date")
    new_title: Optional[str] = Field(default=None, alias="newTitle")


class ReorderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_ids: List[str] = Field(default_factory=list, alias="eventIds")


class EventTypeRequest(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)
