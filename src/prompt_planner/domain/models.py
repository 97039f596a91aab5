from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..errors import MalformedInputError
from .enums import SchoolZone


def parse_day(value: Any) -> date:
    """Normalize a date, datetime or ISO string to a calendar day."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError as exc:
            raise MalformedInputError(f"Invalid ISO date: {value}") from exc
    raise MalformedInputError(f"Unsupported date value: {value!r}")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(slots=True)
class EventType:
    id: str
    calendar_id: str
    name: str
    color: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "EventType":
        return cls(
            id=str(record["id"]),
            calendar_id=str(record["calendar_id"]),
            name=str(record["name"]),
            color=str(record.get("color") or ""),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "calendar_id": self.calendar_id,
            "name": self.name,
            "color": self.color,
        }


@dataclass(slots=True)
class Event:
    id: str
    calendar_id: str
    title: str
    start_date: date
    end_date: date
    notes: Optional[str] = None
    color: Optional[str] = None
    order: Optional[int] = None
    event_type_id: Optional[str] = None
    event_type: Optional[EventType] = None
    prompt_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise MalformedInputError(
                f"Event '{self.title}' ends ({self.end_date}) before it starts ({self.start_date})."
            )

    @property
    def is_multi_day(self) -> bool:
        return self.end_date > self.start_date

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @classmethod
    def from_record(cls, record: Dict[str, Any], *, event_type: Optional[Dict[str, Any]] = None) -> "Event":
        instance = cls(
            id=str(record["id"]),
            calendar_id=str(record["calendar_id"]),
            title=str(record["title"]),
            start_date=parse_day(record["start_date"]),
            end_date=parse_day(record["end_date"]),
            notes=record.get("notes"),
            color=record.get("color"),
            order=record.get("order"),
            event_type_id=record.get("event_type_id"),
            prompt_id=record.get("prompt_id"),
        )
        if event_type:
            instance.event_type = EventType.from_record(event_type)
        return instance

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "calendar_id": self.calendar_id,
            "title": self.title,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "notes": self.notes,
            "color": self.color,
            "order": self.order,
            "event_type_id": self.event_type_id,
            "prompt_id": self.prompt_id,
        }


@dataclass(frozen=True, slots=True)
class Holiday:
    date: date
    name: str


@dataclass(frozen=True, slots=True)
class SchoolHoliday:
    name: str
    start_date: date
    end_date: date
    zones: tuple[SchoolZone, ...]

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True, slots=True)
class MergedSchoolHoliday:
    name: str
    zones: tuple[SchoolZone, ...]


@dataclass(slots=True)
class Prompt:
    id: str
    calendar_id: str
    content: str
    created_at: datetime
    interpretation: Optional[str] = None
    snapshot_name: Optional[str] = None

    @property
    def is_snapshot(self) -> bool:
        return self.snapshot_name is not None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Prompt":
        return cls(
            id=str(record["id"]),
            calendar_id=str(record["calendar_id"]),
            content=str(record.get("content") or ""),
            created_at=_parse_timestamp(record.get("created_at")) or datetime.min,
            interpretation=record.get("interpretation"),
            snapshot_name=record.get("snapshot_name"),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "calendar_id": self.calendar_id,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "interpretation": self.interpretation,
            "snapshot_name": self.snapshot_name,
        }


@dataclass(slots=True)
class CalendarState:
    id: str
    calendar_id: str
    prompt_id: str
    state_json: str
    created_at: datetime
    prompt: Optional[Prompt] = field(default=None)

    @classmethod
    def from_record(cls, record: Dict[str, Any], *, prompt: Optional[Dict[str, Any]] = None) -> "CalendarState":
        instance = cls(
            id=str(record["id"]),
            calendar_id=str(record["calendar_id"]),
            prompt_id=str(record["prompt_id"]),
            state_json=str(record["state_json"]),
            created_at=_parse_timestamp(record.get("created_at")) or datetime.min,
        )
        if prompt:
            instance.prompt = Prompt.from_record(prompt)
        return instance

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "calendar_id": self.calendar_id,
            "prompt_id": self.prompt_id,
            "state_json": self.state_json,
            "created_at": self.created_at.isoformat(),
        }
