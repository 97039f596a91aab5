from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import orjson

from ..domain import CalendarState, Event, EventType, parse_day
from ..errors import MalformedInputError, NotFoundError
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SnapshotEvent:
    id: str
    title: str
    start_date: date
    end_date: date
    event_type_id: Optional[str] = None
    notes: Optional[str] = None
    color: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise MalformedInputError(f"Snapshot event {self.id} ends before it starts.")


@dataclass(frozen=True, slots=True)
class SnapshotEventType:
    id: str
    name: str
    color: str


@dataclass(slots=True)
class SnapshotContent:
    events: List[SnapshotEvent] = field(default_factory=list)
    event_types: List[SnapshotEventType] = field(default_factory=list)
    rules: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True)
class RestoreOutcome:
    snapshot_name: Optional[str]
    events: List[Event]
    event_types: List[EventType]


def serialize_snapshot(
    events: Iterable[Event],
    event_types: Iterable[EventType],
    rules: Iterable[Dict[str, Any]] = (),
) -> str:
    event_items: List[Dict[str, Any]] = []
    for event in events:
        item: Dict[str, Any] = {
            "id": event.id,
            "title": event.title,
            "startDate": event.start_date.isoformat(),
            "endDate": event.end_date.isoformat(),
            "eventTypeId": event.event_type_id,
        }
        if event.notes is not None:
            item["notes"] = event.notes
        if event.color is not None:
            item["color"] = event.color
        event_items.append(item)
    payload = {
        "events": event_items,
        "eventTypes": [{"id": item.id, "name": item.name, "color": item.color} for item in event_types],
        "rules": list(rules),
    }
    return orjson.dumps(payload).decode()


def parse_snapshot(blob: str) -> SnapshotContent:
    """Parse a snapshot blob; fields this version does not know are ignored."""

    try:
        payload = orjson.loads(blob)
    except orjson.JSONDecodeError as exc:
        raise MalformedInputError("Snapshot content is not valid JSON.") from exc
    if not isinstance(payload, dict):
        raise MalformedInputError("Snapshot content must be an object.")

    content = SnapshotContent()
    try:
        for raw in payload.get("events") or []:
            content.events.append(
                SnapshotEvent(
                    id=str(raw["id"]),
                    title=str(raw["title"]),
                    start_date=parse_day(raw["startDate"]),
                    end_date=parse_day(raw["endDate"]),
                    event_type_id=raw.get("eventTypeId"),
                    notes=raw.get("notes"),
                    color=raw.get("color"),
                )
            )
        for raw in payload.get("eventTypes") or []:
            content.event_types.append(
                SnapshotEventType(id=str(raw["id"]), name=str(raw["name"]), color=str(raw.get("color") or ""))
            )
    except (KeyError, TypeError, AttributeError) as exc:
        raise MalformedInputError(f"Snapshot content is incomplete: {exc}") from exc
    rules = payload.get("rules")
    content.rules = list(rules) if isinstance(rules, list) else []
    return content


def default_snapshot_name(today: date) -> str:
    return f"Snapshot {today.strftime('%d/%m/%Y')}"


@dataclass(slots=True)
class SnapshotService:
    context: ServiceContext

    def create_snapshot(
        self,
        calendar_id: str,
        name: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ) -> CalendarState:
        self.context.store.ensure_calendar(calendar_id)
        name = (name or "").strip() or default_snapshot_name(today or date.today())
        blob = serialize_snapshot(
            self.context.events.list_for_calendar(calendar_id),
            self.context.event_types.list_for_calendar(calendar_id),
            self.context.states.calendar_rules(calendar_id),
        )
        prompt = self.context.prompts.create(calendar_id, f"Snapshot: {name}", snapshot_name=name)
        state = self.context.states.create(calendar_id, prompt.id, blob)
        logger.info("Created snapshot %s (%s) on %s", state.id, name, calendar_id)
        return state

    def list_snapshots(self, calendar_id: str, limit: int = 50) -> List[CalendarState]:
        return self.context.states.list_recent(calendar_id, limit=limit)

    def restore_snapshot(self, calendar_id: str, snapshot_id: str) -> RestoreOutcome:
        state = self.context.states.fetch(calendar_id, snapshot_id)
        if state is None:
            raise NotFoundError(f"Snapshot {snapshot_id} not found.")
        content = parse_snapshot(state.state_json)
        snapshot_name = state.prompt.snapshot_name if state.prompt else None
        restored_types = [
            EventType(id=item.id, calendar_id=calendar_id, name=item.name, color=item.color)
            for item in content.event_types
        ]
        # Conflicts must surface before the first write.
        self.context.event_types.check_replacement(calendar_id, restored_types)

        self.context.checkpoint(calendar_id, f"Restore {snapshot_name or snapshot_id}")
        self.context.event_types.replace_all(calendar_id, restored_types)
        self.context.events.delete_many(calendar_id)

        wanted_type_ids = {item.id for item in restored_types}
        for item in content.events:
            self.context.events.create(
                calendar_id,
                title=item.title,
                start_date=item.start_date,
                end_date=item.end_date,
                notes=item.notes,
                color=item.color,
                event_type_id=item.event_type_id if item.event_type_id in wanted_type_ids else None,
            )

        logger.info("Restored snapshot %s on %s (%d events)", snapshot_id, calendar_id, len(content.events))
        return RestoreOutcome(
            snapshot_name=snapshot_name,
            events=self.context.events.list_for_calendar(calendar_id),
            event_types=self.context.event_types.list_for_calendar(calendar_id),
        )


__all__ = [
    "RestoreOutcome",
    "SnapshotContent",
    "SnapshotEvent",
    "SnapshotEventType",
    "SnapshotService",
    "default_snapshot_name",
    "parse_snapshot",
    "serialize_snapshot",
]
