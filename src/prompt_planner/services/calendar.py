from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..dates.splitting import split_range
from ..domain import Event, EventType, parse_day
from ..errors import MalformedInputError, NotFoundError
from .context import ServiceContext

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("title", "start_date", "end_date", "notes", "color", "event_type_id")


@dataclass(slots=True)
class SplitOutcome:
    deleted_event_id: str
    created_events: List[Event] = field(default_factory=list)
    edited_event: Optional[Event] = None


def _required_title(value: Optional[str], what: str = "Title") -> str:
    text = (value or "").strip()
    if not text:
        raise MalformedInputError(f"{what} is required.")
    return text


@dataclass(slots=True)
class CalendarService:
    context: ServiceContext

    def _calendar(self, calendar_id: str) -> str:
        self.context.store.ensure_calendar(calendar_id)
        return calendar_id

    # ------------------------------------------------------------------ events

    def list_events(self, calendar_id: str) -> List[Event]:
        return self.context.events.list_for_calendar(self._calendar(calendar_id))

    def get_event(self, calendar_id: str, event_id: str) -> Event:
        event = self.context.events.fetch(calendar_id, event_id)
        if event is None:
            raise NotFoundError(f"Event {event_id} not found.")
        return event

    def create_event(
        self,
        calendar_id: str,
        *,
        title: Optional[str],
        start_date: Any,
        end_date: Any,
        notes: Optional[str] = None,
        color: Optional[str] = None,
        event_type_id: Optional[str] = None,
    ) -> Event:
        if start_date is None or end_date is None:
            raise MalformedInputError("Title, start date and end date are required.")
        title = _required_title(title)
        self._calendar(calendar_id)
        self.context.checkpoint(calendar_id, f"Create {title}")
        event = self.context.events.create(
            calendar_id,
            title=title,
            start_date=parse_day(start_date),
            end_date=parse_day(end_date),
            notes=notes,
            color=color,
            event_type_id=event_type_id or None,
        )
        logger.info("Created event %s on %s", event.id, calendar_id)
        return event

    def update_event(self, calendar_id: str, event_id: str, changes: Mapping[str, Any]) -> Event:
        """Partial update: only the keys present in ``changes`` are written."""

        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise MalformedInputError(f"Unsupported event fields: {', '.join(sorted(unknown))}")
        existing = self.get_event(calendar_id, event_id)
        updates: Dict[str, Any] = dict(changes)
        if "title" in updates:
            updates["title"] = _required_title(updates["title"])
        for key in ("start_date", "end_date"):
            if key in updates:
                if updates[key] is None:
                    raise MalformedInputError(f"{key.replace('_', ' ').capitalize()} cannot be empty.")
                updates[key] = parse_day(updates[key])
        if "event_type_id" in updates:
            updates["event_type_id"] = updates["event_type_id"] or None

        self.context.checkpoint(calendar_id, f"Update {existing.title}")
        return self.context.events.update(calendar_id, event_id, updates)

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        existing = self.get_event(calendar_id, event_id)
        self.context.checkpoint(calendar_id, f"Delete {existing.title}")
        self.context.events.delete(calendar_id, event_id)
        logger.info("Deleted event %s on %s", event_id, calendar_id)

    def reorder_events(self, calendar_id: str, event_ids: Sequence[str]) -> List[Event]:
        if len(set(event_ids)) != len(event_ids):
            raise MalformedInputError("Event ids must be unique.")
        self._calendar(calendar_id)
        self.context.checkpoint(calendar_id, "Reorder events")
        self.context.events.set_order(calendar_id, list(event_ids))
        return self.context.events.list_for_calendar(calendar_id)

    def split_event(
        self,
        calendar_id: str,
        event_id: str,
        clicked: Any,
        new_title: Optional[str] = None,
    ) -> SplitOutcome:
        """Carve ``clicked`` out of a multi-day event.

        The day is dropped, or recreated on its own as ``new_title`` when given;
        the surrounding segments keep the original title, type, colour and notes.
        """

        event = self.get_event(calendar_id, event_id)
        day = parse_day(clicked)
        plan = split_range(event.start_date, event.end_date, day)
        if new_title is not None:
            new_title = _required_title(new_title, "New title")

        self.context.checkpoint(calendar_id, f"Split {event.title}")
        outcome = SplitOutcome(deleted_event_id=event.id)
        pieces: List[tuple[str, date, date]] = []
        if plan.before:
            pieces.append((event.title, *plan.before))
        if new_title is not None:
            pieces.append((new_title, day, day))
        if plan.after:
            pieces.append((event.title, *plan.after))

        for title, start, end in pieces:
            created = self.context.events.create(
                calendar_id,
                title=title,
                start_date=start,
                end_date=end,
                notes=event.notes,
                color=event.color,
                event_type_id=event.event_type_id,
            )
            outcome.created_events.append(created)
            if new_title is not None and start == day and end == day:
                outcome.edited_event = created
        self.context.events.delete(calendar_id, event.id)
        logger.info("Split event %s on %s into %d piece(s)", event.id, calendar_id, len(pieces))
        return outcome

    # ------------------------------------------------------------------ event types

    def list_event_types(self, calendar_id: str) -> List[EventType]:
        return self.context.event_types.list_for_calendar(self._calendar(calendar_id))

    def create_event_type(self, calendar_id: str, name: Optional[str], color: Optional[str]) -> EventType:
        name = _required_title(name, "Name")
        if not (color or "").strip():
            raise MalformedInputError("Name and color are required.")
        self._calendar(calendar_id)
        return self.context.event_types.create(calendar_id, name, color.strip())

    def update_event_type(
        self,
        calendar_id: str,
        type_id: str,
        *,
        name: Optional[str] = None,
        color: Optional[str] = None,
    ) -> EventType:
        if name is not None:
            name = _required_title(name, "Name")
        return self.context.event_types.update(calendar_id, type_id, name=name, color=color or None)

    def delete_event_type(self, calendar_id: str, type_id: str) -> None:
        if not self.context.event_types.delete(calendar_id, type_id):
            raise NotFoundError(f"Event type {type_id} not found.")
        logger.info("Deleted event type %s on %s", type_id, calendar_id)


__all__ = ["CalendarService", "SplitOutcome"]
