from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from ...core import CalendarStore
from ...domain import Event
from ...errors import NotFoundError, StorageConflictError

_EDITABLE_FIELDS = frozenset(
    {"title", "start_date", "end_date", "notes", "color", "order", "event_type_id", "prompt_id"}
)


def _sort_key(event: Event) -> tuple:
    return (event.start_date, event.order if event.order is not None else 0, event.id)


@dataclass(slots=True)
class EventRepository:
    store: CalendarStore

    def _types_by_id(self, state: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        return {record["id"]: record for record in state["event_types"]}

    def _hydrate(self, record: Dict[str, Any], types: Dict[str, Dict[str, Any]]) -> Event:
        type_id = record.get("event_type_id")
        return Event.from_record(record, event_type=types.get(type_id) if type_id else None)

    def _check_type(self, state: Dict[str, Any], calendar_id: str, type_id: Optional[str]) -> None:
        if type_id is None:
            return
        for record in state["event_types"]:
            if record["id"] == type_id and record["calendar_id"] == calendar_id:
                return
        raise NotFoundError(f"Event type {type_id} does not exist in calendar {calendar_id}.")

    def list_for_calendar(self, calendar_id: str) -> List[Event]:
        state = self.store.data
        types = self._types_by_id(state)
        events = [
            self._hydrate(record, types) for record in state["events"] if record["calendar_id"] == calendar_id
        ]
        return sorted(events, key=_sort_key)

    def list_for_prompt(self, calendar_id: str, prompt_id: str) -> List[Event]:
        return [event for event in self.list_for_calendar(calendar_id) if event.prompt_id == prompt_id]

    def fetch(self, calendar_id: str, event_id: str) -> Optional[Event]:
        state = self.store.data
        for record in state["events"]:
            if record["id"] == event_id and record["calendar_id"] == calendar_id:
                return self._hydrate(record, self._types_by_id(state))
        return None

    def create(
        self,
        calendar_id: str,
        *,
        title: str,
        start_date: date,
        end_date: date,
        notes: Optional[str] = None,
        color: Optional[str] = None,
        order: Optional[int] = None,
        event_type_id: Optional[str] = None,
        prompt_id: Optional[str] = None,
    ) -> Event:
        draft = Event(
            id="",
            calendar_id=calendar_id,
            title=title,
            start_date=start_date,
            end_date=end_date,
            notes=notes,
            color=color,
            order=order,
            event_type_id=event_type_id,
            prompt_id=prompt_id,
        )

        def _create(state: Dict[str, Any]) -> Event:
            self._check_type(state, calendar_id, event_type_id)
            draft.id = self.store.consume_id(state, "event")
            record = draft.to_record()
            state["events"].append(record)
            return self._hydrate(record, self._types_by_id(state))

        return self.store.mutate(_create)

    def reinsert(self, event: Event) -> Event:
        """Insert an event under its existing id, dropping a type reference that no longer resolves."""

        def _reinsert(state: Dict[str, Any]) -> Event:
            if any(record["id"] == event.id for record in state["events"]):
                raise StorageConflictError(f"Event {event.id} already exists.")
            record = event.to_record()
            types = self._types_by_id(state)
            type_id = record.get("event_type_id")
            if type_id and types.get(type_id, {}).get("calendar_id") != event.calendar_id:
                record["event_type_id"] = None
            state["events"].append(record)
            return self._hydrate(record, types)

        return self.store.mutate(_reinsert)

    def update(self, calendar_id: str, event_id: str, changes: Dict[str, Any]) -> Event:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported event fields: {sorted(unknown)}")

        def _update(state: Dict[str, Any]) -> Event:
            for index, record in enumerate(state["events"]):
                if record["id"] == event_id and record["calendar_id"] == calendar_id:
                    break
            else:
                raise NotFoundError(f"Event {event_id} not found.")
            if "event_type_id" in changes:
                self._check_type(state, calendar_id, changes["event_type_id"])
            merged = Event.from_record(record)
            for key, value in changes.items():
                setattr(merged, key, value)
            # Re-run the range check on the merged values before writing.
            merged = Event.from_record(merged.to_record())
            state["events"][index] = merged.to_record()
            return self._hydrate(state["events"][index], self._types_by_id(state))

        return self.store.mutate(_update)

    def delete(self, calendar_id: str, event_id: str) -> bool:
        return bool(self.delete_many(calendar_id, [event_id]))

    def delete_many(self, calendar_id: str, event_ids: Optional[Iterable[str]] = None) -> List[str]:
        """Delete the given events, or every event of the calendar when ``event_ids`` is None."""

        targets = None if event_ids is None else set(event_ids)

        def _delete(state: Dict[str, Any]) -> List[str]:
            kept: List[Dict[str, Any]] = []
            removed: List[str] = []
            for record in state["events"]:
                matches = record["calendar_id"] == calendar_id and (targets is None or record["id"] in targets)
                if matches:
                    removed.append(record["id"])
                else:
                    kept.append(record)
            state["events"] = kept
            return removed

        if targets is not None and not targets:
            return []
        return self.store.mutate(_delete)

    def link_prompt(self, calendar_id: str, event_ids: Iterable[str], prompt_id: str) -> int:
        targets = set(event_ids)

        def _link(state: Dict[str, Any]) -> int:
            linked = 0
            for record in state["events"]:
                if record["calendar_id"] == calendar_id and record["id"] in targets:
                    record["prompt_id"] = prompt_id
                    linked += 1
            return linked

        if not targets:
            return 0
        return self.store.mutate(_link)

    def set_order(self, calendar_id: str, event_ids: List[str]) -> int:
        positions = {event_id: index for index, event_id in enumerate(event_ids)}

        def _reorder(state: Dict[str, Any]) -> int:
            touched = 0
            for record in state["events"]:
                if record["calendar_id"] == calendar_id and record["id"] in positions:
                    record["order"] = positions[record["id"]]
                    touched += 1
            return touched

        return self.store.mutate(_reorder)
