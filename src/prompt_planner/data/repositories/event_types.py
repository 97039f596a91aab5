from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ...core import CalendarStore
from ...domain import EventType
from ...errors import NotFoundError, StorageConflictError


@dataclass(slots=True)
class EventTypeRepository:
    store: CalendarStore

    def _ensure_unique(
        self,
        state: Dict[str, Any],
        calendar_id: str,
        name: str,
        *,
        exclude_id: Optional[str] = None,
    ) -> None:
        for record in state["event_types"]:
            if record["calendar_id"] == calendar_id and record["name"] == name and record["id"] != exclude_id:
                raise StorageConflictError(f"An event type named '{name}' already exists.")

    def list_for_calendar(self, calendar_id: str) -> List[EventType]:
        records = [record for record in self.store.data["event_types"] if record["calendar_id"] == calendar_id]
        return sorted((EventType.from_record(record) for record in records), key=lambda item: item.name)

    def fetch(self, calendar_id: str, type_id: str) -> Optional[EventType]:
        for record in self.store.data["event_types"]:
            if record["id"] == type_id and record["calendar_id"] == calendar_id:
                return EventType.from_record(record)
        return None

    def find_by_name(self, calendar_id: str, name: str, *, case_sensitive: bool = True) -> Optional[EventType]:
        wanted = name if case_sensitive else name.casefold()
        for event_type in self.list_for_calendar(calendar_id):
            candidate = event_type.name if case_sensitive else event_type.name.casefold()
            if candidate == wanted:
                return event_type
        return None

    def create(self, calendar_id: str, name: str, color: str) -> EventType:
        def _create(state: Dict[str, Any]) -> EventType:
            self._ensure_unique(state, calendar_id, name)
            record = EventType(
                id=self.store.consume_id(state, "type"),
                calendar_id=calendar_id,
                name=name,
                color=color,
            ).to_record()
            state["event_types"].append(record)
            return EventType.from_record(record)

        return self.store.mutate(_create)

    def update(
        self,
        calendar_id: str,
        type_id: str,
        *,
        name: Optional[str] = None,
        color: Optional[str] = None,
    ) -> EventType:
        def _update(state: Dict[str, Any]) -> EventType:
            for record in state["event_types"]:
                if record["id"] == type_id and record["calendar_id"] == calendar_id:
                    break
            else:
                raise NotFoundError(f"Event type {type_id} not found.")
            if name is not None and name != record["name"]:
                self._ensure_unique(state, calendar_id, name, exclude_id=type_id)
                record["name"] = name
            if color is not None:
                record["color"] = color
            return EventType.from_record(record)

        return self.store.mutate(_update)

    def _replacement_conflict(
        self,
        state: Dict[str, Any],
        calendar_id: str,
        event_types: List[EventType],
    ) -> Optional[str]:
        names: set[str] = set()
        for item in event_types:
            if item.name in names:
                return f"An event type named '{item.name}' already exists."
            names.add(item.name)
            for record in state["event_types"]:
                if record["id"] == item.id and record["calendar_id"] != calendar_id:
                    return f"Event type id {item.id} belongs to another calendar."
        return None

    def check_replacement(self, calendar_id: str, event_types: Iterable[EventType]) -> None:
        """Raise ``StorageConflictError`` if :meth:`replace_all` would be refused."""

        message = self._replacement_conflict(self.store.data, calendar_id, list(event_types))
        if message:
            raise StorageConflictError(message)

    def replace_all(self, calendar_id: str, event_types: Iterable[EventType]) -> List[EventType]:
        """Make ``event_types`` the calendar's whole type set, keeping their ids.

        Names are checked against the final set only, so two types may trade
        names. Events pointing at a dropped type lose the reference.
        """

        items = list(event_types)

        def _replace(state: Dict[str, Any]) -> List[EventType]:
            message = self._replacement_conflict(state, calendar_id, items)
            if message:
                raise StorageConflictError(message)
            records = [
                EventType(id=item.id, calendar_id=calendar_id, name=item.name, color=item.color).to_record()
                for item in items
            ]
            kept = [record for record in state["event_types"] if record["calendar_id"] != calendar_id]
            state["event_types"] = kept + records
            wanted = {record["id"] for record in records}
            for record in state["events"]:
                if record["calendar_id"] == calendar_id and record.get("event_type_id") not in wanted:
                    record["event_type_id"] = None
            return [EventType.from_record(record) for record in records]

        return self.store.mutate(_replace)

    def delete(self, calendar_id: str, type_id: str) -> bool:
        """Delete a type; events keep existing with their type reference cleared."""

        def _delete(state: Dict[str, Any]) -> bool:
            before = len(state["event_types"])
            state["event_types"] = [
                record
                for record in state["event_types"]
                if not (record["id"] == type_id and record["calendar_id"] == calendar_id)
            ]
            if len(state["event_types"]) == before:
                return False
            for record in state["events"]:
                if record["calendar_id"] == calendar_id and record.get("event_type_id") == type_id:
                    record["event_type_id"] = None
            return True

        return self.store.mutate(_delete)
