from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ...core import CalendarStore
from ...domain import CalendarState
from ...errors import StorageConflictError


@dataclass(slots=True)
class CalendarStateRepository:
    store: CalendarStore

    def _prompt_record(self, prompt_id: str) -> Optional[Dict[str, Any]]:
        for record in self.store.data["prompts"]:
            if record["id"] == prompt_id:
                return record
        return None

    def create(self, calendar_id: str, prompt_id: str, state_json: str) -> CalendarState:
        def _create(state: Dict[str, Any]) -> CalendarState:
            if any(record["prompt_id"] == prompt_id for record in state["calendar_states"]):
                raise StorageConflictError(f"Prompt {prompt_id} already has a calendar state.")
            record = {
                "id": self.store.consume_id(state, "state"),
                "calendar_id": calendar_id,
                "prompt_id": prompt_id,
                "state_json": state_json,
                "created_at": self.store.utc_now(),
            }
            state["calendar_states"].append(record)
            return CalendarState.from_record(record, prompt=self._prompt_record(prompt_id))

        return self.store.mutate(_create)

    def list_recent(self, calendar_id: str, limit: Optional[int] = 50) -> List[CalendarState]:
        records = [record for record in self.store.data["calendar_states"] if record["calendar_id"] == calendar_id]
        records.reverse()
        if limit is not None:
            records = records[:limit]
        return [CalendarState.from_record(record, prompt=self._prompt_record(record["prompt_id"])) for record in records]

    def fetch(self, calendar_id: str, state_id: str) -> Optional[CalendarState]:
        for record in self.store.data["calendar_states"]:
            if record["id"] == state_id and record["calendar_id"] == calendar_id:
                return CalendarState.from_record(record, prompt=self._prompt_record(record["prompt_id"]))
        return None

    def calendar_rules(self, calendar_id: str) -> List[Dict[str, Any]]:
        return [dict(record) for record in self.store.data["rules"] if record.get("calendar_id") == calendar_id]
