from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ...core import CalendarStore
from ...domain import Prompt


@dataclass(slots=True)
class PromptRepository:
    store: CalendarStore

    def create(
        self,
        calendar_id: str,
        content: str,
        *,
        interpretation: Optional[str] = None,
        snapshot_name: Optional[str] = None,
    ) -> Prompt:
        def _create(state: Dict[str, Any]) -> Prompt:
            record = {
                "id": self.store.consume_id(state, "prompt"),
                "calendar_id": calendar_id,
                "content": content,
                "interpretation": interpretation,
                "snapshot_name": snapshot_name,
                "created_at": self.store.utc_now(),
            }
            state["prompts"].append(record)
            return Prompt.from_record(record)

        return self.store.mutate(_create)

    def list_recent(self, calendar_id: str, limit: Optional[int] = 50) -> List[Prompt]:
        """Newest first; insertion order breaks ties between equal timestamps."""

        records = [record for record in self.store.data["prompts"] if record["calendar_id"] == calendar_id]
        records.reverse()
        if limit is not None:
            records = records[:limit]
        return [Prompt.from_record(record) for record in records]

    def fetch(self, calendar_id: str, prompt_id: str) -> Optional[Prompt]:
        for record in self.store.data["prompts"]:
            if record["id"] == prompt_id and record["calendar_id"] == calendar_id:
                return Prompt.from_record(record)
        return None

    def delete(self, calendar_id: str, prompt_id: str) -> bool:
        def _delete(state: Dict[str, Any]) -> bool:
            before = len(state["prompts"])
            state["prompts"] = [
                record
                for record in state["prompts"]
                if not (record["id"] == prompt_id and record["calendar_id"] == calendar_id)
            ]
            # A snapshot lives and dies with its prompt.
            state["calendar_states"] = [
                record for record in state["calendar_states"] if record["prompt_id"] != prompt_id
            ]
            return len(state["prompts"]) != before

        return self.store.mutate(_delete)
