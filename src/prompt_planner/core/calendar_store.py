from __future__ import annotations

import logging
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import orjson

from .config import DATA_DIR, ensure_data_dir


logger = logging.getLogger(__name__)

CALENDAR_STATE_FILE = DATA_DIR / "calendar_state.json"

DEFAULT_CALENDAR_STATE: Dict[str, Any] = {
    "calendars": [],
    "events": [],
    "event_types": [],
    "prompts": [],
    "calendar_states": [],
    "rules": [],
    "counters": {
        "calendar": 0,
        "event": 0,
        "type": 0,
        "prompt": 0,
        "state": 0,
    },
    "metadata": {"schema_version": 1},
}


class CalendarStore:
    """JSON-file entity store shared by the repositories.

    Every mutation runs through :meth:`mutate`, which applies the callback to the
    in-memory state and persists the whole document before returning. That makes a
    single create/update/delete the unit of atomicity.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or CALENDAR_STATE_FILE
        self._state: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_materialized(self) -> None:
        if self._state is not None:
            return
        ensure_data_dir(self._path.parent)
        if not self._path.exists():
            self._state = deepcopy(DEFAULT_CALENDAR_STATE)
            self.persist()
            return
        raw = self._path.read_bytes()
        if not raw:
            self._state = deepcopy(DEFAULT_CALENDAR_STATE)
            return
        self._state = orjson.loads(raw)
        # Backfill missing keys when upgrading.
        for key, value in DEFAULT_CALENDAR_STATE.items():
            if key not in self._state:
                self._state[key] = deepcopy(value)
        for key, value in DEFAULT_CALENDAR_STATE["counters"].items():
            self._state["counters"].setdefault(key, value)

    @property
    def data(self) -> Dict[str, Any]:
        self._ensure_materialized()
        assert self._state is not None
        return self._state

    def persist(self) -> None:
        if self._state is None:
            return
        payload = orjson.dumps(self._state, option=orjson.OPT_INDENT_2)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_bytes(payload + b"\n")
        tmp_path.replace(self._path)

    def mutate(self, callback: Callable[[Dict[str, Any]], Any]) -> Any:
        self._ensure_materialized()
        assert self._state is not None
        result = callback(self._state)
        self.persist()
        return result

    def consume_id(self, state: Dict[str, Any], prefix: str) -> str:
        counters = state.setdefault("counters", {})
        current = counters.get(prefix, 0) + 1
        counters[prefix] = current
        return f"{prefix}_{current:04d}"

    def ensure_calendar(self, calendar_id: str, *, name: Optional[str] = None) -> Dict[str, Any]:
        for calendar in self.data["calendars"]:
            if calendar["id"] == calendar_id:
                return calendar

        def _create(state: Dict[str, Any]) -> Dict[str, Any]:
            calendar = {
                "id": calendar_id,
                "name": name or calendar_id,
                "created_at": self.utc_now(),
            }
            state["calendars"].append(calendar)
            return calendar

        logger.info("Creating calendar %s", calendar_id)
        return self.mutate(_create)

    @staticmethod
    def utc_now() -> str:
        return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


__all__ = ["CalendarStore", "CALENDAR_STATE_FILE", "DEFAULT_CALENDAR_STATE"]
