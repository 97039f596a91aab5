"""Two-tier undo.

The local tier is a bounded stack of whole-calendar event snapshots taken
before each mutation. When it is empty, the fallback tier reverts the most
recent prompt by deleting the events it created.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Deque, List, Optional, Sequence

from ..data.repositories import EventRepository
from ..domain import Event, EventType, Prompt
from ..errors import NothingToUndoError, PlannerError

if TYPE_CHECKING:
    from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    description: str
    events: tuple[Event, ...]


class UndoHistory:
    """Bounded LIFO of calendar snapshots; the oldest entry falls off when full."""

    def __init__(self, capacity: int = 20) -> None:
        if capacity < 1:
            raise ValueError("Undo capacity must be at least 1.")
        self._entries: Deque[HistoryEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> Optional[HistoryEntry]:
        return self._entries.pop() if self._entries else None

    def peek(self) -> Optional[HistoryEntry]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()


@dataclass(slots=True)
class ReconcileReport:
    deleted: List[str] = field(default_factory=list)
    recreated: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)


def reconcile_events(
    repository: EventRepository,
    calendar_id: str,
    target: Sequence[Event],
) -> ReconcileReport:
    """Bring the stored events of a calendar back to ``target``.

    Each sub-step is independent: a failure is logged and recorded, and the
    remaining steps still run.
    """

    report = ReconcileReport()
    current = {event.id: event for event in repository.list_for_calendar(calendar_id)}
    wanted = {event.id: event for event in target}

    for event_id in current.keys() - wanted.keys():
        try:
            repository.delete(calendar_id, event_id)
            report.deleted.append(event_id)
        except (PlannerError, ValueError) as exc:
            logger.warning("Undo could not delete event %s: %s", event_id, exc)
            report.failures.append(event_id)

    for event_id, event in wanted.items():
        try:
            if event_id not in current:
                repository.reinsert(event)
                report.recreated.append(event_id)
            elif current[event_id].to_record() != event.to_record():
                repository.update(
                    calendar_id,
                    event_id,
                    {
                        "title": event.title,
                        "start_date": event.start_date,
                        "end_date": event.end_date,
                        "notes": event.notes,
                        "color": event.color,
                        "order": event.order,
                        "event_type_id": event.event_type_id,
                        "prompt_id": event.prompt_id,
                    },
                )
                report.updated.append(event_id)
        except (PlannerError, ValueError) as exc:
            logger.warning("Undo could not restore event %s: %s", event_id, exc)
            report.failures.append(event_id)
    return report


class UndoTier(str, Enum):
    LOCAL = "local"
    PROMPT = "prompt"


@dataclass(slots=True)
class UndoOutcome:
    tier: UndoTier
    description: str
    events: List[Event]
    event_types: List[EventType]
    undone_prompt: Optional[Prompt] = None
    deleted_event_ids: List[str] = field(default_factory=list)
    report: Optional[ReconcileReport] = None


@dataclass(slots=True)
class UndoManager:
    context: "ServiceContext"

    def checkpoint(self, calendar_id: str, description: str) -> HistoryEntry:
        """Snapshot the calendar's events before a mutation."""

        entry = HistoryEntry(
            description=description,
            events=tuple(self.context.events.list_for_calendar(calendar_id)),
        )
        self.context.history_for(calendar_id).push(entry)
        return entry

    def undo(self, calendar_id: str) -> UndoOutcome:
        self.context.store.ensure_calendar(calendar_id)
        entry = self.context.history_for(calendar_id).pop()
        if entry is not None:
            return self._undo_local(calendar_id, entry)
        return self._undo_last_prompt(calendar_id)

    def _undo_local(self, calendar_id: str, entry: HistoryEntry) -> UndoOutcome:
        report = reconcile_events(self.context.events, calendar_id, entry.events)
        logger.info(
            "Local undo of %r on %s: %d deleted, %d recreated, %d updated, %d failed",
            entry.description,
            calendar_id,
            len(report.deleted),
            len(report.recreated),
            len(report.updated),
            len(report.failures),
        )
        return UndoOutcome(
            tier=UndoTier.LOCAL,
            description=entry.description,
            events=self.context.events.list_for_calendar(calendar_id),
            event_types=self.context.event_types.list_for_calendar(calendar_id),
            deleted_event_ids=report.deleted,
            report=report,
        )

    def _undo_last_prompt(self, calendar_id: str) -> UndoOutcome:
        for prompt in self.context.prompts.list_recent(calendar_id, limit=None):
            linked = self.context.events.list_for_prompt(calendar_id, prompt.id)
            if not linked:
                continue
            deleted = self.context.events.delete_many(calendar_id, [event.id for event in linked])
            self.context.prompts.delete(calendar_id, prompt.id)
            logger.info("Reverted prompt %s on %s (%d events removed)", prompt.id, calendar_id, len(deleted))
            return UndoOutcome(
                tier=UndoTier.PROMPT,
                description=prompt.content,
                events=self.context.events.list_for_calendar(calendar_id),
                event_types=self.context.event_types.list_for_calendar(calendar_id),
                undone_prompt=prompt,
                deleted_event_ids=deleted,
            )
        raise NothingToUndoError("Nothing to undo.")


__all__ = [
    "HistoryEntry",
    "ReconcileReport",
    "UndoHistory",
    "UndoManager",
    "UndoOutcome",
    "UndoTier",
    "reconcile_events",
]
