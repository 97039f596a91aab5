from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from ..domain import (
    CreateAction,
    DeleteAction,
    Event,
    EventType,
    Prompt,
    PromptAction,
    PromptResult,
    UpdateAction,
)
from ..errors import PlannerError, StorageConflictError
from .context import ServiceContext

logger = logging.getLogger(__name__)

DEFAULT_TYPE_COLOR = "#3b82f6"


@dataclass(frozen=True, slots=True)
class SkippedAction:
    action: PromptAction
    reason: str


@dataclass(slots=True)
class ApplyOutcome:
    created_events: List[Event] = field(default_factory=list)
    updated_events: List[Event] = field(default_factory=list)
    deleted_event_ids: List[str] = field(default_factory=list)
    new_event_types: List[EventType] = field(default_factory=list)
    skipped: List[SkippedAction] = field(default_factory=list)
    prompt: Optional[Prompt] = None

    @property
    def created_count(self) -> int:
        return len(self.created_events)

    @property
    def updated_count(self) -> int:
        return len(self.updated_events)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted_event_ids)


class _TypeResolver:
    def __init__(self, existing: Iterable[EventType]) -> None:
        self._existing = list(existing)
        self.new_types: Dict[str, EventType] = {}

    def resolve(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        wanted = name.casefold()
        for event_type in self._existing:
            if event_type.name.casefold() == wanted:
                return event_type.id
        if name in self.new_types:
            return self.new_types[name].id
        for new_name, event_type in self.new_types.items():
            if new_name.casefold() == wanted:
                return event_type.id
        return None


@dataclass(slots=True)
class ActionApplier:
    """Apply a :class:`PromptResult` one action at a time.

    A failing action is recorded in ``skipped`` and never aborts the batch.
    """

    context: ServiceContext

    def apply(
        self,
        calendar_id: str,
        result: PromptResult,
        instruction: Optional[str] = None,
        *,
        event_types: Optional[Iterable[EventType]] = None,
    ) -> ApplyOutcome:
        self.context.store.ensure_calendar(calendar_id)
        existing_types = (
            list(event_types) if event_types is not None else self.context.event_types.list_for_calendar(calendar_id)
        )
        resolver = _TypeResolver(existing_types)
        outcome = ApplyOutcome()

        # Types first, so every action below can reference them.
        for new_type in result.new_event_types:
            event_type = self._ensure_type(calendar_id, new_type.name, new_type.suggested_color or DEFAULT_TYPE_COLOR)
            if event_type is None:
                continue
            resolver.new_types[new_type.name] = event_type
            if all(item.id != event_type.id for item in outcome.new_event_types):
                outcome.new_event_types.append(event_type)

        known_ids: Set[str] = {event.id for event in self.context.events.list_for_calendar(calendar_id)}
        for action in result.actions:
            try:
                self._apply_action(calendar_id, action, resolver, known_ids, outcome)
            except (PlannerError, ValueError) as exc:
                logger.warning("Skipping %s action on %s: %s", action.kind, calendar_id, exc)
                outcome.skipped.append(SkippedAction(action, str(exc)))

        if instruction is not None:
            outcome.prompt = self.context.prompts.create(
                calendar_id,
                instruction,
                interpretation=result.interpretation,
            )
            self.context.events.link_prompt(
                calendar_id,
                [event.id for event in outcome.created_events],
                outcome.prompt.id,
            )
            for event in outcome.created_events:
                event.prompt_id = outcome.prompt.id

        logger.info(
            "Applied prompt result on %s: %d created, %d updated, %d deleted, %d skipped",
            calendar_id,
            outcome.created_count,
            outcome.updated_count,
            outcome.deleted_count,
            len(outcome.skipped),
        )
        return outcome

    def _ensure_type(self, calendar_id: str, name: str, color: str) -> Optional[EventType]:
        existing = self.context.event_types.find_by_name(calendar_id, name)
        if existing is not None:
            return existing
        try:
            return self.context.event_types.create(calendar_id, name, color)
        except StorageConflictError:
            return self.context.event_types.find_by_name(calendar_id, name)

    def _apply_action(
        self,
        calendar_id: str,
        action: PromptAction,
        resolver: _TypeResolver,
        known_ids: Set[str],
        outcome: ApplyOutcome,
    ) -> None:
        if isinstance(action, CreateAction):
            event = self.context.events.create(
                calendar_id,
                title=action.title,
                start_date=action.start_date,
                end_date=action.end_date,
                notes=action.notes,
                event_type_id=resolver.resolve(action.event_type),
            )
            outcome.created_events.append(event)
        elif isinstance(action, UpdateAction):
            if action.id not in known_ids:
                outcome.skipped.append(SkippedAction(action, f"unknown event id {action.id}"))
                logger.warning("Skipping update of unknown event %s on %s", action.id, calendar_id)
                return
            changes = {
                "title": action.title,
                "start_date": action.start_date,
                "end_date": action.end_date,
                "event_type_id": resolver.resolve(action.event_type),
            }
            if action.notes is not None:
                changes["notes"] = action.notes
            outcome.updated_events.append(self.context.events.update(calendar_id, action.id, changes))
        elif isinstance(action, DeleteAction):
            if action.id not in known_ids or action.id in outcome.deleted_event_ids:
                logger.info("Delete of unknown event %s on %s ignored", action.id, calendar_id)
                return
            if self.context.events.delete(calendar_id, action.id):
                outcome.deleted_event_ids.append(action.id)
        else:
            raise TypeError(f"Unsupported prompt action: {action!r}")


__all__ = ["ActionApplier", "ApplyOutcome", "SkippedAction"]
