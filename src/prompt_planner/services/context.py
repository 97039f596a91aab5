from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import AppSettings, get_settings
from ..core import CalendarStore
from ..data.repositories import CalendarStateRepository, EventRepository, EventTypeRepository, PromptRepository
from .undo import UndoHistory, UndoManager


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, the store and undo histories."""

    settings: AppSettings = field(default_factory=get_settings)
    store: Optional[CalendarStore] = None
    events: EventRepository = field(init=False)
    event_types: EventTypeRepository = field(init=False)
    prompts: PromptRepository = field(init=False)
    states: CalendarStateRepository = field(init=False)
    undo: UndoManager = field(init=False)
    histories: Dict[str, UndoHistory] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = CalendarStore(self.settings.storage.state_file)
        self.events = EventRepository(self.store)
        self.event_types = EventTypeRepository(self.store)
        self.prompts = PromptRepository(self.store)
        self.states = CalendarStateRepository(self.store)
        self.undo = UndoManager(self)

    def history_for(self, calendar_id: str) -> UndoHistory:
        history = self.histories.get(calendar_id)
        if history is None:
            history = UndoHistory(self.settings.planner.undo_capacity)
            self.histories[calendar_id] = history
        return history

    def checkpoint(self, calendar_id: str, description: str) -> None:
        self.undo.checkpoint(calendar_id, description)
