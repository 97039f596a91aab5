"""Repositories over the JSON calendar store."""

from __future__ import annotations

from .event_types import EventTypeRepository
from .events import EventRepository
from .prompts import PromptRepository
from .states import CalendarStateRepository

__all__ = ["CalendarStateRepository", "EventRepository", "EventTypeRepository", "PromptRepository"]
