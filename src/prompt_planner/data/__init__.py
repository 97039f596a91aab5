"""Data access layer."""

from __future__ import annotations

from .repositories import CalendarStateRepository, EventRepository, EventTypeRepository, PromptRepository

__all__ = ["CalendarStateRepository", "EventRepository", "EventTypeRepository", "PromptRepository"]
