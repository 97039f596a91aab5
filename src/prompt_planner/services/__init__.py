"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .applier import ActionApplier, ApplyOutcome, SkippedAction
from .calendar import CalendarService, SplitOutcome
from .context import ServiceContext
from .prompts import PromptOutcome, PromptService, SynthesisOutcome
from .snapshots import RestoreOutcome, SnapshotService, parse_snapshot, serialize_snapshot
from .undo import HistoryEntry, UndoHistory, UndoManager, UndoOutcome, UndoTier

__all__ = [
    "ActionApplier",
    "ApplyOutcome",
    "CalendarService",
    "HistoryEntry",
    "PromptOutcome",
    "PromptService",
    "RestoreOutcome",
    "ServiceContext",
    "SkippedAction",
    "SnapshotService",
    "SplitOutcome",
    "SynthesisOutcome",
    "UndoHistory",
    "UndoManager",
    "UndoOutcome",
    "UndoTier",
    "parse_snapshot",
    "serialize_snapshot",
]
