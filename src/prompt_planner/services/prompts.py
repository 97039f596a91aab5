from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from ..domain import Event, Prompt, PromptResult
from ..errors import MalformedInputError
from ..interpreter import PromptInterpreter, build_prompt_context, describe_events
from ..interpreter.prompts import render_synthesis_prompt, render_synthesis_request
from .applier import ActionApplier, ApplyOutcome
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PromptOutcome:
    result: PromptResult
    applied: ApplyOutcome
    iterations: int = 0


@dataclass(slots=True)
class SynthesisOutcome:
    interpretation: str
    events: List[Event]
    result: PromptResult
    applied: ApplyOutcome


@dataclass(slots=True)
class PromptService:
    context: ServiceContext
    interpreter: Optional[PromptInterpreter] = None
    applier: ActionApplier = field(init=False)

    def __post_init__(self) -> None:
        if self.interpreter is None:
            self.interpreter = PromptInterpreter(settings=self.context.settings)
        self.applier = ActionApplier(self.context)

    def list_prompts(self, calendar_id: str, limit: int = 50) -> List[Prompt]:
        self.context.store.ensure_calendar(calendar_id)
        return self.context.prompts.list_recent(calendar_id, limit=limit)

    async def submit(self, calendar_id: str, content: Optional[str], *, today: date) -> PromptOutcome:
        """Interpret an instruction against the calendar and apply the resulting actions.

        The instruction is recorded as a prompt even when no action comes back, so
        the history shows what was asked and how it was understood.
        """

        if not isinstance(content, str) or not content.strip():
            raise MalformedInputError("Prompt content is required.")
        self.context.store.ensure_calendar(calendar_id)
        events = self.context.events.list_for_calendar(calendar_id)
        event_types = self.context.event_types.list_for_calendar(calendar_id)
        prompt_context = build_prompt_context(
            today,
            events,
            event_types,
            self.context.settings.planner.school_zone,
            months=self.context.settings.planner.reference_months,
        )

        assert self.interpreter is not None
        run = await self.interpreter.interpret(content, prompt_context)
        if run.result.actions or run.result.new_event_types:
            self.context.checkpoint(calendar_id, content)
        applied = self.applier.apply(calendar_id, run.result, content, event_types=event_types)
        return PromptOutcome(result=run.result, applied=applied, iterations=run.iterations)

    async def synthesize(
        self,
        calendar_id: str,
        current_events: Sequence[Event],
        synthesis_text: Optional[str],
        today: date,
    ) -> SynthesisOutcome:
        if not isinstance(synthesis_text, str) or not synthesis_text.strip():
            raise MalformedInputError("Synthesis text is required.")
        self.context.store.ensure_calendar(calendar_id)
        event_types = self.context.event_types.list_for_calendar(calendar_id)
        lines = describe_events(current_events, event_types)

        assert self.interpreter is not None
        run = await self.interpreter.run(
            render_synthesis_prompt(today, lines, event_types),
            render_synthesis_request(synthesis_text),
        )
        if run.result.actions or run.result.new_event_types:
            self.context.checkpoint(calendar_id, "Synthesis")
        applied = self.applier.apply(calendar_id, run.result, event_types=event_types)
        return SynthesisOutcome(
            interpretation=run.result.interpretation,
            events=self.context.events.list_for_calendar(calendar_id),
            result=run.result,
            applied=applied,
        )


__all__ = ["PromptOutcome", "PromptService", "SynthesisOutcome"]
