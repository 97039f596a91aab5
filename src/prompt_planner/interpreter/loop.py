from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson

from ..config import AppSettings, get_settings
from ..dates.date_tools import date_tool_specs, execute_date_tool
from ..domain import PromptResult
from .backend import BackendTurn, Message, OpenAIReasoningBackend, ReasoningBackend, StopReason
from .context import PromptContext
from .parsing import parse_prompt_result
from .prompts import render_system_prompt

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Error: too many iterations or unexpected backend reply."
GENERIC_WARNING = "Something went wrong while processing the request."


@dataclass(slots=True)
class InterpretationRun:
    result: PromptResult
    messages: List[Message] = field(default_factory=list)
    iterations: int = 0
    stop_reason: Optional[StopReason] = None


def _not_configured(settings: AppSettings) -> PromptResult:
    missing = ", ".join(settings.llm.missing_env_vars) or "OPENAI_API_KEY"
    return PromptResult.failure(
        "The language model is not configured.",
        f"Set {missing} to enable natural-language planning.",
    )


class PromptInterpreter:
    """Bounded tool-calling loop around a :class:`ReasoningBackend`.

    The loop keeps no state besides the message transcript of the current run,
    so replaying a transcript against the same backend replays the run.
    """

    def __init__(
        self,
        backend: Optional[ReasoningBackend] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        if backend is None and self.settings.llm.is_configured:
            backend = OpenAIReasoningBackend(self.settings.llm)
        self.backend = backend
        self._tools = date_tool_specs()

    @property
    def is_available(self) -> bool:
        return self.backend is not None

    async def interpret(self, instruction: str, context: PromptContext) -> InterpretationRun:
        return await self.run(render_system_prompt(context), instruction)

    async def run(self, system: str, user_message: str) -> InterpretationRun:
        messages: List[Message] = [{"role": "user", "content": user_message}]
        if self.backend is None:
            return InterpretationRun(result=_not_configured(self.settings), messages=messages)

        run = await self._loop(system, messages)
        logger.info(
            "Interpretation finished after %d round-trip(s): %d action(s), stop=%s",
            run.iterations,
            len(run.result.actions),
            run.stop_reason.value if run.stop_reason else None,
        )
        if self.settings.planner.log_agent_runs:
            self._log_run(system=system, run=run)
        return run

    async def _loop(self, system: str, messages: List[Message]) -> InterpretationRun:
        assert self.backend is not None
        planner = self.settings.planner
        iteration = 0
        while iteration < planner.max_iterations:
            iteration += 1
            try:
                turn = await asyncio.wait_for(
                    self.backend.complete(system=system, tools=self._tools, messages=list(messages)),
                    timeout=planner.request_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning("Backend round-trip %d exceeded %.1fs", iteration, planner.request_timeout)
                result = PromptResult.failure(
                    "The assistant took too long to answer.",
                    "The request timed out. Try again or simplify it.",
                )
                return InterpretationRun(result=result, messages=messages, iterations=iteration)
            except Exception:  # noqa: BLE001
                logger.exception("Backend round-trip %d failed", iteration)
                result = PromptResult.failure(
                    "The assistant is unavailable.",
                    "The language model could not be reached. Try again later.",
                )
                return InterpretationRun(result=result, messages=messages, iterations=iteration)

            if turn.stop_reason is StopReason.TRUNCATED:
                logger.error("Backend reply was truncated")
                result = PromptResult.failure(
                    "The response was truncated because the request was too large.",
                    "Try splitting your request into several shorter instructions.",
                )
                return InterpretationRun(result, messages, iteration, turn.stop_reason)

            if turn.stop_reason is StopReason.FINAL:
                messages.append(turn.assistant_message())
                if not turn.text:
                    result = PromptResult.failure("The assistant returned no text.", GENERIC_WARNING)
                else:
                    result = parse_prompt_result(turn.text)
                return InterpretationRun(result, messages, iteration, turn.stop_reason)

            if turn.stop_reason is StopReason.TOOL_CALL and turn.tool_calls:
                self._run_tools(turn, messages)
                continue

            logger.error("Unexpected backend stop reason: %s", turn.raw_stop_reason)
            return InterpretationRun(
                PromptResult.failure(GENERIC_FAILURE, GENERIC_WARNING), messages, iteration, turn.stop_reason
            )

        logger.error("Interpretation hit the %d round-trip cap", planner.max_iterations)
        return InterpretationRun(PromptResult.failure(GENERIC_FAILURE, GENERIC_WARNING), messages, iteration)

    def _run_tools(self, turn: BackendTurn, messages: List[Message]) -> None:
        messages.append(turn.assistant_message())
        for call in turn.tool_calls:
            result = execute_date_tool(call.name, call.arguments)
            logger.info("Tool %s(%s) -> %s", call.name, call.arguments, result.to_dict())
            messages.append(
                {
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": orjson.dumps(result.to_dict()).decode(),
                }
            )

    def _log_run(self, *, system: str, run: InterpretationRun) -> None:
        now = datetime.now(timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": now.isoformat(),
            "model": self.settings.llm.model,
            "iterations": run.iterations,
            "stop_reason": run.stop_reason.value if run.stop_reason else None,
            "system": system,
            "messages": run.messages,
            "result": run.result.to_dict(),
        }
        logs_dir: Path = self.settings.storage.agent_runs_dir
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            filename = logs_dir / f"{now.strftime('%Y%m%dT%H%M%S%f')}.json"
            filename.write_bytes(orjson.dumps(entry, option=orjson.OPT_INDENT_2))
        except OSError:
            logger.warning("Could not write agent run log to %s", logs_dir, exc_info=True)


__all__ = ["InterpretationRun", "PromptInterpreter"]
