from __future__ import annotations

import json
from collections import deque
from typing import Any, Deque, Dict, List, Sequence, Union

from prompt_planner.interpreter import BackendTurn, StopReason, ToolCall

CALENDAR = "cal_test"


class ScriptedBackend:
    """Replays a fixed list of turns; an exception in the script is raised instead."""

    def __init__(self, turns: Sequence[Union[BackendTurn, BaseException]]) -> None:
        self._turns: Deque[Union[BackendTurn, BaseException]] = deque(turns)
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *turns: Union[BackendTurn, BaseException]) -> None:
        self._turns.extend(turns)

    async def complete(self, *, system, tools, messages) -> BackendTurn:
        self.calls.append({"system": system, "tools": list(tools), "messages": list(messages)})
        if not self._turns:
            raise AssertionError("backend called more often than scripted")
        turn = self._turns.popleft()
        if isinstance(turn, BaseException):
            raise turn
        return turn


def final(payload: Union[Dict[str, Any], str]) -> BackendTurn:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return BackendTurn(stop_reason=StopReason.FINAL, text=text, raw_stop_reason="stop")


def tool_turn(*calls: tuple[str, str, Dict[str, Any]]) -> BackendTurn:
    return BackendTurn(
        stop_reason=StopReason.TOOL_CALL,
        tool_calls=tuple(
            ToolCall(id=call_id, name=name, arguments=arguments, raw_arguments=json.dumps(arguments))
            for call_id, name, arguments in calls
        ),
        raw_stop_reason="tool_calls",
    )
