"""Reasoning backend seam and its OpenAI chat-completions implementation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence

from openai import AsyncOpenAI

from ..config import LlmSettings

logger = logging.getLogger(__name__)

Message = Dict[str, Any]


class StopReason(str, Enum):
    FINAL = "final"
    TRUNCATED = "truncated"
    TOOL_CALL = "tool_call"
    OTHER = "other"


_FINISH_REASONS = {
    "stop": StopReason.FINAL,
    "length": StopReason.TRUNCATED,
    "tool_calls": StopReason.TOOL_CALL,
    "function_call": StopReason.TOOL_CALL,
}


@dataclass(frozen=True)
class ToolCall:
    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    raw_arguments: str = "{}"


@dataclass(frozen=True)
class BackendTurn:
    stop_reason: StopReason
    text: Optional[str] = None
    tool_calls: tuple[ToolCall, ...] = ()
    raw_stop_reason: Optional[str] = None

    def assistant_message(self) -> Message:
        message: Message = {"role": "assistant", "content": self.text}
        if self.tool_calls:
            message["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.raw_arguments},
                }
                for call in self.tool_calls
            ]
        return message


class ReasoningBackend(Protocol):
    async def complete(
        self,
        *,
        system: str,
        tools: Sequence[Dict[str, Any]],
        messages: Sequence[Message],
    ) -> BackendTurn:
        ...


def safe_json(raw: Any) -> Dict[str, Any]:
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


class OpenAIReasoningBackend:
    """Chat-completions backend with function calling."""

    def __init__(self, settings: LlmSettings, client: Optional[AsyncOpenAI] = None) -> None:
        self.settings = settings
        self._client = client or self._build_client()

    def _build_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=self.settings.api_key,
            base_url=self.settings.base_url,
            organization=self.settings.organization,
            project=self.settings.project,
        )

    async def complete(
        self,
        *,
        system: str,
        tools: Sequence[Dict[str, Any]],
        messages: Sequence[Message],
    ) -> BackendTurn:
        payload: List[Message] = [{"role": "system", "content": system}, *messages]
        completion = await self._client.chat.completions.create(
            model=self.settings.model,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            messages=payload,
            tools=list(tools),
            tool_choice="auto",
        )
        choice = completion.choices[0]
        message = choice.message
        calls = tuple(
            ToolCall(
                id=call.id,
                name=call.function.name,
                arguments=safe_json(call.function.arguments),
                raw_arguments=call.function.arguments or "{}",
            )
            for call in (message.tool_calls or [])
        )
        stop_reason = _FINISH_REASONS.get(choice.finish_reason or "", StopReason.OTHER)
        logger.debug("Backend finished with %s (%d tool calls)", choice.finish_reason, len(calls))
        return BackendTurn(
            stop_reason=stop_reason,
            text=message.content,
            tool_calls=calls,
            raw_stop_reason=choice.finish_reason,
        )


__all__ = [
    "BackendTurn",
    "Message",
    "OpenAIReasoningBackend",
    "ReasoningBackend",
    "StopReason",
    "ToolCall",
    "safe_json",
]
