"""Natural-language interpretation: grounding context, tool loop and result parsing."""

from __future__ import annotations

from .backend import BackendTurn, OpenAIReasoningBackend, ReasoningBackend, StopReason, ToolCall
from .context import EventLine, MonthReference, PromptContext, build_prompt_context, describe_event, describe_events
from .loop import InterpretationRun, PromptInterpreter
from .parsing import extract_json_payload, parse_action, parse_prompt_result
from .prompts import render_synthesis, render_synthesis_prompt, render_system_prompt

__all__ = [
    "BackendTurn",
    "EventLine",
    "InterpretationRun",
    "MonthReference",
    "OpenAIReasoningBackend",
    "PromptContext",
    "PromptInterpreter",
    "ReasoningBackend",
    "StopReason",
    "ToolCall",
    "build_prompt_context",
    "describe_event",
    "describe_events",
    "extract_json_payload",
    "parse_action",
    "parse_prompt_result",
    "render_synthesis",
    "render_synthesis_prompt",
    "render_system_prompt",
]
