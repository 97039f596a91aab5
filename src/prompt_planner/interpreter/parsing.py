"""Turn the backend's final text into a validated :class:`PromptResult`.

Parsing never raises: malformed payloads collapse into a fallback result and
malformed actions are dropped individually with a warning.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import orjson

from ..domain import (
    CreateAction,
    DeleteAction,
    NewEventType,
    PromptAction,
    PromptResult,
    RejectedAction,
    UpdateAction,
    parse_day,
)
from ..errors import MalformedInputError

logger = logging.getLogger(__name__)

DEFAULT_TYPE_COLOR = "#3b82f6"

INCOMPLETE_INTERPRETATION = "The response looks incomplete."
INCOMPLETE_WARNING = "The assistant's response was cut off. Try a shorter request."
UNPARSEABLE_INTERPRETATION = "I could not interpret the request correctly."
UNPARSEABLE_WARNING = "The response could not be analysed. Try simplifying your request."

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def extract_json_payload(text: str) -> Optional[str]:
    """Return the outermost ``{...}`` span, or None when no closed object exists."""

    match = _FENCE.search(text)
    if match:
        text = match.group(1).strip()
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required_text(event: Dict[str, Any], key: str) -> str:
    value = _optional_text(event.get(key))
    if value is None:
        raise MalformedInputError(f"missing {key}")
    return value


def parse_action(raw: Any) -> PromptAction:
    """Validate one raw action, raising ``MalformedInputError`` with the reason."""

    if not isinstance(raw, dict):
        raise MalformedInputError("action is not an object")
    kind = raw.get("action")
    event = raw.get("event")
    if not isinstance(event, dict):
        raise MalformedInputError("missing event payload")

    if kind == "delete":
        return DeleteAction(id=_required_text(event, "id"), title=_optional_text(event.get("title")))

    if kind not in ("create", "update"):
        raise MalformedInputError(f"unknown action kind {kind!r}")

    title = _required_text(event, "title")
    start_date = parse_day(_required_text(event, "startDate"))
    end_date = parse_day(_required_text(event, "endDate"))
    if start_date > end_date:
        raise MalformedInputError(f"startDate {start_date} is after endDate {end_date}")
    event_type = _optional_text(event.get("eventType"))
    notes = event.get("notes")
    notes = str(notes) if notes is not None else None

    if kind == "create":
        return CreateAction(title=title, start_date=start_date, end_date=end_date, event_type=event_type, notes=notes)
    return UpdateAction(
        id=_required_text(event, "id"),
        title=title,
        start_date=start_date,
        end_date=end_date,
        event_type=event_type,
        notes=notes,
    )


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _new_event_types(value: Any, warnings: List[str]) -> List[NewEventType]:
    if not isinstance(value, list):
        return []
    items: List[NewEventType] = []
    for raw in value:
        name = _optional_text(raw.get("name")) if isinstance(raw, dict) else None
        if name is None:
            warnings.append(f"Ignored an event type without a name: {raw!r}")
            continue
        color = _optional_text(raw.get("suggestedColor")) or DEFAULT_TYPE_COLOR
        items.append(NewEventType(name=name, suggested_color=color))
    return items


def result_from_payload(payload: Dict[str, Any]) -> PromptResult:
    warnings = _string_list(payload.get("warnings"))
    actions: List[PromptAction] = []
    rejected: List[RejectedAction] = []

    raw_actions = payload.get("actions")
    for raw in raw_actions if isinstance(raw_actions, list) else []:
        try:
            actions.append(parse_action(raw))
        except MalformedInputError as exc:
            reason = str(exc)
            rejected.append(RejectedAction(payload=raw if isinstance(raw, dict) else {"raw": raw}, reason=reason))
            kind = raw.get("action") if isinstance(raw, dict) else None
            warnings.append(f"Ignored a {kind or 'malformed'} action: {reason}.")
            logger.warning("Rejected action %r: %s", raw, reason)

    return PromptResult(
        interpretation=str(payload.get("interpretation") or ""),
        actions=actions,
        new_event_types=_new_event_types(payload.get("newEventTypes"), warnings),
        warnings=warnings,
        questions=_string_list(payload.get("questions")),
        rejected=rejected,
    )


def parse_prompt_result(text: str) -> PromptResult:
    payload_text = extract_json_payload(text)
    if payload_text is None:
        logger.error("Response holds no closed JSON object; tail: %r", text[-200:])
        return PromptResult.failure(INCOMPLETE_INTERPRETATION, INCOMPLETE_WARNING)
    try:
        payload = orjson.loads(payload_text)
    except orjson.JSONDecodeError:
        logger.error("Invalid JSON in response; head: %r", text[:500])
        return PromptResult.failure(UNPARSEABLE_INTERPRETATION, UNPARSEABLE_WARNING)
    if not isinstance(payload, dict):
        return PromptResult.failure(UNPARSEABLE_INTERPRETATION, UNPARSEABLE_WARNING)
    return result_from_payload(payload)


__all__ = [
    "DEFAULT_TYPE_COLOR",
    "extract_json_payload",
    "parse_action",
    "parse_prompt_result",
    "result_from_payload",
]
