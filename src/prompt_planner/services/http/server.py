from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ...api import ApiFunction, get_api_function, get_api_functions
from ...api.models import (
    ApiCallRequest,
    EventCreateRequest,
    EventTypeRequest,
    EventUpdateRequest,
    PromptRequest,
    ReorderRequest,
    SnapshotRequest,
    SplitRequest,
    SynthesisRequest,
)
from ...api.serializers import (
    serialize_calendar_state,
    serialize_event,
    serialize_event_type,
    serialize_event_types,
    serialize_events,
    serialize_prompt,
    serialize_prompt_outcome,
    serialize_restore_outcome,
    serialize_split_outcome,
    serialize_synthesis_outcome,
    serialize_undo_outcome,
)
from ...dates.date_tools import execute_date_tool
from ...domain import Event, parse_day
from ...errors import MalformedInputError, NothingToUndoError, NotFoundError, PlannerError, StorageConflictError
from ...interpreter import PromptInterpreter
from ...logging import configure_logging
from ...services import CalendarService, PromptService, ServiceContext, SnapshotService

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (MalformedInputError, 400),
    (NothingToUndoError, 400),
    (NotFoundError, 404),
    (StorageConflictError, 409),
)


def _status_for(exc: PlannerError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def _serialize_api_function(api_function: ApiFunction) -> Dict[str, Any]:
    return {
        "name": api_function.name,
        "description": api_function.description,
        "category": api_function.category,
        "tags": list(api_function.tags),
        "parameters": api_function.parameter_schema,
    }


def create_app(
    context: Optional[ServiceContext] = None,
    *,
    interpreter: Optional[PromptInterpreter] = None,
    clock: Callable[[], date] = date.today,
) -> FastAPI:
    context = context or ServiceContext()
    configure_logging(context.settings)

    calendars = CalendarService(context)
    prompts = PromptService(context, interpreter)
    snapshots = SnapshotService(context)

    app = FastAPI(title="Prompt Planner API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.context = context

    @app.exception_handler(PlannerError)
    async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
        status = _status_for(exc)
        logger.info("%s %s -> %d: %s", request.method, request.url.path, status, exc)
        return JSONResponse({"detail": str(exc)}, status_code=status)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"detail": "An unexpected error occurred."}, status_code=500)

    def today() -> date:
        return clock()

    # ------------------------------------------------------------------ prompts

    @app.post("/calendars/{calendar_id}/prompts")
    async def submit_prompt(calendar_id: str, body: PromptRequest, day: date = Depends(today)) -> JSONResponse:
        outcome = await prompts.submit(calendar_id, body.content, today=day)
        return JSONResponse(serialize_prompt_outcome(outcome))

    @app.get("/calendars/{calendar_id}/prompts")
    async def list_prompts(calendar_id: str) -> JSONResponse:
        return JSONResponse([serialize_prompt(prompt) for prompt in prompts.list_prompts(calendar_id)])

    @app.post("/calendars/{calendar_id}/synthesis")
    async def apply_synthesis(calendar_id: str, body: SynthesisRequest, day: date = Depends(today)) -> JSONResponse:
        current_events = [
            Event(
                id=item.id,
                calendar_id=calendar_id,
                title=item.title,
                start_date=parse_day(item.start_date),
                end_date=parse_day(item.end_date),
                notes=item.notes,
                event_type_id=item.event_type_id,
            )
            for item in body.current_events
        ]
        outcome = await prompts.synthesize(calendar_id, current_events, body.synthesis_text, day)
        return JSONResponse(serialize_synthesis_outcome(outcome))

    # ------------------------------------------------------------------ snapshots & undo

    @app.get("/calendars/{calendar_id}/snapshots")
    async def list_snapshots(calendar_id: str) -> JSONResponse:
        return JSONResponse([serialize_calendar_state(state) for state in snapshots.list_snapshots(calendar_id)])

    @app.post("/calendars/{calendar_id}/snapshots")
    async def create_snapshot(
        calendar_id: str,
        body: Optional[SnapshotRequest] = None,
        day: date = Depends(today),
    ) -> JSONResponse:
        state = snapshots.create_snapshot(calendar_id, body.name if body else None, today=day)
        return JSONResponse(serialize_calendar_state(state), status_code=201)

    @app.post("/calendars/{calendar_id}/snapshots/{snapshot_id}/restore")
    async def restore_snapshot(calendar_id: str, snapshot_id: str) -> JSONResponse:
        return JSONResponse(serialize_restore_outcome(snapshots.restore_snapshot(calendar_id, snapshot_id)))

    @app.post("/calendars/{calendar_id}/undo")
    async def undo(calendar_id: str) -> JSONResponse:
        return JSONResponse(serialize_undo_outcome(context.undo.undo(calendar_id)))

    # ------------------------------------------------------------------ events

    @app.get("/calendars/{calendar_id}/events")
    async def list_events(calendar_id: str) -> JSONResponse:
        return JSONResponse(serialize_events(calendars.list_events(calendar_id)))

    @app.post("/calendars/{calendar_id}/events")
    async def create_event(calendar_id: str, body: EventCreateRequest) -> JSONResponse:
        event = calendars.create_event(
            calendar_id,
            title=body.title,
            start_date=body.start_date,
            end_date=body.end_date,
            notes=body.notes,
            color=body.color,
            event_type_id=body.event_type_id,
        )
        return JSONResponse(serialize_event(event), status_code=201)

    @app.post("/calendars/{calendar_id}/events/reorder")
    async def reorder_events(calendar_id: str, body: ReorderRequest) -> JSONResponse:
        return JSONResponse(serialize_events(calendars.reorder_events(calendar_id, body.event_ids)))

    @app.put("/calendars/{calendar_id}/events/{event_id}")
    async def update_event(calendar_id: str, event_id: str, body: EventUpdateRequest) -> JSONResponse:
        return JSONResponse(serialize_event(calendars.update_event(calendar_id, event_id, body.changes())))

    @app.delete("/calendars/{calendar_id}/events/{event_id}")
    async def delete_event(calendar_id: str, event_id: str) -> JSONResponse:
        calendars.delete_event(calendar_id, event_id)
        return JSONResponse({"success": True})

    @app.post("/calendars/{calendar_id}/events/{event_id}/split")
    async def split_event(calendar_id: str, event_id: str, body: SplitRequest) -> JSONResponse:
        if not body.day:
            raise MalformedInputError("The clicked date is required.")
        outcome = calendars.split_event(calendar_id, event_id, body.day, body.new_title)
        return JSONResponse(serialize_split_outcome(outcome))

    # ------------------------------------------------------------------ event types

    @app.get("/calendars/{calendar_id}/types")
    async def list_event_types(calendar_id: str) -> JSONResponse:
        return JSONResponse(serialize_event_types(calendars.list_event_types(calendar_id)))

    @app.post("/calendars/{calendar_id}/types")
    async def create_event_type(calendar_id: str, body: EventTypeRequest) -> JSONResponse:
        event_type = calendars.create_event_type(calendar_id, body.name, body.color)
        return JSONResponse(serialize_event_type(event_type), status_code=201)

    @app.patch("/calendars/{calendar_id}/types/{type_id}")
    async def update_event_type(calendar_id: str, type_id: str, body: EventTypeRequest) -> JSONResponse:
        event_type = calendars.update_event_type(calendar_id, type_id, name=body.name, color=body.color)
        return JSONResponse(serialize_event_type(event_type))

    @app.delete("/calendars/{calendar_id}/types/{type_id}")
    async def delete_event_type(calendar_id: str, type_id: str) -> JSONResponse:
        calendars.delete_event_type(calendar_id, type_id)
        return JSONResponse({"success": True})

    # ------------------------------------------------------------------ tools

    @app.get("/api/functions")
    async def list_api_functions() -> JSONResponse:
        functions = [_serialize_api_function(func) for func in get_api_functions()]
        return JSONResponse({"functions": functions})

    @app.post("/api/functions/{function_name}")
    async def invoke_api_function(function_name: str, request: ApiCallRequest) -> JSONResponse:
        try:
            get_api_function(function_name)
        except KeyError as exc:
            logger.warning("API function not found: %s", function_name)
            raise HTTPException(status_code=404, detail=f"Unknown function: {function_name}") from exc
        result = execute_date_tool(function_name, request.arguments)
        logger.debug("API function %s executed: %s", function_name, result)
        return JSONResponse({"name": function_name, "result": result.to_dict()})

    return app


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    import asyncio

    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    asyncio.run(serve(create_app(), config))
