from __future__ import annotations

import logging

from fastmcp import FastMCP

from ...api import get_api_functions
from ...dates.date_tools import TOOL_CATEGORY

INSTRUCTIONS = (
    "Prompt Planner MCP server exposes deterministic date tools for French calendars. "
    "Use them to resolve weekdays, Nth weekdays of a month and relative dates instead of guessing."
)

logger = logging.getLogger(__name__)


def build_server() -> FastMCP:
    server = FastMCP(name="prompt-planner", instructions=INSTRUCTIONS)
    for api_function in get_api_functions(TOOL_CATEGORY):
        logger.debug("Registering MCP tool: %s", api_function.name)
        server.tool(
            api_function.func,
            name=api_function.name,
            description=api_function.description,
            tags=set(api_function.tags),
        )
    return server


def run_mcp_server(host: str = "127.0.0.1", port: int = 8765) -> None:
    import asyncio

    server = build_server()
    asyncio.run(server.run_streamable_http_async(host=host, port=port))
