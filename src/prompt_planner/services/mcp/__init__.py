"""MCP surface exposing the date tools."""

from __future__ import annotations

from .server import build_server, run_mcp_server

__all__ = ["build_server", "run_mcp_server"]
