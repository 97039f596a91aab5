"""HTTP surface for the planner."""

from __future__ import annotations

from .server import create_app, run_local_server

__all__ = ["create_app", "run_local_server"]
