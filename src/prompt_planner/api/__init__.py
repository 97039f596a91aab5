"""Function registry and HTTP payload models."""

from __future__ import annotations

from .registry import REGISTRY, ApiFunction, call_api, get_api_function, get_api_functions, register_api

__all__ = [
    "REGISTRY",
    "ApiFunction",
    "call_api",
    "get_api_function",
    "get_api_functions",
    "register_api",
]
