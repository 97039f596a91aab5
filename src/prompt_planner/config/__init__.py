"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, LlmSettings, PlannerSettings, StorageSettings, get_settings

__all__ = ["AppSettings", "LlmSettings", "PlannerSettings", "StorageSettings", "get_settings"]
