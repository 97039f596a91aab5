from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core.config import DATA_DIR

load_dotenv()


@dataclass(frozen=True)
class LlmSettings:
    api_key: Optional[str]
    model: str
    base_url: Optional[str]
    organization: Optional[str]
    project: Optional[str]
    temperature: float = 0.2
    max_tokens: int = 8192

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.model)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.api_key:
            missing.append("OPENAI_API_KEY")
        if not self.model:
            missing.append("OPENAI_MODEL")
        return missing


@dataclass(frozen=True)
class PlannerSettings:
    max_iterations: int = 10
    request_timeout: float = 60.0
    school_zone: str = "B"
    undo_capacity: int = 20
    reference_months: int = 14
    log_agent_runs: bool = False


@dataclass(frozen=True)
class StorageSettings:
    state_file: Path
    agent_runs_dir: Path
    log_file: Optional[Path] = None

    @property
    def log_path(self) -> Path:
        return self.log_file or self.state_file.parent / "prompt_planner.log"


@dataclass(frozen=True)
class AppSettings:
    llm: LlmSettings
    planner: PlannerSettings
    storage: StorageSettings
    log_level: str = "INFO"


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _flag_from_env(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    llm = LlmSettings(
        api_key=os.getenv("OPENAI_API_KEY"),
        model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        base_url=os.getenv("OPENAI_BASE_URL"),
        organization=os.getenv("OPENAI_ORG"),
        project=os.getenv("OPENAI_PROJECT"),
        temperature=_float_from_env("PLANNER_TEMPERATURE", 0.2),
        max_tokens=_int_from_env("OPENAI_MAX_TOKENS", 8192),
    )

    zone = os.getenv("PLANNER_SCHOOL_ZONE", "B").strip().upper()
    planner = PlannerSettings(
        max_iterations=_int_from_env("PLANNER_MAX_ITERATIONS", 10),
        request_timeout=_float_from_env("PLANNER_REQUEST_TIMEOUT", 60.0),
        school_zone=zone if zone in {"A", "B", "C"} else "B",
        undo_capacity=_int_from_env("PLANNER_UNDO_CAPACITY", 20),
        reference_months=_int_from_env("PLANNER_REFERENCE_MONTHS", 14),
        log_agent_runs=_flag_from_env("PLANNER_LOG_AGENT_RUNS"),
    )

    state_file = os.getenv("PLANNER_STATE_FILE")
    log_file = os.getenv("PLANNER_LOG_FILE")
    storage = StorageSettings(
        state_file=Path(state_file) if state_file else DATA_DIR / "calendar_state.json",
        agent_runs_dir=DATA_DIR / "agent_runs",
        log_file=Path(log_file) if log_file else DATA_DIR / "prompt_planner.log",
    )

    return AppSettings(
        llm=llm,
        planner=planner,
        storage=storage,
        log_level=os.getenv("PLANNER_LOG_LEVEL", "INFO").upper(),
    )
