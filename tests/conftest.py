from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Union

import pytest

os.environ.setdefault("PLANNER_DATA_DIR", tempfile.mkdtemp(prefix="prompt-planner-tests-"))

from prompt_planner.config import AppSettings, LlmSettings, PlannerSettings, StorageSettings  # noqa: E402
from prompt_planner.core import CalendarStore  # noqa: E402
from prompt_planner.interpreter import BackendTurn, PromptInterpreter  # noqa: E402
from prompt_planner.services import ServiceContext  # noqa: E402

from .support import ScriptedBackend  # noqa: E402


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        llm=LlmSettings(
            api_key=None,
            model="test-model",
            base_url=None,
            organization=None,
            project=None,
        ),
        planner=PlannerSettings(request_timeout=5.0),
        storage=StorageSettings(state_file=tmp_path / "state.json", agent_runs_dir=tmp_path / "agent_runs"),
    )


@pytest.fixture
def context(settings: AppSettings) -> ServiceContext:
    return ServiceContext(settings=settings, store=CalendarStore(settings.storage.state_file))


@pytest.fixture
def make_interpreter(settings: AppSettings):
    def _make(*turns: Union[BackendTurn, BaseException]) -> PromptInterpreter:
        return PromptInterpreter(backend=ScriptedBackend(turns), settings=settings)

    return _make
