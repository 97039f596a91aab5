from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Prompt Planner"
APP_AUTHOR = "PromptPlanner"
DATA_DIR = Path(os.getenv("PLANNER_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))


def ensure_data_dir(path: Path = DATA_DIR) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
