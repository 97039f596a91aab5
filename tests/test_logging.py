from __future__ import annotations

import logging
from dataclasses import replace

import prompt_planner.logging as planner_logging


def test_log_file_follows_storage_settings(settings, tmp_path, monkeypatch):
    monkeypatch.setattr(planner_logging, "_LOG_FILE", None)
    target = tmp_path / "logs" / "planner.log"
    configured = replace(settings, storage=replace(settings.storage, log_file=target), log_level="DEBUG")
    root = logging.getLogger()
    before = list(root.handlers)
    previous_level = root.level
    try:
        assert planner_logging.configure_logging(configured) == target
        added = [handler for handler in root.handlers if handler not in before]
        assert len(added) == 2
        assert target.exists()
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

        assert planner_logging.configure_logging(settings) == target
        assert len(root.handlers) == len(before) + 2
    finally:
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()
        root.setLevel(previous_level)


def test_default_log_path_sits_next_to_the_state_file(settings):
    assert settings.storage.log_path == settings.storage.state_file.parent / "prompt_planner.log"
