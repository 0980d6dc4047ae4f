"""Pytest helpers shared by every test module."""
from __future__ import annotations

import pytest

from admin_console.utils import audit


@pytest.fixture(autouse=True)
def _isolated_logs_dir(tmp_path, monkeypatch):
    """Metrics JSONL goes to a per-test directory instead of ./logs."""
    logs_dir = tmp_path / "logs"
    monkeypatch.setenv("LOGS_DIR", str(logs_dir))
    # create_app() pins the directory from its settings; undo that after each test
    monkeypatch.setattr(audit, "_BASE_DIR", None)
    return logs_dir
