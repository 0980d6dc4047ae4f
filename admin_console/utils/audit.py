"""Lightweight metrics helpers for the admin console.

Writes compact events (requests served, moderation actions, auth decisions)
to a JSONL file for quick local inspection.
"""
from __future__ import annotations

import os
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

_BASE_DIR: Optional[str] = None


def set_logs_dir(path: str | Path) -> None:
    """Root metrics under ``path`` (the LOGS_DIR setting) instead of the environment."""
    global _BASE_DIR
    _BASE_DIR = str(path)


def _logs_dir() -> Path:
    """
    Metrics directory with date-based rotation.

    Returns:
        Path to <LOGS_DIR>/metrics/YYYY-MM-DD/
    """
    base = _BASE_DIR or os.getenv("LOGS_DIR", "logs")
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    p = Path(base) / "metrics" / today
    p.mkdir(parents=True, exist_ok=True)
    return p


def record_metric(
    kind: str,
    fields: Dict[str, Any] | None = None,
    outcome: str | None = None,
    latency_ms: float | None = None,
) -> None:
    """Append a single metric event to metrics/<day>/console.jsonl.

    Args:
        kind: Short event kind, e.g. "http.reports", "mutation.reports.process", "auth.login".
        fields: Arbitrary dict with event fields (ids, paths, status codes).
        outcome: Optional outcome: accepted|failed|invalid|denied.
        latency_ms: Request latency in milliseconds.
    """
    entry = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "kind": kind,
        "fields": fields or {},
    }
    if outcome:
        entry["outcome"] = outcome
    if latency_ms is not None:
        entry["latency_ms"] = latency_ms
    out = _logs_dir() / "console.jsonl"
    with out.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")


def log_action(actor: str, action: str, payload: Dict[str, Any] | None = None, outcome: str | None = None) -> None:
    """Record a moderation action attributed to an admin."""
    record_metric(f"action:{action}", {"actor": actor, **(payload or {})}, outcome=outcome)
