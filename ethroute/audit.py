"""Local JSONL audit trail of mutations applied to the host."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from .utils import ensure_parent_dir, infer_actor, utc_now_iso


def append_jsonl(path: Path, record: dict[str, Any]) -> None:
    """Append a JSON record to a JSONL file."""
    ensure_parent_dir(path)
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(record, sort_keys=True) + "\n")


def audit_record(
    action: str,
    *,
    endpoint: Optional[str],
    ok: bool,
    parameters: dict[str, Any],
    error: Optional[str] = None,
) -> dict[str, Any]:
    """Build one audit record for action."""
    record: dict[str, Any] = {
        "ts": utc_now_iso(),
        "actor": infer_actor(),
        "action": action,
        "endpoint": endpoint,
        "ok": ok,
        "parameters": parameters,
    }
    if error:
        record["error"] = error
    return record
