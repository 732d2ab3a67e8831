"""Export event log: one JSON object per line."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def log_event(
    log_path: Optional[Union[str, Path]], event_type: str, payload: Dict[str, Any]
) -> None:
    """Append ``event_type`` with ``payload`` to ``log_path``.

    Exports run without a log unless one is configured, so a ``None`` path
    is accepted and nothing is written. Payload values that JSON cannot
    encode (paths, enums) are written as their ``str``.
    """
    if log_path is None:
        return
    log_path = Path(log_path)
    line = json.dumps(
        {"timestamp": _utc_stamp(), "event_type": event_type, "payload": payload},
        ensure_ascii=True,
        default=str,
    )
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write(line + "\n")
