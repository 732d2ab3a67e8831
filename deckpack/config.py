"""Runtime configuration loader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .models.config import ExportConfig


def _require_file(path: Path, label: str) -> None:
    if not path.exists():
        raise FileNotFoundError(f"Missing {label}: {path}")


def load_config(
    config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None
) -> ExportConfig:
    """Load configuration with canonical defaults, an optional JSON file and overrides."""
    data: Dict[str, Any] = {}
    if config_path is not None:
        _require_file(config_path, "config")
        with open(config_path, "r", encoding="utf-8") as handle:
            data.update(json.load(handle))
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})
    return ExportConfig.model_validate(data)
