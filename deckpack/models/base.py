"""Common base for every deckpack contract."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict


class DeckPackBaseModel(BaseModel):
    """Rejects unknown keys and stores enum fields as their plain values.

    Enum-typed fields therefore read back as ``str``; renderers coerce with the
    enum class before using them as table keys.
    """

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict; ``None`` fields are kept so reports keep their shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=False)

    def to_json(self, indent: Union[int, None] = None) -> str:
        """Sorted-key JSON, so two reports of the same export compare equal as text."""
        return json.dumps(self.to_dict(), sort_keys=True, ensure_ascii=True, indent=indent)

    def write_json(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(self.to_json(indent=2) + "\n")
        return path
