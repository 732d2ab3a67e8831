"""Config model."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, constr

from .base import DeckPackBaseModel

NonEmptyStr = constr(min_length=1)


class ExportConfig(DeckPackBaseModel):
    staging_root: Optional[NonEmptyStr] = Field(
        None, description="Parent directory for staging trees (default: system temp)"
    )
    compression: Literal["deflated", "stored"] = Field(
        "deflated", description="ZIP compression method"
    )
    bullet_font: NonEmptyStr = Field("Arial", description="Typeface for bullet glyphs")
    log_path: Optional[NonEmptyStr] = Field(None, description="JSONL event log path")
    check_disk_space: bool = Field(True, description="Estimate size before staging")
    creator: NonEmptyStr = Field("deckpack", description="Core properties creator")
