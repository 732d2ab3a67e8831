"""ExportReport contracts."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .base import DeckPackBaseModel
from .package import PartDescriptor, RelationshipEntry


class SlideExportEntry(DeckPackBaseModel):
    number: int
    part: str
    rels_part: str
    image_part: Optional[str] = None
    image_rel_id: Optional[str] = None


class ExportReport(DeckPackBaseModel):
    output_path: str
    slide_count: int
    parts: List[PartDescriptor] = Field(default_factory=list)
    relationships: List[RelationshipEntry] = Field(default_factory=list)
    entries: List[SlideExportEntry] = Field(default_factory=list)
