"""Pydantic models for deckpack contracts."""

from .base import DeckPackBaseModel
from .config import ExportConfig
from .deck import (
    BulletStyle,
    DesignSpec,
    FontSizeTier,
    ImagePosition,
    LayoutType,
    Slide,
    SlideDeck,
    SlideImage,
)
from .package import ContentTypeEntry, PartDescriptor, RelationshipEntry
from .report import ExportReport, SlideExportEntry
from .validation import PackageReport, PackageViolation

__all__ = [
    "DeckPackBaseModel",
    "ExportConfig",
    "BulletStyle",
    "DesignSpec",
    "FontSizeTier",
    "ImagePosition",
    "LayoutType",
    "Slide",
    "SlideDeck",
    "SlideImage",
    "ContentTypeEntry",
    "PartDescriptor",
    "RelationshipEntry",
    "ExportReport",
    "SlideExportEntry",
    "PackageReport",
    "PackageViolation",
]
