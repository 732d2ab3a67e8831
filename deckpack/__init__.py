"""Build OOXML presentation packages from fully-resolved slide decks."""

from .errors import (
    ConflictingContentType,
    DeckPackError,
    ExportCancelled,
    ExportFailed,
    InputValidationError,
    PackagingIOError,
    UnknownRelationshipScope,
)
from .export.pipeline import ExportPipeline, ExportState, export_deck

__all__ = [
    "ConflictingContentType",
    "DeckPackError",
    "ExportCancelled",
    "ExportFailed",
    "ExportPipeline",
    "ExportState",
    "InputValidationError",
    "PackagingIOError",
    "UnknownRelationshipScope",
    "export_deck",
]
