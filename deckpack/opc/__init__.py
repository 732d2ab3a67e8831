"""Open Packaging Convention building blocks: manifest, relationships, archive."""

from .assembler import PackageAssembler, StagedPart, estimate_export_size
from .content_types import ContentTypeRegistry
from .relationships import RelationshipGraph, relative_target, resolve_target

__all__ = [
    "ContentTypeRegistry",
    "PackageAssembler",
    "RelationshipGraph",
    "StagedPart",
    "estimate_export_size",
    "relative_target",
    "resolve_target",
]
