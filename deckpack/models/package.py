"""Package part, relationship and content-type contracts."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, constr

from .base import DeckPackBaseModel

NonEmptyStr = constr(min_length=1)
ContentTypeKind = Literal["Default", "Override"]


class PartDescriptor(DeckPackBaseModel):
    path: NonEmptyStr = Field(..., description="Part name, e.g. /ppt/slides/slide1.xml")
    content_type: NonEmptyStr

    @property
    def member_name(self) -> str:
        """Archive member name (part name without the leading slash)."""
        return self.path.lstrip("/")


class RelationshipEntry(DeckPackBaseModel):
    scope: NonEmptyStr = Field(..., description="Source part name, '/' for the package root")
    target: NonEmptyStr = Field(..., description="Part name of the target")
    rel_type: NonEmptyStr
    rel_id: NonEmptyStr


class ContentTypeEntry(DeckPackBaseModel):
    kind: ContentTypeKind
    key: NonEmptyStr = Field(..., description="Extension for Default, part name for Override")
    content_type: NonEmptyStr
