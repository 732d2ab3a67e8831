"""PackageReport contracts."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from .base import DeckPackBaseModel

ViolationType = Literal[
    "NOT_A_ZIP",
    "CONTENT_TYPES_MISSING",
    "CONTENT_TYPES_DUPLICATE",
    "UNDECLARED_CONTENT_TYPE",
    "MISSING_RELS_PART",
    "DANGLING_RELATIONSHIP",
    "UNRESOLVED_REL_ID",
    "SLIDE_COUNT_MISMATCH",
    "MALFORMED_XML",
    "UNREADABLE_PACKAGE",
]


class PackageViolation(DeckPackBaseModel):
    part: Optional[str] = None
    violation_type: ViolationType
    detail: Optional[str] = None


class PackageReport(DeckPackBaseModel):
    violations: List[PackageViolation] = Field(default_factory=list)
    slide_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.violations
