"""Relationship graph with per-source-part id scopes."""

from __future__ import annotations

import posixpath
from typing import Dict, List
from xml.sax.saxutils import quoteattr

from ..errors import UnknownRelationshipScope
from ..models.package import RelationshipEntry
from .constants import NS_PR, XML_DECLARATION, rels_part_for


class _Scope:
    def __init__(self, source_part: str) -> None:
        self.source_part = source_part
        self.next_id = 1
        self.entries: List[RelationshipEntry] = []


class RelationshipGraph:
    """Allocates ``rId{n}`` ids independently for each source part.

    A scope is identified by its source part name (``/`` for the package
    root). Callers must embed the id returned by :meth:`add`; ids are never
    precomputed.
    """

    def __init__(self) -> None:
        self._scopes: Dict[str, _Scope] = {}

    def new_scope(self, source_part: str) -> str:
        # Re-opening an existing scope keeps its counter, so ids stay unique.
        if source_part not in self._scopes:
            self._scopes[source_part] = _Scope(source_part)
        return source_part

    def add(self, scope: str, target_part: str, rel_type: str) -> str:
        try:
            state = self._scopes[scope]
        except KeyError:
            raise UnknownRelationshipScope(scope) from None
        rel_id = f"rId{state.next_id}"
        state.next_id += 1
        state.entries.append(
            RelationshipEntry(scope=scope, target=target_part, rel_type=rel_type, rel_id=rel_id)
        )
        return rel_id

    def scopes(self) -> List[str]:
        return list(self._scopes)

    def entries(self, scope: str) -> List[RelationshipEntry]:
        try:
            return list(self._scopes[scope].entries)
        except KeyError:
            raise UnknownRelationshipScope(scope) from None

    def all_entries(self) -> List[RelationshipEntry]:
        return [entry for state in self._scopes.values() for entry in state.entries]

    def rels_part(self, scope: str) -> str:
        if scope not in self._scopes:
            raise UnknownRelationshipScope(scope)
        return rels_part_for(scope)

    def serialize(self, scope: str) -> str:
        lines = [f'<Relationships xmlns="{NS_PR}">']
        for entry in self.entries(scope):
            target = relative_target(scope, entry.target)
            lines.append(
                f"  <Relationship Id={quoteattr(entry.rel_id)} "
                f"Type={quoteattr(entry.rel_type)} Target={quoteattr(target)}/>"
            )
        lines.append("</Relationships>\n")
        return XML_DECLARATION + "\n".join(lines)


def relative_target(source_part: str, target_part: str) -> str:
    """Express ``target_part`` relative to the directory holding ``source_part``."""
    if source_part == "/":
        return target_part.lstrip("/")
    base = posixpath.dirname(source_part)
    return posixpath.relpath(target_part, base)


def resolve_target(source_part: str, target: str) -> str:
    """Inverse of :func:`relative_target`: turn a Target attribute into a part name."""
    if target.startswith("/"):
        return posixpath.normpath(target)
    base = "/" if source_part == "/" else posixpath.dirname(source_part)
    return posixpath.normpath(posixpath.join(base, target))
