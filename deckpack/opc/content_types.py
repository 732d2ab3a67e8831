"""[Content_Types].xml manifest registry."""

from __future__ import annotations

from typing import Dict, List
from xml.sax.saxutils import quoteattr

from ..errors import ConflictingContentType
from ..models.package import ContentTypeEntry
from .constants import NS_CT, XML_DECLARATION


class ContentTypeRegistry:
    """Collects Default (by extension) and Override (by part name) declarations.

    Both maps keep insertion order so the serialized manifest is byte-stable
    for a given sequence of registrations.
    """

    def __init__(self) -> None:
        self._defaults: Dict[str, str] = {}
        self._overrides: Dict[str, str] = {}

    def register_default(self, extension: str, content_type: str) -> None:
        key = extension.lower().lstrip(".")
        existing = self._defaults.get(key)
        if existing is None:
            self._defaults[key] = content_type
        elif existing != content_type:
            raise ConflictingContentType(key, existing, content_type)

    def register_override(self, part_name: str, content_type: str) -> None:
        self._overrides[part_name] = content_type

    def has_default(self, extension: str) -> bool:
        return extension.lower().lstrip(".") in self._defaults

    def content_type_for(self, part_name: str) -> str:
        """Resolve a part's content type the way a package reader would."""
        if part_name in self._overrides:
            return self._overrides[part_name]
        extension = part_name.rpartition(".")[2].lower()
        try:
            return self._defaults[extension]
        except KeyError:
            raise KeyError(f"No content type declared for {part_name}") from None

    def entries(self) -> List[ContentTypeEntry]:
        entries = [
            ContentTypeEntry(kind="Default", key=ext, content_type=ct)
            for ext, ct in self._defaults.items()
        ]
        entries.extend(
            ContentTypeEntry(kind="Override", key=name, content_type=ct)
            for name, ct in self._overrides.items()
        )
        return entries

    def serialize(self) -> str:
        lines = [XML_DECLARATION, f'<Types xmlns="{NS_CT}">']
        for ext, ct in self._defaults.items():
            lines.append(f"  <Default Extension={quoteattr(ext)} ContentType={quoteattr(ct)}/>")
        for name, ct in self._overrides.items():
            lines.append(f"  <Override PartName={quoteattr(name)} ContentType={quoteattr(ct)}/>")
        lines.append("</Types>\n")
        return lines[0] + "\n".join(lines[1:])
