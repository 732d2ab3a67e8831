"""Text and color helpers shared by the part renderers."""

from __future__ import annotations

import re
from xml.sax.saxutils import escape, unescape

_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_REVERSE_ENTITIES = {"&quot;": '"', "&apos;": "'"}

# Vertical tab is PowerPoint's soft line break; form feed shows up in pasted text.
_BREAK_CHARS_RE = re.compile("[\x0b\x0c]")
# Anything outside the XML 1.0 Char production, lone surrogates included.
_INVALID_XML_CHARS_RE = re.compile(
    "[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)

HEX_COLOR_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")


def xml_safe(text: str) -> str:
    """Replace soft breaks with spaces and drop characters XML 1.0 cannot carry."""
    return _INVALID_XML_CHARS_RE.sub("", _BREAK_CHARS_RE.sub(" ", text))


def xml_escape(text: str) -> str:
    """Escape the five XML predefined entities (& < > " ') after :func:`xml_safe`."""
    return escape(xml_safe(text), _ENTITIES)


def xml_unescape(text: str) -> str:
    return unescape(text, _REVERSE_ENTITIES)


def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR_RE.match(value.strip()))


def normalize_hex(value: str) -> str:
    """Return ``RRGGBB`` in upper case; raise ValueError for anything else."""
    match = HEX_COLOR_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid hex color: {value!r}")
    return match.group(1).upper()
