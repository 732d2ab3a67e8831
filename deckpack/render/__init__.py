"""Part renderers: pure functions from deck content to OOXML part text."""

from .parts import render_presentation_xml, render_slide_xml
from .text import normalize_hex, xml_escape, xml_safe, xml_unescape

__all__ = [
    "normalize_hex",
    "render_presentation_xml",
    "render_slide_xml",
    "xml_escape",
    "xml_safe",
    "xml_unescape",
]
