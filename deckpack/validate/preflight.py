"""Preflight validation for SlideDeck input."""

from __future__ import annotations

from typing import List

from ..errors import InputValidationError
from ..models.deck import Slide, SlideDeck
from ..render.text import is_hex_color


def _validate_colors(slide: Slide) -> List[str]:
    problems: List[str] = []
    spec = slide.design_spec
    for label, value in (
        ("background color", spec.background_color),
        ("text color", spec.text_color),
    ):
        if not is_hex_color(value):
            problems.append(
                f"slide {slide.number}: {label} {value!r} is not a 6-digit hex color"
            )
    return problems


def validate_deck(deck: SlideDeck) -> List[str]:
    """Return a list of input problems; empty list means pass."""
    if not deck.slides:
        return ["deck has no slides"]

    problems: List[str] = []
    for position, slide in enumerate(deck.slides, start=1):
        if slide.number != position:
            problems.append(
                f"slide numbers must be contiguous from 1: position {position} "
                f"holds slide {slide.number}"
            )
        problems.extend(_validate_colors(slide))
    return problems


def ensure_valid(deck: SlideDeck) -> None:
    """Raise InputValidationError listing every problem found."""
    problems = validate_deck(deck)
    if problems:
        raise InputValidationError(problems)
