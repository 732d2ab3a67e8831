"""SlideDeck contracts."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, conint, constr, model_validator

from .base import DeckPackBaseModel

NonEmptyStr = constr(min_length=1)
ImageFormat = Literal["png", "jpg", "jpeg"]


class LayoutType(str, Enum):
    TITLE_ONLY = "titleOnly"
    TITLE_AND_CONTENT = "titleAndContent"
    TITLE_CONTENT_AND_IMAGE = "titleContentAndImage"
    IMAGE_ONLY = "imageOnly"
    SPLIT_VIEW = "splitView"
    FULL_IMAGE = "fullImage"


class FontSizeTier(str, Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    EXTRA_LARGE = "ExtraLarge"

    @classmethod
    def _missing_(cls, value):
        # accept the spaced display form, "Extra Large"
        if isinstance(value, str) and value.replace(" ", "") == "ExtraLarge":
            return cls.EXTRA_LARGE
        return None


class ImagePosition(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    BACKGROUND = "background"
    CENTER = "center"


class BulletStyle(str, Enum):
    DISC = "disc"
    CIRCLE = "circle"
    SQUARE = "square"
    DASH = "dash"
    ARROW = "arrow"
    CHECKMARK = "checkmark"
    NONE = "none"


class DesignSpec(DeckPackBaseModel):
    layout: LayoutType = LayoutType.TITLE_AND_CONTENT
    background_color: str = Field("#FFFFFF", description="6 hex digits, '#' optional")
    text_color: str = Field("#000000", description="6 hex digits, '#' optional")
    font_size: FontSizeTier = FontSizeTier.MEDIUM
    font_family: NonEmptyStr = "Helvetica"
    image_position: ImagePosition = ImagePosition.RIGHT
    bullet_style: BulletStyle = BulletStyle.DISC


class SlideImage(DeckPackBaseModel):
    """Image bytes for one slide, held in memory or read lazily from disk."""

    data: Optional[bytes] = None
    path: Optional[NonEmptyStr] = None
    width: conint(ge=1) = 1024
    height: conint(ge=1) = 1024
    format: ImageFormat = "png"

    @model_validator(mode="after")
    def _require_source(self) -> "SlideImage":
        if self.data is None and self.path is None:
            raise ValueError("SlideImage needs either data or path")
        return self

    @property
    def extension(self) -> str:
        return self.format

    def load(self) -> bytes:
        """Return the image bytes; reading from ``path`` may raise OSError."""
        if self.data is not None:
            return self.data
        return Path(self.path).read_bytes()


class Slide(DeckPackBaseModel):
    """One slide of input.

    ``notes`` is carried through for callers that keep speaker notes alongside
    the deck; the exporter does not write notes slides and ignores it.
    """

    number: conint(ge=1)
    title: str = ""
    body: str = Field("", description="Newline-delimited bullet lines")
    image: Optional[SlideImage] = None
    design_spec: DesignSpec = Field(default_factory=DesignSpec)
    notes: Optional[str] = None

    def body_lines(self) -> List[str]:
        """Non-blank body lines in display order; any line ending (LF, CRLF, CR) splits."""
        return [line for line in self.body.splitlines() if line.strip()]


class SlideDeck(DeckPackBaseModel):
    title: str = ""
    author: Optional[str] = None
    created_at: Optional[str] = Field(
        None, description="W3CDTF timestamp for core properties"
    )
    slides: List[Slide] = Field(default_factory=list)
