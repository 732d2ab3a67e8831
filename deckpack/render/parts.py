"""Slide and presentation part XML rendering.

Everything here is a pure function of its arguments: relationship ids are
allocated by the caller and passed in, never derived.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ..models.deck import BulletStyle, DesignSpec, FontSizeTier, ImagePosition, LayoutType, Slide
from ..opc.constants import NS_A, NS_P, NS_R, XML_DECLARATION
from .text import normalize_hex, xml_escape

SLIDE_WIDTH = 9144000
SLIDE_HEIGHT = 6858000
NOTES_WIDTH = 6858000
NOTES_HEIGHT = 9144000
FIRST_SLIDE_ID = 256
SLIDE_MASTER_ID = 2147483648

DEFAULT_BULLET_FONT = "Arial"

# (title, body) in hundredths of a point
FONT_SIZES: Dict[FontSizeTier, Tuple[int, int]] = {
    FontSizeTier.SMALL: (3200, 1800),
    FontSizeTier.MEDIUM: (4400, 2400),
    FontSizeTier.LARGE: (5600, 2800),
    FontSizeTier.EXTRA_LARGE: (7200, 3200),
}

BULLET_CHARS: Dict[BulletStyle, Optional[str]] = {
    BulletStyle.DISC: "●",
    BulletStyle.CIRCLE: "○",
    BulletStyle.SQUARE: "■",
    BulletStyle.DASH: "–",
    BulletStyle.ARROW: "→",
    BulletStyle.CHECKMARK: "✓",
    BulletStyle.NONE: None,
}

BULLET_INDENT = 342900

Frame = Tuple[int, int, int, int]

# Fixed picture frames per position hint; never derived from pixel size.
IMAGE_FRAMES: Dict[ImagePosition, Frame] = {
    ImagePosition.RIGHT: (4572000, 1828800, 3657600, 2743200),
    ImagePosition.LEFT: (914400, 1828800, 3657600, 2743200),
    ImagePosition.TOP: (2743200, 1417638, 3657600, 2057400),
    ImagePosition.BOTTOM: (2743200, 4114800, 3657600, 2057400),
    ImagePosition.CENTER: (2743200, 2057400, 3657600, 2743200),
    ImagePosition.BACKGROUND: (0, 0, SLIDE_WIDTH, SLIDE_HEIGHT),
}

# Body frame when a picture shares the slide; absent positions inherit the layout.
BODY_FRAMES_WITH_IMAGE: Dict[ImagePosition, Frame] = {
    ImagePosition.RIGHT: (457200, 1600200, 3931920, 4525963),
    ImagePosition.LEFT: (4754880, 1600200, 3931920, 4525963),
    ImagePosition.TOP: (457200, 3566160, 8229600, 2559840),
    ImagePosition.BOTTOM: (457200, 1600200, 8229600, 2423160),
}

TITLE_SHAPE_ID = 2
BODY_SHAPE_ID = 3
PICTURE_SHAPE_ID = 4


def font_sizes(tier) -> Tuple[int, int]:
    return FONT_SIZES[FontSizeTier(tier)]


def bullet_char(style) -> Optional[str]:
    return BULLET_CHARS[BulletStyle(style)]


def _xfrm(frame: Frame) -> str:
    x, y, cx, cy = frame
    return f'<a:xfrm><a:off x="{x}" y="{y}"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm>'


def _run_xml(text: str, size: int, color: str, typeface: str, bold: bool = False) -> str:
    bold_attr = ' b="1"' if bold else ""
    return (
        f'<a:r><a:rPr lang="en-US" sz="{size}"{bold_attr} dirty="0">'
        f'<a:solidFill><a:srgbClr val="{color}"/></a:solidFill>'
        f'<a:latin typeface="{xml_escape(typeface)}"/></a:rPr>'
        f"<a:t>{xml_escape(text)}</a:t></a:r>"
    )


def _bullet_props_xml(style, bullet_font: str) -> str:
    glyph = bullet_char(style)
    if glyph is None:
        return ""
    return (
        f'<a:pPr marL="{BULLET_INDENT}" lvl="0" indent="-{BULLET_INDENT}">'
        f'<a:buFont typeface="{xml_escape(bullet_font)}"/>'
        f'<a:buChar char="{xml_escape(glyph)}"/></a:pPr>'
    )


def body_paragraphs_xml(
    lines: Sequence[str], spec: DesignSpec, bullet_font: str = DEFAULT_BULLET_FONT
) -> List[str]:
    """One ``<a:p>`` per body line, each carrying the slide's bullet glyph."""
    _, body_size = font_sizes(spec.font_size)
    color = normalize_hex(spec.text_color)
    bullet = _bullet_props_xml(spec.bullet_style, bullet_font)
    return [
        f"<a:p>{bullet}{_run_xml(line, body_size, color, spec.font_family)}</a:p>"
        for line in lines
    ]


def _title_shape_xml(slide: Slide) -> str:
    spec = slide.design_spec
    title_size, _ = font_sizes(spec.font_size)
    run = _run_xml(slide.title, title_size, normalize_hex(spec.text_color), spec.font_family, bold=True)
    return (
        "<p:sp><p:nvSpPr>"
        f'<p:cNvPr id="{TITLE_SHAPE_ID}" name="Title {TITLE_SHAPE_ID - 1}"/>'
        '<p:cNvSpPr><a:spLocks noGrp="1"/></p:cNvSpPr>'
        '<p:nvPr><p:ph type="title"/></p:nvPr></p:nvSpPr>'
        "<p:spPr/>"
        f"<p:txBody><a:bodyPr/><a:lstStyle/><a:p>{run}</a:p></p:txBody></p:sp>"
    )


def _body_shape_xml(slide: Slide, lines: Sequence[str], bullet_font: str) -> str:
    spec = slide.design_spec
    paragraphs = body_paragraphs_xml(lines, spec, bullet_font)
    if not paragraphs:
        paragraphs = ['<a:p><a:endParaRPr lang="en-US" dirty="0"/></a:p>']
    frame = None
    if slide.image is not None:
        frame = BODY_FRAMES_WITH_IMAGE.get(ImagePosition(spec.image_position))
    sp_pr = f"<p:spPr>{_xfrm(frame)}</p:spPr>" if frame else "<p:spPr/>"
    return (
        "<p:sp><p:nvSpPr>"
        f'<p:cNvPr id="{BODY_SHAPE_ID}" name="Content Placeholder {BODY_SHAPE_ID - 1}"/>'
        '<p:cNvSpPr><a:spLocks noGrp="1"/></p:cNvSpPr>'
        '<p:nvPr><p:ph type="body" idx="1"/></p:nvPr></p:nvSpPr>'
        f"{sp_pr}"
        f"<p:txBody><a:bodyPr/><a:lstStyle/>{''.join(paragraphs)}</p:txBody></p:sp>"
    )


def _picture_xml(rel_id: str, frame: Frame, description: str) -> str:
    return (
        "<p:pic><p:nvPicPr>"
        f'<p:cNvPr id="{PICTURE_SHAPE_ID}" name="Picture {PICTURE_SHAPE_ID - 1}" '
        f'descr="{xml_escape(description)}"/>'
        '<p:cNvPicPr><a:picLocks noChangeAspect="1"/></p:cNvPicPr><p:nvPr/></p:nvPicPr>'
        f'<p:blipFill><a:blip r:embed="{rel_id}"/><a:stretch><a:fillRect/></a:stretch></p:blipFill>'
        f'<p:spPr>{_xfrm(frame)}<a:prstGeom prst="rect"><a:avLst/></a:prstGeom></p:spPr>'
        "</p:pic>"
    )


def render_slide_xml(
    slide: Slide,
    image_rel_id: Optional[str] = None,
    bullet_font: str = DEFAULT_BULLET_FONT,
) -> str:
    """Render one slide part.

    ``image_rel_id`` must be the id the relationship graph returned for this
    slide's image; when it is None no picture is emitted.
    """
    spec = slide.design_spec
    layout = LayoutType(spec.layout)
    lines = slide.body_lines()

    shapes: List[str] = []
    picture = ""
    if image_rel_id is not None:
        position = ImagePosition(spec.image_position)
        picture = _picture_xml(image_rel_id, IMAGE_FRAMES[position], slide.title)
        if position is ImagePosition.BACKGROUND:
            shapes.append(picture)
            picture = ""

    shapes.append(_title_shape_xml(slide))
    if lines or layout is not LayoutType.TITLE_ONLY:
        shapes.append(_body_shape_xml(slide, lines, bullet_font))
    if picture:
        shapes.append(picture)

    background = normalize_hex(spec.background_color)
    return (
        XML_DECLARATION
        + f'<p:sld xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}">'
        f'<p:cSld name="{layout.value}">'
        f'<p:bg><p:bgPr><a:solidFill><a:srgbClr val="{background}"/></a:solidFill>'
        "<a:effectLst/></p:bgPr></p:bg>"
        "<p:spTree><p:nvGrpSpPr>"
        '<p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
        '<p:grpSpPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="0" cy="0"/>'
        '<a:chOff x="0" y="0"/><a:chExt cx="0" cy="0"/></a:xfrm></p:grpSpPr>'
        f"{''.join(shapes)}"
        "</p:spTree></p:cSld>"
        "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>"
        "</p:sld>\n"
    )


def render_presentation_xml(slide_rel_ids: Sequence[str], master_rel_id: str) -> str:
    """Render the presentation part listing slides in deck order on a 4:3 canvas."""
    slide_ids = "".join(
        f'<p:sldId id="{FIRST_SLIDE_ID + index}" r:id="{rel_id}"/>'
        for index, rel_id in enumerate(slide_rel_ids)
    )
    return (
        XML_DECLARATION
        + f'<p:presentation xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}" '
        'saveSubsetFonts="1">'
        f'<p:sldMasterIdLst><p:sldMasterId id="{SLIDE_MASTER_ID}" r:id="{master_rel_id}"/>'
        "</p:sldMasterIdLst>"
        f"<p:sldIdLst>{slide_ids}</p:sldIdLst>"
        f'<p:sldSz cx="{SLIDE_WIDTH}" cy="{SLIDE_HEIGHT}" type="screen4x3"/>'
        f'<p:notesSz cx="{NOTES_WIDTH}" cy="{NOTES_HEIGHT}"/>'
        "<p:defaultTextStyle><a:defPPr><a:defRPr lang=\"en-US\"/></a:defPPr>"
        '<a:lvl1pPr marL="0" algn="l"><a:defRPr sz="1800"/></a:lvl1pPr>'
        "</p:defaultTextStyle>"
        "</p:presentation>\n"
    )
