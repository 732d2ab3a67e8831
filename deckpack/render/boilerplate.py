"""Fixed parts every openable presentation needs: master, layout, theme, docProps."""

from __future__ import annotations

from typing import Optional

from ..opc.constants import NS_A, NS_P, NS_R, XML_DECLARATION
from .text import xml_escape

SLIDE_LAYOUT_ID = 2147483649
THEME_NAME = "deckpack"

_EMPTY_GROUP = (
    '<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
    '<p:grpSpPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="0" cy="0"/>'
    '<a:chOff x="0" y="0"/><a:chExt cx="0" cy="0"/></a:xfrm></p:grpSpPr>'
)

_CLR_MAP = (
    'bg1="lt1" tx1="dk1" bg2="lt2" tx2="dk2" accent1="accent1" accent2="accent2" '
    'accent3="accent3" accent4="accent4" accent5="accent5" accent6="accent6" '
    'hlink="hlink" folHlink="folHlink"'
)

TITLE_FRAME = (457200, 274638, 8229600, 1143000)
BODY_FRAME = (457200, 1600200, 8229600, 4525963)


def _placeholder(shape_id: int, name: str, ph: str, frame) -> str:
    x, y, cx, cy = frame
    return (
        f'<p:sp><p:nvSpPr><p:cNvPr id="{shape_id}" name="{name}"/>'
        '<p:cNvSpPr><a:spLocks noGrp="1"/></p:cNvSpPr>'
        f"<p:nvPr>{ph}</p:nvPr></p:nvSpPr>"
        f'<p:spPr><a:xfrm><a:off x="{x}" y="{y}"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm></p:spPr>'
        '<p:txBody><a:bodyPr/><a:lstStyle/><a:p><a:endParaRPr lang="en-US"/></a:p></p:txBody></p:sp>'
    )


def slide_master_xml(layout_rel_id: str) -> str:
    return (
        XML_DECLARATION
        + f'<p:sldMaster xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}">'
        "<p:cSld><p:bg><p:bgRef idx=\"1001\"><a:schemeClr val=\"bg1\"/></p:bgRef></p:bg>"
        f"<p:spTree>{_EMPTY_GROUP}"
        + _placeholder(2, "Title Placeholder 1", '<p:ph type="title"/>', TITLE_FRAME)
        + _placeholder(3, "Text Placeholder 2", '<p:ph type="body" idx="1"/>', BODY_FRAME)
        + "</p:spTree></p:cSld>"
        f"<p:clrMap {_CLR_MAP}/>"
        f'<p:sldLayoutIdLst><p:sldLayoutId id="{SLIDE_LAYOUT_ID}" r:id="{layout_rel_id}"/>'
        "</p:sldLayoutIdLst>"
        "<p:txStyles>"
        '<p:titleStyle><a:lvl1pPr algn="l"><a:defRPr sz="4400"><a:solidFill>'
        '<a:schemeClr val="tx1"/></a:solidFill><a:latin typeface="+mj-lt"/></a:defRPr>'
        "</a:lvl1pPr></p:titleStyle>"
        '<p:bodyStyle><a:lvl1pPr marL="0" indent="0"><a:buNone/><a:defRPr sz="2400">'
        '<a:solidFill><a:schemeClr val="tx1"/></a:solidFill><a:latin typeface="+mn-lt"/>'
        "</a:defRPr></a:lvl1pPr></p:bodyStyle>"
        '<p:otherStyle><a:lvl1pPr><a:defRPr sz="1800"/></a:lvl1pPr></p:otherStyle>'
        "</p:txStyles></p:sldMaster>\n"
    )


def slide_layout_xml() -> str:
    return (
        XML_DECLARATION
        + f'<p:sldLayout xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}" '
        'type="obj" preserve="1">'
        f'<p:cSld name="Title and Content"><p:spTree>{_EMPTY_GROUP}'
        + _placeholder(2, "Title 1", '<p:ph type="title"/>', TITLE_FRAME)
        + _placeholder(3, "Content Placeholder 2", '<p:ph type="body" idx="1"/>', BODY_FRAME)
        + "</p:spTree></p:cSld>"
        "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr></p:sldLayout>\n"
    )


def _scheme_color(name: str, value: str) -> str:
    return f'<a:{name}><a:srgbClr val="{value}"/></a:{name}>'


def theme_xml() -> str:
    colors = "".join(
        _scheme_color(name, value)
        for name, value in (
            ("dk1", "000000"),
            ("lt1", "FFFFFF"),
            ("dk2", "1F2937"),
            ("lt2", "E5E7EB"),
            ("accent1", "2563EB"),
            ("accent2", "059669"),
            ("accent3", "D97706"),
            ("accent4", "7C3AED"),
            ("accent5", "DC2626"),
            ("accent6", "0891B2"),
            ("hlink", "2563EB"),
            ("folHlink", "7C3AED"),
        )
    )
    solid = '<a:solidFill><a:schemeClr val="phClr"/></a:solidFill>'
    line = (
        '<a:ln w="{w}" cap="flat" cmpd="sng" algn="ctr">'
        + solid
        + '<a:prstDash val="solid"/></a:ln>'
    )
    return (
        XML_DECLARATION
        + f'<a:theme xmlns:a="{NS_A}" name="{THEME_NAME}"><a:themeElements>'
        f'<a:clrScheme name="{THEME_NAME}">{colors}</a:clrScheme>'
        f'<a:fontScheme name="{THEME_NAME}">'
        '<a:majorFont><a:latin typeface="Calibri Light"/><a:ea typeface=""/><a:cs typeface=""/></a:majorFont>'
        '<a:minorFont><a:latin typeface="Calibri"/><a:ea typeface=""/><a:cs typeface=""/></a:minorFont>'
        "</a:fontScheme>"
        f'<a:fmtScheme name="{THEME_NAME}">'
        f"<a:fillStyleLst>{solid * 3}</a:fillStyleLst>"
        "<a:lnStyleLst>"
        + "".join(line.format(w=w) for w in (6350, 12700, 19050))
        + "</a:lnStyleLst>"
        "<a:effectStyleLst>"
        + "<a:effectStyle><a:effectLst/></a:effectStyle>" * 3
        + "</a:effectStyleLst>"
        f"<a:bgFillStyleLst>{solid * 3}</a:bgFillStyleLst>"
        "</a:fmtScheme></a:themeElements>"
        "<a:objectDefaults/><a:extraClrSchemeLst/></a:theme>\n"
    )


def core_properties_xml(title: str, creator: str, created_at: Optional[str] = None) -> str:
    """Core properties; timestamps only appear when the caller supplies one."""
    timestamps = ""
    if created_at:
        stamp = xml_escape(created_at)
        timestamps = (
            f'<dcterms:created xsi:type="dcterms:W3CDTF">{stamp}</dcterms:created>'
            f'<dcterms:modified xsi:type="dcterms:W3CDTF">{stamp}</dcterms:modified>'
        )
    return (
        XML_DECLARATION
        + '<cp:coreProperties '
        'xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" '
        'xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:dcterms="http://purl.org/dc/terms/" '
        'xmlns:dcmitype="http://purl.org/dc/dcmitype/" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
        f"<dc:title>{xml_escape(title)}</dc:title>"
        f"<dc:creator>{xml_escape(creator)}</dc:creator>"
        f"<cp:lastModifiedBy>{xml_escape(creator)}</cp:lastModifiedBy>"
        f"{timestamps}"
        "</cp:coreProperties>\n"
    )


def app_properties_xml(slide_count: int) -> str:
    return (
        XML_DECLARATION
        + '<Properties '
        'xmlns="http://schemas.openxmlformats.org/officeDocument/2006/extended-properties" '
        'xmlns:vt="http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes">'
        "<Application>deckpack</Application>"
        "<PresentationFormat>On-screen Show (4:3)</PresentationFormat>"
        f"<Slides>{slide_count}</Slides>"
        "<Notes>0</Notes><HiddenSlides>0</HiddenSlides>"
        "</Properties>\n"
    )
