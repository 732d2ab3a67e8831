"""OPC namespaces, relationship types, content types and fixed part names."""

NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"
NS_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
NS_R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_CT = "http://schemas.openxmlformats.org/package/2006/content-types"
NS_PR = "http://schemas.openxmlformats.org/package/2006/relationships"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

_RT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"
RT_OFFICE_DOCUMENT = _RT + "officeDocument"
RT_EXTENDED_PROPERTIES = _RT + "extended-properties"
RT_CORE_PROPERTIES = (
    "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
)
RT_SLIDE = _RT + "slide"
RT_SLIDE_LAYOUT = _RT + "slideLayout"
RT_SLIDE_MASTER = _RT + "slideMaster"
RT_THEME = _RT + "theme"
RT_IMAGE = _RT + "image"

CT_RELATIONSHIPS = "application/vnd.openxmlformats-package.relationships+xml"
CT_XML = "application/xml"
CT_PRESENTATION = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"
)
CT_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"
CT_SLIDE_LAYOUT = "application/vnd.openxmlformats-officedocument.presentationml.slideLayout+xml"
CT_SLIDE_MASTER = "application/vnd.openxmlformats-officedocument.presentationml.slideMaster+xml"
CT_THEME = "application/vnd.openxmlformats-officedocument.theme+xml"
CT_CORE_PROPERTIES = "application/vnd.openxmlformats-package.core-properties+xml"
CT_EXTENDED_PROPERTIES = (
    "application/vnd.openxmlformats-officedocument.extended-properties+xml"
)

IMAGE_CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
}

PACKAGE_ROOT = "/"
CONTENT_TYPES_PART = "/[Content_Types].xml"
PRESENTATION_PART = "/ppt/presentation.xml"
SLIDE_MASTER_PART = "/ppt/slideMasters/slideMaster1.xml"
SLIDE_LAYOUT_PART = "/ppt/slideLayouts/slideLayout1.xml"
THEME_PART = "/ppt/theme/theme1.xml"
CORE_PROPERTIES_PART = "/docProps/core.xml"
APP_PROPERTIES_PART = "/docProps/app.xml"


def slide_part(index: int) -> str:
    return f"/ppt/slides/slide{index}.xml"


def image_part(index: int, extension: str) -> str:
    return f"/ppt/media/image{index}.{extension}"


def rels_part_for(source_part: str) -> str:
    """Return the .rels part name that holds ``source_part``'s relationships."""
    if source_part == PACKAGE_ROOT:
        return "/_rels/.rels"
    directory, _, filename = source_part.rpartition("/")
    return f"{directory}/_rels/{filename}.rels"
