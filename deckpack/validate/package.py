"""Structural verification of a written presentation package."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple
from zipfile import BadZipFile, ZipFile

from lxml import etree
from pptx import Presentation
from pptx.oxml import parse_xml

from ..models.validation import PackageReport, PackageViolation
from ..opc.constants import NS_CT, NS_P, NS_PR, NS_R
from ..opc.relationships import resolve_target

CONTENT_TYPES_MEMBER = "[Content_Types].xml"
PRESENTATION_MEMBER = "ppt/presentation.xml"
SLIDE_MEMBER_RE = re.compile(r"^ppt/slides/slide\d+\.xml$")

Relationship = Tuple[str, str, str]  # (type, target, target mode)


def _source_part(rels_member: str) -> str:
    directory, _, filename = rels_member.rpartition("/")
    parent = directory[: -len("_rels")].rstrip("/")
    source = filename[: -len(".rels")]
    if not source:
        return "/"
    return f"/{parent}/{source}" if parent else f"/{source}"


def _parse_members(zf: ZipFile, names: List[str]) -> Tuple[Dict[str, object], List[PackageViolation]]:
    """Parse every .xml and .rels member once; unparseable ones become violations."""
    trees: Dict[str, object] = {}
    violations: List[PackageViolation] = []
    for name in names:
        if not name.endswith((".xml", ".rels")):
            continue
        try:
            trees[name] = parse_xml(zf.read(name))
        except etree.XMLSyntaxError as exc:
            violations.append(PackageViolation(
                part=f"/{name}", violation_type="MALFORMED_XML", detail=str(exc)
            ))
    return trees, violations


def _read_content_types(root) -> Tuple[Set[str], Set[str]]:
    defaults = {
        el.get("Extension", "").lower() for el in root.iter(f"{{{NS_CT}}}Default")
    }
    overrides = {el.get("PartName", "") for el in root.iter(f"{{{NS_CT}}}Override")}
    return defaults, overrides


def _read_rels(root) -> Dict[str, Relationship]:
    return {
        el.get("Id"): (el.get("Type", ""), el.get("Target", ""), el.get("TargetMode", "Internal"))
        for el in root.iter(f"{{{NS_PR}}}Relationship")
    }


def _referenced_rel_ids(root) -> Set[str]:
    prefix = f"{{{NS_R}}}"
    return {
        value
        for el in root.iter()
        for attr, value in el.attrib.items()
        if attr.startswith(prefix)
    }


def _check_content_types(names: List[str], root) -> List[PackageViolation]:
    violations: List[PackageViolation] = []
    defaults, overrides = _read_content_types(root)
    for name in names:
        if name == CONTENT_TYPES_MEMBER or name.endswith("/"):
            continue
        part_name = f"/{name}"
        extension = name.rpartition(".")[2].lower() if "." in name else ""
        if part_name not in overrides and extension not in defaults:
            violations.append(PackageViolation(
                part=part_name,
                violation_type="UNDECLARED_CONTENT_TYPE",
                detail=f"no Default for '.{extension}' and no Override",
            ))
    return violations


def _check_relationships(names: List[str], trees: Dict[str, object]) -> List[PackageViolation]:
    violations: List[PackageViolation] = []
    members = set(names)
    rels_by_source: Dict[str, Optional[Dict[str, Relationship]]] = {}

    for name in names:
        if not name.endswith(".rels"):
            continue
        source = _source_part(name)
        if name not in trees:
            # already reported as malformed; its source's r:ids cannot be checked
            rels_by_source[source] = None
            continue
        rels = _read_rels(trees[name])
        rels_by_source[source] = rels
        for rel_id, (_, target, mode) in rels.items():
            if mode == "External":
                continue
            target_part = resolve_target(source, target)
            if target_part.lstrip("/") not in members:
                violations.append(PackageViolation(
                    part=f"/{name}",
                    violation_type="DANGLING_RELATIONSHIP",
                    detail=f"{rel_id} -> {target_part}",
                ))

    for name in names:
        if not name.startswith("ppt/") or not name.endswith(".xml") or "/_rels/" in name:
            continue
        if name not in trees:
            continue
        referenced = _referenced_rel_ids(trees[name])
        if not referenced:
            continue
        source = f"/{name}"
        if source not in rels_by_source:
            violations.append(PackageViolation(
                part=source,
                violation_type="MISSING_RELS_PART",
                detail=f"references {sorted(referenced)} without a .rels part",
            ))
            continue
        known = rels_by_source[source]
        if known is None:
            continue
        for rel_id in sorted(referenced - set(known)):
            violations.append(PackageViolation(
                part=source,
                violation_type="UNRESOLVED_REL_ID",
                detail=rel_id,
            ))
    return violations


def verify_package(package_path: Path) -> PackageReport:
    """Return a report of structural problems; an empty report means pass."""
    try:
        zf = ZipFile(package_path)
    except (BadZipFile, OSError) as exc:
        return PackageReport(violations=[
            PackageViolation(violation_type="NOT_A_ZIP", detail=str(exc))
        ])

    with zf:
        names = zf.namelist()
        manifests = [name for name in names if name == CONTENT_TYPES_MEMBER]
        if not manifests:
            return PackageReport(violations=[
                PackageViolation(violation_type="CONTENT_TYPES_MISSING", part="/" + CONTENT_TYPES_MEMBER)
            ])
        trees, violations = _parse_members(zf, names)

    if len(manifests) > 1:
        violations.append(PackageViolation(
            part="/" + CONTENT_TYPES_MEMBER,
            violation_type="CONTENT_TYPES_DUPLICATE",
            detail=f"{len(manifests)} copies",
        ))

    if CONTENT_TYPES_MEMBER in trees:
        violations.extend(_check_content_types(names, trees[CONTENT_TYPES_MEMBER]))
    violations.extend(_check_relationships(names, trees))

    slide_count = sum(1 for name in names if SLIDE_MEMBER_RE.match(name))
    if PRESENTATION_MEMBER in trees:
        listed = len(list(trees[PRESENTATION_MEMBER].iter(f"{{{NS_P}}}sldId")))
        if listed != slide_count:
            violations.append(PackageViolation(
                part="/" + PRESENTATION_MEMBER,
                violation_type="SLIDE_COUNT_MISMATCH",
                detail=f"{listed} listed, {slide_count} slide parts",
            ))

    if not violations:
        try:
            prs = Presentation(str(package_path))
            opened = len(prs.slides)
        except Exception as exc:
            violations.append(PackageViolation(
                violation_type="UNREADABLE_PACKAGE", detail=f"{type(exc).__name__}: {exc}"
            ))
        else:
            if opened != slide_count:
                violations.append(PackageViolation(
                    violation_type="SLIDE_COUNT_MISMATCH",
                    detail=f"reader sees {opened} slides, archive has {slide_count}",
                ))

    return PackageReport(violations=violations, slide_count=slide_count)
