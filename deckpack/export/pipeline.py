"""SlideDeck to .pptx export pipeline."""

from __future__ import annotations

import tempfile
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..errors import DeckPackError, ExportCancelled, ExportFailed, PackagingIOError
from ..logging_utils import log_event
from ..models.config import ExportConfig
from ..models.deck import Slide, SlideDeck, SlideImage
from ..models.package import PartDescriptor
from ..models.report import ExportReport, SlideExportEntry
from ..opc import constants as c
from ..opc.assembler import PackageAssembler, StagedPart, estimate_export_size
from ..opc.content_types import ContentTypeRegistry
from ..opc.relationships import RelationshipGraph
from ..render import boilerplate
from ..render.parts import render_presentation_xml, render_slide_xml
from ..validate.preflight import ensure_valid

ProgressCallback = Callable[[int, int], None]
CancelCheck = Callable[[], bool]

# content types, root rels, presentation rels, presentation part
STRUCTURAL_STEPS = 4


class ExportState(str, Enum):
    IDLE = "Idle"
    STAGING = "Staging"
    ARCHIVING = "Archiving"
    DONE = "Done"
    FAILED = "Failed"


class _ExportRun:
    """Per-call state: fresh registry, graph and report for every export."""

    def __init__(self, deck: SlideDeck, output_path: Path) -> None:
        self.deck = deck
        self.registry = ContentTypeRegistry()
        self.graph = RelationshipGraph()
        self.report = ExportReport(output_path=str(output_path), slide_count=len(deck.slides))
        self.slide_rel_ids: List[str] = []
        self.slide_number: Optional[int] = None
        self.step: Optional[str] = None
        self.current = 0
        self.total = len(deck.slides) + STRUCTURAL_STEPS


class ExportPipeline:
    def __init__(
        self,
        config: Optional[ExportConfig] = None,
        assembler: Optional[PackageAssembler] = None,
    ) -> None:
        self.config = config or ExportConfig()
        staging_root = Path(self.config.staging_root) if self.config.staging_root else None
        self.assembler = assembler or PackageAssembler(staging_root, self.config.compression)
        self.log_path = Path(self.config.log_path) if self.config.log_path else None
        self.state = ExportState.IDLE

    def export(
        self,
        deck: SlideDeck,
        output_path: Union[str, Path],
        progress_callback: Optional[ProgressCallback] = None,
        cancel_check: Optional[CancelCheck] = None,
    ) -> ExportReport:
        """Write ``deck`` as a presentation package at ``output_path``.

        ``output_path`` is only replaced once the whole package has been
        staged and archived. Every failure surfaces as ExportFailed whose
        ``cause`` is the typed error.
        """
        output_path = Path(output_path)
        run = _ExportRun(deck, output_path)
        self.state = ExportState.IDLE
        log_event(self.log_path, "EXPORT_START", {
            "title": deck.title,
            "slide_count": len(deck.slides),
            "output_path": str(output_path),
        })
        try:
            self._run(run, output_path, progress_callback, cancel_check)
        except ExportFailed as exc:
            self._fail(exc)
            raise
        except DeckPackError as exc:
            raise self._wrap(run, exc) from exc
        except OSError as exc:
            raise self._wrap(run, PackagingIOError(str(exc), exc.filename)) from exc
        except Exception as exc:
            raise self._wrap(run, exc) from exc
        except BaseException:
            self.state = ExportState.FAILED
            raise

        self.state = ExportState.DONE
        log_event(self.log_path, "EXPORT_DONE", {
            "output_path": str(output_path),
            "slides_exported": len(run.report.entries),
            "parts": len(run.report.parts),
        })
        return run.report

    def _wrap(self, run: _ExportRun, error: Exception) -> ExportFailed:
        reason = str(error) if isinstance(error, DeckPackError) else f"{type(error).__name__}: {error}"
        failure = ExportFailed(reason, slide_number=run.slide_number, step=run.step, cause=error)
        self._fail(failure)
        return failure

    def _fail(self, failure: ExportFailed) -> None:
        self.state = ExportState.FAILED
        log_event(self.log_path, "EXPORT_FAILED", {
            "reason": failure.reason,
            "slide_number": failure.slide_number,
            "step": failure.step,
            "error_type": type(failure.cause).__name__ if failure.cause else None,
        })

    def _run(
        self,
        run: _ExportRun,
        output_path: Path,
        progress_callback: Optional[ProgressCallback],
        cancel_check: Optional[CancelCheck],
    ) -> None:
        run.step = "preflight"
        ensure_valid(run.deck)
        if self.config.check_disk_space:
            self._check_disk_space(run.deck)

        run.registry.register_default("rels", c.CT_RELATIONSHIPS)
        run.registry.register_default("xml", c.CT_XML)
        presentation_scope = run.graph.new_scope(c.PRESENTATION_PART)

        self.state = ExportState.STAGING
        with self.assembler.staging() as root_dir:
            run.step = "slides"
            for index, slide in enumerate(run.deck.slides, start=1):
                if cancel_check is not None and cancel_check():
                    raise ExportCancelled("cancelled by caller", slide_number=slide.number)
                run.slide_number = slide.number
                self._stage_slide(run, root_dir, index, slide)
                run.slide_rel_ids.append(
                    run.graph.add(presentation_scope, c.slide_part(index), c.RT_SLIDE)
                )
                log_event(self.log_path, "SLIDE_STAGED", {
                    "slide_number": slide.number,
                    "has_image": slide.image is not None,
                })
                self._advance(run, progress_callback)
            run.slide_number = None

            for step, stage in (
                ("presentation part", self._stage_presentation),
                ("presentation relationships", self._stage_presentation_rels),
                ("root relationships", self._stage_root_rels),
                ("content types", self._stage_content_types),
            ):
                run.step = step
                stage(run, root_dir)
                self._advance(run, progress_callback)
            log_event(self.log_path, "PACKAGE_STAGED", {"parts": len(run.report.parts)})

            run.step = "archive"
            self.state = ExportState.ARCHIVING
            self.assembler.archive(root_dir, output_path)
            log_event(self.log_path, "ARCHIVE_DONE", {"output_path": str(output_path)})

    def _advance(self, run: _ExportRun, progress_callback: Optional[ProgressCallback]) -> None:
        run.current += 1
        if progress_callback is not None:
            progress_callback(run.current, run.total)

    def _check_disk_space(self, deck: SlideDeck) -> None:
        image_bytes = sum(_image_size(slide.image) for slide in deck.slides if slide.image)
        directory = Path(self.config.staging_root or tempfile.gettempdir())
        while not directory.exists() and directory != directory.parent:
            directory = directory.parent
        self.assembler.check_free_space(
            directory, estimate_export_size(len(deck.slides), image_bytes)
        )

    def _stage(self, run: _ExportRun, root_dir: Path, parts: List[StagedPart]) -> None:
        self.assembler.stage(root_dir, parts)
        run.report.parts.extend(part.descriptor for part in parts)

    def _xml_part(self, run: _ExportRun, part_name: str, content_type: str, xml: str) -> StagedPart:
        run.registry.register_override(part_name, content_type)
        return StagedPart(PartDescriptor(path=part_name, content_type=content_type), xml.encode("utf-8"))

    def _rels_part(self, run: _ExportRun, scope: str) -> StagedPart:
        descriptor = PartDescriptor(path=run.graph.rels_part(scope), content_type=c.CT_RELATIONSHIPS)
        return StagedPart(descriptor, run.graph.serialize(scope).encode("utf-8"))

    def _stage_slide(self, run: _ExportRun, root_dir: Path, index: int, slide: Slide) -> None:
        part_name = c.slide_part(index)
        scope = run.graph.new_scope(part_name)
        run.graph.add(scope, c.SLIDE_LAYOUT_PART, c.RT_SLIDE_LAYOUT)

        parts: List[StagedPart] = []
        entry = SlideExportEntry(number=slide.number, part=part_name, rels_part=run.graph.rels_part(scope))
        image_rel_id = None
        if slide.image is not None:
            extension = slide.image.extension
            media_name = c.image_part(index, extension)
            media_type = c.IMAGE_CONTENT_TYPES[extension]
            data = _load_image(slide.image)
            image_rel_id = run.graph.add(scope, media_name, c.RT_IMAGE)
            run.registry.register_default(extension, media_type)
            parts.append(StagedPart(PartDescriptor(path=media_name, content_type=media_type), data))
            entry.image_part = media_name
            entry.image_rel_id = image_rel_id

        xml = render_slide_xml(slide, image_rel_id, self.config.bullet_font)
        parts.append(self._xml_part(run, part_name, c.CT_SLIDE, xml))
        parts.append(self._rels_part(run, scope))
        self._stage(run, root_dir, parts)
        run.report.entries.append(entry)

    def _stage_presentation(self, run: _ExportRun, root_dir: Path) -> None:
        graph = run.graph
        master_rel_id = graph.add(c.PRESENTATION_PART, c.SLIDE_MASTER_PART, c.RT_SLIDE_MASTER)
        graph.add(c.PRESENTATION_PART, c.THEME_PART, c.RT_THEME)

        master_scope = graph.new_scope(c.SLIDE_MASTER_PART)
        layout_rel_id = graph.add(master_scope, c.SLIDE_LAYOUT_PART, c.RT_SLIDE_LAYOUT)
        graph.add(master_scope, c.THEME_PART, c.RT_THEME)
        layout_scope = graph.new_scope(c.SLIDE_LAYOUT_PART)
        graph.add(layout_scope, c.SLIDE_MASTER_PART, c.RT_SLIDE_MASTER)

        self._stage(run, root_dir, [
            self._xml_part(
                run,
                c.PRESENTATION_PART,
                c.CT_PRESENTATION,
                render_presentation_xml(run.slide_rel_ids, master_rel_id),
            ),
            self._xml_part(
                run, c.SLIDE_MASTER_PART, c.CT_SLIDE_MASTER, boilerplate.slide_master_xml(layout_rel_id)
            ),
            self._rels_part(run, master_scope),
            self._xml_part(run, c.SLIDE_LAYOUT_PART, c.CT_SLIDE_LAYOUT, boilerplate.slide_layout_xml()),
            self._rels_part(run, layout_scope),
            self._xml_part(run, c.THEME_PART, c.CT_THEME, boilerplate.theme_xml()),
        ])

    def _stage_presentation_rels(self, run: _ExportRun, root_dir: Path) -> None:
        self._stage(run, root_dir, [self._rels_part(run, c.PRESENTATION_PART)])

    def _stage_root_rels(self, run: _ExportRun, root_dir: Path) -> None:
        deck = run.deck
        scope = run.graph.new_scope(c.PACKAGE_ROOT)
        run.graph.add(scope, c.PRESENTATION_PART, c.RT_OFFICE_DOCUMENT)
        run.graph.add(scope, c.CORE_PROPERTIES_PART, c.RT_CORE_PROPERTIES)
        run.graph.add(scope, c.APP_PROPERTIES_PART, c.RT_EXTENDED_PROPERTIES)
        self._stage(run, root_dir, [
            self._rels_part(run, scope),
            self._xml_part(
                run,
                c.CORE_PROPERTIES_PART,
                c.CT_CORE_PROPERTIES,
                boilerplate.core_properties_xml(
                    deck.title, deck.author or self.config.creator, deck.created_at
                ),
            ),
            self._xml_part(
                run,
                c.APP_PROPERTIES_PART,
                c.CT_EXTENDED_PROPERTIES,
                boilerplate.app_properties_xml(len(deck.slides)),
            ),
        ])
        run.report.relationships = run.graph.all_entries()

    def _stage_content_types(self, run: _ExportRun, root_dir: Path) -> None:
        manifest = StagedPart(
            PartDescriptor(path=c.CONTENT_TYPES_PART, content_type=c.CT_XML),
            run.registry.serialize().encode("utf-8"),
        )
        self.assembler.stage(root_dir, [manifest])


def _image_size(image: SlideImage) -> int:
    if image.data is not None:
        return len(image.data)
    try:
        return Path(image.path).stat().st_size
    except OSError as exc:
        raise PackagingIOError(f"cannot read image {image.path}: {exc.strerror or exc}", image.path) from exc


def _load_image(image: SlideImage) -> bytes:
    try:
        return image.load()
    except OSError as exc:
        raise PackagingIOError(f"cannot read image {image.path}: {exc.strerror or exc}", image.path) from exc


def export_deck(
    deck: SlideDeck,
    output_path: Union[str, Path],
    config: Optional[ExportConfig] = None,
    progress_callback: Optional[ProgressCallback] = None,
    cancel_check: Optional[CancelCheck] = None,
) -> ExportReport:
    """Export ``deck`` with a fresh pipeline."""
    return ExportPipeline(config).export(deck, output_path, progress_callback, cancel_check)
