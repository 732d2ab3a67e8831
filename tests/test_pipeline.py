"""Export pipeline tests."""

import errno
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock
from zipfile import ZipFile

from pptx import Presentation
from pptx.oxml import parse_xml

from deckpack.errors import (
    ExportCancelled,
    ExportFailed,
    InputValidationError,
    PackagingIOError,
)
from deckpack.export.pipeline import ExportPipeline, ExportState, export_deck
from deckpack.models.config import ExportConfig
from deckpack.models.deck import DesignSpec, Slide, SlideDeck, SlideImage
from deckpack.opc.assembler import PackageAssembler
from deckpack.opc.constants import RT_IMAGE, RT_SLIDE_LAYOUT
from deckpack.validate.package import verify_package

NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"
NS_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
NS_R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_PR = "http://schemas.openxmlformats.org/package/2006/relationships"

PNG_10 = b"\x89PNG\r\n\x1a\n\x00\x00"


def _deck(count: int = 3, **slide_kwargs) -> SlideDeck:
    return SlideDeck(
        title="Quarterly Review",
        slides=[
            Slide(number=i, title=f"Slide {i}", body=f"Point {i}a\nPoint {i}b", **slide_kwargs)
            for i in range(1, count + 1)
        ],
    )


def _rels(zf: ZipFile, member: str):
    root = parse_xml(zf.read(member))
    return [
        (el.get("Id"), el.get("Type"), el.get("Target"))
        for el in root.iter(f"{{{NS_PR}}}Relationship")
    ]


class PipelineTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.staging_root = self.tmp / "staging"
        self.config = ExportConfig(staging_root=str(self.staging_root))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def assertStagingEmpty(self) -> None:
        if self.staging_root.exists():
            self.assertEqual(list(self.staging_root.iterdir()), [])


class TestExportScenarios(PipelineTestCase):
    def test_three_slides_without_images(self) -> None:
        output = self.tmp / "deck.pptx"
        report = ExportPipeline(self.config).export(_deck(3), output)

        with ZipFile(output) as zf:
            names = zf.namelist()
            self.assertEqual(names.count("[Content_Types].xml"), 1)
            for i in range(1, 4):
                self.assertIn(f"ppt/slides/slide{i}.xml", names)
                self.assertEqual(
                    _rels(zf, f"ppt/slides/_rels/slide{i}.xml.rels"),
                    [("rId1", RT_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml")],
                )
            self.assertFalse(any(name.startswith("ppt/media/") for name in names))
            for required in ("_rels/.rels", "ppt/presentation.xml", "ppt/_rels/presentation.xml.rels"):
                self.assertIn(required, names)

            presentation = parse_xml(zf.read("ppt/presentation.xml"))
            ids = [el.get(f"{{{NS_R}}}id") for el in presentation.iter(f"{{{NS_P}}}sldId")]
            self.assertEqual(ids, ["rId1", "rId2", "rId3"])

            pres_rels = {rid: target for rid, _, target in _rels(zf, "ppt/_rels/presentation.xml.rels")}
            self.assertEqual(
                [pres_rels[rid] for rid in ids],
                ["slides/slide1.xml", "slides/slide2.xml", "slides/slide3.xml"],
            )

        self.assertEqual(report.slide_count, 3)
        self.assertEqual([e.part for e in report.entries], [f"/ppt/slides/slide{i}.xml" for i in (1, 2, 3)])
        self.assertStagingEmpty()

    def test_escaped_text_checkmarks_and_image(self) -> None:
        deck = SlideDeck(
            title="B",
            slides=[
                Slide(
                    number=1,
                    title="A & B",
                    body="Line <1>\nLine 2",
                    image=SlideImage(data=PNG_10),
                    design_spec=DesignSpec(bullet_style="checkmark"),
                )
            ],
        )
        output = self.tmp / "b.pptx"
        report = export_deck(deck, output, config=self.config)

        with ZipFile(output) as zf:
            xml = zf.read("ppt/slides/slide1.xml").decode("utf-8")
            self.assertIn("A &amp; B", xml)
            self.assertIn("Line &lt;1&gt;", xml)

            root = parse_xml(zf.read("ppt/slides/slide1.xml"))
            self.assertEqual(
                [el.get("char") for el in root.iter(f"{{{NS_A}}}buChar")], ["✓", "✓"]
            )
            pics = list(root.iter(f"{{{NS_P}}}pic"))
            self.assertEqual(len(pics), 1)
            embed = next(pics[0].iter(f"{{{NS_A}}}blip")).get(f"{{{NS_R}}}embed")

            rels = _rels(zf, "ppt/slides/_rels/slide1.xml.rels")
            image_rels = [rel for rel in rels if rel[1] == RT_IMAGE]
            self.assertEqual(image_rels, [(embed, RT_IMAGE, "../media/image1.png")])
            self.assertEqual(zf.read("ppt/media/image1.png"), PNG_10)

            content_types = zf.read("[Content_Types].xml").decode("utf-8")
            self.assertIn('<Default Extension="png" ContentType="image/png"/>', content_types)

        self.assertEqual(report.entries[0].image_part, "/ppt/media/image1.png")
        self.assertEqual(report.entries[0].image_rel_id, embed)

    def test_invalid_background_hex_fails_before_any_write(self) -> None:
        output = self.tmp / "c.pptx"
        deck = _deck(2)
        deck.slides[1].design_spec = DesignSpec(background_color="red")
        pipeline = ExportPipeline(self.config)

        with self.assertRaises(ExportFailed) as ctx:
            pipeline.export(deck, output)

        self.assertIsInstance(ctx.exception.cause, InputValidationError)
        self.assertIsInstance(ctx.exception.__cause__, InputValidationError)
        self.assertIn("red", str(ctx.exception))
        self.assertFalse(output.exists())
        self.assertFalse(self.staging_root.exists())
        self.assertEqual(pipeline.state, ExportState.FAILED)

    def test_disk_full_mid_staging(self) -> None:
        output = self.tmp / "d.pptx"
        output.write_bytes(b"previous export")
        writes = []
        real_write = PackageAssembler._write_part

        def fill_disk(assembler, destination, data):
            writes.append(destination)
            if len(writes) == 3:
                raise OSError(errno.ENOSPC, os.strerror(errno.ENOSPC))
            return real_write(assembler, destination, data)

        with mock.patch.object(PackageAssembler, "_write_part", autospec=True, side_effect=fill_disk):
            with self.assertRaises(ExportFailed) as ctx:
                ExportPipeline(self.config).export(_deck(3), output)

        failure = ctx.exception
        self.assertIsInstance(failure.cause, PackagingIOError)
        self.assertEqual(failure.slide_number, 2)
        self.assertTrue(str(failure).startswith("export failed at slide 2:"))
        self.assertEqual(output.read_bytes(), b"previous export")
        self.assertStagingEmpty()


class TestExportProperties(PipelineTestCase):
    def test_identical_decks_produce_identical_archives(self) -> None:
        deck = _deck(3, image=SlideImage(data=PNG_10))
        first = self.tmp / "first.pptx"
        second = self.tmp / "second.pptx"
        export_deck(deck, first, config=self.config)
        export_deck(deck, second, config=self.config)
        self.assertEqual(first.read_bytes(), second.read_bytes())

    def test_output_verifies_and_opens_with_python_pptx(self) -> None:
        deck = _deck(4)
        deck.slides[2].image = SlideImage(data=PNG_10, format="jpeg")
        deck.slides[3].image = SlideImage(data=PNG_10)
        output = self.tmp / "verified.pptx"
        export_deck(deck, output, config=self.config)

        report = verify_package(output)
        self.assertEqual(report.violations, [])
        self.assertEqual(report.slide_count, 4)

        prs = Presentation(str(output))
        self.assertEqual(len(prs.slides), 4)
        self.assertEqual(prs.slide_width, 9144000)
        self.assertEqual(prs.slide_height, 6858000)
        self.assertEqual([s.shapes.title.text for s in prs.slides], [f"Slide {i}" for i in range(1, 5)])

    def test_existing_output_is_overwritten(self) -> None:
        output = self.tmp / "deck.pptx"
        output.write_bytes(b"stale")
        export_deck(_deck(1), output, config=self.config)
        with ZipFile(output) as zf:
            self.assertIn("ppt/slides/slide1.xml", zf.namelist())

    def test_progress_is_reported_in_order(self) -> None:
        calls = []
        export_deck(
            _deck(3),
            self.tmp / "p.pptx",
            config=self.config,
            progress_callback=lambda current, total: calls.append((current, total)),
        )
        self.assertEqual(calls, [(i, 7) for i in range(1, 8)])

    def test_cancel_at_slide_boundary(self) -> None:
        polls = []

        def cancel() -> bool:
            polls.append(1)
            return len(polls) >= 2

        output = self.tmp / "cancelled.pptx"
        with self.assertRaises(ExportCancelled) as ctx:
            export_deck(_deck(3), output, config=self.config, cancel_check=cancel)
        self.assertEqual(ctx.exception.slide_number, 2)
        self.assertFalse(output.exists())
        self.assertStagingEmpty()

    def test_empty_deck_is_rejected(self) -> None:
        with self.assertRaises(ExportFailed) as ctx:
            export_deck(SlideDeck(title="Empty"), self.tmp / "e.pptx", config=self.config)
        self.assertIsInstance(ctx.exception.cause, InputValidationError)

    def test_missing_image_file_reports_slide(self) -> None:
        deck = _deck(2)
        deck.slides[1].image = SlideImage(path=str(self.tmp / "missing.png"))
        config = ExportConfig(staging_root=str(self.staging_root), check_disk_space=False)
        with self.assertRaises(ExportFailed) as ctx:
            export_deck(deck, self.tmp / "m.pptx", config=config)
        self.assertEqual(ctx.exception.slide_number, 2)
        self.assertIsInstance(ctx.exception.cause, PackagingIOError)

    def test_insufficient_disk_space(self) -> None:
        output = self.tmp / "full.pptx"
        with mock.patch("deckpack.opc.assembler.shutil.disk_usage", return_value=mock.Mock(free=0)):
            with self.assertRaises(ExportFailed) as ctx:
                export_deck(_deck(2), output, config=self.config)
        self.assertIsInstance(ctx.exception.cause, PackagingIOError)
        self.assertEqual(ctx.exception.step, "preflight")
        self.assertFalse(output.exists())

    def test_state_and_log_events(self) -> None:
        log_path = self.tmp / "logs" / "export.jsonl"
        config = ExportConfig(staging_root=str(self.staging_root), log_path=str(log_path))
        pipeline = ExportPipeline(config)
        self.assertEqual(pipeline.state, ExportState.IDLE)
        pipeline.export(_deck(2), self.tmp / "logged.pptx")
        self.assertEqual(pipeline.state, ExportState.DONE)

        with open(log_path, "r", encoding="utf-8") as f:
            events = [json.loads(line)["event_type"] for line in f]
        self.assertEqual(
            events,
            ["EXPORT_START", "SLIDE_STAGED", "SLIDE_STAGED", "PACKAGE_STAGED", "ARCHIVE_DONE", "EXPORT_DONE"],
        )

    def test_report_relationships_cover_every_slide_reference(self) -> None:
        deck = _deck(2, image=SlideImage(data=PNG_10))
        report = export_deck(deck, self.tmp / "r.pptx", config=self.config)
        staged = {part.path for part in report.parts}
        for rel in report.relationships:
            self.assertIn(rel.target, staged)
        image_parts = [part for part in report.parts if part.path.startswith("/ppt/media/")]
        self.assertEqual(len(image_parts), 2)
        inbound = [rel for rel in report.relationships if rel.rel_type == RT_IMAGE]
        self.assertEqual(sorted(rel.target for rel in inbound), sorted(p.path for p in image_parts))


class TestUntrustedTextAndUnexpectedErrors(PipelineTestCase):
    def test_control_characters_still_produce_a_valid_package(self) -> None:
        deck = SlideDeck(
            title="Pasted",
            slides=[
                Slide(number=1, title="Q1\x0bresults", body="a\x0cb"),
                Slide(number=2, title="bad \ud800", body="One\r\nTwo\r\n"),
            ],
        )
        output = self.tmp / "pasted.pptx"
        export_deck(deck, output, config=self.config)

        self.assertEqual(verify_package(output).violations, [])
        prs = Presentation(str(output))
        self.assertEqual([s.shapes.title.text for s in prs.slides], ["Q1 results", "bad "])
        with ZipFile(output) as zf:
            self.assertNotIn(b"\r", zf.read("ppt/slides/slide2.xml"))

    def test_raising_progress_callback_is_wrapped(self) -> None:
        log_path = self.tmp / "export.jsonl"
        config = ExportConfig(staging_root=str(self.staging_root), log_path=str(log_path))
        output = self.tmp / "callback.pptx"

        def progress(current: int, total: int) -> None:
            raise RuntimeError("ui gone")

        pipeline = ExportPipeline(config)
        with self.assertRaises(ExportFailed) as ctx:
            pipeline.export(_deck(2), output, progress_callback=progress)

        failure = ctx.exception
        self.assertIsInstance(failure.cause, RuntimeError)
        self.assertIs(failure.__cause__, failure.cause)
        self.assertEqual(failure.slide_number, 1)
        self.assertEqual(str(failure), "export failed at slide 1: RuntimeError: ui gone")
        self.assertEqual(pipeline.state, ExportState.FAILED)
        self.assertFalse(output.exists())
        self.assertStagingEmpty()

        with open(log_path, "r", encoding="utf-8") as f:
            last = json.loads(f.readlines()[-1])
        self.assertEqual(last["event_type"], "EXPORT_FAILED")
        self.assertEqual(last["payload"]["error_type"], "RuntimeError")

    def test_unexpected_render_error_is_wrapped(self) -> None:
        error = UnicodeEncodeError("utf-8", "\ud800", 0, 1, "surrogates not allowed")
        with mock.patch("deckpack.export.pipeline.render_slide_xml", side_effect=error):
            with self.assertRaises(ExportFailed) as ctx:
                export_deck(_deck(1), self.tmp / "render.pptx", config=self.config)
        self.assertIs(ctx.exception.cause, error)
        self.assertEqual(ctx.exception.step, "slides")
        self.assertEqual(ctx.exception.slide_number, 1)

    def test_keyboard_interrupt_is_not_wrapped(self) -> None:
        output = self.tmp / "interrupted.pptx"

        def progress(current: int, total: int) -> None:
            raise KeyboardInterrupt

        pipeline = ExportPipeline(self.config)
        with self.assertRaises(KeyboardInterrupt):
            pipeline.export(_deck(2), output, progress_callback=progress)
        self.assertEqual(pipeline.state, ExportState.FAILED)
        self.assertFalse(output.exists())
        self.assertStagingEmpty()


if __name__ == "__main__":
    unittest.main()
