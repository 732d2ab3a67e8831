"""Package verification tests."""

import tempfile
import unittest
from pathlib import Path
from zipfile import ZipFile

from deckpack.export.pipeline import export_deck
from deckpack.models.config import ExportConfig
from deckpack.models.deck import Slide, SlideDeck, SlideImage
from deckpack.validate.package import verify_package

PNG_10 = b"\x89PNG\r\n\x1a\n\x00\x00"


def _rewrite(source: Path, destination: Path, drop=(), add=None, replace=None) -> None:
    """Copy an archive member by member, dropping, adding or replacing entries."""
    replace = replace or {}
    with ZipFile(source) as src, ZipFile(destination, "w") as dst:
        for name in src.namelist():
            if name in drop:
                continue
            dst.writestr(name, replace.get(name, src.read(name)))
        for name, data in (add or {}).items():
            dst.writestr(name, data)


class TestVerifyPackage(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        deck = SlideDeck(
            title="Verify",
            slides=[
                Slide(number=1, title="Intro", body="One\nTwo"),
                Slide(number=2, title="Chart", image=SlideImage(data=PNG_10)),
            ],
        )
        self.package = self.tmp / "good.pptx"
        export_deck(deck, self.package, config=ExportConfig(staging_root=str(self.tmp / "staging")))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _types(self, report):
        return [v.violation_type for v in report.violations]

    def test_exported_package_passes(self) -> None:
        report = verify_package(self.package)
        self.assertTrue(report.ok)
        self.assertEqual(report.slide_count, 2)

    def test_missing_media_is_dangling(self) -> None:
        broken = self.tmp / "dangling.pptx"
        _rewrite(self.package, broken, drop={"ppt/media/image2.png"})
        report = verify_package(broken)
        self.assertFalse(report.ok)
        self.assertIn("DANGLING_RELATIONSHIP", self._types(report))
        dangling = [v for v in report.violations if v.violation_type == "DANGLING_RELATIONSHIP"]
        self.assertEqual(dangling[0].part, "/ppt/slides/_rels/slide2.xml.rels")

    def test_undeclared_extension_is_reported(self) -> None:
        broken = self.tmp / "undeclared.pptx"
        _rewrite(self.package, broken, add={"ppt/notes.txt": b"speaker notes"})
        report = verify_package(broken)
        self.assertEqual(self._types(report), ["UNDECLARED_CONTENT_TYPE"])
        self.assertEqual(report.violations[0].part, "/ppt/notes.txt")

    def test_missing_slide_rels_is_reported(self) -> None:
        broken = self.tmp / "norels.pptx"
        _rewrite(self.package, broken, drop={"ppt/slides/_rels/slide2.xml.rels"})
        report = verify_package(broken)
        self.assertIn("MISSING_RELS_PART", self._types(report))

    def test_missing_manifest(self) -> None:
        broken = self.tmp / "nomanifest.pptx"
        _rewrite(self.package, broken, drop={"[Content_Types].xml"})
        report = verify_package(broken)
        self.assertEqual(self._types(report), ["CONTENT_TYPES_MISSING"])

    def test_malformed_slide_part_is_reported(self) -> None:
        broken = self.tmp / "malformed.pptx"
        _rewrite(
            self.package,
            broken,
            replace={"ppt/slides/slide1.xml": b"<?xml version=\"1.0\"?><p:sld><a:t>Q1\x0bresults</a:t>"},
        )
        report = verify_package(broken)
        self.assertEqual(self._types(report), ["MALFORMED_XML"])
        self.assertEqual(report.violations[0].part, "/ppt/slides/slide1.xml")
        self.assertEqual(report.slide_count, 2)

    def test_malformed_rels_part_is_reported_once(self) -> None:
        broken = self.tmp / "badrels.pptx"
        _rewrite(self.package, broken, replace={"ppt/slides/_rels/slide2.xml.rels": b"<Relationships"})
        report = verify_package(broken)
        self.assertEqual(self._types(report), ["MALFORMED_XML"])
        self.assertEqual(report.violations[0].part, "/ppt/slides/_rels/slide2.xml.rels")

    def test_not_a_zip(self) -> None:
        bogus = self.tmp / "bogus.pptx"
        bogus.write_bytes(b"this is not an archive")
        report = verify_package(bogus)
        self.assertEqual(self._types(report), ["NOT_A_ZIP"])


if __name__ == "__main__":
    unittest.main()
