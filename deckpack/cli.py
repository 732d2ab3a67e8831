"""CLI entry point for deckpack."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from pydantic import ValidationError

from .config import load_config
from .errors import ExportFailed
from .export.pipeline import ExportPipeline
from .models.deck import SlideDeck
from .validate.package import verify_package


def _print_progress(current: int, total: int) -> None:
    print(f"  [{current}/{total}]")


def cmd_export(args: argparse.Namespace) -> int:
    """Export a SlideDeck JSON to .pptx."""
    config = load_config(
        Path(args.config) if args.config else None,
        overrides={"log_path": args.log},
    )

    deck_path = Path(args.deck)
    if not deck_path.exists():
        print(f"ERROR: deck file not found: {deck_path}")
        return 1

    with open(deck_path, "r", encoding="utf-8") as f:
        deck_data = json.load(f)

    try:
        deck = SlideDeck.model_validate(deck_data)
    except ValidationError as exc:
        print(f"ERROR: invalid deck file {deck_path}:\n{exc}")
        return 1

    # Relative image paths are resolved against the deck file's directory
    for slide in deck.slides:
        if slide.image is not None and slide.image.path:
            image_path = Path(slide.image.path)
            if not image_path.is_absolute():
                slide.image.path = str(deck_path.parent / image_path)

    output_path = Path(args.output)
    pipeline = ExportPipeline(config)
    print(f"Exporting {len(deck.slides)} slides to {output_path}")
    try:
        report = pipeline.export(
            deck, output_path, progress_callback=None if args.quiet else _print_progress
        )
    except ExportFailed as exc:
        print(f"ERROR: {exc}")
        return 1

    if args.report:
        report_path = report.write_json(Path(args.report))
        print(f"Export report saved to: {report_path}")

    print(f"Exported {report.slide_count} slides to: {output_path}")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    package_path = Path(args.package)
    if not package_path.exists():
        print(f"ERROR: package not found: {package_path}")
        return 1
    report = verify_package(package_path)
    if not report.ok:
        for violation in report.violations:
            where = f" {violation.part}" if violation.part else ""
            detail = f": {violation.detail}" if violation.detail else ""
            print(f"ERROR: {violation.violation_type}{where}{detail}")
        return 1
    print(f"Package verification passed ({report.slide_count} slides).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="deckpack - build .pptx packages from slide decks")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export a SlideDeck JSON to .pptx")
    export_parser.add_argument("--deck", type=str, required=True, help="Path to SlideDeck JSON file")
    export_parser.add_argument("--output", type=str, required=True, help="Output .pptx path")
    export_parser.add_argument("--config", type=str, default=None, help="Path to config JSON")
    export_parser.add_argument("--report", type=str, default=None, help="Write the export report JSON here")
    export_parser.add_argument("--log", type=str, default=None, help="Append JSONL events to this file")
    export_parser.add_argument("--quiet", action="store_true", help="Do not print progress")
    export_parser.set_defaults(func=cmd_export)

    verify_parser = subparsers.add_parser("verify", help="Check a .pptx package's structure")
    verify_parser.add_argument("--package", type=str, required=True, help="Path to .pptx file")
    verify_parser.set_defaults(func=cmd_verify)

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
