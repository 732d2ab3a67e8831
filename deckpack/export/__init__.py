"""Export orchestration."""

from .pipeline import STRUCTURAL_STEPS, ExportPipeline, ExportState, export_deck

__all__ = ["STRUCTURAL_STEPS", "ExportPipeline", "ExportState", "export_deck"]
