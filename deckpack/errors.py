"""Error taxonomy for deck export."""

from __future__ import annotations

from typing import List, Optional


class DeckPackError(Exception):
    """Base class for every error raised by deckpack."""


class InputValidationError(DeckPackError, ValueError):
    """The deck cannot be exported as given (bad color hex, empty deck, ...)."""

    def __init__(self, problems: List[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid input")


class PackagingIOError(DeckPackError, OSError):
    """Disk or archive failure while staging or zipping the package."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0] if self.args else "packaging I/O error"


class ConflictingContentType(DeckPackError, RuntimeError):
    """An extension was registered twice with different MIME types."""

    def __init__(self, extension: str, existing: str, requested: str) -> None:
        self.extension = extension
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Extension '{extension}' already registered as '{existing}', "
            f"cannot re-register as '{requested}'"
        )


class UnknownRelationshipScope(DeckPackError, RuntimeError):
    """A relationship was added to a scope that was never opened."""

    def __init__(self, scope: str) -> None:
        self.scope = scope
        super().__init__(f"Unknown relationship scope: {scope}")


class ExportFailed(DeckPackError):
    """Export aborted; wraps the underlying error with slide/step context."""

    def __init__(
        self,
        reason: str,
        slide_number: Optional[int] = None,
        step: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.reason = reason
        self.slide_number = slide_number
        self.step = step
        self.cause = cause
        super().__init__(self._format())

    def _format(self) -> str:
        if self.slide_number is not None:
            return f"export failed at slide {self.slide_number}: {self.reason}"
        if self.step:
            return f"export failed at {self.step}: {self.reason}"
        return f"export failed: {self.reason}"


class ExportCancelled(ExportFailed):
    """The caller's cancel check fired at a slide boundary."""
