"""Input preflight and output package verification."""

from .package import verify_package
from .preflight import ensure_valid, validate_deck

__all__ = ["ensure_valid", "validate_deck", "verify_package"]
