"""Exceptions raised while loading structures and conservation score files."""
from __future__ import annotations
from pathlib import Path
from typing import Optional, Sequence


class ConservationError(Exception):
    """Base class for every error raised by the conservation package."""


class ScoreParseError(ConservationError, ValueError):
    """A score file row could not be parsed; the whole file is rejected."""

    def __init__(self, path, line_no: int, row: Sequence[str], reason: str):
        self.path = Path(path)
        self.line_no = line_no
        self.row = list(row)
        self.reason = reason
        super().__init__(f"{self.path}:{line_no}: {reason} (row={self.row!r})")


class ScoreFileNotFoundError(ConservationError, FileNotFoundError):
    """A requested score file does not exist or is not a regular file."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Score file not found: {self.path}")


class StructureError(ConservationError):
    """Structure input could not be loaded."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)
