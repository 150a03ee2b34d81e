"""Parsers for per-residue conservation score files.

Two tab-separated layouts are recognised:

  * ``ConCavityFormat``: ``index <TAB> letter <TAB> score``
  * ``JSDFormat``:       ``index <TAB> score <TAB> column`` (first char of the
    alignment column is the query residue)

Negative scores (JSD writes -1000 for gap-heavy columns) are clamped to 0.
A row without a residue letter is dropped. Any non-numeric index or score
rejects the whole file with :class:`ScoreParseError`.
"""
from __future__ import annotations
import csv
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, NamedTuple, Sequence, Union

from loguru import logger

from conservation.errors import ScoreParseError, ScoreFileNotFoundError


class _Layout(NamedTuple):
    index: int
    score: int
    letter: int


class ScoreFormat(Enum):
    """Column layout of a score file."""
    CONCAVITY = "ConCavityFormat"
    JSD = "JSDFormat"

    @property
    def layout(self) -> _Layout:
        return _LAYOUTS[self]

    @classmethod
    def from_name(cls, name: Union[str, "ScoreFormat"]) -> "ScoreFormat":
        """Accept the enum itself, its value (``JSDFormat``) or a short alias (``jsd``)."""
        if isinstance(name, ScoreFormat):
            return name
        key = (name or "").strip().lower()
        for fmt in cls:
            if key in (fmt.value.lower(), fmt.name.lower()):
                return fmt
        raise ValueError(f"Unknown score format: {name!r}")


_LAYOUTS = {
    ScoreFormat.CONCAVITY: _Layout(index=0, score=2, letter=1),
    ScoreFormat.JSD: _Layout(index=0, score=1, letter=2),
}

DEFAULT_FORMAT = ScoreFormat.JSD


@dataclass(frozen=True)
class ScoreRecord:
    letter: str
    score: float
    index: int


def _parse_row(row: Sequence[str], layout: _Layout, path: Path, line_no: int):
    needed = max(layout.index, layout.score) + 1
    if len(row) < needed:
        raise ScoreParseError(path, line_no, row, f"expected at least {needed} columns")
    try:
        index = int(row[layout.index])
    except ValueError:
        raise ScoreParseError(path, line_no, row, "index is not an integer") from None
    try:
        score = float(row[layout.score])
    except ValueError:
        raise ScoreParseError(path, line_no, row, "score is not a number") from None
    letter = row[layout.letter].strip()[:1] if len(row) > layout.letter else ""
    return index, score, letter.upper()


def parse_score_rows(lines, path, fmt: ScoreFormat = DEFAULT_FORMAT,
                     comment_prefix: str = "#") -> List[ScoreRecord]:
    """Parse an iterable of raw text lines. ``path`` is only used in error messages."""
    layout = ScoreFormat.from_name(fmt).layout
    path = Path(path)
    records: List[ScoreRecord] = []
    dropped = 0
    for line_no, row in enumerate(csv.reader(lines, delimiter="\t", quoting=csv.QUOTE_NONE), start=1):
        if not row or not any(cell.strip() for cell in row):
            continue
        if comment_prefix and row[0].startswith(comment_prefix):
            continue
        index, score, letter = _parse_row(row, layout, path, line_no)
        if not letter:
            dropped += 1
            continue
        records.append(ScoreRecord(letter=letter, score=score if score > 0 else 0.0, index=index))
    if dropped:
        logger.debug(f"{path.name}: dropped {dropped} rows without a residue letter")
    return records


def parse_score_file(path: Union[str, Path], fmt: Union[str, ScoreFormat] = DEFAULT_FORMAT,
                     comment_prefix: str = "#") -> List[ScoreRecord]:
    """Read a score file into ScoreRecords in file order.

    Line endings (\\n, \\r\\n, \\r) are all accepted.
    """
    p = Path(path)
    if not p.is_file():
        raise ScoreFileNotFoundError(p)
    fmt = ScoreFormat.from_name(fmt)
    try:
        with p.open("r", encoding="utf-8", newline="") as fh:
            records = parse_score_rows(fh, p, fmt, comment_prefix=comment_prefix)
    except UnicodeDecodeError as e:
        raise ScoreParseError(p, 0, [], f"not valid UTF-8 text (byte offset {e.start})") from e
    logger.debug(f"Parsed {len(records)} score records from {p.name} ({fmt.value})")
    return records


def record_letters(records: Sequence[ScoreRecord]) -> str:
    return "".join(r.letter for r in records)
