"""Per-structure map of residue -> conservation score.

Built once from a structure and a chain id -> score file function, then
read-only. Residues without a score read as 0.0.
"""
from __future__ import annotations
import json
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger

from conservation.aligner import align
from conservation.keys import ResidueKey, normalize_chain_id
from conservation.score_parser import (
    DEFAULT_FORMAT, ScoreFormat, ScoreRecord, parse_score_file, record_letters,
)

ScoreFileResolver = Callable[[str], Optional[Union[str, Path]]]


def align_chain(residues: Sequence, records: Sequence[ScoreRecord]) -> List[Tuple[ResidueKey, float]]:
    """Pair each chain residue with the score of the record it aligns to.

    ``residues`` are objects with ``letter`` and ``key`` attributes in
    structural order. Residues that do not align are left out.
    """
    letters = "".join(r.letter for r in residues)
    assignment = align(letters, record_letters(records))
    return [(residues[i].key, records[j].score) for i, j in assignment.items()]


class ConservationScoreMap:
    """Immutable residue key -> conservation score lookup."""

    __slots__ = ("_scores",)

    def __init__(self, scores: Optional[Mapping[ResidueKey, float]] = None):
        # stored scores are never negative
        clamped: Dict[ResidueKey, float] = {}
        for key, score in (scores or {}).items():
            score = float(score)
            clamped[key] = score if score > 0 else 0.0
        self._scores = MappingProxyType(clamped)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[ResidueKey, float]]) -> "ConservationScoreMap":
        return cls(dict(pairs))

    @classmethod
    def from_files(
        cls,
        structure,
        score_files: ScoreFileResolver,
        fmt: Union[str, ScoreFormat] = DEFAULT_FORMAT,
        default_chain_id: str = "A",
        parsed: Optional[Dict[Path, List[ScoreRecord]]] = None,
    ) -> "ConservationScoreMap":
        """Build the map for every protein chain of ``structure``.

        ``score_files`` receives the normalized chain id and returns a path
        (or None). Chains whose path is missing are skipped; an unparsable
        file raises :class:`~conservation.errors.ScoreParseError`.
        Files already in ``parsed`` (path -> records, same ``fmt``) are not
        read again.
        """
        parsed = {} if parsed is None else parsed
        pairs: List[Tuple[ResidueKey, float]] = []
        for chain in structure.chains:
            if not chain.residues:
                continue
            chain_id = normalize_chain_id(chain.chain_id, default_chain_id)
            score_file = score_files(chain_id)
            if score_file is None or not Path(score_file).is_file():
                logger.debug(f"Chain {chain_id}: no score file, left unscored")
                continue
            score_file = Path(score_file)
            if score_file not in parsed:
                parsed[score_file] = parse_score_file(score_file, fmt)
            records = parsed[score_file]
            chain_pairs = align_chain(chain.residues, records)
            logger.debug(f"Chain {chain_id}: {len(chain_pairs)}/{len(chain.residues)} residues scored "
                         f"from {score_file.name}")
            pairs.extend(chain_pairs)
        return cls.from_pairs(pairs)

    def score(self, key: ResidueKey) -> float:
        return self._scores.get(key, 0.0)

    def score_for_residue(self, residue) -> float:
        """Score for a ResidueKey or a Bio.PDB residue."""
        if not isinstance(residue, ResidueKey):
            residue = ResidueKey.from_residue(residue)
        return self.score(residue)

    @property
    def score_map(self) -> Mapping[ResidueKey, float]:
        return self._scores

    def size(self) -> int:
        return len(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, key) -> bool:
        return key in self._scores

    def __eq__(self, other) -> bool:
        if not isinstance(other, ConservationScoreMap):
            return NotImplemented
        return dict(self._scores) == dict(other._scores)

    def __repr__(self) -> str:  # pragma: no cover - display only
        return f"ConservationScoreMap(size={len(self._scores)})"

    # ---------------- Persistence -----------------
    def to_dict(self) -> Dict[str, float]:
        return {key.to_text(): score for key, score in self._scores.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> "ConservationScoreMap":
        return cls.from_pairs((ResidueKey.from_text(k), v) for k, v in data.items())

    def to_json(self, path: Union[str, Path]) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "ConservationScoreMap":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object of residue -> score")
        return cls.from_dict(data)
