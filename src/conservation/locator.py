"""Find the score file that belongs to each protein chain of a structure.

Lookup order per chain:

1. ``<base><CHAIN>.scores`` next to the structure file, where ``base`` is the
   structure file name minus its 4-character extension.
2. Otherwise every ``<base>*.scores`` file in that directory is parsed and
   the one with the longest common subsequence against the chain's residue
   letters wins. Candidates are visited in name order and ties keep the
   earlier one.

Chains without amino-acid residues are skipped. A chain with no candidate
files is left without a score file.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from conservation.aligner import match_length
from conservation.keys import normalize_chain_id
from conservation.score_parser import (
    DEFAULT_FORMAT, ScoreFormat, ScoreRecord, parse_score_file, record_letters,
)

SCORE_SUFFIX = ".scores"


@dataclass(frozen=True)
class ScoreFileMatch:
    structure_path: Path
    chain_id: str
    score_file: Path
    expected_name: str
    # None when the expected file existed and no alignment was needed
    match_length: Optional[int] = None

    @property
    def direct(self) -> bool:
        return self.match_length is None


def structure_base_name(structure_path: Union[str, Path]) -> str:
    return Path(structure_path).name[:-4]


def expected_score_file(structure_path: Union[str, Path], chain_id: str,
                        suffix: str = SCORE_SUFFIX, default_chain_id: str = "A") -> Path:
    p = Path(structure_path)
    chain = normalize_chain_id(chain_id, default_chain_id).upper()
    return p.parent / f"{structure_base_name(p)}{chain}{suffix}"


def candidate_score_files(structure_path: Union[str, Path], suffix: str = SCORE_SUFFIX) -> List[Path]:
    """Score files in the structure's directory sharing its base name, sorted by name."""
    p = Path(structure_path)
    base = structure_base_name(p)
    directory = p.parent
    if not directory.is_dir():
        return []
    return sorted(
        (f for f in directory.iterdir()
         if f.is_file() and f.name.startswith(base) and f.name.endswith(suffix)),
        key=lambda f: f.name,
    )


def best_matching_score_file(
    letters: str,
    candidates: Iterable[Tuple[Path, Sequence[ScoreRecord]]],
) -> Optional[Tuple[Path, int]]:
    """Return (path, match length) of the candidate with the longest LCS.

    The first candidate wins ties. None when there are no candidates.
    """
    best: Optional[Tuple[Path, int]] = None
    for path, records in candidates:
        length = match_length(letters, record_letters(records))
        logger.debug(f"Candidate {path.name}: LCS {length}")
        if best is None or length > best[1]:
            best = (path, length)
    return best


def locate_score_files(
    structure,
    fmt: Union[str, ScoreFormat] = DEFAULT_FORMAT,
    suffix: str = SCORE_SUFFIX,
    default_chain_id: str = "A",
    parsed: Optional[Dict[Path, List[ScoreRecord]]] = None,
) -> Dict[str, ScoreFileMatch]:
    """Resolve a score file for every protein chain of ``structure``.

    ``structure`` needs a ``path`` and ``chains``; each chain needs
    ``chain_id``, ``residues`` and ``letters``. Returns matches keyed by the
    normalized chain id.

    Candidate files parsed along the way are stored in ``parsed`` (path ->
    records) when a dict is passed, so callers can reuse them.
    """
    structure_path = Path(structure.path)
    parsed = {} if parsed is None else parsed
    matches: Dict[str, ScoreFileMatch] = {}

    def _candidates():
        for f in candidate_score_files(structure_path, suffix):
            if f not in parsed:
                parsed[f] = parse_score_file(f, fmt)
            yield f, parsed[f]

    for chain in structure.chains:
        if not chain.residues:
            continue
        chain_id = normalize_chain_id(chain.chain_id, default_chain_id)
        expected = expected_score_file(structure_path, chain_id, suffix, default_chain_id)
        if expected.is_file():
            logger.info(f"Chain {chain_id} of {structure_path.name}: using {expected.name}")
            matches[chain_id] = ScoreFileMatch(structure_path, chain_id, expected, expected.name)
            continue
        best = best_matching_score_file(chain.letters, _candidates())
        if best is None:
            logger.debug(f"Chain {chain_id} of {structure_path.name}: no score file candidates")
            continue
        path, length = best
        logger.info(f"Chain {chain_id} of {structure_path.name}: {expected.name} missing, "
                    f"using {path.name} (LCS {length}/{len(chain.residues)})")
        matches[chain_id] = ScoreFileMatch(structure_path, chain_id, path, expected.name, length)
    return matches


def score_file_resolver(matches: Dict[str, ScoreFileMatch]) -> Callable[[str], Optional[Path]]:
    """Wrap locator output as the chain id -> score file function used by ConservationScoreMap."""
    def resolve(chain_id: str) -> Optional[Path]:
        match = matches.get(chain_id)
        return match.score_file if match is not None else None
    return resolve
