"""Map externally computed conservation scores onto structure residues."""

from conservation.aligner import align, lcs_table, match_length
from conservation.errors import (
    ConservationError, ScoreFileNotFoundError, ScoreParseError, StructureError,
)
from conservation.keys import ResidueKey, normalize_chain_id
from conservation.locator import (
    ScoreFileMatch, best_matching_score_file, candidate_score_files,
    expected_score_file, locate_score_files, score_file_resolver,
)
from conservation.score_map import ConservationScoreMap, align_chain
from conservation.score_parser import ScoreFormat, ScoreRecord, parse_score_file

__all__ = [
    "align",
    "lcs_table",
    "match_length",
    "ConservationError",
    "ScoreFileNotFoundError",
    "ScoreParseError",
    "StructureError",
    "ResidueKey",
    "normalize_chain_id",
    "ScoreFileMatch",
    "best_matching_score_file",
    "candidate_score_files",
    "expected_score_file",
    "locate_score_files",
    "score_file_resolver",
    "ConservationScoreMap",
    "align_chain",
    "ScoreFormat",
    "ScoreRecord",
    "parse_score_file",
]
