"""Structure file in, ConservationScoreMap out.

Ties the Bio.PDB structure handler to the locator and the score map builder,
with behaviour driven by ConservationConfig.
"""
from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional, Union

from loguru import logger

from conservation.locator import ScoreFileMatch, locate_score_files, score_file_resolver
from conservation.score_map import ConservationScoreMap
from utils.config import ConservationConfig, load_config
from utils.pdb_handler import PDBHandler


def pick_scores_for_structures(
    paths: Iterable[Union[str, Path]],
    config: Optional[ConservationConfig] = None,
    handler: Optional[PDBHandler] = None,
) -> List[ScoreFileMatch]:
    """Locate score files for every protein chain of every structure file."""
    config = config or load_config()
    handler = handler or PDBHandler(config)
    out: List[ScoreFileMatch] = []
    for path in paths:
        view = handler.load_view(path)
        matches = locate_score_files(view, fmt=config.score_format, suffix=config.score_suffix,
                                     default_chain_id=config.default_chain_id)
        out.extend(matches.values())
    logger.info(f"Picked {len(out)} score files")
    return out


def conservation_for_structure(
    path: Union[str, Path],
    config: Optional[ConservationConfig] = None,
    handler: Optional[PDBHandler] = None,
) -> ConservationScoreMap:
    """Load a structure, locate its score files and build the score map."""
    config = config or load_config()
    handler = handler or PDBHandler(config)
    view = handler.load_view(path)
    parsed = {}
    matches = locate_score_files(view, fmt=config.score_format, suffix=config.score_suffix,
                                 default_chain_id=config.default_chain_id, parsed=parsed)
    scores = ConservationScoreMap.from_files(view, score_file_resolver(matches),
                                             fmt=config.score_format,
                                             default_chain_id=config.default_chain_id,
                                             parsed=parsed)
    logger.info(f"{Path(path).name}: {scores.size()} residues scored across {len(matches)} chain(s)")
    return scores
