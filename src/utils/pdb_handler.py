"""
Structure file handling for conservation score mapping.

Loads PDB / mmCIF files with Bio.PDB and exposes a small read-only view of
the first model: chains in file order, and for each chain its amino-acid
residues with one-letter codes and residue keys. Conservation code only ever
sees these views, never the Bio.PDB objects.
"""

import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from Bio.PDB import Structure, Chain, Residue
from Bio.PDB.PDBParser import PDBParser
from Bio.PDB.MMCIFParser import MMCIFParser
from Bio.PDB.PDBExceptions import PDBConstructionWarning
from Bio.PDB.Polypeptide import is_aa
from Bio.Data.PDBData import protein_letters_3to1_extended
from loguru import logger

from conservation.errors import StructureError
from conservation.keys import ResidueKey
from utils.config import ConservationConfig, load_config

warnings.filterwarnings("ignore", category=PDBConstructionWarning)

_MMCIF_SUFFIXES = {'.cif', '.mmcif'}


@dataclass(frozen=True)
class ResidueView:
    """One amino-acid residue: its one-letter code and structural key."""
    letter: str
    key: ResidueKey


@dataclass(frozen=True)
class ChainView:
    chain_id: str
    residues: Tuple[ResidueView, ...]

    @property
    def letters(self) -> str:
        return "".join(r.letter for r in self.residues)

    def __len__(self):
        return len(self.residues)


@dataclass(frozen=True)
class StructureView:
    path: Path
    chains: Tuple[ChainView, ...]

    @property
    def base_name(self) -> str:
        """File name minus its trailing 4-character extension (``1abc.pdb`` -> ``1abc``)."""
        return self.path.name[:-4]


def residue_letter(residue: Residue.Residue) -> str:
    return protein_letters_3to1_extended.get(residue.get_resname().strip().upper(), 'X')


class PDBHandler:
    """Handles structure file loading and conversion into chain views."""

    def __init__(self, config: Optional[ConservationConfig] = None):
        self.config = config or load_config()
        self.pdb_parser = PDBParser(QUIET=True)
        self.cif_parser = MMCIFParser(QUIET=True)

    def load_structure(self, path: Union[str, Path]) -> Structure.Structure:
        """
        Parse a structure file; the parser is picked from the file suffix.

        Raises:
            StructureError: missing file, unparsable content or no models.
        """
        p = Path(path)
        if not p.is_file():
            raise StructureError(f"Structure file not found: {p}", path=p)
        parser = self.cif_parser if p.suffix.lower() in _MMCIF_SUFFIXES else self.pdb_parser
        try:
            structure = parser.get_structure(p.stem, str(p))
        except Exception as e:
            raise StructureError(f"Failed to parse structure {p}: {e}", path=p) from e
        if len(structure) == 0:
            raise StructureError(f"No models found in structure {p}", path=p)
        logger.debug(f"Loaded structure {p.name} ({len(structure)} model(s))")
        return structure

    def chain_view(self, chain: Chain.Chain) -> ChainView:
        residues: List[ResidueView] = []
        for residue in chain:
            if not is_aa(residue, standard=False):
                continue
            residues.append(ResidueView(
                letter=residue_letter(residue),
                key=ResidueKey.from_residue(residue),
            ))
        return ChainView(chain_id=chain.id, residues=tuple(residues))

    def structure_view(self, structure: Structure.Structure, path: Union[str, Path]) -> StructureView:
        """Chains of the first model only."""
        model = structure[0] if 0 in structure else next(structure.get_models())
        chains = tuple(self.chain_view(chain) for chain in model)
        return StructureView(path=Path(path), chains=chains)

    def load_view(self, path: Union[str, Path]) -> StructureView:
        return self.structure_view(self.load_structure(path), path)

    def get_chain_sequence(self, structure: Structure.Structure, chain_id: str) -> str:
        """Get the one-letter amino acid sequence for a chain of the first model."""
        model = next(structure.get_models())
        if chain_id not in model:
            return ""
        return self.chain_view(model[chain_id]).letters
