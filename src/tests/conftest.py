"""Test configuration ensuring src package discoverability, settings reset & small file builders."""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]  # points to src/
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_THREE = {
    'A': 'ALA', 'R': 'ARG', 'N': 'ASN', 'D': 'ASP', 'C': 'CYS', 'Q': 'GLN', 'E': 'GLU',
    'G': 'GLY', 'H': 'HIS', 'I': 'ILE', 'L': 'LEU', 'K': 'LYS', 'M': 'MET', 'F': 'PHE',
    'P': 'PRO', 'S': 'SER', 'T': 'THR', 'W': 'TRP', 'Y': 'TYR', 'V': 'VAL',
}


def reset_settings_cache():  # convenience for tests toggling env flags
    from utils.settings import get_settings
    get_settings.cache_clear()  # type: ignore


@pytest.fixture
def clean_settings(monkeypatch):
    for var in ('CONSERVATION_LOG_LEVEL', 'CONSERVATION_JSON_LOGS',
                'CONSERVATION_LOG_FILE', 'CONSERVATION_CONFIG_FILE'):
        monkeypatch.delenv(var, raising=False)
    reset_settings_cache()
    yield monkeypatch
    reset_settings_cache()


def write_jsd(path: Path, rows):
    """rows: iterable of (letter, score); index is the row position."""
    lines = [f"{i}\t{score}\t{letter}" for i, (letter, score) in enumerate(rows)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def pdb_text(chains):
    """chains: {chain_id: sequence}. One CA atom per residue, numbered from 1."""
    lines = []
    serial = 1
    for chain_id, seq in chains.items():
        for resseq, letter in enumerate(seq, start=1):
            lines.append(
                f"ATOM  {serial:5d}  CA  {_THREE[letter]} {chain_id}{resseq:4d}    "
                f"{float(serial):8.3f}{0.0:8.3f}{0.0:8.3f}{1.0:6.2f}{0.0:6.2f}           C"
            )
            serial += 1
        lines.append("TER")
    return "\n".join(lines) + "\nEND\n"


def water_line(serial: int, chain_id: str, resseq: int) -> str:
    return (f"HETATM{serial:5d}  O   HOH {chain_id}{resseq:4d}    "
            f"{0.0:8.3f}{0.0:8.3f}{float(serial):8.3f}{1.0:6.2f}{0.0:6.2f}           O")
