"""Residue identity keys.

A ResidueKey names a residue by (chain id, sequence number, insertion code)
and nothing else, so it can be used as a dict key without keeping the parsed
structure alive.
"""
from __future__ import annotations
from dataclasses import dataclass

_SEP = ":"


@dataclass(frozen=True)
class ResidueKey:
    chain_id: str
    seq_num: int
    icode: str = ""

    def __post_init__(self):
        # Bio.PDB reports "no insertion code" as a single blank
        object.__setattr__(self, "icode", (self.icode or "").strip())
        object.__setattr__(self, "seq_num", int(self.seq_num))

    @classmethod
    def from_residue(cls, residue) -> "ResidueKey":
        """Build a key from a Bio.PDB residue (uses its parent chain id)."""
        _, seq_num, icode = residue.get_id()
        chain = residue.get_parent()
        chain_id = chain.id if chain is not None else ""
        return cls(chain_id, seq_num, icode)

    def to_text(self) -> str:
        return f"{self.chain_id}{_SEP}{self.seq_num}{_SEP}{self.icode}"

    @classmethod
    def from_text(cls, text: str) -> "ResidueKey":
        """Inverse of to_text. Splits from the right so odd chain ids survive."""
        try:
            chain_id, seq_num, icode = text.rsplit(_SEP, 2)
            return cls(chain_id, int(seq_num), icode)
        except ValueError as e:
            raise ValueError(f"Malformed residue key: {text!r}") from e

    def __str__(self) -> str:  # pragma: no cover - display only
        return f"{self.chain_id}{self.seq_num}{self.icode}"


def normalize_chain_id(chain_id, default: str = "A") -> str:
    """Blank or whitespace-only chain ids become ``default``."""
    if chain_id is None or not str(chain_id).strip():
        return default
    return str(chain_id)
