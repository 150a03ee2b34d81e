"""Longest-common-subsequence matching of residue letter sequences.

Used for two things: ranking candidate score files against a structural
chain (:func:`match_length`) and mapping chain positions onto score-file
positions when the two sequences differ (:func:`align`).

Letters are compared case-insensitively. Both the table and the backtrack are
O(len(a) * len(b)) in time and memory; there is no banded variant.
"""
from __future__ import annotations
from typing import Dict, Sequence, Union

import numpy as np
from loguru import logger

Letters = Union[str, Sequence[str]]


def _normalize(seq: Letters) -> list:
    return [str(c).upper() for c in seq]


def lcs_table(a: Letters, b: Letters) -> np.ndarray:
    """Return the (len(a)+1, len(b)+1) LCS length table.

    ``table[i, j]`` is the LCS length of ``a[:i]`` and ``b[:j]``; row 0 and
    column 0 are zero.
    """
    a, b = _normalize(a), _normalize(b)
    n, m = len(a), len(b)
    table = np.zeros((n + 1, m + 1), dtype=np.int32)
    if n == 0 or m == 0:
        return table
    b_arr = np.asarray(b, dtype=object)
    for i in range(1, n + 1):
        eq = b_arr == a[i - 1]
        prev = table[i - 1]
        row = table[i]
        for j in range(1, m + 1):
            if eq[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = prev[j] if prev[j] >= row[j - 1] else row[j - 1]
    return table


def match_length(a: Letters, b: Letters) -> int:
    """Length of the longest common subsequence of ``a`` and ``b``."""
    table = lcs_table(a, b)
    return int(table[-1, -1])


def align(a: Letters, b: Letters) -> Dict[int, int]:
    """Map positions of ``a`` onto matched positions of ``b``.

    Identical sequences map positionally without building the table.
    Otherwise the LCS table is backtracked from the bottom-right corner; on a
    tie between dropping a letter of ``a`` or of ``b`` the ``b`` letter is
    dropped. Unmatched positions of ``a`` are absent from the result.
    """
    a, b = _normalize(a), _normalize(b)
    if a == b:
        return {i: i for i in range(len(a))}

    logger.debug(f"Matching sequences using LCS ({len(a)} x {len(b)})")
    table = lcs_table(a, b)
    mapping: Dict[int, int] = {}
    i, j = len(a), len(b)
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            mapping[i - 1] = j - 1
            i -= 1
            j -= 1
        elif table[i - 1, j] > table[i, j - 1]:
            i -= 1
        else:
            j -= 1
    return dict(sorted(mapping.items()))
