"""
MIT License

Nucleotide sequence primitives shared by the location evaluator.
"""

from __future__ import annotations

from typing import Dict

from .errors import SequenceRangeError

_PAIRS = {
    "A": "T",
    "T": "A",
    "C": "G",
    "G": "C",
    # IUPAC ambiguity codes
    "N": "N",
    "R": "Y",
    "Y": "R",
    "K": "M",
    "M": "K",
    "S": "S",
    "W": "W",
    "B": "V",
    "V": "B",
    "D": "H",
    "H": "D",
}


def _build_complement_table() -> Dict[str, str]:
    table = dict(_PAIRS)
    table.update({base.lower(): comp.lower() for base, comp in _PAIRS.items()})
    return table


COMPLEMENT = _build_complement_table()


def reverse_complement(seq: str) -> str:
    """
    Return the reverse complement of ``seq``.

    Case is preserved. Characters outside the nucleotide alphabet (gaps,
    digits, stray punctuation) are dropped rather than copied through.
    """
    return "".join(COMPLEMENT[base] for base in reversed(seq) if base in COMPLEMENT)


def subseq(seq: str, start: int, end: int) -> str:
    """Extract ``seq[start..end]`` using 1-based inclusive coordinates."""
    if start < 1 or start > end or end > len(seq):
        raise SequenceRangeError(
            f"Invalid location '{start}..{end}' for sequence of length {len(seq)}"
        )
    return seq[start - 1 : end]


__all__ = ["reverse_complement", "subseq", "COMPLEMENT"]
