"""
MIT License

FASTA writing utilities for gbextract.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator
import logging

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FastaRecord:
    """Minimal FASTA record snapshot."""

    seq_id: str
    sequence: str


def _to_seq_records(records: Iterable[FastaRecord]) -> Iterator[SeqRecord]:
    for record in records:
        # description="" keeps the header to exactly ">seq_id"
        yield SeqRecord(Seq(record.sequence), id=record.seq_id, name=record.seq_id, description="")


def write_fasta(records: Iterable[FastaRecord], path: str | Path) -> int:
    """
    Write records as two-line FASTA entries (header line, unwrapped sequence).

    Returns the number of records written.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as handle:
        count = SeqIO.write(_to_seq_records(records), handle, "fasta-2line")
    LOGGER.debug("Wrote %s records to %s", count, out_path)
    return count


__all__ = ["FastaRecord", "write_fasta"]
