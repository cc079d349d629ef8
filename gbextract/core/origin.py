"""
MIT License

Assembly of the ORIGIN sequence and replicon-level header fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .errors import OriginError
from ..util.logging import get_logger

LOGGER = get_logger()

ORIGIN_MARKER = "ORIGIN"
ORGANISM_KEY = "ORGANISM"
ACCESSION_KEY = "ACCESSION"
HEADER_VALUE_COLUMN = 12
BLOCKS_PER_LINE = 6
DEFAULT_ORGANISM = "Chr1"


@dataclass(frozen=True)
class OriginRecord:
    organism_name: str
    sequence: str
    accession: str = ""


def _header_value(line: str, key: str) -> Optional[str]:
    if line[:HEADER_VALUE_COLUMN].strip() != key:
        return None
    return line[HEADER_VALUE_COLUMN:].strip()


def _sequence_blocks(line: str) -> str:
    fields = line.split()
    if not fields or not fields[0].isdigit():
        return ""
    return "".join(fields[1 : 1 + BLOCKS_PER_LINE])


def assemble_origin(lines: Iterable[str]) -> OriginRecord:
    """
    Build the origin sequence from the lines of a GenBank file.

    Every line after the ``ORIGIN`` marker contributes its sequence blocks
    (the leading position number is dropped) until the end of input. The first
    ``ORGANISM`` and ``ACCESSION`` header lines are captured along the way.
    """

    organism: Optional[str] = None
    accession: Optional[str] = None
    chunks: List[str] = []
    in_origin = False

    for line in lines:
        if in_origin:
            chunks.append(_sequence_blocks(line).upper())
            continue
        if line.startswith(ORIGIN_MARKER):
            in_origin = True
            continue
        if organism is None:
            organism = _header_value(line, ORGANISM_KEY)
        if accession is None:
            accession = _header_value(line, ACCESSION_KEY)

    if not in_origin:
        raise OriginError("gb file format error: no ORIGIN section found")
    sequence = "".join(chunks)
    if not sequence:
        raise OriginError("gb file format error or incomplete sequence: ORIGIN is empty")

    if not organism:
        LOGGER.warning("No ORGANISM line found; labelling origin as %s", DEFAULT_ORGANISM)
        organism = DEFAULT_ORGANISM
    LOGGER.info("Organism: %s", organism)
    if accession:
        LOGGER.info("Accession: %s", accession)
    LOGGER.info("Assembled origin sequence of %s bp", len(sequence))
    return OriginRecord(organism_name=organism, sequence=sequence, accession=accession or "")


__all__ = ["OriginRecord", "assemble_origin", "ORIGIN_MARKER"]
