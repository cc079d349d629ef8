"""
MIT License

Read-only store of everything extracted from one GenBank file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

import pandas as pd

from .features import FeatureRecord, FeatureScanResult, PeptideRecord
from .origin import OriginRecord
from ..io.fasta import FastaRecord

# Output categories, in the order files are written.
CATEGORIES: Dict[str, str] = {
    "faa": "whole origin sequence",
    "pep": "CDS translations",
    "cds": "CDS nucleotide sequences",
    "trn": "tRNA sequences",
    "rrn": "rRNA sequences",
}

LOCATION_COLUMNS = ["Gene", "start", "end", "length", "strand", "type", "location"]


@dataclass(frozen=True)
class AnnotationSet:
    origin: OriginRecord
    cds: Tuple[FeatureRecord, ...] = ()
    peptides: Tuple[PeptideRecord, ...] = ()
    rrna: Tuple[FeatureRecord, ...] = ()
    trna: Tuple[FeatureRecord, ...] = ()

    @classmethod
    def from_scan(cls, origin: OriginRecord, scan: FeatureScanResult) -> "AnnotationSet":
        return cls(
            origin=origin,
            cds=scan.cds,
            peptides=scan.peptides,
            rrna=scan.rrna,
            trna=scan.trna,
        )

    @property
    def features(self) -> Tuple[FeatureRecord, ...]:
        return self.cds + self.rrna + self.trna

    def records(self, category: str) -> Iterator[FastaRecord]:
        """Yield the FASTA records written for one output category."""
        if category == "faa":
            yield FastaRecord(self.origin.organism_name, self.origin.sequence)
        elif category == "pep":
            for peptide in self.peptides:
                yield FastaRecord(peptide.label, peptide.sequence)
        elif category in ("cds", "trn", "rrn"):
            source = {"cds": self.cds, "trn": self.trna, "rrn": self.rrna}[category]
            for record in source:
                yield FastaRecord(record.label, record.sequence)
        else:
            raise ValueError(f"Unknown output category: {category}")

    def location_table(self) -> pd.DataFrame:
        """One row per feature with its span, length and strand."""
        rows: List[Dict[str, object]] = []
        for record in self.features:
            location = record.location
            if location is None:
                continue
            rows.append(
                {
                    "Gene": "_".join(record.label.split()),
                    "start": location.start,
                    "end": location.end,
                    "length": len(record.sequence),
                    "strand": location.strand,
                    "type": record.type.value,
                    "location": "".join(record.location_text.split()),
                }
            )
        return pd.DataFrame(rows, columns=LOCATION_COLUMNS)


__all__ = ["AnnotationSet", "CATEGORIES", "LOCATION_COLUMNS"]
