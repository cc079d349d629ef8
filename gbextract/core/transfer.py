"""
MIT License

Transfer-gene report: which annotated genes fall inside BLASTN alignments.

A gene whose whole span lies within the query span of an alignment is listed
with a trailing ``*``; a gene with only one endpoint strictly inside the span
is listed without it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import pandas as pd

from ..io.blast import read_blast_table, read_gene_locations
from ..io.tsv import write_table
from ..util.logging import get_logger

LOGGER = get_logger()

CONTAINED_MARK = "*"


@dataclass
class TransferConfig:
    transfer: str
    location: str
    output: str
    query_label: str = "Cp"
    subject_label: str = "Mt"


def report_columns(query_label: str, subject_label: str) -> List[str]:
    return [
        "No",
        query_label,
        subject_label,
        "Identity",
        "length",
        "q.start",
        "q.end",
        "s.start",
        "s.end",
        "HGT gene",
    ]


def find_transfer_genes(
    genes: pd.DataFrame,
    alignments: pd.DataFrame,
    query_label: str = "Cp",
    subject_label: str = "Mt",
) -> pd.DataFrame:
    """Match every alignment's query span against the gene coordinates."""

    gene_lo = genes[["start", "end"]].min(axis=1)
    gene_hi = genes[["start", "end"]].max(axis=1)

    rows: List[Dict[str, object]] = []
    for number, aln in enumerate(alignments.itertuples(index=False), start=1):
        q_lo = min(aln.q_start, aln.q_end)
        q_hi = max(aln.q_start, aln.q_end)
        contained = (gene_lo >= q_lo) & (gene_hi <= q_hi)
        start_inside = (genes["start"] > q_lo) & (genes["start"] < q_hi)
        end_inside = (genes["end"] > q_lo) & (genes["end"] < q_hi)
        partial = ~contained & (start_inside | end_inside)

        names = [f"{name}{CONTAINED_MARK}" for name in genes.loc[contained, "name"]]
        partial_names = list(genes.loc[partial, "name"])
        if partial_names:
            LOGGER.debug("Alignment %s (%s..%s) cuts through %s", number, aln.q_start, aln.q_end, ", ".join(partial_names))
        names.extend(partial_names)

        rows.append(
            {
                "No": number,
                query_label: aln.query,
                subject_label: aln.subject,
                "Identity": float(aln.identity),
                "length": aln.alignment_length,
                "q.start": aln.q_start,
                "q.end": aln.q_end,
                "s.start": aln.s_start,
                "s.end": aln.s_end,
                "HGT gene": " ".join(names),
            }
        )
    return pd.DataFrame(rows, columns=report_columns(query_label, subject_label))


def run_transfer(config: TransferConfig) -> Path:
    """Read both inputs, build the report and write it as TSV."""

    genes = read_gene_locations(config.location)
    alignments = read_blast_table(config.transfer)
    LOGGER.info("Matching %s alignments against %s genes", len(alignments), len(genes))
    report = find_transfer_genes(genes, alignments, config.query_label, config.subject_label)
    out_path = write_table(report, config.output, fmt="tsv", float_format="%.2f")
    LOGGER.info("Transfer report written to %s", out_path)
    return out_path


__all__ = ["TransferConfig", "find_transfer_genes", "run_transfer", "report_columns"]
