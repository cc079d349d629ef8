"""
MIT License

Readers for BLASTN tabular output and gene location tables.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

# Columns of BLAST+ ``-outfmt 6`` that the transfer report uses.
BLAST_COLUMNS = {
    0: "query",
    1: "subject",
    2: "identity",
    3: "alignment_length",
    6: "q_start",
    7: "q_end",
    8: "s_start",
    9: "s_end",
}

GENE_COLUMNS = ["name", "start", "end", "length", "strand"]


def _read_whitespace_table(path: str | Path, label: str) -> pd.DataFrame:
    table_path = Path(path)
    if not table_path.is_file():
        raise FileNotFoundError(f"Error opening {label} file: {path}")
    try:
        return pd.read_csv(table_path, sep=r"\s+", comment="#", header=None, dtype=str)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()


def read_blast_table(path: str | Path) -> pd.DataFrame:
    """Load BLASTN tabular alignments, skipping ``#`` comment lines."""
    raw = _read_whitespace_table(path, "BLASTN")
    if raw.empty:
        return pd.DataFrame(columns=list(BLAST_COLUMNS.values()))
    if raw.shape[1] < 10:
        raise ValueError(f"BLASTN table {path} has {raw.shape[1]} columns; expected -outfmt 6")

    df = raw[list(BLAST_COLUMNS)].rename(columns=BLAST_COLUMNS)
    df["identity"] = pd.to_numeric(df["identity"], errors="raise").astype(float)
    for column in ("alignment_length", "q_start", "q_end", "s_start", "s_end"):
        df[column] = pd.to_numeric(df[column], errors="raise").astype(int)
    return df.reset_index(drop=True)


def read_gene_locations(path: str | Path) -> pd.DataFrame:
    """
    Load a gene location table (``name start end length strand``).

    Header rows, whose coordinates are not numeric, are skipped; any columns
    past the fifth are ignored.
    """
    raw = _read_whitespace_table(path, "gene")
    if raw.empty:
        return pd.DataFrame(columns=GENE_COLUMNS)
    if raw.shape[1] < 3:
        raise ValueError(f"Gene location table {path} needs at least name, start and end columns")

    df = raw.iloc[:, : len(GENE_COLUMNS)].copy()
    df.columns = GENE_COLUMNS[: df.shape[1]]
    for column in GENE_COLUMNS[1:]:
        if column not in df.columns:
            df[column] = None
        df[column] = pd.to_numeric(df[column], errors="coerce")
    df = df.dropna(subset=["start", "end"])
    df["length"] = df["length"].fillna((df["end"] - df["start"]).abs() + 1)
    df["strand"] = df["strand"].fillna(0)
    df[GENE_COLUMNS[1:]] = df[GENE_COLUMNS[1:]].astype(int)
    return df.reset_index(drop=True)


__all__ = ["read_blast_table", "read_gene_locations", "BLAST_COLUMNS", "GENE_COLUMNS"]
