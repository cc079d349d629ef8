"""
MIT License

Tabular output for location tables and transfer reports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import json

import pandas as pd

SEPARATORS = {"tsv": "\t", "csv": ","}
EMIT_FORMATS = (*SEPARATORS, "jsonl")


def write_table(
    df: pd.DataFrame,
    path: str | Path,
    fmt: str = "tsv",
    float_format: Optional[str] = None,
) -> Path:
    """
    Persist a DataFrame in the requested serialization format.

    Parameters
    ----------
    df:
        DataFrame to serialize.
    path:
        Output file path.
    fmt:
        One of ``tsv``, ``csv`` or ``jsonl``.
    float_format:
        printf-style format applied to float columns for ``tsv``/``csv``.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    if fmt in SEPARATORS:
        df.to_csv(out_path, sep=SEPARATORS[fmt], index=False, float_format=float_format)
    elif fmt == "jsonl":
        with out_path.open("w", encoding="utf-8") as handle:
            for record in df.to_dict(orient="records"):
                handle.write(json.dumps(record) + "\n")
    else:
        raise ValueError(f"Unsupported format: {fmt}")
    return out_path


__all__ = ["write_table", "EMIT_FORMATS"]
