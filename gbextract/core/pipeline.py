"""
MIT License

High-level orchestration for GenBank feature extraction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .annotations import CATEGORIES, AnnotationSet
from .features import ParseLimits, scan_features
from .origin import assemble_origin
from ..io.fasta import write_fasta
from ..io.tsv import write_table
from ..util.logging import get_logger

LOGGER = get_logger()

LOCATION_SUFFIX = "loc"


@dataclass
class ExtractConfig:
    genbank: str
    output_dir: str
    prefix: str
    categories: List[str] = field(default_factory=lambda: list(CATEGORIES))
    limits: ParseLimits = field(default_factory=ParseLimits)
    write_locations: bool = False
    emit: str = "tsv"


@dataclass
class ExtractResult:
    config: ExtractConfig
    annotations: AnnotationSet
    files: Dict[str, Path]


def read_genbank_lines(path: str | Path) -> List[str]:
    genbank_path = Path(path)
    if not genbank_path.is_file():
        raise FileNotFoundError(f"Failed to open genbank file '{path}'")
    with genbank_path.open("r", encoding="utf-8", errors="replace") as handle:
        return handle.readlines()


def extract_annotations(path: str | Path, limits: Optional[ParseLimits] = None) -> AnnotationSet:
    """
    Parse one GenBank file into an AnnotationSet.

    The origin is assembled first because every feature location is evaluated
    against it; the feature table is then scanned from the top of the file.
    """

    lines = read_genbank_lines(path)
    origin = assemble_origin(lines)
    scan = scan_features(lines, origin.sequence, limits)
    return AnnotationSet.from_scan(origin, scan)


def run_extract(config: ExtractConfig) -> ExtractResult:
    """Parse the configured GenBank file and write every requested category."""

    LOGGER.info("Processing genbank file %s", config.genbank)
    annotations = extract_annotations(config.genbank, config.limits)

    out_dir = Path(config.output_dir)
    files: Dict[str, Path] = {}
    for category in CATEGORIES:
        if category not in config.categories:
            continue
        target = out_dir / f"{config.prefix}.{category}"
        count = write_fasta(annotations.records(category), target)
        LOGGER.info("Wrote %s %s record(s) to %s", count, category, target)
        files[category] = target

    if config.write_locations:
        target = out_dir / f"{config.prefix}.{LOCATION_SUFFIX}"
        files[LOCATION_SUFFIX] = write_table(annotations.location_table(), target, fmt=config.emit)
        LOGGER.info("Wrote gene location table to %s", target)

    return ExtractResult(config=config, annotations=annotations, files=files)


__all__ = ["ExtractConfig", "ExtractResult", "extract_annotations", "read_genbank_lines", "run_extract"]
