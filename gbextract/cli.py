"""
MIT License

Command-line interface for gbextract.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from .core.annotations import CATEGORIES
from .core.features import ParseLimits
from .core.pipeline import ExtractConfig, run_extract
from .core.transfer import TransferConfig, run_transfer
from .io.tsv import EMIT_FORMATS
from .util.logging import get_logger, set_verbose

LOGGER = get_logger()

GENBANK_EXTENSIONS = {".gb", ".gbk", ".gbff"}

# category -> (short flag, long flag)
CATEGORY_FLAGS = {
    "faa": ("-f", "--faa"),
    "pep": ("-p", "--pep"),
    "cds": ("-c", "--cds"),
    "trn": ("-t", "--trn"),
    "rrn": ("-r", "--rrn"),
}


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gbextract",
        description="Extract CDS, peptide, tRNA, rRNA and origin sequences from a GenBank file",
    )
    add_extract_args(parser)
    subparsers = parser.add_subparsers(dest="command")

    transfer_parser = subparsers.add_parser(
        "transfer", help="Report genes covered by BLASTN alignments (transferred genes)"
    )
    add_transfer_args(transfer_parser)
    return parser


def add_extract_args(parser: argparse.ArgumentParser) -> None:
    parser.set_defaults(handler=run_extract_command)
    parser.add_argument("-g", "--genbank", required=False, help="Input genbank file (.gb)")
    parser.add_argument("--prefix", help="Prefix of the output files (default: genbank file stem)")
    parser.add_argument("-o", "--output", help="Existing output directory")
    parser.add_argument("-a", "--all", action="store_true", help="Output all annotation categories")
    for category, flags in CATEGORY_FLAGS.items():
        parser.add_argument(*flags, dest=category, action="store_true", help=f"Output {CATEGORIES[category]}")
    parser.add_argument(
        "-l", "--loc", dest="loc", action="store_true", help="Also write a gene location table (.loc)"
    )
    parser.add_argument("--emit", choices=EMIT_FORMATS, default="tsv", help="Format of the location table")
    parser.add_argument(
        "--max-peptide-len", type=_positive_int, default=ParseLimits.max_peptide_length
    )
    parser.add_argument(
        "--max-feature-len", type=_positive_int, default=ParseLimits.max_feature_length
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def add_transfer_args(parser: argparse.ArgumentParser) -> None:
    parser.set_defaults(handler=run_transfer_command)
    parser.add_argument("-t", "--transfer", required=True, help="BLASTN tabular output (-outfmt 6)")
    parser.add_argument("-l", "--location", required=True, help="Gene location table")
    parser.add_argument("-o", "--output", required=True, help="Output TSV file")
    parser.add_argument("--query-label", default="Cp", help="Column label for the query genome")
    parser.add_argument("--subject-label", default="Mt", help="Column label for the subject genome")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def dispatch(args: argparse.Namespace) -> None:
    set_verbose(getattr(args, "verbose", False))
    if getattr(args, "handler", None) is None:
        args.handler = run_extract_command
    try:
        args.handler(args)
    except (ValueError, FileNotFoundError) as exc:
        raise SystemExit(f"Error: {exc}")


def selected_categories(args: argparse.Namespace) -> List[str]:
    chosen = [category for category in CATEGORIES if getattr(args, category, False)]
    if args.all or not chosen:
        return list(CATEGORIES)
    return chosen


def build_extract_config(args: argparse.Namespace) -> ExtractConfig:
    if not args.genbank:
        raise SystemExit("Error: Please provide a genbank file with -g/--genbank")
    genbank = Path(args.genbank)
    if genbank.suffix.lower() not in GENBANK_EXTENSIONS:
        allowed = ", ".join(sorted(GENBANK_EXTENSIONS))
        raise SystemExit(f"Error: Genbank file must have one of the extensions {allowed}: {genbank}")
    if not genbank.is_file():
        raise SystemExit(f"Error: Failed to open genbank file '{genbank}'")

    output_dir = Path(args.output) if args.output else genbank.parent
    if not output_dir.is_dir():
        raise SystemExit(f"Error: Output path does not exist: {output_dir}")

    return ExtractConfig(
        genbank=str(genbank),
        output_dir=str(output_dir),
        prefix=args.prefix or genbank.stem,
        categories=selected_categories(args),
        limits=ParseLimits(
            max_peptide_length=args.max_peptide_len,
            max_feature_length=args.max_feature_len,
        ),
        write_locations=args.loc,
        emit=args.emit,
    )


def run_extract_command(args: argparse.Namespace) -> None:
    config = build_extract_config(args)
    LOGGER.info("Genbank file: %s", config.genbank)
    LOGGER.info("Prefix: %s", config.prefix)
    LOGGER.info("Output path: %s", config.output_dir)
    result = run_extract(config)
    LOGGER.info("Wrote %s file(s) to %s", len(result.files), config.output_dir)


def run_transfer_command(args: argparse.Namespace) -> None:
    config = TransferConfig(
        transfer=args.transfer,
        location=args.location,
        output=args.output,
        query_label=args.query_label,
        subject_label=args.subject_label,
    )
    run_transfer(config)


__all__ = ["build_parser", "dispatch"]
