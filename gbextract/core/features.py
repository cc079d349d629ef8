"""
MIT License

Line-oriented state machine over the GenBank feature table.

Only ``CDS``, ``rRNA`` and ``tRNA`` features are extracted. A record is opened
by its header line, its location may wrap across lines (a trailing comma means
the location continues), and it is committed once its qualifiers are complete:
``/gene`` for rRNA and tRNA, ``/translation`` for CDS.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .errors import GenbankError, SequenceLengthError
from .location import LocationExpression, parse_location
from .origin import ORIGIN_MARKER
from ..util.logging import get_logger

LOGGER = get_logger()

# Feature keys start at column 5; qualifiers and continuations at column 21.
_FEATURE_KEY_RE = re.compile(r"^ {5}(\S+)(?:\s+(\S.*))?$")
_GENE_RE = re.compile(r'^/gene="([^"]*)')
_TRANSLATION_RE = re.compile(r'^/translation="(.*)$')


class FeatureType(str, Enum):
    CDS = "CDS"
    RRNA = "rRNA"
    TRNA = "tRNA"


class FeatureState(Enum):
    IDLE = "idle"
    CDS_LOCATION = "cds_location"
    CDS_OPEN = "cds_open"
    CDS_TRANSLATION = "cds_translation"
    RRNA_LOCATION = "rrna_location"
    RRNA_OPEN = "rrna_open"
    TRNA_LOCATION = "trna_location"
    TRNA_OPEN = "trna_open"


LOCATION_STATES = {
    FeatureType.CDS: FeatureState.CDS_LOCATION,
    FeatureType.RRNA: FeatureState.RRNA_LOCATION,
    FeatureType.TRNA: FeatureState.TRNA_LOCATION,
}

OPEN_STATES = {
    FeatureType.CDS: FeatureState.CDS_OPEN,
    FeatureType.RRNA: FeatureState.RRNA_OPEN,
    FeatureType.TRNA: FeatureState.TRNA_OPEN,
}


@dataclass(frozen=True)
class ParseLimits:
    max_peptide_length: int = 10000
    max_feature_length: int = 1000000


@dataclass(frozen=True)
class FeatureRecord:
    type: FeatureType
    gene_name: str
    location_text: str
    sequence: str
    location: Optional[LocationExpression] = field(default=None, compare=False, repr=False)

    @property
    def label(self) -> str:
        """FASTA label: the gene name, or the raw location for unnamed features."""
        return self.gene_name or self.location_text


@dataclass(frozen=True)
class PeptideRecord:
    gene_name: str
    sequence: str
    location_text: str = ""

    @property
    def label(self) -> str:
        return self.gene_name or self.location_text


@dataclass(frozen=True)
class FeatureScanResult:
    cds: Tuple[FeatureRecord, ...]
    peptides: Tuple[PeptideRecord, ...]
    rrna: Tuple[FeatureRecord, ...]
    trna: Tuple[FeatureRecord, ...]


@dataclass
class _OpenFeature:
    type: FeatureType
    location_parts: List[str]
    gene_name: str = ""
    location: Optional[LocationExpression] = None
    sequence: str = ""
    peptide_parts: List[str] = field(default_factory=list)
    peptide_length: int = 0

    @property
    def location_text(self) -> str:
        return "".join(self.location_parts)


class FeatureScanner:
    """Consume feature-table lines one at a time and collect finished records."""

    def __init__(self, origin: str, limits: ParseLimits | None = None) -> None:
        self.origin = origin
        self.limits = limits or ParseLimits()
        self.state = FeatureState.IDLE
        self._open: Optional[_OpenFeature] = None
        self._records: Dict[FeatureType, List[FeatureRecord]] = {kind: [] for kind in FeatureType}
        self._peptides: List[PeptideRecord] = []
        self._handlers: Dict[FeatureState, Callable[[str], None]] = {
            FeatureState.IDLE: self._on_idle,
            FeatureState.CDS_LOCATION: self._on_location,
            FeatureState.RRNA_LOCATION: self._on_location,
            FeatureState.TRNA_LOCATION: self._on_location,
            FeatureState.CDS_OPEN: self._on_open,
            FeatureState.RRNA_OPEN: self._on_open,
            FeatureState.TRNA_OPEN: self._on_open,
            FeatureState.CDS_TRANSLATION: self._on_translation,
        }

    def feed(self, line: str) -> None:
        line = line.rstrip("\r\n")
        header = _FEATURE_KEY_RE.match(line)
        if header:
            self._start_feature(header.group(1), header.group(2) or "")
            return
        self._handlers[self.state](line)

    def finish(self) -> FeatureScanResult:
        self._close_open()
        return FeatureScanResult(
            cds=tuple(self._records[FeatureType.CDS]),
            peptides=tuple(self._peptides),
            rrna=tuple(self._records[FeatureType.RRNA]),
            trna=tuple(self._records[FeatureType.TRNA]),
        )

    # -- transitions -------------------------------------------------------

    def _start_feature(self, key: str, rest: str) -> None:
        self._close_open()
        try:
            kind = FeatureType(key)
        except ValueError:
            return
        self._open = _OpenFeature(type=kind, location_parts=[rest.strip()])
        self._advance_location(rest)

    def _current(self) -> _OpenFeature:
        if self._open is None:
            raise GenbankError(f"No feature is open in state {self.state.value}")
        return self._open

    def _advance_location(self, line: str) -> None:
        feature = self._current()
        if line.rstrip().endswith(","):
            self.state = LOCATION_STATES[feature.type]
            return
        self._evaluate_location(feature)
        self.state = OPEN_STATES[feature.type]

    def _evaluate_location(self, feature: _OpenFeature) -> None:
        location = parse_location(feature.location_text)
        sequence = location.extract(self.origin)
        if len(sequence) > self.limits.max_feature_length:
            raise SequenceLengthError(
                f"{feature.type.value} at {location.text} is {len(sequence)} bp, "
                f"exceeding the limit of {self.limits.max_feature_length}"
            )
        feature.location = location
        feature.sequence = sequence

    def _on_idle(self, line: str) -> None:
        return None

    def _on_location(self, line: str) -> None:
        self._current().location_parts.append(line.strip())
        self._advance_location(line)

    def _on_open(self, line: str) -> None:
        feature = self._current()
        qualifier = line.strip()
        gene = _GENE_RE.match(qualifier)
        if gene:
            if not feature.gene_name:
                feature.gene_name = gene.group(1)
            if feature.type is not FeatureType.CDS:
                self._commit()
            return
        translation = _TRANSLATION_RE.match(qualifier)
        if translation and feature.type is FeatureType.CDS:
            self.state = FeatureState.CDS_TRANSLATION
            self._on_translation(translation.group(1))

    def _on_translation(self, line: str) -> None:
        feature = self._current()
        chunk = line.strip()
        closed = '"' in chunk
        if closed:
            chunk = chunk[: chunk.index('"')]
        feature.peptide_parts.append(chunk)
        feature.peptide_length += len(chunk)
        if feature.peptide_length > self.limits.max_peptide_length:
            raise SequenceLengthError(
                f"Translation of {feature.gene_name or feature.location_text} exceeds "
                f"the limit of {self.limits.max_peptide_length} residues"
            )
        if closed:
            self._commit()

    def _commit(self) -> None:
        feature = self._current()
        record = FeatureRecord(
            type=feature.type,
            gene_name=feature.gene_name,
            location_text=feature.location_text,
            sequence=feature.sequence,
            location=feature.location,
        )
        self._records[feature.type].append(record)
        if feature.type is FeatureType.CDS:
            self._peptides.append(PeptideRecord(feature.gene_name, "".join(feature.peptide_parts), feature.location_text))
        LOGGER.debug("%s %s at %s (%s bp)", feature.type.value, record.label, record.location_text, len(record.sequence))
        self._open = None
        self.state = FeatureState.IDLE

    def _close_open(self) -> None:
        feature = self._open
        if feature is None:
            return
        if self.state in LOCATION_STATES.values():
            raise GenbankError(
                f"Unterminated location for {feature.type.value} feature: '{feature.location_text}'"
            )
        if self.state is FeatureState.CDS_TRANSLATION:
            raise GenbankError(
                f"Unterminated /translation for CDS {feature.gene_name or feature.location_text}"
            )
        missing = "/translation" if feature.type is FeatureType.CDS else "/gene"
        LOGGER.warning(
            "Discarding %s feature at %s without %s qualifier",
            feature.type.value,
            feature.location_text,
            missing,
        )
        self._open = None
        self.state = FeatureState.IDLE


def scan_features(
    lines: Iterable[str],
    origin: str,
    limits: ParseLimits | None = None,
) -> FeatureScanResult:
    """Run the feature state machine over ``lines`` up to the ORIGIN marker."""

    scanner = FeatureScanner(origin, limits)
    for line in lines:
        if line.startswith(ORIGIN_MARKER):
            break
        scanner.feed(line)
    result = scanner.finish()
    LOGGER.info(
        "Extracted %s CDS, %s rRNA and %s tRNA features",
        len(result.cds),
        len(result.rrna),
        len(result.trna),
    )
    return result


__all__ = [
    "FeatureType",
    "FeatureState",
    "FeatureRecord",
    "PeptideRecord",
    "FeatureScanResult",
    "FeatureScanner",
    "ParseLimits",
    "scan_features",
]
