"""
MIT License

Exception types raised while reading GenBank flat files.
"""

from __future__ import annotations


class GenbankError(ValueError):
    """Base class for malformed GenBank input."""


class OriginError(GenbankError):
    """The ORIGIN section is missing or holds no sequence."""


class LocationError(GenbankError):
    """A feature location could not be parsed."""


class SequenceRangeError(LocationError):
    """A coordinate range falls outside the sequence it is applied to."""


class SequenceLengthError(GenbankError):
    """A peptide or feature sequence exceeds the configured ceiling."""


__all__ = [
    "GenbankError",
    "OriginError",
    "LocationError",
    "SequenceRangeError",
    "SequenceLengthError",
]
