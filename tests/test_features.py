#!/usr/bin/env python3
"""
test_features.py
----------------
Tests for the feature-table state machine.

Tests verify:
  1. CDS, tRNA and rRNA records with their gene names
  2. Multi-line locations rebuild the single-line location
  3. Multi-line /translation values rebuild the single-line value
  4. Encounter order within a feature type
  5. Incomplete records are discarded, malformed ones abort
  6. Peptide and feature length ceilings

Run:
    python -m pytest tests/test_features.py -v
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gb_fixtures import BASIC_FEATURES, ORIGIN_SEQ, feature, genbank_text, region, revcomp
from gbextract.core.errors import GenbankError, SequenceLengthError, SequenceRangeError
from gbextract.core.features import (FeatureScanner, FeatureState, FeatureType,
                                     ParseLimits, scan_features)


def _scan(features, limits=None):
    return scan_features(genbank_text(features).splitlines(keepends=True), ORIGIN_SEQ, limits)


class TestBasicFeatures(unittest.TestCase):

    def setUp(self):
        self.result = _scan(BASIC_FEATURES)

    def test_counts(self):
        self.assertEqual(len(self.result.cds), 1)
        self.assertEqual(len(self.result.peptides), 1)
        self.assertEqual(len(self.result.trna), 1)
        self.assertEqual(len(self.result.rrna), 0)

    def test_cds_record(self):
        cds = self.result.cds[0]
        self.assertEqual(cds.type, FeatureType.CDS)
        self.assertEqual(cds.gene_name, "rps12")
        self.assertEqual(cds.location_text, "50..70")
        self.assertEqual(cds.sequence, region(ORIGIN_SEQ, 50, 70))
        self.assertEqual(len(cds.sequence), 21)

    def test_peptide_is_verbatim(self):
        peptide = self.result.peptides[0]
        self.assertEqual(peptide.gene_name, "rps12")
        self.assertEqual(peptide.sequence, "MKVLA")

    def test_trna_is_reverse_complement(self):
        trna = self.result.trna[0]
        self.assertEqual(trna.gene_name, "trnH-GUG")
        self.assertEqual(trna.sequence, revcomp(region(ORIGIN_SEQ, 10, 20)))


class TestMultiLineEntries(unittest.TestCase):

    def test_location_continuation(self):
        wrapped = _scan(feature(
            "CDS", ["join(1..3,", "10..12,", "20..25)"],
            ['/gene="ndhB"', '/translation="MK"'],
        ))
        single = _scan(feature(
            "CDS", ["join(1..3,10..12,20..25)"],
            ['/gene="ndhB"', '/translation="MK"'],
        ))
        self.assertEqual(wrapped.cds[0].location_text, "join(1..3,10..12,20..25)")
        self.assertEqual(wrapped.cds[0].sequence, single.cds[0].sequence)
        self.assertEqual(
            wrapped.cds[0].sequence,
            region(ORIGIN_SEQ, 1, 3) + region(ORIGIN_SEQ, 10, 12) + region(ORIGIN_SEQ, 20, 25),
        )

    def test_complement_join_continuation(self):
        result = _scan(feature(
            "rRNA", ["complement(join(1..3,", "10..12))"], ['/gene="rrn5"'],
        ))
        self.assertEqual(
            result.rrna[0].sequence,
            revcomp(region(ORIGIN_SEQ, 1, 3)) + revcomp(region(ORIGIN_SEQ, 10, 12)),
        )

    def test_translation_continuation(self):
        wrapped = _scan(feature(
            "CDS", ["50..70"],
            ['/gene="psbA"', '/translation="MTAILERRES', 'ESLWGRFCNW', 'ITSTENRLYI"'],
        ))
        single = _scan(feature(
            "CDS", ["50..70"],
            ['/gene="psbA"', '/translation="MTAILERRESESLWGRFCNWITSTENRLYI"'],
        ))
        self.assertEqual(wrapped.peptides[0].sequence, "MTAILERRESESLWGRFCNWITSTENRLYI")
        self.assertEqual(wrapped.peptides, single.peptides)

    def test_gene_name_with_punctuation(self):
        result = _scan(feature("tRNA", ["30..40"], ['/gene="trnK-UUU (a,b)"']))
        self.assertEqual(result.trna[0].gene_name, "trnK-UUU (a,b)")


class TestOrderingAndCompletion(unittest.TestCase):

    def test_encounter_order_preserved(self):
        features = (
            feature("rRNA", ["100..120"], ['/gene="rrn16"'])
            + feature("rRNA", ["5..25"], ['/gene="rrn23"'])
            + feature("rRNA", ["complement(60..80)"], ['/gene="rrn4.5"'])
        )
        result = _scan(features)
        self.assertEqual([r.gene_name for r in result.rrna], ["rrn16", "rrn23", "rrn4.5"])

    def test_first_gene_name_kept(self):
        result = _scan(feature(
            "CDS", ["50..70"], ['/gene="first"', '/gene="second"', '/translation="M"'],
        ))
        self.assertEqual(result.cds[0].gene_name, "first")

    def test_cds_without_translation_discarded(self):
        features = (
            feature("CDS", ["50..70"], ['/gene="ycf1"', '/pseudo'])
            + feature("tRNA", ["complement(10..20)"], ['/gene="trnH-GUG"'])
        )
        with self.assertLogs("gbextract", level="WARNING"):
            result = _scan(features)
        self.assertEqual(result.cds, ())
        self.assertEqual(result.peptides, ())
        self.assertEqual(len(result.trna), 1)

    def test_rna_without_gene_discarded(self):
        with self.assertLogs("gbextract", level="WARNING"):
            result = _scan(feature("rRNA", ["5..25"], ['/product="16S ribosomal RNA"']))
        self.assertEqual(result.rrna, ())

    def test_unnamed_cds_labelled_by_location(self):
        result = _scan(feature("CDS", ["50..70"], ['/translation="MK"']))
        self.assertEqual(result.cds[0].gene_name, "")
        self.assertEqual(result.cds[0].label, "50..70")

    def test_unnamed_cds_peptide_shares_label(self):
        result = _scan(feature("CDS", ["50..70"], ['/translation="MK"']))
        self.assertEqual(result.peptides[0].label, "50..70")
        self.assertEqual(result.peptides[0].label, result.cds[0].label)

    def test_unterminated_translation_aborts(self):
        features = (
            feature("CDS", ["50..70"], ['/gene="rbcL"', '/translation="MSPQ'])
            + feature("tRNA", ["complement(10..20)"], ['/gene="trnH-GUG"'])
        )
        with self.assertRaises(GenbankError):
            _scan(features)

    def test_unterminated_location_aborts(self):
        with self.assertRaises(GenbankError):
            _scan(feature("CDS", ["join(1..3,"]))


class TestLimitsAndErrors(unittest.TestCase):

    def test_location_beyond_origin(self):
        with self.assertRaises(SequenceRangeError):
            _scan(feature("CDS", ["150..250"], ['/gene="bad"', '/translation="M"']))

    def test_peptide_limit(self):
        features = feature("CDS", ["50..70"], ['/gene="atpA"', '/translation="MKLV', 'AAAA"'])
        with self.assertRaises(SequenceLengthError):
            _scan(features, ParseLimits(max_peptide_length=6))

    def test_peptide_at_limit_accepted(self):
        features = feature("CDS", ["50..70"], ['/gene="atpA"', '/translation="MKLVAA"'])
        result = _scan(features, ParseLimits(max_peptide_length=6))
        self.assertEqual(result.peptides[0].sequence, "MKLVAA")

    def test_feature_length_limit(self):
        with self.assertRaises(SequenceLengthError):
            _scan(feature("tRNA", ["1..100"], ['/gene="trnX"']), ParseLimits(max_feature_length=50))


class TestScannerStates(unittest.TestCase):

    def test_state_transitions(self):
        scanner = FeatureScanner(ORIGIN_SEQ)
        self.assertIs(scanner.state, FeatureState.IDLE)
        scanner.feed("     CDS             join(1..3,\n")
        self.assertIs(scanner.state, FeatureState.CDS_LOCATION)
        scanner.feed("                     10..12)\n")
        self.assertIs(scanner.state, FeatureState.CDS_OPEN)
        scanner.feed('                     /gene="matK"\n')
        self.assertIs(scanner.state, FeatureState.CDS_OPEN)
        scanner.feed('                     /translation="MEK\n')
        self.assertIs(scanner.state, FeatureState.CDS_TRANSLATION)
        scanner.feed('                     FQ"\n')
        self.assertIs(scanner.state, FeatureState.IDLE)
        result = scanner.finish()
        self.assertEqual(result.peptides[0].sequence, "MEKFQ")

    def test_other_features_ignored(self):
        scanner = FeatureScanner(ORIGIN_SEQ)
        scanner.feed("     gene            1..20\n")
        scanner.feed('                     /gene="atpH"\n')
        self.assertIs(scanner.state, FeatureState.IDLE)
        self.assertEqual(scanner.finish().cds, ())

    def test_open_state_without_feature_raises(self):
        scanner = FeatureScanner(ORIGIN_SEQ)
        scanner.state = FeatureState.CDS_OPEN
        with self.assertRaises(GenbankError):
            scanner.feed('                     /gene="matK"\n')


if __name__ == '__main__':
    unittest.main(verbosity=2)
