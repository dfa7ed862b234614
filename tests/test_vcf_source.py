#!/usr/bin/env python3
"""
Tests for reading variants through cyvcf2 and the interval cursors.
"""

import os
import tempfile
import unittest
import numpy as np
from simvar.errors import SourceError
from simvar.models import Interval, NO_CALL
from simvar.parsers.vcf_source import VariantSource, normalize_info_value, open_reader
from vcf_fixtures import make_source, record, write_vcf


class VcfFileTests(unittest.TestCase):
    """Test cases reading a real VCF file with cyvcf2."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = self.temp_dir.name
        self.vcf_file = write_vcf(
            os.path.join(self.output_dir, 'input.vcf'),
            [
                ['1', 100, 'rs1', 'A', 'T,G', 50, 'PASS', 'AF=0.25,0.5;DP=10', 'GT', '0|1', '1/2'],
                ['1', 200, '.', 'C', 'A', '.', '.', 'DP=3', 'GT', './.', '0/0'],
            ],
            samples=['s1', 's2'],
        )

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_header(self):
        with VariantSource(self.vcf_file) as source:
            self.assertEqual(source.samples, ['s1', 's2'])
            self.assertTrue(source.metadata_lines()[0].startswith('##fileformat='))
            self.assertTrue({'AF', 'AC', 'AN', 'DP'}.issubset(source.info_ids()))

    def test_records(self):
        with VariantSource(self.vcf_file) as source:
            variants = list(source.open())

        self.assertEqual(len(variants), 2)
        first, second = variants
        self.assertEqual((first.contig, first.pos, first.ref), ('1', 100, 'A'))
        self.assertEqual(first.alts, ['T', 'G'])
        self.assertEqual(first.id, 'rs1')
        self.assertEqual(first.filters, ['PASS'])
        self.assertEqual(len(first.info['AF']), 2)
        self.assertAlmostEqual(first.info['AF'][0], 0.25)
        self.assertEqual(first.info['DP'], 10)
        self.assertEqual(first.genotypes['s1'].alleles, [0, 1])
        self.assertTrue(first.genotypes['s1'].phased)
        self.assertEqual(first.genotypes['s2'].alleles, [1, 2])
        self.assertFalse(first.genotypes['s2'].phased)

        self.assertIsNone(second.id)
        self.assertIsNone(second.qual)
        self.assertEqual(second.filters, [])
        self.assertEqual(second.genotypes['s1'].alleles, [NO_CALL, NO_CALL])

    def test_float_values_keep_written_decimals(self):
        path = write_vcf(os.path.join(self.output_dir, 'floats.vcf'), [
            ['1', 100, '.', 'A', 'T,G', 123.456, '.', 'AF=0.1,0.1234567'],
        ])
        with VariantSource(path) as source:
            variant = next(source.open())
        self.assertEqual(variant.qual, 123.456)
        self.assertEqual(variant.info['AF'], [0.1, 0.1234567])

    def test_missing_file(self):
        with self.assertRaises(SourceError):
            VariantSource(os.path.join(self.output_dir, 'missing.vcf'))

    def test_intervals_need_index(self):
        with self.assertRaises(SourceError):
            open_reader(self.vcf_file, require_index=True)
        with self.assertRaises(SourceError):
            VariantSource(self.vcf_file, intervals=[Interval('1', 1, 150)])


class CursorTests(unittest.TestCase):
    """Test cases for cursors over in-memory readers."""

    def setUp(self):
        self.records = [
            record('1', 100), record('1', 200), record('1', 300),
            record('2', 50), record('2', 500),
        ]

    def test_file_order(self):
        source = make_source(self.records)
        positions = [(v.contig, v.pos) for v in source.open()]
        self.assertEqual(positions, [('1', 100), ('1', 200), ('1', 300), ('2', 50), ('2', 500)])

    def test_intervals_are_queried_one_at_a_time(self):
        events = []
        source = make_source(self.records, events=events,
                             intervals=[Interval('2', 1, 100), Interval('1', 150, 350)])
        cursor = source.open()
        first = next(cursor)
        self.assertEqual((first.contig, first.pos), ('1', 200))
        # only the first interval is open so far
        self.assertEqual(events, [('open', '1:150-350')])

        rest = [(v.contig, v.pos) for v in cursor]
        self.assertEqual(rest, [('1', 300), ('2', 50)])
        self.assertEqual(events, [
            ('open', '1:150-350'), ('close', '1:150-350'),
            ('open', '2:1-100'), ('close', '2:1-100'),
        ])

    def test_closing_a_cursor_closes_the_open_query(self):
        events = []
        source = make_source(self.records, events=events, intervals=[Interval('1', 1, 1000)])
        cursor = source.open()
        next(cursor)
        cursor.close()
        self.assertEqual(events[-1], ('close', '1:1-1000'))
        self.assertEqual(list(cursor), [])

    def test_second_file_order_pass_uses_fresh_reader(self):
        source = make_source(self.records)
        first = source.open()
        self.assertEqual(len(list(first)), 5)
        second = source.open()
        self.assertEqual(len(list(second)), 5)
        self.assertEqual(len(source.readers), 2)

        second.close()
        self.assertTrue(source.readers[1].closed)
        source.close()
        self.assertTrue(source.readers[0].closed)

    def test_normalize_info_value(self):
        self.assertEqual(normalize_info_value((1, 2)), [1, 2])
        self.assertEqual(normalize_info_value('a,b'), ['a', 'b'])
        self.assertEqual(normalize_info_value('5'), '5')
        self.assertEqual(normalize_info_value(0.5), 0.5)
        # single precision values read back as the written decimal
        self.assertEqual(normalize_info_value(float(np.float32(0.1))), 0.1)
        self.assertEqual(normalize_info_value((float(np.float32(0.3)), 2)), [0.3, 2])


if __name__ == '__main__':
    unittest.main()
