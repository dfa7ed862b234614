#!/usr/bin/env python3
"""
Tests for interval parsing.
"""

import os
import tempfile
import unittest
from simvar.errors import ConfigurationError, ErrorKind, SourceError
from simvar.models import Interval
from simvar.parsers.intervals import normalize_intervals, parse_interval, parse_intervals


class IntervalParsingTests(unittest.TestCase):
    """Test cases for interval tokens and interval list files."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = self.temp_dir.name

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_parse_literal(self):
        self.assertEqual(parse_interval('chr1:12113-12123'), Interval('chr1', 12113, 12123))
        self.assertEqual(parse_interval('X:1-10'), Interval('X', 1, 10))

    def test_parse_wrong_format(self):
        with self.assertRaises(ConfigurationError) as context:
            parse_interval('chr1:12113')
        self.assertEqual(context.exception.kind, ErrorKind.WRONG_INTERVAL_FORMAT)

    def test_parse_interval_file(self):
        path = os.path.join(self.output_dir, 'intervals.txt')
        with open(path, 'w') as f:
            f.write('2:5-10\n\n1:100-200\n1:100-200\n')
        intervals = parse_intervals([path])
        self.assertEqual(intervals, [Interval('1', 100, 200), Interval('2', 5, 10)])

    def test_mixed_tokens(self):
        path = os.path.join(self.output_dir, 'intervals.txt')
        with open(path, 'w') as f:
            f.write('1:300-400\n')
        intervals = parse_intervals(['1:1-50', path])
        self.assertEqual(intervals, [Interval('1', 1, 50), Interval('1', 300, 400)])

    def test_unresolvable_token(self):
        with self.assertRaises(SourceError):
            parse_intervals([os.path.join(self.output_dir, 'missing.txt')])

    def test_bad_line_in_file(self):
        path = os.path.join(self.output_dir, 'intervals.txt')
        with open(path, 'w') as f:
            f.write('1:1-10\nnot an interval\n')
        with self.assertRaises(ConfigurationError):
            parse_intervals([path])

    def test_normalize_sorts_in_chromosome_order(self):
        intervals = normalize_intervals([
            Interval('X', 1, 5), Interval('10', 1, 5), Interval('2', 1, 5), Interval('MT', 1, 5),
        ])
        self.assertEqual([i.contig for i in intervals], ['2', '10', 'MT', 'X'])

    def test_normalize_merges_overlaps(self):
        intervals = normalize_intervals([Interval('1', 50, 150), Interval('1', 1, 100), Interval('1', 200, 300)])
        self.assertEqual(intervals, [Interval('1', 1, 150), Interval('1', 200, 300)])


if __name__ == '__main__':
    unittest.main()
