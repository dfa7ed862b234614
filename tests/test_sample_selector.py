#!/usr/bin/env python3
"""
Tests for choosing the passthrough sample.
"""

import unittest
from simvar.errors import ConfigurationError, ErrorKind
from simvar.sampling.sample_selector import select_sample


class SampleSelectorTests(unittest.TestCase):
    """Test cases for sample selection."""

    def test_named_sample(self):
        self.assertEqual(select_sample(['a', 'b'], sample='b'), 'b')

    def test_unknown_sample(self):
        with self.assertRaises(ConfigurationError) as context:
            select_sample(['a', 'b'], sample='c')
        self.assertEqual(context.exception.kind, ErrorKind.UNKNOWN_SAMPLE)

    def test_random_sample_is_reproducible(self):
        samples = ['a', 'b', 'c', 'd']
        chosen = select_sample(samples, seed=3)
        self.assertIn(chosen, samples)
        self.assertEqual(select_sample(samples, seed=3), chosen)

    def test_no_samples(self):
        with self.assertRaises(ConfigurationError):
            select_sample([])


if __name__ == '__main__':
    unittest.main()
