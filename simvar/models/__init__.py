"""
Data models for variants, genotypes and intervals.
"""

from simvar.models.variant import Genotype, Interval, Variant, NO_CALL

__all__ = ['Genotype', 'Interval', 'Variant', 'NO_CALL']
