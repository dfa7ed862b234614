"""
Counting pre-pass over a variant source.
"""

import logging
import time

from simvar.filters import FilterChain


def count_candidate_alleles(variant, sample=None):
    """Alternate alleles a record contributes to the candidate pool.

    With a sample, only the non-reference alleles present in that sample's
    genotype count.
    """
    if sample is None:
        return len(variant.alts)
    genotype = variant.genotype(sample)
    if genotype is None:
        return 0
    return len(genotype.non_ref_alleles())


class AlleleCounter:
    """Count the alternate alleles of all records that survive a filter chain.

    The count is computed on first access from a fresh cursor of the source
    and cached afterwards.
    """

    def __init__(self, source, filter_chain=None, sample=None):
        self.source = source
        self.filter_chain = filter_chain if filter_chain is not None else FilterChain()
        self.sample = sample
        self._count = None

    @property
    def count(self):
        if self._count is None:
            self._count = self._count_alleles()
        return self._count

    def _count_alleles(self):
        start_time = time.time()
        total = 0
        records = 0
        cursor = self.source.open()
        try:
            for variant in cursor:
                variant = self.filter_chain.apply(variant)
                if variant is None:
                    continue
                records += 1
                total += count_candidate_alleles(variant, self.sample)
        finally:
            cursor.close()

        elapsed = time.time() - start_time
        logging.info(f"Counted {total} candidate alternate alleles in {records} records "
                     f"of {self.source.path} ({elapsed:.2f}s)")
        return total
