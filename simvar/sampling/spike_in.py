"""
Merging of a sampled background population with spiked-in mutations.
"""

import logging
import re
from collections import Counter

from simvar.sampling.genotype_sampler import DEFAULT_SAMPLE_NAME

# Declared for records of large public catalogues that carry OLD_VARIANT without
# declaring it in their own header
OLD_VARIANT_LINE = ('##INFO=<ID=OLD_VARIANT,Number=.,Type=String,'
                    'Description="Original chr:pos:ref/alt before variant normalization">')
OLD_VARIANT_PATTERN = re.compile(r'^##INFO=<ID=OLD_VARIANT,')


class SpikeInMerger:
    """Interleave a background sampler and an optional mutation sampler.

    Both samplers must emit records in the same coordinate order. Records are
    emitted with a single genotype under the background sample name; records
    classified as mutation-sourced are collected for the spike-in log when
    ``log`` is set.
    """

    def __init__(self, background, mutations=None, log=False):
        self.background = background
        self.mutations = mutations
        self.log = log
        self.sample_name = background.sample_name
        self.stats = Counter()
        self._logged = {}
        self._same_contig = False

        # fill both lookahead slots up front
        self.background.peek()
        if self.mutations is not None:
            self.mutations.peek()

    @property
    def samples(self):
        return [self.sample_name]

    @property
    def logged_variants(self):
        """Mutation-sourced records in the order they were first emitted."""
        return list(self._logged.values())

    def header_lines(self):
        """Metadata of both sources, de-duplicated, plus the OLD_VARIANT declaration."""
        samplers = [self.background]
        if self.mutations is not None:
            samplers.append(self.mutations)

        lines = []
        seen = set()
        for sampler in samplers:
            for line in sampler.header_lines():
                if line in seen or OLD_VARIANT_PATTERN.match(line):
                    continue
                if line.startswith('##fileformat=') and any(l.startswith('##fileformat=') for l in lines):
                    continue
                seen.add(line)
                lines.append(line)
        lines.append(OLD_VARIANT_LINE)
        return lines

    def __iter__(self):
        return self

    def __next__(self):
        variant = self.next_variant()
        if variant is None:
            raise StopIteration
        return variant

    def next_variant(self):
        """Emit the next merged record, or None when both samplers are exhausted."""
        background = self.background.peek()
        mutation = self.mutations.peek() if self.mutations is not None else None

        if background is None and mutation is None:
            return None
        if mutation is None:
            return self._emit(background, from_mutations=False)
        if background is None:
            return self._emit(mutation, from_mutations=True)

        if background.contig == mutation.contig:
            self._same_contig = True
            if mutation.pos <= background.pos:
                return self._emit(mutation, from_mutations=True)
            return self._emit(background, from_mutations=False)

        if self._same_contig:
            # Workaround kept for output compatibility: when the mutation stream is
            # still on the contig the background just left, the background record is
            # emitted as mutation-sourced and only the mutation stream advances.
            self._same_contig = False
            logging.debug(f"Contig change at {background}; flushing pending mutation {mutation}")
            self.stats['flushed'] += 1
            return self._emit(background, from_mutations=True)

        self._same_contig = False
        return self._emit(background, from_mutations=False)

    def _emit(self, variant, from_mutations):
        if not from_mutations:
            self.background.advance()
            self.stats['background'] += 1
            return variant

        self.mutations.advance()
        variant = self._retarget(variant)
        self.stats['mutations'] += 1
        if self.log:
            self._logged.setdefault(variant.key(), variant)
        logging.debug(f"Spiked in {variant}")
        return variant

    def _retarget(self, variant):
        """Move the mutation genotype onto the output sample."""
        genotype = None
        if self.mutations.target_sample is not None:
            genotype = variant.genotype(self.mutations.target_sample)
        if genotype is None:
            genotype = variant.genotype(DEFAULT_SAMPLE_NAME)
        if genotype is None and len(variant.genotypes) == 1:
            genotype = next(iter(variant.genotypes.values()))
        if genotype is None:
            return variant
        return variant.with_genotypes([genotype.renamed(self.sample_name)])

    def close(self):
        self.background.close()
        if self.mutations is not None:
            self.mutations.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
