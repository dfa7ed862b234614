"""
Synthesis of a single-sample genotype stream from a variant source.

For each record that survives the filter chain the sampler decides which
alternate alleles the synthetic individual carries and with which zygosity,
then emits the record with exactly one genotype, or skips it.
"""

import logging
from collections import Counter
from typing import Dict, Optional

import numpy as np

from simvar.config import SamplerConfig
from simvar.filters import FilterChain
from simvar.models import Genotype, Variant
from simvar.sampling.allele_counter import AlleleCounter
from simvar.sampling.policies import (
    AlleleCountField,
    AlleleFrequencyField,
    FixedCount,
    FixedProbability,
    SamplePassthrough,
    classify_allele,
)

DEFAULT_SAMPLE_NAME = "Sampled"
GT_FORMAT_LINE = '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">'


def build_genotype(sample: str, selected: Dict[int, bool]) -> Genotype:
    """Build the genotype for the selected alleles.

    Args:
        sample: Sample name of the genotype
        selected: 1-based alternate allele index -> True if homozygous

    A single selected allele gives ``a/a`` or ``0/a``; several selected
    alleles are combined without a reference copy.
    """
    if len(selected) == 1:
        allele, homozygous = next(iter(selected.items()))
        alleles = [allele, allele] if homozygous else [0, allele]
    else:
        alleles = sorted(selected)
    return Genotype(sample, alleles)


class GenotypeSampler:
    """Pull-based sampler over one :class:`VariantSource`.

    The configuration is checked against the source header on construction
    and a :class:`ConfigurationError` is raised for the first problem.
    ``peek`` returns the next sampled record without consuming it,
    ``advance`` consumes it; both return None once the source is exhausted.
    """

    def __init__(self, source, config: Optional[SamplerConfig] = None, rng=None):
        self.source = source
        self.config = config if config is not None else SamplerConfig()

        errors = self.config.validate(info_ids=source.info_ids(), samples=source.samples)
        if errors:
            for error in errors:
                logging.error(error.message)
            raise errors[0]

        self.policy = self.config.policy()
        self.filter_chain = FilterChain(self.config.filters)
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.stats = Counter()

        self._cursor = None
        self._exhausted = False
        self._peeked = False
        self._next = None

        # FixedCount bookkeeping: reserved global allele slots and the running position
        self._selected = []
        self._selected_index = 0
        self._position = -1
        if isinstance(self.policy, FixedCount):
            self._reserve_slots()

        logging.info(f"Sampling {source.path} with {self.policy} ({self.filter_chain})")

    @property
    def target_sample(self) -> Optional[str]:
        if isinstance(self.policy, SamplePassthrough):
            return self.policy.sample
        return None

    @property
    def sample_name(self) -> str:
        return self.target_sample or DEFAULT_SAMPLE_NAME

    @property
    def samples(self):
        return [self.sample_name]

    def header_lines(self):
        """Source metadata lines, with the GT format declared."""
        lines = self.source.metadata_lines()
        if not any(line.startswith('##FORMAT=<ID=GT,') for line in lines):
            lines.append(GT_FORMAT_LINE)
        return lines

    def _reserve_slots(self):
        total = AlleleCounter(self.source, self.filter_chain).count
        amount = self.policy.count
        if amount > total:
            logging.warning(f"Requested {amount} alleles but only {total} candidates exist; selecting all")
            amount = total
        permutation = self.rng.permutation(total)
        self._selected = sorted(int(slot) for slot in permutation[:amount])
        logging.debug(f"Reserved {len(self._selected)} allele slots out of {total}")

    def peek(self) -> Optional[Variant]:
        if not self._peeked:
            self._next = self._pull()
            self._peeked = True
        return self._next

    def advance(self) -> Optional[Variant]:
        variant = self.peek()
        self._peeked = False
        self._next = None
        return variant

    def __iter__(self):
        return self

    def __next__(self):
        variant = self.advance()
        if variant is None:
            raise StopIteration
        return variant

    def _pull(self):
        if self._exhausted:
            return None
        if self._cursor is None:
            self._cursor = self.source.open()

        for candidate in self._cursor:
            self.stats['read'] += 1
            candidate = self.filter_chain.apply(candidate)
            if candidate is None:
                self.stats['filtered'] += 1
                continue
            output = self.sample_variant(candidate)
            if output is not None:
                self.stats['sampled'] += 1
                return output

        self._exhausted = True
        self._cursor.close()
        logging.info(f"Finished {self.source.path}: {self.stats['read']} read, "
                     f"{self.stats['filtered']} filtered, {self.stats['sampled']} sampled")
        return None

    def sample_variant(self, candidate: Variant) -> Optional[Variant]:
        """Sample one filtered record; None when the record is skipped."""
        if isinstance(self.policy, SamplePassthrough):
            return self._passthrough(candidate)

        selected = self.select_alleles(candidate)
        if not selected:
            return None
        genotype = build_genotype(self.sample_name, selected)
        if all(allele == 0 for allele in genotype.alleles):
            return None
        return candidate.with_genotypes([genotype])

    def select_alleles(self, candidate: Variant) -> Dict[int, bool]:
        """Map of selected 1-based alternate allele index -> homozygous."""
        policy = self.policy
        if isinstance(policy, FixedProbability):
            frequencies = [policy.probability] * len(candidate.alts)
        elif isinstance(policy, AlleleFrequencyField):
            frequencies = self._per_allele_values(candidate, policy.af_id)
        elif isinstance(policy, AlleleCountField):
            frequencies = self._allele_count_frequencies(candidate, policy)
        elif isinstance(policy, FixedCount):
            return self._select_reserved(candidate)
        else:
            raise TypeError(f"Unsupported sampling policy {policy!r}")

        selected = {}
        if frequencies is None:
            return selected
        for index, af in enumerate(frequencies, 1):
            homozygous = classify_allele(self.rng.random(), af)
            if homozygous is not None:
                selected[index] = homozygous
        return selected

    def _select_reserved(self, candidate):
        selected = {}
        for index in range(1, len(candidate.alts) + 1):
            self._position += 1
            if (self._selected_index < len(self._selected)
                    and self._selected[self._selected_index] == self._position):
                self._selected_index += 1
                selected[index] = self.rng.random() <= 0.5
        return selected

    def _per_allele_values(self, candidate, key):
        """Float values of ``key`` aligned to the alternate alleles, or None.

        A scalar applies to the first alternate allele. Lists that do not
        line up with the alleles, and unparsable entries, count as absent.
        """
        value = candidate.info.get(key)
        if value is None:
            return None
        if isinstance(value, list):
            if len(value) != len(candidate.alts):
                logging.debug(f"Ignoring {key} of {candidate}: {len(value)} values "
                              f"for {len(candidate.alts)} alternate alleles")
                return None
            values = value
        else:
            values = [value]
        try:
            return [None if entry is None else float(entry) for entry in values]
        except (TypeError, ValueError):
            logging.warning(f"Ignoring {key} of {candidate}: cannot parse {value!r}")
            return None

    def _allele_count_frequencies(self, candidate, policy):
        counts = self._per_allele_values(candidate, policy.ac_id)
        totals = self._per_allele_values(candidate, policy.an_id)
        if counts is None or not totals or not totals[0]:
            return None
        total = totals[0]
        return [None if count is None else count / total for count in counts]

    def _passthrough(self, candidate):
        genotype = candidate.genotype(self.policy.sample)
        if genotype is None or genotype.is_no_call or genotype.is_mixed or genotype.is_hom_ref:
            return None
        if not genotype.non_ref_alleles():
            return None
        return candidate.with_genotypes([genotype])

    def close(self):
        if self._cursor is not None:
            self._cursor.close()
        self.source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
