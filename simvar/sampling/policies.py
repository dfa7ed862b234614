"""
Sampling policies and the Hardy-Weinberg allele classification.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class FixedProbability:
    """Every alternate allele has the same carrier probability."""
    probability: float


@dataclass(frozen=True)
class AlleleFrequencyField:
    """Carrier probability read from an allele frequency INFO field."""
    af_id: str


@dataclass(frozen=True)
class AlleleCountField:
    """Carrier probability computed as AC / AN from two INFO fields."""
    ac_id: str
    an_id: str


@dataclass(frozen=True)
class FixedCount:
    """Exactly ``count`` alternate alleles selected over the whole source."""
    count: int


@dataclass(frozen=True)
class SamplePassthrough:
    """Genotypes of an existing sample are used as they are."""
    sample: str


SamplingPolicy = Union[FixedProbability, AlleleFrequencyField, AlleleCountField, FixedCount, SamplePassthrough]


def hardy_weinberg_thresholds(af: float) -> Tuple[float, float]:
    """Return ``(p_hom, p_any)`` for a carrier probability ``af``.

    ``af`` is the chance of carrying at least one copy, ``1 - (1 - q)^2`` for
    allele frequency ``q``, so the homozygous probability is ``q^2``.
    """
    return (1.0 - math.sqrt(1.0 - af)) ** 2, af


def classify_allele(u: float, af: Optional[float]) -> Optional[bool]:
    """Classify one draw ``u`` in [0, 1).

    Returns True for homozygous, False for heterozygous and None when the
    allele is not selected or ``af`` is unusable.
    """
    if af is None or not 0.0 < af <= 1.0:
        return None
    p_hom, p_any = hardy_weinberg_thresholds(af)
    if u <= p_hom:
        return True
    if u <= p_any:
        return False
    return None
