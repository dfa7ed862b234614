"""
INFO field comparison filter.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from simvar.filters.base import Comparison, FilterType


@dataclass(frozen=True)
class InfoFieldFilter:
    """Compare the INFO value under ``key`` against a typed literal.

    Records without the key pass unchanged. Per-allele lists prune the
    alternate alleles whose entry fails the comparison.
    """
    key: str
    literal: Any
    comparison: Comparison = Comparison.EQUAL

    filter_type: ClassVar[FilterType] = FilterType.INFO_FIELD

    def matches(self, value):
        if value is None or isinstance(value, bool):
            return False
        try:
            if isinstance(self.literal, str):
                typed = str(value)
            elif isinstance(value, (int, float)):
                typed = value
            else:
                typed = float(value)
        except (TypeError, ValueError):
            return False
        return self.comparison.holds(typed, self.literal)

    def __str__(self):
        return f"{self.key}{self.comparison.value}{self.literal}"


def apply_info_field_filter(flt, variant):
    if flt.key not in variant.info:
        return variant

    value = variant.info[flt.key]
    if not isinstance(value, list):
        return variant if flt.matches(value) else None

    if len(value) == len(variant.alts):
        keep = [index for index, entry in enumerate(value, 1) if flt.matches(entry)]
        if not keep:
            return None
        if len(keep) == len(variant.alts):
            return variant
        logging.debug(f"{flt} keeps alleles {keep} of {variant}")
        return variant.with_alleles(keep)

    # list not aligned to the alleles: keep the record if any entry matches
    if any(flt.matches(entry) for entry in value):
        return variant
    return None
