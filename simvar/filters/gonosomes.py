"""
Removal of records on the sex chromosomes.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from simvar.filters.base import FilterType

GONOSOME_PATTERN = re.compile(r'^(chr)?(x|y|23|24)$', re.IGNORECASE)


@dataclass(frozen=True)
class GonosomeFilter:
    """Drop every record on X or Y, in any common spelling."""

    filter_type: ClassVar[FilterType] = FilterType.GONOSOME

    def __str__(self):
        return "remove-gonosomes"


def is_gonosome(contig):
    return bool(GONOSOME_PATTERN.match(contig))


def apply_gonosome_filter(flt, variant):
    if is_gonosome(variant.contig):
        return None
    return variant
