"""
Ordered application of record filters.
"""

import re

from simvar.errors import ConfigurationError, ErrorKind
from simvar.filters.base import Comparison, FilterType, infer_literal
from simvar.filters.clinvar import apply_clinvar_filter
from simvar.filters.gonosomes import apply_gonosome_filter
from simvar.filters.info_field import InfoFieldFilter, apply_info_field_filter

FILTER_SPEC_PATTERN = re.compile(r'^([^=<>]+)(>=|<=|=)(.+)$')

_APPLY = {
    FilterType.INFO_FIELD: apply_info_field_filter,
    FilterType.CLINVAR: apply_clinvar_filter,
    FilterType.GONOSOME: apply_gonosome_filter,
}


def apply_filter(flt, variant):
    """Apply one filter; returns the (possibly rewritten) variant or None."""
    return _APPLY[flt.filter_type](flt, variant)


class FilterChain:
    """Filters applied in configured order; the first rejection ends the chain."""

    def __init__(self, filters=None):
        self.filters = tuple(filters or ())

    def apply(self, variant):
        for flt in self.filters:
            variant = apply_filter(flt, variant)
            if variant is None:
                return None
        return variant

    def __iter__(self):
        return iter(self.filters)

    def __len__(self):
        return len(self.filters)

    def __str__(self):
        return ', '.join(str(flt) for flt in self.filters) or 'no filters'


def parse_filter_spec(spec):
    """Build an INFO field filter from ``KEY=VALUE``, ``KEY>=VALUE`` or ``KEY<=VALUE``."""
    match = FILTER_SPEC_PATTERN.match(spec.strip())
    if not match:
        raise ConfigurationError(ErrorKind.INVALID_VALUE,
                                 f"Filter '{spec}' is not of the form KEY=VALUE, KEY>=VALUE or KEY<=VALUE")
    key, operator, literal = match.groups()
    return InfoFieldFilter(key.strip(), infer_literal(literal.strip()), Comparison(operator))
