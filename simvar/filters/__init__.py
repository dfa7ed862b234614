"""
Record filters applied before sampling.
"""

from simvar.filters.base import Comparison, FilterType, infer_literal
from simvar.filters.chain import FilterChain, apply_filter, parse_filter_spec
from simvar.filters.clinvar import ClinVarFilter
from simvar.filters.gonosomes import GonosomeFilter
from simvar.filters.info_field import InfoFieldFilter

__all__ = [
    'ClinVarFilter', 'Comparison', 'FilterChain', 'FilterType', 'GonosomeFilter',
    'InfoFieldFilter', 'apply_filter', 'infer_literal', 'parse_filter_spec',
]
