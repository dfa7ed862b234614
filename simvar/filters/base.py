"""
Shared definitions for record filters.
"""

import re
from enum import Enum

INT_PATTERN = re.compile(r'^-?\d+$')
FLOAT_PATTERN = re.compile(r'^-?\d+\.\d+$')


class FilterType(Enum):
    """Kinds of record filters."""
    # keep records (or alleles) whose INFO value compares to a literal
    INFO_FIELD = "info_field"
    # keep pathogenic ClinVar alleles of accepted origin and database
    CLINVAR = "clinvar"
    # drop records on the X and Y chromosomes
    GONOSOME = "gonosome"


class Comparison(Enum):
    """Comparison applied by an INFO field filter, as ``record value <op> literal``."""
    EQUAL = "="
    GREATER_OR_EQUAL = ">="
    LESS_OR_EQUAL = "<="

    def holds(self, value, literal):
        if self is Comparison.EQUAL:
            return value == literal
        if self is Comparison.GREATER_OR_EQUAL:
            return value >= literal
        return value <= literal


def infer_literal(text):
    """Type a filter literal: integers, then decimals, otherwise the string itself."""
    if INT_PATTERN.match(text):
        return int(text)
    if FLOAT_PATTERN.match(text):
        return float(text)
    return text
