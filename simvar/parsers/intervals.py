"""
Parsing of genomic interval restrictions.

Intervals are given either as literal ``contig:start-end`` tokens or as a
file holding one such token per line.
"""

import logging
import os
import re

from simvar.errors import ConfigurationError, ErrorKind, SourceError
from simvar.models import Interval

INTERVAL_PATTERN = re.compile(r'^((chr)?(\d+|[XYM])):(\d+)-(\d+)$')

# Contig order of the sequence dictionary: autosomes, mitochondria, gonosomes
_SPECIAL_CONTIGS = {'MT': 23, 'M': 24, 'X': 25, 'Y': 26}


def parse_interval(token):
    """Parse a single ``contig:start-end`` token."""
    match = INTERVAL_PATTERN.match(token.strip())
    if not match:
        raise ConfigurationError(ErrorKind.WRONG_INTERVAL_FORMAT,
                                 f"Interval '{token}' does not match contig:start-end")
    start, end = int(match.group(4)), int(match.group(5))
    if end < start:
        raise ConfigurationError(ErrorKind.WRONG_INTERVAL_FORMAT,
                                 f"Interval '{token}' ends before it starts")
    return Interval(match.group(1), start, end)


def read_interval_file(path):
    """Read an interval list file, one token per line, blank lines ignored."""
    intervals = []
    try:
        with open(path, 'r') as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                intervals.append(parse_interval(line))
    except OSError as e:
        raise SourceError(f"Cannot read interval list {path}: {e}") from e
    logging.info(f"Read {len(intervals)} intervals from {path}")
    return intervals


def parse_intervals(tokens):
    """Resolve interval tokens into a sorted, duplicate-free interval list.

    Each token is tried as a literal interval first; anything else must be a
    readable interval list file.
    """
    intervals = []
    for token in tokens:
        try:
            intervals.append(parse_interval(token))
        except ConfigurationError:
            if not os.path.isfile(token):
                raise SourceError(
                    f"Interval '{token}' is neither contig:start-end nor a readable interval list file")
            intervals.extend(read_interval_file(token))
    return normalize_intervals(intervals)


def contig_sort_key(contig):
    """Sort key placing plain names before ``chr`` names, then natural chromosome order."""
    prefixed = contig.lower().startswith('chr')
    name = contig[3:] if prefixed else contig
    if name.isdigit():
        return (prefixed, int(name), '')
    if name.upper() in _SPECIAL_CONTIGS:
        return (prefixed, _SPECIAL_CONTIGS[name.upper()], '')
    return (prefixed, 100, name)


def normalize_intervals(intervals):
    """Sort intervals and merge duplicates and overlaps on the same contig."""
    ordered = sorted(set(intervals), key=lambda i: (contig_sort_key(i.contig), i.start, i.end))
    merged = []
    for interval in ordered:
        if merged and merged[-1].contig == interval.contig and interval.start <= merged[-1].end:
            last = merged.pop()
            interval = Interval(last.contig, last.start, max(last.end, interval.end))
        merged.append(interval)
    return merged
