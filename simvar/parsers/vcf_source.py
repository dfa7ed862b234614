"""
Variant sources backed by cyvcf2.

A :class:`VariantSource` wraps one VCF file and hands out cursors over its
records, either in file order or restricted to a list of intervals. Interval
restricted cursors run one indexed query per interval and close each query
before the next one is opened.
"""

import logging
import os
import re

import cyvcf2
import numpy as np

from simvar.errors import SourceError
from simvar.models import Genotype, Variant, NO_CALL
from simvar.parsers.intervals import normalize_intervals

INDEX_EXTENSIONS = ('.tbi', '.csi')
INFO_ID_PATTERN = re.compile(r'^##INFO=<ID=([^,>]+)')


def open_reader(path, require_index=False):
    """Open a cyvcf2 reader, failing early on missing files or indexes."""
    if not os.path.exists(path):
        raise SourceError(f"Variant file not found: {path}")
    if require_index and not any(os.path.exists(path + ext) for ext in INDEX_EXTENSIONS):
        raise SourceError(f"Interval queries need an index next to {path} (.tbi or .csi)")
    try:
        reader = cyvcf2.VCF(path)
    except (OSError, IOError) as e:
        raise SourceError(f"Cannot read variant file {path}: {e}") from e
    logging.info(f"Opened variant file: {path}")
    return reader


def narrow_float(value):
    """Undo the widening of a single precision value.

    cyvcf2 hands out Float fields as doubles of the stored float32, so 0.1 in
    the file reads as 0.10000000149. The shortest float32 text gives back the
    decimal that was written.
    """
    if isinstance(value, (float, np.floating)):
        return float(str(np.float32(value)))
    return value


def normalize_info_value(value):
    """Turn a cyvcf2 INFO value into a scalar or a list of scalars.

    Numeric per-allele fields arrive as tuples, string fields as the raw
    comma separated text. Float values are narrowed back to the written
    decimal.
    """
    if isinstance(value, (tuple, list)):
        return [narrow_float(entry) for entry in value]
    if isinstance(value, str) and ',' in value:
        return value.split(',')
    return narrow_float(value)


def variant_from_record(record, samples):
    """Convert a cyvcf2 record into a :class:`Variant`."""
    info = {}
    for key, value in dict(record.INFO).items():
        info[key] = normalize_info_value(value)

    genotypes = {}
    if samples:
        for sample, gt in zip(samples, record.genotypes or []):
            # last element is the phase flag; -2 pads haploid calls
            alleles = [allele if allele >= 0 else NO_CALL for allele in gt[:-1] if allele != -2]
            genotypes[sample] = Genotype(sample, alleles, bool(gt[-1]))

    # FILTERS tells PASS apart from a missing value, FILTER reports both as None
    filters = list(record.FILTERS)
    return Variant(
        contig=record.CHROM,
        pos=record.POS,
        ref=record.REF,
        alts=list(record.ALT),
        id=record.ID,
        qual=narrow_float(record.QUAL),
        filters=filters,
        info=info,
        genotypes=genotypes,
    )


class VariantCursor:
    """Single-use iterator over the variants of a source."""

    def __init__(self, reader, intervals, samples, owns_reader=False):
        self._reader = reader
        self._intervals = list(intervals)
        self._samples = samples
        self._owns_reader = owns_reader
        self._records = self._iterate()
        self.closed = False

    def _iterate(self):
        if not self._intervals:
            for record in self._reader:
                yield variant_from_record(record, self._samples)
            return

        for interval in self._intervals:
            logging.debug(f"Querying interval {interval.region}")
            query = self._reader(interval.region)
            try:
                for record in query:
                    yield variant_from_record(record, self._samples)
            finally:
                close = getattr(query, 'close', None)
                if close is not None:
                    close()

    def __iter__(self):
        return self

    def __next__(self):
        if self.closed:
            raise StopIteration
        return next(self._records)

    def close(self):
        if self.closed:
            return
        self.closed = True
        self._records.close()
        if self._owns_reader:
            self._reader.close()


class VariantSource:
    """A VCF file with an optional interval restriction.

    Args:
        path: Path to the VCF file
        intervals: Optional list of :class:`Interval` to restrict iteration to
        reader_factory: Callable ``(path, require_index)`` returning a
            cyvcf2-compatible reader
    """

    def __init__(self, path, intervals=None, reader_factory=open_reader):
        self.path = path
        self.intervals = normalize_intervals(intervals) if intervals else []
        self._reader_factory = reader_factory
        self._reader = reader_factory(path, require_index=bool(self.intervals))
        self._file_order_used = False
        self._cursors = []
        self.closed = False

    @property
    def samples(self):
        return list(self._reader.samples)

    def metadata_lines(self):
        """The ``##`` header lines in input order."""
        return [line for line in self._reader.raw_header.splitlines() if line.startswith('##')]

    def info_ids(self):
        """IDs declared by ``##INFO`` header lines."""
        ids = set()
        for line in self.metadata_lines():
            match = INFO_ID_PATTERN.match(line)
            if match:
                ids.add(match.group(1))
        return ids

    def open(self):
        """Open a new cursor over the records of this source."""
        if self.intervals:
            cursor = VariantCursor(self._reader, self.intervals, self.samples)
        elif not self._file_order_used:
            self._file_order_used = True
            cursor = VariantCursor(self._reader, [], self.samples)
        else:
            # a plain stream cannot rewind, so a second pass reads a fresh handle
            reader = self._reader_factory(self.path, require_index=False)
            cursor = VariantCursor(reader, [], self.samples, owns_reader=True)
        self._cursors.append(cursor)
        return cursor

    def close(self):
        if self.closed:
            return
        self.closed = True
        for cursor in self._cursors:
            cursor.close()
        self._cursors = []
        self._reader.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
