"""
VCF output.

Records are written as VCF text, to stdout, to a plain file or, for paths
ending in ``.gz``/``.bgz``, BGZF compressed so that the output can be
indexed with tabix.
"""

import math
import sys

from Bio import bgzf

MISSING_VALUE = '.'
COLUMNS = ['#CHROM', 'POS', 'ID', 'REF', 'ALT', 'QUAL', 'FILTER', 'INFO', 'FORMAT']
COMPRESSED_EXTENSIONS = ('.gz', '.bgz')


def format_float(value):
    """Shortest text that reads back as ``value``; '1.0' is written as '1'."""
    if math.isnan(value):
        return MISSING_VALUE
    text = repr(float(value))
    if text.endswith('.0'):
        text = text[:-2]
    return text


def format_value(value):
    """Format an INFO value: lists comma joined, flags empty, missing as '.'."""
    if value is None:
        return MISSING_VALUE
    if isinstance(value, bool):
        return '' if value else MISSING_VALUE
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return MISSING_VALUE
        return ','.join(format_value(entry) for entry in value)
    return str(value)


def format_qual(qual):
    if qual is None:
        return MISSING_VALUE
    return format_float(qual)


def format_info(info):
    fields = []
    for key, value in info.items():
        if value is True:
            fields.append(key)
        elif value is not False:
            fields.append(f"{key}={format_value(value)}")
    return ';'.join(fields) or MISSING_VALUE


def is_compressed(path):
    return bool(path) and path.endswith(COMPRESSED_EXTENSIONS)


class VcfWriter:
    """Write variants with a GT column per sample to a file or stdout."""

    def __init__(self, path=None):
        self.path = path
        self.compressed = is_compressed(path)
        if self.compressed:
            self._out = bgzf.BgzfWriter(path, 'wb')
        elif path:
            self._out = open(path, 'w')
        else:
            self._out = sys.stdout
        self.samples = []
        self.records = 0

    def _write(self, line):
        if self.compressed:
            self._out.write((line + '\n').encode('utf-8'))
        else:
            self._out.write(line + '\n')

    def write_header(self, metadata_lines, samples):
        self.samples = list(samples)
        for line in metadata_lines:
            self._write(line)
        self._write('\t'.join(COLUMNS + self.samples))

    def add(self, variant):
        fields = [
            variant.contig,
            str(variant.pos),
            variant.id or MISSING_VALUE,
            variant.ref,
            ','.join(variant.alts) or MISSING_VALUE,
            format_qual(variant.qual),
            ';'.join(variant.filters) or MISSING_VALUE,
            format_info(variant.info),
            'GT',
        ]
        for sample in self.samples:
            genotype = variant.genotype(sample)
            fields.append(genotype.to_vcf() if genotype is not None else './.')
        self._write('\t'.join(fields))
        self.records += 1

    def close(self):
        if self.path:
            self._out.close()
        else:
            self._out.flush()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
