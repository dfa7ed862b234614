"""
Tab-separated log of the spiked-in records.

The header holds the fixed VCF columns followed by the INFO keys of the first
logged record; later records leave keys they lack as '.'.
"""

import logging

from simvar.io.vcf_writer import MISSING_VALUE, format_qual, format_value

FIXED_COLUMNS = ['#CHROM', 'POS', 'ID', 'REF', 'ALT', 'QUAL', 'FILTER']


class SpikeLogWriter:

    def __init__(self, path):
        self.path = path
        self._out = open(path, 'w')
        self.header = None

    def write_header(self, variant):
        self.header = FIXED_COLUMNS + list(variant.info.keys())
        self._out.write('\t'.join(self.header) + '\n')

    def add(self, variant):
        if self.header is None:
            self.write_header(variant)
        row = [
            variant.contig,
            str(variant.pos),
            variant.id or MISSING_VALUE,
            variant.ref,
            ','.join(variant.alts) or MISSING_VALUE,
            format_qual(variant.qual),
            ';'.join(variant.filters) or MISSING_VALUE,
        ]
        for key in self.header[len(FIXED_COLUMNS):]:
            row.append(format_value(variant.info.get(key)))
        self._out.write('\t'.join(row) + '\n')

    def close(self):
        self._out.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def write_spike_log(path, variants):
    """Write all logged records; returns the number of rows written."""
    count = 0
    with SpikeLogWriter(path) as writer:
        for variant in variants:
            writer.add(variant)
            count += 1
    logging.info(f"Wrote {count} spiked-in records to {path}")
    return count
