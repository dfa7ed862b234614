"""
Shared test doubles: an in-memory stand-in for the cyvcf2 reader and helpers
to build records and small VCF files.
"""

from simvar.parsers.vcf_source import VariantSource

DEFAULT_HEADER = [
    '##fileformat=VCFv4.2',
    '##INFO=<ID=AF,Number=A,Type=Float,Description="Allele frequency">',
    '##INFO=<ID=AC,Number=A,Type=Integer,Description="Alternate allele count">',
    '##INFO=<ID=AN,Number=1,Type=Integer,Description="Total allele number">',
    '##INFO=<ID=DP,Number=1,Type=Integer,Description="Depth">',
    '##contig=<ID=1,length=249250621>',
    '##contig=<ID=2,length=243199373>',
]


class FakeRecord:
    """Attributes of a cyvcf2 Variant used by the source."""

    def __init__(self, CHROM, POS, REF, ALT, ID=None, QUAL=None, FILTERS=None, INFO=None, genotypes=None):
        self.CHROM = CHROM
        self.POS = POS
        self.REF = REF
        self.ALT = ALT
        self.ID = ID
        self.QUAL = QUAL
        self.FILTERS = list(FILTERS or [])
        self.INFO = INFO or {}
        self.genotypes = genotypes or []


def parse_gt(text):
    """'0|1' -> [0, 1, True] as cyvcf2 reports it."""
    phased = '|' in text
    alleles = text.replace('|', '/').split('/')
    return [-1 if allele == '.' else int(allele) for allele in alleles] + [phased]


def record(contig, pos, ref='A', alts=('T',), info=None, genotypes=None, samples=(), id=None, filters=()):
    """Build a FakeRecord; ``genotypes`` maps sample name to a GT string."""
    gts = []
    if samples:
        genotypes = genotypes or {}
        gts = [parse_gt(genotypes.get(sample, './.')) for sample in samples]
    return FakeRecord(contig, pos, ref, list(alts), ID=id, FILTERS=filters, INFO=dict(info or {}), genotypes=gts)


class FakeReader:
    """In-memory reader with the cyvcf2 surface: iteration, region calls, header."""

    def __init__(self, records, samples=(), header_lines=None, events=None):
        self._records = list(records)
        self.samples = list(samples)
        lines = list(DEFAULT_HEADER if header_lines is None else header_lines)
        columns = '#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO'
        if self.samples:
            columns += '\tFORMAT\t' + '\t'.join(self.samples)
        self.raw_header = '\n'.join(lines + [columns]) + '\n'
        self.events = events if events is not None else []
        self.closed = False

    def __iter__(self):
        return iter(self._records)

    def __call__(self, region):
        contig, span = region.rsplit(':', 1)
        start, end = (int(value) for value in span.split('-'))
        return self._query(region, contig, start, end)

    def _query(self, region, contig, start, end):
        self.events.append(('open', region))
        try:
            for rec in self._records:
                if rec.CHROM == contig and start <= rec.POS <= end:
                    yield rec
        finally:
            self.events.append(('close', region))

    def close(self):
        self.closed = True


def make_source(records, samples=(), header_lines=None, intervals=None, events=None, path='memory.vcf'):
    """A VariantSource reading from FakeReaders over ``records``."""
    readers = []

    def factory(source_path, require_index=False):
        reader = FakeReader(records, samples, header_lines, events)
        readers.append(reader)
        return reader

    source = VariantSource(path, intervals=intervals, reader_factory=factory)
    source.readers = readers
    return source


def write_vcf(path, rows, samples=(), header_lines=None):
    """Write a plain-text VCF; ``rows`` are lists of column values."""
    lines = list(DEFAULT_HEADER if header_lines is None else header_lines)
    if samples:
        lines.append('##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">')
    columns = ['#CHROM', 'POS', 'ID', 'REF', 'ALT', 'QUAL', 'FILTER', 'INFO']
    if samples:
        columns += ['FORMAT'] + list(samples)
    with open(path, 'w') as f:
        for line in lines:
            f.write(line + '\n')
        f.write('\t'.join(columns) + '\n')
        for row in rows:
            f.write('\t'.join(str(value) for value in row) + '\n')
    return path
