"""
Data models for variant records, genotypes and genomic intervals.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

# Allele reference used for an uncalled allele in a genotype
NO_CALL = -1


@dataclass
class Genotype:
    """Allele indices carried by one sample; 0 is the reference allele."""
    sample: str
    alleles: List[int]
    phased: bool = False

    @property
    def is_no_call(self) -> bool:
        return all(allele == NO_CALL for allele in self.alleles)

    @property
    def is_mixed(self) -> bool:
        """Some alleles called, some not (e.g. ``./1``)."""
        called = [allele for allele in self.alleles if allele != NO_CALL]
        return 0 < len(called) < len(self.alleles)

    @property
    def is_hom_ref(self) -> bool:
        return bool(self.alleles) and all(allele == 0 for allele in self.alleles)

    def non_ref_alleles(self) -> List[int]:
        """Distinct alternate allele indices present in this genotype, ascending."""
        return sorted({allele for allele in self.alleles if allele > 0})

    def renamed(self, sample: str) -> 'Genotype':
        return Genotype(sample, list(self.alleles), self.phased)

    def to_vcf(self) -> str:
        separator = '|' if self.phased else '/'
        return separator.join('.' if allele == NO_CALL else str(allele) for allele in self.alleles)


def _key_value(value):
    # missing floats are NaN, which never equals itself
    if isinstance(value, list):
        return tuple(_key_value(entry) for entry in value)
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


@dataclass
class Variant:
    """A single VCF record.

    ``alts`` order is significant: per-allele INFO lists and genotype allele
    indices (``alts[i]`` is allele ``i + 1``) are aligned to it.
    """
    contig: str
    pos: int
    ref: str
    alts: List[str] = field(default_factory=list)
    id: Optional[str] = None
    qual: Optional[float] = None
    filters: List[str] = field(default_factory=list)
    info: Dict[str, Any] = field(default_factory=dict)
    genotypes: Dict[str, Genotype] = field(default_factory=dict)

    @property
    def alleles(self) -> List[str]:
        return [self.ref] + list(self.alts)

    def genotype(self, sample: str) -> Optional[Genotype]:
        return self.genotypes.get(sample)

    def with_genotypes(self, genotypes: List[Genotype]) -> 'Variant':
        """Copy of this record carrying exactly the given genotypes."""
        return replace(self, genotypes={g.sample: g for g in genotypes})

    def with_alleles(self, keep: List[int]) -> 'Variant':
        """Copy of this record restricted to the alternate alleles in ``keep``.

        ``keep`` holds 1-based allele indices. Genotype alleles are remapped to
        the new allele numbering and alleles that were dropped become no-calls.
        INFO lists with one entry per original alternate allele are pruned in
        step so that per-allele data stays aligned.
        """
        keep = sorted(set(keep))
        remap = {0: 0}
        for new_index, old_index in enumerate(keep, 1):
            remap[old_index] = new_index

        genotypes = {}
        for sample, genotype in self.genotypes.items():
            alleles = [remap.get(allele, NO_CALL) for allele in genotype.alleles]
            genotypes[sample] = Genotype(sample, alleles, genotype.phased)

        info = {}
        for key, value in self.info.items():
            if isinstance(value, list) and len(value) == len(self.alts):
                info[key] = [value[i - 1] for i in keep]
            else:
                info[key] = value

        return replace(self,
                       alts=[self.alts[i - 1] for i in keep],
                       info=info,
                       genotypes=genotypes)

    def key(self) -> Tuple:
        """Hashable value identity, used to de-duplicate logged records."""
        info = tuple((k, _key_value(v)) for k, v in self.info.items())
        genotypes = tuple((s, tuple(g.alleles), g.phased) for s, g in self.genotypes.items())
        return (self.contig, self.pos, self.id, self.ref, tuple(self.alts),
                self.qual, tuple(self.filters), info, genotypes)

    def __str__(self):
        return f"{self.contig}:{self.pos} {self.ref}>{','.join(self.alts) or '.'}"


@dataclass(frozen=True)
class Interval:
    """Closed 1-based genomic interval."""
    contig: str
    start: int
    end: int

    @property
    def region(self) -> str:
        return f"{self.contig}:{self.start}-{self.end}"

    def __str__(self):
        return self.region
