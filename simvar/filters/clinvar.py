"""
ClinVar annotation filter.

ClinVar VCFs describe each clinical allele with a set of aligned INFO lists:
``CLNALLE`` (1-based index of the alternate allele), ``CLNORIGIN``,
``CLNSIG``, ``CLNDSDB``, ``CLNDSDBID`` and, in newer releases,
``CLNREVSTAT``. Within one clinical allele, ``CLNSIG``/``CLNDSDB``/
``CLNDSDBID``/``CLNREVSTAT`` are ``|`` separated, and each database entry may
list several databases separated by ``:``.
"""

import logging
from dataclasses import dataclass, field
from typing import ClassVar, FrozenSet, Optional

from simvar.errors import DataError
from simvar.filters.base import FilterType

REQUIRED_FIELDS = ('CLNSIG', 'CLNALLE', 'CLNDSDB', 'CLNDSDBID', 'CLNORIGIN')


@dataclass(frozen=True)
class ClinVarFilter:
    """Keep alleles with an accepted significance reported by an accepted database.

    ``review_statuses`` is only checked when given.
    """
    significances: FrozenSet[int] = field(default_factory=lambda: frozenset({4, 5}))
    origins: FrozenSet[int] = field(default_factory=lambda: frozenset({1}))
    databases: FrozenSet[str] = field(default_factory=lambda: frozenset({'OMIM'}))
    review_statuses: Optional[FrozenSet[str]] = None

    filter_type: ClassVar[FilterType] = FilterType.CLINVAR

    def __str__(self):
        return (f"clinvar(sig={sorted(self.significances)}, origin={sorted(self.origins)}, "
                f"db={sorted(self.databases)})")


def _as_list(value):
    return value if isinstance(value, list) else [value]


def _to_int(text):
    try:
        return int(str(text).strip())
    except ValueError:
        return None


def apply_clinvar_filter(flt, variant):
    info = variant.info
    if not all(key in info for key in REQUIRED_FIELDS):
        return variant

    alleles = _as_list(info['CLNALLE'])
    sigs = _as_list(info['CLNSIG'])
    dbs = _as_list(info['CLNDSDB'])
    ids = _as_list(info['CLNDSDBID'])
    origins = _as_list(info['CLNORIGIN'])
    revstats = _as_list(info['CLNREVSTAT']) if flt.review_statuses is not None and 'CLNREVSTAT' in info else None

    if not len(alleles) == len(sigs) == len(dbs) == len(ids) == len(origins):
        logging.warning(f"Skipping {variant}: ClinVar fields differ in the number of clinical alleles")
        return None

    # significance -> database -> record ids, all in first-seen order
    matches = {}
    keep = []
    for i, allele_text in enumerate(alleles):
        allele = _to_int(allele_text)
        origin = _to_int(origins[i])
        if allele is None or allele <= 0 or origin not in flt.origins:
            continue
        if allele > len(variant.alts):
            logging.warning(f"Skipping clinical allele {allele} of {variant}: no such alternate allele")
            continue

        sigs_of_allele = str(sigs[i]).split('|')
        dbs_of_allele = str(dbs[i]).split('|')
        ids_of_allele = str(ids[i]).split('|')
        if len(sigs_of_allele) != len(dbs_of_allele):
            logging.warning(f"Skipping {variant}: {len(sigs_of_allele)} significances "
                            f"but {len(dbs_of_allele)} database entries for allele {allele}")
            return None
        revstats_of_allele = None
        if revstats is not None:
            if i >= len(revstats):
                raise DataError(f"{variant}: CLNREVSTAT is missing clinical allele {i + 1}")
            revstats_of_allele = str(revstats[i]).split('|')
            if len(revstats_of_allele) != len(sigs_of_allele):
                raise DataError(f"{variant}: {len(sigs_of_allele)} significances but "
                                f"{len(revstats_of_allele)} review statuses for allele {allele}")

        use = False
        for j, sig_text in enumerate(sigs_of_allele):
            sig = _to_int(sig_text)
            if sig not in flt.significances:
                continue
            if revstats_of_allele is not None and revstats_of_allele[j].strip() not in flt.review_statuses:
                continue
            sub_dbs = dbs_of_allele[j].split(':')
            sub_ids = ids_of_allele[j].split(':') if j < len(ids_of_allele) else []
            for k, db in enumerate(sub_dbs):
                if db not in flt.databases:
                    continue
                record_id = sub_ids[k].strip() if k < len(sub_ids) else '.'
                ids_by_db = matches.setdefault(sig, {}).setdefault(db, [])
                if record_id not in ids_by_db:
                    ids_by_db.append(record_id)
                use = True
        if use and allele not in keep:
            keep.append(allele)

    if not keep:
        return None

    attributes = {'CLNSIG': sorted(matches)}
    for sig in sorted(matches):
        for db, record_ids in matches[sig].items():
            collected = attributes.setdefault(db, [])
            collected.extend(record_id for record_id in record_ids if record_id not in collected)

    filtered = variant.with_alleles(keep)
    filtered.info = attributes
    return filtered
