#!/usr/bin/env python3
"""
simvar - synthetic single-sample VCF generator

Samples a single individual from a background population VCF and optionally
spikes in mutations from a second VCF.

Usage:
  simvar -b background.vcf.gz [-m mutations.vcf.gz] [options]
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from dataclasses import replace

from simvar import __version__
from simvar.config import RunConfig, SamplerConfig
from simvar.errors import SimvarError
from simvar.filters import ClinVarFilter, GonosomeFilter, parse_filter_spec
from simvar.io.spike_log import write_spike_log
from simvar.io.vcf_writer import VcfWriter
from simvar.parsers.intervals import parse_intervals
from simvar.parsers.vcf_source import VariantSource
from simvar.sampling.genotype_sampler import GenotypeSampler
from simvar.sampling.sample_selector import select_sample
from simvar.sampling.spike_in import SpikeInMerger
from simvar.utils.logging import setup_logging


def build_parser():
    parser = argparse.ArgumentParser(
        prog='simvar',
        description='Sample a synthetic individual from a background VCF and spike in mutations.')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    input_group = parser.add_argument_group('Input Options')
    input_group.add_argument('-b', '--background-population', required=True,
                             help='VCF of the background population')
    input_group.add_argument('-m', '--mutations', help='VCF with mutations to spike in')
    input_group.add_argument('-i', '--interval', action='append', nargs='+', default=[],
                             help='Restrict to intervals (chr1:12113-12123) or interval list files '
                                  '(one interval per line)')

    background_group = parser.add_argument_group('Background Sampling')
    background_group.add_argument('--background-probability', type=float,
                                  help='Select each alternate allele with this probability (default 1.0)')
    background_group.add_argument('--background-variants-amount', type=int,
                                  help='Select exactly this number of alternate alleles')
    background_group.add_argument('--bAF', '--background-allele-frequency-identifier', dest='background_af',
                                  help='INFO ID of the allele frequency used as selection probability')
    background_group.add_argument('--bAC', '--background-alt-allele-count', dest='background_ac',
                                  help='INFO ID of the alternate allele count (used with --bAN)')
    background_group.add_argument('--bAN', '--background-allele-count', dest='background_an',
                                  help='INFO ID of the total allele number (used with --bAC)')
    background_group.add_argument('--single-sample', action='store_true',
                                  help='Use the genotypes of one random background sample')
    background_group.add_argument('--sample', help='Use the genotypes of this background sample')
    background_group.add_argument('--background-info-filter', action='append', default=[],
                                  help='Keep background variants passing KEY=VALUE, KEY>=VALUE or KEY<=VALUE')

    mutation_group = parser.add_argument_group('Mutation Sampling')
    mutation_group.add_argument('--mutations-probability', type=float,
                                help='Select each mutation allele with this probability (default 1.0)')
    mutation_group.add_argument('--mutations-variants-amount', type=int,
                                help='Select exactly this number of mutation alleles')
    mutation_group.add_argument('--mAF', '--mutations-allele-frequency-identifier', dest='mutations_af',
                                help='INFO ID of the allele frequency used as selection probability')
    mutation_group.add_argument('--mAC', '--mutations-alt-allele-count', dest='mutations_ac',
                                help='INFO ID of the alternate allele count (used with --mAN)')
    mutation_group.add_argument('--mAN', '--mutations-allele-count', dest='mutations_an',
                                help='INFO ID of the total allele number (used with --mAC)')
    mutation_group.add_argument('--mutations-sample', help='Use the genotypes of this mutation sample')
    mutation_group.add_argument('--mutations-info-filter', action='append', default=[],
                                help='Keep mutations passing KEY=VALUE, KEY>=VALUE or KEY<=VALUE, e.g. CLNSIG=5')

    filter_group = parser.add_argument_group('Filter Options')
    filter_group.add_argument('--remove-gonosomes', action='store_true',
                              help='Drop variants on the X and Y chromosomes')
    filter_group.add_argument('--clinvar', action='store_true',
                              help='Keep only pathogenic ClinVar mutations')
    filter_group.add_argument('--clinvar-significance', default='4,5',
                              help='Accepted CLNSIG codes (default: 4,5)')
    filter_group.add_argument('--clinvar-origin', default='1',
                              help='Accepted CLNORIGIN codes (default: 1)')
    filter_group.add_argument('--clinvar-database', default='OMIM',
                              help='Accepted CLNDSDB names (default: OMIM)')
    filter_group.add_argument('--clinvar-review-status',
                              help='Accepted CLNREVSTAT values (default: not checked)')

    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument('--output', '-o', help='Output VCF (default: stdout)')
    output_group.add_argument('--spike-in-log', help='TSV file describing the spiked-in mutations')
    output_group.add_argument('--seed', type=int, help='Random seed for reproducible output')

    debug_group = parser.add_argument_group('Debug Options')
    debug_group.add_argument('--debug', action='store_true', help='Enable debug output')
    debug_group.add_argument('--verbose', action='store_true', help='Enable verbose output without full debug')
    debug_group.add_argument('--log-file', help='Write log to this file')
    return parser


def _split(text, convert=str):
    return frozenset(convert(item.strip()) for item in text.split(',') if item.strip())


def build_run_config(args):
    """Translate parsed arguments into a :class:`RunConfig`."""
    common_filters = [GonosomeFilter()] if args.remove_gonosomes else []

    background_filters = common_filters + [parse_filter_spec(spec) for spec in args.background_info_filter]
    background = SamplerConfig(
        probability=args.background_probability,
        af_id=args.background_af,
        ac_id=args.background_ac,
        an_id=args.background_an,
        count=args.background_variants_amount,
        sample=args.sample,
        seed=args.seed,
        filters=tuple(background_filters),
    )

    mutation_filters = list(common_filters)
    if args.clinvar:
        review_statuses = _split(args.clinvar_review_status) if args.clinvar_review_status else None
        mutation_filters.append(ClinVarFilter(
            significances=_split(args.clinvar_significance, int),
            origins=_split(args.clinvar_origin, int),
            databases=_split(args.clinvar_database),
            review_statuses=review_statuses,
        ))
    mutation_filters.extend(parse_filter_spec(spec) for spec in args.mutations_info_filter)
    mutations = SamplerConfig(
        probability=args.mutations_probability,
        af_id=args.mutations_af,
        ac_id=args.mutations_ac,
        an_id=args.mutations_an,
        count=args.mutations_variants_amount,
        sample=args.mutations_sample,
        # an independent stream for the mutations sampler
        seed=None if args.seed is None else args.seed + 1,
        filters=tuple(mutation_filters),
    )

    tokens = [token for group in args.interval for token in group]
    return RunConfig(
        background_path=args.background_population,
        background=background,
        mutations_path=args.mutations,
        mutations=mutations,
        intervals=parse_intervals(tokens) if tokens else [],
        single_sample=args.single_sample,
        output=args.output,
        spike_in_log=args.spike_in_log,
        seed=args.seed,
    )


def check_run_config(config):
    """Raise the first header-independent configuration problem."""
    samplers = [config.background]
    if config.mutations_path:
        samplers.append(config.mutations)
    for sampler_config in samplers:
        errors = sampler_config.validate()
        if errors:
            raise errors[0]


def run(config):
    """Run a spike-in and write the output; returns the merger statistics."""
    check_run_config(config)

    # sources opened so far are closed if a later one fails to open
    with ExitStack() as stack:
        background_source = stack.enter_context(VariantSource(config.background_path, config.intervals))
        background_config = config.background
        if config.single_sample and background_config.sample is None:
            sample = select_sample(background_source.samples, seed=config.seed)
            background_config = replace(background_config, sample=sample)
        background = GenotypeSampler(background_source, background_config)

        mutations = None
        if config.mutations_path:
            mutation_source = stack.enter_context(VariantSource(config.mutations_path, config.intervals))
            mutations = GenotypeSampler(mutation_source, config.mutations)

        merger = stack.enter_context(SpikeInMerger(background, mutations, log=bool(config.spike_in_log)))
        with VcfWriter(config.output) as writer:
            writer.write_header(merger.header_lines(), merger.samples)
            for variant in merger:
                writer.add(variant)
        if config.spike_in_log:
            write_spike_log(config.spike_in_log, merger.logged_variants)

    logging.info(f"Wrote {writer.records} records: {merger.stats['background']} background, "
                 f"{merger.stats['mutations']} spiked in")
    return merger.stats


def main(argv=None):
    """Main function of the simvar command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug, log_file=args.log_file, verbose=args.verbose)

    try:
        config = build_run_config(args)
        run(config)
    except SimvarError as e:
        logging.error(str(e))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
