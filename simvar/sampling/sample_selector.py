"""
Choice of the sample whose genotypes are passed through.
"""

import logging

import numpy as np

from simvar.errors import ConfigurationError, ErrorKind


def select_sample(samples, sample=None, seed=None):
    """Return ``sample`` if the source has it, otherwise a random source sample.

    Args:
        samples: Genotyped samples listed in the VCF header
        sample: Sample requested by name, or None to pick one at random
        seed: Seed for the random pick
    """
    samples = list(samples)
    if sample is not None:
        if sample not in samples:
            raise ConfigurationError(ErrorKind.UNKNOWN_SAMPLE,
                                     f"Sample {sample} is not present in the VCF file")
        return sample
    if not samples:
        raise ConfigurationError(ErrorKind.UNKNOWN_SAMPLE,
                                 "Cannot pick a sample: the VCF file has no genotyped samples")
    rng = np.random.default_rng(seed)
    chosen = samples[int(rng.integers(len(samples)))]
    logging.info(f"Selected sample {chosen} out of {len(samples)}")
    return chosen
