"""
Configuration records for samplers and whole runs.

A :class:`SamplerConfig` is validated once; ``validate`` reports every problem
it finds as a :class:`ConfigurationError` without raising, so that callers
can report them together.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from simvar.errors import ConfigurationError, ErrorKind
from simvar.models import Interval
from simvar.sampling.policies import (
    AlleleCountField,
    AlleleFrequencyField,
    FixedCount,
    FixedProbability,
    SamplePassthrough,
    SamplingPolicy,
)

DEFAULT_PROBABILITY = 1.0


@dataclass(frozen=True)
class SamplerConfig:
    """Settings of one genotype sampler.

    Attributes:
        probability: Fixed carrier probability per alternate allele
        af_id: INFO ID holding allele frequencies
        ac_id: INFO ID holding alternate allele counts (needs ``an_id``)
        an_id: INFO ID holding the total allele number (needs ``ac_id``)
        count: Exact number of alternate alleles to select
        sample: Existing sample whose genotypes are passed through
        seed: Seed of the sampler's random generator
        filters: Filters applied to every record before sampling
    """
    probability: Optional[float] = None
    af_id: Optional[str] = None
    ac_id: Optional[str] = None
    an_id: Optional[str] = None
    count: Optional[int] = None
    sample: Optional[str] = None
    seed: Optional[int] = None
    filters: Tuple = ()

    def active_policies(self) -> List[SamplingPolicy]:
        policies = []
        if self.probability is not None:
            policies.append(FixedProbability(self.probability))
        if self.af_id is not None:
            policies.append(AlleleFrequencyField(self.af_id))
        if self.ac_id is not None and self.an_id is not None:
            policies.append(AlleleCountField(self.ac_id, self.an_id))
        if self.count is not None:
            policies.append(FixedCount(self.count))
        if self.sample is not None:
            policies.append(SamplePassthrough(self.sample))
        return policies

    def policy(self) -> SamplingPolicy:
        """The single configured policy, ``FixedProbability(1.0)`` if none is set."""
        policies = self.active_policies()
        if len(policies) > 1:
            raise self._conflict(policies)
        if not policies:
            return FixedProbability(DEFAULT_PROBABILITY)
        return policies[0]

    def validate(self, info_ids: Optional[Sequence[str]] = None,
                 samples: Optional[Sequence[str]] = None) -> List[ConfigurationError]:
        """Check the configuration, optionally against a source header.

        Args:
            info_ids: INFO IDs declared by the source; skipped when None
            samples: Genotyped samples of the source; skipped when None

        Returns:
            List of problems found, empty when the configuration is usable
        """
        errors = []
        policies = self.active_policies()
        if len(policies) > 1:
            errors.append(self._conflict(policies))

        if (self.ac_id is None) != (self.an_id is None):
            given, missing = ('AC', 'AN') if self.ac_id is not None else ('AN', 'AC')
            errors.append(ConfigurationError(
                ErrorKind.MISSING_PAIRED_OPTION,
                f"An {given} identifier was given without the matching {missing} identifier"))

        if self.probability is not None and not 0.0 <= self.probability <= 1.0:
            errors.append(ConfigurationError(
                ErrorKind.INVALID_VALUE, f"Probability {self.probability} is outside [0, 1]"))
        if self.count is not None and self.count < 0:
            errors.append(ConfigurationError(
                ErrorKind.INVALID_VALUE, f"Variant amount {self.count} is negative"))

        if info_ids is not None:
            for identifier in (self.af_id, self.ac_id, self.an_id):
                if identifier is not None and identifier not in info_ids:
                    errors.append(ConfigurationError(
                        ErrorKind.UNDECLARED_INFO_ID,
                        f"Cannot find INFO ID '{identifier}' in the header of the VCF file. "
                        f"Every ID has to be declared in the header."))

        if samples is not None and self.sample is not None and self.sample not in samples:
            errors.append(ConfigurationError(
                ErrorKind.UNKNOWN_SAMPLE, f"Sample {self.sample} is not present in the VCF file"))
        return errors

    @staticmethod
    def _conflict(policies):
        names = ', '.join(type(policy).__name__ for policy in policies)
        return ConfigurationError(ErrorKind.CONFLICTING_POLICIES,
                                  f"Only one sampling policy may be set, got: {names}")


@dataclass
class RunConfig:
    """Everything needed for one spike-in run."""
    background_path: str
    background: SamplerConfig = field(default_factory=SamplerConfig)
    mutations_path: Optional[str] = None
    mutations: SamplerConfig = field(default_factory=SamplerConfig)
    intervals: List[Interval] = field(default_factory=list)
    single_sample: bool = False
    output: Optional[str] = None
    spike_in_log: Optional[str] = None
    seed: Optional[int] = None
