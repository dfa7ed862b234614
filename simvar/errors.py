"""
Exception hierarchy for simvar.

Configuration and source errors are fatal and stop a run before streaming
starts. Data errors describe a single broken record.
"""

from enum import Enum


class ErrorKind(Enum):
    """Kinds of configuration problems detected before streaming."""
    CONFLICTING_POLICIES = "conflicting_policies"
    MISSING_PAIRED_OPTION = "missing_paired_option"
    UNDECLARED_INFO_ID = "undeclared_info_id"
    INVALID_VALUE = "invalid_value"
    UNKNOWN_SAMPLE = "unknown_sample"
    WRONG_INTERVAL_FORMAT = "wrong_interval_format"


class SimvarError(Exception):
    """Base class for all simvar errors."""


class ConfigurationError(SimvarError):
    """Raised when a sampler or run configuration is inconsistent."""

    def __init__(self, kind, message):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self):
        return f"ConfigurationError({self.kind.name}, {self.message!r})"


class SourceError(SimvarError):
    """Raised when a variant source cannot be opened or queried."""


class DataError(SimvarError):
    """Raised when a record violates an invariant that cannot be recovered."""
