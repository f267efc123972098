"""
Exception and warning types for the harmonization pipeline.

Configuration errors indicate a broken registry or config and abort a run.
Data-availability problems are never raised: they are emitted as
HarmonizationWarning and recorded in a DiagnosticReport.
"""


class HarmonizationError(Exception):
    """Base class for all errors raised by abs_harmonization."""


class ConfigurationError(HarmonizationError):
    """The concept registry or pipeline configuration is unusable."""


class UnknownConceptError(ConfigurationError, KeyError):
    """A concept key was looked up that the registry does not define."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ''


class DuplicateConceptError(ConfigurationError):
    """Two registry rows share the same concept key."""


class UnknownWaveError(ConfigurationError, ValueError):
    """A wave identifier outside W2..W6 was supplied."""


class MalformedRegistryError(ConfigurationError):
    """A registry row or registry file does not have the expected shape."""


class ScaleError(HarmonizationError, ValueError):
    """Scale logic was called with an unsupported width or spec."""


class HarmonizationWarning(UserWarning):
    """Non-fatal data-availability diagnostic."""
