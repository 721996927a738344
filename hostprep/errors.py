"""
Exception hierarchy for hostprep.

InvalidConfiguration and ConfigurationLoadError describe bad input.
AccessorError and its subclasses describe failures reading or writing
live machine state.
"""


class HostprepError(Exception):
    """Base class for all hostprep errors."""
    pass


class InvalidConfiguration(HostprepError):
    """Configuration record failed validation. Never reaches the accessor."""
    pass


class ConfigurationLoadError(HostprepError):
    """Configuration artifact is missing, unreadable, or incomplete."""
    pass


class AccessorError(HostprepError):
    """Base class for system accessor failures."""
    pass


class AccessDenied(AccessorError):
    """Insufficient privilege to read or change the machine state."""
    pass


class Unavailable(AccessorError):
    """Accessor or underlying service is not reachable."""
    pass


class InvalidName(AccessorError):
    """The operating system rejected the proposed name."""
    pass


class PreflightError(HostprepError):
    """A privilege or connectivity pre-check failed."""
    pass
