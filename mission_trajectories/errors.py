"""
Exception and warning types raised while building and querying trajectories.
"""


class ConfigurationError(ValueError):
    """
    Static configuration is invalid and cannot be computed on.

    Raised at load time for unknown body ids or orbit names, out-of-range
    orbital elements, non-increasing waypoint dates and similar problems.
    """


class ResolutionWarning(UserWarning):
    """An interpolated waypoint has no resolved neighbor on one side."""


class DensificationFailure(RuntimeError):
    """A mission's resolved points could not be turned into a dense path."""
