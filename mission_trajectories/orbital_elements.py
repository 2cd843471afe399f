"""
Orbital elements representation for minor bodies and planets.
"""
import math
from typing import NamedTuple

from mission_trajectories.constants import J2000_JD
from mission_trajectories.errors import ConfigurationError


class OrbitalElements(NamedTuple):
    """
    Keplerian orbital elements of a heliocentric orbit.

    All angular quantities are in degrees, unlike the radians used internally by
    the propagator.

    Attributes:
        a: Semi-major axis (AU)
        e: Eccentricity (dimensionless, 0 ≤ e < 1)
        i: Inclination relative to the ecliptic (deg)
        Omega: Longitude of the ascending node (deg)
        omega: Argument of periapsis (deg)
        M0: Mean anomaly at epoch (deg)
        epoch: Julian Date at which M0 applies (default J2000)

    Note:
        - Only elliptical orbits are supported. Parabolic and hyperbolic
          elements are rejected by check_elements.
    """
    a: float  # semi-major axis (AU)
    e: float  # eccentricity
    i: float  # inclination (deg)
    Omega: float  # longitude of ascending node (deg)
    omega: float  # argument of periapsis (deg)
    M0: float  # mean anomaly at epoch (deg)
    epoch: float = J2000_JD  # Julian Date


def check_elements(elements: OrbitalElements, name: str = "orbit") -> OrbitalElements:
    """Reject elements the analytic propagator cannot handle."""
    for field, value in zip(elements._fields, elements):
        if not math.isfinite(value):
            raise ConfigurationError(f"{name}: element '{field}' must be finite, got {value}")
    if elements.a <= 0.0:
        raise ConfigurationError(f"{name}: semi-major axis must be positive, got {elements.a}")
    if not (0.0 <= elements.e < 1.0):
        raise ConfigurationError(
            f"{name}: eccentricity must satisfy 0 <= e < 1 for analytic propagation, got {elements.e}"
        )
    return elements
