"""
Ephemeris providers: heliocentric positions of named bodies at a given time.

The trajectory engine only relies on the Ephemeris protocol. PlanetaryEphemeris
is a self-contained approximation (JPL mean elements with secular rates,
E. M. Standish, valid 1800-2050) good to a few arcminutes for the inner planets,
which is ample for display trajectories. Any higher fidelity source can be
plugged in through FunctionEphemeris.
"""
from __future__ import annotations

from typing import Callable, Iterable, Protocol, runtime_checkable

import numpy as np

from mission_trajectories.astrodynamics import keplerian_position
from mission_trajectories.constants import BARYCENTER_ID, DAYS_PER_CENTURY, J2000_JD, SUN_ID
from mission_trajectories.errors import ConfigurationError
from mission_trajectories.orbital_elements import OrbitalElements


@runtime_checkable
class Ephemeris(Protocol):
    """Heliocentric ecliptic J2000 positions (AU) of named bodies, time in days since J2000."""

    def heliocentric_position(self, body_id: str, t: float) -> np.ndarray:
        ...

    def __contains__(self, body_id: object) -> bool:
        ...


# a (AU), e, i, Omega, omega, M (deg) at J2000 followed by their rates per Julian century.
# omega = longitude of perihelion - Omega, M = mean longitude - longitude of perihelion.
PLANET_ELEMENTS: dict[str, tuple[tuple[float, float], ...]] = {
    "Mercury": ((0.38709927, 0.00000037), (0.20563593, 0.00001906), (7.00497902, -0.00594749),
                (48.33076593, -0.12534081), (29.12703035, 0.28581770), (174.79252722, 149472.51363486)),
    "Venus": ((0.72333566, 0.00000390), (0.00677672, -0.00004107), (3.39467605, -0.00078890),
              (76.67984255, -0.27769418), (54.92262463, 0.28037747), (50.37663232, 58517.81270400)),
    "Earth": ((1.00000261, 0.00000562), (0.01671123, -0.00004392), (-0.00001531, -0.01294668),
              (0.0, 0.0), (102.93768193, 0.32327364), (357.52688973, 35999.04917617)),
    "Mars": ((1.52371034, 0.00001847), (0.09339410, 0.00007882), (1.84969142, -0.00813131),
             (49.55953891, -0.29257343), (286.49683150, 0.73698431), (19.39019754, 19139.85827411)),
    "Jupiter": ((5.20288700, -0.00011607), (0.04838624, -0.00013253), (1.30439695, -0.00183714),
                (100.47390909, 0.20469106), (274.25457074, 0.00783562), (19.66796068, 3034.53360107)),
    "Saturn": ((9.53667594, -0.00125060), (0.05386179, -0.00050991), (2.48599187, 0.00193609),
               (113.66242448, -0.28867794), (338.93645383, -0.13029422), (317.35536592, 1222.91259417)),
    "Uranus": ((19.18916464, -0.00196176), (0.04725744, -0.00004397), (0.77263783, -0.00242939),
               (74.01692503, 0.04240589), (96.93735127, 0.36564692), (142.28382821, 428.07397504)),
    "Neptune": ((30.06992276, 0.00026291), (0.00859048, 0.00005105), (1.77004347, 0.00035372),
                (131.78422574, -0.00508664), (273.18053653, -0.31732800), (259.91520804, 218.78186789)),
    "Pluto": ((39.48211675, -0.00031596), (0.24882730, 0.00005170), (17.14001206, 0.00004818),
              (110.30393684, -0.01183482), (113.76497945, -0.02879460), (14.86012204, 145.24843457)),
}

# Sun mass / planet mass (planet plus satellites)
SUN_MASS_RATIOS: dict[str, float] = {
    "Mercury": 6023600.0,
    "Venus": 408523.71,
    "Earth": 328900.56,
    "Mars": 3098708.0,
    "Jupiter": 1047.3486,
    "Saturn": 3497.898,
    "Uranus": 22902.98,
    "Neptune": 19412.24,
    "Pluto": 135200000.0,
}


def planet_elements(name: str, t: float) -> OrbitalElements:
    """Mean orbital elements of a planet at t days past J2000, with M0 referred to t itself."""
    try:
        table = PLANET_ELEMENTS[name]
    except KeyError:
        raise ConfigurationError(f"No mean elements for planet '{name}'") from None
    T = t / DAYS_PER_CENTURY
    a, e, i, Omega, omega, M = (value + rate * T for value, rate in table)
    return OrbitalElements(a=a, e=e, i=i, Omega=Omega, omega=omega, M0=M % 360.0, epoch=J2000_JD + t)


class PlanetaryEphemeris:
    """
    Analytic ephemeris for the Sun, the planets, Pluto and the solar-system barycenter.

    Body ids are the planet names ("Earth", "Jupiter", ...), "Sun" and "SSB".
    """

    def __init__(self):
        self._planets = tuple(PLANET_ELEMENTS)

    @property
    def bodies(self) -> tuple[str, ...]:
        return (SUN_ID, BARYCENTER_ID) + self._planets

    def __contains__(self, body_id: object) -> bool:
        return body_id in self.bodies

    def heliocentric_position(self, body_id: str, t: float) -> np.ndarray:
        if body_id == SUN_ID:
            return np.zeros(3)
        if body_id == BARYCENTER_ID:
            return self.barycenter(t)
        if body_id not in PLANET_ELEMENTS:
            raise ConfigurationError(f"Unknown body id '{body_id}'")
        return keplerian_position(planet_elements(body_id, t), t)

    def barycenter(self, t: float) -> np.ndarray:
        """
        Heliocentric position of the solar-system barycenter, the mass-weighted
        mean of the Sun (at the origin) and every planet.
        """
        weighted = np.zeros(3)
        total_mass = 1.0  # Sun
        for name in self._planets:
            mass = 1.0 / SUN_MASS_RATIOS[name]
            weighted += mass * self.heliocentric_position(name, t)
            total_mass += mass
        return weighted / total_mass

    def __repr__(self) -> str:
        return f"PlanetaryEphemeris(bodies={list(self.bodies)})"


class FunctionEphemeris:
    """
    Adapt a plain callable ``func(body_id, t) -> [x, y, z]`` to the Ephemeris protocol.

    Parameters
    ----------
    func : Callable
        Heliocentric position in AU of body_id at t days past J2000.
    bodies : Iterable[str]
        Body ids the callable is defined for; used for configuration checks.
    """

    def __init__(self, func: Callable[[str, float], Iterable[float]], bodies: Iterable[str]):
        self._func = func
        self._bodies = frozenset(bodies)

    @property
    def bodies(self) -> frozenset[str]:
        return self._bodies

    def __contains__(self, body_id: object) -> bool:
        return body_id in self._bodies

    def heliocentric_position(self, body_id: str, t: float) -> np.ndarray:
        if body_id not in self._bodies:
            raise ConfigurationError(f"Unknown body id '{body_id}'")
        position = np.asarray(self._func(body_id, t), dtype=float)
        if position.shape != (3,):
            raise ValueError(f"Ephemeris returned shape {position.shape} for '{body_id}', expected (3,)")
        return position
