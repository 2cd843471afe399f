import math

import jax
import jax.numpy as jnp
from jax import jit, lax
import numpy as np

from .orbital_elements import OrbitalElements
from .constants import (
    GAUSSIAN_MEAN_MOTION_DEG, J2000_JD, OBLIQUITY_J2000_DEG,
    KEPLER_TOL, KEPLER_MAX_ITER,
)


def solve_kepler(M: float, e: float, tol: float = KEPLER_TOL, max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) for eccentric anomaly E
    using Newton-Raphson iteration with jax.lax.while_loop.

    The mean anomaly is wrapped to [0, 2*pi) first, so the returned E lies in
    the same revolution. Iteration stops once the Newton step drops below tol
    or after max_iter steps, whichever comes first.
    """
    M = jnp.mod(jnp.asarray(M, dtype=jnp.float64), 2.0 * jnp.pi)
    e = jnp.asarray(e, dtype=jnp.float64)

    # Starting at pi keeps Newton monotone for highly eccentric orbits
    E0 = jnp.where(e < 0.8, M, jnp.pi * jnp.ones_like(M))

    def cond_fn(carry):
        _, dE, k = carry
        return (jnp.abs(dE) > tol) & (k < max_iter)

    def body_fn(carry):
        E, _, k = carry
        f = E - e * jnp.sin(E) - M
        fp = 1.0 - e * jnp.cos(E)
        dE = f / fp
        return E - dE, dE, k + 1

    E_final, _, _ = lax.while_loop(cond_fn, body_fn, (E0, jnp.inf * jnp.ones_like(M), 0))
    return E_final


_solve_kepler_vec = jax.vmap(solve_kepler, in_axes=(0, 0, None, None))


def solve_kepler_vec(M, e, tol=KEPLER_TOL, max_iter=KEPLER_MAX_ITER):
    """
    Vectorized version of solve_kepler that handles arrays of M and e.

    Parameters
    ----------
    M : jnp.ndarray
        Array of mean anomalies (radians)
    e : jnp.ndarray
        Array of eccentricities
    tol : float, optional
        Newton step tolerance
    max_iter : int, optional
        Maximum number of iterations

    Returns
    -------
    E : jnp.ndarray
        Array of eccentric anomalies
    """
    return _solve_kepler_vec(jnp.asarray(M, dtype=jnp.float64), jnp.asarray(e, dtype=jnp.float64), tol, max_iter)


def kepler_residual(M: float, e: float, E: float) -> float:
    """Residual of Kepler's equation, with M wrapped to [0, 2*pi) as in solve_kepler."""
    M = np.mod(M, 2.0 * np.pi)
    return float(M - (E - e * np.sin(E)))


def mean_motion(a: float) -> float:
    """Mean motion in degrees per day for a heliocentric orbit with semi-major axis a (AU)."""
    return GAUSSIAN_MEAN_MOTION_DEG / a ** 1.5


def orbital_period(a: float) -> float:
    """Orbital period in days from Kepler's third law."""
    return 360.0 / mean_motion(a)


@jit
def elements_to_position(elements: OrbitalElements, t: float) -> jnp.ndarray:
    """
    Convert orbital elements to a heliocentric ecliptic position at time t.
    t is time in days since J2000; the elements' own epoch sets where M0 applies.
    """
    a, e = elements.a, elements.e
    i = jnp.deg2rad(elements.i)
    Omega = jnp.deg2rad(elements.Omega)
    omega = jnp.deg2rad(elements.omega)

    # Mean anomaly at time t
    dt = t - (elements.epoch - J2000_JD)
    M = jnp.deg2rad(elements.M0 + GAUSSIAN_MEAN_MOTION_DEG / a ** 1.5 * dt)

    # Solve for eccentric anomaly
    E = solve_kepler(M, e)

    # True anomaly
    theta = 2.0 * jnp.arctan2(
        jnp.sqrt(1.0 + e) * jnp.sin(E / 2.0),
        jnp.sqrt(1.0 - e) * jnp.cos(E / 2.0)
    )

    # Distance
    r_mag = a * (1.0 - e * jnp.cos(E))

    # Rotate from the orbital plane by omega, i, Omega
    cos_theta_omega = jnp.cos(theta + omega)
    sin_theta_omega = jnp.sin(theta + omega)
    cos_Omega = jnp.cos(Omega)
    sin_Omega = jnp.sin(Omega)
    cos_i = jnp.cos(i)
    sin_i = jnp.sin(i)

    x = r_mag * (cos_theta_omega * cos_Omega - sin_theta_omega * cos_i * sin_Omega)
    y = r_mag * (cos_theta_omega * sin_Omega + sin_theta_omega * cos_i * cos_Omega)
    z = r_mag * sin_theta_omega * sin_i

    return jnp.array([x, y, z], dtype=jnp.float64)


_elements_to_positions = jit(jax.vmap(elements_to_position, in_axes=(None, 0)))


def keplerian_position(elements: OrbitalElements, t: float) -> np.ndarray:
    """Heliocentric position (AU) of a body on the given orbit at t days past J2000."""
    return np.asarray(elements_to_position(_as_float_elements(elements), float(t)), dtype=float)


def keplerian_positions(elements: OrbitalElements, times) -> np.ndarray:
    """
    Heliocentric positions for an array of times.

    Returns
    -------
    np.ndarray
        Array of shape (n_times, 3) in AU.
    """
    times = jnp.asarray(times, dtype=jnp.float64)
    return np.asarray(_elements_to_positions(_as_float_elements(elements), times), dtype=float)


def sample_orbit(elements: OrbitalElements, n: int = 360, start_time: float = 0.0) -> np.ndarray:
    """
    Sample n positions evenly spaced in time over one full revolution, for drawing orbit lines.
    """
    if n < 2:
        raise ValueError(f"n must be at least 2, got {n}")
    period = orbital_period(elements.a)
    times = start_time + np.linspace(0.0, period, n)
    return keplerian_positions(elements, times)


def radec_to_ecliptic(ra_hours: float, dec_deg: float) -> np.ndarray:
    """
    Unit vector in the J2000 ecliptic frame for an equatorial right ascension
    (hours) and declination (degrees).
    """
    ra = math.radians(ra_hours * 15.0)
    dec = math.radians(dec_deg)
    x = math.cos(dec) * math.cos(ra)
    y = math.cos(dec) * math.sin(ra)
    z = math.sin(dec)

    eps = math.radians(OBLIQUITY_J2000_DEG)
    cos_eps, sin_eps = math.cos(eps), math.sin(eps)
    return np.array([x, cos_eps * y + sin_eps * z, -sin_eps * y + cos_eps * z])


def _as_float_elements(elements: OrbitalElements) -> OrbitalElements:
    # Keep every leaf float64 so jit traces once per call signature
    return OrbitalElements(*(float(v) for v in elements))
