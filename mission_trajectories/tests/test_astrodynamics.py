"""
Tests for the Kepler solver and the analytic orbital element propagator.
"""
import numpy as np
import pytest
from numpy.testing import assert_allclose

from mission_trajectories.astrodynamics import (
    kepler_residual,
    keplerian_position,
    keplerian_positions,
    mean_motion,
    orbital_period,
    sample_orbit,
    solve_kepler,
    solve_kepler_vec,
)
from mission_trajectories.constants import GAUSSIAN_MEAN_MOTION_DEG, J2000_JD
from mission_trajectories.errors import ConfigurationError
from mission_trajectories.orbital_elements import OrbitalElements, check_elements


CIRCULAR = OrbitalElements(a=1.0, e=0.0, i=0.0, Omega=0.0, omega=0.0, M0=0.0)


@pytest.mark.parametrize("e", [0.0, 0.05, 0.3, 0.6, 0.79, 0.8, 0.9, 0.97])
def test_kepler_converges(e):
    """The residual of M = E - e sin E is below the solver tolerance across the anomaly range."""
    Ms = np.linspace(-2.0 * np.pi, 4.0 * np.pi, 73)
    Es = solve_kepler_vec(Ms, np.full_like(Ms, e))
    for M, E in zip(Ms, np.asarray(Es)):
        assert abs(kepler_residual(M, e, float(E))) < 1e-6


def test_solve_kepler_scalar_matches_vectorized():
    Ms = np.array([0.1, 1.0, 3.0, 5.5])
    es = np.array([0.1, 0.5, 0.7, 0.95])
    E_vec = np.asarray(solve_kepler_vec(Ms, es))
    for k in range(len(Ms)):
        assert_allclose(float(solve_kepler(Ms[k], es[k])), E_vec[k], rtol=0, atol=1e-10)


def test_mean_motion_and_period():
    assert mean_motion(1.0) == pytest.approx(GAUSSIAN_MEAN_MOTION_DEG)
    assert orbital_period(1.0) == pytest.approx(360.0 / GAUSSIAN_MEAN_MOTION_DEG)
    assert orbital_period(4.0) == pytest.approx(8.0 * orbital_period(1.0))


def test_circular_orbit_quarter_period():
    """A circular unit orbit starts on +x and reaches +y a quarter period later."""
    assert_allclose(keplerian_position(CIRCULAR, 0.0), [1.0, 0.0, 0.0], atol=1e-9)
    quarter = orbital_period(1.0) / 4.0
    assert_allclose(keplerian_position(CIRCULAR, quarter), [0.0, 1.0, 0.0], atol=1e-9)


def test_epoch_shifts_mean_anomaly():
    """Elements referred to a later epoch sit at M0 at that epoch, not at J2000."""
    later = CIRCULAR._replace(epoch=J2000_JD + 100.0)
    assert_allclose(keplerian_position(later, 100.0), [1.0, 0.0, 0.0], atol=1e-9)


def test_inclined_orbit_leaves_ecliptic():
    polar = OrbitalElements(a=2.0, e=0.1, i=90.0, Omega=0.0, omega=90.0, M0=0.0)
    r = keplerian_position(polar, 0.0)
    # Periapsis on the +z axis at a(1 - e)
    assert_allclose(r, [0.0, 0.0, 1.8], atol=1e-9)


def test_vectorized_positions_match_scalar():
    elements = OrbitalElements(a=3.46, e=0.641, i=7.04, Omega=50.1, omega=12.7, M0=303.7)
    times = np.array([-4000.0, 0.0, 123.4, 9000.0])
    batch = keplerian_positions(elements, times)
    assert batch.shape == (4, 3)
    for k, t in enumerate(times):
        assert_allclose(batch[k], keplerian_position(elements, t), rtol=1e-12, atol=1e-12)


def test_sample_orbit_closes():
    elements = OrbitalElements(a=2.21, e=0.173, i=4.11, Omega=252.99, omega=129.88, M0=173.1)
    pts = sample_orbit(elements, n=90)
    assert pts.shape == (90, 3)
    assert_allclose(pts[0], pts[-1], atol=1e-8)

    radii = np.linalg.norm(pts, axis=1)
    assert radii.min() >= 2.21 * (1 - 0.173) - 1e-9
    assert radii.max() <= 2.21 * (1 + 0.173) + 1e-9


def test_sample_orbit_rejects_single_point():
    with pytest.raises(ValueError):
        sample_orbit(CIRCULAR, n=1)


@pytest.mark.parametrize("changes, message", [
    ({"e": 1.0}, "eccentricity"),
    ({"e": -0.1}, "eccentricity"),
    ({"a": 0.0}, "semi-major axis"),
    ({"i": float("nan")}, "'i' must be finite"),
])
def test_check_elements_rejects(changes, message):
    with pytest.raises(ConfigurationError, match=message):
        check_elements(CIRCULAR._replace(**changes), name="bad")


def test_check_elements_passes_through():
    assert check_elements(CIRCULAR) is CIRCULAR
