"""Tests for mission configuration validation and the mission catalog."""
import tempfile
import unittest
from pathlib import Path

import numpy as np
from numpy.testing import assert_allclose
from pydantic import ValidationError

from mission_trajectories.bodies import MinorBody, load_minor_bodies, minor_bodies
from mission_trajectories.ephemeris import PlanetaryEphemeris
from mission_trajectories.errors import ConfigurationError
from mission_trajectories.mission import (
    BodyAnchored,
    ExitDirection,
    ExitVector,
    Interpolated,
    Mission,
    MissionCatalog,
    load_default_catalog,
)
from mission_trajectories.orbital_elements import OrbitalElements


def _mission(waypoints, **kwargs):
    return Mission.model_validate({"id": "probe", "waypoints": waypoints, **kwargs})


class TestWaypointValidation(unittest.TestCase):

    def test_discriminated_union(self):
        m = _mission([
            {"kind": "body", "date": "2000-01-01T12:00:00Z", "body": "Earth"},
            {"kind": "interpolate", "date": "2000-02-01"},
            {"kind": "exit", "date": "2000-03-01", "distance": 10.0},
        ], exit={"ra": 6.0, "dec": 0.0})
        self.assertIsInstance(m.waypoints[0], BodyAnchored)
        self.assertIsInstance(m.waypoints[1], Interpolated)
        self.assertIsInstance(m.waypoints[2], ExitVector)
        self.assertEqual(m.start_time, 0.0)
        self.assertEqual(m.display_name, "probe")

    def test_unknown_kind(self):
        with self.assertRaises(ValidationError):
            _mission([{"kind": "teleport", "date": "2000-01-01"}])

    def test_empty_waypoints(self):
        with self.assertRaises(ValidationError) as cm:
            _mission([])
        self.assertIn("at least one element", str(cm.exception))

    def test_non_increasing_dates(self):
        with self.assertRaises(ValidationError) as cm:
            _mission([
                {"kind": "position", "date": "2000-02-01", "position": [1, 0, 0]},
                {"kind": "position", "date": "2000-01-01", "position": [2, 0, 0]},
            ])
        self.assertIn("strictly increasing", str(cm.exception))

    def test_equal_dates(self):
        with self.assertRaises(ValidationError):
            _mission([
                {"kind": "position", "date": "2000-01-01", "position": [1, 0, 0]},
                {"kind": "position", "date": "2000-01-01T00:00:00Z", "position": [2, 0, 0]},
            ])

    def test_exit_waypoint_requires_exit_direction(self):
        with self.assertRaises(ValidationError) as cm:
            _mission([{"kind": "exit", "date": "2000-01-01", "distance": 50.0}])
        self.assertIn("no exit direction", str(cm.exception))

    def test_exit_distance_must_be_positive(self):
        with self.assertRaises(ValidationError):
            _mission([{"kind": "exit", "date": "2000-01-01", "distance": 0.0}], exit={"ra": 1.0, "dec": 0.0})

    def test_offset_and_surface_are_exclusive(self):
        with self.assertRaises(ValidationError):
            _mission([{"kind": "body", "date": "2000-01-01", "body": "Earth",
                       "offset": {"x": 0.001}, "surface": {"latitude": 28.5, "longitude": -80.5}}])

    def test_surface_requires_anchor_body(self):
        with self.assertRaises(ValidationError):
            _mission([{"kind": "position", "date": "2000-01-01", "position": [1, 0, 0],
                       "surface": {"latitude": 28.5, "longitude": -80.5}}])

    def test_latitude_range(self):
        with self.assertRaises(ValidationError):
            _mission([{"kind": "body", "date": "2000-01-01", "body": "Earth",
                       "surface": {"latitude": 95.0, "longitude": 0.0}}])

    def test_extra_fields_rejected(self):
        with self.assertRaises(ValidationError):
            _mission([{"kind": "body", "date": "2000-01-01", "body": "Earth", "customBody": "Ida"}])

    def test_exit_direction_unit_vector(self):
        assert_allclose(ExitDirection(ra=0.0, dec=0.0).unit_vector(), [1.0, 0.0, 0.0], atol=1e-12)
        eps = np.radians(23.4392911)
        assert_allclose(ExitDirection(ra=6.0, dec=0.0).unit_vector(), [0.0, np.cos(eps), -np.sin(eps)], atol=1e-12)
        # The ecliptic north pole sits at RA 18h, Dec 90 - obliquity
        assert_allclose(ExitDirection(ra=18.0, dec=90.0 - 23.4392911).unit_vector(), [0.0, 0.0, 1.0], atol=1e-12)


class TestMissionCatalog(unittest.TestCase):

    def test_default_catalog(self):
        catalog = load_default_catalog()
        self.assertEqual(len(catalog), 11)
        self.assertIn("voyager1", catalog.ids)
        self.assertEqual(catalog.get("cassini").display_name, "Cassini")
        self.assertIsNone(catalog.get("apollo11"))
        # Every referenced body and custom orbit is known
        catalog.validate_against(PlanetaryEphemeris(), minor_bodies)

    def test_duplicate_ids(self):
        wp = [{"kind": "position", "date": "2000-01-01", "position": [1, 0, 0]}]
        with self.assertRaises(ConfigurationError) as cm:
            MissionCatalog.model_validate({"missions": [{"id": "a", "waypoints": wp}, {"id": "a", "waypoints": wp}]})
        self.assertIn("duplicate mission id", str(cm.exception))

    def test_model_validate_wraps_validation_errors(self):
        with self.assertRaises(ConfigurationError) as cm:
            MissionCatalog.model_validate({"missions": [{"id": "a", "waypoints": [{"kind": "warp", "date": "2000-01-01"}]}]})
        self.assertIsInstance(cm.exception.__cause__, ValidationError)
        self.assertNotIsInstance(cm.exception, ValidationError)

    def test_from_json_wraps_validation_errors(self):
        with self.assertRaises(ConfigurationError):
            MissionCatalog.from_json('{"missions": [{"id": "a", "waypoints": []}]}')
        with self.assertRaises(ConfigurationError):
            MissionCatalog.from_json('not json')

    def test_load_missing_file(self):
        with self.assertRaises(ConfigurationError):
            MissionCatalog.load("/nonexistent/missions.json")

    def test_unknown_body_id(self):
        catalog = MissionCatalog.model_validate({"missions": [
            {"id": "a", "waypoints": [{"kind": "body", "date": "2000-01-01", "body": "Vulcan"}]},
        ]})
        with self.assertRaises(ConfigurationError) as cm:
            catalog.validate_against(PlanetaryEphemeris(), minor_bodies)
        self.assertIn("Vulcan", str(cm.exception))

    def test_unknown_orbit_name(self):
        catalog = MissionCatalog.model_validate({"missions": [
            {"id": "a", "waypoints": [{"kind": "orbit", "date": "2000-01-01", "orbit": "Oumuamua"}]},
        ]})
        with self.assertRaises(ConfigurationError):
            catalog.validate_against(PlanetaryEphemeris(), minor_bodies)

    def test_save_and_load(self):
        catalog = load_default_catalog()
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "missions.json"
            catalog.save(path)
            loaded = MissionCatalog.load(path)
        self.assertEqual(loaded.ids, catalog.ids)
        self.assertEqual(loaded.get("rosetta").waypoints, catalog.get("rosetta").waypoints)


class TestMinorBodies(unittest.TestCase):

    def test_bundled_bodies(self):
        for name in ("Gaspra", "Ida", "Steins", "Lutetia", "67P", "Arrokoth", "Ulysses"):
            self.assertIn(name, minor_bodies)
        self.assertEqual(minor_bodies["67P"].kind, "comet")
        self.assertAlmostEqual(minor_bodies["Gaspra"].elements.epoch, 2460200.5)

    def test_hyperbolic_elements_rejected(self):
        with self.assertRaises(ValidationError):
            MinorBody(name="Oumuamua", elements=OrbitalElements(a=1.27, e=1.2, i=122.7, Omega=24.6, omega=241.8, M0=0.0))

    def test_bad_csv_row(self):
        header = ("Name,Kind,Semi-Major Axis (AU),Eccentricity (),Inclination (deg),"
                  "Longitude of the Ascending Node (deg),Argument of Periapsis (deg),"
                  "Mean Anomaly at Epoch (deg),Epoch (JD)\n")
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "bodies.csv"
            path.write_text(header + "Good,asteroid,2.0,0.1,1.0,2.0,3.0,4.0,\nBad,asteroid,-1.0,0.1,1.0,2.0,3.0,4.0,\n")
            with self.assertRaises(ConfigurationError) as cm:
                load_minor_bodies(path)
        self.assertIn("row 2", str(cm.exception))

    def test_orbit_line(self):
        body = minor_bodies["Gaspra"]
        line = body.orbit_line(n=90, start_time=100.0)
        self.assertEqual(line.shape, (90, 3))
        assert_allclose(line[0], body.get_position(100.0), atol=1e-9)
        # One full revolution closes the loop
        assert_allclose(line[-1], line[0], atol=1e-6)


if __name__ == '__main__':
    unittest.main()
