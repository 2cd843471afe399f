"""Tests for the matplotlib quick-look plot."""
import unittest

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from mission_trajectories.config import make_engine_config
from mission_trajectories.context import ReferenceFrame, SimulationContext
from mission_trajectories.engine import TrajectoryEngine
from mission_trajectories.mission import MissionCatalog
from mission_trajectories.plotting import plot_trajectories

CATALOG = {
    "missions": [
        {
            "id": "hop",
            "color": "#ff8800",
            "waypoints": [
                {"kind": "body", "date": "2000-01-01T12:00:00Z", "body": "Earth"},
                {"kind": "orbit", "date": "2000-09-01", "orbit": "Gaspra"},
                {"kind": "body", "date": "2001-06-01", "body": "Mars"},
            ],
        }
    ]
}


def _orbit_lines(ax):
    return [line for line in ax.lines if line.get_linestyle() == ":"]


class TestPlotTrajectories(unittest.TestCase):

    def setUp(self):
        catalog = MissionCatalog.model_validate(CATALOG)
        self.engine = TrajectoryEngine(catalog, config=make_engine_config(sample_count=30))

    def tearDown(self):
        plt.close("all")

    def test_draws_trajectory_and_orbit_line(self):
        self.engine.initialize()
        ax = plot_trajectories(self.engine)
        self.assertEqual(len(_orbit_lines(ax)), 1)
        self.assertEqual(len(ax.lines), 2)
        self.assertEqual(ax.get_legend_handles_labels()[1], ["hop"])

    def test_orbit_lines_optional(self):
        self.engine.initialize()
        ax = plot_trajectories(self.engine, orbits=False)
        self.assertEqual(len(_orbit_lines(ax)), 0)

    def test_no_orbit_lines_outside_heliocentric(self):
        self.engine.initialize(SimulationContext(frame=ReferenceFrame.GEOCENTRIC))
        ax = plot_trajectories(self.engine, ["hop"])
        self.assertEqual(len(_orbit_lines(ax)), 0)
        self.assertIn("Geocentric", ax.get_title())


if __name__ == '__main__':
    unittest.main()
