import unittest

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from mission_trajectories.config import make_engine_config
from mission_trajectories.resolver import ResolvedPoint
from mission_trajectories.trajectory import Trajectory, TrajectoryStore


def _trajectory(offset=0.0):
    times = np.array([0.0, 1.0, 2.0])
    absolute = np.array([[0.0, 0.0, 0.0], [3.0, 4.0, 0.0], [3.0, 4.0, 12.0]]) + offset
    return Trajectory(times, absolute)


class TestTrajectory(unittest.TestCase):

    def test_from_points_scales(self):
        points = [ResolvedPoint(np.array([1.0, 0.0, 0.0]), 0.0), ResolvedPoint(np.array([0.0, 2.0, 0.0]), 3.0)]
        traj = Trajectory.from_points(points, scale=50.0)
        assert_allclose(traj.absolute, [[50.0, 0.0, 0.0], [0.0, 100.0, 0.0]])
        assert_array_equal(traj.times, [0.0, 3.0])
        self.assertEqual(len(traj), 2)

    def test_arrays_are_read_only(self):
        traj = _trajectory()
        with self.assertRaises(ValueError):
            traj.absolute[0, 0] = 1.0
        with self.assertRaises(ValueError):
            traj.display[0, 0] = 1.0

    def test_total_arc_length_is_cached(self):
        traj = _trajectory()
        self.assertIsNone(traj._total_arc_length)
        self.assertAlmostEqual(traj.total_arc_length, 17.0)
        self.assertEqual(traj._total_arc_length, 17.0)

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            Trajectory([0.0, 1.0], [[0.0, 0.0, 0.0]])


class TestTrajectoryStore(unittest.TestCase):

    def setUp(self):
        self.store = TrajectoryStore(make_engine_config(rebase_threshold=1000.0))
        self.store.replace("a", _trajectory())
        self.store.replace("b", _trajectory(offset=5000.0))

    def test_rebase_preserves_absolute(self):
        before = {k: self.store.get(k).absolute.copy() for k in self.store}
        origin = np.array([4000.0, -200.0, 7.0])
        with self.assertLogs("mission_trajectories.trajectory", level="DEBUG"):
            self.store.rebase(origin)
        for mission_id in self.store:
            traj = self.store.get(mission_id)
            assert_array_equal(traj.absolute, before[mission_id])
            assert_array_equal(traj.local_origin, origin)
            assert_allclose(traj.display + traj.local_origin, traj.absolute, rtol=0, atol=1e-9)

    def test_threshold(self):
        self.assertFalse(self.store.update_reference_point([999.0, 0.0, 0.0]))
        assert_array_equal(self.store.local_origin, np.zeros(3))
        self.assertTrue(self.store.update_reference_point([1001.0, 0.0, 0.0]))
        assert_array_equal(self.store.local_origin, [1001.0, 0.0, 0.0])
        # Drift is measured from the new origin
        self.assertFalse(self.store.update_reference_point([1500.0, 0.0, 0.0]))

    def test_new_trajectories_inherit_origin(self):
        self.store.rebase([100.0, 0.0, 0.0])
        stored = self.store.replace("c", _trajectory())
        assert_array_equal(stored.local_origin, [100.0, 0.0, 0.0])
        assert_allclose(stored.display[0], [-100.0, 0.0, 0.0])

    def test_readers_keep_snapshot(self):
        held = self.store.get("a")
        self.store.rebase([10.0, 10.0, 10.0])
        assert_array_equal(held.local_origin, np.zeros(3))
        self.assertIsNot(self.store.get("a"), held)

    def test_discard_and_clear(self):
        self.store.discard("a")
        self.store.discard("missing")
        self.assertNotIn("a", self.store)
        self.assertEqual(self.store.ids(), ["b"])
        self.store.clear()
        self.assertEqual(len(self.store), 0)


if __name__ == '__main__':
    unittest.main()
