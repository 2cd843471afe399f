"""
Uniform Catmull-Rom densification of resolved waypoints.

The curve passes through every control point with a continuous tangent. The
global parameter u in [0, 1] maps linearly onto the control point index, so
u = i / (n - 1) lands exactly on control point i.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from mission_trajectories.errors import DensificationFailure
from mission_trajectories.resolver import ResolvedPoint


class CatmullRomCurve:
    """
    Uniform Catmull-Rom spline through an (n, 3) array of control points.

    The first and last segments use virtual end points reflected through the
    end control points (2 p0 - p1 and 2 pn - pn-1).
    """

    def __init__(self, control_points):
        pts = np.asarray(control_points, dtype=float)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError(f"control_points must have shape (n, 3), got {pts.shape}")
        if pts.shape[0] < 2:
            raise ValueError("A Catmull-Rom curve needs at least 2 control points")
        self.control_points = pts
        self._padded = np.vstack([2.0 * pts[0] - pts[1], pts, 2.0 * pts[-1] - pts[-2]])

    @property
    def n_segments(self) -> int:
        return self.control_points.shape[0] - 1

    def points(self, us) -> np.ndarray:
        """Evaluate the curve at an array of parameters in [0, 1]. Returns an (m, 3) array."""
        us = np.clip(np.asarray(us, dtype=float), 0.0, 1.0)
        s = us * self.n_segments
        seg = np.minimum(np.floor(s).astype(int), self.n_segments - 1)
        w = (s - seg)[:, None]

        # Padded index of the segment's start point is seg + 1
        p0 = self._padded[seg]
        p1 = self._padded[seg + 1]
        p2 = self._padded[seg + 2]
        p3 = self._padded[seg + 3]

        w2 = w * w
        w3 = w2 * w
        return 0.5 * ((2.0 * p1)
                      + (p2 - p0) * w
                      + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * w2
                      + (3.0 * p1 - p0 - 3.0 * p2 + p3) * w3)

    def point(self, u: float) -> np.ndarray:
        """Evaluate the curve at a single parameter u in [0, 1]."""
        return self.points(np.array([u]))[0]


def sample_times(times, us) -> np.ndarray:
    """
    Time label of each parameter u: linear interpolation between the times of
    the two control points bracketing floatIndex = u * (n - 1).
    """
    times = np.asarray(times, dtype=float)
    float_index = np.asarray(us, dtype=float) * (len(times) - 1)
    lower = np.minimum(np.floor(float_index).astype(int), len(times) - 1)
    upper = np.minimum(lower + 1, len(times) - 1)
    alpha = float_index - lower
    return times[lower] + (times[upper] - times[lower]) * alpha


def densify(points: Sequence[ResolvedPoint], sample_count: int) -> list[ResolvedPoint]:
    """
    Densify resolved points into sample_count + 1 time-labelled samples.

    Parameters
    ----------
    points : Sequence[ResolvedPoint]
        Frame-corrected resolved points in waypoint order.
    sample_count : int
        Number of spline intervals; the output holds sample_count + 1 samples.

    Returns
    -------
    list[ResolvedPoint]
        The input unchanged when it holds fewer than 2 points; a straight line
        between the two points when it holds exactly 2.

    Raises
    ------
    DensificationFailure
        If the spline evaluation produces non-finite positions.
    """
    if len(points) < 2:
        return list(points)
    if sample_count < 1:
        raise DensificationFailure(f"sample_count must be at least 1, got {sample_count}")

    positions = np.array([p.position for p in points], dtype=float)
    times = np.array([p.time for p in points], dtype=float)
    us = np.arange(sample_count + 1, dtype=float) / sample_count

    try:
        curve = CatmullRomCurve(positions)
    except ValueError as exc:
        raise DensificationFailure(str(exc)) from exc

    dense = curve.points(us)
    if not np.all(np.isfinite(dense)):
        raise DensificationFailure("Spline evaluation produced non-finite positions")

    labels = sample_times(times, us)
    return [ResolvedPoint(position=dense[k], time=float(labels[k])) for k in range(len(us))]
