"""
Reference-frame correction of heliocentric positions.

Resolved waypoints are frame agnostic (heliocentric). Switching frames only
subtracts a different origin vector, re-derived from the ephemeris on every
call, so a switch back reproduces the heliocentric values exactly.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from mission_trajectories.constants import BARYCENTER_ID, EARTH_ID
from mission_trajectories.context import ReferenceFrame
from mission_trajectories.ephemeris import Ephemeris
from mission_trajectories.resolver import ResolvedPoint


def frame_origin(frame: ReferenceFrame, t: float, ephemeris: Ephemeris) -> np.ndarray:
    """Heliocentric position (AU) of the origin of the given frame at t days past J2000."""
    if frame is ReferenceFrame.HELIOCENTRIC:
        return np.zeros(3)
    if frame in (ReferenceFrame.GEOCENTRIC, ReferenceFrame.TYCHONIC):
        return np.asarray(ephemeris.heliocentric_position(EARTH_ID, t), dtype=float)
    if frame is ReferenceFrame.BARYCENTRIC:
        return np.asarray(ephemeris.heliocentric_position(BARYCENTER_ID, t), dtype=float)
    raise ValueError(f"Unsupported reference frame {frame!r}")


def correct(position, frame: ReferenceFrame, t: float, ephemeris: Ephemeris) -> np.ndarray:
    """Express a heliocentric position relative to the frame origin at time t."""
    position = np.asarray(position, dtype=float)
    if frame is ReferenceFrame.HELIOCENTRIC:
        return position.copy()
    return position - frame_origin(frame, t, ephemeris)


def uncorrect(position, frame: ReferenceFrame, t: float, ephemeris: Ephemeris) -> np.ndarray:
    """Inverse of correct: add the frame origin back to obtain a heliocentric position."""
    position = np.asarray(position, dtype=float)
    if frame is ReferenceFrame.HELIOCENTRIC:
        return position.copy()
    return position + frame_origin(frame, t, ephemeris)


def correct_points(points: Sequence[ResolvedPoint], frame: ReferenceFrame,
                   ephemeris: Ephemeris) -> list[ResolvedPoint]:
    """Frame-correct every resolved point at its own time, returning new points."""
    return [
        ResolvedPoint(position=correct(p.position, frame, p.time, ephemeris), time=p.time)
        for p in points
    ]
