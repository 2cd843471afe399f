"""
Dense trajectories and the floating-origin store that holds them.

Absolute samples never change after construction. Rebasing only moves the
shared local origin and recomputes each trajectory's display copy
(display = absolute - local_origin), so subtracting a large origin keeps
single precision renderers accurate far from the Sun.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Sequence

import numpy as np

from mission_trajectories.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from mission_trajectories.resolver import ResolvedPoint

logger = logging.getLogger(__name__)


class Trajectory:
    """
    Dense time-labelled path of one mission, in engine (scene) units.

    Attributes
    ----------
    times : np.ndarray
        Sample times in days since J2000, shape (m,).
    absolute : np.ndarray
        Frame-corrected positions, shape (m, 3). Read-only.
    local_origin : np.ndarray
        Origin subtracted from the display copy.
    display : np.ndarray
        absolute - local_origin, shape (m, 3). Read-only.
    """

    def __init__(self, times, absolute, local_origin=None):
        times = np.array(times, dtype=float)
        absolute = np.array(absolute, dtype=float).reshape(-1, 3)
        if times.shape[0] != absolute.shape[0]:
            raise ValueError(f"times and absolute lengths differ: {times.shape[0]} != {absolute.shape[0]}")
        origin = np.zeros(3) if local_origin is None else np.array(local_origin, dtype=float)

        display = absolute - origin
        for arr in (times, absolute, origin, display):
            arr.flags.writeable = False

        self.times = times
        self.absolute = absolute
        self.local_origin = origin
        self.display = display
        self._total_arc_length: Optional[float] = None

    @classmethod
    def from_points(cls, points: Sequence[ResolvedPoint], scale: float = 1.0,
                    local_origin=None) -> Trajectory:
        """Build a trajectory from resolved points in AU, scaling positions by scale."""
        times = [p.time for p in points]
        absolute = np.array([p.position for p in points], dtype=float).reshape(-1, 3) * scale
        return cls(times, absolute, local_origin)

    def __len__(self) -> int:
        return self.times.shape[0]

    def __repr__(self) -> str:
        return f"Trajectory(samples={len(self)}, span=[{self.start_time}, {self.end_time}])"

    @property
    def start_time(self) -> float:
        return float(self.times[0])

    @property
    def end_time(self) -> float:
        return float(self.times[-1])

    @property
    def total_arc_length(self) -> float:
        """Sum of the sample-to-sample distances (engine units), computed once."""
        if self._total_arc_length is None:
            if len(self) < 2:
                self._total_arc_length = 0.0
            else:
                steps = np.diff(self.absolute, axis=0)
                self._total_arc_length = float(np.linalg.norm(steps, axis=1).sum())
        return self._total_arc_length

    def rebased(self, local_origin) -> Trajectory:
        """A new trajectory sharing these absolute samples, displayed relative to local_origin."""
        other = Trajectory.__new__(Trajectory)
        origin = np.array(local_origin, dtype=float)
        display = self.absolute - origin
        origin.flags.writeable = False
        display.flags.writeable = False
        other.times = self.times
        other.absolute = self.absolute
        other.local_origin = origin
        other.display = display
        other._total_arc_length = self._total_arc_length
        return other


class TrajectoryStore:
    """
    Trajectories keyed by mission id, all displayed relative to one shared origin.

    Entries are swapped whole, so a reader holding a Trajectory keeps a
    consistent snapshot.
    """

    def __init__(self, config: EngineConfig = DEFAULT_ENGINE_CONFIG):
        self.config = config
        self._origin = np.zeros(3)
        self._trajectories: Dict[str, Trajectory] = {}

    @property
    def local_origin(self) -> np.ndarray:
        return self._origin.copy()

    def __contains__(self, mission_id: str) -> bool:
        return mission_id in self._trajectories

    def __iter__(self) -> Iterator[str]:
        return iter(self._trajectories)

    def __len__(self) -> int:
        return len(self._trajectories)

    def ids(self) -> list[str]:
        return list(self._trajectories)

    def get(self, mission_id: str) -> Optional[Trajectory]:
        return self._trajectories.get(mission_id)

    def replace(self, mission_id: str, trajectory: Trajectory) -> Trajectory:
        """Store a trajectory under mission_id, rebased onto the current origin."""
        if not np.array_equal(trajectory.local_origin, self._origin):
            trajectory = trajectory.rebased(self._origin)
        self._trajectories[mission_id] = trajectory
        return trajectory

    def discard(self, mission_id: str) -> None:
        self._trajectories.pop(mission_id, None)

    def clear(self) -> None:
        self._trajectories.clear()

    def rebase(self, new_origin) -> None:
        """Move the shared origin and recompute every display copy in one pass."""
        new_origin = np.array(new_origin, dtype=float).reshape(3)
        logger.debug("Rebasing %d trajectories onto origin %s", len(self._trajectories), new_origin)
        self._origin = new_origin
        self._trajectories = {
            mission_id: traj.rebased(new_origin) for mission_id, traj in self._trajectories.items()
        }

    def update_reference_point(self, point) -> bool:
        """
        Rebase onto point if it has drifted further than the rebase threshold
        from the current origin. Returns True if a rebase happened.
        """
        point = np.asarray(point, dtype=float).reshape(3)
        if np.linalg.norm(point - self._origin) > self.config.rebase_threshold:
            self.rebase(point)
            return True
        return False
