from __future__ import annotations

import logging
from typing import NamedTuple, Optional

import numpy as np

from mission_trajectories.context import SimulationContext
from mission_trajectories.frames import correct
from mission_trajectories.mission import Interpolated, Mission
from mission_trajectories.resolver import ResolvedPoint, WaypointResolver
from mission_trajectories.trajectory import Trajectory

logger = logging.getLogger(__name__)


class MissionState(NamedTuple):
    """Position (engine units, absolute) and unit direction of travel of a probe."""
    position: np.ndarray
    direction: np.ndarray


def _normalize(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return np.zeros(3)
    return v / norm


def _lerp_state(p1: np.ndarray, p2: np.ndarray, t1: float, t2: float, t: float) -> MissionState:
    duration = t2 - t1
    alpha = (t - t1) / duration if duration != 0.0 else 0.0
    # Weighted form is exact at both ends of the segment
    position = (1.0 - alpha) * p1 + alpha * p2
    return MissionState(position=position, direction=_normalize(p2 - p1))


def state_from_trajectory(trajectory: Optional[Trajectory], time: float) -> Optional[MissionState]:
    """
    Position and direction at time from a dense trajectory.

    Returns None when the trajectory is missing or empty, or time lies outside
    its span. The bracketing pair is the first (p1, p2) with t1 <= time <= t2.
    """
    if trajectory is None or len(trajectory) == 0:
        return None
    times = trajectory.times
    if time < times[0] or time > times[-1]:
        return None
    if len(trajectory) == 1:
        return MissionState(position=trajectory.absolute[0].copy(), direction=np.zeros(3))

    # First index whose time is >= time; the pair ending there is the first bracket
    k = int(np.searchsorted(times, time, side='left'))
    k = min(max(k, 1), len(times) - 1)
    return _lerp_state(trajectory.absolute[k - 1], trajectory.absolute[k], times[k - 1], times[k], time)


def state_from_waypoints(mission: Mission, resolver: WaypointResolver,
                         context: SimulationContext, time: float,
                         scale: float = 1.0) -> Optional[MissionState]:
    """
    Lower fidelity state straight from the waypoints, used before a dense
    trajectory exists. Positions are frame corrected and multiplied by scale.
    """
    waypoints = mission.waypoints
    if len(waypoints) < 2:
        return None
    times = mission.waypoint_times
    if time < times[0] or time > times[-1]:
        return None

    k = int(np.searchsorted(times, time, side='left'))
    k = min(max(k, 1), len(times) - 1)
    p1 = _resolve_corrected(mission, resolver, context, k - 1)
    p2 = _resolve_corrected(mission, resolver, context, k)
    state = _lerp_state(p1.position, p2.position, p1.time, p2.time, time)
    return MissionState(position=state.position * scale, direction=state.direction)


def _resolve_corrected(mission: Mission, resolver: WaypointResolver,
                       context: SimulationContext, index: int) -> ResolvedPoint:
    waypoint = mission.waypoints[index]
    if isinstance(waypoint, Interpolated):
        point = _resolve_interpolated(mission, resolver, context, index)
    else:
        point = ResolvedPoint(position=resolver.resolve(waypoint, mission, context), time=waypoint.time)
    position = correct(point.position, context.frame, point.time, resolver.ephemeris)
    return ResolvedPoint(position=position, time=point.time)


def _resolve_interpolated(mission: Mission, resolver: WaypointResolver,
                          context: SimulationContext, index: int) -> ResolvedPoint:
    waypoints = mission.waypoints
    waypoint = waypoints[index]
    resolved: list[Optional[ResolvedPoint]] = [None] * len(waypoints)
    neighbors = (range(index - 1, -1, -1), range(index + 1, len(waypoints)))
    for candidates in neighbors:
        j = next((j for j in candidates if not isinstance(waypoints[j], Interpolated)), None)
        if j is not None:
            resolved[j] = ResolvedPoint(position=resolver.resolve(waypoints[j], mission, context),
                                        time=waypoints[j].time)

    point = resolver.resolve_interpolated(waypoints, resolved, index)
    if point is None:
        logger.warning("Mission '%s': interpolated waypoint %d has no resolved neighbor on both sides; "
                       "placed at the origin", mission.id, index)
        point = ResolvedPoint(position=np.zeros(3), time=waypoint.time)
    if waypoint.offset is not None:
        point = ResolvedPoint(position=point.position + resolver.displacement(waypoint, context.display_scale),
                              time=point.time)
    return point
