"""
Resolution of configured waypoints to absolute heliocentric positions.

Resolution runs in two passes. Pass 1 resolves every direct kind (body, custom
orbit, literal position, exit vector) independently. Pass 2 places each
interpolated waypoint on the straight line between its nearest non-interpolated
neighbors, at the fraction of elapsed time between their dates.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

import numpy as np

from mission_trajectories.bodies import MinorBody, minor_bodies
from mission_trajectories.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from mission_trajectories.astrodynamics import radec_to_ecliptic
from mission_trajectories.context import SimulationContext
from mission_trajectories.ephemeris import Ephemeris
from mission_trajectories.errors import ConfigurationError, ResolutionWarning
from mission_trajectories.mission import (
    BodyAnchored,
    CustomOrbitAnchored,
    ExitVector,
    FixedPosition,
    Interpolated,
    Mission,
    SurfaceAnchor,
    WaypointBase,
)
from mission_trajectories.timescales import greenwich_mean_sidereal_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedPoint:
    """A position (AU, or scene units once stored) paired with its time in days since J2000."""
    position: np.ndarray
    time: float


@dataclass(frozen=True)
class MissionResolution:
    """
    Frame-agnostic resolved points of one mission, one per waypoint.

    Attributes:
        mission_id: Mission the points belong to
        points: Heliocentric resolved points in waypoint order
        unresolved: Indices of interpolated waypoints that fell back to the origin
        warnings: One ResolutionWarning per interpolated waypoint that fell back to the origin
    """
    mission_id: str
    points: tuple[ResolvedPoint, ...]
    unresolved: tuple[int, ...] = field(default=())
    warnings: tuple[ResolutionWarning, ...] = field(default=())

    @property
    def flagged(self) -> bool:
        return len(self.warnings) > 0


def surface_direction(anchor: SurfaceAnchor, t: float) -> np.ndarray:
    """
    Unit vector (ecliptic frame) from the body center to a surface site at time t.

    The site's local right ascension is the Greenwich sidereal time plus the east
    longitude, its declination the latitude. The body's spin axis is taken to be
    Earth's, which is the case launch sites are configured for.
    """
    ra_hours = (greenwich_mean_sidereal_time(t) + anchor.longitude / 15.0) % 24.0
    return radec_to_ecliptic(ra_hours, anchor.latitude)


def interpolate_between(prev: ResolvedPoint, nxt: ResolvedPoint, t: float) -> ResolvedPoint:
    """Linear interpolation of position at time t between two resolved points."""
    total = nxt.time - prev.time
    alpha = (t - prev.time) / total if total != 0.0 else 0.0
    position = prev.position + (nxt.position - prev.position) * alpha
    return ResolvedPoint(position=position, time=t)


class WaypointResolver:
    """
    Turns waypoints into heliocentric positions (AU).

    Parameters
    ----------
    ephemeris : Ephemeris
        Source of positions for body-anchored waypoints.
    orbits : Mapping[str, MinorBody], optional
        Custom orbits by name for orbit-anchored waypoints (default: bundled minor bodies).
    config : EngineConfig, optional
        Display scale factor and surface radius settings.
    """

    def __init__(self, ephemeris: Ephemeris, orbits: Optional[Mapping[str, MinorBody]] = None,
                 config: EngineConfig = DEFAULT_ENGINE_CONFIG):
        self.ephemeris = ephemeris
        self.orbits = dict(minor_bodies if orbits is None else orbits)
        self.config = config

    def offset_factor(self, waypoint: WaypointBase, display_scale: float) -> float:
        """
        Multiplier applied to a waypoint's offset.

        Body-relative offsets grow with the display scale so they stay outside the
        enlarged body, but never shrink below their real-world size.
        """
        if waypoint.is_body_relative:
            return max(1.0, display_scale * self.config.planet_scale_factor)
        return 1.0

    def displacement(self, waypoint: WaypointBase, display_scale: float) -> np.ndarray:
        """Offset or surface-anchor displacement of a waypoint, scaled for display (AU)."""
        factor = self.offset_factor(waypoint, display_scale)
        if waypoint.offset is not None:
            return waypoint.offset.as_array() * factor
        if waypoint.surface is not None:
            radius = self.config.surface_radius_au * factor
            return surface_direction(waypoint.surface, waypoint.time) * radius
        return np.zeros(3)

    def base_position(self, waypoint: WaypointBase, mission: Mission) -> np.ndarray:
        """Heliocentric position of a direct waypoint before any displacement."""
        t = waypoint.time
        if isinstance(waypoint, BodyAnchored):
            if waypoint.body not in self.ephemeris:
                raise ConfigurationError(f"Mission '{mission.id}': unknown body id '{waypoint.body}'")
            return np.asarray(self.ephemeris.heliocentric_position(waypoint.body, t), dtype=float)
        elif isinstance(waypoint, CustomOrbitAnchored):
            body = self.orbits.get(waypoint.orbit)
            if body is None:
                raise ConfigurationError(f"Mission '{mission.id}': unknown custom orbit '{waypoint.orbit}'")
            return body.get_position(t)
        elif isinstance(waypoint, FixedPosition):
            return np.array(waypoint.position, dtype=float)
        elif isinstance(waypoint, ExitVector):
            if mission.exit is None:
                raise ConfigurationError(f"Mission '{mission.id}': exit-vector waypoint without an exit direction")
            return mission.exit.unit_vector() * waypoint.distance
        elif isinstance(waypoint, Interpolated):
            raise ValueError("Interpolated waypoints are resolved from their neighbors, not directly")
        raise TypeError(f"Unsupported waypoint kind {type(waypoint).__name__}")

    def resolve(self, waypoint: WaypointBase, mission: Mission, context: SimulationContext) -> np.ndarray:
        """
        Resolve a direct (non-interpolated) waypoint to a heliocentric position in AU.
        """
        return self.base_position(waypoint, mission) + self.displacement(waypoint, context.display_scale)

    def resolve_interpolated(self, waypoints: Sequence[WaypointBase],
                             resolved: Sequence[Optional[ResolvedPoint]],
                             index: int) -> Optional[ResolvedPoint]:
        """
        Resolve the interpolated waypoint at index from its nearest resolved
        non-interpolated neighbors. Returns None if either neighbor is missing.
        """
        prev = next((resolved[j] for j in range(index - 1, -1, -1)
                     if not isinstance(waypoints[j], Interpolated)), None)
        nxt = next((resolved[j] for j in range(index + 1, len(waypoints))
                    if not isinstance(waypoints[j], Interpolated)), None)
        if prev is None or nxt is None:
            return None
        return interpolate_between(prev, nxt, waypoints[index].time)

    def resolve_mission(self, mission: Mission, context: SimulationContext) -> MissionResolution:
        """
        Resolve every waypoint of a mission (both passes), frame agnostic.
        """
        waypoints = mission.waypoints

        # Pass 1: direct kinds
        resolved: list[Optional[ResolvedPoint]] = []
        for wp in waypoints:
            if isinstance(wp, Interpolated):
                resolved.append(None)
            else:
                resolved.append(ResolvedPoint(position=self.resolve(wp, mission, context), time=wp.time))

        # Pass 2: interpolated kinds
        points = []
        unresolved = []
        warnings = []
        for i, wp in enumerate(waypoints):
            point = resolved[i]
            if isinstance(wp, Interpolated):
                point = self.resolve_interpolated(waypoints, resolved, i)
                if point is None:
                    unresolved.append(i)
                    warnings.append(ResolutionWarning(
                        f"Mission '{mission.id}': interpolated waypoint {i} ({wp.date.date().isoformat()}) "
                        f"has no resolved neighbor on both sides; placed at the origin"
                    ))
                    point = ResolvedPoint(position=np.zeros(3), time=wp.time)
                if wp.offset is not None:
                    point = ResolvedPoint(position=point.position + self.displacement(wp, context.display_scale),
                                          time=point.time)
            points.append(point)

        if warnings:
            logger.warning("%s", "; ".join(str(w) for w in warnings))

        return MissionResolution(mission_id=mission.id, points=tuple(points),
                                 unresolved=tuple(unresolved), warnings=tuple(warnings))
