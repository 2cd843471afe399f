"""
Orchestration of resolution, frame correction, densification and queries.

A TrajectoryEngine owns one TrajectoryStore. Recomputes are explicit and run
synchronously over every mission in the catalog; a mission that cannot be
densified is skipped without affecting the others.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional

import numpy as np

from mission_trajectories.bodies import MinorBody, minor_bodies
from mission_trajectories.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from mission_trajectories.context import SimulationContext
from mission_trajectories.ephemeris import Ephemeris, PlanetaryEphemeris
from mission_trajectories.errors import DensificationFailure, ResolutionWarning
from mission_trajectories.frames import correct_points
from mission_trajectories.mission import Mission, MissionCatalog
from mission_trajectories.query import MissionState, state_from_trajectory, state_from_waypoints
from mission_trajectories.resolver import MissionResolution, WaypointResolver
from mission_trajectories.spline import densify
from mission_trajectories.timescales import Instant, to_j2000_days
from mission_trajectories.trajectory import Trajectory, TrajectoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecomputeReport:
    """
    Outcome of one recompute.

    Attributes:
        context: Context the trajectories were computed for
        built: Missions with a fresh trajectory
        skipped: Missions whose densification failed (previous trajectory discarded)
        warned: Missions with interpolated waypoints placed at the origin
        warnings: Every resolution warning raised during the recompute
    """
    context: SimulationContext
    built: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    warned: tuple[str, ...] = ()
    warnings: tuple[ResolutionWarning, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.skipped and not self.warned


class TrajectoryEngine:
    """
    Computes and serves the trajectories of every mission in a catalog.

    Parameters
    ----------
    catalog : MissionCatalog
        Missions to compute. Every body id and orbit name is checked up front.
    ephemeris : Ephemeris, optional
        Body position provider (default: PlanetaryEphemeris).
    config : EngineConfig, optional
        Sample count, rebase threshold and unit settings.
    orbits : Mapping[str, MinorBody], optional
        Custom orbits by name (default: bundled minor bodies).

    Raises
    ------
    ConfigurationError
        If the catalog references an unknown body id or orbit name.
    """

    def __init__(self, catalog: MissionCatalog, ephemeris: Optional[Ephemeris] = None,
                 config: EngineConfig = DEFAULT_ENGINE_CONFIG,
                 orbits: Optional[Mapping[str, MinorBody]] = None):
        self.ephemeris = PlanetaryEphemeris() if ephemeris is None else ephemeris
        self.orbits = dict(minor_bodies if orbits is None else orbits)
        self.catalog = catalog.validate_against(self.ephemeris, self.orbits)
        self.config = config
        self.resolver = WaypointResolver(self.ephemeris, self.orbits, config)
        self.store = TrajectoryStore(config)
        self.context: Optional[SimulationContext] = None
        self.last_report: Optional[RecomputeReport] = None
        self._resolution_scale: Optional[float] = None
        self._resolutions: Dict[str, MissionResolution] = {}

    @property
    def scale(self) -> float:
        """Engine units per AU."""
        return self.config.scene_units_per_au

    def initialize(self, context: Optional[SimulationContext] = None) -> RecomputeReport:
        """First computation of every mission's trajectory."""
        return self.recompute(SimulationContext() if context is None else context)

    def update(self, context: SimulationContext, force: bool = False) -> Optional[RecomputeReport]:
        """
        Advance to a new context, recomputing only when the frame changed or
        force is set. Returns the report of the recompute, or None if none ran.
        """
        if self.context is None or force or context.frame != self.context.frame:
            return self.recompute(context)
        # Trajectories stay at the display scale they were computed with until forced
        self.context = SimulationContext(time=context.time, frame=self.context.frame,
                                         display_scale=self.context.display_scale)
        return None

    def resolution(self, mission: Mission, context: SimulationContext) -> MissionResolution:
        """Frame-agnostic resolution of a mission, cached per display scale."""
        if self._resolution_scale != context.display_scale:
            self._resolutions = {}
            self._resolution_scale = context.display_scale
        cached = self._resolutions.get(mission.id)
        if cached is None:
            cached = self.resolver.resolve_mission(mission, context)
            self._resolutions[mission.id] = cached
        return cached

    def build_trajectory(self, mission: Mission, context: SimulationContext) -> tuple[Trajectory, MissionResolution]:
        """
        Resolve, frame-correct and densify one mission.

        Raises
        ------
        DensificationFailure
            If fewer than 2 points resolve or the spline cannot be evaluated.
        """
        resolution = self.resolution(mission, context)
        if len(resolution.points) < 2:
            raise DensificationFailure(
                f"Mission '{mission.id}' resolved to {len(resolution.points)} point(s); need at least 2")
        corrected = correct_points(resolution.points, context.frame, self.ephemeris)
        dense = densify(corrected, self.config.sample_count)
        return Trajectory.from_points(dense, self.scale, self.store.local_origin), resolution

    def recompute(self, context: SimulationContext) -> RecomputeReport:
        """Rebuild every mission's trajectory for the given context."""
        built, skipped, warned, warnings = [], [], [], []
        for mission in self.catalog:
            try:
                trajectory, resolution = self.build_trajectory(mission, context)
            except DensificationFailure as exc:
                logger.warning("Skipping mission '%s': %s", mission.id, exc)
                self.store.discard(mission.id)
                skipped.append(mission.id)
                continue
            self.store.replace(mission.id, trajectory)
            built.append(mission.id)
            if resolution.flagged:
                warned.append(mission.id)
                warnings.extend(resolution.warnings)

        self.context = context
        report = RecomputeReport(context=context, built=tuple(built), skipped=tuple(skipped),
                                 warned=tuple(warned), warnings=tuple(warnings))
        self.last_report = report
        logger.info("Computed %d/%d trajectories (%s frame, display scale %g); %d skipped, %d with warnings",
                    len(built), len(self.catalog), context.frame.value, context.display_scale,
                    len(skipped), len(warned))
        return report

    def trajectory(self, mission_id: str) -> Optional[Trajectory]:
        return self.store.get(mission_id)

    def state(self, mission_id: str, time: Optional[Instant] = None) -> Optional[MissionState]:
        """
        Position (engine units, absolute) and direction of a mission at time.

        Uses the dense trajectory when one exists, otherwise the waypoints.
        Returns None for unknown missions or times outside the mission span.
        """
        mission = self.catalog.get(mission_id)
        if mission is None:
            return None
        context = SimulationContext() if self.context is None else self.context
        t = context.time if time is None else to_j2000_days(time)

        trajectory = self.store.get(mission_id)
        if trajectory is not None:
            return state_from_trajectory(trajectory, t)
        return state_from_waypoints(mission, self.resolver, context, t, scale=self.scale)

    def progress(self, mission_id: str, time: Optional[Instant] = None) -> Optional[float]:
        """Fraction (0..1, clamped) of the mission's span elapsed at time."""
        mission = self.catalog.get(mission_id)
        if mission is None:
            return None
        if time is None:
            t = 0.0 if self.context is None else self.context.time
        else:
            t = to_j2000_days(time)
        span = mission.end_time - mission.start_time
        if span <= 0.0:
            return 1.0 if t >= mission.end_time else 0.0
        return float(np.clip((t - mission.start_time) / span, 0.0, 1.0))

    def update_reference_point(self, point) -> bool:
        """Rebase every trajectory if point has drifted past the rebase threshold."""
        return self.store.update_reference_point(point)

    def render_buffers(self, mission_ids: Optional[Iterable[str]] = None) -> dict:
        """
        Display buffers for a renderer.

        Returns a dict with the shared 'local_origin' and, under 'missions', a
        flat display position array, sample times and color per mission id.
        """
        ids = self.store.ids() if mission_ids is None else [m for m in mission_ids if m in self.store]
        missions = {}
        for mission_id in ids:
            trajectory = self.store.get(mission_id)
            mission = self.catalog.get(mission_id)
            missions[mission_id] = {
                'name': mission.display_name,
                'color': mission.color,
                'positions': trajectory.display.ravel(),
                'times': trajectory.times,
            }
        return {'local_origin': self.store.local_origin, 'missions': missions}
