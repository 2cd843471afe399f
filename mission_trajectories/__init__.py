# Configure JAX to use double precision (64-bit floats) throughout the package
import jax
jax.config.update("jax_enable_x64", True)

from .orbital_elements import OrbitalElements, check_elements

from .constants import (
    # Constants
    DAY,
    J2000_JD,
    GAUSSIAN_MEAN_MOTION_DEG,
    SCENE_UNITS_PER_AU,
    REAL_PLANET_SCALE_FACTOR,
    SURFACE_RADIUS_AU,
    DEFAULT_SAMPLE_COUNT,
    DEFAULT_REBASE_THRESHOLD,
    SUN_ID,
    EARTH_ID,
    BARYCENTER_ID,
)

from .errors import ConfigurationError, ResolutionWarning, DensificationFailure

from .astrodynamics import (
    # Functions
    solve_kepler,
    solve_kepler_vec,
    kepler_residual,
    mean_motion,
    orbital_period,
    keplerian_position,
    keplerian_positions,
    sample_orbit,
    radec_to_ecliptic,
)

from .timescales import (
    to_j2000_days,
    from_j2000_days,
    julian_date,
    greenwich_mean_sidereal_time,
)

from .bodies import MinorBody, load_minor_bodies, minor_bodies
from .ephemeris import Ephemeris, PlanetaryEphemeris, FunctionEphemeris
from .context import ReferenceFrame, SimulationContext
from .config import EngineConfig, make_engine_config, DEFAULT_ENGINE_CONFIG

from .mission import (
    Offset,
    SurfaceAnchor,
    ExitDirection,
    BodyAnchored,
    CustomOrbitAnchored,
    FixedPosition,
    ExitVector,
    Interpolated,
    Waypoint,
    Mission,
    MissionCatalog,
    load_default_catalog,
)

from .resolver import ResolvedPoint, MissionResolution, WaypointResolver
from .frames import frame_origin, correct, uncorrect, correct_points
from .spline import CatmullRomCurve, densify
from .trajectory import Trajectory, TrajectoryStore
from .query import MissionState, state_from_trajectory, state_from_waypoints
from .engine import RecomputeReport, TrajectoryEngine

__all__ = [
    # Data structures
    'OrbitalElements',
    'MinorBody',
    'ResolvedPoint',
    'MissionResolution',
    'Trajectory',
    'TrajectoryStore',
    'MissionState',
    'RecomputeReport',
    'EngineConfig',
    'SimulationContext',
    'ReferenceFrame',

    # Mission configuration
    'Offset',
    'SurfaceAnchor',
    'ExitDirection',
    'BodyAnchored',
    'CustomOrbitAnchored',
    'FixedPosition',
    'ExitVector',
    'Interpolated',
    'Waypoint',
    'Mission',
    'MissionCatalog',
    'load_default_catalog',

    # Ephemerides
    'Ephemeris',
    'PlanetaryEphemeris',
    'FunctionEphemeris',
    'minor_bodies',
    'load_minor_bodies',

    # Constants
    'DAY',
    'J2000_JD',
    'GAUSSIAN_MEAN_MOTION_DEG',
    'SCENE_UNITS_PER_AU',
    'REAL_PLANET_SCALE_FACTOR',
    'SURFACE_RADIUS_AU',
    'DEFAULT_SAMPLE_COUNT',
    'DEFAULT_REBASE_THRESHOLD',
    'SUN_ID',
    'EARTH_ID',
    'BARYCENTER_ID',
    'DEFAULT_ENGINE_CONFIG',

    # Errors
    'ConfigurationError',
    'ResolutionWarning',
    'DensificationFailure',

    # Functions
    'check_elements',
    'solve_kepler',
    'solve_kepler_vec',
    'kepler_residual',
    'mean_motion',
    'orbital_period',
    'keplerian_position',
    'keplerian_positions',
    'sample_orbit',
    'radec_to_ecliptic',
    'to_j2000_days',
    'from_j2000_days',
    'julian_date',
    'greenwich_mean_sidereal_time',
    'make_engine_config',
    'frame_origin',
    'correct',
    'uncorrect',
    'correct_points',
    'CatmullRomCurve',
    'densify',
    'WaypointResolver',
    'state_from_trajectory',
    'state_from_waypoints',
    'TrajectoryEngine',
]
