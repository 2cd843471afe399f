"""
Physical, time and display constants for mission trajectory computation.

All lengths handed to and returned from the ephemeris are in AU; trajectories are
stored in scene units (AU * SCENE_UNITS_PER_AU). Times are days since J2000.
"""

# Time
DAY = 86400.0  # seconds per day
J2000_JD = 2451545.0  # Julian Date of 2000-01-01T12:00:00 TT
DAYS_PER_CENTURY = 36525.0
SIDEREAL_YEAR_DAYS = 365.256363004

# Kepler's third law in heliocentric units: mean motion (deg/day) of a body with a = 1 AU
GAUSSIAN_MEAN_MOTION_DEG = 0.9856076686

# Kepler solver
KEPLER_TOL = 1.0e-6
KEPLER_MAX_ITER = 30

# Scene / display
SCENE_UNITS_PER_AU = 50.0
REAL_PLANET_SCALE_FACTOR = 500.0  # display scale slider of 1.0 shows bodies 500x enlarged
SURFACE_RADIUS_AU = 0.000045  # Earth radius + low orbit altitude, used for launch anchors

# Trajectory generation
DEFAULT_SAMPLE_COUNT = 1000
DEFAULT_REBASE_THRESHOLD = 1000.0  # scene units

# Reserved ephemeris ids
SUN_ID = "Sun"
EARTH_ID = "Earth"
BARYCENTER_ID = "SSB"

# Mean obliquity of the ecliptic at J2000 (deg), rotates equatorial launch anchors into the ecliptic
OBLIQUITY_J2000_DEG = 23.4392911
