from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from mission_trajectories.astrodynamics import radec_to_ecliptic
from mission_trajectories.errors import ConfigurationError
from mission_trajectories.timescales import parse_datetime, to_j2000_days


class Offset(BaseModel):
    """
    Body-relative displacement of a waypoint, in AU.

    For body and orbit anchored waypoints the offset is multiplied by the display
    scale factor so the path stays outside an enlarged body.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


class SurfaceAnchor(BaseModel):
    """
    Geographic launch site on a rotating body (latitude/longitude in degrees).
    The site direction follows the body's sidereal rotation at the waypoint date.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Geodetic latitude (deg)")
    longitude: float = Field(..., ge=-180.0, le=360.0, description="East longitude (deg)")


class ExitDirection(BaseModel):
    """Asymptotic direction a probe leaves the solar system along, as right ascension / declination."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    ra: float = Field(..., ge=0.0, le=24.0, description="Right ascension (hours)")
    dec: float = Field(..., ge=-90.0, le=90.0, description="Declination (deg)")

    def unit_vector(self) -> np.ndarray:
        """Exit direction as a unit vector in the ecliptic frame the ephemeris uses."""
        return radec_to_ecliptic(self.ra, self.dec)


class WaypointBase(BaseModel):
    """
    Fields shared by every waypoint kind.

    Attributes
    ----------
    date : datetime
        Instant the probe passes the waypoint (UTC). Date-only strings mean midnight UTC.
    label : Optional[str]
        Display label, passed through untouched.
    offset : Optional[Offset]
        Body-relative displacement added after resolution.
    surface : Optional[SurfaceAnchor]
        Launch site on the anchor body; only valid for body and orbit anchored kinds.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    date: datetime = Field(..., description="Waypoint date (UTC)")
    label: Optional[str] = Field(default=None, description="Display label")
    offset: Optional[Offset] = Field(default=None, description="Body-relative offset (AU)")
    surface: Optional[SurfaceAnchor] = Field(default=None, description="Surface launch site")

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v: Any) -> datetime:
        try:
            return parse_datetime(v)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc

    @model_validator(mode='after')
    def validate_displacements(self):
        if self.offset is not None and self.surface is not None:
            raise ValueError("A waypoint may carry an offset or a surface anchor, not both")
        if self.surface is not None and not self.is_body_relative:
            raise ValueError(f"Surface anchors require a body or orbit anchored waypoint, not '{self.kind}'")
        return self

    @property
    def time(self) -> float:
        """Waypoint date in days since J2000."""
        return to_j2000_days(self.date)

    @property
    def is_body_relative(self) -> bool:
        return False


class BodyAnchored(WaypointBase):
    """Waypoint pinned to an ephemeris body at the waypoint date."""
    kind: Literal['body'] = 'body'
    body: str = Field(..., min_length=1, description="Ephemeris body id")

    @property
    def is_body_relative(self) -> bool:
        return True


class CustomOrbitAnchored(WaypointBase):
    """Waypoint pinned to a minor body propagated from its own orbital elements."""
    kind: Literal['orbit'] = 'orbit'
    orbit: str = Field(..., min_length=1, description="Name of a minor body / custom orbit")

    @property
    def is_body_relative(self) -> bool:
        return True


class FixedPosition(WaypointBase):
    """Waypoint at a literal heliocentric position (AU)."""
    kind: Literal['position'] = 'position'
    position: Tuple[float, float, float] = Field(..., description="Heliocentric position [x, y, z] (AU)")


class ExitVector(WaypointBase):
    """Deep-space waypoint along the mission's exit direction at a heliocentric distance."""
    kind: Literal['exit'] = 'exit'
    distance: float = Field(..., gt=0.0, description="Heliocentric distance (AU)")


class Interpolated(WaypointBase):
    """Waypoint whose position is interpolated in time between its resolved neighbors."""
    kind: Literal['interpolate'] = 'interpolate'


Waypoint = Annotated[
    Union[BodyAnchored, CustomOrbitAnchored, FixedPosition, ExitVector, Interpolated],
    Field(discriminator='kind'),
]

DIRECT_WAYPOINT_TYPES = (BodyAnchored, CustomOrbitAnchored, FixedPosition, ExitVector)


class TimelineEvent(BaseModel):
    model_config = ConfigDict(frozen=True, extra='forbid')

    date: datetime
    label: str

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v: Any) -> datetime:
        try:
            return parse_datetime(v)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc


class Mission(BaseModel):
    """
    Static configuration of one probe's path.

    Attributes
    ----------
    id : str
        Stable mission identifier used for lookups.
    name : str
        Display name (defaults to the id).
    color : Optional[str]
        Display color, passed through.
    exit : Optional[ExitDirection]
        Exit direction used by ExitVector waypoints.
    waypoints : List[Waypoint]
        Waypoints in strictly increasing date order.
    timeline : List[TimelineEvent]
        Labelled events for display, passed through.
    metadata : Dict[str, Any]
        Any further display metadata, passed through.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    id: str = Field(..., min_length=1, description="Mission identifier")
    name: str = Field(default="", description="Display name")
    color: Optional[str] = Field(default=None, description="Display color")
    exit: Optional[ExitDirection] = Field(default=None, description="Exit direction (RA/Dec)")
    waypoints: List[Waypoint] = Field(..., description="Ordered waypoints")
    timeline: List[TimelineEvent] = Field(default_factory=list, description="Labelled events")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Pass-through display metadata")

    @field_validator('waypoints')
    @classmethod
    def validate_waypoint_dates(cls, v: List[WaypointBase]) -> List[WaypointBase]:
        """Validate that waypoint dates are strictly increasing."""
        if len(v) == 0:
            raise ValueError("waypoints must contain at least one element")

        for i in range(1, len(v)):
            if v[i].date <= v[i-1].date:
                raise ValueError(
                    f"waypoint dates must be strictly increasing. "
                    f"Found {v[i].date.isoformat()} <= {v[i-1].date.isoformat()} at indices {i} and {i-1}"
                )
        return v

    @model_validator(mode='after')
    def validate_mission(self):
        if self.exit is None:
            for i, wp in enumerate(self.waypoints):
                if isinstance(wp, ExitVector):
                    raise ValueError(f"waypoint {i} is an exit vector but mission '{self.id}' has no exit direction")
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def start_time(self) -> float:
        return self.waypoints[0].time

    @property
    def end_time(self) -> float:
        return self.waypoints[-1].time

    @property
    def waypoint_times(self) -> np.ndarray:
        return np.array([wp.time for wp in self.waypoints], dtype=float)

    def body_ids(self) -> set[str]:
        return {wp.body for wp in self.waypoints if isinstance(wp, BodyAnchored)}

    def orbit_names(self) -> set[str]:
        return {wp.orbit for wp in self.waypoints if isinstance(wp, CustomOrbitAnchored)}


class MissionCatalog(BaseModel):
    """
    The set of missions the engine computes trajectories for.
    """
    missions: List[Mission] = Field(default_factory=list, description="Missions")

    @field_validator('missions')
    @classmethod
    def validate_unique_ids(cls, v: List[Mission]) -> List[Mission]:
        seen = set()
        for mission in v:
            if mission.id in seen:
                raise ValueError(f"duplicate mission id '{mission.id}'")
            seen.add(mission.id)
        return v

    @property
    def ids(self) -> List[str]:
        return [m.id for m in self.missions]

    def get(self, mission_id: str) -> Optional[Mission]:
        for mission in self.missions:
            if mission.id == mission_id:
                return mission
        return None

    def __iter__(self):
        return iter(self.missions)

    def __len__(self) -> int:
        return len(self.missions)

    def validate_against(self, ephemeris, orbits: Mapping[str, Any]) -> 'MissionCatalog':
        """
        Check every referenced body id and custom orbit name can be resolved.

        Raises
        ------
        ConfigurationError
            For the first unknown body id or orbit name found.
        """
        for mission in self.missions:
            for body_id in sorted(mission.body_ids()):
                if body_id not in ephemeris:
                    raise ConfigurationError(f"Mission '{mission.id}' references unknown body id '{body_id}'")
            for name in sorted(mission.orbit_names()):
                if name not in orbits:
                    raise ConfigurationError(f"Mission '{mission.id}' references unknown custom orbit '{name}'")
        return self

    def save(self, filepath: str | Path) -> None:
        """
        Save the catalog to a JSON file.
        """
        filepath = Path(filepath)
        with open(filepath, 'w') as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def model_validate(cls, obj: Any, **kwargs) -> 'MissionCatalog':
        """Validate a parsed document, raising ConfigurationError instead of ValidationError."""
        try:
            return super().model_validate(obj, **kwargs)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid mission configuration:\n{exc}") from exc

    @classmethod
    def model_validate_json(cls, json_data: str | bytes, **kwargs) -> 'MissionCatalog':
        try:
            return super().model_validate_json(json_data, **kwargs)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid mission configuration:\n{exc}") from exc

    @classmethod
    def from_json(cls, text: str | bytes) -> 'MissionCatalog':
        return cls.model_validate_json(text)

    @classmethod
    def load(cls, filepath: str | Path) -> 'MissionCatalog':
        """
        Load a mission catalog from a JSON file.

        Parameters
        ----------
        filepath : str | Path
            Path to the JSON file to load.

        Returns
        -------
        MissionCatalog
            The validated catalog.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or does not validate.
        """
        filepath = Path(filepath)
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                text = f.read()
        except OSError as exc:
            raise ConfigurationError(f"Could not read mission configuration {filepath}: {exc}") from exc
        return cls.from_json(text)


DEFAULT_CATALOG_PATH = Path(__file__).parent / 'data' / 'missions.json'


def load_default_catalog() -> MissionCatalog:
    """Load the bundled catalog of historic probe missions."""
    return MissionCatalog.load(DEFAULT_CATALOG_PATH)
