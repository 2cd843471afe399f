import csv
from pathlib import Path

import numpy as np
import pydantic
from pydantic import ConfigDict, field_validator

from mission_trajectories.constants import J2000_JD
from mission_trajectories.errors import ConfigurationError
from mission_trajectories.orbital_elements import OrbitalElements, check_elements


class MinorBody(pydantic.BaseModel):
    """
    A body whose position is propagated analytically from its own orbital elements.

    Used for comets, asteroids and the reference orbits probes are pinned to when
    no ephemeris covers them.

    Attributes:
        name: Name used by CustomOrbitAnchored waypoints (e.g., "Gaspra", "67P")
        kind: Free classification ("asteroid", "comet", "orbit")
        elements: Orbital elements of the body
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)  # Allow OrbitalElements (NamedTuple)

    name: str
    kind: str = "asteroid"
    elements: OrbitalElements

    @field_validator('elements')
    @classmethod
    def validate_elements(cls, v: OrbitalElements) -> OrbitalElements:
        return check_elements(v)

    def get_position(self, t: float) -> np.ndarray:
        """
        Heliocentric ecliptic position of the body.

        Args:
            t: Time in days since J2000

        Returns:
            Position [x, y, z] in AU
        """
        from mission_trajectories.astrodynamics import keplerian_position
        return keplerian_position(self.elements, t)

    def orbit_line(self, n: int = 360, start_time: float = 0.0) -> np.ndarray:
        """
        Positions (AU) over one full revolution starting at start_time, for drawing the orbit.

        Returns:
            Array of shape (n, 3)
        """
        from mission_trajectories.astrodynamics import sample_orbit
        return sample_orbit(self.elements, n=n, start_time=start_time)

    def __repr__(self) -> str:
        return f"MinorBody(name='{self.name}', kind='{self.kind}')"

    def __str__(self) -> str:
        return self.name


def load_minor_bodies(filepath: str | Path | None = None) -> dict[str, MinorBody]:
    """
    Load minor bodies (asteroids, comets, reference orbits) from a CSV file.

    Returns:
        Dictionary mapping body name to MinorBody object

    Raises:
        ConfigurationError: if a row is missing a column or holds invalid elements
    """
    # Default data file lives next to this module
    if filepath is None:
        filepath = Path(__file__).parent / 'data' / 'minor_bodies.csv'
    filepath = Path(filepath)

    bodies = {}
    with open(filepath, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(row for row in f if not row.startswith('#'))
        for row_no, row in enumerate(reader, start=1):
            try:
                name = row['Name'].strip()
                # Blank epoch means the elements are referred to J2000
                epoch_text = (row.get('Epoch (JD)') or '').strip()
                elements = OrbitalElements(
                    a=float(row['Semi-Major Axis (AU)']),
                    e=float(row['Eccentricity ()']),
                    i=float(row['Inclination (deg)']),
                    Omega=float(row['Longitude of the Ascending Node (deg)']),
                    omega=float(row['Argument of Periapsis (deg)']),
                    M0=float(row['Mean Anomaly at Epoch (deg)']),
                    epoch=float(epoch_text) if epoch_text else J2000_JD,
                )
                body = MinorBody(name=name, kind=(row.get('Kind') or 'asteroid').strip(), elements=elements)
            except (KeyError, ValueError) as exc:
                # pydantic.ValidationError is a ValueError
                raise ConfigurationError(f"{filepath.name} row {row_no}: {exc}") from exc
            if name in bodies:
                raise ConfigurationError(f"{filepath.name} row {row_no}: duplicate body '{name}'")
            bodies[name] = body

    return bodies


minor_bodies = load_minor_bodies()
