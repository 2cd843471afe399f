from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from mission_trajectories.timescales import Instant, to_j2000_days


class ReferenceFrame(str, Enum):
    """Choice of coordinate origin all positions are expressed relative to."""
    HELIOCENTRIC = "Heliocentric"
    GEOCENTRIC = "Geocentric"
    BARYCENTRIC = "Barycentric"
    TYCHONIC = "Tychonic"

    @classmethod
    def parse(cls, value: str | ReferenceFrame) -> ReferenceFrame:
        if isinstance(value, cls):
            return value
        for frame in cls:
            if value.lower() in (frame.value.lower(), frame.name.lower()):
                return frame
        choices = ", ".join(f.value for f in cls)
        raise ValueError(f"Unknown reference frame '{value}'. Must be one of: {choices}")


@dataclass(frozen=True, slots=True)
class SimulationContext:
    """
    Simulation state passed explicitly into resolution, correction and queries.

    Attributes:
        time: Simulation time in days since J2000
        frame: Active reference frame
        display_scale: Body display-scale slider (1.0 shows bodies at the full
            exaggeration factor, values near 0 approach real scale)
    """
    time: float = 0.0
    frame: ReferenceFrame = ReferenceFrame.HELIOCENTRIC
    display_scale: float = 1.0

    @classmethod
    def create(cls, time: Instant = 0.0, frame: str | ReferenceFrame = ReferenceFrame.HELIOCENTRIC,
               display_scale: float = 1.0) -> SimulationContext:
        if display_scale < 0.0:
            raise ValueError(f"display_scale must be non-negative, got {display_scale}")
        return cls(time=to_j2000_days(time), frame=ReferenceFrame.parse(frame), display_scale=float(display_scale))

    def with_frame(self, frame: str | ReferenceFrame) -> SimulationContext:
        return replace(self, frame=ReferenceFrame.parse(frame))

    def at(self, time: Instant) -> SimulationContext:
        return replace(self, time=to_j2000_days(time))
