"""
Release record: where, when and how much material was released.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from config import DEFAULT_SURFACE_ROUGHNESS_M


class ReleaseType(str, Enum):
    INSTANTANEOUS = "instantaneous"
    CONTINUOUS = "continuous"
    VARIABLE = "variable"


@dataclass
class Release:
    """A chemical release event.

    Args:
        name: Label for reports.
        latitude, longitude: Source location (decimal degrees).
        release_height: Height of release above ground (m, >= 0).
        release_type: Instantaneous, continuous or variable.
        release_rate: Release rate (kg/s).
        total_mass: Total mass released (kg).
        start_time: Start of the release (local time).
        end_time: End of the release, None while ongoing.
        initial_temperature: Temperature of released material (°C).
        initial_pressure: Pressure of the released cloud (Pa).
        source_diameter: Diameter of the vent or stack opening (m).
        surface_roughness: Roughness length of the terrain (m).
        over_water: The plume travels over water.
    """

    name: str = "Release"
    latitude: float = 0.0
    longitude: float = 0.0
    release_height: float = 0.0
    release_type: Union[str, ReleaseType] = ReleaseType.CONTINUOUS
    release_rate: Optional[float] = None
    total_mass: Optional[float] = None
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    initial_temperature: Optional[float] = None
    initial_pressure: Optional[float] = None
    source_diameter: Optional[float] = None
    surface_roughness: float = DEFAULT_SURFACE_ROUGHNESS_M
    over_water: bool = False

    def __post_init__(self):
        if self.release_height < 0:
            raise ValueError("Release height must be >= 0")
        if self.release_rate is not None and self.release_rate < 0:
            raise ValueError("Release rate must be >= 0")
        if self.total_mass is not None and self.total_mass < 0:
            raise ValueError("Total mass must be >= 0")
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("End time must not precede start time")
        if self.initial_temperature is not None and self.initial_temperature <= -273.15:
            raise ValueError("Initial temperature must be above absolute zero")
        if self.initial_pressure is not None and self.initial_pressure <= 0:
            raise ValueError("Initial pressure must be > 0")
        if self.source_diameter is not None and self.source_diameter <= 0:
            raise ValueError("Source diameter must be > 0")
        if self.surface_roughness < 0:
            raise ValueError("Surface roughness must be >= 0")
        if not isinstance(self.release_type, ReleaseType):
            self.release_type = str(self.release_type).strip().lower()
        try:
            self.release_type = ReleaseType(self.release_type)
        except ValueError:
            raise ValueError(f"Unknown release type: {self.release_type!r}") from None

    def duration_s(self) -> Optional[float]:
        """Release duration in seconds, or None when no end time is known."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()
