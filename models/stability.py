"""
Atmospheric Stability Classification.

Derives a Pasquill-Gifford-Turner stability class (A = very unstable through
F = very stable) from surface weather observations, following the manual
data-entry method: wind speed, cloud cover, day/night and solar insolation.

Lookup tables are immutable and keyed by wind-speed bin.  Where the reference
table allows a pair of classes (e.g. "A-B"), the more stable class is used.
"""

import math
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Optional, Union

from config import (
    OVERCAST_CLOUD_COVER_PCT,
    SOLAR_ALTITUDE_MIN_DEG,
    SOLAR_CONSTANT_W_M2,
    CLOUD_ATTENUATION,
    DAYTIME_START_HOUR,
    DAYTIME_END_HOUR,
)


class StabilityClass(str, Enum):
    """Pasquill-Gifford-Turner stability class."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"

    @classmethod
    def parse(cls, value: Union[str, "StabilityClass"]) -> "StabilityClass":
        """Accept a class or a (case-insensitive) letter."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Invalid stability class: {value!r}. Use A-F.") from None


class Insolation(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    SLIGHT = "slight"
    NONE = "none"


# Upper bounds (exclusive) of the wind-speed bins, m/s.  The last bin is >= 6.
WIND_SPEED_BINS = (2.0, 3.0, 5.0, 6.0)

_S = StabilityClass

# Rows indexed by wind bin: <2, 2-3, 3-5, 5-6, >=6
DAYTIME_TABLE = MappingProxyType({
    Insolation.STRONG:   (_S.A, _S.B, _S.B, _S.C, _S.C),
    Insolation.MODERATE: (_S.B, _S.B, _S.C, _S.D, _S.D),
    Insolation.SLIGHT:   (_S.B, _S.C, _S.C, _S.D, _S.D),
    Insolation.NONE:     (_S.D, _S.D, _S.D, _S.D, _S.D),
})

# Keyed by "cloud cover above the overcast threshold"
NIGHTTIME_TABLE = MappingProxyType({
    True:  (_S.E, _S.E, _S.D, _S.D, _S.D),
    False: (_S.F, _S.F, _S.E, _S.D, _S.D),
})

STABILITY_DESCRIPTIONS = MappingProxyType({
    _S.A: "Extremely Unstable",
    _S.B: "Moderately Unstable",
    _S.C: "Slightly Unstable",
    _S.D: "Neutral",
    _S.E: "Slightly Stable",
    _S.F: "Moderately Stable",
})


def _wind_bin(wind_speed: float) -> int:
    for i, upper in enumerate(WIND_SPEED_BINS):
        if wind_speed < upper:
            return i
    return len(WIND_SPEED_BINS)


def classify_insolation(solar_insolation: float) -> Insolation:
    """Bucket incoming solar radiation (W/m^2) into the table's bands."""
    if solar_insolation > 851:
        return Insolation.STRONG
    if solar_insolation > 526:
        return Insolation.MODERATE
    if solar_insolation > 176:
        return Insolation.SLIGHT
    return Insolation.NONE


def classify_stability(
    wind_speed: float,
    cloud_cover: float,
    is_daytime: bool,
    solar_insolation: Optional[float] = None,
    over_water: bool = False,
) -> StabilityClass:
    """
    Determine the Pasquill-Gifford-Turner stability class.

    Rules are applied in order:
        1. Over water -> E.
        2. Cloud cover above 50 % -> D, day or night.
        3. Daytime -> insolation band x wind-speed bin lookup.
        4. Nighttime -> wind-speed bin x overcast flag lookup.

    Args:
        wind_speed: Wind speed at 10 m (m/s, must be >= 0).
        cloud_cover: Cloud cover in percent (0-100).
        is_daytime: Whether the sun is up.
        solar_insolation: Incoming solar radiation in W/m^2.  Treated as 0 if absent.
        over_water: Plume travels over water.

    Returns:
        StabilityClass.
    """
    if wind_speed < 0:
        raise ValueError("Wind speed must be >= 0")

    if over_water:
        return StabilityClass.E

    overcast = cloud_cover > OVERCAST_CLOUD_COVER_PCT
    if overcast:
        return StabilityClass.D

    column = _wind_bin(wind_speed)
    if is_daytime:
        band = classify_insolation(solar_insolation or 0.0)
        return DAYTIME_TABLE[band][column]
    return NIGHTTIME_TABLE[overcast][column]


def describe_stability(stability_class: Union[str, StabilityClass]) -> str:
    """Human-readable description of a stability class."""
    return STABILITY_DESCRIPTIONS[StabilityClass.parse(stability_class)]


def is_daytime(when: datetime) -> bool:
    """Daytime is taken as 06:00-18:00 local time inclusive."""
    return DAYTIME_START_HOUR <= when.hour <= DAYTIME_END_HOUR


def solar_declination(day_of_year: int) -> float:
    """Solar declination in degrees for a day of the year (1-366)."""
    return 23.45 * math.sin(math.radians(360.0 * (284 + day_of_year) / 365.0))


def solar_altitude(latitude: float, when: datetime) -> float:
    """
    Solar altitude angle in degrees.

    Uses local clock time for the hour angle (15 degrees per hour from noon).

    Args:
        latitude: Latitude in decimal degrees.
        when: Local date and time.
    """
    lat = math.radians(latitude)
    decl = math.radians(solar_declination(when.timetuple().tm_yday))
    hour_angle = math.radians(15.0 * (when.hour + when.minute / 60.0 - 12.0))

    sin_alt = (
        math.sin(lat) * math.sin(decl)
        + math.cos(lat) * math.cos(decl) * math.cos(hour_angle)
    )
    sin_alt = min(1.0, max(-1.0, sin_alt))
    return math.degrees(math.asin(sin_alt))


def solar_insolation(latitude: float, when: datetime, cloud_cover: float) -> float:
    """
    Estimate incoming solar radiation when no measurement is available.

        I = 1100 * sin(altitude) * (1 - 0.71 * tenths / 10)

    Args:
        latitude: Latitude in decimal degrees.
        when: Local date and time.
        cloud_cover: Cloud cover in percent (converted to tenths).

    Returns:
        Insolation in W/m^2, never negative.
    """
    altitude = solar_altitude(latitude, when)
    if altitude <= SOLAR_ALTITUDE_MIN_DEG:
        return 0.0

    tenths = cloud_cover / 10.0
    cloudiness = 1.0 - CLOUD_ATTENUATION * (tenths / 10.0)
    insolation = SOLAR_CONSTANT_W_M2 * math.sin(math.radians(altitude)) * cloudiness
    return max(0.0, insolation)
