"""
Weather observation record consumed by the dispersion core.

Observations are supplied already resolved by whatever service acquired them
(station feed, forecast API, manual entry).  The core never fetches weather.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from models.stability import StabilityClass


@dataclass
class WeatherObservation:
    """A single surface weather observation.

    Args:
        wind_speed: Wind speed at 10 m (m/s).  Zero means still air.
        wind_direction: Meteorological degrees, direction the wind comes FROM.
        temperature: Air temperature (°C).
        pressure: Station pressure (hPa).
        cloud_cover: Cloud cover in percent (0-100).
        solar_radiation: Measured solar insolation (W/m^2).
        stability_class: Pasquill-Gifford class A-F, or None to derive it.
        mixing_height: Mixing / inversion height (m).
        timestamp: Local observation time.
        station_id: Optional station identifier.
    """

    wind_speed: float
    wind_direction: float = 270.0
    temperature: float = 20.0
    pressure: float = 1013.25
    cloud_cover: Optional[float] = None
    solar_radiation: Optional[float] = None
    stability_class: Optional[Union[str, StabilityClass]] = None
    mixing_height: Optional[float] = None
    timestamp: Optional[datetime] = None
    station_id: Optional[str] = None

    def __post_init__(self):
        if self.wind_speed < 0:
            raise ValueError("Wind speed must be >= 0")
        if self.pressure <= 0:
            raise ValueError("Pressure must be > 0")
        if self.temperature <= -273.15:
            raise ValueError("Temperature must be above absolute zero")
        if self.cloud_cover is not None and not 0.0 <= self.cloud_cover <= 100.0:
            raise ValueError("Cloud cover must be a percentage in [0, 100]")
        if self.stability_class is not None:
            self.stability_class = StabilityClass.parse(self.stability_class)
