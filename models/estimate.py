"""
Evaluation points, results and diagnostics.

Plume-local coordinates:
  - x: downwind distance from the source along the wind (meters).
  - y: crosswind offset, positive to the LEFT of the wind (meters).
  - z: height above ground (meters).

Wind direction uses METEOROLOGICAL convention (direction wind comes FROM).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from models.risk import RiskTier
from models.stability import StabilityClass


class ModelKind(str, Enum):
    LIGHT_GAS = "light_gas"
    HEAVY_GAS = "heavy_gas"


class Regime(str, Enum):
    GAUSSIAN = "gaussian"
    GRAVITY_DOMINATED = "gravity_dominated"
    PASSIVE_DIFFUSION = "passive_diffusion"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal note attached to a result (fallbacks, isolated failures)."""

    code: str
    message: str


@dataclass(frozen=True)
class EvaluationPoint:
    """A receptor in plume-local coordinates."""

    x: float
    y: float = 0.0
    z: float = 0.0
    name: Optional[str] = None


@dataclass(frozen=True)
class PlumeField:
    """Raw model output for one or more points.

    ``regime`` holds one Regime value per point (object array).
    """

    concentration: np.ndarray
    regime: np.ndarray


@dataclass(frozen=True)
class ConcentrationEstimate:
    """Concentration at one point, with the context used to compute it."""

    x: float
    y: float
    z: float
    concentration: float
    units: str
    distance: float
    direction: float
    stability_class: StabilityClass
    model: ModelKind
    regime: Regime
    risk_tier: RiskTier
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)
    name: Optional[str] = None


def to_plume_coordinates(east, north, wind_direction_deg: float):
    """
    Project east/north offsets from the source onto downwind/crosswind axes.

    Args:
        east, north: Offsets from the source in meters (scalars or arrays).
        wind_direction_deg: Meteorological wind direction (degrees, 0=N, 90=E).

    Returns:
        (downwind, crosswind) in meters.
    """
    # Met convention: 270 means wind FROM the west, blowing toward east (+x)
    wind_toward_rad = np.radians((wind_direction_deg + 180.0) % 360.0)
    wind_ux = np.sin(wind_toward_rad)
    wind_uy = np.cos(wind_toward_rad)

    downwind = east * wind_ux + north * wind_uy
    crosswind = -east * wind_uy + north * wind_ux
    return downwind, crosswind


def from_plume_coordinates(x, y, wind_direction_deg: float):
    """Inverse of ``to_plume_coordinates``: returns (east, north) offsets."""
    wind_toward_rad = np.radians((wind_direction_deg + 180.0) % 360.0)
    wind_ux = np.sin(wind_toward_rad)
    wind_uy = np.cos(wind_toward_rad)

    east = x * wind_ux - y * wind_uy
    north = x * wind_uy + y * wind_ux
    return east, north


def bearing_from_source(x, y, wind_direction_deg: float):
    """Compass bearing (degrees clockwise from north) of a plume-local point."""
    east, north = from_plume_coordinates(x, y, wind_direction_deg)
    return np.degrees(np.arctan2(east, north)) % 360.0
