"""
Dispersion Coefficients (Briggs, 1973).

Distance-dependent plume spread for each Pasquill-Gifford stability class,
for open-country (rural) and urban surfaces:

    sigma_y = sy1 * x * (1 + sy2 * x) ** -0.5
    sigma_z = sz1 * x * (1 + sz2 * x) ** sz3
    sigma_x = sx1 * x_km ** sx2            (along-wind, for puff passage)

x is the downwind distance in meters (x_km in kilometers); all sigmas are in
meters and floored at 1 m.  Every curve is strictly increasing in x.

Also provides the power-law wind profile used to bring the 10 m reference wind
to the release or cloud height.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Tuple, Union

import numpy as np

from config import (
    URBAN_ROUGHNESS_THRESHOLD_M,
    WIND_REFERENCE_HEIGHT_M,
    WIND_PROFILE_MIN_HEIGHT_M,
)
from models.stability import StabilityClass

MIN_SIGMA_M = 1.0


@dataclass(frozen=True)
class BriggsCoefficients:
    """Coefficient set for one stability class and surface type."""

    sy1: float
    sy2: float
    sz1: float
    sz2: float
    sz3: float
    sx1: float
    sx2: float


_S = StabilityClass

# Along-wind spread does not depend on the surface.
_SX = {
    _S.A: (0.02, 1.22),
    _S.B: (0.02, 1.22),
    _S.C: (0.02, 1.22),
    _S.D: (0.04, 1.14),
    _S.E: (0.17, 0.97),
    _S.F: (0.17, 0.97),
}

RURAL_COEFFICIENTS = MappingProxyType({
    _S.A: BriggsCoefficients(0.22, 0.0001, 0.20,  0.0,    0.0,  *_SX[_S.A]),
    _S.B: BriggsCoefficients(0.16, 0.0001, 0.12,  0.0,    0.0,  *_SX[_S.B]),
    _S.C: BriggsCoefficients(0.11, 0.0001, 0.08,  0.0002, -0.5, *_SX[_S.C]),
    _S.D: BriggsCoefficients(0.08, 0.0001, 0.06,  0.0015, -0.5, *_SX[_S.D]),
    _S.E: BriggsCoefficients(0.06, 0.0001, 0.03,  0.0003, -1.0, *_SX[_S.E]),
    _S.F: BriggsCoefficients(0.04, 0.0001, 0.016, 0.0003, -1.0, *_SX[_S.F]),
})

# Urban surfaces keep the open-country lateral spread and change only sigma_z.
URBAN_COEFFICIENTS = MappingProxyType({
    _S.A: BriggsCoefficients(0.22, 0.0001, 0.24, 0.0,    0.0,  *_SX[_S.A]),
    _S.B: BriggsCoefficients(0.16, 0.0001, 0.24, 0.0,    0.0,  *_SX[_S.B]),
    _S.C: BriggsCoefficients(0.11, 0.0001, 0.20, 0.0003, 0.0,  *_SX[_S.C]),
    _S.D: BriggsCoefficients(0.08, 0.0001, 0.14, 0.0003, -0.5, *_SX[_S.D]),
    _S.E: BriggsCoefficients(0.06, 0.0001, 0.08, 0.0015, -0.5, *_SX[_S.E]),
    _S.F: BriggsCoefficients(0.04, 0.0001, 0.05, 0.0003, -1.0, *_SX[_S.F]),
})

# Power-law wind profile exponents, unstable -> very stable
WIND_PROFILE_EXPONENTS = MappingProxyType({
    _S.A: 0.109,
    _S.B: 0.112,
    _S.C: 0.120,
    _S.D: 0.142,
    _S.E: 0.203,
    _S.F: 0.253,
})

ArrayLike = Union[float, np.ndarray]


def is_urban(surface_roughness: float) -> bool:
    """Surfaces with roughness length >= 0.20 m use the urban table."""
    return surface_roughness >= URBAN_ROUGHNESS_THRESHOLD_M


def get_coefficients(
    stability_class: Union[str, StabilityClass],
    urban: bool = False,
) -> BriggsCoefficients:
    """Return the coefficient set for a stability class and surface type."""
    sc = StabilityClass.parse(stability_class)
    table = URBAN_COEFFICIENTS if urban else RURAL_COEFFICIENTS
    return table[sc]


def _distance(x: ArrayLike) -> np.ndarray:
    # Upwind and zero distances have no plume; clamp so the curves stay defined.
    return np.maximum(np.asarray(x, dtype=float), MIN_SIGMA_M)


def sigma_y(x: ArrayLike, stability_class, urban: bool = False) -> np.ndarray:
    """Lateral (crosswind) spread in meters."""
    c = get_coefficients(stability_class, urban)
    xm = _distance(x)
    sy = c.sy1 * xm * np.power(1.0 + c.sy2 * xm, -0.5)
    return np.maximum(sy, MIN_SIGMA_M)


def sigma_z(x: ArrayLike, stability_class, urban: bool = False) -> np.ndarray:
    """Vertical spread in meters."""
    c = get_coefficients(stability_class, urban)
    xm = _distance(x)
    sz = c.sz1 * xm * np.power(1.0 + c.sz2 * xm, c.sz3)
    return np.maximum(sz, MIN_SIGMA_M)


def sigma_x(x: ArrayLike, stability_class, urban: bool = False) -> np.ndarray:
    """Along-wind spread in meters (puff duration estimates)."""
    c = get_coefficients(stability_class, urban)
    x_km = _distance(x) / 1000.0
    sx = c.sx1 * np.power(x_km, c.sx2) * 1000.0
    return np.maximum(sx, MIN_SIGMA_M)


def compute_sigma(
    distance_downwind: ArrayLike,
    stability_class,
    urban: bool = False,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute lateral (sigma_y) and vertical (sigma_z) dispersion parameters.

    Args:
        distance_downwind: Downwind distances in meters (must be > 0 for valid results).
        stability_class: Pasquill-Gifford class A-F.
        urban: Use the urban coefficient table.

    Returns:
        (sigma_y, sigma_z) arrays in meters.
    """
    return (
        sigma_y(distance_downwind, stability_class, urban),
        sigma_z(distance_downwind, stability_class, urban),
    )


def wind_speed_at_height(
    reference_speed: float,
    height: ArrayLike,
    stability_class,
) -> np.ndarray:
    """
    Power-law wind profile u(h) = u_ref * (h / 10) ** p.

    Heights below WIND_PROFILE_MIN_HEIGHT_M are evaluated at that height so a
    ground-level source still sees a finite, non-zero wind.
    """
    p = WIND_PROFILE_EXPONENTS[StabilityClass.parse(stability_class)]
    h = np.maximum(np.asarray(height, dtype=float), WIND_PROFILE_MIN_HEIGHT_M)
    return reference_speed * np.power(h / WIND_REFERENCE_HEIGHT_M, p)
