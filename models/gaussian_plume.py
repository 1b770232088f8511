"""
Gaussian Plume Dispersion Model (light / neutrally buoyant gases).

Steady-state solution for a continuous elevated point source with
Briggs dispersion coefficients:

    C = Q / (u * sigma_y * sigma_z * sqrt(2*pi))
        * exp(-0.5 * (y / sigma_y)^2)
        * vertical(z, H, sigma_z)

where H is the release height plus Briggs plume rise and u is the power-law
wind at H.  The vertical term reflects off the ground, and additionally off
the mixing lid when one is observed above the source.

Convention:
  - Coordinates are plume-local (x downwind, y crosswind, z height), meters.
  - Q in kg/s gives kg/m^3; results are reported in mg/m^3.
"""

import numpy as np

from config import (
    GRAVITY,
    KELVIN_OFFSET,
    KG_TO_MG,
    REFLECTION_TERMS,
    PLUME_RISE_DISTANCE_M,
    PLUME_RISE_MIN_WIND_M_S,
    DEFAULT_EXIT_VELOCITY_M_S,
)
from models.base_model import PlumeModel
from models.dispersion_coefficients import compute_sigma, wind_speed_at_height
from models.estimate import ModelKind, PlumeField, Regime

SQRT_2PI = np.sqrt(2.0 * np.pi)


def vertical_term(z, source_height: float, sigma_z, mixing_height=None) -> np.ndarray:
    """
    Vertical dispersion term with image sources.

    With a mixing lid L above the source, a finite reflection series over
    n = -5..5 is summed:

        sum_n exp(-0.5*((z - (H + 2nL)) / sz)^2) + exp(-0.5*((z - (-H + 2nL)) / sz)^2)

    Otherwise only the ground image is used:

        exp(-0.5*((z - H) / sz)^2) + exp(-0.5*((z + H) / sz)^2)
    """
    z = np.asarray(z, dtype=float)
    sz = np.asarray(sigma_z, dtype=float)
    H = source_height

    if mixing_height is not None and mixing_height > 0 and mixing_height > H:
        L = mixing_height
        total = np.zeros(np.broadcast(z, sz).shape)
        for n in range(-REFLECTION_TERMS, REFLECTION_TERMS + 1):
            h1 = H + 2 * n * L
            h2 = -H + 2 * n * L
            total += np.exp(-0.5 * ((z - h1) / sz) ** 2)
            total += np.exp(-0.5 * ((z - h2) / sz) ** 2)
        return total

    return np.exp(-0.5 * ((z - H) / sz) ** 2) + np.exp(-0.5 * ((z + H) / sz) ** 2)


def gaussian_concentration(
    release_rate: float,
    wind_speed: float,
    y,
    z,
    source_height: float,
    sigma_y,
    sigma_z,
    mixing_height=None,
) -> np.ndarray:
    """
    Evaluate the Gaussian plume formula for given spreads.

    Args:
        release_rate: Source strength Q (kg/s).
        wind_speed: Transport wind speed u (m/s, > 0).
        y: Crosswind offsets (meters).
        z: Receptor heights (meters).
        source_height: Effective source height H (meters).
        sigma_y, sigma_z: Spreads at each receptor's downwind distance (meters).
        mixing_height: Optional mixing lid (meters).

    Returns:
        Concentration in kg/m^3.
    """
    norm = release_rate / (wind_speed * sigma_y * sigma_z * SQRT_2PI)
    lateral = np.exp(-0.5 * (np.asarray(y, dtype=float) / sigma_y) ** 2)
    vertical = vertical_term(z, source_height, sigma_z, mixing_height)
    return norm * lateral * vertical


def buoyancy_flux(release_rate: float, release, weather) -> float:
    """
    Buoyancy flux F = g * Q * dT / T_ambient.

    dT is the release temperature above ambient; zero when the release
    temperature is unknown.
    """
    if release.initial_temperature is None:
        return 0.0
    delta_t = release.initial_temperature - weather.temperature
    return GRAVITY * release_rate * delta_t / (weather.temperature + KELVIN_OFFSET)


def momentum_flux(release) -> float:
    """Momentum flux w^2 * A of the vent; zero when no vent diameter is known."""
    if release.source_diameter is None:
        return 0.0
    area = np.pi * (release.source_diameter / 2.0) ** 2
    return DEFAULT_EXIT_VELOCITY_M_S ** 2 * area


def plume_rise(release_rate: float, release, weather) -> float:
    """
    Briggs plume rise (meters) above the release height.

    Buoyant releases (warmer than ambient) rise by
    1.6 * (F/u)^(1/3) * x^(2/3) evaluated at PLUME_RISE_DISTANCE_M.
    Otherwise the vent momentum gives 3 * M / u.
    """
    u = max(weather.wind_speed, PLUME_RISE_MIN_WIND_M_S)
    flux = buoyancy_flux(release_rate, release, weather)
    if flux > 0:
        return 1.6 * (flux / u) ** (1.0 / 3.0) * PLUME_RISE_DISTANCE_M ** (2.0 / 3.0)
    return 3.0 * momentum_flux(release) / u


class LightGasPlumeModel(PlumeModel):
    """Gaussian plume for releases no denser than 1.2x air."""

    kind = ModelKind.LIGHT_GAS

    def __init__(self, release, chemical, weather):
        super().__init__(release, chemical, weather)
        self.plume_rise = float(plume_rise(self.release_rate, release, weather))
        self.source_height = float(release.release_height) + self.plume_rise
        if self.wind_speed > 0:
            self.transport_speed = float(
                wind_speed_at_height(self.wind_speed, self.source_height, self.stability_class)
            )
        else:
            self.transport_speed = 0.0

    def evaluate(self, x, y, z) -> PlumeField:
        x, y, z = self._coerce_points(x, y, z)
        concentration = np.zeros_like(x, dtype=float)
        regime = np.empty(x.shape, dtype=object)
        regime.fill(Regime.GAUSSIAN)

        # Upwind receptors and still air have no steady-state plume
        mask = x > 0
        if self.transport_speed > 0 and np.any(mask):
            sy, sz = compute_sigma(x[mask], self.stability_class, self.urban)
            concentration[mask] = gaussian_concentration(
                self.release_rate,
                self.transport_speed,
                y[mask],
                z[mask],
                self.source_height,
                sy,
                sz,
                self.mixing_height,
            ) * KG_TO_MG

        return PlumeField(concentration=np.maximum(concentration, 0.0), regime=regime)


def light_gas_concentration(x, y, z, release, chemical, weather) -> float:
    """Concentration (mg/m^3) at a single point from the light-gas model."""
    model = LightGasPlumeModel(release, chemical, weather)
    return float(model.concentration(x, y, z))
