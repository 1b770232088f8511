"""
Heavy (Dense) Gas Dispersion Model.

Two-regime model for gases denser than air.  Near the source the cloud slumps
and spreads under gravity; once entrained air has diluted it enough, ambient
turbulence takes over and it disperses like a passive Gaussian plume.

The regime is chosen independently at every evaluated point from the bulk
Richardson number of the cloud at that downwind distance:

    D(x)   = 1 + k * x / 1000            entrainment dilution
    H(x)   = H0 * sqrt(D(x))             cloud height
    g'(x)  = g'0 / D(x)                  diluted reduced gravity
    Ri(x)  = g'(x) * H(x) / u(H(x))^2

    Ri > 1   gravity-dominated: flat-topped core with Gaussian edges,
             power-law vertical profile (1 - z/H)^n
    Ri <= 1  passive diffusion: Gaussian plume with spreads enhanced by
             the initial cloud size

Because each point is classified on its own, concentration is discontinuous
where Ri(x) crosses 1 between neighbouring points.  No smoothing is applied.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

import numpy as np
from scipy.optimize import brentq

from config import (
    GRAVITY,
    KG_TO_MG,
    KELVIN_OFFSET,
    AIR_GAS_CONSTANT,
    UNIVERSAL_GAS_CONSTANT,
    SOURCE_BLANKET_THICKNESS_M,
    INITIAL_CLOUD_HEIGHT_M,
    ENTRAINMENT_COEFFICIENT,
    WIND_SHEAR_SPREAD_RATE,
    GAUSSIAN_EDGE_FACTOR,
    CRITICAL_RICHARDSON,
)
from models.base_model import PlumeModel
from models.dispersion_coefficients import compute_sigma, wind_speed_at_height
from models.estimate import ModelKind, PlumeField, Regime
from models.gaussian_plume import gaussian_concentration
from models.stability import StabilityClass

_S = StabilityClass

# Vertical profile exponent n in (1 - z/H)^n
VERTICAL_PROFILE_EXPONENTS = MappingProxyType({
    _S.A: 1.0,
    _S.B: 1.0,
    _S.C: 1.5,
    _S.D: 1.5,
    _S.E: 2.5,
    _S.F: 2.5,
})


def air_density(temperature_c: float, pressure_pa: float) -> float:
    """Dry-air density (kg/m^3) from the ideal-gas law."""
    return pressure_pa / (AIR_GAS_CONSTANT * (temperature_c + KELVIN_OFFSET))


def gas_density(molecular_weight: float, temperature_c: float, pressure_pa: float) -> float:
    """Ideal-gas density (kg/m^3): rho = P * M / (R * T)."""
    return pressure_pa * molecular_weight / (UNIVERSAL_GAS_CONSTANT * (temperature_c + KELVIN_OFFSET))


@dataclass(frozen=True)
class HeavyGasSource:
    """Source parameters, computed once per release."""

    release_rate: float      # kg/s
    air_density: float       # kg/m^3
    gas_density: float       # kg/m^3
    reduced_gravity: float   # m/s^2 at the source
    initial_radius: float    # m
    initial_height: float    # m


def source_parameters(release_rate: float, release, chemical, weather) -> HeavyGasSource:
    """
    Initial cloud state for a dense-gas release.

    Ambient air uses the observed temperature and pressure.  The gas uses the
    release's initial temperature / pressure when given, ambient otherwise.
    The initial radius spreads one second of released volume into a blanket
    SOURCE_BLANKET_THICKNESS_M thick.
    """
    ambient_pa = weather.pressure * 100.0
    rho_air = air_density(weather.temperature, ambient_pa)

    gas_temp = release.initial_temperature if release.initial_temperature is not None else weather.temperature
    gas_pa = release.initial_pressure if release.initial_pressure is not None else ambient_pa
    rho_gas = gas_density(chemical.molecular_weight, gas_temp, gas_pa)

    g_prime = GRAVITY * (rho_gas - rho_air) / rho_air
    volume_rate = release_rate / rho_gas
    radius = float(np.sqrt(volume_rate / (np.pi * SOURCE_BLANKET_THICKNESS_M)))

    return HeavyGasSource(
        release_rate=release_rate,
        air_density=rho_air,
        gas_density=rho_gas,
        reduced_gravity=g_prime,
        initial_radius=radius,
        initial_height=INITIAL_CLOUD_HEIGHT_M,
    )


class HeavyGasModel(PlumeModel):
    """Dense-gas model with per-point gravity / passive regime selection."""

    kind = ModelKind.HEAVY_GAS

    def __init__(self, release, chemical, weather):
        super().__init__(release, chemical, weather)
        self.source = source_parameters(self.release_rate, release, chemical, weather)
        self.profile_exponent = VERTICAL_PROFILE_EXPONENTS[self.stability_class]

    # -- cloud state along the plume --------------------------------------

    def dilution(self, x) -> np.ndarray:
        return 1.0 + ENTRAINMENT_COEFFICIENT * np.asarray(x, dtype=float) / 1000.0

    def cloud_height(self, x) -> np.ndarray:
        """Effective cloud height H(x) in meters."""
        return self.source.initial_height * np.sqrt(self.dilution(x))

    def reduced_gravity(self, x) -> np.ndarray:
        """Reduced gravity g'(x), diluted by entrained air."""
        return self.source.reduced_gravity / self.dilution(x)

    def cloud_wind_speed(self, x) -> np.ndarray:
        """Wind speed at the cloud height."""
        return wind_speed_at_height(self.wind_speed, self.cloud_height(x), self.stability_class)

    def richardson_number(self, x) -> np.ndarray:
        """Bulk Richardson number Ri(x) = g'(x) * H(x) / u(H(x))^2."""
        if self.wind_speed <= 0:
            return np.full(np.shape(x), np.inf)
        u = self.cloud_wind_speed(x)
        return self.reduced_gravity(x) * self.cloud_height(x) / (u * u)

    def cloud_width(self, x) -> np.ndarray:
        """Effective cloud width from gravity slumping plus wind-shear spreading."""
        x = np.asarray(x, dtype=float)
        g_prime = np.maximum(self.reduced_gravity(x), 0.0)
        gravity_spread = np.sqrt(2.0 * g_prime * x / self.wind_speed)
        shear_spread = WIND_SHEAR_SPREAD_RATE * x
        return np.maximum(2.0 * self.source.initial_radius, gravity_spread + shear_spread)

    def core_width(self, x, ri=None) -> np.ndarray:
        """Width of the homogeneous core; shrinks to zero as Ri -> 1."""
        ri = self.richardson_number(x) if ri is None else ri
        ri = np.asarray(ri, dtype=float)
        width = self.cloud_width(x)
        core = width * 0.5 * (ri - CRITICAL_RICHARDSON) / ri
        return np.where(ri > CRITICAL_RICHARDSON, np.maximum(core, 0.0), 0.0)

    def transition_distance(self, max_distance: float, min_distance: float = 1.0) -> Optional[float]:
        """
        Downwind distance where Ri(x) crosses the critical value, if any.

        Returns None when Ri does not change side within [min_distance, max_distance].
        """
        if self.wind_speed <= 0 or max_distance <= min_distance:
            return None

        def excess(x):
            return float(self.richardson_number(x)) - CRITICAL_RICHARDSON

        lo, hi = excess(min_distance), excess(max_distance)
        if lo == 0.0:
            return float(min_distance)
        if lo * hi > 0:
            return None
        return float(brentq(excess, min_distance, max_distance, xtol=1e-6))

    # -- regimes -----------------------------------------------------------

    def _gravity_dominated(self, x, y, z, ri) -> np.ndarray:
        height = self.cloud_height(x)
        width = self.cloud_width(x)
        core = self.core_width(x, ri)
        u = self.cloud_wind_speed(x)

        centerline = self.source.release_rate / (u * width * height)

        half_core = core / 2.0
        edge_sigma = (width / 2.0 - half_core) / GAUSSIAN_EDGE_FACTOR
        overhang = np.maximum(np.abs(y) - half_core, 0.0)
        lateral = np.exp(-0.5 * (overhang / edge_sigma) ** 2)

        inside = (z >= 0.0) & (z <= height)
        depth = np.clip(1.0 - z / height, 0.0, 1.0)
        vertical = np.where(inside, depth ** self.profile_exponent, 0.0)

        return centerline * lateral * vertical

    def _passive_diffusion(self, x, y, z) -> np.ndarray:
        sy, sz = compute_sigma(x, self.stability_class, self.urban)
        sz0 = self.source.initial_height / GAUSSIAN_EDGE_FACTOR
        sy_eff = np.sqrt(sy ** 2 + self.source.initial_radius ** 2)
        sz_eff = np.sqrt(sz ** 2 + sz0 ** 2)
        u = self.cloud_wind_speed(x)
        return gaussian_concentration(
            self.source.release_rate,
            u,
            y,
            z,
            self.source.initial_height,
            sy_eff,
            sz_eff,
            self.mixing_height,
        )

    def evaluate(self, x, y, z) -> PlumeField:
        x, y, z = self._coerce_points(x, y, z)
        concentration = np.zeros_like(x, dtype=float)
        regime = np.empty(x.shape, dtype=object)
        regime.fill(Regime.PASSIVE_DIFFUSION)

        mask = x > 0
        if self.wind_speed <= 0 or not np.any(mask):
            return PlumeField(concentration=concentration, regime=regime)

        ri = np.zeros_like(x, dtype=float)
        ri[mask] = self.richardson_number(x[mask])
        gravity = mask & (ri > CRITICAL_RICHARDSON)
        passive = mask & ~gravity

        if np.any(gravity):
            concentration[gravity] = self._gravity_dominated(
                x[gravity], y[gravity], z[gravity], ri[gravity]
            )
            regime[gravity] = Regime.GRAVITY_DOMINATED
        if np.any(passive):
            concentration[passive] = self._passive_diffusion(
                x[passive], y[passive], z[passive]
            )

        return PlumeField(
            concentration=np.maximum(concentration * KG_TO_MG, 0.0),
            regime=regime,
        )


def heavy_gas_concentration(x, y, z, release, chemical, weather) -> float:
    """Concentration (mg/m^3) at a single point from the heavy-gas model."""
    model = HeavyGasModel(release, chemical, weather)
    return float(model.concentration(x, y, z))
