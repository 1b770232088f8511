"""
Model Routing.

Decides, once per release, which plume model applies and fills in a missing
stability class from the weather observation.

Routing is a pure function of the chemical's density relative to air:

    relative_density = MW / 28.97
    > 1.2   -> HeavyGasModel for every point of the release
    <= 1.2  -> LightGasPlumeModel

The decision is not revisited as the plume dilutes downwind.
"""

import dataclasses
import logging
from datetime import datetime
from types import MappingProxyType
from typing import Optional, Tuple

from config import AIR_MOLAR_MASS, HEAVY_GAS_DENSITY_RATIO, DEFAULT_CLOUD_COVER_PCT
from data.weather import WeatherObservation
from models.base_model import PlumeModel
from models.estimate import Diagnostic, ModelKind
from models.gaussian_plume import LightGasPlumeModel
from models.heavy_gas import HeavyGasModel
from models.stability import classify_stability, is_daytime, solar_insolation

logger = logging.getLogger(__name__)

MODEL_CLASSES = MappingProxyType({
    ModelKind.LIGHT_GAS: LightGasPlumeModel,
    ModelKind.HEAVY_GAS: HeavyGasModel,
})


def relative_density(chemical) -> float:
    """Density of the chemical relative to air, from molecular weights."""
    mw = chemical.molecular_weight
    if mw is None or not mw > 0:
        raise ValueError(f"Molecular weight must be > 0, got {mw!r}")
    return mw / AIR_MOLAR_MASS


def select_model_kind(chemical) -> ModelKind:
    """Heavy-gas model for chemicals more than 1.2x as dense as air."""
    if relative_density(chemical) > HEAVY_GAS_DENSITY_RATIO:
        return ModelKind.HEAVY_GAS
    return ModelKind.LIGHT_GAS


def select_model(release, chemical, weather: WeatherObservation) -> PlumeModel:
    """Build the plume model for a release; reuse it for every point of that release."""
    kind = select_model_kind(chemical)
    logger.debug(
        "Routing %s (relative density %.2f) to %s model",
        getattr(chemical, "name", "chemical"), relative_density(chemical), kind.value,
    )
    return MODEL_CLASSES[kind](release, chemical, weather)


def resolve_stability(
    release,
    weather: WeatherObservation,
    when: Optional[datetime] = None,
) -> Tuple[WeatherObservation, Tuple[Diagnostic, ...]]:
    """
    Return a weather observation that carries a stability class.

    When the observation has none, one is derived from the time of day
    (``when``, else the observation timestamp, else now), the observed cloud
    cover (DEFAULT_CLOUD_COVER_PCT when absent) and the observed solar
    radiation (computed from the release latitude when absent).  The input
    observation is never modified.

    Returns:
        (weather, diagnostics): a copy with the derived class and a
        ``derived_stability`` note, or the original and no notes.
    """
    if weather.stability_class is not None:
        return weather, ()

    when = when or weather.timestamp or datetime.now()
    cloud_cover = weather.cloud_cover if weather.cloud_cover is not None else DEFAULT_CLOUD_COVER_PCT
    daytime = is_daytime(when)
    if weather.solar_radiation is not None:
        insolation = weather.solar_radiation
    else:
        insolation = solar_insolation(release.latitude, when, cloud_cover)

    stability = classify_stability(
        weather.wind_speed,
        cloud_cover,
        daytime,
        solar_insolation=insolation,
        over_water=release.over_water,
    )
    logger.debug(
        "Derived stability class %s (daytime=%s, cloud=%.0f%%, insolation=%.0f W/m2)",
        stability.value, daytime, cloud_cover, insolation,
    )
    resolved = dataclasses.replace(weather, stability_class=stability)
    note = Diagnostic(
        code="derived_stability",
        message=(
            f"Stability class {stability.value} derived from wind {weather.wind_speed:.1f} m/s, "
            f"cloud cover {cloud_cover:.0f}%, insolation {insolation:.0f} W/m2"
        ),
    )
    return resolved, (note,)


def prepare_model(
    release,
    chemical,
    weather: WeatherObservation,
    when: Optional[datetime] = None,
) -> Tuple[PlumeModel, Tuple[Diagnostic, ...]]:
    """Resolve stability and route to a model; returns the model and all release-level notes."""
    resolved, notes = resolve_stability(release, weather, when)
    model = select_model(release, chemical, resolved)
    return model, notes + model.diagnostics
