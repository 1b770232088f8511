"""
Reference scenarios for validating the dispersion engine.

Each scenario function returns a dict with:
    - release: Release record
    - chemical: Chemical record
    - weather: WeatherObservation
    - receptors: list of EvaluationPoint in plume-local coordinates
    - description: human-readable summary

All three share the same meteorology: 5 m/s west wind, neutral stability (D),
a 1 kg/s release from 2 m over rural terrain.
"""

from datetime import datetime
from typing import Callable, Dict, List

from data.chemicals import get_chemical
from data.release import Release, ReleaseType
from data.weather import WeatherObservation
from models.estimate import EvaluationPoint

REFERENCE_TIME = datetime(2024, 6, 15, 12, 0)


def _neutral_weather() -> WeatherObservation:
    return WeatherObservation(
        wind_speed=5.0,
        wind_direction=270.0,
        temperature=20.0,
        pressure=1013.25,
        stability_class="D",
        timestamp=REFERENCE_TIME,
    )


def _centerline_receptors() -> List[EvaluationPoint]:
    return [
        EvaluationPoint(x=100.0, name="100 m"),
        EvaluationPoint(x=500.0, name="500 m"),
        EvaluationPoint(x=1000.0, name="1 km"),
        EvaluationPoint(x=5000.0, name="5 km"),
    ]


def scenario_a_light_gas() -> dict:
    """Scenario A: ammonia, light-gas Gaussian plume.

    Ammonia is lighter than air, so the Gaussian model applies.  At 1 km
    downwind on the centerline at ground level the concentration is about
    69 mg/m^3.
    """
    return {
        "release": Release(
            name="Ammonia line break",
            latitude=40.0,
            longitude=-75.0,
            release_height=2.0,
            release_type=ReleaseType.CONTINUOUS,
            release_rate=1.0,
            start_time=REFERENCE_TIME,
        ),
        "chemical": get_chemical("Ammonia"),
        "weather": _neutral_weather(),
        "receptors": _centerline_receptors(),
        "description": "Ammonia, 1 kg/s from 2 m, 5 m/s wind, stability D",
    }


def scenario_b_heavy_gas() -> dict:
    """Scenario B: chlorine, heavy-gas model.

    Chlorine is about 2.4x as dense as air.  Near the source the cloud is
    gravity-dominated; the Richardson number falls through 1 roughly 1.5 km
    downwind, after which the plume disperses passively.
    """
    return {
        "release": Release(
            name="Chlorine cylinder leak",
            latitude=40.0,
            longitude=-75.0,
            release_height=2.0,
            release_type=ReleaseType.CONTINUOUS,
            release_rate=1.0,
            start_time=REFERENCE_TIME,
        ),
        "chemical": get_chemical("Chlorine"),
        "weather": _neutral_weather(),
        "receptors": [
            EvaluationPoint(x=10.0, name="10 m"),
            EvaluationPoint(x=100.0, name="100 m"),
            EvaluationPoint(x=1000.0, name="1 km"),
            EvaluationPoint(x=5000.0, name="5 km"),
        ],
        "description": "Chlorine, 1 kg/s from 2 m, 5 m/s wind, stability D",
    }


def scenario_c_missing_source_term() -> dict:
    """Scenario C: ammonia release with neither rate nor mass known.

    The engine falls back to the default release rate and flags the
    result with a ``default_release_rate`` diagnostic.
    """
    return {
        "release": Release(
            name="Unquantified ammonia release",
            latitude=40.0,
            longitude=-75.0,
            release_height=2.0,
            release_type=ReleaseType.CONTINUOUS,
            start_time=REFERENCE_TIME,
        ),
        "chemical": get_chemical("Ammonia"),
        "weather": _neutral_weather(),
        "receptors": _centerline_receptors(),
        "description": "Ammonia, unknown amount, 5 m/s wind, stability D",
    }


SCENARIOS: Dict[str, Callable[[], dict]] = {
    "A": scenario_a_light_gas,
    "B": scenario_b_heavy_gas,
    "C": scenario_c_missing_source_term,
}


def get_scenario(key: str) -> dict:
    """Look up a reference scenario by letter (case-insensitive)."""
    try:
        return SCENARIOS[key.strip().upper()]()
    except KeyError:
        raise KeyError(f"Unknown scenario {key!r}; choose from {sorted(SCENARIOS)}") from None
