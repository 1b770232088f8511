"""Shared fixtures for the chemical dispersion test suite."""

import sys
import os
from datetime import datetime

import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from data.chemicals import get_chemical
from data.release import Release
from data.weather import WeatherObservation

NOON = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def neutral_wind():
    """5 m/s west wind, neutral stability."""
    return WeatherObservation(
        wind_speed=5.0,
        wind_direction=270.0,
        temperature=20.0,
        pressure=1013.25,
        stability_class="D",
        timestamp=NOON,
    )


@pytest.fixture
def still_air():
    """Calm conditions: no transport."""
    return WeatherObservation(wind_speed=0.0, stability_class="D", timestamp=NOON)


@pytest.fixture
def unclassified_wind():
    """Weather without a stability class; one must be derived."""
    return WeatherObservation(wind_speed=5.0, cloud_cover=0.0, timestamp=NOON)


@pytest.fixture
def one_kg_release():
    """1 kg/s continuous release from 2 m over rural terrain."""
    return Release(
        name="Test Release",
        latitude=40.0,
        longitude=-75.0,
        release_height=2.0,
        release_rate=1.0,
        start_time=NOON,
    )


@pytest.fixture
def ammonia():
    return get_chemical("Ammonia")


@pytest.fixture
def chlorine():
    return get_chemical("Chlorine")


@pytest.fixture
def propane():
    return get_chemical("Propane")
