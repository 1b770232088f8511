"""
Base class for the plume models.

A model instance is bound to one release / chemical / weather combination.
Everything that depends only on the source (release rate, transport wind,
stability, surface type) is resolved once at construction; ``evaluate`` is
then a pure function of the receptor coordinates.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from config import DEFAULT_RELEASE_RATE, DEFAULT_RELEASE_DURATION_S, DEFAULT_STABILITY_CLASS
from models.dispersion_coefficients import is_urban
from models.estimate import Diagnostic, ModelKind, PlumeField
from models.stability import StabilityClass


@dataclass(frozen=True)
class SourceStrength:
    """Effective release rate and any fallback notes."""

    rate: float                              # kg/s
    diagnostics: Tuple[Diagnostic, ...] = ()


def effective_release_rate(release) -> SourceStrength:
    """
    Effective continuous source strength Q (kg/s).

    Order of preference:
        1. The explicit release rate.
        2. Total mass spread over the release duration
           (DEFAULT_RELEASE_DURATION_S when no positive duration is known).
        3. DEFAULT_RELEASE_RATE, with a ``default_release_rate`` diagnostic.
    """
    if release.release_rate is not None:
        return SourceStrength(float(release.release_rate))

    if release.total_mass is not None:
        duration = release.duration_s()
        if duration is None or duration <= 0:
            duration = DEFAULT_RELEASE_DURATION_S
        return SourceStrength(float(release.total_mass) / duration)

    return SourceStrength(
        DEFAULT_RELEASE_RATE,
        (
            Diagnostic(
                code="default_release_rate",
                message=(
                    "No release rate or total mass specified; missing data, "
                    f"using default {DEFAULT_RELEASE_RATE} kg/s"
                ),
            ),
        ),
    )


class PlumeModel(ABC):
    """Abstract base class for steady-state plume models."""

    kind: ModelKind

    def __init__(self, release, chemical, weather):
        """
        Resolve the source-only quantities shared by every model.

        Parameters:
        -----------
        release : Release
            Source geometry, amount and timing.
        chemical : Chemical
            Released material.
        weather : WeatherObservation
            Ambient conditions.  A missing stability class falls back to
            neutral (D) with a ``default_stability`` diagnostic.
        """
        self.release = release
        self.chemical = chemical
        self.weather = weather

        notes = []
        if weather.stability_class is None:
            self.stability_class = StabilityClass.parse(DEFAULT_STABILITY_CLASS)
            notes.append(Diagnostic(
                code="default_stability",
                message=f"No stability class available; assuming {self.stability_class.value}",
            ))
        else:
            self.stability_class = StabilityClass.parse(weather.stability_class)

        strength = effective_release_rate(release)
        self.release_rate = strength.rate
        self.urban = is_urban(release.surface_roughness)
        self.wind_speed = float(weather.wind_speed)
        self.mixing_height = weather.mixing_height
        self.diagnostics: Tuple[Diagnostic, ...] = tuple(notes) + strength.diagnostics

    @staticmethod
    def _coerce_points(x, y, z) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Broadcast receptor coordinates to float arrays, rejecting non-finite values."""
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=float),
            np.asarray(y, dtype=float),
            np.asarray(z, dtype=float),
        )
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y)) and np.all(np.isfinite(z))):
            raise ValueError("Receptor coordinates must be finite numbers")
        return x.astype(float), y.astype(float), z.astype(float)

    @abstractmethod
    def evaluate(self, x, y, z) -> PlumeField:
        """
        Concentration (mg/m^3) and regime at plume-local points.

        Points with x <= 0, or any point in still air, are zero.
        """

    def concentration(self, x, y, z) -> np.ndarray:
        """Concentration in mg/m^3, same shape as the broadcast inputs."""
        return self.evaluate(x, y, z).concentration
