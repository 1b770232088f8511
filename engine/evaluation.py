"""
Dispersion Engine.

Evaluates a release at single points, receptor sets and regular grids, and
derives dose, risk tier and the centerline maximum.  Every function is a pure
function of its arguments; the plume model is resolved once per call and
reused for all of that call's points.

Grids are evaluated as numpy arrays in one pass.  Receptor sets are evaluated
one at a time so that a malformed receptor only spoils its own result.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np

from config import (
    CONCENTRATION_UNITS,
    RECEPTOR_HEIGHT_M,
    GRID_MIN_CONCENTRATION_MG_M3,
    MAX_GRID_POINTS,
    CENTERLINE_SAMPLES,
    CENTERLINE_MAX_DISTANCE_M,
)
from data.release import ReleaseType
from engine.routing import prepare_model
from models.base_model import PlumeModel
from models.dispersion_coefficients import sigma_y
from models.estimate import (
    ConcentrationEstimate,
    Diagnostic,
    EvaluationPoint,
    ModelKind,
    Regime,
    bearing_from_source,
)
from models.risk import RiskTier, classify_risk

logger = logging.getLogger(__name__)

_RECEPTOR_ERRORS = (ValueError, TypeError, AttributeError, ArithmeticError)


def _build_estimate(
    model: PlumeModel,
    x: float,
    y: float,
    z: float,
    concentration: float,
    regime: Regime,
    diagnostics: Tuple[Diagnostic, ...],
    name: Optional[str] = None,
) -> ConcentrationEstimate:
    direction = float(bearing_from_source(x, y, model.weather.wind_direction))
    return ConcentrationEstimate(
        x=x,
        y=y,
        z=z,
        concentration=concentration,
        units=CONCENTRATION_UNITS,
        distance=float(np.hypot(x, y)),
        direction=direction,
        stability_class=model.stability_class,
        model=model.kind,
        regime=regime,
        risk_tier=classify_risk(concentration, model.chemical),
        diagnostics=diagnostics,
        name=name,
    )


def _receptor_coordinates(receptor) -> Tuple[float, float, float]:
    if isinstance(receptor, (tuple, list)):
        x, y, z = receptor
    else:
        x, y, z = receptor.x, receptor.y, receptor.z
    return float(x), float(y), float(z)


def _evaluate_with_model(model, receptor, notes) -> ConcentrationEstimate:
    x, y, z = _receptor_coordinates(receptor)
    field = model.evaluate(x, y, z)
    return _build_estimate(
        model, x, y, z,
        float(field.concentration),
        field.regime.item(),
        notes,
        getattr(receptor, "name", None),
    )


def evaluate_point(
    point: EvaluationPoint,
    release,
    chemical,
    weather,
    when: Optional[datetime] = None,
) -> ConcentrationEstimate:
    """Evaluate one point and return the full estimate, diagnostics included."""
    model, notes = prepare_model(release, chemical, weather, when)
    return _evaluate_with_model(model, point, notes)


def evaluate_concentration(
    point: EvaluationPoint,
    release,
    chemical,
    weather,
    when: Optional[datetime] = None,
) -> float:
    """Concentration (mg/m^3) at one point."""
    return evaluate_point(point, release, chemical, weather, when).concentration


def evaluate_receptors(
    release,
    chemical,
    weather,
    receptors: Iterable,
    when: Optional[datetime] = None,
) -> List[ConcentrationEstimate]:
    """
    Evaluate each receptor independently.

    A receptor that cannot be evaluated (missing or non-numeric coordinates,
    numeric failure) yields concentration 0 with an ``evaluation_failed``
    diagnostic; the remaining receptors are unaffected.

    Args:
        release, chemical, weather: Scenario inputs.
        receptors: EvaluationPoint records (or (x, y, z) tuples) in plume-local
                   coordinates.
        when: Local time used if the stability class has to be derived.

    Returns:
        One ConcentrationEstimate per receptor, in input order.
    """
    model, notes = prepare_model(release, chemical, weather, when)
    results = []
    for index, receptor in enumerate(receptors):
        try:
            results.append(_evaluate_with_model(model, receptor, notes))
        except _RECEPTOR_ERRORS as exc:
            logger.warning("Receptor #%d could not be evaluated: %s", index, exc)
            failure = Diagnostic(
                code="evaluation_failed",
                message=f"Receptor #{index} could not be evaluated: {exc}",
            )
            x, y, z = (getattr(receptor, axis, np.nan) for axis in ("x", "y", "z"))
            results.append(_failed_estimate(model, x, y, z, notes + (failure,), getattr(receptor, "name", None)))
    return results


def _failed_estimate(model, x, y, z, diagnostics, name) -> ConcentrationEstimate:
    def _as_float(value):
        try:
            return float(value)
        except (TypeError, ValueError):
            return float("nan")

    x, y, z = _as_float(x), _as_float(y), _as_float(z)
    return ConcentrationEstimate(
        x=x,
        y=y,
        z=z,
        concentration=0.0,
        units=CONCENTRATION_UNITS,
        distance=float(np.hypot(x, y)),
        direction=float("nan"),
        stability_class=model.stability_class,
        model=model.kind,
        regime=Regime.GAUSSIAN if model.kind == ModelKind.LIGHT_GAS else Regime.PASSIVE_DIFFUSION,
        risk_tier=RiskTier.SAFE,
        diagnostics=diagnostics,
        name=name,
    )


def evaluate_time_series(
    release,
    chemical,
    weather_sequence: Iterable,
    receptors: Iterable,
) -> List[List[ConcentrationEstimate]]:
    """
    Evaluate the same receptors under each weather observation in turn.

    Each observation is routed and resolved on its own; a missing stability
    class is derived from that observation's timestamp.

    Returns:
        One list of estimates per observation, in sequence order.
    """
    receptors = list(receptors)
    results = []
    for weather in weather_sequence:
        results.append(evaluate_receptors(release, chemical, weather, receptors))
    logger.debug(
        "Time series: %d observations x %d receptors", len(results), len(receptors)
    )
    return results


def create_grid(grid_spacing: float, max_distance: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Create a wind-aligned square grid centred on the source.

    Args:
        grid_spacing: Cell size in meters.
        max_distance: Half-extent of the grid in meters.

    Returns:
        (X, Y) meshgrid arrays of downwind / crosswind coordinates in meters.
    """
    if grid_spacing <= 0:
        raise ValueError("Grid spacing must be positive.")
    if max_distance <= 0:
        raise ValueError("Max distance must be positive.")
    n = int(np.floor(max_distance / grid_spacing))
    coords = np.arange(-n, n + 1) * grid_spacing
    X, Y = np.meshgrid(coords, coords)
    return X, Y


def evaluate_grid(
    release,
    chemical,
    weather,
    grid_spacing: float,
    max_distance: float,
    receptor_height: float = RECEPTOR_HEIGHT_M,
    min_concentration: float = GRID_MIN_CONCENTRATION_MG_M3,
    max_points: int = MAX_GRID_POINTS,
    when: Optional[datetime] = None,
) -> List[ConcentrationEstimate]:
    """
    Evaluate a regular grid around the source.

    Cells lie on a square lattice aligned with the wind and are kept when they
    are within ``max_distance`` of the source (the source cell itself is
    excluded).  Cells below ``min_concentration`` are omitted.

    Args:
        grid_spacing: Cell size in meters.
        max_distance: Radius of the evaluated disc in meters.
        receptor_height: Height of every cell (meters).
        min_concentration: Omit cells below this (mg/m^3); <= 0 keeps all cells.
        max_points: Refuse grids with more lattice points than this.

    Returns:
        ConcentrationEstimate list in row-major (crosswind, downwind) order.
    """
    if grid_spacing <= 0:
        raise ValueError("Grid spacing must be positive.")
    if max_distance <= 0:
        raise ValueError("Max distance must be positive.")
    side = 2 * int(np.floor(max_distance / grid_spacing)) + 1
    if side * side > max_points:
        raise ValueError(
            f"Grid of {side}x{side} points exceeds the limit of {max_points} points; "
            "increase grid_spacing or reduce max_distance."
        )

    model, notes = prepare_model(release, chemical, weather, when)
    X, Y = create_grid(grid_spacing, max_distance)
    radius = np.hypot(X, Y)
    inside = (radius <= max_distance) & (radius > 0)

    xs, ys = X[inside], Y[inside]
    field = model.evaluate(xs, ys, receptor_height)

    keep = field.concentration >= min_concentration if min_concentration > 0 else np.ones_like(xs, dtype=bool)
    logger.debug(
        "Grid: %d cells evaluated, %d kept above %.3g %s",
        xs.size, int(np.count_nonzero(keep)), min_concentration, CONCENTRATION_UNITS,
    )

    return [
        _build_estimate(
            model,
            float(x), float(y), float(receptor_height),
            float(c), r, notes,
        )
        for x, y, c, r in zip(xs[keep], ys[keep], field.concentration[keep], field.regime[keep])
    ]


def puff_passage_time(x: float, model: PlumeModel) -> float:
    """
    Time (s) for an instantaneous puff to pass a receptor at downwind distance x.

    Uses a +/-2 sigma_y puff width carried at the reference wind speed.
    """
    if x <= 0 or model.wind_speed <= 0:
        return 0.0
    width = 4.0 * float(sigma_y(x, model.stability_class, model.urban))
    return width / model.wind_speed


def dose(
    point: EvaluationPoint,
    release,
    chemical,
    weather,
    exposure_duration: Union[float, timedelta],
    when: Optional[datetime] = None,
) -> float:
    """
    Time-integrated concentration at a point, in mg*s/m^3.

    Continuous and variable releases: C * min(exposure, release duration).
    Instantaneous releases: C * min(exposure, puff passage time).

    Args:
        exposure_duration: Exposure time in seconds (or a timedelta).
    """
    if isinstance(exposure_duration, timedelta):
        exposure_duration = exposure_duration.total_seconds()
    if exposure_duration < 0:
        raise ValueError("Exposure duration must be >= 0")

    model, notes = prepare_model(release, chemical, weather, when)
    estimate = _evaluate_with_model(model, point, notes)

    if release.release_type == ReleaseType.INSTANTANEOUS:
        exposure = min(exposure_duration, puff_passage_time(estimate.x, model))
    else:
        active = release.duration_s()
        exposure = exposure_duration if active is None else min(exposure_duration, active)

    return estimate.concentration * exposure


def centerline_profile(
    release,
    chemical,
    weather,
    max_distance: float = CENTERLINE_MAX_DISTANCE_M,
    samples: int = CENTERLINE_SAMPLES,
    when: Optional[datetime] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Ground-level centerline concentration at evenly spaced distances.

    Returns:
        (distances, concentrations) with distances max_distance/samples ... max_distance.
    """
    if max_distance <= 0:
        raise ValueError("Max distance must be positive.")
    if samples < 1:
        raise ValueError("Samples must be >= 1.")
    model, _ = prepare_model(release, chemical, weather, when)
    step = max_distance / samples
    distances = step * np.arange(1, samples + 1)
    return distances, model.concentration(distances, 0.0, 0.0)


def max_concentration_along_centerline(
    release,
    chemical,
    weather,
    max_distance: float = CENTERLINE_MAX_DISTANCE_M,
    samples: int = CENTERLINE_SAMPLES,
    when: Optional[datetime] = None,
) -> Tuple[float, float]:
    """
    Highest ground-level concentration along the plume centerline.

    A fixed-resolution line search over ``samples`` points at y = 0, z = 0.
    It is limited by the sample spacing and only looks at the centerline, so
    off-axis peaks (e.g. the flat-topped heavy-gas core) can be missed.

    Returns:
        (distance, concentration); (0.0, 0.0) when nothing is positive.
    """
    distances, concentrations = centerline_profile(
        release, chemical, weather, max_distance, samples, when
    )
    idx = int(np.argmax(concentrations))
    peak = float(concentrations[idx])
    if peak <= 0:
        return 0.0, 0.0
    return float(distances[idx]), peak


def summarize_estimates(estimates: Iterable[ConcentrationEstimate]) -> dict:
    """
    Order-independent summary of a batch of estimates.

    Returns:
        dict with 'count', 'max_concentration', 'tier_counts' (per tier) and
        'at_or_above' (cells at or above each tier).
    """
    estimates = list(estimates)
    tier_counts = Counter(e.risk_tier for e in estimates)
    at_or_above = {
        tier: sum(n for t, n in tier_counts.items() if t >= tier)
        for tier in RiskTier
    }
    return {
        "count": len(estimates),
        "max_concentration": max((e.concentration for e in estimates), default=0.0),
        "tier_counts": {tier: tier_counts.get(tier, 0) for tier in RiskTier},
        "at_or_above": at_or_above,
    }
