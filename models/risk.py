"""
Risk Tier Model.

Buckets a concentration into five ordered exposure tiers, patterned on the
acute exposure guideline levels:

    LIFE_THREATENING    C >= T
    DISABLING           C >= 0.1 T
    NOTABLE_DISCOMFORT  C >= 0.01 T
    DETECTABLE          C >  1e-4 T
    SAFE                otherwise

T is the chemical's toxicity threshold in mg/m^3 (converted from ppm when
needed), or DEFAULT_TOXICITY_THRESHOLD_MG_M3 when the chemical has none.  The
tiers are nested thresholds, so the mapping is monotonic in concentration.
"""

from enum import IntEnum

import numpy as np

from config import (
    DEFAULT_TOXICITY_THRESHOLD_MG_M3,
    DISABLING_FRACTION,
    DISCOMFORT_FRACTION,
    DETECTABLE_FRACTION,
)
from models.units import ppm_to_concentration


class RiskTier(IntEnum):
    """Ordered exposure tiers; higher value is more severe."""

    SAFE = 0
    DETECTABLE = 1
    NOTABLE_DISCOMFORT = 2
    DISABLING = 3
    LIFE_THREATENING = 4

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


def toxicity_threshold_mg_m3(chemical) -> float:
    """Life-threatening threshold of a chemical in mg/m^3."""
    threshold = getattr(chemical, "toxicity_threshold", None)
    if threshold is None:
        return DEFAULT_TOXICITY_THRESHOLD_MG_M3
    if getattr(chemical, "toxicity_unit", "mg/m3") == "ppm":
        return float(ppm_to_concentration(threshold, chemical.molecular_weight))
    return float(threshold)


def tier_thresholds(chemical) -> dict:
    """Lower bound (mg/m^3) of every tier above SAFE."""
    t = toxicity_threshold_mg_m3(chemical)
    return {
        RiskTier.LIFE_THREATENING: t,
        RiskTier.DISABLING: t * DISABLING_FRACTION,
        RiskTier.NOTABLE_DISCOMFORT: t * DISCOMFORT_FRACTION,
        RiskTier.DETECTABLE: t * DETECTABLE_FRACTION,
    }


def classify_risk(concentration: float, chemical) -> RiskTier:
    """
    Classify a concentration (mg/m^3) into a risk tier for a chemical.

    Args:
        concentration: Concentration in mg/m^3.
        chemical: Chemical record (toxicity threshold optional).

    Returns:
        RiskTier.
    """
    c = float(concentration)
    if np.isnan(c):
        raise ValueError("Concentration must be a number")

    bounds = tier_thresholds(chemical)
    if c >= bounds[RiskTier.LIFE_THREATENING]:
        return RiskTier.LIFE_THREATENING
    if c >= bounds[RiskTier.DISABLING]:
        return RiskTier.DISABLING
    if c >= bounds[RiskTier.NOTABLE_DISCOMFORT]:
        return RiskTier.NOTABLE_DISCOMFORT
    if c > bounds[RiskTier.DETECTABLE]:
        return RiskTier.DETECTABLE
    return RiskTier.SAFE
