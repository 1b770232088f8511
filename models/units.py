"""
Concentration unit conversions.

Volume fractions use the ideal-gas molar volume at 25 °C and 1 atm:
    mg/m^3 = ppm * MW / 24.45
"""

import numpy as np

from config import MOLAR_VOLUME_L


def concentration_to_ppm(concentration_mg_m3, molecular_weight: float):
    """
    Convert a concentration from mg/m^3 to parts per million by volume.

    Args:
        concentration_mg_m3: Concentration in mg/m^3 (scalar or array).
        molecular_weight: Molecular weight of the chemical (g/mol).

    Returns:
        Concentration in ppm, same shape as the input.
    """
    if molecular_weight <= 0:
        raise ValueError("Molecular weight must be > 0")
    return np.asarray(concentration_mg_m3, dtype=float) * MOLAR_VOLUME_L / molecular_weight


def ppm_to_concentration(ppm, molecular_weight: float):
    """Convert ppm by volume to mg/m^3."""
    if molecular_weight <= 0:
        raise ValueError("Molecular weight must be > 0")
    return np.asarray(ppm, dtype=float) * molecular_weight / MOLAR_VOLUME_L
