"""
Chemical record and a small catalogue of reference chemicals.

The catalogue stands in for the chemical database that surrounding services
own; it is convenient for scenarios, examples and tests.
"""

from dataclasses import dataclass
from typing import List, Optional

from config import AIR_MOLAR_MASS

TOXICITY_UNITS = ("mg/m3", "ppm")


@dataclass(frozen=True)
class Chemical:
    """Physical and toxicological properties of a released chemical.

    Args:
        name: Chemical name.
        molecular_weight: g/mol, must be > 0.
        density: kg/m^3 (liquid or stored density; informational).
        toxicity_threshold: Life-threatening concentration, in ``toxicity_unit``.
        toxicity_unit: ``"mg/m3"`` or ``"ppm"``.
        cas_number: Optional CAS registry number.
    """

    name: str
    molecular_weight: float
    density: float = 0.0
    toxicity_threshold: Optional[float] = None
    toxicity_unit: str = "mg/m3"
    cas_number: Optional[str] = None

    def __post_init__(self):
        if self.molecular_weight <= 0:
            raise ValueError(
                f"Molecular weight must be > 0, got {self.molecular_weight} for {self.name!r}"
            )
        if self.density < 0:
            raise ValueError("Density must be >= 0")
        if self.toxicity_threshold is not None and self.toxicity_threshold <= 0:
            raise ValueError("Toxicity threshold must be > 0")
        if self.toxicity_unit not in TOXICITY_UNITS:
            raise ValueError(
                f"Unknown toxicity unit {self.toxicity_unit!r}. Use one of {TOXICITY_UNITS}."
            )

    @property
    def relative_density(self) -> float:
        """Density relative to air, from molecular weights."""
        return self.molecular_weight / AIR_MOLAR_MASS


def get_reference_chemicals() -> List[Chemical]:
    """
    Return the reference chemicals used by scenarios and examples.

    Toxicity thresholds are AEGL-3 (60 min) values in ppm.

    Returns:
        List of Chemical records.
    """
    return [
        Chemical(
            name="Ammonia",
            molecular_weight=17.03,
            density=0.73,
            toxicity_threshold=1100.0,
            toxicity_unit="ppm",
            cas_number="7664-41-7",
        ),
        Chemical(
            name="Chlorine",
            molecular_weight=70.91,
            density=3.2,
            toxicity_threshold=20.0,
            toxicity_unit="ppm",
            cas_number="7782-50-5",
        ),
        Chemical(
            name="Propane",
            molecular_weight=44.10,
            density=1.88,
            cas_number="74-98-6",
        ),
        Chemical(
            name="Hydrogen Sulfide",
            molecular_weight=34.08,
            density=1.36,
            toxicity_threshold=50.0,
            toxicity_unit="ppm",
            cas_number="7783-06-4",
        ),
        Chemical(
            name="Acetone",
            molecular_weight=58.08,
            density=784.0,
            toxicity_threshold=5700.0,
            toxicity_unit="ppm",
            cas_number="67-64-1",
        ),
        Chemical(
            name="Methane",
            molecular_weight=16.04,
            density=0.657,
            cas_number="74-82-8",
        ),
    ]


def get_chemical(name: str) -> Chemical:
    """Look up a reference chemical by name (case-insensitive)."""
    for chem in get_reference_chemicals():
        if chem.name.lower() == name.lower():
            return chem
    raise KeyError(f"Unknown reference chemical: {name!r}")
