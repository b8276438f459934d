"""
Interface for equation-of-state engines.

The calculator treats the engine as a black box: it is told the mixture,
then asked for the properties at a (pressure, temperature) point in
canonical units.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from thermo_calc.core.composition import GasComposition
    from thermo_calc.core.operating_point import PropertyBundle

# Molar gas constant (J/(mol-K))
GAS_CONSTANT = 8.314462618


class EquationOfStateEngine(Protocol):
    """Protocol defining the interface for property computation."""

    def set_composition(self, composition: "GasComposition") -> None:
        """
        Select the mixture for subsequent computations.

        Raises:
            CompositionError: If the fractions are invalid for the model
        """
        ...

    def compute(self, pressure_kpa: float, temperature_k: float) -> "PropertyBundle":
        """
        Compute density and derived properties at (p, T).

        Raises:
            PropertyComputationFailed: If (p, T) is outside the valid range
        """
        ...
