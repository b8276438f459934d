"""
Operating points and their derived property bundles.

An operating point is a (pressure, temperature, composition) triple in
canonical units (kPa, K) plus the properties the equation-of-state engine
computed for it. Changing any part of the triple discards the properties
until the next refresh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from thermo_calc.core.composition import GasComposition

if TYPE_CHECKING:
    from thermo_calc.engine.base import EquationOfStateEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyBundle:
    """
    Thermodynamic properties at one operating point, in canonical units.

    Attributes:
        density: Molar density (mol/l)
        molar_mass: Molar mass (g/mol)
        internal_energy: Internal energy u (J/mol)
        enthalpy: Enthalpy h (J/mol)
        entropy: Entropy s (J/(mol-K))
        cp: Isobaric heat capacity (J/(mol-K))
        cv: Isochoric heat capacity (J/(mol-K))
        compressibility: Compressibility factor Z (-)
        isentropic_exponent: Isentropic exponent kappa (-)
        speed_of_sound: Speed of sound w (m/s)
        gibbs_energy: Gibbs energy g (J/mol)
        joule_thomson: Joule-Thomson coefficient (K/kPa)
    """

    density: float
    molar_mass: float
    internal_energy: float
    enthalpy: float
    entropy: float
    cp: float
    cv: float
    compressibility: float
    isentropic_exponent: float
    speed_of_sound: float
    gibbs_energy: float
    joule_thomson: float

    @property
    def cp_cv_ratio(self) -> float:
        """Heat capacity ratio Cp/Cv (-)."""
        return self.cp / self.cv


@dataclass
class OperatingPoint:
    """
    Canonical state triple plus its derived properties.

    Use the setters rather than assigning fields directly; they keep
    ``properties`` consistent with the triple.

    Attributes:
        pressure_kpa: Absolute pressure (kPa)
        temperature_k: Absolute temperature (K)
        composition: Gas composition
        properties: Derived properties, or None until a successful refresh
    """

    pressure_kpa: float
    temperature_k: float
    composition: GasComposition
    properties: Optional[PropertyBundle] = field(default=None, compare=False)

    @property
    def is_computed(self) -> bool:
        """True if properties match the current triple."""
        return self.properties is not None

    def set_pressure(self, pressure_kpa: float) -> None:
        self.pressure_kpa = float(pressure_kpa)
        self.properties = None

    def set_temperature(self, temperature_k: float) -> None:
        self.temperature_k = float(temperature_k)
        self.properties = None

    def set_composition(self, composition: GasComposition) -> None:
        self.composition = composition
        self.properties = None

    def refresh(self, engine: "EquationOfStateEngine") -> PropertyBundle:
        """
        Recompute properties for the current triple.

        Properties are cleared before the engine is called, so a failed
        computation never leaves values from a different triple behind.

        Args:
            engine: Equation-of-state engine to evaluate the point with

        Returns:
            The new PropertyBundle

        Raises:
            CompositionError: If the engine rejects the composition
            PropertyComputationFailed: If (p, T) is outside the engine's range
        """
        self.properties = None
        engine.set_composition(self.composition)
        bundle = engine.compute(self.pressure_kpa, self.temperature_k)
        self.properties = bundle
        logger.debug(
            f"Refreshed point p={self.pressure_kpa} kPa, T={self.temperature_k} K: "
            f"d={bundle.density:.6f} mol/l"
        )
        return bundle

    def require_properties(self) -> PropertyBundle:
        """Get properties, raising if the point has not been computed."""
        if self.properties is None:
            raise RuntimeError(
                "Properties requested before a successful refresh "
                f"(p={self.pressure_kpa} kPa, T={self.temperature_k} K)"
            )
        return self.properties

    def copy(self) -> OperatingPoint:
        """Independent copy of the triple, without properties."""
        return OperatingPoint(
            pressure_kpa=self.pressure_kpa,
            temperature_k=self.temperature_k,
            composition=self.composition,
        )
