"""
Mock equation-of-state engine for testing without CoolProp.

Computes ideal-gas properties from tabulated component data. The results
are physically reasonable at low pressure and deterministic everywhere,
which is what the session and CLI tests need. A configurable validity
window reproduces the out-of-bounds failure of a real engine.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from thermo_calc.core.composition import GasComposition
from thermo_calc.core.errors import CompositionError, PropertyComputationFailed
from thermo_calc.core.operating_point import PropertyBundle
from thermo_calc.engine.base import GAS_CONSTANT

logger = logging.getLogger(__name__)

# Reference state for enthalpy and entropy (h = 0, s = 0)
REFERENCE_TEMPERATURE_K = 298.15
REFERENCE_PRESSURE_KPA = 101.325


@dataclass(frozen=True)
class ComponentData:
    """
    Ideal-gas data for one component.

    Attributes:
        molar_mass: Molar mass (g/mol)
        cp_over_r: Constant isobaric heat capacity divided by R (-)
    """

    molar_mass: float
    cp_over_r: float


COMPONENT_DATA: dict[str, ComponentData] = {
    "nitrogen": ComponentData(molar_mass=28.0135, cp_over_r=3.5),
    "oxygen": ComponentData(molar_mass=31.9988, cp_over_r=3.5),
    "argon": ComponentData(molar_mass=39.948, cp_over_r=2.5),
    "helium": ComponentData(molar_mass=4.002602, cp_over_r=2.5),
    "hydrogen": ComponentData(molar_mass=2.01588, cp_over_r=3.47),
    "methane": ComponentData(molar_mass=16.0428, cp_over_r=4.3),
    "carbon_dioxide": ComponentData(molar_mass=44.0095, cp_over_r=4.47),
}


@dataclass
class MockEngine:
    """
    Ideal-gas engine implementing the EquationOfStateEngine protocol.

    Attributes:
        min_temperature_k: Lowest accepted temperature (K)
        max_temperature_k: Highest accepted temperature (K)
        max_pressure_kpa: Highest accepted pressure (kPa)
        compute_count: Number of successful compute() calls

    Example:
        >>> from thermo_calc.core.composition import lookup
        >>> engine = MockEngine()
        >>> engine.set_composition(lookup("Argon"))
        >>> engine.compute(100.0, 273.15).compressibility
        1.0
    """

    min_temperature_k: float = 90.0
    max_temperature_k: float = 760.0
    max_pressure_kpa: float = 280_000.0
    compute_count: int = 0

    _composition: Optional[GasComposition] = field(default=None, repr=False)

    def set_composition(self, composition: GasComposition) -> None:
        composition.validate()
        unknown = [c for c in composition if c not in COMPONENT_DATA]
        if unknown:
            raise CompositionError(
                f"Mock engine has no data for: {', '.join(unknown)}"
            )
        self._composition = composition

    def compute(self, pressure_kpa: float, temperature_k: float) -> PropertyBundle:
        if self._composition is None:
            raise CompositionError("No composition set")
        if not (0.0 < pressure_kpa <= self.max_pressure_kpa):
            raise PropertyComputationFailed(
                f"Pressure {pressure_kpa} kPa outside (0, {self.max_pressure_kpa}]"
            )
        if not (self.min_temperature_k <= temperature_k <= self.max_temperature_k):
            raise PropertyComputationFailed(
                f"Temperature {temperature_k} K outside "
                f"[{self.min_temperature_k}, {self.max_temperature_k}]"
            )

        x = self._composition.fractions
        data = [COMPONENT_DATA[c] for c in self._composition]
        molar_mass = float(np.dot(x, [d.molar_mass for d in data]))
        cp = GAS_CONSTANT * float(np.dot(x, [d.cp_over_r for d in data]))
        cv = cp - GAS_CONSTANT
        kappa = cp / cv

        r = GAS_CONSTANT
        t = temperature_k
        # kPa / (J/(mol-K) * K) = mol/l
        density = pressure_kpa / (r * t)
        enthalpy = cp * (t - REFERENCE_TEMPERATURE_K)
        internal_energy = enthalpy - r * t
        mixing = -r * float(np.sum(x * np.log(x)))
        entropy = (
            cp * math.log(t / REFERENCE_TEMPERATURE_K)
            - r * math.log(pressure_kpa / REFERENCE_PRESSURE_KPA)
            + mixing
        )
        speed_of_sound = math.sqrt(kappa * r * t / (molar_mass / 1000.0))

        self.compute_count += 1
        logger.debug(f"Mock compute p={pressure_kpa} kPa, T={t} K")

        return PropertyBundle(
            density=density,
            molar_mass=molar_mass,
            internal_energy=internal_energy,
            enthalpy=enthalpy,
            entropy=entropy,
            cp=cp,
            cv=cv,
            compressibility=1.0,
            isentropic_exponent=kappa,
            speed_of_sound=speed_of_sound,
            gibbs_energy=enthalpy - t * entropy,
            joule_thomson=0.0,
        )
