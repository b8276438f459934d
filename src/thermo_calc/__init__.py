"""
Thermodynamic Properties Calculator

An interactive tool for computing real-gas properties of air and its
components, and for comparing inlet and discharge conditions.

Example usage:
    >>> from thermo_calc import Session, MockEngine
    >>>
    >>> session = Session.create(MockEngine())
    >>> session.set_gas("Argon")
    >>> session.set_pressure(500)          # in the display unit (kPa)
    >>> session.snapshot_inlet()
    >>> session.set_pressure(1000)
    >>> session.snapshot_discharge()
    >>> session.comparison().pressure_ratio
    2.0
"""

__version__ = "0.1.0"

from thermo_calc.core.composition import GasComposition, GasPreset, lookup
from thermo_calc.core.errors import (
    CompositionError,
    EngineUnavailable,
    InvalidUserInput,
    PropertyComputationFailed,
    ThermoCalcError,
    UnknownGas,
)
from thermo_calc.core.operating_point import OperatingPoint, PropertyBundle
from thermo_calc.core.session import Comparison, Session, UnitPreferences
from thermo_calc.core.units import (
    EnergyUnit,
    PressureUnit,
    QuantityKind,
    TemperatureUnit,
)
from thermo_calc.engine.mock import MockEngine

__all__ = [
    # Core classes
    "Session",
    "OperatingPoint",
    "PropertyBundle",
    "UnitPreferences",
    "Comparison",
    # Composition
    "GasComposition",
    "GasPreset",
    "lookup",
    # Units
    "PressureUnit",
    "TemperatureUnit",
    "EnergyUnit",
    "QuantityKind",
    # Engines
    "MockEngine",
    # Errors
    "ThermoCalcError",
    "InvalidUserInput",
    "UnknownGas",
    "CompositionError",
    "PropertyComputationFailed",
    "EngineUnavailable",
]
