"""Core calculator state: units, compositions, operating points and the session."""

from thermo_calc.core.composition import GasComposition, GasPreset, lookup
from thermo_calc.core.operating_point import OperatingPoint, PropertyBundle
from thermo_calc.core.session import Session, UnitPreferences

__all__ = [
    "GasComposition",
    "GasPreset",
    "lookup",
    "OperatingPoint",
    "PropertyBundle",
    "Session",
    "UnitPreferences",
]
