"""
Unit conversion between canonical and display units.

Canonical units are fixed for all stored state:
- Pressure: kPa (absolute)
- Temperature: K
- Internal energy: J/mol

Every display unit is a closed enum member that carries the coefficients
of its transform, so conversion is a lookup plus arithmetic rather than a
chain of special cases:

    display = canonical * scale + offset
    canonical = (display - offset) / scale

Functions accept floats or numpy arrays and never raise; malformed input is
rejected by the command interpreter before it gets here.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]

# Absolute zero offset between Kelvin and Celsius
KELVIN_OFFSET = 273.15

# 1 kJ/kg expressed in BTU/lbm
BTU_PER_LBM_PER_KJ_PER_KG = 0.429923


def _affine(value: ArrayLike, scale: float, offset: float = 0.0) -> ArrayLike:
    """Apply ``value * scale + offset``, returning a float for scalar input."""
    result = np.asarray(value, dtype=float) * scale + offset
    if result.ndim == 0:
        return float(result)
    return result


def _affine_inverse(value: ArrayLike, scale: float, offset: float = 0.0) -> ArrayLike:
    """Invert :func:`_affine`."""
    result = (np.asarray(value, dtype=float) - offset) / scale
    if result.ndim == 0:
        return float(result)
    return result


# =============================================================================
# Unit enums
# =============================================================================

class PressureUnit(Enum):
    """Display units for absolute pressure."""

    KPA = ("kPa", 1.0)
    BAR = ("Bar", 0.01)
    PSI = ("PSI", 0.145038)

    def __init__(self, label: str, scale: float):
        self.label = label
        self.scale = scale

    @property
    def menu_label(self) -> str:
        return self.label


class TemperatureUnit(Enum):
    """Display units for absolute temperature."""

    C = ("C", "Celsius", 1.0, -KELVIN_OFFSET)
    K = ("K", "Kelvin", 1.0, 0.0)
    F = ("F", "Fahrenheit", 9.0 / 5.0, 32.0 - KELVIN_OFFSET * 9.0 / 5.0)
    R = ("R", "Rankine", 9.0 / 5.0, 0.0)

    def __init__(self, label: str, long_name: str, scale: float, offset: float):
        self.label = label
        self.long_name = long_name
        self.scale = scale
        self.offset = offset

    @property
    def menu_label(self) -> str:
        return f"{self.long_name} {self.label}"


class EnergyUnit(Enum):
    """Display units for internal energy."""

    J_MOL = ("J/mol", False, 1.0)
    KJ_KG = ("kJ/kg", True, 1.0)
    BTU_LBM = ("BTU/lbm", True, BTU_PER_LBM_PER_KJ_PER_KG)

    def __init__(self, label: str, per_mass: bool, scale: float):
        self.label = label
        self.per_mass = per_mass
        self.scale = scale

    @property
    def menu_label(self) -> str:
        return self.label


class QuantityKind(Enum):
    """Quantities whose display unit can be changed."""

    PRESSURE = "Pressure"
    TEMPERATURE = "Temperature"
    INTERNAL_ENERGY = "Internal Energy"

    @property
    def unit_type(self) -> type[Enum]:
        return _UNIT_TYPES[self]


_UNIT_TYPES: dict[QuantityKind, type[Enum]] = {
    QuantityKind.PRESSURE: PressureUnit,
    QuantityKind.TEMPERATURE: TemperatureUnit,
    QuantityKind.INTERNAL_ENERGY: EnergyUnit,
}


# =============================================================================
# Pressure
# =============================================================================

def pressure_to_display(pressure_kpa: ArrayLike, unit: PressureUnit) -> ArrayLike:
    """Convert pressure from kPa to the display unit."""
    return _affine(pressure_kpa, unit.scale)


def pressure_to_canonical(value: ArrayLike, unit: PressureUnit) -> ArrayLike:
    """Convert pressure entered in the display unit to kPa."""
    return _affine_inverse(value, unit.scale)


# =============================================================================
# Temperature
# =============================================================================

def temperature_to_display(temperature_k: ArrayLike, unit: TemperatureUnit) -> ArrayLike:
    """
    Convert absolute temperature from K to the display unit.

    Examples:
        >>> temperature_to_display(273.15, TemperatureUnit.F)
        32.0
        >>> temperature_to_display(300.0, TemperatureUnit.R)
        540.0
    """
    return _affine(temperature_k, unit.scale, unit.offset)


def temperature_to_canonical(value: ArrayLike, unit: TemperatureUnit) -> ArrayLike:
    """Convert absolute temperature entered in the display unit to K."""
    return _affine_inverse(value, unit.scale, unit.offset)


def temperature_delta_to_display(delta_k: ArrayLike, unit: TemperatureUnit) -> ArrayLike:
    """
    Convert a temperature difference from K to the display unit.

    Differences only carry the scale factor. The offset cancels, so a rise
    of 50 K is 50 C, 90 F and 90 R.
    """
    return _affine(delta_k, unit.scale)


# =============================================================================
# Internal energy
# =============================================================================

def energy_to_display(
    energy_j_mol: ArrayLike,
    unit: EnergyUnit,
    molar_mass: float,
) -> ArrayLike:
    """
    Convert molar internal energy to the display unit.

    Args:
        energy_j_mol: Internal energy (J/mol)
        unit: Target display unit
        molar_mass: Molar mass of the mixture (g/mol), used by per-mass units

    Returns:
        Energy in the display unit. J/mol divided by g/mol gives kJ/kg.
    """
    if not unit.per_mass:
        return _affine(energy_j_mol, unit.scale)
    return _affine(energy_j_mol, unit.scale / molar_mass)


def energy_to_canonical(
    value: ArrayLike,
    unit: EnergyUnit,
    molar_mass: float,
) -> ArrayLike:
    """Convert internal energy in the display unit back to J/mol."""
    if not unit.per_mass:
        return _affine_inverse(value, unit.scale)
    return _affine_inverse(value, unit.scale / molar_mass)


# =============================================================================
# Labels for derived quantities
# =============================================================================

def entropy_unit_label(unit: TemperatureUnit) -> str:
    """Label for entropy and heat capacities, e.g. ``J/(mol-K)``."""
    return f"J/(mol-{unit.label})"


def jt_unit_label(unit: TemperatureUnit) -> str:
    """Label for the Joule-Thomson coefficient, e.g. ``K/kPa``."""
    return f"{unit.label}/kPa"


def per_degree_to_display(value_per_k: ArrayLike, unit: TemperatureUnit) -> ArrayLike:
    """
    Convert a quantity expressed per kelvin (entropy, Cp, Cv) to per display degree.

    One degree F or R is 5/9 K, so J/(mol-K) values shrink by that factor.
    """
    return _affine(value_per_k, 1.0 / unit.scale)
