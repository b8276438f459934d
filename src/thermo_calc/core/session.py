"""
Calculator session state.

The Session is the single owner of the current operating point, the
optional inlet and discharge snapshots, and the display unit preferences.
All mutation goes through its methods, and every method that changes a
canonical triple refreshes the derived properties before returning. A
method that raises leaves the session untouched.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

from thermo_calc.core.composition import GasPreset, lookup, resolve_preset
from thermo_calc.core.errors import (
    CompositionError,
    EngineUnavailable,
    PropertyComputationFailed,
)
from thermo_calc.core.operating_point import OperatingPoint
from thermo_calc.core.units import (
    EnergyUnit,
    PressureUnit,
    QuantityKind,
    TemperatureUnit,
    pressure_to_canonical,
    temperature_delta_to_display,
    temperature_to_canonical,
)

if TYPE_CHECKING:
    from thermo_calc.engine.base import EquationOfStateEngine

logger = logging.getLogger(__name__)

DEFAULT_GAS = GasPreset.AIR
DEFAULT_PRESSURE_KPA = 100.0
DEFAULT_TEMPERATURE_K = 273.15

OUT_OF_BOUNDS_MESSAGE = (
    "** Error calculating density.  Pressure or temperature out of bounds! **"
)


@dataclass
class UnitPreferences:
    """Display units for each convertible quantity."""

    pressure: PressureUnit = PressureUnit.KPA
    temperature: TemperatureUnit = TemperatureUnit.K
    internal_energy: EnergyUnit = EnergyUnit.J_MOL

    def get(self, kind: QuantityKind) -> Enum:
        return getattr(self, _PREFERENCE_FIELDS[kind])

    def set(self, kind: QuantityKind, unit: Enum) -> None:
        """
        Change the display unit for one quantity.

        Raises:
            TypeError: If the unit does not belong to the quantity kind
        """
        if not isinstance(unit, kind.unit_type):
            raise TypeError(
                f"{unit!r} is not a {kind.value.lower()} unit"
            )
        setattr(self, _PREFERENCE_FIELDS[kind], unit)


_PREFERENCE_FIELDS: dict[QuantityKind, str] = {
    QuantityKind.PRESSURE: "pressure",
    QuantityKind.TEMPERATURE: "temperature",
    QuantityKind.INTERNAL_ENERGY: "internal_energy",
}


@dataclass(frozen=True)
class RefreshResult:
    """
    Outcome of a property refresh.

    Attributes:
        ok: True if the engine produced properties
        message: Diagnostic for the operator when ok is False
    """

    ok: bool
    message: Optional[str] = None


@dataclass(frozen=True)
class Comparison:
    """
    Inlet to discharge comparison, computed in canonical units.

    Attributes:
        pressure_ratio: discharge / inlet absolute pressure (-)
        temperature_ratio: discharge / inlet absolute temperature (-)
        temperature_rise_k: discharge - inlet temperature (K)
    """

    pressure_ratio: float
    temperature_ratio: float
    temperature_rise_k: float

    @classmethod
    def between(cls, inlet: OperatingPoint, discharge: OperatingPoint) -> Comparison:
        return cls(
            pressure_ratio=_ratio(discharge.pressure_kpa, inlet.pressure_kpa),
            temperature_ratio=_ratio(discharge.temperature_k, inlet.temperature_k),
            temperature_rise_k=discharge.temperature_k - inlet.temperature_k,
        )

    def temperature_rise(self, unit: TemperatureUnit) -> float:
        """Temperature rise in the display unit (scale only, no offset)."""
        return temperature_delta_to_display(self.temperature_rise_k, unit)


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


@dataclass
class Session:
    """
    Owner of all calculator state for one interactive run.

    Attributes:
        engine: Equation-of-state engine used for every refresh
        current: The live operating point edited by the operator
        gas: Preset the current composition came from
        inlet: Inlet snapshot, or None if never taken
        discharge: Discharge snapshot, or None if never taken
        show_inlet: Whether the inlet snapshot is displayed
        show_discharge: Whether the discharge snapshot is displayed
        units: Display unit preferences

    Example:
        >>> session = Session.create(MockEngine())
        >>> session.set_gas("Argon")
        >>> session.set_pressure(500)
        >>> session.snapshot_inlet()
        >>> session.set_pressure(1000)
        >>> session.snapshot_discharge()
        >>> session.comparison().pressure_ratio
        2.0
    """

    engine: "EquationOfStateEngine"
    current: OperatingPoint
    gas: GasPreset = DEFAULT_GAS
    inlet: Optional[OperatingPoint] = None
    discharge: Optional[OperatingPoint] = None
    show_inlet: bool = False
    show_discharge: bool = False
    units: UnitPreferences = field(default_factory=UnitPreferences)
    last_result: RefreshResult = field(default_factory=lambda: RefreshResult(ok=True))

    @classmethod
    def create(
        cls,
        engine: "EquationOfStateEngine",
        gas: GasPreset | str = DEFAULT_GAS,
        pressure_kpa: float = DEFAULT_PRESSURE_KPA,
        temperature_k: float = DEFAULT_TEMPERATURE_K,
    ) -> Session:
        """
        Create a session at the default operating point and compute it.

        A failed initial computation is recorded in ``last_result`` rather
        than raised, so the session can still start and the operator can
        pick another gas or operating point.
        """
        preset = resolve_preset(gas)
        session = cls(
            engine=engine,
            gas=preset,
            current=OperatingPoint(
                pressure_kpa=pressure_kpa,
                temperature_k=temperature_k,
                composition=lookup(preset),
            ),
        )
        try:
            session._refresh(session.current)
        except CompositionError as e:
            logger.warning(f"Initial composition rejected: {e}")
            session.last_result = RefreshResult(
                ok=False, message=f"** Invalid gas composition: {e} **"
            )
        except EngineUnavailable as e:
            session.last_result = RefreshResult(
                ok=False, message=f"** Property engine error: {e} **"
            )
        logger.info(
            f"Session started: {preset.display_name}, "
            f"{pressure_kpa} kPa, {temperature_k} K"
        )
        return session

    # =========================================================================
    # Refresh
    # =========================================================================

    def _refresh(self, point: OperatingPoint) -> RefreshResult:
        """
        Recompute properties for a point and record the outcome.

        Out-of-range points are reported through the result; the point is
        left without properties and the session carries on. Mutators refresh
        a candidate point and only store it once this returns, so an engine
        exception leaves the session as it was.

        Raises:
            CompositionError: If the engine rejects the composition
            EngineUnavailable: If the engine fails in any other way
        """
        try:
            point.refresh(self.engine)
            result = RefreshResult(ok=True)
        except PropertyComputationFailed as e:
            logger.warning(
                f"Property computation failed at p={point.pressure_kpa} kPa, "
                f"T={point.temperature_k} K: {e}"
            )
            result = RefreshResult(ok=False, message=OUT_OF_BOUNDS_MESSAGE)
        except CompositionError:
            raise
        except Exception as e:
            logger.exception("Equation-of-state engine failed")
            raise EngineUnavailable(f"Engine failure: {e}") from e

        self.last_result = result
        return result

    # =========================================================================
    # Mutators
    # =========================================================================

    @property
    def gas_name(self) -> str:
        return self.gas.display_name

    def set_gas(self, gas: GasPreset | str) -> RefreshResult:
        """
        Switch the current point to a preset composition.

        Hides both snapshots: a comparison made with the previous gas is no
        longer meaningful. The stored snapshots are kept until replaced.

        Raises:
            UnknownGas: If the preset name is not in the catalog
            CompositionError: If the engine rejects the composition
            EngineUnavailable: If the engine fails in any other way

        The session is left unchanged when an exception is raised.
        """
        preset = resolve_preset(gas)
        point = self.current.copy()
        point.set_composition(lookup(preset))
        result = self._refresh(point)

        self.gas = preset
        self.current = point
        self.show_inlet = False
        self.show_discharge = False
        logger.info(f"Gas set to {preset.display_name}")
        return result

    def set_pressure(self, value: float) -> RefreshResult:
        """Set the current pressure, given in the display pressure unit."""
        pressure_kpa = pressure_to_canonical(value, self.units.pressure)
        point = self.current.copy()
        point.set_pressure(pressure_kpa)
        result = self._refresh(point)

        self.current = point
        logger.info(f"Pressure set to {pressure_kpa} kPa")
        return result

    def set_temperature(self, value: float) -> RefreshResult:
        """Set the current temperature, given in the display temperature unit."""
        temperature_k = temperature_to_canonical(value, self.units.temperature)
        point = self.current.copy()
        point.set_temperature(temperature_k)
        result = self._refresh(point)

        self.current = point
        logger.info(f"Temperature set to {temperature_k} K")
        return result

    def snapshot_inlet(self) -> RefreshResult:
        """Save a copy of the current point as the inlet condition."""
        point = self.current.copy()
        result = self._refresh(point)

        self.inlet = point
        self.show_inlet = True
        logger.info(f"Inlet set: {point.pressure_kpa} kPa, {point.temperature_k} K")
        return result

    def snapshot_discharge(self) -> RefreshResult:
        """Save a copy of the current point as the discharge condition."""
        point = self.current.copy()
        result = self._refresh(point)

        self.discharge = point
        self.show_discharge = True
        logger.info(
            f"Discharge set: {point.pressure_kpa} kPa, {point.temperature_k} K"
        )
        return result

    def change_unit(self, kind: QuantityKind, unit: Enum) -> None:
        """Change a display unit. Canonical state is untouched."""
        self.units.set(kind, unit)
        logger.info(f"{kind.value} unit set to {unit.label}")

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def snapshots_visible(self) -> bool:
        """True if either snapshot is displayed."""
        return self.show_inlet or self.show_discharge

    def comparison(self) -> Optional[Comparison]:
        """Inlet/discharge comparison, or None unless both are displayed."""
        if not (self.show_inlet and self.show_discharge):
            return None
        if self.inlet is None or self.discharge is None:
            return None
        return Comparison.between(self.inlet, self.discharge)
