"""
Equation-of-state engine backed by CoolProp.

Uses the HEOS (Helmholtz energy) backend through CoolProp's low-level
AbstractState interface. CoolProp works in SI base units; results are
converted to the calculator's canonical units (kPa, mol/l, g/mol, J/mol,
K/kPa) before they leave this module.
"""

from __future__ import annotations

import logging
from typing import Any

from thermo_calc.core.composition import GasComposition
from thermo_calc.core.errors import (
    CompositionError,
    EngineUnavailable,
    PropertyComputationFailed,
)
from thermo_calc.core.operating_point import PropertyBundle
from thermo_calc.engine.base import GAS_CONSTANT

logger = logging.getLogger(__name__)

# Calculator component name -> CoolProp fluid name
COOLPROP_FLUIDS: dict[str, str] = {
    "nitrogen": "Nitrogen",
    "oxygen": "Oxygen",
    "argon": "Argon",
    "helium": "Helium",
    "hydrogen": "Hydrogen",
    "methane": "Methane",
    "carbon_dioxide": "CarbonDioxide",
}


def _import_coolprop() -> Any:
    try:
        import CoolProp
    except ImportError:
        raise ImportError(
            "CoolProp not installed. "
            "Install with: pip install CoolProp "
            "(or run with --mock to use the ideal-gas engine)"
        )
    return CoolProp


class CoolPropEngine:
    """
    Real-fluid property engine using CoolProp's HEOS backend.

    One AbstractState is kept per distinct component set and reused, so
    switching back and forth between inlet, discharge and current points
    does not rebuild the mixture model.

    Example:
        >>> from thermo_calc.core.composition import lookup
        >>> engine = CoolPropEngine()
        >>> engine.set_composition(lookup("Air"))
        >>> bundle = engine.compute(100.0, 273.15)
        >>> round(bundle.compressibility, 4)
        0.9995
    """

    def __init__(self, backend: str = "HEOS"):
        """
        Initialize the engine.

        Args:
            backend: CoolProp backend name (default "HEOS")
        """
        self.backend = backend
        self._cp = _import_coolprop()
        self._states: dict[tuple[str, ...], Any] = {}
        self._state: Any = None
        self._composition: GasComposition | None = None

    def _get_state(self, fluids: tuple[str, ...]) -> Any:
        """Get or create the AbstractState for a component set."""
        if fluids not in self._states:
            logger.info(f"Creating {self.backend} state for {'&'.join(fluids)}")
            try:
                self._states[fluids] = self._cp.AbstractState(
                    self.backend, "&".join(fluids)
                )
            except ValueError as e:
                raise CompositionError(f"CoolProp rejected mixture: {e}") from e
        return self._states[fluids]

    def set_composition(self, composition: GasComposition) -> None:
        composition.validate()

        unknown = [c for c in composition if c not in COOLPROP_FLUIDS]
        if unknown:
            raise CompositionError(
                f"No CoolProp fluid for: {', '.join(unknown)}"
            )

        fluids = tuple(COOLPROP_FLUIDS[c] for c in composition)
        state = self._get_state(fluids)
        try:
            state.set_mole_fractions(list(composition.fractions))
        except ValueError as e:
            raise CompositionError(f"Invalid mole fractions: {e}") from e

        self._state = state
        self._composition = composition

    def compute(self, pressure_kpa: float, temperature_k: float) -> PropertyBundle:
        if self._state is None:
            raise CompositionError("No composition set")

        cp_mod = self._cp
        state = self._state
        try:
            state.update(cp_mod.PT_INPUTS, pressure_kpa * 1000.0, temperature_k)
            molar_mass = state.molar_mass()  # kg/mol
            z = state.compressibility_factor()
            w = state.speed_sound()
            # dT/dP at constant h, K/Pa
            jt = state.first_partial_deriv(cp_mod.iT, cp_mod.iP, cp_mod.iHmolar)
            bundle = PropertyBundle(
                density=state.rhomolar() / 1000.0,
                molar_mass=molar_mass * 1000.0,
                internal_energy=state.umolar(),
                enthalpy=state.hmolar(),
                entropy=state.smolar(),
                cp=state.cpmolar(),
                cv=state.cvmolar(),
                compressibility=z,
                isentropic_exponent=w * w * molar_mass / (z * GAS_CONSTANT * temperature_k),
                speed_of_sound=w,
                gibbs_energy=state.gibbsmolar(),
                joule_thomson=jt * 1000.0,
            )
        except ValueError as e:
            logger.warning(
                f"CoolProp failed at p={pressure_kpa} kPa, T={temperature_k} K: {e}"
            )
            raise PropertyComputationFailed(str(e)) from e
        except RuntimeError as e:
            raise EngineUnavailable(f"CoolProp error: {e}") from e

        return bundle
