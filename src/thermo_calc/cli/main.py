#!/usr/bin/env python3
"""
Command-line interface for the Thermodynamic Properties Calculator.

Provides an interactive menu for choosing a gas, setting pressure and
temperature, saving inlet/discharge conditions and changing display units.
Properties come from CoolProp, or from an ideal-gas mock engine for testing.

Usage:
    thermo-calc              # CoolProp engine
    thermo-calc --mock       # Ideal-gas engine (no CoolProp required)
    thermo-calc --debug      # Enable debug logging
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, TypeVar

from thermo_calc import __version__
from thermo_calc.core.composition import menu_choices
from thermo_calc.core.errors import (
    CompositionError,
    EngineUnavailable,
    InvalidUserInput,
    UnknownGas,
)
from thermo_calc.core.operating_point import OperatingPoint
from thermo_calc.core.session import RefreshResult, Session, UnitPreferences
from thermo_calc.core.units import (
    QuantityKind,
    energy_to_display,
    entropy_unit_label,
    jt_unit_label,
    per_degree_to_display,
    pressure_to_display,
    temperature_delta_to_display,
    temperature_to_display,
)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

T = TypeVar("T")

MISSING = "---"


# =============================================================================
# Menu state machine
# =============================================================================

class MenuState(Enum):
    """States of the interactive menu."""

    MAIN_MENU = "main_menu"
    SELECT_GAS = "select_gas"
    SET_PRESSURE = "set_pressure"
    SET_TEMPERATURE = "set_temperature"
    SNAPSHOT_INLET = "snapshot_inlet"
    SNAPSHOT_DISCHARGE = "snapshot_discharge"
    CHANGE_UNIT = "change_unit"
    EXIT = "exit"


# Main menu token -> state it leads to
TRANSITIONS: dict[str, MenuState] = {
    "g": MenuState.SELECT_GAS,
    "p": MenuState.SET_PRESSURE,
    "t": MenuState.SET_TEMPERATURE,
    "1": MenuState.SNAPSHOT_INLET,
    "2": MenuState.SNAPSHOT_DISCHARGE,
    "u": MenuState.CHANGE_UNIT,
    "q": MenuState.EXIT,
}


def next_state(token: str) -> MenuState:
    """State reached from the main menu for an input token."""
    return TRANSITIONS.get(token.strip(), MenuState.MAIN_MENU)


# =============================================================================
# Output helpers
# =============================================================================

def print_banner() -> None:
    """Print welcome banner."""
    print(f"""
╔═══════════════════════════════════════════════════════════╗
║        Thermodynamic Properties Calculator v{__version__:<14}║
╚═══════════════════════════════════════════════════════════╝""")


def print_error(message: str) -> None:
    """Print a diagnostic line."""
    print(f"  {message}")


def print_main_menu() -> None:
    print("""
Main Menu
---------
g - Select Gas Composition
p - Set Pressure
t - Set Temperature
---------
1 - Set as inlet condition
2 - Set as discharge condition
u - Change Units
---------
q - Quit Program
""")


# =============================================================================
# State rendering
# =============================================================================

@dataclass(frozen=True)
class PropertyRow:
    """One line of the state table: label, display value and unit label."""

    label: str
    value: Callable[[OperatingPoint, UnitPreferences], Optional[float]]
    unit: Callable[[UnitPreferences], str]


def _bundle_value(
    getter: Callable[..., float],
) -> Callable[[OperatingPoint, UnitPreferences], Optional[float]]:
    """Wrap a (bundle, units) getter so uncomputed points render as missing."""
    def value(point: OperatingPoint, units: UnitPreferences) -> Optional[float]:
        if point.properties is None:
            return None
        return getter(point.properties, units)
    return value


def _fixed(label: str) -> Callable[[UnitPreferences], str]:
    return lambda units: label


PROPERTY_ROWS: list[PropertyRow] = [
    PropertyRow(
        "Absolute Pressure:",
        lambda p, u: pressure_to_display(p.pressure_kpa, u.pressure),
        lambda u: u.pressure.label,
    ),
    PropertyRow(
        "Absolute Temperature:",
        lambda p, u: temperature_to_display(p.temperature_k, u.temperature),
        lambda u: u.temperature.label,
    ),
    PropertyRow("Density:", _bundle_value(lambda b, u: b.density), _fixed("mol/l")),
    PropertyRow("Molar Mass:", _bundle_value(lambda b, u: b.molar_mass), _fixed("g/mol")),
    PropertyRow(
        "Internal Energy u:",
        _bundle_value(
            lambda b, u: energy_to_display(b.internal_energy, u.internal_energy, b.molar_mass)
        ),
        lambda u: u.internal_energy.label,
    ),
    PropertyRow("Enthalpy:", _bundle_value(lambda b, u: b.enthalpy), _fixed("J/mol")),
    PropertyRow(
        "Entropy:",
        _bundle_value(lambda b, u: per_degree_to_display(b.entropy, u.temperature)),
        lambda u: entropy_unit_label(u.temperature),
    ),
    PropertyRow(
        "Cp:",
        _bundle_value(lambda b, u: per_degree_to_display(b.cp, u.temperature)),
        lambda u: entropy_unit_label(u.temperature),
    ),
    PropertyRow(
        "Cv:",
        _bundle_value(lambda b, u: per_degree_to_display(b.cv, u.temperature)),
        lambda u: entropy_unit_label(u.temperature),
    ),
    PropertyRow("Cp/Cv:", _bundle_value(lambda b, u: b.cp_cv_ratio), _fixed("[]")),
    PropertyRow("Compressibility Z:", _bundle_value(lambda b, u: b.compressibility), _fixed("[]")),
    PropertyRow(
        "Isentropic Exponent k:",
        _bundle_value(lambda b, u: b.isentropic_exponent),
        _fixed("[]"),
    ),
    PropertyRow("Speed of Sound w:", _bundle_value(lambda b, u: b.speed_of_sound), _fixed("m/s")),
    PropertyRow("Gibbs Energy:", _bundle_value(lambda b, u: b.gibbs_energy), _fixed("J/mol")),
    PropertyRow(
        "Joule-Thomson Coefficient:",
        _bundle_value(lambda b, u: temperature_delta_to_display(b.joule_thomson, u.temperature)),
        lambda u: jt_unit_label(u.temperature),
    ),
]


def format_value(value: Optional[float]) -> str:
    """Format a display value in a 10-wide column."""
    if value is None or math.isnan(value):
        return f"{MISSING:>10}"
    return f"{value:10.4f}"


def render_state(session: Session) -> None:
    """
    Print the current state table.

    Shows a single column for the current point until a snapshot has been
    taken, then current, inlet and discharge side by side, followed by the
    comparison once both snapshots are displayed.
    """
    units = session.units
    print()

    if session.snapshots_visible:
        columns: list[Optional[OperatingPoint]] = [
            session.current,
            session.inlet if session.show_inlet else None,
            session.discharge if session.show_discharge else None,
        ]
        print(f"{'Gas:':<30} {session.gas_name:<21} {'Inlet':<21} {'Discharge':<10}")
    else:
        columns = [session.current]
        print("Current State")
        print(f"{'Gas:':<30} {session.gas_name:>10}")

    for row in PROPERTY_ROWS:
        unit_label = row.unit(units)
        cells = []
        for point in columns:
            value = row.value(point, units) if point is not None else None
            cells.append(f"{format_value(value)} {unit_label:<10}")
        print(f"{row.label:<30} " + " ".join(cells))
    print()

    comparison = session.comparison()
    if comparison is not None:
        rise = comparison.temperature_rise(units.temperature)
        print(f"{'Pressure Ratio:':<30} {format_value(comparison.pressure_ratio)} []")
        print(f"{'Temperature Ratio:':<30} {format_value(comparison.temperature_ratio)} []")
        print(f"{'Temperature Rise:':<30} {format_value(rise)} {units.temperature.label}")


# =============================================================================
# Input helpers
# =============================================================================

def parse_number(text: str) -> float:
    """
    Parse a numeric entry.

    Raises:
        InvalidUserInput: If the text is not a finite number
    """
    try:
        value = float(text.strip())
    except ValueError:
        raise InvalidUserInput(f"'{text.strip()}' is not a number")
    if not math.isfinite(value):
        raise InvalidUserInput(f"'{text.strip()}' is not a finite number")
    return value


def read_number(prompt: str) -> float:
    """Prompt until the operator enters a valid number."""
    while True:
        print()
        print(prompt)
        try:
            return parse_number(input())
        except InvalidUserInput as e:
            print_error(f"**Invalid number: {e}**")


def read_choice(title: str, options: Sequence[tuple[str, str, T]]) -> T:
    """
    Prompt until the operator picks one of the listed options.

    Args:
        title: Heading printed above the options
        options: (key, label, value) triples in display order

    Returns:
        The value paired with the chosen key
    """
    by_key = {key: value for key, _, value in options}
    while True:
        print()
        print(title)
        for key, label, _ in options:
            print(f"{key} - {label}")
        choice = input().strip()
        if choice in by_key:
            return by_key[choice]
        print_error("**Invalid selection!**")


# =============================================================================
# Commands
# =============================================================================

def cmd_select_gas(session: Session) -> RefreshResult:
    """Choose a preset gas composition."""
    options = [(key, preset.display_name, preset) for key, preset in menu_choices()]
    preset = read_choice("Select Gas:", options)
    return session.set_gas(preset)


def cmd_set_pressure(session: Session) -> RefreshResult:
    """Enter a new pressure in the display unit."""
    value = read_number(f"Enter pressure ({session.units.pressure.label}):")
    return session.set_pressure(value)


def cmd_set_temperature(session: Session) -> RefreshResult:
    """Enter a new temperature in the display unit."""
    value = read_number(f"Enter temperature ({session.units.temperature.label}):")
    return session.set_temperature(value)


def cmd_set_inlet(session: Session) -> RefreshResult:
    return session.snapshot_inlet()


def cmd_set_discharge(session: Session) -> RefreshResult:
    return session.snapshot_discharge()


def cmd_change_units(session: Session) -> None:
    """Pick a quantity, then its new display unit."""
    units = session.units
    kinds = [
        (str(i), f"{kind.value} ({units.get(kind).label})", kind)
        for i, kind in enumerate(QuantityKind, start=1)
    ]
    kind = read_choice("Select Unit:", kinds)

    unit_options = [
        (str(i), unit.menu_label, unit)
        for i, unit in enumerate(kind.unit_type, start=1)
    ]
    unit = read_choice(f"Select {kind.value} Unit:", unit_options)
    session.change_unit(kind, unit)


COMMANDS: dict[MenuState, Callable[[Session], Optional[RefreshResult]]] = {
    MenuState.SELECT_GAS: cmd_select_gas,
    MenuState.SET_PRESSURE: cmd_set_pressure,
    MenuState.SET_TEMPERATURE: cmd_set_temperature,
    MenuState.SNAPSHOT_INLET: cmd_set_inlet,
    MenuState.SNAPSHOT_DISCHARGE: cmd_set_discharge,
    MenuState.CHANGE_UNIT: cmd_change_units,
}


def run_interactive(session: Session) -> None:
    """
    Run the menu loop until the operator quits or input ends.

    Every command runs to completion, then the state is rendered and any
    diagnostic is printed just above the next menu.
    """
    render_state(session)
    if not session.last_result.ok:
        print_error(session.last_result.message)

    while True:
        try:
            print_main_menu()
            state = next_state(input())

            if state is MenuState.EXIT:
                break

            if state is MenuState.MAIN_MENU:
                print_error("**Invalid selection!**")
                continue

            try:
                result = COMMANDS[state](session)
            except (CompositionError, UnknownGas) as e:
                print_error(f"** Invalid gas composition: {e} **")
                continue
            except EngineUnavailable as e:
                print_error(f"** Property engine error: {e} **")
                continue

            # Show the new state, then any diagnostic above the menu
            render_state(session)
            if result is not None and not result.ok:
                print_error(result.message)

        except KeyboardInterrupt:
            print("\n  Use 'q' to exit")

        except EOFError:
            print()
            break

        except Exception as e:
            print_error(f"Error: {e}")
            logger.exception("Unhandled error in CLI")


def create_engine(use_mock: bool):
    """Create the property engine selected on the command line."""
    if use_mock:
        from thermo_calc.engine.mock import MockEngine
        return MockEngine()

    from thermo_calc.engine.coolprop_engine import CoolPropEngine
    return CoolPropEngine()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Thermodynamic Properties Calculator - interactive gas state tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  thermo-calc                 Compute properties with CoolProp
  thermo-calc --mock          Use the ideal-gas engine (no CoolProp needed)
  thermo-calc --debug         Enable debug logging
        """,
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the ideal-gas mock engine instead of CoolProp",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        engine = create_engine(args.mock)
    except ImportError as e:
        print(f"Error: {e}")
        return 1

    print_banner()
    if args.mock:
        print("Running with MOCK ideal-gas engine")

    session = Session.create(engine)
    run_interactive(session)
    return 0


if __name__ == "__main__":
    sys.exit(main())
