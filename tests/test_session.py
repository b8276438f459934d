"""Tests for Session state management."""

import pytest

from thermo_calc.core.composition import GasPreset, lookup
from thermo_calc.core.errors import CompositionError, EngineUnavailable
from thermo_calc.core.session import (
    OUT_OF_BOUNDS_MESSAGE,
    Comparison,
    Session,
)
from thermo_calc.core.operating_point import OperatingPoint
from thermo_calc.core.units import (
    EnergyUnit,
    PressureUnit,
    QuantityKind,
    TemperatureUnit,
    pressure_to_display,
)
from thermo_calc.engine.mock import MockEngine


class RejectingEngine(MockEngine):
    """Mock engine that refuses pure argon."""

    def set_composition(self, composition):
        if composition.components == ["argon"]:
            raise CompositionError("argon not supported")
        super().set_composition(composition)


class BrokenEngine(MockEngine):
    """Mock engine whose computation crashes after the first call."""

    def compute(self, pressure_kpa, temperature_k):
        if self.compute_count >= 1:
            raise RuntimeError("engine crashed")
        return super().compute(pressure_kpa, temperature_k)


class DeadEngine(MockEngine):
    """Mock engine whose computation always crashes."""

    def compute(self, pressure_kpa, temperature_k):
        raise RuntimeError("engine crashed")


@pytest.fixture
def session():
    """Session with default state and the mock engine."""
    return Session.create(MockEngine())


class TestDefaults:
    """Tests for the starting state."""

    def test_default_state(self, session):
        assert session.gas is GasPreset.AIR
        assert session.gas_name == "Air"
        assert session.current.pressure_kpa == 100.0
        assert session.current.temperature_k == 273.15
        assert session.current.composition == lookup("Air")

    def test_default_is_computed(self, session):
        assert session.current.is_computed
        assert session.last_result.ok

    def test_default_units(self, session):
        assert session.units.pressure is PressureUnit.KPA
        assert session.units.temperature is TemperatureUnit.K
        assert session.units.internal_energy is EnergyUnit.J_MOL

    def test_no_snapshots(self, session):
        assert session.inlet is None
        assert session.discharge is None
        assert not session.snapshots_visible
        assert session.comparison() is None

    def test_out_of_range_start_does_not_raise(self):
        session = Session.create(MockEngine(), temperature_k=5000.0)
        assert not session.last_result.ok
        assert session.current.properties is None

    def test_engine_failure_at_start_does_not_raise(self):
        session = Session.create(DeadEngine())
        assert not session.last_result.ok
        assert "engine crashed" in session.last_result.message
        assert session.current.properties is None
        assert session.gas is GasPreset.AIR


class TestMutators:
    """Tests for state-changing operations."""

    def test_set_gas_refreshes(self, session):
        result = session.set_gas("Argon")
        assert result.ok
        assert session.gas is GasPreset.ARGON
        assert session.current.properties.molar_mass == pytest.approx(39.948)

    def test_set_pressure_in_display_unit(self, session):
        session.change_unit(QuantityKind.PRESSURE, PressureUnit.BAR)
        session.set_pressure(5.0)
        assert session.current.pressure_kpa == pytest.approx(500.0)
        assert session.current.is_computed

    def test_set_temperature_in_display_unit(self, session):
        session.change_unit(QuantityKind.TEMPERATURE, TemperatureUnit.C)
        session.set_temperature(25.0)
        assert session.current.temperature_k == pytest.approx(298.15)

    def test_set_temperature_rankine(self, session):
        session.change_unit(QuantityKind.TEMPERATURE, TemperatureUnit.R)
        session.set_temperature(540.0)
        assert session.current.temperature_k == pytest.approx(300.0)

    def test_out_of_bounds_keeps_going(self, session):
        result = session.set_temperature(5000.0)
        assert not result.ok
        assert result.message == OUT_OF_BOUNDS_MESSAGE
        assert session.current.temperature_k == 5000.0
        assert session.current.properties is None

        # Recovers on the next valid entry
        assert session.set_temperature(300.0).ok
        assert session.current.is_computed

    def test_composition_error_leaves_session_unchanged(self):
        session = Session.create(RejectingEngine())
        with pytest.raises(CompositionError):
            session.set_gas("Argon")
        assert session.gas is GasPreset.AIR
        assert session.current.composition == lookup("Air")
        assert session.current.is_computed

    def test_engine_failure_is_wrapped(self):
        session = Session.create(BrokenEngine())
        with pytest.raises(EngineUnavailable):
            session.set_pressure(200.0)
        assert session.current.pressure_kpa == 100.0
        assert session.current.is_computed

    def test_engine_failure_leaves_gas_unchanged(self):
        session = Session.create(BrokenEngine())
        session.show_inlet = True
        with pytest.raises(EngineUnavailable):
            session.set_gas("Argon")
        assert session.gas is GasPreset.AIR
        assert session.current.composition == lookup("Air")
        assert session.current.is_computed
        assert session.show_inlet

    @pytest.mark.parametrize("snapshot", ["snapshot_inlet", "snapshot_discharge"])
    def test_engine_failure_leaves_snapshot_unchanged(self, snapshot):
        session = Session.create(BrokenEngine())
        with pytest.raises(EngineUnavailable):
            getattr(session, snapshot)()
        assert session.inlet is None
        assert session.discharge is None
        assert not session.snapshots_visible


class TestUnits:
    """Tests for unit preference changes."""

    def test_change_unit_does_not_touch_state(self, session):
        bundle = session.current.properties
        session.change_unit(QuantityKind.PRESSURE, PressureUnit.PSI)

        assert session.units.pressure is PressureUnit.PSI
        assert session.current.pressure_kpa == 100.0
        assert session.current.properties is bundle
        displayed = pressure_to_display(session.current.pressure_kpa, session.units.pressure)
        assert displayed == pytest.approx(14.5038)

    def test_wrong_unit_kind_raises(self, session):
        with pytest.raises(TypeError):
            session.change_unit(QuantityKind.PRESSURE, TemperatureUnit.F)

    def test_get_unit(self, session):
        session.change_unit(QuantityKind.INTERNAL_ENERGY, EnergyUnit.KJ_KG)
        assert session.units.get(QuantityKind.INTERNAL_ENERGY) is EnergyUnit.KJ_KG


class TestSnapshots:
    """Tests for inlet and discharge snapshots."""

    def test_snapshot_inlet(self, session):
        session.snapshot_inlet()
        assert session.show_inlet
        assert session.inlet.pressure_kpa == 100.0
        assert session.inlet.is_computed
        assert session.inlet is not session.current

    def test_snapshot_independence(self, session):
        """Later edits to the current point do not reach the snapshot."""
        session.snapshot_inlet()
        session.set_pressure(750.0)
        session.set_temperature(350.0)
        session.set_gas("Oxygen")

        assert session.inlet.pressure_kpa == 100.0
        assert session.inlet.temperature_k == 273.15
        assert session.inlet.composition == lookup("Air")

    def test_snapshot_bundle_not_shared(self, session):
        session.snapshot_inlet()
        session.set_pressure(200.0)
        assert session.inlet.properties is not None
        assert session.inlet.properties.density != session.current.properties.density

    def test_set_gas_hides_snapshots(self, session):
        session.snapshot_inlet()
        session.snapshot_discharge()
        session.set_gas("Nitrogen")

        assert not session.show_inlet
        assert not session.show_discharge
        assert session.comparison() is None
        # Values are kept until re-snapshotted
        assert session.inlet is not None
        assert session.discharge is not None

    def test_failed_snapshot_is_still_visible(self, session):
        session.set_temperature(5000.0)
        result = session.snapshot_discharge()
        assert not result.ok
        assert session.show_discharge
        assert session.discharge.properties is None


class TestComparison:
    """Tests for inlet/discharge comparison."""

    def test_needs_both_snapshots(self, session):
        session.snapshot_inlet()
        assert session.comparison() is None

    def test_comparison_values(self, session):
        session.snapshot_inlet()
        session.set_pressure(200.0)
        session.set_temperature(323.15)
        session.snapshot_discharge()

        comparison = session.comparison()
        assert comparison.pressure_ratio == pytest.approx(2.0)
        assert comparison.temperature_ratio == pytest.approx(1.1830, abs=1e-4)
        assert comparison.temperature_rise_k == pytest.approx(50.0)

    @pytest.mark.parametrize(
        "unit, expected",
        [
            (TemperatureUnit.K, 50.0),
            (TemperatureUnit.C, 50.0),
            (TemperatureUnit.F, 90.0),
            (TemperatureUnit.R, 90.0),
        ],
    )
    def test_rise_in_display_units(self, unit, expected):
        inlet = OperatingPoint(100.0, 273.15, lookup("Air"))
        discharge = OperatingPoint(200.0, 323.15, lookup("Air"))
        comparison = Comparison.between(inlet, discharge)
        assert comparison.temperature_rise(unit) == pytest.approx(expected)

    def test_ratios_independent_of_display_units(self, session):
        session.snapshot_inlet()
        session.set_pressure(300.0)
        session.snapshot_discharge()
        before = session.comparison()

        session.change_unit(QuantityKind.PRESSURE, PressureUnit.PSI)
        session.change_unit(QuantityKind.TEMPERATURE, TemperatureUnit.F)
        assert session.comparison() == before

    def test_zero_inlet_pressure_gives_nan(self):
        inlet = OperatingPoint(0.0, 273.15, lookup("Air"))
        discharge = OperatingPoint(200.0, 273.15, lookup("Air"))
        comparison = Comparison.between(inlet, discharge)
        assert comparison.pressure_ratio != comparison.pressure_ratio


class TestEndToEnd:
    """Scenario from start-up to a full comparison."""

    def test_argon_compression(self, session):
        session.set_gas("Argon")
        session.set_pressure(500.0)
        session.set_temperature(300.0)
        session.snapshot_inlet()
        session.set_pressure(1000.0)
        session.snapshot_discharge()

        assert session.comparison().pressure_ratio == pytest.approx(2.0)
        assert session.inlet.pressure_kpa == pytest.approx(500.0)
        assert session.discharge.pressure_kpa == pytest.approx(1000.0)
        assert session.current.pressure_kpa == pytest.approx(1000.0)
