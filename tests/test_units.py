"""Tests for unit conversion."""

import numpy as np
import pytest

from thermo_calc.core.units import (
    EnergyUnit,
    PressureUnit,
    QuantityKind,
    TemperatureUnit,
    energy_to_canonical,
    energy_to_display,
    entropy_unit_label,
    jt_unit_label,
    per_degree_to_display,
    pressure_to_canonical,
    pressure_to_display,
    temperature_delta_to_display,
    temperature_to_canonical,
    temperature_to_display,
)


class TestPressure:
    """Tests for pressure conversion."""

    def test_kpa_is_identity(self):
        assert pressure_to_display(100.0, PressureUnit.KPA) == pytest.approx(100.0)

    def test_bar(self):
        assert pressure_to_display(100.0, PressureUnit.BAR) == pytest.approx(1.0)
        assert pressure_to_canonical(1.0, PressureUnit.BAR) == pytest.approx(100.0)

    def test_psi(self):
        """100 kPa displays as 14.5038 PSI."""
        assert pressure_to_display(100.0, PressureUnit.PSI) == pytest.approx(14.5038)
        assert pressure_to_canonical(14.5038, PressureUnit.PSI) == pytest.approx(100.0)

    @pytest.mark.parametrize("unit", list(PressureUnit))
    def test_roundtrip(self, unit):
        """to_canonical undoes to_display for every unit."""
        display = pressure_to_display(100.0, unit)
        assert pressure_to_canonical(display, unit) == pytest.approx(100.0)

    def test_array_input(self):
        """Arrays convert element-wise."""
        result = pressure_to_display(np.array([100.0, 200.0]), PressureUnit.BAR)
        np.testing.assert_allclose(result, [1.0, 2.0])

    def test_scalar_returns_float(self):
        assert isinstance(pressure_to_display(100.0, PressureUnit.PSI), float)


class TestTemperature:
    """Tests for absolute temperature conversion."""

    def test_celsius(self):
        assert temperature_to_display(273.15, TemperatureUnit.C) == pytest.approx(0.0)
        assert temperature_to_canonical(25.0, TemperatureUnit.C) == pytest.approx(298.15)

    def test_fahrenheit(self):
        assert temperature_to_display(273.15, TemperatureUnit.F) == pytest.approx(32.0)
        assert temperature_to_display(373.15, TemperatureUnit.F) == pytest.approx(212.0)
        assert temperature_to_canonical(212.0, TemperatureUnit.F) == pytest.approx(373.15)

    def test_rankine(self):
        """Rankine is absolute: K = R * 5/9."""
        assert temperature_to_display(300.0, TemperatureUnit.R) == pytest.approx(540.0)
        assert temperature_to_canonical(540.0, TemperatureUnit.R) == pytest.approx(300.0)

    def test_fahrenheit_and_rankine_agree(self):
        """R = F + 459.67 at any temperature."""
        t = 310.0
        f = temperature_to_display(t, TemperatureUnit.F)
        r = temperature_to_display(t, TemperatureUnit.R)
        assert r - f == pytest.approx(459.67)

    @pytest.mark.parametrize("unit", list(TemperatureUnit))
    def test_roundtrip(self, unit):
        display = temperature_to_display(273.15, unit)
        assert temperature_to_canonical(display, unit) == pytest.approx(273.15)


class TestTemperatureDelta:
    """Tests for temperature differences."""

    @pytest.mark.parametrize(
        "unit, expected",
        [
            (TemperatureUnit.K, 50.0),
            (TemperatureUnit.C, 50.0),
            (TemperatureUnit.F, 90.0),
            (TemperatureUnit.R, 90.0),
        ],
    )
    def test_rise_uses_scale_only(self, unit, expected):
        assert temperature_delta_to_display(50.0, unit) == pytest.approx(expected)

    @pytest.mark.parametrize("unit", list(TemperatureUnit))
    def test_matches_difference_of_displays(self, unit):
        """Offsets cancel: delta equals the difference of displayed values."""
        low, high = 273.15, 323.15
        difference = temperature_to_display(high, unit) - temperature_to_display(low, unit)
        assert temperature_delta_to_display(high - low, unit) == pytest.approx(difference)

    def test_per_degree(self):
        """J/(mol-K) becomes smaller per degree F."""
        assert per_degree_to_display(29.1, TemperatureUnit.K) == pytest.approx(29.1)
        assert per_degree_to_display(29.1, TemperatureUnit.F) == pytest.approx(29.1 * 5 / 9)


class TestInternalEnergy:
    """Tests for internal energy conversion."""

    def test_j_mol_is_identity(self):
        assert energy_to_display(5000.0, EnergyUnit.J_MOL, 28.96) == pytest.approx(5000.0)

    def test_kj_kg(self):
        """J/mol divided by g/mol is kJ/kg."""
        assert energy_to_display(5000.0, EnergyUnit.KJ_KG, 25.0) == pytest.approx(200.0)

    def test_btu_lbm(self):
        expected = 5000.0 / 25.0 * 0.429923
        assert energy_to_display(5000.0, EnergyUnit.BTU_LBM, 25.0) == pytest.approx(expected)

    @pytest.mark.parametrize("unit", list(EnergyUnit))
    def test_roundtrip(self, unit):
        display = energy_to_display(5000.0, unit, 28.96)
        assert energy_to_canonical(display, unit, 28.96) == pytest.approx(5000.0)


class TestLabels:
    """Tests for unit labels."""

    def test_entropy_label(self):
        assert entropy_unit_label(TemperatureUnit.K) == "J/(mol-K)"
        assert entropy_unit_label(TemperatureUnit.R) == "J/(mol-R)"

    def test_jt_label(self):
        assert jt_unit_label(TemperatureUnit.C) == "C/kPa"

    def test_menu_labels(self):
        assert TemperatureUnit.F.menu_label == "Fahrenheit F"
        assert PressureUnit.BAR.menu_label == "Bar"

    def test_quantity_kind_unit_types(self):
        assert QuantityKind.PRESSURE.unit_type is PressureUnit
        assert QuantityKind.TEMPERATURE.unit_type is TemperatureUnit
        assert QuantityKind.INTERNAL_ENERGY.unit_type is EnergyUnit
