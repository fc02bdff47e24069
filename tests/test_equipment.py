"""
Tests for the equipment transfer functions and single-unit recomputation.
"""

import pytest

from actrain.config import EQUIPMENT_COLORS, EquipmentType, SteamPressureUnit
from actrain.engine import psychrometrics as psy
from actrain.engine.air_state import derive_air_state
from actrain.engine.equipment import create_unit, default_conditions, mass_flow_rate, recompute
from actrain.engine.processes.cooling_coil import leaving_abs_humidity
from actrain.models.air import AirState
from actrain.models.equipment import (
    BurnerConditions,
    CoolingCoilConditions,
    DamperConditions,
    FanConditions,
    FilterConditions,
    SprayWasherConditions,
    SteamHumidifierConditions,
)


def approx(value: float, rel_tol: float = 0.01, abs_tol: float = 0.1):
    return pytest.approx(value, rel=rel_tol, abs=abs_tol)


def run(equipment_type, inlet, outlet=None, conditions=None, mass_flow=1.2, pressure_loss=None):
    """Recompute a freshly built unit with optional overrides."""
    unit = create_unit(equipment_type, 1, inlet, outlet=outlet)
    changes = {}
    if conditions is not None:
        changes["conditions"] = conditions
    if pressure_loss is not None:
        changes["pressure_loss"] = pressure_loss
    if changes:
        unit = unit.model_copy(update=changes)
    return recompute(unit, inlet, mass_flow)


# ---------------------------------------------------------------------------
# Cooling coil
# ---------------------------------------------------------------------------

class TestCoolingCoilDehumidifying:
    """25°C / 80% RH cooled to 15°C with a 5% bypass factor."""

    def setup_method(self):
        self.inlet = derive_air_state(25.0, 80.0)
        self.outcome = run(
            EquipmentType.COOLING_COIL,
            self.inlet,
            outlet=AirState(temperature=15.0),
            conditions=CoolingCoilConditions(bypass_factor=0.05),
        )
        self.out = self.outcome.outlet_air
        self.results = self.outcome.results

    def test_outlet_nearly_saturated(self):
        assert self.out.temperature == 15.0
        assert self.out.relative_humidity > 98.0
        assert self.out.relative_humidity <= 100.0

    def test_moisture_removed(self):
        assert self.out.absolute_humidity < self.inlet.absolute_humidity
        assert self.results.dehumidification_l_min > 0

    def test_apparatus_dew_point(self):
        assert self.results.apparatus_dew_point == approx(14.47, abs_tol=0.05)

    def test_loads(self):
        assert self.results.air_side_heat_load_kw > 0
        assert self.results.water_side_heat_load_kw == pytest.approx(
            self.results.air_side_heat_load_kw / 0.85
        )
        assert self.results.chilled_water_flow_l_min > 0

    def test_shr_and_contact_factor(self):
        assert 0 < self.results.sensible_heat_ratio < 1
        assert self.results.contact_factor == pytest.approx(0.95)

    def test_no_warnings(self):
        assert self.outcome.warnings == []


class TestCoolingCoilSensibleBoundary:
    def test_outlet_at_dew_point_removes_no_water(self):
        inlet = derive_air_state(25.0, 80.0)
        dew = psy.dew_point(inlet.absolute_humidity)
        outcome = run(EquipmentType.COOLING_COIL, inlet, outlet=AirState(temperature=dew))
        assert outcome.results.dehumidification_l_min == pytest.approx(0.0, abs=1e-9)
        assert outcome.results.apparatus_dew_point is None

    def test_sensible_only_keeps_humidity(self):
        W, adp = leaving_abs_humidity(30.0, 8.0, 20.0, 0.05, 101325.0)
        assert W == 8.0
        assert adp is None

    def test_full_bypass_never_dehumidifies_below_saturation(self):
        W, adp = leaving_abs_humidity(25.0, 15.0, 10.0, 1.0, 101325.0)
        assert adp is None
        assert W == pytest.approx(psy.absolute_humidity(10.0, 100.0))

    def test_heating_warning(self):
        inlet = derive_air_state(20.0, 50.0)
        outcome = run(EquipmentType.COOLING_COIL, inlet, outlet=AirState(temperature=25.0))
        assert len(outcome.warnings) == 1


# ---------------------------------------------------------------------------
# Heating coil and burner
# ---------------------------------------------------------------------------

class TestHeatingCoil:
    """15°C saturated air heated to 40°C."""

    def setup_method(self):
        self.inlet = derive_air_state(15.0, 100.0)
        self.outcome = run(EquipmentType.HEATING_COIL, self.inlet, outlet=AirState(temperature=40.0))
        self.out = self.outcome.outlet_air

    def test_humidity_unchanged(self):
        assert self.out.absolute_humidity == pytest.approx(self.inlet.absolute_humidity)

    def test_rh_drops(self):
        assert self.out.relative_humidity < self.inlet.relative_humidity

    def test_air_side_load(self):
        expected = 1.2 * (self.out.enthalpy - self.inlet.enthalpy)
        assert self.outcome.results.air_side_heat_load_kw == pytest.approx(expected)

    def test_hot_water_flow(self):
        water_kw = self.outcome.results.water_side_heat_load_kw
        assert self.outcome.results.hot_water_flow_l_min == pytest.approx(
            water_kw / (4.186 * 30.0) * 60.0
        )

    def test_zero_water_delta_t_gives_zero_flow(self):
        from actrain.models.equipment import HeatingCoilConditions

        outcome = run(
            EquipmentType.HEATING_COIL,
            self.inlet,
            outlet=AirState(temperature=40.0),
            conditions=HeatingCoilConditions(hot_water_inlet_temp=60.0, hot_water_outlet_temp=60.0),
        )
        assert outcome.results.hot_water_flow_l_min == 0.0


class TestBurner:
    def setup_method(self):
        self.inlet = derive_air_state(0.0, 50.0)

    def test_combustion_adds_moisture(self):
        outcome = run(EquipmentType.BURNER, self.inlet, outlet=AirState(temperature=55.2))
        assert outcome.outlet_air.temperature == 55.2
        assert outcome.results.humidity_gain > 0
        assert outcome.results.heat_load_kw > outcome.results.sensible_heat_kw

    def test_total_heat_is_sensible_over_shf(self):
        outcome = run(EquipmentType.BURNER, self.inlet, outlet=AirState(temperature=40.0))
        assert outcome.results.heat_load_kw == pytest.approx(
            outcome.results.sensible_heat_kw / 0.9, rel=1e-9
        )

    def test_degenerate_shf_holds_humidity(self):
        outcome = run(
            EquipmentType.BURNER,
            self.inlet,
            outlet=AirState(temperature=40.0),
            conditions=BurnerConditions(shf=0.0),
        )
        assert outcome.outlet_air.is_known
        assert outcome.results.humidity_gain == pytest.approx(0.0, abs=1e-12)

    def test_cooling_warning(self):
        inlet = derive_air_state(30.0, 40.0)
        outcome = run(EquipmentType.BURNER, inlet, outlet=AirState(temperature=20.0))
        assert outcome.warnings


# ---------------------------------------------------------------------------
# Fan, filter, damper, pass-through
# ---------------------------------------------------------------------------

class TestFan:
    def setup_method(self):
        self.inlet = derive_air_state(25.0, 60.0)
        self.outcome = run(EquipmentType.FAN, self.inlet, mass_flow=1.2)

    def test_heat_generation(self):
        assert self.outcome.results.heat_generation_kw == pytest.approx(0.04)

    def test_small_temperature_rise(self):
        rise = self.outcome.results.temp_rise
        assert 0 < rise < 0.1
        assert self.outcome.outlet_air.temperature == pytest.approx(25.0 + rise)

    def test_humidity_unchanged(self):
        assert self.outcome.outlet_air.absolute_humidity == pytest.approx(
            self.inlet.absolute_humidity
        )

    def test_no_motor_power_without_fan_data(self):
        assert self.outcome.results.required_motor_power_kw is None

    def test_required_motor_power(self):
        outcome = run(
            EquipmentType.FAN,
            self.inlet,
            conditions=FanConditions(total_pressure=500.0, fan_efficiency=50.0, margin_factor=1.1),
        )
        airflow_m3_s = 1.2 / self.inlet.density
        expected = airflow_m3_s * 500.0 / 0.5 * 1.1 / 1000.0
        assert outcome.results.required_motor_power_kw == pytest.approx(expected)


class TestFilter:
    def test_face_velocity(self):
        inlet = derive_air_state(20.0, 50.0)
        mass_flow = mass_flow_rate(120.0, inlet.density)
        outcome = run(
            EquipmentType.FILTER,
            inlet,
            conditions=FilterConditions(width=500, height=500, sheets=2),
            mass_flow=mass_flow,
        )
        # 2 m³/s over 0.5 m²
        assert outcome.results.face_velocity == pytest.approx(4.0)
        assert outcome.results.treated_airflow_per_sheet == pytest.approx(60.0)
        assert outcome.outlet_air == inlet
        assert outcome.pressure_loss == 50.0


class TestDamper:
    def test_pressure_loss(self):
        inlet = derive_air_state(20.0, 50.0)
        mass_flow = mass_flow_rate(60.0, inlet.density)
        outcome = run(
            EquipmentType.DAMPER,
            inlet,
            conditions=DamperConditions(width=500, height=500, loss_coefficient_k=2.0),
            mass_flow=mass_flow,
        )
        # 1 m³/s over 0.25 m² → 4 m/s
        assert outcome.results.air_velocity == pytest.approx(4.0)
        assert outcome.pressure_loss == pytest.approx(2.0 * 0.5 * inlet.density * 16.0)
        assert outcome.results.pressure_loss == outcome.pressure_loss

    def test_zero_flow_resets_loss(self):
        inlet = derive_air_state(20.0, 50.0)
        outcome = run(EquipmentType.DAMPER, inlet, mass_flow=0.0, pressure_loss=30.0)
        assert outcome.pressure_loss == 0.0
        assert outcome.results is None


class TestPassThrough:
    @pytest.mark.parametrize("equipment_type", [EquipmentType.ELIMINATOR, EquipmentType.CUSTOM])
    def test_outlet_equals_inlet(self, equipment_type):
        inlet = derive_air_state(22.0, 45.0)
        outcome = run(equipment_type, inlet, pressure_loss=35.0)
        assert outcome.outlet_air == inlet
        assert outcome.results.pressure_loss == 35.0
        assert outcome.results.type == equipment_type


# ---------------------------------------------------------------------------
# Humidifiers
# ---------------------------------------------------------------------------

class TestSprayWasher:
    """30°C / 30% RH washed to 70% RH."""

    def setup_method(self):
        self.inlet = derive_air_state(30.0, 30.0)
        self.unit = create_unit(
            EquipmentType.SPRAY_WASHER, 1, self.inlet, outlet=AirState(relative_humidity=70.0)
        )
        self.outcome = recompute(self.unit, self.inlet, 1.2)
        self.out = self.outcome.outlet_air

    def test_target_rh_reproduced(self):
        rh = psy.relative_humidity(self.out.temperature, self.out.absolute_humidity)
        assert rh == pytest.approx(70.0, abs=0.05)

    def test_enthalpy_conserved(self):
        assert self.out.enthalpy == pytest.approx(self.inlet.enthalpy, abs=0.05)

    def test_cooled_and_humidified(self):
        assert self.out.temperature < self.inlet.temperature
        assert self.out.absolute_humidity > self.inlet.absolute_humidity

    def test_results(self):
        results = self.outcome.results
        assert results.converged
        assert results.humidification_l_min > 0
        assert results.spray_amount_l_min == pytest.approx(1.2 * 0.8 * 60.0)
        assert 0 < results.humidification_efficiency < 100
        assert results.saturation_abs_humidity > self.out.absolute_humidity
        assert self.out.temperature > results.inlet_wet_bulb - 0.5

    def test_idempotent(self):
        again = recompute(
            self.unit.model_copy(update={"outlet_air": self.out}), self.inlet, 1.2
        )
        assert again.outlet_air.temperature == pytest.approx(self.out.temperature, abs=1e-6)
        assert again.outlet_air.absolute_humidity == pytest.approx(
            self.out.absolute_humidity, abs=1e-6
        )

    def test_saturation_target(self):
        unit = create_unit(
            EquipmentType.SPRAY_WASHER, 1, self.inlet, outlet=AirState(relative_humidity=100.0)
        )
        outcome = recompute(unit, self.inlet, 1.2)
        assert outcome.outlet_air.relative_humidity == pytest.approx(100.0, abs=0.05)
        assert outcome.results.humidification_efficiency == pytest.approx(100.0, abs=0.5)

    def test_no_target_keeps_outlet(self):
        unit = create_unit(EquipmentType.SPRAY_WASHER, 1, self.inlet, outlet=AirState())
        outcome = recompute(unit, self.inlet, 1.2)
        assert outcome.outlet_air == AirState()
        assert outcome.results is None

    def test_drying_target_warns(self):
        inlet = derive_air_state(25.0, 80.0)
        unit = create_unit(
            EquipmentType.SPRAY_WASHER, 1, inlet, outlet=AirState(relative_humidity=50.0)
        )
        outcome = recompute(unit, inlet, 1.2)
        assert outcome.warnings
        assert outcome.results.humidification_l_min == 0.0


class TestSteamHumidifier:
    """30°C / 30% RH humidified with 100 kPaG steam to 60% RH."""

    def setup_method(self):
        self.inlet = derive_air_state(30.0, 30.0)
        self.unit = create_unit(EquipmentType.STEAM_HUMIDIFIER, 1, self.inlet)
        self.outcome = recompute(self.unit, self.inlet, 1.2)
        self.out = self.outcome.outlet_air

    def test_target_rh_reproduced(self):
        rh = psy.relative_humidity(self.out.temperature, self.out.absolute_humidity)
        assert rh == pytest.approx(60.0, abs=0.05)

    def test_energy_balance(self):
        h_s = self.outcome.results.steam_enthalpy
        conserved_in = self.inlet.enthalpy - self.inlet.absolute_humidity / 1000.0 * h_s
        conserved_out = self.out.enthalpy - self.out.absolute_humidity / 1000.0 * h_s
        assert conserved_out == pytest.approx(conserved_in, abs=0.01)

    def test_nearly_isothermal(self):
        assert self.out.temperature == approx(30.0, abs_tol=2.0)
        assert self.out.temperature > self.inlet.temperature

    def test_steam_properties(self):
        results = self.outcome.results
        assert results.steam_absolute_pressure == pytest.approx(201.325)
        assert results.steam_temperature == approx(120.38, abs_tol=0.01)
        assert results.converged

    def test_required_steam(self):
        expected = 1.2 * (self.out.absolute_humidity - self.inlet.absolute_humidity) / 1000.0 * 3600.0
        assert self.outcome.results.required_steam_kg_h == pytest.approx(expected)
        assert expected > 0

    def test_idempotent(self):
        again = recompute(self.unit.model_copy(update={"outlet_air": self.out}), self.inlet, 1.2)
        assert again.outlet_air.temperature == pytest.approx(self.out.temperature, abs=1e-6)

    def test_no_target_reports_steam_only(self):
        unit = self.unit.model_copy(update={"outlet_air": AirState()})
        outcome = recompute(unit, self.inlet, 1.2)
        assert outcome.results.required_steam_kg_h == 0.0
        assert outcome.results.steam_temperature == approx(120.38, abs_tol=0.01)
        assert outcome.outlet_air == AirState()

    def test_higher_steam_pressure(self):
        unit = self.unit.model_copy(
            update={"conditions": SteamHumidifierConditions(steam_gauge_pressure=400.0)}
        )
        outcome = recompute(unit, self.inlet, 1.2)
        assert outcome.results.steam_temperature > self.outcome.results.steam_temperature

    def test_gauge_pressure_in_display_unit(self):
        unit = self.unit.model_copy(
            update={
                "conditions": SteamHumidifierConditions(
                    steam_gauge_pressure=100.0,
                    steam_gauge_pressure_unit=SteamPressureUnit.PSIG,
                )
            }
        )
        results = recompute(unit, self.inlet, 1.2).results
        assert results.gauge_pressure == pytest.approx(14.50377)
        assert results.gauge_pressure_unit == SteamPressureUnit.PSIG
        assert results.steam_absolute_pressure == pytest.approx(201.325)


class TestHumidifierWithoutSolution:
    """Targets the energy balance cannot reach must not run away."""

    def test_unreachable_steam_target_holds_inlet(self):
        inlet = derive_air_state(60.0, 0.0)
        outcome = run(
            EquipmentType.STEAM_HUMIDIFIER, inlet, outlet=AirState(relative_humidity=100.0)
        )
        out = outcome.outlet_air
        assert not outcome.results.converged
        assert out.temperature == pytest.approx(60.0)
        assert out.absolute_humidity == pytest.approx(inlet.absolute_humidity)
        assert out.relative_humidity == pytest.approx(
            psy.relative_humidity(out.temperature, out.absolute_humidity)
        )
        assert outcome.results.required_steam_kg_h == 0.0
        assert any("did not converge" in w for w in outcome.warnings)

    def test_unreachable_steam_target_keeps_previous_outlet(self):
        inlet = derive_air_state(60.0, 0.0)
        previous = derive_air_state(61.0, 100.0)
        outcome = run(EquipmentType.STEAM_HUMIDIFIER, inlet, outlet=previous)
        assert not outcome.results.converged
        assert outcome.outlet_air.temperature == pytest.approx(61.0)
        assert outcome.outlet_air.absolute_humidity == pytest.approx(previous.absolute_humidity)

    @pytest.mark.parametrize("temperature,rh,gauge", [(50.0, 30.0, 1000.0), (55.0, 5.0, 1000.0)])
    def test_outlet_stays_in_solver_range(self, temperature, rh, gauge):
        inlet = derive_air_state(temperature, rh)
        outcome = run(
            EquipmentType.STEAM_HUMIDIFIER,
            inlet,
            outlet=AirState(relative_humidity=100.0),
            conditions=SteamHumidifierConditions(steam_gauge_pressure=gauge),
        )
        out = outcome.outlet_air
        assert -50.0 <= out.temperature <= 90.0
        assert out.absolute_humidity >= inlet.absolute_humidity
        assert out.relative_humidity == pytest.approx(
            psy.relative_humidity(out.temperature, out.absolute_humidity), abs=0.05
        )

    def test_high_pressure_steam_root_found(self):
        inlet = derive_air_state(-10.0, 30.0)
        outcome = run(
            EquipmentType.STEAM_HUMIDIFIER,
            inlet,
            outlet=AirState(relative_humidity=90.0),
            conditions=SteamHumidifierConditions(steam_gauge_pressure=1000.0),
        )
        out = outcome.outlet_air
        h_s = outcome.results.steam_enthalpy
        assert outcome.results.converged
        assert outcome.warnings == []
        assert -10.0 < out.temperature < -9.0
        assert psy.relative_humidity(out.temperature, out.absolute_humidity) == pytest.approx(
            90.0, abs=0.05
        )
        conserved_in = inlet.enthalpy - inlet.absolute_humidity / 1000.0 * h_s
        conserved_out = out.enthalpy - out.absolute_humidity / 1000.0 * h_s
        assert conserved_out == pytest.approx(conserved_in, abs=0.01)

    def test_spray_washer_zero_target_dries_to_line_end(self):
        inlet = derive_air_state(30.0, 30.0)
        outcome = run(EquipmentType.SPRAY_WASHER, inlet, outlet=AirState(relative_humidity=0.0))
        out = outcome.outlet_air
        assert outcome.results.converged
        assert out.absolute_humidity == pytest.approx(0.0, abs=0.01)
        assert out.enthalpy == pytest.approx(inlet.enthalpy, abs=0.05)
        assert outcome.warnings


# ---------------------------------------------------------------------------
# Recompute guards and factory
# ---------------------------------------------------------------------------

class TestRecomputeGuards:
    def test_zero_flow_mirrors_inlet(self):
        inlet = derive_air_state(25.0, 80.0)
        outcome = run(EquipmentType.COOLING_COIL, inlet, outlet=AirState(temperature=15.0), mass_flow=0.0)
        assert outcome.outlet_air == inlet
        assert outcome.results is None

    def test_unknown_inlet_mirrors_inlet(self):
        inlet = AirState(relative_humidity=50.0)
        outcome = run(EquipmentType.HEATING_COIL, inlet, outlet=AirState(temperature=40.0))
        assert outcome.outlet_air.temperature is None
        assert outcome.results is None

    def test_mass_flow_rate(self):
        assert mass_flow_rate(60.0, 1.2) == pytest.approx(1.2)
        assert mass_flow_rate(None, 1.2) == 0.0
        assert mass_flow_rate(60.0, None) == 0.0


class TestCreateUnit:
    def test_defaults(self):
        inlet = derive_air_state(0.0, 50.0)
        unit = create_unit(EquipmentType.COOLING_COIL, 7, inlet)
        assert unit.id == 7
        assert unit.name == "Cooling Coil"
        assert unit.pressure_loss == 50.0
        assert unit.color == EQUIPMENT_COLORS[EquipmentType.COOLING_COIL]
        assert unit.outlet_air.temperature == 15.0
        assert unit.outlet_air.relative_humidity == 95.0
        assert not unit.inlet_is_locked

    def test_damper_starts_without_loss(self):
        unit = create_unit(EquipmentType.DAMPER, 1, derive_air_state(0.0, 50.0))
        assert unit.pressure_loss == 0.0

    def test_burner_outlet_keeps_inlet_humidity(self):
        inlet = derive_air_state(0.0, 50.0)
        unit = create_unit(EquipmentType.BURNER, 1, inlet)
        assert unit.outlet_air.temperature == 55.2
        assert unit.outlet_air.absolute_humidity == pytest.approx(inlet.absolute_humidity)

    def test_steam_humidifier_outlet_is_rh_only(self):
        unit = create_unit(EquipmentType.STEAM_HUMIDIFIER, 1, derive_air_state(0.0, 50.0))
        assert unit.outlet_air.temperature is None
        assert unit.outlet_air.relative_humidity == 60.0

    @pytest.mark.parametrize("equipment_type", list(EquipmentType))
    def test_conditions_match_type(self, equipment_type):
        assert default_conditions(equipment_type).type == equipment_type

    def test_spray_washer_defaults(self):
        assert default_conditions(EquipmentType.SPRAY_WASHER) == SprayWasherConditions(
            water_to_air_ratio=0.8
        )
