"""
Heating equipment: burners, heating coils and fans.

Heating coil:
    Constant absolute humidity (horizontal line on the chart). The user drives
    the outlet temperature; the air-side load is m × Δh and the water-side load
    divides it by the heat-exchange efficiency.

Burner:
    Direct firing adds combustion moisture. With a sensible heat factor SHF the
    total heat is Qs / SHF, and the outlet humidity follows from the outlet
    enthalpy at the user's outlet temperature.

Fan:
    The motor's losses, output × (1 − η), end up in the air stream as
    sensible heat.
"""

from typing import Optional

from actrain.config import MOIST_AIR_SPECIFIC_HEAT
from actrain.engine import psychrometrics as psy
from actrain.engine.air_state import derive_air_state
from actrain.engine.processes.base import EquipmentProcess
from actrain.engine.processes.utils import (
    sensible_temp_change,
    volumetric_airflow,
    water_flow_l_min,
    water_side_load,
)
from actrain.models.air import AirState
from actrain.models.equipment import (
    BurnerConditions,
    BurnerResults,
    FanConditions,
    FanResults,
    HeatingCoilConditions,
    HeatingCoilResults,
    ProcessOutcome,
)


class BurnerProcess(EquipmentProcess):
    """Direct-fired heating with a humidity gain set by the SHF."""

    def process(
        self,
        inlet: AirState,
        conditions: BurnerConditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        T_out = outlet.temperature
        if T_out is None:
            return ProcessOutcome(outlet_air=outlet, pressure_loss=pressure_loss)

        sensible_kw = mass_flow * MOIST_AIR_SPECIFIC_HEAT * (T_out - inlet.temperature)

        warnings: list[str] = []
        if T_out < inlet.temperature:
            warnings.append(
                f"Outlet temperature ({T_out:.1f}) is below the inlet temperature "
                f"({inlet.temperature:.1f}). A burner cannot cool the air."
            )

        # SHF outside (0, 1] has no usable latent split: humidity is held
        shf = conditions.shf
        if 0 < shf <= 1:
            h_out = inlet.enthalpy + sensible_kw / shf / mass_flow
            W_out = psy.absolute_humidity_from_enthalpy(T_out, h_out)
        else:
            W_out = inlet.absolute_humidity
        new_outlet = derive_air_state(T_out, absolute_humidity_override=W_out, pressure=pressure)

        return ProcessOutcome(
            outlet_air=new_outlet,
            results=BurnerResults(
                heat_load_kw=mass_flow * (new_outlet.enthalpy - inlet.enthalpy),
                sensible_heat_kw=sensible_kw,
                humidity_gain=new_outlet.absolute_humidity - inlet.absolute_humidity,
            ),
            pressure_loss=pressure_loss,
            warnings=warnings,
        )


class HeatingCoilProcess(EquipmentProcess):
    """Sensible heating at constant absolute humidity."""

    def process(
        self,
        inlet: AirState,
        conditions: HeatingCoilConditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        T_out = outlet.temperature
        if T_out is None:
            return ProcessOutcome(outlet_air=outlet, pressure_loss=pressure_loss)

        new_outlet = derive_air_state(
            T_out,
            absolute_humidity_override=inlet.absolute_humidity,
            pressure=pressure,
        )
        air_side_kw = mass_flow * (new_outlet.enthalpy - inlet.enthalpy)
        water_kw = water_side_load(air_side_kw, conditions.heat_exchange_efficiency)
        water_delta_t = conditions.hot_water_inlet_temp - conditions.hot_water_outlet_temp

        warnings: list[str] = []
        if T_out < inlet.temperature:
            warnings.append(
                f"Outlet temperature ({T_out:.1f}) is below the inlet temperature "
                f"({inlet.temperature:.1f}). A heating coil cannot cool the air."
            )

        return ProcessOutcome(
            outlet_air=new_outlet,
            results=HeatingCoilResults(
                air_side_heat_load_kw=air_side_kw,
                water_side_heat_load_kw=water_kw,
                hot_water_flow_l_min=water_flow_l_min(water_kw, water_delta_t),
            ),
            pressure_loss=pressure_loss,
            warnings=warnings,
        )


class FanProcess(EquipmentProcess):
    """Motor heat loss raises the air temperature; humidity unchanged."""

    def process(
        self,
        inlet: AirState,
        conditions: FanConditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        efficiency = conditions.motor_efficiency
        heat_kw = conditions.motor_output * (1 - efficiency / 100.0) if efficiency > 0 else 0.0
        delta_t = sensible_temp_change(heat_kw, mass_flow)

        new_outlet = derive_air_state(
            inlet.temperature + delta_t,
            absolute_humidity_override=inlet.absolute_humidity,
            pressure=pressure,
        )

        required_kw = None
        fan_efficiency = conditions.fan_efficiency or 0.0
        if conditions.total_pressure is not None and fan_efficiency > 0:
            airflow_m3_s = volumetric_airflow(mass_flow, inlet.density) / 60.0
            required_kw = (
                airflow_m3_s * conditions.total_pressure
                / (fan_efficiency / 100.0)
                * conditions.margin_factor
                / 1000.0
            )

        return ProcessOutcome(
            outlet_air=new_outlet,
            results=FanResults(
                heat_generation_kw=heat_kw,
                temp_rise=delta_t,
                required_motor_power_kw=required_kw,
            ),
            pressure_loss=pressure_loss,
        )
