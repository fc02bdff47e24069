"""
Cooling coil transfer function.

The user drives the outlet dry-bulb temperature. Two regimes:

  - Outlet at or above the inlet dew point: sensible cooling only, the
    absolute humidity is unchanged.
  - Outlet below the inlet dew point: cooling and dehumidification. The air
    follows a straight line from the inlet toward the apparatus dew point
    (ADP) and the bypass factor (BF) sets how far it gets:

        T_out = ADP + BF × (T_in − ADP)   →   ADP = (T_out − BF × T_in) / (1 − BF)
        W_out = (1 − BF) × W_sat(ADP) + BF × W_in

    If the blend overshoots saturation at T_out, the outlet is clamped to
    100% RH.
"""

from typing import Optional

from actrain.config import SPECIFIC_HEAT_DRY_AIR
from actrain.engine import psychrometrics as psy
from actrain.engine.air_state import derive_air_state
from actrain.engine.processes.base import EquipmentProcess
from actrain.engine.processes.utils import water_flow_l_min, water_side_load
from actrain.models.air import AirState
from actrain.models.equipment import (
    CoolingCoilConditions,
    CoolingCoilResults,
    ProcessOutcome,
)


def leaving_abs_humidity(
    T_in: float,
    W_in: float,
    T_out: float,
    bypass_factor: float,
    pressure: float,
) -> tuple[float, Optional[float]]:
    """
    Outlet absolute humidity (g/kg) and ADP (°C, None when sensible only).
    """
    if T_out >= psy.dew_point(W_in, pressure):
        return W_in, None

    BF = max(0.0, bypass_factor)
    if BF >= 1.0:
        # No air touches the coil surface
        W_out = W_in
        adp = None
    else:
        adp = (T_out - T_in * BF) / (1.0 - BF)
        W_adp = psy.absolute_humidity(adp, 100.0, pressure)
        W_out = (1.0 - BF) * W_adp + BF * W_in

    W_sat = psy.absolute_humidity(T_out, 100.0, pressure)
    return min(W_out, W_sat), adp


class CoolingCoilProcess(EquipmentProcess):
    """Solver for cooling coils with the bypass-factor model."""

    def process(
        self,
        inlet: AirState,
        conditions: CoolingCoilConditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        T_out = outlet.temperature
        if T_out is None:
            return ProcessOutcome(outlet_air=outlet, pressure_loss=pressure_loss)

        W_out, adp = leaving_abs_humidity(
            inlet.temperature,
            inlet.absolute_humidity,
            T_out,
            conditions.bypass_factor,
            pressure,
        )
        new_outlet = derive_air_state(T_out, absolute_humidity_override=W_out, pressure=pressure)

        # Load calculations (positive = heat removed from the air)
        Qt = inlet.enthalpy - new_outlet.enthalpy
        Qs = SPECIFIC_HEAT_DRY_AIR * (inlet.temperature - T_out)
        SHR = Qs / Qt if abs(Qt) > 1e-10 else 1.0

        air_side_kw = mass_flow * Qt
        water_kw = water_side_load(air_side_kw, conditions.heat_exchange_efficiency)
        water_delta_t = conditions.chilled_water_outlet_temp - conditions.chilled_water_inlet_temp
        dehum_kg_s = mass_flow * (inlet.absolute_humidity - new_outlet.absolute_humidity) / 1000.0

        warnings: list[str] = []
        if T_out > inlet.temperature:
            warnings.append(
                f"Outlet temperature ({T_out:.1f}) is above the inlet temperature "
                f"({inlet.temperature:.1f}). A cooling coil cannot heat the air."
            )

        BF = conditions.bypass_factor
        return ProcessOutcome(
            outlet_air=new_outlet,
            results=CoolingCoilResults(
                air_side_heat_load_kw=air_side_kw,
                water_side_heat_load_kw=water_kw,
                chilled_water_flow_l_min=water_flow_l_min(water_kw, water_delta_t),
                dehumidification_l_min=max(0.0, dehum_kg_s * 60.0),
                bypass_factor=BF,
                contact_factor=1.0 - BF,
                apparatus_dew_point=adp,
                sensible_heat_ratio=SHR,
            ),
            pressure_loss=pressure_loss,
            warnings=warnings,
        )
