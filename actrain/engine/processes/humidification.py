"""
Humidification solvers: spray washer and steam humidifier.

Both are driven by a target outlet relative humidity, so the outlet
temperature has to be searched for.

Spray washer (adiabatic saturation):
    Enthalpy is conserved. Find T such that
        RH(T, W_h(T)) == RH_target,   W_h(T) = W at enthalpy h_in and T.
    Efficiency is reported against the fully saturated adiabatic limit.

Steam humidifier (steam injection):
    The injected steam carries its own enthalpy h_s, conserving
        C = h_in − (W_in / 1000) × h_s.
    Find T such that h(T, W) − (W / 1000) × h_s == C with W = W(T, RH_target).
    Steam enthalpy and temperature come from the steam table at the gauge
    pressure.
"""

import logging
from typing import Optional

from actrain.config import (
    ENERGY_TOLERANCE,
    RH_TOLERANCE,
    SOLVER_T_MAX,
    SPECIFIC_HEAT_DRY_AIR,
    SPRAY_WASHER_MAX_ITER,
    STEAM_HUMIDIFIER_MAX_ITER,
    SteamPressureUnit,
)
from actrain.engine import psychrometrics as psy
from actrain.engine.air_state import derive_air_state
from actrain.engine.processes.base import EquipmentProcess
from actrain.engine.processes.utils import hold_previous, solve_outlet_temperature
from actrain.engine.units import convert_steam_pressure
from actrain.models.air import AirState
from actrain.models.equipment import (
    ProcessOutcome,
    SprayWasherConditions,
    SprayWasherResults,
    SteamHumidifierConditions,
    SteamHumidifierResults,
)

logger = logging.getLogger(__name__)


def _clamp_rh(RH: float) -> float:
    return min(100.0, max(0.0, RH))


# ---------------------------------------------------------------------------
# Spray washer: constant enthalpy
# ---------------------------------------------------------------------------

def adiabatic_outlet_temperature(
    h_in: float,
    target_rh: float,
    T_start: float,
    pressure: float,
) -> tuple[Optional[float], bool]:
    """Temperature on the constant-enthalpy line where RH equals the target."""
    target = _clamp_rh(target_rh)

    def objective(T: float) -> float:
        W = psy.absolute_humidity_from_enthalpy(T, h_in)
        return psy.relative_humidity(T, W, pressure, clamp=False) - target

    # Above h / cp the line has no moisture left
    T_max = max(SOLVER_T_MAX, h_in / SPECIFIC_HEAT_DRY_AIR + 1.0)
    return solve_outlet_temperature(
        objective,
        T_start,
        increasing=False,
        tolerance=RH_TOLERANCE,
        max_iter=SPRAY_WASHER_MAX_ITER,
        label="Spray washer",
        T_max=T_max,
    )


class SprayWasherProcess(EquipmentProcess):
    """Solver for adiabatic spray washers."""

    def process(
        self,
        inlet: AirState,
        conditions: SprayWasherConditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        target_rh = outlet.relative_humidity
        if target_rh is None:
            return ProcessOutcome(outlet_air=outlet, pressure_loss=pressure_loss)

        warnings: list[str] = []
        h_in = inlet.enthalpy
        W_in = inlet.absolute_humidity

        T_out, converged = adiabatic_outlet_temperature(
            h_in, target_rh, inlet.temperature, pressure
        )
        if T_out is None:
            logger.warning("Spray washer holding previous outlet state")
            new_outlet = hold_previous(outlet, inlet, pressure)
            warnings.append("Outlet temperature solver did not converge; previous state kept.")
        else:
            new_outlet = derive_air_state(T_out, _clamp_rh(target_rh), pressure=pressure)

        if _clamp_rh(target_rh) < (inlet.relative_humidity or 0.0):
            warnings.append(
                f"Target RH ({target_rh:.1f}%) is below the inlet RH "
                f"({inlet.relative_humidity:.1f}%). A spray washer cannot dry the air."
            )

        # Adiabatic saturation limit
        T_sat, _ = adiabatic_outlet_temperature(h_in, 100.0, inlet.temperature, pressure)
        W_sat = psy.absolute_humidity_from_enthalpy(T_sat, h_in) if T_sat is not None else W_in

        efficiency = 0.0
        potential = W_sat - W_in
        if potential > 0.001:
            efficiency = (new_outlet.absolute_humidity - W_in) / potential * 100.0
            efficiency = min(100.0, max(0.0, efficiency))

        humidification_l_min = mass_flow * (new_outlet.absolute_humidity - W_in) / 1000.0 * 60.0

        return ProcessOutcome(
            outlet_air=new_outlet,
            results=SprayWasherResults(
                humidification_l_min=max(0.0, humidification_l_min),
                spray_amount_l_min=mass_flow * conditions.water_to_air_ratio * 60.0,
                humidification_efficiency=efficiency,
                saturation_abs_humidity=W_sat,
                inlet_wet_bulb=psy.wet_bulb_temperature(inlet.temperature, W_in, pressure),
                converged=converged,
            ),
            pressure_loss=pressure_loss,
            warnings=warnings,
        )


# ---------------------------------------------------------------------------
# Steam humidifier: energy balance with steam injection
# ---------------------------------------------------------------------------

def steam_outlet_temperature(
    h_in: float,
    W_in: float,
    h_steam: float,
    target_rh: float,
    T_start: float,
    pressure: float,
) -> tuple[Optional[float], bool]:
    """Temperature where the steam-injection energy balance closes at the target RH."""
    target = _clamp_rh(target_rh)
    C = h_in - (W_in / 1000.0) * h_steam

    def objective(T: float) -> float:
        W = psy.absolute_humidity(T, target, pressure)
        return psy.enthalpy(T, W) - (W / 1000.0) * h_steam - C

    return solve_outlet_temperature(
        objective,
        T_start,
        increasing=True,
        tolerance=ENERGY_TOLERANCE,
        max_iter=STEAM_HUMIDIFIER_MAX_ITER,
        label="Steam humidifier",
    )


class SteamHumidifierProcess(EquipmentProcess):
    """Solver for steam humidifiers."""

    def process(
        self,
        inlet: AirState,
        conditions: SteamHumidifierConditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        steam = psy.steam_properties(conditions.steam_gauge_pressure, pressure)
        partial = {
            "gauge_pressure": convert_steam_pressure(
                conditions.steam_gauge_pressure,
                SteamPressureUnit.KPAG,
                conditions.steam_gauge_pressure_unit,
            ),
            "gauge_pressure_unit": conditions.steam_gauge_pressure_unit,
            "steam_absolute_pressure": steam.absolute_pressure,
            "steam_temperature": steam.temperature,
            "steam_enthalpy": steam.enthalpy,
        }

        target_rh = outlet.relative_humidity
        if target_rh is None:
            return ProcessOutcome(
                outlet_air=outlet,
                results=SteamHumidifierResults(**partial),
                pressure_loss=pressure_loss,
            )

        warnings: list[str] = []
        T_out, converged = steam_outlet_temperature(
            inlet.enthalpy,
            inlet.absolute_humidity,
            steam.enthalpy,
            target_rh,
            inlet.temperature,
            pressure,
        )
        if T_out is None:
            logger.warning("Steam humidifier holding previous outlet state")
            new_outlet = hold_previous(outlet, inlet, pressure)
            warnings.append("Outlet temperature solver did not converge; previous state kept.")
        else:
            new_outlet = derive_air_state(T_out, _clamp_rh(target_rh), pressure=pressure)

        steam_kg_s = mass_flow * (new_outlet.absolute_humidity - inlet.absolute_humidity) / 1000.0

        return ProcessOutcome(
            outlet_air=new_outlet,
            results=SteamHumidifierResults(
                **partial,
                required_steam_kg_h=max(0.0, steam_kg_s * 3600.0),
                converged=converged,
            ),
            pressure_loss=pressure_loss,
            warnings=warnings,
        )
