"""
Unit conversion between SI and Imperial (IP) systems.

SI is the storage system for everything the engine computes. Each quantity
kind has a multiplicative SI → IP factor, except temperature which is affine.
Dimensionless kinds (RH, SHF, efficiency, ...) convert to themselves.

Steam pressure additionally has six gauge unit variants. Conversions between
them pass through kPaG, the unit in which steam humidifier conditions are
stored.
"""

import math
from typing import Optional

from actrain.config import UnitSystem, SteamPressureUnit
from actrain.models.conversion import QuantityKind

# SI unit → IP unit multipliers
_SI_TO_IP = {
    QuantityKind.LENGTH: 0.0393701,  # mm → in
    QuantityKind.AIRFLOW: 35.3147,  # m³/min → CFM
    QuantityKind.AIRFLOW_PER_SHEET: 35.3147,  # m³/min/sheet → CFM/sheet
    QuantityKind.PRESSURE: 0.00401463,  # Pa → in.w.g.
    QuantityKind.HEAT_LOAD: 3412.142,  # kW → BTU/h
    QuantityKind.WATER_FLOW: 0.264172,  # L/min → GPM
    QuantityKind.ABS_HUMIDITY: 7.0,  # g/kg(DA) → gr/lb(DA)
    QuantityKind.ENTHALPY: 0.429923,  # kJ/kg(DA) → BTU/lb(DA)
    QuantityKind.MOTOR_POWER: 1.34102,  # kW → HP
    QuantityKind.VELOCITY: 3.28084,  # m/s → ft/s
    QuantityKind.AREA: 10.7639,  # m² → ft²
    QuantityKind.DENSITY: 0.062428,  # kg/m³ → lb/ft³
    QuantityKind.STEAM_PRESSURE: 0.1450377,  # kPa → psi
    QuantityKind.STEAM_ENTHALPY: 0.429923,  # kJ/kg → BTU/lb
    QuantityKind.STEAM_FLOW: 2.204623,  # kg/h → lb/h
}

# Value of 1 kPa expressed in each gauge unit
_STEAM_PRESSURE_PER_KPA = {
    SteamPressureUnit.PAG: 1000.0,
    SteamPressureUnit.KPAG: 1.0,
    SteamPressureUnit.MPAG: 0.001,
    SteamPressureUnit.PSIG: 0.1450377,
    SteamPressureUnit.BARG: 0.01,
    SteamPressureUnit.KGFCM2G: 0.01019716,
}

_PRECISION_SI = {
    QuantityKind.TEMPERATURE: 1,
    QuantityKind.LENGTH: 0,
    QuantityKind.AIRFLOW: 0,
    QuantityKind.PRESSURE: 0,
    QuantityKind.HEAT_LOAD: 2,
    QuantityKind.WATER_FLOW: 2,
    QuantityKind.ABS_HUMIDITY: 2,
    QuantityKind.ENTHALPY: 2,
    QuantityKind.MOTOR_POWER: 1,
    QuantityKind.VELOCITY: 2,
    QuantityKind.SHF: 2,
    QuantityKind.EFFICIENCY: 0,
    QuantityKind.K_VALUE: 2,
    QuantityKind.AIRFLOW_PER_SHEET: 0,
    QuantityKind.AREA: 2,
    QuantityKind.DENSITY: 4,
    QuantityKind.STEAM_PRESSURE: 1,
    QuantityKind.STEAM_ENTHALPY: 1,
    QuantityKind.STEAM_FLOW: 1,
}

_PRECISION_IP = {
    QuantityKind.TEMPERATURE: 1,
    QuantityKind.LENGTH: 3,
    QuantityKind.AIRFLOW: 0,
    QuantityKind.PRESSURE: 2,
    QuantityKind.HEAT_LOAD: 0,
    QuantityKind.WATER_FLOW: 2,
    QuantityKind.ABS_HUMIDITY: 2,
    QuantityKind.ENTHALPY: 2,
    QuantityKind.MOTOR_POWER: 1,
    QuantityKind.VELOCITY: 2,
    QuantityKind.AIRFLOW_PER_SHEET: 0,
    QuantityKind.AREA: 2,
    QuantityKind.DENSITY: 4,
    QuantityKind.STEAM_PRESSURE: 1,
    QuantityKind.STEAM_ENTHALPY: 1,
    QuantityKind.STEAM_FLOW: 1,
}

_DEFAULT_PRECISION = 2


def _is_missing(value: Optional[float]) -> bool:
    return value is None or math.isnan(value)


def convert(
    value: Optional[float],
    kind: QuantityKind,
    from_system: UnitSystem,
    to_system: UnitSystem,
) -> Optional[float]:
    """Convert a value of the given quantity kind between unit systems."""
    if _is_missing(value) or from_system == to_system:
        return value

    if kind == QuantityKind.TEMPERATURE:
        if to_system == UnitSystem.IP:
            return value * 9.0 / 5.0 + 32.0
        return (value - 32.0) * 5.0 / 9.0

    factor = _SI_TO_IP.get(kind)
    if factor is None:
        # Dimensionless
        return value

    if to_system == UnitSystem.IP:
        return value * factor
    return value / factor


def convert_steam_pressure(
    value: Optional[float],
    from_unit: SteamPressureUnit,
    to_unit: SteamPressureUnit,
) -> Optional[float]:
    """Convert a gauge steam pressure between unit variants via kPaG."""
    if _is_missing(value) or from_unit == to_unit:
        return value
    kpa = value / _STEAM_PRESSURE_PER_KPA[from_unit]
    return kpa * _STEAM_PRESSURE_PER_KPA[to_unit]


def display_precision(kind: QuantityKind, unit_system: UnitSystem) -> int:
    """Decimal places used when presenting a quantity in the given system."""
    table = _PRECISION_IP if unit_system == UnitSystem.IP else _PRECISION_SI
    return table.get(kind, _DEFAULT_PRECISION)
