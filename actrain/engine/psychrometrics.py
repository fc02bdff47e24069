"""
Psychrometric property engine.

Pure functions describing humid air, all in SI: temperatures in °C,
absolute humidity in g/kg(DA), enthalpy in kJ/kg(DA), pressures in Pa.
Every relation derives from the Magnus saturation-pressure approximation,
valid over the practical range -20 °C to +60 °C.

The atmospheric pressure defaults to the standard 101325 Pa and can be
replaced by an altitude-adjusted value from atmospheric_pressure().
"""

import math
from typing import Optional

import numpy as np
import psychrolib

from actrain.config import (
    DEFAULT_PRESSURE_SI,
    DRY_AIR_DEW_POINT,
    GAS_CONSTANT_DRY_AIR,
    LATENT_HEAT_VAPORIZATION_0C,
    MAGNUS_A,
    MAGNUS_B,
    MAGNUS_C,
    MOLECULAR_WEIGHT_RATIO,
    SPECIFIC_HEAT_DRY_AIR,
    SPECIFIC_HEAT_WATER_VAPOR,
)
from actrain.models.air import SteamProperties

# Saturated steam: absolute pressure (kPa), temperature (°C), vapour enthalpy (kJ/kg)
_STEAM_TABLE = np.array([
    [101.325, 100.0, 2676.1],
    [150.0, 111.4, 2693.6],
    [200.0, 120.2, 2706.7],
    [300.0, 133.5, 2725.3],
    [400.0, 143.6, 2738.6],
    [500.0, 151.8, 2748.7],
    [600.0, 158.8, 2756.8],
    [800.0, 170.4, 2769.1],
    [1000.0, 179.9, 2778.1],
])


def _set_unit_system() -> None:
    """Configure psychrolib for SI; it keeps the unit system globally."""
    psychrolib.SetUnitSystem(psychrolib.SI)


def saturation_pressure(T: float) -> float:
    """Saturation vapour pressure over water (Pa) at temperature T (°C)."""
    return MAGNUS_A * math.exp((MAGNUS_B * T) / (T + MAGNUS_C))


def vapor_pressure_from_abs_humidity(W: float, pressure: float = DEFAULT_PRESSURE_SI) -> float:
    """Partial vapour pressure (Pa) implied by absolute humidity W (g/kg)."""
    W_kg = W / 1000.0
    return (pressure * W_kg) / (MOLECULAR_WEIGHT_RATIO + W_kg)


def absolute_humidity(T: float, RH: float, pressure: float = DEFAULT_PRESSURE_SI) -> float:
    """
    Absolute humidity (g/kg(DA)) from temperature and relative humidity.

    Returns 0 when the implied vapour pressure reaches atmospheric pressure.
    """
    RH = min(100.0, max(0.0, RH))
    Pv = (RH / 100.0) * saturation_pressure(T)
    if Pv >= pressure:
        return 0.0
    return (MOLECULAR_WEIGHT_RATIO * Pv) / (pressure - Pv) * 1000.0


def relative_humidity(
    T: float,
    W: float,
    pressure: float = DEFAULT_PRESSURE_SI,
    clamp: bool = True,
) -> float:
    """
    Relative humidity (%) from temperature and absolute humidity.

    The result is clamped to [0, 100] unless clamp is False; solvers use the
    unclamped value so their objective stays monotonic past saturation.
    """
    Ps = saturation_pressure(T)
    if Ps == 0:
        return 0.0
    RH = vapor_pressure_from_abs_humidity(W, pressure) / Ps * 100.0
    if not clamp:
        return RH
    return min(100.0, max(0.0, RH))


def enthalpy(T: float, W: float) -> float:
    """Moist air enthalpy (kJ/kg(DA)): dry-air sensible + vapour latent and sensible."""
    return (
        SPECIFIC_HEAT_DRY_AIR * T
        + (W / 1000.0) * (LATENT_HEAT_VAPORIZATION_0C + SPECIFIC_HEAT_WATER_VAPOR * T)
    )


def absolute_humidity_from_enthalpy(T: float, h: float) -> float:
    """Absolute humidity (g/kg(DA)) at temperature T that yields enthalpy h."""
    denominator = LATENT_HEAT_VAPORIZATION_0C + SPECIFIC_HEAT_WATER_VAPOR * T
    if denominator == 0:
        return 0.0
    return (h - SPECIFIC_HEAT_DRY_AIR * T) / denominator * 1000.0


def dry_air_density(T: float, RH: float, pressure: float = DEFAULT_PRESSURE_SI) -> float:
    """Dry-air density (kg(DA)/m³) from the dry-air partial pressure."""
    RH = min(100.0, max(0.0, RH))
    Pv = (RH / 100.0) * saturation_pressure(T)
    return (pressure - Pv) / (GAS_CONSTANT_DRY_AIR * (T + 273.15))


def dew_point(W: float, pressure: float = DEFAULT_PRESSURE_SI) -> float:
    """Dew point temperature (°C) via the inverse Magnus formula."""
    if W <= 0:
        return DRY_AIR_DEW_POINT
    C = math.log(vapor_pressure_from_abs_humidity(W, pressure) / MAGNUS_A)
    return (MAGNUS_C * C) / (MAGNUS_B - C)


def temperature_from_rh_and_abs_humidity(
    RH: Optional[float],
    W: Optional[float],
    pressure: float = DEFAULT_PRESSURE_SI,
) -> Optional[float]:
    """Temperature (°C) at which absolute humidity W has relative humidity RH."""
    if RH is None or W is None or RH <= 0 or W <= 0:
        return None
    Ps = vapor_pressure_from_abs_humidity(W, pressure) / (RH / 100.0)
    C = math.log(Ps / MAGNUS_A)
    if MAGNUS_B - C == 0:
        return None
    return (MAGNUS_C * C) / (MAGNUS_B - C)


def steam_properties(
    gauge_pressure_kpa: float,
    pressure: float = DEFAULT_PRESSURE_SI,
) -> SteamProperties:
    """
    Look up saturated steam properties for a gauge pressure (kPaG).

    Linear interpolation over the steam table at absolute pressure
    (gauge + atmospheric), clamped to the table endpoints.
    """
    abs_pressure_kpa = gauge_pressure_kpa + pressure / 1000.0
    table_p = _STEAM_TABLE[:, 0]
    temp = float(np.interp(abs_pressure_kpa, table_p, _STEAM_TABLE[:, 1]))
    h = float(np.interp(abs_pressure_kpa, table_p, _STEAM_TABLE[:, 2]))
    return SteamProperties(
        temperature=temp,
        enthalpy=h,
        absolute_pressure=abs_pressure_kpa,
    )


def atmospheric_pressure(altitude: float) -> float:
    """Standard-atmosphere pressure (Pa) at an altitude in metres."""
    _set_unit_system()
    return psychrolib.GetStandardAtmPressure(max(0.0, altitude))


def wet_bulb_temperature(
    T: float,
    W: float,
    pressure: float = DEFAULT_PRESSURE_SI,
) -> Optional[float]:
    """Psychrometric wet-bulb temperature (°C); None if psychrolib rejects the state."""
    _set_unit_system()
    try:
        return psychrolib.GetTWetBulbFromHumRatio(T, max(0.0, W) / 1000.0, pressure)
    except ValueError:
        return None
