"""
Air state construction.

An AirState is built from (temperature, relative humidity) or from
(temperature, absolute humidity override). The other fields always come from
the property engine. With an unknown temperature, the derived fields are
unknown too; that is a regular state, e.g. before a solver has run.
"""

import math
from typing import Optional

from actrain.config import DEFAULT_PRESSURE_SI
from actrain.engine import psychrometrics as psy
from actrain.models.air import AirState, AirStateOutput


def _is_number(value: Optional[float]) -> bool:
    return value is not None and not math.isnan(value)


def derive_air_state(
    temperature: Optional[float],
    relative_humidity: Optional[float] = None,
    absolute_humidity_override: Optional[float] = None,
    pressure: float = DEFAULT_PRESSURE_SI,
) -> AirState:
    """
    Build a full air state from a temperature and one humidity input.

    The absolute humidity override wins over relative humidity when both are
    given. Out-of-range humidities are clamped, not rejected.
    """
    if not _is_number(temperature):
        return AirState(
            temperature=None,
            relative_humidity=relative_humidity,
            absolute_humidity=absolute_humidity_override,
        )

    if _is_number(absolute_humidity_override):
        W = max(0.0, absolute_humidity_override)
        RH = psy.relative_humidity(temperature, W, pressure)
    elif _is_number(relative_humidity):
        RH = min(100.0, max(0.0, relative_humidity))
        W = psy.absolute_humidity(temperature, RH, pressure)
    else:
        return AirState(temperature=temperature, relative_humidity=relative_humidity)

    return AirState(
        temperature=temperature,
        relative_humidity=RH,
        absolute_humidity=W,
        enthalpy=psy.enthalpy(temperature, W),
        density=psy.dry_air_density(temperature, RH, pressure),
    )


def derive_from_humidities(
    relative_humidity: Optional[float],
    absolute_humidity: Optional[float],
    pressure: float = DEFAULT_PRESSURE_SI,
) -> AirState:
    """
    Build a state from RH and absolute humidity, as when a point is dragged
    along a constant-humidity line of the chart. The temperature is where
    that absolute humidity has that RH.
    """
    T = psy.temperature_from_rh_and_abs_humidity(relative_humidity, absolute_humidity, pressure)
    if T is None:
        return AirState(
            relative_humidity=relative_humidity,
            absolute_humidity=absolute_humidity,
        )
    return derive_air_state(T, absolute_humidity_override=absolute_humidity, pressure=pressure)


def rederive(state: AirState, pressure: float = DEFAULT_PRESSURE_SI) -> AirState:
    """Recompute a state from its temperature and relative humidity."""
    return derive_air_state(state.temperature, state.relative_humidity, pressure=pressure)


def describe_air_state(state: AirState, pressure: float = DEFAULT_PRESSURE_SI) -> AirStateOutput:
    """Attach dew point and wet-bulb temperature to a derived state."""
    dew_point = None
    wet_bulb = None
    if state.absolute_humidity is not None:
        dew_point = psy.dew_point(state.absolute_humidity, pressure)
        if state.temperature is not None:
            wet_bulb = psy.wet_bulb_temperature(
                state.temperature, state.absolute_humidity, pressure
            )
    return AirStateOutput(
        state=state,
        dew_point=dew_point,
        wet_bulb=wet_bulb,
        pressure=pressure,
    )
