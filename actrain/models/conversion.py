"""
Pydantic models for unit conversion input/output.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from actrain.config import UnitSystem, SteamPressureUnit


class QuantityKind(str, Enum):
    TEMPERATURE = "temperature"
    LENGTH = "length"
    AIRFLOW = "airflow"
    AIRFLOW_PER_SHEET = "airflow_per_sheet"
    PRESSURE = "pressure"
    HEAT_LOAD = "heat_load"
    WATER_FLOW = "water_flow"
    ABS_HUMIDITY = "abs_humidity"
    ENTHALPY = "enthalpy"
    MOTOR_POWER = "motor_power"
    VELOCITY = "velocity"
    AREA = "area"
    DENSITY = "density"
    STEAM_PRESSURE = "steam_pressure"
    STEAM_ENTHALPY = "steam_enthalpy"
    STEAM_FLOW = "steam_flow"
    # Dimensionless kinds: identical in both systems
    RH = "rh"
    SHEETS = "sheets"
    SHF = "shf"
    EFFICIENCY = "efficiency"
    K_VALUE = "k_value"
    WATER_TO_AIR_RATIO = "water_to_air_ratio"


class ConversionInput(BaseModel):
    """Convert a value of one quantity kind between unit systems."""

    value: Optional[float] = None
    kind: QuantityKind
    from_system: UnitSystem = UnitSystem.SI
    to_system: UnitSystem = UnitSystem.IP


class ConversionOutput(BaseModel):
    value: Optional[float]
    kind: QuantityKind
    unit_system: UnitSystem
    precision: int = Field(..., description="Display decimal places in the target system")


class SteamPressureConversionInput(BaseModel):
    """Convert a gauge steam pressure between gauge unit variants."""

    value: Optional[float] = None
    from_unit: SteamPressureUnit = SteamPressureUnit.KPAG
    to_unit: SteamPressureUnit = SteamPressureUnit.PSIG


class SteamPressureConversionOutput(BaseModel):
    value: Optional[float]
    unit: SteamPressureUnit
