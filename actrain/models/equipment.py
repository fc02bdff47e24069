"""
Pydantic models for equipment units: per-type conditions and results.

Conditions and results are tagged unions keyed on the equipment type, so
each variant owns its own fields.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from actrain.config import (
    DEFAULT_PRESSURE_LOSS,
    DEFAULT_PRESSURE_SI,
    EquipmentType,
    SteamPressureUnit,
)
from actrain.models.air import AirState


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------

class FilterConditions(_Frozen):
    type: Literal[EquipmentType.FILTER] = EquipmentType.FILTER
    width: float = 500.0  # mm
    height: float = 500.0  # mm
    thickness: float = 50.0  # mm
    sheets: int = 1


class BurnerConditions(_Frozen):
    type: Literal[EquipmentType.BURNER] = EquipmentType.BURNER
    shf: float = 0.9


class CoolingCoilConditions(_Frozen):
    type: Literal[EquipmentType.COOLING_COIL] = EquipmentType.COOLING_COIL
    chilled_water_inlet_temp: float = 7.0  # °C
    chilled_water_outlet_temp: float = 14.0  # °C
    bypass_factor: float = 0.05
    heat_exchange_efficiency: float = 85.0  # %


class HeatingCoilConditions(_Frozen):
    type: Literal[EquipmentType.HEATING_COIL] = EquipmentType.HEATING_COIL
    hot_water_inlet_temp: float = 80.0  # °C
    hot_water_outlet_temp: float = 50.0  # °C
    heat_exchange_efficiency: float = 85.0  # %


class EliminatorConditions(_Frozen):
    type: Literal[EquipmentType.ELIMINATOR] = EquipmentType.ELIMINATOR
    eliminator_type: Literal["3-fold", "6-fold"] = "3-fold"


class SprayWasherConditions(_Frozen):
    type: Literal[EquipmentType.SPRAY_WASHER] = EquipmentType.SPRAY_WASHER
    water_to_air_ratio: float = 0.8  # L/G


class SteamHumidifierConditions(_Frozen):
    type: Literal[EquipmentType.STEAM_HUMIDIFIER] = EquipmentType.STEAM_HUMIDIFIER
    steam_gauge_pressure: float = 100.0  # always stored in kPaG
    steam_gauge_pressure_unit: SteamPressureUnit = SteamPressureUnit.KPAG


class FanConditions(_Frozen):
    type: Literal[EquipmentType.FAN] = EquipmentType.FAN
    motor_output: float = 0.2  # kW
    motor_efficiency: float = 80.0  # %
    total_pressure: Optional[float] = None  # Pa
    fan_efficiency: Optional[float] = None  # %
    margin_factor: float = 1.0


class DamperConditions(_Frozen):
    type: Literal[EquipmentType.DAMPER] = EquipmentType.DAMPER
    width: float = 500.0  # mm
    height: float = 500.0  # mm
    loss_coefficient_k: float = 1.0


class CustomConditions(_Frozen):
    type: Literal[EquipmentType.CUSTOM] = EquipmentType.CUSTOM


EquipmentConditions = Annotated[
    Union[
        FilterConditions,
        BurnerConditions,
        CoolingCoilConditions,
        HeatingCoilConditions,
        EliminatorConditions,
        SprayWasherConditions,
        SteamHumidifierConditions,
        FanConditions,
        DamperConditions,
        CustomConditions,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class FilterResults(_Frozen):
    type: Literal[EquipmentType.FILTER] = EquipmentType.FILTER
    face_velocity: float  # m/s
    treated_airflow_per_sheet: float  # m³/min per sheet


class BurnerResults(_Frozen):
    type: Literal[EquipmentType.BURNER] = EquipmentType.BURNER
    heat_load_kw: float
    sensible_heat_kw: float
    humidity_gain: float  # g/kg(DA)


class CoolingCoilResults(_Frozen):
    type: Literal[EquipmentType.COOLING_COIL] = EquipmentType.COOLING_COIL
    air_side_heat_load_kw: float
    water_side_heat_load_kw: float
    chilled_water_flow_l_min: float
    dehumidification_l_min: float
    bypass_factor: float
    contact_factor: float
    apparatus_dew_point: Optional[float] = None  # °C, None when sensible only
    sensible_heat_ratio: float


class HeatingCoilResults(_Frozen):
    type: Literal[EquipmentType.HEATING_COIL] = EquipmentType.HEATING_COIL
    air_side_heat_load_kw: float
    water_side_heat_load_kw: float
    hot_water_flow_l_min: float


class SprayWasherResults(_Frozen):
    type: Literal[EquipmentType.SPRAY_WASHER] = EquipmentType.SPRAY_WASHER
    humidification_l_min: float
    spray_amount_l_min: float
    humidification_efficiency: float  # %
    saturation_abs_humidity: float  # g/kg(DA) at the adiabatic limit
    inlet_wet_bulb: Optional[float] = None  # °C
    converged: bool = True


class SteamHumidifierResults(_Frozen):
    type: Literal[EquipmentType.STEAM_HUMIDIFIER] = EquipmentType.STEAM_HUMIDIFIER
    gauge_pressure: float  # in gauge_pressure_unit
    gauge_pressure_unit: SteamPressureUnit = SteamPressureUnit.KPAG
    steam_absolute_pressure: float  # kPa
    steam_temperature: float  # °C
    steam_enthalpy: float  # kJ/kg
    required_steam_kg_h: float = 0.0
    converged: bool = True


class FanResults(_Frozen):
    type: Literal[EquipmentType.FAN] = EquipmentType.FAN
    heat_generation_kw: float
    temp_rise: float  # K
    required_motor_power_kw: Optional[float] = None


class DamperResults(_Frozen):
    type: Literal[EquipmentType.DAMPER] = EquipmentType.DAMPER
    air_velocity: float  # m/s
    pressure_loss: float  # Pa


class PassThroughResults(_Frozen):
    """Results for eliminators and custom units: the manual pressure loss."""

    type: Literal[EquipmentType.ELIMINATOR, EquipmentType.CUSTOM]
    pressure_loss: float  # Pa


EquipmentResults = Annotated[
    Union[
        FilterResults,
        BurnerResults,
        CoolingCoilResults,
        HeatingCoilResults,
        SprayWasherResults,
        SteamHumidifierResults,
        FanResults,
        DamperResults,
        PassThroughResults,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

class EquipmentUnit(_Frozen):
    """One stage of the process train."""

    id: int
    name: str
    pressure_loss: Optional[float] = DEFAULT_PRESSURE_LOSS  # Pa
    inlet_air: AirState = Field(default_factory=AirState)
    outlet_air: AirState = Field(default_factory=AirState)
    conditions: EquipmentConditions
    results: Optional[EquipmentResults] = None
    inlet_is_locked: bool = False
    color: str = ""

    @property
    def type(self) -> EquipmentType:
        return self.conditions.type


class ProcessOutcome(_Frozen):
    """What a transfer function produces for one unit."""

    outlet_air: AirState
    results: Optional[EquipmentResults] = None
    pressure_loss: Optional[float] = None
    warnings: list[str] = Field(default_factory=list)


class RecomputeInput(BaseModel):
    """Run one unit's transfer function outside a train."""

    unit: EquipmentUnit
    inlet_air: AirState
    airflow: float = Field(..., description="Airflow (m³/min)")
    pressure: float = Field(DEFAULT_PRESSURE_SI, description="Atmospheric pressure (Pa)")
