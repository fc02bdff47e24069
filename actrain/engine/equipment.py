"""
Equipment recomputation and default unit construction.

recompute() is the single entry point the chain uses: it completes a partial
inlet, guards the zero-flow and unknown-inlet cases and dispatches to the
transfer function for the unit's type.
"""

import logging
from typing import Optional

from actrain.config import (
    DEFAULT_PRESSURE_LOSS,
    DEFAULT_PRESSURE_SI,
    EQUIPMENT_COLORS,
    EQUIPMENT_NAMES,
    EquipmentType,
)
from actrain.engine.air_state import derive_air_state, rederive
from actrain.engine.processes.cooling_coil import CoolingCoilProcess
from actrain.engine.processes.heating import BurnerProcess, FanProcess, HeatingCoilProcess
from actrain.engine.processes.humidification import SprayWasherProcess, SteamHumidifierProcess
from actrain.engine.processes.passthrough import DamperProcess, FilterProcess, PassThroughProcess
from actrain.models.air import AirState
from actrain.models.equipment import (
    BurnerConditions,
    CoolingCoilConditions,
    CustomConditions,
    DamperConditions,
    EliminatorConditions,
    EquipmentUnit,
    FanConditions,
    FilterConditions,
    HeatingCoilConditions,
    ProcessOutcome,
    SprayWasherConditions,
    SteamHumidifierConditions,
)

logger = logging.getLogger(__name__)

# Process dispatch table: equipment type to transfer function
_PROCESSES = {
    EquipmentType.FILTER: FilterProcess(),
    EquipmentType.BURNER: BurnerProcess(),
    EquipmentType.COOLING_COIL: CoolingCoilProcess(),
    EquipmentType.HEATING_COIL: HeatingCoilProcess(),
    EquipmentType.ELIMINATOR: PassThroughProcess(),
    EquipmentType.SPRAY_WASHER: SprayWasherProcess(),
    EquipmentType.STEAM_HUMIDIFIER: SteamHumidifierProcess(),
    EquipmentType.FAN: FanProcess(),
    EquipmentType.DAMPER: DamperProcess(),
    EquipmentType.CUSTOM: PassThroughProcess(),
}

_CONDITIONS = {
    EquipmentType.FILTER: FilterConditions,
    EquipmentType.BURNER: BurnerConditions,
    EquipmentType.COOLING_COIL: CoolingCoilConditions,
    EquipmentType.HEATING_COIL: HeatingCoilConditions,
    EquipmentType.ELIMINATOR: EliminatorConditions,
    EquipmentType.SPRAY_WASHER: SprayWasherConditions,
    EquipmentType.STEAM_HUMIDIFIER: SteamHumidifierConditions,
    EquipmentType.FAN: FanConditions,
    EquipmentType.DAMPER: DamperConditions,
    EquipmentType.CUSTOM: CustomConditions,
}


def mass_flow_rate(airflow: Optional[float], density: Optional[float]) -> float:
    """Dry-air mass flow (kg/s) from airflow (m³/min) and inlet density."""
    if airflow is None or density is None:
        return 0.0
    return max(0.0, airflow / 60.0 * density)


def recompute(
    unit: EquipmentUnit,
    inlet_air: AirState,
    mass_flow: float,
    pressure: float = DEFAULT_PRESSURE_SI,
) -> ProcessOutcome:
    """
    Run the unit's transfer function for the given inlet and mass flow.

    Zero flow or an unknown inlet is not an error: the outlet mirrors the
    inlet and results are empty.
    """
    inlet = inlet_air if inlet_air.is_known else rederive(inlet_air, pressure)

    if mass_flow <= 0 or not inlet.is_known:
        logger.debug("Unit %d has no flow or an unknown inlet; outlet mirrors inlet", unit.id)
        pressure_loss = 0.0 if unit.type == EquipmentType.DAMPER else unit.pressure_loss
        return ProcessOutcome(outlet_air=inlet, pressure_loss=pressure_loss)

    return _PROCESSES[unit.type].process(
        inlet,
        unit.conditions,
        mass_flow,
        unit.outlet_air,
        unit.pressure_loss,
        pressure,
    )


def default_conditions(equipment_type: EquipmentType):
    """Type-specific default conditions."""
    return _CONDITIONS[EquipmentType(equipment_type)]()


def _default_outlet(
    equipment_type: EquipmentType,
    inlet: AirState,
    pressure: float,
) -> AirState:
    if equipment_type == EquipmentType.BURNER:
        return derive_air_state(
            55.2, absolute_humidity_override=inlet.absolute_humidity, pressure=pressure
        )
    if equipment_type == EquipmentType.COOLING_COIL:
        return derive_air_state(15.0, 95.0, pressure=pressure)
    if equipment_type == EquipmentType.HEATING_COIL:
        return derive_air_state(40.0, 30.0, pressure=pressure)
    if equipment_type == EquipmentType.SPRAY_WASHER:
        return derive_air_state(25.0, 70.0, pressure=pressure)
    if equipment_type == EquipmentType.STEAM_HUMIDIFIER:
        return AirState(relative_humidity=60.0)
    return inlet


def create_unit(
    equipment_type: EquipmentType,
    unit_id: int,
    inlet: AirState,
    pressure: float = DEFAULT_PRESSURE_SI,
    name: Optional[str] = None,
    outlet: Optional[AirState] = None,
    inlet_is_locked: bool = False,
) -> EquipmentUnit:
    """
    Build a unit with the type's default conditions and starting outlet.

    Results are left empty; the chain fills them on the next settle pass.
    """
    equipment_type = EquipmentType(equipment_type)
    return EquipmentUnit(
        id=unit_id,
        name=name or EQUIPMENT_NAMES[equipment_type],
        pressure_loss=0.0 if equipment_type == EquipmentType.DAMPER else DEFAULT_PRESSURE_LOSS,
        inlet_air=inlet,
        outlet_air=outlet if outlet is not None else _default_outlet(equipment_type, inlet, pressure),
        conditions=default_conditions(equipment_type),
        inlet_is_locked=inlet_is_locked,
        color=EQUIPMENT_COLORS[equipment_type],
    )
