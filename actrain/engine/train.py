"""
Process train: chain propagation driven by discrete editing events.

Every event is a pure function (train, event) -> train. After the event
itself is applied, a settle pass recomputes the chain from the earliest
affected unit downstream:

  - an unlocked unit takes the previous unit's outlet as its inlet, verbatim;
  - a locked unit keeps its manual inlet;
  - each unit's outlet, results and pressure loss are replaced by what its
    transfer function produces for the current inputs.
"""

import logging
from typing import Optional

from actrain.config import (
    COMPUTED_OUTLET_TYPES,
    DEFAULT_INLET_REFERENCE,
    DEFAULT_OUTLET_REFERENCE,
    PASS_THROUGH_TYPES,
    RH_DRIVEN_TYPES,
    EquipmentType,
)
from actrain.engine.air_state import derive_air_state, rederive
from actrain.engine.equipment import create_unit, mass_flow_rate, recompute
from actrain.models.air import AirState
from actrain.models.equipment import EquipmentUnit
from actrain.models.train import (
    AddUnit,
    DeleteAll,
    DeleteUnit,
    EditConditions,
    EditInlet,
    EditOutlet,
    EditPressureLoss,
    EditReference,
    MoveUnit,
    ProcessTrain,
    ReflectDownstream,
    ReflectUpstream,
    RenameUnit,
    SetAirflow,
    SetAltitude,
)

logger = logging.getLogger(__name__)

# Types whose outlet temperature is set by the user
TEMPERATURE_DRIVEN_TYPES = frozenset({
    EquipmentType.BURNER,
    EquipmentType.COOLING_COIL,
    EquipmentType.HEATING_COIL,
})


def _index_of(train: ProcessTrain, unit_id: int) -> int:
    for index, unit in enumerate(train.units):
        if unit.id == unit_id:
            return index
    raise ValueError(f"Unknown unit id: {unit_id}")


def _replace_unit(train: ProcessTrain, index: int, **changes) -> ProcessTrain:
    units = list(train.units)
    units[index] = units[index].model_copy(update=changes)
    return train.model_copy(update={"units": tuple(units)})


def _edited(event, field: str, current: Optional[float]) -> Optional[float]:
    """The event's value for a field if it was sent, else the current value."""
    return getattr(event, field) if field in event.model_fields_set else current


# ---------------------------------------------------------------------------
# Settle pass
# ---------------------------------------------------------------------------

def settle(
    train: ProcessTrain,
    start: int = 0,
    keep_start_inlet: bool = False,
) -> tuple[ProcessTrain, dict[int, list[str]]]:
    """
    Recompute units from index `start` to the end of the chain.

    With keep_start_inlet the unit at `start` runs on its stored inlet even
    when unlocked. Returns the settled train and any warnings keyed by unit id.
    """
    pressure = train.pressure
    units = list(train.units)
    warnings: dict[int, list[str]] = {}

    for index in range(max(0, start), len(units)):
        unit = units[index]
        keep = keep_start_inlet and index == start
        if index > 0 and not unit.inlet_is_locked and not keep:
            inlet = units[index - 1].outlet_air
        elif not keep and unit.inlet_air.temperature is not None:
            inlet = rederive(unit.inlet_air, pressure)
        else:
            inlet = unit.inlet_air

        mass_flow = mass_flow_rate(train.airflow, inlet.density)
        outcome = recompute(unit, inlet, mass_flow, pressure)
        units[index] = unit.model_copy(update={
            "inlet_air": inlet,
            "outlet_air": outcome.outlet_air,
            "results": outcome.results,
            "pressure_loss": outcome.pressure_loss,
        })
        if outcome.warnings:
            warnings[unit.id] = list(outcome.warnings)

    logger.debug("Settled %d units from index %d", len(units) - max(0, start), start)
    return train.model_copy(update={"units": tuple(units)}), warnings


# ---------------------------------------------------------------------------
# Event handlers: each returns (train, first index to settle or None)
# ---------------------------------------------------------------------------

def _edit_inlet(train: ProcessTrain, event: EditInlet):
    index = _index_of(train, event.unit_id)
    current = train.units[index].inlet_air
    inlet = derive_air_state(
        _edited(event, "temperature", current.temperature),
        _edited(event, "relative_humidity", current.relative_humidity),
        pressure=train.pressure,
    )
    return _replace_unit(train, index, inlet_air=inlet, inlet_is_locked=True), index


def _edit_outlet(train: ProcessTrain, event: EditOutlet):
    index = _index_of(train, event.unit_id)
    unit = train.units[index]
    fields = event.model_fields_set

    if unit.type in TEMPERATURE_DRIVEN_TYPES and "temperature" in fields:
        outlet = AirState(temperature=event.temperature)
    elif unit.type in RH_DRIVEN_TYPES and "relative_humidity" in fields:
        outlet = AirState(relative_humidity=event.relative_humidity)
    else:
        raise ValueError(
            f"Outlet of unit {unit.id} ({unit.type.value}) has no editable field "
            f"among {sorted(fields - {'kind', 'unit_id'})}"
        )
    return _replace_unit(train, index, outlet_air=outlet), index


def _edit_conditions(train: ProcessTrain, event: EditConditions):
    index = _index_of(train, event.unit_id)
    unit = train.units[index]
    if event.conditions.type != unit.type:
        raise ValueError(
            f"Conditions of type '{event.conditions.type.value}' do not match "
            f"unit {unit.id} of type '{unit.type.value}'"
        )
    return _replace_unit(train, index, conditions=event.conditions), index


def _edit_pressure_loss(train: ProcessTrain, event: EditPressureLoss):
    index = _index_of(train, event.unit_id)
    return _replace_unit(train, index, pressure_loss=event.pressure_loss), index


def _rename(train: ProcessTrain, event: RenameUnit):
    index = _index_of(train, event.unit_id)
    return _replace_unit(train, index, name=event.name), None


def _reflect_upstream(train: ProcessTrain, event: ReflectUpstream):
    index = _index_of(train, event.unit_id)
    unit = train.units[index]

    # Nearest upstream unit that changes the air; pass-through units are skipped
    source: Optional[AirState] = None
    for upstream in reversed(train.units[:index]):
        if upstream.type not in PASS_THROUGH_TYPES:
            if upstream.outlet_air.temperature is not None:
                source = upstream.outlet_air
            break
    if source is None:
        source = train.inlet_reference

    changes = {"inlet_air": source, "inlet_is_locked": False}
    if unit.type in COMPUTED_OUTLET_TYPES:
        changes["outlet_air"] = source
    elif unit.type in RH_DRIVEN_TYPES:
        changes["outlet_air"] = AirState(relative_humidity=unit.outlet_air.relative_humidity)

    return _replace_unit(train, index, **changes), index


def _reflect_downstream(train: ProcessTrain, event: ReflectDownstream):
    index = _index_of(train, event.unit_id)
    unit = train.units[index]

    if index == len(train.units) - 1:
        source = train.outlet_reference
    else:
        source = train.units[index + 1].inlet_air

    outlet = unit.outlet_air
    if unit.type in RH_DRIVEN_TYPES:
        if source.relative_humidity is not None:
            outlet = AirState(
                temperature=outlet.temperature,
                relative_humidity=source.relative_humidity,
            )
    elif source.temperature is not None:
        outlet = AirState(
            temperature=source.temperature,
            relative_humidity=outlet.relative_humidity,
        )
    return _replace_unit(train, index, outlet_air=outlet), index


def _add_unit(train: ProcessTrain, event: AddUnit):
    inlet = train.units[-1].outlet_air if train.units else train.inlet_reference
    unit = create_unit(
        event.equipment_type,
        train.next_id,
        inlet,
        pressure=train.pressure,
        name=event.name,
    )
    train = train.model_copy(update={
        "units": train.units + (unit,),
        "next_id": train.next_id + 1,
    })
    return train, len(train.units) - 1


def _delete_unit(train: ProcessTrain, event: DeleteUnit):
    index = _index_of(train, event.unit_id)
    units = train.units[:index] + train.units[index + 1:]
    return train.model_copy(update={"units": units}), index


def _delete_all(train: ProcessTrain, event: DeleteAll):
    return train.model_copy(update={"units": ()}), None


def _move_unit(train: ProcessTrain, event: MoveUnit):
    index = _index_of(train, event.unit_id)
    target = index - 1 if event.direction == "up" else index + 1
    if target < 0 or target >= len(train.units):
        return train, None

    units = list(train.units)
    units[index], units[target] = units[target], units[index]
    return train.model_copy(update={"units": tuple(units)}), min(index, target)


def _set_airflow(train: ProcessTrain, event: SetAirflow):
    return train.model_copy(update={"airflow": event.airflow}), 0


def _set_altitude(train: ProcessTrain, event: SetAltitude):
    train = train.model_copy(update={"altitude": event.altitude})
    pressure = train.pressure
    train = train.model_copy(update={
        "inlet_reference": rederive(train.inlet_reference, pressure),
        "outlet_reference": rederive(train.outlet_reference, pressure),
    })
    return train, 0


def _edit_reference(train: ProcessTrain, event: EditReference):
    field = f"{event.which}_reference"
    current = getattr(train, field)
    state = derive_air_state(
        _edited(event, "temperature", current.temperature),
        _edited(event, "relative_humidity", current.relative_humidity),
        pressure=train.pressure,
    )
    return train.model_copy(update={field: state}), None


_HANDLERS = {
    EditInlet: _edit_inlet,
    EditOutlet: _edit_outlet,
    EditConditions: _edit_conditions,
    EditPressureLoss: _edit_pressure_loss,
    RenameUnit: _rename,
    ReflectUpstream: _reflect_upstream,
    ReflectDownstream: _reflect_downstream,
    AddUnit: _add_unit,
    DeleteUnit: _delete_unit,
    DeleteAll: _delete_all,
    MoveUnit: _move_unit,
    SetAirflow: _set_airflow,
    SetAltitude: _set_altitude,
    EditReference: _edit_reference,
}


def apply_event(train: ProcessTrain, event) -> tuple[ProcessTrain, dict[int, list[str]]]:
    """
    Apply one editing event and settle the chain.

    Raises ValueError for an unknown unit id or an edit the unit type does
    not allow. Moving a unit past either end of the chain is a no-op.
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise ValueError(f"Unsupported event: {type(event).__name__}")

    logger.debug("Applying %s", event)
    train, start = handler(train, event)
    if start is None:
        return train, {}
    # A reflected inlet stands until something upstream changes
    return settle(train, start, keep_start_inlet=isinstance(event, ReflectUpstream))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def charted_units(train: ProcessTrain) -> list[EquipmentUnit]:
    """Units a psychrometric chart would draw: air-changing, both ends known."""
    return [
        unit for unit in train.units
        if unit.type not in PASS_THROUGH_TYPES
        and unit.inlet_air.temperature is not None
        and unit.outlet_air.temperature is not None
    ]


# (type, locked inlet (°C, %RH) or None, starting outlet or None)
_DEFAULT_LAYOUT = [
    (EquipmentType.FILTER, None, None),
    (EquipmentType.BURNER, None, None),
    (EquipmentType.COOLING_COIL, (25.0, 80.0), (15.0, 100.0)),
    (EquipmentType.HEATING_COIL, (15.0, 60.0), 30.0),
    (EquipmentType.ELIMINATOR, None, None),
    (EquipmentType.SPRAY_WASHER, (55.2, 4.58), None),
    (EquipmentType.STEAM_HUMIDIFIER, (30.0, 30.0), None),
    (EquipmentType.FAN, (25.0, 60.0), None),
    (EquipmentType.DAMPER, None, None),
]


def default_train() -> ProcessTrain:
    """The demonstration train: one of each standard unit, settled."""
    train = ProcessTrain(
        inlet_reference=derive_air_state(*DEFAULT_INLET_REFERENCE),
        outlet_reference=derive_air_state(*DEFAULT_OUTLET_REFERENCE),
    )
    pressure = train.pressure

    units = []
    last_outlet = train.inlet_reference
    for unit_id, (equipment_type, locked_inlet, outlet_setup) in enumerate(_DEFAULT_LAYOUT):
        inlet = derive_air_state(*locked_inlet, pressure=pressure) if locked_inlet else last_outlet

        outlet = None
        if isinstance(outlet_setup, tuple):
            outlet = derive_air_state(*outlet_setup, pressure=pressure)
        elif outlet_setup is not None:
            outlet = derive_air_state(
                outlet_setup,
                absolute_humidity_override=inlet.absolute_humidity,
                pressure=pressure,
            )

        unit = create_unit(
            equipment_type,
            unit_id,
            inlet,
            pressure=pressure,
            outlet=outlet,
            inlet_is_locked=locked_inlet is not None,
        )
        units.append(unit)
        last_outlet = unit.outlet_air

    train = train.model_copy(update={"units": tuple(units), "next_id": len(units)})
    train, _ = settle(train)
    return train
