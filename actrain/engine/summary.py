"""
Train summary: key per-unit figures and the total pressure loss.
"""

from actrain.engine.train import charted_units
from actrain.models.equipment import (
    BurnerResults,
    CoolingCoilResults,
    EquipmentUnit,
    FanResults,
    HeatingCoilResults,
    SprayWasherResults,
    SteamHumidifierResults,
)
from actrain.models.train import ProcessTrain, TrainSummary, UnitSummary


def summarize_unit(unit: EquipmentUnit) -> UnitSummary:
    """Pick out the figures worth tabulating for one unit."""
    figures = {}
    results = unit.results

    if isinstance(results, BurnerResults):
        figures["heat_load_kw"] = results.heat_load_kw
    elif isinstance(results, CoolingCoilResults):
        figures["heat_load_kw"] = results.air_side_heat_load_kw
        figures["water_side_heat_load_kw"] = results.water_side_heat_load_kw
        figures["water_flow_l_min"] = results.chilled_water_flow_l_min
        figures["dehumidification_l_min"] = results.dehumidification_l_min
    elif isinstance(results, HeatingCoilResults):
        figures["heat_load_kw"] = results.air_side_heat_load_kw
        figures["water_side_heat_load_kw"] = results.water_side_heat_load_kw
        figures["water_flow_l_min"] = results.hot_water_flow_l_min
    elif isinstance(results, SprayWasherResults):
        figures["humidification_l_min"] = results.humidification_l_min
        figures["converged"] = results.converged
    elif isinstance(results, SteamHumidifierResults):
        figures["steam_kg_h"] = results.required_steam_kg_h
        figures["converged"] = results.converged
    elif isinstance(results, FanResults):
        figures["heat_load_kw"] = results.heat_generation_kw

    return UnitSummary(
        id=unit.id,
        name=unit.name,
        type=unit.type,
        pressure_loss=unit.pressure_loss or 0.0,
        **figures,
    )


def summarize(train: ProcessTrain) -> TrainSummary:
    units = [summarize_unit(unit) for unit in train.units]
    return TrainSummary(
        units=units,
        total_pressure_loss=sum(u.pressure_loss for u in units),
        charted_unit_ids=[unit.id for unit in charted_units(train)],
    )
