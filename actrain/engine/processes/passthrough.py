"""
Pass-through equipment: filters, dampers, eliminators and custom units.

None of these alter the air state; the outlet mirrors the inlet. They only
report airflow figures, and the damper derives its own pressure loss.
"""

from typing import Optional

from actrain.engine.processes.base import EquipmentProcess
from actrain.engine.processes.utils import volumetric_airflow
from actrain.models.air import AirState
from actrain.models.equipment import (
    DamperConditions,
    DamperResults,
    FilterConditions,
    FilterResults,
    PassThroughResults,
    ProcessOutcome,
)


class FilterProcess(EquipmentProcess):
    """Face velocity over the total filter area; pressure loss is manual."""

    def process(
        self,
        inlet: AirState,
        conditions: FilterConditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        airflow = volumetric_airflow(mass_flow, inlet.density)
        sheets = conditions.sheets
        total_area = (conditions.width / 1000.0) * (conditions.height / 1000.0) * sheets

        face_velocity = (airflow / 60.0) / total_area if total_area > 0 else 0.0
        per_sheet = airflow / sheets if sheets > 0 else 0.0

        return ProcessOutcome(
            outlet_air=inlet,
            results=FilterResults(
                face_velocity=face_velocity,
                treated_airflow_per_sheet=per_sheet,
            ),
            pressure_loss=pressure_loss,
        )


class DamperProcess(EquipmentProcess):
    """Pressure loss from the loss coefficient: ΔP = K × ½ρv²."""

    def process(
        self,
        inlet: AirState,
        conditions: DamperConditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        airflow = volumetric_airflow(mass_flow, inlet.density)
        area = (conditions.width / 1000.0) * (conditions.height / 1000.0)
        velocity = (airflow / 60.0) / area if area > 0 else 0.0
        loss = conditions.loss_coefficient_k * 0.5 * inlet.density * velocity ** 2

        return ProcessOutcome(
            outlet_air=inlet,
            results=DamperResults(air_velocity=velocity, pressure_loss=loss),
            pressure_loss=loss,
        )


class PassThroughProcess(EquipmentProcess):
    """Eliminators and custom units: outlet = inlet, manual pressure loss."""

    def process(
        self,
        inlet: AirState,
        conditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        return ProcessOutcome(
            outlet_air=inlet,
            results=PassThroughResults(
                type=conditions.type,
                pressure_loss=pressure_loss or 0.0,
            ),
            pressure_loss=pressure_loss,
        )
