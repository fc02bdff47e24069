"""
Pydantic models for the process train, its editing events and its summary.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from actrain.config import DEFAULT_AIRFLOW, DEFAULT_ALTITUDE_SI, EquipmentType
from actrain.engine import psychrometrics as psy
from actrain.models.air import AirState
from actrain.models.equipment import EquipmentConditions, EquipmentUnit


class ProcessTrain(BaseModel):
    """An ordered chain of equipment between two reference states."""

    model_config = ConfigDict(frozen=True)

    airflow: Optional[float] = Field(DEFAULT_AIRFLOW, description="Airflow (m³/min)")
    altitude: float = Field(DEFAULT_ALTITUDE_SI, description="Site altitude (m)")
    inlet_reference: AirState = Field(default_factory=AirState)
    outlet_reference: AirState = Field(default_factory=AirState)
    units: tuple[EquipmentUnit, ...] = ()
    next_id: int = 0

    @property
    def pressure(self) -> float:
        """Atmospheric pressure (Pa) at the site altitude."""
        return psy.atmospheric_pressure(self.altitude)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class EditInlet(_Event):
    """Manual inlet override; locks the unit. Only fields sent are changed."""

    kind: Literal["edit_inlet"] = "edit_inlet"
    unit_id: int
    temperature: Optional[float] = None
    relative_humidity: Optional[float] = None


class EditOutlet(_Event):
    """Edit a user-driven outlet field: temperature or target RH."""

    kind: Literal["edit_outlet"] = "edit_outlet"
    unit_id: int
    temperature: Optional[float] = None
    relative_humidity: Optional[float] = None


class EditConditions(_Event):
    kind: Literal["edit_conditions"] = "edit_conditions"
    unit_id: int
    conditions: EquipmentConditions


class EditPressureLoss(_Event):
    kind: Literal["edit_pressure_loss"] = "edit_pressure_loss"
    unit_id: int
    pressure_loss: Optional[float] = None


class RenameUnit(_Event):
    kind: Literal["rename"] = "rename"
    unit_id: int
    name: str


class ReflectUpstream(_Event):
    kind: Literal["reflect_upstream"] = "reflect_upstream"
    unit_id: int


class ReflectDownstream(_Event):
    kind: Literal["reflect_downstream"] = "reflect_downstream"
    unit_id: int


class AddUnit(_Event):
    kind: Literal["add_unit"] = "add_unit"
    equipment_type: EquipmentType
    name: Optional[str] = None


class DeleteUnit(_Event):
    kind: Literal["delete_unit"] = "delete_unit"
    unit_id: int


class DeleteAll(_Event):
    kind: Literal["delete_all"] = "delete_all"


class MoveUnit(_Event):
    kind: Literal["move_unit"] = "move_unit"
    unit_id: int
    direction: Literal["up", "down"]


class SetAirflow(_Event):
    kind: Literal["set_airflow"] = "set_airflow"
    airflow: Optional[float] = None


class SetAltitude(_Event):
    kind: Literal["set_altitude"] = "set_altitude"
    altitude: float


class EditReference(_Event):
    """Edit the global inlet or outlet reference state."""

    kind: Literal["edit_reference"] = "edit_reference"
    which: Literal["inlet", "outlet"]
    temperature: Optional[float] = None
    relative_humidity: Optional[float] = None


TrainEvent = Annotated[
    Union[
        EditInlet,
        EditOutlet,
        EditConditions,
        EditPressureLoss,
        RenameUnit,
        ReflectUpstream,
        ReflectDownstream,
        AddUnit,
        DeleteUnit,
        DeleteAll,
        MoveUnit,
        SetAirflow,
        SetAltitude,
        EditReference,
    ],
    Field(discriminator="kind"),
]


class TrainEventInput(BaseModel):
    """Request body: a train and one event to apply to it."""

    train: ProcessTrain
    event: TrainEvent


class TrainEventOutput(BaseModel):
    train: ProcessTrain
    warnings: dict[int, list[str]] = Field(
        default_factory=dict,
        description="Solver and plausibility warnings keyed by unit id",
    )


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

class UnitSummary(BaseModel):
    """Key figures for one unit; fields not applicable to the type stay None."""

    id: int
    name: str
    type: EquipmentType
    pressure_loss: float = 0.0
    heat_load_kw: Optional[float] = None
    water_side_heat_load_kw: Optional[float] = None
    water_flow_l_min: Optional[float] = None
    dehumidification_l_min: Optional[float] = None
    humidification_l_min: Optional[float] = None
    steam_kg_h: Optional[float] = None
    converged: Optional[bool] = None


class TrainSummary(BaseModel):
    units: list[UnitSummary] = Field(default_factory=list)
    total_pressure_loss: float = 0.0
    charted_unit_ids: list[int] = Field(default_factory=list)
