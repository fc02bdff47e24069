"""
Pydantic models for humid air states.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from actrain.config import DEFAULT_PRESSURE_SI


class AirState(BaseModel):
    """
    Humid air at one point of the train.

    Only temperature plus one humidity field are inputs; the remaining fields
    are recomputed by the property engine. Instances are frozen and replaced
    wholesale, never patched field by field.
    """

    model_config = ConfigDict(frozen=True)

    temperature: Optional[float] = Field(None, description="Dry-bulb temperature (°C)")
    relative_humidity: Optional[float] = Field(None, description="Relative humidity (0-100%)")
    absolute_humidity: Optional[float] = Field(None, description="Absolute humidity (g/kg(DA))")
    enthalpy: Optional[float] = Field(None, description="Specific enthalpy (kJ/kg(DA))")
    density: Optional[float] = Field(None, description="Dry-air density (kg(DA)/m³)")

    @property
    def is_known(self) -> bool:
        """True once every derived property could be computed."""
        return (
            self.temperature is not None
            and self.absolute_humidity is not None
            and self.enthalpy is not None
            and self.density is not None
        )


class AirStateInput(BaseModel):
    """Input for deriving a full air state from a raw user edit."""

    temperature: Optional[float] = Field(None, examples=[25.0])
    relative_humidity: Optional[float] = Field(None, examples=[60.0])
    absolute_humidity_override: Optional[float] = Field(
        None,
        description="Absolute humidity (g/kg(DA)); takes precedence over relative_humidity",
    )
    pressure: float = Field(
        default=DEFAULT_PRESSURE_SI,
        description="Atmospheric pressure (Pa)",
    )


class AirStateOutput(BaseModel):
    """A derived air state with a few extra display properties."""

    state: AirState
    dew_point: Optional[float] = None
    wet_bulb: Optional[float] = None
    pressure: float


class SteamProperties(BaseModel):
    """Saturated steam properties looked up from a gauge pressure."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(..., description="Saturation temperature (°C)")
    enthalpy: float = Field(..., description="Vapour enthalpy (kJ/kg)")
    absolute_pressure: float = Field(..., description="Absolute pressure (kPa)")
