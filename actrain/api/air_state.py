"""
API routes for air state derivation.
"""

from fastapi import APIRouter, HTTPException

from actrain.engine import psychrometrics as psy
from actrain.engine.air_state import derive_air_state, derive_from_humidities, describe_air_state
from actrain.models.air import AirStateInput, AirStateOutput

router = APIRouter(prefix="/api/v1", tags=["air-state"])


@router.post("/air-state", response_model=AirStateOutput)
async def create_air_state(data: AirStateInput) -> AirStateOutput:
    """
    Derive a full air state from a temperature and one humidity input.

    The absolute humidity override wins over relative humidity. Without a
    temperature, RH plus absolute humidity fix the temperature; otherwise a
    missing temperature leaves the state unknown rather than raising an error.
    """
    try:
        if (
            data.temperature is None
            and data.relative_humidity is not None
            and data.absolute_humidity_override is not None
        ):
            state = derive_from_humidities(
                data.relative_humidity,
                data.absolute_humidity_override,
                pressure=data.pressure,
            )
        else:
            state = derive_air_state(
                data.temperature,
                data.relative_humidity,
                data.absolute_humidity_override,
                pressure=data.pressure,
            )
        return describe_air_state(state, data.pressure)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.get("/pressure-from-altitude")
async def pressure_from_altitude(altitude: float) -> dict:
    """
    Convert altitude (m) to standard-atmosphere pressure (Pa).
    """
    try:
        pressure = psy.atmospheric_pressure(altitude)
        return {"altitude": altitude, "pressure": round(pressure, 3)}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
