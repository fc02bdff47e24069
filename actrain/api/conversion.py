"""
API routes for unit conversion.
"""

from fastapi import APIRouter, HTTPException

from actrain.engine.units import convert, convert_steam_pressure, display_precision
from actrain.models.conversion import (
    ConversionInput,
    ConversionOutput,
    SteamPressureConversionInput,
    SteamPressureConversionOutput,
)

router = APIRouter(prefix="/api/v1", tags=["conversion"])


@router.post("/convert", response_model=ConversionOutput)
async def convert_value(data: ConversionInput) -> ConversionOutput:
    """Convert a value of one quantity kind between SI and IP."""
    try:
        return ConversionOutput(
            value=convert(data.value, data.kind, data.from_system, data.to_system),
            kind=data.kind,
            unit_system=data.to_system,
            precision=display_precision(data.kind, data.to_system),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.post("/convert/steam-pressure", response_model=SteamPressureConversionOutput)
async def convert_steam_pressure_value(
    data: SteamPressureConversionInput,
) -> SteamPressureConversionOutput:
    """Convert a gauge steam pressure between its six unit variants."""
    try:
        return SteamPressureConversionOutput(
            value=convert_steam_pressure(data.value, data.from_unit, data.to_unit),
            unit=data.to_unit,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
