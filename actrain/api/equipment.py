"""
API routes for single-unit recomputation.
"""

from fastapi import APIRouter, HTTPException

from actrain.engine.equipment import mass_flow_rate, recompute
from actrain.engine.air_state import rederive
from actrain.models.equipment import ProcessOutcome, RecomputeInput

router = APIRouter(prefix="/api/v1", tags=["equipment"])


@router.post("/equipment/recompute", response_model=ProcessOutcome)
async def recompute_unit(data: RecomputeInput) -> ProcessOutcome:
    """
    Run a unit's transfer function for an inlet state and airflow.

    Mass flow is derived from the airflow and the inlet density.
    """
    try:
        inlet = rederive(data.inlet_air, data.pressure)
        mass_flow = mass_flow_rate(data.airflow, inlet.density)
        return recompute(data.unit, inlet, mass_flow, data.pressure)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
