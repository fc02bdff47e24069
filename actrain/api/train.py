"""
API routes for process train editing and summaries.
"""

from fastapi import APIRouter, HTTPException

from actrain.engine.summary import summarize
from actrain.engine.train import apply_event, default_train
from actrain.models.train import (
    ProcessTrain,
    TrainEventInput,
    TrainEventOutput,
    TrainSummary,
)

router = APIRouter(prefix="/api/v1", tags=["train"])


@router.get("/train/default", response_model=ProcessTrain)
async def get_default_train() -> ProcessTrain:
    """A settled demonstration train with one of each standard unit."""
    try:
        return default_train()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.post("/train/events", response_model=TrainEventOutput)
async def post_train_event(data: TrainEventInput) -> TrainEventOutput:
    """
    Apply one editing event to a train and settle the chain.

    Returns the new train plus any solver or plausibility warnings.
    """
    try:
        train, warnings = apply_event(data.train, data.event)
        return TrainEventOutput(train=train, warnings=warnings)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.post("/train/summary", response_model=TrainSummary)
async def post_train_summary(train: ProcessTrain) -> TrainSummary:
    try:
        return summarize(train)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
