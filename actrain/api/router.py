"""
Top-level API router that aggregates all sub-routers.
"""

from fastapi import APIRouter

from actrain.api.air_state import router as air_state_router
from actrain.api.equipment import router as equipment_router
from actrain.api.train import router as train_router
from actrain.api.conversion import router as conversion_router

router = APIRouter()
router.include_router(air_state_router)
router.include_router(equipment_router)
router.include_router(train_router)
router.include_router(conversion_router)
