"""
API routes for the ROI calculator.
"""

from fastapi import APIRouter

from app.api import calculations, scenarios

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calc", tags=["calculations"])
router.include_router(scenarios.router, prefix="/scenarios", tags=["scenarios"])
