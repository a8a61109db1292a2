"""
ROI calculation API endpoints.

Accepts raw form values, runs the ROI engine and returns the result wrapped
in a scenario envelope the history endpoints can store as-is.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from app.calculations.roi import RoiResult, calculate_roi, coerce_roi_input
from app.config import Settings, get_settings
from app.db.models import generate_uuid

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_HORIZON_MONTHS = 120


class RoiInputPayload(BaseModel):
    """Raw ROI inputs. Values may be numbers, numeric strings or junk."""

    invoices_per_month: Any = Field(None, alias="invoicesPerMonth")
    manual_mins_per_invoice: Any = Field(None, alias="manualMinsPerInvoice")
    automation_mins_per_invoice: Any = Field(None, alias="automationMinsPerInvoice")
    hourly_wage: Any = Field(None, alias="hourlyWage")
    software_cost_per_month: Any = Field(None, alias="softwareCostPerMonth")
    implementation_cost_one_time: Any = Field(None, alias="implementationCostOneTime")

    class Config:
        populate_by_name = True


class RoiInputData(BaseModel):
    """Coerced ROI inputs."""

    invoices_per_month: float = Field(alias="invoicesPerMonth")
    manual_mins_per_invoice: float = Field(alias="manualMinsPerInvoice")
    automation_mins_per_invoice: float = Field(alias="automationMinsPerInvoice")
    hourly_wage: float = Field(alias="hourlyWage")
    software_cost_per_month: float = Field(alias="softwareCostPerMonth")
    implementation_cost_one_time: float = Field(0.0, alias="implementationCostOneTime")

    class Config:
        populate_by_name = True


class ProjectionPointData(BaseModel):
    """One month of the projection."""

    month: int
    manual: float
    automated: float
    cumulative_savings: float = Field(alias="cumulativeSavings")

    class Config:
        populate_by_name = True


class RoiResultData(BaseModel):
    """Calculated ROI metrics."""

    monthly_manual_labor_cost: float = Field(alias="monthlyManualLaborCost")
    monthly_automated_labor_cost: float = Field(alias="monthlyAutomatedLaborCost")
    monthly_software_cost: float = Field(alias="monthlySoftwareCost")
    monthly_total_manual: float = Field(alias="monthlyTotalManual")
    monthly_total_automated: float = Field(alias="monthlyTotalAutomated")
    monthly_savings: float = Field(alias="monthlySavings")
    annual_savings: float = Field(alias="annualSavings")
    annual_software_cost: float = Field(alias="annualSoftwareCost")
    roi_ratio: float = Field(alias="roiRatio")
    roi_percent: float = Field(alias="roiPercent")
    payback_months: Optional[float] = Field(None, alias="paybackMonths")
    series: List[ProjectionPointData]

    class Config:
        populate_by_name = True


class ScenarioData(BaseModel):
    """An input/result pair with its id and timestamp."""

    id: str
    created_at: datetime = Field(alias="createdAt")
    name: Optional[str] = None
    input: RoiInputData
    result: RoiResultData

    class Config:
        populate_by_name = True


class CalcResponse(BaseModel):
    """Response for a single calculation."""

    scenario: ScenarioData


def result_to_data(result: RoiResult) -> RoiResultData:
    """Convert an engine result to its response schema."""
    return RoiResultData(**result.to_dict())


def run_calculation(
    payload: RoiInputPayload,
    horizon_months: int,
    volume_growth: float = 0.0,
    name: Optional[str] = None,
) -> Tuple[ScenarioData, Tuple[str, ...]]:
    """
    Coerce the payload, calculate and wrap the result as a new scenario.

    Returns:
        The scenario and the names of input fields that were not read
        cleanly (defaulted to zero or had trailing text ignored)
    """
    coerced = coerce_roi_input(payload.model_dump())
    if coerced.fallback_fields:
        logger.warning(
            f"ROI inputs defaulted to 0: {', '.join(coerced.fallback_fields)}"
        )
    if coerced.partial_fields:
        logger.warning(
            f"ROI inputs had trailing text ignored: {', '.join(coerced.partial_fields)}"
        )

    result = calculate_roi(
        coerced.inputs, horizon_months=horizon_months, volume_growth=volume_growth
    )

    scenario = ScenarioData(
        id=generate_uuid(),
        created_at=datetime.utcnow(),
        name=name,
        input=RoiInputData(**coerced.inputs.to_dict()),
        result=result_to_data(result),
    )
    return scenario, coerced.flagged_fields


@router.post("", response_model=CalcResponse)
async def calculate(
    inputs: RoiInputPayload,
    horizon_months: Optional[int] = Query(None, ge=1, le=MAX_HORIZON_MONTHS),
    volume_growth: float = Query(0.0, ge=-1.0, le=1.0),
    strict: bool = False,
    settings: Settings = Depends(get_settings),
):
    """Calculate automation ROI. The scenario is returned, not stored."""
    scenario, flagged_fields = run_calculation(
        inputs,
        horizon_months=horizon_months or settings.default_horizon_months,
        volume_growth=volume_growth,
    )

    if strict and flagged_fields:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Some inputs are missing or not plain numbers",
                "fields": list(flagged_fields),
            },
        )

    return CalcResponse(scenario=scenario)
