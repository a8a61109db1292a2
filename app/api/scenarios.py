"""
Scenario history API endpoints.

The history is a bounded, best-effort list: the oldest scenarios are dropped
once the configured cap is exceeded.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.calculations import (
    RoiInputData,
    RoiInputPayload,
    RoiResultData,
    ScenarioData,
    run_calculation,
)
from app.calculations.roi import coerce_roi_input
from app.config import Settings, get_settings
from app.db.database import get_db
from app.db.models import SavedScenario, generate_uuid

logger = logging.getLogger(__name__)

router = APIRouter()


class ScenarioPayload(BaseModel):
    """A scenario previously returned by the calculation endpoint."""

    id: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    name: Optional[str] = None
    input: RoiInputPayload
    result: RoiResultData

    class Config:
        populate_by_name = True


class SaveScenarioRequest(BaseModel):
    """Either a calculated scenario or raw inputs to calculate and save."""

    scenario: Optional[ScenarioPayload] = None
    input: Optional[RoiInputPayload] = None
    name: Optional[str] = None


class ScenarioListResponse(BaseModel):
    """Response for listing scenarios."""

    scenarios: List[ScenarioData]
    total: int


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def scenario_to_response(scenario: SavedScenario) -> ScenarioData:
    """Convert SavedScenario model to response schema."""
    return ScenarioData(
        id=scenario.id,
        created_at=scenario.created_at,
        name=scenario.name,
        input=RoiInputData(**scenario.inputs),
        result=RoiResultData(**scenario.result),
    )


def prune_scenarios(db: Session, max_saved: int, keep_id: Optional[str] = None) -> int:
    """
    Delete the oldest scenarios beyond max_saved.

    keep_id, the scenario just saved, always survives and counts toward
    the cap, whatever its createdAt. Returns the number removed.
    """
    query = db.query(SavedScenario)
    if keep_id is not None:
        query = query.filter(SavedScenario.id != keep_id)
        max_saved -= 1

    stale = (
        query.order_by(SavedScenario.created_at.desc())
        .offset(max(max_saved, 0))
        .all()
    )
    for scenario in stale:
        db.delete(scenario)
    if stale:
        db.commit()
        logger.info(f"Pruned {len(stale)} old scenario(s) from history")
    return len(stale)


@router.get("", response_model=ScenarioListResponse)
async def list_scenarios(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """List saved scenarios, newest first."""
    query = db.query(SavedScenario)

    total = query.count()
    scenarios = (
        query.order_by(SavedScenario.created_at.desc()).offset(skip).limit(limit).all()
    )

    return ScenarioListResponse(
        scenarios=[scenario_to_response(s) for s in scenarios],
        total=total,
    )


@router.post("", response_model=ScenarioData, status_code=201)
async def save_scenario(
    request: SaveScenarioRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Save a calculated scenario, or calculate one from raw inputs and save it."""
    if request.scenario is not None:
        payload = request.scenario
        scenario_id = payload.id or generate_uuid()
        if db.query(SavedScenario).filter(SavedScenario.id == scenario_id).first():
            raise HTTPException(status_code=409, detail="Scenario already saved")

        db_scenario = SavedScenario(
            id=scenario_id,
            name=payload.name or request.name,
            inputs=coerce_roi_input(payload.input.model_dump()).inputs.to_dict(),
            result=payload.result.model_dump(),
            created_at=_as_naive_utc(payload.created_at or datetime.utcnow()),
        )
    elif request.input is not None:
        calculated, _ = run_calculation(
            request.input,
            horizon_months=settings.default_horizon_months,
            name=request.name,
        )
        db_scenario = SavedScenario(
            id=calculated.id,
            name=calculated.name,
            inputs=calculated.input.model_dump(),
            result=calculated.result.model_dump(),
            created_at=calculated.created_at,
        )
    else:
        raise HTTPException(
            status_code=400, detail="Provide either a scenario or an input to save"
        )

    db.add(db_scenario)
    db.commit()
    db.refresh(db_scenario)
    logger.info(f"Saved scenario {db_scenario.id}")

    response = scenario_to_response(db_scenario)
    prune_scenarios(db, settings.max_saved_scenarios, keep_id=db_scenario.id)

    return response


@router.get("/{scenario_id}", response_model=ScenarioData)
async def get_scenario(scenario_id: str, db: Session = Depends(get_db)):
    """Get a saved scenario by ID."""
    scenario = db.query(SavedScenario).filter(SavedScenario.id == scenario_id).first()
    if not scenario:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return scenario_to_response(scenario)


@router.delete("/{scenario_id}")
async def delete_scenario(scenario_id: str, db: Session = Depends(get_db)):
    """Delete a saved scenario."""
    scenario = db.query(SavedScenario).filter(SavedScenario.id == scenario_id).first()
    if not scenario:
        raise HTTPException(status_code=404, detail="Scenario not found")

    db.delete(scenario)
    db.commit()
    logger.info(f"Deleted scenario {scenario_id}")

    return {"deleted": True}


@router.delete("")
async def clear_scenarios(db: Session = Depends(get_db)):
    """Delete every saved scenario."""
    deleted = db.query(SavedScenario).delete()
    db.commit()
    logger.info(f"Cleared {deleted} scenario(s) from history")

    return {"deleted": deleted}
