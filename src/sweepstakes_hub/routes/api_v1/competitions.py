"""GET /api/v1/competitions (public listing with filters) and per-competition detail lists."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from sweepstakes_hub.core.dependencies import get_competition_service, get_public_evaluator
from sweepstakes_hub.filtering.evaluator import FilterEvaluator
from sweepstakes_hub.filtering.spec import FilterSpec
from sweepstakes_hub.schemas.associations import EligibilityCriterion, RequirementLine
from sweepstakes_hub.schemas.competition import Competition
from sweepstakes_hub.services.competition_service import CompetitionService

router = APIRouter(prefix="/competitions", tags=["competitions"])


@router.get(
    "",
    response_model=List[Competition],
    summary="List competitions",
    description="Newest first. prize_min/prize_max compare against the digits of the prize text.",
)
async def list_competitions(
    status: Optional[str] = None,
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    search: Optional[str] = None,
    prize_min: Optional[int] = Query(None, ge=0),
    prize_max: Optional[int] = Query(None, ge=0),
    end_date: Optional[date] = None,
    service: CompetitionService = Depends(get_competition_service),
    evaluator: FilterEvaluator = Depends(get_public_evaluator),
):
    prize_range = None
    if prize_min is not None or prize_max is not None:
        prize_range = (prize_min or 0, prize_max if prize_max is not None else 2**63 - 1)
    spec = FilterSpec.parse(
        {
            "status": status,
            "category": category,
            "difficulty_level": difficulty,
            "search": search,
            "prize_range": prize_range,
            "end_date_cutoff": end_date,
        }
    )
    return await evaluator.fetch(spec, service)


@router.get("/{competition_id}", response_model=Competition)
async def get_competition(
    competition_id: str,
    service: CompetitionService = Depends(get_competition_service),
):
    return await service.get(competition_id)


@router.get("/{competition_id}/eligibility", response_model=List[EligibilityCriterion])
async def list_eligibility(
    competition_id: str,
    service: CompetitionService = Depends(get_competition_service),
):
    await service.get(competition_id)
    return await service.list_eligibility(competition_id)


@router.get("/{competition_id}/requirements", response_model=List[RequirementLine])
async def list_requirements(
    competition_id: str,
    service: CompetitionService = Depends(get_competition_service),
):
    await service.get(competition_id)
    return await service.list_requirements(competition_id)
