"""Bookmarks for the signed-in user: GET /saved, POST/DELETE /saved/{competition_id}."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from sweepstakes_hub.auth.provider import AuthUser
from sweepstakes_hub.core.dependencies import get_competition_service, get_current_user
from sweepstakes_hub.schemas.competition import Competition
from sweepstakes_hub.services.competition_service import CompetitionService

router = APIRouter(prefix="/saved", tags=["saved"])


@router.get("", response_model=List[Competition])
async def list_saved(
    user: AuthUser = Depends(get_current_user),
    service: CompetitionService = Depends(get_competition_service),
):
    return await service.list_saved(user.id)


@router.post("/{competition_id}")
async def save_competition(
    competition_id: str,
    user: AuthUser = Depends(get_current_user),
    service: CompetitionService = Depends(get_competition_service),
) -> dict:
    created = await service.save_for_user(user.id, competition_id, email=user.email)
    return {"competition_id": competition_id, "saved": True, "created": created}


@router.delete("/{competition_id}")
async def unsave_competition(
    competition_id: str,
    user: AuthUser = Depends(get_current_user),
    service: CompetitionService = Depends(get_competition_service),
) -> dict:
    removed = await service.unsave_for_user(user.id, competition_id)
    return {"competition_id": competition_id, "saved": False, "removed": removed}
