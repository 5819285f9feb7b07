"""
Admin surface: login/signup/logout and the competition workspace.

Workspace endpoints drive the per-admin CompetitionCoordinator; every request re-checks
the bearer token through the AdminSessionGate.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sweepstakes_hub.auth.provider import AuthProvider, AuthUser
from sweepstakes_hub.core.database import DatabaseManager
from sweepstakes_hub.core.dependencies import (
    get_access_token,
    get_auth_provider,
    get_current_user,
    get_db,
    get_workspace,
    get_workspaces,
)
from sweepstakes_hub.services.admin_gate import AdminSessionGate
from sweepstakes_hub.services.coordinator import CompetitionCoordinator
from sweepstakes_hub.services.workspaces import WorkspaceRegistry

router = APIRouter(prefix="/admin", tags=["admin"])


class LoginBody(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SignUpBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    password: str
    confirm_password: str


class FilterPatch(BaseModel):
    """Partial filter update; omitted fields keep their current value."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Optional[str] = None
    category: Optional[str] = None
    difficulty_level: Optional[str] = None
    search: Optional[str] = None
    prize_range: Optional[Tuple[int, int]] = None
    end_date_cutoff: Optional[date] = None


def _workspace_state(workspace: CompetitionCoordinator) -> Dict[str, Any]:
    selected = workspace.selected
    return {
        "filters": workspace.filters.model_dump(by_alias=True, mode="json"),
        "competitions": [s.model_dump(by_alias=True, mode="json") for s in workspace.summaries()],
        "selectedId": workspace.selected_id,
        "creatingNew": workspace.creating_new,
        "selected": selected.model_dump(by_alias=True, mode="json") if selected is not None else None,
    }


@router.post("/login", summary="Admin login")
async def login(
    body: LoginBody,
    auth: AuthProvider = Depends(get_auth_provider),
    db: DatabaseManager = Depends(get_db),
) -> dict:
    gate = AdminSessionGate(auth, db)
    session = await gate.sign_in(body.email, body.password)
    return {**session.to_dict(), "state": gate.state.value}


@router.post("/signup", status_code=status.HTTP_201_CREATED, summary="Create an admin account")
async def signup(
    body: SignUpBody,
    auth: AuthProvider = Depends(get_auth_provider),
    db: DatabaseManager = Depends(get_db),
) -> dict:
    gate = AdminSessionGate(auth, db)
    outcome = await gate.sign_up(body.email, body.password, body.confirm_password)
    return {
        "status": outcome.status.value,
        "userId": outcome.user_id,
        "email": outcome.email,
        "message": outcome.message,
        "needsRemediation": outcome.needs_remediation,
    }


@router.post("/logout", summary="Sign out and drop the workspace")
async def logout(
    token: str = Depends(get_access_token),
    user: AuthUser = Depends(get_current_user),
    auth: AuthProvider = Depends(get_auth_provider),
    workspaces: WorkspaceRegistry = Depends(get_workspaces),
) -> dict:
    workspaces.discard(user.id)
    await auth.sign_out(token)
    return {"signed_out": True}


@router.get("/workspace")
async def get_workspace_state(workspace: CompetitionCoordinator = Depends(get_workspace)) -> dict:
    return _workspace_state(workspace)


@router.post("/workspace/reload")
async def reload_workspace(workspace: CompetitionCoordinator = Depends(get_workspace)) -> dict:
    await workspace.load()
    return _workspace_state(workspace)


@router.patch("/workspace/filters")
async def patch_filters(
    body: FilterPatch,
    workspace: CompetitionCoordinator = Depends(get_workspace),
) -> dict:
    changes = body.model_dump(exclude_unset=True)
    applied = await workspace.query(**changes)
    return {**_workspace_state(workspace), "superseded": applied is None}


@router.post("/workspace/select/{competition_id}")
async def select_competition(
    competition_id: str,
    workspace: CompetitionCoordinator = Depends(get_workspace),
) -> dict:
    workspace.select(competition_id)
    return _workspace_state(workspace)


@router.post("/workspace/new")
async def start_new(workspace: CompetitionCoordinator = Depends(get_workspace)) -> dict:
    workspace.start_create()
    return _workspace_state(workspace)


@router.post("/workspace/cancel")
async def cancel_edit(workspace: CompetitionCoordinator = Depends(get_workspace)) -> dict:
    workspace.cancel()
    return _workspace_state(workspace)


@router.post("/workspace/save")
async def save_competition(
    form: Dict[str, Any] = Body(...),
    workspace: CompetitionCoordinator = Depends(get_workspace),
) -> dict:
    outcome = await workspace.save(form)
    return {
        **_workspace_state(workspace),
        "competition": outcome.competition.model_dump(by_alias=True, mode="json"),
        "created": outcome.created,
        "sideEffects": [
            {"table": e.table, "ok": e.ok, "rows": e.rows, "error": e.error} for e in outcome.side_effects
        ],
    }
