"""FastAPI dependencies: services, auth provider, bearer-token session and admin gate."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sweepstakes_hub.auth.provider import AuthProvider, AuthUser
from sweepstakes_hub.errors import AuthenticationFailed
from sweepstakes_hub.filtering.evaluator import FilterEvaluator
from sweepstakes_hub.services.admin_gate import AdminSessionGate
from sweepstakes_hub.services.competition_service import CompetitionService
from sweepstakes_hub.services.coordinator import CompetitionCoordinator
from sweepstakes_hub.services.workspaces import WorkspaceRegistry

from .config import get_settings
from .database import DatabaseManager, get_database_manager

_bearer = HTTPBearer(auto_error=False)


def get_db() -> DatabaseManager:
    """The initialized DatabaseManager."""
    return get_database_manager()


def get_competition_service(db: DatabaseManager = Depends(get_db)) -> CompetitionService:
    return CompetitionService(db, write_legacy_columns=get_settings().write_legacy_columns)


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth_provider


def get_public_evaluator(request: Request) -> FilterEvaluator:
    return request.app.state.public_evaluator


def get_workspaces(request: Request) -> WorkspaceRegistry:
    return request.app.state.workspaces


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed("Please log in to continue.")
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_access_token),
    auth: AuthProvider = Depends(get_auth_provider),
) -> AuthUser:
    user = await auth.get_user(token)
    if user is None:
        raise AuthenticationFailed("Your session has expired. Please log in again.")
    return user


async def get_admin_gate(
    token: str = Depends(get_access_token),
    auth: AuthProvider = Depends(get_auth_provider),
    db: DatabaseManager = Depends(get_db),
) -> AdminSessionGate:
    """Gate resumed from the bearer token; raises unless the session is an admin."""
    gate = AdminSessionGate(auth, db)
    await gate.resume(token)
    return gate


async def get_workspace(
    gate: AdminSessionGate = Depends(get_admin_gate),
    workspaces: WorkspaceRegistry = Depends(get_workspaces),
) -> CompetitionCoordinator:
    return await workspaces.open(gate)
