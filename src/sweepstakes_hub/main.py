import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sweepstakes_hub.auth.provider import AuthProvider
from sweepstakes_hub.auth.supabase_client import SupabaseAuthClient
from sweepstakes_hub.core.config import Settings, get_settings
from sweepstakes_hub.core.database import dispose_database, get_database_manager, init_database
from sweepstakes_hub.core.logging import setup_logging
from sweepstakes_hub.errors import PortalError
from sweepstakes_hub.filtering.evaluator import FilterEvaluator
from sweepstakes_hub.routes.api_v1 import api_v1_router
from sweepstakes_hub.services.admin_gate import AdminSessionGate
from sweepstakes_hub.services.competition_service import CompetitionService
from sweepstakes_hub.services.coordinator import CompetitionCoordinator
from sweepstakes_hub.services.workspaces import WorkspaceRegistry

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, auth_provider: Optional[AuthProvider] = None) -> FastAPI:
    """Build the FastAPI app. ``auth_provider`` defaults to the hosted Supabase client."""
    settings = settings or get_settings()
    setup_logging(settings)

    owns_auth_client = auth_provider is None
    if auth_provider is None:
        auth_provider = SupabaseAuthClient(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.auth_timeout_seconds,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        manager = await init_database(settings.database_url)
        if settings.env == "dev":
            await manager.create_all()
        logger.info("Application startup complete (CORS allow_origins=%s)", settings.cors_origins)
        yield
        if owns_auth_client:
            await auth_provider.aclose()
        await dispose_database()
        logger.info("Application shutdown complete")

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=False,
    )

    def open_workspace(gate: AdminSessionGate) -> CompetitionCoordinator:
        service = CompetitionService(
            get_database_manager(), write_legacy_columns=settings.write_legacy_columns
        )
        return CompetitionCoordinator(service, gate, debounce_seconds=settings.filter_debounce_seconds)

    app.state.settings = settings
    app.state.auth_provider = auth_provider
    app.state.public_evaluator = FilterEvaluator()
    app.state.workspaces = WorkspaceRegistry(open_workspace)

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health")
    async def health() -> dict:
        """Simple health check endpoint."""
        return {"status": "ok"}

    app.include_router(api_v1_router)
    return app


app = create_app()
