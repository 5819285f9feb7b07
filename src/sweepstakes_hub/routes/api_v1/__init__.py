"""API v1: public listing, bookmarks and the admin workspace."""

from fastapi import APIRouter

from .admin import router as admin_router
from .competitions import router as competitions_router
from .saved import router as saved_router

router = APIRouter(prefix="/api/v1", tags=["api_v1"])
router.include_router(competitions_router)
router.include_router(saved_router)
router.include_router(admin_router)

api_v1_router = router
