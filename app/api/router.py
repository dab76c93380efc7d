from __future__ import annotations

from fastapi import APIRouter

from app.api.admin_articles_api import router as admin_articles_router
from app.api.admin_auth_api import router as admin_auth_router
from app.api.admin_events_api import router as admin_events_router
from app.api.meta_api import router as meta_router
from app.api.public_content_api import router as public_content_router
from app.api.sync_api import router as sync_router

router = APIRouter()

# Include sub-routers
router.include_router(meta_router, tags=["meta"])
router.include_router(admin_auth_router, prefix="/admin", tags=["admin"])
router.include_router(admin_articles_router, prefix="/admin/articles", tags=["admin"])
router.include_router(admin_events_router, prefix="/admin/events", tags=["admin"])
router.include_router(sync_router, tags=["sync"])
router.include_router(public_content_router, tags=["content"])
