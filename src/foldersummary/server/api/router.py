"""Main API router that includes all sub-routers."""

from __future__ import annotations

from fastapi import APIRouter

from foldersummary.server.api import db, events, health

router = APIRouter()

# Include all API routers
router.include_router(health.router)
router.include_router(db.router)
router.include_router(events.router)
