"""FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Request

from foldersummary.events.bus import EventLogger
from foldersummary.summary.service import FolderSummaryService


def get_service(request: Request) -> FolderSummaryService:
    """Get the folder summary service from app state."""
    service: FolderSummaryService = request.app.state.service
    return service


def get_bus(request: Request) -> EventLogger:
    """Get the event bus from app state."""
    bus: EventLogger = request.app.state.bus
    return bus
