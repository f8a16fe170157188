"""Event stream API route.

Consumers long-poll this endpoint. Every request counts as a liveness
signal for the folder summary service, which only computes summaries
while somebody is polling.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from foldersummary.events.bus import EventLogger
from foldersummary.events.types import EventType
from foldersummary.server.api.deps import get_bus, get_service
from foldersummary.server.schemas import EventResponse, event_to_response
from foldersummary.summary.service import FolderSummaryService

router = APIRouter(prefix="/rest", tags=["events"])

MAX_TIMEOUT = 600.0  # seconds


@router.get("/events", response_model=list[EventResponse])
def get_events(
    since: int = Query(0, ge=0),
    events: str = "",
    timeout: float = Query(60.0, ge=0.0, le=MAX_TIMEOUT),
    limit: int = Query(0, ge=0),
    service: FolderSummaryService = Depends(get_service),
    bus: EventLogger = Depends(get_bus),
) -> list[EventResponse]:
    """Get events newer than `since`, waiting up to `timeout` seconds."""
    try:
        mask = EventType.parse_mask(events)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    service.on_event_request()
    found = bus.since(since, mask=mask, timeout=timeout, limit=limit)
    return [event_to_response(e) for e in found]
