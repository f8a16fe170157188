"""Pydantic schemas for API responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from foldersummary.events.types import Event

# === Health schema ===


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


# === Event schemas ===


class EventResponse(BaseModel):
    """Single event in the events stream."""

    id: int
    type: str
    time: str
    data: dict[str, Any]


# === Converters ===


def event_to_response(event: Event) -> EventResponse:
    """Convert an Event to its response model."""
    return EventResponse(**event.to_dict())
