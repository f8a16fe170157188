"""Folder database status API routes."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from foldersummary.model.types import FolderMissingError, ModelError
from foldersummary.server.api.deps import get_service
from foldersummary.summary.publisher import FolderUnavailableError
from foldersummary.summary.service import FolderSummaryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rest/db", tags=["db"])


@router.get("/status")
def folder_status(
    folder: str,
    service: FolderSummaryService = Depends(get_service),
) -> dict[str, Any]:
    """Get the summary of a folder."""
    try:
        return service.summary(folder)
    except FolderUnavailableError as e:
        if isinstance(e.cause, FolderMissingError):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(e.cause),
            ) from e
        logger.warning("Summary of %s failed: %s", folder, e.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e.cause),
        ) from e


@router.get("/completion")
def folder_completion(
    folder: str,
    device: str,
    service: FolderSummaryService = Depends(get_service),
) -> dict[str, Any]:
    """Get the completion of a folder on a remote device."""
    try:
        return service.publisher.completion(folder, device)
    except FolderMissingError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    except ModelError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e
