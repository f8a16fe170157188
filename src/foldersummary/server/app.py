"""FastAPI application exposing folder summaries and the event stream.

This module creates and configures the FastAPI application with:
- /rest/db/status and /rest/db/completion for on-demand queries
- /rest/events for long-polling consumers (also the liveness signal)
- /health

The folder summary service is started and stopped with the application.

Usage:
    FOLDERSUMMARY_CONFIG=config.json FOLDERSUMMARY_STATE=state.json \\
        uvicorn foldersummary.server.app:app_factory --factory
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from foldersummary.core.config import SummaryServiceConfig, load_configuration
from foldersummary.events.bus import EventLogger
from foldersummary.model.memory import load_model
from foldersummary.server.api.router import router as api_router
from foldersummary.summary.service import FolderSummaryService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_path: Path | None = None, level: int = logging.INFO) -> None:
    """Configure logging to output to stdout and optionally a file.

    Args:
        log_path: Optional path to a log file.
        level: Log level for the foldersummary loggers.
    """
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger("foldersummary")
    root_logger.setLevel(level)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    if log_path is not None:
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        # Also capture uvicorn logs to file
        for uvicorn_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(uvicorn_name).addHandler(file_handler)


def create_app(service: FolderSummaryService, bus: EventLogger) -> FastAPI:
    """Create the FastAPI application around a summary service.

    Args:
        service: The folder summary service (started/stopped by the app).
        bus: Event bus the service publishes to.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        logger.info("Folder summary server starting")
        service.start()

        yield

        service.stop()
        logger.info("Folder summary server shutting down")

    application = FastAPI(
        title="Folder Summary",
        description="Rate-limited folder summaries and completion events",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.state.service = service
    application.state.bus = bus

    application.include_router(api_router)

    return application


def build_app(
    config_path: Path,
    state_path: Path,
    service_config: SummaryServiceConfig | None = None,
) -> FastAPI:
    """Create the application from a configuration and a model state file."""
    config = load_configuration(config_path)
    model = load_model(state_path)
    bus = EventLogger()
    service = FolderSummaryService(config, model, bus, service_config=service_config)
    return create_app(service, bus)


def app_factory() -> FastAPI:
    """Factory function for uvicorn --factory mode.

    Reads FOLDERSUMMARY_CONFIG, FOLDERSUMMARY_STATE and FOLDERSUMMARY_LOG_PATH.
    """
    log_path = os.environ.get("FOLDERSUMMARY_LOG_PATH")
    setup_logging(Path(log_path) if log_path else None)
    return build_app(
        config_path=Path(os.environ.get("FOLDERSUMMARY_CONFIG", "config.json")),
        state_path=Path(os.environ.get("FOLDERSUMMARY_STATE", "state.json")),
    )
