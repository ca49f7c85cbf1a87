"""
Application lifecycle event handlers.

Manages startup and shutdown of database connections.
"""

from typing import Callable

import structlog
from fastapi import FastAPI

from core.config import settings
from db.session import close_db, init_db

logger = structlog.get_logger(__name__)


def create_start_app_handler(app: FastAPI) -> Callable:
    """Create startup event handler."""

    async def start_app() -> None:
        logger.info("Starting ResourceHub gamification API...", env=settings.APP_ENV)

        await init_db()
        logger.info("Database initialized")

        if not settings.ENABLE_GAMIFICATION:
            logger.warning("gamification_disabled", detail="point awards are no-ops")

        logger.info("ResourceHub gamification API started successfully")

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    """Create shutdown event handler."""

    async def stop_app() -> None:
        logger.info("Shutting down ResourceHub gamification API...")

        await close_db()

        logger.info("ResourceHub gamification API shutdown complete")

    return stop_app
