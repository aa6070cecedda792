"""Health check endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from pcos_journal.dependencies import AppSettings, EngineSettings

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check(settings: AppSettings, config: EngineSettings) -> dict:
    """Liveness probe. Returns 200 if the API process is up and config loaded."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "engine_config_version": config.version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
