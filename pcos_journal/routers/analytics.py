"""Insight unlock and logging status endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter

from pcos_journal.cycles.insights import ActivityCounts, InsightGate
from pcos_journal.cycles.streaks import compute_logging_status
from pcos_journal.dependencies import EngineSettings
from pcos_journal.models.cycles import (
    InsightsRequest,
    InsightUnlockRead,
    LoggingStatusRead,
    LoggingStatusRequest,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/insights", response_model=InsightUnlockRead)
async def insight_unlocks(body: InsightsRequest, config: EngineSettings) -> Any:
    counts = ActivityCounts(mood=body.mood, cycles=body.cycles, symptoms=body.symptoms)
    status = InsightGate(config).evaluate(counts, previously_unlocked=body.previously_unlocked)
    return InsightUnlockRead.model_validate(status)


@router.post("/logging-status", response_model=LoggingStatusRead)
async def logging_status(body: LoggingStatusRequest) -> Any:
    status = compute_logging_status(
        body.mood_dates, body.symptom_dates, body.today or date.today()
    )
    return LoggingStatusRead.model_validate(status)
