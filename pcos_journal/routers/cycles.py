"""Cycle statistics, phase and calendar endpoints.

Stateless: the caller sends the user's period records with every request.
Nothing is read from or written to storage here.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter

from pcos_journal.cycles.calendar import build_month_calendar
from pcos_journal.cycles.config_loader import EngineConfig
from pcos_journal.cycles.cycle_stats import CycleStats, CycleStatsCalculator
from pcos_journal.cycles.phase import PhaseResolver
from pcos_journal.cycles.records import CycleRecord, load_cycle_records
from pcos_journal.dependencies import EngineSettings
from pcos_journal.models.cycles import (
    CalendarDayRead,
    CalendarRequest,
    CyclePhaseRequest,
    CyclePhaseRead,
    CycleRecordsRequest,
    CycleStatsRead,
)

router = APIRouter(prefix="/cycles", tags=["cycles"])
logger = logging.getLogger("pcos_journal.routers.cycles")


def _stats_for(
    rows: list[dict[str, Any]], config: EngineConfig
) -> tuple[list[CycleRecord], CycleStats]:
    records, parse_warnings = load_cycle_records(rows)
    stats = CycleStatsCalculator(config).compute(records)
    stats.warnings = parse_warnings + stats.warnings
    return records, stats


@router.post("/stats", response_model=CycleStatsRead)
async def cycle_stats(body: CycleRecordsRequest, config: EngineSettings) -> Any:
    _, stats = _stats_for(body.records, config)
    logger.debug("Computed stats over %d cycles", stats.total_cycles)
    return CycleStatsRead.model_validate(stats)


@router.post("/phase", response_model=CyclePhaseRead | None)
async def cycle_phase(body: CyclePhaseRequest, config: EngineSettings) -> Any:
    _, stats = _stats_for(body.records, config)
    now = body.now or date.today()
    info = PhaseResolver(config).resolve(stats, stats.last_period_start, now)
    return CyclePhaseRead.model_validate(info) if info is not None else None


@router.post("/calendar", response_model=list[CalendarDayRead])
async def cycle_calendar(body: CalendarRequest, config: EngineSettings) -> Any:
    records, stats = _stats_for(body.records, config)
    days = build_month_calendar(records, body.year, body.month, stats=stats, config=config)
    return [CalendarDayRead.model_validate(d) for d in days]
