"""Cycle analysis engine for PCOS Journal.

Pure functions over a user's logged periods and entry counts.  Nothing in
this package reads or writes storage; callers load records and pass them in
together with an explicit "now".

Modules:
    records        CycleRecord and tolerant parsing of store rows
    cycle_stats    Cycle lengths, averages, regularity, predictions
    phase          Cycle day, phase and countdowns as of a given day
    insights       Data-volume gating for analytics features
    calendar       Per-day markers for the month calendar
    streaks        Logged-today flags and mood logging streak
    config_loader  Load/validate/hot-reload engine_config.yaml
"""

from pcos_journal.cycles.calendar import CalendarDay, build_month_calendar
from pcos_journal.cycles.config_loader import EngineConfig, get_engine_config
from pcos_journal.cycles.cycle_stats import CycleStats, CycleStatsCalculator, compute_cycle_stats
from pcos_journal.cycles.insights import (
    ActivityCounts,
    FeatureUnlock,
    InsightGate,
    InsightUnlockStatus,
    compute_insight_unlock_status,
)
from pcos_journal.cycles.phase import CyclePhaseInfo, PhaseResolver, compute_cycle_phase
from pcos_journal.cycles.records import CycleRecord, FlowIntensity, load_cycle_records
from pcos_journal.cycles.streaks import LoggingStatus, compute_logging_status

__all__ = [
    "CycleRecord",
    "FlowIntensity",
    "load_cycle_records",
    "CycleStats",
    "CycleStatsCalculator",
    "compute_cycle_stats",
    "CyclePhaseInfo",
    "PhaseResolver",
    "compute_cycle_phase",
    "ActivityCounts",
    "FeatureUnlock",
    "InsightGate",
    "InsightUnlockStatus",
    "compute_insight_unlock_status",
    "CalendarDay",
    "build_month_calendar",
    "LoggingStatus",
    "compute_logging_status",
    "EngineConfig",
    "get_engine_config",
]
