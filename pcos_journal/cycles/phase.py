"""Phase and prediction resolver.

Turns the most recent period start plus "now" into the values the dashboard
shows: cycle day, phase, countdown to the next period, and where today sits
relative to the predicted fertile window.

Cycle day and phase depend only on the last start date.  Predictions use the
personal average cycle length, or the configured default (28 days) when
fewer than two cycles are on record.  ``is_confident`` tells the caller
which one it got.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from pcos_journal.cycles.config_loader import EngineConfig, get_engine_config
from pcos_journal.cycles.cycle_stats import (
    CycleStats,
    CycleStatsCalculator,
    predict_from_start,
)
from pcos_journal.cycles.records import CycleRecord

logger = logging.getLogger("pcos_journal.cycles.phase")


@dataclass
class CyclePhaseInfo:
    """Where the user is in the current cycle as of a given day.

    Attributes:
        cycle_day:               1-indexed day since the last period start.
                                 0 or negative for a future-dated start.
        phase:                   'menstrual' | 'follicular' | 'ovulation' | 'luteal',
                                 None when cycle_day < 1.
        days_until_next_period:  Never negative; 0 means due now or late.
        days_until_ovulation:    Negative once predicted ovulation has passed.
        in_fertile_window:       True if today is inside the predicted window.
        is_confident:            True when predictions use a personal average
                                 from at least two cycles.
    """

    as_of: date
    last_period_start: date
    cycle_day: int
    phase: str | None
    average_cycle_length_used: float
    predicted_next_period: date
    predicted_ovulation: date
    fertile_window_start: date
    fertile_window_end: date
    days_until_next_period: int
    days_until_ovulation: int
    in_fertile_window: bool
    is_confident: bool

    @property
    def is_due(self) -> bool:
        return self.days_until_next_period == 0


def to_calendar_date(now: date | datetime) -> date:
    """Truncate ``now`` to its calendar day.

    Aware datetimes keep their own offset, so the day is the one the user
    sees on their clock rather than the UTC day.
    """
    if isinstance(now, datetime):
        return now.date()
    if isinstance(now, date):
        return now
    raise TypeError(f"now must be a date or datetime, got {type(now).__name__}")


class PhaseResolver:
    """Resolve cycle day, phase and countdowns.

    Usage::

        resolver = PhaseResolver()
        info = resolver.resolve(stats, stats.last_period_start, now=date.today())
        if info is not None:
            print(info.cycle_day, info.phase)
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    def resolve(
        self,
        stats: CycleStats,
        most_recent_start: date | None,
        now: date | datetime,
    ) -> CyclePhaseInfo | None:
        """Compute phase info anchored on the most recent period start.

        Args:
            stats:             Output of the stats calculator.
            most_recent_start: Latest period start; falls back to
                               ``stats.last_period_start`` when None.
            now:               Reference moment; time of day is ignored.

        Returns:
            CyclePhaseInfo, or None if no period has ever been logged.
        """
        start = most_recent_start or stats.last_period_start
        if start is None:
            return None

        today = to_calendar_date(now)
        cycle_cfg = self._config.cycle

        is_confident = stats.has_predictions
        avg = stats.average_cycle_length if is_confident else float(cycle_cfg.default_cycle_length)

        cycle_day = (today - start).days + 1
        if cycle_day < 1:
            logger.warning(
                "Period start %s is after %s; cycle day %d", start, today, cycle_day
            )
        phase = self._config.phase_boundaries.phase_for_day(cycle_day)

        next_period, ovulation, fertile_start, fertile_end = predict_from_start(
            start, avg, cycle_cfg
        )

        return CyclePhaseInfo(
            as_of=today,
            last_period_start=start,
            cycle_day=cycle_day,
            phase=phase,
            average_cycle_length_used=avg,
            predicted_next_period=next_period,
            predicted_ovulation=ovulation,
            fertile_window_start=fertile_start,
            fertile_window_end=fertile_end,
            days_until_next_period=max(0, (next_period - today).days),
            days_until_ovulation=(ovulation - today).days,
            in_fertile_window=fertile_start <= today <= fertile_end,
            is_confident=is_confident,
        )


def compute_cycle_phase(
    stats: CycleStats,
    most_recent_start: date | None,
    now: date | datetime,
    config: EngineConfig | None = None,
) -> CyclePhaseInfo | None:
    """Resolve phase info with the global (or given) config."""
    return PhaseResolver(config).resolve(stats, most_recent_start, now)


def resolve_phase_from_records(
    records: Iterable[CycleRecord],
    now: date | datetime,
    config: EngineConfig | None = None,
) -> tuple[CycleStats, CyclePhaseInfo | None]:
    """Compute stats and phase in one go from raw records."""
    config = config or get_engine_config()
    stats = CycleStatsCalculator(config).compute(records)
    return stats, PhaseResolver(config).resolve(stats, stats.last_period_start, now)
