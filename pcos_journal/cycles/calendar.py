"""Month calendar markers for the cycles page.

Marks each day of a month as a logged period day (with its flow), a
predicted period day, a fertile day or the predicted ovulation day.
"""

from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from pcos_journal.cycles.config_loader import EngineConfig, get_engine_config
from pcos_journal.cycles.cycle_stats import CycleStats, CycleStatsCalculator, record_sort_key
from pcos_journal.cycles.records import CycleRecord, FlowIntensity


@dataclass(frozen=True)
class CalendarDay:
    day: date
    is_period: bool = False
    flow_intensity: FlowIntensity | None = None
    is_predicted_period: bool = False
    is_fertile: bool = False
    is_ovulation: bool = False


def build_month_calendar(
    records: Iterable[CycleRecord],
    year: int,
    month: int,
    stats: CycleStats | None = None,
    config: EngineConfig | None = None,
) -> list[CalendarDay]:
    """Return one CalendarDay per day of ``year``-``month``.

    Predicted markers are only set when ``stats`` carries confident
    predictions (two or more cycles).

    Raises:
        ValueError: If ``month`` is not 1–12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1–12, got {month}")

    config = config or get_engine_config()
    records = [r for r in records if r.is_well_formed]
    if stats is None:
        stats = CycleStatsCalculator(config).compute(records)

    predicted: tuple[date, date] | None = None
    if stats.has_predictions and stats.predicted_next_period:
        extra = timedelta(days=config.cycle.predicted_period_extra_days)
        predicted = (stats.predicted_next_period, stats.predicted_next_period + extra)

    # Latest record wins when two periods overlap; on a shared start the
    # open-ended or longer period wins
    ordered = sorted(records, key=_overlap_key, reverse=True)

    days = []
    _, n_days = _calendar.monthrange(year, month)
    for dom in range(1, n_days + 1):
        day = date(year, month, dom)
        logged = next((r for r in ordered if r.contains(day)), None)
        days.append(
            CalendarDay(
                day=day,
                is_period=logged is not None,
                flow_intensity=logged.flow_intensity if logged else None,
                is_predicted_period=bool(predicted and predicted[0] <= day <= predicted[1]),
                is_fertile=_within(day, stats.fertile_window_start, stats.fertile_window_end),
                is_ovulation=day == stats.predicted_ovulation,
            )
        )
    return days


def _overlap_key(record: CycleRecord) -> tuple:
    flow = record.flow_intensity.value if record.flow_intensity else ""
    return (record_sort_key(record), flow, record.record_id or "")


def _within(day: date, start: date | None, end: date | None) -> bool:
    return start is not None and end is not None and start <= day <= end
