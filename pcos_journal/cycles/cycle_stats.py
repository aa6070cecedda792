"""Cycle statistics calculator.

Derives cycle lengths, averages, regularity and calendar predictions from a
history of logged periods.  Pure: no clock, no I/O.  The same records in any
order always produce the same CycleStats.

Predictions deliberately use simple arithmetic:
- next period  = last start + average cycle length
- ovulation    = last start + 14 days (fixed, not derived from the average)
- fertile window = ovulation - 5 days through ovulation + 1 day
All day counts come from engine_config.yaml.
"""

from __future__ import annotations

import logging
import math
import statistics
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from pcos_journal.cycles.config_loader import CycleConfig, EngineConfig, get_engine_config
from pcos_journal.cycles.records import SYMPTOM_FIELDS, CycleRecord

logger = logging.getLogger("pcos_journal.cycles.cycle_stats")

MSG_NO_DATA = "Log your first period to start tracking your cycle"
MSG_ONE_CYCLE = "Log at least 2 cycles to see predictions"


@dataclass
class CycleStats:
    """Derived statistics for a user's period history.

    Optional fields are None when there is not yet enough data to compute
    them.  None means "not available yet", never zero.

    Attributes:
        total_cycles:          Number of well-formed records.  Records whose end
                               precedes their start are excluded from the count
                               as well as from every derived field.
        cycle_lengths:         Day gaps between consecutive period starts.
        average_cycle_length:  Mean of cycle_lengths, unrounded.
        average_period_length: Mean bleeding length in days (1 decimal).
        regularity_percentage: Share of cycles within tolerance of the average (0–100).
        last_period_start:     Most recent period start.
        predicted_next_period: last_period_start + average cycle length.
        predicted_ovulation:   last_period_start + ovulation offset.
        fertile_window_start:  First fertile day.
        fertile_window_end:    Last fertile day.
        average_symptoms:      Mean severity per symptom (1 decimal), None if never logged.
        message:               Guidance shown when data is insufficient.
        warnings:              Data-integrity flags raised during computation.
    """

    total_cycles: int = 0
    cycle_lengths: tuple[int, ...] = ()
    average_cycle_length: float | None = None
    average_period_length: float | None = None
    regularity_percentage: int | None = None
    last_period_start: date | None = None
    predicted_next_period: date | None = None
    predicted_ovulation: date | None = None
    fertile_window_start: date | None = None
    fertile_window_end: date | None = None
    average_symptoms: dict[str, float | None] = field(default_factory=dict)
    message: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def has_predictions(self) -> bool:
        """True when predictions are backed by at least two logged cycles."""
        return self.total_cycles >= 2 and self.average_cycle_length is not None


def record_sort_key(record: CycleRecord) -> tuple[date, date]:
    """Order by start, then end; an open-ended period sorts last."""
    return (record.period_start, record.period_end or date.max)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def predict_from_start(
    last_start: date, average_cycle_length: float, cycle_cfg: CycleConfig
) -> tuple[date, date, date, date]:
    """Return (next_period, ovulation, fertile_start, fertile_end)."""
    next_period = last_start + timedelta(days=round_half_up(average_cycle_length))
    ovulation = last_start + timedelta(days=cycle_cfg.ovulation_offset_days)
    fertile_start = ovulation - timedelta(days=cycle_cfg.fertile_days_before_ovulation)
    fertile_end = ovulation + timedelta(days=cycle_cfg.fertile_days_after_ovulation)
    return next_period, ovulation, fertile_start, fertile_end


class CycleStatsCalculator:
    """Compute CycleStats from logged period records.

    Usage::

        calculator = CycleStatsCalculator()
        stats = calculator.compute(records)
        print(stats.average_cycle_length, stats.predicted_next_period)
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    def compute(self, records: Iterable[CycleRecord]) -> CycleStats:
        """Compute statistics for a period history.

        Args:
            records: Logged periods in any order.

        Returns:
            CycleStats.  Never raises for empty or partially malformed input.
        """
        stats = CycleStats()
        # Sorted by start; never trust the caller's order
        ordered = self._well_formed(records, stats.warnings)

        if not ordered:
            stats.message = MSG_NO_DATA
            return stats

        stats.total_cycles = len(ordered)
        stats.last_period_start = ordered[-1].period_start
        stats.average_period_length = self._average_period_length(ordered)
        stats.average_symptoms = self._average_symptoms(ordered)

        if stats.total_cycles == 1:
            stats.message = MSG_ONE_CYCLE
            return stats

        lengths = self._cycle_lengths(ordered, stats.warnings)
        stats.cycle_lengths = tuple(lengths)
        if not lengths:
            # Every pair was a duplicate start; nothing to average
            stats.message = MSG_ONE_CYCLE
            return stats

        cycle_cfg = self._config.cycle
        avg = float(statistics.mean(lengths))
        stats.average_cycle_length = avg

        tolerance = cycle_cfg.regularity_tolerance_days
        regular = sum(1 for length in lengths if abs(length - avg) <= tolerance)
        stats.regularity_percentage = round_half_up(regular * 100 / len(lengths))

        (
            stats.predicted_next_period,
            stats.predicted_ovulation,
            stats.fertile_window_start,
            stats.fertile_window_end,
        ) = predict_from_start(stats.last_period_start, avg, cycle_cfg)

        return stats

    @staticmethod
    def _well_formed(records: Iterable[CycleRecord], warnings: list[str]) -> list[CycleRecord]:
        """Drop records whose end precedes their start; result is start-ordered."""
        valid = []
        for record in sorted(records, key=record_sort_key):
            if record.is_well_formed:
                valid.append(record)
                continue
            msg = (
                f"Ignoring period starting {record.period_start.isoformat()}: "
                f"end date {record.period_end.isoformat()} is before the start"
            )
            logger.warning(msg)
            warnings.append(msg)
        return valid

    @staticmethod
    def _cycle_lengths(ordered: list[CycleRecord], warnings: list[str]) -> list[int]:
        """Gaps between consecutive starts, skipping non-increasing pairs."""
        lengths = []
        for prev, curr in zip(ordered, ordered[1:]):
            gap = (curr.period_start - prev.period_start).days
            if gap <= 0:
                msg = (
                    f"Duplicate period start {curr.period_start.isoformat()}; "
                    "pair excluded from cycle lengths"
                )
                logger.warning(msg)
                warnings.append(msg)
                continue
            lengths.append(gap)
        return lengths

    @staticmethod
    def _average_period_length(ordered: list[CycleRecord]) -> float | None:
        lengths = [r.period_length for r in ordered if r.period_length is not None]
        if not lengths:
            return None
        return round(float(statistics.mean(lengths)), 1)

    @staticmethod
    def _average_symptoms(ordered: list[CycleRecord]) -> dict[str, float | None]:
        averages: dict[str, float | None] = {}
        for name in SYMPTOM_FIELDS:
            values = [getattr(r, name) for r in ordered if getattr(r, name) is not None]
            averages[name] = round(float(statistics.mean(values)), 1) if values else None
        return averages


def compute_cycle_stats(
    records: Iterable[CycleRecord], config: EngineConfig | None = None
) -> CycleStats:
    """Compute CycleStats for ``records`` using the global (or given) config."""
    return CycleStatsCalculator(config).compute(records)
