"""Tests for month calendar markers and daily logging status."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from pcos_journal.cycles.calendar import build_month_calendar
from pcos_journal.cycles.config_loader import EngineConfig
from pcos_journal.cycles.records import CycleRecord, FlowIntensity
from pcos_journal.cycles.streaks import compute_logging_status, mood_streak


class TestMonthCalendar:
    def test_one_entry_per_day(
        self, engine_config: EngineConfig, three_cycles: list[CycleRecord]
    ) -> None:
        days = build_month_calendar(three_cycles, 2024, 2, config=engine_config)
        assert len(days) == 29
        assert days[0].day == date(2024, 2, 1)
        assert days[-1].day == date(2024, 2, 29)

    def test_logged_period_days_carry_flow(
        self, engine_config: EngineConfig, three_cycles: list[CycleRecord]
    ) -> None:
        days = {d.day: d for d in build_month_calendar(three_cycles, 2024, 1, config=engine_config)}
        assert days[date(2024, 1, 3)].is_period
        assert days[date(2024, 1, 3)].flow_intensity is FlowIntensity.MODERATE
        assert not days[date(2024, 1, 6)].is_period
        assert days[date(2024, 1, 31)].flow_intensity is FlowIntensity.HEAVY

    def test_predicted_and_fertile_markers(
        self, engine_config: EngineConfig, three_cycles: list[CycleRecord]
    ) -> None:
        days = {d.day: d for d in build_month_calendar(three_cycles, 2024, 3, config=engine_config)}
        # Predicted start 2024-03-27 plus 5 extra days spills into April
        predicted = [d for d, m in days.items() if m.is_predicted_period]
        assert predicted == [date(2024, 3, day) for day in range(27, 32)]
        fertile = [d for d, m in days.items() if m.is_fertile]
        assert fertile == [date(2024, 3, day) for day in range(7, 14)]
        assert [d for d, m in days.items() if m.is_ovulation] == [date(2024, 3, 12)]

    def test_no_predictions_with_one_cycle(self, engine_config: EngineConfig) -> None:
        records = [CycleRecord(period_start=date(2024, 1, 1))]
        days = build_month_calendar(records, 2024, 1, config=engine_config)
        assert not any(d.is_predicted_period or d.is_fertile or d.is_ovulation for d in days)
        assert [d.day for d in days if d.is_period] == [date(2024, 1, 1)]

    def test_shared_start_independent_of_input_order(self, engine_config: EngineConfig) -> None:
        short = CycleRecord(
            period_start=date(2024, 1, 1),
            period_end=date(2024, 1, 3),
            flow_intensity=FlowIntensity.LIGHT,
        )
        long = CycleRecord(
            period_start=date(2024, 1, 1),
            period_end=date(2024, 1, 5),
            flow_intensity=FlowIntensity.HEAVY,
        )
        forward = build_month_calendar([short, long], 2024, 1, config=engine_config)
        backward = build_month_calendar([long, short], 2024, 1, config=engine_config)
        assert forward == backward
        assert forward[0].flow_intensity is FlowIntensity.HEAVY

    def test_identical_dates_independent_of_input_order(self, engine_config: EngineConfig) -> None:
        a = CycleRecord(period_start=date(2024, 1, 1), flow_intensity=FlowIntensity.LIGHT)
        b = CycleRecord(period_start=date(2024, 1, 1), flow_intensity=FlowIntensity.MODERATE)
        forward = build_month_calendar([a, b], 2024, 1, config=engine_config)
        backward = build_month_calendar([b, a], 2024, 1, config=engine_config)
        assert forward[0].flow_intensity is backward[0].flow_intensity

    def test_invalid_month(self, engine_config: EngineConfig) -> None:
        with pytest.raises(ValueError):
            build_month_calendar([], 2024, 13, config=engine_config)


class TestLoggingStatus:
    def test_streak_counts_back_from_today(self) -> None:
        mood = [date(2024, 5, 10), date(2024, 5, 9), date(2024, 5, 8), date(2024, 5, 6)]
        status = compute_logging_status(mood, [], date(2024, 5, 10))
        assert status.current_streak == 3
        assert status.mood_logged_today
        assert not status.symptom_logged_today
        assert status.logged_today

    def test_no_entry_today_means_no_streak(self) -> None:
        assert mood_streak({date(2024, 5, 9), date(2024, 5, 8)}, date(2024, 5, 10)) == 0

    def test_timestamps_and_duplicates(self) -> None:
        mood = [
            datetime(2024, 5, 10, 7, 15),
            datetime(2024, 5, 10, 21, 0),
            datetime(2024, 5, 9, 23, 59),
        ]
        symptoms = [datetime(2024, 5, 10, 12, 0)]
        status = compute_logging_status(mood, symptoms, datetime(2024, 5, 10, 22, 0))
        assert status.current_streak == 2
        assert status.symptom_logged_today

    def test_symptom_only_counts_as_logged_today(self) -> None:
        status = compute_logging_status([], [date(2024, 5, 10)], date(2024, 5, 10))
        assert status.logged_today
        assert status.current_streak == 0
