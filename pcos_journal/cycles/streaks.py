"""Daily logging status: did the user log today, and how long is the streak."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from pcos_journal.cycles.phase import to_calendar_date


@dataclass(frozen=True)
class LoggingStatus:
    """Today's logging state.

    Attributes:
        current_streak:      Consecutive days ending today with a mood entry.
        mood_logged_today:    A mood entry exists for today.
        symptom_logged_today: A symptom entry exists for today.
    """

    current_streak: int
    mood_logged_today: bool
    symptom_logged_today: bool

    @property
    def logged_today(self) -> bool:
        return self.mood_logged_today or self.symptom_logged_today


def mood_streak(entry_days: set[date], today: date) -> int:
    """Count back from today while each day has an entry.

    A day without an entry today means no active streak, even if
    yesterday was logged.
    """
    streak = 0
    day = today
    while day in entry_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def compute_logging_status(
    mood_dates: Iterable[date | datetime],
    symptom_dates: Iterable[date | datetime],
    today: date | datetime,
) -> LoggingStatus:
    """Summarize today's logging and the current mood streak.

    Args:
        mood_dates:    Timestamps of mood entries (any order, duplicates ok).
        symptom_dates: Timestamps of symptom entries.
        today:         Reference day; time of day is ignored.
    """
    today = to_calendar_date(today)
    mood_days = {to_calendar_date(d) for d in mood_dates}
    symptom_days = {to_calendar_date(d) for d in symptom_dates}
    return LoggingStatus(
        current_streak=mood_streak(mood_days, today),
        mood_logged_today=today in mood_days,
        symptom_logged_today=today in symptom_days,
    )
