"""Pydantic models for the cycle analysis endpoints.

Records travel as raw store rows (``dict``) rather than a strict schema so a
single malformed row is skipped with a warning instead of failing the whole
request with a 422.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import Field

from pcos_journal.cycles.records import FlowIntensity
from pcos_journal.models.base import JournalBase

MAX_RECORDS = 5000


# ---------- Requests ----------

class CycleRecordsRequest(JournalBase):
    records: list[dict[str, Any]] = Field(default_factory=list, max_length=MAX_RECORDS)


class CyclePhaseRequest(CycleRecordsRequest):
    # Defaults to the server's current date when omitted
    now: datetime | date | None = None


class CalendarRequest(CycleRecordsRequest):
    year: int = Field(ge=1900, le=2200)
    month: int = Field(ge=1, le=12)


class InsightsRequest(JournalBase):
    mood: int = Field(default=0, ge=0)
    cycles: int = Field(default=0, ge=0)
    symptoms: int = Field(default=0, ge=0)
    previously_unlocked: list[str] = Field(default_factory=list)


class LoggingStatusRequest(JournalBase):
    mood_dates: list[datetime | date] = Field(default_factory=list)
    symptom_dates: list[datetime | date] = Field(default_factory=list)
    today: datetime | date | None = None


# ---------- Responses ----------

class CycleStatsRead(JournalBase):
    total_cycles: int
    cycle_lengths: list[int]
    average_cycle_length: float | None = None
    average_period_length: float | None = None
    regularity_percentage: int | None = None
    last_period_start: date | None = None
    predicted_next_period: date | None = None
    predicted_ovulation: date | None = None
    fertile_window_start: date | None = None
    fertile_window_end: date | None = None
    average_symptoms: dict[str, float | None] = Field(default_factory=dict)
    has_predictions: bool = False
    message: str | None = None
    warnings: list[str] = Field(default_factory=list)


class CyclePhaseRead(JournalBase):
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
    is_due: bool


class CalendarDayRead(JournalBase):
    day: date
    is_period: bool
    flow_intensity: FlowIntensity | None = None
    is_predicted_period: bool
    is_fertile: bool
    is_ovulation: bool


class FeatureUnlockRead(JournalBase):
    feature: str
    metric: str
    threshold: int
    current: int
    unlocked: bool
    remaining: int
    label: str
    progress_message: str | None = None


class InsightUnlockRead(JournalBase):
    features: dict[str, FeatureUnlockRead]
    next_milestone: FeatureUnlockRead | None = None
    all_unlocked: bool


class LoggingStatusRead(JournalBase):
    current_streak: int
    mood_logged_today: bool
    symptom_logged_today: bool
    logged_today: bool
