"""Logged period records, the only input the cycle engine consumes.

Records arrive from the record store as JSON rows (camelCase keys, ISO date
strings).  ``load_cycle_records`` turns those rows into ``CycleRecord``
objects, skipping any row it cannot parse so one bad entry never blocks the
rest of the history.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Mapping

logger = logging.getLogger("pcos_journal.cycles.records")

SEVERITY_MIN = 0
SEVERITY_MAX = 5
SYMPTOM_FIELDS = ("cramps", "bloating", "mood_swings")

# Row key → attribute.  The store speaks camelCase, Python callers snake_case.
_KEY_ALIASES = {
    "id": "record_id",
    "record_id": "record_id",
    "periodStartDate": "period_start",
    "period_start_date": "period_start",
    "period_start": "period_start",
    "periodEndDate": "period_end",
    "period_end_date": "period_end",
    "period_end": "period_end",
    "flowIntensity": "flow_intensity",
    "flow_intensity": "flow_intensity",
    "cramps": "cramps",
    "bloating": "bloating",
    "moodSwings": "mood_swings",
    "mood_swings": "mood_swings",
}


class FlowIntensity(str, Enum):
    SPOTTING = "SPOTTING"
    LIGHT = "LIGHT"
    MODERATE = "MODERATE"
    HEAVY = "HEAVY"


class InvalidCycleRecord(ValueError):
    """Raised when a raw row cannot be turned into a CycleRecord."""


@dataclass(frozen=True)
class CycleRecord:
    """One logged menstrual period.

    Attributes:
        period_start:   First day of bleeding (user-entered ground truth).
        period_end:     Last day of bleeding, None while ongoing or unrecorded.
        flow_intensity: Heaviest flow logged for the period.
        cramps:         Severity 0–5.
        bloating:       Severity 0–5.
        mood_swings:    Severity 0–5.
        record_id:      Opaque store identifier, passed through untouched.
    """

    period_start: date
    period_end: date | None = None
    flow_intensity: FlowIntensity | None = None
    cramps: int | None = None
    bloating: int | None = None
    mood_swings: int | None = None
    record_id: str | None = None

    @property
    def is_well_formed(self) -> bool:
        return self.period_end is None or self.period_end >= self.period_start

    @property
    def period_length(self) -> int | None:
        """Days of bleeding, counting both start and end day."""
        if self.period_end is None or not self.is_well_formed:
            return None
        return (self.period_end - self.period_start).days + 1

    def contains(self, day: date) -> bool:
        """True if ``day`` falls within this period (start only when no end)."""
        end = self.period_end if self.is_well_formed and self.period_end else self.period_start
        return self.period_start <= day <= end

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> CycleRecord:
        """Parse a raw store row.

        Raises:
            InvalidCycleRecord: Missing or unparseable start date, bad end
                date, unknown flow intensity, or out-of-range severity.
        """
        values: dict[str, Any] = {}
        for key, val in row.items():
            attr = _KEY_ALIASES.get(key)
            if attr is not None:
                values[attr] = val

        if values.get("period_start") in (None, ""):
            raise InvalidCycleRecord("periodStartDate is required")

        start = _parse_date(values["period_start"], "periodStartDate")
        end_raw = values.get("period_end")
        end = _parse_date(end_raw, "periodEndDate") if end_raw not in (None, "") else None

        flow_raw = values.get("flow_intensity")
        flow = None
        if flow_raw not in (None, ""):
            try:
                flow = FlowIntensity(str(flow_raw).upper())
            except ValueError as exc:
                raise InvalidCycleRecord(f"Unknown flowIntensity {flow_raw!r}") from exc

        severities = {name: _parse_severity(values.get(name), name) for name in SYMPTOM_FIELDS}
        record_id = values.get("record_id")

        return cls(
            period_start=start,
            period_end=end,
            flow_intensity=flow,
            record_id=str(record_id) if record_id is not None else None,
            **severities,
        )


def _parse_date(value: Any, name: str) -> date:
    # datetime is a date subclass; check it first so the time is dropped
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise InvalidCycleRecord(f"{name} is not an ISO date: {value!r}") from exc
    raise InvalidCycleRecord(f"{name} must be a date or ISO string, got {type(value).__name__}")


def _parse_severity(value: Any, name: str) -> int | None:
    if value in (None, ""):
        return None
    # bool is an int subclass, and int() would truncate 2.7 to 2
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidCycleRecord(f"{name} must be an integer, got {value!r}")
    try:
        num = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCycleRecord(f"{name} must be an integer, got {value!r}") from exc
    if not SEVERITY_MIN <= num <= SEVERITY_MAX:
        raise InvalidCycleRecord(f"{name} = {num} is outside {SEVERITY_MIN}–{SEVERITY_MAX}")
    return num


def load_cycle_records(
    rows: Iterable[Mapping[str, Any]],
) -> tuple[list[CycleRecord], list[str]]:
    """Parse store rows, skipping malformed ones.

    Args:
        rows: Raw rows as returned by the record store.

    Returns:
        ``(records, warnings)``: the parsed records in input order and one
        warning string per skipped row.
    """
    records: list[CycleRecord] = []
    warnings: list[str] = []
    for idx, row in enumerate(rows):
        try:
            records.append(CycleRecord.from_dict(row))
        except InvalidCycleRecord as exc:
            msg = f"Skipped cycle record #{idx}: {exc}"
            logger.warning(msg)
            warnings.append(msg)
    return records, warnings
