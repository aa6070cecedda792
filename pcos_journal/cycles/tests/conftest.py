"""Shared fixtures for cycle engine tests."""

from __future__ import annotations

from datetime import date

import pytest

from pcos_journal.cycles.config_loader import EngineConfig, load_engine_config
from pcos_journal.cycles.records import CycleRecord, FlowIntensity


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine_config() -> EngineConfig:
    """Load the real bundled engine config for tests."""
    return load_engine_config()


# ---------------------------------------------------------------------------
# Record fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def three_cycles() -> list[CycleRecord]:
    """Starts 2024-01-01, 2024-01-29, 2024-02-27 (gaps 28 and 29)."""
    return [
        CycleRecord(
            period_start=date(2024, 1, 1),
            period_end=date(2024, 1, 5),
            flow_intensity=FlowIntensity.MODERATE,
            cramps=3,
            bloating=2,
        ),
        CycleRecord(
            period_start=date(2024, 1, 29),
            period_end=date(2024, 2, 2),
            flow_intensity=FlowIntensity.HEAVY,
            cramps=4,
        ),
        CycleRecord(
            period_start=date(2024, 2, 27),
            period_end=date(2024, 3, 2),
            flow_intensity=FlowIntensity.LIGHT,
            cramps=2,
            bloating=1,
        ),
    ]


@pytest.fixture
def irregular_cycles() -> list[CycleRecord]:
    """PCOS-like history: gaps 26, 41, 30, 52."""
    starts = [
        date(2024, 1, 3),
        date(2024, 1, 29),
        date(2024, 3, 10),
        date(2024, 4, 9),
        date(2024, 5, 31),
    ]
    return [CycleRecord(period_start=s) for s in starts]
