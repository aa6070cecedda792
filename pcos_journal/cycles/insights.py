"""Insight unlock gate.

Analytics panels stay locked until enough underlying data exists for them
to mean anything.  Each feature counts one kind of entry (mood logs,
symptom logs, or logged cycles) against a threshold from engine_config.yaml.

The check is a plain ``current >= threshold``.  The gate keeps no memory of
past unlocks: callers that want a feature to stay unlocked after an entry is
deleted pass the names they have persisted in ``previously_unlocked``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from pcos_journal.cycles.config_loader import EngineConfig, InsightFeature, get_engine_config

logger = logging.getLogger("pcos_journal.cycles.insights")


@dataclass(frozen=True)
class ActivityCounts:
    """How much the user has logged so far."""

    mood: int = 0
    cycles: int = 0
    symptoms: int = 0

    def __post_init__(self) -> None:
        for name in ("mood", "cycles", "symptoms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} count cannot be negative: {getattr(self, name)}")

    @classmethod
    def from_mapping(cls, counts: Mapping[str, int]) -> ActivityCounts:
        return cls(
            mood=int(counts.get("mood", 0)),
            cycles=int(counts.get("cycles", 0)),
            symptoms=int(counts.get("symptoms", 0)),
        )

    def for_metric(self, metric: str) -> int:
        return getattr(self, metric)


@dataclass(frozen=True)
class FeatureUnlock:
    """Unlock progress for one insight feature.

    Attributes:
        feature:   Feature key (e.g. 'mood_trends').
        metric:    Which count gates it: 'mood', 'cycles' or 'symptoms'.
        threshold: Entries required.
        current:   Entries logged so far.
        unlocked:  current >= threshold, or previously unlocked by the caller.
        remaining: Entries still needed, never negative.
        label:     Display name for "N more to unlock ..." messaging.
    """

    feature: str
    metric: str
    threshold: int
    current: int
    unlocked: bool
    remaining: int
    label: str

    @property
    def progress_message(self) -> str | None:
        if self.unlocked:
            return None
        if self.remaining == 1:
            return f"Just 1 more to unlock {self.label}!"
        return f"{self.remaining} more to unlock {self.label}"


@dataclass
class InsightUnlockStatus:
    """Unlock state of every insight feature, in priority order."""

    features: dict[str, FeatureUnlock] = field(default_factory=dict)
    next_milestone: FeatureUnlock | None = None

    @property
    def all_unlocked(self) -> bool:
        return all(f.unlocked for f in self.features.values())


class InsightGate:
    """Evaluate insight unlock thresholds.

    Usage::

        gate = InsightGate()
        status = gate.evaluate(ActivityCounts(mood=5, cycles=1, symptoms=5))
        status.next_milestone.progress_message   # '2 more to unlock Mood Trends'
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    def evaluate(
        self,
        counts: ActivityCounts | Mapping[str, int],
        previously_unlocked: Iterable[str] = (),
    ) -> InsightUnlockStatus:
        """Compute unlock progress for all configured features.

        Args:
            counts:              Current entry counts.
            previously_unlocked: Feature keys the caller has already shown
                                 as unlocked; these never re-lock.

        Raises:
            ValueError: If any count is negative.
        """
        if not isinstance(counts, ActivityCounts):
            counts = ActivityCounts.from_mapping(counts)
        sticky = set(previously_unlocked)

        status = InsightUnlockStatus()
        for feature in self._config.insights.ordered_features():
            status.features[feature.name] = self._progress(
                feature, counts.for_metric(feature.metric), feature.name in sticky
            )

        # min() keeps the first of equal keys, and features are in priority order
        locked = [f for f in status.features.values() if not f.unlocked]
        if locked:
            status.next_milestone = min(locked, key=lambda f: f.remaining)
            logger.debug(
                "Next insight milestone: %s (%d remaining)",
                status.next_milestone.feature,
                status.next_milestone.remaining,
            )
        return status

    @staticmethod
    def _progress(feature: InsightFeature, current: int, sticky: bool) -> FeatureUnlock:
        met = current >= feature.threshold
        unlocked = met or sticky
        return FeatureUnlock(
            feature=feature.name,
            metric=feature.metric,
            threshold=feature.threshold,
            current=current,
            unlocked=unlocked,
            remaining=0 if unlocked else feature.threshold - current,
            label=feature.label,
        )


def compute_insight_unlock_status(
    counts: ActivityCounts | Mapping[str, int],
    config: EngineConfig | None = None,
    previously_unlocked: Iterable[str] = (),
) -> InsightUnlockStatus:
    """Evaluate the insight gate with the global (or given) config."""
    return InsightGate(config).evaluate(counts, previously_unlocked)
