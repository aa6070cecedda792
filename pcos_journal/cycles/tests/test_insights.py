"""Tests for the insight unlock gate."""

from __future__ import annotations

import pytest

from pcos_journal.cycles.config_loader import EngineConfig
from pcos_journal.cycles.insights import (
    ActivityCounts,
    InsightGate,
    compute_insight_unlock_status,
)


class TestUnlockThresholds:
    def test_default_thresholds(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status(ActivityCounts(), engine_config)
        thresholds = {name: f.threshold for name, f in status.features.items()}
        assert thresholds == {"mood_trends": 7, "symptom_patterns": 5, "correlations": 2}

    def test_features_in_priority_order(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status(ActivityCounts(), engine_config)
        assert list(status.features) == ["mood_trends", "symptom_patterns", "correlations"]

    def test_each_feature_counts_its_metric(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status(
            ActivityCounts(mood=3, cycles=1, symptoms=4), engine_config
        )
        assert status.features["mood_trends"].current == 3
        assert status.features["correlations"].current == 1
        assert status.features["symptom_patterns"].current == 4

    def test_unlocked_at_threshold(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status({"mood": 7}, engine_config)
        mood = status.features["mood_trends"]
        assert mood.unlocked
        assert mood.remaining == 0
        assert mood.progress_message is None

    def test_remaining_never_negative(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status(
            ActivityCounts(mood=100, cycles=100, symptoms=100), engine_config
        )
        assert all(f.remaining == 0 for f in status.features.values())
        assert status.all_unlocked
        assert status.next_milestone is None

    def test_unlock_is_monotonic(self, engine_config: EngineConfig) -> None:
        gate = InsightGate(engine_config)
        previously = False
        for mood in range(0, 20):
            unlocked = gate.evaluate(ActivityCounts(mood=mood)).features["mood_trends"].unlocked
            if previously:
                assert unlocked
            previously = unlocked

    def test_negative_count_rejected(self, engine_config: EngineConfig) -> None:
        with pytest.raises(ValueError, match="negative"):
            compute_insight_unlock_status({"mood": -1}, engine_config)


class TestNextMilestone:
    def test_smallest_remaining_wins(self, engine_config: EngineConfig) -> None:
        # mood needs 2 more, symptoms 4 more, cycles 1 more
        status = compute_insight_unlock_status(
            ActivityCounts(mood=5, cycles=1, symptoms=1), engine_config
        )
        assert status.next_milestone is not None
        assert status.next_milestone.feature == "correlations"
        assert status.next_milestone.remaining == 1

    def test_tie_broken_by_priority(self, engine_config: EngineConfig) -> None:
        # mood needs 2, symptoms needs 2, cycles needs 2
        status = compute_insight_unlock_status(
            ActivityCounts(mood=5, cycles=0, symptoms=3), engine_config
        )
        assert status.next_milestone is not None
        assert status.next_milestone.feature == "mood_trends"

    def test_tie_between_lower_priority_features(self, engine_config: EngineConfig) -> None:
        # mood unlocked; symptoms and cycles both need 1
        status = compute_insight_unlock_status(
            ActivityCounts(mood=9, cycles=1, symptoms=4), engine_config
        )
        assert status.next_milestone is not None
        assert status.next_milestone.feature == "symptom_patterns"

    def test_progress_messages(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status(
            ActivityCounts(mood=4, cycles=1, symptoms=0), engine_config
        )
        assert status.features["mood_trends"].progress_message == "3 more to unlock Mood Trends"
        assert (
            status.features["correlations"].progress_message
            == "Just 1 more to unlock Cycle Correlations!"
        )


class TestPreviouslyUnlocked:
    def test_sticky_feature_stays_unlocked(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status(
            ActivityCounts(mood=6), engine_config, previously_unlocked=["mood_trends"]
        )
        mood = status.features["mood_trends"]
        assert mood.unlocked
        assert mood.remaining == 0
        assert mood.current == 6

    def test_without_sticky_feature_relocks(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status(ActivityCounts(mood=6), engine_config)
        assert not status.features["mood_trends"].unlocked

    def test_sticky_feature_excluded_from_milestone(self, engine_config: EngineConfig) -> None:
        status = compute_insight_unlock_status(
            ActivityCounts(mood=6, cycles=0, symptoms=0),
            engine_config,
            previously_unlocked={"mood_trends"},
        )
        assert status.next_milestone is not None
        assert status.next_milestone.feature == "correlations"
