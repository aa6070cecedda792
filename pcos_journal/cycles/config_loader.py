"""Load, validate, and hot-reload the cycle analysis engine configuration.

The config lives in ``engine_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_engine_config()`` to re-read from
disk after an admin update, no restart required.

Usage::

    from pcos_journal.cycles.config_loader import get_engine_config

    config = get_engine_config()
    config.cycle.default_cycle_length          # 28
    config.phase_boundaries.phase_for_day(14)  # 'ovulation'
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger("pcos_journal.cycles.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "engine_config.yaml"

PHASES = ("menstrual", "follicular", "ovulation", "luteal")
METRICS = ("mood", "cycles", "symptoms")


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleConfig:
    """Day-count assumptions used for predictions."""

    default_cycle_length: int = 28
    regularity_tolerance_days: int = 3
    ovulation_offset_days: int = 14
    fertile_days_before_ovulation: int = 5
    fertile_days_after_ovulation: int = 1
    predicted_period_extra_days: int = 5


@dataclass(frozen=True)
class PhaseBoundaries:
    """Last cycle day (inclusive) of each phase.  Anything later is luteal."""

    menstrual_end_day: int = 5
    follicular_end_day: int = 13
    ovulation_end_day: int = 16

    def phase_for_day(self, cycle_day: int) -> str | None:
        """Return the phase name for a 1-indexed cycle day.

        Returns None for days before 1 (future-dated period start).
        """
        if cycle_day < 1:
            return None
        if cycle_day <= self.menstrual_end_day:
            return "menstrual"
        if cycle_day <= self.follicular_end_day:
            return "follicular"
        if cycle_day <= self.ovulation_end_day:
            return "ovulation"
        return "luteal"


@dataclass(frozen=True)
class InsightFeature:
    """One gated insight feature and the data it needs."""

    name: str
    metric: str      # 'mood' | 'cycles' | 'symptoms'
    threshold: int
    label: str


@dataclass(frozen=True)
class InsightsConfig:
    """Unlock thresholds and the milestone tie-break order."""

    features: dict[str, InsightFeature]
    priority: tuple[str, ...]

    def ordered_features(self) -> list[InsightFeature]:
        return [self.features[name] for name in self.priority]


@dataclass
class EngineConfig:
    """Complete, validated engine configuration.

    This is the single in-memory representation of engine_config.yaml.
    The stats calculator, phase resolver, calendar, and insight gate all
    read from this object.
    """

    version: str
    cycle: CycleConfig
    phase_boundaries: PhaseBoundaries
    insights: InsightsConfig
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when engine_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    try:
        import yaml  # pyyaml
    except ImportError as exc:
        raise ImportError(
            "pyyaml is required for config loading. Install with: pip install pyyaml"
        ) from exc

    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> EngineConfig:
    """Validate the raw YAML dict and construct an EngineConfig.

    Missing sections fall back to the built-in defaults; present values
    are type-checked and range-checked.  All problems are collected and
    reported together.

    Raises:
        ConfigValidationError: If any value is invalid.
    """
    errors: list[str] = []

    if not isinstance(raw, dict):
        errors.append(f"top level must be a mapping, got {type(raw).__name__}")
        raw = {}

    def _section(parent: dict, key: str, where: str) -> dict:
        val = parent.get(key)
        if val is None:
            return {}
        if not isinstance(val, dict):
            errors.append(f"{where} must be a mapping, got {type(val).__name__}")
            return {}
        return val

    def _int(section: dict, key: str, default: int, where: str, minimum: int = 0) -> int:
        val = section.get(key, default)
        if isinstance(val, bool) or (isinstance(val, float) and not val.is_integer()):
            errors.append(f"{where}.{key} must be an integer, got {val!r}")
            return default
        try:
            num = int(val)
        except (TypeError, ValueError):
            errors.append(f"{where}.{key} must be an integer, got {val!r}")
            return default
        if num < minimum:
            errors.append(f"{where}.{key} = {num} must be >= {minimum}")
        return num

    version = str(raw.get("version", "1.0"))

    # ── Cycle ──
    c_raw = _section(raw, "cycle", "cycle")
    fw_raw = _section(c_raw, "fertile_window", "cycle.fertile_window")
    defaults = CycleConfig()
    cycle = CycleConfig(
        default_cycle_length=_int(c_raw, "default_cycle_length", defaults.default_cycle_length, "cycle", 1),
        regularity_tolerance_days=_int(c_raw, "regularity_tolerance_days", defaults.regularity_tolerance_days, "cycle"),
        ovulation_offset_days=_int(c_raw, "ovulation_offset_days", defaults.ovulation_offset_days, "cycle", 1),
        fertile_days_before_ovulation=_int(
            fw_raw, "days_before_ovulation", defaults.fertile_days_before_ovulation, "cycle.fertile_window"
        ),
        fertile_days_after_ovulation=_int(
            fw_raw, "days_after_ovulation", defaults.fertile_days_after_ovulation, "cycle.fertile_window"
        ),
        predicted_period_extra_days=_int(
            c_raw, "predicted_period_extra_days", defaults.predicted_period_extra_days, "cycle"
        ),
    )

    # ── Phase boundaries ──
    pb_raw = _section(raw, "phase_boundaries", "phase_boundaries")
    pb_defaults = PhaseBoundaries()
    boundaries = PhaseBoundaries(
        menstrual_end_day=_int(pb_raw, "menstrual_end_day", pb_defaults.menstrual_end_day, "phase_boundaries", 1),
        follicular_end_day=_int(pb_raw, "follicular_end_day", pb_defaults.follicular_end_day, "phase_boundaries", 1),
        ovulation_end_day=_int(pb_raw, "ovulation_end_day", pb_defaults.ovulation_end_day, "phase_boundaries", 1),
    )
    if not (boundaries.menstrual_end_day < boundaries.follicular_end_day < boundaries.ovulation_end_day):
        errors.append(
            "phase_boundaries must be strictly increasing "
            f"(got {boundaries.menstrual_end_day}/{boundaries.follicular_end_day}/"
            f"{boundaries.ovulation_end_day})"
        )

    # ── Insights ──
    in_raw = _section(raw, "insights", "insights")
    features_raw = _section(in_raw, "features", "insights.features")
    if not in_raw.get("features"):
        errors.append("'insights.features' section is missing or empty")

    features: dict[str, InsightFeature] = {}
    for key, cfg in features_raw.items():
        name = str(key)
        if not isinstance(cfg, dict):
            errors.append(f"insights.features.{name} must be a mapping")
            continue
        metric = cfg.get("metric")
        if metric not in METRICS:
            errors.append(
                f"insights.features.{name}.metric must be one of {', '.join(METRICS)}, got {metric!r}"
            )
        features[name] = InsightFeature(
            name=name,
            metric=str(metric),
            threshold=_int(cfg, "threshold", 1, f"insights.features.{name}", 1),
            label=str(cfg.get("label") or name.replace("_", " ").title()),
        )

    priority_raw = in_raw.get("priority") or list(features)
    if not isinstance(priority_raw, list):
        errors.append(f"insights.priority must be a list, got {type(priority_raw).__name__}")
        priority_raw = list(features)
    priority = tuple(str(name) for name in priority_raw)
    if sorted(priority) != sorted(features):
        errors.append(
            "insights.priority must list every feature exactly once "
            f"(features: {sorted(features)}, priority: {list(priority)})"
        )

    if errors:
        raise ConfigValidationError(
            f"engine_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return EngineConfig(
        version=version,
        cycle=cycle,
        phase_boundaries=boundaries,
        insights=InsightsConfig(features=features, priority=priority),
        _raw=raw,
    )


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load and validate the engine config from disk.

    Args:
        path: Override path to YAML. Uses the bundled engine_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded engine config v%s from %s", config.version, target)
    return config


def _configured_path() -> Path | None:
    from pcos_journal.config import get_settings

    configured = get_settings().engine_config_path
    return Path(configured).expanduser() if configured else None


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_engine_config() -> EngineConfig:
    """Return the global EngineConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_engine_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_engine_config(_configured_path())
    return _config


def reload_engine_config(path: Path | None = None) -> EngineConfig:
    """Reload the engine config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_engine_config(path or _configured_path())  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded engine config: %s → %s", old_version, new_config.version)
    return new_config


def engine_config_from_dict(raw: dict[str, Any]) -> EngineConfig:
    """Build a config from an in-memory mapping (tests, per-call overrides)."""
    return _validate_and_build(raw)
