"""
Progression Configuration Loader

Loads the generator tunables (exercise selection, linear and undulating
progression, feedback adjustments, session shape limits) from
progression_config.yaml into frozen, validated dataclasses.

Supports explicit reloading for production updates without restart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from threading import RLock
from typing import Any, Callable

import yaml

from petrapp.models.enums import TrainingPhase

logger = logging.getLogger(__name__)

DEFAULT_PROGRESSION_CONFIG_PATH = Path(__file__).parent / "progression_config.yaml"


class ProgressionConfigLoadError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}


class ProgressionConfigValidationError(ProgressionConfigLoadError):
    """Raised when configuration fails validation."""


@dataclass(frozen=True)
class RepRange:
    """Inclusive rep bounds."""

    min_reps: int
    max_reps: int

    def __post_init__(self):
        if not 0 < self.min_reps <= self.max_reps:
            raise ProgressionConfigValidationError(
                f"min_reps ({self.min_reps}) must be > 0 and <= max_reps ({self.max_reps})"
            )

    def contains(self, min_reps: int, max_reps: int) -> bool:
        return min_reps >= self.min_reps and max_reps <= self.max_reps


@dataclass(frozen=True)
class SelectionConfig:
    """Exercise selection tunables."""

    exercises_per_workout: int = 5
    continuity_ratio: float = 0.8
    min_compound_primary_muscles: int = 2

    def __post_init__(self):
        if self.exercises_per_workout <= 0:
            raise ProgressionConfigValidationError(
                f"exercises_per_workout must be > 0, got {self.exercises_per_workout}"
            )
        if not 0 <= self.continuity_ratio <= 1:
            raise ProgressionConfigValidationError(
                f"continuity_ratio ({self.continuity_ratio}) must be between 0 and 1"
            )
        if self.min_compound_primary_muscles < 1:
            raise ProgressionConfigValidationError(
                f"min_compound_primary_muscles must be >= 1, got {self.min_compound_primary_muscles}"
            )


@dataclass(frozen=True)
class DefaultSetsConfig:
    """Sets handed out for an exercise the user has never performed."""

    set_count: int = 3
    reps: int = 8

    def __post_init__(self):
        if self.set_count <= 0:
            raise ProgressionConfigValidationError(
                f"set_count must be > 0, got {self.set_count}"
            )
        if self.reps <= 0:
            raise ProgressionConfigValidationError(f"reps must be > 0, got {self.reps}")


@dataclass(frozen=True)
class LinearProgressionConfig:
    """Beginner (linear) progression."""

    weight_increment_kg: float = 2.5
    weight_reduction_factor: float = 0.1

    def __post_init__(self):
        if self.weight_increment_kg < 0:
            raise ProgressionConfigValidationError(
                f"weight_increment_kg must be >= 0, got {self.weight_increment_kg}"
            )
        if not 0 <= self.weight_reduction_factor <= 1:
            raise ProgressionConfigValidationError(
                f"weight_reduction_factor ({self.weight_reduction_factor}) must be between 0 and 1"
            )


@dataclass(frozen=True)
class UndulatingProgressionConfig:
    """Experienced-user undulating periodization."""

    phases: dict[TrainingPhase, RepRange]
    transition_factors: dict[TrainingPhase, float]
    weight_increment_kg: float = 2.5
    consecutive_max_completions: int = 2

    def __post_init__(self):
        missing = [phase.value for phase in TrainingPhase if phase not in self.phases]
        if missing:
            raise ProgressionConfigValidationError(
                f"rep ranges missing for phases: {missing}"
            )
        missing = [
            phase.value for phase in TrainingPhase if phase not in self.transition_factors
        ]
        if missing:
            raise ProgressionConfigValidationError(
                f"transition factors missing for phases: {missing}"
            )
        for phase, factor in self.transition_factors.items():
            if factor <= 0:
                raise ProgressionConfigValidationError(
                    f"transition factor into {phase.value} must be > 0, got {factor}"
                )
        if self.consecutive_max_completions < 1:
            raise ProgressionConfigValidationError(
                f"consecutive_max_completions must be >= 1, got {self.consecutive_max_completions}"
            )

    def rep_range(self, phase: TrainingPhase) -> RepRange:
        return self.phases[phase]

    def factor_into(self, phase: TrainingPhase) -> float:
        """Weight multiplier applied when a user moves into ``phase``."""
        return self.transition_factors[phase]


@dataclass(frozen=True)
class FeedbackConfig:
    """Adjustments driven by the user's post-session difficulty rating."""

    too_easy_increment_kg: float = 5.0
    too_difficult_reduction_factor: float = 0.1
    max_standard_sets: int = 3

    def __post_init__(self):
        if self.too_easy_increment_kg < 0:
            raise ProgressionConfigValidationError(
                f"too_easy_increment_kg must be >= 0, got {self.too_easy_increment_kg}"
            )
        if not 0 <= self.too_difficult_reduction_factor <= 1:
            raise ProgressionConfigValidationError(
                f"too_difficult_reduction_factor ({self.too_difficult_reduction_factor}) "
                "must be between 0 and 1"
            )
        if self.max_standard_sets < 1:
            raise ProgressionConfigValidationError(
                f"max_standard_sets must be >= 1, got {self.max_standard_sets}"
            )


@dataclass(frozen=True)
class SessionLimitsConfig:
    """Shape bounds every generated session must respect."""

    min_exercises: int = 5
    max_exercises: int = 8
    min_sets: int = 3
    max_sets: int = 6
    min_reps: int = 3
    max_reps: int = 16

    def __post_init__(self):
        for name, low, high in [
            ("exercises", self.min_exercises, self.max_exercises),
            ("sets", self.min_sets, self.max_sets),
            ("reps", self.min_reps, self.max_reps),
        ]:
            if not 0 < low <= high:
                raise ProgressionConfigValidationError(
                    f"min_{name} ({low}) must be > 0 and <= max_{name} ({high})"
                )


@dataclass(frozen=True)
class ProgressionConfig:
    """Unified progression configuration."""

    version: str
    last_updated: str
    beginner_period_days: int
    selection: SelectionConfig
    defaults: DefaultSetsConfig
    linear: LinearProgressionConfig
    undulating: UndulatingProgressionConfig
    feedback: FeedbackConfig
    limits: SessionLimitsConfig

    def __post_init__(self):
        if self.beginner_period_days < 0:
            raise ProgressionConfigValidationError(
                f"beginner_period_days must be >= 0, got {self.beginner_period_days}"
            )


def _parse_phase_map(data: dict[str, Any], section: str) -> dict[TrainingPhase, Any]:
    parsed = {}
    for key, value in data.items():
        try:
            parsed[TrainingPhase(key)] = value
        except ValueError:
            raise ProgressionConfigValidationError(
                f"unknown training phase '{key}' in {section}"
            )
    return parsed


def _parse_transition_factors(data: dict[str, Any]) -> dict[TrainingPhase, float]:
    """Map ``<from>_to_<to>`` keys onto the phase being entered."""
    factors = {}
    for key, value in data.items():
        source, sep, target = key.partition("_to_")
        if not sep:
            raise ProgressionConfigValidationError(
                f"transition factor key '{key}' must look like '<from>_to_<to>'"
            )
        parsed = _parse_phase_map({source: None, target: None}, "transition_factors")
        if len(parsed) != 2:
            raise ProgressionConfigValidationError(
                f"transition factor key '{key}' must name two different phases"
            )
        factors[TrainingPhase(target)] = float(value)
    return factors


def parse_progression_config(data: dict[str, Any]) -> ProgressionConfig:
    """Parse raw YAML data into ProgressionConfig.

    Args:
        data: Raw YAML data as dictionary.

    Returns:
        Parsed ProgressionConfig.

    Raises:
        ProgressionConfigValidationError: If validation fails.
    """
    undulating_data = dict(data.get("undulating", {}))
    phases_data = _parse_phase_map(undulating_data.pop("phases", {}), "phases")
    phases = {phase: RepRange(**bounds) for phase, bounds in phases_data.items()}
    transition_factors = _parse_transition_factors(
        undulating_data.pop("transition_factors", {})
    )

    return ProgressionConfig(
        version=str(data.get("version", "1.0.0")),
        last_updated=str(data.get("last_updated", "")),
        beginner_period_days=data.get("beginner_period_days", 90),
        selection=SelectionConfig(**data.get("selection", {})),
        defaults=DefaultSetsConfig(**data.get("defaults", {})),
        linear=LinearProgressionConfig(**data.get("linear", {})),
        undulating=UndulatingProgressionConfig(
            phases=phases,
            transition_factors=transition_factors,
            **undulating_data,
        ),
        feedback=FeedbackConfig(**data.get("feedback", {})),
        limits=SessionLimitsConfig(**data.get("limits", {})),
    )


class ProgressionConfigLoader:
    """Loader for the progression configuration with reload support."""

    def __init__(self, config_path: Path | None = None):
        self._lock = RLock()
        self._config: ProgressionConfig | None = None
        self._config_path = Path(config_path or DEFAULT_PROGRESSION_CONFIG_PATH)
        self._reload_callbacks: list[Callable[[ProgressionConfig], None]] = []
        self._reload_count = 0

        self._load_config()

    @property
    def config_path(self) -> Path:
        return self._config_path

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            with open(self._config_path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ProgressionConfigLoadError(
                f"Configuration file not found: {self._config_path}"
            )
        except yaml.YAMLError as e:
            raise ProgressionConfigLoadError(
                f"Failed to parse YAML configuration: {e}",
                details={"file_path": str(self._config_path)},
            )

        if not isinstance(data, dict):
            raise ProgressionConfigLoadError(
                "Configuration root must be a mapping",
                details={"file_path": str(self._config_path)},
            )

        try:
            self._config = parse_progression_config(data)
        except ProgressionConfigValidationError:
            raise
        except (TypeError, ValueError) as e:
            raise ProgressionConfigLoadError(
                f"Failed to parse configuration: {e}",
                details={"file_path": str(self._config_path)},
            )

        self._reload_count += 1
        logger.info(
            f"Loaded progression config {self._config.version} from {self._config_path}"
        )
        self._notify_callbacks()

    @property
    def config(self) -> ProgressionConfig:
        """Get current configuration (thread-safe)."""
        with self._lock:
            if self._config is None:
                self._load_config()
            return self._config

    def reload(self) -> None:
        """Force reload configuration from file."""
        with self._lock:
            self._load_config()

    def register_reload_callback(
        self, callback: Callable[[ProgressionConfig], None]
    ) -> None:
        """Register a callback to be called on configuration reload."""
        self._reload_callbacks.append(callback)

    def _notify_callbacks(self) -> None:
        if self._config is None:
            return
        for callback in self._reload_callbacks:
            try:
                callback(self._config)
            except Exception:
                logger.exception("Progression config reload callback failed")

    @property
    def reload_count(self) -> int:
        """Get number of times configuration has been loaded."""
        return self._reload_count


_loader_instance: ProgressionConfigLoader | None = None
_loader_lock = RLock()


def get_progression_config_loader(
    config_path: Path | None = None,
) -> ProgressionConfigLoader:
    """Get or create the singleton ProgressionConfigLoader instance.

    Without an explicit ``config_path`` the ``PETRAPP_PROGRESSION_CONFIG_PATH``
    setting is consulted before falling back to the bundled YAML file.

    Example:
        >>> loader = get_progression_config_loader()
        >>> loader.config.selection.exercises_per_workout
        5
    """
    global _loader_instance
    with _loader_lock:
        if _loader_instance is None:
            if config_path is None:
                from petrapp.config.settings import get_settings

                config_path = get_settings().progression_config_path
            _loader_instance = ProgressionConfigLoader(config_path)
        return _loader_instance


def get_progression_config() -> ProgressionConfig:
    """Get current progression configuration.

    Example:
        >>> from petrapp.config.progression_config_loader import get_progression_config
        >>> get_progression_config().beginner_period_days
        90
    """
    return get_progression_config_loader().config


def reload_progression_config() -> None:
    """Force reload progression configuration from file."""
    get_progression_config_loader().reload()
