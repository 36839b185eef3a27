"""
Load/Rep Progression Engine

Derives the sets for an exercise from its most recent performance:

- No history: default sets, weight 0 so the user picks a starting load.
- Beginners (< beginner_period_days since the first recorded session):
  linear progression on the last performance.
- Experienced users: undulating periodization cycling
  strength -> hypertrophy -> endurance -> strength.

The user's most recent difficulty rating for a session containing the
exercise is applied afterwards as a final adjustment.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from enum import Enum
from typing import Sequence

from petrapp.config.progression_config_loader import ProgressionConfig, RepRange
from petrapp.models import Exercise, ExerciseSet, FeedbackLevel, Session, Set, TrainingPhase
from petrapp.services import history as history_lookup

logger = logging.getLogger(__name__)

_PHASE_CYCLE = {
    TrainingPhase.STRENGTH: TrainingPhase.HYPERTROPHY,
    TrainingPhase.HYPERTROPHY: TrainingPhase.ENDURANCE,
    TrainingPhase.ENDURANCE: TrainingPhase.STRENGTH,
}


class CompletionStatus(str, Enum):
    """How the previous performance of an exercise went."""
    NOT_COMPLETED = "not_completed"
    FAILED = "failed"
    COMPLETED_MAX = "completed_max"
    COMPLETED_PARTIAL = "completed_partial"


def evaluate_completion(sets: Sequence[Set]) -> CompletionStatus:
    all_at_max = True
    any_failed = False

    for s in sets:
        if s.completed_reps is None:
            return CompletionStatus.NOT_COMPLETED
        if s.completed_reps < s.min_reps:
            any_failed = True
        elif s.completed_reps < s.max_reps:
            all_at_max = False

    if any_failed:
        return CompletionStatus.FAILED
    if all_at_max:
        return CompletionStatus.COMPLETED_MAX
    return CompletionStatus.COMPLETED_PARTIAL


def all_sets_completed_at_max(sets: Sequence[Set]) -> bool:
    if not sets:
        return False
    return all(s.completed_reps is not None and s.completed_reps >= s.max_reps for s in sets)


def determine_phase(sets: Sequence[Set], config: ProgressionConfig) -> TrainingPhase:
    """Identify the training phase from the rep range of the first set."""
    if not sets:
        return TrainingPhase.HYPERTROPHY

    min_reps, max_reps = sets[0].min_reps, sets[0].max_reps
    # Declaration order matters: 12 reps belongs to hypertrophy before endurance.
    for phase in (TrainingPhase.STRENGTH, TrainingPhase.HYPERTROPHY, TrainingPhase.ENDURANCE):
        if config.undulating.rep_range(phase).contains(min_reps, max_reps):
            return phase
    return TrainingPhase.HYPERTROPHY


def next_phase(phase: TrainingPhase) -> TrainingPhase:
    return _PHASE_CYCLE[phase]


def _build_set(weight: float | None, min_reps: int, max_reps: int, bodyweight: bool) -> Set:
    if bodyweight:
        weight = None
    elif weight is not None:
        weight = max(weight, 0.0)
    return Set(
        weight_kg=weight,
        adjusted_weight_kg=weight,
        min_reps=min_reps,
        max_reps=max_reps,
        completed_reps=None,
    )


def copy_without_completion(sets: Sequence[Set], bodyweight: bool = False) -> list[Set]:
    return [_build_set(s.weight_kg, s.min_reps, s.max_reps, bodyweight) for s in sets]


def increase_weight(sets: Sequence[Set], increment: float, bodyweight: bool = False) -> list[Set]:
    return [
        _build_set(
            None if s.weight_kg is None else s.weight_kg + increment,
            s.min_reps,
            s.max_reps,
            bodyweight,
        )
        for s in sets
    ]


def reduce_weight(sets: Sequence[Set], factor: float, bodyweight: bool = False) -> list[Set]:
    """Reduce weight by ``factor`` (0.1 == 10%), floored at 0."""
    return [
        _build_set(
            None if s.weight_kg is None else max(s.weight_kg - s.weight_kg * factor, 0.0),
            s.min_reps,
            s.max_reps,
            bodyweight,
        )
        for s in sets
    ]


def default_sets(exercise: Exercise, config: ProgressionConfig) -> list[Set]:
    weight = None if exercise.is_bodyweight else 0.0
    reps = config.defaults.reps
    return [
        _build_set(weight, reps, reps, exercise.is_bodyweight)
        for _ in range(config.defaults.set_count)
    ]


class ProgressionEngine:
    """Computes the next sets for an exercise from a user's history."""

    def __init__(
        self,
        history: Sequence[Session],
        config: ProgressionConfig,
        today: date,
    ):
        self._history = list(history)
        self._config = config
        self._today = today
        self._is_beginner = self._classify_beginner()

    @property
    def is_beginner(self) -> bool:
        return self._is_beginner

    def _classify_beginner(self) -> bool:
        first = history_lookup.earliest_date(self._history)
        if first is None:
            return True
        return self._today - first < timedelta(days=self._config.beginner_period_days)

    def find_last_performance(
        self,
        exercise: Exercise,
        anchor: Session | None,
    ) -> tuple[Session, ExerciseSet] | None:
        """The anchor session's sets for the exercise, else its latest performance anywhere."""
        if anchor is not None:
            exercise_set = anchor.find_exercise_set(exercise.id)
            if exercise_set is not None and exercise_set.sets:
                return anchor, exercise_set

        found = history_lookup.last_session_with_exercise(self._history, exercise.id)
        if found is None or not found[1].sets:
            return None
        return found

    def determine_sets(self, exercise: Exercise, anchor: Session | None = None) -> list[Set]:
        """Sets, reps and weight for ``exercise`` in the next session."""
        performance = self.find_last_performance(exercise, anchor)
        if performance is None:
            return default_sets(exercise, self._config)

        source_session, last = performance
        previous = self._normalize(last.sets, exercise.is_bodyweight)

        if self._is_beginner:
            sets = self.progress_linear(previous, exercise.is_bodyweight)
        else:
            sets = self.progress_undulating(
                exercise, previous, source_session.workout_date
            )

        feedback = history_lookup.most_recent_feedback(self._history, exercise.id)
        if feedback is not None:
            sets = self.apply_feedback(sets, feedback, exercise.is_bodyweight)

        logger.debug(
            f"Progressed {exercise.name} from {source_session.workout_date}: "
            f"{len(sets)}x{sets[0].min_reps}-{sets[0].max_reps} @ {sets[0].weight_kg} "
            f"(beginner={self._is_beginner}, feedback={feedback})"
        )
        return sets

    def progress_linear(self, sets: Sequence[Set], bodyweight: bool = False) -> list[Set]:
        """Linear progression for beginners."""
        status = evaluate_completion(sets)
        linear = self._config.linear

        if status == CompletionStatus.FAILED:
            return reduce_weight(sets, linear.weight_reduction_factor, bodyweight)
        if status == CompletionStatus.COMPLETED_MAX:
            return increase_weight(sets, linear.weight_increment_kg, bodyweight)
        # Not completed yet, or partially completed: repeat as is.
        return copy_without_completion(sets, bodyweight)

    def progress_undulating(
        self,
        exercise: Exercise,
        sets: Sequence[Set],
        performed_on: date,
    ) -> list[Set]:
        """Undulating periodization for experienced users."""
        undulating = self._config.undulating

        if not all_sets_completed_at_max(sets):
            return copy_without_completion(sets, exercise.is_bodyweight)

        streak = self.count_consecutive_max_completions(exercise.id, performed_on)
        if streak >= undulating.consecutive_max_completions:
            current = determine_phase(sets, self._config)
            target = next_phase(current)
            weight = sets[0].weight_kg
            if weight is not None:
                weight *= undulating.factor_into(target)
            logger.info(
                f"{exercise.name}: {streak} consecutive max completions, "
                f"moving {current.value} -> {target.value}"
            )
            return self._sets_for_phase(target, weight, exercise.is_bodyweight)

        return increase_weight(sets, undulating.weight_increment_kg, exercise.is_bodyweight)

    def count_consecutive_max_completions(self, exercise_id: int, until: date) -> int:
        """Consecutive performances, newest first from ``until``, with every set at max.

        Stops counting once the configured streak length is reached.
        """
        cap = self._config.undulating.consecutive_max_completions
        count = 0
        for exercise_set in history_lookup.exercise_sets_up_to(self._history, exercise_id, until):
            if not all_sets_completed_at_max(exercise_set.sets):
                break
            count += 1
            if count >= cap:
                break
        return count

    def apply_feedback(
        self,
        sets: Sequence[Set],
        feedback: int,
        bodyweight: bool = False,
    ) -> list[Set]:
        """Adjust the progressed sets for the user's last difficulty rating.

        - TOO_EASY: add ``too_easy_increment_kg`` (a weight of 0 stays 0).
        - TOO_DIFFICULT: drop the last set above ``max_standard_sets``,
          otherwise reduce weight by ``too_difficult_reduction_factor``.
        - OPTIMAL_LOW, OPTIMAL_MID, OPTIMAL_HIGH: sets are returned unchanged.
        """
        fb = self._config.feedback

        if feedback == FeedbackLevel.TOO_EASY:
            # Weight 0: no starting load picked yet, stays 0.
            if sets and sets[0].weight_kg:
                return increase_weight(sets, fb.too_easy_increment_kg, bodyweight)
            return list(sets)

        if feedback == FeedbackLevel.TOO_DIFFICULT:
            if len(sets) > fb.max_standard_sets:
                return list(sets[:-1])
            return reduce_weight(sets, fb.too_difficult_reduction_factor, bodyweight)

        return list(sets)

    def _sets_for_phase(
        self,
        phase: TrainingPhase,
        weight: float | None,
        bodyweight: bool,
    ) -> list[Set]:
        rep_range = self._clamp_range(self._config.undulating.rep_range(phase))
        return [
            _build_set(weight, rep_range.min_reps, rep_range.max_reps, bodyweight)
            for _ in range(self._config.defaults.set_count)
        ]

    def _clamp_range(self, rep_range: RepRange) -> RepRange:
        limits = self._config.limits
        low = min(max(rep_range.min_reps, limits.min_reps), limits.max_reps)
        high = max(min(rep_range.max_reps, limits.max_reps), low)
        return RepRange(low, high)

    def _normalize(self, sets: Sequence[Set], bodyweight: bool) -> list[Set]:
        """Bring a stored performance back within the session shape limits.

        All sets take the first set's rep range, and the set count is clamped
        to [min_sets, max_sets]. Completion data is kept for evaluation.
        """
        limits = self._config.limits
        rep_range = self._clamp_range(RepRange(sets[0].min_reps, sets[0].max_reps))

        normalized = [
            s.model_copy(
                update={
                    "min_reps": rep_range.min_reps,
                    "max_reps": rep_range.max_reps,
                    "weight_kg": None if bodyweight else s.weight_kg,
                    "adjusted_weight_kg": None if bodyweight else s.adjusted_weight_kg,
                }
            )
            for s in sets[: limits.max_sets]
        ]
        while len(normalized) < limits.min_sets:
            normalized.append(normalized[-1])
        return normalized
