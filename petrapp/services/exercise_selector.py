"""
Exercise selection with week-to-week continuity.

Consecutive sessions on the same weekday should mostly share exercises so
progression has something to build on. A configurable share (80% by default)
of the exercises is carried over from the last session on the same weekday,
compound movements first; the rest is drawn at random from the category's
pool for variety.
"""

from __future__ import annotations

import logging
import math
import random
from datetime import date
from typing import Iterable, Sequence

from petrapp.config.progression_config_loader import ProgressionConfig
from petrapp.core.exceptions import NoExercisesInCategoryError
from petrapp.models import Category, Exercise, ExerciseSet, Session
from petrapp.services import history as history_lookup
from petrapp.services.progression import ProgressionEngine

logger = logging.getLogger(__name__)


def is_compound_movement(exercise: Exercise, min_primary_muscles: int = 2) -> bool:
    """Heuristic: a movement working several primary muscle groups is compound."""
    return len(exercise.primary_muscle_groups) >= min_primary_muscles


def filter_by_category(pool: Iterable[Exercise], category: Category) -> list[Exercise]:
    return [exercise for exercise in pool if exercise.category == category]


def exclude_exercises(pool: Iterable[Exercise], excluded: Iterable[Exercise]) -> list[Exercise]:
    excluded_ids = {exercise.id for exercise in excluded}
    return [exercise for exercise in pool if exercise.id not in excluded_ids]


def dedupe_exercises(exercises: Iterable[Exercise]) -> list[Exercise]:
    seen: set[int] = set()
    unique = []
    for exercise in exercises:
        if exercise.id not in seen:
            seen.add(exercise.id)
            unique.append(exercise)
    return unique


def select_random_exercises(
    pool: Sequence[Exercise],
    count: int,
    rng: random.Random,
) -> list[Exercise]:
    """Up to ``count`` distinct exercises drawn uniformly from ``pool``."""
    unique = dedupe_exercises(pool)
    if count <= 0 or not unique:
        return []
    return rng.sample(unique, min(count, len(unique)))


def select_continuity_exercises(
    anchor: Session,
    pool: Sequence[Exercise],
    count: int,
    config: ProgressionConfig,
) -> list[Exercise]:
    """Exercises carried over from the anchor session, compound movements first.

    Only anchor exercises still present in ``pool`` are carried over, and the
    pool's current ``Exercise`` replaces the copy stored in history.
    """
    continuity_count = min(
        math.ceil(count * config.selection.continuity_ratio),
        count,
    )
    current = {exercise.id: exercise for exercise in pool}
    previous = dedupe_exercises(
        current[es.exercise.id] for es in anchor.exercise_sets if es.exercise.id in current
    )
    min_primary = config.selection.min_compound_primary_muscles

    compound = [ex for ex in previous if is_compound_movement(ex, min_primary)]
    isolation = [ex for ex in previous if not is_compound_movement(ex, min_primary)]
    return (compound + isolation)[:continuity_count]


def select_exercises_with_continuity(
    pool: Sequence[Exercise],
    anchor: Session | None,
    count: int,
    rng: random.Random,
    config: ProgressionConfig,
) -> list[Exercise]:
    if count <= 0:
        return []

    if anchor is None:
        return select_random_exercises(pool, count, rng)

    selected = select_continuity_exercises(anchor, pool, count, config)

    remaining_count = count - len(selected)
    if remaining_count > 0:
        remaining_pool = exclude_exercises(pool, selected)
        if not remaining_pool:
            remaining_pool = list(pool)
        for exercise in select_random_exercises(remaining_pool, len(remaining_pool), rng):
            if remaining_count == 0:
                break
            if any(ex.id == exercise.id for ex in selected):
                continue
            selected.append(exercise)
            remaining_count -= 1

    return selected


def select_exercises(
    day: date,
    category: Category,
    pool: Sequence[Exercise],
    history: Sequence[Session],
    rng: random.Random,
    progression: ProgressionEngine,
    config: ProgressionConfig,
) -> list[ExerciseSet]:
    """Pick the session's exercises and derive their sets.

    Raises:
        NoExercisesInCategoryError: The pool has no exercise in ``category``.
    """
    filtered_pool = filter_by_category(pool, category)
    if not filtered_pool:
        raise NoExercisesInCategoryError(category.value)

    anchor = history_lookup.last_same_weekday_session(history, day)
    selected = select_exercises_with_continuity(
        filtered_pool,
        anchor,
        config.selection.exercises_per_workout,
        rng,
        config,
    )

    if anchor is not None:
        logger.debug(
            f"Continuity anchor {anchor.workout_date} for {day}: "
            f"{len(anchor.exercise_sets)} exercises"
        )

    return [
        ExerciseSet(exercise=exercise, sets=tuple(progression.determine_sets(exercise, anchor)))
        for exercise in selected
    ]
