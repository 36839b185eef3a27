"""
WorkoutGenerator - synthesizes the next workout session for one user.

Pure and synchronous: reads preferences, history and the exercise pool it
was constructed with and returns a new Session. The only nondeterminism is
the exercise shuffle, drawn from the injected random source.
"""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Callable, Sequence

from petrapp.config.progression_config_loader import ProgressionConfig, get_progression_config
from petrapp.models import Exercise, Preferences, Session, SessionStatus
from petrapp.services import history as history_lookup
from petrapp.services.category_selector import select_category
from petrapp.services.exercise_selector import select_exercises
from petrapp.services.progression import ProgressionEngine

logger = logging.getLogger(__name__)


class WorkoutGenerator:
    """
    Generates workout sessions.

    Args:
        preferences: Weekly schedule of the user.
        history: Past sessions of the user, in any order.
        pool: Exercise catalog to choose from.
        rng: Randomness source for exercise selection. Defaults to system entropy.
        clock: Returns today's date; used to classify beginners.
        config: Progression tunables. Defaults to the loaded YAML config.
    """

    def __init__(
        self,
        preferences: Preferences,
        history: Sequence[Session],
        pool: Sequence[Exercise],
        rng: random.Random | None = None,
        clock: Callable[[], date] | None = None,
        config: ProgressionConfig | None = None,
    ):
        self.preferences = preferences
        self.history = list(history)
        self.pool = list(pool)
        self._rng = rng or random.SystemRandom()
        self._clock = clock or date.today
        self._config = config or get_progression_config()

    def generate(self, day: date) -> Session:
        """Generate a new planned session for ``day``.

        Only sessions before ``day`` are taken into account.

        Raises:
            NoExercisesInCategoryError: The pool has nothing for the chosen category.
        """
        history = history_lookup.sessions_before(self.history, day)

        category = select_category(day, self.preferences, history)

        progression = ProgressionEngine(history, self._config, self._clock())
        exercise_sets = select_exercises(
            day,
            category,
            self.pool,
            history,
            self._rng,
            progression,
            self._config,
        )

        logger.info(
            f"Generated {category.value} workout for {day} with "
            f"{len(exercise_sets)} exercises (beginner={progression.is_beginner})"
        )

        return Session(
            workout_date=day,
            status=SessionStatus.PLANNED,
            exercise_sets=tuple(exercise_sets),
        )
