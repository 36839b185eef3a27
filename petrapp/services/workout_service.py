"""
WorkoutService - application service around the workout generator.

Fetches preferences, a bounded window of history and the exercise catalog
from the repositories, runs the generator, and applies the user's progress
(start, set results, completion, feedback) to stored sessions.
"""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone
from typing import Callable

from petrapp.config.progression_config_loader import ProgressionConfig, get_progression_config
from petrapp.config.settings import Settings, get_settings
from petrapp.core.exceptions import ConflictError, NotFoundError, ValidationError
from petrapp.core.logging import get_logger
from petrapp.models import FeedbackLevel, Preferences, Session, SessionStatus
from petrapp.repositories.base import (
    ExerciseRepository,
    PreferencesRepository,
    SessionRepository,
)
from petrapp.services.session_validator import validate_session
from petrapp.services.workout_generator import WorkoutGenerator

logger = get_logger(__name__)

DAYS_PER_WEEK = 7


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutService:
    """Business logic for workout management."""

    def __init__(
        self,
        preferences_repo: PreferencesRepository,
        session_repo: SessionRepository,
        exercise_repo: ExerciseRepository,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
        settings: Settings | None = None,
        config: ProgressionConfig | None = None,
    ):
        self._preferences_repo = preferences_repo
        self._session_repo = session_repo
        self._exercise_repo = exercise_repo
        self._rng = rng
        self._clock = clock or _utcnow
        self._settings = settings or get_settings()
        self._config = config or get_progression_config()

    def _today(self) -> date:
        return self._clock().date()

    async def get_preferences(self, user_id: int) -> Preferences:
        return await self._preferences_repo.get(user_id)

    async def save_preferences(self, user_id: int, preferences: Preferences) -> None:
        await self._preferences_repo.save(user_id, preferences)
        logger.info("preferences_saved", user_id=user_id)

    async def generate_workout(self, user_id: int, day: date) -> Session:
        """Generate, without storing, a planned session for ``day``."""
        logger.info("generating_workout", user_id=user_id, date=day.isoformat())

        preferences = await self._preferences_repo.get(user_id)
        window_start = day - timedelta(days=self._settings.history_window_days)
        history = await self._session_repo.list_between(
            user_id, window_start, day - timedelta(days=1)
        )
        pool = await self._exercise_repo.list_all()

        generator = WorkoutGenerator(
            preferences,
            history,
            pool,
            rng=self._rng,
            clock=self._today,
            config=self._config,
        )
        session = generator.generate(day)

        validation = validate_session(session, self._config.limits)
        if not validation.passed:
            logger.warning(
                "generated_session_off_shape",
                user_id=user_id,
                date=day.isoformat(),
                **validation.to_dict(),
            )

        logger.info(
            "workout_generated",
            user_id=user_id,
            date=day.isoformat(),
            history_size=len(history),
            exercises=[es.exercise.name for es in session.exercise_sets],
        )
        return session

    async def get_session(self, user_id: int, day: date) -> Session:
        """Stored session for ``day``, or a freshly generated (unsaved) one."""
        session = await self._session_repo.get_by_date(user_id, day)
        if session is not None:
            return session
        return await self.generate_workout(user_id, day)

    async def resolve_weekly_schedule(self, user_id: int) -> list[Session]:
        """Sessions for Monday through Sunday of the current week."""
        today = self._today()
        monday = today - timedelta(days=today.weekday())

        week = []
        for offset in range(DAYS_PER_WEEK):
            week.append(await self.get_session(user_id, monday + timedelta(days=offset)))

        logger.info(
            "weekly_schedule_resolved",
            user_id=user_id,
            week_start=monday.isoformat(),
        )
        return week

    async def start_session(self, user_id: int, day: date) -> Session:
        """Persist the session for ``day`` and mark it in progress."""
        existing = await self._session_repo.get_by_date(user_id, day)
        now = self._clock()

        if existing is not None:
            if existing.status != SessionStatus.PLANNED:
                raise ConflictError(
                    f"session on {day.isoformat()} already {existing.status.value}",
                    code="CF_SESSION_STARTED",
                    details={"date": day.isoformat(), "status": existing.status.value},
                )
            started = existing.model_copy(
                update={"status": SessionStatus.IN_PROGRESS, "started_at": now}
            )
            return await self._session_repo.update(user_id, started)

        generated = await self.generate_workout(user_id, day)
        started = generated.model_copy(
            update={"status": SessionStatus.IN_PROGRESS, "started_at": now}
        )
        stored = await self._session_repo.create(user_id, started)
        logger.info("session_started", user_id=user_id, date=day.isoformat())
        return stored

    async def complete_session(self, user_id: int, day: date) -> Session:
        session = await self._require_session(user_id, day)
        now = self._clock()
        completed = session.model_copy(
            update={
                "status": SessionStatus.DONE,
                "started_at": session.started_at or now,
                "completed_at": now,
            }
        )
        logger.info("session_completed", user_id=user_id, date=day.isoformat())
        return await self._session_repo.update(user_id, completed)

    async def save_feedback(self, user_id: int, day: date, difficulty: int) -> Session:
        """Record how difficult the whole session felt (1 too easy .. 5 too difficult)."""
        if not FeedbackLevel.TOO_EASY <= difficulty <= FeedbackLevel.TOO_DIFFICULT:
            raise ValidationError(
                "difficulty_rating",
                f"must be between {int(FeedbackLevel.TOO_EASY)} and "
                f"{int(FeedbackLevel.TOO_DIFFICULT)}, got {difficulty}",
            )

        session = await self._require_session(user_id, day)
        rated = session.model_copy(update={"difficulty_rating": difficulty})
        logger.info(
            "feedback_saved",
            user_id=user_id,
            date=day.isoformat(),
            difficulty=difficulty,
        )
        return await self._session_repo.update(user_id, rated)

    async def update_set_weight(
        self,
        user_id: int,
        day: date,
        exercise_id: int,
        set_index: int,
        weight_kg: float,
    ) -> Session:
        if weight_kg < 0:
            raise ValidationError("weight_kg", f"must be >= 0, got {weight_kg}")

        session = await self._require_session(user_id, day)
        exercise_set = self._require_exercise_set(session, exercise_id, set_index)
        if exercise_set.exercise.is_bodyweight:
            raise ValidationError(
                "weight_kg",
                f"{exercise_set.exercise.name} is a bodyweight exercise",
                details={"field": "weight_kg", "exercise_id": exercise_id},
            )

        updated = self._replace_set(
            session,
            exercise_id,
            set_index,
            weight_kg=weight_kg,
            adjusted_weight_kg=weight_kg,
        )
        return await self._session_repo.update(user_id, updated)

    async def update_completed_reps(
        self,
        user_id: int,
        day: date,
        exercise_id: int,
        set_index: int,
        completed_reps: int,
    ) -> Session:
        if completed_reps < 0:
            raise ValidationError("completed_reps", f"must be >= 0, got {completed_reps}")

        session = await self._require_session(user_id, day)
        self._require_exercise_set(session, exercise_id, set_index)

        updated = self._replace_set(
            session,
            exercise_id,
            set_index,
            completed_reps=completed_reps,
            completed_at=self._clock(),
        )
        return await self._session_repo.update(user_id, updated)

    async def _require_session(self, user_id: int, day: date) -> Session:
        session = await self._session_repo.get_by_date(user_id, day)
        if session is None:
            raise NotFoundError(
                "session",
                f"no session on {day.isoformat()}",
                {"date": day.isoformat()},
            )
        return session

    @staticmethod
    def _require_exercise_set(session: Session, exercise_id: int, set_index: int):
        exercise_set = session.find_exercise_set(exercise_id)
        if exercise_set is None:
            raise NotFoundError(
                "exercise_set",
                f"exercise {exercise_id} is not part of the session on "
                f"{session.workout_date.isoformat()}",
                {"exercise_id": exercise_id},
            )
        if not 0 <= set_index < len(exercise_set.sets):
            raise ValidationError(
                "set_index",
                f"must be between 0 and {len(exercise_set.sets) - 1}, got {set_index}",
            )
        return exercise_set

    @staticmethod
    def _replace_set(session: Session, exercise_id: int, set_index: int, **updates) -> Session:
        exercise_sets = []
        for exercise_set in session.exercise_sets:
            if exercise_set.exercise.id == exercise_id:
                sets = list(exercise_set.sets)
                sets[set_index] = sets[set_index].model_copy(update=updates)
                exercise_set = exercise_set.model_copy(update={"sets": tuple(sets)})
            exercise_sets.append(exercise_set)
        return session.model_copy(update={"exercise_sets": tuple(exercise_sets)})
