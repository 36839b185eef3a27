"""
Shared fixtures for generator and service tests.

Provides:
- The 18-exercise catalog fixture
- A seeded random source and a fixed clock
- In-memory repository fakes for WorkoutService
"""
import random
from datetime import date, datetime, timezone

import pytest

from petrapp.config.progression_config_loader import get_progression_config
from petrapp.config.settings import Settings
from petrapp.models import Exercise, Preferences, Session
from tests.factories import make_pool

# Wednesday
TODAY = date(2025, 3, 5)
NOW = datetime(2025, 3, 5, 7, 30, tzinfo=timezone.utc)
NEXT_MONDAY = date(2025, 3, 10)


class InMemoryPreferencesRepository:
    def __init__(self, preferences: dict[int, Preferences] | None = None):
        self.preferences = dict(preferences or {})

    async def get(self, user_id: int) -> Preferences:
        return self.preferences.get(user_id, Preferences())

    async def save(self, user_id: int, preferences: Preferences) -> None:
        self.preferences[user_id] = preferences


class InMemorySessionRepository:
    def __init__(self):
        self.sessions: dict[tuple[int, date], Session] = {}

    async def get_by_date(self, user_id: int, day: date) -> Session | None:
        return self.sessions.get((user_id, day))

    async def list_between(self, user_id: int, start: date, end: date) -> list[Session]:
        return [
            session
            for (owner, day), session in self.sessions.items()
            if owner == user_id and start <= day <= end
        ]

    async def create(self, user_id: int, session: Session) -> Session:
        self.sessions[(user_id, session.workout_date)] = session
        return session

    async def update(self, user_id: int, session: Session) -> Session:
        self.sessions[(user_id, session.workout_date)] = session
        return session


class InMemoryExerciseRepository:
    def __init__(self, exercises: list[Exercise]):
        self.exercises = list(exercises)

    async def list_all(self) -> list[Exercise]:
        return list(self.exercises)


@pytest.fixture
def config():
    return get_progression_config()


@pytest.fixture
def settings():
    return Settings(history_window_days=180, debug=False)


@pytest.fixture
def pool() -> list[Exercise]:
    return make_pool()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock(today):
    return lambda: today


@pytest.fixture
def preferences_repo() -> InMemoryPreferencesRepository:
    return InMemoryPreferencesRepository()


@pytest.fixture
def session_repo() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def exercise_repo(pool) -> InMemoryExerciseRepository:
    return InMemoryExerciseRepository(pool)
