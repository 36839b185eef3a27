"""Storage collaborators of the workout service.

Persistence itself lives outside this package; the service only relies on
these async protocols.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from petrapp.models import Exercise, Preferences, Session


class PreferencesRepository(Protocol):
    async def get(self, user_id: int) -> Preferences: ...

    async def save(self, user_id: int, preferences: Preferences) -> None: ...


class SessionRepository(Protocol):
    async def get_by_date(self, user_id: int, day: date) -> Session | None: ...

    async def list_between(self, user_id: int, start: date, end: date) -> list[Session]:
        """Sessions with ``start <= workout_date <= end``."""
        ...

    async def create(self, user_id: int, session: Session) -> Session: ...

    async def update(self, user_id: int, session: Session) -> Session: ...


class ExerciseRepository(Protocol):
    async def list_all(self) -> list[Exercise]: ...
