from petrapp.repositories.base import (
    ExerciseRepository,
    PreferencesRepository,
    SessionRepository,
)

__all__ = ["ExerciseRepository", "PreferencesRepository", "SessionRepository"]
