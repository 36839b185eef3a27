from petrapp.models.enums import (
    Category,
    ExerciseType,
    FeedbackLevel,
    SessionStatus,
    TrainingPhase,
)
from petrapp.models.workout import (
    Exercise,
    ExerciseSet,
    Preferences,
    Session,
    Set,
)

__all__ = [
    "Category",
    "ExerciseType",
    "FeedbackLevel",
    "SessionStatus",
    "TrainingPhase",
    "Exercise",
    "ExerciseSet",
    "Preferences",
    "Session",
    "Set",
]
