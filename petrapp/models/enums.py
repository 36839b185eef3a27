"""Closed enumerations shared by the workout models and the generator."""

from enum import Enum, IntEnum


class Category(str, Enum):
    """Workout split type."""
    FULL_BODY = "full_body"
    UPPER = "upper"
    LOWER = "lower"


class ExerciseType(str, Enum):
    """Whether an exercise is loaded with external weight."""
    WEIGHTED = "weighted"
    BODYWEIGHT = "bodyweight"


class SessionStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TrainingPhase(str, Enum):
    """Undulating periodization phases, cycled in declaration order."""
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"


class FeedbackLevel(IntEnum):
    """Post-session difficulty rating supplied by the user."""
    TOO_EASY = 1
    OPTIMAL_LOW = 2
    OPTIMAL_MID = 3
    OPTIMAL_HIGH = 4
    TOO_DIFFICULT = 5
