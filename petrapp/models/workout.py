"""Workout domain models.

All models are frozen: the generator only ever reads history and builds new
values, and the service layer rewrites stored sessions with ``model_copy``.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from petrapp.models.enums import Category, ExerciseType, SessionStatus

DEFAULT_WORKOUT_MINUTES = 60


class Exercise(BaseModel):
    """A catalog exercise, e.g. Squat or Bench Press."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    category: Category
    exercise_type: ExerciseType = ExerciseType.WEIGHTED
    primary_muscle_groups: tuple[str, ...] = ()
    secondary_muscle_groups: tuple[str, ...] = ()
    description_markdown: str = ""

    @property
    def is_bodyweight(self) -> bool:
        return self.exercise_type == ExerciseType.BODYWEIGHT


class Set(BaseModel):
    """A single set with its target and, once performed, its result."""

    model_config = ConfigDict(frozen=True)

    weight_kg: float | None = None
    adjusted_weight_kg: float | None = None
    min_reps: int = Field(ge=1)
    max_reps: int = Field(ge=1)
    completed_reps: int | None = Field(default=None, ge=0)
    completed_at: datetime | None = None

    @model_validator(mode="after")
    def _check_rep_range(self) -> "Set":
        if self.min_reps > self.max_reps:
            raise ValueError(
                f"min_reps ({self.min_reps}) must be <= max_reps ({self.max_reps})"
            )
        if self.weight_kg is not None and self.weight_kg < 0:
            raise ValueError(f"weight_kg must be >= 0, got {self.weight_kg}")
        return self

    @property
    def is_completed(self) -> bool:
        return self.completed_reps is not None


class ExerciseSet(BaseModel):
    """All sets of one exercise within a session."""

    model_config = ConfigDict(frozen=True)

    exercise: Exercise
    sets: tuple[Set, ...] = ()
    warmup_completed_at: datetime | None = None


class Session(BaseModel):
    """One workout on one calendar date."""

    model_config = ConfigDict(frozen=True)

    workout_date: date
    status: SessionStatus = SessionStatus.PLANNED
    exercise_sets: tuple[ExerciseSet, ...] = ()
    started_at: datetime | None = None
    completed_at: datetime | None = None
    difficulty_rating: int | None = Field(default=None, ge=1, le=5)

    def find_exercise_set(self, exercise_id: int) -> ExerciseSet | None:
        for exercise_set in self.exercise_sets:
            if exercise_set.exercise.id == exercise_id:
                return exercise_set
        return None

    def contains_exercise(self, exercise_id: int) -> bool:
        return self.find_exercise_set(exercise_id) is not None


class Preferences(BaseModel):
    """Planned workout minutes per weekday; 0 means rest day.

    Booleans are accepted for convenience and mapped to a default duration.
    """

    model_config = ConfigDict(frozen=True)

    monday: int = Field(default=0, ge=0)
    tuesday: int = Field(default=0, ge=0)
    wednesday: int = Field(default=0, ge=0)
    thursday: int = Field(default=0, ge=0)
    friday: int = Field(default=0, ge=0)
    saturday: int = Field(default=0, ge=0)
    sunday: int = Field(default=0, ge=0)

    @field_validator(
        "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
        mode="before",
    )
    @classmethod
    def _bool_to_minutes(cls, value):
        if isinstance(value, bool):
            return DEFAULT_WORKOUT_MINUTES if value else 0
        return value

    def minutes_for(self, day: date) -> int:
        # date.weekday(): Monday == 0
        return (
            self.monday,
            self.tuesday,
            self.wednesday,
            self.thursday,
            self.friday,
            self.saturday,
            self.sunday,
        )[day.weekday()]

    def is_workout_day(self, day: date) -> bool:
        return self.minutes_for(day) > 0
