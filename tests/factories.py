"""Builders for workout test data."""

from datetime import date

from petrapp.models import (
    Category,
    Exercise,
    ExerciseSet,
    ExerciseType,
    Session,
    SessionStatus,
    Set,
)

# 6 upper, 6 lower, 6 full body exercises.
EXERCISE_FIXTURE = [
    (1, "Bench Press", Category.UPPER, ("Chest", "Triceps")),
    (2, "Pull Up", Category.UPPER, ("Back", "Biceps")),
    (3, "Shoulder Press", Category.UPPER, ("Shoulders",)),
    (4, "Bicep Curl", Category.UPPER, ("Biceps",)),
    (5, "Tricep Extension", Category.UPPER, ("Triceps",)),
    (6, "Lateral Raise", Category.UPPER, ("Shoulders",)),
    (7, "Squat", Category.LOWER, ("Quadriceps", "Glutes")),
    (8, "Deadlift", Category.LOWER, ("Hamstrings", "Back")),
    (9, "Leg Press", Category.LOWER, ("Quadriceps",)),
    (10, "Leg Curl", Category.LOWER, ("Hamstrings",)),
    (11, "Calf Raise", Category.LOWER, ("Calves",)),
    (12, "Leg Extension", Category.LOWER, ("Quadriceps",)),
    (13, "Clean and Press", Category.FULL_BODY, ("Shoulders", "Legs", "Back")),
    (14, "Burpee", Category.FULL_BODY, ("Chest", "Legs", "Shoulders")),
    (15, "Kettlebell Swing", Category.FULL_BODY, ("Hamstrings", "Glutes", "Back")),
    (16, "Turkish Get-Up", Category.FULL_BODY, ("Shoulders", "Core", "Legs")),
    (17, "Thruster", Category.FULL_BODY, ("Legs", "Shoulders")),
    (18, "Power Clean", Category.FULL_BODY, ("Back", "Legs", "Shoulders")),
]


def make_exercise(
    exercise_id: int,
    name: str = "",
    category: Category = Category.FULL_BODY,
    primary: tuple[str, ...] = ("Legs",),
    exercise_type: ExerciseType = ExerciseType.WEIGHTED,
) -> Exercise:
    return Exercise(
        id=exercise_id,
        name=name or f"Exercise {exercise_id}",
        category=category,
        exercise_type=exercise_type,
        primary_muscle_groups=primary,
        secondary_muscle_groups=(),
    )


def make_pool() -> list[Exercise]:
    return [
        make_exercise(exercise_id, name, category, primary)
        for exercise_id, name, category, primary in EXERCISE_FIXTURE
    ]


def make_sets(
    weight: float | None = 50.0,
    min_reps: int = 8,
    max_reps: int = 12,
    completed: list[int | None] | None = None,
    count: int = 3,
) -> tuple[Set, ...]:
    """Sets at one weight and rep range; ``completed`` gives reps per set."""
    completed = completed if completed is not None else [None] * count
    return tuple(
        Set(
            weight_kg=weight,
            adjusted_weight_kg=weight,
            min_reps=min_reps,
            max_reps=max_reps,
            completed_reps=reps,
        )
        for reps in completed
    )


def make_session(
    workout_date: date,
    exercise_sets: list[tuple[Exercise, tuple[Set, ...]]],
    status: SessionStatus = SessionStatus.DONE,
    difficulty_rating: int | None = None,
) -> Session:
    return Session(
        workout_date=workout_date,
        status=status,
        exercise_sets=tuple(
            ExerciseSet(exercise=exercise, sets=sets) for exercise, sets in exercise_sets
        ),
        difficulty_rating=difficulty_rating,
    )
