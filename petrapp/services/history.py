"""Lookups over a user's session history.

History is handed in unsorted and bounded by the repository layer (a few
months at most), so every lookup is a plain linear scan.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from petrapp.models import ExerciseSet, Session, SessionStatus


def sort_by_date(history: Iterable[Session], *, newest_first: bool = False) -> list[Session]:
    return sorted(history, key=lambda s: s.workout_date, reverse=newest_first)


def sessions_before(history: Iterable[Session], day: date) -> list[Session]:
    return [s for s in history if s.workout_date < day]


def completed_on(history: Iterable[Session], day: date) -> bool:
    """True when a finished session exists on exactly ``day``."""
    return any(
        s.workout_date == day and s.status == SessionStatus.DONE for s in history
    )


def earliest_date(history: Iterable[Session]) -> date | None:
    return min((s.workout_date for s in history), default=None)


def last_same_weekday_session(history: Iterable[Session], day: date) -> Session | None:
    """Most recent session held on the same weekday as ``day``."""
    most_recent = None
    for session in history:
        if session.workout_date.weekday() != day.weekday():
            continue
        if most_recent is None or session.workout_date > most_recent.workout_date:
            most_recent = session
    return most_recent


def last_session_with_exercise(
    history: Iterable[Session], exercise_id: int
) -> tuple[Session, ExerciseSet] | None:
    """Most recent session containing the exercise, with that exercise's sets."""
    found = None
    for session in history:
        exercise_set = session.find_exercise_set(exercise_id)
        if exercise_set is None:
            continue
        if found is None or session.workout_date > found[0].workout_date:
            found = (session, exercise_set)
    return found


def most_recent_feedback(history: Iterable[Session], exercise_id: int) -> int | None:
    """Difficulty rating of the most recent rated session containing the exercise."""
    most_recent = None
    for session in history:
        if session.difficulty_rating is None or not session.contains_exercise(exercise_id):
            continue
        if most_recent is None or session.workout_date > most_recent.workout_date:
            most_recent = session
    return most_recent.difficulty_rating if most_recent else None


def exercise_sets_up_to(
    history: Sequence[Session], exercise_id: int, until: date
) -> list[ExerciseSet]:
    """Performances of an exercise on or before ``until``, newest first."""
    performances = []
    for session in sort_by_date(history, newest_first=True):
        if session.workout_date > until:
            continue
        exercise_set = session.find_exercise_set(exercise_id)
        if exercise_set is not None:
            performances.append(exercise_set)
    return performances
