"""Decides which split (full body, upper, lower) the next session trains."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from petrapp.models import Category, Preferences, Session
from petrapp.services import history as history_lookup


def select_category(
    day: date,
    preferences: Preferences,
    history: Iterable[Session],
) -> Category:
    """
    Pick the workout category for ``day``.

    Rules, first match wins:
    1. ``day`` is not scheduled: full body (placeholder for unscheduled views).
    2. The next day is scheduled: lower body, so legs recover before it.
    3. The previous day had a completed session: upper body.
    4. Otherwise full body.
    """
    if not preferences.is_workout_day(day):
        return Category.FULL_BODY

    if preferences.is_workout_day(day + timedelta(days=1)):
        return Category.LOWER

    if history_lookup.completed_on(history, day - timedelta(days=1)):
        return Category.UPPER

    return Category.FULL_BODY
