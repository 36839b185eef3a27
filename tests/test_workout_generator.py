"""
Tests for WorkoutGenerator.

Test scenarios:
1. End-to-end generation for a single weekly workout with no history
2. Shape invariants over many seeds and categories
3. Continuity between same-weekday sessions
4. Beginner progression and "too easy" feedback
5. Empty category pool
"""

import random
from datetime import date, timedelta

import pytest

from petrapp.core.exceptions import NoExercisesInCategoryError
from petrapp.models import Category, ExerciseType, Preferences, SessionStatus
from petrapp.services.exercise_selector import filter_by_category
from petrapp.services.session_validator import validate_session
from petrapp.services.workout_generator import WorkoutGenerator
from tests.conftest import NEXT_MONDAY
from tests.factories import make_exercise, make_session, make_sets


def _category_of(session, pool):
    by_id = {e.id: e.category for e in pool}
    categories = {by_id[es.exercise.id] for es in session.exercise_sets}
    assert len(categories) == 1
    return categories.pop()


class TestGenerate:
    def test_monday_only_with_empty_history(self, pool, rng, clock, config):
        generator = WorkoutGenerator(
            Preferences(monday=True), [], pool, rng=rng, clock=clock, config=config
        )

        session = generator.generate(NEXT_MONDAY)

        assert session.workout_date == NEXT_MONDAY
        assert session.status == SessionStatus.PLANNED
        assert session.started_at is None
        assert session.completed_at is None
        assert session.difficulty_rating is None
        assert len(session.exercise_sets) == 5
        assert _category_of(session, pool) == Category.FULL_BODY
        for es in session.exercise_sets:
            assert len(es.sets) == 3
            for s in es.sets:
                assert (s.min_reps, s.max_reps) == (8, 8)
                assert s.weight_kg == 0
                assert s.completed_reps is None

    @pytest.mark.parametrize(
        "preferences,expected",
        [
            (Preferences(monday=True, tuesday=True), Category.LOWER),
            (Preferences(monday=True), Category.FULL_BODY),
            (Preferences(tuesday=True), Category.FULL_BODY),
        ],
    )
    def test_empty_history_uses_category_pool(self, pool, clock, config, preferences, expected):
        allowed = {e.id for e in filter_by_category(pool, expected)}
        for seed in range(10):
            generator = WorkoutGenerator(
                preferences, [], pool, rng=random.Random(seed), clock=clock, config=config
            )
            session = generator.generate(NEXT_MONDAY)

            ids = [es.exercise.id for es in session.exercise_sets]
            assert len(ids) == len(set(ids))
            assert set(ids) <= allowed
            assert validate_session(session, config.limits).passed

    def test_upper_after_completed_yesterday(self, pool, rng, clock, config):
        sunday = NEXT_MONDAY - timedelta(days=1)
        history = [make_session(sunday, [(pool[6], make_sets(completed=[8, 8, 8]))])]
        generator = WorkoutGenerator(
            Preferences(sunday=True, monday=True), history, pool, rng=rng, clock=clock, config=config
        )

        session = generator.generate(NEXT_MONDAY)

        assert _category_of(session, pool) == Category.UPPER

    def test_empty_category_pool_raises(self, pool, rng, clock, config):
        no_lower = [e for e in pool if e.category != Category.LOWER]
        generator = WorkoutGenerator(
            Preferences(monday=True, tuesday=True), [], no_lower, rng=rng, clock=clock, config=config
        )

        with pytest.raises(NoExercisesInCategoryError):
            generator.generate(NEXT_MONDAY)

    def test_bodyweight_exercises_have_no_weight(self, clock, config, rng):
        pool = [
            make_exercise(i, category=Category.FULL_BODY, exercise_type=ExerciseType.BODYWEIGHT)
            for i in range(1, 7)
        ]
        generator = WorkoutGenerator(Preferences(), [], pool, rng=rng, clock=clock, config=config)

        session = generator.generate(NEXT_MONDAY)

        assert all(s.weight_kg is None for es in session.exercise_sets for s in es.sets)

    def test_history_is_not_mutated(self, pool, rng, clock, config):
        last_monday = NEXT_MONDAY - timedelta(days=7)
        anchor = make_session(last_monday, [(pool[12], make_sets(completed=[12, 12, 12]))])
        history = [anchor]
        generator = WorkoutGenerator(
            Preferences(monday=True), history, pool, rng=rng, clock=clock, config=config
        )

        generator.generate(NEXT_MONDAY)

        assert history == [anchor]
        assert anchor.exercise_sets[0].sets[0].completed_reps == 12


class TestContinuityAndProgression:
    def _anchor(self, pool, weight=40.0, completed=(12, 12, 12), rating=None):
        full_body = filter_by_category(pool, Category.FULL_BODY)
        return make_session(
            NEXT_MONDAY - timedelta(days=7),
            [(e, make_sets(weight=weight, completed=list(completed))) for e in full_body[:5]],
            difficulty_rating=rating,
        )

    def test_same_weekday_session_is_continued(self, pool, clock, config):
        anchor = self._anchor(pool)
        anchor_ids = {es.exercise.id for es in anchor.exercise_sets}

        for seed in range(10):
            generator = WorkoutGenerator(
                Preferences(monday=True), [anchor], pool,
                rng=random.Random(seed), clock=clock, config=config,
            )
            session = generator.generate(NEXT_MONDAY)
            shared = anchor_ids & {es.exercise.id for es in session.exercise_sets}
            assert len(shared) >= 0.6 * len(anchor_ids)

    def test_lower_day_anchor_does_not_leak_into_full_body_day(self, pool, rng, clock, config):
        # Last Monday was a lower day; Tuesday has since been dropped.
        lower = filter_by_category(pool, Category.LOWER)
        anchor = make_session(
            NEXT_MONDAY - timedelta(days=7),
            [(e, make_sets(completed=[12, 12, 12])) for e in lower[:5]],
        )
        generator = WorkoutGenerator(
            Preferences(monday=True), [anchor], pool, rng=rng, clock=clock, config=config
        )

        session = generator.generate(NEXT_MONDAY)

        assert len(session.exercise_sets) == 5
        assert _category_of(session, pool) == Category.FULL_BODY

    def test_exercise_removed_from_catalog_is_not_carried(self, pool, rng, clock, config):
        retired = make_exercise(500, "Retired Lift", primary=("Legs", "Back"))
        full_body = filter_by_category(pool, Category.FULL_BODY)
        anchor = make_session(
            NEXT_MONDAY - timedelta(days=7),
            [(retired, make_sets())] + [(e, make_sets()) for e in full_body[:4]],
        )
        generator = WorkoutGenerator(
            Preferences(monday=True), [anchor], pool, rng=rng, clock=clock, config=config
        )

        session = generator.generate(NEXT_MONDAY)

        ids = [es.exercise.id for es in session.exercise_sets]
        assert 500 not in ids
        assert len(ids) == 5

    def test_beginner_all_max_adds_two_and_a_half(self, pool, rng, clock, config):
        anchor = self._anchor(pool)
        generator = WorkoutGenerator(
            Preferences(monday=True), [anchor], pool, rng=rng, clock=clock, config=config
        )

        session = generator.generate(NEXT_MONDAY)

        anchor_ids = {es.exercise.id for es in anchor.exercise_sets}
        carried = [es for es in session.exercise_sets if es.exercise.id in anchor_ids]
        assert len(carried) >= 4
        for es in carried:
            assert [s.weight_kg for s in es.sets] == [42.5, 42.5, 42.5]

    def test_too_easy_feedback_increases_weight(self, pool, rng, clock, config):
        anchor = self._anchor(pool, completed=(10, 10, 10), rating=1)
        generator = WorkoutGenerator(
            Preferences(monday=True), [anchor], pool, rng=rng, clock=clock, config=config
        )

        session = generator.generate(NEXT_MONDAY)

        anchor_ids = {es.exercise.id for es in anchor.exercise_sets}
        for es in session.exercise_sets:
            if es.exercise.id in anchor_ids:
                assert all(s.weight_kg > 40.0 for s in es.sets)

    def test_too_easy_feedback_at_zero_weight_keeps_zero(self, pool, rng, clock, config):
        anchor = self._anchor(pool, weight=0.0, completed=(10, 10, 10), rating=1)
        generator = WorkoutGenerator(
            Preferences(monday=True), [anchor], pool, rng=rng, clock=clock, config=config
        )

        session = generator.generate(NEXT_MONDAY)

        assert all(s.weight_kg == 0 for es in session.exercise_sets for s in es.sets)

    def test_sessions_on_or_after_the_date_are_ignored(self, pool, rng, clock, config):
        future = make_session(
            NEXT_MONDAY + timedelta(days=7),
            [(e, make_sets(weight=80.0, completed=[12, 12, 12])) for e in pool[12:17]],
        )
        generator = WorkoutGenerator(
            Preferences(monday=True), [future], pool, rng=rng, clock=clock, config=config
        )

        session = generator.generate(NEXT_MONDAY)

        assert all(s.weight_kg == 0 for es in session.exercise_sets for s in es.sets)

    def test_generated_sessions_keep_their_shape_over_weeks(self, pool, clock, config):
        rng = random.Random(99)
        prefs = Preferences(monday=True, wednesday=True, friday=True)
        history = []
        day = date(2025, 1, 6)

        for week in range(6):
            for offset in (0, 2, 4):
                current = day + timedelta(days=7 * week + offset)
                generator = WorkoutGenerator(prefs, history, pool, rng=rng, clock=clock, config=config)
                session = generator.generate(current)
                assert validate_session(session, config.limits).passed

                performed = session.model_copy(
                    update={
                        "status": SessionStatus.DONE,
                        "difficulty_rating": 3,
                        "exercise_sets": tuple(
                            es.model_copy(update={
                                "sets": tuple(
                                    s.model_copy(update={
                                        "weight_kg": s.weight_kg if s.weight_kg else 20.0,
                                        "completed_reps": s.max_reps,
                                    })
                                    for s in es.sets
                                )
                            })
                            for es in session.exercise_sets
                        ),
                    }
                )
                history.append(performed)
