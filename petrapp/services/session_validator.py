"""Shape validation for generated sessions.

Checks the invariants every freshly generated session must hold:

- exercise count within [min_exercises, max_exercises]
- no exercise appears twice
- every exercise has [min_sets, max_sets] sets sharing one rep range
- rep bounds ordered and within [min_reps, max_reps]
- no weight below zero and no weight on bodyweight exercises
- nothing is marked as completed yet

Example:
    result = validate_session(session)
    if not result.passed:
        logger.warning(f"Generated session is off-shape: {result.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from petrapp.config.progression_config_loader import SessionLimitsConfig, get_progression_config
from petrapp.core.exceptions import SessionValidationError
from petrapp.models import Session


@dataclass(frozen=True)
class SessionValidationResult:
    """Outcome of validating one session."""

    passed: bool
    message: str
    violations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "message": self.message,
            "violations": list(self.violations),
        }


def validate_session(
    session: Session,
    limits: SessionLimitsConfig | None = None,
) -> SessionValidationResult:
    limits = limits or get_progression_config().limits
    violations: list[str] = []

    exercise_count = len(session.exercise_sets)
    if not limits.min_exercises <= exercise_count <= limits.max_exercises:
        violations.append(
            f"session has {exercise_count} exercises, "
            f"expected {limits.min_exercises}-{limits.max_exercises}"
        )

    seen_ids: set[int] = set()
    for exercise_set in session.exercise_sets:
        exercise = exercise_set.exercise
        if exercise.id in seen_ids:
            violations.append(f"exercise {exercise.id} ({exercise.name}) appears more than once")
        seen_ids.add(exercise.id)

        set_count = len(exercise_set.sets)
        if not limits.min_sets <= set_count <= limits.max_sets:
            violations.append(
                f"{exercise.name} has {set_count} sets, "
                f"expected {limits.min_sets}-{limits.max_sets}"
            )

        rep_ranges = {(s.min_reps, s.max_reps) for s in exercise_set.sets}
        if len(rep_ranges) > 1:
            violations.append(f"{exercise.name} mixes rep ranges {sorted(rep_ranges)}")

        for index, s in enumerate(exercise_set.sets):
            label = f"{exercise.name} set {index + 1}"
            if s.min_reps > s.max_reps:
                violations.append(f"{label}: min_reps {s.min_reps} > max_reps {s.max_reps}")
            if s.min_reps < limits.min_reps or s.max_reps > limits.max_reps:
                violations.append(
                    f"{label}: reps {s.min_reps}-{s.max_reps} outside "
                    f"{limits.min_reps}-{limits.max_reps}"
                )
            if exercise.is_bodyweight and s.weight_kg is not None:
                violations.append(f"{label}: bodyweight exercise carries weight {s.weight_kg}")
            if s.weight_kg is not None and s.weight_kg < 0:
                violations.append(f"{label}: negative weight {s.weight_kg}")
            if s.completed_reps is not None:
                violations.append(f"{label}: already has completed reps")

    if violations:
        return SessionValidationResult(
            passed=False,
            message=f"{len(violations)} violation(s): {violations[0]}",
            violations=violations,
        )
    return SessionValidationResult(passed=True, message="session shape is valid")


def assert_valid_session(
    session: Session,
    limits: SessionLimitsConfig | None = None,
) -> None:
    """Raise SessionValidationError when the session breaks an invariant."""
    result = validate_session(session, limits)
    if not result.passed:
        raise SessionValidationError(result.violations)
