class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class BusinessRuleError(DomainError):
    def __init__(self, message: str, code: str = "BR_001", details: dict | None = None):
        super().__init__(code, message, details)


class ConflictError(DomainError):
    def __init__(self, message: str, code: str = "CF_001", details: dict | None = None):
        super().__init__(code, message, details)


class NoExercisesInCategoryError(BusinessRuleError):
    """The exercise catalog has nothing to offer for the requested category.

    Points at a catalog/configuration problem upstream; generation is not retried.
    """

    def __init__(self, category: str):
        super().__init__(
            f"no exercises found for category: {category}",
            code="BR_NO_EXERCISES_IN_CATEGORY",
            details={"category": category},
        )
        self.category = category


class SessionValidationError(ValidationError):
    """Raised when a generated session breaks one of its shape invariants."""

    def __init__(self, violations: list[str]):
        super().__init__(
            "session",
            "; ".join(violations),
            details={"field": "session", "violations": list(violations)},
        )
        self.violations = list(violations)
