"""Repository exceptions, translated to API errors in one place (app.api.errors)."""


class RepositoryError(Exception):
    """Base class for persistence failures surfaced to handlers."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecordNotFound(RepositoryError):
    """Row is absent or owned by another user. The two are indistinguishable."""


class ConstraintViolation(RepositoryError):
    """Payload breaks a storage constraint (bad reference, duplicate key)."""


class DuplicateRecord(ConstraintViolation):
    """Unique constraint violated."""
