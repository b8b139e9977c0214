class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or a required field is missing."""

    status_code = 400


class NotFoundError(DomainError):
    """Raised when a driver, route, stop or open interval does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a write would break the single-open-interval rule."""

    status_code = 409


class GuardError(DomainError):
    """Raised when a guarded action (e.g. route completion) is not allowed yet."""

    status_code = 422


class StoreError(DomainError):
    """Raised when the record store fails; callers retry manually."""

    status_code = 503
