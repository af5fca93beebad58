"""Service-layer exceptions.

Services raise these; the API layer turns each into a JSON error response with
the status code carried on the class. Nothing here is retried.
"""

from __future__ import annotations


class TasklaneError(Exception):
    """Base error for request-terminal failures."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class UnauthenticatedError(TasklaneError):
    """No verified identity on the request."""

    status_code = 401
    default_detail = "Not authenticated"


class AccessDeniedError(TasklaneError):
    """Identity is known and can see the resource, but lacks the required relation."""

    status_code = 403
    default_detail = "Access denied"


class NotFoundError(TasklaneError):
    """Resource is absent or not visible to the caller."""

    status_code = 404
    default_detail = "Not found"


class ValidationFailedError(TasklaneError):
    """Input is well-formed JSON but semantically invalid."""

    status_code = 422
    default_detail = "Invalid input"


class ConflictError(TasklaneError):
    """Duplicate relation or invalid state transition / reassignment target."""

    status_code = 409
    default_detail = "Conflict"
