from __future__ import annotations

"""Domain exception hierarchy translated to HTTP by ``routers.exceptions``."""

from typing import Any

from gradebook.i18n.th_messages import DomainErrorMessages, RedemptionMessages, RosterMessages

__all__ = [
    "DomainError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "StudentNotFoundError",
    "ClassNotFoundError",
    "ConflictError",
    "RedemptionInProgressError",
    "NoTicketsAvailableError",
    "InvalidTransitionError",
    "RosterStoreUnavailableError",
]


class DomainError(Exception):
    """Base class for recoverable domain-level errors."""

    status_code: int = 400
    error_code: str = "domain_error"
    default_message: str = DomainErrorMessages.DOMAIN_ERROR

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        final_message = message or self.default_message
        super().__init__(final_message)
        self.message = final_message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class AuthenticationError(DomainError):
    error_code = "authentication_failed"
    status_code = 401
    default_message = DomainErrorMessages.AUTHENTICATION_FAILED


class PermissionDeniedError(DomainError):
    """Raised when the caller's role does not allow the operation."""

    error_code = "permission_denied"
    status_code = 403
    default_message = DomainErrorMessages.PERMISSION_DENIED


class NotFoundError(DomainError):
    error_code = "not_found"
    status_code = 404
    default_message = DomainErrorMessages.NOT_FOUND


class StudentNotFoundError(NotFoundError):
    """Raised when a student id appears in no roster at all."""

    error_code = "student_not_found"


class ClassNotFoundError(NotFoundError):
    error_code = "class_not_found"


class ConflictError(DomainError):
    error_code = "conflict"
    status_code = 409
    default_message = DomainErrorMessages.CONFLICT


class RedemptionInProgressError(ConflictError):
    """Raised when a redemption for the same (student, class) is still in flight."""

    error_code = "redemption_in_progress"
    default_message = RedemptionMessages.IN_PROGRESS


class NoTicketsAvailableError(ConflictError):
    error_code = "no_tickets_available"
    default_message = RedemptionMessages.NO_TICKETS


class InvalidTransitionError(ConflictError):
    """Raised when a redemption transaction is driven out of order."""

    error_code = "invalid_redemption_transition"
    default_message = RedemptionMessages.INVALID_TRANSITION


class RosterStoreUnavailableError(DomainError):
    """Raised by the HTTP layer when the roster store yields no data or rejects a save."""

    error_code = "roster_store_unavailable"
    status_code = 503
    default_message = RosterMessages.STORE_UNAVAILABLE
