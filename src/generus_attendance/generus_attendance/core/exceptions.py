from __future__ import annotations

from .enums import ErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = ErrorCode.VALIDATION_ERROR


class NotFoundError(DomainError):
    """Raised when an id or barcode does not resolve to any row."""

    code = ErrorCode.NOT_FOUND


class MemberNotFoundOrInactiveError(NotFoundError):
    """Raised by a barcode scan when the member is unknown or deactivated."""

    code = ErrorCode.MEMBER_NOT_FOUND_OR_INACTIVE


class InactiveError(DomainError):
    """Raised when an entity exists but is flagged inactive."""

    code = ErrorCode.INACTIVE


class DuplicateCheckInTodayError(DomainError):
    """Raised when a member already has a check-in on the same calendar day."""

    code = ErrorCode.DUPLICATE_CHECKIN_TODAY


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = ErrorCode.AUTHENTICATION_FAILED


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = ErrorCode.FORBIDDEN
