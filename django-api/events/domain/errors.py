"""Domain error codes for the events module.

Every error belongs to exactly one category (not found, forbidden, conflict,
partial failure, invalid input, unavailable) so callers can tell
"already approved" apart from "not found" and "not authorized".
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CONCIERGE_REQUEST_NOT_FOUND = "CONCIERGE_REQUEST_NOT_FOUND"
    ATTENDEE_NOT_FOUND = "ATTENDEE_NOT_FOUND"
    NOT_A_MARKETER = "NOT_A_MARKETER"
    NOT_APPROVED_CONCIERGE = "NOT_APPROVED_CONCIERGE"
    NOT_REQUEST_OWNER = "NOT_REQUEST_OWNER"
    DUPLICATE_PENDING_REQUEST = "DUPLICATE_PENDING_REQUEST"
    REQUEST_ALREADY_REVIEWED = "REQUEST_ALREADY_REVIEWED"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
    PARTICIPATION_DIVERGED = "PARTICIPATION_DIVERGED"
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """An event, user, request or attendee does not exist."""


class ForbiddenError(DomainError):
    """The actor is not allowed to act on the target resource."""


class ConflictError(DomainError):
    """The target is in a state that does not permit the operation."""


class PartialFailureError(DomainError):
    """Only one side of a dual write committed."""


class InvalidInputError(DomainError):
    """Malformed identifier or input shape."""


class UnavailableError(DomainError):
    """The underlying store could not complete the call."""


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
        )
        self.user_id = user_id


class ConciergeRequestNotFoundError(NotFoundError):
    """Raised when no matching (pending) concierge request exists."""

    def __init__(self, event_id: str, message: str = "Concierge request not found") -> None:
        super().__init__(
            code=ErrorCode.CONCIERGE_REQUEST_NOT_FOUND,
            message=message,
        )
        self.event_id = event_id


class AttendeeNotFoundError(NotFoundError):
    """Raised when no attendee is registered for an event with a phone number."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.ATTENDEE_NOT_FOUND,
            message="Attendee not found for this event",
        )
        self.event_id = event_id


class NotAMarketerError(ForbiddenError):
    """Raised when a non-marketer tries to join an event."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_A_MARKETER,
            message="Only marketers can be added to events",
        )
        self.user_id = user_id


class NotApprovedConciergeError(ForbiddenError):
    """Raised when a concierge is not approved for the event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_APPROVED_CONCIERGE,
            message="You are not an approved concierge for this event",
        )
        self.event_id = event_id
        self.user_id = user_id


class NotRequestOwnerError(ForbiddenError):
    """Raised when a user tries to cancel someone else's request."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_REQUEST_OWNER,
            message="You can only cancel your own concierge request",
        )
        self.request_id = request_id


class DuplicatePendingRequestError(ConflictError):
    """Raised when a user already has a pending request for the event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_PENDING_REQUEST,
            message="You have already requested to be concierge for this event",
        )
        self.event_id = event_id
        self.user_id = user_id


class RequestAlreadyReviewedError(ConflictError):
    """Raised when reviewing a request that is no longer pending."""

    def __init__(self, request_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.REQUEST_ALREADY_REVIEWED,
            message="Request already reviewed",
        )
        self.request_id = request_id
        self.status = status


class AlreadyCheckedInError(ConflictError):
    """Raised when the attendee was checked in before."""

    def __init__(self, attendee_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CHECKED_IN,
            message="Attendee already checked in",
        )
        self.attendee_id = attendee_id


class ConcurrentModificationError(ConflictError):
    """Raised when a document changed between load and conditional save."""

    def __init__(self, aggregate: str, aggregate_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENT_MODIFICATION,
            message=f"The {aggregate} was modified concurrently, please retry",
        )
        self.aggregate = aggregate
        self.aggregate_id = aggregate_id


class ParticipationDivergedError(PartialFailureError):
    """Raised when the event side committed but the user side did not."""

    def __init__(self, operation: str, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.PARTICIPATION_DIVERGED,
            message="Participation was only partially updated and will be reconciled",
        )
        self.operation = operation
        self.event_id = event_id
        self.user_id = user_id


class InvalidIdentifierError(InvalidInputError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, field: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_IDENTIFIER,
            message=f"Invalid {field} format",
        )
        self.field = field


class StoreUnavailableError(UnavailableError):
    """Raised by store adapters when the database call fails."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Storage is temporarily unavailable",
        )
        self.operation = operation
