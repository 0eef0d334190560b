"""Concierge request transitions.

Requests form an ordered tuple owned by the Event. Each function takes the
current tuple and returns a new one, raising a domain error when the
transition is not allowed. Callers persist the result with a conditional
save so the check and the write land in one atomic document update.

    pending --review(approve)--> approved
    pending --review(reject)---> rejected
    pending --cancel-----------> (removed)
"""

from dataclasses import replace
from datetime import datetime

from events.domain.errors import (
    ConciergeRequestNotFoundError,
    DuplicatePendingRequestError,
    NotRequestOwnerError,
    RequestAlreadyReviewedError,
)
from events.domain.models import ConciergeRequest
from events.domain.value_objects import EventId, RequestId, RequestStatus, UserId

Requests = tuple[ConciergeRequest, ...]


def pending_for(requests: Requests, user_id: UserId) -> ConciergeRequest | None:
    """Return the first pending request of a user, in request order."""
    for request in requests:
        if request.user_id == user_id and request.status is RequestStatus.PENDING:
            return request
    return None


def latest_for(requests: Requests, user_id: UserId) -> ConciergeRequest | None:
    """Return the most recently created request of a user."""
    for request in reversed(requests):
        if request.user_id == user_id:
            return request
    return None


def approved_users(requests: Requests) -> frozenset[UserId]:
    return frozenset(r.user_id for r in requests if r.status is RequestStatus.APPROVED)


def insert_pending(requests: Requests, event_id: EventId, request: ConciergeRequest) -> Requests:
    """Append a pending request unless the user already has one pending."""
    if pending_for(requests, request.user_id) is not None:
        raise DuplicatePendingRequestError(str(event_id), str(request.user_id))
    return requests + (request,)


def review(
    requests: Requests,
    event_id: EventId,
    request_id: RequestId,
    approve: bool,
    reviewer_id: UserId,
    reviewed_at: datetime,
) -> tuple[Requests, ConciergeRequest]:
    """Move a pending request to approved or rejected.

    Reviewing a terminal request is an error, never a no-op, so a second
    review cannot mask the first decision.
    """
    for index, request in enumerate(requests):
        if request.id != request_id:
            continue
        if request.status.is_terminal:
            raise RequestAlreadyReviewedError(str(request_id), request.status.value)
        reviewed = replace(
            request,
            status=RequestStatus.APPROVED if approve else RequestStatus.REJECTED,
            reviewed_at=reviewed_at,
            reviewed_by=reviewer_id,
        )
        return requests[:index] + (reviewed,) + requests[index + 1 :], reviewed
    raise ConciergeRequestNotFoundError(str(event_id))


def remove_pending(
    requests: Requests,
    event_id: EventId,
    user_id: UserId,
    request_id: RequestId | None = None,
) -> tuple[Requests, ConciergeRequest]:
    """Remove a pending request owned by ``user_id``.

    Without ``request_id`` the user's first pending request is removed.
    """
    for index, request in enumerate(requests):
        if request_id is None:
            matches = request.user_id == user_id and request.status is RequestStatus.PENDING
        else:
            matches = request.id == request_id
        if matches:
            break
    else:
        raise ConciergeRequestNotFoundError(str(event_id), "No pending request found")

    if request.status is not RequestStatus.PENDING:
        raise ConciergeRequestNotFoundError(str(event_id), "No pending request found")
    if request.user_id != user_id:
        raise NotRequestOwnerError(str(request.id))
    return requests[:index] + requests[index + 1 :], request
