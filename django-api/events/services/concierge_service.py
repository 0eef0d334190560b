"""Concierge assignment state machine.

Requests are embedded in the Event document. Every mutation reloads the
event, applies a transition from ``events.domain.concierge`` and saves with
the loaded version, so the pending-uniqueness check and the write form one
conditional update. A concurrent writer forces a reload and a fresh check.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import TypeVar

import structlog
from django.utils import timezone

from events.domain import (
    ConciergeAssignment,
    ConciergeRequest,
    Event,
    EventId,
    EventRequestStatus,
    RequestId,
    RequestStatus,
    UserId,
)
from events.domain import concierge
from events.domain.errors import EventNotFoundError
from events.services.identifiers import parse_id
from events.services.retry import ConcurrencyRetry
from events.stores.interfaces import EventStore, UserStore

logger = structlog.get_logger(__name__)

R = TypeVar("R")


class ConciergeService:
    """Service for concierge requests and reviews."""

    def __init__(
        self,
        events: EventStore,
        users: UserStore,
        retry: ConcurrencyRetry | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._events = events
        self._users = users
        self._retry = retry or ConcurrencyRetry()
        self._clock = clock

    def request(self, event_id: str, user_id: str) -> ConciergeRequest:
        """Submit a pending concierge request.

        Raises:
            InvalidIdentifierError: If an ID is malformed.
            EventNotFoundError: If the event does not exist.
            DuplicatePendingRequestError: If the user already has a pending request.
        """
        eid = parse_id(EventId, event_id, "event ID")
        uid = parse_id(UserId, user_id, "user ID")
        new_request = ConciergeRequest(
            id=RequestId.new(),
            user_id=uid,
            status=RequestStatus.PENDING,
            requested_at=self._clock(),
        )

        def transition(event: Event) -> tuple[concierge.Requests, ConciergeRequest]:
            return concierge.insert_pending(event.concierge_requests, eid, new_request), new_request

        created = self._mutate(eid, transition)
        logger.info(
            "concierge_request_created",
            event_id=event_id,
            user_id=user_id,
            request_id=str(created.id),
        )
        return created

    def review(self, event_id: str, request_id: str, approve: bool, reviewer_id: str) -> ConciergeRequest:
        """Approve or reject a pending request.

        Raises:
            InvalidIdentifierError: If an ID is malformed.
            EventNotFoundError: If the event does not exist.
            ConciergeRequestNotFoundError: If the request does not exist.
            RequestAlreadyReviewedError: If the request is approved or rejected already.
        """
        eid = parse_id(EventId, event_id, "event ID")
        rid = parse_id(RequestId, request_id, "request ID")
        reviewer = parse_id(UserId, reviewer_id, "user ID")
        reviewed_at = self._clock()

        def transition(event: Event) -> tuple[concierge.Requests, ConciergeRequest]:
            return concierge.review(event.concierge_requests, eid, rid, approve, reviewer, reviewed_at)

        reviewed = self._mutate(eid, transition)
        logger.info(
            "concierge_request_reviewed",
            event_id=event_id,
            request_id=request_id,
            reviewer_id=reviewer_id,
            status=reviewed.status.value,
        )
        return reviewed

    def cancel(self, event_id: str, user_id: str, request_id: str | None = None) -> ConciergeRequest:
        """Withdraw the caller's own pending request.

        Raises:
            InvalidIdentifierError: If an ID is malformed.
            EventNotFoundError: If the event does not exist.
            ConciergeRequestNotFoundError: If no matching pending request exists.
            NotRequestOwnerError: If ``request_id`` belongs to another user.
        """
        eid = parse_id(EventId, event_id, "event ID")
        uid = parse_id(UserId, user_id, "user ID")
        rid = parse_id(RequestId, request_id, "request ID") if request_id is not None else None

        def transition(event: Event) -> tuple[concierge.Requests, ConciergeRequest]:
            return concierge.remove_pending(event.concierge_requests, eid, uid, rid)

        cancelled = self._mutate(eid, transition)
        logger.info(
            "concierge_request_cancelled",
            event_id=event_id,
            user_id=user_id,
            request_id=str(cancelled.id),
        )
        return cancelled

    def list_pending(self) -> list[ConciergeAssignment]:
        return self._list_with_status(RequestStatus.PENDING)

    def list_approved(self) -> list[ConciergeAssignment]:
        return self._list_with_status(RequestStatus.APPROVED)

    def my_status(self, event_id: str, user_id: str) -> RequestStatus | None:
        """Return the status of the user's latest request, or None if there is none."""
        eid = parse_id(EventId, event_id, "event ID")
        uid = parse_id(UserId, user_id, "user ID")
        latest = concierge.latest_for(self._get_event(eid).concierge_requests, uid)
        return latest.status if latest is not None else None

    def my_assignments(self, user_id: str) -> list[EventRequestStatus]:
        """Events where the user has any request, with their latest status."""
        uid = parse_id(UserId, user_id, "user ID")
        assignments = []
        for event in self._events.list_events():
            latest = concierge.latest_for(event.concierge_requests, uid)
            if latest is not None:
                assignments.append(EventRequestStatus(event=event, status=latest.status))
        return assignments

    def approved_concierges(self, event_id: str) -> frozenset[UserId]:
        """Users whose request for the event has been approved."""
        eid = parse_id(EventId, event_id, "event ID")
        return concierge.approved_users(self._get_event(eid).concierge_requests)

    def _list_with_status(self, status: RequestStatus) -> list[ConciergeAssignment]:
        matches = [
            (event, request)
            for event in self._events.list_events()
            for request in event.concierge_requests
            if request.status is status
        ]
        users = self._users.get_users(list({request.user_id for _, request in matches}))
        return [
            ConciergeAssignment(event=event, request=request, user=users.get(request.user_id))
            for event, request in matches
        ]

    def _mutate(self, event_id: EventId, transition: Callable[[Event], tuple[concierge.Requests, R]]) -> R:
        def attempt() -> R:
            event = self._get_event(event_id)
            requests, result = transition(event)
            self._events.save_event(replace(event, concierge_requests=requests))
            return result

        return self._retry.run(attempt)

    def _get_event(self, event_id: EventId) -> Event:
        event = self._events.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event
