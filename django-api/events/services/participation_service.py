"""Participation coordinator.

A marketer's membership is recorded twice: in ``event.marketers`` and in
``user.event_participation``. The store offers no transaction spanning both
documents, so every change is a two-step saga:

1. Conditional save of the Event (retried on version conflicts). Nothing is
   committed if this step fails.
2. The User is brought in line with whatever the Event says at that moment,
   retried until it converges. If it still fails, the event side stays
   committed and ParticipationDivergedError is raised; the reconciliation
   job repairs the link later.

The event side is always written first and is treated as authoritative. The
user side never follows the caller's intent, so an interleaved join, leave or
removal cannot leave a stale back-reference behind.
"""

from dataclasses import replace

import structlog
from django.conf import settings

from events.domain import Event, EventId, Role, User, UserId
from events.domain.errors import (
    ConcurrentModificationError,
    EventNotFoundError,
    NotAMarketerError,
    ParticipationDivergedError,
    StoreUnavailableError,
    UserNotFoundError,
)
from events.services.identifiers import parse_id
from events.services.retry import ConcurrencyRetry
from events.stores.interfaces import EventStore, UserStore

logger = structlog.get_logger(__name__)


def set_participation(users: UserStore, user_id: UserId, event_id: EventId, present: bool) -> bool:
    """One attempt at making ``event_id`` present/absent in a user's participation.

    Returns True if the user document was written.
    """
    user = users.get_user(user_id)
    if user is None:
        raise UserNotFoundError(str(user_id))
    if user.participates_in(event_id) == present:
        return False
    if present:
        participation = user.event_participation + (event_id,)
    else:
        participation = tuple(e for e in user.event_participation if e != event_id)
    users.save_user(replace(user, event_participation=participation))
    return True


def _lists_marketer(events: EventStore, event_id: EventId, user_id: UserId) -> bool:
    event = events.get_event(event_id)
    return event is not None and event.has_marketer(user_id)


def sync_participation(events: EventStore, users: UserStore, user_id: UserId, event_id: EventId) -> bool:
    """One attempt at mirroring the event's marketer list onto the user.

    The event is read again after the user write; if it moved in between,
    ConcurrentModificationError is raised so the caller retries against the
    new state. Returns whether the user now participates.
    """
    present = _lists_marketer(events, event_id, user_id)
    set_participation(users, user_id, event_id, present)
    if _lists_marketer(events, event_id, user_id) != present:
        raise ConcurrentModificationError("event", str(event_id))
    return present


def convergence_retry(max_attempts: int = 3, retry_delay: float = 0.0) -> ConcurrencyRetry:
    """Retry policy for the lagging side of a dual write."""
    return ConcurrencyRetry(
        max_attempts=max_attempts,
        retry_delay=retry_delay,
        retry_on=(ConcurrentModificationError, StoreUnavailableError),
    )


def convergence_retry_from_settings() -> ConcurrencyRetry:
    return convergence_retry(
        max_attempts=settings.EVENTS_CONVERGENCE_ATTEMPTS,
        retry_delay=settings.EVENTS_RETRY_DELAY,
    )


class ParticipationService:
    """Adds and removes marketers from events."""

    def __init__(
        self,
        events: EventStore,
        users: UserStore,
        retry: ConcurrencyRetry | None = None,
        convergence: ConcurrencyRetry | None = None,
    ) -> None:
        self._events = events
        self._users = users
        self._retry = retry or ConcurrencyRetry()
        self._convergence = convergence or convergence_retry()

    def join(self, event_id: str, user_id: str) -> Event:
        """Add a marketer to an event. Joining twice is a no-op.

        The returned view is read after both sides settle, so a leave that
        lands in between is reflected in it.

        Raises:
            InvalidIdentifierError: If an ID is malformed.
            UserNotFoundError: If the user does not exist.
            NotAMarketerError: If the user's role is not marketer.
            EventNotFoundError: If the event does not exist.
            ParticipationDivergedError: If only the event side was written.
        """
        eid = parse_id(EventId, event_id, "event ID")
        uid = parse_id(UserId, user_id, "user ID")
        user = self._get_user(uid)
        if user.role is not Role.MARKETER:
            raise NotAMarketerError(user_id)

        def add_marketer() -> bool:
            event = self._get_event(eid)
            if event.has_marketer(uid):
                return False
            self._events.save_event(replace(event, marketers=event.marketers + (uid,)))
            return True

        added = self._retry.run(add_marketer)
        self._converge_user("join", eid, uid, intended=True)
        if added:
            logger.info("marketer_joined_event", event_id=event_id, user_id=user_id)
        return self._get_event(eid)

    def leave(self, event_id: str, user_id: str) -> Event:
        """Remove a marketer from an event. Leaving as a non-member is a no-op.

        Raises:
            InvalidIdentifierError: If an ID is malformed.
            UserNotFoundError: If the user does not exist.
            EventNotFoundError: If the event does not exist.
            ParticipationDivergedError: If only the event side was written.
        """
        eid = parse_id(EventId, event_id, "event ID")
        uid = parse_id(UserId, user_id, "user ID")
        self._get_user(uid)

        def remove_marketer() -> bool:
            event = self._get_event(eid)
            if not event.has_marketer(uid):
                return False
            marketers = tuple(m for m in event.marketers if m != uid)
            self._events.save_event(replace(event, marketers=marketers))
            return True

        removed = self._retry.run(remove_marketer)
        self._converge_user("leave", eid, uid, intended=False)
        if removed:
            logger.info("marketer_left_event", event_id=event_id, user_id=user_id)
        return self._get_event(eid)

    def _converge_user(self, operation: str, event_id: EventId, user_id: UserId, intended: bool) -> None:
        try:
            present = self._convergence.run(
                lambda: sync_participation(self._events, self._users, user_id, event_id)
            )
        except (ConcurrentModificationError, StoreUnavailableError, UserNotFoundError) as exc:
            logger.error(
                "participation_diverged",
                operation=operation,
                event_id=str(event_id),
                user_id=str(user_id),
                error=str(exc),
            )
            raise ParticipationDivergedError(operation, str(event_id), str(user_id)) from exc
        if present != intended:
            # a concurrent change to the event won; both sides reflect it
            logger.info(
                "participation_superseded",
                operation=operation,
                event_id=str(event_id),
                user_id=str(user_id),
            )

    def _get_event(self, event_id: EventId) -> Event:
        event = self._events.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def _get_user(self, user_id: UserId) -> User:
        user = self._users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user
