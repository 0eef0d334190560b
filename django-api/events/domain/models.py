"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).

Event and User are separate aggregates, each saved as a whole document
guarded by its ``version``. Concierge requests live inside the Event.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from events.domain.value_objects import (
    AttendeeId,
    EventId,
    RequestId,
    RequestStatus,
    Role,
    UserId,
)


@dataclass(frozen=True)
class ConciergeRequest:
    """A concierge's request to be assigned to an event."""

    id: RequestId
    user_id: UserId
    status: RequestStatus
    requested_at: datetime
    reviewed_at: datetime | None = None
    reviewed_by: UserId | None = None


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    name: str
    location: str
    state: str
    starts_at: datetime | None
    capacity: int | None
    created_at: datetime
    updated_at: datetime
    marketers: tuple[UserId, ...] = ()
    concierge_requests: tuple[ConciergeRequest, ...] = ()
    version: int = 0

    def has_marketer(self, user_id: UserId) -> bool:
        return user_id in self.marketers


@dataclass(frozen=True)
class User:
    """Domain representation of a User."""

    id: UserId
    name: str
    email: str
    phone: str
    role: Role
    event_participation: tuple[EventId, ...] = ()
    version: int = 0

    def participates_in(self, event_id: EventId) -> bool:
        return event_id in self.event_participation


@dataclass(frozen=True)
class Attendee:
    """One registration for an event, keyed logically by (event, phone)."""

    id: AttendeeId
    event_id: EventId
    name: str
    phone: str
    created_at: datetime
    checked_in: bool = False
    checked_in_by: UserId | None = None
    checked_in_time: datetime | None = None


@dataclass(frozen=True)
class ConciergeAssignment:
    """Read-only projection row: a request together with its event and user."""

    event: Event
    request: ConciergeRequest
    user: User | None


@dataclass(frozen=True)
class EventRequestStatus:
    """An event paired with the caller's latest concierge request status."""

    event: Event
    status: RequestStatus


class DivergenceKind(str, Enum):
    MISSING_ON_USER = "missing_on_user"
    MISSING_ON_EVENT = "missing_on_event"
    DANGLING_EVENT = "dangling_event"
    DANGLING_MARKETER = "dangling_marketer"


@dataclass(frozen=True)
class ParticipationDivergence:
    """A violation of the event.marketers <-> user.event_participation link."""

    kind: DivergenceKind
    event_id: EventId
    user_id: UserId
