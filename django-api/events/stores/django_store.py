"""Django ORM implementation of the stores.

Writes are single conditional UPDATE statements: documents are matched on
``version`` and check-ins on ``checked_in = false``, so the database decides
which of two concurrent writers wins.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any

import structlog
from django.db import DatabaseError
from django.db.models import F
from django.utils import timezone

from events import models
from events.domain import (
    Attendee,
    AttendeeId,
    ConciergeRequest,
    Event,
    EventId,
    RequestId,
    RequestStatus,
    Role,
    User,
    UserId,
)
from events.domain.errors import (
    ConcurrentModificationError,
    EventNotFoundError,
    StoreUnavailableError,
    UserNotFoundError,
)
from events.stores.interfaces import AttendeeStore, EventStore, UserStore

logger = structlog.get_logger(__name__)


@contextmanager
def _database_call(operation: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.exception("store_database_error", operation=operation)
        raise StoreUnavailableError(operation) from exc


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _request_to_document(request: ConciergeRequest) -> dict[str, Any]:
    return {
        "id": str(request.id),
        "user": str(request.user_id),
        "status": request.status.value,
        "requested_at": request.requested_at.isoformat(),
        "reviewed_at": request.reviewed_at.isoformat() if request.reviewed_at else None,
        "reviewed_by": str(request.reviewed_by) if request.reviewed_by else None,
    }


def _request_from_document(document: dict[str, Any]) -> ConciergeRequest:
    reviewed_by = document.get("reviewed_by")
    return ConciergeRequest(
        id=RequestId.from_string(document["id"]),
        user_id=UserId.from_string(document["user"]),
        status=RequestStatus(document["status"]),
        requested_at=datetime.fromisoformat(document["requested_at"]),
        reviewed_at=_parse_datetime(document.get("reviewed_at")),
        reviewed_by=UserId.from_string(reviewed_by) if reviewed_by else None,
    )


def _to_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        name=row.name,
        location=row.location,
        state=row.state,
        starts_at=row.starts_at,
        capacity=row.capacity,
        created_at=row.created_at,
        updated_at=row.updated_at,
        marketers=tuple(UserId.from_string(m) for m in row.marketers),
        concierge_requests=tuple(_request_from_document(r) for r in row.concierge_requests),
        version=row.version,
    )


def _to_user(row: models.User) -> User:
    return User(
        id=UserId(row.id),
        name=row.name,
        email=row.email,
        phone=row.phone,
        role=Role(row.role),
        event_participation=tuple(EventId.from_string(e) for e in row.event_participation),
        version=row.version,
    )


def _to_attendee(row: models.Attendee) -> Attendee:
    return Attendee(
        id=AttendeeId(row.id),
        event_id=EventId(row.event_id),
        name=row.name,
        phone=row.phone,
        created_at=row.created_at,
        checked_in=row.checked_in,
        checked_in_by=UserId(row.checked_in_by) if row.checked_in_by else None,
        checked_in_time=row.checked_in_time,
    )


class DjangoEventStore(EventStore):
    """Relational-backed event store using Django ORM."""

    def list_events(self) -> list[Event]:
        with _database_call("list_events"):
            return [_to_event(row) for row in models.Event.objects.order_by("-created_at")]

    def get_event(self, event_id: EventId) -> Event | None:
        with _database_call("get_event"):
            row = models.Event.objects.filter(pk=event_id.value).first()
        return _to_event(row) if row is not None else None

    def save_event(self, event: Event) -> Event:
        with _database_call("save_event"):
            updated = models.Event.objects.filter(pk=event.id.value, version=event.version).update(
                marketers=[str(m) for m in event.marketers],
                concierge_requests=[_request_to_document(r) for r in event.concierge_requests],
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
            if not updated:
                if not models.Event.objects.filter(pk=event.id.value).exists():
                    raise EventNotFoundError(str(event.id))
                raise ConcurrentModificationError("event", str(event.id))
        return replace(event, version=event.version + 1)

    def delete_event(self, event_id: EventId) -> bool:
        with _database_call("delete_event"):
            row = models.Event.objects.filter(pk=event_id.value).first()
            if row is None:
                return False
            # instance delete so post_delete signal handlers run
            row.delete()
        return True


class DjangoUserStore(UserStore):
    """Relational-backed user store using Django ORM."""

    def get_user(self, user_id: UserId) -> User | None:
        with _database_call("get_user"):
            row = models.User.objects.filter(pk=user_id.value).first()
        return _to_user(row) if row is not None else None

    def get_users(self, user_ids: list[UserId]) -> dict[UserId, User]:
        with _database_call("get_users"):
            rows = models.User.objects.filter(pk__in=[u.value for u in user_ids])
            return {UserId(row.id): _to_user(row) for row in rows}

    def list_participating_users(self) -> list[User]:
        with _database_call("list_participating_users"):
            rows = models.User.objects.exclude(event_participation=[]).order_by("created_at")
            return [_to_user(row) for row in rows]

    def list_users_participating_in(self, event_id: EventId) -> list[User]:
        with _database_call("list_users_participating_in"):
            # substring match on the JSON text; exact membership is checked below
            rows = models.User.objects.filter(event_participation__icontains=str(event_id))
            users = [_to_user(row) for row in rows]
        return [user for user in users if user.participates_in(event_id)]

    def save_user(self, user: User) -> User:
        with _database_call("save_user"):
            updated = models.User.objects.filter(pk=user.id.value, version=user.version).update(
                event_participation=[str(e) for e in user.event_participation],
                version=F("version") + 1,
            )
            if not updated:
                if not models.User.objects.filter(pk=user.id.value).exists():
                    raise UserNotFoundError(str(user.id))
                raise ConcurrentModificationError("user", str(user.id))
        return replace(user, version=user.version + 1)


class DjangoAttendeeStore(AttendeeStore):
    """Relational-backed attendee store using Django ORM."""

    def find_by_phone(self, event_id: EventId, phone: str) -> list[Attendee]:
        with _database_call("find_attendees_by_phone"):
            rows = models.Attendee.objects.filter(event_id=event_id.value, phone=phone).order_by("created_at")
            return [_to_attendee(row) for row in rows]

    def mark_checked_in(self, attendee_id: AttendeeId, concierge_id: UserId, at: datetime) -> Attendee | None:
        with _database_call("mark_checked_in"):
            updated = models.Attendee.objects.filter(pk=attendee_id.value, checked_in=False).update(
                checked_in=True,
                checked_in_by=concierge_id.value,
                checked_in_time=at,
            )
            if not updated:
                return None
            return _to_attendee(models.Attendee.objects.get(pk=attendee_id.value))
