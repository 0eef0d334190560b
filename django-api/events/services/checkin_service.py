"""Attendee check-in gated by concierge approval."""

from collections.abc import Callable
from datetime import datetime

import structlog
from django.utils import timezone

from events.domain import Attendee, EventId, UserId
from events.domain.errors import (
    AlreadyCheckedInError,
    AttendeeNotFoundError,
    NotApprovedConciergeError,
)
from events.services.concierge_service import ConciergeService
from events.services.identifiers import parse_id
from events.stores.interfaces import AttendeeStore

logger = structlog.get_logger(__name__)


class CheckInService:
    """Checks attendees in on behalf of approved concierges."""

    def __init__(
        self,
        attendees: AttendeeStore,
        concierge: ConciergeService,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._attendees = attendees
        self._concierge = concierge
        self._clock = clock

    def check_in(self, event_id: str, phone: str, concierge_id: str) -> Attendee:
        """Check in the attendee registered for ``event_id`` with ``phone``.

        A second check-in fails instead of overwriting who checked the
        attendee in and when.

        Raises:
            InvalidIdentifierError: If an ID is malformed.
            EventNotFoundError: If the event does not exist.
            NotApprovedConciergeError: If the concierge is not approved for the event.
            AttendeeNotFoundError: If nobody registered with that phone.
            AlreadyCheckedInError: If the attendee was checked in already.
        """
        eid = parse_id(EventId, event_id, "event ID")
        cid = parse_id(UserId, concierge_id, "user ID")
        if cid not in self._concierge.approved_concierges(event_id):
            raise NotApprovedConciergeError(event_id, concierge_id)

        matches = self._attendees.find_by_phone(eid, phone.strip())
        if not matches:
            raise AttendeeNotFoundError(event_id)
        if len(matches) > 1:
            logger.warning(
                "duplicate_attendee_registration",
                event_id=event_id,
                attendee_ids=[str(a.id) for a in matches],
            )
        attendee = matches[0]
        if attendee.checked_in:
            raise AlreadyCheckedInError(str(attendee.id))

        checked_in = self._attendees.mark_checked_in(attendee.id, cid, self._clock())
        if checked_in is None:
            logger.info("check_in_lost_race", event_id=event_id, attendee_id=str(attendee.id))
            raise AlreadyCheckedInError(str(attendee.id))

        logger.info(
            "attendee_checked_in",
            event_id=event_id,
            attendee_id=str(attendee.id),
            concierge_id=concierge_id,
        )
        return checked_in
