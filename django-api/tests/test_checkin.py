"""Unit tests for CheckInService.

Run with: pytest tests/test_checkin.py -v
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from uuid import uuid4

import pytest
from fakes import NOW, RacingAttendeeStore, make_attendee, make_event, make_user

from events.domain import EventId, Role
from events.domain.errors import (
    AlreadyCheckedInError,
    AttendeeNotFoundError,
    EventNotFoundError,
    NotApprovedConciergeError,
)
from events.services import CheckInService

PHONE = "+15551234567"


@pytest.fixture
def approved_concierge(concierge_service, event, concierge, admin):
    created = concierge_service.request(str(event.id), str(concierge.id))
    concierge_service.review(str(event.id), str(created.id), True, str(admin.id))
    return concierge


@pytest.fixture
def attendee(attendee_store, event):
    return attendee_store.add(make_attendee(event, phone=PHONE))


class TestCheckIn:
    def test_first_check_in_succeeds(self, checkin_service, attendee_store, event, approved_concierge, attendee):
        checked_in = checkin_service.check_in(str(event.id), PHONE, str(approved_concierge.id))

        assert checked_in.checked_in
        assert checked_in.checked_in_by == approved_concierge.id
        assert checked_in.checked_in_time == NOW
        assert attendee_store.get(attendee.id) == checked_in

    def test_second_check_in_is_a_conflict_and_keeps_first(
        self, checkin_service, attendee_store, user_store, concierge_service, event, approved_concierge, attendee, admin
    ):
        first = checkin_service.check_in(str(event.id), PHONE, str(approved_concierge.id))
        other = user_store.add(make_user(Role.CONCIERGE))
        request = concierge_service.request(str(event.id), str(other.id))
        concierge_service.review(str(event.id), str(request.id), True, str(admin.id))

        with pytest.raises(AlreadyCheckedInError):
            checkin_service.check_in(str(event.id), PHONE, str(other.id))

        stored = attendee_store.get(attendee.id)
        assert stored.checked_in_by == first.checked_in_by
        assert stored.checked_in_time == first.checked_in_time

    def test_pending_concierge_is_forbidden(self, checkin_service, concierge_service, event, concierge, attendee):
        concierge_service.request(str(event.id), str(concierge.id))
        with pytest.raises(NotApprovedConciergeError):
            checkin_service.check_in(str(event.id), PHONE, str(concierge.id))

    def test_rejected_concierge_is_forbidden(
        self, checkin_service, concierge_service, event, concierge, admin, attendee
    ):
        created = concierge_service.request(str(event.id), str(concierge.id))
        concierge_service.review(str(event.id), str(created.id), False, str(admin.id))
        with pytest.raises(NotApprovedConciergeError):
            checkin_service.check_in(str(event.id), PHONE, str(concierge.id))

    def test_approval_is_per_event(self, checkin_service, event_store, attendee_store, approved_concierge):
        other_event = event_store.add(make_event(name="Other"))
        attendee_store.add(make_attendee(other_event, phone=PHONE))
        with pytest.raises(NotApprovedConciergeError):
            checkin_service.check_in(str(other_event.id), PHONE, str(approved_concierge.id))

    def test_unknown_phone(self, checkin_service, event, approved_concierge, attendee):
        with pytest.raises(AttendeeNotFoundError):
            checkin_service.check_in(str(event.id), "+15550009999", str(approved_concierge.id))

    def test_unknown_event(self, checkin_service, approved_concierge):
        with pytest.raises(EventNotFoundError):
            checkin_service.check_in(str(EventId(uuid4())), PHONE, str(approved_concierge.id))

    def test_phone_is_trimmed(self, checkin_service, event, approved_concierge, attendee):
        checked_in = checkin_service.check_in(str(event.id), f"  {PHONE} ", str(approved_concierge.id))
        assert checked_in.id == attendee.id

    def test_duplicate_registrations_use_first(self, checkin_service, attendee_store, event, approved_concierge):
        first = attendee_store.add(make_attendee(event, phone=PHONE))
        second = attendee_store.add(make_attendee(event, phone=PHONE, created_at=NOW + timedelta(minutes=1)))

        checked_in = checkin_service.check_in(str(event.id), PHONE, str(approved_concierge.id))

        assert checked_in.id == first.id
        assert not attendee_store.get(second.id).checked_in

    def test_concurrent_check_ins_succeed_once(self, concierge_service, event, approved_concierge, clock):
        attendee = make_attendee(event, phone=PHONE)
        racing = RacingAttendeeStore([attendee], parties=2)
        service = CheckInService(racing, concierge_service, clock=clock)

        def attempt():
            try:
                return service.check_in(str(event.id), PHONE, str(approved_concierge.id))
            except AlreadyCheckedInError as exc:
                return exc

        with ThreadPoolExecutor(max_workers=2) as pool:
            outcomes = list(pool.map(lambda _: attempt(), range(2)))

        assert sum(isinstance(o, AlreadyCheckedInError) for o in outcomes) == 1
        assert racing.get(attendee.id).checked_in


class TestScenario:
    def test_request_approve_check_in_twice(
        self, concierge_service, checkin_service, event, concierge, admin, attendee
    ):
        created = concierge_service.request(str(event.id), str(concierge.id))
        assert created.status.value == "pending"

        approved = concierge_service.review(str(event.id), str(created.id), True, str(admin.id))
        assert approved.status.value == "approved"

        checkin_service.check_in(str(event.id), PHONE, str(concierge.id))
        with pytest.raises(AlreadyCheckedInError):
            checkin_service.check_in(str(event.id), PHONE, str(concierge.id))
