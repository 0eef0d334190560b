"""Unit tests for ConciergeService (request / review / cancel / listings).

Run with: pytest tests/test_concierge.py -v
"""

from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

import pytest
from fakes import NOW, RacingEventStore, make_event, make_user

from events.domain import EventId, RequestId, RequestStatus, Role
from events.domain.errors import (
    ConciergeRequestNotFoundError,
    DuplicatePendingRequestError,
    EventNotFoundError,
    InvalidIdentifierError,
    NotRequestOwnerError,
    RequestAlreadyReviewedError,
)
from events.services import ConciergeService, ConcurrencyRetry


def pending_for(event_store, event, user):
    return [
        r
        for r in event_store.get_event(event.id).concierge_requests
        if r.user_id == user.id and r.status is RequestStatus.PENDING
    ]


class TestRequest:
    def test_creates_pending_request(self, concierge_service, event_store, event, concierge):
        created = concierge_service.request(str(event.id), str(concierge.id))

        assert created.status is RequestStatus.PENDING
        assert created.requested_at == NOW
        assert created.reviewed_at is None
        assert event_store.get_event(event.id).concierge_requests == (created,)

    def test_duplicate_pending_is_a_conflict(self, concierge_service, event_store, event, concierge):
        concierge_service.request(str(event.id), str(concierge.id))
        with pytest.raises(DuplicatePendingRequestError):
            concierge_service.request(str(event.id), str(concierge.id))
        assert len(pending_for(event_store, event, concierge)) == 1

    def test_re_request_after_rejection(self, concierge_service, event_store, event, concierge, admin):
        first = concierge_service.request(str(event.id), str(concierge.id))
        concierge_service.review(str(event.id), str(first.id), False, str(admin.id))

        second = concierge_service.request(str(event.id), str(concierge.id))

        assert second.id != first.id
        assert concierge_service.my_status(str(event.id), str(concierge.id)) is RequestStatus.PENDING

    def test_unknown_event(self, concierge_service, concierge):
        with pytest.raises(EventNotFoundError):
            concierge_service.request(str(EventId(uuid4())), str(concierge.id))

    def test_malformed_user_id(self, concierge_service, event):
        with pytest.raises(InvalidIdentifierError):
            concierge_service.request(str(event.id), "12")

    def test_concurrent_requests_create_one_pending(self, user_store, concierge, clock):
        event = make_event()
        racing = RacingEventStore([event], parties=2)
        service = ConciergeService(racing, user_store, retry=ConcurrencyRetry(max_attempts=5), clock=clock)

        def attempt():
            try:
                return service.request(str(event.id), str(concierge.id))
            except DuplicatePendingRequestError as exc:
                return exc

        with ThreadPoolExecutor(max_workers=2) as pool:
            outcomes = list(pool.map(lambda _: attempt(), range(2)))

        created = [o for o in outcomes if not isinstance(o, DuplicatePendingRequestError)]
        conflicts = [o for o in outcomes if isinstance(o, DuplicatePendingRequestError)]
        assert len(created) == 1
        assert len(conflicts) == 1
        assert pending_for(racing, event, concierge) == created


class TestReview:
    def test_approve(self, concierge_service, event, concierge, admin):
        created = concierge_service.request(str(event.id), str(concierge.id))

        reviewed = concierge_service.review(str(event.id), str(created.id), True, str(admin.id))

        assert reviewed.status is RequestStatus.APPROVED
        assert reviewed.reviewed_at == NOW
        assert reviewed.reviewed_by == admin.id
        assert concierge_service.approved_concierges(str(event.id)) == frozenset({concierge.id})

    def test_reject(self, concierge_service, event, concierge, admin):
        created = concierge_service.request(str(event.id), str(concierge.id))

        reviewed = concierge_service.review(str(event.id), str(created.id), False, str(admin.id))

        assert reviewed.status is RequestStatus.REJECTED
        assert concierge_service.approved_concierges(str(event.id)) == frozenset()

    @pytest.mark.parametrize("first, second", [(True, True), (True, False), (False, True), (False, False)])
    def test_re_review_is_a_conflict(self, concierge_service, event_store, event, concierge, admin, first, second):
        created = concierge_service.request(str(event.id), str(concierge.id))
        decided = concierge_service.review(str(event.id), str(created.id), first, str(admin.id))

        with pytest.raises(RequestAlreadyReviewedError):
            concierge_service.review(str(event.id), str(created.id), second, str(admin.id))

        assert event_store.get_event(event.id).concierge_requests == (decided,)

    def test_unknown_request(self, concierge_service, event, admin):
        with pytest.raises(ConciergeRequestNotFoundError):
            concierge_service.review(str(event.id), str(RequestId.new()), True, str(admin.id))

    def test_unknown_event(self, concierge_service, admin):
        with pytest.raises(EventNotFoundError):
            concierge_service.review(str(EventId(uuid4())), str(RequestId.new()), True, str(admin.id))


class TestCancel:
    def test_cancel_removes_pending_request(self, concierge_service, event_store, event, concierge):
        created = concierge_service.request(str(event.id), str(concierge.id))

        cancelled = concierge_service.cancel(str(event.id), str(concierge.id))

        assert cancelled == created
        assert event_store.get_event(event.id).concierge_requests == ()
        assert concierge_service.my_status(str(event.id), str(concierge.id)) is None

    def test_cancel_without_pending_request(self, concierge_service, event, concierge):
        with pytest.raises(ConciergeRequestNotFoundError):
            concierge_service.cancel(str(event.id), str(concierge.id))

    def test_cancel_approved_request_is_not_found(self, concierge_service, event, concierge, admin):
        created = concierge_service.request(str(event.id), str(concierge.id))
        concierge_service.review(str(event.id), str(created.id), True, str(admin.id))

        with pytest.raises(ConciergeRequestNotFoundError):
            concierge_service.cancel(str(event.id), str(concierge.id), str(created.id))

    def test_cancel_other_users_request_is_forbidden(self, concierge_service, user_store, event, concierge):
        other = user_store.add(make_user(Role.CONCIERGE))
        theirs = concierge_service.request(str(event.id), str(other.id))

        with pytest.raises(NotRequestOwnerError):
            concierge_service.cancel(str(event.id), str(concierge.id), str(theirs.id))

        assert concierge_service.my_status(str(event.id), str(other.id)) is RequestStatus.PENDING


class TestListings:
    def test_list_pending_and_approved(self, concierge_service, event_store, user_store, event, concierge, admin):
        other_event = event_store.add(make_event(name="Fall Fair"))
        other = user_store.add(make_user(Role.CONCIERGE))
        approved = concierge_service.request(str(event.id), str(concierge.id))
        concierge_service.review(str(event.id), str(approved.id), True, str(admin.id))
        waiting = concierge_service.request(str(other_event.id), str(other.id))

        pending_rows = concierge_service.list_pending()
        approved_rows = concierge_service.list_approved()

        assert [(row.event.id, row.request.id, row.user) for row in pending_rows] == [
            (other_event.id, waiting.id, other)
        ]
        assert [(row.event.id, row.request.user_id) for row in approved_rows] == [(event.id, concierge.id)]

    def test_listing_has_no_side_effects(self, concierge_service, event_store, event, concierge):
        concierge_service.request(str(event.id), str(concierge.id))
        saves = event_store.saves

        concierge_service.list_pending()
        concierge_service.list_approved()

        assert event_store.saves == saves

    def test_unknown_user_is_listed_without_profile(self, concierge_service, event):
        ghost = str(uuid4())
        concierge_service.request(str(event.id), ghost)

        [row] = concierge_service.list_pending()

        assert row.user is None
        assert str(row.request.user_id) == ghost

    def test_my_status_without_requests(self, concierge_service, event, concierge):
        assert concierge_service.my_status(str(event.id), str(concierge.id)) is None

    def test_my_assignments(self, concierge_service, event_store, event, concierge, admin):
        untouched = event_store.add(make_event(name="Untouched"))
        created = concierge_service.request(str(event.id), str(concierge.id))
        concierge_service.review(str(event.id), str(created.id), False, str(admin.id))

        assignments = concierge_service.my_assignments(str(concierge.id))

        assert [(a.event.id, a.status) for a in assignments] == [(event.id, RequestStatus.REJECTED)]
        assert untouched.id not in [a.event.id for a in assignments]
