"""Pytest configuration and shared fixtures."""

import pytest
from fakes import (
    NOW,
    InMemoryAttendeeStore,
    InMemoryEventStore,
    InMemoryUserStore,
    make_event,
    make_user,
)
from rest_framework.test import APIClient

from events.domain import Event, Role, User
from events.services import (
    CheckInService,
    ConciergeService,
    ConcurrencyRetry,
    EventService,
    ParticipationService,
    ReconciliationService,
)
from events.services.participation_service import convergence_retry


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def attendee_store() -> InMemoryAttendeeStore:
    return InMemoryAttendeeStore()


@pytest.fixture
def event(event_store: InMemoryEventStore) -> Event:
    return event_store.add(make_event())


@pytest.fixture
def marketer(user_store: InMemoryUserStore) -> User:
    return user_store.add(make_user(Role.MARKETER))


@pytest.fixture
def concierge(user_store: InMemoryUserStore) -> User:
    return user_store.add(make_user(Role.CONCIERGE))


@pytest.fixture
def admin(user_store: InMemoryUserStore) -> User:
    return user_store.add(make_user(Role.ADMIN))


@pytest.fixture
def participation_service(event_store, user_store) -> ParticipationService:
    return ParticipationService(
        event_store,
        user_store,
        retry=ConcurrencyRetry(max_attempts=5),
        convergence=convergence_retry(max_attempts=3),
    )


@pytest.fixture
def concierge_service(event_store, user_store, clock) -> ConciergeService:
    return ConciergeService(event_store, user_store, retry=ConcurrencyRetry(max_attempts=5), clock=clock)


@pytest.fixture
def checkin_service(attendee_store, concierge_service, clock) -> CheckInService:
    return CheckInService(attendee_store, concierge_service, clock=clock)


@pytest.fixture
def event_service(event_store, user_store) -> EventService:
    return EventService(event_store, user_store)


@pytest.fixture
def reconciliation_service(event_store, user_store) -> ReconciliationService:
    return ReconciliationService(event_store, user_store)
