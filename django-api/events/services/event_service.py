"""Event service - event reads and administrative removal.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from functools import partial

import structlog

from events.domain import Event, EventId
from events.domain.errors import (
    ConcurrentModificationError,
    EventNotFoundError,
    ParticipationDivergedError,
    StoreUnavailableError,
    UserNotFoundError,
)
from events.services.identifiers import parse_id
from events.services.participation_service import convergence_retry, sync_participation
from events.services.retry import ConcurrencyRetry
from events.stores.interfaces import EventStore, UserStore

logger = structlog.get_logger(__name__)


class EventService:
    """Service for event catalog operations."""

    def __init__(
        self,
        store: EventStore,
        users: UserStore,
        convergence: ConcurrencyRetry | None = None,
    ) -> None:
        self._store = store
        self._users = users
        self._convergence = convergence or convergence_retry()

    def list_events(self) -> list[Event]:
        """Return all events."""
        return self._store.list_events()

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdentifierError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(parse_id(EventId, event_id, "event ID"))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def remove_event(self, event_id: str) -> None:
        """Delete an event and detach it from its marketers' participation.

        Raises:
            InvalidIdentifierError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ParticipationDivergedError: If some back-references could not be removed.
        """
        event = self.get_event(event_id)
        if not self._store.delete_event(event.id):
            raise EventNotFoundError(event_id)
        logger.info("event_removed", event_id=event_id, marketers=len(event.marketers))

        stale = []
        for user_id in event.marketers:
            try:
                self._convergence.run(partial(sync_participation, self._store, self._users, user_id, event.id))
            except UserNotFoundError:
                continue
            except (ConcurrentModificationError, StoreUnavailableError) as exc:
                logger.error(
                    "participation_diverged",
                    operation="remove_event",
                    event_id=event_id,
                    user_id=str(user_id),
                    error=str(exc),
                )
                stale.append(str(user_id))
        if stale:
            raise ParticipationDivergedError("remove_event", event_id, ",".join(stale))
