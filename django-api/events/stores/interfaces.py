"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.

Event and User documents carry a ``version``. ``save_*`` writes the whole
document only if the stored version still matches, which makes every
load-transition-save cycle a conditional atomic update.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from events.domain import Attendee, AttendeeId, Event, EventId, User, UserId


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def save_event(self, event: Event) -> Event:
        """Persist marketers and concierge requests if ``event.version`` is current.

        Returns the event with its new version.

        Raises:
            EventNotFoundError: If the event no longer exists.
            ConcurrentModificationError: If the stored version moved on.
        """
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event. Returns False if it did not exist."""
        ...


class UserStore(ABC):
    """Interface for user persistence operations."""

    @abstractmethod
    def get_user(self, user_id: UserId) -> User | None:
        """Return a user by ID, or None if not found."""
        ...

    @abstractmethod
    def get_users(self, user_ids: list[UserId]) -> dict[UserId, User]:
        """Return the users that exist among ``user_ids``, keyed by ID."""
        ...

    @abstractmethod
    def list_participating_users(self) -> list[User]:
        """Return all users with a non-empty event participation set."""
        ...

    @abstractmethod
    def list_users_participating_in(self, event_id: EventId) -> list[User]:
        """Return the users whose event participation includes ``event_id``."""
        ...

    @abstractmethod
    def save_user(self, user: User) -> User:
        """Persist event participation if ``user.version`` is current.

        Raises:
            UserNotFoundError: If the user no longer exists.
            ConcurrentModificationError: If the stored version moved on.
        """
        ...


class AttendeeStore(ABC):
    """Interface for attendee check-in records."""

    @abstractmethod
    def find_by_phone(self, event_id: EventId, phone: str) -> list[Attendee]:
        """Return attendees registered for an event with a phone, oldest first."""
        ...

    @abstractmethod
    def mark_checked_in(
        self, attendee_id: AttendeeId, concierge_id: UserId, at: datetime
    ) -> Attendee | None:
        """Check an attendee in only if not already checked in.

        Returns the updated attendee, or None if the precondition failed.
        """
        ...
