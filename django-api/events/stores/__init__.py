from events.stores.django_store import DjangoAttendeeStore, DjangoEventStore, DjangoUserStore
from events.stores.interfaces import AttendeeStore, EventStore, UserStore

__all__ = [
    "EventStore",
    "UserStore",
    "AttendeeStore",
    "DjangoEventStore",
    "DjangoUserStore",
    "DjangoAttendeeStore",
]
