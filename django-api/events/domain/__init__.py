from events.domain.models import (
    Attendee,
    ConciergeAssignment,
    ConciergeRequest,
    DivergenceKind,
    Event,
    EventRequestStatus,
    ParticipationDivergence,
    User,
)
from events.domain.value_objects import (
    AttendeeId,
    EventId,
    RequestId,
    RequestStatus,
    Role,
    UserId,
)

__all__ = [
    "Event",
    "ConciergeRequest",
    "User",
    "Attendee",
    "ConciergeAssignment",
    "EventRequestStatus",
    "ParticipationDivergence",
    "DivergenceKind",
    "EventId",
    "UserId",
    "AttendeeId",
    "RequestId",
    "RequestStatus",
    "Role",
]
