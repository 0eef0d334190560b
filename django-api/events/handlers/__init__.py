from events.handlers.views import (
    ApprovedConciergesView,
    CheckInView,
    ConciergeRequestView,
    ConciergeReviewView,
    EventDetailView,
    EventListView,
    EventJoinView,
    EventLeaveView,
    MyConciergeAssignmentsView,
    MyConciergeStatusView,
    PendingConciergeRequestsView,
)

__all__ = [
    "ApprovedConciergesView",
    "CheckInView",
    "ConciergeRequestView",
    "ConciergeReviewView",
    "EventDetailView",
    "EventListView",
    "EventJoinView",
    "EventLeaveView",
    "MyConciergeAssignmentsView",
    "MyConciergeStatusView",
    "PendingConciergeRequestsView",
]
