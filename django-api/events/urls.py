from django.urls import path

from events.handlers import (
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

urlpatterns = [
    path(
        "concierge-requests/pending",
        PendingConciergeRequestsView.as_view(),
        name="concierge-requests-pending",
    ),
    path(
        "concierge-requests/approved",
        ApprovedConciergesView.as_view(),
        name="concierge-requests-approved",
    ),
    path(
        "concierge-requests/mine",
        MyConciergeAssignmentsView.as_view(),
        name="concierge-requests-mine",
    ),
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/join", EventJoinView.as_view(), name="event-join"),
    path("events/<str:event_id>/leave", EventLeaveView.as_view(), name="event-leave"),
    path(
        "events/<str:event_id>/concierge-requests",
        ConciergeRequestView.as_view(),
        name="concierge-requests",
    ),
    path(
        "events/<str:event_id>/concierge-requests/me",
        MyConciergeStatusView.as_view(),
        name="concierge-request-status",
    ),
    path(
        "events/<str:event_id>/concierge-requests/<str:request_id>/review",
        ConciergeReviewView.as_view(),
        name="concierge-request-review",
    ),
    path("events/<str:event_id>/check-in", CheckInView.as_view(), name="event-check-in"),
]
