"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain errors to the exception handler in handlers/errors.py
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.handlers.permissions import IsAdmin, IsConcierge, IsMarketer
from events.handlers.serializers import (
    AttendeeSerializer,
    CheckInInputSerializer,
    ConciergeAssignmentSerializer,
    ConciergeRequestSerializer,
    EventRequestStatusSerializer,
    EventSerializer,
    ReviewInputSerializer,
)
from events.services import (
    CheckInService,
    ConciergeService,
    ConcurrencyRetry,
    EventService,
    ParticipationService,
)
from events.services.participation_service import convergence_retry_from_settings
from events.stores import DjangoAttendeeStore, DjangoEventStore, DjangoUserStore


def event_service() -> EventService:
    return EventService(DjangoEventStore(), DjangoUserStore(), convergence=convergence_retry_from_settings())


def participation_service() -> ParticipationService:
    return ParticipationService(
        DjangoEventStore(),
        DjangoUserStore(),
        retry=ConcurrencyRetry.from_settings(),
        convergence=convergence_retry_from_settings(),
    )


def concierge_service() -> ConciergeService:
    return ConciergeService(DjangoEventStore(), DjangoUserStore(), retry=ConcurrencyRetry.from_settings())


def checkin_service() -> CheckInService:
    return CheckInService(DjangoAttendeeStore(), concierge_service())


class EventListView(APIView):
    """Handler for GET /api/events"""

    def get(self, request: Request) -> Response:
        events = event_service().list_events()
        return Response(EventSerializer(events, many=True).data)


class EventDetailView(APIView):
    """Handler for GET/DELETE /api/events/{event_id}"""

    def get_permissions(self):
        if self.request.method == "DELETE":
            return [IsAdmin()]
        return [IsAuthenticated()]

    def get(self, request: Request, event_id: str) -> Response:
        event = event_service().get_event(event_id)
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        event_service().remove_event(event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventJoinView(APIView):
    """Handler for POST /api/events/{event_id}/join"""

    permission_classes = [IsMarketer]

    def post(self, request: Request, event_id: str) -> Response:
        event = participation_service().join(event_id, str(request.user.user_id))
        return Response(EventSerializer(event).data)


class EventLeaveView(APIView):
    """Handler for DELETE /api/events/{event_id}/leave"""

    permission_classes = [IsMarketer]

    def delete(self, request: Request, event_id: str) -> Response:
        event = participation_service().leave(event_id, str(request.user.user_id))
        return Response(EventSerializer(event).data)


class ConciergeRequestView(APIView):
    """Handler for POST/DELETE /api/events/{event_id}/concierge-requests"""

    permission_classes = [IsConcierge]

    def post(self, request: Request, event_id: str) -> Response:
        created = concierge_service().request(event_id, str(request.user.user_id))
        return Response(ConciergeRequestSerializer(created).data, status=status.HTTP_201_CREATED)

    def delete(self, request: Request, event_id: str) -> Response:
        concierge_service().cancel(
            event_id,
            str(request.user.user_id),
            request_id=request.query_params.get("request_id"),
        )
        return Response({"message": "Request cancelled"})


class MyConciergeStatusView(APIView):
    """Handler for GET /api/events/{event_id}/concierge-requests/me"""

    permission_classes = [IsConcierge]

    def get(self, request: Request, event_id: str) -> Response:
        current = concierge_service().my_status(event_id, str(request.user.user_id))
        return Response({"status": current.value if current is not None else "none"})


class ConciergeReviewView(APIView):
    """Handler for POST /api/events/{event_id}/concierge-requests/{request_id}/review"""

    permission_classes = [IsAdmin]

    def post(self, request: Request, event_id: str, request_id: str) -> Response:
        payload = ReviewInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        reviewed = concierge_service().review(
            event_id,
            request_id,
            payload.validated_data["approve"],
            str(request.user.user_id),
        )
        return Response(ConciergeRequestSerializer(reviewed).data)


class PendingConciergeRequestsView(APIView):
    """Handler for GET /api/concierge-requests/pending"""

    permission_classes = [IsAdmin]

    def get(self, request: Request) -> Response:
        rows = concierge_service().list_pending()
        return Response(ConciergeAssignmentSerializer(rows, many=True).data)


class ApprovedConciergesView(APIView):
    """Handler for GET /api/concierge-requests/approved"""

    permission_classes = [IsAdmin]

    def get(self, request: Request) -> Response:
        rows = concierge_service().list_approved()
        return Response(ConciergeAssignmentSerializer(rows, many=True).data)


class MyConciergeAssignmentsView(APIView):
    """Handler for GET /api/concierge-requests/mine"""

    permission_classes = [IsConcierge]

    def get(self, request: Request) -> Response:
        rows = concierge_service().my_assignments(str(request.user.user_id))
        return Response(EventRequestStatusSerializer(rows, many=True).data)


class CheckInView(APIView):
    """Handler for POST /api/events/{event_id}/check-in"""

    permission_classes = [IsConcierge]

    def post(self, request: Request, event_id: str) -> Response:
        payload = CheckInInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        attendee = checkin_service().check_in(
            event_id,
            payload.validated_data["phone"],
            str(request.user.user_id),
        )
        return Response(AttendeeSerializer(attendee).data)
