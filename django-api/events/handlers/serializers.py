"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class IdField(serializers.Field):
    """Renders an ID value object as its string form."""

    def to_representation(self, value):
        return str(value)


class ConciergeRequestSerializer(serializers.Serializer):
    """Serializer for ConciergeRequest domain model."""

    id = IdField()
    user = IdField(source="user_id")
    status = serializers.CharField(source="status.value")
    requested_at = serializers.DateTimeField()
    reviewed_at = serializers.DateTimeField(allow_null=True)
    reviewed_by = IdField(allow_null=True)


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = IdField()
    name = serializers.CharField()
    location = serializers.CharField()
    state = serializers.CharField()
    starts_at = serializers.DateTimeField(allow_null=True)
    capacity = serializers.IntegerField(allow_null=True)
    marketers = serializers.ListField(child=IdField())
    concierge_requests = ConciergeRequestSerializer(many=True)


class UserSummarySerializer(serializers.Serializer):
    id = IdField()
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField()


class ConciergeAssignmentSerializer(serializers.Serializer):
    """Flat row for the admin approval screens."""

    event_id = IdField(source="event.id")
    event_name = serializers.CharField(source="event.name")
    event_starts_at = serializers.DateTimeField(source="event.starts_at", allow_null=True)
    request_id = IdField(source="request.id")
    status = serializers.CharField(source="request.status.value")
    requested_at = serializers.DateTimeField(source="request.requested_at")
    reviewed_at = serializers.DateTimeField(source="request.reviewed_at", allow_null=True)
    user = UserSummarySerializer(allow_null=True)


class EventRequestStatusSerializer(serializers.Serializer):
    event = EventSerializer()
    status = serializers.CharField(source="status.value")


class AttendeeSerializer(serializers.Serializer):
    """Serializer for Attendee domain model."""

    id = IdField()
    event = IdField(source="event_id")
    name = serializers.CharField()
    checked_in = serializers.BooleanField()
    checked_in_by = IdField(allow_null=True)
    checked_in_time = serializers.DateTimeField(allow_null=True)


class ReviewInputSerializer(serializers.Serializer):
    approve = serializers.BooleanField()


class CheckInInputSerializer(serializers.Serializer):
    phone = serializers.CharField(max_length=32)
