"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.

Events and users are stored document-style: marketer ids, concierge requests
and event participation are JSON columns on their owning row, and ``version``
backs the optimistic concurrency check in the stores.
"""

import uuid

from django.db import models


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    location = models.CharField(max_length=255, blank=True)
    state = models.CharField(max_length=64, blank=True)
    starts_at = models.DateTimeField(blank=True, null=True)
    capacity = models.PositiveIntegerField(blank=True, null=True)
    marketers = models.JSONField(default=list, blank=True)
    concierge_requests = models.JSONField(default=list, blank=True)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="events_even_created_0f4a1e_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class User(models.Model):
    """Persistence model for platform users (marketers, concierges, admins)."""

    class Role(models.TextChoices):
        MARKETER = "marketer", "Marketer"
        CONCIERGE = "concierge", "Concierge"
        ADMIN = "admin", "Admin"
        ATTENDEE = "attendee", "Attendee"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32, blank=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.ATTENDEE)
    event_participation = models.JSONField(default=list, blank=True)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["role"], name="events_user_role_7c2b9d_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.role})"


class Attendee(models.Model):
    """Persistence model for attendee registrations."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # registrations outlive their event
    event = models.ForeignKey(
        Event,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="attendees",
    )
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32)
    checked_in = models.BooleanField(default=False)
    checked_in_by = models.UUIDField(blank=True, null=True)
    checked_in_time = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event", "phone"], name="events_atte_event_i_3b8e5a_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.phone}"
