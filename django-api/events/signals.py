"""Django signals keeping back-references intact on ORM-level deletes.

Deletions that bypass EventService (admin, shell) still remove the event id
from every user's participation. The receiver runs inside the delete's
transaction, so a failure here rolls the delete back.
"""

from functools import partial

from django.db.models.signals import post_delete
from django.dispatch import receiver

from events.domain import EventId
from events.models import Event
from events.services.participation_service import convergence_retry_from_settings, sync_participation
from events.stores.django_store import DjangoEventStore, DjangoUserStore


@receiver(post_delete, sender=Event)
def detach_deleted_event(sender, instance, **kwargs):
    """Remove a deleted event from its users' event participation."""
    event_id = EventId(instance.pk)
    events = DjangoEventStore()
    users = DjangoUserStore()
    retry = convergence_retry_from_settings()
    for user in users.list_users_participating_in(event_id):
        retry.run(partial(sync_participation, events, users, user.id, event_id))
