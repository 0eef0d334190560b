"""Repairs the marketer back-references left inconsistent by partial failures.

``event.marketers`` is authoritative: the coordinator always commits it
first, so a divergence means the user side lagged behind.
"""

from dataclasses import dataclass, field, replace
from functools import partial

import structlog

from events.domain import (
    DivergenceKind,
    EventId,
    ParticipationDivergence,
    Role,
    UserId,
)
from events.domain.errors import DomainError
from events.services.participation_service import convergence_retry, sync_participation
from events.services.retry import ConcurrencyRetry
from events.stores.interfaces import EventStore, UserStore

logger = structlog.get_logger(__name__)


@dataclass
class ReconciliationResult:
    repaired: list[ParticipationDivergence] = field(default_factory=list)
    failed: list[ParticipationDivergence] = field(default_factory=list)


class ReconciliationService:
    """Scans for and repairs participation divergences."""

    def __init__(self, events: EventStore, users: UserStore, retry: ConcurrencyRetry | None = None) -> None:
        self._events = events
        self._users = users
        self._retry = retry or convergence_retry()

    def scan(self) -> list[ParticipationDivergence]:
        events = {event.id: event for event in self._events.list_events()}
        participating = self._users.list_participating_users()
        marketer_ids = {user_id for event in events.values() for user_id in event.marketers}
        users = self._users.get_users(list(marketer_ids | {user.id for user in participating}))

        divergences = []
        for event in events.values():
            for user_id in event.marketers:
                user = users.get(user_id)
                if user is None:
                    divergences.append(
                        ParticipationDivergence(DivergenceKind.DANGLING_MARKETER, event.id, user_id)
                    )
                elif user.role is Role.MARKETER and not user.participates_in(event.id):
                    divergences.append(
                        ParticipationDivergence(DivergenceKind.MISSING_ON_USER, event.id, user_id)
                    )
        for user in participating:
            for event_id in user.event_participation:
                event = events.get(event_id)
                if event is None:
                    divergences.append(
                        ParticipationDivergence(DivergenceKind.DANGLING_EVENT, event_id, user.id)
                    )
                elif user.role is Role.MARKETER and not event.has_marketer(user.id):
                    divergences.append(
                        ParticipationDivergence(DivergenceKind.MISSING_ON_EVENT, event_id, user.id)
                    )

        if divergences:
            logger.warning("participation_divergences_found", count=len(divergences))
        return divergences

    def repair(self, divergences: list[ParticipationDivergence] | None = None) -> ReconciliationResult:
        """Fix each divergence, re-checking the event side before every write.

        A divergence that cannot be repaired now is reported in ``failed``
        and left for the next run.
        """
        if divergences is None:
            divergences = self.scan()
        result = ReconciliationResult()
        for divergence in divergences:
            try:
                self._retry.run(partial(self._repair_one, divergence))
            except DomainError as exc:
                logger.warning(
                    "participation_repair_failed",
                    kind=divergence.kind.value,
                    event_id=str(divergence.event_id),
                    user_id=str(divergence.user_id),
                    error=str(exc),
                )
                result.failed.append(divergence)
            else:
                result.repaired.append(divergence)
        logger.info(
            "participation_reconciled",
            repaired=len(result.repaired),
            failed=len(result.failed),
        )
        return result

    def _repair_one(self, divergence: ParticipationDivergence) -> None:
        if divergence.kind is DivergenceKind.DANGLING_MARKETER:
            self._drop_marketer(divergence.event_id, divergence.user_id)
            return
        sync_participation(self._events, self._users, divergence.user_id, divergence.event_id)

    def _drop_marketer(self, event_id: EventId, user_id: UserId) -> None:
        event = self._events.get_event(event_id)
        if event is None or not event.has_marketer(user_id):
            return
        if self._users.get_user(user_id) is not None:
            return
        marketers = tuple(m for m in event.marketers if m != user_id)
        self._events.save_event(replace(event, marketers=marketers))
