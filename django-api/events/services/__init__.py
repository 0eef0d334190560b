from events.services.checkin_service import CheckInService
from events.services.concierge_service import ConciergeService
from events.services.event_service import EventService
from events.services.participation_service import ParticipationService
from events.services.reconciliation_service import ReconciliationResult, ReconciliationService
from events.services.retry import ConcurrencyRetry

__all__ = [
    "CheckInService",
    "ConciergeService",
    "EventService",
    "ParticipationService",
    "ReconciliationService",
    "ReconciliationResult",
    "ConcurrencyRetry",
]
