"""Append-only ledger of money handed over to organizers."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

import structlog
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounts.models import RiderUser
from common.exceptions import NotFoundError
from events.models import Event
from finance.models import Payout

logger = structlog.get_logger(__name__)


def append_payout(
    event_id: UUID,
    amount: Decimal,
    proof_reference: str,
    notes: str = "",
    created_by: RiderUser | None = None,
    date: datetime | None = None,
) -> Payout:
    """Record a dispersal. The event's balance is derived from registrations and is left untouched."""
    event = Event.objects.filter(pk=event_id).first()
    if event is None:
        raise NotFoundError(_("Event not found."), event_id=event_id)
    payout = Payout.objects.create(
        event=event,
        amount=amount,
        proof_reference=proof_reference,
        notes=notes,
        created_by=created_by,
        date=date or timezone.now(),
    )
    logger.info(
        "payout_recorded",
        event_id=str(event_id),
        payout_id=str(payout.pk),
        amount=str(amount),
        created_by=str(created_by.pk) if created_by else None,
    )
    return payout


def list_payouts(event_id: UUID) -> list[Payout]:
    """Payouts for the event, newest first."""
    return list(Payout.objects.for_event(event_id).select_related("created_by"))
