"""Per-event financial aggregation over committed registrations."""

from decimal import Decimal
from uuid import UUID

import structlog
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _

from common.exceptions import NotFoundError
from events.models import Event, Registration
from finance.models import Payout
from finance.schema import EventFinancialOverview, EventFinancialSummary, MoneyBreakdown

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def resolve_amounts(registration: Registration) -> tuple[Decimal, Decimal, Decimal]:
    """Return ``(gross, fee, net)`` for a registration.

    The snapshot wins. Rows without one (legacy data) use whatever amounts were recorded
    on the row and fall back to the tier's current configuration for the rest. Without
    either, net is ``gross - fee``.
    """
    if registration.snapshot_kind == Registration.SnapshotKind.NO_CHARGE:
        return ZERO, ZERO, ZERO

    gross = registration.amount_paid
    fee = registration.platform_fee
    net = registration.organizer_net
    if registration.snapshot_kind is None and registration.tier is not None:
        gross = gross or registration.tier.price
        fee = registration.tier.fee if fee is None else fee
        net = registration.tier.net_price if net is None else net

    gross = gross or ZERO
    fee = fee or ZERO
    net = gross - fee if net is None else net
    return gross, fee, net


def _add(bucket: MoneyBreakdown, gross: Decimal, fee: Decimal, net: Decimal) -> None:
    bucket.gross += gross
    bucket.fee += fee
    bucket.net += net


def summarize_event(event_id: UUID) -> EventFinancialSummary:
    """Aggregate confirmed, paid registrations of an event into platform and manual buckets.

    balance_to_disperse = (platform.gross - platform.fee) - manual.fee
    """
    if not Event.objects.filter(pk=event_id).exists():
        raise NotFoundError(_("Event not found."), event_id=event_id)

    total, platform, manual = MoneyBreakdown(), MoneyBreakdown(), MoneyBreakdown()
    registrations = Registration.objects.filter(event_id=event_id).confirmed().paid().select_related("tier")
    for registration in registrations:
        gross, fee, net = resolve_amounts(registration)
        _add(total, gross, fee, net)
        if registration.payment_method == Registration.PaymentMethod.MANUAL:
            _add(manual, gross, fee, net)
        else:
            _add(platform, gross, fee, net)

    balance = (platform.gross - platform.fee) - manual.fee
    logger.debug("event_financial_summary", event_id=str(event_id), total_gross=str(total.gross), balance=str(balance))
    return EventFinancialSummary(
        event_id=event_id,
        total=total,
        platform=platform,
        manual=manual,
        balance_to_disperse=balance,
        amount_dispersed=dispersed_total(event_id),
    )


def dispersed_total(event_id: UUID) -> Decimal:
    """Sum of recorded payouts for the event. For display; not part of the balance."""
    return Payout.objects.for_event(event_id).aggregate(total=Sum("amount"))["total"] or ZERO


def events_financial_overview() -> list[EventFinancialOverview]:
    """Collected, dispersed and pending amounts for every paid event, newest first."""
    overview = []
    for event in Event.objects.paid().select_related("organizer").order_by("-start"):
        summary = summarize_event(event.pk)
        overview.append(
            EventFinancialOverview(
                event_id=event.pk,
                name=event.name,
                start=event.start,
                organizer_name=event.organizer.get_display_name(),
                total_collected=summary.total.gross,
                amount_dispersed=summary.amount_dispersed,
                pending_disbursement=summary.balance_to_disperse,
            )
        )
    return overview
