from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.utils import timezone

from accounts.models import RiderUser
from common.exceptions import NotFoundError
from events.models import Event
from finance.exceptions import PayoutImmutableError
from finance.models import Payout
from finance.service.payouts import append_payout, list_payouts

pytestmark = pytest.mark.django_db


def test_append_payout(paid_event: Event, staff_user: RiderUser) -> None:
    payout = append_payout(paid_event.pk, Decimal("250.00"), "SPEI-0001", notes="First transfer", created_by=staff_user)

    assert payout.event == paid_event
    assert payout.amount == Decimal("250.00")
    assert payout.created_by == staff_user
    assert payout.date is not None


def test_append_payout_unknown_event() -> None:
    with pytest.raises(NotFoundError):
        append_payout(uuid4(), Decimal("10"), "SPEI-0002")


def test_list_payouts_newest_first(paid_event: Event, free_event: Event) -> None:
    now = timezone.now()
    older = append_payout(paid_event.pk, Decimal("10"), "A", date=now - timedelta(days=2))
    newer = append_payout(paid_event.pk, Decimal("20"), "B", date=now)
    append_payout(free_event.pk, Decimal("30"), "C")

    assert [p.pk for p in list_payouts(paid_event.pk)] == [newer.pk, older.pk]


def test_payouts_cannot_be_edited(paid_event: Event) -> None:
    payout = append_payout(paid_event.pk, Decimal("10"), "SPEI-0003")
    payout.amount = Decimal("1000")

    with pytest.raises(PayoutImmutableError):
        payout.save()
    with pytest.raises(PayoutImmutableError):
        Payout.objects.filter(pk=payout.pk).update(amount=Decimal("1000"))

    payout.refresh_from_db()
    assert payout.amount == Decimal("10.00")


def test_payouts_cannot_be_deleted(paid_event: Event) -> None:
    payout = append_payout(paid_event.pk, Decimal("10"), "SPEI-0004")

    with pytest.raises(PayoutImmutableError):
        payout.delete()
    with pytest.raises(PayoutImmutableError):
        Payout.objects.all().delete()

    assert Payout.objects.filter(pk=payout.pk).exists()
