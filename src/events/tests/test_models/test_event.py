from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from accounts.models import RiderUser
from events.models import CostTier, Event
from finance.service.fees import TierQuote

pytestmark = pytest.mark.django_db


def test_unlimited_event_is_never_full(free_event: Event) -> None:
    free_event.current_participants = 10_000

    assert free_event.is_full is False


def test_event_is_full_at_capacity(free_event: Event) -> None:
    free_event.max_participants = 2
    free_event.current_participants = 2

    assert free_event.is_full is True


def test_capacity_constraint(free_event: Event) -> None:
    free_event.max_participants = 1
    free_event.current_participants = 2

    with pytest.raises(ValidationError):
        free_event.save()


def test_can_be_managed_by(
    free_event: Event, organizer: RiderUser, user: RiderUser, staff_user: RiderUser
) -> None:
    assert free_event.can_be_managed_by(organizer)
    assert free_event.can_be_managed_by(staff_user)
    assert not free_event.can_be_managed_by(user)
    assert list(Event.objects.managed_by(user)) == []
    assert list(Event.objects.managed_by(organizer)) == [free_event]


def test_tier_remaining(tier: CostTier) -> None:
    assert tier.remaining is None
    assert tier.is_sold_out is False

    tier.limit = 3
    tier.sold_count = 3

    assert tier.remaining == 0
    assert tier.is_sold_out is True


def test_tier_sold_count_within_limit(tier: CostTier) -> None:
    tier.limit = 1
    tier.sold_count = 2

    with pytest.raises(ValidationError):
        tier.save()


def test_apply_quote(tier: CostTier) -> None:
    tier.apply_quote(TierQuote(price=Decimal("228"), fee=Decimal("28"), net_price=Decimal("200")))

    assert (tier.price, tier.fee, tier.net_price) == (Decimal("228"), Decimal("28"), Decimal("200"))
