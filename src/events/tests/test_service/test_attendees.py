from datetime import timedelta
from decimal import Decimal

import pytest
from freezegun import freeze_time

from accounts.models import RiderUser
from conftest import RiderUserFactory
from events.models import CostTier, Event
from events.schema import MASKED, RegistrationExtraFields
from events.service import registration_service

pytestmark = pytest.mark.django_db

EMERGENCY = RegistrationExtraFields(
    emergency_contact_name="Dana Rider",
    emergency_contact_phone="+52 55 1234 5678",
    blood_type="O+",
    insurance_info="GNP 123",
    allergies="none",
)


@pytest.fixture
def registered_event(paid_event: Event, tier: CostTier, user: RiderUser) -> Event:
    paid_event.requires_emergency_contact = True
    paid_event.save()
    registration_service.register_user_to_event(paid_event.pk, user.pk, tier_id=tier.pk, extra_fields=EMERGENCY)
    return paid_event


def test_attendees_show_snapshot_price_and_tier(registered_event: Event, tier: CostTier, user: RiderUser) -> None:
    CostTier.objects.filter(pk=tier.pk).update(price=Decimal("999"))

    (attendee,) = registration_service.get_event_attendees(registered_event)

    assert attendee.user_id == user.pk
    assert attendee.name == user.get_display_name()
    assert attendee.tier_name == "General"
    assert attendee.category_name == "N/A"
    assert attendee.price == Decimal("114.00")
    assert attendee.blood_type == "O+"


def test_free_event_attendee_tier_name(free_event: Event, user: RiderUser) -> None:
    registration_service.register_user_to_event(free_event.pk, user.pk)

    (attendee,) = registration_service.get_event_attendees(free_event)

    assert attendee.tier_name == "Free"
    assert attendee.price == Decimal("0")


def test_emergency_details_visible_until_a_day_after_start(registered_event: Event) -> None:
    with freeze_time(registered_event.start + timedelta(hours=23)):
        (attendee,) = registration_service.get_event_attendees(registered_event)

    assert attendee.emergency_contact_name == "Dana Rider"
    assert attendee.emergency_contact_phone == "+52 55 1234 5678"


def test_emergency_details_masked_after_retention(registered_event: Event) -> None:
    with freeze_time(registered_event.start + timedelta(hours=25)):
        (attendee,) = registration_service.get_event_attendees(registered_event)

    assert attendee.emergency_contact_name == MASKED
    assert attendee.emergency_contact_phone == MASKED
    assert attendee.blood_type == MASKED
    assert attendee.insurance_info == MASKED
    assert attendee.allergies == MASKED
    assert attendee.name != MASKED


def test_attendees_newest_first(free_event: Event, rider_user_factory: RiderUserFactory) -> None:
    first, second = rider_user_factory(), rider_user_factory()
    with freeze_time("2026-01-01 10:00:00"):
        registration_service.register_user_to_event(free_event.pk, first.pk)
    with freeze_time("2026-01-01 11:00:00"):
        registration_service.register_user_to_event(free_event.pk, second.pk)

    attendees = registration_service.get_event_attendees(free_event)

    assert [a.user_id for a in attendees] == [second.pk, first.pk]
