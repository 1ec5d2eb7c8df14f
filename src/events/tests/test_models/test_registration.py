from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from accounts.models import RiderUser
from events.exceptions import InvalidRegistrationTransitionError, SnapshotImmutableError
from events.models import Event, NoChargeSnapshot, PricedSnapshot, Registration

pytestmark = pytest.mark.django_db


def _priced(amount: str = "114.00") -> PricedSnapshot:
    return PricedSnapshot(
        amount_paid=Decimal(amount),
        platform_fee=Decimal("14.00"),
        organizer_net=Decimal(amount) - Decimal("14.00"),
        is_fee_absorbed=False,
        calculated_at=timezone.now(),
    )


@pytest.fixture
def registration(paid_event: Event, user: RiderUser) -> Registration:
    registration = Registration(event=paid_event, user=user, registered_at=timezone.now())
    registration.write_snapshot(_priced())
    registration.save()
    return Registration.objects.get(pk=registration.pk)


def test_snapshot_round_trips_as_tagged_variant(registration: Registration) -> None:
    snapshot = registration.financial_snapshot

    assert isinstance(snapshot, PricedSnapshot)
    assert snapshot.amount_paid == Decimal("114.00")
    assert snapshot.organizer_net == Decimal("100.00")


def test_no_charge_snapshot_clears_amounts(free_event: Event, user: RiderUser) -> None:
    registration = Registration(event=free_event, user=user, registered_at=timezone.now())
    registration.write_snapshot(NoChargeSnapshot(calculated_at=timezone.now()))
    registration.save()

    registration.refresh_from_db()
    assert registration.snapshot_kind == Registration.SnapshotKind.NO_CHARGE
    assert registration.amount_paid is None
    assert isinstance(registration.financial_snapshot, NoChargeSnapshot)


def test_legacy_row_has_no_snapshot(free_event: Event, user: RiderUser) -> None:
    registration = Registration.objects.create(event=free_event, user=user, registered_at=timezone.now())

    assert registration.financial_snapshot is None


def test_stored_snapshot_cannot_be_overwritten(registration: Registration) -> None:
    registration.write_snapshot(_priced("200.00"))

    with pytest.raises(SnapshotImmutableError):
        registration.save()

    registration.refresh_from_db()
    assert registration.amount_paid == Decimal("114.00")


def test_other_fields_remain_editable(registration: Registration) -> None:
    registration.checked_in = True
    registration.save()

    registration.refresh_from_db()
    assert registration.checked_in is True


def test_transitions(registration: Registration) -> None:
    registration.transition_to(Registration.Status.CANCELLED)
    assert registration.status == Registration.Status.CANCELLED

    with pytest.raises(InvalidRegistrationTransitionError):
        registration.transition_to(Registration.Status.CONFIRMED)


def test_reactivate_replaces_snapshot(registration: Registration) -> None:
    registration.transition_to(Registration.Status.CANCELLED)
    registration.save()

    registration.reactivate(Registration.Status.CONFIRMED, _priced("150.00"))
    registration.save()

    registration.refresh_from_db()
    assert registration.status == Registration.Status.CONFIRMED
    assert registration.amount_paid == Decimal("150.00")


def test_only_cancelled_registrations_can_be_reactivated(registration: Registration) -> None:
    with pytest.raises(InvalidRegistrationTransitionError):
        registration.reactivate(Registration.Status.CONFIRMED, _priced())


def test_one_registration_per_user_and_event(registration: Registration) -> None:
    duplicate = Registration(event=registration.event, user=registration.user, registered_at=timezone.now())

    with pytest.raises(ValidationError):
        duplicate.save()
