import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import RiderUser
from events.models import CostTier, Event, Registration
from events.service import registration_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def registration(paid_event: Event, tier: CostTier, user: RiderUser) -> Registration:
    result = registration_service.register_user_to_event(paid_event.pk, user.pk, tier_id=tier.pk)
    return Registration.objects.get(pk=result.registration_id)


def _url(name: str, registration: Registration) -> str:
    return reverse(f"api:{name}", kwargs={"event_id": registration.event_id, "registration_id": registration.pk})


def test_list_attendees(organizer_client: Client, registration: Registration) -> None:
    url = reverse("api:event_attendees", kwargs={"event_id": registration.event_id})

    response = organizer_client.get(url)

    assert response.status_code == 200
    (attendee,) = response.json()
    assert attendee["id"] == str(registration.pk)
    assert attendee["tier_name"] == "General"
    assert attendee["payment_status"] == "pending"


@pytest.mark.parametrize("client_fixture", ["user_client", "other_user_client"])
def test_attendees_forbidden_for_non_organizers(
    client_fixture: str, request: pytest.FixtureRequest, registration: Registration
) -> None:
    client: Client = request.getfixturevalue(client_fixture)
    url = reverse("api:event_attendees", kwargs={"event_id": registration.event_id})

    response = client.get(url)

    assert response.status_code == 403


def test_staff_can_manage_any_event(staff_client: Client, registration: Registration) -> None:
    url = reverse("api:event_attendees", kwargs={"event_id": registration.event_id})

    assert staff_client.get(url).status_code == 200


def test_mark_manual_payment(organizer_client: Client, registration: Registration) -> None:
    response = organizer_client.post(_url("mark_manual_payment", registration))

    assert response.status_code == 200
    assert response.json()["payment_status"] == "paid"
    assert response.json()["payment_method"] == "manual"

    again = organizer_client.post(_url("mark_manual_payment", registration))
    assert again.status_code == 400
    assert again.json()["code"] == "validation_error"


def test_assign_bib_number(organizer_client: Client, registration: Registration) -> None:
    response = organizer_client.post(
        _url("assign_bib_number", registration),
        data=orjson.dumps({"bib_number": 42}),
        content_type="application/json",
    )

    assert response.status_code == 200
    assert response.json()["bib_number"] == 42


def test_assign_duplicate_bib_number(
    organizer_client: Client, registration: Registration, other_user: RiderUser, tier: CostTier
) -> None:
    registration_service.assign_bib_number(registration.event_id, registration.pk, 42)
    result = registration_service.register_user_to_event(registration.event_id, other_user.pk, tier_id=tier.pk)
    other = Registration.objects.get(pk=result.registration_id)

    response = organizer_client.post(
        _url("assign_bib_number", other), data=orjson.dumps({"bib_number": 42}), content_type="application/json"
    )

    assert response.status_code == 400


def test_assign_invalid_bib_number(organizer_client: Client, registration: Registration) -> None:
    response = organizer_client.post(
        _url("assign_bib_number", registration), data=orjson.dumps({"bib_number": 0}), content_type="application/json"
    )

    assert response.status_code == 422


def test_check_in(organizer_client: Client, registration: Registration) -> None:
    response = organizer_client.post(_url("check_in_registration", registration))

    assert response.status_code == 200
    assert response.json()["checked_in"] is True


def test_cancel_registration(organizer_client: Client, registration: Registration, tier: CostTier) -> None:
    response = organizer_client.delete(_url("cancel_registration", registration))

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    tier.refresh_from_db()
    assert tier.sold_count == 0


def test_unknown_event_is_not_found(organizer_client: Client, registration: Registration) -> None:
    url = reverse("api:event_attendees", kwargs={"event_id": registration.pk})

    assert organizer_client.get(url).status_code == 404
