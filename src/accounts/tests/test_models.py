import pytest

from accounts.models import RiderUser

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize(
    "fields,expected",
    [
        ({"preferred_name": "La Flaca", "first_name": "Ana", "last_name": "Ruiz"}, "La Flaca"),
        ({"first_name": "Ana", "last_name": "Ruiz"}, "Ana Ruiz"),
        ({}, "Ana Ruiz Mtb"),
    ],
)
def test_display_name(fields: dict[str, str], expected: str) -> None:
    user = RiderUser.objects.create_user(username="ana_ruiz.mtb@example.com", **fields)

    assert user.display_name == expected


def test_users_get_uuid_primary_keys() -> None:
    first = RiderUser.objects.create_user(username="first")
    second = RiderUser.objects.create_user(username="second")

    assert first.pk != second.pk
    assert list(RiderUser.objects.values_list("username", flat=True)) == ["first", "second"]
