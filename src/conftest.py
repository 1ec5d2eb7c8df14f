import secrets
import string
import typing as t
from datetime import datetime, time, timedelta
from decimal import Decimal

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken

from accounts.models import RiderUser
from events.models import CostTier, Event


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Run Celery tasks synchronously so their side effects can be asserted."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()


class RiderUserFactory:
    """Factory for creating RiderUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> RiderUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username + ("@test.com" if "@" not in username else ""))
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return RiderUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            whatsapp=kwargs.pop("whatsapp", self.fake.msisdn()[:15]),
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> RiderUser:
        return self.create_user(**kwargs)


@pytest.fixture
def rider_user_factory() -> RiderUserFactory:
    return RiderUserFactory()


@pytest.fixture
def user(rider_user_factory: RiderUserFactory) -> RiderUser:
    """A rider."""
    return rider_user_factory()


@pytest.fixture
def other_user(rider_user_factory: RiderUserFactory) -> RiderUser:
    return rider_user_factory()


@pytest.fixture
def organizer(rider_user_factory: RiderUserFactory) -> RiderUser:
    """A user who organizes events."""
    return rider_user_factory()


@pytest.fixture
def staff_user(rider_user_factory: RiderUserFactory) -> RiderUser:
    """Platform staff."""
    return rider_user_factory(is_staff=True)


@pytest.fixture
def superuser(rider_user_factory: RiderUserFactory) -> RiderUser:
    """A superuser."""
    return rider_user_factory(is_superuser=True, is_staff=True)


def client_for(user: RiderUser) -> Client:
    """API client authenticated as ``user``."""
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def user_client(user: RiderUser) -> Client:
    return client_for(user)


@pytest.fixture
def other_user_client(other_user: RiderUser) -> Client:
    return client_for(other_user)


@pytest.fixture
def organizer_client(organizer: RiderUser) -> Client:
    return client_for(organizer)


@pytest.fixture
def staff_client(staff_user: RiderUser) -> Client:
    return client_for(staff_user)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )


@pytest.fixture
def free_event(organizer: RiderUser, next_week: datetime) -> Event:
    return Event.objects.create(name="Rodada nocturna", organizer=organizer, start=next_week)


@pytest.fixture
def paid_event(organizer: RiderUser, next_week: datetime) -> Event:
    return Event.objects.create(
        name="Gran Fondo",
        organizer=organizer,
        start=next_week,
        cost_type=Event.CostType.PAID,
        max_participants=100,
    )


@pytest.fixture
def tier(paid_event: Event) -> CostTier:
    """A tier that grosses a 100 net up to 114 with the default rates."""
    return CostTier.objects.create(
        event=paid_event,
        name="General",
        price=Decimal("114.00"),
        fee=Decimal("14.00"),
        net_price=Decimal("100.00"),
    )
