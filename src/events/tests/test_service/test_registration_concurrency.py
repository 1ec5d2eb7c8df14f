"""Concurrent registrations racing for the same seats, tier slots and bib numbers.

PostgreSQL serializes them through row locks, SQLite through immediate transactions.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from uuid import UUID

import pytest
from django.db import connection

from common.exceptions import ErrorCode
from conftest import RiderUserFactory
from events.models import CostTier, Event, Registration
from events.schema import RegistrationResult
from events.service import registration_service

pytestmark = pytest.mark.django_db(transaction=True)


def _race(event_id: UUID, user_ids: list[UUID], tier_id: UUID | None = None) -> list[RegistrationResult]:
    barrier = threading.Barrier(len(user_ids))

    def register(user_id: UUID) -> RegistrationResult:
        try:
            barrier.wait()
            return registration_service.register_user_to_event(event_id, user_id, tier_id=tier_id)
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=len(user_ids)) as pool:
        return list(pool.map(register, user_ids))


def test_last_seat_goes_to_exactly_one_rider(free_event: Event, rider_user_factory: RiderUserFactory) -> None:
    free_event.max_participants = 1
    free_event.save()
    riders = [rider_user_factory().pk for _ in range(2)]

    results = _race(free_event.pk, riders)

    assert sorted(r.success for r in results) == [False, True]
    assert [r.error_code for r in results if not r.success] == [ErrorCode.CAPACITY_EXCEEDED]
    free_event.refresh_from_db()
    assert free_event.current_participants == 1


def test_tier_is_not_oversold_under_contention(paid_event: Event, rider_user_factory: RiderUserFactory) -> None:
    limited = CostTier.objects.create(event=paid_event, name="Limited", price=Decimal("50"), limit=3)
    riders = [rider_user_factory().pk for _ in range(8)]

    results = _race(paid_event.pk, riders, tier_id=limited.pk)

    assert sum(r.success for r in results) == 3
    assert all(r.error_code in {None, ErrorCode.TIER_SOLD_OUT} for r in results)
    limited.refresh_from_db()
    assert limited.sold_count == 3


def test_concurrent_bibs_are_unique_and_contiguous(free_event: Event, rider_user_factory: RiderUserFactory) -> None:
    free_event.bib_enabled = True
    free_event.save()
    riders = [rider_user_factory().pk for _ in range(6)]

    results = _race(free_event.pk, riders)

    assert all(r.success for r in results)
    bibs = sorted(Registration.objects.filter(event=free_event).values_list("bib_number", flat=True))
    assert bibs == [1, 2, 3, 4, 5, 6]
