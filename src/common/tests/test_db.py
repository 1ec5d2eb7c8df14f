from unittest.mock import MagicMock, patch

import pytest
from django.db import DatabaseError, OperationalError

from common.db import run_atomic
from common.exceptions import CapacityExceededError, TransientStoreError


@pytest.mark.django_db(transaction=True)
@patch("common.db.time.sleep")
def test_retries_write_conflicts(mock_sleep: MagicMock) -> None:
    func = MagicMock(side_effect=[OperationalError("could not serialize access"), "done"])

    assert run_atomic(func, attempts=3, backoff=0.1) == "done"
    assert func.call_count == 2
    mock_sleep.assert_called_once_with(0.1)


@pytest.mark.django_db(transaction=True)
@patch("common.db.time.sleep")
def test_gives_up_after_the_last_attempt(mock_sleep: MagicMock) -> None:
    func = MagicMock(side_effect=OperationalError("deadlock detected"))

    with pytest.raises(TransientStoreError):
        run_atomic(func, attempts=3, backoff=0)

    assert func.call_count == 3


@pytest.mark.django_db(transaction=True)
def test_domain_errors_are_not_retried() -> None:
    func = MagicMock(side_effect=CapacityExceededError())

    with pytest.raises(CapacityExceededError):
        run_atomic(func, attempts=3)

    assert func.call_count == 1


@pytest.mark.django_db(transaction=True)
def test_other_store_failures_become_transient() -> None:
    func = MagicMock(side_effect=DatabaseError("connection lost"))

    with pytest.raises(TransientStoreError):
        run_atomic(func, attempts=3)

    assert func.call_count == 1


@pytest.mark.django_db
def test_nested_blocks_report_the_first_conflict() -> None:
    func = MagicMock(side_effect=OperationalError("deadlock detected"))

    with pytest.raises(TransientStoreError):
        run_atomic(func, attempts=3)

    assert func.call_count == 1
