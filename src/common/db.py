"""Atomic transaction primitive with bounded conflict retries."""

import time
import typing as t

import structlog
from django.conf import settings
from django.db import DatabaseError, OperationalError, transaction

from common.exceptions import TransientStoreError

logger = structlog.get_logger(__name__)

T = t.TypeVar("T")


def run_atomic(
    func: t.Callable[[], T],
    *,
    attempts: int | None = None,
    backoff: float | None = None,
    using: str | None = None,
) -> T:
    """Run ``func`` inside ``transaction.atomic`` and retry on write conflicts.

    ``func`` may be executed more than once, so it must not perform any side effect
    outside the database. Domain errors raised by ``func`` roll the transaction back
    and propagate unchanged.

    Retries happen on ``OperationalError`` (serialization failures, deadlocks, lock
    timeouts). When already inside an outer atomic block the outer transaction cannot
    be retried, so the first conflict is reported straight away.

    Raises:
        TransientStoreError: if retries are exhausted or the store fails unexpectedly.
    """
    max_attempts = attempts or settings.TRANSACTION_RETRY_ATTEMPTS
    delay = settings.TRANSACTION_RETRY_BACKOFF_SECONDS if backoff is None else backoff
    nested = transaction.get_connection(using).in_atomic_block

    for attempt in range(1, max_attempts + 1):
        try:
            with transaction.atomic(using=using):
                return func()
        except OperationalError as e:
            if nested or attempt == max_attempts:
                logger.error("transaction_retries_exhausted", attempts=attempt, nested=nested, error=str(e))
                raise TransientStoreError() from e
            logger.warning("transaction_conflict_retry", attempt=attempt, error=str(e))
            time.sleep(delay * attempt)
        except DatabaseError as e:
            logger.exception("transaction_store_failure", attempt=attempt)
            raise TransientStoreError() from e

    raise TransientStoreError()  # pragma: no cover
