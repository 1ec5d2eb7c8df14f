import typing as t

import structlog
from django.dispatch import Signal, receiver

from events.models import Registration
from events.tasks import send_registration_confirmation

logger = structlog.get_logger(__name__)

# Sent once a registration has been committed. Receivers get ``registration``.
registration_confirmed = Signal()


@receiver(registration_confirmed, sender=Registration)
def handle_registration_confirmed(sender: type[Registration], registration: Registration, **kwargs: t.Any) -> None:
    """Queue the confirmation emails. The registration is already committed, so a failed enqueue is only logged."""
    try:
        send_registration_confirmation.delay(str(registration.pk))
    except Exception:
        logger.exception("registration_confirmation_enqueue_failed", registration_id=str(registration.pk))
        return
    logger.debug("registration_confirmation_queued", registration_id=str(registration.pk))
