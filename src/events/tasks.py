"""Celery tasks for event registrations."""

from uuid import UUID

import structlog
from celery import shared_task
from django.template.loader import render_to_string

from common.tasks import send_email

from .models import Registration

logger = structlog.get_logger(__name__)


@shared_task
def send_registration_confirmation(registration_id: UUID | str) -> None:
    """Email the rider their confirmation and let the organizer know someone registered."""
    registration = Registration.objects.with_related().filter(pk=registration_id).first()
    if registration is None or registration.status != Registration.Status.CONFIRMED:
        logger.warning("registration_confirmation_skipped", registration_id=str(registration_id))
        return

    context = {"registration": registration, "event": registration.event, "user": registration.user}
    if registration.user.email:
        send_email(
            to=registration.user.email,
            subject=render_to_string("events/emails/registration_confirmed_subject.txt", context).strip(),
            body=render_to_string("events/emails/registration_confirmed_body.txt", context),
        )
    organizer_email = registration.event.organizer.email
    if organizer_email:
        send_email(
            to=organizer_email,
            subject=render_to_string("events/emails/new_registration_organizer_subject.txt", context).strip(),
            body=render_to_string("events/emails/new_registration_organizer_body.txt", context),
        )
    logger.info("registration_confirmation_sent", registration_id=str(registration.pk))
