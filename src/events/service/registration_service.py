"""Registration engine: the atomic unit that seats a user at an event, and the annotations around it.

Every write to ``Event.current_participants``, ``Event.bib_next_number`` and
``CostTier.sold_count`` goes through this module, inside ``run_atomic`` and after the
event row has been locked. The event row is always locked before the tier row.
"""

import typing as t
from decimal import Decimal
from functools import partial
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction
from django.db.models import F, Q, Value
from django.db.models.functions import Greatest
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from common.db import run_atomic
from common.exceptions import (
    CapacityExceededError,
    DomainError,
    DuplicateRegistrationError,
    ErrorCode,
    NotFoundError,
    RegistrationValidationError,
    TierSoldOutError,
)
from events.exceptions import AlreadyCancelledError, AlreadyPaidError, DuplicateBibNumberError
from events.models import CostTier, Event, FinancialSnapshot, NoChargeSnapshot, PricedSnapshot, Registration
from events.schema import AttendeeSchema, RegistrationExtraFields, RegistrationResult
from events.signals import registration_confirmed

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def _lock_event(event_id: UUID) -> Event:
    event = Event.objects.select_for_update().filter(pk=event_id).first()
    if event is None:
        raise NotFoundError(_("Event not found."), event_id=event_id)
    return event


def _lock_registration(event: Event, lookup: Q) -> Registration:
    registration = Registration.objects.select_for_update().filter(lookup, event=event).first()
    if registration is None:
        raise NotFoundError(_("Registration not found."), event_id=event.pk)
    return registration


class RegistrationTransactor:
    """Seats one user at one event, or reports why it could not.

    The whole check-and-write sequence runs in a single transaction that may be
    re-executed on write conflicts, so ``_register`` only touches the database.
    The ``registration_confirmed`` signal is sent after commit.
    """

    def __init__(
        self,
        event_id: UUID,
        user_id: UUID,
        tier_id: UUID | None = None,
        category_id: UUID | None = None,
        extra_fields: RegistrationExtraFields | None = None,
    ) -> None:
        self.event_id = event_id
        self.user_id = user_id
        self.tier_id = tier_id
        self.category_id = category_id
        self.extra_fields = extra_fields or RegistrationExtraFields()

    def register(self) -> RegistrationResult:
        log = logger.bind(
            event_id=str(self.event_id),
            user_id=str(self.user_id),
            tier_id=str(self.tier_id) if self.tier_id else None,
        )
        try:
            self._validate()
            registration = run_atomic(self._register, attempts=settings.REGISTRATION_TRANSACTION_ATTEMPTS)
        except DomainError as e:
            if e.code in {ErrorCode.TRANSIENT_STORE_ERROR, ErrorCode.CONFIGURATION_ERROR}:
                log.error("registration_failed", error_code=e.code.value)
            else:
                log.info("registration_rejected", error_code=e.code.value, reason=e.message)
            return RegistrationResult.failure(e)

        log.info(
            "registration_confirmed",
            registration_id=str(registration.pk),
            payment_status=registration.payment_status,
            bib_number=registration.bib_number,
        )
        transaction.on_commit(partial(registration_confirmed.send, sender=Registration, registration=registration))
        return RegistrationResult.ok(registration.pk)

    def _validate(self) -> None:
        """Input checks that need no lock. Raises RegistrationValidationError or NotFoundError."""
        event = Event.objects.filter(pk=self.event_id).first()
        if event is None:
            raise NotFoundError(_("Event not found."), event_id=self.event_id)

        if not event.is_free and self.tier_id is None and event.tiers.exists():
            raise RegistrationValidationError(_("Please select a tier."))

        if self.category_id is not None and not event.categories.filter(pk=self.category_id).exists():
            raise RegistrationValidationError(_("The selected category does not belong to this event."))

        fields = self.extra_fields
        if event.requires_emergency_contact:
            missing = [
                name
                for name in ("emergency_contact_name", "emergency_contact_phone", "blood_type", "insurance_info")
                if not getattr(fields, name)
            ]
            if missing:
                raise RegistrationValidationError(
                    _("Emergency contact details are required for this event."), missing=missing
                )
        if event.requires_waiver and not fields.waiver_signature:
            raise RegistrationValidationError(_("You must sign the waiver to register for this event."))

    def _register(self) -> Registration:
        event = _lock_event(self.event_id)
        if event.is_full:
            raise CapacityExceededError(event_id=event.pk)

        existing = Registration.objects.select_for_update().filter(event=event, user_id=self.user_id).first()
        if existing is not None and existing.status != Registration.Status.CANCELLED:
            raise DuplicateRegistrationError(registration_id=existing.pk)

        tier = self._lock_tier(event)
        payment_status = self._resolve_payment_status(event, tier)
        bib_number = self._allocate_bib(event, payment_status)
        now = timezone.now()
        snapshot = self._build_snapshot(event, tier, now)

        if existing is not None:
            registration = existing
            registration.reactivate(Registration.Status.CONFIRMED, snapshot)
            registration.payment_method = None
            registration.checked_in = False
            registration.checked_in_at = None
            registration.manual_payment_at = None
        else:
            registration = Registration(event=event, user_id=self.user_id, status=Registration.Status.CONFIRMED)
            registration.write_snapshot(snapshot)

        registration.tier = tier
        registration.category_id = self.category_id
        registration.payment_status = payment_status
        registration.bib_number = bib_number
        registration.registered_at = now
        self._apply_extra_fields(registration, event, now)
        registration.save()

        if tier is not None:
            CostTier.objects.filter(pk=tier.pk).update(sold_count=F("sold_count") + 1)
        counters: dict[str, t.Any] = {"current_participants": F("current_participants") + 1}
        if bib_number is not None:
            counters["bib_next_number"] = bib_number + 1
        Event.objects.filter(pk=event.pk).update(**counters)
        return registration

    def _lock_tier(self, event: Event) -> CostTier | None:
        if self.tier_id is None:
            return None
        tier = CostTier.objects.select_for_update().filter(pk=self.tier_id, event=event).first()
        if tier is None:
            raise NotFoundError(_("Tier not found."), event_id=event.pk, tier_id=self.tier_id)
        if tier.is_sold_out:
            raise TierSoldOutError(event_id=event.pk, tier_id=tier.pk)
        return tier

    @staticmethod
    def _resolve_payment_status(event: Event, tier: CostTier | None) -> str:
        if event.is_free:
            return Registration.PaymentStatus.NOT_APPLICABLE
        if tier is None or tier.price <= ZERO:
            return Registration.PaymentStatus.PAID
        return Registration.PaymentStatus.PENDING

    @staticmethod
    def _allocate_bib(event: Event, payment_status: str) -> int | None:
        """Next free automatic bib number, skipping numbers an organizer assigned by hand."""
        if payment_status == Registration.PaymentStatus.PENDING or not event.assigns_bibs_automatically:
            return None
        number = event.bib_next_number
        taken = set(
            Registration.objects.filter(event=event, bib_number__gte=number).values_list("bib_number", flat=True)
        )
        while number in taken:
            number += 1
        return number

    @staticmethod
    def _build_snapshot(event: Event, tier: CostTier | None, now: t.Any) -> FinancialSnapshot:
        if event.is_free or tier is None or tier.price <= ZERO:
            return NoChargeSnapshot(calculated_at=now)
        return PricedSnapshot(
            amount_paid=tier.price,
            platform_fee=tier.fee,
            organizer_net=tier.net_price,
            is_fee_absorbed=tier.absorb_fee,
            calculated_at=now,
        )

    def _apply_extra_fields(self, registration: Registration, event: Event, now: t.Any) -> None:
        fields = self.extra_fields
        registration.emergency_contact_name = fields.emergency_contact_name
        registration.emergency_contact_phone = fields.emergency_contact_phone
        registration.blood_type = fields.blood_type
        registration.insurance_info = fields.insurance_info
        registration.allergies = fields.allergies
        registration.custom_answers = fields.custom_answers
        registration.waiver_signature = fields.waiver_signature
        if fields.waiver_signature:
            registration.waiver_accepted_at = now
            registration.waiver_text_snapshot = event.waiver_text
        else:
            registration.waiver_accepted_at = None
            registration.waiver_text_snapshot = ""


def register_user_to_event(
    event_id: UUID,
    user_id: UUID,
    tier_id: UUID | None = None,
    category_id: UUID | None = None,
    extra_fields: RegistrationExtraFields | None = None,
) -> RegistrationResult:
    """Register a user to an event. Never raises for domain failures; see ``RegistrationResult``."""
    return RegistrationTransactor(event_id, user_id, tier_id, category_id, extra_fields).register()


# --- Cancellation ---


def _cancel(event_id: UUID, lookup: Q) -> Registration:
    event = _lock_event(event_id)
    registration = _lock_registration(event, lookup)
    if registration.status == Registration.Status.CANCELLED:
        raise AlreadyCancelledError(registration_id=registration.pk)

    registration.transition_to(Registration.Status.CANCELLED)
    registration.bib_number = None
    registration.save()

    if registration.tier_id is not None:
        CostTier.objects.select_for_update().filter(pk=registration.tier_id).update(
            sold_count=Greatest(F("sold_count") - 1, Value(0))
        )
    Event.objects.filter(pk=event.pk).update(current_participants=Greatest(F("current_participants") - 1, Value(0)))
    logger.info("registration_cancelled", event_id=str(event.pk), registration_id=str(registration.pk))
    return registration


def cancel_registration(event_id: UUID, user_id: UUID) -> Registration:
    """Cancel the user's own registration. The bib number is released but never handed out again."""
    return run_atomic(partial(_cancel, event_id, Q(user_id=user_id)))


def cancel_registration_by_id(event_id: UUID, registration_id: UUID) -> Registration:
    """Cancel a registration on behalf of the organizer."""
    return run_atomic(partial(_cancel, event_id, Q(pk=registration_id)))


# --- Organizer annotations ---


def mark_manual_payment(event_id: UUID, registration_id: UUID) -> Registration:
    """Record a payment the organizer collected directly (cash, bank transfer)."""

    def _mark() -> Registration:
        registration = _lock_registration_only(event_id, registration_id)
        if registration.status == Registration.Status.CANCELLED:
            raise AlreadyCancelledError(registration_id=registration.pk)
        if registration.payment_status == Registration.PaymentStatus.PAID:
            raise AlreadyPaidError(registration_id=registration.pk)
        registration.payment_status = Registration.PaymentStatus.PAID
        registration.payment_method = Registration.PaymentMethod.MANUAL
        registration.manual_payment_at = timezone.now()
        registration.save()
        return registration

    registration = run_atomic(_mark)
    logger.info("manual_payment_recorded", event_id=str(event_id), registration_id=str(registration_id))
    return registration


def mark_platform_payment(registration_id: UUID) -> Registration:
    """Mark a registration as paid through the platform gateway. Repeated calls are no-ops."""

    def _mark() -> Registration:
        registration = Registration.objects.select_for_update().filter(pk=registration_id).first()
        if registration is None:
            raise NotFoundError(_("Registration not found."), registration_id=registration_id)
        if registration.payment_status == Registration.PaymentStatus.PAID:
            return registration
        if registration.status == Registration.Status.CANCELLED:
            raise AlreadyCancelledError(registration_id=registration.pk)
        registration.payment_status = Registration.PaymentStatus.PAID
        registration.payment_method = Registration.PaymentMethod.PLATFORM
        registration.save()
        logger.info("platform_payment_recorded", registration_id=str(registration.pk))
        return registration

    return run_atomic(_mark)


def assign_bib_number(event_id: UUID, registration_id: UUID, number: int) -> Registration:
    """Hand-assign a bib number. Automatic allocation skips numbers taken this way."""

    def _assign() -> Registration:
        event = _lock_event(event_id)
        registration = _lock_registration(event, Q(pk=registration_id))
        if registration.status == Registration.Status.CANCELLED:
            raise AlreadyCancelledError(registration_id=registration.pk)
        if Registration.objects.filter(event=event, bib_number=number).exclude(pk=registration.pk).exists():
            raise DuplicateBibNumberError(bib_number=number)
        registration.bib_number = number
        registration.save()
        return registration

    registration = run_atomic(_assign)
    logger.info("bib_number_assigned", event_id=str(event_id), registration_id=str(registration_id), bib_number=number)
    return registration


def check_in(event_id: UUID, registration_id: UUID) -> Registration:
    def _check_in() -> Registration:
        registration = _lock_registration_only(event_id, registration_id)
        if registration.status == Registration.Status.CANCELLED:
            raise AlreadyCancelledError(registration_id=registration.pk)
        if not registration.checked_in:
            registration.checked_in = True
            registration.checked_in_at = timezone.now()
            registration.save()
        return registration

    return run_atomic(_check_in)


def _lock_registration_only(event_id: UUID, registration_id: UUID) -> Registration:
    registration = Registration.objects.select_for_update().filter(pk=registration_id, event_id=event_id).first()
    if registration is None:
        raise NotFoundError(_("Registration not found."), event_id=event_id, registration_id=registration_id)
    return registration


# --- Listing ---


def get_event_attendees(event: Event) -> list[AttendeeSchema]:
    """All registrations of the event, newest first, with emergency details masked after the retention window."""
    hidden = event.emergency_details_hidden()
    registrations = (
        Registration.objects.filter(event=event).with_related().order_by("-registered_at", "-created_at")
    )
    return [AttendeeSchema.from_registration(r, hide_emergency_details=hidden) for r in registrations]


def get_user_registration(event_id: UUID, user_id: UUID) -> Registration:
    registration = Registration.objects.filter(event_id=event_id, user_id=user_id).first()
    if registration is None:
        raise NotFoundError(_("You are not registered for this event."), event_id=event_id)
    return registration


def get_user_registrations(user_id: UUID) -> list[Registration]:
    """Every registration of the user across events, whatever its status, soonest event first."""
    return list(
        Registration.objects.filter(user_id=user_id)
        .select_related("event", "tier")
        .order_by("event__start", "-registered_at")
    )
