import typing as t
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords
from solo.models import SingletonModel

from common.models import TimeStampedModel

from .exceptions import PayoutImmutableError
from .service.fees import FeeRates

RATE_VALIDATORS = [MinValueValidator(0)]


def default_commission_rate() -> Decimal:
    return Decimal(settings.DEFAULT_COMMISSION_RATE)


def default_pasarela_rate() -> Decimal:
    return Decimal(settings.DEFAULT_PASARELA_RATE)


def default_pasarela_fixed() -> Decimal:
    return Decimal(settings.DEFAULT_PASARELA_FIXED)


def default_iva_rate() -> Decimal:
    return Decimal(settings.DEFAULT_IVA_RATE)


class FinancialSettings(SingletonModel):
    """Platform-wide commission, gateway and tax rates.

    There is a single global row. Registrations keep their own financial snapshot, so
    editing these values only affects future computations.
    """

    commission_rate = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        default=default_commission_rate,
        validators=RATE_VALIDATORS,
        help_text="Platform commission, in percent.",
    )
    pasarela_rate = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        default=default_pasarela_rate,
        validators=RATE_VALIDATORS,
        help_text="Payment gateway percentage fee, in percent.",
    )
    pasarela_fixed = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=default_pasarela_fixed,
        validators=RATE_VALIDATORS,
        help_text="Payment gateway flat fee per transaction.",
    )
    iva_rate = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        default=default_iva_rate,
        validators=RATE_VALIDATORS,
        help_text="Tax applied on fees, in percent.",
    )
    updated_at = models.DateTimeField(auto_now=True)
    history = HistoricalRecords()

    def __str__(self) -> str:  # pragma: no cover
        return "Financial Settings"

    class Meta:
        verbose_name = "Financial Settings"
        verbose_name_plural = "Financial Settings"

    def snapshot(self) -> FeeRates:
        """Return the rates currently in effect as an immutable value."""
        return FeeRates(
            commission_rate=Decimal(self.commission_rate),
            pasarela_rate=Decimal(self.pasarela_rate),
            pasarela_fixed=Decimal(self.pasarela_fixed),
            iva_rate=Decimal(self.iva_rate),
        )


class PayoutQuerySet(models.QuerySet["Payout"]):
    def update(self, **kwargs: t.Any) -> int:
        raise PayoutImmutableError("Payouts cannot be modified.")

    def delete(self) -> tuple[int, dict[str, int]]:
        raise PayoutImmutableError("Payouts cannot be deleted.")

    def for_event(self, event_id: t.Any) -> t.Self:
        return self.filter(event_id=event_id)


class Payout(TimeStampedModel):
    """A recorded transfer of platform-collected funds to an event's organizer. Append-only."""

    event = models.ForeignKey("events.Event", on_delete=models.PROTECT, related_name="payouts")
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))])
    proof_reference = models.CharField(max_length=500, help_text="Transfer receipt URL or bank reference.")
    notes = models.TextField(blank=True, default="")
    date = models.DateTimeField(default=timezone.now, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_payouts",
    )

    objects = PayoutQuerySet.as_manager()

    class Meta:
        ordering = ["-date", "-created_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Payout of {self.amount} for event {self.event_id}"

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Only allow the initial insert."""
        if not self._state.adding:
            raise PayoutImmutableError("Payouts cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args: t.Any, **kwargs: t.Any) -> tuple[int, dict[str, int]]:
        raise PayoutImmutableError("Payouts cannot be deleted.")
