import typing as t
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from common.models import TimeStampedModel

from ..exceptions import InvalidRegistrationTransitionError, SnapshotImmutableError


@dataclass(frozen=True)
class PricedSnapshot:
    """Commercial terms of a charged registration, captured when it was confirmed."""

    amount_paid: Decimal
    platform_fee: Decimal
    organizer_net: Decimal
    is_fee_absorbed: bool
    calculated_at: datetime


@dataclass(frozen=True)
class NoChargeSnapshot:
    """Nothing was charged (free event, no tier, or a zero-priced tier)."""

    calculated_at: datetime


FinancialSnapshot = PricedSnapshot | NoChargeSnapshot

SNAPSHOT_FIELDS = (
    "snapshot_kind",
    "amount_paid",
    "platform_fee",
    "organizer_net",
    "is_fee_absorbed",
    "snapshot_calculated_at",
)


class RegistrationQuerySet(models.QuerySet["Registration"]):
    def with_related(self) -> t.Self:
        return self.select_related("user", "event", "tier", "category")

    def active(self) -> t.Self:
        """Registrations holding a seat."""
        return self.exclude(status=Registration.Status.CANCELLED)

    def confirmed(self) -> t.Self:
        return self.filter(status=Registration.Status.CONFIRMED)

    def paid(self) -> t.Self:
        return self.filter(payment_status=Registration.PaymentStatus.PAID)


class Registration(TimeStampedModel):
    """A user's seat at an event.

    There is exactly one row per (user, event). Cancelling keeps the row and
    re-registering reactivates it, so the id is stable for the pair.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        CONFIRMED = "confirmed", "Confirmed"
        CANCELLED = "cancelled", "Cancelled"

    class PaymentStatus(models.TextChoices):
        PAID = "paid", "Paid"
        PENDING = "pending", "Pending"
        NOT_APPLICABLE = "not_applicable", "Not applicable"

    class PaymentMethod(models.TextChoices):
        PLATFORM = "platform", "Platform"
        MANUAL = "manual", "Manual"

    class SnapshotKind(models.TextChoices):
        PRICED = "priced", "Priced"
        NO_CHARGE = "no_charge", "No charge"

    TRANSITIONS: t.ClassVar[dict[str, frozenset[str]]] = {
        Status.PENDING.value: frozenset({Status.CONFIRMED.value, Status.CANCELLED.value}),
        Status.CONFIRMED.value: frozenset({Status.CANCELLED.value}),
        Status.CANCELLED.value: frozenset(),
    }

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations")
    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="registrations")
    tier = models.ForeignKey(
        "events.CostTier", on_delete=models.SET_NULL, null=True, blank=True, related_name="registrations"
    )
    category = models.ForeignKey(
        "events.EventCategory", on_delete=models.SET_NULL, null=True, blank=True, related_name="registrations"
    )
    status = models.CharField(choices=Status.choices, default=Status.CONFIRMED, max_length=20, db_index=True)
    payment_status = models.CharField(
        choices=PaymentStatus.choices, default=PaymentStatus.NOT_APPLICABLE, max_length=20, db_index=True
    )
    payment_method = models.CharField(choices=PaymentMethod.choices, max_length=20, null=True, blank=True)
    bib_number = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    registered_at = models.DateTimeField(db_index=True)

    # financial snapshot; snapshot_kind is NULL for legacy rows
    snapshot_kind = models.CharField(choices=SnapshotKind.choices, max_length=20, null=True, blank=True)
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    platform_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    organizer_net = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_fee_absorbed = models.BooleanField(default=False)
    snapshot_calculated_at = models.DateTimeField(null=True, blank=True)

    checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    manual_payment_at = models.DateTimeField(null=True, blank=True)

    emergency_contact_name = models.CharField(max_length=255, blank=True, default="")
    emergency_contact_phone = models.CharField(max_length=50, blank=True, default="")
    blood_type = models.CharField(max_length=10, blank=True, default="")
    insurance_info = models.CharField(max_length=255, blank=True, default="")
    allergies = models.TextField(blank=True, default="")
    waiver_signature = models.CharField(max_length=255, blank=True, default="")
    waiver_accepted_at = models.DateTimeField(null=True, blank=True)
    waiver_text_snapshot = models.TextField(blank=True, default="")
    custom_answers = models.JSONField(default=dict, blank=True)

    objects = RegistrationQuerySet.as_manager()

    class Meta:
        ordering = ["-registered_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="unique_registration_per_user_event"),
            models.UniqueConstraint(
                fields=["event", "bib_number"],
                condition=Q(bib_number__isnull=False),
                name="unique_bib_number_per_event",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Registration of {self.user_id} to {self.event_id} ({self.status})"

    @classmethod
    def from_db(cls, db: str | None, field_names: t.Any, values: t.Any) -> "Registration":
        instance = super().from_db(db, field_names, values)
        instance._stored_snapshot = instance._snapshot_columns()
        return instance

    def _snapshot_columns(self) -> tuple[t.Any, ...] | None:
        if "snapshot_kind" in self.get_deferred_fields():
            return None
        if self.snapshot_kind is None:
            return None
        return tuple(getattr(self, name) for name in SNAPSHOT_FIELDS)

    @property
    def financial_snapshot(self) -> FinancialSnapshot | None:
        """The snapshot as a tagged variant, or None for legacy rows without one."""
        if self.snapshot_kind == self.SnapshotKind.PRICED:
            return PricedSnapshot(
                amount_paid=t.cast(Decimal, self.amount_paid),
                platform_fee=t.cast(Decimal, self.platform_fee),
                organizer_net=t.cast(Decimal, self.organizer_net),
                is_fee_absorbed=self.is_fee_absorbed,
                calculated_at=t.cast(datetime, self.snapshot_calculated_at),
            )
        if self.snapshot_kind == self.SnapshotKind.NO_CHARGE:
            return NoChargeSnapshot(calculated_at=t.cast(datetime, self.snapshot_calculated_at))
        return None

    def write_snapshot(self, snapshot: FinancialSnapshot) -> None:
        """Stage the snapshot columns. Persisting over an existing snapshot needs ``reactivate``."""
        self.snapshot_calculated_at = snapshot.calculated_at
        if isinstance(snapshot, PricedSnapshot):
            self.snapshot_kind = self.SnapshotKind.PRICED
            self.amount_paid = snapshot.amount_paid
            self.platform_fee = snapshot.platform_fee
            self.organizer_net = snapshot.organizer_net
            self.is_fee_absorbed = snapshot.is_fee_absorbed
        else:
            self.snapshot_kind = self.SnapshotKind.NO_CHARGE
            self.amount_paid = None
            self.platform_fee = None
            self.organizer_net = None
            self.is_fee_absorbed = False

    def transition_to(self, status: "Registration.Status") -> None:
        """Move along the state machine, or raise."""
        if str(status) not in self.TRANSITIONS[str(self.status)]:
            raise InvalidRegistrationTransitionError(f"Cannot move a registration from {self.status} to {status}.")
        self.status = status

    def reactivate(self, status: "Registration.Status", snapshot: FinancialSnapshot) -> None:
        """Bring a cancelled registration back, replacing its snapshot.

        This is the only way out of ``cancelled`` and the only way an existing
        snapshot may be overwritten.
        """
        if self.status != self.Status.CANCELLED:
            raise InvalidRegistrationTransitionError("Only cancelled registrations can be reactivated.")
        self.status = status
        self.write_snapshot(snapshot)
        self._allow_snapshot_rewrite = True

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Refuse to overwrite a stored financial snapshot outside ``reactivate``."""
        stored = getattr(self, "_stored_snapshot", None)
        if stored is not None and not getattr(self, "_allow_snapshot_rewrite", False):
            if self._snapshot_columns() != stored:
                raise SnapshotImmutableError("The financial snapshot of a registration cannot be changed.")
        super().save(*args, **kwargs)
        self._stored_snapshot = self._snapshot_columns()
        self._allow_snapshot_rewrite = False
