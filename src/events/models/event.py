import typing as t
from datetime import timedelta

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from common.models import TimeStampedModel

if t.TYPE_CHECKING:
    from accounts.models import RiderUser


class EventQuerySet(models.QuerySet["Event"]):
    def with_tiers(self) -> t.Self:
        """Prefetch tiers and categories."""
        return self.prefetch_related("tiers", "categories")

    def paid(self) -> t.Self:
        return self.filter(cost_type=Event.CostType.PAID)

    def managed_by(self, user: "RiderUser") -> t.Self:
        """Events the user may administer: their own, or all of them for platform staff."""
        if user.is_superuser or user.is_staff:
            return self
        return self.filter(organizer=user)


class Event(TimeStampedModel):
    """A ride, race or workshop that riders register for.

    ``current_participants``, ``bib_next_number`` and the tiers' ``sold_count`` are hot
    counters: only the registration service writes them, inside its atomic unit.
    """

    class CostType(models.TextChoices):
        FREE = "free", "Free"
        PAID = "paid", "Paid"

    class BibMode(models.TextChoices):
        AUTOMATIC = "automatic", "Automatic"
        MANUAL = "manual", "Manual"

    # emergency details are hidden from organizers this long after the start
    EMERGENCY_DETAILS_RETENTION = timedelta(hours=24)

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organized_events"
    )
    start = models.DateTimeField(db_index=True)
    cost_type = models.CharField(choices=CostType.choices, default=CostType.FREE, max_length=10, db_index=True)
    max_participants = models.PositiveIntegerField(default=0, help_text="Maximum participants. 0 means unlimited.")
    current_participants = models.PositiveIntegerField(default=0)

    bib_enabled = models.BooleanField(default=False, help_text="Whether participants get a bib number.")
    bib_mode = models.CharField(choices=BibMode.choices, default=BibMode.AUTOMATIC, max_length=10)
    bib_next_number = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])

    requires_emergency_contact = models.BooleanField(default=False)
    requires_waiver = models.BooleanField(default=False)
    waiver_text = models.TextField(blank=True, default="")

    objects = EventQuerySet.as_manager()

    class Meta:
        ordering = ["-start"]
        constraints = [
            models.CheckConstraint(
                condition=Q(max_participants=0) | Q(current_participants__lte=F("max_participants")),
                name="event_participants_within_capacity",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def is_free(self) -> bool:
        return self.cost_type == self.CostType.FREE

    @property
    def is_full(self) -> bool:
        """Whether no seat is left. An event with ``max_participants == 0`` is never full."""
        return self.max_participants > 0 and self.current_participants >= self.max_participants

    @property
    def assigns_bibs_automatically(self) -> bool:
        return self.bib_enabled and self.bib_mode == self.BibMode.AUTOMATIC

    def emergency_details_hidden(self) -> bool:
        """Emergency contact data is only shown to organizers until a day after the start."""
        return timezone.now() > self.start + self.EMERGENCY_DETAILS_RETENTION

    def can_be_managed_by(self, user: "RiderUser") -> bool:
        return bool(user.is_superuser or user.is_staff or self.organizer_id == user.pk)


class EventCategory(TimeStampedModel):
    """A competitive category riders register under (e.g. age group or discipline)."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="categories")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    min_age = models.PositiveIntegerField(null=True, blank=True)
    max_age = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["event", "name"]
        constraints = [models.UniqueConstraint(fields=["event", "name"], name="unique_event_category_name")]

    def __str__(self) -> str:
        return f"{self.name} ({self.event.name})"
